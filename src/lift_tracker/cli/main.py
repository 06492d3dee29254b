"""
CLI entry point using Typer.

Provides commands for workout logging and tracking:
- log-session: Log a completed session
- show-history: Display workout history
- delete-record: Delete a session by number
- streak: Current/longest streak with a weekly breakdown
- adherence: Share of days with a logged session
- records: Personal records and weight progression
- summary: Last seven days at a glance
- cycle / reset-cycle: Week-Zero and cycle state
"""

from .app import app
from .commands import analysis, schedule, sessions  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
