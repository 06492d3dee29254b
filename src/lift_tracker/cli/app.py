"""Shared Typer app object, shared option types, and store utility."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger

from ..io.history_store import HistoryStore, get_default_history_path

# Shared options used across all reporting commands
HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to history JSONL file"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]
TodayOption = Annotated[
    Optional[str],
    typer.Option("--today", help="Evaluate as of this date/time (YYYY-MM-DD[THH:MM]); default now"),
]

app = typer.Typer(
    name="lift-tracker",
    help="Workout log with calendar-week streaks and adherence tracking.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging on stderr"),
    ] = False,
) -> None:
    """
    Log workouts and track streaks and adherence.
    """
    configure_logging(verbose)


def configure_logging(verbose: bool = False) -> None:
    """Route loguru to stderr at WARNING, or DEBUG when verbose."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def get_store(history_path: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return HistoryStore(history_path)


def parse_now(value: str | None) -> datetime:
    """
    Resolve the --today option to a single clock reading.

    A bare date is taken as the end of that day so that sessions logged
    on it are all in the past.
    """
    if value is None:
        return datetime.now()
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date: {value}. Expected YYYY-MM-DD[THH:MM]")
    if len(value) == 10:
        parsed = parsed.replace(hour=23, minute=59, second=59)
    return parsed
