"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of history, streak and record data.
"""

from datetime import date

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import (
    CalendarWeek,
    DayClass,
    PersonalRecord,
    SessionRecord,
    StreakResult,
    WeeklySummary,
    WeekZeroInfo,
)
from ..core.records import volume_load
from ..core.streak import Invalid, Truncated, WeekOutcome

console = Console()

DAY_SYMBOLS: dict[DayClass, str] = {
    DayClass.UNLOGGED: "[dim]·[/dim]",
    DayClass.LOGGED_STRENGTH: "[green]S[/green]",
    DayClass.LOGGED_OTHER: "[cyan]o[/cyan]",
    DayClass.REST: "[blue]r[/blue]",
    DayClass.SICK: "[magenta]x[/magenta]",
    DayClass.DELOAD: "[yellow]D[/yellow]",
}


def _fmt_exercises(session: SessionRecord) -> str:
    if not session.exercises:
        return "-"
    parts = []
    for name, sets in session.exercises.items():
        parts.append(f"{name} ({len(sets)})")
    return ", ".join(parts)


def format_session_table(sessions: list[SessionRecord]) -> Table:
    """
    Create a table of logged sessions, numbered for delete-record.

    Args:
        sessions: Sessions sorted by time

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Kind")
    table.add_column("Deload", justify="center")
    table.add_column("Exercises (sets)")
    table.add_column("Volume", justify="right")

    for i, s in enumerate(sessions, 1):
        table.add_row(
            str(i),
            s.local_time.strftime("%Y-%m-%d %H:%M"),
            s.kind.value,
            "yes" if s.is_deload else "",
            _fmt_exercises(s),
            f"{volume_load(s):.0f}" if s.exercises else "",
        )

    return table


def print_history(sessions: list[SessionRecord]) -> None:
    """Print the full history table."""
    if not sessions:
        print_info("No sessions logged yet.")
        return
    console.print(format_session_table(sessions))


def _fmt_outcome(outcome: WeekOutcome) -> str:
    if isinstance(outcome, Invalid):
        return f"[red]broken[/red] ({outcome.reason})"
    if isinstance(outcome, Truncated):
        return f"[yellow]deload[/yellow] +{outcome.days}"
    return f"[green]+{outcome.days}[/green]"


def format_streak_panel(
    result: StreakResult,
    weeks: list[tuple[CalendarWeek, WeekOutcome]],
    today: date,
) -> Panel:
    """
    Build the streak display: headline numbers plus recent weeks.

    Args:
        result: Computed streak
        weeks: (week, outcome) pairs, newest first
        today: Day the computation was anchored to
    """
    table = Table(show_header=True, box=None)
    table.add_column("Week of", style="cyan")
    table.add_column("S M T W T F S")
    table.add_column("Strength", justify="right")
    table.add_column("Outcome")

    for week, outcome in weeks:
        days = " ".join(DAY_SYMBOLS[c] for c in week.day_classes)
        label = week.sunday.isoformat() + (" *" if week.is_partial else "")
        table.add_row(label, days, str(week.strength_sessions), _fmt_outcome(outcome))

    header = (
        f"[bold]Current streak:[/bold] {result.current_streak} days   "
        f"[bold]Longest:[/bold] {result.longest_streak} days   "
        f"[dim](as of {today.isoformat()}; * = partial week)[/dim]"
    )
    grid = Table.grid()
    grid.add_row(header)
    grid.add_row("")
    grid.add_row(table)
    return Panel(grid, title="Streak", expand=False)


def format_records_table(records: dict[str, PersonalRecord]) -> Table:
    """Create a table of personal records per exercise."""
    table = Table(title="Personal Records")
    table.add_column("Exercise", style="cyan")
    table.add_column("Max weight", justify="right")
    table.add_column("Max reps", justify="right")
    table.add_column("Est. 1RM", justify="right")

    for name in sorted(records):
        pr = records[name]
        table.add_row(
            name,
            f"{pr.max_weight:g} × {pr.max_weight_reps}" if pr.max_weight else "-",
            f"{pr.max_reps} @ {pr.max_reps_weight:g}" if pr.max_reps else "-",
            f"{pr.estimated_one_rep_max:.1f}" if pr.estimated_one_rep_max else "-",
        )

    return table


def format_summary_display(summary: WeeklySummary, cycle_week: int) -> Panel:
    """Format the weekly summary as a Rich panel."""
    lines = [
        f"Workouts completed: [bold]{summary.workouts_completed}[/bold]",
        f"Total volume:       {summary.total_volume:.0f}",
        f"Total time:         {summary.total_minutes:.0f} min",
        f"PRs achieved:       {summary.prs_achieved}",
        f"7-day adherence:    {summary.adherence}%",
        f"Cycle week:         {'Week 0' if cycle_week == 0 else cycle_week}",
    ]
    if summary.top_exercises:
        top = ", ".join(f"{name} ×{count}" for name, count in summary.top_exercises)
        lines.append(f"Top exercises:      {top}")
    return Panel("\n".join(lines), title="Last 7 days", expand=False)


def format_week_zero(info: WeekZeroInfo | None) -> str:
    """One-line description of the schedule state."""
    if info is None or info.cycle_start_date is None:
        return "No cycle started yet."
    if info.is_week_zero:
        return (
            f"In Week 0 since {info.week_zero_start_date}; "
            f"Week 1 starts {info.cycle_start_date}."
        )
    return f"Cycle started {info.cycle_start_date}."


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
