"""Session commands: log-session, show-history, delete-record."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.calendar import week_start
from ...core.models import SessionRecord, WeekZeroInfo
from ...core.normalize import ValidationError, check_calendar_range, parse_kind, parse_timestamp
from ...core.week_zero import resolve_week_zero
from ...io.history_store import HistoryStore
from ...io.serializers import parse_sets_string, session_record_to_dict
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_store


def _parse_exercise_option(values: list[str]) -> dict:
    """
    Parse repeated --exercise options of the form ``NAME=SETS``.

    Example: ``--exercise "Bench Press=100x10,100x8"``
    """
    exercises: dict = {}
    for raw in values:
        name, sep, sets = raw.partition("=")
        if not sep or not name.strip():
            raise ValidationError(f"Invalid exercise {raw!r}. Expected NAME=SETS, e.g. 'Squat=100x5,100x5'")
        exercises[name.strip()] = parse_sets_string(sets)
    return exercises


def _ensure_schedule(store: HistoryStore, now: datetime) -> WeekZeroInfo | None:
    """
    Create the cycle state after the first logged session.

    A first session on Wednesday-Saturday opens a Week Zero; otherwise
    Week 1 starts on the Sunday of the first session's week.
    """
    if store.load_week_zero() is not None:
        return None
    sessions = store.load_history()
    if not sessions:
        return None
    first_day = sessions[0].day
    info = resolve_week_zero(first_day, now.date())
    if info is None:
        info = WeekZeroInfo(is_week_zero=False, cycle_start_date=week_start(first_day))
    store.save_week_zero(info)
    return info


@app.command("log-session")
def log_session(
    history_path: HistoryPathOption = None,
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="strength, cardio, hiit, yoga, stretch, rest, sick_day"),
    ] = "strength",
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Session time (YYYY-MM-DD[THH:MM]); default now"),
    ] = None,
    deload: Annotated[
        bool,
        typer.Option("--deload", help="Mark this session as a deload session"),
    ] = False,
    exercise: Annotated[
        Optional[list[str]],
        typer.Option("--exercise", "-e", help="NAME=SETS, e.g. 'Squat=100x5,100x5' (repeatable)"),
    ] = None,
    duration: Annotated[
        float,
        typer.Option("--duration", help="Session length in minutes"),
    ] = 0.0,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="Free-text note"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log a workout session.
    """
    store = get_store(history_path)
    now = datetime.now()

    try:
        timestamp = parse_timestamp(date) if date else now
        session = check_calendar_range(SessionRecord(
            timestamp=timestamp,
            kind=parse_kind({"kind": kind}),
            is_deload=deload,
            exercises=_parse_exercise_option(exercise or []),
            duration_minutes=duration,
            notes=notes,
        ))
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.append_session(session)
    created = _ensure_schedule(store, now)

    if json_out:
        print(json.dumps(session_record_to_dict(session), indent=2))
        return

    views.print_success(
        f"Logged {session.kind.value} session on {session.local_time:%Y-%m-%d %H:%M}"
        + (" (deload)" if session.is_deload else "")
    )
    if created is not None:
        views.print_info(views.format_week_zero(created))


@app.command("show-history")
def show_history(
    history_path: HistoryPathOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Show only the N most recent sessions"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display workout history.
    """
    store = get_store(history_path)

    try:
        sessions = store.load_history()
    except FileNotFoundError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if limit is not None:
        sessions = sessions[-limit:] if limit > 0 else []

    if json_out:
        print(json.dumps([session_record_to_dict(s) for s in sessions], indent=2))
        return

    views.print_history(sessions)


@app.command("delete-record")
def delete_record(
    record_id: Annotated[
        int,
        typer.Argument(help="Session number as shown by show-history"),
    ],
    history_path: HistoryPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete without confirmation"),
    ] = False,
) -> None:
    """
    Delete a session by its number in show-history.
    """
    store = get_store(history_path)

    try:
        sessions = store.load_history()
    except FileNotFoundError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if record_id < 1 or record_id > len(sessions):
        views.print_error(f"No session #{record_id} (history has {len(sessions)} sessions)")
        raise typer.Exit(1)

    target = sessions[record_id - 1]
    label = f"{target.local_time:%Y-%m-%d %H:%M} ({target.kind.value})"
    views.console.print(f"Session to delete: [bold]{label}[/bold]")

    if not force and not views.confirm_action("Delete this session?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_session_at(record_id - 1)
    views.print_success(f"Deleted session #{record_id}: {label}")
