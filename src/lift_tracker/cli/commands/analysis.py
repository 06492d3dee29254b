"""Analysis commands: streak, adherence, records, summary."""

import json
from typing import Annotated, Optional

import typer

from ...core.adherence import compute_adherence
from ...core.calendar import group_by_day, local_day, partition_weeks
from ...core.config import load_adherence_window, load_streak_rules
from ...core.models import SessionRecord
from ...core.records import exercise_progression, get_personal_records
from ...core.streak import compute_streak, evaluate_week
from ...core.summary import weekly_summary
from ...core.week_zero import current_cycle_week, refresh_week_zero
from ...io.history_store import HistoryStore
from .. import views
from ..app import HistoryPathOption, JsonOption, TodayOption, app, get_store, parse_now


def _load(store: HistoryStore) -> list[SessionRecord]:
    """Load history or exit with an error message."""
    try:
        return store.load_history()
    except FileNotFoundError as e:
        views.print_error(str(e))
        views.print_info("Run 'log-session' first to start a history.")
        raise typer.Exit(1)


@app.command()
def streak(
    history_path: HistoryPathOption = None,
    weeks: Annotated[
        int,
        typer.Option("--weeks", "-w", help="Number of recent weeks to show"),
    ] = 6,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show current and longest streak with a week-by-week breakdown.
    """
    now = parse_now(today)
    store = get_store(history_path)
    sessions = _load(store)
    week_zero = store.load_week_zero()
    rules = load_streak_rules()

    result = compute_streak(sessions, now=now, week_zero=week_zero, rules=rules)

    if json_out:
        print(json.dumps({
            "current_streak": result.current_streak,
            "longest_streak": result.longest_streak,
        }, indent=2))
        return

    day = local_day(now)
    recent = partition_weeks(group_by_day(sessions), day, week_zero)[:max(weeks, 0)]
    views.console.print()
    views.console.print(views.format_streak_panel(
        result, [(w, evaluate_week(w, rules)) for w in recent], day,
    ))
    views.console.print()


@app.command()
def adherence(
    history_path: HistoryPathOption = None,
    window: Annotated[
        Optional[int],
        typer.Option("--window", "-w", help="Window in days (default from config, 30)"),
    ] = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the share of days with at least one logged session.
    """
    now = parse_now(today)
    store = get_store(history_path)
    sessions = _load(store)
    window_days = window if window is not None else load_adherence_window()

    value = compute_adherence(
        sessions, window_days=window_days, week_zero=store.load_week_zero(), now=now,
    )

    if json_out:
        print(json.dumps({"adherence": value, "window_days": window_days}, indent=2))
        return

    views.console.print(f"Adherence over the last {window_days} days: [bold]{value}%[/bold]")


@app.command()
def records(
    history_path: HistoryPathOption = None,
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Show weight progression for one exercise"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show personal records per exercise.
    """
    sessions = _load(get_store(history_path))
    prs = get_personal_records(sessions)

    progression = None
    if exercise is not None:
        progression = exercise_progression(sessions, exercise)

    if json_out:
        payload: dict = {
            name: {
                "max_weight": pr.max_weight,
                "max_weight_reps": pr.max_weight_reps,
                "max_reps": pr.max_reps,
                "max_reps_weight": pr.max_reps_weight,
                "estimated_one_rep_max": pr.estimated_one_rep_max,
            }
            for name, pr in sorted(prs.items())
        }
        if progression is not None:
            pct, start, current = progression
            payload = {"records": payload, "progression": {
                "exercise": exercise, "percentage": pct, "start": start, "current": current,
            }}
        print(json.dumps(payload, indent=2))
        return

    if not prs:
        views.print_info("No loaded sets logged yet.")
    else:
        views.console.print(views.format_records_table(prs))

    if progression is not None:
        pct, start, current = progression
        if start == 0:
            views.print_warning(f"No loaded sets for {exercise!r}.")
        else:
            views.console.print(f"{exercise}: {start:g} → {current:g} ({pct:+d}%)")


@app.command()
def summary(
    history_path: HistoryPathOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the last seven days at a glance.
    """
    now = parse_now(today)
    store = get_store(history_path)
    sessions = _load(store)

    week_zero = store.load_week_zero()
    if week_zero is not None:
        week_zero = refresh_week_zero(week_zero, local_day(now))

    digest = weekly_summary(sessions, now=now, week_zero=week_zero)
    cycle_week = current_cycle_week(week_zero, local_day(now))

    if json_out:
        print(json.dumps({
            "workouts_completed": digest.workouts_completed,
            "total_volume": digest.total_volume,
            "total_minutes": digest.total_minutes,
            "prs_achieved": digest.prs_achieved,
            "top_exercises": [{"name": n, "count": c} for n, c in digest.top_exercises],
            "adherence": digest.adherence,
            "cycle_week": cycle_week,
        }, indent=2))
        return

    views.console.print(views.format_summary_display(digest, cycle_week))
