"""Cycle commands: cycle, reset-cycle."""

import json
from typing import Annotated

import typer

from ...core.calendar import local_day
from ...core.week_zero import current_cycle_week, refresh_week_zero, reset_cycle
from ...io.serializers import week_zero_to_dict
from .. import views
from ..app import HistoryPathOption, JsonOption, TodayOption, app, get_store, parse_now


@app.command()
def cycle(
    history_path: HistoryPathOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the current cycle week and Week-Zero state.
    """
    day = local_day(parse_now(today))
    store = get_store(history_path)
    info = store.load_week_zero()

    if info is not None:
        refreshed = refresh_week_zero(info, day)
        if refreshed != info:
            store.save_week_zero(refreshed)
            info = refreshed

    week = current_cycle_week(info, day)

    if json_out:
        payload = week_zero_to_dict(info) if info is not None else {}
        payload["cycle_week"] = week
        print(json.dumps(payload, indent=2))
        return

    views.console.print(views.format_week_zero(info))
    views.console.print(f"Current cycle week: [bold]{'Week 0' if week == 0 else week}[/bold]")


@app.command("reset-cycle")
def reset_cycle_cmd(
    history_path: HistoryPathOption = None,
    today: TodayOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Reset without confirmation"),
    ] = False,
) -> None:
    """
    Restart the cycle at the most recent Sunday and clear any Week Zero.
    """
    day = local_day(parse_now(today))
    store = get_store(history_path)

    if not force and not views.confirm_action("Reset the training cycle?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    info = reset_cycle(day)
    store.save_week_zero(info)
    views.print_success(f"Cycle reset; Week 1 started {info.cycle_start_date}.")
