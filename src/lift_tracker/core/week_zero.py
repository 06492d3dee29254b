"""
Week-Zero resolution for the schedule tracker.

A first-ever session logged Wednesday-Saturday opens a "Week 0": the
partial span up to the following Sunday, when Week 1 of the cycle starts.
The engines only consume the resulting WeekZeroInfo; they never derive it.
"""

from datetime import date, timedelta

from .calendar import week_start
from .config import WEEK_ZERO_START_WEEKDAYS
from .models import WeekZeroInfo


def resolve_week_zero(first_session_day: date, today: date) -> WeekZeroInfo | None:
    """
    Decide whether the first session opens a Week Zero.

    Args:
        first_session_day: Day of the first-ever logged session
        today: Current local day

    Returns:
        WeekZeroInfo when the first session falls Wednesday-Saturday,
        otherwise None
    """
    if first_session_day.weekday() not in WEEK_ZERO_START_WEEKDAYS:
        return None
    cycle_start = week_start(first_session_day) + timedelta(days=7)
    return WeekZeroInfo(
        is_week_zero=today < cycle_start,
        week_zero_start_date=first_session_day,
        cycle_start_date=cycle_start,
    )


def refresh_week_zero(info: WeekZeroInfo, today: date) -> WeekZeroInfo:
    """Clear the in-Week-Zero flag once Week 1 has started."""
    if info.is_week_zero and info.cycle_start_date is not None and today >= info.cycle_start_date:
        return WeekZeroInfo(
            is_week_zero=False,
            week_zero_start_date=info.week_zero_start_date,
            cycle_start_date=info.cycle_start_date,
        )
    return info


def reset_cycle(today: date) -> WeekZeroInfo:
    """Manual cycle reset: Week 1 restarts on the most recent Sunday, no Week Zero."""
    return WeekZeroInfo(is_week_zero=False, week_zero_start_date=None, cycle_start_date=week_start(today))


def current_cycle_week(info: WeekZeroInfo | None, today: date) -> int:
    """
    Return the 1-based cycle week for ``today``.

    0 while still in Week Zero; 1 when no cycle start is known.
    """
    if info is None or info.cycle_start_date is None:
        return 1
    if today < info.cycle_start_date:
        return 0
    return (week_start(today) - info.cycle_start_date).days // 7 + 1
