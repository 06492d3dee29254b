"""
Adherence engine: share of eligible days with at least one logged session.

The eligible window is the trailing ``window_days`` ending today, but never
reaches back past the first session (or, when a Week Zero exists, past the
start of Week 1).  Today is only eligible once something has been logged
for it, so checking in early never lowers the number.
"""

import math
from datetime import date, datetime, timedelta
from typing import Any

from loguru import logger

from .calendar import days_between, group_by_day, local_day, resolve_now
from .config import ADHERENCE_WINDOW_DAYS
from .models import WeekZeroInfo
from .normalize import ValidationError, normalize_sessions


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def adherence_start(first_day: date, week_zero: WeekZeroInfo | None) -> date:
    """Earliest day that can be eligible: first session or Week 1 start."""
    if week_zero is not None and week_zero.has_week_zero:
        return week_zero.cycle_start_date  # type: ignore[return-value]
    return first_day


def compute_adherence(
    sessions: Any,
    active_plan: Any = None,
    window_days: int = ADHERENCE_WINDOW_DAYS,
    week_zero: WeekZeroInfo | None = None,
    now: datetime | None = None,
) -> int:
    """
    Calculate adherence percentage.

    result = round(100 × logged_days / eligible_days), clamped to [0, 100]

    Args:
        sessions: SessionRecords or raw session dicts (read-only)
        active_plan: Accepted for plan-relative adherence; currently unused
        window_days: Trailing window length in days
        week_zero: Week-Zero span; its days are never eligible or logged
        now: Explicit clock reading; defaults to the system clock

    Returns:
        Integer percentage 0-100; 0 for empty or unusable input
    """
    now = resolve_now(now)
    today = local_day(now)

    try:
        by_day = group_by_day(normalize_sessions(sessions))
        return _percentage(by_day, today, window_days, week_zero)
    except (ValidationError, TypeError, ValueError, OverflowError) as e:
        logger.warning(f"Adherence computation degraded to zero: {e}")
        return 0


def _percentage(
    by_day: dict[date, list],
    today: date,
    window_days: int,
    week_zero: WeekZeroInfo | None,
) -> int:
    logged = {
        d for d in by_day
        if d <= today and not (week_zero is not None and week_zero.covers(d))
    }
    all_days = [d for d in by_day if d <= today]
    if not all_days:
        return 0

    start = adherence_start(min(all_days), week_zero)
    if start > today:
        # Still inside Week Zero
        return 0

    effective_days = min(window_days, days_between(start, today) + 1)
    if effective_days <= 0:
        return 0
    window_start = today - timedelta(days=effective_days - 1)

    eligible = effective_days
    if today not in logged:
        eligible -= 1
    if eligible <= 0:
        return 0

    logged_in_window = sum(1 for d in logged if window_start <= d <= today)
    percentage = _round_half_up(100 * logged_in_window / eligible)
    return max(0, min(100, percentage))
