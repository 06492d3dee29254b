"""
Streak engine: weekly continuity rules over calendar weeks.

Each calendar week is evaluated to one explicit outcome:

- ``Valid(days)``     the week extends the running streak by ``days``
- ``Truncated(days)`` a deload cut the week; only the prefix before the
                      deload day counts and the link to newer weeks breaks
- ``Invalid(reason)`` the week fails the weekly minimums and ends the run

The walk goes newest → oldest over those outcomes.  Nothing is cached:
the full history is re-scanned on every call, so results are idempotent
for a fixed (history, now).
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Sequence, Union

from loguru import logger

from .calendar import days_between, group_by_day, local_day, partition_weeks, resolve_now
from .config import FULL_WEEK_CREDIT, StreakRules
from .models import CalendarWeek, SessionRecord, StreakResult, WeekZeroInfo
from .normalize import ValidationError, normalize_sessions


@dataclass(frozen=True)
class Valid:
    days: int


@dataclass(frozen=True)
class Truncated:
    days: int


@dataclass(frozen=True)
class Invalid:
    reason: str


WeekOutcome = Union[Valid, Truncated, Invalid]


def evaluate_week(week: CalendarWeek, rules: StreakRules) -> WeekOutcome:
    """
    Decide how one calendar week contributes to a streak.

    Order of rules:
    1. A deload day truncates the week to its Sunday..(deload - 1) prefix
       and waives the strength minimum.
    2. A partial week is always valid and counts its logged days only.
    3. A complete week needs ≤ ``max_neutral_days`` unlogged/rest days
       (sick days are ignored) and ``min_strength_sessions`` strength
       records; it then earns a full seven days.

    Args:
        week: Week to evaluate
        rules: Weekly thresholds

    Returns:
        Valid, Truncated or Invalid outcome
    """
    if week.deload_day is not None:
        return Truncated(week.logged_days_before(week.deload_day))

    if week.is_partial:
        return Valid(len(week.logged_days))

    if week.neutral_days > rules.max_neutral_days:
        return Invalid(
            f"{week.neutral_days} neutral days (max {rules.max_neutral_days})"
        )
    if week.strength_sessions < rules.min_strength_sessions:
        return Invalid(
            f"{week.strength_sessions} strength sessions (min {rules.min_strength_sessions})"
        )
    return Valid(FULL_WEEK_CREDIT)


def walk_weeks(weeks: Sequence[CalendarWeek], rules: StreakRules) -> tuple[int, int]:
    """
    Accumulate week outcomes newest → oldest.

    Returns:
        (head_run, longest): the total of the run that includes the newest
        week, and the largest run total seen anywhere in the walk
    """
    running = 0
    longest = 0
    head_run: int | None = None

    for index, week in enumerate(weeks):
        outcome = evaluate_week(week, rules)

        if isinstance(outcome, Invalid):
            logger.debug(f"Week of {week.sunday} breaks the streak: {outcome.reason}")
            if head_run is None:
                head_run = running
            running = 0
            continue

        # The dropped suffix of a truncated week is a gap between it and the
        # newer weeks; the newest week has nothing newer to detach from.
        if isinstance(outcome, Truncated) and index > 0:
            if head_run is None:
                head_run = running
            running = 0

        running += outcome.days
        longest = max(longest, running)

    if head_run is None:
        head_run = running
    return head_run, longest


def last_active_day(by_day: dict[date, list[SessionRecord]], today: date) -> date | None:
    """Most recent day up to ``today`` with an active (non-rest, non-sick) session."""
    days = [
        d for d, records in by_day.items()
        if d <= today and any(r.kind.is_active for r in records)
    ]
    return max(days) if days else None


def compute_streak(
    sessions: Any,
    now: datetime | None = None,
    week_zero: WeekZeroInfo | None = None,
    rules: StreakRules | None = None,
) -> StreakResult:
    """
    Compute current and longest streak from a workout history.

    The clock is sampled once; every week boundary in this call is
    derived from that single ``today``.  The current streak counts only
    when the last active day is within ``rules.grace_days`` calendar days.

    Args:
        sessions: SessionRecords or raw session dicts (read-only)
        now: Explicit clock reading; defaults to the system clock
        week_zero: Week-Zero span from the schedule tracker, if any
        rules: Weekly thresholds; defaults to the baseline rule set

    Returns:
        StreakResult; ``StreakResult(0, 0)`` for empty or unusable input
    """
    now = resolve_now(now)
    rules = rules or StreakRules()

    today = local_day(now)
    try:
        by_day = group_by_day(normalize_sessions(sessions))
        weeks = partition_weeks(by_day, today, week_zero)
        if not weeks:
            return StreakResult()
        head_run, longest = walk_weeks(weeks, rules)
    except (ValidationError, TypeError, ValueError, OverflowError) as e:
        logger.warning(f"Streak computation degraded to zero: {e}")
        return StreakResult()

    last_day = last_active_day(by_day, today)
    current = 0
    if last_day is not None and days_between(last_day, today) <= rules.grace_days:
        current = head_run

    return StreakResult(current_streak=current, longest_streak=longest)
