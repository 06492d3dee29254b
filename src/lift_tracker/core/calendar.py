"""
Calendar helpers: clock sampling, day classification and week partitioning.

Weeks are fixed Sunday-Saturday spans keyed by their Sunday, independent
of when the user started.  Every function here takes "today" explicitly;
only ``system_clock`` reads the wall clock.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Callable, Iterable

from .models import CalendarWeek, DayClass, SessionKind, SessionRecord, WeekZeroInfo

ClockSource = Callable[[], datetime]


def system_clock() -> datetime:
    """Default clock: local wall-clock time."""
    return datetime.now()


def resolve_now(now: datetime | None, clock: ClockSource = system_clock) -> datetime:
    """Sample the clock once unless the caller already supplied ``now``."""
    return now if now is not None else clock()


def naive_local(ts: datetime) -> datetime:
    """Convert an aware timestamp to naive local time; naive ones pass through."""
    if ts.tzinfo is not None:
        return ts.astimezone().replace(tzinfo=None)
    return ts


def local_day(ts: datetime) -> date:
    """Timezone-naive local calendar day of a timestamp."""
    return naive_local(ts).date()


def week_start(day: date) -> date:
    """Return the Sunday that starts the calendar week containing ``day``."""
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from ``earlier`` to ``later``."""
    return (later - earlier).days


def classify_day(records: Iterable[SessionRecord]) -> DayClass:
    """
    Classify one calendar day from its session records.

    Precedence: deload > strength > other active work > sick > rest.
    A day without records is unlogged.
    """
    kinds: set[SessionKind] = set()
    for r in records:
        if r.is_deload:
            return DayClass.DELOAD
        kinds.add(r.kind)

    if SessionKind.STRENGTH in kinds:
        return DayClass.LOGGED_STRENGTH
    if any(k.is_active for k in kinds):
        return DayClass.LOGGED_OTHER
    if SessionKind.SICK_DAY in kinds:
        return DayClass.SICK
    if SessionKind.REST in kinds:
        return DayClass.REST
    return DayClass.UNLOGGED


def group_by_day(records: Iterable[SessionRecord]) -> dict[date, list[SessionRecord]]:
    """Bucket records by local calendar day."""
    by_day: dict[date, list[SessionRecord]] = defaultdict(list)
    for r in records:
        by_day[r.day].append(r)
    return dict(by_day)


def _week_zero_overlaps(week_zero: WeekZeroInfo | None, sunday: date) -> bool:
    if week_zero is None or not week_zero.has_week_zero:
        return False
    start = week_zero.week_zero_start_date or week_zero.cycle_start_date
    return week_start(start) <= sunday < week_zero.cycle_start_date  # type: ignore[arg-type, operator]


def partition_weeks(
    by_day: dict[date, list[SessionRecord]],
    today: date,
    week_zero: WeekZeroInfo | None = None,
) -> list[CalendarWeek]:
    """
    Split day-bucketed history into calendar weeks, newest first.

    Covers every week from the one holding the earliest record through the
    week holding ``today``, including weeks with no records at all.  Days
    after ``today`` are treated as unlogged.

    Args:
        by_day: Records grouped by calendar day (see ``group_by_day``)
        today: Local calendar day the computation is anchored to
        week_zero: Optional Week-Zero span; weeks overlapping it are partial

    Returns:
        List of CalendarWeek, the week containing ``today`` first
    """
    past_days = [d for d in by_day if d <= today]
    if not past_days:
        return []

    first_day = min(past_days)
    earliest_sunday = week_start(first_day)
    current_sunday = week_start(today)

    weeks: list[CalendarWeek] = []
    span = days_between(earliest_sunday, current_sunday) // 7
    for weeks_back in range(span + 1):
        sunday = current_sunday - timedelta(weeks=weeks_back)
        classes: list[DayClass] = []
        strength = 0
        deload_day: date | None = None
        for offset in range(7):
            day = sunday + timedelta(days=offset)
            records = by_day.get(day, []) if day <= today else []
            day_class = classify_day(records)
            classes.append(day_class)
            strength += sum(1 for r in records if r.is_strength)
            if day_class is DayClass.DELOAD and deload_day is None:
                deload_day = day

        is_partial = (
            sunday == current_sunday
            or sunday == earliest_sunday
            or _week_zero_overlaps(week_zero, sunday)
        )
        weeks.append(CalendarWeek(
            sunday=sunday,
            day_classes=tuple(classes),
            strength_sessions=strength,
            deload_day=deload_day,
            is_partial=is_partial,
        ))

    return weeks
