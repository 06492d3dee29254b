"""
Data models for lift-tracker.

All core dataclasses representing logged sessions, calendar weeks and the
results derived from them.  Records are frozen: the engines only read the
caller's history and every output is built fresh on each call.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum


class SessionKind(str, Enum):
    """Closed set of session kinds a history record may carry."""

    STRENGTH = "strength"
    CARDIO = "cardio"
    HIIT = "hiit"
    YOGA = "yoga"
    STRETCH = "stretch"
    REST = "rest"
    SICK_DAY = "sick_day"

    @property
    def is_active(self) -> bool:
        """True for kinds that count as a trained day (everything but rest/sick)."""
        return self not in (SessionKind.REST, SessionKind.SICK_DAY)


class DayClass(str, Enum):
    """Classification of one calendar day, derived from that day's records."""

    UNLOGGED = "unlogged"
    LOGGED_STRENGTH = "logged-strength"
    LOGGED_OTHER = "logged-other"
    REST = "rest"
    SICK = "sick"
    DELOAD = "deload"

    @property
    def is_active(self) -> bool:
        return self in (DayClass.LOGGED_STRENGTH, DayClass.LOGGED_OTHER, DayClass.DELOAD)

    @property
    def is_neutral(self) -> bool:
        """Unlogged and rest days count against the weekly tolerance; sick days do not."""
        return self in (DayClass.UNLOGGED, DayClass.REST)


@dataclass(frozen=True)
class ExerciseSet:
    """One performed set: reps at a load (0 = bodyweight)."""

    reps: int
    weight: float = 0.0

    def __post_init__(self) -> None:
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")


@dataclass(frozen=True)
class SessionRecord:
    """
    A single logged workout entry.

    Multiple records on one calendar day collapse to one logged day, but
    each strength record still counts toward that week's strength tally.
    """

    timestamp: datetime
    kind: SessionKind
    is_deload: bool = False
    exercises: dict[str, tuple[ExerciseSet, ...]] = field(default_factory=dict, hash=False)
    duration_minutes: float = 0.0
    notes: str | None = None

    @property
    def day(self) -> date:
        """Local calendar day of this record (aware timestamps are converted first)."""
        return self.local_time.date()

    @property
    def local_time(self) -> datetime:
        """Naive local timestamp, safe to compare across mixed-offset records."""
        ts = self.timestamp
        if ts.tzinfo is not None:
            ts = ts.astimezone().replace(tzinfo=None)
        return ts

    @property
    def is_strength(self) -> bool:
        return self.kind is SessionKind.STRENGTH


@dataclass(frozen=True)
class WeekZeroInfo:
    """
    Week-Zero state owned by the schedule tracker.

    Week Zero is the partial span between a first-ever session logged
    Wednesday-Saturday and the following Sunday (``cycle_start_date``).
    """

    is_week_zero: bool = False
    week_zero_start_date: date | None = None
    cycle_start_date: date | None = None

    @property
    def has_week_zero(self) -> bool:
        """True while in Week Zero or once a Week Zero has existed."""
        if self.cycle_start_date is None:
            return False
        return self.is_week_zero or self.week_zero_start_date is not None

    def covers(self, day: date) -> bool:
        """Return True if ``day`` falls inside the Week-Zero span."""
        if not self.has_week_zero or self.week_zero_start_date is None:
            return False
        return self.week_zero_start_date <= day < self.cycle_start_date  # type: ignore[operator]


@dataclass(frozen=True)
class StreakResult:
    """Current and longest streak in days."""

    current_streak: int = 0
    longest_streak: int = 0

    def __post_init__(self) -> None:
        if self.current_streak < 0 or self.longest_streak < 0:
            raise ValueError("streak values must be non-negative")


@dataclass(frozen=True)
class CalendarWeek:
    """
    One Sunday-Saturday week with its per-day classification.

    ``day_classes`` holds seven entries, Sunday first.  A week is partial
    when it contains today, when it is the earliest week of the history,
    or when it overlaps the Week-Zero span; otherwise it is complete.
    """

    sunday: date
    day_classes: tuple[DayClass, ...]
    strength_sessions: int = 0
    deload_day: date | None = None
    is_partial: bool = False

    @property
    def saturday(self) -> date:
        return self.sunday + timedelta(days=6)

    def days(self) -> list[date]:
        return [self.sunday + timedelta(days=i) for i in range(7)]

    @property
    def logged_days(self) -> list[date]:
        """Days with at least one active (non-rest, non-sick) session."""
        return [d for d, c in zip(self.days(), self.day_classes) if c.is_active]

    @property
    def sick_days(self) -> list[date]:
        return [d for d, c in zip(self.days(), self.day_classes) if c is DayClass.SICK]

    @property
    def neutral_days(self) -> int:
        return sum(1 for c in self.day_classes if c.is_neutral)

    def logged_days_before(self, cutoff: date) -> int:
        """Count active days from Sunday up to (not including) ``cutoff``."""
        return sum(1 for d in self.logged_days if d < cutoff)


@dataclass(frozen=True)
class PersonalRecord:
    """Best marks for one exercise across the whole history."""

    max_weight: float = 0.0
    max_weight_reps: int = 0
    max_weight_date: datetime | None = None
    max_reps: int = 0
    max_reps_weight: float = 0.0
    max_reps_date: datetime | None = None
    estimated_one_rep_max: float = 0.0
    one_rep_max_date: datetime | None = None


@dataclass(frozen=True)
class NewPersonalRecord:
    """A mark in one session that beats the previous record."""

    exercise: str
    pr_type: str  # "weight" | "reps" | "one_rep_max"
    value: float
    previous_value: float
    reps: int | None = None
    weight: float | None = None


@dataclass
class WeeklySummary:
    """Trailing seven-day digest of the history."""

    workouts_completed: int
    total_volume: float
    total_minutes: float
    prs_achieved: int
    top_exercises: list[tuple[str, int]] = field(default_factory=list)
    adherence: int = 0
