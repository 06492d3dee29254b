"""
Regression tests for the streak engine.

Dates are anchored to the calendar week starting Sunday 2025-11-16 and
every call passes an explicit ``now`` so week boundaries are fixed.

Week strings give one character per day, Sunday first:
    S strength   c cardio   r rest   x sick day   D deload (strength)   . nothing
"""

from datetime import date, datetime, time, timedelta

import pytest

from lift_tracker.core.config import StreakRules
from lift_tracker.core.models import CalendarWeek, DayClass, SessionKind, SessionRecord, StreakResult, WeekZeroInfo
from lift_tracker.core.streak import Invalid, Truncated, Valid, compute_streak, evaluate_week, walk_weeks

NOW = datetime(2025, 11, 19, 12, 0)  # Wednesday
THIS_SUNDAY = date(2025, 11, 16)

_CODES = {
    "S": ("strength", False),
    "c": ("cardio", False),
    "r": ("rest", False),
    "x": ("sick_day", False),
    "D": ("strength", True),
}


def _sunday(weeks_ago: int) -> date:
    return THIS_SUNDAY - timedelta(weeks=weeks_ago)


def _session(day: date, kind: str = "strength", deload: bool = False, hour: int = 10) -> SessionRecord:
    return SessionRecord(
        timestamp=datetime.combine(day, time(hour)),
        kind=SessionKind(kind),
        is_deload=deload,
    )


def _week(sunday: date, pattern: str) -> list[SessionRecord]:
    assert len(pattern) == 7
    sessions = []
    for offset, code in enumerate(pattern):
        if code == ".":
            continue
        kind, deload = _CODES[code]
        sessions.append(_session(sunday + timedelta(days=offset), kind, deload))
    return sessions


def _daily(first: date, last: date, kind: str = "strength") -> list[SessionRecord]:
    days = (last - first).days + 1
    return [_session(first + timedelta(days=i), kind) for i in range(days)]


# A lone sick day four weeks back opens the history without adding to any
# streak, so last week is judged as a complete week rather than the earliest.
_LEAD_IN = _week(_sunday(4), "......x")


def _judged(pattern: str, extra: list[SessionRecord] | None = None, rules: StreakRules | None = None) -> StreakResult:
    """Streak for last week as a complete week with older history behind it."""
    history = _LEAD_IN + _week(_sunday(1), pattern) + (extra or [])
    return compute_streak(history, now=NOW, rules=rules)


# =============================================================================
# Reference scenarios
# =============================================================================


class TestScenarios:
    """The worked examples every rule change must keep passing."""

    def test_seven_consecutive_strength_days(self):
        result = compute_streak(_week(_sunday(1), "SSSSSSS"), now=NOW)
        assert result.longest_streak == 7

    def test_one_unlogged_day_is_tolerated(self):
        assert _judged("SSS.SSS").longest_streak == 7

    def test_two_unlogged_days_break_the_week(self):
        assert _judged("SSS..SS").longest_streak < 7

    def test_week_below_strength_minimum_contributes_nothing(self):
        history = _week(_sunday(2), "SSSSSSS") + _week(_sunday(1), "SccSccc")
        result = compute_streak(history, now=NOW)
        # Only the earlier week survives; the short week adds nothing
        assert result.longest_streak == 7

    def test_week_below_strength_minimum_after_older_history(self):
        assert _judged("SccSccc").longest_streak == 0

    def test_earliest_week_is_partial_whatever_the_start_day(self):
        """Three strength days count the same from Sunday or from Monday."""
        from_sunday = compute_streak(_week(_sunday(2), "SSS...."), now=NOW)
        from_monday = compute_streak(_week(_sunday(2), ".SSS..."), now=NOW)

        assert from_sunday.longest_streak == 3
        assert from_monday.longest_streak == 3

    def test_earliest_full_week_starting_sunday(self):
        result = compute_streak(_week(_sunday(2), "SSS.SSS"), now=NOW)
        assert result.longest_streak == 6

    def test_week_zero_span_accrues_all_days(self):
        """First session Wednesday, Wed-Sat logged, before any Sunday."""
        now = datetime(2025, 11, 15, 20, 0)  # Saturday
        history = _week(_sunday(1), "...SSSc")
        week_zero = WeekZeroInfo(True, date(2025, 11, 12), date(2025, 11, 16))

        result = compute_streak(history, now=now, week_zero=week_zero)

        assert result == StreakResult(current_streak=4, longest_streak=4)

    def test_week_zero_without_schedule_info(self):
        now = datetime(2025, 11, 15, 20, 0)
        result = compute_streak(_week(_sunday(1), "...SSSc"), now=now)
        assert result.longest_streak == 4

    def test_streak_continues_from_week_zero_into_week_one(self):
        now = datetime(2025, 11, 18, 20, 0)  # Tuesday
        history = _week(_sunday(1), "...SSSc") + _week(_sunday(0), "ScS....")
        week_zero = WeekZeroInfo(False, date(2025, 11, 12), date(2025, 11, 16))

        result = compute_streak(history, now=now, week_zero=week_zero)

        assert result == StreakResult(current_streak=7, longest_streak=7)


# =============================================================================
# Neutral days and strength minimum
# =============================================================================


class TestWeeklyMinimums:
    """Complete-week validity: neutral-day tolerance and strength count."""

    def test_rest_day_is_neutral(self):
        assert _judged("SSSrSSS").longest_streak == 7

    def test_rest_plus_unlogged_breaks(self):
        assert _judged("SSSr.SS").longest_streak == 0

    def test_exactly_three_strength_sessions(self):
        assert _judged("SccSccS").longest_streak == 7

    def test_same_day_strength_sessions_each_count(self):
        extra = [_session(_sunday(1), "strength", hour=18)]
        assert _judged("SSccccc", extra=extra).longest_streak == 7

    def test_custom_rules(self):
        assert _judged("SccSccc").longest_streak == 0
        rules = StreakRules(min_strength_sessions=2)
        assert _judged("SccSccc", rules=rules).longest_streak == 7

    def test_empty_week_breaks_run(self):
        history = _week(_sunday(3), "SSSSSSS") + _week(_sunday(1), "SSSSSSS")
        result = compute_streak(history, now=NOW)
        assert result.longest_streak == 7

    def test_consecutive_valid_weeks_accumulate(self):
        history = _week(_sunday(2), "SSSSSSS") + _week(_sunday(1), "SS.SSSS")
        result = compute_streak(history, now=NOW)
        assert result.longest_streak == 14

    def test_older_broken_streak_still_longest(self):
        history = (
            _week(_sunday(5), "SSSSSSS")
            + _week(_sunday(4), "SSSSSSS")
            + _week(_sunday(3), "S......")
            + _week(_sunday(1), "SSSSSSS")
        )
        result = compute_streak(history, now=NOW)
        assert result.longest_streak == 14


# =============================================================================
# Deload weeks
# =============================================================================


class TestDeload:
    """A deload day truncates its week to the prefix before it."""

    def test_deload_tuesday_keeps_sunday_and_monday(self):
        result = compute_streak(_week(_sunday(1), "SSDSSSS"), now=NOW)
        assert result.longest_streak == 2

    def test_deload_sunday_zeroes_week(self):
        result = compute_streak(_week(_sunday(1), "DSSSSSS"), now=NOW)
        assert result.longest_streak == 0

    def test_deload_saturday_keeps_sunday_to_friday(self):
        result = compute_streak(_week(_sunday(1), "SSSSSSD"), now=NOW)
        assert result.longest_streak == 6

    def test_deload_saturday_credits_lone_sunday(self):
        """Neutral-day and strength rules are waived for a deload week."""
        result = compute_streak(_week(_sunday(1), "S.....D"), now=NOW)
        assert result.longest_streak == 1

    def test_multiple_deloads_use_first(self):
        result = compute_streak(_week(_sunday(1), "SSDSDSS"), now=NOW)
        assert result.longest_streak == 2

    def test_deload_with_unlogged_day_after(self):
        result = compute_streak(_week(_sunday(1), "SSDS..S"), now=NOW)
        assert result.longest_streak == 2

    def test_deload_in_middle_week_joins_older_weeks_only(self):
        history = (
            _week(_sunday(3), "SSSSSSS")
            + _week(_sunday(2), "SSDSSSS")
            + _week(_sunday(1), "SSSSSSS")
        )
        result = compute_streak(history, now=NOW)
        assert result.longest_streak == 9

    def test_week_after_deload_starts_fresh(self):
        history = _week(_sunday(2), "SDSSSSS") + _week(_sunday(1), "SSSSSSS")
        result = compute_streak(history, now=NOW)
        assert result.longest_streak == 7

    def test_deload_saturday_does_not_touch_next_week(self):
        history = _week(_sunday(2), "SSSSSSD") + _week(_sunday(1), "SSSSSSS")
        result = compute_streak(history, now=NOW)
        assert result.longest_streak == 7

    def test_deload_waives_strength_minimum(self):
        result = compute_streak(_week(_sunday(1), "cccDccc"), now=NOW)
        assert result.longest_streak == 3

    def test_deload_today_pauses_long_streak(self):
        today = NOW.date()
        history = _daily(today - timedelta(days=33), today - timedelta(days=1))
        history.append(_session(today, "strength", deload=True))

        result = compute_streak(history, now=NOW)

        assert result == StreakResult(current_streak=33, longest_streak=33)

    def test_deload_today_after_two_days(self):
        today = NOW.date()
        history = [
            _session(today - timedelta(days=2)),
            _session(today - timedelta(days=1)),
            _session(today, deload=True),
        ]
        result = compute_streak(history, now=NOW)
        assert result.current_streak == 2


# =============================================================================
# Sick days
# =============================================================================


class TestSickDays:
    """Sick days neither count nor break."""

    def test_single_sick_day(self):
        assert _judged("SSSxSSS").longest_streak == 7

    def test_two_sick_days_are_transparent(self):
        assert _judged("SSSxxSS").longest_streak == 7

    def test_sick_and_rest_day_leave_one_neutral(self):
        assert _judged("SSSxrSS").longest_streak == 7

    def test_all_sick_week(self):
        result = compute_streak(_week(_sunday(1), "xxxxxxx"), now=NOW)
        assert result == StreakResult(0, 0)

    def test_only_sick_days_recently(self):
        today = NOW.date()
        history = _daily(today - timedelta(days=3), today, kind="sick_day")
        assert compute_streak(history, now=NOW) == StreakResult(0, 0)

    def test_sick_yesterday_does_not_extend_grace(self):
        today = NOW.date()
        history = [
            _session(today - timedelta(days=2)),
            _session(today - timedelta(days=1), "sick_day"),
        ]
        result = compute_streak(history, now=NOW)
        assert result == StreakResult(current_streak=0, longest_streak=1)

    def test_sick_today_keeps_streak_ending_yesterday(self):
        today = NOW.date()
        history = _daily(today - timedelta(days=5), today - timedelta(days=1))
        history.append(_session(today, "sick_day"))

        result = compute_streak(history, now=NOW)

        assert result == StreakResult(current_streak=5, longest_streak=5)

    def test_sick_week_appended_keeps_longest(self):
        base = _week(_sunday(3), "SSSSSSS") + _week(_sunday(2), "SSSSSSS")
        before = compute_streak(base, now=NOW)
        after = compute_streak(base + _week(_sunday(1), "xxxxxxx"), now=NOW)
        assert after.longest_streak >= before.longest_streak == 14


# =============================================================================
# Grace period (calendar days)
# =============================================================================


class TestGracePeriod:
    """Current streak stays alive through yesterday, by calendar day."""

    def test_logged_today(self):
        today = NOW.date()
        history = _daily(today - timedelta(days=2), today)
        assert compute_streak(history, now=NOW).current_streak == 3

    def test_yesterday_just_after_midnight_still_current(self):
        now = datetime(2025, 11, 19, 23, 55)
        history = [SessionRecord(datetime(2025, 11, 18, 0, 5), SessionKind.STRENGTH)]
        assert compute_streak(history, now=now).current_streak == 1

    def test_two_calendar_days_back_is_not_current(self):
        now = datetime(2025, 11, 19, 0, 1)
        history = [SessionRecord(datetime(2025, 11, 17, 23, 59), SessionKind.STRENGTH)]
        result = compute_streak(history, now=now)
        assert result == StreakResult(current_streak=0, longest_streak=1)

    def test_late_night_and_early_morning_are_separate_days(self):
        now = datetime(2025, 11, 18, 12, 0)
        history = [
            SessionRecord(datetime(2025, 11, 17, 23, 30), SessionKind.STRENGTH),
            SessionRecord(datetime(2025, 11, 18, 0, 5), SessionKind.STRENGTH),
        ]
        assert compute_streak(history, now=now).current_streak == 2

    def test_rest_day_is_not_last_active_day(self):
        today = NOW.date()
        history = [
            _session(today - timedelta(days=2)),
            _session(today - timedelta(days=1), "rest"),
        ]
        assert compute_streak(history, now=NOW).current_streak == 0

    def test_old_history_has_no_current_streak(self):
        result = compute_streak(_week(_sunday(4), "SSSSSSS"), now=NOW)
        assert result == StreakResult(current_streak=0, longest_streak=7)

    def test_empty_current_week_carries_last_week(self):
        """Sunday morning with nothing logged yet: yesterday still counts."""
        now = datetime(2025, 11, 16, 8, 0)
        result = compute_streak(_week(_sunday(1), "SSSSSSS"), now=now)
        assert result == StreakResult(current_streak=7, longest_streak=7)


# =============================================================================
# Input handling and invariants
# =============================================================================


_HISTORIES = [
    [],
    _week(_sunday(1), "SSSSSSS"),
    _week(_sunday(2), "SSDSSSS") + _week(_sunday(0), "SSSS..."),
    _week(_sunday(3), "xSrSScS") + _week(_sunday(1), "S.S.S.S"),
    _daily(NOW.date() - timedelta(days=40), NOW.date()),
    _week(_sunday(6), "..SSSSS") + _week(_sunday(5), "SSSSSSS") + _week(_sunday(0), "SSSx..."),
]


class TestInvariants:
    """Properties that hold for every history."""

    @pytest.mark.parametrize("history", _HISTORIES)
    def test_longest_at_least_current(self, history):
        result = compute_streak(history, now=NOW)
        assert result.longest_streak >= result.current_streak >= 0

    @pytest.mark.parametrize("history", _HISTORIES)
    def test_idempotent_and_read_only(self, history):
        snapshot = list(history)
        first = compute_streak(history, now=NOW)
        second = compute_streak(history, now=NOW)
        assert first == second
        assert history == snapshot

    @pytest.mark.parametrize("bad", [None, "not a list", {"date": "2025-11-18"}, 42])
    def test_unusable_input_yields_zero(self, bad):
        assert compute_streak(bad, now=NOW) == StreakResult(0, 0)

    def test_input_order_does_not_matter(self):
        history = _week(_sunday(2), "SSSSSSS") + _week(_sunday(1), "SSS.SSS")
        assert compute_streak(list(reversed(history)), now=NOW) == compute_streak(history, now=NOW)

    def test_future_sessions_ignored(self):
        history = _week(_sunday(1), "SSSSSSS")
        future = history + [_session(NOW.date() + timedelta(days=3))]
        assert compute_streak(future, now=NOW) == compute_streak(history, now=NOW)

    def test_malformed_records_are_skipped(self):
        good = [
            {"date": (datetime.combine(_sunday(1) + timedelta(days=i), time(9))).isoformat(), "type": "full"}
            for i in range(7)
        ]
        bad = [
            {"date": "not a date", "type": "strength"},
            {"type": "strength"},
            {"date": "2025-11-10T09:00:00", "type": "mystery"},
            42,
        ]
        assert compute_streak(good + bad, now=NOW) == compute_streak(good, now=NOW)
        assert compute_streak(good, now=NOW).longest_streak == 7

    @pytest.mark.parametrize("stamp", ["0001-01-01", "0001-01-01T00:00:00+14:00"])
    def test_records_at_start_of_calendar_are_skipped(self, stamp):
        valid = {"date": "2025-11-18T10:00:00", "kind": "strength"}
        history = [{"date": stamp, "kind": "strength"}, valid]

        result = compute_streak(history, now=NOW)

        assert result == compute_streak([valid], now=NOW)
        assert result == StreakResult(current_streak=1, longest_streak=1)

    def test_record_objects_at_start_of_calendar_are_skipped(self):
        history = [
            SessionRecord(datetime(1, 1, 1), SessionKind.STRENGTH),
            _session(NOW.date() - timedelta(days=1)),
        ]
        assert compute_streak(history, now=NOW) == StreakResult(1, 1)

    def test_raw_dicts_match_records(self):
        records = _week(_sunday(1), "SSScSSS")
        raw = [{"date": r.timestamp.isoformat(), "kind": r.kind.value} for r in records]
        assert compute_streak(raw, now=NOW) == compute_streak(records, now=NOW)


# =============================================================================
# Week outcomes
# =============================================================================


def _calendar_week(classes: str, strength: int = 0, partial: bool = False, deload: int | None = None) -> CalendarWeek:
    lookup = {
        "S": DayClass.LOGGED_STRENGTH,
        "c": DayClass.LOGGED_OTHER,
        "r": DayClass.REST,
        "x": DayClass.SICK,
        "D": DayClass.DELOAD,
        ".": DayClass.UNLOGGED,
    }
    return CalendarWeek(
        sunday=_sunday(1),
        day_classes=tuple(lookup[c] for c in classes),
        strength_sessions=strength,
        deload_day=_sunday(1) + timedelta(days=deload) if deload is not None else None,
        is_partial=partial,
    )


class TestWeekOutcomes:
    """evaluate_week / walk_weeks as explicit outcomes."""

    def test_valid_complete_week(self):
        assert evaluate_week(_calendar_week("SSSSSS.", strength=6), StreakRules()) == Valid(7)

    def test_invalid_for_neutral_days(self):
        outcome = evaluate_week(_calendar_week("SSSS..r", strength=4), StreakRules())
        assert isinstance(outcome, Invalid)
        assert "neutral" in outcome.reason

    def test_invalid_for_strength(self):
        outcome = evaluate_week(_calendar_week("SScccc.", strength=2), StreakRules())
        assert isinstance(outcome, Invalid)
        assert "strength" in outcome.reason

    def test_partial_counts_logged_days(self):
        outcome = evaluate_week(_calendar_week("S.c.x..", strength=1, partial=True), StreakRules())
        assert outcome == Valid(2)

    def test_deload_truncates(self):
        outcome = evaluate_week(_calendar_week("SScDSSS", strength=6, deload=3), StreakRules())
        assert outcome == Truncated(3)

    def test_walk_returns_head_run_and_longest(self):
        weeks = [
            _calendar_week("SS.....", strength=2, partial=True),
            _calendar_week("SSSSSSS", strength=7),
            _calendar_week("S......", strength=1),
            _calendar_week("SSSSSSS", strength=7),
            _calendar_week("SSSSSSS", strength=7),
        ]
        assert walk_weeks(weeks, StreakRules()) == (9, 14)
