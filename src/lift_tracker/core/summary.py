"""Trailing seven-day digest for the summary screen."""

from collections import Counter
from datetime import datetime, timedelta
from typing import Any

from .adherence import compute_adherence
from .calendar import naive_local, resolve_now
from .config import SUMMARY_WINDOW_DAYS, TOP_EXERCISES_LIMIT
from .models import SessionRecord, WeeklySummary, WeekZeroInfo
from .records import detect_new_prs, get_personal_records, volume_load


def weekly_summary(
    sessions: list[SessionRecord],
    active_plan: Any = None,
    now: datetime | None = None,
    week_zero: WeekZeroInfo | None = None,
) -> WeeklySummary:
    """
    Summarize the last seven days of training.

    PRs are counted against records set before the window opened.
    """
    now = naive_local(resolve_now(now))
    window_open = now - timedelta(days=SUMMARY_WINDOW_DAYS)

    recent = [s for s in sessions if window_open <= s.local_time <= now]
    earlier = [s for s in sessions if s.local_time < window_open]

    previous = get_personal_records(earlier)
    prs = sum(len(detect_new_prs(s, previous)) for s in recent)

    counts: Counter[str] = Counter()
    for s in recent:
        counts.update(s.exercises.keys())

    return WeeklySummary(
        workouts_completed=sum(1 for s in recent if s.kind.is_active),
        total_volume=sum(volume_load(s) for s in recent),
        total_minutes=sum(s.duration_minutes for s in recent),
        prs_achieved=prs,
        top_exercises=counts.most_common(TOP_EXERCISES_LIMIT),
        adherence=compute_adherence(
            sessions, active_plan, SUMMARY_WINDOW_DAYS, week_zero=week_zero, now=now
        ),
    )
