"""
Personal records and volume metrics derived from logged sets.

All functions are pure and read only the ``exercises`` of each record.
"""

from datetime import datetime, timedelta
from typing import Sequence

from .calendar import local_day, resolve_now
from .config import EPLEY_REPS_DIVISOR
from .models import NewPersonalRecord, PersonalRecord, SessionRecord


def estimate_one_rep_max(weight: float, reps: int) -> float:
    """
    Epley estimate of the one-rep max.

    1RM = w × (1 + reps / 30), rounded to 0.1; 0 without load or reps.
    """
    if weight <= 0 or reps <= 0:
        return 0.0
    return round(weight * (1 + reps / EPLEY_REPS_DIVISOR), 1)


def get_personal_records(sessions: Sequence[SessionRecord]) -> dict[str, PersonalRecord]:
    """
    Best weight, best reps and best estimated 1RM per exercise.

    Sets with neither load nor reps are ignored.  On ties the earliest
    session keeps the record.
    """
    best: dict[str, dict] = {}

    for session in sorted(sessions, key=lambda s: s.local_time):
        for name, sets in session.exercises.items():
            for s in sets:
                if s.weight == 0 and s.reps == 0:
                    continue
                pr = best.setdefault(name, {
                    "max_weight": 0.0, "max_weight_reps": 0, "max_weight_date": None,
                    "max_reps": 0, "max_reps_weight": 0.0, "max_reps_date": None,
                    "estimated_one_rep_max": 0.0, "one_rep_max_date": None,
                })
                if s.weight > pr["max_weight"]:
                    pr.update(max_weight=s.weight, max_weight_reps=s.reps,
                              max_weight_date=session.timestamp)
                if s.reps > pr["max_reps"]:
                    pr.update(max_reps=s.reps, max_reps_weight=s.weight,
                              max_reps_date=session.timestamp)
                orm = estimate_one_rep_max(s.weight, s.reps)
                if orm > pr["estimated_one_rep_max"]:
                    pr.update(estimated_one_rep_max=orm, one_rep_max_date=session.timestamp)

    return {name: PersonalRecord(**fields) for name, fields in best.items()}


def detect_new_prs(
    session: SessionRecord,
    previous: dict[str, PersonalRecord],
) -> list[NewPersonalRecord]:
    """
    Find marks in ``session`` that beat ``previous`` records.

    Only the highest value per (exercise, type) is reported.
    """
    found: dict[tuple[str, str], NewPersonalRecord] = {}

    def _keep(pr: NewPersonalRecord) -> None:
        key = (pr.exercise, pr.pr_type)
        if key not in found or pr.value > found[key].value:
            found[key] = pr

    for name, sets in session.exercises.items():
        prev = previous.get(name, PersonalRecord())
        for s in sets:
            if s.weight == 0 and s.reps == 0:
                continue
            if s.weight > 0 and s.weight > prev.max_weight:
                _keep(NewPersonalRecord(name, "weight", s.weight, prev.max_weight, reps=s.reps))
            if s.reps > 0 and s.reps > prev.max_reps:
                _keep(NewPersonalRecord(name, "reps", s.reps, prev.max_reps, weight=s.weight))
            orm = estimate_one_rep_max(s.weight, s.reps)
            if orm > prev.estimated_one_rep_max:
                _keep(NewPersonalRecord(name, "one_rep_max", orm, prev.estimated_one_rep_max))

    return list(found.values())


def volume_load(session: SessionRecord) -> float:
    """Sum of reps × weight over every set in the session."""
    return sum(s.reps * s.weight for sets in session.exercises.values() for s in sets)


def total_volume(
    sessions: Sequence[SessionRecord],
    days: int | None = None,
    now: datetime | None = None,
) -> float:
    """
    Total volume load, optionally limited to the last ``days`` calendar days.
    """
    if days is None:
        return sum(volume_load(s) for s in sessions)
    cutoff = local_day(resolve_now(now)) - timedelta(days=days)
    return sum(volume_load(s) for s in sessions if s.day >= cutoff)


def exercise_progression(
    sessions: Sequence[SessionRecord],
    exercise: str,
) -> tuple[int, float, float]:
    """
    Percent change of the top working weight for one exercise.

    Returns:
        (percentage, start_weight, current_weight); zeros if never loaded
    """
    points: list[tuple[datetime, float]] = []
    for session in sessions:
        sets = session.exercises.get(exercise)
        if not sets:
            continue
        top = max(s.weight for s in sets)
        if top > 0:
            points.append((session.local_time, top))

    if not points:
        return 0, 0.0, 0.0

    points.sort(key=lambda p: p[0])
    start, current = points[0][1], points[-1][1]
    percentage = round((current - start) / start * 100) if start > 0 else 0
    return percentage, start, current
