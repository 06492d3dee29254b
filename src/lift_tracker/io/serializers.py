"""
JSON serialization for workout records.

Handles conversion between SessionRecord / WeekZeroInfo dataclasses and
the JSON-compatible dicts written by the storage layer.  Parsing of raw
session dicts lives in ``core.normalize``.
"""

import json
from datetime import date
from typing import Any

from ..core.models import ExerciseSet, SessionRecord, WeekZeroInfo
from ..core.normalize import ValidationError, parse_timestamp


def session_record_to_dict(record: SessionRecord) -> dict[str, Any]:
    """
    Convert SessionRecord to a JSON-compatible dict.

    Empty optional fields are omitted to keep the history file compact.
    """
    data: dict[str, Any] = {
        "date": record.timestamp.isoformat(),
        "kind": record.kind.value,
    }
    if record.is_deload:
        data["is_deload"] = True
    if record.exercises:
        data["exercises"] = {
            name: {"sets": [{"reps": s.reps, "weight": s.weight} for s in sets]}
            for name, sets in record.exercises.items()
        }
    if record.duration_minutes:
        data["duration_minutes"] = record.duration_minutes
    if record.notes:
        data["notes"] = record.notes
    return data


def session_to_json_line(record: SessionRecord) -> str:
    """Serialize one record to a single JSONL line (no trailing newline)."""
    return json.dumps(session_record_to_dict(record), separators=(",", ":"))


# ---------------------------------------------------------------------------
# Week-Zero schedule state
# ---------------------------------------------------------------------------


def _parse_optional_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    return parse_timestamp(value).date()


def dict_to_week_zero(data: dict[str, Any] | None) -> WeekZeroInfo | None:
    """
    Convert stored schedule state to WeekZeroInfo.

    Accepts both the snake_case keys written by this package and the
    camelCase keys of the app's schedule context.

    Raises:
        ValidationError: If a date field cannot be parsed
    """
    if not data:
        return None
    if not isinstance(data, dict):
        raise ValidationError("Week-Zero info must be a mapping")
    return WeekZeroInfo(
        is_week_zero=bool(data.get("is_week_zero", data.get("isWeekZero", False))),
        week_zero_start_date=_parse_optional_date(
            data.get("week_zero_start_date", data.get("weekZeroStartDate"))
        ),
        cycle_start_date=_parse_optional_date(
            data.get("cycle_start_date", data.get("cycleStartDate"))
        ),
    )


def week_zero_to_dict(info: WeekZeroInfo) -> dict[str, Any]:
    """Convert WeekZeroInfo to a JSON-compatible dict."""
    return {
        "is_week_zero": info.is_week_zero,
        "week_zero_start_date": (
            info.week_zero_start_date.isoformat() if info.week_zero_start_date else None
        ),
        "cycle_start_date": info.cycle_start_date.isoformat() if info.cycle_start_date else None,
    }


def parse_sets_string(text: str) -> tuple[ExerciseSet, ...]:
    """
    Parse a compact set list such as ``"100x10, 100x8, 12"``.

    Each comma-separated entry is ``WEIGHTxREPS`` or bare ``REPS``
    (bodyweight).  A ``NxWEIGHTxREPS`` prefix repeats the set N times.

    Raises:
        ValidationError: If an entry cannot be parsed
    """
    sets: list[ExerciseSet] = []
    for part in text.split(","):
        part = part.strip().lower()
        if not part:
            continue
        pieces = [p.strip() for p in part.split("x")]
        try:
            if len(pieces) == 1:
                count, weight, reps = 1, 0.0, int(pieces[0])
            elif len(pieces) == 2:
                count, weight, reps = 1, float(pieces[0]), int(pieces[1])
            elif len(pieces) == 3:
                count, weight, reps = int(pieces[0]), float(pieces[1]), int(pieces[2])
            else:
                raise ValueError("too many 'x' separators")
            sets.extend(ExerciseSet(reps=reps, weight=weight) for _ in range(count))
        except ValueError as e:
            raise ValidationError(f"Invalid set {part!r}: {e}") from e
    if not sets:
        raise ValidationError(f"No sets found in {text!r}")
    return tuple(sets)
