"""
Session normalization: raw history entries -> SessionRecords.

Accepts the legacy field names and kind strings written by older app
versions.  The engines call ``normalize_sessions`` on whatever history
they are handed; the storage layer reuses ``dict_to_session_record``.
"""

from datetime import date, datetime
from typing import Any, Iterable

from loguru import logger

from .calendar import week_start
from .models import ExerciseSet, SessionKind, SessionRecord


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


# Kind strings written by plan templates, mapped onto the closed enum.
KIND_ALIASES: dict[str, SessionKind] = {
    "full": SessionKind.STRENGTH,
    "upper": SessionKind.STRENGTH,
    "lower": SessionKind.STRENGTH,
    "push": SessionKind.STRENGTH,
    "pull": SessionKind.STRENGTH,
    "legs": SessionKind.STRENGTH,
    "plyometric": SessionKind.HIIT,
    "cycling_hiit": SessionKind.HIIT,
    "rowing_hiit": SessionKind.HIIT,
    "step_hiit": SessionKind.HIIT,
    "yin_yoga": SessionKind.YOGA,
    "restorative_yoga": SessionKind.YOGA,
    "flexibility": SessionKind.STRETCH,
    "mobility": SessionKind.STRETCH,
    "recovery": SessionKind.REST,
    "sick": SessionKind.SICK_DAY,
}


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a record timestamp.

    Accepts datetime and date objects, ISO 8601 strings (a trailing ``Z``
    is read as UTC) and epoch milliseconds.

    Raises:
        ValidationError: If the value cannot be read as a point in time
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        raise ValidationError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError) as e:
            raise ValidationError(f"Invalid epoch timestamp: {value!r}") from e
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"Invalid timestamp: {value!r}") from e
    raise ValidationError(f"Missing or empty timestamp: {value!r}")


def parse_kind(data: dict[str, Any]) -> SessionKind:
    """
    Resolve the session kind of a raw record.

    Reads ``kind``, then ``type``, then ``sessionType``.  Unknown kinds
    that carry exercises are treated as strength work.

    Raises:
        ValidationError: If no known kind can be derived
    """
    raw = data.get("kind") or data.get("type") or data.get("sessionType")
    if isinstance(raw, SessionKind):
        return raw
    if isinstance(raw, str):
        key = raw.strip().lower()
        try:
            return SessionKind(key)
        except ValueError:
            pass
        if key in KIND_ALIASES:
            return KIND_ALIASES[key]
    if data.get("exercises"):
        return SessionKind.STRENGTH
    raise ValidationError(f"Unknown session kind: {raw!r}")


def check_calendar_range(record: SessionRecord) -> SessionRecord:
    """
    Ensure the record's local day and calendar week can be computed.

    Timestamps near ``datetime.min`` parse fine but overflow on timezone
    conversion or when stepping back to their week's Sunday.

    Raises:
        ValidationError: If the record falls outside the usable date range
    """
    try:
        week_start(record.day)
    except (OverflowError, ValueError) as e:
        raise ValidationError(f"Timestamp out of range: {record.timestamp!r}") from e
    return record


def dict_to_exercises(data: Any) -> dict[str, tuple[ExerciseSet, ...]]:
    """
    Convert an ``{name: {"sets": [{reps, weight}, ...]}}`` map.

    Missing reps/weight default to 0, as the app stores them sparsely.

    Raises:
        ValidationError: If the structure is not a mapping of set lists
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"exercises must be a mapping, got {type(data).__name__}")

    result: dict[str, tuple[ExerciseSet, ...]] = {}
    for name, entry in data.items():
        raw_sets = entry.get("sets", []) if isinstance(entry, dict) else None
        if not isinstance(raw_sets, list):
            raise ValidationError(f"Invalid sets for exercise {name!r}")
        sets = []
        for s in raw_sets:
            if not isinstance(s, dict):
                raise ValidationError(f"Invalid set in exercise {name!r}: {s!r}")
            try:
                sets.append(ExerciseSet(
                    reps=int(s.get("reps") or 0),
                    weight=float(s.get("weight") or 0.0),
                ))
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid set in exercise {name!r}: {e}") from e
        result[str(name)] = tuple(sets)
    return result


def dict_to_session_record(data: dict[str, Any]) -> SessionRecord:
    """
    Convert a stored dict to a SessionRecord.

    Args:
        data: Dict representation (``date`` or ``timestamp`` required)

    Returns:
        SessionRecord instance

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Session record must be a mapping, got {type(data).__name__}")

    raw_ts = data.get("date", data.get("timestamp"))
    timestamp = parse_timestamp(raw_ts)
    kind = parse_kind(data)
    is_deload = bool(data.get("isDeload", data.get("is_deload", False)))
    exercises = dict_to_exercises(data.get("exercises"))

    try:
        duration = float(data.get("duration_minutes", data.get("duration")) or 0.0)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid duration: {e}") from e

    return check_calendar_range(SessionRecord(
        timestamp=timestamp,
        kind=kind,
        is_deload=is_deload,
        exercises=exercises,
        duration_minutes=duration,
        notes=data.get("notes"),
    ))


def normalize_sessions(raw: Iterable[Any] | None) -> list[SessionRecord]:
    """
    Turn a caller's history into SessionRecords, skipping malformed entries.

    Items may already be SessionRecords or raw dicts.  One corrupt record
    never discards the rest of the history.

    Raises:
        ValidationError: If ``raw`` itself is not a list-like collection
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, dict)) or not isinstance(raw, (list, tuple)):
        raise ValidationError(f"History must be a list, got {type(raw).__name__}")

    records: list[SessionRecord] = []
    for index, item in enumerate(raw):
        try:
            if isinstance(item, SessionRecord):
                records.append(check_calendar_range(item))
            else:
                records.append(dict_to_session_record(item))
        except ValidationError as e:
            logger.debug(f"Skipping malformed session #{index}: {e}")
    return records
