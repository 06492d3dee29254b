"""
Configuration constants for the streak and adherence rules.

All adjustable parameters are centralized here.  ``load_streak_rules()``
overlays the bundled metrics.yaml and an optional user file on top of
these defaults; the engines themselves never read files.
"""

from dataclasses import dataclass, fields
from typing import Any, Final

# =============================================================================
# WEEKLY STREAK RULES
# =============================================================================

MIN_STRENGTH_SESSIONS: Final[int] = 3  # Strength records needed in a complete week
MAX_NEUTRAL_DAYS: Final[int] = 1  # Unlogged/rest days tolerated in a complete week
GRACE_DAYS: Final[int] = 1  # Last active day may be this many calendar days back
FULL_WEEK_CREDIT: Final[int] = 7  # Days credited for a valid complete week

# =============================================================================
# ADHERENCE
# =============================================================================

ADHERENCE_WINDOW_DAYS: Final[int] = 30  # Trailing window for adherence
SUMMARY_WINDOW_DAYS: Final[int] = 7  # Window used by the weekly summary

# =============================================================================
# WEEK ZERO
# =============================================================================

# date.weekday() values: Wednesday=2 .. Saturday=5
WEEK_ZERO_START_WEEKDAYS: Final[frozenset[int]] = frozenset({2, 3, 4, 5})

# =============================================================================
# PERSONAL RECORDS
# =============================================================================

EPLEY_REPS_DIVISOR: Final[float] = 30.0  # 1RM = w * (1 + reps / 30)
TOP_EXERCISES_LIMIT: Final[int] = 5


@dataclass(frozen=True)
class StreakRules:
    """Rule set handed to the streak engine."""

    min_strength_sessions: int = MIN_STRENGTH_SESSIONS
    max_neutral_days: int = MAX_NEUTRAL_DAYS
    grace_days: int = GRACE_DAYS

    def __post_init__(self) -> None:
        if self.min_strength_sessions < 0:
            raise ValueError("min_strength_sessions must be non-negative")
        if not 0 <= self.max_neutral_days <= 7:
            raise ValueError("max_neutral_days must be between 0 and 7")
        if self.grace_days < 0:
            raise ValueError("grace_days must be non-negative")

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "StreakRules":
        """Build rules from a config section, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: int(v) for k, v in data.items() if k in known})


def load_streak_rules() -> StreakRules:
    """Return the streak rules with YAML overrides applied."""
    from .engine.config_loader import load_metrics_config

    section = load_metrics_config().get("streak", {})
    if not isinstance(section, dict):
        return StreakRules()
    return StreakRules.from_mapping(section)


def load_adherence_window() -> int:
    """Return the adherence window in days with YAML overrides applied."""
    from .engine.config_loader import load_metrics_config

    section = load_metrics_config().get("adherence", {})
    if not isinstance(section, dict):
        return ADHERENCE_WINDOW_DAYS
    try:
        return int(section.get("window_days", ADHERENCE_WINDOW_DAYS))
    except (TypeError, ValueError):
        return ADHERENCE_WINDOW_DAYS
