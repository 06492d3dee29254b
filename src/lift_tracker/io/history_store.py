"""
JSONL-based history storage for workout sessions.

Handles reading, writing, and managing the history file and the
Week-Zero schedule state kept next to it.
"""

import json
from pathlib import Path

from loguru import logger

from ..core.models import SessionRecord, WeekZeroInfo
from ..core.normalize import ValidationError, dict_to_session_record
from .serializers import (
    dict_to_week_zero,
    session_to_json_line,
    week_zero_to_dict,
)


class HistoryStore:
    """
    Manages workout history stored in JSONL format.

    The history file contains one JSON object per line, one session per
    line.  A separate schedule.json stores the Week-Zero / cycle state.
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the history store.

        Args:
            history_path: Path to the JSONL history file
        """
        self.history_path = Path(history_path)
        self.schedule_path = self.history_path.parent / "schedule.json"

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Initialize empty history file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()

    def load_history(self) -> list[SessionRecord]:
        """
        Load all sessions from the history file.

        Malformed lines are skipped with a warning so that one corrupt
        record never hides the rest of the history.

        Returns:
            List of SessionRecord, sorted by timestamp

        Raises:
            FileNotFoundError: If history file doesn't exist
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Log a session first."
            )

        sessions: list[SessionRecord] = []

        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    sessions.append(dict_to_session_record(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    logger.warning(
                        f"Skipping line {line_num} in {self.history_path}: {e}"
                    )

        sessions.sort(key=lambda s: s.local_time)

        return sessions

    def append_session(self, session: SessionRecord) -> None:
        """
        Append a session to the history file.

        Maintains chronological order by inserting at the correct position.
        Creates the history file when it does not exist yet.

        Args:
            session: Session to append
        """
        self.init()
        sessions = self.load_history()

        insert_idx = len(sessions)
        for i, existing in enumerate(sessions):
            if session.local_time < existing.local_time:
                insert_idx = i
                break
        sessions.insert(insert_idx, session)

        self._write_sessions(sessions)

    def _write_sessions(self, sessions: list[SessionRecord]) -> None:
        """
        Write all sessions to the history file.

        Args:
            sessions: Sessions to write
        """
        with open(self.history_path, "w", encoding="utf-8") as f:
            for session in sessions:
                f.write(session_to_json_line(session) + "\n")

    def delete_session_at(self, index: int) -> SessionRecord:
        """
        Delete the session at the given 0-based index in sorted history.

        Args:
            index: 0-based index

        Returns:
            The removed session

        Raises:
            IndexError: If index is out of range
        """
        sessions = self.load_history()
        if index < 0 or index >= len(sessions):
            raise IndexError(f"Session index {index} out of range (0-{len(sessions) - 1})")
        removed = sessions.pop(index)
        self._write_sessions(sessions)
        return removed

    def clear_history(self) -> None:
        """
        Clear all history (dangerous - use with caution).
        """
        if self.history_path.exists():
            self.history_path.write_text("")

    def load_week_zero(self) -> WeekZeroInfo | None:
        """
        Load Week-Zero / cycle state from schedule.json.

        Returns:
            WeekZeroInfo if the file exists and is valid, None otherwise
        """
        if not self.schedule_path.exists():
            return None
        try:
            with open(self.schedule_path, "r", encoding="utf-8") as f:
                return dict_to_week_zero(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable schedule state {self.schedule_path}: {e}")
            return None

    def save_week_zero(self, info: WeekZeroInfo) -> None:
        """
        Store Week-Zero / cycle state in schedule.json.

        Args:
            info: State to persist
        """
        self.schedule_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.schedule_path, "w", encoding="utf-8") as f:
            json.dump(week_zero_to_dict(info), f, indent=2)


def get_default_history_path() -> Path:
    """
    Get the default history file path.

    Returns:
        ~/.lift-tracker/history.jsonl
    """
    return Path.home() / ".lift-tracker" / "history.jsonl"
