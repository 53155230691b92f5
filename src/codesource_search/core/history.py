"""Bounded, deduplicated search history persisted as a JSON array."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from loguru import logger

from codesource_search.config import HISTORY_CAPACITY
from codesource_search.models.search import HistoryEntry


def _entry_to_json(entry: HistoryEntry) -> dict[str, str]:
    return {"text": entry.text, "timestamp": entry.executed_at.isoformat()}


def _entry_from_json(raw: Any) -> HistoryEntry:
    if not isinstance(raw, dict) or not isinstance(raw.get("text"), str):
        msg = f"bad history entry: {raw!r}"
        raise ValueError(msg)
    executed_at = datetime.fromisoformat(raw["timestamp"])
    if executed_at.tzinfo is None:
        executed_at = executed_at.replace(tzinfo=UTC)
    return HistoryEntry(text=raw["text"], executed_at=executed_at)


def decode_history(blob: str, *, capacity: int = HISTORY_CAPACITY) -> list[HistoryEntry]:
    """Parse a persisted history blob. Raises ValueError on malformed data."""
    data = json.loads(blob)
    if not isinstance(data, list):
        msg = f"history must be a JSON array, got {type(data).__name__}"
        raise ValueError(msg)
    return [_entry_from_json(item) for item in data[:capacity]]


class HistoryStore:
    """Most-recent-first list of executed searches, unique by text.

    Every mutation is written to ``path`` before returning.
    """

    def __init__(self, path: str | Path, *, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            msg = f"capacity must be positive, got {capacity!r}"
            raise ValueError(msg)
        self.path = Path(path)
        self.capacity = capacity
        self._entries: list[HistoryEntry] = []

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> tuple[HistoryEntry, ...]:
        """Read persisted history. Missing or corrupt data yields an empty history."""
        try:
            blob = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._entries = []
            return self.entries
        except OSError as e:
            logger.warning("Cannot read search history {}, starting empty: {}", self.path, e)
            self._entries = []
            return self.entries

        try:
            self._entries = decode_history(blob, capacity=self.capacity)
        except (ValueError, TypeError, KeyError) as e:
            logger.warning("Discarding malformed search history {}: {}", self.path, e)
            self._entries = []
        return self.entries

    def record(self, text: str, *, now: datetime | None = None) -> HistoryEntry:
        """Move ``text`` to the front (inserting it if new) and persist."""
        entry = HistoryEntry(text=text, executed_at=now or datetime.now(tz=UTC))
        kept = [e for e in self._entries if e.text != text]
        self._entries = [entry, *kept][: self.capacity]
        self._save()
        return entry

    def clear(self) -> None:
        """Forget everything and remove the persisted blob."""
        self._entries = []
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Cannot remove search history {}: {}", self.path, e)
            return
        logger.debug("Cleared search history {}", self.path)

    def _save(self) -> None:
        payload = [_entry_to_json(e) for e in self._entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            # History stays usable in memory for this session.
            logger.warning("Cannot persist search history to {}: {}", self.path, e)
