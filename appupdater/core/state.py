"""Persisted check/snooze timestamps — key-value store with ISO-8601 values."""

import json
import logging
import os
from datetime import datetime, timezone

from appupdater.core.models import CheckState

logger = logging.getLogger(__name__)

LAST_CHECKED_KEY = 'updater_last_checked'
LAST_DISMISSED_KEY = 'updater_last_dismissed'


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC so stored and current stamps compare."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CheckStateStore:
    """Key-value backing for :class:`CheckState`.

    Subclasses provide ``get``/``set``; values are ISO-8601 strings. Write
    errors propagate to the caller.
    """

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str):
        raise NotImplementedError

    def load(self) -> CheckState:
        return CheckState(
            last_checked_at=self._read_timestamp(LAST_CHECKED_KEY),
            last_dismissed_at=self._read_timestamp(LAST_DISMISSED_KEY),
        )

    def mark_checked(self, now: datetime):
        self.set(LAST_CHECKED_KEY, as_utc(now).isoformat())

    def mark_dismissed(self, now: datetime):
        self.set(LAST_DISMISSED_KEY, as_utc(now).isoformat())

    def _read_timestamp(self, key: str) -> datetime | None:
        raw = self.get(key)
        if not raw:
            return None
        try:
            return as_utc(datetime.fromisoformat(raw))
        except (TypeError, ValueError):
            logger.warning("Ignoring unparseable %s value: %r", key, raw)
            return None


class MemoryCheckStateStore(CheckStateStore):
    """In-process store; state lasts as long as the object."""

    def __init__(self, values: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str):
        self._values[key] = value


class JsonCheckStateStore(CheckStateStore):
    """Store backed by a small JSON object file, shared across restarts."""

    def __init__(self, path: str):
        self.path = path

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str):
        data = self._read_all()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        logger.debug("Saved %s to %s", key, self.path)

    def _read_all(self) -> dict:
        if not os.path.isfile(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load check state from %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Check state in %s is not an object, ignoring", self.path)
            return {}
        return data
