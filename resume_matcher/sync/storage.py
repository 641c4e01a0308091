"""Local key-value cache for the resume and job history.

The cache holds serialized documents under fixed keys, like browser local
storage: the resume and its last-modified timestamp are always read and
written as a pair.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from resume_matcher.documents.models import Resume
from resume_matcher.documents.validation import load_or_default, validate_resume

logger = logging.getLogger(__name__)

RESUME_KEY = "resume-matcher-resume-data"
RESUME_UPDATED_AT_KEY = "resume-matcher-resume-updated-at"
JOB_HISTORY_KEY = "resume-matcher-job-history"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring malformed timestamp: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class KeyValueStore(Protocol):
    """String key-value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-memory store, for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """A JSON object on disk, rewritten atomically on every change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        if not self.path.exists():
            self._data = {}
            return self._data
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Local cache %s is corrupt; starting empty", self.path)
            raw = {}
        if not isinstance(raw, dict):
            raw = {}
        self._data = {k: v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._load(), indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._load().pop(key, None) is not None:
            self._save()


@dataclass
class LocalSnapshot:
    """What the local cache holds: a resume and when it was last written."""

    resume: Resume | None = None
    updated_at: datetime | None = None


class LocalResumeCache:
    """Reads and writes the resume/timestamp pair in a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.clock = clock

    def read(self) -> LocalSnapshot:
        """Return the cached resume, or an empty snapshot if none is valid."""
        resume = load_or_default(
            self.store.get(RESUME_KEY),
            validate_resume,
            lambda: None,
            source="local cache",
        )
        if resume is None:
            return LocalSnapshot()
        updated_at = parse_timestamp(self.store.get(RESUME_UPDATED_AT_KEY))
        return LocalSnapshot(resume=resume, updated_at=updated_at)

    def write(self, resume: Resume, updated_at: datetime | None = None) -> datetime:
        """Store the resume stamped with ``updated_at`` (default: now)."""
        stamp = updated_at or self.clock()
        self.store.set(RESUME_KEY, json.dumps(resume.to_dict()))
        self.store.set(RESUME_UPDATED_AT_KEY, format_timestamp(stamp))
        return stamp

    def stamp(self, updated_at: datetime) -> None:
        """Replace only the timestamp, e.g. with the server's save time."""
        if self.store.get(RESUME_KEY) is None:
            return
        self.store.set(RESUME_UPDATED_AT_KEY, format_timestamp(updated_at))

    def clear(self) -> None:
        self.store.remove(RESUME_KEY)
        self.store.remove(RESUME_UPDATED_AT_KEY)
