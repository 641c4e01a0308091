"""Recently analyzed job descriptions, newest first."""

from __future__ import annotations

import json
import logging

from resume_matcher.documents.models import (
    MAX_JOB_HISTORY_ENTRIES,
    JobDescription,
    JobHistoryEntry,
    JobRequirements,
)
from resume_matcher.documents.validation import load_or_default, validate_job_history
from resume_matcher.sync.storage import JOB_HISTORY_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class JobHistory:
    """Bounded job history persisted in a KeyValueStore."""

    def __init__(self, store: KeyValueStore, limit: int = MAX_JOB_HISTORY_ENTRIES) -> None:
        self.store = store
        self.limit = limit
        self._entries: list[JobHistoryEntry] = load_or_default(
            store.get(JOB_HISTORY_KEY),
            validate_job_history,
            list,
            source="job history",
        )[:limit]

    @property
    def entries(self) -> list[JobHistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _save(self) -> None:
        payload = [entry.to_dict() for entry in self._entries]
        self.store.set(JOB_HISTORY_KEY, json.dumps(payload))

    def add(
        self,
        job_description: JobDescription,
        requirements: JobRequirements | None = None,
    ) -> JobHistoryEntry:
        """Record an analysis at the front, evicting the oldest past the limit."""
        entry = JobHistoryEntry(job_description=job_description, requirements=requirements)
        self._entries = [entry, *self._entries][: self.limit]
        self._save()
        logger.debug("Added job history entry %s (%d kept)", entry.id, len(self._entries))
        return entry

    def get(self, entry_id: str) -> JobHistoryEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def delete(self, entry_id: str) -> bool:
        """Remove an entry. Returns False if no entry has that id."""
        remaining = [entry for entry in self._entries if entry.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._entries = remaining
        self._save()
        return True

    def clear(self) -> None:
        self._entries = []
        self.store.remove(JOB_HISTORY_KEY)
