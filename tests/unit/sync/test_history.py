"""Tests for the job history."""

from __future__ import annotations

import json

from resume_matcher.documents.models import JobDescription, JobRequirements
from resume_matcher.sync.history import JobHistory
from resume_matcher.sync.storage import JOB_HISTORY_KEY, MemoryStore


def job(n: int) -> JobDescription:
    return JobDescription(description=f"Job posting {n}")


class TestJobHistory:
    def test_starts_empty(self):
        history = JobHistory(MemoryStore())
        assert history.entries == []
        assert len(history) == 0

    def test_newest_first(self):
        history = JobHistory(MemoryStore())
        history.add(job(1))
        history.add(job(2))

        assert [e.job_description.description for e in history.entries] == [
            "Job posting 2",
            "Job posting 1",
        ]

    def test_eleventh_entry_evicts_oldest(self):
        history = JobHistory(MemoryStore())
        for n in range(11):
            history.add(job(n))

        descriptions = [e.job_description.description for e in history.entries]
        assert len(descriptions) == 10
        assert descriptions[0] == "Job posting 10"
        assert "Job posting 0" not in descriptions

    def test_custom_limit(self):
        history = JobHistory(MemoryStore(), limit=2)
        for n in range(3):
            history.add(job(n))
        assert len(history) == 2

    def test_persists_to_store(self, sample_requirements_data):
        store = MemoryStore()
        requirements = JobRequirements.from_dict(sample_requirements_data)
        entry = JobHistory(store).add(job(1), requirements)

        reloaded = JobHistory(store)

        assert reloaded.entries == [entry]
        assert json.loads(store.get(JOB_HISTORY_KEY))[0]["jobDescription"]["description"] == (
            "Job posting 1"
        )

    def test_get_and_delete(self):
        history = JobHistory(MemoryStore())
        first = history.add(job(1))
        second = history.add(job(2))

        assert history.get(first.id) == first
        assert history.delete(first.id) is True
        assert history.delete(first.id) is False
        assert history.entries == [second]
        assert history.get(first.id) is None

    def test_clear_removes_key(self):
        store = MemoryStore()
        history = JobHistory(store)
        history.add(job(1))

        history.clear()

        assert history.entries == []
        assert store.get(JOB_HISTORY_KEY) is None

    def test_invalid_stored_history_is_discarded(self, caplog):
        store = MemoryStore({JOB_HISTORY_KEY: '[{"jobDescription": {"description": ""}}]'})

        history = JobHistory(store)

        assert history.entries == []
        assert "job history" in caplog.text

    def test_oversized_stored_history_is_truncated(self):
        store = MemoryStore()
        full = JobHistory(store, limit=20)
        for n in range(15):
            full.add(job(n))

        assert len(JobHistory(store)) == 10
