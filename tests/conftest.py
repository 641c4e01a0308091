"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from resume_matcher.documents.models import Resume, Suggestion
from resume_matcher.sync.remote import RemoteSnapshot, SaveResult


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Every test starts from fresh settings and an unconfigured logger."""
    from resume_matcher.ai.config import reset_ai_config
    from resume_matcher.config.settings import reset_settings
    from resume_matcher.utils.logging import reset_logging

    reset_settings()
    reset_ai_config()
    yield
    reset_settings()
    reset_ai_config()
    reset_logging()


@pytest.fixture
def sample_resume_data() -> dict:
    """A complete resume in wire format."""
    return {
        "personalInfo": {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "location": "Berlin, Germany",
            "linkedin": "https://www.linkedin.com/in/janedoe",
            "website": "",
            "summary": "Backend engineer with eight years of Python.",
        },
        "experience": [
            {
                "id": "exp-1",
                "title": "Senior Engineer",
                "company": "Acme",
                "location": "Remote",
                "startDate": "2020-01",
                "endDate": "",
                "current": True,
                "description": "Built the billing platform.",
                "highlights": ["Led a team of 4", "Cut latency by 40%"],
            },
            {
                "id": "exp-2",
                "title": "Engineer",
                "company": "Initech",
                "startDate": "2016-06",
                "endDate": "2019-12",
                "highlights": ["Maintained TPS reports"],
            },
        ],
        "education": [
            {
                "id": "edu-1",
                "degree": "BSc Computer Science",
                "institution": "TU Berlin",
                "graduationDate": "2016-05",
                "gpa": "1.7",
            }
        ],
        "skills": [
            {"id": "skill-1", "name": "Python", "proficiency": "expert"},
            {"id": "skill-2", "name": "PostgreSQL", "proficiency": "advanced"},
        ],
        "languages": [{"id": "lang-1", "name": "German", "proficiency": "native"}],
        "certifications": [
            {"id": "cert-1", "name": "AWS Solutions Architect", "issuer": "Amazon", "date": "2022-03"}
        ],
        "projects": [
            {
                "id": "proj-1",
                "name": "queue-lite",
                "description": "A tiny job queue.",
                "url": "https://github.com/jane/queue-lite",
                "technologies": ["Python", "Redis"],
                "highlights": ["500 stars"],
            }
        ],
        "openSource": [
            {
                "id": "oss-1",
                "project": "httpx",
                "role": "contributor",
                "description": "Bug fixes.",
                "contributions": ["Fixed proxy handling"],
            }
        ],
    }


@pytest.fixture
def sample_resume(sample_resume_data) -> Resume:
    return Resume.from_dict(sample_resume_data)


@pytest.fixture
def sample_requirements_data() -> dict:
    return {
        "title": "Staff Backend Engineer",
        "company": "Globex",
        "requiredSkills": ["Python", "Kubernetes"],
        "preferredSkills": ["Go"],
        "qualifications": ["5+ years backend"],
        "experienceYears": {"min": 5, "max": 10},
        "responsibilities": ["Own the payments service"],
        "benefits": ["Remote"],
        "keywords": ["distributed systems"],
    }


@pytest.fixture
def sample_tailoring_data() -> dict:
    """Tailoring result with one suggestion per addressing style."""
    return {
        "matchScore": 72,
        "matchedSkills": [
            {"skill": "Python", "matchType": "exact", "fromResume": "Python", "isRequired": True}
        ],
        "missingSkills": ["Kubernetes"],
        "suggestions": [
            {
                "id": "s-summary",
                "sectionType": "summary",
                "field": "summary",
                "originalContent": "Backend engineer with eight years of Python.",
                "suggestedContent": "Backend engineer focused on payments at scale.",
                "reason": "Mirrors the role",
            },
            {
                "id": "s-highlight",
                "sectionType": "experience",
                "itemId": "exp-1",
                "field": "highlights.1",
                "originalContent": "Cut latency by 40%",
                "suggestedContent": "Cut p99 payment latency by 40%",
                "reason": "Quantify impact on payments",
            },
            {
                "id": "s-description",
                "sectionType": "experience",
                "itemId": "exp-1",
                "field": "description",
                "originalContent": "Built the billing platform.",
                "suggestedContent": "Built the billing platform on Kubernetes.",
                "reason": "Mentions a required skill",
            },
        ],
        "strengths": ["Strong Python"],
        "improvementAreas": ["No Kubernetes"],
    }


@pytest.fixture
def make_suggestion():
    """Build a Suggestion with sensible defaults."""

    def _make(**overrides) -> Suggestion:
        data = {
            "id": "s-1",
            "sectionType": "experience",
            "itemId": "exp-1",
            "field": "description",
            "originalContent": "Built the billing platform.",
            "suggestedContent": "Built the billing platform on Kubernetes.",
            "reason": "Mentions a required skill",
        }
        data.update(overrides)
        return Suggestion.from_dict(data)

    return _make


class FakeRemoteStore:
    """In-memory RemoteResumeStore that records every save."""

    def __init__(
        self,
        resume: Resume | None = None,
        updated_at: datetime | None = None,
        unauthorized: bool = False,
        fetch_error: str | None = None,
    ) -> None:
        self.resume = resume
        self.updated_at = updated_at
        self.unauthorized = unauthorized
        self.fetch_error = fetch_error
        self.save_error: str | None = None
        self.saved: list[Resume] = []
        self.clock = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    async def fetch(self) -> RemoteSnapshot:
        if self.unauthorized:
            return RemoteSnapshot(unauthorized=True)
        if self.fetch_error:
            return RemoteSnapshot(error=self.fetch_error)
        return RemoteSnapshot(resume=self.resume, updated_at=self.updated_at)

    async def save(self, resume: Resume) -> SaveResult:
        if self.save_error:
            return SaveResult(success=False, error=self.save_error)
        self.saved.append(resume)
        self.resume = resume
        self.updated_at = self.clock
        return SaveResult(success=True, updated_at=self.clock)


@pytest.fixture
def fake_remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and pointed at tmp_path."""
    from resume_matcher.config.settings import Settings

    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        data_dir=tmp_path / "data",
        local_cache_path=tmp_path / "data" / "cache.json",
        output_dir=tmp_path / "out",
        server_db_path=tmp_path / "data" / "resumes.db",
        remote_url=None,
    )
