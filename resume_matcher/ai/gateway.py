"""AI gateway: job description analysis and resume tailoring.

The gateway validates inputs, calls the configured provider through
``LLMClient`` and validates the reply against the document model. It never
raises for provider or parsing failures; callers get a typed result.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from resume_matcher.ai.config import AIConfig, get_ai_config
from resume_matcher.ai.llm import LLMClient, LLMError
from resume_matcher.ai.models import ConnectionTestResult, JobAnalysisResult, TailoringOutcome
from resume_matcher.ai.prompts import (
    JOB_ANALYSIS_SYSTEM_PROMPT,
    TAILORING_SYSTEM_PROMPT,
    build_job_analysis_prompt,
    build_tailoring_prompt,
)
from resume_matcher.ai.providers import ProviderBackend, get_backend
from resume_matcher.documents.models import JobRequirements, Resume, generate_id
from resume_matcher.documents.validation import (
    DocumentValidationError,
    validate_job_requirements,
    validate_tailoring_result,
)

logger = logging.getLogger(__name__)

_REQUIREMENT_LISTS = (
    "requiredSkills",
    "preferredSkills",
    "qualifications",
    "responsibilities",
    "benefits",
    "keywords",
)
_RESULT_LISTS = (
    "matchedSkills",
    "missingSkills",
    "suggestions",
    "strengths",
    "improvementAreas",
)


class AIGateway(Protocol):
    """What the rest of the application needs from an AI provider."""

    async def analyze_job(self, description: str) -> JobAnalysisResult: ...

    async def tailor(self, resume: Resume, requirements: JobRequirements) -> TailoringOutcome: ...

    async def check_connection(self) -> ConnectionTestResult: ...


def _schema_error(label: str, error: DocumentValidationError) -> str:
    details = "; ".join(
        f"{issue['path'] or '<root>'}: {issue['message']}" for issue in error.issues[:5]
    )
    return f"AI response is not a valid {label}: {details}"


def normalize_requirements_payload(data: dict[str, Any]) -> dict[str, Any]:
    """Replace null lists with empty ones."""
    normalized = dict(data)
    for key in _REQUIREMENT_LISTS:
        if normalized.get(key) is None:
            normalized[key] = []
    return normalized


def normalize_tailoring_payload(data: dict[str, Any]) -> dict[str, Any]:
    """Fill the fields models commonly leave out.

    Suggestions without an id, or repeating an earlier one, get a fresh id
    and default to pending; matched skills default to required.
    """
    normalized = dict(data)
    for key in _RESULT_LISTS:
        if normalized.get(key) is None:
            normalized[key] = []

    suggestions = []
    seen_ids: set[str] = set()
    for raw in normalized["suggestions"]:
        if isinstance(raw, dict):
            suggestion_id = raw.get("id")
            if not isinstance(suggestion_id, str) or not suggestion_id or suggestion_id in seen_ids:
                suggestion_id = generate_id()
            seen_ids.add(suggestion_id)
            raw = {**raw, "id": suggestion_id, "status": raw.get("status") or "pending"}
        suggestions.append(raw)
    normalized["suggestions"] = suggestions

    matched = []
    for raw in normalized["matchedSkills"]:
        if isinstance(raw, dict) and raw.get("isRequired") is None:
            raw = {**raw, "isRequired": True}
        matched.append(raw)
    normalized["matchedSkills"] = matched
    return normalized


class LLMGateway:
    """AIGateway backed by LiteLLM and the configured provider."""

    def __init__(
        self,
        config: AIConfig | None = None,
        llm: LLMClient | None = None,
        backend: ProviderBackend | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or get_ai_config()
        self.backend = backend or get_backend(self.config)
        self.llm = llm or LLMClient(self.config, self.backend)
        self.http_client = http_client

    async def analyze_job(self, description: str) -> JobAnalysisResult:
        """Extract structured requirements from a job description."""
        if not description.strip():
            return JobAnalysisResult(success=False, error="Job description is empty")
        if len(description) > self.config.max_description_length:
            return JobAnalysisResult(
                success=False,
                error=(
                    "Job description is too long "
                    f"(max {self.config.max_description_length} characters)"
                ),
            )
        missing = self.backend.missing_credentials()
        if missing:
            return JobAnalysisResult(success=False, error=missing)

        logger.info("Analyzing job description with %s", self.backend.provider.value)
        try:
            data = await self.llm.generate_json(
                build_job_analysis_prompt(description),
                system_prompt=JOB_ANALYSIS_SYSTEM_PROMPT,
                max_tokens=self.config.analyze_max_tokens,
            )
        except LLMError as e:
            logger.error("Job analysis failed: %s", e)
            return JobAnalysisResult(success=False, error=str(e))

        try:
            requirements = validate_job_requirements(normalize_requirements_payload(data))
        except DocumentValidationError as e:
            logger.error("Job analysis returned invalid data: %s", e)
            return JobAnalysisResult(success=False, error=_schema_error("job analysis", e))

        warning = None
        years = requirements.experience_years
        if years and years.min is not None and years.max is not None and years.min > years.max:
            warning = f"Experience range looks inverted ({years.min:g} > {years.max:g})"
        return JobAnalysisResult(success=True, requirements=requirements, warning=warning)

    async def tailor(self, resume: Resume, requirements: JobRequirements) -> TailoringOutcome:
        """Score the resume against the requirements and propose edits."""
        if not resume.personal_info.name:
            return TailoringOutcome(success=False, error="Resume is missing personal information")
        if requirements.is_empty():
            return TailoringOutcome(
                success=False,
                error="Job requirements are empty. Please analyze a job description first.",
            )
        missing = self.backend.missing_credentials()
        if missing:
            return TailoringOutcome(success=False, error=missing)

        logger.info("Tailoring resume with %s", self.backend.provider.value)
        try:
            data = await self.llm.generate_json(
                build_tailoring_prompt(resume, requirements),
                system_prompt=TAILORING_SYSTEM_PROMPT,
                max_tokens=self.config.tailor_max_tokens,
            )
        except LLMError as e:
            logger.error("Tailoring failed: %s", e)
            return TailoringOutcome(success=False, error=str(e))

        try:
            result = validate_tailoring_result(normalize_tailoring_payload(data))
        except DocumentValidationError as e:
            logger.error("Tailoring returned invalid data: %s", e)
            return TailoringOutcome(success=False, error=_schema_error("tailoring result", e))

        logger.info(
            "Tailoring complete: score %d, %d suggestion(s)",
            result.match_score,
            len(result.suggestions),
        )
        return TailoringOutcome(success=True, result=result)

    async def check_connection(self) -> ConnectionTestResult:
        """Probe the configured provider with the configured credentials."""
        if self.http_client is not None:
            return await self.backend.check_connection(self.http_client)
        async with httpx.AsyncClient(timeout=self.config.timeout) as client:
            return await self.backend.check_connection(client)
