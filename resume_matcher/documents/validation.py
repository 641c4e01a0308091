"""Boundary validation for resume documents.

Every document that crosses a boundary (local cache, remote store, file
upload, AI response) is checked here before the rest of the application
sees it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from resume_matcher.documents.models import (
    JobDescription,
    JobHistoryEntry,
    JobRequirements,
    Resume,
    TailoringResult,
    empty_resume,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COLLECTIONS = (
    "experience",
    "education",
    "skills",
    "languages",
    "certifications",
    "projects",
    "openSource",
)

_HISTORY_ADAPTER = TypeAdapter(list[JobHistoryEntry])


class DocumentValidationError(Exception):
    """Raised when a document fails validation.

    Attributes:
        issues: One ``{"path": ..., "message": ...}`` dict per problem.
    """

    def __init__(self, message: str, issues: list[dict[str, str]] | None = None):
        super().__init__(message)
        self.issues = issues or []

    @classmethod
    def from_pydantic(cls, label: str, error: ValidationError) -> DocumentValidationError:
        issues = [
            {
                "path": ".".join(str(part) for part in item["loc"]),
                "message": item["msg"],
            }
            for item in error.errors()
        ]
        return cls(f"Invalid {label}: {len(issues)} issue(s)", issues)


def _coerce(raw: Any, label: str) -> Any:
    """Accept a JSON string or an already-parsed structure."""
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise DocumentValidationError(
                f"Invalid {label}: not valid JSON",
                [{"path": "", "message": str(e)}],
            ) from e
    if isinstance(raw, BaseModel):
        return raw.model_dump(by_alias=True)
    return raw


def _validate_model(model: type[BaseModel], raw: Any, label: str) -> Any:
    data = _coerce(raw, label)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DocumentValidationError.from_pydantic(label, e) from e


def _is_blank_payload(data: Any) -> bool:
    """True for the blank resume: empty personal info and no entities."""
    if not isinstance(data, Mapping):
        return False
    personal = data.get("personalInfo", data.get("personal_info"))
    if not isinstance(personal, Mapping):
        return False
    if any(value not in (None, "") for value in personal.values()):
        return False
    for key in _COLLECTIONS:
        value = data.get(key)
        if value is None and key == "openSource":
            value = data.get("open_source")
        if value:
            return False
    return True


def validate_resume(raw: Any) -> Resume:
    """Validate an untrusted resume payload.

    Args:
        raw: A mapping, a JSON string or a Resume.

    Returns:
        The validated Resume. The blank resume (every personal field empty,
        every collection empty) is accepted as-is.

    Raises:
        DocumentValidationError: If any required field is missing or empty,
            a URL is malformed, or an enum value is out of range.
    """
    data = _coerce(raw, "resume")
    try:
        return Resume.model_validate(data)
    except ValidationError as e:
        if _is_blank_payload(data):
            return empty_resume()
        raise DocumentValidationError.from_pydantic("resume", e) from e


def validate_job_description(raw: Any) -> JobDescription:
    return _validate_model(JobDescription, raw, "job description")


def validate_job_requirements(raw: Any) -> JobRequirements:
    """Validate requirements, warning when the experience range is inverted."""
    requirements = _validate_model(JobRequirements, raw, "job requirements")
    years = requirements.experience_years
    if years and years.min is not None and years.max is not None and years.min > years.max:
        logger.warning(
            "Experience range has min > max (%s > %s); keeping as given",
            years.min,
            years.max,
        )
    return requirements


def validate_tailoring_result(raw: Any) -> TailoringResult:
    return _validate_model(TailoringResult, raw, "tailoring result")


def validate_job_history(raw: Any) -> list[JobHistoryEntry]:
    data = _coerce(raw, "job history")
    try:
        return _HISTORY_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise DocumentValidationError.from_pydantic("job history", e) from e


def load_or_default(
    raw: Any,
    validator: Callable[[Any], T],
    default: Callable[[], T],
    source: str = "input",
) -> T:
    """Validate ``raw`` and fall back to ``default()`` on failure.

    Missing data (``None``) yields the default silently; invalid data also
    yields the default but logs a warning naming ``source``.
    """
    if raw is None:
        return default()
    try:
        return validator(raw)
    except DocumentValidationError as e:
        logger.warning("Discarding invalid data from %s: %s", source, e)
        for issue in e.issues:
            logger.debug("  %s: %s", issue["path"] or "<root>", issue["message"])
        return default()
