"""Result types returned by the AI gateway.

Gateway calls never raise for network or model failures: they return one of
these with ``success=False`` and a human-readable ``error``.
"""

from __future__ import annotations

from dataclasses import dataclass

from resume_matcher.documents.models import JobRequirements, TailoringResult


@dataclass
class JobAnalysisResult:
    """Result of analyzing a job description."""

    success: bool
    requirements: JobRequirements | None = None
    error: str | None = None
    warning: str | None = None


@dataclass
class TailoringOutcome:
    """Result of tailoring a resume against job requirements."""

    success: bool
    result: TailoringResult | None = None
    error: str | None = None


@dataclass
class ConnectionTestResult:
    """Result of probing a provider with the configured credentials."""

    success: bool
    message: str
    model_info: str | None = None
