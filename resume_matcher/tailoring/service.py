"""Main Tailoring Service.

Orchestrates the workflow from a pasted job description to an edited resume:

1. Analyze the job description into structured requirements
2. Tailor the working resume against them (match score + suggestions)
3. Accept, reject or undo suggestions one at a time

Every resume change goes through the synchronizer, so it reaches the local
cache immediately and the remote store after the debounce window.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from resume_matcher.ai.gateway import AIGateway
from resume_matcher.ai.models import JobAnalysisResult, TailoringOutcome
from resume_matcher.config.settings import Settings, get_settings
from resume_matcher.documents.models import (
    JobDescription,
    JobHistoryEntry,
    JobRequirements,
    Resume,
)
from resume_matcher.suggestions.lifecycle import SuggestionTracker
from resume_matcher.suggestions.patch import edit_field
from resume_matcher.sync.history import JobHistory
from resume_matcher.sync.synchronizer import ResumeSynchronizer

logger = logging.getLogger(__name__)


class TailoringService:
    """Ties the AI gateway, suggestion tracker and synchronizer together."""

    def __init__(
        self,
        synchronizer: ResumeSynchronizer,
        gateway: AIGateway,
        history: JobHistory | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the tailoring service.

        Args:
            synchronizer: Owner of the working resume; must be loaded.
            gateway: AI gateway used for analysis and tailoring.
            history: Optional job history that records each analysis.
            settings: Optional Settings. Uses global settings if not provided.
        """
        self.synchronizer = synchronizer
        self.gateway = gateway
        self.history = history
        self.settings = settings or get_settings()

        self.job: JobDescription | None = None
        self.requirements: JobRequirements | None = None
        self.tracker: SuggestionTracker | None = None

    @property
    def resume(self) -> Resume:
        return self.synchronizer.resume

    async def analyze(self, description: str, linkedin_url: str | None = None) -> JobAnalysisResult:
        """Analyze a job description and remember it in the history.

        Args:
            description: The pasted job posting.
            linkedin_url: Optional link to the posting.

        Returns:
            JobAnalysisResult with the requirements or an error.
        """
        result = await self.gateway.analyze_job(description)
        if not result.success:
            return result

        warnings = [result.warning] if result.warning else []
        try:
            job = JobDescription(description=description, linkedin_url=linkedin_url or None)
        except ValidationError:
            warnings.append(f"Ignoring invalid job URL: {linkedin_url}")
            job = JobDescription(description=description)
        url_warning = job.url_warning()
        if url_warning:
            warnings.append(url_warning)

        self.job = job
        self.requirements = result.requirements
        self.tracker = None
        if self.history is not None:
            self.history.add(job, result.requirements)

        result.warning = "; ".join(warnings) or None
        return result

    def use_history_entry(self, entry: JobHistoryEntry) -> None:
        """Make a remembered analysis the current job."""
        self.job = entry.job_description
        self.requirements = entry.requirements
        self.tracker = None

    async def tailor(self, requirements: JobRequirements | None = None) -> TailoringOutcome:
        """Tailor the working resume. Any previous suggestions are discarded.

        Args:
            requirements: Requirements to tailor against. Defaults to the
                last analysis.
        """
        self.tracker = None
        requirements = requirements or self.requirements
        if requirements is None:
            return TailoringOutcome(
                success=False,
                error="Job requirements are empty. Please analyze a job description first.",
            )

        outcome = await self.gateway.tailor(self.synchronizer.resume, requirements)
        if outcome.success and outcome.result is not None:
            self.requirements = requirements
            self.tracker = SuggestionTracker(
                outcome.result, drift_policy=self.settings.suggestion_drift_policy
            )
        return outcome

    def _require_tracker(self) -> SuggestionTracker:
        if self.tracker is None:
            raise RuntimeError("No tailoring result; run tailor() first")
        return self.tracker

    def accept(self, suggestion_id: str) -> Resume:
        """Apply a suggestion to the working resume."""
        updated = self._require_tracker().accept(suggestion_id, self.synchronizer.resume)
        self.synchronizer.set_resume(updated)
        return updated

    def reject(self, suggestion_id: str) -> Resume:
        """Hide a suggestion without touching the resume."""
        return self._require_tracker().reject(suggestion_id, self.synchronizer.resume)

    def undo(self, suggestion_id: str) -> Resume:
        """Return a suggestion to pending, reverting it if it was accepted."""
        updated = self._require_tracker().undo(suggestion_id, self.synchronizer.resume)
        self.synchronizer.set_resume(updated)
        return updated

    def edit(
        self,
        section: str,
        field: str,
        value: str,
        item_id: str | None = None,
    ) -> Resume:
        """Edit one field of the working resume directly."""
        updated = edit_field(self.synchronizer.resume, section, field, value, item_id)
        self.synchronizer.set_resume(updated)
        return updated
