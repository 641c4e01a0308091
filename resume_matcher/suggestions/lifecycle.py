"""Suggestion lifecycle: pending, accepted, rejected.

Each suggestion has three states:

    pending --accept--> accepted --undo--> pending   (patch applied / reverted)
    pending --reject--> rejected --undo--> pending   (resume untouched)

Only transitions that cross the accepted boundary call the patch engine.
Statuses live in memory; the caller persists the returned resume.
"""

from __future__ import annotations

import logging
from collections import Counter

from resume_matcher.config.settings import DriftPolicy
from resume_matcher.documents.models import (
    Resume,
    SectionType,
    Suggestion,
    SuggestionStatus,
    TailoringResult,
)
from resume_matcher.suggestions.patch import apply_suggestion, revert_suggestion

logger = logging.getLogger(__name__)


class InvalidTransitionError(Exception):
    """A lifecycle transition that is not allowed from the current state."""

    def __init__(self, suggestion_id: str, status: SuggestionStatus | None, action: str):
        state = status.value if status else "unknown"
        super().__init__(f"Cannot {action} suggestion {suggestion_id} ({state})")
        self.suggestion_id = suggestion_id
        self.status = status
        self.action = action


class SuggestionTracker:
    """Tracks suggestion statuses for one tailoring result."""

    def __init__(
        self,
        result: TailoringResult,
        drift_policy: DriftPolicy = DriftPolicy.REJECT,
    ) -> None:
        self.result = result
        self.drift_policy = drift_policy
        self._order = [s.id for s in result.suggestions]
        if len(set(self._order)) != len(self._order):
            raise ValueError("Tailoring result has duplicate suggestion ids")
        self._suggestions: dict[str, Suggestion] = {s.id: s for s in result.suggestions}

    def get(self, suggestion_id: str) -> Suggestion | None:
        return self._suggestions.get(suggestion_id)

    def status(self, suggestion_id: str) -> SuggestionStatus | None:
        suggestion = self._suggestions.get(suggestion_id)
        return suggestion.status if suggestion else None

    def _require(self, suggestion_id: str, action: str, allowed: set[SuggestionStatus]) -> Suggestion:
        suggestion = self._suggestions.get(suggestion_id)
        if suggestion is None:
            raise InvalidTransitionError(suggestion_id, None, action)
        if suggestion.status not in allowed:
            raise InvalidTransitionError(suggestion_id, suggestion.status, action)
        return suggestion

    def _set_status(self, suggestion: Suggestion, status: SuggestionStatus) -> None:
        self._suggestions[suggestion.id] = suggestion.model_copy(update={"status": status})
        logger.debug("Suggestion %s -> %s", suggestion.id, status.value)

    def accept(self, suggestion_id: str, resume: Resume) -> Resume:
        """Apply a pending suggestion and mark it accepted.

        Raises:
            InvalidTransitionError: If the suggestion is unknown or not pending.
            SuggestionDriftError: If the field was edited since the suggestion
                was made (status stays pending).
        """
        suggestion = self._require(suggestion_id, "accept", {SuggestionStatus.PENDING})
        updated = apply_suggestion(resume, suggestion, self.drift_policy)
        self._set_status(suggestion, SuggestionStatus.ACCEPTED)
        return updated

    def reject(self, suggestion_id: str, resume: Resume) -> Resume:
        """Mark a pending suggestion rejected. The resume is returned as-is."""
        suggestion = self._require(suggestion_id, "reject", {SuggestionStatus.PENDING})
        self._set_status(suggestion, SuggestionStatus.REJECTED)
        return resume

    def undo(self, suggestion_id: str, resume: Resume) -> Resume:
        """Return an accepted or rejected suggestion to pending.

        Undoing an accepted suggestion reverts its content; undoing a
        rejected one leaves the resume untouched.
        """
        suggestion = self._require(
            suggestion_id,
            "undo",
            {SuggestionStatus.ACCEPTED, SuggestionStatus.REJECTED},
        )
        updated = resume
        if suggestion.status == SuggestionStatus.ACCEPTED:
            updated = revert_suggestion(resume, suggestion, self.drift_policy)
        self._set_status(suggestion, SuggestionStatus.PENDING)
        return updated

    # Views

    @property
    def suggestions(self) -> list[Suggestion]:
        return [self._suggestions[sid] for sid in self._order]

    def _with_status(self, status: SuggestionStatus) -> list[Suggestion]:
        return [s for s in self.suggestions if s.status == status]

    def visible(self) -> list[Suggestion]:
        """Suggestions shown by default: everything not rejected."""
        return [s for s in self.suggestions if s.status != SuggestionStatus.REJECTED]

    def pending(self) -> list[Suggestion]:
        return self._with_status(SuggestionStatus.PENDING)

    def accepted(self) -> list[Suggestion]:
        return self._with_status(SuggestionStatus.ACCEPTED)

    def rejected(self) -> list[Suggestion]:
        return self._with_status(SuggestionStatus.REJECTED)

    def for_section(
        self,
        section: SectionType,
        item_id: str | None = None,
        field_prefix: str | None = None,
    ) -> list[Suggestion]:
        """Visible suggestions for one section, optionally one entity/field."""
        matches = []
        for s in self.visible():
            if s.section_type != section:
                continue
            if item_id is not None and s.item_id != item_id:
                continue
            if field_prefix is not None and not s.field.startswith(field_prefix):
                continue
            matches.append(s)
        return matches

    def summary(self) -> dict[str, int]:
        """Count of suggestions per status."""
        counts = Counter(s.status.value for s in self.suggestions)
        return {status.value: counts.get(status.value, 0) for status in SuggestionStatus}

    def snapshot(self) -> TailoringResult:
        """The tailoring result with current statuses."""
        return self.result.model_copy(update={"suggestions": self.suggestions})
