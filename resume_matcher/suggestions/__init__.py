"""Suggestion patching and lifecycle.

Public API:
- apply_suggestion / revert_suggestion: install suggested or original content
- edit_field: direct inline edits through the same address resolution
- SuggestionTracker: pending/accepted/rejected state machine
"""

from resume_matcher.suggestions.lifecycle import InvalidTransitionError, SuggestionTracker
from resume_matcher.suggestions.patch import (
    SECTION_COLLECTIONS,
    SuggestionDriftError,
    apply_suggestion,
    edit_field,
    revert_suggestion,
)

__all__ = [
    "SuggestionTracker",
    "InvalidTransitionError",
    "SuggestionDriftError",
    "SECTION_COLLECTIONS",
    "apply_suggestion",
    "revert_suggestion",
    "edit_field",
]
