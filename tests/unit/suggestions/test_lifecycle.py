"""Tests for the suggestion lifecycle state machine."""

from __future__ import annotations

import pytest

from resume_matcher.config.settings import DriftPolicy
from resume_matcher.documents.models import SectionType, SuggestionStatus, TailoringResult
from resume_matcher.suggestions.lifecycle import InvalidTransitionError, SuggestionTracker
from resume_matcher.suggestions.patch import SuggestionDriftError, edit_field


@pytest.fixture
def tracker(sample_tailoring_data) -> SuggestionTracker:
    return SuggestionTracker(TailoringResult.from_dict(sample_tailoring_data))


class TestTransitions:
    def test_all_start_pending(self, tracker):
        assert [s.status for s in tracker.suggestions] == [SuggestionStatus.PENDING] * 3
        assert tracker.summary() == {"pending": 3, "accepted": 0, "rejected": 0}

    def test_accept_applies_and_marks_accepted(self, tracker, sample_resume):
        updated = tracker.accept("s-description", sample_resume)

        assert updated.experience[0].description == "Built the billing platform on Kubernetes."
        assert tracker.status("s-description") == SuggestionStatus.ACCEPTED

    def test_reject_leaves_resume_untouched(self, tracker, sample_resume):
        updated = tracker.reject("s-summary", sample_resume)

        assert updated is sample_resume
        assert tracker.status("s-summary") == SuggestionStatus.REJECTED

    def test_undo_accepted_restores_original(self, tracker, sample_resume):
        accepted = tracker.accept("s-highlight", sample_resume)

        restored = tracker.undo("s-highlight", accepted)

        assert restored.experience[0].highlights[1] == "Cut latency by 40%"
        assert restored == sample_resume
        assert tracker.status("s-highlight") == SuggestionStatus.PENDING

    def test_undo_rejected_returns_to_pending(self, tracker, sample_resume):
        tracker.reject("s-summary", sample_resume)

        updated = tracker.undo("s-summary", sample_resume)

        assert updated is sample_resume
        assert tracker.status("s-summary") == SuggestionStatus.PENDING

    def test_accept_after_undo(self, tracker, sample_resume):
        resume = tracker.accept("s-summary", sample_resume)
        resume = tracker.undo("s-summary", resume)
        resume = tracker.accept("s-summary", resume)

        assert resume.personal_info.summary == "Backend engineer focused on payments at scale."

    @pytest.mark.parametrize("action", ["accept", "reject"])
    def test_cannot_act_twice(self, tracker, sample_resume, action):
        getattr(tracker, action)("s-summary", sample_resume)

        with pytest.raises(InvalidTransitionError):
            getattr(tracker, action)("s-summary", sample_resume)

    def test_cannot_reject_accepted(self, tracker, sample_resume):
        resume = tracker.accept("s-summary", sample_resume)

        with pytest.raises(InvalidTransitionError) as exc_info:
            tracker.reject("s-summary", resume)

        assert exc_info.value.status == SuggestionStatus.ACCEPTED
        assert exc_info.value.action == "reject"

    def test_cannot_undo_pending(self, tracker, sample_resume):
        with pytest.raises(InvalidTransitionError):
            tracker.undo("s-summary", sample_resume)

    def test_unknown_suggestion(self, tracker, sample_resume):
        with pytest.raises(InvalidTransitionError, match="unknown"):
            tracker.accept("missing", sample_resume)

    def test_rejects_result_with_duplicate_ids(self, sample_tailoring_data, make_suggestion):
        valid = TailoringResult.from_dict(sample_tailoring_data)
        unchecked = TailoringResult.model_construct(
            match_score=valid.match_score,
            suggestions=[make_suggestion(), make_suggestion(field="title")],
        )

        with pytest.raises(ValueError, match="duplicate suggestion ids"):
            SuggestionTracker(unchecked)

    def test_drift_keeps_suggestion_pending(self, tracker, sample_resume):
        edited = edit_field(sample_resume, "experience", "description", "Hand edit", "exp-1")

        with pytest.raises(SuggestionDriftError):
            tracker.accept("s-description", edited)

        assert tracker.status("s-description") == SuggestionStatus.PENDING

    def test_overwrite_policy(self, sample_tailoring_data, sample_resume):
        tracker = SuggestionTracker(
            TailoringResult.from_dict(sample_tailoring_data),
            drift_policy=DriftPolicy.OVERWRITE,
        )
        edited = edit_field(sample_resume, "experience", "description", "Hand edit", "exp-1")

        updated = tracker.accept("s-description", edited)

        assert updated.experience[0].description == "Built the billing platform on Kubernetes."


class TestViews:
    def test_visible_hides_rejected(self, tracker, sample_resume):
        tracker.reject("s-summary", sample_resume)

        assert [s.id for s in tracker.visible()] == ["s-highlight", "s-description"]
        assert [s.id for s in tracker.rejected()] == ["s-summary"]

    def test_status_lists_are_exclusive(self, tracker, sample_resume):
        resume = tracker.accept("s-highlight", sample_resume)
        tracker.reject("s-summary", resume)

        pending = {s.id for s in tracker.pending()}
        accepted = {s.id for s in tracker.accepted()}
        rejected = {s.id for s in tracker.rejected()}

        assert pending == {"s-description"}
        assert accepted == {"s-highlight"}
        assert rejected == {"s-summary"}
        assert tracker.summary() == {"pending": 1, "accepted": 1, "rejected": 1}

    def test_for_section(self, tracker):
        experience = tracker.for_section(SectionType.EXPERIENCE, item_id="exp-1")
        assert [s.id for s in experience] == ["s-highlight", "s-description"]

        highlights = tracker.for_section(
            SectionType.EXPERIENCE, item_id="exp-1", field_prefix="highlights"
        )
        assert [s.id for s in highlights] == ["s-highlight"]

        assert tracker.for_section(SectionType.EXPERIENCE, item_id="exp-2") == []

    def test_snapshot_carries_statuses(self, tracker, sample_resume):
        tracker.accept("s-summary", sample_resume)

        snapshot = tracker.snapshot()

        assert snapshot.get_suggestion("s-summary").status == SuggestionStatus.ACCEPTED
        assert snapshot.match_score == 72
        assert tracker.result.get_suggestion("s-summary").status == SuggestionStatus.PENDING
