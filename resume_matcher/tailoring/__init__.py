"""Job analysis and resume tailoring workflow.

Main Entry Point:
    TailoringService - analyze a job, tailor the resume, review suggestions

Example:
    from resume_matcher.tailoring import TailoringService

    service = TailoringService(synchronizer, gateway, history)
    analysis = await service.analyze(description)
    outcome = await service.tailor()
    for suggestion in service.tracker.pending():
        service.accept(suggestion.id)
"""

from resume_matcher.tailoring.service import TailoringService

__all__ = ["TailoringService"]
