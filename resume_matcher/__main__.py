"""Main entry point for Resume Matcher."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from resume_matcher import __version__
from resume_matcher.config.settings import Settings
from resume_matcher.utils.logging import configure_logging

# The latest tailoring result is local-only, kept beside the resume cache
TAILORING_RESULT_KEY = "resume-matcher-tailoring-result"


def _read_description(path: Path | None) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="resume-matcher",
        description="Resume Matcher: tailor a resume to a job description with AI suggestions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  resume-matcher validate resume.yaml --save
  resume-matcher analyze job.txt --url https://www.linkedin.com/jobs/view/123
  resume-matcher tailor
  resume-matcher review --accept <suggestion-id>
  resume-matcher export pdf --job-title "Backend Engineer"
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="commands",
        description="Available commands",
    )

    # Validate / import
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a resume file (JSON or YAML)",
    )
    validate_parser.add_argument(
        "file",
        type=Path,
        help="Path to the resume file",
    )
    validate_parser.add_argument(
        "--save",
        action="store_true",
        help="Make the validated resume the working resume",
    )

    subparsers.add_parser(
        "show",
        help="Print the working resume as JSON",
    )

    # Analyze
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a job description into structured requirements",
    )
    analyze_parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        default=None,
        help="Text file with the job description (reads stdin if omitted)",
    )
    analyze_parser.add_argument(
        "--url",
        default=None,
        help="Link to the job posting (LinkedIn expected)",
    )

    # Tailor
    tailor_parser = subparsers.add_parser(
        "tailor",
        help="Tailor the working resume to an analyzed job",
    )
    tailor_parser.add_argument(
        "--history-id",
        default=None,
        help="Job history entry to tailor against (defaults to the most recent)",
    )

    # Review
    review_parser = subparsers.add_parser(
        "review",
        help="List, accept, reject or undo suggestions from the last tailoring run",
    )
    action_group = review_parser.add_mutually_exclusive_group()
    action_group.add_argument("--accept", metavar="ID", help="Apply a pending suggestion")
    action_group.add_argument("--reject", metavar="ID", help="Hide a pending suggestion")
    action_group.add_argument(
        "--undo",
        metavar="ID",
        help="Return an accepted or rejected suggestion to pending",
    )
    review_parser.add_argument(
        "--all",
        action="store_true",
        help="Include rejected suggestions in the listing",
    )

    # Export
    export_parser = subparsers.add_parser(
        "export",
        help="Export the working resume",
    )
    export_parser.add_argument(
        "format",
        choices=["json", "pdf", "docx"],
        help="Output format",
    )
    export_parser.add_argument("--job-title", default=None, help="Target job title for the filename")
    export_parser.add_argument("--company", default=None, help="Target company for the filename")
    export_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory (defaults to OUTPUT_DIR)",
    )

    # History
    history_parser = subparsers.add_parser(
        "history",
        help="Show or clear recently analyzed jobs",
    )
    history_parser.add_argument(
        "action",
        choices=["list", "clear"],
        nargs="?",
        default="list",
        help="History action (default: list)",
    )

    subparsers.add_parser(
        "check-ai",
        help="Test the configured AI provider credentials",
    )

    return parser


def _build_store(settings: Settings):
    from resume_matcher.sync.storage import JsonFileStore

    return JsonFileStore(settings.local_cache_path)


def _build_synchronizer(settings: Settings, store):
    from resume_matcher.sync.remote import HttpResumeStore
    from resume_matcher.sync.storage import LocalResumeCache
    from resume_matcher.sync.synchronizer import ResumeSynchronizer

    remote = None
    if settings.remote_url:
        remote = HttpResumeStore(
            settings.remote_url,
            session_cookie=settings.remote_session_cookie,
            timeout=settings.remote_timeout,
        )
    return ResumeSynchronizer(LocalResumeCache(store), remote=remote, settings=settings)


async def _shutdown(synchronizer) -> None:
    """Push anything still debounced, then release timers and connections."""
    result = await synchronizer.flush()
    if result is not None and not result.success:
        print(f"Warning: remote sync failed: {result.error}", file=sys.stderr)
    synchronizer.close()
    aclose = getattr(synchronizer.remote, "aclose", None)
    if aclose is not None:
        await aclose()


def _load_tailoring_result(store):
    from resume_matcher.documents.validation import load_or_default, validate_tailoring_result

    return load_or_default(
        store.get(TAILORING_RESULT_KEY),
        validate_tailoring_result,
        lambda: None,
        source="saved tailoring result",
    )


def _save_tailoring_result(store, result) -> None:
    store.set(TAILORING_RESULT_KEY, json.dumps(result.to_dict()))


def _print_suggestions(suggestions) -> None:
    for s in suggestions:
        target = s.section_type.value
        if s.item_id:
            target += f"[{s.item_id}]"
        print(f"[{s.status.value}] {s.id}  {target}.{s.field}")
        print(f"    - {s.original_content}")
        print(f"    + {s.suggested_content}")
        print(f"    ({s.reason})")


async def _validate(parsed, settings: Settings) -> int:
    from resume_matcher.documents.io import load_resume_file
    from resume_matcher.documents.validation import DocumentValidationError

    try:
        resume = load_resume_file(parsed.file)
    except DocumentValidationError as e:
        print(f"Invalid resume: {e}", file=sys.stderr)
        for issue in e.issues:
            print(f"  {issue['path'] or '<root>'}: {issue['message']}", file=sys.stderr)
        return 1
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    info = resume.personal_info
    print(f"Valid resume: {info.name or '(blank)'}")
    print(
        f"  {len(resume.experience)} experience, {len(resume.education)} education, "
        f"{len(resume.skills)} skills, {len(resume.projects)} projects"
    )

    if parsed.save:
        synchronizer = _build_synchronizer(settings, _build_store(settings))
        await synchronizer.load()
        synchronizer.set_resume(resume)
        await _shutdown(synchronizer)
        print(f"Saved as working resume ({synchronizer.status.value})")
    return 0


async def _show(settings: Settings) -> int:
    synchronizer = _build_synchronizer(settings, _build_store(settings))
    resume = await synchronizer.load()
    await _shutdown(synchronizer)
    _print_json(resume.to_dict())
    return 0


async def _analyze(parsed, settings: Settings) -> int:
    from resume_matcher.ai.gateway import LLMGateway
    from resume_matcher.sync.history import JobHistory
    from resume_matcher.tailoring.service import TailoringService

    try:
        description = _read_description(parsed.file)
    except OSError as e:
        print(f"Error reading job description: {e}", file=sys.stderr)
        return 1

    store = _build_store(settings)
    synchronizer = _build_synchronizer(settings, store)
    history = JobHistory(store, limit=settings.job_history_limit)
    service = TailoringService(synchronizer, LLMGateway(), history=history, settings=settings)

    analysis = await service.analyze(description, linkedin_url=parsed.url)
    if not analysis.success:
        print(f"Analysis failed: {analysis.error}", file=sys.stderr)
        return 1

    # A new job invalidates the previous suggestions
    store.remove(TAILORING_RESULT_KEY)
    if analysis.warning:
        print(f"Warning: {analysis.warning}", file=sys.stderr)
    _print_json(analysis.requirements.to_dict())
    print(f"Saved to history as {history.entries[0].id}")
    return 0


async def _tailor(parsed, settings: Settings) -> int:
    from resume_matcher.ai.gateway import LLMGateway
    from resume_matcher.sync.history import JobHistory
    from resume_matcher.tailoring.service import TailoringService

    store = _build_store(settings)
    history = JobHistory(store, limit=settings.job_history_limit)
    if parsed.history_id:
        entry = history.get(parsed.history_id)
        if entry is None:
            print(f"No job history entry {parsed.history_id}", file=sys.stderr)
            return 1
    elif history.entries:
        entry = history.entries[0]
    else:
        print("No analyzed jobs yet. Run 'analyze' first.", file=sys.stderr)
        return 1

    synchronizer = _build_synchronizer(settings, store)
    await synchronizer.load()
    service = TailoringService(synchronizer, LLMGateway(), history=history, settings=settings)
    service.use_history_entry(entry)

    try:
        outcome = await service.tailor()
    finally:
        await _shutdown(synchronizer)

    if not outcome.success:
        print(f"Tailoring failed: {outcome.error}", file=sys.stderr)
        return 1

    result = outcome.result
    _save_tailoring_result(store, result)

    print(f"Match score: {result.match_score}/100")
    if result.matched_skills:
        print("Matched: " + ", ".join(m.skill for m in result.matched_skills))
    if result.missing_skills:
        print("Missing: " + ", ".join(result.missing_skills))
    for strength in result.strengths:
        print(f"  + {strength}")
    for area in result.improvement_areas:
        print(f"  - {area}")
    print()
    _print_suggestions(result.suggestions)
    return 0


async def _review(parsed, settings: Settings) -> int:
    from resume_matcher.ai.gateway import LLMGateway
    from resume_matcher.suggestions.lifecycle import InvalidTransitionError, SuggestionTracker
    from resume_matcher.suggestions.patch import SuggestionDriftError
    from resume_matcher.tailoring.service import TailoringService

    store = _build_store(settings)
    result = _load_tailoring_result(store)
    if result is None:
        print("No tailoring result. Run 'tailor' first.", file=sys.stderr)
        return 1

    tracker = SuggestionTracker(result, drift_policy=settings.suggestion_drift_policy)
    if not (parsed.accept or parsed.reject or parsed.undo):
        _print_suggestions(tracker.suggestions if parsed.all else tracker.visible())
        counts = tracker.summary()
        print(", ".join(f"{count} {status}" for status, count in counts.items()))
        return 0

    synchronizer = _build_synchronizer(settings, store)
    await synchronizer.load()
    service = TailoringService(synchronizer, LLMGateway(), settings=settings)
    service.tracker = tracker

    try:
        if parsed.accept:
            service.accept(parsed.accept)
            print(f"Accepted {parsed.accept}")
        elif parsed.reject:
            service.reject(parsed.reject)
            print(f"Rejected {parsed.reject}")
        else:
            service.undo(parsed.undo)
            print(f"Restored {parsed.undo} to pending")
    except (InvalidTransitionError, SuggestionDriftError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await _shutdown(synchronizer)

    _save_tailoring_result(store, tracker.snapshot())
    return 0


async def _export(parsed, settings: Settings) -> int:
    synchronizer = _build_synchronizer(settings, _build_store(settings))
    resume = await synchronizer.load()
    await _shutdown(synchronizer)

    if resume.is_blank():
        print("Working resume is empty. Run 'validate FILE --save' first.", file=sys.stderr)
        return 1

    output_dir = parsed.output_dir or settings.output_dir
    if parsed.format == "json":
        from resume_matcher.export.json_export import export_json

        result = export_json(resume, output_dir)
    elif parsed.format == "docx":
        from resume_matcher.export.docx_renderer import DocxRenderer

        result = DocxRenderer(settings).render(
            resume, job_title=parsed.job_title, company=parsed.company, output_dir=output_dir
        )
    else:
        from resume_matcher.export.pdf_renderer import PDFRenderer

        result = PDFRenderer(settings).render(
            resume, job_title=parsed.job_title, company=parsed.company, output_dir=output_dir
        )

    if not result.success:
        print(f"Export failed: {result.error}", file=sys.stderr)
        return 1
    print(f"Wrote: {result.file_path}")
    return 0


def _history(parsed, settings: Settings) -> int:
    from resume_matcher.sync.history import JobHistory

    history = JobHistory(_build_store(settings), limit=settings.job_history_limit)
    if parsed.action == "clear":
        history.clear()
        print("Job history cleared")
        return 0

    if not history.entries:
        print("No analyzed jobs yet")
        return 0
    for entry in history.entries:
        requirements = entry.requirements
        title = (requirements.title if requirements else None) or "Untitled role"
        company = requirements.company if requirements and requirements.company else None
        heading = f"{title} at {company}" if company else title
        print(f"{entry.id}  {entry.created_at:%Y-%m-%d %H:%M}  {heading}")
    return 0


async def _check_ai() -> int:
    from resume_matcher.ai.gateway import LLMGateway

    result = await LLMGateway().check_connection()
    print(result.message)
    if result.model_info:
        print(result.model_info)
    return 0 if result.success else 1


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Load settings
    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Configure logging
    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    # If no command specified, show help
    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.debug(f"Resume Matcher v{__version__} running {parsed.mode}")

    if parsed.mode == "validate":
        return asyncio.run(_validate(parsed, settings))

    if parsed.mode == "show":
        return asyncio.run(_show(settings))

    if parsed.mode == "analyze":
        return asyncio.run(_analyze(parsed, settings))

    if parsed.mode == "tailor":
        return asyncio.run(_tailor(parsed, settings))

    if parsed.mode == "review":
        return asyncio.run(_review(parsed, settings))

    if parsed.mode == "export":
        return asyncio.run(_export(parsed, settings))

    if parsed.mode == "history":
        return _history(parsed, settings)

    if parsed.mode == "check-ai":
        return asyncio.run(_check_ai())

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
