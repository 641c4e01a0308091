"""JSON export of the resume document."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from resume_matcher.documents.models import Resume
from resume_matcher.export.formatting import json_filename
from resume_matcher.export.models import RenderResult

logger = logging.getLogger(__name__)


def resume_to_json(resume: Resume) -> str:
    """Pretty-printed wire-format JSON, loadable by ``validate_resume``."""
    return json.dumps(resume.to_dict(), indent=2, ensure_ascii=False)


def export_json(resume: Resume, output_dir: Path | str) -> RenderResult:
    """Write ``<name>-resume.json`` into ``output_dir``."""
    try:
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        output_path = directory / json_filename(resume)
        output_path.write_text(resume_to_json(resume), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to export JSON: {e}")
        return RenderResult(success=False, error=str(e))

    logger.info(f"Exported resume to {output_path}")
    return RenderResult(success=True, file_path=str(output_path))
