"""Reading resumes from user-supplied files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from resume_matcher.documents.models import Resume
from resume_matcher.documents.validation import validate_resume


def load_resume_file(path: Path | str) -> Resume:
    """Load and validate a resume from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed or is not a mapping.
        DocumentValidationError: If the content is not a valid resume.
    """
    resume_path = Path(path)
    if not resume_path.exists():
        raise FileNotFoundError(f"Resume not found: {resume_path}")

    suffix = resume_path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = _load_yaml(resume_path)
    elif suffix == ".json":
        data = _load_json(resume_path)
    else:
        data = _load_unknown(resume_path)

    return validate_resume(data)


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML resume: {path}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Resume must be a mapping/dict: {path}")
    return data


def _load_json(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON resume: {path}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Resume must be a mapping/dict: {path}")
    return data


def _load_unknown(path: Path) -> dict[str, Any]:
    # Try JSON first, then YAML
    try:
        return _load_json(path)
    except ValueError:
        return _load_yaml(path)
