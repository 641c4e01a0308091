"""Shared formatting for exported documents."""

from __future__ import annotations

import re
from typing import Any

from resume_matcher.documents.models import Resume

_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def format_date(value: str | None) -> str:
    """Render ``YYYY-MM`` as ``Mon YYYY``; other values pass through."""
    if not value:
        return ""
    match = _YEAR_MONTH.match(value)
    if not match:
        return value
    month = int(match.group(2))
    if not 1 <= month <= 12:
        return value
    return f"{_MONTHS[month - 1]} {match.group(1)}"


def date_range(start: str | None, end: str | None, current: bool = False) -> str:
    """``Jan 2020 - Present`` style range."""
    end_label = "Present" if current else format_date(end)
    start_label = format_date(start)
    if start_label and end_label:
        return f"{start_label} - {end_label}"
    return start_label or end_label


def label(value: Any) -> str:
    """Title-case an enum value for display (``expert`` -> ``Expert``)."""
    text = getattr(value, "value", value)
    return str(text).replace("_", " ").capitalize()


def contact_line(resume: Resume) -> list[str]:
    """Non-empty contact details in display order."""
    info = resume.personal_info
    parts = [info.email, info.phone, info.location, info.linkedin, info.website]
    return [part for part in parts if part]


def sanitize_filename(name: str) -> str:
    """Lowercase, collapse runs of non-alphanumerics to '-', trim dashes."""
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


def export_filename(
    resume: Resume,
    extension: str,
    job_title: str | None = None,
    company: str | None = None,
) -> str:
    """Build ``<name>[-<job title>|-<company>].<ext>``.

    The job title takes precedence over the company; ``resume`` stands in
    for a blank name.
    """
    filename = sanitize_filename(resume.personal_info.name or "") or "resume"
    if job_title and sanitize_filename(job_title):
        filename += f"-{sanitize_filename(job_title)}"
    elif company and sanitize_filename(company):
        filename += f"-{sanitize_filename(company)}"
    return f"{filename}.{extension.lstrip('.')}"


def json_filename(resume: Resume) -> str:
    """``<name>-resume.json``."""
    name = sanitize_filename(resume.personal_info.name or "") or "resume"
    return f"{name}-resume.json"
