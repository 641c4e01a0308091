"""DOCX export using python-docx."""

from __future__ import annotations

import logging
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from resume_matcher.config.settings import Settings, get_settings
from resume_matcher.documents.models import Resume
from resume_matcher.export.formatting import (
    contact_line,
    date_range,
    export_filename,
    format_date,
    label,
)
from resume_matcher.export.models import RenderResult

logger = logging.getLogger(__name__)

_MUTED = RGBColor(0x55, 0x55, 0x55)


class DocxRenderer:
    """Builds a Word document from a resume."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def build_document(self, resume: Resume):
        """Return a python-docx Document for the resume."""
        document = Document()
        style = document.styles["Normal"]
        style.font.name = "Calibri"
        style.font.size = Pt(10)

        info = resume.personal_info
        title = document.add_heading(info.name or "Resume", level=0)
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER

        contacts = contact_line(resume)
        if contacts:
            paragraph = document.add_paragraph(" | ".join(contacts))
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER

        if info.summary:
            self._section(document, "Summary")
            document.add_paragraph(info.summary)

        if resume.experience:
            self._section(document, "Experience")
            for job in resume.experience:
                self._entry(
                    document,
                    job.title,
                    date_range(job.start_date, job.end_date, job.current),
                )
                company = job.company + (f", {job.location}" if job.location else "")
                self._subtitle(document, company)
                if job.description:
                    document.add_paragraph(job.description)
                self._bullets(document, job.highlights)

        if resume.education:
            self._section(document, "Education")
            for school in resume.education:
                self._entry(document, school.degree, format_date(school.graduation_date))
                details = school.institution
                if school.location:
                    details += f", {school.location}"
                if school.gpa:
                    details += f" | GPA {school.gpa}"
                self._subtitle(document, details)

        if resume.skills:
            self._section(document, "Skills")
            document.add_paragraph(
                ", ".join(f"{skill.name} ({label(skill.proficiency)})" for skill in resume.skills)
            )

        if resume.projects:
            self._section(document, "Projects")
            for project in resume.projects:
                self._entry(document, project.name, project.url or "")
                if project.description:
                    document.add_paragraph(project.description)
                if project.technologies:
                    self._subtitle(document, ", ".join(project.technologies))
                self._bullets(document, project.highlights)

        if resume.open_source:
            self._section(document, "Open Source")
            for contribution in resume.open_source:
                self._entry(document, contribution.project, label(contribution.role))
                if contribution.description:
                    document.add_paragraph(contribution.description)
                self._bullets(document, contribution.contributions)

        if resume.certifications:
            self._section(document, "Certifications")
            for cert in resume.certifications:
                text = f"{cert.name}, {cert.issuer}"
                if cert.date:
                    text += f" ({format_date(cert.date)})"
                document.add_paragraph(text, style="List Bullet")

        if resume.languages:
            self._section(document, "Languages")
            document.add_paragraph(
                ", ".join(
                    f"{language.name} ({label(language.proficiency)})"
                    for language in resume.languages
                )
            )

        return document

    def _section(self, document, title: str) -> None:
        document.add_heading(title.upper(), level=2)

    def _entry(self, document, title: str, right: str) -> None:
        paragraph = document.add_paragraph()
        paragraph.add_run(title).bold = True
        if right:
            run = paragraph.add_run(f"    {right}")
            run.font.color.rgb = _MUTED

    def _subtitle(self, document, text: str) -> None:
        run = document.add_paragraph().add_run(text)
        run.italic = True

    def _bullets(self, document, items: list[str]) -> None:
        for item in items:
            document.add_paragraph(item, style="List Bullet")

    def render(
        self,
        resume: Resume,
        job_title: str | None = None,
        company: str | None = None,
        output_dir: Path | str | None = None,
    ) -> RenderResult:
        """Write the resume as a .docx file.

        Returns:
            RenderResult with file path or error.
        """
        try:
            document = self.build_document(resume)
            directory = Path(output_dir) if output_dir else self.settings.output_dir
            directory.mkdir(parents=True, exist_ok=True)
            output_path = directory / export_filename(resume, "docx", job_title, company)
            document.save(str(output_path))
        except Exception as e:
            logger.error(f"Failed to render DOCX: {e}")
            return RenderResult(success=False, error=str(e))

        logger.info(f"Rendered resume to {output_path}")
        return RenderResult(success=True, file_path=str(output_path))
