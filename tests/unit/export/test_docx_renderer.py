"""Tests for the DOCX exporter."""

from pathlib import Path

from docx import Document

from resume_matcher.documents.models import empty_resume
from resume_matcher.export.docx_renderer import DocxRenderer


def paragraph_texts(document) -> list[str]:
    return [p.text for p in document.paragraphs]


class TestBuildDocument:
    def test_sections_in_order(self, sample_resume, settings):
        texts = paragraph_texts(DocxRenderer(settings).build_document(sample_resume))

        assert texts[0] == "Jane Doe"
        headings = [t for t in texts if t.isupper() and t.strip()]
        assert headings == [
            "SUMMARY",
            "EXPERIENCE",
            "EDUCATION",
            "SKILLS",
            "PROJECTS",
            "OPEN SOURCE",
            "CERTIFICATIONS",
            "LANGUAGES",
        ]

    def test_content(self, sample_resume, settings):
        texts = paragraph_texts(DocxRenderer(settings).build_document(sample_resume))

        assert "Senior Engineer    Jan 2020 - Present" in texts
        assert "Cut latency by 40%" in texts
        assert "Python (Expert), PostgreSQL (Advanced)" in texts
        assert "Fixed proxy handling" in texts

    def test_blank_resume(self, settings):
        texts = paragraph_texts(DocxRenderer(settings).build_document(empty_resume()))

        assert texts == ["Resume"]


class TestRender:
    def test_writes_file_to_output_dir(self, sample_resume, settings):
        result = DocxRenderer(settings).render(sample_resume, job_title="Staff Engineer")

        assert result.success
        path = Path(result.file_path)
        assert path == settings.output_dir / "jane-doe-staff-engineer.docx"
        assert paragraph_texts(Document(str(path)))[0] == "Jane Doe"

    def test_explicit_output_dir(self, sample_resume, settings, tmp_path):
        result = DocxRenderer(settings).render(sample_resume, output_dir=tmp_path / "docs")

        assert result.file_path == str(tmp_path / "docs" / "jane-doe.docx")

    def test_failure_is_reported(self, sample_resume, settings, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        result = DocxRenderer(settings).render(sample_resume, output_dir=blocker)

        assert not result.success
        assert result.error
