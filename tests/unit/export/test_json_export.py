"""Tests for JSON export."""

import json

from resume_matcher.documents.validation import validate_resume
from resume_matcher.export.json_export import export_json, resume_to_json


def test_resume_to_json_uses_wire_names(sample_resume):
    data = json.loads(resume_to_json(sample_resume))

    assert data["personalInfo"]["name"] == "Jane Doe"
    assert data["openSource"][0]["id"] == "oss-1"
    assert data["experience"][0]["startDate"] == "2020-01"


def test_export_json_writes_loadable_file(sample_resume, tmp_path):
    result = export_json(sample_resume, tmp_path / "out")

    assert result.success
    assert result.file_path == str(tmp_path / "out" / "jane-doe-resume.json")
    with open(result.file_path, encoding="utf-8") as f:
        assert validate_resume(f.read()) == sample_resume


def test_export_json_reports_write_failure(sample_resume, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")

    result = export_json(sample_resume, blocker)

    assert not result.success
    assert result.error
