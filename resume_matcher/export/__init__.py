"""Resume export: JSON, PDF and DOCX.

Public API:
- export_json / resume_to_json: wire-format JSON
- pdf_renderer.PDFRenderer: Jinja2 + WeasyPrint (imported on demand, WeasyPrint
  needs system libraries)
- DocxRenderer: python-docx
- export_filename: shared filename rules
"""

from resume_matcher.export.docx_renderer import DocxRenderer
from resume_matcher.export.formatting import export_filename, json_filename, sanitize_filename
from resume_matcher.export.json_export import export_json, resume_to_json
from resume_matcher.export.models import RenderResult

__all__ = [
    "RenderResult",
    "DocxRenderer",
    "export_json",
    "resume_to_json",
    "export_filename",
    "json_filename",
    "sanitize_filename",
]
