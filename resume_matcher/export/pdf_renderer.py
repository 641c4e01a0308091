"""PDF Renderer using WeasyPrint.

Renders a resume to PDF through a Jinja2 HTML/CSS template.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from weasyprint import HTML

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

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class PDFRenderer:
    """PDF renderer for resumes.

    Uses Jinja2 templates and WeasyPrint to generate the PDF.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        template_dir: Path | None = None,
        template_name: str = "resume.html",
    ):
        """Initialize the PDF renderer.

        Args:
            settings: Optional Settings. Uses global settings if not provided.
            template_dir: Directory holding the template and styles.css.
            template_name: Resume template filename.
        """
        self.settings = settings or get_settings()
        self.template_dir = template_dir or DEFAULT_TEMPLATE_DIR
        self.template_name = template_name
        self._setup_jinja()

    def _setup_jinja(self) -> None:
        """Set up Jinja2 template environment."""
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=True,
        )
        self.jinja_env.filters["month_year"] = format_date
        self.jinja_env.filters["label"] = label
        self.jinja_env.globals["date_range"] = date_range

    def _load_styles(self) -> str:
        """Load CSS styles from the template directory."""
        styles_path = self.template_dir / "styles.css"
        if styles_path.exists():
            return styles_path.read_text(encoding="utf-8")
        return ""

    def render_html(self, resume: Resume) -> str:
        """Render the resume to an HTML string."""
        template = self.jinja_env.get_template(self.template_name)
        return template.render(
            resume=resume,
            info=resume.personal_info,
            contacts=contact_line(resume),
            styles=self._load_styles(),
        )

    def render(
        self,
        resume: Resume,
        job_title: str | None = None,
        company: str | None = None,
        output_dir: Path | str | None = None,
    ) -> RenderResult:
        """Render a resume to PDF.

        Args:
            resume: The resume to render.
            job_title: Optional target job title, used in the filename.
            company: Optional target company, used when there is no title.
            output_dir: Destination directory. Defaults to OUTPUT_DIR.

        Returns:
            RenderResult with file path or error.
        """
        try:
            html_content = self.render_html(resume)

            directory = Path(output_dir) if output_dir else self.settings.output_dir
            directory.mkdir(parents=True, exist_ok=True)
            output_path = directory / export_filename(resume, "pdf", job_title, company)

            HTML(string=html_content, base_url=str(self.template_dir)).write_pdf(
                str(output_path)
            )

            logger.info(f"Rendered resume to {output_path}")

            return RenderResult(
                success=True,
                file_path=str(output_path),
            )

        except Exception as e:
            logger.error(f"Failed to render resume: {e}")
            return RenderResult(
                success=False,
                error=str(e),
            )
