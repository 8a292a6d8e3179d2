from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Dict, Any, Optional

from config.settings import settings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class PDFService:
    def __init__(self, template_dir: Optional[str] = None):
        # template environment (relative dirs resolve from the project root)
        path = Path(template_dir or settings.TEMPLATE_DIR)
        self.template_dir = path if path.is_absolute() else PROJECT_ROOT / path
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=select_autoescape(["html"]),
        )

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """Render a template to an HTML string"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML -> PDF"""
        # imported here: WeasyPrint needs the Pango system libraries at import time
        import weasyprint

        base_url = settings.WEASYPRINT_FONT_DIR or str(self.template_dir)
        return weasyprint.HTML(string=html_content, base_url=base_url).write_pdf()

    def render_ranking_html(self, data: Dict[str, Any]) -> str:
        """Ranking report page (also served as HTML)"""
        return self._render_template("ranking_report.html", data)

    def generate_ranking_pdf(self, data: Dict[str, Any]) -> bytes:
        """Ranking report PDF"""
        return self._html_to_pdf(self.render_ranking_html(data))
