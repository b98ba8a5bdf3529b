import re
import logging
from typing import Dict, Optional

from config import load_config
from utils.error_handling import RenderError

logger = logging.getLogger(__name__)

def sanitize_file_name(title: Optional[str], max_length: int = 50) -> str:
    """Lowercase, dash-separated PDF file name derived from a title"""
    base = re.sub(r"\.pdf$", "", (title or "resume").strip(), flags=re.IGNORECASE)
    slug = re.sub(r"[^a-z0-9]+", "-", base.lower()).strip("-")[:max_length].strip("-")
    return f"{slug or 'resume'}.pdf"

class PdfExporter:
    """Rasterizes self-contained HTML documents to PDF bytes with WeasyPrint"""

    def __init__(self, config: Optional[Dict] = None):
        if config is None:
            config = load_config().get("rendering", {}).get("pdf", {})
        config = config or {}
        self.page_size = config.get("page_size", "A4")
        self.max_file_name_length = config.get("max_file_name_length", 50)

    def html_to_pdf(self, html: str) -> bytes:
        if not html:
            raise RenderError("Cannot export an empty document")

        # WeasyPrint loads native libraries on import, so defer it to first use
        from weasyprint import CSS, HTML

        page_css = CSS(string=f"@page {{ size: {self.page_size}; margin: 0; }}")
        try:
            pdf = HTML(string=html).write_pdf(stylesheets=[page_css])
        except Exception as e:
            logger.error(f"PDF export failed: {str(e)}")
            raise RenderError(f"PDF export failed: {str(e)}") from e

        logger.info(f"PDF generated successfully, size: {len(pdf)} bytes")
        return pdf

    def file_name(self, title: Optional[str]) -> str:
        return sanitize_file_name(title, self.max_file_name_length)
