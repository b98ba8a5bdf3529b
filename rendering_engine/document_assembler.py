import logging

from markupsafe import Markup

from .html_templates import render_template

logger = logging.getLogger(__name__)

# Appended after template CSS so printed output keeps its colours
PRINT_BASE_CSS = """
body {
  -webkit-print-color-adjust: exact !important;
  print-color-adjust: exact !important;
  margin: 0;
}
.page-break { page-break-before: always; }
"""

def assemble_document(body: str, css: str = "", title: str = "Resume") -> str:
    """Wrap rendered body markup and CSS into a self-contained HTML document"""
    css = "\n".join(part for part in ((css or "").strip(), PRINT_BASE_CSS.strip()) if part)
    document = str(render_template(
        "document.html",
        title=title or "Resume",
        css=Markup(css),
        body=Markup(body or ""),
    ))
    logger.debug(f"Assembled document: {len(document)} characters")
    return document
