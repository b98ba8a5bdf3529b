"""
Jinja2 environment for schema-template sections and the document shell.

Autoescaping is on for every ``.html`` template. Interpolated values are also
brace-escaped so resume text can never be read back as a ``{TOKEN}``.
"""
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from .placeholder_substitution import escape_value

TEMPLATES_DIR = Path(__file__).parent / "templates"
LINE_BREAK = Markup("<br>")

def html_text(value) -> Markup:
    if value is None:
        return Markup("")
    if isinstance(value, Markup):
        return value
    return Markup(escape_value(str(escape(value))))

def html_lines(value, separator: str = "<br>") -> Markup:
    """Escape each line of a multi-line description, keeping the line breaks"""
    return LINE_BREAK.join(html_text(line) for line in str(value or "").split(separator))

def get_jinja_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html"]),
        finalize=html_text,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["text"] = html_text
    env.filters["lines"] = html_lines
    return env

env = get_jinja_env()

def render_template(name: str, **context) -> Markup:
    return Markup(env.get_template(name).render(**context))
