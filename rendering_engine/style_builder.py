import re
import math
import logging
from typing import Dict, List, Optional

from config import load_config
from schemas.template_schema import StyleConfig

logger = logging.getLogger(__name__)

STYLE_PATTERN = re.compile(r"<style[^>]*>(.*?)</style>", re.IGNORECASE | re.DOTALL)
BODY_PATTERN = re.compile(r"<body[^>]*>(.*)</body>", re.IGNORECASE | re.DOTALL)
OKLCH_PATTERN = re.compile(
    r"oklch\(\s*([\d.]+)(%?)\s+([\d.]+)\s+([\d.]+)(?:deg)?\s*(?:/\s*[\d.]+%?\s*)?\)",
    re.IGNORECASE,
)

DEFAULT_PRESETS = {
    "body_size": {"small": "0.875rem", "medium": "1rem", "large": "1.125rem"},
    "heading_size": {"small": "1.125rem", "medium": "1.25rem", "large": "1.5rem"},
    "section_gap": {"tight": "1rem", "normal": "1.5rem", "loose": "2.5rem"},
    "item_gap": {"tight": "1rem", "normal": "1.5rem", "loose": "2rem"},
    "header_gap": {"tight": "0.5rem", "normal": "1rem", "loose": "1.5rem"},
    "layout_grid": {
        "single-column": None,
        "two-column": "1fr 1fr",
        "sidebar-left": "1fr 2.5fr",
        "sidebar-right": "2.5fr 1fr",
    },
    "oklch_colors": {},
}

def extract_style(html: str) -> str:
    """Contents of the first <style> element, or an empty string"""
    match = STYLE_PATTERN.search(html or "")
    return match.group(1) if match else ""

def strip_style_tags(html: str) -> str:
    return STYLE_PATTERN.sub("", html or "")

def extract_body(html: str) -> str:
    """Inner markup of <body> when the template is a full document, else the input"""
    match = BODY_PATTERN.search(html or "")
    return match.group(1) if match else html

def _rule(selector: str, declarations: Dict[str, Optional[str]]) -> str:
    lines = [f"  {name}: {value};" for name, value in declarations.items() if value is not None]
    return selector + " {\n" + "\n".join(lines) + "\n}"

class StyleBuilder:
    """Generates template CSS from a structured style configuration"""

    def __init__(self, presets: Optional[Dict] = None):
        if presets is None:
            presets = load_config().get("styles", {})
        self.presets = {**DEFAULT_PRESETS, **(presets or {})}
        self.oklch_colors = {
            self._normalize_color_key(key): value
            for key, value in (self.presets.get("oklch_colors") or {}).items()
        }

    def lookup(self, table: str, option: str) -> str:
        values = self.presets[table]
        if option not in values:
            logger.warning(f"Unknown {table} option '{option}', using default")
            return DEFAULT_PRESETS[table].get("medium") or DEFAULT_PRESETS[table].get("normal")
        return values[option]

    def font_import(self, style: StyleConfig) -> str:
        heading = style.typography.heading_font.replace(" ", "+")
        body = style.typography.body_font.replace(" ", "+")
        return (
            "@import url('https://fonts.googleapis.com/css2?"
            f"family={heading}:wght@400;600;700&family={body}:wght@300;400;500&display=swap');"
        )

    def layout_css(self) -> List[str]:
        rules = []
        for layout_type, columns in self.presets["layout_grid"].items():
            selector = f".layout-{layout_type}"
            if columns is None:
                rules.append(_rule(selector, {"display": "block"}))
            else:
                rules.append(_rule(selector, {
                    "display": "grid",
                    "grid-template-columns": columns,
                    "gap": "2rem",
                }))
        return rules

    def build_css(self, style: Optional[StyleConfig] = None) -> str:
        style = style or StyleConfig()
        colors = style.color_scheme
        typography = style.typography
        borders = style.borders

        body_size = self.lookup("body_size", typography.body_size)
        heading_size = self.lookup("heading_size", typography.heading_size)
        section_gap = self.lookup("section_gap", style.spacing.section_gap)
        item_gap = self.lookup("item_gap", style.spacing.item_gap)
        header_gap = self.lookup("header_gap", style.spacing.item_gap)

        section_header = {
            "font-family": f"'{typography.heading_font}', sans-serif",
            "font-size": heading_size,
            "font-weight": "600",
            "color": colors.primary,
            "margin-bottom": header_gap,
        }
        if borders.header_underline:
            section_header["border-bottom"] = f"2px {borders.style} {colors.accent}"
            section_header["padding-bottom"] = "0.25rem"

        header_section = {"text-align": "center", "margin-bottom": "2rem"}
        item = {"margin-bottom": item_gap}
        if borders.section_dividers:
            header_section["border-bottom"] = f"1px {borders.style} {colors.accent}"
            header_section["padding-bottom"] = "1.5rem"
            item["border-bottom"] = f"1px solid {colors.background}"
            item["padding-bottom"] = "1rem"

        rules = [
            self.font_import(style),
            _rule("*", {"margin": "0", "padding": "0", "box-sizing": "border-box"}),
            _rule(".resume-container", {
                "max-width": "8.5in",
                "margin": "0 auto",
                "padding": "0.75in",
                "background": colors.background,
                "color": colors.text,
                "font-family": f"'{typography.body_font}', sans-serif",
                "font-size": body_size,
                "line-height": "1.5",
            }),
            *self.layout_css(),
            _rule(".primary-column,\n.secondary-column", {
                "display": "flex",
                "flex-direction": "column",
                "gap": section_gap,
            }),
            _rule(".section", {"margin-bottom": section_gap}),
            _rule(".section-header", section_header),
            _rule(".header-section", header_section),
            _rule(".header-name", {
                "font-family": f"'{typography.heading_font}', sans-serif",
                "font-size": "2.5rem",
                "font-weight": "700",
                "color": colors.primary,
                "margin-bottom": "0.5rem",
            }),
            _rule(".header-tagline", {"color": colors.secondary, "margin-bottom": "0.5rem"}),
            _rule(".header-contact", {
                "display": "flex",
                "justify-content": "center",
                "flex-wrap": "wrap",
                "gap": "1rem",
                "color": colors.secondary,
                "font-size": "0.9rem",
            }),
            _rule(".summary-text", {"text-align": "justify", "line-height": "1.6", "color": colors.text}),
            _rule(".experience-item,\n.education-item,\n.project-item,\n.certification-item,\n.reference-item", item),
            _rule(".item-title", {"font-weight": "600", "color": colors.primary, "font-size": "1.1rem"}),
            _rule(".item-subtitle", {"color": colors.secondary, "font-weight": "500", "margin": "0.25rem 0"}),
            _rule(".item-meta", {"color": colors.secondary, "font-size": "0.875rem", "margin-bottom": "0.5rem"}),
            _rule(".item-description", {"margin-top": "0.5rem", "line-height": "1.6"}),
            _rule(".skills-grid", {
                "display": "grid",
                "grid-template-columns": "repeat(auto-fit, minmax(120px, 1fr))",
                "gap": "0.5rem",
            }),
            _rule(".skills-list", {"display": "flex", "flex-wrap": "wrap", "gap": "0.5rem"}),
            _rule(".skill-tag", {
                "background": colors.accent,
                "color": colors.background,
                "padding": "0.25rem 0.75rem",
                "border-radius": "1rem",
                "font-size": "0.875rem",
                "font-weight": "500",
            }),
            _rule(".achievements-list", {"list-style": "none", "padding": "0"}),
            _rule(".achievements-list li", {
                "position": "relative",
                "padding-left": "1.5rem",
                "margin-bottom": "0.5rem",
                "line-height": "1.6",
            }),
            _rule(".achievements-list li:before", {
                "content": '"\\25B8"',
                "position": "absolute",
                "left": "0",
                "color": colors.accent,
                "font-weight": "bold",
            }),
            _rule(".languages-grid", {
                "display": "grid",
                "grid-template-columns": "repeat(auto-fit, minmax(150px, 1fr))",
                "gap": "1rem",
            }),
            _rule(".language-item", {
                "display": "flex",
                "justify-content": "space-between",
                "align-items": "center",
                "padding": "0.5rem",
                "background": colors.background,
                "border": f"1px solid {colors.accent}",
                "border-radius": "0.5rem",
            }),
            _rule(".proficiency-indicator", {"display": "flex", "gap": "0.125rem"}),
            _rule(".proficiency-dot", {
                "width": "0.5rem",
                "height": "0.5rem",
                "border-radius": "50%",
                "background": colors.accent,
            }),
            _rule(".proficiency-dot.inactive", {
                "background": colors.background,
                "border": f"1px solid {colors.accent}",
            }),
            "@media print {\n" + _rule(".resume-container", {"padding": "0.5in", "box-shadow": "none"}) + "\n}",
        ]
        return "\n\n".join(rules)

    def sanitize_colors(self, css: str) -> str:
        """Replace oklch() colours, which PDF engines do not understand, with hex"""
        if not css or "oklch" not in css.lower():
            return css

        def _convert(match: re.Match) -> str:
            known = self.oklch_colors.get(self._normalize_color_key(match.group(0)))
            if known:
                return known
            lightness = float(match.group(1))
            if match.group(2) or lightness > 1:
                lightness /= 100
            return oklch_to_hex(lightness, float(match.group(3)), float(match.group(4)))

        return OKLCH_PATTERN.sub(_convert, css)

    @staticmethod
    def _normalize_color_key(value: str) -> str:
        return re.sub(r"\s+", " ", value.strip().lower())

def oklch_to_hex(lightness: float, chroma: float, hue: float) -> str:
    """Convert an OKLCH colour (lightness 0-1, hue in degrees) to #rrggbb"""
    hue_rad = math.radians(hue)
    a = chroma * math.cos(hue_rad)
    b = chroma * math.sin(hue_rad)

    l_ = (lightness + 0.3963377774 * a + 0.2158037573 * b) ** 3
    m_ = (lightness - 0.1055613458 * a - 0.0638541728 * b) ** 3
    s_ = (lightness - 0.0894841775 * a - 1.2914855480 * b) ** 3

    linear = (
        4.0767416621 * l_ - 3.3077115913 * m_ + 0.2309699292 * s_,
        -1.2684380046 * l_ + 2.6097574011 * m_ - 0.3413193965 * s_,
        -0.0041960863 * l_ - 0.7034186147 * m_ + 1.7076147010 * s_,
    )

    def _channel(value: float) -> str:
        value = min(1.0, max(0.0, value))
        if value <= 0.0031308:
            encoded = 12.92 * value
        else:
            encoded = 1.055 * value ** (1 / 2.4) - 0.055
        return f"{round(min(1.0, max(0.0, encoded)) * 255):02x}"

    return "#" + "".join(_channel(value) for value in linear)
