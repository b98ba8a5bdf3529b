# testing/unit_tests/rendering_engine/test_StyleBuilder.py
import pytest
from schemas.template_schema import StyleConfig
from rendering_engine.style_builder import (
    StyleBuilder, extract_body, extract_style, oklch_to_hex, strip_style_tags
)

@pytest.fixture
def builder():
    return StyleBuilder()

def test_extract_first_style_block():
    html = "<style>h1 { color: red; }</style><p>x</p><style>p { margin: 0; }</style>"
    assert extract_style(html) == "h1 { color: red; }"

def test_extract_style_with_attributes_and_case():
    html = '<STYLE type="text/css">\nbody { margin: 0; }\n</STYLE>'
    assert extract_style(html) == "\nbody { margin: 0; }\n"

def test_extract_style_missing():
    assert extract_style("<p>no styles</p>") == ""
    assert extract_style(None) == ""

def test_strip_style_tags():
    assert strip_style_tags("<style>a{}</style><p>x</p>") == "<p>x</p>"

def test_extract_body():
    html = "<html><head><title>t</title></head><body class=\"page\">\n<h1>x</h1>\n</body></html>"
    assert extract_body(html) == "\n<h1>x</h1>\n"
    assert extract_body("<h1>fragment</h1>") == "<h1>fragment</h1>"

def rule_body(css, selector):
    return css.split(f"\n{selector} {{", 1)[1].split("}", 1)[0]

@pytest.mark.parametrize("style, selector, expected", [
    ({"typography": {"bodySize": "small"}}, ".resume-container", "font-size: 0.875rem;"),
    ({"typography": {"bodySize": "large"}}, ".resume-container", "font-size: 1.125rem;"),
    ({"typography": {"headingSize": "large"}}, ".section-header", "font-size: 1.5rem;"),
    ({"spacing": {"sectionGap": "loose"}}, ".section", "margin-bottom: 2.5rem;"),
    ({"spacing": {"itemGap": "loose"}}, ".section-header", "margin-bottom: 1.5rem;"),
    ({"colorScheme": {"primary": "#111111"}}, ".item-title", "color: #111111;"),
])
def test_build_css_uses_presets(builder, style, selector, expected):
    css = builder.build_css(StyleConfig.model_validate(style))
    assert expected in rule_body(css, selector)

def test_header_underline_toggle(builder):
    plain = builder.build_css(StyleConfig())
    underlined = builder.build_css(StyleConfig.model_validate(
        {"borders": {"headerUnderline": True, "style": "dashed"}}
    ))
    assert "border-bottom: 2px" not in plain
    assert "border-bottom: 2px dashed #2563eb;" in underlined

def test_section_dividers(builder):
    css = builder.build_css(StyleConfig.model_validate({"borders": {"sectionDividers": True}}))
    assert "border-bottom: 1px solid #2563eb;" in css

@pytest.mark.parametrize("layout_type, columns", [
    ("two-column", "1fr 1fr"),
    ("sidebar-left", "1fr 2.5fr"),
    ("sidebar-right", "2.5fr 1fr"),
])
def test_layout_grid_rules(builder, layout_type, columns):
    css = builder.build_css()
    rule = css.split(f".layout-{layout_type} {{", 1)[1].split("}", 1)[0]
    assert f"grid-template-columns: {columns};" in rule

def test_single_column_is_block(builder):
    css = builder.build_css()
    rule = css.split(".layout-single-column {", 1)[1].split("}", 1)[0]
    assert "display: block;" in rule
    assert "grid-template-columns" not in rule

def test_font_import(builder):
    style = StyleConfig.model_validate({"typography": {"headingFont": "Open Sans", "bodyFont": "Lato"}})
    css = builder.build_css(style)
    assert css.startswith("@import url('https://fonts.googleapis.com/css2?family=Open+Sans:wght@400;600;700")
    assert "family=Lato:wght@300;400;500" in css

def test_default_presets_used_when_config_empty():
    css = StyleBuilder({}).build_css()
    assert "font-size: 1rem;" in rule_body(css, ".resume-container")

def test_unknown_option_falls_back(builder):
    assert builder.lookup("body_size", "huge") == "1rem"
    assert builder.lookup("section_gap", "huge") == "1.5rem"

def test_known_oklch_colour_from_table(builder):
    assert builder.sanitize_colors("a { color: oklch(100% 0 0); }") == "a { color: #ffffff; }"

def test_unknown_oklch_colour_converted():
    builder = StyleBuilder({"oklch_colors": {}})
    assert builder.sanitize_colors("color: oklch(50% 0 0);") == "color: #636363;"

def test_sanitize_without_oklch(builder):
    css = "a { color: #123456; }"
    assert builder.sanitize_colors(css) == css
    assert builder.sanitize_colors("") == ""

@pytest.mark.parametrize("args, expected", [
    ((0, 0, 0), "#000000"),
    ((1, 0, 0), "#ffffff"),
    ((0.5, 0, 0), "#636363"),
])
def test_oklch_to_hex(args, expected):
    assert oklch_to_hex(*args) == expected
