# testing/unit_tests/export/test_PdfExporter.py
import sys
import pytest
from unittest.mock import MagicMock, patch
from export.pdf_exporter import PdfExporter, sanitize_file_name
from utils.error_handling import RenderError

@pytest.fixture
def weasyprint():
    fake = MagicMock()
    fake.HTML.return_value.write_pdf.return_value = b"%PDF-1.7 fake"
    with patch.dict(sys.modules, {"weasyprint": fake}):
        yield fake

@pytest.mark.parametrize("title, expected", [
    ("Jane Doe - Resume", "jane-doe-resume.pdf"),
    ("My CV.PDF", "my-cv.pdf"),
    ("  Data   Engineer!! ", "data-engineer.pdf"),
    ("!!!", "resume.pdf"),
    ("", "resume.pdf"),
    (None, "resume.pdf"),
])
def test_sanitize_file_name(title, expected):
    assert sanitize_file_name(title) == expected

def test_sanitize_file_name_length():
    name = sanitize_file_name("word " * 40, max_length=20)
    assert len(name) <= 24
    assert not name.startswith("-") and not name.endswith("-.pdf")

def test_html_to_pdf(weasyprint):
    exporter = PdfExporter({"page_size": "Letter"})
    assert exporter.html_to_pdf("<html><body>x</body></html>") == b"%PDF-1.7 fake"
    weasyprint.HTML.assert_called_once_with(string="<html><body>x</body></html>")
    weasyprint.CSS.assert_called_once_with(string="@page { size: Letter; margin: 0; }")
    stylesheets = weasyprint.HTML.return_value.write_pdf.call_args.kwargs["stylesheets"]
    assert stylesheets == [weasyprint.CSS.return_value]

def test_empty_document_rejected(weasyprint):
    with pytest.raises(RenderError):
        PdfExporter({}).html_to_pdf("")
    weasyprint.HTML.assert_not_called()

def test_export_failure_wrapped(weasyprint):
    weasyprint.HTML.return_value.write_pdf.side_effect = ValueError("bad css")
    with pytest.raises(RenderError, match="bad css"):
        PdfExporter({}).html_to_pdf("<p>x</p>")

def test_file_name_uses_configured_length():
    exporter = PdfExporter({"max_file_name_length": 5})
    assert exporter.file_name("Jane Doe") == "jane.pdf"

def test_defaults_from_packaged_config():
    exporter = PdfExporter()
    assert exporter.page_size == "A4"
    assert exporter.max_file_name_length == 50
