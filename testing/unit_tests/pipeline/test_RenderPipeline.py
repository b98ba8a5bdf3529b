# testing/unit_tests/pipeline/test_RenderPipeline.py
import json
import pytest
from unittest.mock import patch
from config import load_config
from main import RenderPipeline, main
from utils.error_handling import MalformedTemplateError, TemplateNotFoundError

RESUME = {
    "personalInfo": {"fullName": "Jane Doe", "email": "jane@x.io"},
    "skills": ["Go", "Rust"],
}

@pytest.fixture
def templates_dir(tmp_path):
    directory = tmp_path / "templates"
    directory.mkdir()
    (directory / "classic.htm").write_text(
        "<style>h1 { color: navy; }</style><h1>{FULL_NAME}</h1><ul>{#SKILLS}<li>{SKILL}</li>{/SKILLS}</ul>",
        encoding="utf-8",
    )
    return directory

@pytest.fixture
def pipeline(templates_dir):
    return RenderPipeline(load_config(), str(templates_dir))

def test_render_stored_template(pipeline):
    html = pipeline.render_resume("storage-classic", RESUME)
    assert "<h1>Jane Doe</h1><ul><li>Go</li><li>Rust</li></ul>" in html
    assert "h1 { color: navy; }" in html

def test_render_schema_dict(pipeline):
    html = pipeline.render_resume({"sections": [{"id": "header", "type": "header"}]}, RESUME)
    assert '<h1 class="header-name">Jane Doe</h1>' in html

def test_render_schema_file(pipeline, tmp_path):
    schema_path = tmp_path / "schema.json"
    schema_path.write_text(json.dumps({"template_config": {"sections": [{"id": "skills", "type": "skills", "title": "Skills"}]}}))
    html = pipeline.render_resume(str(schema_path), RESUME)
    assert '<span class="skill-tag">Go</span>' in html

def test_json_file_that_is_not_a_schema(pipeline, tmp_path):
    path = tmp_path / "other.json"
    path.write_text(json.dumps({"name": "x"}))
    with pytest.raises(MalformedTemplateError):
        pipeline.render_resume(str(path), RESUME)

def test_missing_template(pipeline):
    with pytest.raises(TemplateNotFoundError):
        pipeline.render_resume("storage-missing", RESUME)

def test_export_pdf(pipeline):
    with patch.object(pipeline.exporter, "html_to_pdf", return_value=b"%PDF") as mock_pdf:
        pdf, file_name = pipeline.export_pdf("classic", RESUME)
    assert pdf == b"%PDF"
    assert file_name == "jane-doe.pdf"
    assert "<h1>Jane Doe</h1>" in mock_pdf.call_args.args[0]

def test_main_renders_html(templates_dir, tmp_path):
    data_path = tmp_path / "resume.json"
    data_path.write_text(json.dumps(RESUME))
    output = tmp_path / "out.html"
    code = main([str(data_path), "-t", "classic", "-o", str(output), "--templates-dir", str(templates_dir)])
    assert code == 0
    assert "<li>Rust</li>" in output.read_text(encoding="utf-8")

def test_main_missing_template_fails(templates_dir, tmp_path):
    data_path = tmp_path / "resume.json"
    data_path.write_text(json.dumps(RESUME))
    code = main([str(data_path), "-t", "nope", "-o", str(tmp_path / "out.html"), "--templates-dir", str(templates_dir)])
    assert code == 1
    assert not (tmp_path / "out.html").exists()

def test_main_bad_resume_json(templates_dir, tmp_path):
    data_path = tmp_path / "resume.json"
    data_path.write_text("{broken")
    code = main([str(data_path), "-t", "classic", "-o", str(tmp_path / "out.html"), "--templates-dir", str(templates_dir)])
    assert code == 1

def test_main_lists_templates(templates_dir, capsys):
    assert main(["--list-templates", "--templates-dir", str(templates_dir)]) == 0
    assert "classic\tClassic\tmid-level" in capsys.readouterr().out

def test_main_requires_input_and_template(templates_dir):
    with pytest.raises(SystemExit):
        main(["--templates-dir", str(templates_dir)])

def test_schema_file_with_invalid_json(pipeline, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(MalformedTemplateError, match="not valid JSON"):
        pipeline.render_resume(str(path), RESUME)

def test_main_invalid_schema_json_fails_cleanly(templates_dir, tmp_path):
    data_path = tmp_path / "resume.json"
    data_path.write_text(json.dumps(RESUME))
    schema_path = tmp_path / "broken.json"
    schema_path.write_text("{not json")
    code = main([str(data_path), "-t", str(schema_path), "-o", str(tmp_path / "out.html"),
                 "--templates-dir", str(templates_dir)])
    assert code == 1
