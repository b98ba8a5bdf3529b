import argparse
import json
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from dotenv import load_dotenv

from config import load_config
from export.pdf_exporter import PdfExporter
from generation.text_generator import get_text_generator
from rendering_engine.template_renderer import TemplateRenderer
from schemas.template_schema import SchemaTemplate
from storage.template_store import FileSystemTemplateStore, TemplateCache
from utils.error_handling import (
    ConfigError,
    MalformedTemplateError,
    NormalizationError,
    RenderError,
    TemplateNotFoundError,
)
from utils.file_utils import read_text
from utils.logging import setup_logging

logger = logging.getLogger(__name__)

class RenderPipeline:
    """Loads templates, renders resume data and exports PDFs"""

    def __init__(self, config: Dict, templates_dir: Optional[str] = None):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._initialize_components(templates_dir)

    def _initialize_components(self, templates_dir: Optional[str]):
        """Initialize all pipeline components"""
        try:
            store_config = self.config.get("rendering", {}).get("template_store", {})
            directory = templates_dir or os.getenv("TEMPLATE_DIR") or store_config.get("directory", "templates")
            ttl = float(os.getenv("TEMPLATE_CACHE_TTL", store_config.get("cache_ttl_seconds", 300)))

            self.store = FileSystemTemplateStore(directory, TemplateCache(ttl), store_config)
            self.renderer = TemplateRenderer(self.config)
            self.exporter = PdfExporter(self.config.get("rendering", {}).get("pdf", {}))
            self.logger.debug(f"Pipeline initialized with template directory {directory}")
        except Exception as e:
            self.logger.error(f"Failed to initialize components: {str(e)}")
            raise ConfigError(f"Component initialization failed: {str(e)}") from e

    def resolve_template(self, template_ref: Union[str, Dict]) -> Union[str, Dict]:
        """Schema dicts pass through; a JSON schema file path is loaded; anything else is a stored template id"""
        if isinstance(template_ref, dict):
            return template_ref
        if template_ref.endswith(".json") and Path(template_ref).is_file():
            try:
                payload = json.loads(read_text(template_ref))
            except json.JSONDecodeError as e:
                raise MalformedTemplateError(f"{template_ref} is not valid JSON: {e}") from e
            if not SchemaTemplate.looks_like_schema(payload):
                raise MalformedTemplateError(f"{template_ref} is not a schema template")
            return payload
        return self.store.fetch_template(template_ref)

    def render_resume(self, template_ref: Union[str, Dict], data: Any) -> str:
        self.logger.info(f"Rendering resume with template: {template_ref if isinstance(template_ref, str) else 'schema'}")
        template = self.resolve_template(template_ref)
        return self.renderer.render(template, data)

    def export_pdf(self, template_ref: Union[str, Dict], data: Any) -> Tuple[bytes, str]:
        html = self.render_resume(template_ref, data)
        resume = self.renderer.normalizer.normalize(data)
        title = resume.title or resume.personal_info.display_name()
        return self.exporter.html_to_pdf(html), self.exporter.file_name(title)

def main(argv=None):
    """Main entry point"""
    parser = argparse.ArgumentParser(description='Render resume data into an HTML or PDF document')
    parser.add_argument('input', nargs='?', help='Resume data JSON file')
    parser.add_argument('-t', '--template', help='Stored template id or schema template JSON file')
    parser.add_argument('-o', '--output', help='Output file (defaults to resume.html or the PDF title)')
    parser.add_argument('--pdf', action='store_true', help='Export a PDF instead of HTML')
    parser.add_argument('--templates-dir', help='Directory holding raw HTML templates')
    parser.add_argument('--list-templates', action='store_true', help='List stored templates and exit')
    parser.add_argument('--check-providers', action='store_true', help='Check LLM provider connectivity and exit')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging(args.verbose)

    try:
        config = load_config()
        pipeline = RenderPipeline(config, args.templates_dir)

        if args.list_templates:
            for info in pipeline.store.list_templates(include_premium=True):
                premium = "\tpremium" if info.is_premium else ""
                print(f"{info.id}\t{info.name}\t{info.category}{premium}")
            return 0

        if args.check_providers:
            generation_config = config.get("rendering", {}).get("generation", {})
            results = get_text_generator(generation_config).check_connections()
            print(json.dumps(results, indent=2))
            return 0

        if not args.input or not args.template:
            parser.error("input and --template are required to render")

        data = read_text(args.input)

        if args.pdf:
            pdf, file_name = pipeline.export_pdf(args.template, data)
            output = args.output or file_name
            with open(output, 'wb') as f:
                f.write(pdf)
        else:
            output = args.output or "resume.html"
            html = pipeline.render_resume(args.template, data)
            with open(output, 'w', encoding='utf-8') as f:
                f.write(html)
        logging.info(f"Results saved to {output}")
        return 0

    except (TemplateNotFoundError, MalformedTemplateError) as e:
        logging.error(f"Template unavailable: {str(e)}")
    except (NormalizationError, RenderError, ConfigError, FileNotFoundError) as e:
        logging.error(f"Processing failed: {str(e)}")
        if args.verbose:
            traceback.print_exc()
    return 1

if __name__ == '__main__':
    sys.exit(main())
