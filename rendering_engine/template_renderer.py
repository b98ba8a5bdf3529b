import re
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError
from rapidfuzz import fuzz, process

from config import load_config
from models.resume import ResumeData
from normalization.field_aliases import AliasResolver
from normalization.field_mapper import BLOCK_FIELDS, SCALAR_FIELDS, FieldMapper
from normalization.resume_normalizer import ResumeNormalizer
from schemas.template_schema import SchemaTemplate
from utils.error_handling import MalformedTemplateError
from .block_renderer import BlockRenderer
from .document_assembler import assemble_document
from .placeholder_substitution import strip_leftover_tokens, substitute_fields
from .section_renderer import SectionRenderer
from .style_builder import StyleBuilder, extract_body, extract_style, strip_style_tags

logger = logging.getLogger(__name__)

# Numbered legacy tokens ({SKILL_7}) are routinely left empty when the list is short
INDEXED_TOKEN = re.compile(r"_\d+(?:\.\d+)?$")

TemplateInput = Union[str, SchemaTemplate, Dict[str, Any]]

class TemplateRenderer:
    """Renders resume data through a raw-HTML or schema template into a printable document.

    Pipeline: normalization -> block repetition -> field substitution ->
    leftover token stripping -> style extraction/generation -> document assembly.
    Each call works only on its own inputs, so one instance can serve
    concurrent renders.
    """

    def __init__(self, config: Optional[Dict] = None,
                 normalizer: Optional[ResumeNormalizer] = None,
                 mapper: Optional[FieldMapper] = None,
                 style_builder: Optional[StyleBuilder] = None):
        config = load_config() if config is None else config
        rendering_config = config.get("rendering", {})
        settings = rendering_config.get("rendering", {})

        self.present_label = settings.get("present_label", "Present")
        self.title_suffix = settings.get("document_title_suffix", " - Resume")
        self.default_title = settings.get("default_title", "Resume")
        self.suggestion_threshold = rendering_config.get("diagnostics", {}).get("suggestion_threshold", 75)

        self.normalizer = normalizer or ResumeNormalizer(AliasResolver(config.get("aliases")))
        self.mapper = mapper or FieldMapper(rendering_config)
        self.style_builder = style_builder or StyleBuilder(config.get("styles"))
        self.block_renderer = BlockRenderer()
        self.known_tokens = list(SCALAR_FIELDS) + sorted(
            {field for fields in BLOCK_FIELDS.values() for field in fields}
        )

    def render(self, template: TemplateInput, data: Any) -> str:
        """Render a complete HTML document"""
        resume = self._resume(data)

        if isinstance(template, (SchemaTemplate, dict)):
            schema = self._schema(template)
            body = SectionRenderer(resume, self.present_label).render_layout(schema.sections, schema.layout)
            css = self.style_builder.build_css(schema.style)
            logger.info(f"Rendered schema template '{schema.id or schema.name}' with {len(schema.sections)} sections")
        else:
            self._check_raw(template)
            css = self.style_builder.sanitize_colors(extract_style(template))
            body = self._render_fragment(strip_style_tags(extract_body(template)), resume)
            logger.info(f"Rendered raw template ({len(template)} characters)")

        return assemble_document(body.strip(), css, self.document_title(resume))

    def render_body(self, template: str, data: Any) -> str:
        """Substitute a raw-HTML template without wrapping it in a document"""
        self._check_raw(template)
        return self._render_fragment(template, self._resume(data))

    def document_title(self, resume: ResumeData) -> str:
        name = resume.personal_info.display_name()
        if name:
            return f"{name}{self.title_suffix}"
        return resume.title or self.default_title

    def _render_fragment(self, html: str, resume: ResumeData) -> str:
        scalars = self.mapper.all_scalar_fields(resume)
        blocks = self.mapper.block_items(resume)

        html = self.block_renderer.render(html, blocks, scalars)
        html = substitute_fields(html, scalars)
        html, removed = strip_leftover_tokens(html)
        if removed:
            self._report_unresolved(removed)
        return html

    def _report_unresolved(self, removed: List[str]) -> None:
        for name in dict.fromkeys(removed):
            if name.startswith(("#", "/")):
                logger.warning(f"Removed unmatched block marker {{{name}}}")
                continue
            if INDEXED_TOKEN.search(name):
                logger.debug(f"Numbered placeholder {{{name}}} has no data")
                continue
            suggestion = process.extractOne(
                name,
                self.known_tokens,
                scorer=fuzz.WRatio,
                score_cutoff=self.suggestion_threshold,
            )
            if suggestion:
                logger.warning(f"Unresolved placeholder {{{name}}} removed (did you mean {{{suggestion[0]}}}?)")
            else:
                logger.warning(f"Unresolved placeholder {{{name}}} removed")

    def _resume(self, data: Any) -> ResumeData:
        if isinstance(data, ResumeData):
            return data
        return self.normalizer.normalize(data)

    @staticmethod
    def _check_raw(template: Any) -> None:
        if not isinstance(template, str):
            raise MalformedTemplateError(
                f"Template must be HTML text or a schema template, got {type(template).__name__}"
            )
        if not template.strip():
            raise MalformedTemplateError("Template is empty")

    @staticmethod
    def _schema(template: Union[SchemaTemplate, Dict[str, Any]]) -> SchemaTemplate:
        if isinstance(template, dict):
            if not SchemaTemplate.looks_like_schema(template):
                raise MalformedTemplateError("Template object has no sections or template_config")
            try:
                template = SchemaTemplate.from_dict(template)
            except ValidationError as e:
                raise MalformedTemplateError(f"Invalid schema template: {e}") from e
        if not template.sections:
            raise MalformedTemplateError("Schema template has no sections")
        return template

def render(template: TemplateInput, data: Any) -> str:
    """Render ``data`` through ``template`` with the packaged configuration"""
    return TemplateRenderer().render(template, data)
