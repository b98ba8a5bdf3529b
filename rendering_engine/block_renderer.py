import re
import logging
from typing import Dict, List, Optional

from .placeholder_substitution import substitute_fields

logger = logging.getLogger(__name__)

# {#NAME} ... {/NAME}, closed by the same name, shortest match
BLOCK_PATTERN = re.compile(r"\{#([A-Z][A-Z0-9_]*)\}(.*?)\{/\1\}", re.DOTALL)

class BlockRenderer:
    """Expands repeating {#NAME}...{/NAME} regions once per item of the named list.

    Blocks do not nest: the inner fragment of a region is a single substitution
    unit and is never scanned for further block syntax. Any marker left inside
    it is removed later with the other unresolved tokens.
    """

    def render(self, html: str, blocks: Dict[str, List[Dict[str, str]]],
               outer_fields: Optional[Dict[str, str]] = None) -> str:
        if not html:
            return ""
        outer_fields = outer_fields or {}

        def _expand(match: re.Match) -> str:
            name, inner = match.group(1), match.group(2)
            items = blocks.get(name)
            if not items:
                logger.debug(f"Block {name} has no items, omitting region")
                return ""
            logger.debug(f"Expanding block {name} for {len(items)} items")
            return "".join(self.render_item(inner, item, outer_fields) for item in items)

        return BLOCK_PATTERN.sub(_expand, html)

    @staticmethod
    def render_item(fragment: str, item: Dict[str, str], outer_fields: Dict[str, str]) -> str:
        fields = dict(outer_fields)
        fields.update(item)
        return substitute_fields(fragment, fields)

    @staticmethod
    def find_blocks(html: str) -> List[str]:
        return [match.group(1) for match in BLOCK_PATTERN.finditer(html or "")]
