import re
import logging
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

TOKEN_NAME = r"[A-Z][A-Z0-9_]*(?:\.\d+)?"
# Leftovers also cover underscore-led names such as {_NOTE}
LEFTOVER_NAME = r"[A-Z_][A-Z0-9_]*(?:\.\d+)?"

# {FIELD_NAME}, or {WORK_DESCRIPTION_1.2} for numbered description lines
TOKEN_PATTERN = re.compile(r"\{(" + TOKEN_NAME + r")\}")
# Anything token-shaped, including stray block markers {#NAME} / {/NAME}
LEFTOVER_PATTERN = re.compile(r"\{([#/]?" + LEFTOVER_NAME + r")\}")

BRACE_ENTITIES = {"{": "&#123;", "}": "&#125;"}

def escape_value(value) -> str:
    """Render a value as text that can never form a token"""
    if value is None:
        return ""
    text = str(value)
    if "{" in text or "}" in text:
        text = text.replace("{", BRACE_ENTITIES["{"]).replace("}", BRACE_ENTITIES["}"])
    return text

def substitute_fields(fragment: str, fields: Dict[str, str]) -> str:
    """Replace every known {TOKEN} in one pass; unknown tokens are left in place"""
    if not fragment:
        return ""

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name in fields:
            return escape_value(fields[name])
        return match.group(0)

    return TOKEN_PATTERN.sub(_replace, fragment)

def strip_leftover_tokens(html: str) -> Tuple[str, List[str]]:
    """Remove remaining tokens and stray block markers, returning the removed names"""
    removed = []

    def _remove(match: re.Match) -> str:
        removed.append(match.group(1))
        return ""

    cleaned = LEFTOVER_PATTERN.sub(_remove, html)
    if removed:
        logger.debug(f"Stripped {len(removed)} unresolved tokens")
    return cleaned, removed

def find_tokens(html: str) -> List[str]:
    """Token names in order of first appearance"""
    seen = []
    for name in TOKEN_PATTERN.findall(html or ""):
        if name not in seen:
            seen.append(name)
    return seen
