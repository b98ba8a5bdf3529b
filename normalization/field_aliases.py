import logging
from typing import Any, Dict, List, Optional

from config import load_config

logger = logging.getLogger(__name__)

class AliasResolver:
    """Resolves canonical field values from records that use historic key spellings.

    The alias table maps a record kind (``work_experience``, ``education``, ...)
    to canonical field names, each with an ordered list of accepted keys. The
    first key present with a non-null, non-blank value wins.
    """

    def __init__(self, aliases: Optional[Dict[str, Dict[str, List[str]]]] = None):
        if aliases is None:
            aliases = load_config().get("aliases", {})
        self.aliases = aliases or {}
        if not self.aliases:
            logger.warning("No field aliases configured, only canonical keys will resolve")

    def aliases_for(self, kind: str, field: str) -> List[str]:
        return self.aliases.get(kind, {}).get(field) or [field]

    def fields_for(self, kind: str) -> List[str]:
        return list(self.aliases.get(kind, {}).keys())

    def resolve(self, record: Dict, kind: str, field: str, default: Any = None) -> Any:
        if not isinstance(record, dict):
            return default
        for key in self.aliases_for(kind, field):
            value = record.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            return value
        return default

    def resolve_record(self, record: Dict, kind: str) -> Dict[str, Any]:
        """Resolve every canonical field of ``kind``; unresolved fields map to None"""
        return {field: self.resolve(record, kind, field) for field in self.fields_for(kind)}
