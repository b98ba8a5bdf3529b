import re
import time
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel

from config import load_config
from rendering_engine.style_builder import extract_style
from utils.error_handling import TemplateNotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STORE_CONFIG = {
    "directory": "templates",
    "cache_ttl_seconds": 300,
    "extensions": [".htm", ".html"],
    "id_prefix": "storage-",
    "categories": {
        "entry-level": ["entry", "student"],
        "mid-level": ["senior", "experienced"],
        "professional": ["executive", "pro"],
    },
    "premium_keywords": ["premium", "pro"],
}

class TemplateCache(Generic[T]):
    """Keyed cache of (value, fetched_at) entries that go stale after ``ttl_seconds``.

    The clock is injectable so freshness can be tested without sleeping.
    ``get_or_load`` allows at most one refresh per key at a time; concurrent
    callers for the same key wait for that refresh and reuse its value.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, Tuple[T, float]] = {}
        self._key_locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _is_fresh(self, fetched_at: float) -> bool:
        return self.clock() - fetched_at < self.ttl_seconds

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, fetched_at = entry
        return value if self._is_fresh(fetched_at) else None

    def put(self, key: str, value: T) -> None:
        self._entries[key] = (value, self.clock())

    def get_or_load(self, key: str, loader: Callable[[str], T]) -> T:
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Template cache hit: {key}")
            return cached

        with self._guard:
            lock = self._key_locks.setdefault(key, threading.Lock())
        with lock:
            # Another caller may have refreshed while we waited
            cached = self.get(key)
            if cached is not None:
                return cached
            logger.debug(f"Template cache refresh: {key}")
            value = loader(key)
            self.put(key, value)
            return value

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

class TemplateInfo(BaseModel):
    """Listing entry for a stored raw-HTML template"""
    id: str
    name: str
    category: str
    is_premium: bool
    css: str = ""

class FileSystemTemplateStore:
    """Raw-HTML templates stored as ``<id>.htm`` files in one directory"""

    def __init__(self, directory: Optional[str] = None, cache: Optional[TemplateCache] = None,
                 config: Optional[Dict] = None):
        if config is None:
            config = load_config().get("rendering", {}).get("template_store", {})
        self.config = {**DEFAULT_STORE_CONFIG, **(config or {})}
        self.directory = Path(directory or self.config["directory"])
        self.cache = cache if cache is not None else TemplateCache(self.config["cache_ttl_seconds"])

    def clean_id(self, template_id: str) -> str:
        clean = (template_id or "").strip().strip("/")
        prefix = self.config["id_prefix"]
        if prefix and clean.startswith(prefix):
            clean = clean[len(prefix):]
        for extension in self.config["extensions"]:
            if clean.endswith(extension):
                clean = clean[:-len(extension)]
                break
        return clean

    def path_for(self, template_id: str) -> Path:
        clean = self.clean_id(template_id)
        for extension in self.config["extensions"]:
            candidate = self.directory / f"{clean}{extension}"
            if candidate.is_file():
                return candidate
        return self.directory / f"{clean}{self.config['extensions'][0]}"

    def fetch_template(self, template_id: str) -> str:
        """Return the template HTML, raising TemplateNotFoundError when absent"""
        clean = self.clean_id(template_id)
        if not clean:
            raise TemplateNotFoundError("Template id is empty")
        return self.cache.get_or_load(clean, self._read_template)

    def _read_template(self, clean_id: str) -> str:
        path = self.path_for(clean_id)
        # Reject ids that escape the template directory
        if self.directory.resolve() not in path.resolve().parents:
            raise TemplateNotFoundError(f"Template not found: {clean_id}")
        if not path.is_file():
            logger.error(f"Template not found: {path}")
            raise TemplateNotFoundError(f"Template not found: {clean_id}")
        logger.info(f"Loading template {path.name}")
        return path.read_text(encoding="utf-8")

    def list_templates(self, include_premium: bool = False) -> List[TemplateInfo]:
        if not self.directory.is_dir():
            logger.warning(f"Template directory does not exist: {self.directory}")
            return []

        templates = []
        for path in sorted(self.directory.iterdir()):
            if path.suffix not in self.config["extensions"] or not path.is_file():
                continue
            template_id = path.stem
            html = self.fetch_template(template_id)
            info = TemplateInfo(
                id=template_id,
                name=self.format_name(template_id),
                category=self.category_for(template_id),
                is_premium=self.is_premium(template_id),
                css=extract_style(html),
            )
            if info.is_premium and not include_premium:
                continue
            templates.append(info)

        logger.info(f"Listed {len(templates)} templates from {self.directory}")
        return templates

    @staticmethod
    def format_name(template_id: str) -> str:
        spaced = re.sub(r"[-_]", " ", template_id)
        return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced).strip()

    def category_for(self, template_id: str) -> str:
        name = template_id.lower()
        for category, keywords in self.config["categories"].items():
            if any(keyword in name for keyword in keywords):
                return category
        return "mid-level"

    def is_premium(self, template_id: str) -> bool:
        name = template_id.lower()
        return any(keyword in name for keyword in self.config["premium_keywords"])
