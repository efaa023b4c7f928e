"""
Verse Formatter Configuration Loader

Loads the Bible book table and the rendering settings from YAML config.
"""

import logging
import os
import yaml
from dataclasses import dataclass, fields
from typing import Dict, List, Any, Optional
from functools import lru_cache

from core.config import VERSE_BOOKS_FILE, VERSE_SETTINGS_FILE

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "[[{book} {chapter}.{verse}]]"


@dataclass
class VerseFormatterSettings:
    """
    Settings consumed by the detector, normalizer and renderer.

    Attributes:
        use_custom_template: Render links through `template` instead of
            the fixed [[target|alias]] form
        template: Link template with {book}, {chapter}, {verse}, {original}
        max_verses: Cap on detections returned with previews
        strict_ranges: Raise on inverted ranges instead of leaving text as is
        resolve_overlaps: Keep only the longest of overlapping detections
    """
    use_custom_template: bool = False
    template: str = DEFAULT_TEMPLATE
    max_verses: int = 50
    strict_ranges: bool = False
    resolve_overlaps: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "VerseFormatterSettings":
        """Build settings from a mapping, ignoring unknown keys."""
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown verse_formatter settings: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


@lru_cache(maxsize=1)
def load_book_table(path: Optional[str] = None) -> List[Dict[str, Any]]:
    """Load the list of book records from YAML config."""
    path = path or VERSE_BOOKS_FILE
    if not os.path.exists(path):
        raise FileNotFoundError(f"Bible book table not found: {path}")

    return _read_yaml(path).get('books', [])


@lru_cache(maxsize=1)
def load_settings(path: Optional[str] = None) -> VerseFormatterSettings:
    """Load rendering settings, falling back to defaults if the file is missing."""
    path = path or VERSE_SETTINGS_FILE
    if not os.path.exists(path):
        logger.info(f"No settings file at {path}, using defaults")
        return VerseFormatterSettings()

    return VerseFormatterSettings.from_dict(_read_yaml(path).get('verse_formatter'))


def reload_book_table():
    """Clear cache and reload the book table."""
    load_book_table.cache_clear()
    return load_book_table()


def reload_settings():
    """Clear cache and reload settings."""
    load_settings.cache_clear()
    return load_settings()
