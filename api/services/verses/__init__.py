# api/services/verses/__init__.py
"""
Bible reference detection and formatting for markdown notes.

This package provides:
- BookRegistry: Book names and abbreviations from config/bible_books.yml
- VerseDetector: Find unlinked references in a document
- ReferenceNormalizer: Expand a reference into canonical (book, chapter, verse)
- render_link / render_embed: [[target|alias]] and ![[target#target|alias]]
- VerseFormatterService: Unified interface for documents
"""

from .config_loader import (
    VerseFormatterSettings,
    load_settings,
    reload_settings,
    load_book_table,
    reload_book_table,
)
from .book_registry import (
    BibleBook,
    BookRegistry,
    load_registry,
    list_books,
)
from .normalizer import (
    CanonicalReference,
    LocatorState,
    ReferenceNormalizer,
    ReferenceParseError,
    InvalidRangeError,
    expand,
    split_reference,
    normalize_locator,
)
from .detector import (
    DetectedReference,
    LinkRange,
    VerseDetector,
    detect,
    find_link_ranges,
)
from .renderer import (
    render_link,
    render_embed,
    link_single_verse,
    embed_single_verse,
    link_verse_range,
    embed_verse_range,
    format_reference,
)
from .formatter_service import VerseFormatterService

__all__ = [
    # Unified Service (primary interface)
    "VerseFormatterService",
    # Configuration
    "VerseFormatterSettings",
    "load_settings",
    "reload_settings",
    "load_book_table",
    "reload_book_table",
    # Book registry
    "BibleBook",
    "BookRegistry",
    "load_registry",
    "list_books",
    # Normalizer
    "CanonicalReference",
    "LocatorState",
    "ReferenceNormalizer",
    "ReferenceParseError",
    "InvalidRangeError",
    "expand",
    "split_reference",
    "normalize_locator",
    # Detector
    "DetectedReference",
    "LinkRange",
    "VerseDetector",
    "detect",
    "find_link_ranges",
    # Renderer
    "render_link",
    "render_embed",
    "link_single_verse",
    "embed_single_verse",
    "link_verse_range",
    "embed_verse_range",
    "format_reference",
]
