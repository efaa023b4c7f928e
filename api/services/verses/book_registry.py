# api/services/verses/book_registry.py
"""
Bible book registry.

Maps canonical book names to their accepted abbreviations and provides
case-insensitive lookup by either. Built once from the YAML book table
and never mutated afterwards, so a single instance can be shared freely.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple

from .config_loader import load_book_table

logger = logging.getLogger(__name__)

ROMAN_PREFIXES = {"i": "1", "ii": "2", "iii": "3"}
ARABIC_TO_ROMAN = {"1": "I", "2": "II", "3": "III"}


@dataclass(frozen=True)
class BibleBook:
    """
    A book of the Bible.

    Attributes:
        name: Canonical book name (e.g., "Genesis", "1 John")
        abbreviations: Accepted abbreviations, in table order
        chapters: Chapter count if known (1 marks a single-chapter book)
    """
    name: str
    abbreviations: Tuple[str, ...] = ()
    chapters: Optional[int] = None

    @property
    def is_single_chapter(self) -> bool:
        return self.chapters == 1

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "abbreviations": list(self.abbreviations),
            "chapters": self.chapters,
        }


def _key(token: str) -> str:
    """Lookup key: lowercase, trimmed, inner whitespace collapsed."""
    return re.sub(r"\s+", " ", token.strip()).lower()


class BookRegistry:
    """
    Immutable lookup table of Bible books.

    Usage:
        registry = BookRegistry.from_records([
            {"name": "Genesis", "abbreviations": ["Gen", "Gn"]},
        ])
        registry.resolve("gen").name    # "Genesis"
        registry.full_name("Hezekiah")   # "Hezekiah" (unknown, verbatim)
    """

    def __init__(self, books: Iterable[BibleBook]):
        self._books: Tuple[BibleBook, ...] = tuple(books)
        self._lookup: Dict[str, BibleBook] = {}

        seen_names = set()
        for book in self._books:
            name_key = _key(book.name)
            if name_key in seen_names:
                raise ValueError(f"Duplicate book name in registry: {book.name}")
            seen_names.add(name_key)

        # Canonical names take precedence over abbreviations, then table
        # order decides between colliding abbreviations.
        for book in self._books:
            self._lookup.setdefault(_key(book.name), book)
        for book in self._books:
            for abbr in book.abbreviations:
                self._lookup.setdefault(_key(abbr), book)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "BookRegistry":
        """Build a registry from {name, abbreviations, chapters?} records."""
        books = []
        for record in records:
            if not record.get("name"):
                raise ValueError(f"Book record without a name: {record!r}")
            books.append(BibleBook(
                name=str(record["name"]),
                abbreviations=tuple(str(a) for a in record.get("abbreviations") or ()),
                chapters=record.get("chapters"),
            ))
        return cls(books)

    @property
    def books(self) -> Tuple[BibleBook, ...]:
        return self._books

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self):
        return iter(self._books)

    def resolve(self, token: str) -> Optional[BibleBook]:
        """
        Find a book by canonical name or abbreviation.

        Matching is case-insensitive. A trailing period ("Gen.") and a
        Roman numeral prefix ("II Kings") are also accepted.

        Args:
            token: Book name as written

        Returns:
            The matching BibleBook, or None if the token is unknown
        """
        key = _key(token)
        if not key:
            return None

        book = self._lookup.get(key)
        if book is None and key.endswith("."):
            book = self._lookup.get(key.rstrip(".").strip())
        if book is None:
            prefix, _, rest = key.partition(" ")
            if prefix in ROMAN_PREFIXES and rest:
                return self.resolve(f"{ROMAN_PREFIXES[prefix]} {rest}")
        return book

    def full_name(self, token: str) -> str:
        """Canonical name for a token, or the token itself if unknown."""
        book = self.resolve(token)
        if book is None:
            logger.debug(f"Unknown book '{token}', using it verbatim")
            return token.strip()
        return book.name

    def is_single_chapter(self, name: str) -> bool:
        book = self.resolve(name)
        return bool(book and book.is_single_chapter)

    def build_pattern(self) -> str:
        """
        Build a regex alternation matching every name and abbreviation.

        Numbered books also match with a Roman numeral prefix. Alternatives
        are sorted longest first so "Song of Solomon" is never cut short by
        "Song".
        """
        tokens = set()
        for book in self._books:
            for token in (book.name, *book.abbreviations):
                tokens.add(token)
                match = re.match(r"^([123])\s*(\S.*)$", token)
                if match:
                    tokens.add(f"{ARABIC_TO_ROMAN[match.group(1)]} {match.group(2)}")

        ordered = sorted(tokens, key=lambda t: (-len(t), t.lower()))
        # Table spaces match any run of whitespace in the document
        return "|".join(r"\s+".join(re.escape(w) for w in t.split()) for t in ordered)


@lru_cache(maxsize=1)
def load_registry(path: Optional[str] = None) -> BookRegistry:
    """Return the shared registry built from the YAML book table."""
    registry = BookRegistry.from_records(load_book_table(path))
    logger.info(f"Loaded {len(registry)} Bible books")
    return registry


def list_books(registry: Optional[BookRegistry] = None) -> List[dict]:
    """Dump the registry as JSON-friendly dicts."""
    registry = registry or load_registry()
    return [book.to_dict() for book in registry]
