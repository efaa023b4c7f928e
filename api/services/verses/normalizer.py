# api/services/verses/normalizer.py
"""
Reference normalizer.

Turns a reference string into an ordered list of canonical
(book, chapter, verse) references, expanding lists and ranges:

- "John 3:16"            -> John 3.16
- "Romans 8:1, 3, 5"     -> Romans 8.1, Romans 8.3, Romans 8.5
- "Genesis 1:1-3"        -> Genesis 1.1, Genesis 1.2, Genesis 1.3
- "Psalm 23, 24"         -> Psalms 23, Psalms 24 (whole chapters)
- "Rom 8, 9:1-2"         -> Romans 8, Romans 9.1, Romans 9.2
- "Jude 3"               -> Jude 1.3 (single-chapter book)
- "Colossians1.2"        -> Colossians 1.2

Bare numbers are ambiguous: "8, 9-10" lists chapters while "8:1, 3-5"
lists verses. LocatorState carries the running chapter and whether a
verse has been seen, and that alone decides how a bare number is read.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .book_registry import BookRegistry, load_registry
from .config_loader import load_settings
from .patterns import NUMERAL_PREFIX, WRITTEN_PATTERN

logger = logging.getLogger(__name__)

EXPLICIT_PART = re.compile(r"^(\d+):(\d+)(?:-(\d+))?$")
BARE_PART = re.compile(r"^(\d+)(?:-(\d+))?$")
# "3:16", "8," or "23" but not "1John"
LOCATOR_TOKEN = re.compile(r"^\d+(?:[^\dA-Za-z]|$)")


class ReferenceParseError(Exception):
    """Raised when a reference cannot be parsed."""
    pass


class InvalidRangeError(ReferenceParseError):
    """Raised in strict mode when a range ends before it starts."""
    pass


@dataclass(frozen=True)
class CanonicalReference:
    """
    A fully resolved reference.

    Attributes:
        book: Canonical book name (e.g., "Romans", "1 John")
        chapter: Chapter number as a string
        verse: Verse number as a string, None for a whole chapter
    """
    book: str
    chapter: str
    verse: Optional[str] = None

    @property
    def target(self) -> str:
        """Link target: "Book C.V" or "Book C"."""
        if self.verse is None:
            return f"{self.book} {self.chapter}"
        return f"{self.book} {self.chapter}.{self.verse}"

    @property
    def is_chapter(self) -> bool:
        return self.verse is None

    def to_dict(self) -> dict:
        return {
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "target": self.target,
        }


@dataclass
class LocatorState:
    """Running context while reading the comma-separated locator parts."""
    current_chapter: Optional[str] = None
    saw_verse: bool = False


def _number(value: str) -> str:
    return str(int(value))


def rewrite_written_form(text: str) -> str:
    """Rewrite "Book chapter C, verse V" as "Book C:V"; other text is returned as is."""
    match = WRITTEN_PATTERN.search(text)
    if not match:
        return text
    book, chapter, verse = match.groups()
    return f"{book.strip()} {chapter}:{verse}"


def split_reference(text: str) -> Tuple[str, str]:
    """
    Split a reference into its book span and its locator span.

    A letter directly followed by a digit is separated first, so
    "Colossians1" reads as "Colossians 1". A leading numeral prefix
    ("1", "II") belongs to the book name.

    Returns:
        (book, locator) - locator is "" when no number follows the book
    """
    text = re.sub(r"([A-Za-z])(\d)", r"\1 \2", text)
    tokens = re.sub(r"\s+", " ", text).strip().split(" ")

    if len(tokens) >= 2 and NUMERAL_PREFIX.match(tokens[0]):
        # Numbered book: the rest of the name runs up to the first number
        rest = tokens[1:]
        idx = next((i for i, t in enumerate(rest) if LOCATOR_TOKEN.match(t)), len(rest))
        book_tokens = tokens[:1] + rest[:max(idx, 1)]
        locator_tokens = rest[max(idx, 1):]
    else:
        idx = next((i for i, t in enumerate(tokens) if LOCATOR_TOKEN.match(t)), len(tokens))
        book_tokens = tokens[:idx]
        locator_tokens = tokens[idx:]

    return " ".join(book_tokens).strip(), " ".join(locator_tokens).strip()


def normalize_locator(locator: str) -> str:
    """
    Canonicalize the chapter/verse part of a reference.

    "and"/"&" become list commas, "verse"/"vs."/"v."/"."/":" become ":",
    dashes become "-" and all whitespace is dropped:

        "8 verse 1 and 3"  -> "8:1,3"
        "3.16 – 18"        -> "3:16-18"
    """
    locator = locator.lower().strip().rstrip(".;")
    locator = re.sub(r"\s*(?:\band\b|&)\s*", ",", locator)
    locator = re.sub(r"\s*\b(?:verse|vs\.?|v\.?)(?=\s|\d|$)\s*", ":", locator)
    locator = re.sub(r"\s*[.:]\s*", ":", locator)
    locator = re.sub(r"\s*[-–—]\s*", "-", locator)
    locator = re.sub(r"\s*,\s*", ",", locator)
    return re.sub(r"\s+", "", locator)


class ReferenceNormalizer:
    """
    Expands reference strings into CanonicalReference lists.

    Usage:
        normalizer = ReferenceNormalizer()
        refs = normalizer.expand("Rom 8:1, 3")
        [r.target for r in refs]   # ["Romans 8.1", "Romans 8.3"]
    """

    def __init__(self, registry: Optional[BookRegistry] = None, strict_ranges: Optional[bool] = None):
        self.registry = registry or load_registry()
        if strict_ranges is None:
            strict_ranges = load_settings().strict_ranges
        self.strict_ranges = strict_ranges

    def expand(self, reference_text: str) -> List[CanonicalReference]:
        """
        Expand a reference string into canonical references.

        Args:
            reference_text: e.g. "Romans 8:1, 3" or "Ephesians chapter 5, verse 8"

        Returns:
            References in input order; an empty list if the text is not a
            recognizable reference

        Raises:
            TypeError: if reference_text is None
            InvalidRangeError: inverted range while strict_ranges is on
        """
        if reference_text is None:
            raise TypeError("reference_text must be a string, not None")

        book_span, locator = split_reference(rewrite_written_form(reference_text))
        if not book_span or not locator:
            logger.debug(f"No book/locator in '{reference_text}'")
            return []

        book = self.registry.full_name(book_span)
        state = LocatorState()
        if self.registry.is_single_chapter(book):
            state = LocatorState(current_chapter="1", saw_verse=True)

        refs: List[CanonicalReference] = []
        for part in normalize_locator(locator).split(","):
            if not part:
                continue
            expanded = self._expand_part(book, part, state, reference_text)
            if expanded is None:
                return []
            refs.extend(expanded)

        return refs

    def _expand_part(
        self,
        book: str,
        part: str,
        state: LocatorState,
        reference_text: str,
    ) -> Optional[List[CanonicalReference]]:
        """Read one locator part and advance the state; None if malformed."""
        match = EXPLICIT_PART.match(part)
        if match:
            chapter, start, end = match.groups()
            verses = self._range(start, end, reference_text)
            if verses is None:
                return None
            state.current_chapter = _number(chapter)
            state.saw_verse = True
            return [CanonicalReference(book, state.current_chapter, v) for v in verses]

        match = BARE_PART.match(part)
        if match:
            values = self._range(match.group(1), match.group(2), reference_text)
            if values is None:
                return None
            if state.saw_verse and state.current_chapter is not None:
                return [CanonicalReference(book, state.current_chapter, v) for v in values]
            state.current_chapter = values[-1]
            return [CanonicalReference(book, c) for c in values]

        logger.debug(f"Malformed locator part '{part}' in '{reference_text}'")
        return None

    def _range(self, start: str, end: Optional[str], reference_text: str) -> Optional[List[str]]:
        first = int(start)
        last = int(end) if end is not None else first
        if last < first:
            if self.strict_ranges:
                raise InvalidRangeError(f"Range ends before it starts: '{reference_text}'")
            logger.debug(f"Inverted range in '{reference_text}', leaving it unchanged")
            return None
        return [str(n) for n in range(first, last + 1)]


_default_normalizer: Optional[ReferenceNormalizer] = None


def get_normalizer() -> ReferenceNormalizer:
    """Get or create the shared normalizer."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = ReferenceNormalizer()
    return _default_normalizer


def expand(reference_text: str) -> List[CanonicalReference]:
    """Expand a reference using the shared registry and settings."""
    return get_normalizer().expand(reference_text)
