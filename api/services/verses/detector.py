# api/services/verses/detector.py
"""
Reference detector.

Scans a document for references that are not yet linked. Two surface
syntaxes are matched independently (numeric and written-out) and the
candidates are then masked against spans already inside [[...]] or
![[...]] markup.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .book_registry import BookRegistry, load_registry
from .config_loader import load_settings
from .patterns import LINK_PATTERN, WRITTEN_PATTERN, compile_numeric_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkRange:
    """Span of existing link or embed markup."""
    start: int
    end: int

    def contains(self, start: int, end: int) -> bool:
        return start >= self.start and end <= self.end


@dataclass(frozen=True)
class DetectedReference:
    """
    An unlinked reference found in a document.

    Attributes:
        text: Normalized display form (e.g., "Ephesians 5.8")
        original_text: Exact substring matched, used as the link alias
        start: Offset of the first character in the document
        end: Offset one past the last character
        kind: "numeric" or "written"

    Offsets are only valid for the document that was scanned.
    """
    text: str
    original_text: str
    start: int
    end: int
    kind: str = "numeric"

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "DetectedReference") -> bool:
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "original": self.original_text,
            "start": self.start,
            "end": self.end,
            "kind": self.kind,
        }


def find_link_ranges(text: str) -> List[LinkRange]:
    """Spans of every [[link]] and ![[embed]] in the text."""
    return [LinkRange(m.start(), m.end()) for m in LINK_PATTERN.finditer(text)]


def resolve_overlaps(matches: List[DetectedReference]) -> List[DetectedReference]:
    """
    Drop detections that overlap a longer one.

    Ties keep the earlier start, then the earlier detection. Input must be
    in document order; output keeps that order.
    """
    ranked = sorted(
        range(len(matches)),
        key=lambda i: (-matches[i].length, matches[i].start, i),
    )
    kept: List[int] = []
    for i in ranked:
        if any(matches[i].overlaps(matches[j]) for j in kept):
            logger.debug(f"Dropping overlapping detection '{matches[i].original_text}'")
            continue
        kept.append(i)
    return [matches[i] for i in sorted(kept)]


class VerseDetector:
    """
    Finds unlinked Bible references in text.

    Usage:
        detector = VerseDetector()
        for ref in detector.detect("Read Romans 8:1, 3 and [[John 3.16]]"):
            print(ref.text, ref.start, ref.end)   # Romans 8:1, 3  5  18
    """

    def __init__(self, registry: Optional[BookRegistry] = None, resolve_overlapping: Optional[bool] = None):
        self.registry = registry or load_registry()
        if resolve_overlapping is None:
            resolve_overlapping = load_settings().resolve_overlaps
        self.resolve_overlapping = resolve_overlapping
        self.numeric_pattern = compile_numeric_pattern(self.registry.build_pattern())
        self.written_pattern = WRITTEN_PATTERN

    def detect(self, text: str) -> List[DetectedReference]:
        """
        Detect references outside existing links.

        Args:
            text: Full document text

        Returns:
            DetectedReference list sorted by start offset

        Raises:
            TypeError: if text is None
        """
        if text is None:
            raise TypeError("text must be a string, not None")

        link_ranges = find_link_ranges(text)

        def is_inside_link(start: int, end: int) -> bool:
            return any(r.contains(start, end) for r in link_ranges)

        matches: List[DetectedReference] = []

        # Numeric references
        for m in self.numeric_pattern.finditer(text):
            if is_inside_link(m.start(), m.end()):
                continue
            matches.append(DetectedReference(
                text=f"{m.group(1)} {m.group(2)}",
                original_text=m.group(0),
                start=m.start(),
                end=m.end(),
                kind="numeric",
            ))

        # Written-out references
        for m in self.written_pattern.finditer(text):
            if is_inside_link(m.start(), m.end()):
                continue
            book, chapter, verse = m.groups()
            matches.append(DetectedReference(
                text=f"{book.strip()} {chapter}.{verse}",
                original_text=m.group(0),
                start=m.start(),
                end=m.end(),
                kind="written",
            ))

        # Keep order of appearance
        matches.sort(key=lambda d: d.start)

        if self.resolve_overlapping:
            matches = resolve_overlaps(matches)

        logger.debug(f"Detected {len(matches)} references in {len(text)} characters")
        return matches


_default_detector: Optional[VerseDetector] = None


def get_detector() -> VerseDetector:
    """Get or create the shared detector."""
    global _default_detector
    if _default_detector is None:
        _default_detector = VerseDetector()
    return _default_detector


def detect(text: str) -> List[DetectedReference]:
    """Detect references using the shared registry and settings."""
    return get_detector().detect(text)
