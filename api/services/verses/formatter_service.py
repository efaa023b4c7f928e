# api/services/verses/formatter_service.py
"""
Verse formatter service.

Ties detection, normalization and rendering together for callers that
work on whole documents: it previews the link/embed for each detection
and splices formatted references back into the text.
"""

import logging
from typing import List, Optional, Tuple

from .book_registry import BookRegistry, load_registry
from .config_loader import VerseFormatterSettings, load_settings
from .detector import DetectedReference, VerseDetector
from .normalizer import CanonicalReference, ReferenceNormalizer
from .renderer import format_reference

logger = logging.getLogger(__name__)


class VerseFormatterService:
    """
    Unified service for detecting and formatting Bible references.

    Usage:
        service = VerseFormatterService()

        # What is still unlinked?
        for ref in service.detect(document):
            print(ref.text, service.preview(ref))

        # Format one detection
        ref = service.detect(document)[0]
        document = service.replace_reference(
            document, ref, service.format(ref.text, original=ref.original_text)
        )

        # Or everything at once
        document, count = service.format_document(document)
    """

    def __init__(
        self,
        registry: Optional[BookRegistry] = None,
        settings: Optional[VerseFormatterSettings] = None,
    ):
        self.registry = registry or load_registry()
        self.settings = settings or load_settings()
        self.detector = VerseDetector(self.registry, self.settings.resolve_overlaps)
        self.normalizer = ReferenceNormalizer(self.registry, self.settings.strict_ranges)

    def detect(self, text: str) -> List[DetectedReference]:
        return self.detector.detect(text)

    def expand(self, text: str) -> List[CanonicalReference]:
        return self.normalizer.expand(text)

    def format(self, text: str, embed: bool = False, original: Optional[str] = None) -> str:
        """Link or embed a single reference string; unrecognized text comes back unchanged."""
        return format_reference(text, embed, self.settings, original, self.normalizer)

    def preview(self, ref: DetectedReference) -> dict:
        """Link and embed renderings for one detection."""
        return {
            "link": self.format(ref.text, original=ref.original_text),
            "embed": self.format(ref.text, embed=True, original=ref.original_text),
        }

    def replace_reference(self, document: str, ref: DetectedReference, replacement: str) -> str:
        """
        Splice a replacement over a detection.

        Raises:
            ValueError: if the document no longer holds the detected text at
                the recorded offsets
        """
        if document[ref.start:ref.end] != ref.original_text:
            raise ValueError(
                f"Stale detection: expected '{ref.original_text}' at "
                f"{ref.start}-{ref.end}, found '{document[ref.start:ref.end]}'"
            )
        return document[:ref.start] + replacement + document[ref.end:]

    def format_document(self, document: str, embed: bool = False) -> Tuple[str, int]:
        """
        Format every unlinked reference in a document.

        Replacements are applied from the end of the document backwards so
        the offsets of earlier detections stay valid.

        Returns:
            (formatted document, number of references formatted)
        """
        count = 0
        for ref in reversed(self.detect(document)):
            replacement = self.format(ref.text, embed=embed, original=ref.original_text)
            if replacement == ref.text:
                logger.debug(f"Leaving unrecognized reference '{ref.original_text}' as is")
                continue
            document = self.replace_reference(document, ref, replacement)
            count += 1

        logger.info(f"Formatted {count} references")
        return document, count
