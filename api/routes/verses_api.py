# routes/verses_api.py
"""
API endpoints for Bible reference detection and formatting.

Provides access to:
- Detection of unlinked references in a document
- Expansion of a reference into canonical (book, chapter, verse) items
- Link/embed formatting of a single reference or a whole document
- The Bible book table
"""

import logging

from flask import Blueprint, request, jsonify

from services.verses import (
    VerseFormatterService,
    ReferenceParseError,
    list_books,
)
from utils.errors import missing_field, invalid_field, invalid_reference, server_error

logger = logging.getLogger(__name__)

verses_bp = Blueprint("verses_api", __name__, url_prefix="/api/verses")

MODES = ("link", "embed")

# Lazily initialized service instance
_service = None


def get_service() -> VerseFormatterService:
    """Get or create VerseFormatterService instance."""
    global _service
    if _service is None:
        _service = VerseFormatterService()
    return _service


def _read_text():
    """Return (data, text, error_response) from the JSON body."""
    data = request.get_json(silent=True) or {}
    text = data.get("text")
    if text is None or text == "":
        return data, None, missing_field("text")
    if not isinstance(text, str):
        return data, None, invalid_field("text", "text must be a string")
    return data, text, None


def _read_mode(data: dict):
    mode = data.get("mode", "link")
    if mode not in MODES:
        return None, invalid_field("mode", f"mode must be one of: {', '.join(MODES)}")
    return mode, None


# =============================================================================
# Detection Endpoints
# =============================================================================

@verses_bp.post("/detect")
def detect_verses():
    """
    Find unlinked Bible references in a document.

    Request body:
        {
            "text": "Read Romans 8:1, 3 and [[John 3.16]]."
        }

    Returns:
        {
            "references": [
                {
                    "text": "Romans 8:1, 3",
                    "original": "Romans 8:1, 3",
                    "start": 5,
                    "end": 18,
                    "kind": "numeric",
                    "link": "[[Romans 8.1|Romans 8.1]], [[Romans 8.3|Romans 8.3]]",
                    "embed": "![[Romans 8.1#Romans 8.1|Romans 8.1]]\\n..."
                }
            ],
            "total": 1,
            "truncated": false
        }
    """
    _, text, error = _read_text()
    if error:
        return error

    try:
        service = get_service()
        detected = service.detect(text)
        limit = service.settings.max_verses
        shown = detected[:limit] if limit and limit > 0 else detected
        return jsonify({
            "references": [
                {**ref.to_dict(), **service.preview(ref)}
                for ref in shown
            ],
            "total": len(detected),
            "truncated": len(shown) < len(detected),
        })
    except ReferenceParseError as e:
        return invalid_reference(str(e))
    except Exception as e:
        logger.exception("Verse detection failed")
        return server_error("detection_failed", str(e))


@verses_bp.post("/expand")
def expand_reference():
    """
    Expand a reference into canonical references.

    Request body:
        {"text": "Rom 8, 9:1-2"}

    Returns:
        {
            "text": "Rom 8, 9:1-2",
            "references": [
                {"book": "Romans", "chapter": "8", "verse": null, "target": "Romans 8"},
                {"book": "Romans", "chapter": "9", "verse": "1", "target": "Romans 9.1"},
                {"book": "Romans", "chapter": "9", "verse": "2", "target": "Romans 9.2"}
            ]
        }
    """
    _, text, error = _read_text()
    if error:
        return error

    try:
        refs = get_service().expand(text)
        return jsonify({
            "text": text,
            "references": [r.to_dict() for r in refs],
        })
    except ReferenceParseError as e:
        return invalid_reference(str(e))
    except Exception as e:
        logger.exception("Reference expansion failed")
        return server_error("expansion_failed", str(e))


# =============================================================================
# Formatting Endpoints
# =============================================================================

@verses_bp.post("/format")
def format_verse():
    """
    Link or embed one reference.

    Request body:
        {
            "text": "John 3.16",
            "mode": "link",          # or "embed"
            "original": "John 3:16"  # optional alias
        }

    Returns:
        {"text": "John 3.16", "result": "[[John 3.16|John 3:16]]", "changed": true}

    Unrecognized text is returned unchanged with "changed": false.
    """
    data, text, error = _read_text()
    if error:
        return error

    mode, error = _read_mode(data)
    if error:
        return error

    try:
        result = get_service().format(text, embed=mode == "embed", original=data.get("original"))
        return jsonify({"text": text, "result": result, "changed": result != text})
    except ReferenceParseError as e:
        return invalid_reference(str(e))
    except Exception as e:
        logger.exception("Verse formatting failed")
        return server_error("format_failed", str(e))


@verses_bp.post("/format-document")
def format_document():
    """
    Format every unlinked reference in a document.

    Request body:
        {"text": "See John 3:16.", "mode": "link"}

    Returns:
        {"text": "See [[John 3.16|John 3:16]].", "formatted": 1}
    """
    data, text, error = _read_text()
    if error:
        return error

    mode, error = _read_mode(data)
    if error:
        return error

    try:
        formatted_text, count = get_service().format_document(text, embed=mode == "embed")
        return jsonify({"text": formatted_text, "formatted": count})
    except ReferenceParseError as e:
        return invalid_reference(str(e))
    except Exception as e:
        logger.exception("Document formatting failed")
        return server_error("format_failed", str(e))


# =============================================================================
# Book Table
# =============================================================================

@verses_bp.get("/books")
def get_books():
    """
    List the Bible books and their abbreviations.

    Returns:
        {
            "books": [
                {"name": "Genesis", "abbreviations": ["Gen", "Gn", "Ge"], "chapters": 50},
                ...
            ]
        }
    """
    try:
        return jsonify({"books": list_books(get_service().registry)})
    except Exception as e:
        logger.exception("Failed to list books")
        return server_error("books_failed", str(e))
