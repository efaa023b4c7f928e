# api/utils/errors.py
"""
JSON error responses for the verse API.

Every error body has the shape {"error": "error_code", "detail": "optional message"}
with a snake_case code a client can branch on:

- text_required / invalid_text / invalid_mode: the request body is unusable
- invalid_reference: the text was read but is not an acceptable reference
- *_failed: something broke on our side (500)
"""

from flask import jsonify
from typing import Optional


def error_response(
    code: str,
    status: int = 400,
    detail: Optional[str] = None,
    **extra
):
    """
    Create a standardized error response.

    Args:
        code: Machine-readable error code (snake_case)
        status: HTTP status code
        detail: Human-readable explanation (optional)
        **extra: Additional fields to include in response

    Returns:
        Tuple of (jsonify response, status code)
    """
    payload = {"error": code}
    if detail:
        payload["detail"] = detail
    payload.update(extra)
    return jsonify(payload), status


# Request body (400)
def missing_field(field: str):
    """Required field is missing or empty."""
    return error_response(f"{field}_required", 400, f"Missing required field: {field}")


def invalid_field(field: str, detail: str = None):
    """Field is present but has the wrong type or value."""
    return error_response(f"invalid_{field}", 400, detail)


# Reference (400)
def invalid_reference(detail: str = None):
    """Text could not be accepted as a Bible reference, e.g. an inverted range in strict mode."""
    return error_response("invalid_reference", 400, detail)


# Server Error (500)
def server_error(code: str = "internal_error", detail: str = None):
    """Internal server error."""
    return error_response(code, 500, detail)
