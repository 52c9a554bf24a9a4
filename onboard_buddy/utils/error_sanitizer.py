"""
Error message sanitization for HTTP responses.

Validation messages written for users pass through unchanged; anything that
looks like internals (paths, SQL, tokens, module names) is replaced by a
generic message for the status code.
"""

from __future__ import annotations

import re

from onboard_buddy.observability.logging import get_logger

logger = get_logger(__name__)

SENSITIVE_PATTERNS = [
    # File paths
    r"/[^\s]+\.py",
    r"[A-Za-z]:\\[^\s]+",
    # Stack traces
    r"Traceback \(most recent call last\)",
    r"File \".*\"",
    # Database errors
    r"sqlite3?\.",
    r"UNIQUE constraint",
    r"no such table",
    r"no such column",
    # Credentials
    r"Bearer [A-Za-z0-9._-]+",
    r"\b[A-Za-z0-9_-]{32,}\b",
    # Internal module names
    r"onboard_buddy\.[a-z_.]+",
]

GENERIC_MESSAGES = {
    400: "Invalid request. Please check your input and try again.",
    401: "Authentication required.",
    404: "Resource not found.",
    422: "Invalid data format.",
    500: "An internal error occurred. Please try again later.",
    502: "Upstream service error.",
}


def sanitize_error_message(message: str, status_code: int = 500) -> str:
    """
    Args:
        message: The original error message
        status_code: HTTP status code (selects the generic fallback)

    Returns:
        ``message`` if it is safe to show, else the generic message
    """
    generic = GENERIC_MESSAGES.get(status_code, "An error occurred.")
    if not message or status_code >= 500:
        return generic

    for pattern in SENSITIVE_PATTERNS:
        if re.search(pattern, message, re.IGNORECASE):
            logger.warning("Sanitized sensitive error pattern: %s", pattern)
            return generic

    if "\n" in message or len(message) > 500:
        return generic
    return message


def get_safe_error_detail(error: Exception, status_code: int = 500, context: str | None = None) -> str:
    """Log ``error`` in full and return what the client may see."""
    logger.error("Error (status=%d): %s - %s", status_code, type(error).__name__, error)
    if context and status_code >= 500:
        return context
    return sanitize_error_message(str(error), status_code)
