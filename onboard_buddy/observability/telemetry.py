"""
Minimal telemetry helpers.

These wrappers do not ship metrics anywhere; they provide structured log lines
and in-memory counters so tests can assert instrumentation.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any

logger = logging.getLogger("onboard_buddy.telemetry")

_COUNTERS: dict[str, int] = {}
_COUNTERS_LOCK = Lock()


def log_event(event_name: str, **fields: Any) -> None:
    """
    Structured log event. Caller must keep PII out of ``fields``.

    Side Effects:
        - Writes to logger (info level)
    """
    logger.info("event=%s %s", event_name, fields)


def counter(name: str, increment: int = 1) -> int:
    """
    Increment an in-memory counter and emit a debug log.

    Cleanup jobs run on worker threads, so the update is locked.

    Side Effects:
        - Modifies _COUNTERS dict (in-memory state)
        - Writes to logger (debug level)
    """
    with _COUNTERS_LOCK:
        value = _COUNTERS.get(name, 0) + increment
        _COUNTERS[name] = value
    logger.debug("counter=%s value=%s", name, value)
    return value


def get_counter(name: str) -> int:
    return _COUNTERS.get(name, 0)


def reset_counters() -> None:
    """
    Clear all counters (useful for tests).

    Side Effects:
        - Clears _COUNTERS dict
    """
    with _COUNTERS_LOCK:
        _COUNTERS.clear()
