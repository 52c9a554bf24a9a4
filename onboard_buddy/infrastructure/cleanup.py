"""
Best-effort background cleanup queue.

Releasing superseded images in object storage must never block or fail the
store mutation that made them obsolete. Jobs run on a small thread pool; a job
that raises or returns False is logged and counted, never retried and never
surfaced to the caller.
"""

from __future__ import annotations

import concurrent.futures
from collections.abc import Callable
from threading import Lock
from typing import Any

from onboard_buddy.config import CLEANUP_MAX_WORKERS
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import counter

logger = get_logger(__name__)


def _run_job(description: str, fn: Callable[..., Any], args: tuple[Any, ...]) -> bool:
    try:
        result = fn(*args)
    except Exception as e:
        logger.warning("Cleanup job failed (%s): %s", description, e)
        counter("cleanup.failed")
        return False

    if result is False:
        logger.warning("Cleanup job reported failure (%s)", description)
        counter("cleanup.failed")
        return False

    logger.debug("Cleanup job done (%s)", description)
    counter("cleanup.succeeded")
    return True


class CleanupQueue:
    """Fire-and-forget executor for best-effort cleanup jobs."""

    def __init__(self, max_workers: int = CLEANUP_MAX_WORKERS):
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="onboard-cleanup"
        )
        self._pending: set[concurrent.futures.Future[bool]] = set()
        self._lock = Lock()
        self._closed = False

    def submit(self, description: str, fn: Callable[..., Any], *args: Any) -> None:
        """
        Schedule ``fn(*args)``.

        Side Effects:
            - Runs fn on a worker thread
            - Logs a warning and increments ``cleanup.failed`` on failure
        """
        if self._closed:
            logger.warning("Cleanup queue closed, dropping job: %s", description)
            counter("cleanup.dropped")
            return

        future = self._executor.submit(_run_job, description, fn, args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: concurrent.futures.Future[bool]) -> None:
        with self._lock:
            self._pending.discard(future)

    def drain(self, timeout: float | None = None) -> None:
        """Wait for every job submitted so far."""
        with self._lock:
            pending = list(self._pending)
        concurrent.futures.wait(pending, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait)
