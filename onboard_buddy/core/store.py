"""
Observable state container shared by every Onboard Buddy store.

A store owns one bounded context's state, replaces it wholesale on every
mutation, and then commits: the new state is written to the snapshot store
(when one is attached) and every subscriber is called with the store.
Cross-store reactions (gallery change -> mission recomputation) are wired
through ``subscribe`` by the workspace, never by ambient lookups.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any, ClassVar
from zoneinfo import ZoneInfo

from onboard_buddy.config import TIMEZONE
from onboard_buddy.observability.logging import get_logger

if TYPE_CHECKING:
    from pydantic import BaseModel

    from onboard_buddy.infrastructure.snapshots import SnapshotStore

logger = get_logger(__name__)

Clock = Callable[[], datetime]
Listener = Callable[["Store"], None]


def utc_now() -> datetime:
    """Return current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def local_today(now: datetime, timezone: str = TIMEZONE) -> date:
    """Calendar date of ``now`` in ``timezone``."""
    return now.astimezone(ZoneInfo(timezone)).date()


def patch_changes(patch: BaseModel, clearable: Iterable[str] = (), mode: str = "python") -> dict[str, Any]:
    """
    Fields explicitly set on ``patch``.

    An explicit null only survives for ``clearable`` fields; elsewhere it means
    "leave unchanged".
    """
    keep = set(clearable)
    return {
        key: value
        for key, value in patch.model_dump(mode=mode, exclude_unset=True).items()
        if value is not None or key in keep
    }


class Store:
    """Base class: subscriptions, snapshot persistence and the migrate hook."""

    name: ClassVar[str]
    version: ClassVar[int] = 0

    def __init__(self, snapshots: SnapshotStore | None = None, clock: Clock = utc_now):
        self._snapshots = snapshots
        self._clock = clock
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self) -> None:
        """
        Publish the current state.

        Side Effects:
            - Saves a snapshot when persistence is attached
            - Calls every subscriber synchronously, in registration order
        """
        if self._snapshots is not None:
            self._snapshots.save(self.name, self.version, self.to_state())
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def hydrate(self) -> bool:
        """
        Replace in-memory state with the persisted snapshot, if any.

        Subscribers are not notified; the caller decides what to recompute.

        Returns:
            True if a snapshot was loaded
        """
        if self._snapshots is None:
            return False
        state = self._snapshots.load(self.name, self.version, self.migrate)
        if state is None:
            return False
        self.load_state(state)
        logger.debug("Hydrated %s from snapshot", self.name)
        return True

    def to_state(self) -> dict[str, Any]:
        raise NotImplementedError

    def load_state(self, state: dict[str, Any]) -> None:
        raise NotImplementedError

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        """Upgrade a snapshot written by ``from_version`` to ``self.version``."""
        raise NotImplementedError
