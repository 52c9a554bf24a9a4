"""
Notification Center - capped, throttled, de-duplicated notification log.

Any subsystem may append; only the user marks notifications read. The unread
count is derived from the retained notifications, so it cannot drift from
their ``read`` flags.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from onboard_buddy.config import (
    NOTIFICATION_DUPLICATE_WINDOW_SECONDS,
    NOTIFICATION_MAX,
    NOTIFICATION_THROTTLE_SECONDS,
)
from onboard_buddy.core.store import Clock, Store, utc_now
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.notifications.due_dates import sweep_due_dates
from onboard_buddy.notifications.models import Notification, NotificationType
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import counter

if TYPE_CHECKING:
    from onboard_buddy.missions.models import Mission
    from onboard_buddy.tasks.models import Task

logger = get_logger(__name__)


class NotificationCenter(Store):
    name = "onboard-buddy-notifications"
    version = 1

    def __init__(
        self,
        snapshots: SnapshotStore | None = None,
        clock: Clock = utc_now,
        max_notifications: int = NOTIFICATION_MAX,
        throttle_seconds: float = NOTIFICATION_THROTTLE_SECONDS,
        duplicate_window_seconds: float = NOTIFICATION_DUPLICATE_WINDOW_SECONDS,
    ):
        super().__init__(snapshots, clock)
        self.max_notifications = max_notifications
        self.throttle_seconds = throttle_seconds
        self.duplicate_window_seconds = duplicate_window_seconds
        self._notifications: list[Notification] = []
        self._last_notification_time: datetime | None = None

    @property
    def notifications(self) -> list[Notification]:
        """Retained notifications, newest first."""
        return list(self._notifications)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._notifications if not n.read)

    def add_notification(
        self,
        title: str,
        message: str,
        type: str = NotificationType.INFO.value,
        link: str | None = None,
        due_date: str | None = None,
    ) -> Notification | None:
        """
        Append a notification unless it is throttled or a recent duplicate.

        Returns:
            The stored notification, or None if it was dropped
        """
        now = self._clock()

        if (
            self._last_notification_time is not None
            and (now - self._last_notification_time).total_seconds() < self.throttle_seconds
        ):
            logger.debug("Throttled notification: %s", title)
            counter("notifications.throttled")
            return None

        for existing in self._notifications:
            if (
                existing.title == title
                and existing.message == message
                and (now - existing.created_at).total_seconds() < self.duplicate_window_seconds
            ):
                logger.debug("Dropped duplicate notification: %s", title)
                counter("notifications.duplicate")
                return None

        notification = Notification(
            id=str(uuid.uuid4()),
            title=title,
            message=message,
            type=type,
            created_at=now,
            link=link,
            due_date=due_date,
        )
        self._notifications = [notification, *self._notifications][: self.max_notifications]
        self._last_notification_time = now
        self._commit()
        return notification

    def mark_as_read(self, notification_id: str) -> None:
        self._notifications = [
            n.model_copy(update={"read": True}) if n.id == notification_id else n
            for n in self._notifications
        ]
        self._commit()

    def mark_all_as_read(self) -> None:
        self._notifications = [n.model_copy(update={"read": True}) for n in self._notifications]
        self._commit()

    def remove_notification(self, notification_id: str) -> None:
        self._notifications = [n for n in self._notifications if n.id != notification_id]
        self._commit()

    def clear_all(self) -> None:
        self._notifications = []
        self._commit()

    def check_due_dates(self, tasks: Iterable[Task], missions: Iterable[Mission]) -> int:
        """Run the due-date sweep; returns how many notifications were stored."""
        return sweep_due_dates(self, tasks, missions, self._clock())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_state(self) -> dict[str, Any]:
        return {
            "notifications": [n.model_dump(mode="json") for n in self._notifications],
            "last_notification_time": (
                self._last_notification_time.isoformat() if self._last_notification_time else None
            ),
        }

    def load_state(self, state: dict[str, Any]) -> None:
        self._notifications = [Notification.model_validate(n) for n in state.get("notifications", [])]
        last = state.get("last_notification_time")
        self._last_notification_time = datetime.fromisoformat(last) if last else None

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        if from_version == 0:
            return {"notifications": [], "last_notification_time": None}
        return state
