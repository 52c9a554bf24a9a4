"""Due-date sweep over tasks and missions."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from onboard_buddy.config import DUE_SOON_WINDOW_DAYS, TIMEZONE
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.tasks.business_days import as_date

if TYPE_CHECKING:
    from onboard_buddy.missions.models import Mission
    from onboard_buddy.notifications.center import NotificationCenter
    from onboard_buddy.tasks.models import Task

logger = get_logger(__name__)


def _task_due_at(due_date: str, timezone: str) -> datetime | None:
    try:
        day = as_date(due_date)
    except ValueError:
        return None
    return datetime(day.year, day.month, day.day, tzinfo=ZoneInfo(timezone))


def sweep_due_dates(
    center: NotificationCenter,
    tasks: Iterable[Task],
    missions: Iterable[Mission],
    now: datetime,
    soon_days: int = DUE_SOON_WINDOW_DAYS,
    timezone: str = TIMEZONE,
) -> int:
    """
    Notify about overdue and soon-due work.

    Completed tasks and missions, and missions without a deadline, are
    skipped. Task due dates are taken as midnight in ``timezone``.

    Returns:
        Number of notifications the center accepted
    """
    soon = now + timedelta(days=soon_days)
    stored = 0

    for task in tasks:
        if task.completed or not task.due_date:
            continue
        due_at = _task_due_at(task.due_date, timezone)
        if due_at is None:
            logger.warning("Task %s has unparseable due date %r", task.id, task.due_date)
            continue
        if due_at < now:
            result = center.add_notification(
                title="Task Overdue",
                message=f'Task "{task.title}" is past due!',
                type="error",
                link="/tasks",
                due_date=task.due_date,
            )
        elif due_at < soon:
            result = center.add_notification(
                title="Task Due Soon",
                message=f'Task "{task.title}" is due within 48 hours',
                type="warning",
                link="/tasks",
                due_date=task.due_date,
            )
        else:
            continue
        stored += result is not None

    for mission in missions:
        if mission.completed or mission.deadline is None:
            continue
        deadline = mission.deadline.date().isoformat()
        if mission.deadline < now:
            result = center.add_notification(
                title="Mission Overdue",
                message=f'Mission "{mission.title}" has passed its deadline!',
                type="error",
                link="/missions",
                due_date=deadline,
            )
        elif mission.deadline < soon:
            result = center.add_notification(
                title="Mission Due Soon",
                message=f'Mission "{mission.title}" deadline is approaching',
                type="warning",
                link="/missions",
                due_date=deadline,
            )
        else:
            continue
        stored += result is not None

    return stored
