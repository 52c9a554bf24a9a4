"""Tests for the due-date sweep."""

from __future__ import annotations

from datetime import UTC, datetime

from onboard_buddy.missions import Mission
from onboard_buddy.notifications import NotificationCenter, sweep_due_dates
from onboard_buddy.tasks import Task

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=UTC)


def _task(task_id: int, due: str, completed: bool = False) -> Task:
    return Task(id=task_id, title=f"task {task_id}", due_date=due, start_date="2025-01-01", completed=completed)


def _mission(mission_id: str, deadline: datetime | None, completed: bool = False) -> Mission:
    return Mission(
        id=mission_id,
        title=f"mission {mission_id}",
        description="d",
        deadline=deadline,
        completed=completed,
        progress=100 if completed else 0,
    )


def _center() -> NotificationCenter:
    # Throttling is covered elsewhere; each sweep entry must get through here.
    return NotificationCenter(clock=lambda: NOW, throttle_seconds=0)


def test_overdue_and_soon_tasks():
    center = _center()
    tasks = [
        _task(1, "2025-01-09"),
        _task(2, "2025-01-11"),
        _task(3, "2025-01-20"),
        _task(4, "2025-01-01", completed=True),
    ]

    created = sweep_due_dates(center, tasks, [], NOW, timezone="UTC")

    assert created == 2
    by_title = {n.title: n for n in center.notifications}
    assert by_title["Task Overdue"].message == 'Task "task 1" is past due!'
    assert by_title["Task Overdue"].type == "error"
    assert by_title["Task Due Soon"].message == 'Task "task 2" is due within 48 hours'
    assert by_title["Task Due Soon"].link == "/tasks"
    assert by_title["Task Due Soon"].due_date == "2025-01-11"


def test_missions_with_deadlines():
    center = _center()
    missions = [
        _mission("late", datetime(2025, 1, 9, tzinfo=UTC)),
        _mission("soon", datetime(2025, 1, 11, tzinfo=UTC)),
        _mission("later", datetime(2025, 2, 1, tzinfo=UTC)),
        _mission("open", None),
        _mission("done", datetime(2025, 1, 1, tzinfo=UTC), completed=True),
    ]

    created = sweep_due_dates(center, [], missions, NOW, timezone="UTC")

    assert created == 2
    messages = sorted(n.message for n in center.notifications)
    assert messages == [
        'Mission "mission late" has passed its deadline!',
        'Mission "mission soon" deadline is approaching',
    ]
    assert {n.link for n in center.notifications} == {"/missions"}


def test_repeated_sweep_is_deduplicated():
    center = _center()
    tasks = [_task(1, "2025-01-09")]

    assert sweep_due_dates(center, tasks, [], NOW, timezone="UTC") == 1
    assert sweep_due_dates(center, tasks, [], NOW, timezone="UTC") == 0
    assert len(center.notifications) == 1


def test_unparseable_task_due_date_is_skipped():
    center = _center()

    assert sweep_due_dates(center, [_task(1, "someday")], [], NOW, timezone="UTC") == 0


def test_task_midnight_is_local_to_timezone():
    center = _center()
    # Midnight 2025-01-10 in Denver is 07:00 UTC, already past at noon UTC.
    tasks = [_task(1, "2025-01-10")]

    sweep_due_dates(center, tasks, [], NOW, timezone="America/Denver")

    assert center.notifications[0].title == "Task Overdue"


def test_center_check_due_dates_uses_its_clock():
    center = _center()

    assert center.check_due_dates([_task(1, "2025-01-09")], []) == 1
