"""Task Store - the onboarding checklist."""

from __future__ import annotations

from typing import Any

from onboard_buddy.core.store import Clock, Store, local_today, patch_changes, utc_now
from onboard_buddy.errors import InvalidDueDateError
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.tasks.business_days import calculate_due_date, validate_due_date
from onboard_buddy.tasks.models import Task, TaskCreate, TaskUpdate

logger = get_logger(__name__)

DEFAULT_TASKS: list[dict[str, Any]] = [
    {
        "title": "Submit I-9 documentation",
        "tags": ["admin", "hr"],
        "department": "HR",
        "description": "Provide required identification and work authorization documents.",
        "priority": "high",
    },
    {
        "title": "Complete W-4 tax forms",
        "tags": ["admin", "hr"],
        "department": "HR",
        "description": "Fill out federal and state tax withholding forms.",
        "priority": "high",
    },
    {
        "title": "Set up workstation",
        "tags": ["setup", "equipment"],
        "department": "IT",
        "description": "Configure your computer and workspace setup.",
        "priority": "high",
    },
    {
        "title": "Meet with manager",
        "tags": ["team", "meetings"],
        "department": "Manager",
        "description": "Initial meeting with your direct supervisor.",
        "priority": "high",
    },
]


class TaskStore(Store):
    """
    Checklist CRUD.

    Unlike mission validation, the due-date rule fails fast: an update whose
    due date is outside the business-day window raises before anything is
    applied.
    """

    name = "onboard-buddy-tasks"
    version = 1

    def __init__(
        self,
        snapshots: SnapshotStore | None = None,
        clock: Clock = utc_now,
        seed_defaults: bool = True,
    ):
        super().__init__(snapshots, clock)
        self._tasks: list[Task] = self._default_tasks() if seed_defaults else []

    def _default_tasks(self) -> list[Task]:
        now = self._clock()
        start = local_today(now).isoformat()
        return [
            Task(
                **task,
                id=index,
                start_date=start,
                due_date=calculate_due_date(start),
                created_at=now,
            )
            for index, task in enumerate(DEFAULT_TASKS, start=1)
        ]

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_task(self, task_id: int) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def add_task(self, draft: TaskCreate) -> Task:
        now = self._clock()
        start = draft.start_date or local_today(now).isoformat()
        task = Task(
            **draft.model_dump(exclude={"start_date"}),
            id=max((t.id for t in self._tasks), default=0) + 1,
            start_date=start,
            due_date=calculate_due_date(start),
            created_at=now,
        )
        self._tasks = [*self._tasks, task]
        self._commit()
        logger.debug("Added task %d due %s", task.id, task.due_date)
        return task

    def update_task(self, task_id: int, patch: TaskUpdate) -> Task | None:
        """
        Apply ``patch`` to a task.

        Raises:
            InvalidDueDateError: If a new due date is outside the allowed
                window of the (patched or existing) start date
        """
        existing = self.get_task(task_id)
        if existing is None:
            return None

        changes = patch_changes(patch, clearable=("notes", "link"))

        due = changes.get("due_date")
        start = changes.get("start_date") or existing.start_date
        if due and start and not validate_due_date(due, start):
            raise InvalidDueDateError(f"Invalid due date {due} for start date {start}")

        updated = Task.model_validate({**existing.model_dump(), **changes})
        self._tasks = [updated if t.id == task_id else t for t in self._tasks]
        self._commit()
        return updated

    def delete_task(self, task_id: int) -> bool:
        if self.get_task(task_id) is None:
            return False
        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._commit()
        return True

    def toggle_task_completion(self, task_id: int) -> Task | None:
        existing = self.get_task(task_id)
        if existing is None:
            return None
        updated = existing.model_copy(update={"completed": not existing.completed})
        self._tasks = [updated if t.id == task_id else t for t in self._tasks]
        self._commit()
        return updated

    def to_state(self) -> dict[str, Any]:
        return {"tasks": [t.model_dump(mode="json") for t in self._tasks]}

    def load_state(self, state: dict[str, Any]) -> None:
        self._tasks = [Task.model_validate(t) for t in state.get("tasks", [])]

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        if from_version == 0:
            tasks = state.get("tasks") or [t.model_dump(mode="json") for t in self._default_tasks()]
            return {"tasks": tasks}
        return state
