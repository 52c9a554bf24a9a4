"""
Tasks - onboarding checklist with business-day due dates.
"""

from onboard_buddy.tasks.business_days import (
    add_business_days,
    calculate_due_date,
    validate_due_date,
)
from onboard_buddy.tasks.models import Department, Priority, Task, TaskCreate, TaskUpdate
from onboard_buddy.tasks.store import DEFAULT_TASKS, TaskStore

__all__ = [
    "DEFAULT_TASKS",
    "Department",
    "Priority",
    "Task",
    "TaskCreate",
    "TaskStore",
    "TaskUpdate",
    "add_business_days",
    "calculate_due_date",
    "validate_due_date",
]
