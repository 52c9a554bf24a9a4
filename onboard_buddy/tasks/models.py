"""Onboarding checklist task models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from onboard_buddy.core.store import utc_now


class Department(str, Enum):
    HR = "HR"
    IT = "IT"
    MANAGER = "Manager"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskCreate(BaseModel):
    """Caller-supplied task fields. The due date is always computed."""

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    notes: str | None = None
    link: str | None = None
    department: Department = Department.HR
    priority: Priority = Priority.MEDIUM
    start_date: str | None = Field(default=None, description="ISO date; defaults to today")
    completed: bool = False


class Task(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: int
    title: str
    tags: list[str] = Field(default_factory=list)
    due_date: str
    completed: bool = False
    description: str = ""
    notes: str | None = None
    link: str | None = None
    department: Department = Department.HR
    priority: Priority = Priority.MEDIUM
    start_date: str
    created_at: datetime = Field(default_factory=utc_now)


class TaskUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str | None = None
    tags: list[str] | None = None
    due_date: str | None = None
    completed: bool | None = None
    description: str | None = None
    notes: str | None = None
    link: str | None = None
    department: Department | None = None
    priority: Priority | None = None
    start_date: str | None = None
