"""Notification model."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from onboard_buddy.core.store import utc_now


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    created_at: datetime = Field(default_factory=utc_now)
    read: bool = False
    link: str | None = None
    due_date: str | None = Field(default=None, description="Due date the notification refers to")
