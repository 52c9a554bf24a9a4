"""
Mission domain models.

A mission is a gamified goal expressed as tag-count requirements against
gallery content. ``current``, ``progress`` and ``completed`` are derived
fields: the engine overwrites them on every recomputation.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from onboard_buddy.core.store import utc_now


class RewardType(str, Enum):
    POINTS = "points"
    BADGE = "badge"
    ACHIEVEMENT = "achievement"


class Reward(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: RewardType = RewardType.POINTS
    value: int | str = 0


class MissionRequirement(BaseModel):
    """A single (tag, count) target. ``current`` is derived, never authoritative."""

    tag: str = ""
    count: int = 0
    current: int = Field(default=0, ge=0)


def _coerce_deadline(v: Any) -> Any:
    # Date-only values mean midnight UTC; naive datetimes are taken as UTC.
    if isinstance(v, str) and len(v) == 10:
        v = date.fromisoformat(v)
    if isinstance(v, date) and not isinstance(v, datetime):
        return datetime(v.year, v.month, v.day, tzinfo=UTC)
    if isinstance(v, datetime) and v.tzinfo is None:
        return v.replace(tzinfo=UTC)
    return v


class MissionDraft(BaseModel):
    """
    Caller-supplied mission fields.

    Deliberately lenient: empty strings and zero counts are accepted here so
    that ``validate_mission`` can report every problem at once.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str = ""
    description: str = ""
    requirements: list[MissionRequirement] = Field(default_factory=list)
    deadline: datetime | None = None
    link: str | None = None
    reward: Reward = Field(default_factory=Reward)

    @field_validator("deadline", mode="before")
    @classmethod
    def deadline_as_utc(cls, v: Any) -> Any:
        return _coerce_deadline(v)


class Mission(MissionDraft):
    id: str
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    completed: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class MissionUpdate(BaseModel):
    """Partial mission update. Identity and derived fields cannot be patched."""

    model_config = ConfigDict(use_enum_values=True)

    title: str | None = None
    description: str | None = None
    requirements: list[MissionRequirement] | None = None
    deadline: datetime | None = None
    link: str | None = None
    reward: Reward | None = None

    @field_validator("deadline", mode="before")
    @classmethod
    def deadline_as_utc(cls, v: Any) -> Any:
        return _coerce_deadline(v)
