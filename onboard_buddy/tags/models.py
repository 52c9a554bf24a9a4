"""Tag catalog model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from onboard_buddy.core.store import utc_now


class Tag(BaseModel):
    """
    A reusable label in the catalog.

    ``usage_count`` is advisory bookkeeping maintained by callers; mission
    requirement counts are always derived from gallery content instead.
    """

    id: str
    name: str
    color: str = Field(default="#6B7280", description="Hex display color")
    category: str | None = None
    description: str | None = None
    usage_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


def same_tag(tag: str, name: str, ignore_case: bool = False) -> bool:
    """Gallery and mission tags compare exactly; catalog lookups ignore case."""
    if ignore_case:
        return tag.casefold() == name.casefold()
    return tag == name
