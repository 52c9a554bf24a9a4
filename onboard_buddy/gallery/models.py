"""
Gallery domain models.

Items carry tags by name (not catalog id); the gallery is the single source
of truth for which tags are attached to which content.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from onboard_buddy.core.store import utc_now


class ItemType(str, Enum):
    PHOTO = "photo"
    NOTE = "note"


class Permissions(BaseModel):
    public: bool = False
    editable: bool = True
    allow_comments: bool = True


class ItemMetadata(BaseModel):
    camera: str | None = None
    settings: str | None = None
    photographer: str | None = None


def _dedupe_tags(tags: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class GalleryItemCreate(BaseModel):
    """Fields a caller supplies when adding an item."""

    model_config = ConfigDict(use_enum_values=True)

    type: ItemType = ItemType.NOTE
    title: str = ""
    description: str = ""
    content: str = ""
    location: str | None = None
    date: str | None = Field(default=None, description="ISO date; defaults to today in TIMEZONE")
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = None
    image_path: str | None = Field(default=None, description="Storage path released on replace/delete")
    alt_text: str | None = None
    metadata: ItemMetadata | None = None
    permissions: Permissions = Field(default_factory=Permissions)

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: list[str]) -> list[str]:
        return _dedupe_tags(v)


class GalleryItem(GalleryItemCreate):
    id: str
    date: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class GalleryItemUpdate(BaseModel):
    """Partial update; only fields explicitly set are applied."""

    model_config = ConfigDict(use_enum_values=True)

    type: ItemType | None = None
    title: str | None = None
    description: str | None = None
    content: str | None = None
    location: str | None = None
    date: str | None = None
    tags: list[str] | None = None
    image_url: str | None = None
    image_path: str | None = None
    alt_text: str | None = None
    metadata: ItemMetadata | None = None
    permissions: Permissions | None = None

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: list[str] | None) -> list[str] | None:
        return _dedupe_tags(v) if v is not None else v
