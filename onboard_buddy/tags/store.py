"""Tag Store - the catalog of reusable labels."""

from __future__ import annotations

import uuid
from typing import Any

from onboard_buddy.core.store import Clock, Store, utc_now
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.tags.models import Tag

logger = get_logger(__name__)

DEFAULT_TAGS: list[dict[str, Any]] = [
    {"name": "IT", "color": "#3B82F6", "category": "department", "description": "IT related tasks"},
    {"name": "Admin", "color": "#F59E0B", "category": "department", "description": "Administrative tasks"},
    {"name": "Training", "color": "#10B981", "category": "type", "description": "Training activities"},
    {
        "name": "Equipment",
        "color": "#8B5CF6",
        "category": "type",
        "description": "Equipment setup and configuration",
    },
    {"name": "HR", "color": "#EC4899", "category": "department", "description": "Human Resources tasks"},
]


class TagStore(Store):
    """
    Catalog CRUD plus lookup helpers.

    Name uniqueness is not enforced here; callers de-duplicate with
    ``find_by_name`` (case-insensitive) before inserting.
    """

    name = "onboard-buddy-tags"
    version = 0

    def __init__(
        self,
        snapshots: SnapshotStore | None = None,
        clock: Clock = utc_now,
        seed_defaults: bool = True,
    ):
        super().__init__(snapshots, clock)
        self._tags: list[Tag] = []
        if seed_defaults:
            now = self._clock()
            self._tags = [Tag(id=str(uuid.uuid4()), created_at=now, **tag) for tag in DEFAULT_TAGS]

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags)

    def add_tag(
        self,
        name: str,
        color: str = "#6B7280",
        category: str | None = None,
        description: str | None = None,
    ) -> str:
        tag = Tag(
            id=str(uuid.uuid4()),
            name=name,
            color=color,
            category=category,
            description=description,
            created_at=self._clock(),
        )
        self._tags = [*self._tags, tag]
        self._commit()
        logger.debug("Added tag %s (%s)", tag.name, tag.id)
        return tag.id

    def update_tag(self, tag_id: str, **changes: Any) -> Tag | None:
        """Patch catalog fields; a None name or color leaves the field unchanged."""
        changes = {
            key: value
            for key, value in changes.items()
            if key != "id" and (value is not None or key in ("category", "description"))
        }
        existing = self.get_tag(tag_id)
        if existing is None:
            return None
        updated = Tag.model_validate({**existing.model_dump(), **changes})
        self._tags = [updated if t.id == tag_id else t for t in self._tags]
        self._commit()
        return updated

    def delete_tag(self, tag_id: str) -> bool:
        if self.get_tag(tag_id) is None:
            return False
        self._tags = [t for t in self._tags if t.id != tag_id]
        self._commit()
        return True

    def increment_usage(self, tag_id: str) -> None:
        self._adjust_usage(tag_id, 1)

    def decrement_usage(self, tag_id: str) -> None:
        self._adjust_usage(tag_id, -1)

    def _adjust_usage(self, tag_id: str, delta: int) -> None:
        if self.get_tag(tag_id) is None:
            return
        self._tags = [
            t.model_copy(update={"usage_count": max(0, t.usage_count + delta)})
            if t.id == tag_id
            else t
            for t in self._tags
        ]
        self._commit()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_tag(self, tag_id: str) -> Tag | None:
        return next((t for t in self._tags if t.id == tag_id), None)

    def find_by_name(self, name: str) -> Tag | None:
        wanted = name.strip().lower()
        return next((t for t in self._tags if t.name.lower() == wanted), None)

    def tags_by_category(self, category: str) -> list[Tag]:
        return [t for t in self._tags if t.category == category]

    def most_used(self, limit: int = 5) -> list[Tag]:
        return sorted(self._tags, key=lambda t: t.usage_count, reverse=True)[:limit]

    def search(self, query: str) -> list[Tag]:
        term = query.lower()
        return [
            t
            for t in self._tags
            if term in t.name.lower()
            or term in (t.description or "").lower()
            or term in (t.category or "").lower()
        ]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_state(self) -> dict[str, Any]:
        return {"tags": [t.model_dump(mode="json") for t in self._tags]}

    def load_state(self, state: dict[str, Any]) -> None:
        self._tags = [Tag.model_validate(t) for t in state.get("tags", [])]

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        return state
