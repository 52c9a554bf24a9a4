"""Gallery Store - item CRUD and tag vocabulary."""

from __future__ import annotations

import uuid
from collections import Counter
from typing import Any

from onboard_buddy.core.store import Clock, Store, local_today, patch_changes, utc_now
from onboard_buddy.gallery.models import (
    GalleryItem,
    GalleryItemCreate,
    GalleryItemUpdate,
)
from onboard_buddy.infrastructure.cleanup import CleanupQueue
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.storage.images import ObjectStorage
from onboard_buddy.tags.models import same_tag

logger = get_logger(__name__)

INITIAL_TAGS = ["acronym", "important", "follow-up", "question", "team"]

# Optional item fields an explicit null clears; other nulls leave the field as is.
CLEARABLE_FIELDS = ("location", "image_url", "image_path", "alt_text", "metadata")


class GalleryStore(Store):
    """
    Photos and notes, each carrying a set of tag names.

    Every mutation commits once; the workspace subscribes the mission engine
    to these commits so missions are recomputed on any tag-set change.
    Update and delete of unknown ids are no-ops.
    """

    name = "onboard-buddy-gallery"
    version = 2

    def __init__(
        self,
        snapshots: SnapshotStore | None = None,
        clock: Clock = utc_now,
        storage: ObjectStorage | None = None,
        cleanup: CleanupQueue | None = None,
    ):
        super().__init__(snapshots, clock)
        self._storage = storage
        self._cleanup = cleanup
        self._items: list[GalleryItem] = []
        self._tags: list[str] = list(INITIAL_TAGS)

    @property
    def items(self) -> list[GalleryItem]:
        return list(self._items)

    @property
    def tags(self) -> list[str]:
        return list(self._tags)

    def get_item(self, item_id: str) -> GalleryItem | None:
        return next((i for i in self._items if i.id == item_id), None)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(self, draft: GalleryItemCreate) -> GalleryItem:
        now = self._clock()
        item = GalleryItem(
            **draft.model_dump(exclude={"date"}),
            date=draft.date or local_today(now).isoformat(),
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )
        self._items = [*self._items, item]
        self._commit()
        return item

    def update_item(self, item_id: str, patch: GalleryItemUpdate) -> GalleryItem | None:
        """
        Merge ``patch`` into an item.

        Side Effects:
            - Schedules release of the old image when ``image_url`` changes
              and the item had a stored ``image_path``
        """
        existing = self.get_item(item_id)
        if existing is None:
            return None

        changes = patch_changes(patch, clearable=CLEARABLE_FIELDS)
        image_replaced = (
            "image_url" in changes
            and changes["image_url"] != existing.image_url
            and existing.image_path is not None
        )
        if image_replaced and "image_path" not in changes:
            changes["image_path"] = None

        updated = GalleryItem.model_validate(
            {**existing.model_dump(), **changes, "updated_at": self._clock()}
        )
        self._items = [updated if i.id == item_id else i for i in self._items]
        self._commit()

        if image_replaced and existing.image_path != updated.image_path:
            self._release_image(existing.image_path)
        return updated

    def delete_item(self, item_id: str) -> bool:
        existing = self.get_item(item_id)
        if existing is None:
            return False
        self._items = [i for i in self._items if i.id != item_id]
        self._commit()
        if existing.image_path:
            self._release_image(existing.image_path)
        return True

    def reorder_items(self, item_ids: list[str]) -> None:
        """Put items in ``item_ids`` order; unlisted items keep their order at the end."""
        by_id = {i.id: i for i in self._items}
        ordered = [by_id.pop(item_id) for item_id in item_ids if item_id in by_id]
        self._items = ordered + [i for i in self._items if i.id in by_id]
        self._commit()

    def _release_image(self, path: str | None) -> None:
        if not path:
            return
        if self._storage is None or self._cleanup is None:
            logger.debug("No image storage attached, not releasing %s", path)
            return
        self._cleanup.submit(f"delete gallery image {path}", self._storage.delete, path)

    # ------------------------------------------------------------------
    # Tag vocabulary
    # ------------------------------------------------------------------

    def add_tag(self, tag: str) -> None:
        tag = tag.strip()
        if not tag or tag in self._tags:
            return
        self._tags = [*self._tags, tag]
        self._commit()

    def rename_tag(self, old: str, new: str, ignore_case: bool = False) -> None:
        """Rewrite ``old`` to ``new`` in the vocabulary and on every item."""
        new = new.strip()
        if not new or old == new:
            return

        def rewrite(tags: list[str]) -> list[str]:
            result: list[str] = []
            for tag in tags:
                tag = new if same_tag(tag, old, ignore_case) else tag
                if tag not in result:
                    result.append(tag)
            return result

        self._tags = rewrite(self._tags)
        self._items = [
            i.model_copy(update={"tags": rewrite(i.tags), "updated_at": self._clock()})
            if any(same_tag(t, old, ignore_case) for t in i.tags)
            else i
            for i in self._items
        ]
        self._commit()

    def delete_tag(self, tag: str, ignore_case: bool = False) -> None:
        """Remove ``tag`` from the vocabulary and from every item."""
        self._tags = [t for t in self._tags if not same_tag(t, tag, ignore_case)]
        self._items = [
            i.model_copy(
                update={
                    "tags": [t for t in i.tags if not same_tag(t, tag, ignore_case)],
                    "updated_at": self._clock(),
                }
            )
            if any(same_tag(t, tag, ignore_case) for t in i.tags)
            else i
            for i in self._items
        ]
        self._commit()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count_tagged(self, tag: str) -> int:
        """Number of items whose tag set contains ``tag``."""
        return sum(1 for i in self._items if tag in i.tags)

    def tag_counts(self) -> dict[str, int]:
        counts: Counter[str] = Counter()
        for item in self._items:
            counts.update(set(item.tags))
        return dict(counts)

    def active_image_paths(self) -> list[str]:
        return [i.image_path for i in self._items if i.image_path]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_state(self) -> dict[str, Any]:
        return {
            "items": [i.model_dump(mode="json") for i in self._items],
            "tags": list(self._tags),
        }

    def load_state(self, state: dict[str, Any]) -> None:
        self._items = [GalleryItem.model_validate(i) for i in state.get("items", [])]
        self._tags = list(state.get("tags") or INITIAL_TAGS)

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        if from_version < 2:
            today = local_today(self._clock()).isoformat()
            items = [
                {**item, "image_path": None, "date": item.get("date") or today}
                for item in state.get("items", [])
            ]
            return {"items": items, "tags": state.get("tags") or list(INITIAL_TAGS)}
        return state
