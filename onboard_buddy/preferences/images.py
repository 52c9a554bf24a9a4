"""
Image Store - profile photo, welcome background and uploaded images.

Replacing an image releases the old object in the background; explicitly
removing an uploaded image is user-facing and reports failure.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, Field

from onboard_buddy.config import DEFAULT_WELCOME_BACKGROUND, ORPHAN_IMAGE_MAX_AGE_DAYS
from onboard_buddy.core.store import Clock, Store, utc_now
from onboard_buddy.errors import ImageStorageError
from onboard_buddy.infrastructure.cleanup import CleanupQueue
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.storage.images import ObjectStorage

logger = get_logger(__name__)


class UploadedImage(BaseModel):
    id: str
    url: str
    path: str
    created_at: datetime = Field(default_factory=utc_now)


class ImageStore(Store):
    name = "onboard-buddy-images"
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
        self.profile_photo: str | None = None
        self.profile_photo_path: str | None = None
        self.welcome_background: str = DEFAULT_WELCOME_BACKGROUND
        self.welcome_background_path: str | None = None
        self._uploaded: list[UploadedImage] = []

    @property
    def uploaded_images(self) -> list[UploadedImage]:
        return list(self._uploaded)

    def _release(self, path: str) -> None:
        if self._storage is None or self._cleanup is None:
            logger.debug("No image storage attached, not releasing %s", path)
            return
        self._cleanup.submit(f"release image {path}", self._storage.delete, path)

    def set_profile_photo(self, url: str | None, path: str | None = None) -> None:
        old_path = self.profile_photo_path
        replaced = old_path is not None and url != self.profile_photo
        self.profile_photo = url
        self.profile_photo_path = path
        self._commit()
        if replaced:
            self._release(old_path)

    def set_welcome_background(self, url: str | None, path: str | None = None) -> None:
        """Set the welcome cover; ``None`` restores the default background."""
        old_path = self.welcome_background_path
        replaced = old_path is not None and url != self.welcome_background
        self.welcome_background = url or DEFAULT_WELCOME_BACKGROUND
        self.welcome_background_path = path
        self._commit()
        if replaced:
            self._release(old_path)

    def add_uploaded_image(self, image_id: str, url: str, path: str) -> UploadedImage:
        image = UploadedImage(id=image_id, url=url, path=path, created_at=self._clock())
        self._uploaded = [*self._uploaded, image]
        self._commit()
        return image

    def remove_uploaded_image(self, image_id: str) -> bool:
        """
        Delete an uploaded image from storage, then forget it.

        Raises:
            ImageStorageError: If storage refused the delete; state is unchanged
        """
        image = next((i for i in self._uploaded if i.id == image_id), None)
        if image is None:
            return False

        if self._storage is not None and not self._storage.delete(image.path):
            raise ImageStorageError(f"Failed to delete image {image.path}")

        self._uploaded = [i for i in self._uploaded if i.id != image_id]
        self._commit()
        return True

    def cleanup_orphaned_images(self, max_age_days: int = ORPHAN_IMAGE_MAX_AGE_DAYS) -> int:
        """
        Release uploads older than ``max_age_days``.

        Returns:
            Number of images scheduled for release
        """
        cutoff = self._clock() - timedelta(days=max_age_days)
        stale = [i for i in self._uploaded if i.created_at < cutoff]
        if not stale:
            return 0

        self._uploaded = [i for i in self._uploaded if i.created_at >= cutoff]
        self._commit()
        for image in stale:
            self._release(image.path)
        logger.info("Scheduled release of %d orphaned images", len(stale))
        return len(stale)

    def to_state(self) -> dict[str, Any]:
        return {
            "profile_photo": self.profile_photo,
            "profile_photo_path": self.profile_photo_path,
            "welcome_background": self.welcome_background,
            "welcome_background_path": self.welcome_background_path,
            "uploaded_images": [i.model_dump(mode="json") for i in self._uploaded],
        }

    def load_state(self, state: dict[str, Any]) -> None:
        self.profile_photo = state.get("profile_photo")
        self.profile_photo_path = state.get("profile_photo_path")
        self.welcome_background = state.get("welcome_background") or DEFAULT_WELCOME_BACKGROUND
        self.welcome_background_path = state.get("welcome_background_path")
        self._uploaded = [UploadedImage.model_validate(i) for i in state.get("uploaded_images", [])]

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        if from_version < 2:
            return {
                "profile_photo": state.get("profile_photo"),
                "profile_photo_path": None,
                "welcome_background": state.get("welcome_background") or DEFAULT_WELCOME_BACKGROUND,
                "welcome_background_path": None,
                "uploaded_images": state.get("uploaded_images") or [],
            }
        return state
