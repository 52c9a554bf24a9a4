"""
Object storage for user images (profile photos, gallery photos, covers).

Images are the only binary payload the app stores. Size and format are
checked before anything reaches the bucket; HEIC/HEIF must be transcoded to
JPEG by the client before upload.
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from typing import Protocol

from google.api_core import exceptions
from google.cloud import storage

from onboard_buddy.config import GCP_PROJECT, IMAGE_BUCKET, IMAGE_MAX_BYTES
from onboard_buddy.observability.logging import get_logger

logger = get_logger(__name__)

FOLDERS = ("profiles", "gallery", "covers")
HEIC_TYPES = {"image/heic", "image/heif"}
HEIC_EXTENSIONS = {"heic", "heif"}


@dataclass
class UploadResult:
    """Outcome of an upload: url + path on success, error otherwise."""

    url: str | None = None
    path: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.path is not None


class ObjectStorage(Protocol):
    def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        folder: str = "gallery",
        owner_id: str | None = None,
    ) -> UploadResult: ...

    def delete(self, path: str) -> bool: ...

    def public_url(self, path: str) -> str: ...


def check_image(data: bytes, filename: str, content_type: str, max_bytes: int = IMAGE_MAX_BYTES) -> str | None:
    """Return an error message if the payload cannot be uploaded, else None."""
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if content_type.lower() in HEIC_TYPES or extension in HEIC_EXTENSIONS:
        return "HEIC images must be converted to JPEG before upload"
    if not content_type.lower().startswith("image/"):
        return "Only image files can be uploaded"
    if len(data) > max_bytes:
        return f"Image exceeds the {max_bytes // (1024 * 1024)}MB size limit"
    return None


def build_object_path(filename: str, folder: str, owner_id: str | None = None) -> str:
    """Build ``folder/[owner/]<epoch-ms>-<random>.<ext>``."""
    if folder not in FOLDERS:
        raise ValueError(f"Unknown storage folder: {folder}")
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.{extension}"
    return f"{folder}/{owner_id}/{name}" if owner_id else f"{folder}/{name}"


class GCSImageStorage:
    """Google Cloud Storage backed image bucket."""

    def __init__(
        self,
        bucket_name: str = IMAGE_BUCKET,
        project_id: str = GCP_PROJECT,
        max_bytes: int = IMAGE_MAX_BYTES,
    ):
        self.bucket_name = bucket_name
        self.project_id = project_id
        self.max_bytes = max_bytes
        self._client: storage.Client | None = None
        self._bucket: storage.Bucket | None = None

    @property
    def client(self) -> storage.Client:
        """Lazy-load GCS client"""
        if self._client is None:
            try:
                self._client = storage.Client(project=self.project_id)
            except Exception as e:
                logger.error("Failed to initialize GCS client: %s", e)
                raise
        return self._client

    @property
    def bucket(self) -> storage.Bucket:
        """Lazy-load GCS bucket"""
        if self._bucket is None:
            self._bucket = self.client.bucket(self.bucket_name)
        return self._bucket

    def public_url(self, path: str) -> str:
        return f"https://storage.googleapis.com/{self.bucket_name}/{path}"

    def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        folder: str = "gallery",
        owner_id: str | None = None,
    ) -> UploadResult:
        """
        Upload an image.

        Returns:
            UploadResult with url/path, or with ``error`` set when the payload
            was rejected or the bucket call failed
        """
        problem = check_image(data, filename, content_type, self.max_bytes)
        if problem:
            return UploadResult(error=problem)

        try:
            path = build_object_path(filename, folder, owner_id)
        except ValueError as e:
            return UploadResult(error=str(e))

        try:
            blob = self.bucket.blob(path)
            blob.cache_control = "public, max-age=3600"
            blob.upload_from_string(data, content_type=content_type)
        except exceptions.GoogleAPIError as e:
            logger.error("GCS API error uploading %s: %s", path, e)
            return UploadResult(error="Failed to upload image")

        logger.info("Uploaded image gs://%s/%s (%d bytes)", self.bucket_name, path, len(data))
        return UploadResult(url=self.public_url(path), path=path)

    def delete(self, path: str) -> bool:
        """
        Delete an object. Missing objects count as deleted.

        Returns:
            True if the object is gone, False if the bucket call failed
        """
        try:
            self.bucket.blob(path).delete()
        except exceptions.NotFound:
            logger.debug("Image already gone: %s", path)
            return True
        except exceptions.GoogleAPIError as e:
            logger.error("GCS API error deleting %s: %s", path, e)
            return False
        logger.info("Deleted image gs://%s/%s", self.bucket_name, path)
        return True
