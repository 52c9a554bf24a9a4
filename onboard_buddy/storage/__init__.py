from onboard_buddy.storage.images import (
    GCSImageStorage,
    ObjectStorage,
    UploadResult,
    build_object_path,
    check_image,
)

__all__ = ["GCSImageStorage", "ObjectStorage", "UploadResult", "build_object_path", "check_image"]
