"""
Gallery - photos and notes tagged by name.
"""

from onboard_buddy.gallery.models import (
    GalleryItem,
    GalleryItemCreate,
    GalleryItemUpdate,
    ItemType,
    Permissions,
)
from onboard_buddy.gallery.store import INITIAL_TAGS, GalleryStore

__all__ = [
    "INITIAL_TAGS",
    "GalleryItem",
    "GalleryItemCreate",
    "GalleryItemUpdate",
    "GalleryStore",
    "ItemType",
    "Permissions",
]
