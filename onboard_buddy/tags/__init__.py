"""
Tag catalog - reusable labels with color, category and usage counts.
"""

from onboard_buddy.tags.models import Tag, same_tag
from onboard_buddy.tags.store import DEFAULT_TAGS, TagStore

__all__ = ["DEFAULT_TAGS", "Tag", "TagStore", "same_tag"]
