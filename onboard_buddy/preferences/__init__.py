"""
Preferences - UI settings and the user's image slots.
"""

from onboard_buddy.preferences.images import ImageStore, UploadedImage
from onboard_buddy.preferences.settings import Settings, SettingsStore

__all__ = ["ImageStore", "Settings", "SettingsStore", "UploadedImage"]
