"""Onboard Buddy - gamified new-hire onboarding: missions, gallery, tasks and notifications"""

from __future__ import annotations

__version__ = "1.0.0"


# Lazy imports so lightweight modules don't pull in FastAPI or Google Cloud
def __getattr__(name: str):
    """
    Lazy imports to avoid loading heavy dependencies when only importing lightweight modules.
    """
    if name == "Workspace":
        from onboard_buddy.workspace import Workspace

        return Workspace

    if name == "MissionEngine":
        from onboard_buddy.missions.engine import MissionEngine

        return MissionEngine

    if name == "GalleryStore":
        from onboard_buddy.gallery.store import GalleryStore

        return GalleryStore

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = ["GalleryStore", "MissionEngine", "Workspace"]
