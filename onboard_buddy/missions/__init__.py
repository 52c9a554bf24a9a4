"""
Missions - gamified goals reconciled against gallery tag counts.
"""

from onboard_buddy.missions.engine import MissionEngine, Notifier, TagCountSource, compute_progress
from onboard_buddy.missions.models import (
    Mission,
    MissionDraft,
    MissionRequirement,
    MissionUpdate,
    Reward,
    RewardType,
)
from onboard_buddy.missions.validation import validate_mission

__all__ = [
    "Mission",
    "MissionDraft",
    "MissionEngine",
    "MissionRequirement",
    "MissionUpdate",
    "Notifier",
    "Reward",
    "RewardType",
    "TagCountSource",
    "compute_progress",
    "validate_mission",
]
