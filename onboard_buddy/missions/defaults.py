"""Missions seeded into a fresh workspace."""

from __future__ import annotations

from datetime import datetime

from onboard_buddy.missions.models import Mission, MissionRequirement, Reward

_DEFAULTS = [
    {
        "id": "onboarding-basics",
        "title": "Complete Onboarding Basics",
        "description": "Complete the essential onboarding tasks and documentation",
        "requirements": [("admin", 2), ("hr", 2)],
        "reward": {"type": "badge", "value": "Onboarding Pro"},
    },
    {
        "id": "team-connect",
        "title": "Team Connection",
        "description": "Meet key team members and establish connections",
        "requirements": [("team", 3), ("meetings", 2)],
        "reward": {"type": "badge", "value": "Team Player"},
    },
    {
        "id": "workspace-setup",
        "title": "Workspace Setup",
        "description": "Set up and customize your work environment",
        "requirements": [("setup", 2), ("equipment", 1)],
        "reward": {"type": "points", "value": 100},
    },
]


def default_missions(now: datetime) -> list[Mission]:
    return [
        Mission(
            id=entry["id"],
            title=entry["title"],
            description=entry["description"],
            requirements=[MissionRequirement(tag=tag, count=count) for tag, count in entry["requirements"]],
            reward=Reward.model_validate(entry["reward"]),
            created_at=now,
            updated_at=now,
        )
        for entry in _DEFAULTS
    ]
