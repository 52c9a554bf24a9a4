"""Plain-text export of the onboarding journey (one-way; there is no import)."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import quote

from pydantic import BaseModel

from onboard_buddy.gallery.models import GalleryItem
from onboard_buddy.missions.models import Mission
from onboard_buddy.tasks.models import Task

FOOTER = "Onboard Buddy - Made with love by Senza Pari in Colorado"
EMAIL_SUBJECT = "My Onboarding Journey"


class ExportOptions(BaseModel):
    tasks: bool = True
    missions: bool = True
    notes: bool = True
    photos: bool = True


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def build_summary(
    tasks: Iterable[Task],
    missions: Iterable[Mission],
    items: Iterable[GalleryItem],
    options: ExportOptions | None = None,
) -> str:
    options = options or ExportOptions()
    lines = ["Onboarding Journey Summary", "=======================", ""]

    if options.tasks:
        lines += ["Tasks", "-----", ""]
        for task in tasks:
            lines.append(f"• {task.title}")
            lines.append(f"  Status: {'Completed' if task.completed else 'Pending'}")
            lines.append(f"  Due Date: {task.due_date}")
            lines.append(f"  Department: {task.department}")
            if task.description:
                lines.append(f"  Description: {task.description}")
            if task.notes:
                lines.append(f"  Notes: {task.notes}")
            lines.append("")

    if options.missions:
        lines += ["Missions", "--------", ""]
        for mission in missions:
            lines.append(f"• {mission.title}")
            lines.append(f"  Description: {mission.description}")
            lines.append(f"  Progress: {_round_half_up(mission.progress)}%")
            lines.append(f"  Status: {'Completed' if mission.completed else 'In Progress'}")
            lines.append(f"  Reward: {mission.reward.value}")
            lines.append("")

    if options.photos or options.notes:
        lines += ["Gallery Items", "-------------", ""]
        wanted = {"photo"} if options.photos else set()
        if options.notes:
            wanted.add("note")
        for item in items:
            if item.type not in wanted:
                continue
            lines.append(f"• {item.title}")
            lines.append(f"  Type: {item.type}")
            lines.append(f"  Date: {item.date}")
            if item.description:
                lines.append(f"  Description: {item.description}")
            if item.location:
                lines.append(f"  Location: {item.location}")
            if item.tags:
                lines.append(f"  Tags: {', '.join(item.tags)}")
            lines.append("")

    lines += ["", "---", FOOTER]
    return "\n".join(lines)


def mailto_link(content: str, subject: str = EMAIL_SUBJECT) -> str:
    return f"mailto:?subject={quote(subject)}&body={quote(content)}"
