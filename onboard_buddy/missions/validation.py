"""Mission validation: every violated rule is collected, none short-circuits."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import AnyUrl, TypeAdapter, ValidationError

from onboard_buddy.config import MISSION_DEADLINE_MAX_DAYS
from onboard_buddy.missions.models import MissionDraft

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def validate_mission(
    draft: MissionDraft,
    now: datetime,
    max_deadline_days: int = MISSION_DEADLINE_MAX_DAYS,
) -> list[str]:
    """
    Check a mission draft (or the merge of a mission and a patch).

    Args:
        draft: Fields to check
        now: Reference time for deadline rules (timezone-aware)
        max_deadline_days: How far ahead a deadline may be

    Returns:
        Error messages in rule order; empty when the draft is valid
    """
    errors: list[str] = []

    if not draft.title.strip():
        errors.append("Title is required")
    if not draft.description.strip():
        errors.append("Description is required")

    if not draft.requirements:
        errors.append("At least one tag requirement is required")
    else:
        for index, requirement in enumerate(draft.requirements, start=1):
            if not requirement.tag.strip():
                errors.append(f"Tag is required for requirement #{index}")
            if requirement.count < 1:
                errors.append(f"Count must be at least 1 for requirement #{index}")

    if draft.deadline is not None:
        if draft.deadline < now:
            errors.append("Deadline cannot be in the past")
        if draft.deadline > now + timedelta(days=max_deadline_days):
            errors.append(f"Deadline cannot be more than {max_deadline_days} days in the future")

    if draft.link and not is_valid_url(draft.link):
        errors.append("Link must be a valid URL")

    return errors
