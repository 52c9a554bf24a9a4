"""
Mission Engine - derives mission progress from gallery tag counts.

The engine never reads the gallery directly; it is handed a read-only
``TagCountSource`` (the gallery store satisfies it) and a ``Notifier``
(the notification center satisfies it).
"""

from __future__ import annotations

import uuid
from typing import Any, Protocol

from onboard_buddy.core.store import Clock, Store, patch_changes, utc_now
from onboard_buddy.errors import MissionValidationError
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.missions.defaults import default_missions
from onboard_buddy.missions.models import (
    Mission,
    MissionDraft,
    MissionRequirement,
    MissionUpdate,
)
from onboard_buddy.missions.validation import validate_mission
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import counter, log_event
from onboard_buddy.tags.models import same_tag

logger = get_logger(__name__)

MISSIONS_LINK = "/missions"
COMPLETED_TITLE = "Mission Completed! 🎉"
AVAILABLE_TITLE = "New Mission Available"


class TagCountSource(Protocol):
    def count_tagged(self, tag: str) -> int: ...


class Notifier(Protocol):
    def add_notification(
        self,
        title: str,
        message: str,
        type: str = "info",
        link: str | None = None,
        due_date: str | None = None,
    ) -> Any: ...


def compute_progress(
    requirements: list[MissionRequirement], source: TagCountSource
) -> tuple[list[MissionRequirement], float, bool]:
    """
    Recount requirements against ``source``.

    Each requirement contributes at most its own ``count`` to the total, so
    an over-satisfied requirement never makes up for an unmet one. A mission
    with nothing required has progress 0 and is not complete.

    Returns:
        (requirements with fresh ``current``, progress 0..100, completed)
    """
    recounted = [
        req.model_copy(update={"current": source.count_tagged(req.tag)}) for req in requirements
    ]
    total_required = sum(req.count for req in recounted)
    total_current = sum(min(req.current, req.count) for req in recounted)

    if total_required <= 0:
        return recounted, 0.0, False

    progress = min(100.0, 100.0 * total_current / total_required)
    completed = all(req.current >= req.count for req in recounted)
    return recounted, progress, completed


class MissionEngine(Store):
    """Mission CRUD plus the progress reconciliation pass."""

    name = "onboard-buddy-missions"
    version = 1

    def __init__(
        self,
        source: TagCountSource,
        notifier: Notifier | None = None,
        snapshots: SnapshotStore | None = None,
        clock: Clock = utc_now,
        seed_defaults: bool = True,
    ):
        super().__init__(snapshots, clock)
        self._source = source
        self._notifier = notifier
        self._missions: list[Mission] = default_missions(self._clock()) if seed_defaults else []

    @property
    def missions(self) -> list[Mission]:
        return list(self._missions)

    def get_mission(self, mission_id: str) -> Mission | None:
        return next((m for m in self._missions if m.id == mission_id), None)

    def missions_requiring(self, tag: str, ignore_case: bool = False) -> list[Mission]:
        return [
            m
            for m in self._missions
            if any(same_tag(r.tag, tag, ignore_case) for r in m.requirements)
        ]

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def add_mission(self, draft: MissionDraft) -> Mission:
        """
        Validate and insert a new mission, then bring its progress up to date.

        Raises:
            MissionValidationError: With every violated rule

        Side Effects:
            - "New Mission Available" notification
            - "Mission Completed!" notification if existing gallery content
              already satisfies it
        """
        now = self._clock()
        errors = validate_mission(draft, now)
        if errors:
            raise MissionValidationError(errors)

        mission = Mission(
            **draft.model_dump(exclude={"requirements"}),
            requirements=[MissionRequirement(tag=r.tag, count=r.count) for r in draft.requirements],
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )
        self._missions = [*self._missions, mission]
        self._commit()
        logger.info("Added mission %s (%s)", mission.title, mission.id)

        self._notify(
            AVAILABLE_TITLE,
            f'Mission "{mission.title}" has been added to your journey.',
            "info",
        )
        # A completion notice raised here lands inside the notification
        # throttle window of the one above and may be dropped by the center.
        return self.update_mission_progress(mission.id) or mission

    def update_mission(self, mission_id: str, patch: MissionUpdate) -> Mission | None:
        """
        Apply ``patch`` after validating the merged mission, then recompute.

        Returns:
            The updated mission, or None if ``mission_id`` is unknown

        Raises:
            MissionValidationError: With every violated rule; nothing is applied
        """
        existing = self.get_mission(mission_id)
        if existing is None:
            return None

        merged = {**existing.model_dump(), **patch_changes(patch, clearable=("deadline", "link"))}
        errors = validate_mission(MissionDraft.model_validate(merged), self._clock())
        if errors:
            raise MissionValidationError(errors)

        updated = Mission.model_validate({**merged, "updated_at": self._clock()})
        self._missions = [updated if m.id == mission_id else m for m in self._missions]
        self._commit()
        return self.update_mission_progress(mission_id)

    def delete_mission(self, mission_id: str) -> bool:
        if self.get_mission(mission_id) is None:
            return False
        self._missions = [m for m in self._missions if m.id != mission_id]
        self._commit()
        return True

    def rename_requirement_tag(
        self, old: str, new: str, recompute: bool = False, ignore_case: bool = False
    ) -> list[str]:
        """
        Point every requirement on ``old`` at ``new``.

        Returns:
            Ids of the missions that were rewritten
        """
        affected: list[str] = []
        missions: list[Mission] = []
        for mission in self._missions:
            if any(same_tag(r.tag, old, ignore_case) for r in mission.requirements):
                affected.append(mission.id)
                requirements = [
                    r.model_copy(update={"tag": new}) if same_tag(r.tag, old, ignore_case) else r
                    for r in mission.requirements
                ]
                mission = mission.model_copy(
                    update={"requirements": requirements, "updated_at": self._clock()}
                )
            missions.append(mission)

        if affected:
            self._missions = missions
            self._commit()
            logger.info("Renamed requirement tag %s -> %s on %d missions", old, new, len(affected))
        if recompute:
            self.recompute_all()
        return affected

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _reconcile(self, mission: Mission) -> tuple[Mission, bool]:
        """Return (mission with fresh derived state, newly completed)."""
        requirements, progress, completed = compute_progress(mission.requirements, self._source)

        unchanged = (
            [r.current for r in requirements] == [r.current for r in mission.requirements]
            and progress == mission.progress
            and completed == mission.completed
        )
        if unchanged:
            return mission, False

        newly_completed = completed and not mission.completed
        updated = mission.model_copy(
            update={
                "requirements": requirements,
                "progress": progress,
                "completed": completed,
                "updated_at": self._clock(),
            }
        )
        return updated, newly_completed

    def update_mission_progress(self, mission_id: str) -> Mission | None:
        """
        Recompute one mission from live tag counts.

        Side Effects:
            - One state write when derived fields changed
            - One completion notification on a false -> true transition,
              emitted after the write; never on true -> false
        """
        mission = self.get_mission(mission_id)
        if mission is None:
            return None

        updated, newly_completed = self._reconcile(mission)
        if updated is not mission:
            self._missions = [updated if m.id == mission_id else m for m in self._missions]
            self._commit()
        if newly_completed:
            self._announce_completion(updated)
        return updated

    def recompute_all(self) -> list[Mission]:
        """
        Recompute every mission in a single state transition.

        Returns:
            Missions that transitioned to completed on this pass
        """
        completed_now: list[Mission] = []
        changed = False
        missions: list[Mission] = []
        for mission in self._missions:
            updated, newly_completed = self._reconcile(mission)
            changed = changed or updated is not mission
            if newly_completed:
                completed_now.append(updated)
            missions.append(updated)

        if changed:
            self._missions = missions
            self._commit()
        for mission in completed_now:
            self._announce_completion(mission)
        return completed_now

    def _announce_completion(self, mission: Mission) -> None:
        counter("missions.completed")
        log_event("mission.completed", mission_id=mission.id, title=mission.title)
        self._notify(
            COMPLETED_TITLE,
            f'Congratulations! You\'ve completed the mission "{mission.title}"',
            "success",
        )

    def _notify(self, title: str, message: str, type: str) -> None:
        if self._notifier is None:
            return
        self._notifier.add_notification(title=title, message=message, type=type, link=MISSIONS_LINK)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_state(self) -> dict[str, Any]:
        return {"missions": [m.model_dump(mode="json") for m in self._missions]}

    def load_state(self, state: dict[str, Any]) -> None:
        self._missions = [Mission.model_validate(m) for m in state.get("missions", [])]

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        if from_version == 0:
            missions = state.get("missions") or [
                m.model_dump(mode="json") for m in default_missions(self._clock())
            ]
            return {"missions": missions}
        return state
