"""
Tests for mission progress reconciliation.

Validates:
1. Progress is the saturated ratio of satisfied to required counts
2. Completion is announced exactly once, on the false -> true transition
3. Un-completion is silent
4. Recomputation is idempotent and guards against empty requirements
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from onboard_buddy.errors import MissionValidationError
from onboard_buddy.gallery import GalleryItemCreate, GalleryStore
from onboard_buddy.missions import MissionDraft, MissionEngine, MissionRequirement, MissionUpdate
from onboard_buddy.missions.engine import COMPLETED_TITLE, compute_progress
from onboard_buddy.observability.telemetry import get_counter


class DictSource:
    def __init__(self, counts: dict[str, int]):
        self.counts = counts

    def count_tagged(self, tag: str) -> int:
        return self.counts.get(tag, 0)


@pytest.fixture
def gallery(clock):
    return GalleryStore(clock=clock)


@pytest.fixture
def engine(gallery, notifier, clock):
    engine = MissionEngine(gallery, notifier, clock=clock, seed_defaults=False)
    gallery.subscribe(lambda _store: engine.recompute_all())
    return engine


def _draft(**overrides) -> MissionDraft:
    fields = {
        "title": "Learn the lingo",
        "description": "Capture acronyms and team intros",
        "requirements": [{"tag": "a", "count": 2}, {"tag": "b", "count": 1}],
    }
    fields.update(overrides)
    return MissionDraft.model_validate(fields)


def _add_items(gallery, tag: str, n: int) -> list[str]:
    return [gallery.add_item(GalleryItemCreate(title=f"{tag}-{i}", tags=[tag])).id for i in range(n)]


def test_partial_progress_saturates_over_satisfied_requirement(gallery, engine):
    _add_items(gallery, "a", 3)
    mission = engine.add_mission(_draft())

    assert [r.current for r in mission.requirements] == [3, 0]
    assert mission.progress == pytest.approx(200 / 3)
    assert mission.completed is False


def test_completion_fires_once_then_stays_quiet(gallery, engine, notifier):
    mission = engine.add_mission(_draft())
    _add_items(gallery, "a", 2)
    _add_items(gallery, "b", 1)

    mission = engine.get_mission(mission.id)
    assert [r.current for r in mission.requirements] == [2, 1]
    assert mission.progress == 100
    assert mission.completed is True
    assert notifier.titles().count(COMPLETED_TITLE) == 1

    for _ in range(3):
        engine.recompute_all()
        engine.update_mission_progress(mission.id)

    assert notifier.titles().count(COMPLETED_TITLE) == 1
    assert get_counter("missions.completed") == 1


def test_uncompletion_is_silent(gallery, engine, notifier):
    mission = engine.add_mission(_draft())
    _add_items(gallery, "a", 2)
    (b_item,) = _add_items(gallery, "b", 1)
    sent_before = len(notifier.sent)

    gallery.delete_item(b_item)

    mission = engine.get_mission(mission.id)
    assert [r.current for r in mission.requirements] == [2, 0]
    assert mission.completed is False
    assert mission.progress == pytest.approx(200 / 3)
    assert len(notifier.sent) == sent_before


def test_recompletion_after_uncompletion_notifies_again(gallery, engine, notifier):
    mission = engine.add_mission(_draft(requirements=[{"tag": "b", "count": 1}]))
    (item,) = _add_items(gallery, "b", 1)
    gallery.delete_item(item)
    _add_items(gallery, "b", 1)

    assert engine.get_mission(mission.id).completed is True
    assert notifier.titles().count(COMPLETED_TITLE) == 2


def test_new_mission_already_satisfied_completes_on_add(gallery, engine, notifier):
    _add_items(gallery, "a", 2)
    _add_items(gallery, "b", 1)

    mission = engine.add_mission(_draft())

    assert mission.completed is True
    assert notifier.titles() == ["New Mission Available", COMPLETED_TITLE]
    assert notifier.sent[0]["message"] == 'Mission "Learn the lingo" has been added to your journey.'
    assert notifier.sent[1]["type"] == "success"
    assert notifier.sent[1]["link"] == "/missions"


def test_recompute_is_idempotent(gallery, engine):
    mission = engine.add_mission(_draft())
    _add_items(gallery, "a", 1)

    first = engine.update_mission_progress(mission.id)
    second = engine.update_mission_progress(mission.id)

    assert second is first
    assert second.updated_at == first.updated_at


def test_recompute_all_commits_once_per_pass(gallery, engine):
    engine.add_mission(_draft())
    engine.add_mission(_draft(title="Second"))
    commits = []
    engine.subscribe(lambda store: commits.append(store))

    _add_items(gallery, "a", 1)

    assert len(commits) == 1


def test_zero_requirement_total_never_divides_by_zero():
    requirements = [MissionRequirement(tag="a", count=0)]

    recounted, progress, completed = compute_progress(requirements, DictSource({"a": 4}))

    assert progress == 0.0
    assert completed is False
    assert recounted[0].current == 4


def test_compute_progress_does_not_let_one_requirement_cover_another():
    requirements = [MissionRequirement(tag="a", count=1), MissionRequirement(tag="b", count=3)]

    _, progress, completed = compute_progress(requirements, DictSource({"a": 10, "b": 1}))

    assert progress == pytest.approx(50.0)
    assert completed is False


def test_single_item_counts_once_per_tag(gallery, engine):
    gallery.add_item(GalleryItemCreate(title="both", tags=["a", "b", "a"]))

    mission = engine.add_mission(_draft())

    assert [r.current for r in mission.requirements] == [1, 1]


def test_add_mission_collects_every_error(engine, clock):
    draft = _draft(
        title="",
        description=" ",
        requirements=[{"tag": "", "count": 0}],
        deadline=clock() - timedelta(days=1),
        link="not a url",
    )

    with pytest.raises(MissionValidationError) as exc_info:
        engine.add_mission(draft)

    assert exc_info.value.errors == [
        "Title is required",
        "Description is required",
        "Tag is required for requirement #1",
        "Count must be at least 1 for requirement #1",
        "Deadline cannot be in the past",
        "Link must be a valid URL",
    ]
    assert engine.missions == []


def test_update_requirements_forces_recompute(gallery, engine):
    _add_items(gallery, "c", 1)
    mission = engine.add_mission(_draft())

    updated = engine.update_mission(
        mission.id, MissionUpdate(requirements=[MissionRequirement(tag="c", count=1)])
    )

    assert updated.completed is True
    assert updated.progress == 100


def test_invalid_update_leaves_mission_untouched(engine):
    mission = engine.add_mission(_draft())

    with pytest.raises(MissionValidationError):
        engine.update_mission(mission.id, MissionUpdate(title=""))

    assert engine.get_mission(mission.id).title == "Learn the lingo"


def test_null_patch_fields_keep_values_and_clear_deadline(engine, clock):
    draft = _draft(deadline=clock() + timedelta(days=10), link="https://wiki.example.com")
    mission = engine.add_mission(draft)

    updated = engine.update_mission(
        mission.id,
        MissionUpdate(title=None, description=None, requirements=None, reward=None, deadline=None),
    )

    assert updated.title == "Learn the lingo"
    assert [r.tag for r in updated.requirements] == ["a", "b"]
    assert updated.reward == mission.reward
    assert updated.deadline is None
    assert updated.link == "https://wiki.example.com"


def test_update_unknown_mission_returns_none(engine):
    assert engine.update_mission("missing", MissionUpdate(title="x")) is None
    assert engine.update_mission_progress("missing") is None
    assert engine.delete_mission("missing") is False


def test_rename_requirement_tag_reports_affected(engine):
    first = engine.add_mission(_draft())
    engine.add_mission(_draft(title="Other", requirements=[{"tag": "z", "count": 1}]))

    affected = engine.rename_requirement_tag("a", "acronym")

    assert affected == [first.id]
    assert [r.tag for r in engine.get_mission(first.id).requirements] == ["acronym", "b"]
    assert [m.id for m in engine.missions_requiring("acronym")] == [first.id]


def test_rename_requirement_tag_ignoring_case(engine):
    mission = engine.add_mission(_draft(requirements=[{"tag": "admin", "count": 1}]))

    assert engine.rename_requirement_tag("Admin", "paperwork") == []
    assert engine.rename_requirement_tag("Admin", "paperwork", ignore_case=True) == [mission.id]
    assert [m.id for m in engine.missions_requiring("PAPERWORK", ignore_case=True)] == [mission.id]


def test_default_missions_are_seeded(gallery, clock):
    engine = MissionEngine(gallery, clock=clock)

    assert [m.id for m in engine.missions] == ["onboarding-basics", "team-connect", "workspace-setup"]
    assert all(m.progress == 0 and not m.completed for m in engine.missions)


def test_missions_survive_snapshot_round_trip(gallery, snapshots, clock):
    engine = MissionEngine(gallery, snapshots=snapshots, clock=clock, seed_defaults=False)
    mission = engine.add_mission(_draft(deadline="2025-02-01"))

    restored = MissionEngine(gallery, snapshots=snapshots, clock=clock, seed_defaults=False)
    assert restored.hydrate() is True

    loaded = restored.get_mission(mission.id)
    assert loaded.deadline == mission.deadline
    assert loaded.requirements == mission.requirements
