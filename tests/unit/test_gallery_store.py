"""Tests for gallery items, tag vocabulary and image release."""

from __future__ import annotations

import pytest

from onboard_buddy.gallery import INITIAL_TAGS, GalleryItemCreate, GalleryItemUpdate, GalleryStore
from onboard_buddy.infrastructure.cleanup import CleanupQueue
from onboard_buddy.observability.telemetry import get_counter


@pytest.fixture
def gallery(clock, storage, cleanup):
    return GalleryStore(clock=clock, storage=storage, cleanup=cleanup)


def test_new_gallery_starts_with_initial_vocabulary(gallery):
    assert gallery.tags == INITIAL_TAGS
    assert gallery.items == []


def test_add_item_dedupes_and_strips_tags(gallery):
    item = gallery.add_item(GalleryItemCreate(title="Standup", tags=[" team ", "team", "", "question"]))

    assert item.tags == ["team", "question"]
    assert item.type == "note"
    assert gallery.count_tagged("team") == 1


def test_every_mutation_commits_once(gallery):
    commits = []
    gallery.subscribe(lambda store: commits.append(store))

    item = gallery.add_item(GalleryItemCreate(title="x"))
    gallery.update_item(item.id, GalleryItemUpdate(title="y"))
    gallery.delete_item(item.id)

    assert len(commits) == 3


def test_unsubscribe_stops_notifications(gallery):
    commits = []
    unsubscribe = gallery.subscribe(lambda store: commits.append(store))
    unsubscribe()

    gallery.add_item(GalleryItemCreate(title="x"))

    assert commits == []


def test_update_only_applies_explicit_fields(gallery, clock):
    item = gallery.add_item(GalleryItemCreate(title="Badge photo", description="lobby", tags=["team"]))
    clock.advance(minutes=5)

    updated = gallery.update_item(item.id, GalleryItemUpdate(description="front desk"))

    assert updated.title == "Badge photo"
    assert updated.tags == ["team"]
    assert updated.description == "front desk"
    assert updated.updated_at > item.updated_at
    assert updated.created_at == item.created_at


def test_null_patch_fields_keep_required_values(gallery):
    item = gallery.add_item(GalleryItemCreate(title="Badge", tags=["team"], location="HQ"))

    updated = gallery.update_item(
        item.id, GalleryItemUpdate(title=None, type=None, tags=None, description=None, location=None)
    )

    assert updated.title == "Badge"
    assert updated.type == "note"
    assert updated.tags == ["team"]
    assert updated.location is None


def test_item_date_defaults_to_store_clock(gallery):
    dated = gallery.add_item(GalleryItemCreate(title="x", date="2024-12-24"))
    undated = gallery.add_item(GalleryItemCreate(title="y"))

    assert dated.date == "2024-12-24"
    assert undated.date == "2025-01-06"


def test_unknown_ids_are_noops(gallery):
    assert gallery.update_item("missing", GalleryItemUpdate(title="x")) is None
    assert gallery.delete_item("missing") is False


def test_replacing_image_releases_old_path(gallery, storage, cleanup):
    item = gallery.add_item(
        GalleryItemCreate(type="photo", title="Desk", image_url="https://s/old.jpg", image_path="gallery/old.jpg")
    )

    updated = gallery.update_item(
        item.id, GalleryItemUpdate(image_url="https://s/new.jpg", image_path="gallery/new.jpg")
    )

    assert updated.image_path == "gallery/new.jpg"
    assert storage.deleted == ["gallery/old.jpg"]
    assert len(cleanup.jobs) == 1


def test_replacing_image_url_without_path_clears_stale_path(gallery, storage):
    item = gallery.add_item(
        GalleryItemCreate(type="photo", title="Desk", image_url="https://s/old.jpg", image_path="gallery/old.jpg")
    )

    updated = gallery.update_item(item.id, GalleryItemUpdate(image_url="https://elsewhere/pic.jpg"))

    assert updated.image_path is None
    assert storage.deleted == ["gallery/old.jpg"]


def test_same_image_url_does_not_release(gallery, storage):
    item = gallery.add_item(
        GalleryItemCreate(type="photo", title="Desk", image_url="https://s/a.jpg", image_path="gallery/a.jpg")
    )

    gallery.update_item(item.id, GalleryItemUpdate(image_url="https://s/a.jpg", title="Desk 2"))

    assert storage.deleted == []


def test_delete_item_releases_image(gallery, storage):
    item = gallery.add_item(GalleryItemCreate(type="photo", title="Desk", image_path="gallery/a.jpg"))

    gallery.delete_item(item.id)

    assert storage.deleted == ["gallery/a.jpg"]
    assert gallery.active_image_paths() == []


def test_failed_release_does_not_block_mutation(clock):
    class BrokenStorage:
        def delete(self, path: str) -> bool:
            raise RuntimeError("bucket unavailable")

    queue = CleanupQueue(max_workers=1)
    gallery = GalleryStore(clock=clock, storage=BrokenStorage(), cleanup=queue)
    item = gallery.add_item(GalleryItemCreate(title="Desk", image_path="gallery/a.jpg"))

    assert gallery.delete_item(item.id) is True
    queue.drain(timeout=5)
    queue.shutdown()

    assert gallery.items == []
    assert get_counter("cleanup.failed") == 1


def test_reorder_puts_unlisted_items_last(gallery):
    a, b, c = (gallery.add_item(GalleryItemCreate(title=t)) for t in "abc")

    gallery.reorder_items([c.id, "missing", a.id])

    assert [i.title for i in gallery.items] == ["c", "a", "b"]


def test_add_tag_ignores_blank_and_duplicates(gallery):
    gallery.add_tag("  onboarding ")
    gallery.add_tag("onboarding")
    gallery.add_tag("   ")

    assert gallery.tags == [*INITIAL_TAGS, "onboarding"]


def test_rename_tag_rewrites_items_and_merges_duplicates(gallery):
    both = gallery.add_item(GalleryItemCreate(title="both", tags=["team", "crew"]))
    one = gallery.add_item(GalleryItemCreate(title="one", tags=["crew"]))

    gallery.rename_tag("crew", "team")

    assert gallery.get_item(both.id).tags == ["team"]
    assert gallery.get_item(one.id).tags == ["team"]
    assert gallery.count_tagged("team") == 2
    assert gallery.tags.count("team") == 1


def test_delete_tag_strips_it_everywhere(gallery):
    item = gallery.add_item(GalleryItemCreate(title="x", tags=["team", "question"]))

    gallery.delete_tag("team")

    assert "team" not in gallery.tags
    assert gallery.get_item(item.id).tags == ["question"]
    assert gallery.count_tagged("team") == 0


def test_rename_and_delete_tag_ignoring_case(gallery):
    mixed = gallery.add_item(GalleryItemCreate(title="x", tags=["Admin", "team"]))
    lower = gallery.add_item(GalleryItemCreate(title="y", tags=["admin"]))

    gallery.rename_tag("ADMIN", "paperwork", ignore_case=True)

    assert gallery.get_item(mixed.id).tags == ["paperwork", "team"]
    assert gallery.get_item(lower.id).tags == ["paperwork"]

    gallery.delete_tag("Paperwork", ignore_case=True)

    assert gallery.tag_counts() == {"team": 1}


def test_tag_counts(gallery):
    gallery.add_item(GalleryItemCreate(title="1", tags=["a", "b"]))
    gallery.add_item(GalleryItemCreate(title="2", tags=["a"]))

    assert gallery.tag_counts() == {"a": 2, "b": 1}


def test_migrates_v1_snapshot(snapshots, clock):
    snapshots.save(
        GalleryStore.name,
        1,
        {"items": [{"id": "legacy", "title": "Old note", "tags": ["team"], "date": "2024-12-01"}], "tags": []},
    )

    gallery = GalleryStore(snapshots=snapshots, clock=clock)
    assert gallery.hydrate() is True

    assert gallery.get_item("legacy").image_path is None
    assert gallery.tags == INITIAL_TAGS
    assert snapshots.load(GalleryStore.name, GalleryStore.version, gallery.migrate)["tags"] == INITIAL_TAGS
