"""Tests for settings and the image slots."""

from __future__ import annotations

import pytest

from onboard_buddy.config import DEFAULT_WELCOME_BACKGROUND
from onboard_buddy.errors import ImageStorageError
from onboard_buddy.preferences import ImageStore, SettingsStore


@pytest.fixture
def settings(clock):
    return SettingsStore(clock=clock)


@pytest.fixture
def images(clock, storage, cleanup):
    return ImageStore(clock=clock, storage=storage, cleanup=cleanup)


# ============================================================================
# Settings
# ============================================================================


def test_partial_theme_update_merges(settings):
    settings.update_theme(primary="#000000")

    assert settings.settings.theme.primary == "#000000"
    assert settings.settings.theme.accent == "#0c7ff2"


def test_unknown_setting_is_rejected(settings):
    with pytest.raises(ValueError, match="Unknown layout settings: gutter"):
        settings.update_layout(gutter=4)


def test_custom_text_and_reset(settings):
    settings.update_custom_text("welcome_title", "Hi there")
    settings.update_preferences(compact_mode=True)

    assert settings.settings.custom_texts == {"welcome_title": "Hi there"}

    settings.reset_to_default()
    assert settings.settings.custom_texts == {}
    assert settings.settings.preferences.compact_mode is False


def test_settings_v0_snapshot_resets_to_defaults(snapshots, clock):
    snapshots.save(SettingsStore.name, 0, {"theme": {"primary": "red"}})

    store = SettingsStore(snapshots=snapshots, clock=clock)
    store.hydrate()

    assert store.settings.theme.primary == "#39e079"


# ============================================================================
# Images
# ============================================================================


def test_replacing_profile_photo_releases_old_object(images, storage):
    images.set_profile_photo("https://s/one.jpg", "profiles/u1/one.jpg")
    images.set_profile_photo("https://s/two.jpg", "profiles/u1/two.jpg")

    assert images.profile_photo_path == "profiles/u1/two.jpg"
    assert storage.deleted == ["profiles/u1/one.jpg"]


def test_clearing_background_restores_default(images, storage):
    images.set_welcome_background("https://s/cover.jpg", "covers/cover.jpg")
    images.set_welcome_background(None)

    assert images.welcome_background == DEFAULT_WELCOME_BACKGROUND
    assert images.welcome_background_path is None
    assert storage.deleted == ["covers/cover.jpg"]


def test_remove_uploaded_image(images, storage):
    images.add_uploaded_image("img-1", "https://s/a.jpg", "gallery/a.jpg")

    assert images.remove_uploaded_image("img-1") is True
    assert images.uploaded_images == []
    assert storage.deleted == ["gallery/a.jpg"]
    assert images.remove_uploaded_image("img-1") is False


def test_failed_removal_surfaces_and_keeps_state(clock, failing_storage, cleanup):
    images = ImageStore(clock=clock, storage=failing_storage, cleanup=cleanup)
    images.add_uploaded_image("img-1", "https://s/a.jpg", "gallery/a.jpg")

    with pytest.raises(ImageStorageError):
        images.remove_uploaded_image("img-1")

    assert [i.id for i in images.uploaded_images] == ["img-1"]


def test_orphaned_uploads_are_released(images, storage, clock):
    images.add_uploaded_image("old", "https://s/old.jpg", "gallery/old.jpg")
    clock.advance(days=6)
    images.add_uploaded_image("new", "https://s/new.jpg", "gallery/new.jpg")
    clock.advance(days=1, seconds=1)

    assert images.cleanup_orphaned_images() == 1
    assert [i.id for i in images.uploaded_images] == ["new"]
    assert storage.deleted == ["gallery/old.jpg"]
    assert images.cleanup_orphaned_images(max_age_days=30) == 0


def test_v1_image_snapshot_gains_path_fields(snapshots, clock):
    snapshots.save(ImageStore.name, 1, {"profile_photo": "https://s/me.jpg"})

    store = ImageStore(snapshots=snapshots, clock=clock)
    store.hydrate()

    assert store.profile_photo == "https://s/me.jpg"
    assert store.profile_photo_path is None
    assert store.welcome_background == DEFAULT_WELCOME_BACKGROUND
