"""
Pytest configuration for Onboard Buddy tests

Provides a controllable clock, a temporary snapshot database, an in-memory
object storage and a synchronous cleanup queue shared by unit and
integration tests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from onboard_buddy.infrastructure.database import Database
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.observability.telemetry import reset_counters
from onboard_buddy.storage.images import UploadResult, build_object_path, check_image

START = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)  # a Monday


class FakeClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingNotifier:
    """Notifier double that accepts everything and remembers it."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []

    def add_notification(
        self,
        title: str,
        message: str,
        type: str = "info",
        link: str | None = None,
        due_date: str | None = None,
    ) -> dict[str, Any]:
        entry = {"title": title, "message": message, "type": type, "link": link, "due_date": due_date}
        self.sent.append(entry)
        return entry

    def titles(self) -> list[str]:
        return [n["title"] for n in self.sent]


class FakeObjectStorage:
    """In-memory bucket that records uploads and deletes."""

    def __init__(self, fail_deletes: bool = False):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_deletes = fail_deletes

    def public_url(self, path: str) -> str:
        return f"https://storage.test/{path}"

    def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        folder: str = "gallery",
        owner_id: str | None = None,
    ) -> UploadResult:
        problem = check_image(data, filename, content_type)
        if problem:
            return UploadResult(error=problem)
        path = build_object_path(filename, folder, owner_id)
        self.objects[path] = data
        return UploadResult(url=self.public_url(path), path=path)

    def delete(self, path: str) -> bool:
        if self.fail_deletes:
            return False
        self.deleted.append(path)
        self.objects.pop(path, None)
        return True


class InlineCleanupQueue:
    """Cleanup queue that runs jobs immediately on the calling thread."""

    def __init__(self) -> None:
        self.jobs: list[str] = []

    def submit(self, description: str, fn: Any, *args: Any) -> None:
        self.jobs.append(description)
        fn(*args)

    def drain(self, timeout: float | None = None) -> None:
        pass

    def shutdown(self, wait: bool = True) -> None:
        pass


@pytest.fixture(autouse=True)
def _reset_counters():
    """Telemetry counters are process-global; start every test from zero."""
    reset_counters()
    yield
    reset_counters()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def storage():
    return FakeObjectStorage()


@pytest.fixture
def cleanup():
    return InlineCleanupQueue()


@pytest.fixture
def database(tmp_path):
    """Fresh SQLite file with the schema applied."""
    db = Database(tmp_path / "onboard_buddy.db")
    db.init_schema()
    return db


@pytest.fixture
def snapshots(database):
    return SnapshotStore(database)


@pytest.fixture
def failing_storage():
    """Bucket that refuses every delete."""
    return FakeObjectStorage(fail_deletes=True)
