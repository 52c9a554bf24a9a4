"""Tests for mission draft validation and deadline coercion."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from onboard_buddy.missions import MissionDraft, validate_mission
from onboard_buddy.missions.validation import is_valid_url

NOW = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


def _valid(**overrides) -> MissionDraft:
    fields = {
        "title": "Team Connection",
        "description": "Meet the team",
        "requirements": [{"tag": "team", "count": 3}],
    }
    fields.update(overrides)
    return MissionDraft.model_validate(fields)


def test_valid_draft_has_no_errors():
    assert validate_mission(_valid(), NOW) == []


def test_missing_requirements():
    assert validate_mission(_valid(requirements=[]), NOW) == ["At least one tag requirement is required"]


def test_requirement_errors_are_numbered_from_one():
    draft = _valid(requirements=[{"tag": "ok", "count": 1}, {"tag": " ", "count": 2}, {"tag": "x", "count": 0}])

    assert validate_mission(draft, NOW) == [
        "Tag is required for requirement #2",
        "Count must be at least 1 for requirement #3",
    ]


@pytest.mark.parametrize(
    ("deadline", "expected"),
    [
        (NOW - timedelta(minutes=1), ["Deadline cannot be in the past"]),
        (NOW + timedelta(days=90), []),
        (NOW + timedelta(days=90, seconds=1), ["Deadline cannot be more than 90 days in the future"]),
    ],
)
def test_deadline_window(deadline, expected):
    assert validate_mission(_valid(deadline=deadline), NOW) == expected


def test_date_only_deadline_means_midnight_utc():
    draft = _valid(deadline="2025-02-01")

    assert draft.deadline == datetime(2025, 2, 1, tzinfo=UTC)


def test_date_object_and_naive_datetime_deadlines_are_utc():
    assert _valid(deadline=date(2025, 2, 1)).deadline == datetime(2025, 2, 1, tzinfo=UTC)
    assert _valid(deadline=datetime(2025, 2, 1, 12)).deadline.utcoffset() == timedelta(0)


@pytest.mark.parametrize(
    ("link", "ok"),
    [
        ("https://intranet.example.com/handbook", True),
        ("http://localhost:8080/path", True),
        ("handbook", False),
        ("not a url", False),
    ],
)
def test_link_must_be_url(link, ok):
    assert is_valid_url(link) is ok
    errors = validate_mission(_valid(link=link), NOW)
    assert (errors == []) is ok


def test_empty_link_is_allowed():
    assert validate_mission(_valid(link=""), NOW) == []
