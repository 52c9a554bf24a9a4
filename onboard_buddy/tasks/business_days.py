"""Business-day arithmetic for task due dates (Saturday and Sunday are skipped)."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from onboard_buddy.config import (
    TASK_DEFAULT_DURATION_DAYS,
    TASK_MAX_DURATION_DAYS,
    TASK_MIN_DURATION_DAYS,
)


def as_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def add_business_days(start: date, days: int) -> date:
    """
    Move ``days`` weekdays away from ``start``.

    A weekend start counts from the weekend day itself, so Saturday + 1 is
    Monday.
    """
    step = 1 if days >= 0 else -1
    remaining = abs(days)
    current = start
    while remaining:
        current += timedelta(days=step)
        if current.weekday() < 5:
            remaining -= 1
    return current


def calculate_due_date(start: str | date, days: int = TASK_DEFAULT_DURATION_DAYS) -> str:
    """Due date (ISO ``YYYY-MM-DD``) ``days`` business days after ``start``."""
    return add_business_days(as_date(start), days).isoformat()


def validate_due_date(
    due: str | date,
    start: str | date,
    min_days: int = TASK_MIN_DURATION_DAYS,
    max_days: int = TASK_MAX_DURATION_DAYS,
) -> bool:
    """
    True when ``due`` lies strictly between start + min_days and
    start + max_days business days. Both boundary dates are rejected.
    """
    start_date = as_date(start)
    due_date = as_date(due)
    earliest = add_business_days(start_date, min_days)
    latest = add_business_days(start_date, max_days)
    return earliest < due_date < latest
