"""
Subscription Repository - the subscriptions table.

The webhook writes rows out of band while the app reads them; concurrent
writes to one row resolve as last write wins.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from typing import Any

from onboard_buddy.billing.models import Plan, Subscription
from onboard_buddy.errors import NotFoundError
from onboard_buddy.infrastructure.database import Database, retry_on_db_lock
from onboard_buddy.observability.logging import get_logger

logger = get_logger(__name__)

_UPDATABLE = {
    "plan",
    "status",
    "stripe_subscription_id",
    "current_period_end",
    "cancel_at_period_end",
}


def _row_to_subscription(row: sqlite3.Row) -> Subscription:
    data = dict(row)
    data["cancel_at_period_end"] = bool(data["cancel_at_period_end"])
    return Subscription.model_validate(data)


class SubscriptionRepository:
    def __init__(self, database: Database):
        self.database = database

    def get(self, user_id: str) -> Subscription | None:
        with self.database.connection() as conn:
            row = conn.execute("SELECT * FROM subscriptions WHERE user_id = ?", (user_id,)).fetchone()
        return _row_to_subscription(row) if row else None

    def _require(self, user_id: str) -> Subscription:
        subscription = self.get(user_id)
        if subscription is None:
            raise NotFoundError(f"No subscription for user {user_id}")
        return subscription

    def get_by_customer(self, customer_id: str) -> Subscription | None:
        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT * FROM subscriptions WHERE stripe_customer_id = ?", (customer_id,)
            ).fetchone()
        return _row_to_subscription(row) if row else None

    @retry_on_db_lock()
    def ensure_default(self, user_id: str) -> Subscription:
        """
        Create the free/active row for ``user_id`` unless one exists.

        Side Effects:
            - Inserts into subscriptions (no-op on conflict)
        """
        now = datetime.now(UTC).isoformat()
        with self.database.transaction() as conn:
            conn.execute(
                """
                INSERT INTO subscriptions (user_id, plan, status, created_at, updated_at)
                VALUES (?, ?, 'active', ?, ?)
                ON CONFLICT(user_id) DO NOTHING
                """,
                (user_id, Plan.FREE.value, now, now),
            )
        return self._require(user_id)

    @retry_on_db_lock()
    def link_customer(self, user_id: str, customer_id: str) -> Subscription:
        self.ensure_default(user_id)
        with self.database.transaction() as conn:
            conn.execute(
                "UPDATE subscriptions SET stripe_customer_id = ?, updated_at = ? WHERE user_id = ?",
                (customer_id, datetime.now(UTC).isoformat(), user_id),
            )
        return self._require(user_id)

    @retry_on_db_lock()
    def update_by_customer(self, customer_id: str, **fields: Any) -> bool:
        """
        Overwrite fields on the row linked to ``customer_id``.

        Returns:
            True if a row was updated, False for an unknown customer
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update subscription fields: {sorted(unknown)}")

        values: dict[str, Any] = dict(fields)
        if isinstance(values.get("current_period_end"), datetime):
            values["current_period_end"] = values["current_period_end"].isoformat()
        if "cancel_at_period_end" in values:
            values["cancel_at_period_end"] = int(bool(values["cancel_at_period_end"]))
        values["updated_at"] = datetime.now(UTC).isoformat()

        assignments = ", ".join(f"{name} = ?" for name in values)
        with self.database.transaction() as conn:
            cursor = conn.execute(
                f"UPDATE subscriptions SET {assignments} WHERE stripe_customer_id = ?",  # noqa: S608
                (*values.values(), customer_id),
            )
            updated = cursor.rowcount > 0

        if not updated:
            logger.warning("No subscription linked to customer %s", customer_id)
        return updated
