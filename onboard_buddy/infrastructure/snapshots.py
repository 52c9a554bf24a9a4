"""
Versioned key-value snapshots for client stores.

Each store persists its whole state as one JSON document under its name,
tagged with the schema version that wrote it. Loading an older snapshot runs
the store's ``migrate(state, old_version)`` hook and writes the upgraded
document back before handing it to the store.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from onboard_buddy.errors import SnapshotVersionError
from onboard_buddy.infrastructure.database import Database, retry_on_db_lock
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import log_event

logger = get_logger(__name__)

MigrateFn = Callable[[dict[str, Any], int], dict[str, Any]]


class SnapshotStore:
    """Reads and writes store snapshots in the ``store_snapshots`` table."""

    def __init__(self, database: Database):
        self.database = database

    def load(self, name: str, version: int, migrate: MigrateFn) -> dict[str, Any] | None:
        """
        Load the snapshot for ``name`` at schema ``version``.

        Returns:
            The (possibly migrated) state, or None when nothing is stored.

        Raises:
            SnapshotVersionError: If the stored version is newer than ``version``
        """
        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT version, state FROM store_snapshots WHERE name = ?",
                (name,),
            ).fetchone()

        if row is None:
            return None

        stored_version = int(row["version"])
        state = json.loads(row["state"])

        if stored_version > version:
            raise SnapshotVersionError(
                f"Snapshot '{name}' has version {stored_version}, "
                f"this build understands up to {version}"
            )

        if stored_version < version:
            logger.info("Migrating snapshot %s from v%d to v%d", name, stored_version, version)
            state = migrate(state, stored_version)
            self.save(name, version, state)
            log_event("snapshot.migrated", store=name, from_version=stored_version, to=version)

        return state

    @retry_on_db_lock()
    def save(self, name: str, version: int, state: dict[str, Any]) -> None:
        """
        Upsert the snapshot for ``name``.

        Side Effects:
            - Writes one row in store_snapshots
        """
        payload = json.dumps(state, default=str)
        with self.database.transaction() as conn:
            conn.execute(
                """
                INSERT INTO store_snapshots (name, version, state, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    version = excluded.version,
                    state = excluded.state,
                    updated_at = excluded.updated_at
                """,
                (name, version, payload, datetime.now(UTC).isoformat()),
            )

    def delete(self, name: str) -> None:
        with self.database.transaction() as conn:
            conn.execute("DELETE FROM store_snapshots WHERE name = ?", (name,))
