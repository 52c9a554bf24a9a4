"""
Workspace - composition root for one user's Onboard Buddy state.

Builds every store against one snapshot database and wires the cross-store
reactions explicitly:

- gallery commits -> ``MissionEngine.recompute_all``
- tag rename/delete go through ``Workspace.rename_tag`` / ``delete_tag`` so
  mission requirements follow the rename in the same pass
"""

from __future__ import annotations

from onboard_buddy.auth.provider import AuthProvider, HttpAuthProvider
from onboard_buddy.auth.store import AuthStore
from onboard_buddy.billing.repository import SubscriptionRepository
from onboard_buddy.core.store import Clock, Store, utc_now
from onboard_buddy.employees.store import EmployeeStore
from onboard_buddy.export.summary import ExportOptions, build_summary
from onboard_buddy.gallery.store import GalleryStore
from onboard_buddy.infrastructure.cleanup import CleanupQueue
from onboard_buddy.infrastructure.database import Database
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.missions.engine import MissionEngine
from onboard_buddy.notifications.center import NotificationCenter
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.preferences.images import ImageStore
from onboard_buddy.preferences.settings import SettingsStore
from onboard_buddy.storage.images import GCSImageStorage, ObjectStorage
from onboard_buddy.tags.store import TagStore
from onboard_buddy.tasks.store import TaskStore

logger = get_logger(__name__)


class Workspace:
    def __init__(
        self,
        database: Database | None = None,
        storage: ObjectStorage | None = None,
        auth_provider: AuthProvider | None = None,
        clock: Clock = utc_now,
        cleanup: CleanupQueue | None = None,
        seed_defaults: bool = True,
    ):
        self.database = database
        self.storage = storage
        self.cleanup = cleanup or CleanupQueue()
        snapshots = SnapshotStore(database) if database is not None else None

        self.notifications = NotificationCenter(snapshots, clock)
        self.tags = TagStore(snapshots, clock, seed_defaults=seed_defaults)
        self.gallery = GalleryStore(snapshots, clock, storage=storage, cleanup=self.cleanup)
        self.missions = MissionEngine(
            self.gallery, self.notifications, snapshots, clock, seed_defaults=seed_defaults
        )
        self.tasks = TaskStore(snapshots, clock, seed_defaults=seed_defaults)
        self.employees = EmployeeStore(snapshots, clock)
        self.settings = SettingsStore(snapshots, clock)
        self.images = ImageStore(snapshots, clock, storage=storage, cleanup=self.cleanup)

        self.subscriptions = SubscriptionRepository(database) if database is not None else None
        self.auth = (
            AuthStore(auth_provider, self.subscriptions, snapshots, clock)
            if auth_provider is not None
            else None
        )

        self.gallery.subscribe(self._on_gallery_change)

    @classmethod
    def from_config(cls) -> Workspace:
        """Workspace on the configured database, bucket and auth service."""
        database = Database()
        database.init_schema()
        workspace = cls(database=database, storage=GCSImageStorage(), auth_provider=HttpAuthProvider())
        workspace.hydrate()
        return workspace

    def _stores(self) -> list[Store]:
        stores: list[Store] = [
            self.notifications,
            self.tags,
            self.gallery,
            self.missions,
            self.tasks,
            self.employees,
            self.settings,
            self.images,
        ]
        if self.auth is not None:
            stores.append(self.auth)
        return stores

    def _on_gallery_change(self, _store: Store) -> None:
        self.missions.recompute_all()

    def hydrate(self) -> None:
        """Load every persisted snapshot, then reconcile missions with the gallery."""
        loaded = [store.name for store in self._stores() if store.hydrate()]
        logger.info("Hydrated stores: %s", ", ".join(loaded) or "none")
        self.missions.recompute_all()

    # ------------------------------------------------------------------
    # Tag choke point
    # ------------------------------------------------------------------

    def rename_tag(self, old: str, new: str, ignore_case: bool = False) -> list[str]:
        """
        Rename a tag everywhere it is referenced.

        Mission requirements are rewritten first without recomputing; the
        gallery rewrite then triggers exactly one recompute pass. With
        ``ignore_case`` every spelling of ``old`` is rewritten (catalog names
        are capitalized, gallery tags usually are not).

        Returns:
            Ids of missions whose requirements were rewritten
        """
        new = new.strip()
        if not new or old == new:
            return []

        affected = self.missions.rename_requirement_tag(old, new, recompute=False, ignore_case=ignore_case)

        catalog_tag = self.tags.find_by_name(old)
        if catalog_tag is not None:
            self.tags.update_tag(catalog_tag.id, name=new)

        self.gallery.rename_tag(old, new, ignore_case=ignore_case)
        return affected

    def delete_tag(self, tag: str, ignore_case: bool = False) -> list[str]:
        """
        Remove a tag from the gallery and the catalog.

        Mission requirements on the tag are left as they are; those missions
        cannot progress until the requirement is edited.

        Returns:
            Ids of missions that still require the deleted tag
        """
        orphaned = [m.id for m in self.missions.missions_requiring(tag, ignore_case=ignore_case)]
        if orphaned:
            logger.warning("Deleted tag %r is still required by missions: %s", tag, ", ".join(orphaned))

        catalog_tag = self.tags.find_by_name(tag)
        if catalog_tag is not None:
            self.tags.delete_tag(catalog_tag.id)

        self.gallery.delete_tag(tag, ignore_case=ignore_case)
        return orphaned

    # ------------------------------------------------------------------
    # Cross-store reads
    # ------------------------------------------------------------------

    def check_due_dates(self) -> int:
        return self.notifications.check_due_dates(self.tasks.tasks, self.missions.missions)

    def export_summary(self, options: ExportOptions | None = None) -> str:
        return build_summary(self.tasks.tasks, self.missions.missions, self.gallery.items, options)

    def close(self) -> None:
        self.cleanup.shutdown(wait=True)
