# =============================================================================
# racf_core/offline/seed_manager.py
# One-time seeding of the local record store
# =============================================================================
"""
SeedManager - inserts the default users the first time a client uses the
local store, and never again.

Two facts decide whether to seed:
- ``has_ever_seeded``: durable flag in the SettingsStore (separate from the
  record database, so emptying the store does not reset it)
- ``store_empty``: the record store currently holds no records

Seeding happens only when the flag is unset and the store is empty. Deleting
every user afterwards does not bring the defaults back.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import List, Optional
import logging

from racf_core.errors import StorageError
from racf_core.models.user import (
    CreateUserPayload,
    UserRecord,
    build_record,
    normalize_create,
    utc_timestamp,
)
from racf_core.offline.local_database import LocalDatabase
from racf_core.offline.settings_store import SettingsStore

logger = logging.getLogger(__name__)


SEEDED_FLAG_KEY = "racf_users_seeded_v1"

DEFAULT_USERS = [
    ("seed-admin01", CreateUserPayload(
        userid="ADMIN01",
        name="System Administrator",
        default_group="SYSADM",
        owner="IBMUSER",
        status="Active",
    )),
    ("seed-jdoe", CreateUserPayload(
        userid="JDOE",
        name="John Doe - Contractor",
        default_group="STAFF",
        owner="ADMIN01",
        status="Active",
    )),
    ("seed-finance01", CreateUserPayload(
        userid="FINANCE1",
        name="Finance User",
        default_group="FINANCE",
        owner="ADMIN01",
        status="Active",
    )),
]


def default_records(created_at: Optional[str] = None) -> List[UserRecord]:
    """The default users, normalized like any other created record."""
    stamp = created_at or utc_timestamp()
    return [
        build_record(normalize_create(payload), record_id, created_at=stamp)
        for record_id, payload in DEFAULT_USERS
    ]


@dataclass
class SeedState:
    """Inputs of the seeding decision."""
    has_ever_seeded: bool
    store_empty: bool

    @property
    def should_seed(self) -> bool:
        return not self.has_ever_seeded and self.store_empty


class SeedManager:
    """
    Ensures the default users exist exactly once per client.

    Usage:
        seeder = SeedManager(local_db, settings)
        seeder.ensure_seeded()  # safe to call before every local operation
    """

    def __init__(
        self,
        database: LocalDatabase,
        settings: SettingsStore,
        flag_key: str = SEEDED_FLAG_KEY,
    ):
        self._db = database
        self._settings = settings
        self._flag_key = flag_key
        self._lock = threading.Lock()
        self._attempted = False

    @property
    def attempted(self) -> bool:
        """True once this process has inserted the defaults."""
        return self._attempted

    def _has_ever_seeded(self) -> bool:
        try:
            return self._settings.get(self._flag_key, False) is True
        except StorageError as e:
            # Emptiness check still guards against a duplicate insert
            logger.debug(f"Seed flag unreadable, assuming not seeded: {e}")
            return False

    def current_state(self) -> SeedState:
        return SeedState(
            has_ever_seeded=self._has_ever_seeded(),
            store_empty=self._db.count() == 0,
        )

    def ensure_seeded(self) -> bool:
        """
        Insert the default users if this client has never been seeded and the
        store is empty.

        Returns:
            True if this call inserted the defaults
        """
        with self._lock:
            if self._attempted:
                return False

            state = self.current_state()
            if not state.should_seed:
                return False

            records = default_records()
            self._db.insert_many(records)
            self._attempted = True
            logger.info(f"Seeded local store with {len(records)} default users")

            try:
                self._settings.set(self._flag_key, True)
            except StorageError as e:
                logger.warning(f"Could not persist seed flag, will not reseed this session: {e}")

            return True
