# =============================================================================
# racf_core/offline/backends.py
# Remote and local implementations of the user operations
# =============================================================================
"""
Backend strategies selected per call by the UnifiedDataService.

- RemoteBackend: delegates to the remote user service, which owns its own
  uniqueness and validation rules.
- LocalBackend: the SQLite record store, seeded on first use, enforcing the
  same normalization and userid uniqueness as the remote service.
"""

from __future__ import annotations
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import logging

from racf_core.api.user_connector import UserAPIConnector
from racf_core.errors import DuplicateUserError, UserNotFoundError
from racf_core.models.user import (
    CreateUserPayload,
    UpdateUserPayload,
    UserRecord,
    build_record,
    normalize_create,
    normalize_update,
    utc_timestamp,
)
from racf_core.offline.local_database import LocalDatabase
from racf_core.offline.seed_manager import SeedManager

logger = logging.getLogger(__name__)


class UserBackend(ABC):
    """Operations every backend supports. Payloads arrive validated."""

    name = "abstract"

    @abstractmethod
    def list_users(self) -> List[UserRecord]:
        pass

    @abstractmethod
    def create_user(self, payload: CreateUserPayload) -> UserRecord:
        pass

    @abstractmethod
    def update_user(self, record_id: str, payload: UpdateUserPayload) -> UserRecord:
        pass

    @abstractmethod
    def delete_user(self, record_id: str) -> None:
        pass


class RemoteBackend(UserBackend):
    """Pass-through to the remote user service."""

    name = "remote"

    def __init__(self, connector: UserAPIConnector):
        self._connector = connector

    def list_users(self) -> List[UserRecord]:
        return self._connector.list_users()

    def create_user(self, payload: CreateUserPayload) -> UserRecord:
        return self._connector.create_user(payload)

    def update_user(self, record_id: str, payload: UpdateUserPayload) -> UserRecord:
        return self._connector.update_user(record_id, payload)

    def delete_user(self, record_id: str) -> None:
        self._connector.delete_user(record_id)


class LocalBackend(UserBackend):
    """
    User operations on the local record store.

    The uniqueness check and the following write run under one lock, so two
    writes from this process cannot interleave between check and write.
    """

    name = "local"

    def __init__(
        self,
        database: LocalDatabase,
        seed_manager: Optional[SeedManager] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        clock: Callable[[], str] = utc_timestamp,
    ):
        self._db = database
        self._seed_manager = seed_manager
        self._id_factory = id_factory
        self._clock = clock
        self._write_lock = threading.Lock()

    def _ensure_seeded(self) -> None:
        if self._seed_manager is not None:
            self._seed_manager.ensure_seeded()

    def list_users(self) -> List[UserRecord]:
        self._ensure_seeded()
        return self._db.list_all()

    def create_user(self, payload: CreateUserPayload) -> UserRecord:
        self._ensure_seeded()
        payload = normalize_create(payload)

        with self._write_lock:
            if self._db.find_by_userid(payload.userid) is not None:
                raise DuplicateUserError(payload.userid)

            record = build_record(payload, self._id_factory(), created_at=self._clock())
            self._db.insert(record)

        logger.info(f"Created user {record.userid} locally ({record.id})")
        return record

    def update_user(self, record_id: str, payload: UpdateUserPayload) -> UserRecord:
        self._ensure_seeded()
        fields = normalize_update(payload).present_fields()

        with self._write_lock:
            existing = self._db.get_by_id(record_id)
            if existing is None:
                raise UserNotFoundError(record_id)

            if "userid" in fields:
                other = self._db.find_by_userid(fields["userid"])
                if other is not None and other.id != record_id:
                    raise DuplicateUserError(fields["userid"])

            record = self._db.update(record_id, fields)

        logger.info(f"Updated user {record.userid} locally ({', '.join(fields) or 'no changes'})")
        return record

    def delete_user(self, record_id: str) -> None:
        self._ensure_seeded()
        if self._db.delete(record_id):
            logger.info(f"Deleted user {record_id} locally")
        else:
            logger.debug(f"Local delete of {record_id}: already absent")
