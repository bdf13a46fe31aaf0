# =============================================================================
# tests/unit/test_seed_manager.py
# Unit Tests for one-time seeding of the local store
# =============================================================================

import threading
from unittest.mock import MagicMock

from racf_core.errors import StorageError
from racf_core.models.user import USERID_MAX_LENGTH, UserRecord, normalize_create
from racf_core.offline.seed_manager import (
    DEFAULT_USERS,
    SEEDED_FLAG_KEY,
    SeedManager,
    SeedState,
    default_records,
)


class TestSeedState:

    def test_seeds_only_when_never_seeded_and_empty(self):
        assert SeedState(has_ever_seeded=False, store_empty=True).should_seed
        assert not SeedState(has_ever_seeded=True, store_empty=True).should_seed
        assert not SeedState(has_ever_seeded=False, store_empty=False).should_seed


class TestDefaultRecords:

    def test_defaults_are_normalized(self):
        records = default_records(created_at="2024-01-01T00:00:00.000Z")

        assert [r.id for r in records] == [record_id for record_id, _ in DEFAULT_USERS]
        assert {r.userid for r in records} == {"ADMIN01", "JDOE", "FINANCE1"}
        assert all(r.auth_option == "1" for r in records)
        assert all(r.created_at == "2024-01-01T00:00:00.000Z" for r in records)

    def test_default_userids_pass_create_validation(self):
        for _, payload in DEFAULT_USERS:
            assert 1 <= len(payload.userid) <= USERID_MAX_LENGTH
            assert normalize_create(payload).userid == payload.userid


class TestEnsureSeeded:

    def test_first_use_inserts_defaults_and_sets_flag(self, seed_manager, local_db, settings_store):
        assert seed_manager.ensure_seeded() is True

        assert local_db.count() == len(DEFAULT_USERS)
        assert settings_store.get(SEEDED_FLAG_KEY) is True
        assert seed_manager.attempted

    def test_local_create_works_on_a_fresh_store(self, local_backend, local_db):
        created = local_backend.create_user(normalize_create({"userid": "jdoe2 ", "name": "J", "defaultGroup": "staff"}))

        assert created.userid == "JDOE2"
        assert local_db.count() == len(DEFAULT_USERS) + 1

    def test_second_call_is_a_no_op(self, seed_manager, local_db):
        seed_manager.ensure_seeded()
        assert seed_manager.ensure_seeded() is False
        assert local_db.count() == len(DEFAULT_USERS)

    def test_emptied_store_is_not_reseeded(self, local_db, settings_store):
        """Deleting every user does not bring the defaults back, even in a new session"""
        SeedManager(local_db, settings_store).ensure_seeded()
        local_db.clear()

        fresh = SeedManager(local_db, settings_store)

        assert fresh.ensure_seeded() is False
        assert local_db.count() == 0

    def test_non_empty_store_is_not_seeded(self, seed_manager, local_db, settings_store):
        local_db.insert(UserRecord(
            id="own-1", userid="MINE", name="Mine", default_group="STAFF",
        ))

        assert seed_manager.ensure_seeded() is False
        assert local_db.count() == 1
        assert settings_store.get(SEEDED_FLAG_KEY) is None

    def test_flag_write_failure_does_not_reseed_this_session(self, local_db):
        """The defaults land once; a failed flag write only logs a warning"""
        settings = MagicMock()
        settings.get.return_value = False
        settings.set.side_effect = StorageError("disk full", operation="write")
        manager = SeedManager(local_db, settings)

        assert manager.ensure_seeded() is True
        local_db.clear()
        assert manager.ensure_seeded() is False
        assert local_db.count() == 0

    def test_unreadable_flag_with_populated_store(self, local_db):
        """An unreadable flag counts as unset; the emptiness check still prevents duplicates"""
        settings = MagicMock()
        settings.get.side_effect = StorageError("corrupt", operation="read")
        local_db.insert(UserRecord(id="x", userid="X", name="X", default_group="G"))

        assert SeedManager(local_db, settings).ensure_seeded() is False
        assert local_db.count() == 1

    def test_concurrent_first_use_seeds_once(self, seed_manager, local_db):
        results = []

        def worker():
            results.append(seed_manager.ensure_seeded())

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1
        assert local_db.count() == len(DEFAULT_USERS)
