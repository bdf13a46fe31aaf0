# =============================================================================
# tests/unit/test_unified_data_service.py
# Unit Tests for backend selection and the local user operations
# =============================================================================

import pytest

from racf_core.errors import (
    DuplicateUserError,
    RemoteRequestError,
    RemoteUnavailableError,
    UserNotFoundError,
    UserValidationError,
)
from racf_core.models.user import UserRecord, normalize_create
from racf_core.offline.seed_manager import DEFAULT_USERS


REMOTE_RECORD = UserRecord(
    id="remote-1",
    userid="ASMITH",
    name="Alice Smith",
    default_group="STAFF",
    created_at="2024-01-01T00:00:00.000Z",
    auth_option="1",
)


class TestOfflineOperations:
    """No remote configured: everything runs on the seeded local store"""

    def test_first_list_returns_seeded_users(self, offline_service):
        users = offline_service.list_users()

        assert [u.userid for u in users] == ["ADMIN01", "FINANCE1", "JDOE"]

    def test_create_normalizes_and_stores(self, offline_service):
        user = offline_service.create_user({"userid": "asmith ", "name": "Alice", "defaultGroup": "staff"})

        assert user.userid == "ASMITH"
        assert user.default_group == "STAFF"
        assert user.owner == "IBMUSER"
        assert user.status == "Active"
        assert user.auth_option == "1"
        assert user.id
        assert user in offline_service.list_users()

    def test_create_rejects_taken_userid(self, offline_service):
        """JDOE is one of the seeded users; uniqueness is case-insensitive via normalization"""
        with pytest.raises(DuplicateUserError) as exc_info:
            offline_service.create_user({"userid": "jdoe", "name": "Other", "defaultGroup": "STAFF"})

        assert exc_info.value.message == "User JDOE already exists"

    def test_invalid_payload_writes_nothing(self, offline_service, local_db):
        with pytest.raises(UserValidationError):
            offline_service.create_user({"userid": "toolongid", "name": "X", "defaultGroup": "G"})
        assert local_db.count() == 0

    def test_update_unknown_id(self, offline_service):
        with pytest.raises(UserNotFoundError) as exc_info:
            offline_service.update_user("xyz", {"name": "Nobody"})
        assert exc_info.value.message == "User with id xyz not found"

    def test_update_changes_only_present_fields(self, offline_service):
        created = offline_service.create_user({
            "userid": "asmith", "name": "Alice", "defaultGroup": "STAFF", "expiration": "2025-12-31",
        })

        updated = offline_service.update_user(created.id, {"defaultGroup": "finance"})

        assert updated.default_group == "FINANCE"
        assert updated.name == "Alice"
        assert updated.expiration == "2025-12-31"
        assert updated.created_at == created.created_at
        assert updated.id == created.id

    def test_update_clears_expiration(self, offline_service):
        created = offline_service.create_user({
            "userid": "asmith", "name": "Alice", "defaultGroup": "STAFF", "expiration": "2025-12-31",
        })
        assert offline_service.update_user(created.id, {"expiration": ""}).expiration is None

    def test_update_to_another_users_userid(self, offline_service):
        created = offline_service.create_user({"userid": "asmith", "name": "Alice", "defaultGroup": "STAFF"})

        with pytest.raises(DuplicateUserError):
            offline_service.update_user(created.id, {"userid": "admin01"})

    def test_update_keeping_own_userid(self, offline_service):
        created = offline_service.create_user({"userid": "asmith", "name": "Alice", "defaultGroup": "STAFF"})
        updated = offline_service.update_user(created.id, {"userid": "ASMITH", "name": "Alice B"})
        assert updated.name == "Alice B"

    def test_delete_is_idempotent(self, offline_service):
        offline_service.delete_user("seed-jdoe")
        offline_service.delete_user("seed-jdoe")
        offline_service.delete_user("never-existed")

        assert "JDOE" not in [u.userid for u in offline_service.list_users()]

    def test_deleting_everything_does_not_reseed(self, offline_service):
        for record_id, _ in DEFAULT_USERS:
            offline_service.delete_user(record_id)

        assert offline_service.list_users() == []


class TestRemoteSelection:
    """Remote answers the probe: calls go to the remote and never touch local state"""

    def test_list_uses_remote_and_sorts(self, online_service, mock_connector, local_db):
        mock_connector.list_users.return_value = [
            REMOTE_RECORD,
            UserRecord(id="remote-0", userid="AAA", name="A", default_group="G"),
        ]

        users = online_service.list_users()

        assert [u.userid for u in users] == ["AAA", "ASMITH"]
        assert local_db.count() == 0

    def test_create_sends_normalized_payload(self, online_service, mock_connector, local_db):
        mock_connector.create_user.return_value = REMOTE_RECORD
        raw = {"userid": "asmith ", "name": "Alice Smith", "defaultGroup": "staff"}

        assert online_service.create_user(raw) == REMOTE_RECORD

        sent = mock_connector.create_user.call_args.args[0]
        assert sent == normalize_create(raw)
        assert local_db.count() == 0

    def test_remote_rejection_is_not_retried_locally(self, online_service, mock_connector, local_db):
        mock_connector.create_user.side_effect = RemoteRequestError(409, "User ASMITH already exists")

        with pytest.raises(RemoteRequestError) as exc_info:
            online_service.create_user({"userid": "asmith", "name": "A", "defaultGroup": "G"})

        assert exc_info.value.status == 409
        assert local_db.count() == 0

    def test_validation_happens_before_probe(self, online_service, mock_connector):
        with pytest.raises(UserValidationError):
            online_service.create_user({"userid": "", "name": "", "defaultGroup": ""})
        mock_connector.health.assert_not_called()

    def test_update_and_delete_delegate(self, online_service, mock_connector):
        mock_connector.update_user.return_value = REMOTE_RECORD

        online_service.update_user("remote-1", {"name": "Alice Smith"})
        online_service.delete_user("remote-1")

        assert mock_connector.update_user.call_args.args[0] == "remote-1"
        mock_connector.delete_user.assert_called_once_with("remote-1")

    def test_every_operation_probes(self, online_service, mock_connector):
        mock_connector.list_users.return_value = []

        online_service.list_users()
        online_service.list_users()

        assert mock_connector.health.call_count == 2


class TestFallback:
    """Remote unreachable: the whole operation runs locally"""

    def test_failed_probe_uses_local_store(self, online_service, mock_connector):
        mock_connector.health.side_effect = RemoteUnavailableError("connection refused")

        users = online_service.list_users()

        assert len(users) == len(DEFAULT_USERS)
        mock_connector.list_users.assert_not_called()
        assert not online_service.is_online

    def test_remote_dropping_mid_call_reruns_locally(self, online_service, mock_connector, local_db):
        mock_connector.create_user.side_effect = RemoteUnavailableError("read timed out")

        user = online_service.create_user({"userid": "asmith", "name": "Alice", "defaultGroup": "staff"})

        assert user.userid == "ASMITH"
        assert local_db.find_by_userid("ASMITH") is not None

    def test_local_and_remote_records_are_shaped_alike(self, online_service, mock_connector, local_db):
        """Both paths receive the same normalized payload"""
        raw = {"userid": " bwayne", "name": " Bruce ", "defaultGroup": "hero", "owner": "admin01"}
        mock_connector.create_user.return_value = REMOTE_RECORD
        online_service.create_user(raw)
        sent = mock_connector.create_user.call_args.args[0]

        mock_connector.health.side_effect = RemoteUnavailableError("down")
        local = online_service.create_user(raw)

        assert (local.userid, local.name, local.default_group, local.owner, local.status, local.auth_option) == (
            sent.userid, sent.name, sent.default_group, sent.owner, sent.status, sent.auth_option,
        )
