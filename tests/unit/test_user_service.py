# =============================================================================
# tests/unit/test_user_service.py
# Unit Tests for UserManagementService
# =============================================================================

from unittest.mock import MagicMock

from racf_core.errors import RemoteRequestError
from racf_core.offline.seed_manager import DEFAULT_USERS


class TestServiceResults:

    def test_list_users_success(self, offline_service):
        from racf_core.services import UserManagementService

        result = UserManagementService(offline_service).list_users()

        assert result.success
        assert len(result.data) == len(DEFAULT_USERS)

    def test_domain_error_becomes_failed_result(self, offline_service):
        from racf_core.services import UserManagementService

        result = UserManagementService(offline_service).create_user(
            {"userid": "jdoe", "name": "Dup", "defaultGroup": "STAFF"}
        )

        assert not result
        assert result.error == "User JDOE already exists"
        assert result.error_code == "USER_002"

    def test_unexpected_error_is_generic(self):
        from racf_core.services import UserManagementService
        from racf_core.errors.handlers import GENERIC_FAILURE_MESSAGE

        data_service = MagicMock()
        data_service.list_users.side_effect = RuntimeError("internal detail")

        result = UserManagementService(data_service).list_users()

        assert result.error == GENERIC_FAILURE_MESSAGE
        assert "internal detail" not in result.error


class TestBulkDelete:

    def test_deletes_every_selected_user(self, offline_service):
        from racf_core.services import UserManagementService

        service = UserManagementService(offline_service)
        ids = [record_id for record_id, _ in DEFAULT_USERS]

        result = service.delete_users(ids + ids[:1])

        assert result.success
        assert result.data == len(ids)
        assert offline_service.list_users() == []

    def test_repeated_bulk_deletes_do_not_pile_up_connections(self, offline_service, local_db):
        from racf_core.services import UserManagementService

        service = UserManagementService(offline_service)
        for round_number in range(6):
            created = [
                offline_service.create_user({"userid": f"U{round_number}X{i}", "name": "Temp", "defaultGroup": "G"})
                for i in range(4)
            ]
            assert service.delete_users([u.id for u in created]).success

        assert local_db.open_connections <= UserManagementService.MAX_WORKERS + 1

    def test_partial_failure_is_reported(self):
        from racf_core.services import UserManagementService

        data_service = MagicMock()

        def delete(record_id):
            if record_id == "b":
                raise RemoteRequestError(500, "Unexpected server error")

        data_service.delete_user.side_effect = delete

        result = UserManagementService(data_service).delete_users(["a", "b", "c"])

        assert not result.success
        assert result.error_code == "BULK_DELETE"
        assert result.error == "1 of 3 user(s) could not be deleted"
        assert sorted(result.metadata["deleted"]) == ["a", "c"]
        assert result.metadata["failed"] == {"b": "Unexpected server error"}

    def test_empty_selection(self):
        from racf_core.services import UserManagementService

        result = UserManagementService(MagicMock()).delete_users([])
        assert result.success
        assert result.data == 0


class TestUsersFrame:

    def test_frame_columns_and_index(self, offline_service):
        from racf_core.services import UserManagementService

        users = offline_service.list_users()
        df = UserManagementService.users_frame(users)

        assert list(df.columns) == ["User ID", "Name", "Default Group", "Owner", "Status"]
        assert list(df.index) == [u.id for u in users]

    def test_empty_frame(self):
        from racf_core.services import UserManagementService

        df = UserManagementService.users_frame([])
        assert df.empty
        assert "User ID" in df.columns
