"""Unit tests for CognitoAdminService (mocked Cognito client)."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from idp_cognito.admin_service import CognitoAdminService
from idp_cognito.dtos import (
    AssignRolesRequest,
    ChangePasswordRequest,
    CreateRolesRequest,
    CreateScopeRequest,
    CreateUserRequest,
    UpdateUserRequest,
)
from idp_cognito.exceptions import (
    RESOURCE_NOT_FOUND,
    USER_NOT_FOUND,
    IdpOperationError,
    RoleAssignmentError,
)

POOL = "us-east-1_TestPool"

# ═══════════════════════════════════════════════════════════════
# User lifecycle
# ═══════════════════════════════════════════════════════════════


class TestCreateUser:
    """create_user(CreateUserRequest)."""

    @pytest.mark.asyncio
    async def test_creates_user_and_sets_permanent_password(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        mock_client.admin_create_user.return_value = {"User": {"Username": "testuser"}}
        response = await admin_service.create_user(
            CreateUserRequest(
                username="testuser",
                email="testuser@example.com",
                given_name="Test",
                family_name="User",
                password="TestPass123!",
            )
        )
        assert response.status_code == 200
        assert response.body.id == "testuser"
        assert response.body.email == "testuser@example.com"
        mock_client.admin_create_user.assert_awaited_once_with(
            UserPoolId=POOL,
            Username="testuser",
            UserAttributes=[
                {"Name": "email", "Value": "testuser@example.com"},
                {"Name": "email_verified", "Value": "true"},
                {"Name": "given_name", "Value": "Test"},
                {"Name": "family_name", "Value": "User"},
            ],
            MessageAction="SUPPRESS",
            TemporaryPassword="TestPass123!",
        )
        mock_client.admin_set_user_password.assert_awaited_once_with(
            UserPoolId=POOL,
            Username="testuser",
            Password="TestPass123!",
            Permanent=True,
        )

    @pytest.mark.asyncio
    async def test_without_password_or_attributes(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        response = await admin_service.create_user(CreateUserRequest("bare"))
        assert response.status_code == 200
        assert response.body.username == "bare"
        kwargs = mock_client.admin_create_user.call_args.kwargs
        assert kwargs["UserAttributes"] == []
        assert "TemporaryPassword" not in kwargs
        mock_client.admin_set_user_password.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_failure_is_internal_error(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_create_user.side_effect = client_error("UsernameExistsException")
        response = await admin_service.create_user(CreateUserRequest("dup"))
        assert response.status_code == 500
        assert response.body is None

    @pytest.mark.asyncio
    async def test_password_failure_is_internal_error(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_set_user_password.side_effect = client_error(
            "InvalidPasswordException"
        )
        response = await admin_service.create_user(
            CreateUserRequest("weak", password="123")
        )
        assert response.status_code == 500


class TestUpdateUser:
    """update_user(UpdateUserRequest)."""

    @pytest.mark.asyncio
    async def test_sends_only_given_attributes(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        response = await admin_service.update_user(
            UpdateUserRequest("testuser", given_name="Renamed")
        )
        assert response.status_code == 200
        assert response.body.id == "testuser"
        mock_client.admin_update_user_attributes.assert_awaited_once_with(
            UserPoolId=POOL,
            Username="testuser",
            UserAttributes=[{"Name": "given_name", "Value": "Renamed"}],
        )

    @pytest.mark.asyncio
    async def test_no_changes_skips_provider(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        response = await admin_service.update_user(UpdateUserRequest("testuser"))
        assert response.status_code == 200
        mock_client.admin_update_user_attributes.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_is_internal_error(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_update_user_attributes.side_effect = client_error(
            USER_NOT_FOUND
        )
        response = await admin_service.update_user(
            UpdateUserRequest("ghost", email="ghost@example.com")
        )
        assert response.status_code == 500


class TestDeleteUser:
    """delete_user(user_id)."""

    @pytest.mark.asyncio
    async def test_deletes(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        await admin_service.delete_user("testuser")
        mock_client.admin_delete_user.assert_awaited_once_with(
            UserPoolId=POOL, Username="testuser"
        )

    @pytest.mark.asyncio
    async def test_unknown_user_raises_404(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_delete_user.side_effect = client_error(USER_NOT_FOUND)
        with pytest.raises(IdpOperationError) as exc_info:
            await admin_service.delete_user("ghost")
        assert exc_info.value.operation == "delete_user"
        assert exc_info.value.status_code == 404
        assert exc_info.value.error_code == USER_NOT_FOUND


# ═══════════════════════════════════════════════════════════════
# Passwords
# ═══════════════════════════════════════════════════════════════


class TestPasswords:
    """change_password() and reset_password()."""

    @pytest.mark.asyncio
    async def test_change_password_sets_permanent(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        await admin_service.change_password(
            ChangePasswordRequest("testuser", "NewPass123!", old_password="ignored")
        )
        mock_client.admin_set_user_password.assert_awaited_once_with(
            UserPoolId=POOL,
            Username="testuser",
            Password="NewPass123!",
            Permanent=True,
        )

    @pytest.mark.asyncio
    async def test_change_password_failure_raises(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_set_user_password.side_effect = client_error(
            "InvalidPasswordException"
        )
        with pytest.raises(IdpOperationError) as exc_info:
            await admin_service.change_password(ChangePasswordRequest("testuser", "x"))
        assert exc_info.value.status_code == 500
        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_reset_password(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        await admin_service.reset_password("testuser")
        mock_client.admin_reset_user_password.assert_awaited_once_with(
            UserPoolId=POOL, Username="testuser"
        )

    @pytest.mark.asyncio
    async def test_reset_password_failure_raises(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        mock_client.admin_reset_user_password.side_effect = RuntimeError("timeout")
        with pytest.raises(IdpOperationError) as exc_info:
            await admin_service.reset_password("testuser")
        assert exc_info.value.error_code is None


# ═══════════════════════════════════════════════════════════════
# Roles
# ═══════════════════════════════════════════════════════════════


class TestCreateRoles:
    """create_roles(CreateRolesRequest)."""

    @pytest.mark.asyncio
    async def test_creates_one_group_per_role(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        response = await admin_service.create_roles(
            CreateRolesRequest(["admin", "user"])
        )
        assert response.status_code == 200
        assert response.body.created_role_names == ["admin", "user"]
        assert response.body.failed_role_names == []
        mock_client.create_group.assert_any_await(
            GroupName="admin", UserPoolId=POOL, Description="Role: admin"
        )

    @pytest.mark.asyncio
    async def test_failed_role_is_skipped(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.create_group.side_effect = [
            None,
            client_error("GroupExistsException"),
            None,
        ]
        response = await admin_service.create_roles(
            CreateRolesRequest(["a", "b", "c"])
        )
        assert response.status_code == 200
        assert response.body.created_role_names == ["a", "c"]
        assert response.body.failed_role_names == ["b"]

    @pytest.mark.asyncio
    async def test_empty_request(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        response = await admin_service.create_roles(CreateRolesRequest())
        assert response.body.created_role_names == []
        mock_client.create_group.assert_not_called()


class TestRoleAssignment:
    """assign_roles_to_user() and remove_roles_from_user()."""

    @pytest.mark.asyncio
    async def test_assigns_each_role(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        await admin_service.assign_roles_to_user(
            AssignRolesRequest("testuser", ["admin", "user"])
        )
        assert mock_client.admin_add_user_to_group.await_count == 2

    @pytest.mark.asyncio
    async def test_assign_unknown_user_is_classified(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        failure = client_error(USER_NOT_FOUND)
        mock_client.admin_add_user_to_group.side_effect = failure
        with pytest.raises(RoleAssignmentError) as exc_info:
            await admin_service.assign_roles_to_user(
                AssignRolesRequest("ghost", ["admin"])
            )
        assert exc_info.value.status_code == 404
        assert exc_info.value.error_code == USER_NOT_FOUND
        assert exc_info.value.__cause__ is failure

    @pytest.mark.asyncio
    async def test_mixed_failures_are_internal_error(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        last = client_error("TooManyRequestsException")
        mock_client.admin_add_user_to_group.side_effect = [
            client_error(USER_NOT_FOUND),
            last,
        ]
        with pytest.raises(RoleAssignmentError) as exc_info:
            await admin_service.assign_roles_to_user(
                AssignRolesRequest("testuser", ["a", "b"])
            )
        assert exc_info.value.status_code == 500
        assert exc_info.value.error_code is None
        assert exc_info.value.failed_roles == ["a", "b"]
        assert exc_info.value.__cause__ is last
        mock_client.admin_add_user_to_group.assert_any_await(
            UserPoolId=POOL, Username="testuser", GroupName="user"
        )

    @pytest.mark.asyncio
    async def test_assign_attempts_all_then_raises(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_add_user_to_group.side_effect = [
            client_error(RESOURCE_NOT_FOUND),
            None,
        ]
        with pytest.raises(RoleAssignmentError) as exc_info:
            await admin_service.assign_roles_to_user(
                AssignRolesRequest("testuser", ["missing", "user"])
            )
        assert exc_info.value.failed_roles == ["missing"]
        assert exc_info.value.applied_roles == ["user"]
        assert exc_info.value.operation == "assign_roles"
        assert mock_client.admin_add_user_to_group.await_count == 2

    @pytest.mark.asyncio
    async def test_removes_each_role(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        await admin_service.remove_roles_from_user(
            AssignRolesRequest("testuser", ["admin"])
        )
        mock_client.admin_remove_user_from_group.assert_awaited_once_with(
            UserPoolId=POOL, Username="testuser", GroupName="admin"
        )

    @pytest.mark.asyncio
    async def test_remove_failure_raises(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        mock_client.admin_remove_user_from_group.side_effect = RuntimeError("boom")
        with pytest.raises(RoleAssignmentError) as exc_info:
            await admin_service.remove_roles_from_user(
                AssignRolesRequest("testuser", ["admin"])
            )
        assert exc_info.value.operation == "remove_roles"
        assert exc_info.value.applied_roles == []


class TestGetRoles:
    """get_roles(user_id)."""

    @pytest.mark.asyncio
    async def test_follows_pagination(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        mock_client.admin_list_groups_for_user.side_effect = [
            {"Groups": [{"GroupName": "admin"}], "NextToken": "page-2"},
            {"Groups": [{"GroupName": "user"}]},
        ]
        response = await admin_service.get_roles("testuser")
        assert response.status_code == 200
        assert response.body == ["admin", "user"]
        second_call = mock_client.admin_list_groups_for_user.call_args_list[1]
        assert second_call.kwargs["NextToken"] == "page-2"

    @pytest.mark.asyncio
    async def test_no_groups(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        mock_client.admin_list_groups_for_user.return_value = {"Groups": []}
        response = await admin_service.get_roles("testuser")
        assert response.status_code == 200
        assert response.body == []

    @pytest.mark.asyncio
    async def test_failure_is_internal_error(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_list_groups_for_user.side_effect = client_error(
            USER_NOT_FOUND
        )
        response = await admin_service.get_roles("ghost")
        assert response.status_code == 500
        assert response.body is None


# ═══════════════════════════════════════════════════════════════
# Scopes
# ═══════════════════════════════════════════════════════════════


class TestCreateScope:
    """create_scope(CreateScopeRequest)."""

    @pytest.mark.asyncio
    async def test_without_resource_server_is_bad_request(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        response = await admin_service.create_scope(CreateScopeRequest("orders.read"))
        assert response.status_code == 400
        mock_client.describe_resource_server.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_missing_resource_server(
        self,
        secret_admin_service: CognitoAdminService,
        mock_client: MagicMock,
        client_error,
    ) -> None:
        mock_client.describe_resource_server.side_effect = client_error(
            RESOURCE_NOT_FOUND
        )
        response = await secret_admin_service.create_scope(
            CreateScopeRequest("orders.read")
        )
        assert response.status_code == 200
        assert response.body.resource_server == "https://api.example.com"
        mock_client.create_resource_server.assert_awaited_once_with(
            UserPoolId=POOL,
            Identifier="https://api.example.com",
            Name="https://api.example.com",
            Scopes=[
                {"ScopeName": "orders.read", "ScopeDescription": "Scope: orders.read"}
            ],
        )

    @pytest.mark.asyncio
    async def test_merges_into_existing_resource_server(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        existing = {"ScopeName": "orders.read", "ScopeDescription": "Read"}
        mock_client.describe_resource_server.return_value = {
            "ResourceServer": {"Name": "Orders API", "Scopes": [existing]}
        }
        response = await admin_service.create_scope(
            CreateScopeRequest("orders.write", "Write orders", resource_server="orders")
        )
        assert response.status_code == 200
        mock_client.update_resource_server.assert_awaited_once_with(
            UserPoolId=POOL,
            Identifier="orders",
            Name="Orders API",
            Scopes=[
                existing,
                {"ScopeName": "orders.write", "ScopeDescription": "Write orders"},
            ],
        )

    @pytest.mark.asyncio
    async def test_existing_scope_is_left_alone(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        mock_client.describe_resource_server.return_value = {
            "ResourceServer": {"Name": "Orders API", "Scopes": [{"ScopeName": "read"}]}
        }
        response = await admin_service.create_scope(
            CreateScopeRequest("read", resource_server="orders")
        )
        assert response.status_code == 200
        mock_client.update_resource_server.assert_not_called()

    @pytest.mark.asyncio
    async def test_describe_failure_is_internal_error(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.describe_resource_server.side_effect = client_error(
            "TooManyRequestsException"
        )
        response = await admin_service.create_scope(
            CreateScopeRequest("read", resource_server="orders")
        )
        assert response.status_code == 500
        mock_client.create_resource_server.assert_not_called()


# ═══════════════════════════════════════════════════════════════
# Sessions
# ═══════════════════════════════════════════════════════════════


class TestSessions:
    """list_sessions() and revoke_session()."""

    @pytest.mark.asyncio
    async def test_maps_devices_across_pages(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        modified = datetime(2024, 2, 1, tzinfo=timezone.utc)
        mock_client.admin_list_devices.side_effect = [
            {
                "Devices": [
                    {
                        "DeviceKey": "device-1",
                        "DeviceAttributes": [
                            {"Name": "device_name", "Value": "Laptop"}
                        ],
                        "DeviceCreateDate": created,
                        "DeviceLastModifiedDate": modified,
                    }
                ],
                "PaginationToken": "next",
            },
            {"Devices": [{"DeviceKey": "device-2"}]},
        ]
        response = await admin_service.list_sessions("testuser")
        assert response.status_code == 200
        first, second = response.body
        assert first.session_id == "device-1"
        assert first.user_id == "testuser"
        assert first.device_name == "Laptop"
        assert first.created_at == created
        assert first.last_access_at == modified
        assert second.session_id == "device-2"
        assert second.last_access_at is None
        second_call = mock_client.admin_list_devices.call_args_list[1]
        assert second_call.kwargs["PaginationToken"] == "next"

    @pytest.mark.asyncio
    async def test_list_failure_is_internal_error(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_list_devices.side_effect = client_error(
            "InvalidParameterException"
        )
        response = await admin_service.list_sessions("testuser")
        assert response.status_code == 500
        assert response.body is None

    @pytest.mark.asyncio
    async def test_revoke_forgets_device(
        self, admin_service: CognitoAdminService, mock_client: MagicMock
    ) -> None:
        await admin_service.revoke_session("device-1", user_id="testuser")
        mock_client.admin_forget_device.assert_awaited_once_with(
            UserPoolId=POOL, Username="testuser", DeviceKey="device-1"
        )

    @pytest.mark.asyncio
    async def test_revoke_failure_raises(
        self, admin_service: CognitoAdminService, mock_client: MagicMock, client_error
    ) -> None:
        mock_client.admin_forget_device.side_effect = client_error(RESOURCE_NOT_FOUND)
        with pytest.raises(IdpOperationError) as exc_info:
            await admin_service.revoke_session("gone", user_id="testuser")
        assert exc_info.value.operation == "revoke_session"
        assert exc_info.value.status_code == 404
