"""Cognito administrative operations.

Implements the admin side of the adapter:

- user creation, update and deletion
- password set and reset
- roles, mapped to Cognito groups
- custom OAuth scopes on resource servers
- sessions, mapped to Cognito remembered devices
"""

from __future__ import annotations

import logging
from typing import Any

from .dtos import (
    AssignRolesRequest,
    ChangePasswordRequest,
    CreateRolesRequest,
    CreateRolesResponse,
    CreateScopeRequest,
    CreateScopeResponse,
    CreateUserRequest,
    CreateUserResponse,
    IdpResponse,
    SessionInfo,
    UpdateUserRequest,
    UpdateUserResponse,
)
from .exceptions import (
    RESOURCE_NOT_FOUND,
    IdpOperationError,
    RoleAssignmentError,
    error_code,
    is_error,
    status_for,
)
from .service import CognitoService, attribute_list, attributes_to_dict

logger = logging.getLogger(__name__)


class CognitoAdminService(CognitoService):
    """Administrative operations on a Cognito user pool."""

    # ═══════════════════════════════════════════════════════════════
    # USER LIFECYCLE
    # ═══════════════════════════════════════════════════════════════

    async def create_user(
        self, request: CreateUserRequest
    ) -> IdpResponse[CreateUserResponse]:
        """Create a user without sending an invitation.

        When a password is supplied it is set as permanent right away;
        otherwise the account stays in FORCE_CHANGE_PASSWORD and cannot
        use the password flow.
        """
        logger.info("Creating Cognito user: %s", request.username)
        attributes = attribute_list(
            email=request.email,
            email_verified="true" if request.email is not None else None,
            given_name=request.given_name,
            family_name=request.family_name,
        )
        params: dict[str, Any] = {
            "UserPoolId": self._config.user_pool_id,
            "Username": request.username,
            "UserAttributes": attributes,
            "MessageAction": "SUPPRESS",
        }
        if request.password is not None:
            params["TemporaryPassword"] = request.password

        try:
            reply = await self._call("admin_create_user", **params)
            if request.password is not None:
                await self._call(
                    "admin_set_user_password",
                    UserPoolId=self._config.user_pool_id,
                    Username=request.username,
                    Password=request.password,
                    Permanent=True,
                )
        except Exception:
            logger.error("Failed to create user: %s", request.username, exc_info=True)
            return IdpResponse.internal_error()

        username = reply.get("User", {}).get("Username", request.username)
        logger.info("Successfully created user: %s", request.username)
        return IdpResponse.ok(
            CreateUserResponse(id=username, username=username, email=request.email)
        )

    async def update_user(
        self, request: UpdateUserRequest
    ) -> IdpResponse[UpdateUserResponse]:
        """Update a user's attributes. The password is not touched."""
        logger.info("Updating user: %s", request.user_id)
        attributes = attribute_list(
            email=request.email,
            given_name=request.given_name,
            family_name=request.family_name,
        )

        if attributes:
            try:
                await self._call(
                    "admin_update_user_attributes",
                    UserPoolId=self._config.user_pool_id,
                    Username=request.user_id,
                    UserAttributes=attributes,
                )
            except Exception:
                logger.error("Failed to update user: %s", request.user_id, exc_info=True)
                return IdpResponse.internal_error()
        else:
            logger.debug("No attributes to update for user: %s", request.user_id)

        logger.info("Successfully updated user: %s", request.user_id)
        return IdpResponse.ok(
            UpdateUserResponse(id=request.user_id, username=request.user_id)
        )

    async def delete_user(self, user_id: str) -> None:
        """Delete a user.

        Raises:
            IdpOperationError: If deletion fails.
        """
        logger.info("Deleting user: %s", user_id)
        await self._admin_call(
            "delete_user",
            "admin_delete_user",
            UserPoolId=self._config.user_pool_id,
            Username=user_id,
        )
        logger.info("Successfully deleted user: %s", user_id)

    # ═══════════════════════════════════════════════════════════════
    # PASSWORD MANAGEMENT
    # ═══════════════════════════════════════════════════════════════

    async def change_password(self, request: ChangePasswordRequest) -> None:
        """Set a user's password as permanent.

        Raises:
            IdpOperationError: If the change fails.
        """
        logger.info("Changing password for user: %s", request.user_id)
        await self._admin_call(
            "change_password",
            "admin_set_user_password",
            UserPoolId=self._config.user_pool_id,
            Username=request.user_id,
            Password=request.new_password,
            Permanent=True,
        )
        logger.info("Successfully changed password for user: %s", request.user_id)

    async def reset_password(self, username: str) -> None:
        """Start Cognito's out-of-band password reset for a user.

        Raises:
            IdpOperationError: If the reset fails.
        """
        logger.info("Resetting password for user: %s", username)
        await self._admin_call(
            "reset_password",
            "admin_reset_user_password",
            UserPoolId=self._config.user_pool_id,
            Username=username,
        )
        logger.info("Successfully initiated password reset for user: %s", username)

    # ═══════════════════════════════════════════════════════════════
    # ROLE MANAGEMENT
    # ═══════════════════════════════════════════════════════════════

    async def create_roles(
        self, request: CreateRolesRequest
    ) -> IdpResponse[CreateRolesResponse]:
        """Create one group per role name.

        A name the provider rejects is logged and skipped; the response
        lists created and failed names.
        """
        logger.info("Creating roles: %s", request.role_names)
        created: list[str] = []
        failed: list[str] = []

        for role_name in request.role_names:
            try:
                await self._call(
                    "create_group",
                    GroupName=role_name,
                    UserPoolId=self._config.user_pool_id,
                    Description=f"Role: {role_name}",
                )
            except Exception:
                logger.warning("Failed to create role: %s", role_name, exc_info=True)
                failed.append(role_name)
            else:
                created.append(role_name)

        return IdpResponse.ok(
            CreateRolesResponse(created_role_names=created, failed_role_names=failed)
        )

    async def assign_roles_to_user(self, request: AssignRolesRequest) -> None:
        """Add a user to one group per role name.

        Raises:
            RoleAssignmentError: If any role could not be assigned.
        """
        logger.info("Assigning roles to user: %s", request.user_id)
        await self._apply_roles("assign_roles", "admin_add_user_to_group", request)
        logger.info("Successfully assigned roles to user: %s", request.user_id)

    async def remove_roles_from_user(self, request: AssignRolesRequest) -> None:
        """Remove a user from one group per role name.

        Raises:
            RoleAssignmentError: If any role could not be removed.
        """
        logger.info("Removing roles from user: %s", request.user_id)
        await self._apply_roles(
            "remove_roles", "admin_remove_user_from_group", request
        )
        logger.info("Successfully removed roles from user: %s", request.user_id)

    async def _apply_roles(
        self, operation: str, action: str, request: AssignRolesRequest
    ) -> None:
        """Apply *action* for every role name, then report failures."""
        applied: list[str] = []
        failed: list[str] = []
        errors: list[Exception] = []

        for role_name in request.role_names:
            try:
                await self._call(
                    action,
                    UserPoolId=self._config.user_pool_id,
                    Username=request.user_id,
                    GroupName=role_name,
                )
            except Exception as e:
                logger.error(
                    "%s failed for role %s of user %s",
                    operation,
                    role_name,
                    request.user_id,
                    exc_info=True,
                )
                failed.append(role_name)
                errors.append(e)
            else:
                applied.append(role_name)

        if errors:
            statuses = {status_for(e) for e in errors}
            codes = {error_code(e) for e in errors}
            raise RoleAssignmentError(
                f"{operation} failed for roles {failed} of user {request.user_id}",
                operation=operation,
                failed_roles=failed,
                applied_roles=applied,
                status_code=statuses.pop() if len(statuses) == 1 else 500,
                error_code=codes.pop() if len(codes) == 1 else None,
            ) from errors[-1]

    async def get_roles(self, user_id: str) -> IdpResponse[list[str]]:
        """List the names of the groups a user belongs to.

        A provider failure answers 500, so it cannot be mistaken for a
        user without roles.
        """
        logger.info("Getting roles for user: %s", user_id)
        roles: list[str] = []
        params: dict[str, Any] = {
            "UserPoolId": self._config.user_pool_id,
            "Username": user_id,
        }

        try:
            while True:
                reply = await self._call("admin_list_groups_for_user", **params)
                roles.extend(group["GroupName"] for group in reply.get("Groups", []))
                next_token = reply.get("NextToken")
                if not next_token:
                    break
                params["NextToken"] = next_token
        except Exception:
            logger.error("Failed to get roles of user: %s", user_id, exc_info=True)
            return IdpResponse.internal_error()

        return IdpResponse.ok(roles)

    # ═══════════════════════════════════════════════════════════════
    # SCOPES
    # ═══════════════════════════════════════════════════════════════

    async def create_scope(
        self, request: CreateScopeRequest
    ) -> IdpResponse[CreateScopeResponse]:
        """Add a custom scope to a resource server, creating it if needed.

        Returns:
            200 with the scope; 400 when no resource server is given or
            configured; 500 on provider failure.
        """
        identifier = request.resource_server or self._config.resource_server_id
        if not identifier:
            logger.error("No resource server for scope: %s", request.name)
            return IdpResponse.bad_request()

        logger.info("Creating scope %s on resource server %s", request.name, identifier)
        scope = {
            "ScopeName": request.name,
            "ScopeDescription": request.description or f"Scope: {request.name}",
        }

        try:
            server = await self._describe_resource_server(identifier)
            if server is None:
                await self._call(
                    "create_resource_server",
                    UserPoolId=self._config.user_pool_id,
                    Identifier=identifier,
                    Name=identifier,
                    Scopes=[scope],
                )
            else:
                scopes = list(server.get("Scopes", []))
                if all(s.get("ScopeName") != request.name for s in scopes):
                    await self._call(
                        "update_resource_server",
                        UserPoolId=self._config.user_pool_id,
                        Identifier=identifier,
                        Name=server.get("Name", identifier),
                        Scopes=[*scopes, scope],
                    )
        except Exception:
            logger.error("Failed to create scope: %s", request.name, exc_info=True)
            return IdpResponse.internal_error()

        return IdpResponse.ok(
            CreateScopeResponse(name=request.name, resource_server=identifier)
        )

    async def _describe_resource_server(self, identifier: str) -> dict[str, Any] | None:
        try:
            reply = await self._call(
                "describe_resource_server",
                UserPoolId=self._config.user_pool_id,
                Identifier=identifier,
            )
        except Exception as e:
            if is_error(e, RESOURCE_NOT_FOUND):
                return None
            raise
        return dict(reply.get("ResourceServer", {}))

    # ═══════════════════════════════════════════════════════════════
    # SESSION MANAGEMENT
    # ═══════════════════════════════════════════════════════════════

    async def list_sessions(self, user_id: str) -> IdpResponse[list[SessionInfo]]:
        """List a user's remembered devices as sessions.

        A provider failure answers 500 rather than an empty list.
        """
        logger.info("Listing sessions for user: %s", user_id)
        sessions: list[SessionInfo] = []
        params: dict[str, Any] = {
            "UserPoolId": self._config.user_pool_id,
            "Username": user_id,
        }

        try:
            while True:
                reply = await self._call("admin_list_devices", **params)
                sessions.extend(
                    self._map_device(device, user_id)
                    for device in reply.get("Devices", [])
                )
                token = reply.get("PaginationToken")
                if not token:
                    break
                params["PaginationToken"] = token
        except Exception:
            logger.error("Failed to list sessions of user: %s", user_id, exc_info=True)
            return IdpResponse.internal_error()

        return IdpResponse.ok(sessions)

    async def revoke_session(self, session_id: str, *, user_id: str) -> None:
        """Forget the device backing a session.

        Raises:
            IdpOperationError: If revocation fails.
        """
        logger.info("Revoking session %s of user %s", session_id, user_id)
        await self._admin_call(
            "revoke_session",
            "admin_forget_device",
            UserPoolId=self._config.user_pool_id,
            Username=user_id,
            DeviceKey=session_id,
        )
        logger.info("Successfully revoked session: %s", session_id)

    # ═══════════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════════

    async def _admin_call(self, operation: str, action: str, **params: Any) -> None:
        """Issue a body-less admin call, normalizing failures."""
        try:
            await self._call(action, **params)
        except Exception as e:
            logger.error("%s failed", operation, exc_info=True)
            raise IdpOperationError.from_exception(operation, e) from e

    def _map_device(self, device: dict[str, Any], user_id: str) -> SessionInfo:
        """Map a Cognito DeviceType to SessionInfo."""
        attributes = attributes_to_dict(device.get("DeviceAttributes"))
        return SessionInfo(
            session_id=device.get("DeviceKey", ""),
            user_id=user_id,
            created_at=device.get("DeviceCreateDate"),
            last_access_at=device.get("DeviceLastModifiedDate"),
            device_name=attributes.get("device_name"),
        )


__all__: list[str] = ["CognitoAdminService"]
