"""AWS Cognito implementation of IIdpAdapter.

The adapter holds no provider logic of its own: user-facing flows are
delegated to ``CognitoUserService`` and administrative ones to
``CognitoAdminService``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .ports import IIdpAdapter

if TYPE_CHECKING:
    from types import TracebackType

    from .admin_service import CognitoAdminService
    from .client import CognitoClientFactory
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
        IntrospectionResponse,
        LoginRequest,
        LogoutRequest,
        MfaChallengeRequest,
        MfaChallengeResponse,
        MfaVerifyRequest,
        RefreshRequest,
        SessionInfo,
        TokenResponse,
        UpdateUserRequest,
        UpdateUserResponse,
        UserInfoResponse,
    )
    from .user_service import CognitoUserService

logger = logging.getLogger(__name__)


class CognitoIdpAdapter(IIdpAdapter):
    """Identity-provider adapter backed by an AWS Cognito user pool.

    Example:
        ```python
        async with create_cognito_adapter(CognitoConfig.from_env()) as idp:
            response = await idp.login(LoginRequest("alice", "s3cret!"))
            if response.is_success:
                print(response.body.access_token)
        ```
    """

    def __init__(
        self,
        user_service: CognitoUserService,
        admin_service: CognitoAdminService,
        client_factory: CognitoClientFactory | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            user_service: Handles authentication flows.
            admin_service: Handles user, role, scope and session administration.
            client_factory: Closed by ``close()``; optional when the
                caller manages the client itself.
        """
        self._user_service = user_service
        self._admin_service = admin_service
        self._client_factory = client_factory

    # ═══════════════════════════════════════════════════════════════
    # AUTHENTICATION
    # ═══════════════════════════════════════════════════════════════

    async def login(self, request: LoginRequest) -> IdpResponse[TokenResponse]:
        logger.debug("Delegating login to CognitoUserService")
        return await self._user_service.login(request)

    async def refresh(self, request: RefreshRequest) -> IdpResponse[TokenResponse]:
        logger.debug("Delegating token refresh to CognitoUserService")
        return await self._user_service.refresh(request)

    async def logout(self, request: LogoutRequest) -> None:
        logger.debug("Delegating logout to CognitoUserService")
        await self._user_service.logout(request)

    async def introspect(self, access_token: str) -> IdpResponse[IntrospectionResponse]:
        logger.debug("Delegating token introspection to CognitoUserService")
        return await self._user_service.introspect(access_token)

    async def get_user_info(self, access_token: str) -> IdpResponse[UserInfoResponse]:
        logger.debug("Delegating get user info to CognitoUserService")
        return await self._user_service.get_user_info(access_token)

    async def revoke_refresh_token(self, refresh_token: str) -> None:
        logger.debug("Delegating refresh token revocation to CognitoUserService")
        await self._user_service.revoke_refresh_token(refresh_token)

    # ═══════════════════════════════════════════════════════════════
    # MFA
    # ═══════════════════════════════════════════════════════════════

    async def mfa_challenge(
        self, request: MfaChallengeRequest
    ) -> IdpResponse[MfaChallengeResponse]:
        logger.debug("Delegating MFA challenge to CognitoUserService")
        return await self._user_service.mfa_challenge(request)

    async def mfa_verify(self, request: MfaVerifyRequest) -> IdpResponse[TokenResponse]:
        logger.debug("Delegating MFA verification to CognitoUserService")
        return await self._user_service.mfa_verify(request)

    # ═══════════════════════════════════════════════════════════════
    # USER ADMINISTRATION
    # ═══════════════════════════════════════════════════════════════

    async def create_user(
        self, request: CreateUserRequest
    ) -> IdpResponse[CreateUserResponse]:
        logger.debug("Delegating user creation to CognitoAdminService")
        return await self._admin_service.create_user(request)

    async def update_user(
        self, request: UpdateUserRequest
    ) -> IdpResponse[UpdateUserResponse]:
        logger.debug("Delegating user update to CognitoAdminService")
        return await self._admin_service.update_user(request)

    async def delete_user(self, user_id: str) -> None:
        logger.debug("Delegating user deletion to CognitoAdminService")
        await self._admin_service.delete_user(user_id)

    async def change_password(self, request: ChangePasswordRequest) -> None:
        logger.debug("Delegating password change to CognitoAdminService")
        await self._admin_service.change_password(request)

    async def reset_password(self, username: str) -> None:
        logger.debug("Delegating password reset to CognitoAdminService")
        await self._admin_service.reset_password(username)

    # ═══════════════════════════════════════════════════════════════
    # ROLES AND SCOPES
    # ═══════════════════════════════════════════════════════════════

    async def create_roles(
        self, request: CreateRolesRequest
    ) -> IdpResponse[CreateRolesResponse]:
        logger.debug("Delegating role creation to CognitoAdminService")
        return await self._admin_service.create_roles(request)

    async def create_scope(
        self, request: CreateScopeRequest
    ) -> IdpResponse[CreateScopeResponse]:
        logger.debug("Delegating scope creation to CognitoAdminService")
        return await self._admin_service.create_scope(request)

    async def assign_roles_to_user(self, request: AssignRolesRequest) -> None:
        logger.debug("Delegating role assignment to CognitoAdminService")
        await self._admin_service.assign_roles_to_user(request)

    async def remove_roles_from_user(self, request: AssignRolesRequest) -> None:
        logger.debug("Delegating role removal to CognitoAdminService")
        await self._admin_service.remove_roles_from_user(request)

    async def get_roles(self, user_id: str) -> IdpResponse[list[str]]:
        logger.debug("Delegating get roles to CognitoAdminService")
        return await self._admin_service.get_roles(user_id)

    # ═══════════════════════════════════════════════════════════════
    # SESSIONS
    # ═══════════════════════════════════════════════════════════════

    async def list_sessions(self, user_id: str) -> IdpResponse[list[SessionInfo]]:
        logger.debug("Delegating list sessions to CognitoAdminService")
        return await self._admin_service.list_sessions(user_id)

    async def revoke_session(self, session_id: str, *, user_id: str) -> None:
        logger.debug("Delegating session revocation to CognitoAdminService")
        await self._admin_service.revoke_session(session_id, user_id=user_id)

    # ═══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ═══════════════════════════════════════════════════════════════

    async def close(self) -> None:
        """Release the underlying Cognito client."""
        if self._client_factory is not None:
            await self._client_factory.destroy()

    async def __aenter__(self) -> CognitoIdpAdapter:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


__all__: list[str] = ["CognitoIdpAdapter"]
