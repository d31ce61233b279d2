"""Identity-provider adapter port.

The protocol defines the generic operations a caller can use against any
identity provider. Body-carrying operations return an ``IdpResponse``
and never raise for provider failures; body-less operations return None
or raise ``IdpOperationError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
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


@runtime_checkable
class IIdpAdapter(Protocol):
    """Protocol for identity-provider adapters.

    Implementations: CognitoIdpAdapter.

    All methods are async; no work starts until the coroutine is awaited.
    """

    # ═══════════════════════════════════════════════════════════════
    # AUTHENTICATION
    # ═══════════════════════════════════════════════════════════════

    async def login(self, request: LoginRequest) -> IdpResponse[TokenResponse]:
        """Authenticate with username and password.

        Returns:
            200 with tokens, 401 for bad credentials, 404 for an unknown
            user, 500 otherwise.
        """
        ...

    async def refresh(self, request: RefreshRequest) -> IdpResponse[TokenResponse]:
        """Exchange a refresh token for new tokens.

        Returns:
            200 with tokens (the refresh token echoed back) or 401.
        """
        ...

    async def logout(self, request: LogoutRequest) -> None:
        """Sign the token owner out of every session.

        Raises:
            IdpOperationError: If sign-out fails.
        """
        ...

    async def introspect(self, access_token: str) -> IdpResponse[IntrospectionResponse]:
        """Check whether an access token is active.

        Returns:
            200 with ``active`` True or False, 500 on provider failure.
        """
        ...

    async def get_user_info(self, access_token: str) -> IdpResponse[UserInfoResponse]:
        """Get the token owner's attributes.

        Returns:
            200 with user info, 401 if the token is invalid or expired.
        """
        ...

    async def revoke_refresh_token(self, refresh_token: str) -> None:
        """Revoke a refresh token.

        Raises:
            IdpOperationError: If revocation fails.
        """
        ...

    # ═══════════════════════════════════════════════════════════════
    # MFA
    # ═══════════════════════════════════════════════════════════════

    async def mfa_challenge(
        self, request: MfaChallengeRequest
    ) -> IdpResponse[MfaChallengeResponse]:
        """Start an MFA challenge for a user."""
        ...

    async def mfa_verify(self, request: MfaVerifyRequest) -> IdpResponse[TokenResponse]:
        """Answer an MFA challenge and obtain tokens."""
        ...

    # ═══════════════════════════════════════════════════════════════
    # USER ADMINISTRATION
    # ═══════════════════════════════════════════════════════════════

    async def create_user(
        self, request: CreateUserRequest
    ) -> IdpResponse[CreateUserResponse]:
        """Create a user, setting a permanent password if one is given."""
        ...

    async def update_user(
        self, request: UpdateUserRequest
    ) -> IdpResponse[UpdateUserResponse]:
        """Update a user's attributes."""
        ...

    async def delete_user(self, user_id: str) -> None:
        """Delete a user.

        Raises:
            IdpOperationError: If deletion fails.
        """
        ...

    async def change_password(self, request: ChangePasswordRequest) -> None:
        """Set a user's permanent password.

        Raises:
            IdpOperationError: If the change fails.
        """
        ...

    async def reset_password(self, username: str) -> None:
        """Trigger the provider's password-reset flow.

        Raises:
            IdpOperationError: If the reset fails.
        """
        ...

    # ═══════════════════════════════════════════════════════════════
    # ROLES AND SCOPES
    # ═══════════════════════════════════════════════════════════════

    async def create_roles(
        self, request: CreateRolesRequest
    ) -> IdpResponse[CreateRolesResponse]:
        """Create roles; names that fail are skipped and reported."""
        ...

    async def create_scope(
        self, request: CreateScopeRequest
    ) -> IdpResponse[CreateScopeResponse]:
        """Create a custom OAuth scope."""
        ...

    async def assign_roles_to_user(self, request: AssignRolesRequest) -> None:
        """Assign roles to a user.

        Raises:
            RoleAssignmentError: If any role could not be assigned.
        """
        ...

    async def remove_roles_from_user(self, request: AssignRolesRequest) -> None:
        """Remove roles from a user.

        Raises:
            RoleAssignmentError: If any role could not be removed.
        """
        ...

    async def get_roles(self, user_id: str) -> IdpResponse[list[str]]:
        """List the names of a user's roles."""
        ...

    # ═══════════════════════════════════════════════════════════════
    # SESSIONS
    # ═══════════════════════════════════════════════════════════════

    async def list_sessions(self, user_id: str) -> IdpResponse[list[SessionInfo]]:
        """List a user's sessions."""
        ...

    async def revoke_session(self, session_id: str, *, user_id: str) -> None:
        """Revoke one of a user's sessions.

        Raises:
            IdpOperationError: If revocation fails.
        """
        ...


__all__: list[str] = ["IIdpAdapter"]
