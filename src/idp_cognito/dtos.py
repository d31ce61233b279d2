"""Request and response shapes for the identity-provider adapter.

Every shape is transient: built by the caller or by the adapter, passed
across exactly one call boundary and discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from http import HTTPStatus
from typing import Generic, TypeVar

T = TypeVar("T")

# ═══════════════════════════════════════════════════════════════
# STATUS-CODED RESPONSE
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class IdpResponse(Generic[T]):
    """HTTP-style response returned by body-carrying adapter operations.

    Attributes:
        status_code: 200, 400, 401, 404 or 500.
        body: Payload on success; ``None`` for error responses.
    """

    status_code: int
    body: T | None = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def ok(cls, body: T) -> IdpResponse[T]:
        return cls(int(HTTPStatus.OK), body)

    @classmethod
    def status(cls, status_code: int) -> IdpResponse[T]:
        """Body-less response with the given status."""
        return cls(int(status_code))

    @classmethod
    def bad_request(cls) -> IdpResponse[T]:
        return cls.status(HTTPStatus.BAD_REQUEST)

    @classmethod
    def unauthorized(cls) -> IdpResponse[T]:
        return cls.status(HTTPStatus.UNAUTHORIZED)

    @classmethod
    def not_found(cls) -> IdpResponse[T]:
        return cls.status(HTTPStatus.NOT_FOUND)

    @classmethod
    def internal_error(cls) -> IdpResponse[T]:
        return cls.status(HTTPStatus.INTERNAL_SERVER_ERROR)


# ═══════════════════════════════════════════════════════════════
# AUTHENTICATION
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LoginRequest:
    """Username/password credentials.

    Attributes:
        username: Username in the user pool.
        password: User's password.
        scope: Requested scope; echoed back in the token response.
    """

    username: str
    password: str
    scope: str | None = None


@dataclass(frozen=True)
class RefreshRequest:
    """Refresh-token exchange.

    Attributes:
        refresh_token: Refresh token issued at login.
        username: Token owner; required for SECRET_HASH when the app
            client has a secret.
    """

    refresh_token: str
    username: str | None = None


@dataclass(frozen=True)
class LogoutRequest:
    """Logout input.

    Attributes:
        access_token: Access token whose sessions are signed out globally.
        refresh_token: Optional refresh token revoked after sign-out.
    """

    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True)
class TokenResponse:
    """Tokens issued by the provider, forwarded verbatim.

    Attributes:
        access_token: Access token.
        refresh_token: Refresh token (echoed back on refresh).
        id_token: OpenID Connect ID token.
        token_type: Token type (usually "Bearer").
        expires_in: Access token lifetime in seconds.
        scope: Scope requested at login, if any.
    """

    access_token: str
    refresh_token: str | None = None
    id_token: str | None = None
    token_type: str = "Bearer"  # noqa: S105
    expires_in: int = 3600
    scope: str | None = None


@dataclass(frozen=True)
class IntrospectionResponse:
    """Token introspection result. ``active=False`` carries no claims."""

    active: bool
    sub: str | None = None
    username: str | None = None
    email: str | None = None
    scope: str | None = None


@dataclass(frozen=True)
class UserInfoResponse:
    """Flattened user attributes of the token owner."""

    sub: str
    preferred_username: str
    email: str | None = None
    email_verified: bool = False
    given_name: str | None = None
    family_name: str | None = None
    name: str | None = None


# ═══════════════════════════════════════════════════════════════
# USER ADMINISTRATION
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class CreateUserRequest:
    """Data for creating a user.

    Only non-None fields are sent to the provider.

    Attributes:
        username: Unique username.
        email: Email address; marked verified on creation.
        given_name: First name.
        family_name: Last name.
        password: Set as a permanent password right after creation.
    """

    username: str
    email: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    password: str | None = None


@dataclass(frozen=True)
class CreateUserResponse:
    id: str
    username: str
    email: str | None = None


@dataclass(frozen=True)
class UpdateUserRequest:
    """Attribute changes for a user. None values are left untouched."""

    user_id: str
    email: str | None = None
    given_name: str | None = None
    family_name: str | None = None


@dataclass(frozen=True)
class UpdateUserResponse:
    id: str
    username: str


@dataclass(frozen=True)
class ChangePasswordRequest:
    """Administrative password change.

    Attributes:
        user_id: Username of the user.
        new_password: New permanent password.
        old_password: Accepted for interface compatibility; not verified.
    """

    user_id: str
    new_password: str
    old_password: str | None = None


# ═══════════════════════════════════════════════════════════════
# ROLES AND SCOPES
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class CreateRolesRequest:
    role_names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CreateRolesResponse:
    """Outcome of a role batch; failed names were skipped, not fatal."""

    created_role_names: list[str] = field(default_factory=list)
    failed_role_names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AssignRolesRequest:
    user_id: str
    role_names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CreateScopeRequest:
    """Custom OAuth scope on a resource server.

    Attributes:
        name: Scope name (without the resource server prefix).
        description: Scope description.
        resource_server: Resource server identifier; defaults to the
            configured ``resource_server_id``.
    """

    name: str
    description: str | None = None
    resource_server: str | None = None


@dataclass(frozen=True)
class CreateScopeResponse:
    name: str
    resource_server: str


# ═══════════════════════════════════════════════════════════════
# SESSIONS AND MFA
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SessionInfo:
    """A remembered device, used as the provider's session record.

    Attributes:
        session_id: Device key.
        user_id: Owning user.
        created_at: Device creation time.
        last_access_at: Last time the device record changed.
        device_name: Device name attribute, if reported.
    """

    session_id: str
    user_id: str
    created_at: datetime | None = None
    last_access_at: datetime | None = None
    device_name: str | None = None


@dataclass(frozen=True)
class MfaChallengeRequest:
    username: str
    password: str


@dataclass(frozen=True)
class MfaChallengeResponse:
    """A pending MFA challenge.

    Attributes:
        challenge_id: Provider session to answer the challenge with.
        challenge_name: Provider challenge (``SMS_MFA``, ``SOFTWARE_TOKEN_MFA``...).
        delivery_method: ``SMS``, ``TOTP`` or ``EMAIL``.
        destination: Masked delivery destination, when the provider sends one.
    """

    challenge_id: str
    challenge_name: str
    delivery_method: str
    destination: str | None = None


@dataclass(frozen=True)
class MfaVerifyRequest:
    username: str
    challenge_id: str
    code: str
    challenge_name: str = "SOFTWARE_TOKEN_MFA"


__all__: list[str] = [
    "IdpResponse",
    "LoginRequest",
    "RefreshRequest",
    "LogoutRequest",
    "TokenResponse",
    "IntrospectionResponse",
    "UserInfoResponse",
    "CreateUserRequest",
    "CreateUserResponse",
    "UpdateUserRequest",
    "UpdateUserResponse",
    "ChangePasswordRequest",
    "CreateRolesRequest",
    "CreateRolesResponse",
    "AssignRolesRequest",
    "CreateScopeRequest",
    "CreateScopeResponse",
    "SessionInfo",
    "MfaChallengeRequest",
    "MfaChallengeResponse",
    "MfaVerifyRequest",
]
