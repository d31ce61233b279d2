"""Async AWS Cognito identity-provider adapter.

Exposes Cognito user-pool authentication and administration behind the
provider-neutral ``IIdpAdapter`` port.

Usage:
    ```python
    from idp_cognito import CognitoConfig, LoginRequest, create_cognito_adapter

    config = CognitoConfig(
        user_pool_id="us-east-1_XXXXXXXXX",
        client_id="app-client-id",
        client_secret="app-client-secret",
    )

    async with create_cognito_adapter(config) as idp:
        response = await idp.login(LoginRequest("alice", "s3cret!"))
        if response.status_code == 200:
            tokens = response.body
    ```

Submodules:
    - `user_service`: login, refresh, logout, introspection, MFA
    - `admin_service`: users, passwords, roles, scopes, sessions
    - `observability`: Prometheus metrics and OpenTelemetry spans
"""

from __future__ import annotations

from .adapter import CognitoIdpAdapter
from .admin_service import CognitoAdminService
from .client import CognitoClientFactory
from .config import CognitoConfig
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
from .exceptions import (
    IdpConfigurationError,
    IdpError,
    IdpOperationError,
    RoleAssignmentError,
    SecretHashError,
)
from .factory import create_cognito_adapter
from .ports import IIdpAdapter
from .secret_hash import calculate_secret_hash
from .user_service import CognitoUserService

__version__ = "0.1.0"

__all__: list[str] = [
    # Port and adapter
    "IIdpAdapter",
    "CognitoIdpAdapter",
    "create_cognito_adapter",
    # Configuration and client
    "CognitoConfig",
    "CognitoClientFactory",
    "calculate_secret_hash",
    # Services
    "CognitoUserService",
    "CognitoAdminService",
    # DTOs
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
    # Exceptions
    "IdpError",
    "IdpConfigurationError",
    "SecretHashError",
    "IdpOperationError",
    "RoleAssignmentError",
]
