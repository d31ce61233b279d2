"""Configuration for the Cognito identity-provider adapter."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import IdpConfigurationError

# ═══════════════════════════════════════════════════════════════
# CONFIGURATION
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class CognitoConfig:
    """Configuration for the Cognito adapter.

    The config is an explicit value: build it once and hand it to
    ``create_cognito_adapter`` (or to the client factory and services).

    Attributes:
        user_pool_id: Cognito user pool ID (e.g. ``us-east-1_XXXXXXXXX``).
        client_id: Cognito app client ID.
        region: AWS region of the user pool.
        client_secret: App client secret; enables SECRET_HASH on auth calls.
        endpoint_url: Endpoint override for non-production endpoints (LocalStack).
        aws_access_key_id: Static credential override.
        aws_secret_access_key: Static credential override.
        aws_session_token: Static credential override.
        connection_timeout: Connect timeout per attempt, in seconds.
        request_timeout: Timeout for a whole provider call, in seconds.
        resource_server_id: Default resource server for custom scopes.
    """

    user_pool_id: str
    client_id: str
    region: str = "us-east-1"
    client_secret: str | None = None
    endpoint_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None
    connection_timeout: float = 30.0
    request_timeout: float = 60.0
    resource_server_id: str | None = None

    def __post_init__(self) -> None:
        """Validate required settings."""
        if not self.region or not self.region.strip():
            raise IdpConfigurationError("AWS region is required")
        if not self.user_pool_id or not self.user_pool_id.strip():
            raise IdpConfigurationError("User Pool ID is required")
        if not self.client_id or not self.client_id.strip():
            raise IdpConfigurationError("Client ID is required")
        if self.connection_timeout <= 0 or self.request_timeout <= 0:
            raise IdpConfigurationError("Timeouts must be positive")
        if bool(self.aws_access_key_id) != bool(self.aws_secret_access_key):
            raise IdpConfigurationError(
                "aws_access_key_id and aws_secret_access_key must be set together"
            )

    @property
    def has_client_secret(self) -> bool:
        """Whether the app client is confidential."""
        return bool(self.client_secret)

    @property
    def credentials(self) -> dict[str, str]:
        """Credential override as aiobotocore ``create_client`` kwargs."""
        creds: dict[str, str] = {}
        if self.aws_access_key_id and self.aws_secret_access_key:
            creds["aws_access_key_id"] = self.aws_access_key_id
            creds["aws_secret_access_key"] = self.aws_secret_access_key
            if self.aws_session_token:
                creds["aws_session_token"] = self.aws_session_token
        return creds

    @classmethod
    def from_env(
        cls,
        prefix: str = "COGNITO_",
        environ: Mapping[str, str] | None = None,
    ) -> CognitoConfig:
        """Build a config from environment variables.

        Variables are the upper-cased field names behind *prefix*, e.g.
        ``COGNITO_USER_POOL_ID`` or ``COGNITO_REQUEST_TIMEOUT``.

        Raises:
            IdpConfigurationError: If a value is missing or malformed.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        for name in cls.__dataclass_fields__:
            raw = env.get(f"{prefix}{name.upper()}")
            if raw is None or raw == "":
                continue
            if name in ("connection_timeout", "request_timeout"):
                try:
                    values[name] = float(raw)
                except ValueError as e:
                    raise IdpConfigurationError(
                        f"{prefix}{name.upper()} must be a number, got {raw!r}"
                    ) from e
            else:
                values[name] = raw

        return cls(
            user_pool_id=values.pop("user_pool_id", ""),
            client_id=values.pop("client_id", ""),
            **values,
        )


__all__: list[str] = ["CognitoConfig"]
