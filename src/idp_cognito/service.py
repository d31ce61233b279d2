"""Shared plumbing for the Cognito user and admin services."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .client import CognitoClientFactory
from .config import CognitoConfig
from .dtos import TokenResponse
from .observability import IdpMetrics, IdpTracing
from .secret_hash import calculate_secret_hash

logger = logging.getLogger(__name__)


class CognitoService:
    """Base class owning the client factory and configuration.

    Every provider call goes through ``_call`` so that each one is bounded
    by the configured request timeout, traced and measured. Calls are never
    retried.
    """

    def __init__(self, client_factory: CognitoClientFactory, config: CognitoConfig) -> None:
        self._client_factory = client_factory
        self._config = config

    @property
    def config(self) -> CognitoConfig:
        return self._config

    async def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        """Issue one Cognito action and return its reply.

        Args:
            operation: aiobotocore method name, e.g. ``initiate_auth``.
            **params: Request parameters in Cognito's PascalCase.
        """
        client = await self._client_factory.get_client()
        method = getattr(client, operation)
        span_attributes = {"idp.user_pool_id": self._config.user_pool_id}
        with (
            IdpTracing.span(operation, attributes=span_attributes),
            IdpMetrics.operation(operation),
        ):
            reply = await asyncio.wait_for(
                method(**params), timeout=self._config.request_timeout
            )
        return dict(reply or {})

    def _secret_hash_parameters(self, username: str | None) -> dict[str, str]:
        """SECRET_HASH auth parameter when the app client has a secret."""
        if not self._config.has_client_secret or not username:
            return {}
        return {
            "SECRET_HASH": calculate_secret_hash(
                self._config.client_id, self._config.client_secret, username
            )
        }


def token_response(
    result: dict[str, Any],
    *,
    refresh_token: str | None = None,
    scope: str | None = None,
) -> TokenResponse:
    """Map a Cognito AuthenticationResult to a TokenResponse.

    Args:
        result: The ``AuthenticationResult`` of an auth reply.
        refresh_token: Used when the reply carries no refresh token.
        scope: Scope echoed back to the caller.
    """
    return TokenResponse(
        access_token=result["AccessToken"],
        refresh_token=result.get("RefreshToken") or refresh_token,
        id_token=result.get("IdToken"),
        token_type=result.get("TokenType", "Bearer"),
        expires_in=int(result.get("ExpiresIn", 3600)),
        scope=scope,
    )


def attributes_to_dict(attributes: list[dict[str, str]] | None) -> dict[str, str]:
    """Flatten a Cognito ``[{"Name": ..., "Value": ...}]`` list."""
    return {attr["Name"]: attr.get("Value", "") for attr in attributes or []}


def attribute_list(**values: str | None) -> list[dict[str, str]]:
    """Build a Cognito attribute list, omitting None values."""
    return [
        {"Name": name, "Value": value}
        for name, value in values.items()
        if value is not None
    ]


__all__: list[str] = [
    "CognitoService",
    "token_response",
    "attributes_to_dict",
    "attribute_list",
]
