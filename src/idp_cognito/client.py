"""Cognito client management."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from aiobotocore.config import AioConfig
from aiobotocore.session import AioSession

from .config import CognitoConfig

logger = logging.getLogger(__name__)

SERVICE_NAME = "cognito-idp"


class CognitoClientFactory:
    """Lazily creates and shares one aiobotocore ``cognito-idp`` client.

    The client is built on the first ``get_client()`` call. Concurrent first
    callers wait on a lock and all receive the same client.
    """

    def __init__(
        self,
        config: CognitoConfig,
        *,
        session: AioSession | None = None,
    ) -> None:
        """Configure the factory; no connection is made here."""
        self._config = config
        self._session = session or AioSession()
        self._lock = asyncio.Lock()
        self._client: Any = None
        self._client_cm: Any = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    async def get_client(self) -> Any:
        """Return the shared Cognito client; create it if needed."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    await self._create_client()
        return self._client

    async def _create_client(self) -> None:
        config = self._config
        logger.info("Initializing AWS Cognito client for region: %s", config.region)

        client_kwargs: dict[str, Any] = {
            "region_name": config.region,
            "config": AioConfig(
                connect_timeout=config.connection_timeout,
                read_timeout=config.request_timeout,
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        }
        if config.endpoint_url:
            logger.info("Using custom endpoint: %s", config.endpoint_url)
            client_kwargs["endpoint_url"] = config.endpoint_url
        if config.credentials:
            logger.info("Using custom credentials")
            client_kwargs.update(config.credentials)

        client_cm = self._session.create_client(SERVICE_NAME, **client_kwargs)
        client = await client_cm.__aenter__()
        self._client_cm = client_cm
        self._client = client

    async def destroy(self) -> None:
        """Close the client if open. Safe to call more than once."""
        async with self._lock:
            if self._client_cm is not None:
                logger.info("Closing AWS Cognito client")
                await self._client_cm.__aexit__(None, None, None)
                self._client_cm = None
                self._client = None


__all__: list[str] = ["CognitoClientFactory", "SERVICE_NAME"]
