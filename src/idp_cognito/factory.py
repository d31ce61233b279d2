"""Factory for wiring a ready-to-use Cognito adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .adapter import CognitoIdpAdapter
from .admin_service import CognitoAdminService
from .client import CognitoClientFactory
from .user_service import CognitoUserService

if TYPE_CHECKING:
    from aiobotocore.session import AioSession

    from .config import CognitoConfig


def create_cognito_adapter(
    config: CognitoConfig,
    *,
    session: AioSession | None = None,
) -> CognitoIdpAdapter:
    """Build a CognitoIdpAdapter sharing one lazily created client.

    No connection is made until the first operation is awaited.

    Args:
        config: Adapter configuration.
        session: aiobotocore session to create the client from; a new
            one is used when omitted.
    """
    client_factory = CognitoClientFactory(config, session=session)
    return CognitoIdpAdapter(
        user_service=CognitoUserService(client_factory, config),
        admin_service=CognitoAdminService(client_factory, config),
        client_factory=client_factory,
    )


__all__: list[str] = ["create_cognito_adapter"]
