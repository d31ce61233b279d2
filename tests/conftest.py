"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError

from idp_cognito.admin_service import CognitoAdminService
from idp_cognito.client import CognitoClientFactory
from idp_cognito.config import CognitoConfig
from idp_cognito.user_service import CognitoUserService

# Every Cognito action the services call.
COGNITO_ACTIONS = (
    "initiate_auth",
    "respond_to_auth_challenge",
    "global_sign_out",
    "revoke_token",
    "get_user",
    "admin_create_user",
    "admin_set_user_password",
    "admin_update_user_attributes",
    "admin_delete_user",
    "admin_reset_user_password",
    "create_group",
    "admin_add_user_to_group",
    "admin_remove_user_from_group",
    "admin_list_groups_for_user",
    "describe_resource_server",
    "create_resource_server",
    "update_resource_server",
    "admin_list_devices",
    "admin_forget_device",
)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests that require external services",
    )


@pytest.fixture
def config() -> CognitoConfig:
    """Config for a public app client (no secret)."""
    return CognitoConfig(
        user_pool_id="us-east-1_TestPool",
        client_id="client-id",
        region="us-east-1",
    )


@pytest.fixture
def secret_config() -> CognitoConfig:
    """Config for a confidential app client."""
    return CognitoConfig(
        user_pool_id="us-east-1_TestPool",
        client_id="client-id",
        client_secret="client-secret",
        region="us-east-1",
        resource_server_id="https://api.example.com",
    )


@pytest.fixture
def mock_client() -> MagicMock:
    """Cognito client whose actions all succeed with an empty reply."""
    client = MagicMock()
    for action in COGNITO_ACTIONS:
        setattr(client, action, AsyncMock(return_value={}))
    return client


@pytest.fixture
def mock_session(mock_client: MagicMock) -> MagicMock:
    session = MagicMock()
    mock_cm = MagicMock()
    mock_cm.__aenter__ = AsyncMock(return_value=mock_client)
    mock_cm.__aexit__ = AsyncMock(return_value=None)
    session.create_client = MagicMock(return_value=mock_cm)
    return session


@pytest.fixture
def client_factory(
    config: CognitoConfig, mock_session: MagicMock
) -> CognitoClientFactory:
    return CognitoClientFactory(config, session=mock_session)


@pytest.fixture
def user_service(
    client_factory: CognitoClientFactory, config: CognitoConfig
) -> CognitoUserService:
    return CognitoUserService(client_factory, config)


@pytest.fixture
def secret_user_service(
    secret_config: CognitoConfig, mock_session: MagicMock
) -> CognitoUserService:
    factory = CognitoClientFactory(secret_config, session=mock_session)
    return CognitoUserService(factory, secret_config)


@pytest.fixture
def admin_service(
    client_factory: CognitoClientFactory, config: CognitoConfig
) -> CognitoAdminService:
    return CognitoAdminService(client_factory, config)


@pytest.fixture
def secret_admin_service(
    secret_config: CognitoConfig, mock_session: MagicMock
) -> CognitoAdminService:
    factory = CognitoClientFactory(secret_config, session=mock_session)
    return CognitoAdminService(factory, secret_config)


@pytest.fixture
def client_error() -> Callable[..., ClientError]:
    """Build a botocore ClientError carrying a Cognito error code."""

    def _make(code: str, operation: str = "Operation", message: str = "") -> ClientError:
        return ClientError(
            {"Error": {"Code": code, "Message": message or code}}, operation
        )

    return _make
