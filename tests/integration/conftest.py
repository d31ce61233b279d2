"""Integration test configuration with a LocalStack container.

Cognito is a LocalStack Pro service, so the tests need Docker and a
``LOCALSTACK_AUTH_TOKEN``; without them they are skipped.
"""

from __future__ import annotations

import os
import uuid
from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio
from aiobotocore.session import AioSession

from idp_cognito import CognitoConfig, create_cognito_adapter

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

    from idp_cognito import CognitoIdpAdapter

AWS_TEST_CREDENTIALS = {
    "aws_access_key_id": "test",
    "aws_secret_access_key": "test",
}


@pytest.fixture(scope="module")
def localstack_container() -> Generator:
    """Start LocalStack Pro with the cognito-idp service."""
    pytest.importorskip("testcontainers")
    token = os.environ.get("LOCALSTACK_AUTH_TOKEN")
    if not token:
        pytest.skip("LOCALSTACK_AUTH_TOKEN is not set; Cognito needs LocalStack Pro")

    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    localstack = DockerContainer("localstack/localstack-pro:latest")
    localstack.with_exposed_ports(4566)
    localstack.with_env("SERVICES", "cognito-idp")
    localstack.with_env("LOCALSTACK_AUTH_TOKEN", token)
    localstack.start()
    wait_for_logs(localstack, "Ready.", timeout=120)

    yield localstack

    localstack.stop()


@pytest.fixture(scope="module")
def localstack_endpoint(localstack_container) -> str:
    host = localstack_container.get_container_host_ip()
    port = localstack_container.get_exposed_port(4566)
    return f"http://{host}:{port}"


@pytest_asyncio.fixture
async def user_pool(localstack_endpoint: str) -> AsyncGenerator[dict[str, Any], None]:
    """Create a fresh user pool and password-auth app client."""
    session = AioSession()
    async with session.create_client(
        "cognito-idp",
        region_name="us-east-1",
        endpoint_url=localstack_endpoint,
        **AWS_TEST_CREDENTIALS,
    ) as client:
        pool = await client.create_user_pool(
            PoolName=f"test-pool-{uuid.uuid4().hex[:8]}",
            Policies={
                "PasswordPolicy": {
                    "MinimumLength": 8,
                    "RequireUppercase": True,
                    "RequireLowercase": True,
                    "RequireNumbers": True,
                    "RequireSymbols": True,
                }
            },
        )
        pool_id = pool["UserPool"]["Id"]
        app_client = await client.create_user_pool_client(
            UserPoolId=pool_id,
            ClientName="test-client",
            ExplicitAuthFlows=["ALLOW_USER_PASSWORD_AUTH", "ALLOW_REFRESH_TOKEN_AUTH"],
        )

        yield {
            "user_pool_id": pool_id,
            "client_id": app_client["UserPoolClient"]["ClientId"],
        }

        await client.delete_user_pool(UserPoolId=pool_id)


@pytest_asyncio.fixture
async def cognito_adapter(
    localstack_endpoint: str, user_pool: dict[str, Any]
) -> AsyncGenerator[CognitoIdpAdapter, None]:
    config = CognitoConfig(
        user_pool_id=user_pool["user_pool_id"],
        client_id=user_pool["client_id"],
        region="us-east-1",
        endpoint_url=localstack_endpoint,
        **AWS_TEST_CREDENTIALS,
    )
    async with create_cognito_adapter(config) as adapter:
        yield adapter
