"""SECRET_HASH computation for Cognito app clients with a client secret.

Cognito rejects USER_PASSWORD_AUTH, REFRESH_TOKEN_AUTH and challenge
responses from a confidential client unless the request carries::

    Base64(HMAC_SHA256(key=client_secret, msg=username + client_id))
"""

from __future__ import annotations

import base64
import hashlib
import hmac

from .exceptions import SecretHashError


def calculate_secret_hash(client_id: str, client_secret: str, username: str) -> str:
    """Calculate the Cognito SECRET_HASH.

    Args:
        client_id: Cognito app client ID.
        client_secret: Cognito app client secret.
        username: Username the request is made for.

    Returns:
        Base64-encoded HMAC-SHA256 digest.

    Raises:
        SecretHashError: If the HMAC cannot be keyed or computed.
    """
    try:
        message = (username + client_id).encode("utf-8")
        key = client_secret.encode("utf-8")
        digest = hmac.new(key, message, hashlib.sha256).digest()
    except (TypeError, AttributeError, ValueError) as e:
        raise SecretHashError("Error calculating SECRET_HASH") from e
    return base64.b64encode(digest).decode("ascii")


__all__: list[str] = ["calculate_secret_hash"]
