"""Cognito user-facing operations.

Implements the authentication side of the adapter:

- login (InitiateAuth, USER_PASSWORD_AUTH)
- token refresh (InitiateAuth, REFRESH_TOKEN_AUTH)
- logout (GlobalSignOut) and refresh-token revocation (RevokeToken)
- token introspection and user info (GetUser)
- MFA challenge and verification (RespondToAuthChallenge)
"""

from __future__ import annotations

import logging

from .dtos import (
    IdpResponse,
    IntrospectionResponse,
    LoginRequest,
    LogoutRequest,
    MfaChallengeRequest,
    MfaChallengeResponse,
    MfaVerifyRequest,
    RefreshRequest,
    TokenResponse,
    UserInfoResponse,
)
from .exceptions import (
    CODE_MISMATCH,
    EXPIRED_CODE,
    NOT_AUTHORIZED,
    USER_NOT_FOUND,
    IdpOperationError,
    is_error,
)
from .observability import record_login
from .service import CognitoService, attributes_to_dict, token_response

logger = logging.getLogger(__name__)

INTROSPECTION_SCOPE = "openid profile email"

# Cognito MFA challenge -> (delivery method, answer parameter)
MFA_CHALLENGES: dict[str, tuple[str, str]] = {
    "SMS_MFA": ("SMS", "SMS_MFA_CODE"),
    "SOFTWARE_TOKEN_MFA": ("TOTP", "SOFTWARE_TOKEN_MFA_CODE"),
    "EMAIL_OTP": ("EMAIL", "EMAIL_OTP_CODE"),
}


class CognitoUserService(CognitoService):
    """Authentication flows against a Cognito user pool."""

    # ═══════════════════════════════════════════════════════════════
    # LOGIN / REFRESH
    # ═══════════════════════════════════════════════════════════════

    async def login(self, request: LoginRequest) -> IdpResponse[TokenResponse]:
        """Authenticate with username and password.

        Cognito outcomes are mapped as follows: no authentication result
        and NotAuthorizedException give 401, UserNotFoundException gives
        404, anything else 500.

        Raises:
            SecretHashError: If SECRET_HASH cannot be computed.
        """
        logger.debug("Authenticating Cognito user: %s", request.username)
        response = await self._login(request)
        record_login(response.status_code)
        return response

    async def _login(self, request: LoginRequest) -> IdpResponse[TokenResponse]:
        auth_params = {
            "USERNAME": request.username,
            "PASSWORD": request.password,
            **self._secret_hash_parameters(request.username),
        }

        try:
            reply = await self._call(
                "initiate_auth",
                AuthFlow="USER_PASSWORD_AUTH",
                ClientId=self._config.client_id,
                AuthParameters=auth_params,
            )
        except Exception as e:
            logger.error(
                "Cognito login failed for user: %s", request.username, exc_info=True
            )
            if is_error(e, NOT_AUTHORIZED):
                return IdpResponse.unauthorized()
            if is_error(e, USER_NOT_FOUND):
                return IdpResponse.not_found()
            return IdpResponse.internal_error()

        result = reply.get("AuthenticationResult")
        if not result:
            logger.error(
                "Authentication failed: no authentication result returned "
                "(challenge: %s)",
                reply.get("ChallengeName"),
            )
            return IdpResponse.unauthorized()

        logger.info("Successfully authenticated user: %s", request.username)
        return IdpResponse.ok(token_response(result, scope=request.scope))

    async def refresh(self, request: RefreshRequest) -> IdpResponse[TokenResponse]:
        """Exchange a refresh token for new access and ID tokens.

        Cognito does not rotate refresh tokens, so the request's token is
        returned with the new tokens. Every failure gives 401.
        """
        logger.debug("Refreshing Cognito token")
        auth_params = {
            "REFRESH_TOKEN": request.refresh_token,
            **self._secret_hash_parameters(request.username),
        }

        try:
            reply = await self._call(
                "initiate_auth",
                AuthFlow="REFRESH_TOKEN_AUTH",
                ClientId=self._config.client_id,
                AuthParameters=auth_params,
            )
        except Exception:
            logger.error("Token refresh failed", exc_info=True)
            return IdpResponse.unauthorized()

        result = reply.get("AuthenticationResult")
        if not result:
            logger.error("Token refresh failed: no authentication result returned")
            return IdpResponse.unauthorized()

        logger.debug("Successfully refreshed token")
        return IdpResponse.ok(
            token_response(result, refresh_token=request.refresh_token)
        )

    # ═══════════════════════════════════════════════════════════════
    # LOGOUT / REVOCATION
    # ═══════════════════════════════════════════════════════════════

    async def logout(self, request: LogoutRequest) -> None:
        """Sign the token owner out globally, then revoke the refresh token.

        Raises:
            IdpOperationError: If sign-out or revocation fails.
        """
        logger.info("Logging out user from Cognito")
        try:
            await self._call("global_sign_out", AccessToken=request.access_token)
        except Exception as e:
            logger.error("Logout failed", exc_info=True)
            raise IdpOperationError.from_exception("logout", e) from e

        if request.refresh_token:
            await self.revoke_refresh_token(request.refresh_token)

        logger.info("Successfully logged out user")

    async def revoke_refresh_token(self, refresh_token: str) -> None:
        """Revoke a refresh token and the access tokens issued from it.

        Raises:
            IdpOperationError: If revocation fails.
        """
        logger.info("Revoking Cognito refresh token")
        params = {"Token": refresh_token, "ClientId": self._config.client_id}
        if self._config.has_client_secret:
            params["ClientSecret"] = self._config.client_secret

        try:
            await self._call("revoke_token", **params)
        except Exception as e:
            logger.error("Failed to revoke refresh token", exc_info=True)
            raise IdpOperationError.from_exception("revoke_refresh_token", e) from e

        logger.info("Successfully revoked refresh token")

    # ═══════════════════════════════════════════════════════════════
    # INTROSPECTION / USER INFO
    # ═══════════════════════════════════════════════════════════════

    async def introspect(self, access_token: str) -> IdpResponse[IntrospectionResponse]:
        """Report whether an access token is active.

        An unauthorized or expired token is a regular outcome: 200 with
        ``active=False``. Other provider failures give 500.
        """
        logger.debug("Introspecting Cognito token")
        try:
            reply = await self._call("get_user", AccessToken=access_token)
        except Exception as e:
            if is_error(e, NOT_AUTHORIZED):
                logger.debug("Token is not active or expired")
                return IdpResponse.ok(IntrospectionResponse(active=False))
            logger.error("Token introspection failed", exc_info=True)
            return IdpResponse.internal_error()

        attributes = attributes_to_dict(reply.get("UserAttributes"))
        username = reply.get("Username")
        return IdpResponse.ok(
            IntrospectionResponse(
                active=True,
                sub=attributes.get("sub", username),
                username=username,
                email=attributes.get("email"),
                scope=INTROSPECTION_SCOPE,
            )
        )

    async def get_user_info(self, access_token: str) -> IdpResponse[UserInfoResponse]:
        """Return the token owner's attributes; 401 on any failure."""
        logger.debug("Fetching Cognito user info")
        try:
            reply = await self._call("get_user", AccessToken=access_token)
        except Exception:
            logger.error("Failed to fetch user info", exc_info=True)
            return IdpResponse.unauthorized()

        username = reply.get("Username", "")
        attributes = attributes_to_dict(reply.get("UserAttributes"))
        user_info = UserInfoResponse(
            sub=attributes.get("sub", username),
            preferred_username=username,
            email=attributes.get("email"),
            email_verified=attributes.get("email_verified", "false").lower() == "true",
            given_name=attributes.get("given_name"),
            family_name=attributes.get("family_name"),
            name=attributes.get("name"),
        )

        logger.debug("Successfully fetched user info for: %s", username)
        return IdpResponse.ok(user_info)

    # ═══════════════════════════════════════════════════════════════
    # MFA
    # ═══════════════════════════════════════════════════════════════

    async def mfa_challenge(
        self, request: MfaChallengeRequest
    ) -> IdpResponse[MfaChallengeResponse]:
        """Start password authentication and return the MFA challenge.

        Returns:
            200 with the challenge; 400 if Cognito does not answer with an
            MFA challenge; 401 / 404 / 500 as for login.
        """
        logger.info("Initiating MFA challenge for user: %s", request.username)
        auth_params = {
            "USERNAME": request.username,
            "PASSWORD": request.password,
            **self._secret_hash_parameters(request.username),
        }

        try:
            reply = await self._call(
                "initiate_auth",
                AuthFlow="USER_PASSWORD_AUTH",
                ClientId=self._config.client_id,
                AuthParameters=auth_params,
            )
        except Exception as e:
            logger.error(
                "MFA challenge failed for user: %s", request.username, exc_info=True
            )
            if is_error(e, NOT_AUTHORIZED):
                return IdpResponse.unauthorized()
            if is_error(e, USER_NOT_FOUND):
                return IdpResponse.not_found()
            return IdpResponse.internal_error()

        challenge_name = reply.get("ChallengeName")
        if challenge_name not in MFA_CHALLENGES or not reply.get("Session"):
            logger.warning(
                "No MFA challenge issued for user: %s (challenge: %s)",
                request.username,
                challenge_name,
            )
            return IdpResponse.bad_request()

        delivery_method, _ = MFA_CHALLENGES[challenge_name]
        parameters = reply.get("ChallengeParameters") or {}
        return IdpResponse.ok(
            MfaChallengeResponse(
                challenge_id=reply["Session"],
                challenge_name=challenge_name,
                delivery_method=delivery_method,
                destination=parameters.get("CODE_DELIVERY_DESTINATION"),
            )
        )

    async def mfa_verify(self, request: MfaVerifyRequest) -> IdpResponse[TokenResponse]:
        """Answer an MFA challenge with the user's code.

        Returns:
            200 with tokens; 400 for an unknown challenge name; 401 for a
            wrong, expired or rejected code; 500 otherwise.
        """
        logger.info("Verifying MFA code for user: %s", request.username)
        if request.challenge_name not in MFA_CHALLENGES:
            return IdpResponse.bad_request()

        _, code_parameter = MFA_CHALLENGES[request.challenge_name]
        responses = {
            "USERNAME": request.username,
            code_parameter: request.code,
            **self._secret_hash_parameters(request.username),
        }

        try:
            reply = await self._call(
                "respond_to_auth_challenge",
                ClientId=self._config.client_id,
                ChallengeName=request.challenge_name,
                Session=request.challenge_id,
                ChallengeResponses=responses,
            )
        except Exception as e:
            logger.error("MFA verification failed", exc_info=True)
            if is_error(e, CODE_MISMATCH, EXPIRED_CODE, NOT_AUTHORIZED):
                return IdpResponse.unauthorized()
            return IdpResponse.internal_error()

        result = reply.get("AuthenticationResult")
        if not result:
            logger.error("MFA verification returned no authentication result")
            return IdpResponse.unauthorized()

        logger.info("MFA verification completed for user: %s", request.username)
        return IdpResponse.ok(token_response(result))


__all__: list[str] = ["CognitoUserService", "MFA_CHALLENGES", "INTROSPECTION_SCOPE"]
