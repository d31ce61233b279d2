"""Identity-provider adapter exceptions.

All adapter errors inherit from IdpError. Expected negative outcomes
(wrong password, unknown user, expired token) are never raised: they are
returned as status-coded responses. These exceptions cover configuration
faults and provider failures of operations that return no body.
"""

from __future__ import annotations

from http import HTTPStatus

from botocore.exceptions import ClientError

# ═══════════════════════════════════════════════════════════════
# BASE ERROR
# ═══════════════════════════════════════════════════════════════


class IdpError(Exception):
    """Root exception for the Cognito identity-provider adapter."""


# ═══════════════════════════════════════════════════════════════
# CONFIGURATION ERRORS
# ═══════════════════════════════════════════════════════════════


class IdpConfigurationError(IdpError):
    """Raised when the adapter is misconfigured.

    Configuration errors are fatal: they are never translated into a
    response and never retried.
    """


class SecretHashError(IdpConfigurationError):
    """Raised when the SECRET_HASH for a confidential client cannot be computed."""


# ═══════════════════════════════════════════════════════════════
# OPERATION ERRORS
# ═══════════════════════════════════════════════════════════════


class IdpOperationError(IdpError):
    """Raised when a provider call of a body-less operation fails.

    Attributes:
        operation: Adapter operation that failed (e.g. ``delete_user``).
        status_code: HTTP-style classification of the failure.
        error_code: Cognito error code, when the provider returned one.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = int(status_code)
        self.error_code = error_code

    @classmethod
    def from_exception(cls, operation: str, exc: Exception) -> IdpOperationError:
        """Build an operation error classified from a provider exception."""
        code = error_code(exc)
        return cls(
            f"{operation} failed: {exc}",
            operation=operation,
            status_code=status_for(exc),
            error_code=code,
        )


class RoleAssignmentError(IdpOperationError):
    """Raised when one or more roles of a batch could not be applied.

    Every role of the batch is attempted before this is raised. The status
    and error code are those shared by every failure; mixed failures give 500
    with no error code.

    Attributes:
        failed_roles: Role names the provider rejected.
        applied_roles: Role names that were applied successfully.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        failed_roles: list[str],
        applied_roles: list[str],
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        error_code: str | None = None,
    ) -> None:
        super().__init__(
            message, operation=operation, status_code=status_code, error_code=error_code
        )
        self.failed_roles = failed_roles
        self.applied_roles = applied_roles


# ═══════════════════════════════════════════════════════════════
# COGNITO ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════

NOT_AUTHORIZED = "NotAuthorizedException"
USER_NOT_FOUND = "UserNotFoundException"
RESOURCE_NOT_FOUND = "ResourceNotFoundException"
CODE_MISMATCH = "CodeMismatchException"
EXPIRED_CODE = "ExpiredCodeException"

_STATUS_BY_CODE: dict[str, HTTPStatus] = {
    NOT_AUTHORIZED: HTTPStatus.UNAUTHORIZED,
    USER_NOT_FOUND: HTTPStatus.NOT_FOUND,
    RESOURCE_NOT_FOUND: HTTPStatus.NOT_FOUND,
}


def error_code(exc: BaseException) -> str | None:
    """Return the Cognito error code carried by a botocore ClientError."""
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code")
        return str(code) if code else None
    return None


def is_error(exc: BaseException, *codes: str) -> bool:
    """Check whether *exc* is a ClientError with one of *codes*."""
    return error_code(exc) in codes


def status_for(exc: BaseException) -> int:
    """Classify a provider exception as an HTTP-style status code."""
    code = error_code(exc)
    if code is None:
        return int(HTTPStatus.INTERNAL_SERVER_ERROR)
    return int(_STATUS_BY_CODE.get(code, HTTPStatus.INTERNAL_SERVER_ERROR))


__all__: list[str] = [
    "IdpError",
    "IdpConfigurationError",
    "SecretHashError",
    "IdpOperationError",
    "RoleAssignmentError",
    "NOT_AUTHORIZED",
    "USER_NOT_FOUND",
    "RESOURCE_NOT_FOUND",
    "CODE_MISMATCH",
    "EXPIRED_CODE",
    "error_code",
    "is_error",
    "status_for",
]
