"""API exception hierarchy for consistent error handling.

All API exceptions inherit from SwitchyardAPIError, which provides
status_code and error_code attributes used by the global exception
handler to generate consistent error responses.
"""

from switchyard.api.models.errors import ErrorCode


class SwitchyardAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, reason: str | None = None) -> None:
        self.message = message
        self.reason = reason
        super().__init__(message)


class TenantNotFoundError(SwitchyardAPIError):
    """Raised when tenant_id doesn't exist."""

    status_code = 404
    error_code = ErrorCode.TENANT_NOT_FOUND


class RemediationRejectedError(SwitchyardAPIError):
    """Raised when a requested remediation is refused."""

    status_code = 422
    error_code = ErrorCode.REMEDIATION_REJECTED


class PathConflictError(SwitchyardAPIError):
    """Raised when a stored non-object value blocks a write."""

    status_code = 409
    error_code = ErrorCode.PATH_CONFLICT
