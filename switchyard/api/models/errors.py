"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request validation failed (malformed JSON, missing fields, etc.)."""

    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"
    """The specified tenant_id does not exist."""

    REGISTRY_VIOLATION = "REGISTRY_VIOLATION"
    """A config read targeted a path missing from the registry."""

    REMEDIATION_REJECTED = "REMEDIATION_REJECTED"
    """A tier remediation cannot be applied to the requested field."""

    PATH_CONFLICT = "PATH_CONFLICT"
    """A stored non-object value blocks the write."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level detail for validation failures."""

    field: str | None = None
    """The field that caused the error, if applicable."""

    message: str
    """Human-readable error description."""


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    """Machine-readable error code."""

    message: str
    """Human-readable error message."""

    details: list[ErrorDetail] | None = None
    """Additional error details for validation failures."""

    path: str | None = None
    """Offending config path, for registry violations."""

    reason: str | None = None
    """Machine-readable refusal reason, for rejected remediations."""


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "TENANT_NOT_FOUND",
                "message": "Tenant not found: acme"
            }
        }
    """

    error: ErrorBody
