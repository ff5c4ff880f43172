"""Wiring engine exceptions."""


class WiringError(Exception):
    """Base exception for the wiring engine."""


class RegistryViolationError(WiringError):
    """A config read targeted a path that is not declared in the registry.

    Raised only when the reader's enforcement mode is ``throw``; the read is
    aborted before any resolution happens.
    """

    def __init__(self, path: str, reader_id: str, enforcement_mode: str) -> None:
        self.path = path
        self.reader_id = reader_id
        self.enforcement_mode = enforcement_mode
        super().__init__(
            f"Unregistered config path: {path} (reader={reader_id}). "
            "Declare it in the wiring registry before reading it."
        )


class TenantNotFoundError(WiringError):
    """No tenant record exists for the requested ID."""

    def __init__(self, tenant_id: str) -> None:
        self.tenant_id = tenant_id
        super().__init__(f"Tenant not found: {tenant_id}")


class DerivationError(WiringError):
    """The source of a derived field could not be loaded."""


class DeclarationError(WiringError):
    """Engine declarations (registry, consumption map, bridges, tiers) are inconsistent."""


class PathConflictError(WiringError):
    """A dotted path cannot be written because an ancestor holds a non-object value."""

    def __init__(self, path: str, ancestor: str) -> None:
        self.path = path
        self.ancestor = ancestor
        super().__init__(f"Cannot write {path}: {ancestor} is present and not an object")


class RemediationError(WiringError):
    """A tier remediation cannot be applied to the tenant record.

    ``reason`` is a stable machine-readable code such as
    ``NO_RECOMMENDED_VALUE`` or ``REQUIRES_USER_INPUT``.
    """

    def __init__(self, field_id: str, reason: str, message: str) -> None:
        self.field_id = field_id
        self.reason = reason
        super().__init__(message)
