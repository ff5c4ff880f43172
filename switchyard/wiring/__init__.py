"""Wiring engine: declarations, resolution, tracing and tenant audits.

Import the engine components from their modules, e.g.
``from switchyard.wiring.reader import ConfigReader``. This package only
re-exports the exceptions so that storage backends can depend on it without
loading the engine.
"""

from switchyard.wiring.exceptions import (
    DeclarationError,
    DerivationError,
    PathConflictError,
    RegistryViolationError,
    RemediationError,
    TenantNotFoundError,
    WiringError,
)

__all__ = [
    "DeclarationError",
    "DerivationError",
    "PathConflictError",
    "RegistryViolationError",
    "RemediationError",
    "TenantNotFoundError",
    "WiringError",
]
