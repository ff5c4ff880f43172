"""Test factories for creating test data."""

from tests.factories.tenants import (
    TEMPLATE_ID,
    TENANT_ID,
    bare_tenant,
    legacy_consent_tenant,
    tenant_with_kill_switch,
    tenant_without_template_refs,
    wired_tenant,
)

__all__ = [
    "TEMPLATE_ID",
    "TENANT_ID",
    "bare_tenant",
    "legacy_consent_tenant",
    "tenant_with_kill_switch",
    "tenant_without_template_refs",
    "wired_tenant",
]
