"""Tenant stores and template catalogs."""

from switchyard.tenants.store import TemplateCatalog, TenantStore
from switchyard.tenants.stores.inmemory import (
    InMemoryTemplateCatalog,
    InMemoryTenantStore,
)

__all__ = [
    "InMemoryTemplateCatalog",
    "InMemoryTenantStore",
    "TemplateCatalog",
    "TenantStore",
]
