"""Switchyard - configuration wiring engine for multi-tenant voice agents.

Declares every configurable capability, resolves each tenant's effective
values through a single traced read path, and audits tenant configuration
for health, isolation safety, and readiness tiers.
"""

__version__ = "0.1.0"
