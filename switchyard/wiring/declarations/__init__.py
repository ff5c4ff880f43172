"""Static declarations of the wiring engine, versioned alongside code."""

from switchyard.wiring.declarations.bridges import BRIDGES
from switchyard.wiring.declarations.consumption import CONSUMPTION_MAP
from switchyard.wiring.declarations.registry_v2 import REGISTRY, REGISTRY_VERSION
from switchyard.wiring.declarations.tiers import ALL_TIERS

__all__ = ["ALL_TIERS", "BRIDGES", "CONSUMPTION_MAP", "REGISTRY", "REGISTRY_VERSION"]
