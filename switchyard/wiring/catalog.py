"""Immutable snapshot of the engine's declarations.

The registry, consumption map, legacy bridges and tiers are cross-indexed
once into a ``WiringCatalog``. The snapshot is never mutated; rebuilding it
means calling ``WiringCatalog.build`` again and passing the new instance to
whoever needs it. ``get_catalog`` returns the process-wide snapshot of the
shipped declarations.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType

from switchyard.observability.logging import get_logger
from switchyard.wiring.declarations import ALL_TIERS, BRIDGES, CONSUMPTION_MAP, REGISTRY
from switchyard.wiring.exceptions import DeclarationError
from switchyard.wiring.models.bridges import BridgeSet, LegacyBridge
from switchyard.wiring.models.consumption import ConsumptionEntry, ConsumptionMap
from switchyard.wiring.models.registry import FieldNode, Registry
from switchyard.wiring.models.tiers import TierDefinition

logger = get_logger(__name__)


def parent_paths(path: str) -> list[str]:
    """Dotted prefixes of a path, longest first, excluding the path itself."""
    parts = path.split(".")
    return [".".join(parts[:i]) for i in range(len(parts) - 1, 0, -1)]


@dataclass(frozen=True)
class WiringCatalog:
    """Cross-indexed, read-only view of every declaration."""

    registry: Registry
    consumption: ConsumptionMap
    bridges: BridgeSet
    tiers: tuple[TierDefinition, ...]
    fields_by_id: Mapping[str, FieldNode]
    entries_by_id: Mapping[str, ConsumptionEntry]
    bridges_by_path: Mapping[str, LegacyBridge]
    storage_map: Mapping[str, str]
    registered_paths: frozenset[str]
    consumed_paths: frozenset[str]
    known_paths: frozenset[str]
    dead_read_paths: tuple[str, ...]
    ui_only_paths: tuple[str, ...]

    @property
    def version(self) -> str:
        return self.registry.version

    @classmethod
    def build(
        cls,
        registry: Registry,
        consumption: ConsumptionMap,
        bridges: BridgeSet,
        tiers: Iterable[TierDefinition] = (),
    ) -> "WiringCatalog":
        """Index and cross-check a set of declarations.

        Raises:
            DeclarationError: On duplicate ids, bridges for undeclared paths,
                or tier requirements naming unknown fields
        """
        fields_by_id: dict[str, FieldNode] = {}
        for field in registry.fields():
            if field.id in fields_by_id:
                raise DeclarationError(f"Duplicate registry field id: {field.id}")
            fields_by_id[field.id] = field

        entries_by_id: dict[str, ConsumptionEntry] = {}
        for entry in consumption.entries:
            if entry.id in entries_by_id:
                raise DeclarationError(f"Duplicate consumption entry: {entry.id}")
            entries_by_id[entry.id] = entry

        storage_map: dict[str, str] = {}
        for entry in consumption.entries:
            if entry.storage_path:
                storage_map[entry.id] = entry.storage_path
        for field in fields_by_id.values():
            if field.storage_path:
                storage_map[field.id] = field.storage_path

        known = frozenset(fields_by_id) | frozenset(entries_by_id)

        bridges_by_path: dict[str, LegacyBridge] = {}
        for bridge in bridges.bridges:
            if bridge.path in bridges_by_path:
                raise DeclarationError(f"Duplicate legacy bridge: {bridge.path}")
            if bridge.path not in known:
                raise DeclarationError(f"Legacy bridge for undeclared path: {bridge.path}")
            bridges_by_path[bridge.path] = bridge

        tiers = tuple(tiers)
        for tier in tiers:
            for requirement in tier.requirements:
                if requirement.field_id not in fields_by_id:
                    raise DeclarationError(
                        f"Tier {tier.id.value} requires unknown field: {requirement.field_id}"
                    )

        dead_reads = tuple(e.id for e in consumption.entries if e.id not in fields_by_id)
        ui_only = tuple(f for f in fields_by_id if f not in entries_by_id)

        catalog = cls(
            registry=registry,
            consumption=consumption,
            bridges=bridges,
            tiers=tiers,
            fields_by_id=MappingProxyType(fields_by_id),
            entries_by_id=MappingProxyType(entries_by_id),
            bridges_by_path=MappingProxyType(bridges_by_path),
            storage_map=MappingProxyType(storage_map),
            registered_paths=frozenset(fields_by_id),
            consumed_paths=frozenset(entries_by_id),
            known_paths=known,
            dead_read_paths=dead_reads,
            ui_only_paths=ui_only,
        )
        logger.debug(
            "wiring_catalog_built",
            version=registry.version,
            fields=len(fields_by_id),
            consumption_entries=len(entries_by_id),
            bridges=len(bridges_by_path),
            dead_reads=len(dead_reads),
        )
        return catalog

    def field(self, field_id: str) -> FieldNode | None:
        return self.fields_by_id.get(field_id)

    def has_runtime_reader(self, path: str) -> bool:
        entry = self.entries_by_id.get(path)
        return entry is not None and len(entry.readers) > 0

    def is_known(self, path: str, extra: Iterable[str] = ()) -> bool:
        """Whether a path, or one of its dotted parents, is declared.

        ``extra`` adds paths known only for this check, such as a tenant's
        allow-list.
        """
        allowed = self.known_paths | frozenset(extra)
        if path in allowed:
            return True
        return any(parent in allowed for parent in parent_paths(path))

    def is_dead_read(self, path: str) -> bool:
        """Consumed by runtime code but missing from the registry."""
        for candidate in [path, *parent_paths(path)]:
            if candidate in self.registered_paths:
                return False
            if candidate in self.consumed_paths:
                return True
        return False


@lru_cache(maxsize=1)
def get_catalog() -> WiringCatalog:
    """The catalog built from the shipped declarations."""
    return WiringCatalog.build(REGISTRY, CONSUMPTION_MAP, BRIDGES, ALL_TIERS)
