"""Path resolution: canonical path to effective value and provenance.

Resolution is a fixed pipeline applied to every path the same way:

1. the canonical storage location, if it holds a non-empty value
2. the path's legacy bridge, if one is declared and it yields a non-empty value
3. the declared default
4. absent

A sub-path (``frontDesk.bookingSlots.0.question``) resolves inside the
stored value of its longest declared parent. Paths with no storage mapping
are never searched for anywhere else.
"""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from switchyard.wiring.catalog import WiringCatalog, parent_paths
from switchyard.wiring.models.bridges import LegacyBridge
from switchyard.wiring.models.enums import Provenance
from switchyard.wiring.paths import MISSING, get_path, is_empty

LegacyCallback = Callable[[LegacyBridge, Any], None]


class Resolution(BaseModel):
    """Effective value of one path with where it came from."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Canonical path that was resolved")
    value: Any = Field(default=None, description="Effective value; None when absent")
    resolved_from: Provenance = Field(..., description="Resolution step that produced the value")
    storage_path: str | None = Field(default=None, description="Canonical storage location")
    legacy_path: str | None = Field(
        default=None, description="Legacy location, when a bridge produced the value"
    )

    @property
    def is_absent(self) -> bool:
        return self.resolved_from == Provenance.ABSENT


class PathResolver:
    """Resolves canonical paths against raw tenant records."""

    def __init__(self, catalog: WiringCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> WiringCatalog:
        return self._catalog

    def storage_path_for(self, path: str) -> str | None:
        """Persisted location of a path, following its longest mapped parent."""
        storage_map = self._catalog.storage_map
        if path in storage_map:
            return storage_map[path]
        for parent in parent_paths(path):
            if parent in storage_map:
                remainder = path[len(parent) + 1 :]
                return f"{storage_map[parent]}.{remainder}"
        return None

    def default_for(self, path: str) -> Any:
        """Declared default of a path, or None if it has none."""
        field = self._catalog.fields_by_id.get(path)
        if field is not None and field.default_value is not None:
            return field.default_value
        entry = self._catalog.entries_by_id.get(path)
        if entry is not None:
            return entry.default_value
        return None

    def resolve(
        self,
        path: str,
        record: dict[str, Any] | None,
        *,
        include_default: bool = True,
        on_legacy: LegacyCallback | None = None,
    ) -> Resolution:
        """Resolve one path.

        Args:
            path: Canonical path
            record: Raw tenant record
            include_default: Fall back to the declared default when storage is empty
            on_legacy: Called with the bridge and value whenever a bridge answers

        Returns:
            The effective value and its provenance
        """
        record = record or {}
        storage_path = self.storage_path_for(path)

        if storage_path is not None:
            value = get_path(record, storage_path)
            if not is_empty(value):
                return Resolution(
                    path=path,
                    value=value,
                    resolved_from=Provenance.TENANT_RECORD,
                    storage_path=storage_path,
                )

        bridge = self._catalog.bridges_by_path.get(path)
        if bridge is not None:
            legacy_value = get_path(record, bridge.legacy_storage_path)
            if legacy_value is not MISSING:
                extracted = bridge.extractor.extract(legacy_value)
                if not is_empty(extracted):
                    if on_legacy is not None:
                        on_legacy(bridge, extracted)
                    return Resolution(
                        path=path,
                        value=extracted,
                        resolved_from=Provenance.LEGACY_BRIDGE,
                        storage_path=storage_path,
                        legacy_path=bridge.legacy_storage_path,
                    )

        if include_default:
            default = self.default_for(path)
            if default is not None:
                return Resolution(
                    path=path,
                    value=default,
                    resolved_from=Provenance.GLOBAL_DEFAULT,
                    storage_path=storage_path,
                )

        return Resolution(path=path, resolved_from=Provenance.ABSENT, storage_path=storage_path)
