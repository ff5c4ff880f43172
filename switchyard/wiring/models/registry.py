"""Canonical path registry models.

The registry is plain data: tabs hold sections, sections hold fields, and
each field carries a tagged storage descriptor (``stored`` or ``derived``)
and a list of validator specs drawn from a closed set of predicates.
"""

from collections.abc import Iterator
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from switchyard.wiring.models.enums import StorageKind, ValidatorKind


class ValidatorSpec(BaseModel):
    """A serializable reference to a value predicate."""

    model_config = ConfigDict(frozen=True)

    kind: ValidatorKind = Field(..., description="Predicate identifier")
    arg: int | str | tuple[str, ...] | None = Field(
        default=None, description="Predicate parameter, e.g. a minimum item count"
    )
    message: str = Field(..., description="Human-readable failure message")


class UIDescriptor(BaseModel):
    """Where a field is edited in the administration surface. Never used for logic."""

    model_config = ConfigDict(frozen=True)

    input_id: str | None = Field(default=None, description="Form input identifier")
    path: str = Field(default="", description="Navigation breadcrumb")


class StoredLocation(BaseModel):
    """A concrete persisted location for a field."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[StorageKind.STORED] = StorageKind.STORED
    collection: str = Field(default="companies", description="Owning collection")
    path: str = Field(..., description="Dotted path inside the tenant record")


class DerivedSource(BaseModel):
    """Marks a field whose value is computed from shared content."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[StorageKind.DERIVED] = StorageKind.DERIVED
    source: str = Field(default="GLOBAL_TEMPLATE_DERIVED", description="Derivation family")
    method: str = Field(default="", description="How the value is derived")
    depends_on: tuple[str, ...] = Field(
        default_factory=tuple, description="Canonical paths the derivation reads"
    )
    fix_instructions: dict[str, str] = Field(
        default_factory=dict, description="Remediation text keyed by failure cause"
    )


Storage = Annotated[StoredLocation | DerivedSource, Field(discriminator="kind")]


class FieldNode(BaseModel):
    """A leaf of the registry: one configurable capability."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Dotted canonical path")
    label: str = Field(..., description="Display label")
    ui: UIDescriptor = Field(default_factory=UIDescriptor, description="UI metadata")
    storage: Storage = Field(..., description="Stored location or derived marker")
    scope: Literal["company", "global"] = Field(default="company", description="Data scope")
    required: bool = Field(default=False, description="Must be set for the agent to work")
    critical: bool = Field(default=False, description="Blocks operation when wrong")
    kill_switch: bool = Field(default=False, description="True suppresses a behavior category")
    kill_switch_effect: str | None = Field(
        default=None, description="What the kill switch blocks when engaged"
    )
    validators: tuple[ValidatorSpec, ...] = Field(
        default_factory=tuple, description="Ordered value predicates"
    )
    default_value: Any = Field(
        default=None, description="Value used when storage is empty; None means no default"
    )
    allowed_values: tuple[str, ...] | None = Field(
        default=None, description="Closed set of accepted values, if any"
    )
    notes: str | None = Field(default=None, description="Free-form notes")

    @property
    def is_derived(self) -> bool:
        return self.storage.kind == StorageKind.DERIVED

    @property
    def storage_path(self) -> str | None:
        """Persisted path, or None for derived fields."""
        if isinstance(self.storage, StoredLocation):
            return self.storage.path
        return None

    @property
    def has_default(self) -> bool:
        return self.default_value is not None


class SectionNode(BaseModel):
    """A group of fields within a tab."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    ui_path: str = ""
    critical: bool = False
    fields: tuple[FieldNode, ...] = Field(default_factory=tuple)


class TabNode(BaseModel):
    """A top-level tab of the administration surface."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    scope: Literal["company", "system"] = "company"
    critical: bool = False
    deprecated: bool = False
    sections: tuple[SectionNode, ...] = Field(default_factory=tuple)


class TenantRule(BaseModel):
    """A declared cross-tenant isolation rule."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    severity: str = "CRITICAL"


class Registry(BaseModel):
    """The versioned declaration tree of every configurable capability."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(..., description="Registry schema version")
    tabs: tuple[TabNode, ...] = Field(default_factory=tuple, description="UI tabs")
    tenant_rules: tuple[TenantRule, ...] = Field(
        default_factory=tuple, description="Isolation rules the registry promises"
    )

    def iter_fields(self) -> Iterator[tuple[TabNode, SectionNode, FieldNode]]:
        """Yield every field with its tab and section, in declaration order."""
        for tab in self.tabs:
            for section in tab.sections:
                for field in section.fields:
                    yield tab, section, field

    def fields(self) -> list[FieldNode]:
        return [field for _, _, field in self.iter_fields()]
