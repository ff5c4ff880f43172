"""Legacy bridge models.

A bridge maps an old storage shape to the canonical value of a path that is
mid-migration. Extractors are a closed, serializable set.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from switchyard.wiring.paths import MISSING, get_path, is_empty


class IdentityExtractor(BaseModel):
    """The legacy value already has the canonical shape."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["identity"] = "identity"

    def extract(self, legacy_value: Any) -> Any:
        return legacy_value


class SlotAttributeExtractor(BaseModel):
    """Read one attribute of a typed slot inside a legacy slot list.

    The slot matches when its ``slotId``, ``id`` or ``type`` (first one set)
    equals ``slot_type``. With ``not_equal_to`` set, the result is the boolean
    ``attribute != not_equal_to`` instead of the attribute itself.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["slot_attribute"] = "slot_attribute"
    slot_type: str = Field(..., description="Slot identifier to match")
    attribute: str = Field(..., description="Attribute to read from the slot")
    not_equal_to: str | None = Field(
        default=None, description="Compare instead of returning the attribute"
    )

    def extract(self, legacy_value: Any) -> Any:
        if not isinstance(legacy_value, list):
            return MISSING
        slot = next(
            (
                s
                for s in legacy_value
                if isinstance(s, dict)
                and (s.get("slotId") or s.get("id") or s.get("type")) == self.slot_type
            ),
            None,
        )
        if slot is None:
            return MISSING
        value = get_path(slot, self.attribute)
        if self.not_equal_to is None:
            return value
        if is_empty(value):
            return MISSING
        return value != self.not_equal_to


LegacyExtractor = Annotated[
    IdentityExtractor | SlotAttributeExtractor, Field(discriminator="kind")
]


class LegacyBridge(BaseModel):
    """Fallback resolution rule for one canonical path."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Canonical path this bridge serves")
    legacy_storage_path: str = Field(..., description="Where the legacy value is stored")
    extractor: LegacyExtractor = Field(
        default_factory=IdentityExtractor, description="Maps legacy shape to canonical shape"
    )
    description: str = Field(default="", description="Legacy location in readable form")
    migration_note: str = Field(default="", description="How to migrate off the legacy path")


class BridgeSet(BaseModel):
    """All declared legacy bridges."""

    model_config = ConfigDict(frozen=True)

    bridges: tuple[LegacyBridge, ...] = Field(default_factory=tuple)
