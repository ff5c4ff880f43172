"""Runtime consumption map models.

A consumption entry documents where runtime code reads a canonical path.
Entries are metadata only; nothing here is executable.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class RuntimeReader(BaseModel):
    """One place in runtime code that consumes a path."""

    model_config = ConfigDict(frozen=True)

    location: str = Field(..., description="Module and function that reads the path")
    description: str = Field(default="", description="What the value is used for")
    critical: bool = Field(default=False, description="Reader cannot work without it")
    condition: str | None = Field(default=None, description="When the read happens")


class ConsumptionEntry(BaseModel):
    """Everything runtime code declares about consuming one canonical path."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Canonical path")
    readers: tuple[RuntimeReader, ...] = Field(
        default_factory=tuple, description="Runtime consumers"
    )
    storage_path: str | None = Field(
        default=None, description="Persisted location for paths without a registry field"
    )
    legacy_storage_path: str | None = Field(
        default=None, description="Where the value lived before migration"
    )
    scope: Literal["company", "global"] = Field(default="company", description="Data scope")
    default_value: Any = Field(default=None, description="Runtime default, if any")


class ConsumptionMap(BaseModel):
    """All consumption entries, in declaration order."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[ConsumptionEntry, ...] = Field(default_factory=tuple)
