"""Core types and options for recordstore.

All output types are JSON-serializable through ``model_dump()``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class KeyPolicy(StrEnum):
    """How many records one index bucket may hold."""

    UNIQUE = "unique"  # Exactly one record per key (primary index)
    MULTI = "multi"  # One or more records per key, insertion order

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid policy values."""
        return [p.value for p in cls]


class StoreOptions(BaseModel):
    """Options for building a store.

    Used by the registry and the loaders; the store itself takes the same
    values as constructor arguments.
    """

    primary_key: str = Field(..., description="Field holding the unique record key")
    case_insensitive_keys: bool = Field(
        default=False, description="Default key comparison for indices without an override"
    )
    indices: list[str] = Field(
        default_factory=list, description="Secondary index fields, in registration order"
    )


class IndexInfo(BaseModel):
    """Information about a registered index (output format)."""

    position: int
    field_name: str
    policy: KeyPolicy = KeyPolicy.MULTI
    case_insensitive: bool = False
    key_count: int = 0
    record_count: int = 0

    model_config = {"use_enum_values": True}


class StoreInfo(BaseModel):
    """Summary of a store (output format)."""

    primary_key: str
    case_insensitive_keys: bool
    record_count: int
    indices: list[IndexInfo] = Field(default_factory=list)
