"""Core components for recordstore."""

from recordstore.core.store import RecordStore
from recordstore.core.types import IndexInfo, KeyPolicy, StoreInfo, StoreOptions

__all__ = [
    "RecordStore",
    "KeyPolicy",
    "IndexInfo",
    "StoreInfo",
    "StoreOptions",
]
