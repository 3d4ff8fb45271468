"""Command-style wrappers over named stores.

Each function addresses a store by name in a :class:`StoreRegistry` and
forwards to the matching :class:`RecordStore` operation. Functions taking
records accept either one record or an iterable of records and apply the
operation item by item, in order. A failing item raises immediately; items
before it stay applied.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from recordstore.core.store import RecordStore
from recordstore.core.types import IndexInfo, StoreOptions
from recordstore.registry import StoreRegistry

logger = logging.getLogger(__name__)


def _items(records: Any) -> list[Any]:
    """Split the argument into the records to process."""
    if isinstance(records, (Mapping, BaseModel, str, bytes)):
        return [records]
    if dataclasses.is_dataclass(records) or not isinstance(records, Iterable):
        return [records]
    return list(records)


def new_store(
    registry: StoreRegistry,
    name: str,
    records: Iterable[Any],
    primary_key: str,
    case_insensitive_keys: bool = False,
    indices: Iterable[str] = (),
    replace: bool = False,
) -> RecordStore:
    """Create a store from a batch of records and bind it to ``name``."""
    options = StoreOptions(
        primary_key=primary_key,
        case_insensitive_keys=case_insensitive_keys,
        indices=list(indices),
    )
    return registry.create(name, _items(records), options, replace=replace)


def add_records(registry: StoreRegistry, name: str, records: Any) -> int:
    """Add one or more new records. Returns the number added."""
    store = registry.get(name)
    count = 0
    for record in _items(records):
        store.add(record)
        count += 1
    logger.debug(f"Added {count} records to '{name}'")
    return count


def update_records(registry: StoreRegistry, name: str, records: Any) -> dict[str, int]:
    """Upsert one or more records.

    Returns:
        Counts of replaced (``updated``) and inserted (``added``) records
    """
    store = registry.get(name)
    counts = {"updated": 0, "added": 0}
    for record in _items(records):
        if store.update(record):
            counts["updated"] += 1
        else:
            counts["added"] += 1
    logger.debug(f"Upserted into '{name}': {counts}")
    return counts


def remove_records(registry: StoreRegistry, name: str, records: Any) -> list[Any]:
    """Remove records by primary key. Returns the removed stored records."""
    store = registry.get(name)
    removed = [store.remove(record) for record in _items(records)]
    logger.debug(f"Removed {len(removed)} records from '{name}'")
    return removed


def query(
    registry: StoreRegistry,
    name: str,
    keys: str | Iterable[str],
    index: str | None = None,
    case_insensitive: bool = False,
) -> list[Any]:
    """Look up records by key.

    Args:
        registry: Registry holding the store
        name: Store name
        keys: One key or several; results are concatenated in key order
        index: Secondary index to search; None searches the primary key
        case_insensitive: Match keys ignoring case, whatever the index mode

    Returns:
        Matching stored records
    """
    store = registry.get(name)
    target = store.primary_index if index is None else store.get_index(index)
    search = target.case_insensitive_lookup if case_insensitive else target.lookup

    matches: list[Any] = []
    for key in [keys] if isinstance(keys, str) else keys:
        matches.extend(search(key))
    return matches


def new_index(
    registry: StoreRegistry,
    name: str,
    field_name: str,
    case_insensitive: bool | None = None,
) -> IndexInfo:
    """Register a secondary index on a named store."""
    store = registry.get(name)
    store.new_index(field_name, case_insensitive=case_insensitive)
    return store.get_indices()[-1]


def remove_index(registry: StoreRegistry, name: str, field_name: str) -> None:
    """Discard a secondary index from a named store."""
    registry.get(name).remove_index(field_name)


def list_indices(registry: StoreRegistry, name: str) -> list[IndexInfo]:
    """List a named store's secondary indices in registration order."""
    return registry.get(name).get_indices()
