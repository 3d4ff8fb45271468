"""RecordStore: canonical records plus every index over them."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from recordstore.core.fields import field_names, fold_key, read_key
from recordstore.core.types import IndexInfo, StoreInfo
from recordstore.exceptions import (
    ConsistencyError,
    DuplicateIndexError,
    DuplicateKeyError,
    IndexNotFoundError,
    RecordNotFoundError,
    RecordStoreError,
    SchemaError,
)
from recordstore.index.ordered import OrderedIndex

logger = logging.getLogger(__name__)


class RecordStore:
    """In-memory record collection with a unique primary index.

    The store owns the canonical, order-preserving record collection, one
    unique index on the primary key and any number of non-unique secondary
    indices. Every mutation goes through the store, which applies it to the
    canonical collection first and then to each index in registration order.

    Lookups return the stored record objects themselves. Changing a field of
    a returned record in place, instead of passing a replacement to
    :meth:`update`, leaves any index on that field filing the record under its
    old value. The store does not detect this.

    Not safe for concurrent mutation from several threads.
    """

    def __init__(
        self,
        records: Iterable[Any],
        primary_key: str,
        case_insensitive_keys: bool = False,
    ) -> None:
        """Build a store from an initial batch.

        Args:
            records: Non-empty batch of records sharing one schema
            primary_key: Field holding the unique key; must match a field of
                the first record exactly
            case_insensitive_keys: Compare keys ignoring case, for the primary
                index and for secondary indices created without an override

        Raises:
            SchemaError: If the batch is empty, or a record lacks a key
            DuplicateKeyError: If two records share a primary key
        """
        batch = list(records)
        if not batch:
            raise SchemaError(primary_key, reason="cannot be resolved against an empty batch")

        available = field_names(batch[0])
        if primary_key not in available:
            raise SchemaError(primary_key, available)

        self._primary_key = primary_key
        self._case_insensitive_keys = case_insensitive_keys

        groups: dict[str, list[Any]] = {}
        for record in batch:
            groups.setdefault(self._slot(self._read_primary(record)), []).append(record)

        duplicates = list(
            dict.fromkeys(
                read_key(record, primary_key)
                for group in groups.values()
                if len(group) > 1
                for record in group
            )
        )
        if duplicates:
            raise DuplicateKeyError(primary_key, duplicates)

        self._records: dict[str, Any] = {slot: group[0] for slot, group in groups.items()}
        self._primary_index = OrderedIndex.unique(
            self._records.values(), primary_key, case_insensitive=case_insensitive_keys
        )
        self._indices: dict[str, OrderedIndex] = {}

        logger.info(f"Created store on '{primary_key}' with {len(self._records)} records")

    @property
    def primary_key(self) -> str:
        """Get the primary key field name."""
        return self._primary_key

    @property
    def case_insensitive_keys(self) -> bool:
        return self._case_insensitive_keys

    @property
    def primary_index(self) -> OrderedIndex:
        return self._primary_index

    @property
    def records(self) -> list[Any]:
        """Snapshot of the canonical records, in insertion order."""
        return list(self._records.values())

    def _slot(self, key: str) -> str:
        return fold_key(key, self._case_insensitive_keys)

    def _read_primary(self, record: Any) -> str:
        key = read_key(record, self._primary_key)
        if not key:
            raise SchemaError(
                self._primary_key, reason="is empty; every record needs a non-empty primary key"
            )
        return key

    def _check_index_fields(self, record: Any) -> None:
        for index in self._indices.values():
            index.check_field(record)

    # === Record operations ===

    def add(self, record: Any) -> None:
        """Insert a new record.

        Args:
            record: Record whose primary key is not yet stored

        Raises:
            SchemaError: If the record lacks its key or an indexed field
            DuplicateKeyError: If the primary key is already stored
        """
        key = self._read_primary(record)
        self._check_index_fields(record)
        if self._primary_index.lookup(key):
            raise DuplicateKeyError(self._primary_key, [key])

        slot = self._slot(key)
        self._records[slot] = record
        try:
            self._primary_index.add_entry(record)
        except RecordStoreError:
            del self._records[slot]
            raise

        for index in self._indices.values():
            index.add_entry(record)

    def remove(self, record: Any) -> Any:
        """Remove the stored record sharing ``record``'s primary key.

        ``record`` only needs to carry the key field.

        Returns:
            The removed stored record

        Raises:
            SchemaError: If ``record`` lacks the key field
            RecordNotFoundError: If no stored record has that key
            ConsistencyError: If an index has lost track of the record
        """
        key = self._read_primary(record)
        matches = self._primary_index.lookup(key)
        if not matches:
            raise RecordNotFoundError(key)

        stored = matches[0]
        slot = self._slot(key)
        if self._records.get(slot) is not stored:
            message = f"Record '{key}' is indexed but not in the canonical collection"
            logger.error(message)
            raise ConsistencyError(message, {"key": key})
        del self._records[slot]

        self._primary_index.remove_entry(stored)
        for index in self._indices.values():
            index.remove_entry(stored)
        return stored

    def update(self, record: Any) -> bool:
        """Replace the stored record with the same primary key, or insert.

        The replacement keeps the old record's position in the collection.

        Returns:
            True if a stored record was replaced, False if inserted

        Raises:
            SchemaError: If the record lacks its key or an indexed field
            ConsistencyError: If an index has lost track of the old record
        """
        key = self._read_primary(record)
        matches = self._primary_index.lookup(key)
        if not matches:
            self.add(record)
            return False

        self._check_index_fields(record)
        old = matches[0]
        slot = self._slot(key)
        if self._records.get(slot) is not old:
            message = f"Record '{key}' is indexed but not in the canonical collection"
            logger.error(message)
            raise ConsistencyError(message, {"key": key})
        self._records[slot] = record

        self._primary_index.update_entry(old, record)
        for index in self._indices.values():
            index.update_entry(old, record)
        return True

    def lookup(self, key: str) -> list[Any]:
        """Return the record with this primary key, as a zero- or one-item list."""
        return self._primary_index.lookup(key)

    def case_insensitive_lookup(self, key: str) -> list[Any]:
        """Return records whose primary key matches ignoring case."""
        return self._primary_index.case_insensitive_lookup(key)

    # === Index management ===

    def new_index(self, field_name: str, case_insensitive: bool | None = None) -> OrderedIndex:
        """Build and register a secondary index over the current records.

        Args:
            field_name: Field to index; also the name the index is registered
                under (compared case-sensitively)
            case_insensitive: Key comparison; None uses the store default

        Raises:
            DuplicateIndexError: If an index is registered under this name
            SchemaError: If a stored record lacks the field
        """
        if field_name in self._indices:
            raise DuplicateIndexError(field_name)

        if case_insensitive is None:
            case_insensitive = self._case_insensitive_keys
        index = OrderedIndex(self._records.values(), field_name, case_insensitive=case_insensitive)
        self._indices[field_name] = index

        logger.info(f"Registered index on '{field_name}' ({len(index)} keys)")
        return index

    def remove_index(self, field_name: str) -> None:
        """Discard a secondary index.

        Raises:
            IndexNotFoundError: If no index is registered under this name
        """
        if field_name not in self._indices:
            raise IndexNotFoundError(field_name, list(self._indices))
        del self._indices[field_name]
        logger.info(f"Removed index on '{field_name}'")

    def get_index(self, field_name: str) -> OrderedIndex:
        """Get a registered secondary index.

        Raises:
            IndexNotFoundError: If no index is registered under this name
        """
        index = self._indices.get(field_name)
        if index is None:
            raise IndexNotFoundError(field_name, list(self._indices))
        return index

    def get_indices(self) -> list[IndexInfo]:
        """List secondary indices as (position, field name) entries, in registration order."""
        return [
            index.info(position, name=name)
            for position, (name, index) in enumerate(self._indices.items())
        ]

    def describe(self) -> StoreInfo:
        """Summarize the store."""
        return StoreInfo(
            primary_key=self._primary_key,
            case_insensitive_keys=self._case_insensitive_keys,
            record_count=len(self._records),
            indices=self.get_indices(),
        )

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._primary_index.contains_key(key)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._records.values()))

    def __repr__(self) -> str:
        return (
            f"RecordStore({self._primary_key!r}, {len(self)} records, "
            f"indices={list(self._indices)})"
        )
