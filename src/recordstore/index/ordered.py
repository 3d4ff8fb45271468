"""Sorted key index over one record field.

One index class covers both roles. ``KeyPolicy.MULTI`` buckets hold every
record sharing a key, in insertion order (secondary indices).
``KeyPolicy.UNIQUE`` buckets hold exactly one record (the primary index).

Buckets hold references to the caller's record objects, never copies.
Membership is decided by identity, so two equal-valued records are still two
entries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from sortedcontainers import SortedDict

from recordstore.core.fields import field_names, fold_key, has_field, read_key, resolve_field_name
from recordstore.core.types import IndexInfo, KeyPolicy
from recordstore.exceptions import ConsistencyError, DuplicateKeyError, SchemaError

logger = logging.getLogger(__name__)


def _position(bucket: list[Any], record: Any) -> int | None:
    for i, candidate in enumerate(bucket):
        if candidate is record:
            return i
    return None


class OrderedIndex:
    """Sorted mapping from a field's key value to the records holding it.

    Keys are compared ordinally, or by ``str.casefold()`` when the index is
    case-insensitive. The comparison mode is fixed at construction.
    """

    def __init__(
        self,
        records: Iterable[Any],
        field_name: str,
        case_insensitive: bool = False,
        unique: bool = False,
    ) -> None:
        """Build an index from a batch of records.

        Args:
            records: Records to index, in order
            field_name: Field to index; matched case-insensitively against the
                first record filed to recover its original casing
            case_insensitive: Fold keys before comparing
            unique: Enforce one record per key

        Raises:
            SchemaError: If the field is missing from a record
            DuplicateKeyError: If ``unique`` and two records share a key
        """
        records = list(records)

        # Resolved against the first record filed; an empty batch defers it
        self._field_name = field_name
        self._resolved = False
        self._case_insensitive = case_insensitive
        self._policy = KeyPolicy.UNIQUE if unique else KeyPolicy.MULTI
        self._buckets: SortedDict = SortedDict()

        for record in records:
            self.add_entry(record)

        logger.debug(
            f"Built {self._policy} index on '{self._field_name}': "
            f"{len(self._buckets)} keys, {len(records)} records"
        )

    @classmethod
    def unique(
        cls, records: Iterable[Any], field_name: str, case_insensitive: bool = False
    ) -> OrderedIndex:
        """Build an index that allows one record per key."""
        return cls(records, field_name, case_insensitive=case_insensitive, unique=True)

    @property
    def field_name(self) -> str:
        """Get the indexed field name, in the records' casing."""
        return self._field_name

    @property
    def case_insensitive(self) -> bool:
        return self._case_insensitive

    @property
    def policy(self) -> KeyPolicy:
        return self._policy

    @property
    def is_unique(self) -> bool:
        return self._policy is KeyPolicy.UNIQUE

    @property
    def record_count(self) -> int:
        """Total number of record references across all buckets."""
        return sum(len(bucket) for bucket in self._buckets.values())

    def key_of(self, record: Any) -> str:
        """Return the comparison key this index files a record under."""
        return fold_key(read_key(record, self._field_name), self._case_insensitive)

    # === Queries ===

    def lookup(self, key: str) -> list[Any]:
        """Return the records filed under ``key``, or an empty list."""
        bucket = self._buckets.get(fold_key(key, self._case_insensitive))
        return list(bucket) if bucket else []

    def case_insensitive_lookup(self, key: str) -> list[Any]:
        """Return every record whose key matches ``key`` ignoring case.

        On a case-sensitive index this scans all keys and may merge several
        buckets (e.g. "Smith" and "smith"), in key order.
        """
        if self._case_insensitive:
            return self.lookup(key)
        folded = key.casefold()
        matches: list[Any] = []
        for stored, bucket in self._buckets.items():
            if stored.casefold() == folded:
                matches.extend(bucket)
        return matches

    def contains_key(self, key: str) -> bool:
        return fold_key(key, self._case_insensitive) in self._buckets

    def case_insensitive_contains_key(self, key: str) -> bool:
        if self._case_insensitive:
            return self.contains_key(key)
        folded = key.casefold()
        return any(stored.casefold() == folded for stored in self._buckets)

    def keys(self) -> list[str]:
        """Return all stored keys in sorted order."""
        return list(self._buckets.keys())

    def check_field(self, record: Any) -> None:
        """Check that a record could be filed in this index, without filing it.

        Raises:
            SchemaError: If the record lacks the indexed field
        """
        if not self._resolved:
            resolve_field_name(record, self._field_name, case_insensitive=True)
        elif not has_field(record, self._field_name):
            raise SchemaError(self._field_name, field_names(record))

    # === Mutations ===

    def add_entry(self, record: Any) -> None:
        """File a record under its key.

        Raises:
            SchemaError: If the record lacks the indexed field
            DuplicateKeyError: If the index is unique and the key is taken
        """
        if not self._resolved:
            self._field_name = resolve_field_name(record, self._field_name, case_insensitive=True)
            self._resolved = True
        key = self.key_of(record)
        bucket = self._buckets.get(key)
        if bucket is None:
            self._buckets[key] = [record]
        elif self.is_unique:
            raise DuplicateKeyError(self._field_name, [key])
        else:
            bucket.append(record)

    def remove_entry(self, record: Any) -> None:
        """Remove this exact record object from its bucket.

        An emptied bucket is dropped.

        Raises:
            ConsistencyError: If the record is not filed under its key
        """
        key = self.key_of(record)
        bucket = self._buckets.get(key)
        if bucket is None:
            raise self._inconsistent(f"no entry for key '{key}'", key)

        position = _position(bucket, record)
        if position is None:
            raise self._inconsistent(f"record is not in the bucket for key '{key}'", key)

        del bucket[position]
        if not bucket and self._buckets.pop(key, None) is not bucket:
            raise self._inconsistent(f"could not drop empty bucket for key '{key}'", key)

    def update_entry(self, old: Any, new: Any) -> None:
        """Move a record from ``old``'s key to ``new``'s key.

        When both keys are equal the bucket keeps its position and only the
        reference is swapped. Otherwise this is a remove followed by an add,
        which is not atomic.

        Raises:
            ConsistencyError: If ``old`` is not filed under its key
            DuplicateKeyError: If the index is unique and ``new``'s key is taken
        """
        old_key = self.key_of(old)
        new_key = self.key_of(new)

        if old_key == new_key:
            if old is new:
                return
            bucket = self._buckets.get(old_key)
            position = _position(bucket, old) if bucket else None
            if position is None:
                raise self._inconsistent(
                    f"record is not in the bucket for key '{old_key}'", old_key
                )
            bucket[position] = new
            return

        if self.is_unique and new_key in self._buckets:
            raise DuplicateKeyError(self._field_name, [new_key])

        self.remove_entry(old)
        self.add_entry(new)

    def _inconsistent(self, problem: str, key: str) -> ConsistencyError:
        message = f"Index on '{self._field_name}' is inconsistent: {problem}"
        logger.error(message)
        return ConsistencyError(message, {"field_name": self._field_name, "key": key})

    # === Introspection ===

    def info(self, position: int = 0, name: str | None = None) -> IndexInfo:
        """Describe this index.

        Args:
            position: Registration position within the owning store
            name: Name the index is registered under, if not its field name
        """
        return IndexInfo(
            position=position,
            field_name=name or self._field_name,
            policy=self._policy,
            case_insensitive=self._case_insensitive,
            key_count=len(self._buckets),
            record_count=self.record_count,
        )

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    def __iter__(self) -> Iterator[tuple[str, list[Any]]]:
        for key, bucket in self._buckets.items():
            yield key, list(bucket)

    def __repr__(self) -> str:
        return f"OrderedIndex({self._field_name!r}, {self._policy}, {len(self)} keys)"
