"""Named store registry.

Binds stores to names for callers that address them by name (the command
layer and the CLI). The registry is an ordinary object owned by the caller;
there is no process-wide default instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from recordstore.core.store import RecordStore
from recordstore.core.types import StoreOptions
from recordstore.exceptions import StoreExistsError, StoreNotFoundError

logger = logging.getLogger(__name__)


class StoreRegistry:
    """Mapping from names to :class:`RecordStore` instances."""

    def __init__(self) -> None:
        self._stores: dict[str, RecordStore] = {}

    def create(
        self,
        name: str,
        records: Iterable[Any],
        options: StoreOptions,
        replace: bool = False,
    ) -> RecordStore:
        """Build a store and bind it to ``name``.

        Args:
            name: Name to bind
            records: Initial batch
            options: Primary key, key comparison and secondary indices
            replace: Rebind ``name`` if it is already taken

        Returns:
            The new store

        Raises:
            StoreExistsError: If ``name`` is taken and ``replace`` is False
        """
        if name in self._stores and not replace:
            raise StoreExistsError(name)

        store = RecordStore(
            records,
            options.primary_key,
            case_insensitive_keys=options.case_insensitive_keys,
        )
        for field_name in options.indices:
            store.new_index(field_name)

        self._stores[name] = store
        logger.debug(f"Bound store '{name}'")
        return store

    def bind(self, name: str, store: RecordStore, replace: bool = False) -> None:
        """Bind an existing store to ``name``."""
        if name in self._stores and not replace:
            raise StoreExistsError(name)
        self._stores[name] = store

    def get(self, name: str) -> RecordStore:
        """Get the store bound to ``name``.

        Raises:
            StoreNotFoundError: If nothing is bound to ``name``
        """
        store = self._stores.get(name)
        if store is None:
            raise StoreNotFoundError(name, self.names())
        return store

    def drop(self, name: str) -> RecordStore:
        """Unbind ``name`` and return its store."""
        if name not in self._stores:
            raise StoreNotFoundError(name, self.names())
        return self._stores.pop(name)

    def names(self) -> list[str]:
        return list(self._stores)

    def __contains__(self, name: object) -> bool:
        return name in self._stores

    def __len__(self) -> int:
        return len(self._stores)
