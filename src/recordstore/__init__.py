"""recordstore - In-memory record store with a unique primary index.

Load a batch of records once from a slow source, then answer lookups
locally. Optional non-unique secondary indices stay consistent as records
are added, replaced or removed.

Example:
    from recordstore import RecordStore

    people = [
        {"id": "1", "name": "Alice"},
        {"id": "2", "name": "Bob"},
        {"id": "3", "name": "Alice"},
    ]
    store = RecordStore(people, primary_key="id")
    store.lookup("2")                      # [{"id": "2", "name": "Bob"}]

    names = store.new_index("name")
    names.lookup("Alice")                  # records 1 and 3, in order

    store.update({"id": "2", "name": "Carol"})
    names.lookup("Bob")                    # []
"""

from recordstore.core.store import RecordStore
from recordstore.core.types import IndexInfo, KeyPolicy, StoreInfo, StoreOptions
from recordstore.exceptions import (
    ConsistencyError,
    DuplicateIndexError,
    DuplicateKeyError,
    IndexNotFoundError,
    NotFoundError,
    RecordNotFoundError,
    RecordStoreError,
    SchemaError,
    SourceError,
    StoreExistsError,
    StoreNotFoundError,
)
from recordstore.index.ordered import OrderedIndex
from recordstore.registry import StoreRegistry

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "RecordStore",
    "OrderedIndex",
    "StoreRegistry",
    # Types
    "KeyPolicy",
    "IndexInfo",
    "StoreInfo",
    "StoreOptions",
    # Exceptions
    "RecordStoreError",
    "SchemaError",
    "DuplicateKeyError",
    "DuplicateIndexError",
    "NotFoundError",
    "RecordNotFoundError",
    "IndexNotFoundError",
    "StoreNotFoundError",
    "StoreExistsError",
    "ConsistencyError",
    "SourceError",
]
