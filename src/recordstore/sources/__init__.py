"""Record sources: load a batch of records and build a store from it.

Example:
    from recordstore import StoreOptions
    from recordstore.sources import load_store

    options = StoreOptions(primary_key="id", indices=["department"])
    store = load_store("sqlite:///hr.db", options, query="SELECT * FROM staff")
    store.get_index("department").lookup("Sales")
"""

from __future__ import annotations

from typing import Any

from recordstore.core.store import RecordStore
from recordstore.core.types import StoreOptions
from recordstore.sources.files import read_json_records, read_jsonl_records, read_records
from recordstore.sources.sql import SqlSource, is_database_url


def load_records(
    source: str,
    query: str | None = None,
    params: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Read records from a file path or a database URL.

    Args:
        source: JSON/JSONL path, or a SQLAlchemy database URL
        query: SQL to run; required for database URLs
        params: Bound parameters for ``query``

    Raises:
        ValueError: If a database URL is given without a query
    """
    if not is_database_url(source):
        return read_records(source)
    if not query:
        raise ValueError(f"A query is required to load records from {source}")
    with SqlSource(source) as sql:
        return sql.fetch(query, params)


def load_store(
    source: str,
    options: StoreOptions,
    query: str | None = None,
    params: dict[str, Any] | None = None,
) -> RecordStore:
    """Load records from ``source`` and build a store with ``options``."""
    store = RecordStore(
        load_records(source, query=query, params=params),
        options.primary_key,
        case_insensitive_keys=options.case_insensitive_keys,
    )
    for field_name in options.indices:
        store.new_index(field_name)
    return store


__all__ = [
    "SqlSource",
    "is_database_url",
    "load_records",
    "load_store",
    "read_json_records",
    "read_jsonl_records",
    "read_records",
]
