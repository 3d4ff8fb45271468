"""CLI context: global options shared by every command."""

import os
from dataclasses import dataclass

from recordstore.core.store import RecordStore
from recordstore.core.types import StoreOptions
from recordstore.sources import load_store

DEFAULT_PRIMARY_KEY = "id"


def get_primary_key(key: str | None) -> str:
    """Resolve the primary key field from CLI arg, environment variable, or default.

    Priority:
    1. Explicit --key argument
    2. RECORDSTORE_PRIMARY_KEY environment variable
    3. Default: id
    """
    if key:
        return key
    if env_key := os.getenv("RECORDSTORE_PRIMARY_KEY"):
        return env_key
    return DEFAULT_PRIMARY_KEY


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Every command builds its store from a source; nothing outlives the call.
    """

    primary_key: str
    case_insensitive: bool
    json_output: bool

    def load(
        self,
        source: str,
        query: str | None = None,
        indices: list[str] | None = None,
    ) -> RecordStore:
        """Load ``source`` into a new store.

        Args:
            source: JSON/JSONL file path or database URL
            query: SQL query, for database URLs
            indices: Secondary index fields to register

        Returns:
            RecordStore instance
        """
        options = StoreOptions(
            primary_key=self.primary_key,
            case_insensitive_keys=self.case_insensitive,
            indices=indices or [],
        )
        return load_store(source, options, query=query)
