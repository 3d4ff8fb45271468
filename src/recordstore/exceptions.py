"""Custom exceptions for recordstore.

Every error names the offending field, key or index so the caller can tell
what went wrong without inspecting the store:
- Messages are actionable and mention what is available when relevant
- ``context`` carries the same details in machine-readable form
"""

from __future__ import annotations

from typing import Any


class RecordStoreError(Exception):
    """Base exception for all recordstore errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class SchemaError(RecordStoreError):
    """A required field is absent from a record, or holds no value."""

    def __init__(
        self,
        field_name: str,
        available_fields: list[str] | None = None,
        reason: str | None = None,
    ) -> None:
        available = available_fields or []
        if reason:
            message = f"Field '{field_name}' {reason}."
        elif available:
            message = (
                f"Field '{field_name}' not found on record. "
                f"Available fields: {', '.join(available)}"
            )
        else:
            message = f"Field '{field_name}' not found on record. Record has no fields."

        super().__init__(message, {"field_name": field_name, "available_fields": available})
        self.field_name = field_name
        self.available_fields = available


class DuplicateKeyError(RecordStoreError):
    """Primary key uniqueness would be violated."""

    def __init__(self, field_name: str, keys: list[str]) -> None:
        message = (
            f"Duplicate value(s) for key field '{field_name}': {', '.join(keys)}. "
            f"Use update() to replace an existing record."
        )
        super().__init__(message, {"field_name": field_name, "keys": keys})
        self.field_name = field_name
        self.keys = keys


class DuplicateIndexError(RecordStoreError):
    """A secondary index already exists for the field."""

    def __init__(self, field_name: str) -> None:
        message = (
            f"Index on '{field_name}' already exists. "
            f"Remove it first with remove_index('{field_name}')."
        )
        super().__init__(message, {"field_name": field_name})
        self.field_name = field_name


class NotFoundError(RecordStoreError):
    """Lookup or removal target does not exist."""

    kind = "Item"

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        available = available or []
        if available:
            message = f"{self.kind} '{name}' not found. Available: {', '.join(available)}"
        else:
            message = f"{self.kind} '{name}' not found."

        super().__init__(message, {"name": name, "available": available})
        self.name = name
        self.available = available


class RecordNotFoundError(NotFoundError):
    """No record with the given primary key."""

    kind = "Record"


class IndexNotFoundError(NotFoundError):
    """No secondary index registered for the field."""

    kind = "Index"


class StoreNotFoundError(NotFoundError):
    """No store bound to the given name."""

    kind = "Store"


class StoreExistsError(RecordStoreError):
    """A store is already bound to the name."""

    def __init__(self, name: str) -> None:
        message = f"Store '{name}' already exists. Use replace=True to rebind the name."
        super().__init__(message, {"name": name})
        self.name = name


class ConsistencyError(RecordStoreError):
    """An index or the canonical collection is out of sync.

    Raised when an operation the store invariants guarantee should succeed
    fails anyway. The store must be rebuilt from its source data.
    """

    pass


class SourceError(RecordStoreError):
    """Loading records from an external source failed."""

    pass
