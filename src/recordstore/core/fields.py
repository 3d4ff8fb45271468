"""Field access on opaque records.

The store never defines a record shape. It only needs to list a record's
field names and read one field as a string key. Supported shapes are
mappings, pydantic models, dataclasses, named tuples, and plain objects
with instance attributes or ``__slots__``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from recordstore.exceptions import SchemaError

_MISSING = object()


def field_names(record: Any) -> list[str]:
    """List the field names of a record, in declaration order."""
    if isinstance(record, Mapping):
        return [str(name) for name in record]
    if isinstance(record, BaseModel):
        return list(type(record).model_fields) + list(record.model_extra or {})
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return [f.name for f in dataclasses.fields(record)]
    if isinstance(record, tuple) and hasattr(record, "_fields"):
        return list(record._fields)
    return _slot_names(record) + list(getattr(record, "__dict__", {}))


def _slot_names(record: Any) -> list[str]:
    """Names of the ``__slots__`` a record has assigned, base classes first."""
    names: list[str] = []
    for cls in reversed(type(record).__mro__):
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and hasattr(record, name):
                names.append(name)
    return names


def resolve_field_name(record: Any, name: str, case_insensitive: bool = False) -> str:
    """Match a field name against a record's fields.

    An exact match always wins. With ``case_insensitive`` the first field
    whose folded name equals the folded ``name`` is returned, recovering the
    record's original casing.

    Raises:
        SchemaError: If no field matches
    """
    names = field_names(record)
    if name in names:
        return name
    if case_insensitive:
        folded = name.casefold()
        for candidate in names:
            if candidate.casefold() == folded:
                return candidate
    raise SchemaError(name, names)


def read_field(record: Any, name: str) -> Any:
    """Read a field value from a record.

    Raises:
        SchemaError: If the record has no such field
    """
    if isinstance(record, Mapping):
        value = record.get(name, _MISSING)
    else:
        value = getattr(record, name, _MISSING)
    if value is _MISSING:
        raise SchemaError(name, field_names(record))
    return value


def has_field(record: Any, name: str) -> bool:
    """Check whether a record carries a field (its value may be None)."""
    if isinstance(record, Mapping):
        return name in record
    return getattr(record, name, _MISSING) is not _MISSING


def to_key(value: Any) -> str:
    """Convert a field value to its string key. ``None`` becomes ``""``."""
    if value is None:
        return ""
    return str(value)


def read_key(record: Any, name: str) -> str:
    """Read a field and convert it to a key."""
    return to_key(read_field(record, name))


def fold_key(key: str, case_insensitive: bool) -> str:
    """Return the comparison form of a key."""
    return key.casefold() if case_insensitive else key
