"""JSON and JSON Lines record files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from recordstore.exceptions import SourceError

JSONL_SUFFIXES = (".jsonl", ".ndjson")


def _existing(path: str | Path) -> Path:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return file_path


def read_json_records(path: str | Path) -> list[dict[str, Any]]:
    """Read records from a JSON file.

    The file holds either an array of objects or a single object.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
        SourceError: If the JSON is not an object or an array of objects
    """
    with _existing(path).open("r") as f:
        data = json.load(f)

    if isinstance(data, dict):
        return [data]
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return data
    raise SourceError(
        f"Expected a JSON object or an array of objects in {path}",
        {"path": str(path)},
    )


def read_jsonl_records(path: str | Path) -> list[dict[str, Any]]:
    """Read records from a JSON Lines file, one object per line.

    Blank lines are skipped.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If any line contains invalid JSON
        SourceError: If a line holds JSON that is not an object
    """
    records = []
    with _existing(path).open("r") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise json.JSONDecodeError(
                    f"Invalid JSON on line {line_num}: {e.msg}",
                    e.doc,
                    e.pos,
                ) from e
            if not isinstance(record, dict):
                raise SourceError(
                    f"Expected a JSON object on line {line_num} of {path}",
                    {"path": str(path), "line": line_num},
                )
            records.append(record)

    return records


def read_records(path: str | Path) -> list[dict[str, Any]]:
    """Read a record file, choosing the format from its suffix."""
    if Path(path).suffix.lower() in JSONL_SUFFIXES:
        return read_jsonl_records(path)
    return read_json_records(path)
