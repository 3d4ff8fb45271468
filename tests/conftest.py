"""Shared test fixtures for recordstore."""

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine, text

from recordstore import RecordStore, StoreRegistry


@pytest.fixture
def people() -> list[dict[str, Any]]:
    """Three records, two sharing a name."""
    return [
        {"id": "1", "name": "Alice", "city": "Oslo"},
        {"id": "2", "name": "Bob", "city": "Lima"},
        {"id": "3", "name": "Alice", "city": "Lima"},
    ]


@pytest.fixture
def store(people: list[dict[str, Any]]) -> RecordStore:
    """Store keyed on id with a secondary index on name."""
    store = RecordStore(people, primary_key="id")
    store.new_index("name")
    return store


@pytest.fixture
def registry() -> StoreRegistry:
    return StoreRegistry()


@pytest.fixture
def json_file(tmp_path: Path, people: list[dict[str, Any]]) -> Path:
    """People records as a JSON array."""
    path = tmp_path / "people.json"
    path.write_text(json.dumps(people))
    return path


@pytest.fixture
def jsonl_file(tmp_path: Path, people: list[dict[str, Any]]) -> Path:
    """People records as JSON Lines, with a trailing blank line."""
    path = tmp_path / "people.jsonl"
    path.write_text("\n".join(json.dumps(p) for p in people) + "\n\n")
    return path


@pytest.fixture
def sqlite_url(tmp_path: Path, people: list[dict[str, Any]]) -> Generator[str, None, None]:
    """SQLite database file with a ``people`` table."""
    url = f"sqlite:///{tmp_path / 'people.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE people (id TEXT PRIMARY KEY, name TEXT, city TEXT)"))
        conn.execute(text("INSERT INTO people VALUES (:id, :name, :city)"), people)
    engine.dispose()
    yield url
