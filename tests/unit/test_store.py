"""Tests for RecordStore."""

from typing import NamedTuple

import pytest
from pydantic import BaseModel

from recordstore import (
    ConsistencyError,
    DuplicateIndexError,
    DuplicateKeyError,
    IndexNotFoundError,
    RecordNotFoundError,
    RecordStore,
    SchemaError,
)


class Account(BaseModel):
    login: str
    team: str


class Member(NamedTuple):
    id: str
    name: str


class Badge:
    __slots__ = ("code", "team")

    def __init__(self, code: str, team: str) -> None:
        self.code = code
        self.team = team


def _assert_consistent(store: RecordStore) -> None:
    """Every index files exactly the canonical records, under their current keys."""
    records = store.records
    assert len(store.primary_index) == len(records)
    for record in records:
        assert store.lookup(str(record[store.primary_key]))[0] is record
    for info in store.get_indices():
        index = store.get_index(info.field_name)
        members = [r for _, bucket in index for r in bucket]
        assert sorted(map(id, members)) == sorted(map(id, records))
        assert all(bucket for _, bucket in index)


class TestConstruction:
    """Tests for building a store."""

    def test_lookup_every_key(self, people):
        """Every batch key resolves to its original record, and nothing else does."""
        store = RecordStore(people, primary_key="id")
        for person in people:
            assert store.lookup(person["id"]) == [person]
        assert store.lookup("4") == []
        assert len(store) == 3

    def test_keeps_batch_order(self, people):
        store = RecordStore(people, primary_key="id")
        assert store.records == people

    def test_duplicate_keys_rejected(self, people):
        people.append({"id": "2", "name": "Bobby", "city": "Quito"})
        with pytest.raises(DuplicateKeyError) as exc_info:
            RecordStore(people, primary_key="id")
        assert exc_info.value.field_name == "id"
        assert exc_info.value.keys == ["2"]

    def test_duplicate_keys_case_insensitive(self):
        """The error names the records' own spellings, not the folded key."""
        with pytest.raises(DuplicateKeyError) as exc_info:
            RecordStore([{"id": "A"}, {"id": "a"}], primary_key="id", case_insensitive_keys=True)
        assert exc_info.value.keys == ["A", "a"]

    def test_primary_key_matched_case_sensitively(self, people):
        with pytest.raises(SchemaError) as exc_info:
            RecordStore(people, primary_key="ID")
        assert exc_info.value.field_name == "ID"

    def test_empty_batch(self):
        with pytest.raises(SchemaError):
            RecordStore([], primary_key="id")

    def test_empty_key_rejected(self, people):
        people.append({"id": "", "name": "Nobody", "city": "Oslo"})
        with pytest.raises(SchemaError, match="empty"):
            RecordStore(people, primary_key="id")

    def test_no_secondary_indices(self, people):
        assert RecordStore(people, primary_key="id").get_indices() == []

    def test_pydantic_records(self):
        ann = Account(login="ann", team="core")
        store = RecordStore([ann], primary_key="login")
        assert store.lookup("ann") == [ann]

    def test_named_tuple_records(self):
        ann, bob = Member("1", "Ann"), Member("2", "Bob")
        store = RecordStore([ann, bob], primary_key="id")
        assert store.lookup("2") == [bob]
        assert store.new_index("name").lookup("Ann") == [ann]

    def test_slotted_records(self):
        ann = Badge("7", "core")
        store = RecordStore([ann], primary_key="code")
        assert store.lookup("7") == [ann]
        store.add(Badge("8", "docs"))
        assert store.new_index("team").keys() == ["core", "docs"]


class TestAdd:
    """Tests for add()."""

    def test_add_reaches_every_index(self, store):
        dave = {"id": "4", "name": "Alice", "city": "Oslo"}
        store.add(dave)
        assert store.lookup("4") == [dave]
        assert store.get_index("name").lookup("Alice")[-1] is dave
        _assert_consistent(store)

    def test_duplicate_key_leaves_store_unchanged(self, store):
        with pytest.raises(DuplicateKeyError):
            store.add({"id": "1", "name": "Eve", "city": "Oslo"})
        assert len(store) == 3
        assert store.get_index("name").lookup("Eve") == []
        _assert_consistent(store)

    def test_missing_key_field(self, store):
        with pytest.raises(SchemaError):
            store.add({"name": "Eve"})
        assert len(store) == 3

    def test_missing_indexed_field_checked_before_mutation(self, store):
        with pytest.raises(SchemaError) as exc_info:
            store.add({"id": "5", "city": "Oslo"})
        assert exc_info.value.field_name == "name"
        assert "5" not in store
        _assert_consistent(store)

    def test_primary_index_failure_rolls_back_append(self, store, people, monkeypatch):
        """A record the primary index refuses is taken back out of the collection."""

        def refuse(record):
            raise DuplicateKeyError("id", [record["id"]])

        monkeypatch.setattr(store.primary_index, "add_entry", refuse)
        with pytest.raises(DuplicateKeyError):
            store.add({"id": "4", "name": "Dan", "city": "Oslo"})
        assert len(store) == 3
        assert store.records == people
        assert store.get_index("name").lookup("Dan") == []


class TestRemove:
    """Tests for remove()."""

    def test_remove_by_key_bearing_object(self, store, people):
        """Only the key field is needed to remove a record."""
        removed = store.remove({"id": "1"})
        assert removed is people[0]
        assert store.lookup("1") == []
        assert store.get_index("name").lookup("Alice") == [people[2]]
        _assert_consistent(store)

    def test_remove_absent_key(self, store):
        with pytest.raises(RecordNotFoundError):
            store.remove({"id": "404"})

    def test_remove_last_of_bucket(self, store):
        store.remove({"id": "2"})
        assert not store.get_index("name").contains_key("Bob")

    def test_in_place_field_edit_is_detected_on_remove(self, store, people):
        """Editing an indexed field behind the store's back breaks the index."""
        people[1]["name"] = "Robert"
        with pytest.raises(ConsistencyError):
            store.remove({"id": "2"})

    def test_indexed_record_missing_from_collection(self, store):
        """A primary index entry with no canonical record is a ConsistencyError."""
        del store._records["2"]
        with pytest.raises(ConsistencyError) as exc_info:
            store.remove({"id": "2"})
        assert exc_info.value.context == {"key": "2"}
        assert store.lookup("2") != []


class TestUpdate:
    """Tests for update() (upsert)."""

    def test_changed_field_moves_between_buckets(self, store):
        carol = {"id": "2", "name": "Carol", "city": "Lima"}
        assert store.update(carol) is True
        names = store.get_index("name")
        assert names.lookup("Bob") == []
        assert names.lookup("Carol") == [carol]
        _assert_consistent(store)

    def test_replacement_keeps_position(self, store, people):
        new_bob = {"id": "2", "name": "Bob", "city": "Cusco"}
        store.update(new_bob)
        assert store.records == [people[0], new_bob, people[2]]
        assert store.lookup("2")[0] is new_bob
        assert store.get_index("name").lookup("Bob")[0] is new_bob

    def test_unknown_key_inserts(self, store):
        erin = {"id": "7", "name": "Erin", "city": "Oslo"}
        assert store.update(erin) is False
        assert store.records[-1] is erin
        _assert_consistent(store)

    def test_missing_key_field(self, store):
        with pytest.raises(SchemaError):
            store.update({"name": "Nobody"})

    def test_indexed_record_missing_from_collection(self, store, people):
        store._records["2"] = {"id": "2", "name": "Bob", "city": "Lima"}
        with pytest.raises(ConsistencyError):
            store.update({"id": "2", "name": "Carol", "city": "Lima"})
        assert store.lookup("2") == [people[1]]
        assert store.get_index("name").lookup("Carol") == []

    def test_case_insensitive_store_updates_matching_key(self):
        store = RecordStore([{"id": "AB", "v": 1}], primary_key="id", case_insensitive_keys=True)
        replacement = {"id": "ab", "v": 2}
        assert store.update(replacement) is True
        assert store.lookup("AB") == [replacement]
        assert len(store) == 1


class TestIndexManagement:
    """Tests for new_index(), remove_index() and get_indices()."""

    def test_index_built_from_current_records(self, store):
        store.add({"id": "4", "name": "Dan", "city": "Oslo"})
        cities = store.new_index("city")
        assert [r["id"] for r in cities.lookup("Oslo")] == ["1", "4"]

    def test_duplicate_index(self, store):
        with pytest.raises(DuplicateIndexError) as exc_info:
            store.new_index("name")
        assert exc_info.value.field_name == "name"

    def test_remove_index(self, store):
        store.remove_index("name")
        assert store.get_indices() == []
        with pytest.raises(IndexNotFoundError):
            store.get_index("name")

    def test_remove_unknown_index(self, store):
        with pytest.raises(IndexNotFoundError) as exc_info:
            store.remove_index("city")
        assert exc_info.value.available == ["name"]

    def test_get_indices_in_registration_order(self, store):
        store.new_index("city")
        indices = [(i.position, i.field_name) for i in store.get_indices()]
        assert indices == [(0, "name"), (1, "city")]

    def test_store_default_case_mode_propagates(self):
        store = RecordStore(
            [{"id": "1", "tag": "ABC"}, {"id": "2", "tag": "abc"}],
            primary_key="id",
            case_insensitive_keys=True,
        )
        tags = store.new_index("tag")
        assert tags.case_insensitive
        assert len(tags.lookup("Abc")) == 2
        assert not store.new_index("id", case_insensitive=False).case_insensitive

    def test_index_on_field_missing_from_a_record(self, store):
        store.add({"id": "4", "name": "Dan", "city": None})
        store.update({"id": "4", "name": "Dan"})
        with pytest.raises(SchemaError):
            store.new_index("city")
        assert [i.field_name for i in store.get_indices()] == ["name"]

    def test_index_on_emptied_store_resolves_against_next_add(self):
        """An index registered with no records matches the field name of the next record."""
        store = RecordStore([{"id": "1", "name": "Ann"}], primary_key="id")
        store.remove({"id": "1"})
        names = store.new_index("Name")

        bob = {"id": "2", "name": "Bob"}
        store.add(bob)
        assert names.field_name == "name"
        assert names.lookup("Bob") == [bob]

        store.update({"id": "2", "name": "Rob"})
        assert [r["name"] for r in names.lookup("Rob")] == ["Rob"]
        assert [i.field_name for i in store.get_indices()] == ["Name"]

    def test_index_on_emptied_store_still_checks_fields(self):
        store = RecordStore([{"id": "1", "name": "Ann"}], primary_key="id")
        store.remove({"id": "1"})
        store.new_index("email")
        with pytest.raises(SchemaError) as exc_info:
            store.add({"id": "2", "name": "Bob"})
        assert exc_info.value.field_name == "email"
        assert len(store) == 0

    def test_describe(self, store):
        info = store.describe()
        assert info.primary_key == "id"
        assert info.record_count == 3
        assert info.indices[0].key_count == 2


class TestScenario:
    """End-to-end scenario over the people records."""

    def test_add_remove_update(self, people):
        store = RecordStore(people, primary_key="id")
        names = store.new_index("name")
        assert [r["id"] for r in names.lookup("Alice")] == ["1", "3"]

        store.remove({"id": "1"})
        assert [r["id"] for r in names.lookup("Alice")] == ["3"]

        store.update({"id": "2", "name": "Carol", "city": "Lima"})
        assert names.lookup("Bob") == []
        assert [r["id"] for r in names.lookup("Carol")] == ["2"]
        _assert_consistent(store)
