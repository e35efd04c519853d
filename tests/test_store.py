"""Tests for the record store and storage backends."""

import json

import pytest

from roster_keeper.errors import DuplicateRollNumber, InvalidField, ParseFailure
from roster_keeper.records import StudentRecord
from roster_keeper.store import STORAGE_KEY, JsonFileStorage, MemoryStorage, RecordStore


@pytest.fixture
def ana():
    return StudentRecord("Ana", 1, "CS", 2, 3.5)


@pytest.fixture
def bob():
    return StudentRecord("Bob", 2, "Math", 3, 3.8)


class TestRecordStore:
    """Test in-memory store behaviour."""

    def test_append_preserves_order(self, ana, bob):
        store = RecordStore()
        store.append(bob)
        store.append(ana)
        assert store.records == (bob, ana)
        assert len(store) == 2

    def test_contains_by_roll(self, ana):
        store = RecordStore()
        store.append(ana)
        assert 1 in store
        assert 2 not in store

    def test_append_duplicate_raises(self, ana):
        store = RecordStore()
        store.append(ana)
        with pytest.raises(DuplicateRollNumber) as exc:
            store.append(StudentRecord("Other", 1, "EE", 1, 2.0))
        assert exc.value.roll_number == 1
        assert store.records == (ana,)

    def test_append_rejects_invalid_record(self):
        store = RecordStore()
        with pytest.raises(InvalidField) as exc:
            store.append(StudentRecord("", 5, "", 1, float("nan")))
        assert exc.value.field == "name"
        assert len(store) == 0
        assert 5 not in store

    def test_append_stores_trimmed_copy(self):
        store = RecordStore()
        stored = store.append(StudentRecord(" Ana ", 1, "CS ", 2, 3.5))
        assert stored == StudentRecord("Ana", 1, "CS", 2, 3.5)
        assert store.records == (stored,)

    def test_get(self, ana, bob):
        store = RecordStore()
        store.append(ana)
        store.append(bob)
        assert store.get(2) == bob
        assert store.get(99) is None

    def test_remove(self, ana, bob):
        store = RecordStore()
        store.append(ana)
        store.append(bob)
        assert store.remove(1) == 1
        assert store.records == (bob,)
        assert 1 not in store
        assert store.remove(1) == 0

    def test_records_snapshot_is_immutable(self, ana):
        store = RecordStore()
        store.append(ana)
        snapshot = store.records
        store.remove(1)
        assert snapshot == (ana,)


class TestPersistence:
    """Test save/load through storage backends."""

    def test_absent_key_is_empty(self):
        store = RecordStore(MemoryStorage())
        assert store.load() == 0
        assert len(store) == 0

    def test_save_uses_storage_attribute_names(self, ana):
        storage = MemoryStorage()
        store = RecordStore(storage)
        store.append(ana)
        store.save()
        saved = json.loads(storage.get_item(STORAGE_KEY))
        assert saved == [{"name": "Ana", "roll": 1, "course": "CS", "year": 2, "cgpa": 3.5}]

    def test_save_then_load(self, ana, bob):
        storage = MemoryStorage()
        store = RecordStore(storage)
        store.append(ana)
        store.append(bob)
        store.save()

        reloaded = RecordStore(storage)
        assert reloaded.load() == 2
        assert reloaded.records == (ana, bob)

    def test_custom_key(self, ana):
        storage = MemoryStorage()
        store = RecordStore(storage, key="other")
        store.append(ana)
        store.save()
        assert storage.get_item(STORAGE_KEY) is None
        assert storage.get_item("other") is not None

    def test_invalid_and_duplicate_entries_skipped(self, caplog):
        entries = [
            {"name": "Ana", "roll": 1, "course": "CS", "year": 2, "cgpa": 3.5},
            {"name": "", "roll": 2, "course": "CS", "year": 2, "cgpa": 3.5},
            {"name": "Dup", "roll": 1, "course": "EE", "year": 1, "cgpa": 2.0},
            {"name": "Bob", "roll": "3", "course": "Math", "year": "3", "cgpa": "3.8"},
        ]
        storage = MemoryStorage({STORAGE_KEY: json.dumps(entries)})
        store = RecordStore(storage)
        with caplog.at_level("WARNING"):
            assert store.load() == 2
        assert [r.roll_number for r in store] == [1, 3]
        assert "duplicate roll 1" in caplog.text

    def test_malformed_json_is_parse_failure(self):
        storage = MemoryStorage({STORAGE_KEY: "{not json"})
        with pytest.raises(ParseFailure):
            RecordStore(storage).load()

    def test_malformed_json_keeps_cause(self):
        storage = MemoryStorage({STORAGE_KEY: "[1,"})
        with pytest.raises(ParseFailure) as exc:
            RecordStore(storage).load()
        assert isinstance(exc.value.__cause__, json.JSONDecodeError)

    def test_non_list_is_parse_failure(self):
        storage = MemoryStorage({STORAGE_KEY: json.dumps({"name": "Ana"})})
        with pytest.raises(ParseFailure):
            RecordStore(storage).load()


class TestJsonFileStorage:
    """Test the file-backed key-value storage."""

    def test_missing_file_reads_empty(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "store.json")
        assert storage.get_item("anything") is None

    def test_set_creates_file_and_keeps_other_keys(self, tmp_path):
        path = tmp_path / "profile" / "store.json"
        storage = JsonFileStorage(path)
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "2"}
        assert JsonFileStorage(path).get_item("a") == "1"

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2", encoding="utf-8")
        with pytest.raises(ParseFailure) as exc:
            JsonFileStorage(path).get_item("a")
        assert isinstance(exc.value.__cause__, json.JSONDecodeError)

    def test_non_string_value_is_parse_failure(self, tmp_path):
        """A hand-edited value must not read as absent and get overwritten."""
        path = tmp_path / "store.json"
        path.write_text(json.dumps({STORAGE_KEY: [{"name": "Ana"}]}), encoding="utf-8")
        with pytest.raises(ParseFailure):
            JsonFileStorage(path).get_item(STORAGE_KEY)
        with pytest.raises(ParseFailure):
            RecordStore(JsonFileStorage(path)).load()
        assert json.loads(path.read_text(encoding="utf-8")) == {STORAGE_KEY: [{"name": "Ana"}]}

    def test_store_round_trip_through_file(self, tmp_path, ana):
        storage = JsonFileStorage(tmp_path / "store.json")
        store = RecordStore(storage)
        store.append(ana)
        store.save()
        reloaded = RecordStore(JsonFileStorage(tmp_path / "store.json"))
        reloaded.load()
        assert reloaded.records == (ana,)
