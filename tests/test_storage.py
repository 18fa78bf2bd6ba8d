"""
Tests for the key-value stores.
"""

import pytest

from expense_tracker.services.storage import (
    CorruptDataError,
    InMemoryStore,
    JsonFileStore,
    StorageError,
)


class TestJsonFileStore:
    """Tests for the file-backed store."""

    def test_missing_key_is_none(self, tmp_path):
        """Test that an unknown key reads as None."""
        store = JsonFileStore(tmp_path)
        assert store.get("nothing") is None
        assert "nothing" not in store

    def test_set_then_get(self, tmp_path):
        """Test that a written value reads back unchanged."""
        store = JsonFileStore(tmp_path)
        store.set("expense-tracker-data", '[{"a": "€"}]')
        assert store.get("expense-tracker-data") == '[{"a": "€"}]'
        assert (tmp_path / "expense-tracker-data.json").exists()

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        """Test that atomic writes clean up after themselves."""
        store = JsonFileStore(tmp_path)
        store.set("k", "1")
        store.set("k", "2")
        assert store.get("k") == "2"
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_delete(self, tmp_path):
        """Test delete reports whether the key existed."""
        store = JsonFileStore(tmp_path)
        store.set("k", "1")
        assert store.delete("k") is True
        assert store.delete("k") is False
        assert store.get("k") is None

    def test_creates_data_directory(self, tmp_path):
        """Test that a missing data directory is created."""
        target = tmp_path / "nested" / "data"
        store = JsonFileStore(target)
        assert store.data_dir == target
        assert target.is_dir()

    def test_unusable_directory_raises(self, tmp_path):
        """Test that a file in place of the directory raises StorageError."""
        blocker = tmp_path / "blocked"
        blocker.write_text("x")
        with pytest.raises(StorageError):
            JsonFileStore(blocker)


class TestInMemoryStore:
    """Tests for the dict-backed store."""

    def test_initial_values(self):
        """Test seeding the store."""
        store = InMemoryStore({"k": "v"})
        assert store.get("k") == "v"
        assert "k" in store

    def test_delete(self):
        """Test delete on present and missing keys."""
        store = InMemoryStore({"k": "v"})
        assert store.delete("k") is True
        assert store.delete("k") is False


class TestErrors:
    """Tests for the storage error hierarchy."""

    def test_corrupt_data_is_storage_error(self):
        """Test CorruptDataError carries the key."""
        error = CorruptDataError("expense-tracker-data", "bad json")
        assert isinstance(error, StorageError)
        assert error.key == "expense-tracker-data"
