# tests/test_store.py
"""Tests for in-memory stores."""

from pageaudit.store import KeyedStore, ProjectStore


class TestKeyedStore:
    """Test suite for KeyedStore."""

    def test_put_get_delete(self):
        """Test basic keyed operations."""
        store = KeyedStore()
        store.put("a", 1)

        assert store.get("a") == 1
        assert "a" in store
        assert len(store) == 1
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.get("a") is None

    def test_last_writer_wins(self):
        """Test a second put replaces the first."""
        store = KeyedStore()
        store.put("k", "first")
        store.put("k", "second")

        assert store.values() == ["second"]

    def test_new_id_prefixed_and_unique(self):
        """Test generated ids carry the prefix and do not repeat."""
        store = KeyedStore(prefix="x")
        ids = set()
        for _ in range(50):
            item_id = store.new_id()
            store.put(item_id, None)
            ids.add(item_id)

        assert len(ids) == 50
        assert all(item_id.startswith("x") for item_id in ids)


class TestProjectStore:
    """Test suite for ProjectStore."""

    def test_create(self):
        """Test created projects get an id and timestamp."""
        store = ProjectStore()
        project = store.create({"name": "Garden", "id": "ignored"})

        assert project["name"] == "Garden"
        assert project["id"].startswith("p")
        assert project["id"] != "ignored"
        assert "createdAt" in project
        assert store.get(project["id"]) == project
        assert store.values() == [project]
