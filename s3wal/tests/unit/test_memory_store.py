"""Tests for the in-memory object store."""

import pytest

from s3wal.core.storage.memory import InMemoryObjectStore
from s3wal.errors import NotFound, WriteConflict


class TestInMemoryObjectStore:
    """Test the put/get/list contract."""
    
    @pytest.fixture
    def store(self):
        return InMemoryObjectStore()
    
    def test_put_and_get(self, store):
        """Test storing and fetching an object."""
        store.put("b", "k", b"data")
        
        assert store.get("b", "k") == b"data"
    
    def test_put_if_absent_conflict(self, store):
        """Test that create-if-absent refuses to overwrite."""
        store.put("b", "k", b"first")
        
        with pytest.raises(WriteConflict):
            store.put("b", "k", b"second")
        
        assert store.get("b", "k") == b"first"
    
    def test_put_overwrite(self, store):
        """Test that an unconditional put replaces the object."""
        store.put("b", "k", b"first")
        store.put("b", "k", b"second", if_absent=False)
        
        assert store.get("b", "k") == b"second"
    
    def test_get_missing(self, store):
        """Test that a missing key raises NotFound."""
        with pytest.raises(NotFound):
            store.get("b", "missing")
    
    def test_buckets_are_separate(self, store):
        """Test that the same key in two buckets does not conflict."""
        store.put("one", "k", b"1")
        store.put("two", "k", b"2")
        
        assert store.get("one", "k") == b"1"
        assert store.get("two", "k") == b"2"
    
    def test_list_keys_sorted_by_prefix(self, store):
        """Test that listing filters by prefix and sorts keys."""
        for key in ("wal/3", "wal/1", "other/2", "wal/sub/9", "walrus/1"):
            store.put("b", key, b"x")
        
        assert list(store.list_keys("b", "wal/")) == ["wal/1", "wal/3", "wal/sub/9"]
    
    def test_delete(self, store):
        """Test removing an object."""
        store.put("b", "k", b"x")
        store.delete("b", "k")
        
        assert len(store) == 0
        with pytest.raises(NotFound):
            store.get("b", "k")
