"""Tests for cancellation and deadlines."""

import time

import pytest

from s3wal.core.storage.memory import InMemoryObjectStore
from s3wal.core.wal.log import WriteAheadLog
from s3wal.errors import Cancelled, DeadlineExceeded
from s3wal.utils.context import OperationContext, check_context

BUCKET = "test-bucket"


class CancelAfterListStore(InMemoryObjectStore):
    """Store that cancels the caller's context once a listing completes."""
    
    def list_keys(self, bucket, prefix, ctx=None):
        yield from super().list_keys(bucket, prefix, ctx=ctx)
        if ctx is not None:
            ctx.cancel()


class TestOperationContext:
    """Test the context itself."""
    
    def test_live_context(self):
        """Test that a fresh context passes checks."""
        ctx = OperationContext()
        
        ctx.check("op")
        
        assert not ctx.cancelled()
        assert not ctx.expired()
        assert ctx.remaining() is None
    
    def test_cancel(self):
        """Test that cancel() makes checks fail."""
        ctx = OperationContext()
        ctx.cancel()
        
        with pytest.raises(Cancelled, match="op cancelled"):
            ctx.check("op")
    
    def test_deadline(self):
        """Test that an expired deadline raises DeadlineExceeded."""
        ctx = OperationContext.with_timeout(0.01)
        time.sleep(0.02)
        
        assert ctx.expired()
        assert ctx.remaining() == 0.0
        with pytest.raises(DeadlineExceeded):
            ctx.check("op")
    
    def test_deadline_is_cancellation(self):
        """Test that DeadlineExceeded can be caught as Cancelled."""
        with pytest.raises(Cancelled):
            OperationContext(timeout=0).check("op")
    
    def test_check_without_context(self):
        """Test that a missing context is always live."""
        check_context(None, "op")


class TestLogCancellation:
    """Test cancellation through the log controller."""
    
    @pytest.fixture
    def store(self):
        return InMemoryObjectStore()
    
    @pytest.fixture
    def wal(self, store):
        wal = WriteAheadLog(store, BUCKET, "wal")
        wal.append(b"a")
        return wal
    
    @pytest.fixture
    def cancelled(self):
        ctx = OperationContext()
        ctx.cancel()
        return ctx
    
    def test_cancelled_append_keeps_cursor(self, wal, store, cancelled):
        """Test that a cancelled append has no side effects."""
        with pytest.raises(Cancelled):
            wal.append(b"b", ctx=cancelled)
        
        assert wal.latest_offset() == 1
        assert len(store) == 1
        assert wal.append(b"b") == 2
    
    def test_expired_append(self, wal):
        """Test that an expired deadline fails the append."""
        with pytest.raises(DeadlineExceeded):
            wal.append(b"b", ctx=OperationContext(timeout=0))
        
        assert wal.latest_offset() == 1
    
    def test_cancelled_read(self, wal, cancelled):
        """Test that a cancelled read raises."""
        with pytest.raises(Cancelled):
            wal.read(1, ctx=cancelled)
    
    def test_cancelled_last_record(self, store, wal, cancelled):
        """Test that cancelled tail discovery leaves the cursor alone."""
        fresh = WriteAheadLog(store, BUCKET, "wal", recover=False)
        
        with pytest.raises(Cancelled):
            fresh.last_record(ctx=cancelled)
        
        assert fresh.latest_offset() == 0
    
    def test_cancelled_between_list_and_get(self):
        """Test that cancelling after the listing leaves the cursor alone."""
        store = CancelAfterListStore()
        WriteAheadLog(store, BUCKET, "wal").append(b"a")
        fresh = WriteAheadLog(store, BUCKET, "wal", recover=False)
        
        with pytest.raises(Cancelled):
            fresh.last_record(ctx=OperationContext())
        
        assert fresh.latest_offset() == 0
        assert fresh.last_record().offset == 1
        assert fresh.latest_offset() == 1
    
    def test_cancelled_recovery(self, store, cancelled):
        """Test that construction with a cancelled context raises."""
        with pytest.raises(Cancelled):
            WriteAheadLog(store, BUCKET, "wal", ctx=cancelled)
    
    def test_live_context_passes(self, wal):
        """Test that operations succeed with a live context."""
        ctx = OperationContext.with_timeout(30)
        
        assert wal.append(b"b", ctx=ctx) == 2
        assert wal.read(2, ctx=ctx).payload == b"b"
        assert wal.last_record(ctx=ctx).offset == 2
