"""
Error taxonomy for the object-store write-ahead log.

Every failure raised by the codecs, the log controller or a store adapter
derives from WALError so callers can distinguish the kinds below without
parsing messages.
"""

from typing import Optional


class WALError(Exception):
    """Base class for all write-ahead log errors."""
    pass


class WriteConflict(WALError):
    """Raised when a create-if-absent write finds the key already present."""
    
    def __init__(self, key: str, offset: Optional[int] = None):
        self.key = key
        self.offset = offset
        super().__init__(f"Object already exists at {key!r}")


class NotFound(WALError):
    """Raised when a requested object does not exist."""
    
    def __init__(self, key: str, offset: Optional[int] = None):
        self.key = key
        self.offset = offset
        super().__init__(f"No object at {key!r}")


class ShortRecord(WALError):
    """Raised when an object is smaller than the minimum envelope size."""
    
    def __init__(self, size: int, minimum: int):
        self.size = size
        self.minimum = minimum
        super().__init__(f"Record too short: {size} bytes, need at least {minimum}")


class OffsetMismatch(WALError):
    """Raised when the envelope header disagrees with the requested offset."""
    
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Offset mismatch: expected {expected}, got {actual}")


class ChecksumMismatch(WALError):
    """Raised when the checksum trailer does not match the envelope contents."""
    
    def __init__(self, expected: bytes, computed: bytes):
        self.expected = expected
        self.computed = computed
        super().__init__(
            f"Checksum mismatch: stored {expected.hex()}, computed {computed.hex()}"
        )


class ParseError(WALError, ValueError):
    """Raised when an object key does not carry a valid offset."""
    
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot parse offset from key {key!r}: {reason}")


class EmptyLog(WALError):
    """Raised when tail discovery finds no objects under the prefix."""
    
    def __init__(self, bucket: str, prefix: str):
        self.bucket = bucket
        self.prefix = prefix
        super().__init__(f"Log is empty: no objects under {bucket}/{prefix}")


class StoreError(WALError):
    """Raised when the object store backend fails."""
    
    def __init__(self, operation: str, key: str, message: str):
        self.operation = operation
        self.key = key
        super().__init__(f"{operation} failed for {key!r}: {message}")


class Cancelled(WALError):
    """Raised when an operation is cancelled before it completes."""
    
    def __init__(self, operation: str, reason: str = "cancelled"):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} {reason}")


class DeadlineExceeded(Cancelled):
    """Raised when an operation's deadline passes before it completes."""
    
    def __init__(self, operation: str):
        super().__init__(operation, reason="deadline exceeded")
