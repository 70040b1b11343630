"""
s3wal - A write-ahead log that lives in an S3-compatible object store.

Each record is one object keyed by its zero-padded offset and protected by
a SHA-256 checksum trailer. Appends use create-if-absent writes, and the
log tail is rediscovered from a key listing after a restart.
"""

__version__ = "0.1.0"

from s3wal.core.storage import InMemoryObjectStore, ObjectStore, S3ObjectStore
from s3wal.core.wal import KeyCodec, Record, RecordCodec, WriteAheadLog
from s3wal.errors import (
    Cancelled,
    ChecksumMismatch,
    DeadlineExceeded,
    EmptyLog,
    NotFound,
    OffsetMismatch,
    ParseError,
    ShortRecord,
    StoreError,
    WALError,
    WriteConflict,
)
from s3wal.utils.context import OperationContext

__all__ = [
    "Cancelled",
    "ChecksumMismatch",
    "DeadlineExceeded",
    "EmptyLog",
    "InMemoryObjectStore",
    "KeyCodec",
    "NotFound",
    "ObjectStore",
    "OffsetMismatch",
    "OperationContext",
    "ParseError",
    "Record",
    "RecordCodec",
    "S3ObjectStore",
    "ShortRecord",
    "StoreError",
    "WALError",
    "WriteAheadLog",
    "WriteConflict",
]
