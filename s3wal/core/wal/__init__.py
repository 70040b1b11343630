"""
Write-ahead log over an object store.

This package provides:
- Offset to object key mapping with order-preserving padding
- Checksummed record envelopes
- The log controller (append, read, tail discovery)
"""

from s3wal.core.wal.format import (
    CHECKSUM_SIZE,
    HEADER_SIZE,
    MIN_ENVELOPE_SIZE,
    Record,
    RecordCodec,
)
from s3wal.core.wal.keys import KeyCodec
from s3wal.core.wal.log import WriteAheadLog

__all__ = [
    "CHECKSUM_SIZE",
    "HEADER_SIZE",
    "MIN_ENVELOPE_SIZE",
    "KeyCodec",
    "Record",
    "RecordCodec",
    "WriteAheadLog",
]
