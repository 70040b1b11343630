"""Object store implementations backing the write-ahead log."""

from s3wal.core.storage.base import ObjectStore
from s3wal.core.storage.memory import InMemoryObjectStore
from s3wal.core.storage.s3 import S3ObjectStore

__all__ = ["InMemoryObjectStore", "ObjectStore", "S3ObjectStore"]
