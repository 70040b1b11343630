"""Core components: record format, log controller and object stores."""

from s3wal.core import storage, wal

__all__ = ["storage", "wal"]
