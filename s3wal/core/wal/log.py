"""
Write-ahead log stored as one object per record.

The object store is the source of truth. The controller keeps only the last
assigned offset (the cursor) in memory, serializes appends behind a lock,
and rebuilds the cursor from a key listing when recovering.
"""

import threading
from typing import Iterator, Optional

from s3wal.core.storage.base import ObjectStore
from s3wal.core.wal.format import Record, RecordCodec
from s3wal.core.wal.keys import KeyCodec
from s3wal.errors import (
    Cancelled,
    ChecksumMismatch,
    EmptyLog,
    NotFound,
    OffsetMismatch,
    WriteConflict,
)
from s3wal.utils.context import OperationContext, check_context
from s3wal.utils.logging import get_logger

logger = get_logger(__name__)


class WriteAheadLog:
    """
    Append-only log of records in an object store bucket.

    Each record lives at "<prefix>/<20-digit offset>" and offsets start at 1.
    Appends use a create-if-absent write, so two writers can never both
    succeed at the same offset; the loser gets WriteConflict.

    Attributes:
        store: Object store holding the records
        bucket: Bucket name
        keys: Offset/key codec for this log's prefix
    """

    def __init__(
        self,
        store: ObjectStore,
        bucket: str,
        prefix: str,
        recover: bool = True,
        ctx: Optional[OperationContext] = None,
    ):
        """
        Initialize a log.

        Args:
            store: Object store holding the records
            bucket: Bucket name
            prefix: Key prefix of this log
            recover: Run tail discovery now instead of starting at offset 0
            ctx: Cancellation/deadline signal for recovery
        """
        self.store = store
        self.bucket = bucket
        self.keys = KeyCodec(prefix)

        self._cursor = 0
        self._lock = threading.Lock()

        if recover:
            self.recover(ctx)

        logger.info(
            "Initialized write-ahead log",
            bucket=self.bucket,
            prefix=self.keys.prefix,
            cursor=self._cursor,
        )

    @property
    def prefix(self) -> str:
        return self.keys.prefix

    def latest_offset(self) -> int:
        """
        Get the last assigned offset.

        Returns:
            Cursor value, or 0 if nothing has been appended or discovered
        """
        with self._lock:
            return self._cursor

    def append(self, payload: bytes, ctx: Optional[OperationContext] = None) -> int:
        """
        Append a record at the next offset.

        On any failure the cursor is left unchanged. WriteConflict means the
        offset is already taken (by another writer, or by an earlier write
        that landed despite failing here); refresh with last_record() before
        appending again.

        Args:
            payload: Record contents
            ctx: Cancellation/deadline signal

        Returns:
            The offset assigned to the record

        Raises:
            WriteConflict: If the candidate offset already exists
            Cancelled: If ctx is cancelled or expired
            StoreError: On backend failure
        """
        with self._lock:
            candidate = self._cursor + 1
            key = self.keys.encode(candidate)
            envelope = RecordCodec.encode(candidate, payload)

            check_context(ctx, "append")

            try:
                self.store.put(self.bucket, key, envelope, if_absent=True, ctx=ctx)
            except WriteConflict as e:
                logger.warning(
                    "Offset already written",
                    bucket=self.bucket,
                    key=key,
                    offset=candidate,
                )
                e.offset = candidate
                raise

            self._cursor = candidate

        logger.debug(
            "Appended to log",
            key=key,
            offset=candidate,
            payload_size=len(payload),
        )

        return candidate

    def read(self, offset: int, ctx: Optional[OperationContext] = None) -> Record:
        """
        Read and verify the record at an offset.

        Args:
            offset: Offset to read
            ctx: Cancellation/deadline signal

        Returns:
            The record stored at offset

        Raises:
            NotFound: If nothing is stored at offset
            ShortRecord: If the object is too small to be an envelope
            ChecksumMismatch: If the object is corrupted
            OffsetMismatch: If the object's header names another offset
        """
        key = self.keys.encode(offset)

        check_context(ctx, "read")

        try:
            envelope = self.store.get(self.bucket, key, ctx=ctx)
        except NotFound as e:
            e.offset = offset
            raise

        try:
            record = RecordCodec.decode(envelope)
        except ChecksumMismatch:
            logger.error("Checksum mismatch", bucket=self.bucket, key=key)
            raise

        if record.offset != offset:
            logger.error(
                "Offset mismatch",
                bucket=self.bucket,
                key=key,
                expected=offset,
                actual=record.offset,
            )
            raise OffsetMismatch(expected=offset, actual=record.offset)

        return record

    def _discover_tail(self, ctx: Optional[OperationContext]) -> Optional[int]:
        """
        Find the highest offset with an object under the prefix.

        Returns:
            Highest offset, or None if there are no objects

        Raises:
            ParseError: If any key under the prefix is malformed
        """
        check_context(ctx, "list")

        max_offset: Optional[int] = None
        count = 0

        for key in self.store.list_keys(self.bucket, self.keys.list_prefix, ctx=ctx):
            offset = self.keys.decode(key)
            if max_offset is None or offset > max_offset:
                max_offset = offset
            count += 1

        logger.debug(
            "Listed log objects",
            bucket=self.bucket,
            prefix=self.keys.prefix,
            objects=count,
            max_offset=max_offset,
        )

        return max_offset

    def _advance_cursor(self, discovered: int) -> int:
        """
        Install a discovered tail as the cursor.

        The cursor never moves backwards: a listing that started before one
        of this controller's appends landed may not include it.
        """
        with self._lock:
            if discovered > self._cursor:
                self._cursor = discovered
            return self._cursor

    def last_record(self, ctx: Optional[OperationContext] = None) -> Record:
        """
        Discover the tail of the log and read it.

        Lists every key under the prefix, so this is meant for startup and
        recovery rather than steady-state reads. The cursor is advanced to
        the discovered offset unless the operation is cancelled; a corrupt
        tail still moves it.

        Args:
            ctx: Cancellation/deadline signal

        Returns:
            The record with the highest offset

        Raises:
            EmptyLog: If there are no objects under the prefix
            ParseError: If any key under the prefix is malformed
        """
        max_offset = self._discover_tail(ctx)
        if max_offset is None:
            raise EmptyLog(self.bucket, self.keys.prefix)

        try:
            record = self.read(max_offset, ctx)
        except Cancelled:
            raise
        except Exception:
            self._advance_cursor(max_offset)
            raise

        self._advance_cursor(max_offset)

        return record

    def recover(self, ctx: Optional[OperationContext] = None) -> int:
        """
        Rebuild the cursor from the store.

        Unlike last_record(), an empty log is not an error and the tail
        record body is not fetched.

        Args:
            ctx: Cancellation/deadline signal

        Returns:
            The recovered cursor (0 for an empty log)
        """
        max_offset = self._discover_tail(ctx)

        cursor = self._advance_cursor(max_offset or 0)

        logger.info(
            "Recovered log tail",
            bucket=self.bucket,
            prefix=self.keys.prefix,
            cursor=cursor,
        )

        return cursor

    def replay(
        self,
        start_offset: int = 1,
        max_records: Optional[int] = None,
        ctx: Optional[OperationContext] = None,
    ) -> Iterator[Record]:
        """
        Read records in offset order.

        Stops at the cursor observed when iteration starts. Each record is
        verified exactly as read() does, and a missing offset raises
        NotFound rather than being skipped.

        Args:
            start_offset: First offset to read
            max_records: Maximum number of records to yield (None = all)
            ctx: Cancellation/deadline signal

        Yields:
            Records in order
        """
        if start_offset < 1:
            raise ValueError(f"Start offset must be at least 1, got {start_offset}")

        end_offset = self.latest_offset()
        records_read = 0

        for offset in range(start_offset, end_offset + 1):
            if max_records is not None and records_read >= max_records:
                return

            yield self.read(offset, ctx)
            records_read += 1
