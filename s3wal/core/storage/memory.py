"""In-memory object store for tests and local experiments."""

import threading
from typing import Dict, Iterator, List, Optional, Tuple

from s3wal.core.storage.base import ObjectStore
from s3wal.errors import NotFound, WriteConflict
from s3wal.utils.context import OperationContext, check_context


class InMemoryObjectStore(ObjectStore):
    """
    Thread-safe dictionary-backed object store.
    
    Honours create-if-absent atomically, so several log controllers sharing
    one instance behave like independent processes sharing a bucket.
    """
    
    def __init__(self):
        self._objects: Dict[Tuple[str, str], bytes] = {}
        self._lock = threading.Lock()
    
    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        if_absent: bool = True,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        check_context(ctx, "put")
        
        with self._lock:
            if if_absent and (bucket, key) in self._objects:
                raise WriteConflict(key)
            self._objects[(bucket, key)] = bytes(data)
    
    def get(
        self,
        bucket: str,
        key: str,
        ctx: Optional[OperationContext] = None,
    ) -> bytes:
        check_context(ctx, "get")
        
        with self._lock:
            try:
                return self._objects[(bucket, key)]
            except KeyError:
                raise NotFound(key) from None
    
    def list_keys(
        self,
        bucket: str,
        prefix: str,
        ctx: Optional[OperationContext] = None,
    ) -> Iterator[str]:
        check_context(ctx, "list")
        
        with self._lock:
            keys: List[str] = sorted(
                key for b, key in self._objects
                if b == bucket and key.startswith(prefix)
            )
        
        yield from keys
    
    def delete(self, bucket: str, key: str) -> None:
        """Remove an object if present."""
        with self._lock:
            self._objects.pop((bucket, key), None)
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)
