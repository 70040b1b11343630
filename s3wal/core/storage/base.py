"""
Object store contract used by the write-ahead log.

The log only needs three operations from its durable medium: a conditional
put that refuses to overwrite, a get by key, and a recursive listing by
prefix. Connection handling, authentication and retries belong to the
implementation.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from s3wal.utils.context import OperationContext


class ObjectStore(ABC):
    """Abstract key/value object store."""
    
    @abstractmethod
    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        if_absent: bool = True,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        """
        Store an object.
        
        Args:
            bucket: Bucket name
            key: Object key
            data: Object contents
            if_absent: Fail instead of overwriting an existing object
            ctx: Cancellation/deadline signal
        
        Raises:
            WriteConflict: If if_absent is set and the key already exists
            StoreError: On backend failure
            Cancelled: If ctx is cancelled or expired
        """
    
    @abstractmethod
    def get(
        self,
        bucket: str,
        key: str,
        ctx: Optional[OperationContext] = None,
    ) -> bytes:
        """
        Fetch an object's contents.
        
        Raises:
            NotFound: If the key does not exist
            StoreError: On backend failure
            Cancelled: If ctx is cancelled or expired
        """
    
    @abstractmethod
    def list_keys(
        self,
        bucket: str,
        prefix: str,
        ctx: Optional[OperationContext] = None,
    ) -> Iterator[str]:
        """
        Yield every key under a prefix, recursively, in lexicographic order.
        
        Raises:
            StoreError: On backend failure
            Cancelled: If ctx is cancelled or expired
        """
