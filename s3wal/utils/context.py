"""
Cancellation and deadline signal for blocking log operations.

An OperationContext is passed down from the log controller to the object
store so a caller can abandon a put/get/list from another thread, or bound
it with a deadline.
"""

import threading
import time
from typing import Optional

from s3wal.errors import Cancelled, DeadlineExceeded


class OperationContext:
    """
    Cancel flag plus optional deadline shared by one or more operations.
    
    Attributes:
        deadline: Monotonic clock value after which operations fail, or None
    """
    
    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize a context.
        
        Args:
            timeout: Seconds from now until the deadline (None = no deadline)
        """
        self._cancelled = threading.Event()
        self.deadline: Optional[float] = (
            time.monotonic() + timeout if timeout is not None else None
        )
    
    @classmethod
    def with_timeout(cls, timeout: float) -> "OperationContext":
        return cls(timeout=timeout)
    
    def cancel(self) -> None:
        """Cancel every operation using this context."""
        self._cancelled.set()
    
    def cancelled(self) -> bool:
        return self._cancelled.is_set()
    
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline
    
    def remaining(self) -> Optional[float]:
        """
        Get seconds left before the deadline.
        
        Returns:
            Remaining seconds (never negative), or None without a deadline
        """
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())
    
    def check(self, operation: str) -> None:
        """
        Fail fast if the context is no longer live.
        
        Args:
            operation: Name of the operation, used in the error
        
        Raises:
            Cancelled: If cancel() was called
            DeadlineExceeded: If the deadline has passed
        """
        if self._cancelled.is_set():
            raise Cancelled(operation)
        if self.expired():
            raise DeadlineExceeded(operation)


def check_context(ctx: Optional[OperationContext], operation: str) -> None:
    """Check ctx if one was given."""
    if ctx is not None:
        ctx.check(operation)
