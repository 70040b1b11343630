"""
Mapping between log offsets and object keys.

Keys are "<prefix>/<offset>" with the offset zero-padded to 20 digits, so
lexicographic key order (the order object stores list in) equals numeric
offset order.
"""

import re

from s3wal.errors import ParseError

MAX_OFFSET = 2**64 - 1

_DIGITS = re.compile(r"[0-9]+")


class KeyCodec:
    """
    Encodes offsets as object keys under a fixed prefix.
    
    Attributes:
        prefix: Key prefix without surrounding slashes
    """
    
    OFFSET_PADDING = 20
    
    def __init__(self, prefix: str):
        """
        Initialize a key codec.
        
        Args:
            prefix: Key prefix (e.g. "wal"); leading/trailing "/" are stripped
        
        Raises:
            ValueError: If the prefix is empty
        """
        prefix = prefix.strip("/")
        if not prefix:
            raise ValueError("Prefix must be non-empty")
        
        self.prefix = prefix
        self.list_prefix = prefix + "/"
    
    def encode(self, offset: int) -> str:
        """
        Build the object key for an offset.
        
        Args:
            offset: Log offset
        
        Returns:
            Object key, e.g. "wal/00000000000000000042"
        
        Raises:
            ValueError: If offset is outside the unsigned 64-bit range
        """
        if not 0 <= offset <= MAX_OFFSET:
            raise ValueError(f"Offset out of range: {offset}")
        return f"{self.list_prefix}{offset:0{self.OFFSET_PADDING}d}"
    
    def decode(self, key: str) -> int:
        """
        Parse the offset out of an object key.
        
        Args:
            key: Object key under this codec's prefix
        
        Returns:
            The offset encoded in the key
        
        Raises:
            ParseError: If the key is not "<prefix>/<decimal offset>"
        """
        if not key.startswith(self.list_prefix):
            raise ParseError(key, f"expected prefix {self.list_prefix!r}")
        
        suffix = key[len(self.list_prefix):]
        if not _DIGITS.fullmatch(suffix):
            raise ParseError(key, f"{suffix!r} is not a decimal integer")
        
        offset = int(suffix)
        if offset > MAX_OFFSET:
            raise ParseError(key, f"{offset} exceeds the 64-bit offset range")
        
        return offset
