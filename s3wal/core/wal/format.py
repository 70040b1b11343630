"""
Record envelope format for log objects.

Each record is stored as one object laid out as:

    Offset (8 bytes)      - Big-endian unsigned offset (header)
    Payload (N bytes)     - Opaque record payload
    Checksum (32 bytes)   - SHA-256 over offset + payload (trailer)
"""

import hashlib
import struct
from dataclasses import dataclass
from typing import Tuple

from s3wal.core.wal.keys import MAX_OFFSET
from s3wal.errors import ChecksumMismatch, ShortRecord

_HEADER = struct.Struct(">Q")

HEADER_SIZE = _HEADER.size
CHECKSUM_SIZE = hashlib.sha256().digest_size
MIN_ENVELOPE_SIZE = HEADER_SIZE + CHECKSUM_SIZE


@dataclass(frozen=True)
class Record:
    """
    A single entry in the log.
    
    Attributes:
        offset: 1-based position in the log
        payload: Record contents
    """
    
    offset: int
    payload: bytes
    
    def __post_init__(self) -> None:
        """Validate record fields."""
        if not 0 <= self.offset <= MAX_OFFSET:
            raise ValueError(f"Offset out of range: {self.offset}")
        if not isinstance(self.payload, bytes):
            raise TypeError(f"Payload must be bytes, got {type(self.payload)}")


def checksum(data: bytes) -> bytes:
    """Compute the trailer digest for header + payload bytes."""
    return hashlib.sha256(data).digest()


class RecordCodec:
    """Encodes records into checksummed envelopes and validates them back."""
    
    @staticmethod
    def encode(offset: int, payload: bytes) -> bytes:
        """
        Wrap a payload in its header and checksum trailer.
        
        Args:
            offset: Record offset written into the header
            payload: Record contents
        
        Returns:
            Envelope bytes ready to be stored

        Raises:
            ValueError: If offset is outside the unsigned 64-bit range
        """
        if not 0 <= offset <= MAX_OFFSET:
            raise ValueError(f"Offset out of range: {offset}")

        body = _HEADER.pack(offset) + payload
        return body + checksum(body)
    
    @staticmethod
    def split(envelope: bytes) -> Tuple[bytes, bytes, bytes]:
        """
        Cut an envelope into its header, payload and trailer fields.
        
        Args:
            envelope: Stored object bytes
        
        Returns:
            (header, payload, trailer)
        
        Raises:
            ShortRecord: If envelope is smaller than header + trailer
        """
        envelope = bytes(envelope)
        if len(envelope) < MIN_ENVELOPE_SIZE:
            raise ShortRecord(len(envelope), MIN_ENVELOPE_SIZE)
        
        trailer_start = len(envelope) - CHECKSUM_SIZE
        header = envelope[:HEADER_SIZE]
        payload = envelope[HEADER_SIZE:trailer_start]
        trailer = envelope[trailer_start:]
        return header, payload, trailer
    
    @classmethod
    def decode(cls, envelope: bytes) -> Record:
        """
        Validate an envelope and extract its record.
        
        Args:
            envelope: Stored object bytes
        
        Returns:
            The decoded record
        
        Raises:
            ShortRecord: If envelope is too small to hold header and trailer
            ChecksumMismatch: If the trailer does not match header + payload
        """
        header, payload, trailer = cls.split(envelope)
        
        computed = checksum(header + payload)
        if computed != trailer:
            raise ChecksumMismatch(expected=trailer, computed=computed)
        
        (offset,) = _HEADER.unpack(header)
        return Record(offset=offset, payload=payload)
