"""Bounds-checked reader for fixed-offset account layouts.

Every read validates ``offset >= 0``, ``length >= 0`` and
``offset + length <= len(buffer)`` against the buffer's actual length, and
raises ``BufferOverflowError`` naming the field otherwise.
"""

from __future__ import annotations

import struct

from txbuilder.errors import BufferOverflowError, MalformedAccountError

PUBKEY_SIZE = 32


class AccountReader:
    """Offset-addressed reader over raw account data."""

    def __init__(self, data: bytes, record: str = "account") -> None:
        if data is None:
            raise MalformedAccountError(f"invalid {record} data: buffer is missing")
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise MalformedAccountError(
                f"invalid {record} data: expected bytes, got {type(data).__name__}"
            )
        self._data = bytes(data)
        self._record = record

    def __len__(self) -> int:
        return len(self._data)

    @property
    def record(self) -> str:
        return self._record

    def require_min_size(self, min_size: int) -> None:
        if len(self._data) < min_size:
            raise MalformedAccountError(
                f"invalid {self._record} data: expected at least {min_size} bytes, "
                f"got {len(self._data)} bytes"
            )

    def fits(self, offset: int, length: int) -> bool:
        return offset >= 0 and length >= 0 and offset + length <= len(self._data)

    def _check(self, offset: int, length: int, field: str) -> None:
        if not self.fits(offset, length):
            raise BufferOverflowError(field, offset, length, len(self._data))

    def read_u8(self, offset: int, field: str) -> int:
        self._check(offset, 1, field)
        return self._data[offset]

    def read_u16(self, offset: int, field: str) -> int:
        self._check(offset, 2, field)
        (v,) = struct.unpack_from("<H", self._data, offset)
        return v

    def read_u64(self, offset: int, field: str) -> int:
        self._check(offset, 8, field)
        (v,) = struct.unpack_from("<Q", self._data, offset)
        return v

    def read_bytes(self, offset: int, length: int, field: str) -> bytes:
        self._check(offset, length, field)
        return self._data[offset : offset + length]

    def read_pubkey_raw(self, offset: int, field: str) -> bytes:
        """Read a 32-byte public key as raw bytes."""
        return self.read_bytes(offset, PUBKEY_SIZE, field)
