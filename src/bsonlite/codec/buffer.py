"""Byte-level packing and unpacking utilities.

This module provides the primitive (de)serialization helpers for the document
format. All multi-byte numbers are little-endian regardless of the host byte
order, since the struct formats below are explicit.
"""

from __future__ import annotations

import struct

_INT32 = struct.Struct("<i")
_INT64 = struct.Struct("<q")
_DOUBLE = struct.Struct("<d")


class ByteWriter:
    """Appends little-endian primitives to a growable byte buffer.

    Length prefixes are written by reserving a placeholder and backfilling it
    once the length is known.

    Example:
        >>> writer = ByteWriter()
        >>> offset = writer.reserve_int32()
        >>> writer.write_byte(0)
        >>> writer.patch_int32(offset, len(writer))
        >>> writer.to_bytes()
        b'\\x05\\x00\\x00\\x00\\x00'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def write_byte(self, value: int) -> None:
        """Write a single unsigned byte.

        Raises:
            ValueError: If value is not in 0-255
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value must be 0-255, got {value}")
        self._buffer.append(value)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes."""
        self._buffer += data

    def write_cstring(self, data: bytes) -> None:
        """Write bytes followed by a NUL terminator."""
        self._buffer += data
        self._buffer.append(0)

    def write_int32(self, value: int) -> None:
        """Write a signed 32-bit integer.

        Raises:
            ValueError: If value doesn't fit in 32 bits
        """
        try:
            self._buffer += _INT32.pack(value)
        except struct.error as e:
            raise ValueError(f"Value {value} doesn't fit in int32") from e

    def write_int64(self, value: int) -> None:
        """Write a signed 64-bit integer (two's complement).

        Raises:
            ValueError: If value doesn't fit in 64 bits
        """
        try:
            self._buffer += _INT64.pack(value)
        except struct.error as e:
            raise ValueError(f"Value {value} doesn't fit in int64") from e

    def write_double(self, value: float) -> None:
        """Write an IEEE-754 binary64 float."""
        self._buffer += _DOUBLE.pack(value)

    def reserve_int32(self) -> int:
        """Reserve four bytes for a length prefix.

        Returns:
            Offset of the placeholder, for patch_int32()
        """
        offset = len(self._buffer)
        self._buffer += b"\x00\x00\x00\x00"
        return offset

    def patch_int32(self, offset: int, value: int) -> None:
        """Overwrite a reserved placeholder with a signed 32-bit integer.

        Raises:
            ValueError: If value doesn't fit or offset is not inside the buffer
        """
        if offset < 0 or offset + _INT32.size > len(self._buffer):
            raise ValueError(f"No int32 placeholder at offset {offset}")
        try:
            _INT32.pack_into(self._buffer, offset, value)
        except struct.error as e:
            raise ValueError(f"Value {value} doesn't fit in int32") from e

    def to_bytes(self) -> bytes:
        """Return the buffer contents as immutable bytes."""
        return bytes(self._buffer)


class ByteReader:
    """Reads little-endian primitives from a byte buffer with a moving cursor.

    Every read either advances the cursor by exactly the bytes consumed or
    raises IndexError without reading out of bounds.

    Example:
        >>> reader = ByteReader(b"\\x05\\x00\\x00\\x00\\x00")
        >>> reader.read_int32()
        5
        >>> reader.read_byte()
        0
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._position = 0

    def _take(self, num_bytes: int) -> int:
        start = self._position
        if num_bytes < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {num_bytes}")
        if start + num_bytes > len(self._data):
            raise IndexError(
                f"Not enough bytes at offset {start}: need {num_bytes}, "
                f"have {len(self._data) - start}"
            )
        self._position = start + num_bytes
        return start

    def read_byte(self) -> int:
        """Read a single unsigned byte.

        Raises:
            IndexError: If no more bytes are available
        """
        start = self._take(1)
        return self._data[start]

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read raw bytes.

        Raises:
            IndexError: If not enough bytes are available
        """
        start = self._take(num_bytes)
        return self._data[start : start + num_bytes]

    def read_int32(self) -> int:
        start = self._take(_INT32.size)
        return _INT32.unpack_from(self._data, start)[0]

    def read_int64(self) -> int:
        start = self._take(_INT64.size)
        return _INT64.unpack_from(self._data, start)[0]

    def read_double(self) -> float:
        start = self._take(_DOUBLE.size)
        return _DOUBLE.unpack_from(self._data, start)[0]

    def read_cstring(self) -> bytes:
        """Read bytes up to the next NUL and skip past the terminator.

        Raises:
            IndexError: If no NUL byte is found before the end of the buffer
        """
        end = self._data.find(b"\x00", self._position)
        if end < 0:
            raise IndexError(f"No NUL terminator after offset {self._position}")
        value = self._data[self._position : end]
        self._position = end + 1
        return value

    def bytes_remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def position(self) -> int:
        """Return the current read offset in bytes."""
        return self._position
