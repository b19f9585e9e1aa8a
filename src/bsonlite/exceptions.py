"""Exception hierarchy for bsonlite.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BsonliteError for easy catching of any bsonlite-specific error.
"""

from __future__ import annotations

from typing import Any, Optional


class BsonliteError(Exception):
    """Base exception for all bsonlite errors."""

    pass


class EncodeError(BsonliteError):
    """Raised when encoding a document fails.

    Examples:
        - Document nested deeper than the configured max_depth
        - Payload or document too large for an int32 length field
        - Typed document exceeds bson_max_bytes
    """

    pass


class UnsupportedType(EncodeError):
    """Raised when a value is not one of the serializable kinds.

    Only float, int (64-bit range), bool, str, binary and mappings can be encoded.
    """

    def __init__(self, message: str, value_type: Optional[type] = None) -> None:
        super().__init__(message)
        self.value_type = value_type


class InvalidKey(EncodeError):
    """Raised when a document key is neither a string nor a number.

    Also raised for keys whose encoded form contains a NUL byte, since the
    key is written as a NUL-terminated cstring.
    """

    def __init__(self, message: str, key: Any = None) -> None:
        super().__init__(message)
        self.key = key


class CyclicReference(EncodeError):
    """Raised when a document contains itself, directly or transitively."""

    pass


class DecodeError(BsonliteError):
    """Raised when decoding binary data fails.

    Examples:
        - Decoded document fails typed-document validation
    """

    pass


class MalformedInput(DecodeError):
    """Raised when the byte sequence is structurally inconsistent.

    Examples:
        - Truncated data (declared length exceeds remaining bytes)
        - Missing key or document terminator
        - Invalid string, binary or boolean payload
        - Declared document length mismatch (strict mode)
    """

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class UnsupportedTag(DecodeError):
    """Raised when an element type tag is not recognized."""

    def __init__(self, tag: int, offset: Optional[int] = None) -> None:
        location = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"Unknown/unsupported element type 0x{tag:02x}{location}")
        self.tag = tag
        self.offset = offset


class FramingError(BsonliteError):
    """Raised when framing operations fail.

    Examples:
        - Length prefix below the minimum document size
        - Declared length overruns the buffer
        - Frame not terminated by a NUL byte
        - Truncated trailing frame in a stream
    """

    pass
