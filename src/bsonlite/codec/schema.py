"""Element types and value classification for documents.

This module defines the wire type tags, the Binary value type, and the rules
that map Python keys and values onto document elements. Both the encoder and
the sizing utilities classify values through this module so that they agree on
what can be serialized.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..exceptions import InvalidKey, UnsupportedType

END_OF_DOCUMENT = 0x00
BINARY_SUBTYPE_GENERIC = 0x00

INT32_MAX = (1 << 31) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# Length prefix plus terminating NUL
MIN_DOCUMENT_SIZE = 5

# Numeric key forms accepted on decode; surrounding whitespace is allowed
_DECIMAL_INT_KEY = re.compile(rb"\s*[+-]?[0-9]+\s*")
_HEX_INT_KEY = re.compile(rb"\s*[+-]?0[xX][0-9a-fA-F]+\s*")
_DECIMAL_NUMBER_KEY = re.compile(rb"\s*[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?\s*")

Key = Union[str, int]


class ElementType(enum.IntEnum):
    """Type tag byte preceding every element on the wire."""

    DOUBLE = 0x01
    STRING = 0x02
    DOCUMENT = 0x03
    ARRAY = 0x04  # decode-only
    BINARY = 0x05
    BOOLEAN = 0x08
    INT32 = 0x10  # decode-only
    INT64 = 0x12


class Binary(bytes):
    """Explicit binary blob value.

    Encoded with the binary element type and the generic subtype. Plain
    ``bytes``, ``bytearray`` and ``memoryview`` values are encoded the same
    way; decoding always produces ``Binary``, which compares equal to the
    corresponding ``bytes``.

    Example:
        >>> Binary(b"\\x01\\x02") == b"\\x01\\x02"
        True
    """

    def __repr__(self) -> str:
        return f"Binary({bytes(self)!r})"


@dataclass(frozen=True)
class ElementInfo:
    """Location and size of one element inside an encoded document.

    Attributes:
        key: Decoded mapping key
        raw_key: Key bytes as written on the wire
        element_type: Wire type tag
        offset: Offset of the tag byte inside the document
        size: Bytes used by the tag, key cstring and payload
        value: Decoded value
    """

    key: Key
    raw_key: bytes
    element_type: ElementType
    offset: int
    size: int
    value: Any

    def payload(self, document: bytes) -> bytes:
        """Return the raw payload bytes of this element from its document."""
        start = self.offset + 1 + len(self.raw_key) + 1
        return document[start : self.offset + self.size]


def element_type_for(value: Any) -> ElementType:
    """Select the element type for a value by its dynamic kind.

    ``bool`` is checked before ``int`` since it is an ``int`` subclass. There is
    no coercion between kinds.

    Args:
        value: Value to classify

    Returns:
        Element type the value will be written as

    Raises:
        UnsupportedType: If the value is not one of the six supported kinds
    """
    if isinstance(value, bool):
        return ElementType.BOOLEAN

    if isinstance(value, float):
        return ElementType.DOUBLE

    if isinstance(value, str):
        return ElementType.STRING

    if isinstance(value, Mapping):
        return ElementType.DOCUMENT

    if isinstance(value, (bytes, bytearray, memoryview)):
        return ElementType.BINARY

    if isinstance(value, int):
        if value < INT64_MIN or value > INT64_MAX:
            raise UnsupportedType(
                f"Cannot serialize value: integer {value} does not fit in 64 bits",
                value_type=type(value),
            )
        return ElementType.INT64

    raise UnsupportedType(
        f"Cannot serialize value of type {type(value).__name__}: {value!r}",
        value_type=type(value),
    )


def normalize_key(key: Any) -> bytes:
    """Convert a document key to its encoded cstring form (without the NUL).

    Numeric keys are normalized to their decimal string form, so ``1`` and
    ``"1"`` produce identical key bytes.

    Args:
        key: Mapping key to normalize

    Returns:
        Encoded key bytes

    Raises:
        InvalidKey: If the key is neither a string nor a number, or contains NUL
    """
    if isinstance(key, str):
        encoded = key.encode("utf-8", "surrogateescape")
    elif isinstance(key, bool):
        raise InvalidKey(f"Document keys must be strings or numbers, got bool {key!r}", key=key)
    elif isinstance(key, int):
        encoded = str(key).encode("ascii")
    elif isinstance(key, float):
        text = str(int(key)) if key.is_integer() else repr(key)
        encoded = text.encode("ascii")
    else:
        raise InvalidKey(
            f"Document keys must be strings or numbers, got {type(key).__name__}", key=key
        )

    if b"\x00" in encoded:
        raise InvalidKey(f"Document key {key!r} contains a NUL byte", key=key)

    return encoded


def parse_key(raw: bytes, integer_keys: bool = True) -> Key:
    """Convert decoded key bytes back to a mapping key.

    A key that parses as a number with an integral, finite value becomes an
    int, so ``"7"``, ``"007"``, ``"1.0"`` and ``"1e3"`` all decode as integers.

    Args:
        raw: Key bytes read from the wire (without the NUL terminator)
        integer_keys: If True, keys that parse as integral numbers become ints

    Returns:
        Integer key or string key
    """
    if integer_keys:
        number = _parse_number(raw)
        if number is not None:
            return number
    return raw.decode("utf-8", "surrogateescape")


def _parse_number(raw: bytes) -> Optional[int]:
    if _DECIMAL_INT_KEY.fullmatch(raw):
        return int(raw)

    if _HEX_INT_KEY.fullmatch(raw):
        return int(raw, 16)

    if _DECIMAL_NUMBER_KEY.fullmatch(raw):
        value = float(raw)
        if math.isfinite(value) and math.floor(value) == value:
            return int(value)

    return None
