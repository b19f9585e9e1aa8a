"""Document encoder.

This module provides the encode() function that converts a mapping to the
little-endian, length-prefixed binary document format.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from ..exceptions import CyclicReference, EncodeError, UnsupportedType
from .buffer import ByteWriter
from .options import DEFAULT_OPTIONS, CodecOptions
from .schema import (
    BINARY_SUBTYPE_GENERIC,
    END_OF_DOCUMENT,
    INT32_MAX,
    ElementType,
    element_type_for,
    normalize_key,
)


def encode(document: Mapping[Any, Any], options: Optional[CodecOptions] = None) -> bytes:
    """Encode a document to binary format.

    Elements are written depth-first in mapping iteration order (or sorted by
    key bytes when ``options.sort_keys`` is set). The input is never mutated.

    Args:
        document: Mapping with str or numeric keys
        options: Codec options, or None for defaults

    Returns:
        Encoded document bytes

    Raises:
        UnsupportedType: If document is not a mapping or holds an unsupported value
        InvalidKey: If a key is neither a string nor a number
        CyclicReference: If a document contains itself
        EncodeError: If nesting exceeds max_depth or a length overflows int32

    Examples:
        ```python
        from bsonlite import encode

        encode({})
        # b'\\x05\\x00\\x00\\x00\\x00'

        encode({"greeting": "hi"}).hex(" ")
        # '16 00 00 00 02 67 72 65 65 74 69 6e 67 00 03 00 00 00 68 69 00 00'
        ```
    """
    if not isinstance(document, Mapping):
        raise UnsupportedType(
            f"encode() takes a mapping, got {type(document).__name__}",
            value_type=type(document),
        )

    opts = options or DEFAULT_OPTIONS
    writer = ByteWriter()
    _encode_document(writer, document, set(), opts, 0)
    return writer.to_bytes()


def _encode_document(
    writer: ByteWriter,
    document: Mapping[Any, Any],
    ancestors: set[int],
    options: CodecOptions,
    depth: int,
) -> None:
    """Write one length-prefixed, NUL-terminated document.

    Args:
        writer: ByteWriter to append to
        document: Mapping to encode
        ancestors: ids of the documents on the current recursion path
        options: Codec options
        depth: Nesting depth of this document

    Raises:
        CyclicReference: If document is already on the recursion path
    """
    if depth > options.max_depth:
        raise EncodeError(f"Document nesting exceeds max_depth={options.max_depth}")

    identity = id(document)
    if identity in ancestors:
        raise CyclicReference("Recursive structure detected: document contains itself")
    ancestors.add(identity)

    start = writer.reserve_int32()

    elements = [(normalize_key(key), value) for key, value in document.items()]
    if options.sort_keys:
        elements.sort(key=lambda element: element[0])

    for key, value in elements:
        _encode_element(writer, key, value, ancestors, options, depth)

    writer.write_byte(END_OF_DOCUMENT)

    size = len(writer) - start
    if size > INT32_MAX:
        raise EncodeError(f"Document size ({size} bytes) exceeds the int32 length field")
    writer.patch_int32(start, size)

    # Siblings may share a nested document without being a cycle
    ancestors.discard(identity)


def _encode_element(
    writer: ByteWriter,
    key: bytes,
    value: Any,
    ancestors: set[int],
    options: CodecOptions,
    depth: int,
) -> None:
    """Write a single element: tag, key cstring, payload."""
    element_type = element_type_for(value)

    writer.write_byte(element_type)
    writer.write_cstring(key)

    if element_type is ElementType.DOUBLE:
        writer.write_double(value)

    elif element_type is ElementType.STRING:
        content = value.encode("utf-8", "surrogateescape")
        if len(content) + 1 > INT32_MAX:
            raise EncodeError(f"String value for key {key!r} is too large to encode")
        writer.write_int32(len(content) + 1)
        writer.write_cstring(content)

    elif element_type is ElementType.BOOLEAN:
        writer.write_byte(0x01 if value else 0x00)

    elif element_type is ElementType.DOCUMENT:
        _encode_document(writer, value, ancestors, options, depth + 1)

    elif element_type is ElementType.BINARY:
        content = bytes(value)
        if len(content) > INT32_MAX:
            raise EncodeError(f"Binary value for key {key!r} is too large to encode")
        writer.write_int32(len(content))
        writer.write_byte(BINARY_SUBTYPE_GENERIC)
        writer.write_bytes(content)

    elif element_type is ElementType.INT64:
        writer.write_int64(value)

    else:
        raise UnsupportedType(f"Element type {element_type.name} cannot be written")
