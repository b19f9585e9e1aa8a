"""Document decoder.

This module provides the decode() function that converts binary document data
back to a mapping. Decoding is driven by the element terminators rather than
the declared length prefixes, unless strict length checking is requested.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import Any, Optional, Union

from ..exceptions import MalformedInput, UnsupportedTag
from .buffer import ByteReader
from .options import DEFAULT_OPTIONS, CodecOptions
from .schema import (
    END_OF_DOCUMENT,
    MIN_DOCUMENT_SIZE,
    Binary,
    ElementInfo,
    ElementType,
    parse_key,
)


def decode(
    data: Union[bytes, bytearray, memoryview], options: Optional[CodecOptions] = None
) -> MutableMapping[Any, Any]:
    """Decode binary data to a document.

    A brand-new document tree is built on every call.

    Args:
        data: Encoded document bytes
        options: Codec options, or None for defaults

    Returns:
        Decoded document (an instance of ``options.document_class``)

    Raises:
        MalformedInput: If the data is truncated or structurally inconsistent
        UnsupportedTag: If an element type tag is not recognized

    Examples:
        ```python
        from bsonlite import decode

        decode(b"\\x05\\x00\\x00\\x00\\x00")
        # {}

        decode(bytes.fromhex("0c0000001031000700000000"))
        # {1: 7}
        ```
    """
    opts = options or DEFAULT_OPTIONS
    reader = ByteReader(data)

    if reader.bytes_remaining() < MIN_DOCUMENT_SIZE:
        raise MalformedInput(
            f"Truncated data: a document needs at least {MIN_DOCUMENT_SIZE} bytes, "
            f"got {reader.bytes_remaining()}",
            offset=0,
        )

    try:
        document = _decode_document(reader, opts, 0)
    except IndexError as e:
        raise MalformedInput(f"Truncated data: {e}", offset=reader.position()) from e

    if opts.strict_length and reader.bytes_remaining():
        raise MalformedInput(
            f"{reader.bytes_remaining()} trailing bytes after document",
            offset=reader.position(),
        )

    return document


def iter_elements(
    data: Union[bytes, bytearray, memoryview], options: Optional[CodecOptions] = None
) -> Iterator[ElementInfo]:
    """Walk the top-level elements of an encoded document.

    Each element is fully decoded, and its wire type and byte extent are
    reported as found in the data, so an int32 element stays an int32 and an
    array stays an array.

    Args:
        data: Encoded document bytes
        options: Codec options, or None for defaults

    Yields:
        ElementInfo for each top-level element, in wire order

    Raises:
        MalformedInput: If the data is truncated or structurally inconsistent
        UnsupportedTag: If an element type tag is not recognized
    """
    opts = options or DEFAULT_OPTIONS
    reader = ByteReader(data)

    if reader.bytes_remaining() < MIN_DOCUMENT_SIZE:
        raise MalformedInput(
            f"Truncated data: a document needs at least {MIN_DOCUMENT_SIZE} bytes, "
            f"got {reader.bytes_remaining()}",
            offset=0,
        )

    try:
        reader.read_int32()
        while True:
            tag_offset = reader.position()
            tag = reader.read_byte()

            if tag == END_OF_DOCUMENT:
                return

            raw_key = reader.read_cstring()
            value = _decode_value(reader, tag, tag_offset, opts, 0)
            yield ElementInfo(
                key=parse_key(raw_key, opts.integer_keys),
                raw_key=raw_key,
                element_type=ElementType(tag),
                offset=tag_offset,
                size=reader.position() - tag_offset,
                value=value,
            )
    except IndexError as e:
        raise MalformedInput(f"Truncated data: {e}", offset=reader.position()) from e


def _decode_document(
    reader: ByteReader, options: CodecOptions, depth: int
) -> MutableMapping[Any, Any]:
    """Read elements until the document terminator.

    On return the reader is positioned immediately past the terminator.

    Raises:
        MalformedInput: If data is invalid
        UnsupportedTag: If an element tag is not recognized
        IndexError: If data is truncated
    """
    if depth > options.max_depth:
        raise MalformedInput(
            f"Document nesting exceeds max_depth={options.max_depth}", offset=reader.position()
        )

    start = reader.position()
    declared_size = reader.read_int32()

    document = options.document_class()

    while True:
        tag_offset = reader.position()
        tag = reader.read_byte()

        if tag == END_OF_DOCUMENT:
            break

        key = parse_key(reader.read_cstring(), options.integer_keys)
        document[key] = _decode_value(reader, tag, tag_offset, options, depth)

    if options.strict_length:
        measured_size = reader.position() - start
        if declared_size != measured_size:
            raise MalformedInput(
                f"Length mismatch: prefix says {declared_size} bytes, "
                f"but document is {measured_size} bytes",
                offset=start,
            )

    return document


def _decode_value(
    reader: ByteReader, tag: int, tag_offset: int, options: CodecOptions, depth: int
) -> Any:
    """Read the payload of one element.

    Raises:
        MalformedInput: If a payload length or boolean byte is invalid
        UnsupportedTag: If tag is not recognized
        IndexError: If data is truncated
    """
    if tag == ElementType.DOUBLE:
        return reader.read_double()

    if tag == ElementType.STRING:
        size_offset = reader.position()
        size = reader.read_int32()
        if size < 1:
            raise MalformedInput(f"Invalid string size {size}", offset=size_offset)
        if size > reader.bytes_remaining():
            raise MalformedInput(
                f"Truncated data: string size {size} exceeds the "
                f"{reader.bytes_remaining()} remaining bytes",
                offset=size_offset,
            )
        # Length is authoritative; the trailing NUL is skipped unchecked
        content = reader.read_bytes(size)[:-1]
        return content.decode("utf-8", "surrogateescape")

    if tag in (ElementType.DOCUMENT, ElementType.ARRAY):
        return _decode_document(reader, options, depth + 1)

    if tag == ElementType.BINARY:
        size_offset = reader.position()
        size = reader.read_int32()
        if size < 0:
            raise MalformedInput(f"Invalid binary size {size}", offset=size_offset)
        reader.read_byte()  # subtype, ignored
        if size > reader.bytes_remaining():
            raise MalformedInput(
                f"Truncated data: binary size {size} exceeds the "
                f"{reader.bytes_remaining()} remaining bytes",
                offset=size_offset,
            )
        return Binary(reader.read_bytes(size))

    if tag == ElementType.BOOLEAN:
        value_offset = reader.position()
        value = reader.read_byte()
        if value == 0x00:
            return False
        if value == 0x01:
            return True
        raise MalformedInput(f"Invalid boolean byte 0x{value:02x}", offset=value_offset)

    if tag == ElementType.INT32:
        return reader.read_int32()

    if tag == ElementType.INT64:
        return reader.read_int64()

    raise UnsupportedTag(tag, offset=tag_offset)
