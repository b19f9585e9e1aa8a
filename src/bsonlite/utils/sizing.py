"""Document size calculation utilities.

This module provides functions to calculate the encoded size of documents
without actually encoding them. The same nesting and length limits as encode()
apply, so a document that cannot be encoded cannot be measured either.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from ..codec.options import DEFAULT_OPTIONS, CodecOptions
from ..codec.schema import INT32_MAX, ElementType, element_type_for, normalize_key
from ..exceptions import CyclicReference, EncodeError, UnsupportedType

_FIXED_PAYLOAD_SIZES = {
    ElementType.DOUBLE: 8,
    ElementType.BOOLEAN: 1,
    ElementType.INT64: 8,
}


def encoded_size(document: Mapping[Any, Any], options: Optional[CodecOptions] = None) -> int:
    """Calculate the encoded size of a document in bytes.

    Args:
        document: Document to measure
        options: Codec options, or None for defaults

    Returns:
        Exact length of encode(document, options)

    Raises:
        UnsupportedType: If the document holds an unsupported value
        InvalidKey: If a key is neither a string nor a number
        CyclicReference: If the document contains itself
        EncodeError: If nesting exceeds max_depth or a length overflows int32

    Example:
        >>> encoded_size({})
        5
        >>> encoded_size({"greeting": "hi"})
        22
    """
    if not isinstance(document, Mapping):
        raise UnsupportedType(
            f"encoded_size() takes a mapping, got {type(document).__name__}",
            value_type=type(document),
        )
    return _document_size(document, set(), options or DEFAULT_OPTIONS, 0)


def element_sizes(
    document: Mapping[Any, Any], options: Optional[CodecOptions] = None
) -> dict[str, int]:
    """Get the size in bytes of each top-level element of a document.

    Each size covers the tag, the key cstring and the payload. The sizes sum to
    encoded_size(document) minus the 5 bytes of document overhead.

    Args:
        document: Document to analyze
        options: Codec options, or None for defaults

    Returns:
        Dictionary mapping normalized key strings to element sizes

    Raises:
        UnsupportedType: If the document holds an unsupported value
        InvalidKey: If a key is neither a string nor a number
        CyclicReference: If the document contains itself
        EncodeError: If nesting exceeds max_depth or a length overflows int32

    Example:
        >>> element_sizes({"a": 1.5, 2: True})
        {'a': 11, '2': 4}
    """
    if not isinstance(document, Mapping):
        raise UnsupportedType(
            f"element_sizes() takes a mapping, got {type(document).__name__}",
            value_type=type(document),
        )

    opts = options or DEFAULT_OPTIONS
    ancestors = {id(document)}
    sizes: dict[str, int] = {}
    for key, value in document.items():
        raw_key = normalize_key(key)
        sizes[raw_key.decode("utf-8", "surrogateescape")] = _element_size(
            raw_key, value, ancestors, opts, 0
        )
    return sizes


def _document_size(
    document: Mapping[Any, Any], ancestors: set[int], options: CodecOptions, depth: int
) -> int:
    if depth > options.max_depth:
        raise EncodeError(f"Document nesting exceeds max_depth={options.max_depth}")

    identity = id(document)
    if identity in ancestors:
        raise CyclicReference("Recursive structure detected: document contains itself")
    ancestors.add(identity)

    # int32 prefix + terminator
    size = 5
    for key, value in document.items():
        size += _element_size(normalize_key(key), value, ancestors, options, depth)

    if size > INT32_MAX:
        raise EncodeError(f"Document size ({size} bytes) exceeds the int32 length field")

    ancestors.discard(identity)
    return size


def _element_size(
    raw_key: bytes, value: Any, ancestors: set[int], options: CodecOptions, depth: int
) -> int:
    element_type = element_type_for(value)
    header = 1 + len(raw_key) + 1

    if element_type in _FIXED_PAYLOAD_SIZES:
        return header + _FIXED_PAYLOAD_SIZES[element_type]

    if element_type is ElementType.STRING:
        length = len(value.encode("utf-8", "surrogateescape")) + 1
        if length > INT32_MAX:
            raise EncodeError(f"String value for key {raw_key!r} is too large to encode")
        return header + 4 + length

    if element_type is ElementType.BINARY:
        length = len(bytes(value))
        if length > INT32_MAX:
            raise EncodeError(f"Binary value for key {raw_key!r} is too large to encode")
        return header + 4 + 1 + length

    return header + _document_size(value, ancestors, options, depth + 1)
