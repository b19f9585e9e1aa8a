"""bsonlite: Binary Document Codec

A Python library for converting mappings to and from a little-endian,
length-prefixed binary document format compatible with the BSON element
layout (http://bsonspec.org/).

Supported values:

- Writing Python Type        -> Wire Type            -> Reading Python Type
---------------------------------------------------------------------------
- float                      -> double               -> float
- (not supported)            -> 32-bit integer       -> int
- int (64-bit range)         -> 64-bit integer       -> int
- bool                       -> boolean              -> bool
- str                        -> string (no UTF-8 validation) -> str
- Mapping                    -> subdocument          -> dict
- (not supported)            -> array                -> dict
- Binary / bytes             -> binary (generic subtype) -> Binary
---------------------------------------------------------------------------

Keys may be strings or numbers; numbers are written in decimal form and keys
that read back as numbers with an integral value (such as "7", "007" or
"1.0") are returned as ints. Circular references are detected and raise
CyclicReference.

Quick Start:
    >>> from bsonlite import Binary, decode, encode
    >>>
    >>> data = encode({"greeting": "hi", 1: 2.5, "blob": Binary(b"\\x00\\x01")})
    >>> decode(data)
    {'greeting': 'hi', 1: 2.5, 'blob': Binary(b'\\x00\\x01')}
"""

from __future__ import annotations

from .codec import (
    Binary,
    CodecOptions,
    ElementInfo,
    ElementType,
    decode,
    encode,
    iter_elements,
)
from .exceptions import (
    BsonliteError,
    CyclicReference,
    DecodeError,
    EncodeError,
    FramingError,
    InvalidKey,
    MalformedInput,
    UnsupportedTag,
    UnsupportedType,
)
from .framing import decode_all, document_length, encode_all, iter_documents, split_documents
from .models import BaseDocument, Int64Field
from .utils import element_sizes, encoded_size

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "CodecOptions",
    "Binary",
    "ElementType",
    "ElementInfo",
    "iter_elements",
    # Typed documents
    "BaseDocument",
    "Int64Field",
    # Exceptions
    "BsonliteError",
    "EncodeError",
    "UnsupportedType",
    "InvalidKey",
    "CyclicReference",
    "DecodeError",
    "MalformedInput",
    "UnsupportedTag",
    "FramingError",
    # Framing
    "document_length",
    "split_documents",
    "iter_documents",
    "encode_all",
    "decode_all",
    # Sizing
    "encoded_size",
    "element_sizes",
    # Version
    "__version__",
]
