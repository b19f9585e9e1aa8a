"""Binary document codec for bsonlite.

This module provides encoding and decoding between Python mappings and the
little-endian, length-prefixed binary document format.
"""

from __future__ import annotations

from .decoder import decode, iter_elements
from .encoder import encode
from .options import CodecOptions
from .schema import Binary, ElementInfo, ElementType

__all__ = [
    "encode",
    "decode",
    "CodecOptions",
    "Binary",
    "ElementType",
    "ElementInfo",
    "iter_elements",
]
