"""Length-prefix framing for document streams.

Every encoded document starts with its own int32 little-endian length, so a
stream of documents needs no extra framing: the prefix says where the next
document begins.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any, BinaryIO, Optional

from ..codec.decoder import decode
from ..codec.encoder import encode
from ..codec.options import CodecOptions
from ..codec.schema import END_OF_DOCUMENT, MIN_DOCUMENT_SIZE
from ..exceptions import FramingError

logger = logging.getLogger(__name__)

_LENGTH = struct.Struct("<i")


def document_length(data: bytes, offset: int = 0) -> int:
    """Read the declared length of the document starting at offset.

    Args:
        data: Buffer holding one or more encoded documents
        offset: Start of the document inside data

    Returns:
        Declared document length in bytes (including the prefix itself)

    Raises:
        FramingError: If the prefix is truncated, too small, or overruns data

    Example:
        >>> document_length(b"\\x05\\x00\\x00\\x00\\x00")
        5
    """
    if len(data) - offset < _LENGTH.size:
        raise FramingError(
            f"Frame too short for length prefix at offset {offset}: "
            f"{len(data) - offset} bytes"
        )

    length = _LENGTH.unpack_from(data, offset)[0]
    if length < MIN_DOCUMENT_SIZE:
        raise FramingError(
            f"Invalid document length {length} at offset {offset} "
            f"(minimum is {MIN_DOCUMENT_SIZE})"
        )

    if offset + length > len(data):
        raise FramingError(
            f"Length mismatch: prefix at offset {offset} says {length} bytes, "
            f"but only {len(data) - offset} bytes remain"
        )

    return length


def split_documents(data: bytes) -> list[bytes]:
    """Split a concatenation of encoded documents into individual frames.

    Args:
        data: Concatenated encoded documents

    Returns:
        List of encoded documents, in stream order

    Raises:
        FramingError: If a length prefix is invalid or a frame is not NUL-terminated

    Example:
        >>> split_documents(b"\\x05\\x00\\x00\\x00\\x00" * 2)
        [b'\\x05\\x00\\x00\\x00\\x00', b'\\x05\\x00\\x00\\x00\\x00']
    """
    frames: list[bytes] = []
    offset = 0
    while offset < len(data):
        length = document_length(data, offset)
        frame = bytes(data[offset : offset + length])
        _check_terminator(frame, offset)
        logger.debug("Frame %d: offset=%d length=%d", len(frames), offset, length)
        frames.append(frame)
        offset += length
    return frames


def iter_documents(stream: BinaryIO) -> Iterator[bytes]:
    """Lazily yield encoded documents from a binary stream.

    Args:
        stream: Readable binary file object

    Yields:
        Encoded documents, one per frame

    Raises:
        FramingError: If the stream ends inside a frame or a frame is invalid
    """
    offset = 0
    while True:
        prefix = stream.read(_LENGTH.size)
        if not prefix:
            return

        if len(prefix) < _LENGTH.size:
            raise FramingError(
                f"Truncated frame at offset {offset}: stream ended inside the length prefix"
            )

        length = _LENGTH.unpack(prefix)[0]
        if length < MIN_DOCUMENT_SIZE:
            raise FramingError(
                f"Invalid document length {length} at offset {offset} "
                f"(minimum is {MIN_DOCUMENT_SIZE})"
            )

        body = stream.read(length - _LENGTH.size)
        if len(body) < length - _LENGTH.size:
            raise FramingError(
                f"Truncated frame at offset {offset}: prefix says {length} bytes, "
                f"got {len(body) + _LENGTH.size}"
            )

        frame = prefix + body
        _check_terminator(frame, offset)
        logger.debug("Frame at offset=%d length=%d", offset, length)
        yield frame
        offset += length


def encode_all(
    documents: Iterable[Mapping[Any, Any]], options: Optional[CodecOptions] = None
) -> bytes:
    """Encode documents into a single concatenated stream.

    Raises:
        EncodeError: If any document fails to encode
    """
    return b"".join(encode(document, options) for document in documents)


def decode_all(
    data: bytes, options: Optional[CodecOptions] = None
) -> list[MutableMapping[Any, Any]]:
    """Decode every document in a concatenated stream.

    Raises:
        FramingError: If the stream framing is invalid
        DecodeError: If any document fails to decode
    """
    return [decode(frame, options) for frame in split_documents(data)]


def _check_terminator(frame: bytes, offset: int) -> None:
    if frame[-1] != END_OF_DOCUMENT:
        raise FramingError(f"Document at offset {offset} is not terminated by a NUL byte")
