"""Document dump and analysis CLI commands."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from ..codec.decoder import decode, iter_elements
from ..codec.options import CodecOptions
from ..codec.schema import ElementType
from ..framing import split_documents


def format_document(document: Mapping[Any, Any], indent: str = "") -> str:
    """Render a decoded document as indented text.

    Args:
        document: Decoded document
        indent: Indentation of the enclosing level

    Returns:
        Multi-line rendering with one element per line
    """
    inner = indent + "    "
    lines = ["{"]
    for key, value in document.items():
        if isinstance(value, Mapping):
            rendered = format_document(value, inner)
        else:
            rendered = repr(value)
        lines.append(f"{inner}{key!r}: {rendered},")
    lines.append(f"{indent}}}")
    return "\n".join(lines)


def dump_file(file_path: Path, options: Optional[CodecOptions] = None) -> None:
    """Decode every document in a file and print it.

    Args:
        file_path: Path to a file holding one or more encoded documents
        options: Codec options for decoding
    """
    for document in _load_documents(file_path, options):
        print(format_document(document))


def analyze_file(file_path: Path, options: Optional[CodecOptions] = None) -> None:
    """Print the element layout of every document in a file.

    Args:
        file_path: Path to a file holding one or more encoded documents
        options: Codec options for decoding
    """
    frames = split_documents(file_path.read_bytes())
    for frame in frames:
        decode(frame, options)

    print("|" * 7, "bsonlite: Binary Document Codec", "|" * 7)
    print(f"{len(frames)} document{'s' if len(frames) != 1 else ''} loaded.")
    print("Sizes are in bytes.")
    print()

    for index, frame in enumerate(frames, 1):
        analyze_document(frame, f"Document {index}", options)


def analyze_document(
    frame: bytes, title: str, options: Optional[CodecOptions] = None
) -> None:
    """Print a per-element size breakdown for one encoded document.

    Sizes and element types are read from the encoded bytes, so elements
    written by other encoders (int32 values, arrays) are reported as stored.

    Args:
        frame: Encoded bytes of exactly one document
        title: Heading for the breakdown
        options: Codec options for decoding
    """
    print(f"{'=' * 19} {title} {'=' * 19}")
    print(f"Total size: {len(frame)} bytes")
    print(f"        length prefix{'.' * 29}4")
    print(f"        terminator{'.' * 32}1")
    print()

    for i, element in enumerate(iter_elements(frame, options), 1):
        name = element.raw_key.decode("utf-8", "surrogateescape")
        size = element.size
        kind = element.element_type.name.lower()

        field_desc = f"{i}. {name}"
        info = f"({kind})"
        dots_needed = 54 - len(field_desc) - len(str(size)) - len(" bytes") - len(info) - 1
        dots = "." * max(1, dots_needed)
        print(f"        {field_desc}{dots}{size} bytes {info}")

        if element.element_type in (ElementType.DOCUMENT, ElementType.ARRAY):
            for nested in iter_elements(element.payload(frame), options):
                nested_name = nested.raw_key.decode("utf-8", "surrogateescape")
                nested_kind = nested.element_type.name.lower()
                print(
                    f"            {name}.{nested_name}: {nested.size} bytes ({nested_kind})"
                )

    print()


def _load_documents(
    file_path: Path, options: Optional[CodecOptions]
) -> list[Mapping[Any, Any]]:
    data = file_path.read_bytes()
    return [decode(frame, options) for frame in split_documents(data)]
