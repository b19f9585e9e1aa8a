#!/usr/bin/env python3
"""Basic usage example for bsonlite.

This example demonstrates:
1. Encoding a mapping to the binary document format
2. Decoding back to a mapping
3. Calculating document sizes
4. Handling unsupported values and cycles
"""

from __future__ import annotations

from typing import Any

from bsonlite import (
    Binary,
    CyclicReference,
    UnsupportedType,
    decode,
    element_sizes,
    encode,
    encoded_size,
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("bsonlite Basic Usage Example")
    print("=" * 60)
    print()

    # Create a document
    print("1. Creating a document...")
    document: dict[Any, Any] = {
        "vehicle": "auv-42",
        "depth_m": 25.0,
        "uptime_s": 86400,
        "active": True,
        "checksum": Binary(b"\xca\xfe"),
        "waypoints": {1: "dock", 2: "survey-a", 3: "dock"},
    }
    for key, value in document.items():
        print(f"   {key}: {value!r}")
    print()

    # Analyze element sizes
    print("2. Analyzing element sizes...")
    for key, size in element_sizes(document).items():
        print(f"   {key}: {size} bytes")
    print(f"   Total: {encoded_size(document)} bytes")
    print()

    # Encode the document
    print("3. Encoding to binary format...")
    encoded_data = encode(document)

    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Hex: {encoded_data.hex(' ')}")
    print()

    # Decode the document
    print("4. Decoding from binary...")
    decoded = decode(encoded_data)
    for key, value in decoded.items():
        print(f"   {key}: {value!r}")
    print()

    # Verify round-trip
    print("5. Verifying round-trip...")
    if decoded == document:
        print("   ✓ Round-trip successful! Documents match.")
    else:
        print("   ✗ Round-trip failed! Documents don't match.")
    print()

    # Errors
    print("6. Rejecting unsupported input...")
    try:
        encode({"items": [1, 2, 3]})
    except UnsupportedType as e:
        print(f"   UnsupportedType: {e}")

    loop: dict[str, Any] = {}
    loop["self"] = loop
    try:
        encode(loop)
    except CyclicReference as e:
        print(f"   CyclicReference: {e}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
