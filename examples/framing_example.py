#!/usr/bin/env python3
"""Document stream example for bsonlite.

This example demonstrates:
1. Typed documents with pydantic
2. Writing several documents to one stream
3. Reading frames back with the length prefix
4. Detecting a truncated stream
"""

from __future__ import annotations

import io
from typing import ClassVar, Optional

from pydantic import Field

from bsonlite import BaseDocument, FramingError, Int64Field, iter_documents


class StatusReport(BaseDocument):
    """Status report document."""

    vehicle_id: int = Int64Field(ge=0, le=255)
    depth_m: float = Field(ge=0.0)
    battery_pct: int = Int64Field(ge=0, le=100)

    bson_max_bytes: ClassVar[Optional[int]] = 128


class CommandMessage(BaseDocument):
    """Command document."""

    target_depth_m: float = Field(ge=0.0)
    emergency_surface: bool


def main() -> None:
    """Run the framing example."""
    print("=" * 60)
    print("bsonlite Document Stream Example")
    print("=" * 60)
    print()

    reports = [
        StatusReport(vehicle_id=5, depth_m=30.0, battery_pct=75),
        StatusReport(vehicle_id=6, depth_m=12.5, battery_pct=91),
    ]

    print("1. Writing documents to a stream...")
    stream = io.BytesIO()
    for report in reports:
        data = report.to_bson()
        print(f"   StatusReport vehicle {report.vehicle_id}: {len(data)} bytes")
        stream.write(data)
    print(f"   Stream size: {stream.tell()} bytes")
    print()

    print("2. Reading frames back...")
    stream.seek(0)
    for frame in iter_documents(stream):
        report = StatusReport.from_bson(frame)
        print(f"   {report!r}")
    print()

    print("3. Detecting a truncated stream...")
    command = CommandMessage(target_depth_m=20.0, emergency_surface=False)
    truncated = io.BytesIO(command.to_bson()[:-3])
    try:
        list(iter_documents(truncated))
    except FramingError as e:
        print(f"   ✓ FramingError: {e}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
