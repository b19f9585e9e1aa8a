"""End-to-end integration tests."""

from __future__ import annotations

import io
import threading
from typing import Any, ClassVar, Optional

from pydantic import Field

from bsonlite import (
    BaseDocument,
    Binary,
    CodecOptions,
    Int64Field,
    decode,
    decode_all,
    encode,
    encode_all,
    encoded_size,
    iter_documents,
)


class Telemetry(BaseDocument):
    """Vehicle telemetry snapshot."""

    vehicle: str = Field(description="Vehicle name")
    depth_m: float = Field(ge=0.0, description="Depth in meters")
    uptime_s: int = Int64Field(ge=0, description="Seconds since boot")
    emergency: bool = Field(description="Emergency flag")
    image: bytes = Field(max_length=64, description="Thumbnail")

    bson_max_bytes: ClassVar[Optional[int]] = 256


class Envelope(BaseDocument):
    """Telemetry wrapped with routing metadata."""

    source: int = Int64Field(ge=0, le=255)
    payload: Telemetry


def _telemetry(index: int) -> Telemetry:
    return Telemetry(
        vehicle=f"auv-{index}",
        depth_m=10.5 * index,
        uptime_s=3600 * index,
        emergency=index % 2 == 0,
        image=bytes(range(index)),
    )


class TestTelemetryPipeline:
    """Test typed documents through a framed stream."""

    def test_stream_of_envelopes(self) -> None:
        """Test writing and reading a stream of typed documents."""
        envelopes = [Envelope(source=i, payload=_telemetry(i)) for i in range(1, 6)]
        stream = io.BytesIO(b"".join(envelope.to_bson() for envelope in envelopes))

        received = [Envelope.from_bson(frame) for frame in iter_documents(stream)]

        assert received == envelopes

    def test_typed_and_untyped_agree(self) -> None:
        """Test typed documents read back as plain mappings."""
        envelope = Envelope(source=3, payload=_telemetry(3))
        document = decode(envelope.to_bson())

        assert document["source"] == 3
        assert document["payload"]["vehicle"] == "auv-3"
        assert document["payload"]["image"] == Binary(b"\x00\x01\x02")
        assert encoded_size(envelope.model_dump()) == len(envelope.to_bson())


class TestMixedDocuments:
    """Test heterogeneous documents with numeric keys."""

    def test_sparse_table(self) -> None:
        """Test integer-keyed tables round trip as integer keys."""
        table: dict[Any, Any] = {1: "first", 2: "second", 10: "tenth", "n": 3}
        document = {"table": table, "meta": {"version": 2, "checksum": Binary(b"\xab\xcd")}}

        assert decode(encode(document)) == document

    def test_sorted_stream_is_reproducible(self) -> None:
        """Test sorted encoding yields identical streams."""
        options = CodecOptions(sort_keys=True)
        first = encode_all([{"b": 1, "a": {"y": 2, "x": 1}}], options)
        second = encode_all([{"a": {"x": 1, "y": 2}, "b": 1}], options)

        assert first == second
        assert decode_all(first, CodecOptions(strict_length=True)) == [
            {"a": {"x": 1, "y": 2}, "b": 1}
        ]


class TestConcurrency:
    """Test the codec is reentrant across threads."""

    def test_parallel_encode_decode(self) -> None:
        """Test independent calls from several threads."""
        shared = {"shared": {"value": 1.25}}
        errors: list[BaseException] = []

        def worker(index: int) -> None:
            try:
                for i in range(200):
                    document = {"worker": index, "i": i, "ref": shared, "again": shared}
                    assert decode(encode(document)) == document
            except BaseException as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
