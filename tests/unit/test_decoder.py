"""Unit tests for decoding malformed and foreign input."""

from __future__ import annotations

import struct
from typing import Any

import pytest

from bsonlite import (
    CodecOptions,
    DecodeError,
    ElementType,
    MalformedInput,
    UnsupportedTag,
    decode,
    encode,
    iter_elements,
)
from bsonlite.codec.options import MAX_NESTING_DEPTH


def _document(*elements: bytes) -> bytes:
    """Wrap raw elements in a correctly sized document."""
    body = b"".join(elements)
    return struct.pack("<i", len(body) + 5) + body + b"\x00"


class TestForeignTags:
    """Test decode-only element types written by other tools."""

    def test_int32(self) -> None:
        """Test int32 elements decode to int."""
        data = _document(b"\x10n\x00" + struct.pack("<i", -42))
        assert decode(data) == {"n": -42}

    def test_array_as_document(self) -> None:
        """Test arrays decode as documents with integer keys."""
        array = _document(b"\x020\x00\x02\x00\x00\x00a\x00", b"\x021\x00\x02\x00\x00\x00b\x00")
        data = _document(b"\x04list\x00" + array)

        assert decode(data) == {"list": {0: "a", 1: "b"}}

    def test_binary_subtype_ignored(self) -> None:
        """Test non-generic binary subtypes still decode."""
        data = _document(b"\x05b\x00\x01\x00\x00\x00\x80\x7f")
        assert decode(data) == {"b": b"\x7f"}

    def test_duplicate_key_last_wins(self) -> None:
        """Test duplicate keys keep the last value."""
        data = _document(b"\x08k\x00\x01", b"\x08k\x00\x00")
        assert decode(data) == {"k": False}

    def test_mismatched_length_is_tolerated(self) -> None:
        """Test the walk follows terminators, not the prefix."""
        data = bytearray(encode({"a": 1.0}))
        data[0] = 0x63
        assert decode(bytes(data)) == {"a": 1.0}

    def test_trailing_bytes_are_tolerated(self) -> None:
        """Test bytes after the document are ignored by default."""
        assert decode(encode({"a": True}) + b"\xff\xff") == {"a": True}

    def test_numeric_keys(self) -> None:
        """Test padded and fractional spellings of integers decode as ints."""
        data = _document(b"\x08007\x00\x01", b"\x081.0\x00\x00", b"\x081.5\x00\x01")
        assert decode(data) == {7: True, 1: False, "1.5": True}


class TestMalformedInput:
    """Test structural errors."""

    def test_too_short(self) -> None:
        """Test input shorter than an empty document."""
        with pytest.raises(MalformedInput, match="[Tt]runcated"):
            decode(b"\x05\x00\x00\x00")

    def test_missing_terminator(self) -> None:
        """Test document that never terminates."""
        data = encode({"a": True})[:-1]
        with pytest.raises(MalformedInput, match="[Tt]runcated"):
            decode(data)

    def test_key_without_nul(self) -> None:
        """Test key running to the end of the input."""
        with pytest.raises(MalformedInput, match="NUL"):
            decode(b"\x0a\x00\x00\x00\x08abcde")

    def test_string_length_exceeds_buffer(self) -> None:
        """Test declared string length beyond the remaining bytes."""
        data = _document(b"\x02s\x00" + struct.pack("<i", 1000) + b"hi\x00")
        with pytest.raises(MalformedInput, match="string size 1000"):
            decode(data)

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_string_size(self, size: int) -> None:
        """Test string sizes below 1."""
        data = _document(b"\x02s\x00" + struct.pack("<i", size) + b"\x00")
        with pytest.raises(MalformedInput, match="Invalid string size"):
            decode(data)

    def test_binary_length_exceeds_buffer(self) -> None:
        """Test declared binary length beyond the remaining bytes."""
        data = _document(b"\x05b\x00" + struct.pack("<i", 64) + b"\x00abc")
        with pytest.raises(MalformedInput, match="binary size 64"):
            decode(data)

    def test_negative_binary_size(self) -> None:
        """Test negative binary size."""
        data = _document(b"\x05b\x00" + struct.pack("<i", -5) + b"\x00")
        with pytest.raises(MalformedInput, match="Invalid binary size"):
            decode(data)

    def test_invalid_boolean(self) -> None:
        """Test boolean bytes other than 0x00/0x01."""
        data = _document(b"\x08f\x00\x02")
        with pytest.raises(MalformedInput, match="boolean") as exc_info:
            decode(data)
        assert exc_info.value.offset == 7

    def test_truncated_double(self) -> None:
        """Test double payload cut short."""
        with pytest.raises(MalformedInput):
            decode(b"\x10\x00\x00\x00\x01x\x00\x00\x00\x00")

    def test_truncated_nested_document(self) -> None:
        """Test nested document cut short."""
        data = encode({"d": {"x": 1}})[:-3]
        with pytest.raises(MalformedInput):
            decode(data)

    def test_malformed_is_decode_error(self) -> None:
        """Test specific errors share the DecodeError base."""
        with pytest.raises(DecodeError):
            decode(b"")

    def test_truncation_is_chained(self) -> None:
        """Test the underlying read error is preserved."""
        with pytest.raises(MalformedInput) as exc_info:
            decode(encode({"a": 1})[:-4])
        assert isinstance(exc_info.value.__cause__, IndexError)

    def test_max_depth(self) -> None:
        """Test decoding deeper than max_depth."""
        data = encode({"a": {"b": {"c": {}}}})
        assert decode(data, CodecOptions(max_depth=3)) == {"a": {"b": {"c": {}}}}
        with pytest.raises(MalformedInput, match="max_depth"):
            decode(data, CodecOptions(max_depth=2))

    def test_deep_nesting_is_rejected_cleanly(self) -> None:
        """Test hostile nesting fails with MalformedInput, not RecursionError."""
        inner = b"\x05\x00\x00\x00\x00"
        for _ in range(MAX_NESTING_DEPTH + 50):
            inner = _document(b"\x03d\x00" + inner)

        with pytest.raises(MalformedInput, match="max_depth"):
            decode(inner)
        with pytest.raises(MalformedInput, match=f"max_depth={MAX_NESTING_DEPTH}"):
            decode(inner, CodecOptions(max_depth=MAX_NESTING_DEPTH))


class TestUnsupportedTag:
    """Test unknown element types."""

    @pytest.mark.parametrize("tag", [0x06, 0x07, 0x09, 0x0A, 0x11, 0x13, 0x7F, 0xFF])
    def test_unknown_tag(self, tag: int) -> None:
        """Test tags outside the recognized set."""
        data = _document(bytes([tag]) + b"k\x00\x00\x00\x00\x00")
        with pytest.raises(UnsupportedTag) as exc_info:
            decode(data)

        assert exc_info.value.tag == tag
        assert exc_info.value.offset == 4
        assert f"0x{tag:02x}" in str(exc_info.value)

    def test_unknown_tag_after_valid_elements(self) -> None:
        """Test offset points at the offending tag."""
        data = _document(b"\x08a\x00\x01", b"\x0bk\x00")
        with pytest.raises(UnsupportedTag) as exc_info:
            decode(data)
        assert exc_info.value.offset == 8


class TestStrictLength:
    """Test strict length checking."""

    def test_valid_document_passes(self) -> None:
        """Test correctly sized documents decode."""
        data = encode({"a": {"b": "c"}, "n": 5})
        assert decode(data, CodecOptions(strict_length=True)) == {"a": {"b": "c"}, "n": 5}

    def test_top_level_mismatch(self) -> None:
        """Test wrong top-level prefix."""
        data = bytearray(encode({"a": 1.0}))
        data[0] += 1
        with pytest.raises(MalformedInput, match="Length mismatch"):
            decode(bytes(data), CodecOptions(strict_length=True))

    def test_nested_mismatch(self) -> None:
        """Test wrong nested prefix."""
        data = bytearray(encode({"d": {"x": True}}))
        # Nested prefix follows the 4-byte prefix, tag and "d\0"
        data[7] += 2
        with pytest.raises(MalformedInput, match="Length mismatch") as exc_info:
            decode(bytes(data), CodecOptions(strict_length=True))
        assert exc_info.value.offset == 7

    def test_trailing_bytes(self) -> None:
        """Test bytes after the top-level document."""
        data = encode({}) + b"\x00"
        with pytest.raises(MalformedInput, match="trailing"):
            decode(data, CodecOptions(strict_length=True))


class TestIterElements:
    """Test walking the elements of an encoded document."""

    def test_reports_wire_types_and_sizes(self) -> None:
        """Test int32 and array elements are reported as stored."""
        array = _document(b"\x100\x00\x01\x00\x00\x00")
        data = _document(b"\x10n\x00\x07\x00\x00\x00", b"\x04list\x00" + array)

        elements = list(iter_elements(data))

        assert [e.key for e in elements] == ["n", "list"]
        assert [e.element_type for e in elements] == [ElementType.INT32, ElementType.ARRAY]
        assert [e.offset for e in elements] == [4, 11]
        assert [e.size for e in elements] == [7, 1 + 5 + len(array)]
        assert elements[0].value == 7
        assert elements[1].value == {0: 1}
        assert elements[1].payload(data) == array

    def test_sizes_sum_to_document(self, sample_document: dict[Any, Any]) -> None:
        """Test element sizes plus overhead equal the encoded length."""
        data = encode(sample_document)
        assert sum(e.size for e in iter_elements(data)) + 5 == len(data)

    def test_raw_keys(self) -> None:
        """Test raw key bytes are kept alongside the parsed key."""
        (element,) = iter_elements(_document(b"\x08007\x00\x01"))
        assert element.key == 7
        assert element.raw_key == b"007"

    def test_truncated(self) -> None:
        """Test truncated data raises MalformedInput."""
        with pytest.raises(MalformedInput):
            list(iter_elements(encode({"a": 1, "b": 2})[:-6]))

    def test_unknown_tag(self) -> None:
        """Test unknown tags raise UnsupportedTag."""
        with pytest.raises(UnsupportedTag):
            list(iter_elements(_document(b"\x0bk\x00")))
