"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def greeting_bytes() -> bytes:
    """Encoded form of {"greeting": "hi"}."""
    return bytes.fromhex("16000000026772656574696e670003000000686900" "00")


@pytest.fixture
def empty_document_bytes() -> bytes:
    """Encoded form of an empty document."""
    return b"\x05\x00\x00\x00\x00"


@pytest.fixture
def sample_document() -> dict[Any, Any]:
    """Document covering every encodable value kind."""
    return {
        "name": "glider-7",
        "depth": 12.75,
        "sequence": 1 << 40,
        "active": True,
        "payload": b"\x00\x01\xfe\xff",
        3: {"nested": False, "empty": {}},
    }
