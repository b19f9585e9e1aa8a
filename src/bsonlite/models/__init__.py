"""Typed document models for bsonlite.

This module provides the pydantic base class for documents with a fixed shape.
"""

from __future__ import annotations

from .base import BaseDocument
from .fields import Int64Field

__all__ = [
    "BaseDocument",
    "Int64Field",
]
