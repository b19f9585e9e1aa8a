"""Utility functions for bsonlite.

This module provides size calculation without encoding.
"""

from __future__ import annotations

from .sizing import element_sizes, encoded_size

__all__ = [
    "encoded_size",
    "element_sizes",
]
