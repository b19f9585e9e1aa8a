"""Framing utilities for streams of concatenated documents.

This module uses each document's length prefix to split and join document
streams.
"""

from __future__ import annotations

from .basic import decode_all, document_length, encode_all, iter_documents, split_documents

__all__ = [
    "document_length",
    "split_documents",
    "iter_documents",
    "encode_all",
    "decode_all",
]
