"""Per-call codec configuration.

Options are passed explicitly to encode() and decode(); there is no global
state shared between calls.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Encode, decode and sizing use two stack frames per nesting level, so this
# must stay under half the default interpreter recursion limit of 1000
MAX_NESTING_DEPTH = 256


class CodecOptions(BaseModel):
    """Configuration for encoding and decoding documents.

    Attributes:
        document_class: Callable producing the mutable mapping used for decoded
            documents (default ``dict``).
        integer_keys: Convert keys that parse as numbers with an integral value
            (``"7"``, ``"007"``, ``"1.0"``, ``"0x10"``) to ``int`` on decode
            (default True).
        sort_keys: Emit elements sorted by encoded key bytes instead of mapping
            iteration order (default False).
        max_depth: Maximum document nesting depth (default 100, at most
            MAX_NESTING_DEPTH). The top-level document is depth 0.
        strict_length: On decode, require declared document lengths to match
            the measured lengths and reject trailing bytes (default False).

    Examples:
        ```python
        from collections import OrderedDict
        from bsonlite import CodecOptions, decode, encode

        data = encode({"b": 1, "a": 2}, CodecOptions(sort_keys=True))
        doc = decode(data, CodecOptions(document_class=OrderedDict, strict_length=True))
        ```
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    document_class: Any = dict
    integer_keys: bool = True
    sort_keys: bool = False
    max_depth: int = Field(default=100, ge=1, le=MAX_NESTING_DEPTH)
    strict_length: bool = False

    @field_validator("document_class")
    @classmethod
    def _check_document_class(cls, value: Any) -> Any:
        if not callable(value):
            raise ValueError(f"document_class must be callable, got {value!r}")
        return value


DEFAULT_OPTIONS = CodecOptions()
