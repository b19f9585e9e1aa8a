"""Field helpers for typed documents."""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.schema import INT64_MAX, INT64_MIN


def Int64Field(*, ge: int | None = None, le: int | None = None, **kwargs: Any) -> FieldInfo:
    """Create an integer field limited to the signed 64-bit range.

    Bounds narrower than the int64 range may be given with ge= and le=; wider
    bounds are clamped to it.

    Args:
        ge: Minimum value (inclusive)
        le: Maximum value (inclusive)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Counter(BaseDocument):
        ...     hits: int = Int64Field(ge=0)
    """
    lower = INT64_MIN if ge is None else max(ge, INT64_MIN)
    upper = INT64_MAX if le is None else min(le, INT64_MAX)
    return cast(FieldInfo, Field(ge=lower, le=upper, **kwargs))
