"""Base document class for typed documents.

This module provides the BaseDocument class that typed documents should inherit
from. A typed document encodes through its model_dump() and decodes through
pydantic validation.
"""

from __future__ import annotations

from typing import ClassVar, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ..codec.decoder import decode
from ..codec.encoder import encode
from ..codec.options import CodecOptions
from ..exceptions import DecodeError, EncodeError

T = TypeVar("T", bound="BaseDocument")


class BaseDocument(BaseModel):
    """Base class for typed documents.

    Documents should inherit from this class and declare fields with types the
    codec supports: float, int, bool, str, bytes, and nested BaseDocument models.

    bsonlite-specific options are configured as ClassVar attributes:

    Example:
        >>> from typing import ClassVar, Optional
        >>> class SensorReading(BaseDocument):
        ...     sensor: str
        ...     value: float
        ...     sequence: int = Int64Field(ge=0)
        ...
        ...     bson_max_bytes: ClassVar[Optional[int]] = 128
        >>> data = SensorReading(sensor="t1", value=21.5, sequence=7).to_bson()
        >>> SensorReading.from_bson(data).value
        21.5

    Attributes:
        bson_max_bytes: Maximum encoded size in bytes (optional, for validation)
    """

    model_config = ConfigDict(
        # Allow Binary and other bytes subclasses
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    bson_max_bytes: ClassVar[Optional[int]] = None

    def to_bson(self, options: Optional[CodecOptions] = None) -> bytes:
        """Encode this document.

        Raises:
            EncodeError: If a field value cannot be encoded or the result
                exceeds bson_max_bytes
        """
        encoded = encode(self.model_dump(), options)

        max_bytes = type(self).bson_max_bytes
        if max_bytes is not None and len(encoded) > max_bytes:
            raise EncodeError(
                f"Encoded document size ({len(encoded)} bytes) exceeds "
                f"bson_max_bytes={max_bytes}"
            )

        return encoded

    @classmethod
    def from_bson(cls: type[T], data: bytes, options: Optional[CodecOptions] = None) -> T:
        """Decode and validate a document.

        Raises:
            MalformedInput: If the data is structurally invalid
            UnsupportedTag: If an element type tag is not recognized
            DecodeError: If the decoded document does not match the model
        """
        document = decode(data, options)
        try:
            return cls.model_validate(dict(document))
        except ValidationError as e:
            raise DecodeError(f"Failed to construct {cls.__name__}: {e}") from e
