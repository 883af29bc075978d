"""
Serializers for the SHN scalar types.

Strings pass through unchanged, integers become plain base-10 text and
single precision floats get their shortest round-trip decimal form.
"""

from typing import Any

import numpy as np

from ..model import INTEGER_RANGES, DataType
from .base import TypeSerializer


class StringSerializer(TypeSerializer):
    """Serializer for fixed-length and zero-terminated strings."""

    data_types = (DataType.STRING_FIXED_LEN, DataType.STRING_ZERO_TERMINATED)

    def serialize(self, value: Any) -> str:
        """Return the decoded string unchanged; XML escaping happens on output."""
        return str(value)


class IntegerSerializer(TypeSerializer):
    """Serializer for the 8, 16 and 32-bit integer types."""

    data_types = tuple(INTEGER_RANGES)

    def serialize(self, value: Any) -> str:
        """Serialize as base-10 text with a sign only for negative values."""
        return str(int(value))


class FloatSerializer(TypeSerializer):
    """Serializer for 32-bit floats."""

    data_types = (DataType.SINGLE_FLOATING_POINT,)

    def serialize(self, value: Any) -> str:
        """
        Serialize a float as the shortest decimal that reads back as the same f32.

        Positional notation without a trailing ".0", so 1.0 becomes "1"
        and 0.1 stays "0.1" rather than its double precision expansion.
        """
        f32 = np.float32(value)
        if np.isnan(f32):
            return "NaN"
        if np.isinf(f32):
            return "inf" if f32 > 0 else "-inf"
        return np.format_float_positional(f32, unique=True, trim="-")


def bytes_to_hex(data: bytes) -> str:
    """
    Render bytes as space separated two-digit lowercase hex.

    Args:
        data: Bytes to render

    Returns:
        String of length ``3 * len(data) - 1`` (empty for no bytes)
    """
    return " ".join(f"{byte:02x}" for byte in data)
