"""
Typed in-memory model of a decoded SHN file.

The decoder builds a ShnFile once; the exporters only read it. All classes
are frozen so a model cannot change between decode and serialization.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Iterator, Sequence, Tuple

from .exceptions import InvalidCellError, SchemaMismatchError


class DataType(Enum):
    """Column data types supported by the SHN format."""

    STRING_FIXED_LEN = "string_fixed_len"
    STRING_ZERO_TERMINATED = "string_zero_terminated"
    BYTE = "byte"
    SIGNED_BYTE = "signed_byte"
    UNSIGNED_SHORT = "unsigned_short"
    SIGNED_SHORT = "signed_short"
    UNSIGNED_INTEGER = "unsigned_integer"
    SIGNED_INTEGER = "signed_integer"
    SINGLE_FLOATING_POINT = "single_floating_point"

    @property
    def is_string(self) -> bool:
        """True for both string variants."""
        return self in (DataType.STRING_FIXED_LEN, DataType.STRING_ZERO_TERMINATED)

    @property
    def is_integer(self) -> bool:
        """True for the eight- to 32-bit integer variants."""
        return self in INTEGER_RANGES


# Inclusive (min, max) bounds for every integer data type.
INTEGER_RANGES = {
    DataType.BYTE: (0, 0xFF),
    DataType.SIGNED_BYTE: (-0x80, 0x7F),
    DataType.UNSIGNED_SHORT: (0, 0xFFFF),
    DataType.SIGNED_SHORT: (-0x8000, 0x7FFF),
    DataType.UNSIGNED_INTEGER: (0, 0xFFFFFFFF),
    DataType.SIGNED_INTEGER: (-0x80000000, 0x7FFFFFFF),
}

# Largest finite single precision value.
F32_MAX = 3.4028234663852886e38
# Halfway to the next power of two; values from here on round to infinity as f32.
F32_OVERFLOW = F32_MAX + 2.0**103


def _check_value(data_type: DataType, value: Any) -> None:
    """Raise InvalidCellError unless value is a legal payload for data_type."""
    if data_type.is_string:
        if not isinstance(value, str):
            raise InvalidCellError(f"{data_type.name} cell needs a str, got {type(value).__name__}")
        return

    if data_type.is_integer:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidCellError(f"{data_type.name} cell needs an int, got {type(value).__name__}")
        low, high = INTEGER_RANGES[data_type]
        if not low <= value <= high:
            raise InvalidCellError(f"{value} is out of range for {data_type.name} ({low}..{high})")
        return

    # SINGLE_FLOATING_POINT
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidCellError(f"{data_type.name} cell needs a float, got {type(value).__name__}")
    if math.isfinite(value) and abs(value) >= F32_OVERFLOW:
        raise InvalidCellError(f"{value} does not fit in a 32-bit float")


@dataclass(frozen=True)
class Cell:
    """
    A single typed value.

    The data type acts as the tag: exactly one payload kind is legal for
    each DataType and it is checked when the cell is created.
    """

    data_type: DataType
    value: Any

    def __post_init__(self) -> None:
        _check_value(self.data_type, self.value)


@dataclass(frozen=True)
class Column:
    """A schema column. ``length`` is the on-disk width in bytes."""

    name: str
    data_type: DataType
    length: int = 0


@dataclass(frozen=True)
class Schema:
    """Ordered column list; the order is the attribute order of every row."""

    columns: Tuple[Column, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)


@dataclass(frozen=True)
class Row:
    """One record; cells are ordered like the schema columns."""

    cells: Tuple[Cell, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", tuple(self.cells))

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    @classmethod
    def from_values(cls, schema: Schema, values: Sequence[Any]) -> "Row":
        """Build a row by tagging each value with its column's data type."""
        if len(values) != len(schema):
            raise SchemaMismatchError(
                f"Row has {len(values)} values but the schema has {len(schema)} columns"
            )
        return cls(tuple(Cell(column.data_type, value) for column, value in zip(schema, values)))


@dataclass(frozen=True)
class ShnFile:
    """
    A fully decoded SHN file.

    Attributes:
        crypt_header: Opaque leading bytes, echoed as hex in the output
        schema: Column definitions
        rows: Records, each lined up with the schema
    """

    crypt_header: bytes = b""
    schema: Schema = field(default_factory=Schema)
    rows: Tuple[Row, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "crypt_header", bytes(self.crypt_header))
        object.__setattr__(self, "rows", tuple(self.rows))

        expected = [column.data_type for column in self.schema]
        for index, row in enumerate(self.rows):
            actual = [cell.data_type for cell in row]
            if actual != expected:
                raise SchemaMismatchError(
                    f"Row {index} does not match the schema: "
                    f"expected {[t.name for t in expected]}, got {[t.name for t in actual]}"
                )
