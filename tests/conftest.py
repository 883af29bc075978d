"""
Shared fixtures for shn2xml tests.

Provides synthetic in-memory models and a builder that produces scrambled
SHN bytes, so decoder and end-to-end tests need no binary fixture files.
"""

import struct
from typing import Any, Callable, List, Sequence, Tuple

import pytest

from shn2xml.model import Column, DataType, Row, Schema, ShnFile
from shn2xml.reader import NUMERIC_FORMATS, PREAMBLE_LENGTH, TYPE_CODES, descramble

# One on-disk type code per data type.
CODE_FOR_TYPE = {
    DataType.BYTE: 1,
    DataType.UNSIGNED_SHORT: 2,
    DataType.UNSIGNED_INTEGER: 3,
    DataType.SINGLE_FLOATING_POINT: 5,
    DataType.STRING_FIXED_LEN: 9,
    DataType.SIGNED_SHORT: 13,
    DataType.SIGNED_BYTE: 20,
    DataType.SIGNED_INTEGER: 22,
    DataType.STRING_ZERO_TERMINATED: 26,
}

DEFAULT_CRYPT_HEADER = bytes(range(32))

ColumnSpec = Tuple[str, int, int]


def _encode_text(value: Any, encoding: str) -> bytes:
    return value if isinstance(value, bytes) else value.encode(encoding)


def build_shn(
    columns: Sequence[ColumnSpec],
    rows: Sequence[Sequence[Any]],
    crypt_header: bytes = DEFAULT_CRYPT_HEADER,
    encoding: str = "ascii",
    header: int = 0,
    trailing: bytes = b"",
) -> bytes:
    """
    Build the bytes of an SHN file.

    Args:
        columns: (name, type code, length) per column; names may be bytes
        rows: Values per row; string values may be bytes to bypass encoding
        crypt_header: Leading opaque bytes
        encoding: Codec for str names and values
        header: Payload header value
        trailing: Extra payload bytes after the last row
    """
    default_record_length = 2 + sum(length for _, _, length in columns)
    payload = struct.pack("<IIII", header, len(rows), default_record_length, len(columns))

    for name, code, length in columns:
        payload += _encode_text(name, encoding).ljust(48, b"\x00") + struct.pack("<Ii", code, length)

    for values in rows:
        body = b""
        for (_, code, length), value in zip(columns, values):
            data_type = TYPE_CODES[code]
            if data_type is DataType.STRING_FIXED_LEN:
                body += _encode_text(value, encoding)[:length].ljust(length, b"\x00")
            elif data_type is DataType.STRING_ZERO_TERMINATED:
                body += _encode_text(value, encoding) + b"\x00"
            else:
                body += struct.pack(NUMERIC_FORMATS[data_type], value)
        payload += struct.pack("<H", len(body) + 2) + body

    payload += trailing
    return crypt_header + struct.pack("<i", len(payload) + PREAMBLE_LENGTH) + descramble(payload)


@pytest.fixture
def shn_bytes() -> Callable[..., bytes]:
    """Builder for SHN file contents."""
    return build_shn


@pytest.fixture
def type_codes():
    """On-disk type code for each data type."""
    return dict(CODE_FOR_TYPE)


@pytest.fixture
def all_types_columns() -> List[ColumnSpec]:
    """One column of every data type."""
    return [
        ("Name", CODE_FOR_TYPE[DataType.STRING_FIXED_LEN], 16),
        ("Note", CODE_FOR_TYPE[DataType.STRING_ZERO_TERMINATED], 0),
        ("Level", CODE_FOR_TYPE[DataType.BYTE], 1),
        ("Delta", CODE_FOR_TYPE[DataType.SIGNED_BYTE], 1),
        ("Slot", CODE_FOR_TYPE[DataType.UNSIGNED_SHORT], 2),
        ("Offset", CODE_FOR_TYPE[DataType.SIGNED_SHORT], 2),
        ("ID", CODE_FOR_TYPE[DataType.UNSIGNED_INTEGER], 4),
        ("Gold", CODE_FOR_TYPE[DataType.SIGNED_INTEGER], 4),
        ("Rate", CODE_FOR_TYPE[DataType.SINGLE_FLOATING_POINT], 4),
    ]


@pytest.fixture
def all_types_rows() -> List[List[Any]]:
    return [
        ["Sword", "sharp", 255, -128, 65535, -32768, 4294967295, -2147483648, 0.5],
        ["Shield", "", 0, 127, 0, 32767, 0, 2147483647, -1.25],
    ]


@pytest.fixture
def id_model() -> ShnFile:
    """Header 00 1a, one u32 column 'id', rows 42 and 7."""
    schema = Schema((Column("id", DataType.UNSIGNED_INTEGER),))
    return ShnFile(
        crypt_header=bytes([0x00, 0x1A]),
        schema=schema,
        rows=(Row.from_values(schema, [42]), Row.from_values(schema, [7])),
    )


@pytest.fixture
def mixed_model() -> ShnFile:
    """Model with a string, a signed integer and a float column."""
    schema = Schema(
        (
            Column("name", DataType.STRING_FIXED_LEN, 16),
            Column("hp", DataType.SIGNED_SHORT, 2),
            Column("speed", DataType.SINGLE_FLOATING_POINT, 4),
        )
    )
    rows = (
        Row.from_values(schema, ["Slime", -5, 1.0]),
        Row.from_values(schema, ['Fish & "Chips" <3', 300, 0.1]),
    )
    return ShnFile(crypt_header=b"\xff\x0a", schema=schema, rows=rows)
