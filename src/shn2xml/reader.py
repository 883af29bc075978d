"""
Binary SHN decoder.

An SHN file is laid out as:

    crypt header    32 opaque bytes
    length          int32, size of the whole file
    payload         length - 36 scrambled bytes

Once descrambled the payload holds a small header (header value, record
count, default record length, column count), the column definitions
(48 byte name, type code, byte length) and then the records, each
prefixed with a u16 length.
"""

import logging
import struct
from typing import BinaryIO, Dict, List, Protocol, Tuple

import numpy as np

from .encodings import EncodingStrategy
from .exceptions import ShnDecodeError
from .model import Cell, Column, DataType, Row, Schema, ShnFile

logger = logging.getLogger(__name__)

CRYPT_HEADER_LENGTH = 32
# Crypt header plus the length field itself.
PREAMBLE_LENGTH = CRYPT_HEADER_LENGTH + 4
COLUMN_NAME_LENGTH = 48

# On-disk type codes; several codes share one data type.
TYPE_CODES: Dict[int, DataType] = {
    1: DataType.BYTE,
    12: DataType.BYTE,
    16: DataType.BYTE,
    2: DataType.UNSIGNED_SHORT,
    3: DataType.UNSIGNED_INTEGER,
    11: DataType.UNSIGNED_INTEGER,
    18: DataType.UNSIGNED_INTEGER,
    27: DataType.UNSIGNED_INTEGER,
    5: DataType.SINGLE_FLOATING_POINT,
    9: DataType.STRING_FIXED_LEN,
    24: DataType.STRING_FIXED_LEN,
    13: DataType.SIGNED_SHORT,
    21: DataType.SIGNED_SHORT,
    20: DataType.SIGNED_BYTE,
    22: DataType.SIGNED_INTEGER,
    26: DataType.STRING_ZERO_TERMINATED,
}

# struct formats for fixed-width numeric types (little-endian).
NUMERIC_FORMATS: Dict[DataType, str] = {
    DataType.BYTE: "<B",
    DataType.SIGNED_BYTE: "<b",
    DataType.UNSIGNED_SHORT: "<H",
    DataType.SIGNED_SHORT: "<h",
    DataType.UNSIGNED_INTEGER: "<I",
    DataType.SIGNED_INTEGER: "<i",
    DataType.SINGLE_FLOATING_POINT: "<f",
}


class Decoder(Protocol):
    """Anything that can turn an SHN byte stream into a ShnFile."""

    def decode(self, stream: BinaryIO, encoding: EncodingStrategy) -> ShnFile:
        ...


def keystream(length: int) -> np.ndarray:
    """
    Build the XOR keystream for a payload of ``length`` bytes.

    The key depends only on the payload length, so scrambling and
    descrambling are the same operation.
    """
    key = np.empty(length, dtype=np.uint8)
    k = length & 0xFF
    for i in range(length - 1, -1, -1):
        key[i] = k
        k = ((i & 0x0F) + 0x55) ^ ((i * 11) & 0xFF) ^ k ^ 0xAA
    return key


def descramble(payload: bytes) -> bytes:
    """XOR a payload with its keystream."""
    data = np.frombuffer(payload, dtype=np.uint8)
    return (data ^ keystream(len(data))).tobytes()


class _PayloadCursor:
    """Sequential reader over the descrambled payload."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read(self, size: int, what: str) -> bytes:
        if size < 0 or size > self.remaining:
            raise ShnDecodeError(
                f"Unexpected end of data reading {what} at offset {self.offset} "
                f"(need {size} bytes, {self.remaining} left)"
            )
        chunk = self.data[self.offset : self.offset + size]
        self.offset += size
        return chunk

    def unpack(self, fmt: str, what: str) -> Tuple:
        return struct.unpack(fmt, self.read(struct.calcsize(fmt), what))

    def read_until_nul(self, what: str) -> bytes:
        end = self.data.find(b"\x00", self.offset)
        if end < 0:
            raise ShnDecodeError(f"Unterminated string reading {what} at offset {self.offset}")
        chunk = self.data[self.offset : end]
        self.offset = end + 1
        return chunk


def _cut_at_nul(raw: bytes) -> bytes:
    end = raw.find(b"\x00")
    return raw if end < 0 else raw[:end]


class ShnReader:
    """Decoder for SHN files."""

    def decode(self, stream: BinaryIO, encoding: EncodingStrategy) -> ShnFile:
        """
        Decode an SHN stream into a ShnFile.

        Args:
            stream: Readable binary stream positioned at the start of the file
            encoding: Strategy used for column names and string cells

        Returns:
            The decoded file

        Raises:
            ShnDecodeError: If the data is truncated or uses an unknown column type
        """
        crypt_header = stream.read(CRYPT_HEADER_LENGTH)
        if len(crypt_header) != CRYPT_HEADER_LENGTH:
            raise ShnDecodeError(
                f"File too short for the crypt header ({len(crypt_header)} bytes)"
            )

        length_field = stream.read(4)
        if len(length_field) != 4:
            raise ShnDecodeError("File too short for the length field")
        (total_length,) = struct.unpack("<i", length_field)

        payload_length = total_length - PREAMBLE_LENGTH
        if payload_length < 0:
            raise ShnDecodeError(f"Invalid file length {total_length}")

        payload = stream.read(payload_length)
        if len(payload) != payload_length:
            raise ShnDecodeError(
                f"Payload truncated: expected {payload_length} bytes, got {len(payload)}"
            )

        cursor = _PayloadCursor(descramble(payload))
        header, record_count, default_record_length, column_count = cursor.unpack(
            "<IIII", "payload header"
        )
        logger.debug(
            "SHN header %#x: %d records, %d columns, default record length %d",
            header,
            record_count,
            column_count,
            default_record_length,
        )

        schema = Schema(tuple(self._read_columns(cursor, column_count, encoding)))
        rows = [self._read_row(cursor, schema, encoding, index) for index in range(record_count)]

        if cursor.remaining:
            logger.debug("Ignoring %d trailing payload bytes", cursor.remaining)

        return ShnFile(crypt_header=crypt_header, schema=schema, rows=tuple(rows))

    @classmethod
    def read_from(cls, stream: BinaryIO, encoding: EncodingStrategy) -> ShnFile:
        """Decode ``stream`` with a fresh reader."""
        return cls().decode(stream, encoding)

    def _read_columns(
        self, cursor: _PayloadCursor, count: int, encoding: EncodingStrategy
    ) -> List[Column]:
        columns = []
        for index in range(count):
            what = f"column {index}"
            raw_name = _cut_at_nul(cursor.read(COLUMN_NAME_LENGTH, what))
            type_code, length = cursor.unpack("<Ii", what)

            data_type = TYPE_CODES.get(type_code)
            if data_type is None:
                raise ShnDecodeError(f"Unknown type code {type_code} for column {index}")

            name = encoding.decode(raw_name).strip() or f"UnkCol{index}"
            columns.append(Column(name=name, data_type=data_type, length=length))
        return columns

    def _read_row(
        self,
        cursor: _PayloadCursor,
        schema: Schema,
        encoding: EncodingStrategy,
        index: int,
    ) -> Row:
        cursor.unpack("<H", f"length of row {index}")

        cells = []
        for column in schema:
            what = f"row {index}, column {column.name!r}"
            if column.data_type is DataType.STRING_FIXED_LEN:
                value = encoding.decode(_cut_at_nul(cursor.read(column.length, what)))
            elif column.data_type is DataType.STRING_ZERO_TERMINATED:
                value = encoding.decode(cursor.read_until_nul(what))
            else:
                (value,) = cursor.unpack(NUMERIC_FORMATS[column.data_type], what)
            cells.append(Cell(column.data_type, value))
        return Row(tuple(cells))
