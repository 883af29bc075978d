"""Type tokens written to the ``type`` attribute of schema columns."""

from typing import Dict

from ..model import DataType

TYPE_TOKENS: Dict[DataType, str] = {
    DataType.STRING_FIXED_LEN: "StringFL",
    DataType.STRING_ZERO_TERMINATED: "StringSZ",
    DataType.BYTE: "u8",
    DataType.SIGNED_BYTE: "i8",
    DataType.UNSIGNED_SHORT: "u16",
    DataType.SIGNED_SHORT: "i16",
    DataType.UNSIGNED_INTEGER: "u32",
    DataType.SIGNED_INTEGER: "i32",
    DataType.SINGLE_FLOATING_POINT: "f32",
}

_TOKEN_TYPES: Dict[str, DataType] = {token: data_type for data_type, token in TYPE_TOKENS.items()}


def type_to_str(data_type: DataType) -> str:
    """Return the type token for a data type."""
    return TYPE_TOKENS[data_type]


def str_to_type(token: str) -> DataType:
    """
    Return the data type for a type token.

    Raises:
        KeyError: If the token is not one of TYPE_TOKENS
    """
    return _TOKEN_TYPES[token]
