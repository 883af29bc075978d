"""
Cell serializers for SHN data types.

Maps every column data type to its canonical text form, and provides the
header and type-name renderings used in the schema block.
"""

from .base import TypeSerializer
from .basic_types import bytes_to_hex
from .registry import (
    SerializerRegistry,
    format_cell,
    get_default_registry,
    get_global_registry,
)
from .type_names import TYPE_TOKENS, str_to_type, type_to_str

__all__ = [
    "TypeSerializer",
    "SerializerRegistry",
    "TYPE_TOKENS",
    "bytes_to_hex",
    "format_cell",
    "get_default_registry",
    "get_global_registry",
    "str_to_type",
    "type_to_str",
]
