"""shn2xml - Convert SHN binary tables to XML."""

from importlib.metadata import PackageNotFoundError, version

from .converter import convert, convert_file
from .encodings import DEFAULT_ENCODING, EncodingRegistry, EncodingStrategy
from .exceptions import (
    InvalidCellError,
    InvalidColumnNameError,
    SchemaMismatchError,
    SerializerRegistryError,
    Shn2XmlError,
    ShnDecodeError,
    UnknownEncodingError,
    UsageError,
)
from .exporters import BaseExporter, XMLExporter
from .model import Cell, Column, DataType, Row, Schema, ShnFile
from .reader import Decoder, ShnReader
from .serializers import bytes_to_hex, format_cell, type_to_str
from .utils.stats import ConversionStats

try:
    __version__ = version("shn2xml")
except PackageNotFoundError:
    # Package is not installed
    __version__ = "0.0.0+unknown"


__all__ = [
    "BaseExporter",
    "Cell",
    "Column",
    "ConversionStats",
    "DEFAULT_ENCODING",
    "DataType",
    "Decoder",
    "EncodingRegistry",
    "EncodingStrategy",
    "InvalidCellError",
    "InvalidColumnNameError",
    "Row",
    "Schema",
    "SchemaMismatchError",
    "SerializerRegistryError",
    "Shn2XmlError",
    "ShnDecodeError",
    "ShnFile",
    "ShnReader",
    "UnknownEncodingError",
    "UsageError",
    "XMLExporter",
    "bytes_to_hex",
    "convert",
    "convert_file",
    "format_cell",
    "type_to_str",
    "__version__",
]
