"""
XML exporter implementation.

Writes a decoded SHN file as a ``shnfile`` document: a ``schema`` block
with one ``shncolumn`` per column, then one empty ``row`` element per
record whose attributes are the cell values in column order.
"""

import re
from typing import Any, BinaryIO, Dict, Optional, Set, Tuple
from xml.sax.saxutils import XMLGenerator

from ..exceptions import InvalidColumnNameError
from ..model import Column, Row, Schema
from ..serializers import bytes_to_hex, get_global_registry, type_to_str
from .base import BaseExporter

ROOT_ELEMENT = "shnfile"
SCHEMA_ELEMENT = "schema"
COLUMN_ELEMENT = "shncolumn"
ROW_ELEMENT = "row"

_NAME_START_CHARS = (
    "A-Z_a-z"
    "\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u02ff\u0370-\u037d\u037f-\u1fff"
    "\u200c-\u200d\u2070-\u218f\u2c00-\u2fef\u3001-\ud7ff\uf900-\ufdcf"
    "\ufdf0-\ufffd\U00010000-\U000effff"
)
_NAME_CHARS = _NAME_START_CHARS + "\\-.0-9\u00b7\u0300-\u036f\u203f-\u2040"

# Attribute names: XML names without a colon, so no namespace prefix is implied.
XML_NAME = re.compile(f"[{_NAME_START_CHARS}][{_NAME_CHARS}]*")

# Characters XML 1.0 does not allow anywhere in a document, escaped or not.
XML_INVALID_CHARS = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_safe(text: str) -> str:
    """Replace characters that XML 1.0 cannot carry with U+FFFD."""
    return XML_INVALID_CHARS.sub("\ufffd", text)


class XMLExporter(BaseExporter):
    """
    XML format exporter.

    Attribute values are escaped by the SAX generator; characters XML
    cannot represent at all are replaced before they reach it.
    """

    def __init__(self, output: BinaryIO, options: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize XML exporter with formatting options.

        Args:
            output: Writable binary stream
            options: XML-specific options:
                - pretty: Put every element on its own indented line (default: True)
                - indent: Indentation unit when pretty (default: two spaces)
        """
        super().__init__(output, options)

        self.pretty = self.options.get("pretty", True)
        self.indent = self.options.get("indent", "  ")

        self._generator: Optional[XMLGenerator] = None
        self._column_names: Tuple[str, ...] = ()
        self._registry = get_global_registry()

    def _newline(self, depth: int) -> None:
        if self.pretty and self._generator:
            self._generator.ignorableWhitespace("\n" + self.indent * depth)

    def _empty_element(self, name: str, attributes: Dict[str, str], depth: int) -> None:
        if not self._generator:
            raise RuntimeError("write_header must be called before writing elements")
        self._newline(depth)
        self._generator.startElement(name, attributes)
        self._generator.endElement(name)

    @staticmethod
    def _check_column_names(schema: Schema) -> None:
        """Raise InvalidColumnNameError for names unusable as attribute names."""
        seen: Set[str] = set()
        for column in schema:
            if not XML_NAME.fullmatch(column.name):
                raise InvalidColumnNameError(
                    f"Column name {column.name!r} is not a valid XML attribute name"
                )
            if column.name in seen:
                raise InvalidColumnNameError(f"Column name {column.name!r} appears more than once")
            seen.add(column.name)

    def write_header(self, crypt_header: bytes, schema: Schema) -> None:
        """
        Write the XML declaration, the root start-tag and the schema block.

        Args:
            crypt_header: Header bytes, written as hex in ``cryptheader``
            schema: Column definitions

        Raises:
            InvalidColumnNameError: If a column name would make the rows ill-formed
        """
        self._check_column_names(schema)
        self._column_names = schema.names

        self._generator = XMLGenerator(self.output, encoding="utf-8", short_empty_elements=True)
        self._generator.startDocument()
        self._generator.startElement(ROOT_ELEMENT, {})

        self._newline(1)
        self._generator.startElement(SCHEMA_ELEMENT, {"cryptheader": bytes_to_hex(crypt_header)})
        for column in schema:
            self.write_column(column)
        if len(schema):
            self._newline(1)
        self._generator.endElement(SCHEMA_ELEMENT)

    def write_column(self, column: Column) -> None:
        """Write one ``shncolumn`` element."""
        self._empty_element(
            COLUMN_ELEMENT,
            {"name": column.name, "type": type_to_str(column.data_type)},
            depth=2,
        )

    def write_row(self, row: Row) -> None:
        """
        Write a single ``row`` element.

        Args:
            row: Row whose cells line up with the schema
        """
        if not self._generator:
            raise RuntimeError("write_header must be called before write_row")

        attributes = {
            name: xml_safe(self._registry.serialize(cell))
            for name, cell in zip(self._column_names, row)
        }
        self._empty_element(ROW_ELEMENT, attributes, depth=1)

    def write_footer(self) -> None:
        """Close the root element and flush the output."""
        if not self._generator:
            raise RuntimeError("write_header must be called before write_footer")

        self._newline(0)
        self._generator.endElement(ROOT_ELEMENT)
        self._generator.ignorableWhitespace("\n")
        self._generator.endDocument()
