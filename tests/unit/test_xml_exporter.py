"""
Test XML exporter functionality.

What this tests:
---------------
1. Exact document layout for known models
2. Attribute order follows schema column order
3. Escaping of markup and invalid characters
4. Column name validation
5. Write failures abort the export

Why this matters:
----------------
- The XML document is the compatibility surface of the tool
- Output must be well-formed for any decoded content
- A failed write must never look like a successful conversion
"""

import io
import re
import xml.etree.ElementTree as ET

import pytest

from shn2xml.exceptions import InvalidColumnNameError
from shn2xml.exporters import BaseExporter, XMLExporter
from shn2xml.exporters.xml import xml_safe
from shn2xml.model import Cell, Column, DataType, Row, Schema, ShnFile


def export_to_bytes(model, options=None):
    output = io.BytesIO()
    stats = XMLExporter(output, options).export(model)
    return output.getvalue(), stats


def attribute_names(element_text):
    return re.findall(r'\s([\w.\-]+)=["\']', element_text)


class FailingStream(io.BytesIO):
    """Byte stream that starts failing once a trigger has been written."""

    def __init__(self, trigger: bytes) -> None:
        super().__init__()
        self.trigger = trigger
        self.armed = False

    def write(self, data):
        if self.armed:
            raise OSError(28, "No space left on device")
        written = super().write(data)
        if self.trigger in self.getvalue():
            self.armed = True
        return written


class TestXMLExporterBasics:
    """Test basic XML exporter properties."""

    def test_inherits_base(self):
        exporter = XMLExporter(io.BytesIO())

        assert isinstance(exporter, BaseExporter)
        assert exporter.pretty is True
        assert exporter.indent == "  "

    def test_requires_output(self):
        with pytest.raises(ValueError, match="output"):
            XMLExporter(None)

    def test_write_row_before_header(self):
        exporter = XMLExporter(io.BytesIO())
        with pytest.raises(RuntimeError, match="write_header"):
            exporter.write_row(Row((Cell(DataType.BYTE, 1),)))

    def test_write_footer_before_header(self):
        with pytest.raises(RuntimeError):
            XMLExporter(io.BytesIO()).write_footer()


class TestDocumentLayout:
    """Test the exact bytes of exported documents."""

    def test_id_model_document(self, id_model):
        """
        Test the reference document for a one-column model.

        What this tests:
        ---------------
        1. XML declaration with utf-8 encoding
        2. schema carries cryptheader="00 1a"
        3. One shncolumn with name="id" type="u32"
        4. Two row elements in order, wrapped in shnfile

        Why this matters:
        ----------------
        - This is the canonical layout downstream tools parse
        - Element and attribute names are fixed
        """
        data, stats = export_to_bytes(id_model)

        assert data.decode("utf-8") == (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            "<shnfile>\n"
            '  <schema cryptheader="00 1a">\n'
            '    <shncolumn name="id" type="u32"/>\n'
            "  </schema>\n"
            '  <row id="42"/>\n'
            '  <row id="7"/>\n'
            "</shnfile>\n"
        )
        assert stats.rows_written == 2
        assert stats.columns == 1
        assert stats.is_complete

    def test_empty_model(self):
        """An empty model yields shnfile with only an empty schema element."""
        data, stats = export_to_bytes(ShnFile())

        assert data.decode("utf-8") == (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            "<shnfile>\n"
            '  <schema cryptheader=""/>\n'
            "</shnfile>\n"
        )
        root = ET.fromstring(data)
        assert [child.tag for child in root] == ["schema"]
        assert len(root.find("schema")) == 0
        assert stats.rows_written == 0

    def test_schema_without_rows(self):
        schema = Schema((Column("a", DataType.BYTE), Column("b", DataType.STRING_ZERO_TERMINATED)))
        data, _ = export_to_bytes(ShnFile(crypt_header=b"\x01", schema=schema))

        root = ET.fromstring(data)
        columns = root.find("schema").findall("shncolumn")
        assert [(c.get("name"), c.get("type")) for c in columns] == [("a", "u8"), ("b", "StringSZ")]
        assert root.findall("row") == []

    def test_compact_output(self, id_model):
        data, _ = export_to_bytes(id_model, {"pretty": False})

        assert data.decode("utf-8") == (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            '<shnfile><schema cryptheader="00 1a"><shncolumn name="id" type="u32"/></schema>'
            '<row id="42"/><row id="7"/></shnfile>\n'
        )

    def test_custom_indent(self, id_model):
        data, _ = export_to_bytes(id_model, {"indent": "\t"})
        assert '\n\t<row id="42"/>' in data.decode("utf-8")
        assert '\n\t\t<shncolumn name="id" type="u32"/>' in data.decode("utf-8")

    def test_mixed_model_values(self, mixed_model):
        """
        Test each column type is rendered through its serializer.

        What this tests:
        ---------------
        1. Strings come back unchanged after parsing
        2. Negative integers keep their sign
        3. Floats use the shortest f32 form
        4. Header bytes are zero padded

        Why this matters:
        ----------------
        - End-to-end check of the formatter and the writer together
        """
        data, _ = export_to_bytes(mixed_model)
        root = ET.fromstring(data)

        assert root.find("schema").get("cryptheader") == "ff 0a"
        types = [c.get("type") for c in root.find("schema")]
        assert types == ["StringFL", "i16", "f32"]

        rows = root.findall("row")
        assert dict(rows[0].attrib) == {"name": "Slime", "hp": "-5", "speed": "1"}
        assert dict(rows[1].attrib) == {"name": 'Fish & "Chips" <3', "hp": "300", "speed": "0.1"}


class TestAttributeOrder:
    """Test that row attributes follow schema order."""

    def test_rows_follow_schema_order(self):
        """
        Test attribute order equals column order, not alphabetical order.

        What this tests:
        ---------------
        1. Columns deliberately out of alphabetical order
        2. Every row lists attributes in schema order
        3. shncolumn attributes are name then type

        Why this matters:
        ----------------
        - Column order is part of the output contract
        - Diffs between conversions stay stable
        """
        names = ["zeta", "alpha", "Mid", "_under", "b2"]
        schema = Schema(tuple(Column(name, DataType.UNSIGNED_SHORT) for name in names))
        rows = tuple(Row.from_values(schema, [i, i + 1, i + 2, i + 3, i + 4]) for i in range(3))
        data, _ = export_to_bytes(ShnFile(schema=schema, rows=rows))

        text = data.decode("utf-8")
        row_lines = [line for line in text.splitlines() if line.strip().startswith("<row")]
        assert len(row_lines) == 3
        for line in row_lines:
            assert attribute_names(line) == names

        column_lines = [line for line in text.splitlines() if "<shncolumn" in line]
        for line in column_lines:
            assert attribute_names(line) == ["name", "type"]

        root = ET.fromstring(data)
        assert list(root.find("row").attrib) == names


class TestEscaping:
    """Test that any decoded string yields well-formed XML."""

    def test_markup_characters(self):
        schema = Schema((Column("text", DataType.STRING_ZERO_TERMINATED),))
        values = ["<b>", "a & b", "'single'", '"double"', "both ' and \"", "tab\tnew\nline\r"]
        rows = tuple(Row.from_values(schema, [value]) for value in values)
        data, _ = export_to_bytes(ShnFile(schema=schema, rows=rows))

        root = ET.fromstring(data)
        assert [row.get("text") for row in root.findall("row")] == values

    def test_invalid_xml_characters_replaced(self):
        """
        Test characters XML 1.0 forbids are replaced with U+FFFD.

        What this tests:
        ---------------
        1. NUL and other control bytes do not reach the output
        2. The document still parses
        3. Surrounding text is kept

        Why this matters:
        ----------------
        - Fixed-length strings may contain garbage control bytes
        - Such characters cannot be escaped in XML 1.0 at all
        """
        schema = Schema((Column("text", DataType.STRING_FIXED_LEN, 8),))
        model = ShnFile(schema=schema, rows=(Row.from_values(schema, ["a\x00b\x07c\x1f"]),))
        data, _ = export_to_bytes(model)

        assert b"\x00" not in data
        assert ET.fromstring(data).find("row").get("text") == "a\ufffdb\ufffdc\ufffd"

    def test_non_ascii_text_is_utf8(self):
        schema = Schema((Column("name", DataType.STRING_FIXED_LEN, 16),))
        model = ShnFile(schema=schema, rows=(Row.from_values(schema, ["검사 ✓"]),))
        data, _ = export_to_bytes(model)

        assert "검사 ✓".encode("utf-8") in data
        assert ET.fromstring(data).find("row").get("name") == "검사 ✓"

    def test_xml_safe_keeps_valid_text(self):
        assert xml_safe("plain \t\n\r text ✓ \U0001f600") == "plain \t\n\r text ✓ \U0001f600"
        assert xml_safe("\ufffe") == "\ufffd"


class TestColumnNames:
    """Test column name validation."""

    @pytest.mark.parametrize("name", ["", "1st", "has space", "a:b", "x<y", "-dash"])
    def test_invalid_names_rejected(self, name):
        """
        Test names that cannot be XML attribute names are rejected.

        What this tests:
        ---------------
        1. Empty, digit-leading, spaced, prefixed and markup names fail
        2. Nothing after the declaration reaches the output

        Why this matters:
        ----------------
        - Column names become attribute names verbatim
        - An invalid name makes every row ill-formed
        """
        schema = Schema((Column(name, DataType.BYTE),))
        output = io.BytesIO()

        with pytest.raises(InvalidColumnNameError):
            XMLExporter(output).export(ShnFile(schema=schema))

        assert b"<row" not in output.getvalue()

    def test_duplicate_names_rejected(self):
        schema = Schema((Column("id", DataType.BYTE), Column("id", DataType.BYTE)))
        with pytest.raises(InvalidColumnNameError, match="more than once"):
            export_to_bytes(ShnFile(schema=schema))

    @pytest.mark.parametrize("name", ["ID", "_x", "a.b", "a-b", "Name2", "été"])
    def test_valid_names_accepted(self, name):
        schema = Schema((Column(name, DataType.BYTE),))
        data, _ = export_to_bytes(ShnFile(schema=schema, rows=(Row.from_values(schema, [1]),)))
        assert ET.fromstring(data).find("row").get(name) == "1"


class TestWriteFailures:
    """Test behaviour when the output stream fails."""

    def test_failure_mid_rows_propagates(self, id_model):
        """
        Test a write failure during row output stops the export.

        What this tests:
        ---------------
        1. The OSError reaches the caller
        2. Rows written before the failure remain in the output
        3. No later row is written

        Why this matters:
        ----------------
        - A full disk must not be reported as success
        - Partial output is expected, silent truncation is not
        """
        output = FailingStream(trigger=b'id="42"')

        with pytest.raises(OSError) as exc_info:
            XMLExporter(output).export(id_model)

        assert exc_info.value.errno == 28
        written = output.getvalue()
        assert b'id="42"' in written
        assert b'id="7"' not in written
        assert b"</shnfile>" not in written

    def test_failure_in_header_propagates(self, id_model):
        output = FailingStream(trigger=b"<?xml")

        with pytest.raises(OSError):
            XMLExporter(output).export(id_model)

        assert b"<row" not in output.getvalue()
