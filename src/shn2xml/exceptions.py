"""
Exception hierarchy for shn2xml.

Every error raised on purpose by the library derives from Shn2XmlError.
I/O failures on the input or output streams are left as plain OSError.
"""


class Shn2XmlError(Exception):
    """Base class for shn2xml errors."""


class UsageError(Shn2XmlError):
    """Raised when the command line selects inputs or outputs ambiguously."""


class UnknownEncodingError(LookupError, Shn2XmlError):
    """Raised when an encoding name matches no registered encoding."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Encoding not found: '{name}'")
        self.name = name


class ShnDecodeError(ValueError, Shn2XmlError):
    """Raised when the binary input is not a readable SHN file."""


class InvalidCellError(ValueError, Shn2XmlError):
    """Raised when a cell value does not fit its data type."""


class SchemaMismatchError(ValueError, Shn2XmlError):
    """Raised when a row does not line up with the schema."""


class InvalidColumnNameError(ValueError, Shn2XmlError):
    """Raised when a column name cannot be used as an XML attribute name."""


class SerializerRegistryError(Shn2XmlError):
    """Raised when the serializer registry does not cover every data type."""
