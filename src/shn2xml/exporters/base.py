"""
Base exporter abstract class.

Defines the interface and common functionality for exporters. Subclasses
implement the format-specific header, row and footer output.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, Optional

from ..model import Row, Schema, ShnFile
from ..utils.stats import ConversionStats

logger = logging.getLogger(__name__)


class BaseExporter(ABC):
    """
    Abstract base class for exporters.

    The exporter writes to a stream it does not own: opening and closing
    the output is the caller's job.
    """

    def __init__(self, output: BinaryIO, options: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize exporter with output configuration.

        Args:
            output: Writable binary stream receiving the document
            options: Format-specific options

        Raises:
            ValueError: If output is None
        """
        if output is None:
            raise ValueError("output cannot be None")

        self.output = output
        self.options = options or {}

    @abstractmethod
    def write_header(self, crypt_header: bytes, schema: Schema) -> None:
        """
        Write the document header and schema block.

        Args:
            crypt_header: Opaque header bytes of the source file
            schema: Column definitions
        """
        pass

    @abstractmethod
    def write_row(self, row: Row) -> None:
        """
        Write a single row.

        Args:
            row: Row whose cells line up with the schema passed to write_header
        """
        pass

    @abstractmethod
    def write_footer(self) -> None:
        """Write closing markup and flush the output."""
        pass

    def export(self, model: ShnFile) -> ConversionStats:
        """
        Export a decoded file.

        This is the main entry point that orchestrates the export process:
        1. Writes header and schema
        2. Writes all rows in order
        3. Writes footer

        Args:
            model: The decoded file

        Returns:
            Statistics for the export

        Raises:
            OSError: If writing to the output fails; output written so far is kept
        """
        stats = ConversionStats(columns=len(model.schema))

        self.write_header(model.crypt_header, model.schema)

        for row in model.rows:
            self.write_row(row)
            stats.rows_written += 1

        self.write_footer()
        stats.finish()

        logger.debug("Exported %d rows with %d columns", stats.rows_written, stats.columns)
        return stats
