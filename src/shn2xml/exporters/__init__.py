"""
Exporters for decoded SHN files.

Provides the XML exporter used by the converter, on top of a base class
that drives header, row and footer output.
"""

from .base import BaseExporter
from .xml import XMLExporter

__all__ = ["BaseExporter", "XMLExporter"]
