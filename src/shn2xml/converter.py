"""
Conversion pipeline from SHN to XML.

Runs the steps in a fixed order: resolve the encoding, open the input,
decode, create the output, serialize. Each step either succeeds or raises
and nothing after it runs.
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, Optional, Union

from .encodings import DEFAULT_ENCODING, EncodingRegistry, EncodingStrategy, get_global_registry
from .exporters import XMLExporter
from .model import ShnFile
from .reader import Decoder, ShnReader
from .utils.stats import ConversionStats

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@contextmanager
def open_input(path: Optional[PathLike]) -> Iterator[BinaryIO]:
    """
    Open the input for reading.

    Args:
        path: File to read, or None for standard input (left open on exit)
    """
    if path is None:
        yield sys.stdin.buffer
        return
    with open(path, "rb") as stream:
        yield stream


@contextmanager
def open_output(path: Optional[PathLike]) -> Iterator[BinaryIO]:
    """
    Create the output for writing, truncating an existing file.

    Args:
        path: File to write, or None for standard output (flushed, not closed)
    """
    if path is None:
        try:
            yield sys.stdout.buffer
        finally:
            sys.stdout.buffer.flush()
        return

    # Ensure parent directory exists
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as stream:
        yield stream


def decode(
    stream: BinaryIO, encoding: EncodingStrategy, decoder: Optional[Decoder] = None
) -> ShnFile:
    """Decode ``stream`` with ``decoder`` (the SHN reader by default)."""
    decoder = decoder or ShnReader()
    model = decoder.decode(stream, encoding)
    logger.debug("Decoded %d columns and %d rows", len(model.schema), len(model.rows))
    return model


def convert(
    input_stream: BinaryIO,
    output_stream: BinaryIO,
    encoding: EncodingStrategy,
    decoder: Optional[Decoder] = None,
    options: Optional[Dict[str, Any]] = None,
) -> ConversionStats:
    """
    Decode an SHN stream and write it as XML.

    Args:
        input_stream: Readable binary SHN stream
        output_stream: Writable binary stream for the XML document
        encoding: Strategy for string cells
        decoder: Decoder to use instead of the SHN reader
        options: XML exporter options

    Returns:
        Statistics for the export

    Raises:
        ShnDecodeError: If the input cannot be decoded; nothing is written
        OSError: If writing fails part way
    """
    model = decode(input_stream, encoding, decoder)
    return XMLExporter(output_stream, options).export(model)


def convert_file(
    input_path: Optional[PathLike],
    output_path: Optional[PathLike],
    encoding_name: str = "",
    default_encoding: str = DEFAULT_ENCODING,
    errors: str = "replace",
    decoder: Optional[Decoder] = None,
    registry: Optional[EncodingRegistry] = None,
    options: Optional[Dict[str, Any]] = None,
) -> ConversionStats:
    """
    Convert an SHN file to an XML file.

    Args:
        input_path: SHN file, or None for standard input
        output_path: XML file, or None for standard output
        encoding_name: Encoding label; empty selects ``default_encoding``
        default_encoding: Label used when ``encoding_name`` is empty
        errors: Codec error policy for string cells
        decoder: Decoder to use instead of the SHN reader
        registry: Encoding registry to resolve against
        options: XML exporter options

    Returns:
        Statistics for the export

    Raises:
        UnknownEncodingError: Before any file is touched
        OSError: If the input cannot be opened, the output cannot be
            created or a write fails
        ShnDecodeError: If the input is malformed; the output is not created
    """
    registry = registry or get_global_registry()
    encoding = registry.resolve(encoding_name, default_encoding).with_errors(errors)

    with open_input(input_path) as input_stream:
        model = decode(input_stream, encoding, decoder)

    with open_output(output_path) as output_stream:
        stats = XMLExporter(output_stream, options).export(model)

    logger.info(stats.summary())
    return stats
