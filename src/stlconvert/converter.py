"""Detect-parse-write pipeline for one STL stream."""

import io
from typing import BinaryIO

from loguru import logger

from .ascii_format import read_ascii, write_ascii
from .binary_format import read_binary, write_binary
from .detect import detect
from .errors import StlIOError
from .models import ConversionResult, Encoding, Mesh


def read_mesh(stream: BinaryIO, encoding: Encoding) -> Mesh:
    """Parse a stream with the reader for the given encoding."""
    if encoding is Encoding.ASCII:
        return read_ascii(stream)
    return read_binary(stream)


def write_mesh(mesh: Mesh, stream: BinaryIO, encoding: Encoding) -> int:
    """Serialize a mesh with the writer for the given encoding."""
    if encoding is Encoding.ASCII:
        return write_ascii(mesh, stream)
    return write_binary(mesh, stream)


def convert(input_stream: BinaryIO, output_stream: BinaryIO) -> ConversionResult:
    """
    Convert an STL stream into the opposite encoding.

    Both streams are binary and are left open. Stream failures are raised
    as StlIOError; detection and parse errors propagate unchanged.
    Inputs that cannot seek, such as pipes, are read into memory first.
    """
    try:
        if not input_stream.seekable():
            input_stream = io.BytesIO(input_stream.read())
        source = detect(input_stream)
        target = source.opposite
        mesh = read_mesh(input_stream, source)
        count = write_mesh(mesh, output_stream, target)
    except OSError as e:
        raise StlIOError(f"stream error during conversion: {e}") from e

    logger.debug(f"Converted {count} triangles from {source.value} to {target.value}")
    return ConversionResult(source_encoding=source, target_encoding=target, triangle_count=count)
