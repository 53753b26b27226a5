"""Encoding detection by first-line prefix."""

from typing import BinaryIO

from loguru import logger

from .errors import DetectionError
from .models import Encoding

ASCII_MARKER = b"solid"


def detect_prefix(data: bytes) -> Encoding:
    """
    Classify the first bytes of a stream.

    A stream starting with ``solid`` is ASCII, anything else is binary. This
    is only a heuristic: a binary header that happens to begin with ``solid``
    is reported as ASCII.
    """
    if not data:
        raise DetectionError("stream is empty, nothing to classify")
    if data.startswith(ASCII_MARKER):
        return Encoding.ASCII
    return Encoding.BINARY


def detect(stream: BinaryIO) -> Encoding:
    """Detect the encoding of a binary stream without consuming it."""
    size = len(ASCII_MARKER)
    if stream.seekable():
        position = stream.tell()
        data = stream.read(size)
        stream.seek(position)
    elif hasattr(stream, "peek"):
        data = stream.peek(size)[:size]
        if 0 < len(data) < size:
            # peek cannot wait for more input without consuming it
            raise DetectionError(
                f"only {len(data)} byte(s) available to peek, read the stream into a buffer first"
            )
    else:
        raise DetectionError("stream can be neither rewound nor peeked")

    encoding = detect_prefix(data)
    logger.debug(f"Detected {encoding.value} encoding")
    return encoding
