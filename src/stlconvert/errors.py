"""Exceptions raised by the STL codec."""

from typing import Optional


class STLConvertError(Exception):
    """Base exception for STL conversion errors."""
    pass


class DetectionError(STLConvertError):
    """Raised when a stream has no bytes to classify."""
    pass


class ParseError(STLConvertError):
    """Raised for malformed ASCII, truncated binary data or bad numbers."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class StlIOError(STLConvertError):
    """Raised when the underlying stream fails to read, write or seek."""
    pass
