"""Single-precision number formatting and parsing for the ASCII encoding."""

import re

import numpy as np

_NUMBER = re.compile(
    r"[+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def to_float32(value: float) -> float:
    """Round a float to the nearest float32; out-of-range values become +/-inf."""
    with np.errstate(over="ignore"):
        return float(np.float32(value))


def format_scientific(value: float) -> str:
    """Format a value as %E scientific notation, e.g. 1.000000E+00."""
    return "%E" % value


def parse_scientific(text: str) -> float:
    """
    Parse decimal or scientific notation into a float32-rounded value.

    Raises:
        ValueError: if the text is not a number
    """
    token = text.strip()
    if not _NUMBER.fullmatch(token):
        raise ValueError(f"invalid number: {text!r}")
    return to_float32(float(token))
