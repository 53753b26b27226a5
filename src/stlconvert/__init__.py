"""
stlconvert: convert STL triangle meshes between ASCII and binary encoding.

The codec works on open streams; the ``stlconvert`` command handles files,
wildcards and output folders.
"""

from .ascii_format import read_ascii, write_ascii
from .binary_format import BinaryStlWriter, read_binary, write_binary
from .converter import convert, read_mesh, write_mesh
from .detect import detect, detect_prefix
from .errors import DetectionError, ParseError, STLConvertError, StlIOError
from .models import ConversionResult, Encoding, Mesh, Triangle, Vec3
from .numeric import format_scientific, parse_scientific

__version__ = "0.1.0"
__all__ = [
    "convert",
    "detect",
    "detect_prefix",
    "read_ascii",
    "write_ascii",
    "read_binary",
    "write_binary",
    "read_mesh",
    "write_mesh",
    "BinaryStlWriter",
    "format_scientific",
    "parse_scientific",
    "ConversionResult",
    "Encoding",
    "Mesh",
    "Triangle",
    "Vec3",
    "STLConvertError",
    "DetectionError",
    "ParseError",
    "StlIOError",
]
