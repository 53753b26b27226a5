# ============================================================================
# conftest.py -- Shared fixtures for the stlconvert test suite
# ============================================================================
#
# Provides:
#   1. sys.path setup so "import stlconvert" works without installing
#   2. Small reference meshes and their expected encodings
#   3. Settings and logger reset between tests
# ============================================================================

import io
import struct
import sys
from pathlib import Path

import pytest
from loguru import logger

SRC_ROOT = Path(__file__).resolve().parent.parent / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from stlconvert.config import reset_settings  # noqa: E402
from stlconvert.models import Mesh, Triangle, Vec3  # noqa: E402


ONE_TRIANGLE_ASCII = (
    "solid \n"
    "  facet normal 0.000000E+00 0.000000E+00 1.000000E+00\n"
    "    outer loop\n"
    "      vertex 0.000000E+00 0.000000E+00 0.000000E+00\n"
    "      vertex 1.000000E+00 0.000000E+00 0.000000E+00\n"
    "      vertex 0.000000E+00 1.000000E+00 0.000000E+00\n"
    "    endloop\n"
    "  endfacet\n"
    "endsolid \n"
)

EMPTY_ASCII = "solid \nendsolid \n"


def make_triangle(offset: float = 0.0) -> Triangle:
    return Triangle(
        Vec3(0.0, 0.0, 1.0),
        Vec3(offset, 0.0, 0.0),
        Vec3(offset + 1.0, 0.0, 0.0),
        Vec3(offset, 1.0, 0.0),
    )


def binary_stl(triangles, header: bytes = b"\0" * 80, count=None) -> bytes:
    """Build binary STL bytes by hand, independent of the writer."""
    data = header.ljust(80, b"\0")[:80]
    data += struct.pack("<I", len(triangles) if count is None else count)
    for triangle in triangles:
        data += struct.pack("<12fH", *triangle.components(), 0)
    return data


class ChunkedRaw(io.RawIOBase):
    """Unseekable raw stream that hands out a few bytes per read, like a pipe."""

    def __init__(self, data: bytes, chunk: int = 2):
        self._data = data
        self._pos = 0
        self._chunk = chunk

    def readable(self):
        return True

    def readinto(self, buffer):
        piece = self._data[self._pos:self._pos + min(self._chunk, len(buffer))]
        buffer[:len(piece)] = piece
        self._pos += len(piece)
        return len(piece)


@pytest.fixture
def one_triangle_mesh() -> Mesh:
    return Mesh([make_triangle()])


@pytest.fixture
def sample_mesh() -> Mesh:
    return Mesh([
        Triangle(Vec3(0.0, 0.0, -1.0), Vec3(0.1, 0.2, 0.3), Vec3(-1.5, 2.25, 1e-3), Vec3(123.456, -7.0, 0.0)),
        make_triangle(2.0),
        Triangle(Vec3(1.0, 0.0, 0.0), Vec3(1e5, -1e-5, 3.0), Vec3(4.0, 5.0, 6.0), Vec3(7.0, 8.0, 9.0)),
    ])


@pytest.fixture(autouse=True)
def clean_state():
    reset_settings()
    yield
    reset_settings()
    logger.remove()
