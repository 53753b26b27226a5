"""Binary STL reader and writer."""

import io
import struct
from typing import BinaryIO, List, Optional

from loguru import logger

from .errors import ParseError
from .models import Mesh, Triangle
from .numeric import to_float32

# Binary STL format:
# UINT8[80]  - Header
# UINT32     - Number of triangles
#
# foreach triangle
#   REAL32[3] - Normal vector
#   REAL32[3] - Vertex 1
#   REAL32[3] - Vertex 2
#   REAL32[3] - Vertex 3
#   UINT16    - Attribute byte count

HEADER_SIZE = 80
COUNT_OFFSET = HEADER_SIZE
COUNT = struct.Struct("<I")
RECORD = struct.Struct("<12fH")
DATA_OFFSET = HEADER_SIZE + COUNT.size


def read_binary(stream: BinaryIO) -> Mesh:
    """
    Parse a binary STL stream positioned at its first byte.

    The header is ignored and the declared triangle count is trusted.

    Raises:
        ParseError: if the stream ends before the count or before all
            declared triangles are read
    """
    header = stream.read(HEADER_SIZE)
    if len(header) < HEADER_SIZE:
        raise ParseError(f"truncated header: {len(header)} of {HEADER_SIZE} bytes")

    count_data = stream.read(COUNT.size)
    if len(count_data) < COUNT.size:
        raise ParseError("truncated file: missing triangle count")
    num_triangles = COUNT.unpack(count_data)[0]

    triangles: List[Triangle] = []
    for i in range(num_triangles):
        record = stream.read(RECORD.size)
        if len(record) != RECORD.size:
            raise ParseError(
                f"truncated file: triangle {i} of {num_triangles} is incomplete "
                f"({len(record)} of {RECORD.size} bytes)"
            )
        # Attribute byte count is discarded
        triangles.append(Triangle.from_components(RECORD.unpack(record)[:12]))

    if stream.read(1):
        logger.warning(f"Ignoring trailing bytes after {num_triangles} triangles")
    logger.debug(f"Read {num_triangles} triangles from binary STL")
    return Mesh(triangles)


class BinaryStlWriter:
    """
    Writes binary STL triangle by triangle and patches the count at the end.

    The count field holds a zero placeholder until ``finalize`` writes the
    number of records actually added. Used as a context manager, finalize
    runs on every exit path so the count never disagrees with the records.
    Outputs that cannot seek are buffered in memory and flushed on finalize.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.count = 0
        self._seekable = stream.seekable()
        self._target: BinaryIO = stream if self._seekable else io.BytesIO()
        self._start: Optional[int] = None
        self._finalized = False

    def __enter__(self) -> "BinaryStlWriter":
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finalize()
            return
        # Keep the original error; a failed finalize is only logged
        try:
            self.finalize()
        except Exception as e:
            logger.error(f"Could not write triangle count after {exc_type.__name__}: {e}")

    def begin(self) -> None:
        """Write the zero header and the count placeholder."""
        self._start = self._target.tell()
        self._target.write(b"\0" * HEADER_SIZE)
        self._target.write(COUNT.pack(0))

    def add(self, triangle: Triangle) -> None:
        if self._start is None:
            self.begin()
        values = [to_float32(v) for v in triangle.components()]
        self._target.write(RECORD.pack(*values, 0))
        self.count += 1

    def finalize(self) -> int:
        """Write the final triangle count and return it."""
        if self._finalized:
            return self.count
        if self._start is None:
            self.begin()
        self._finalized = True

        if self._seekable:
            end = self.stream.tell()
            self.stream.seek(self._start + COUNT_OFFSET)
            self.stream.write(COUNT.pack(self.count))
            self.stream.seek(end)
        else:
            body = self._target.getvalue()
            self.stream.write(body[:COUNT_OFFSET] + COUNT.pack(self.count) + body[DATA_OFFSET:])

        logger.debug(f"Finalized binary STL with {self.count} triangles")
        return self.count


def write_binary(mesh: Mesh, stream: BinaryIO) -> int:
    """Write a mesh as binary STL and return the number of triangles written."""
    with BinaryStlWriter(stream) as writer:
        for triangle in mesh:
            writer.add(triangle)
    return writer.count
