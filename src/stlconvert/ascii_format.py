"""ASCII STL reader and writer."""

import io
import re
from typing import IO, Iterator, List, Optional, Union

from loguru import logger

from .errors import ParseError
from .models import Mesh, Triangle, Vec3
from .numeric import format_scientific, parse_scientific

# ASCII STL format:
# solid name(optional)
#
# [foreach triangle]
#   facet normal ni nj nk
#     outer loop
#       vertex v1x v1y v1z
#       vertex v2x v2y v2z
#       vertex v3x v3y v3z
#     endloop
#   endfacet
# endsolid name(optional)

SOLID = "solid"
END_SOLID = "endsolid"
FACET_NORMAL = "facet normal"
VERTEX = "vertex"

_MARKERS = {
    FACET_NORMAL: re.compile(r"facet\s+normal"),
    VERTEX: re.compile(r"vertex"),
}

Line = Union[str, bytes]


class _LineReader:
    """Yields non-blank lines and tracks the current line number."""

    def __init__(self, stream: IO):
        self._lines: Iterator[Line] = iter(stream)
        self.number = 0

    def next_line(self) -> Optional[str]:
        for raw in self._lines:
            self.number += 1
            line = raw.decode("latin-1") if isinstance(raw, bytes) else raw
            if line.strip():
                return line
        return None

    def expect(self, what: str) -> str:
        line = self.next_line()
        if line is None:
            raise ParseError(f"unexpected end of file, expected '{what}'", self.number)
        return line


def _parse_vec3(line: str, marker: str, number: int) -> Vec3:
    tokens = _MARKERS[marker].sub("", line, count=1).split()
    if len(tokens) != 3:
        raise ParseError(
            f"expected 3 numbers after '{marker}', got {len(tokens)}: {line.strip()!r}",
            number,
        )
    try:
        return Vec3(*(parse_scientific(token) for token in tokens))
    except ValueError as e:
        raise ParseError(str(e), number) from e


def _skip_structural(reader: _LineReader, what: str) -> None:
    # Text of 'outer loop', 'endloop' and 'endfacet' lines is not checked
    line = reader.expect(what)
    if END_SOLID in line:
        raise ParseError(f"expected '{what}', found '{END_SOLID}' inside a facet", reader.number)


def _read_facet(reader: _LineReader, normal_line: str) -> Triangle:
    normal = _parse_vec3(normal_line, FACET_NORMAL, reader.number)
    _skip_structural(reader, "outer loop")
    vertices = []
    for _ in range(3):
        line = reader.expect(VERTEX)
        if END_SOLID in line:
            raise ParseError(f"expected '{VERTEX}', found '{END_SOLID}' inside a facet", reader.number)
        vertices.append(_parse_vec3(line, VERTEX, reader.number))
    _skip_structural(reader, "endloop")
    _skip_structural(reader, "endfacet")
    return Triangle(normal, *vertices)


def read_ascii(stream: IO) -> Mesh:
    """
    Parse an ASCII STL stream positioned at its ``solid`` line.

    Accepts text or binary streams. Several concatenated solids are read
    into one mesh in file order.

    Raises:
        ParseError: on a missing header, bad numbers or a truncated facet
    """
    reader = _LineReader(stream)
    header = reader.next_line()
    if header is None or not header.lstrip().startswith(SOLID):
        raise ParseError(f"missing '{SOLID}' header", max(reader.number, 1))

    triangles: List[Triangle] = []
    in_solid = True
    while True:
        line = reader.next_line()
        if line is None:
            break
        if END_SOLID in line:
            in_solid = False
            continue
        if not in_solid and line.lstrip().startswith(SOLID):
            in_solid = True
            continue
        triangles.append(_read_facet(reader, line))

    if in_solid:
        logger.warning(f"ASCII STL ended without '{END_SOLID}' after line {reader.number}")
    logger.debug(f"Read {len(triangles)} triangles from ASCII STL")
    return Mesh(triangles)


def _vec3_text(vec: Vec3) -> str:
    return " ".join(format_scientific(c) for c in vec)


def format_facet(triangle: Triangle) -> str:
    """Render one triangle as an indented facet block."""
    return (
        f"  facet normal {_vec3_text(triangle.normal)}\n"
        f"    outer loop\n"
        f"      vertex {_vec3_text(triangle.vertex_a)}\n"
        f"      vertex {_vec3_text(triangle.vertex_b)}\n"
        f"      vertex {_vec3_text(triangle.vertex_c)}\n"
        f"    endloop\n"
        f"  endfacet\n"
    )


def write_ascii(mesh: Mesh, stream: IO) -> int:
    """Write a mesh as ASCII STL and return the number of triangles written."""
    if isinstance(stream, io.TextIOBase):
        write = stream.write
    else:
        def write(text: str) -> None:
            stream.write(text.encode("ascii"))

    write(f"{SOLID} \n")
    count = 0
    for triangle in mesh:
        write(format_facet(triangle))
        count += 1
    write(f"{END_SOLID} \n")

    logger.debug(f"Wrote {count} triangles as ASCII STL")
    return count
