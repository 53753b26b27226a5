"""Triangle mesh model shared by the parsers and writers."""

from enum import Enum
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np
from pydantic import BaseModel, Field


class Encoding(str, Enum):
    """Serialization form of an STL stream."""
    ASCII = "ascii"
    BINARY = "binary"

    @property
    def opposite(self) -> "Encoding":
        """The encoding a file of this encoding is converted into."""
        return Encoding.BINARY if self is Encoding.ASCII else Encoding.ASCII


class Vec3(NamedTuple):
    """Three single-precision components."""
    x: float
    y: float
    z: float


class Triangle(NamedTuple):
    """One facet: a normal and three vertices in winding order."""
    normal: Vec3
    vertex_a: Vec3
    vertex_b: Vec3
    vertex_c: Vec3

    @property
    def vertices(self) -> Tuple[Vec3, Vec3, Vec3]:
        return (self.vertex_a, self.vertex_b, self.vertex_c)

    def components(self) -> Tuple[float, ...]:
        """The 12 floats in file order: normal, A, B, C."""
        return (*self.normal, *self.vertex_a, *self.vertex_b, *self.vertex_c)

    @classmethod
    def from_components(cls, values: Iterable[float]) -> "Triangle":
        values = tuple(values)
        if len(values) != 12:
            raise ValueError(f"Triangle needs 12 components, got {len(values)}")
        return cls(
            Vec3(*values[0:3]),
            Vec3(*values[3:6]),
            Vec3(*values[6:9]),
            Vec3(*values[9:12]),
        )


class Mesh:
    """Ordered triangles of one STL model, in file order."""

    def __init__(self, triangles: Optional[Iterable[Triangle]] = None):
        self._triangles: Tuple[Triangle, ...] = tuple(triangles or ())

    def __len__(self) -> int:
        return len(self._triangles)

    def __iter__(self) -> Iterator[Triangle]:
        return iter(self._triangles)

    def __getitem__(self, index: int) -> Triangle:
        return self._triangles[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mesh):
            return NotImplemented
        return self._triangles == other._triangles

    def __repr__(self) -> str:
        return f"Mesh({len(self)} triangles)"

    @property
    def triangles(self) -> List[Triangle]:
        return list(self._triangles)

    def normals(self) -> np.ndarray:
        """Normals as an (N, 3) float32 array."""
        return np.array([t.normal for t in self._triangles], dtype=np.float32).reshape(-1, 3)

    def vertices(self) -> np.ndarray:
        """Vertices as an (N, 3, 3) float32 array."""
        return np.array([t.vertices for t in self._triangles], dtype=np.float32).reshape(-1, 3, 3)

    def bounds(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """Axis-aligned bounding box (min, max), or None for an empty mesh."""
        if not self._triangles:
            return None
        points = self.vertices().reshape(-1, 3)
        return points.min(axis=0), points.max(axis=0)


class ConversionResult(BaseModel):
    """Outcome of converting one stream."""
    source_encoding: Encoding = Field(..., description="Encoding detected on the input")
    target_encoding: Encoding = Field(..., description="Encoding written to the output")
    triangle_count: int = Field(..., ge=0, description="Number of triangles transcoded")
