"""
Triangle mesh container and builder.

RevolutionMesh is an immutable snapshot: a vertex position buffer
(3 floats per vertex) and a triangle index buffer (3 indices per
triangle) with counter-clockwise winding seen from outside the solid.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevolutionMesh:
    """Immutable triangle mesh.

    Attributes:
        positions: (N, 3) float64 vertex coordinates, axis of revolution is x
        indices: (M, 3) int32 vertex indices per triangle
    """
    positions: NDArray[np.float64] = field(repr=False)
    indices: NDArray[np.int32] = field(repr=False)

    def __post_init__(self):
        positions = np.array(self.positions, dtype=np.float64).reshape(-1, 3)
        indices = np.array(self.indices, dtype=np.int32).reshape(-1, 3)
        positions.setflags(write=False)
        indices.setflags(write=False)
        object.__setattr__(self, 'positions', positions)
        object.__setattr__(self, 'indices', indices)

    @classmethod
    def empty(cls) -> 'RevolutionMesh':
        return cls(np.zeros((0, 3)), np.zeros((0, 3), dtype=np.int32))

    @classmethod
    def merge(cls, meshes: Iterable['RevolutionMesh']) -> 'RevolutionMesh':
        """Concatenate meshes without sharing any vertices."""
        positions: List[NDArray[np.float64]] = []
        indices: List[NDArray[np.int32]] = []
        offset = 0
        for mesh in meshes:
            positions.append(mesh.positions)
            indices.append(mesh.indices + offset)
            offset += mesh.n_vertices
        if not positions:
            return cls.empty()
        return cls(np.vstack(positions), np.vstack(indices))

    @property
    def n_vertices(self) -> int:
        return len(self.positions)

    @property
    def n_triangles(self) -> int:
        return len(self.indices)

    @property
    def is_empty(self) -> bool:
        return self.n_triangles == 0

    def position_buffer(self) -> NDArray[np.float32]:
        """Flat float32 buffer: x0, y0, z0, x1, y1, z1, ..."""
        return self.positions.astype(np.float32).ravel()

    def index_buffer(self) -> NDArray[np.uint32]:
        """Flat uint32 buffer: three indices per triangle."""
        return self.indices.astype(np.uint32).ravel()

    def triangles(self) -> NDArray[np.float64]:
        """(M, 3, 3) array of triangle corner coordinates."""
        return self.positions[self.indices]

    def face_normals(self) -> NDArray[np.float64]:
        """Unit normal per triangle (zero for degenerate triangles)."""
        tri = self.triangles()
        cross = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
        lengths = np.linalg.norm(cross, axis=1, keepdims=True)
        lengths = np.where(lengths < 1e-12, 1.0, lengths)
        return cross / lengths

    def vertex_normals(self) -> NDArray[np.float64]:
        """Area-weighted unit normal per vertex.

        Each triangle contributes its unnormalized cross product to its
        three corners, so larger faces weigh more.
        """
        normals = np.zeros_like(self.positions)
        if self.is_empty:
            return normals
        tri = self.triangles()
        cross = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
        for corner in range(3):
            np.add.at(normals, self.indices[:, corner], cross)
        lengths = np.linalg.norm(normals, axis=1, keepdims=True)
        lengths = np.where(lengths < 1e-12, 1.0, lengths)
        return normals / lengths


class MeshBuilder:
    """Accumulates vertices and triangles, then freezes a RevolutionMesh.

    Triangles that reference the same vertex twice are dropped on
    insertion; vertices no triangle references are dropped in build().
    """

    def __init__(self):
        self._positions: List[NDArray[np.float64]] = []
        self._triangles: List[NDArray[np.int64]] = []
        self._count = 0

    @property
    def n_vertices(self) -> int:
        return self._count

    def add_vertices(self, points: NDArray[np.float64]) -> NDArray[np.int64]:
        """Append (K, 3) points and return their indices."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        start = self._count
        self._positions.append(points)
        self._count += len(points)
        return np.arange(start, self._count, dtype=np.int64)

    def add_vertex(self, point) -> int:
        return int(self.add_vertices(np.asarray(point, dtype=np.float64))[0])

    def add_triangles(self, triangles: NDArray[np.int64]) -> int:
        """Append (K, 3) index triples, skipping index-degenerate ones.

        Returns:
            Number of triangles kept
        """
        tri = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
        keep = (
            (tri[:, 0] != tri[:, 1])
            & (tri[:, 1] != tri[:, 2])
            & (tri[:, 0] != tri[:, 2])
        )
        tri = tri[keep]
        if len(tri):
            self._triangles.append(tri)
        return len(tri)

    def build(self) -> RevolutionMesh:
        """Freeze into a RevolutionMesh, compacting unused vertices."""
        if not self._triangles:
            return RevolutionMesh.empty()

        positions = np.vstack(self._positions)
        triangles = np.vstack(self._triangles)

        used = np.zeros(len(positions), dtype=bool)
        used[triangles.ravel()] = True
        remap = np.cumsum(used) - 1
        dropped = int(len(positions) - used.sum())
        if dropped:
            logger.debug("Dropping %d unreferenced vertices", dropped)

        return RevolutionMesh(positions[used], remap[triangles])
