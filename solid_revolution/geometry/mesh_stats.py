"""
Mesh statistics for generated solids.

Provides:
- Axis-aligned bounding box
- Surface area and enclosed (signed) volume
- Edge count, watertightness and Euler characteristic

The enclosed volume of a closed mesh with outward winding is positive and
converges to the quadrature volume as the resolution grows, which makes
it a cross-check for both the winding and the quadrature engine.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from solid_revolution.geometry.mesh import RevolutionMesh
from solid_revolution.logging_config import timed

logger = logging.getLogger(__name__)


@dataclass
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        min_point: Minimum corner (x_min, y_min, z_min)
        max_point: Maximum corner (x_max, y_max, z_max)
    """
    min_point: NDArray[np.float64]
    max_point: NDArray[np.float64]

    @property
    def dimensions(self) -> NDArray[np.float64]:
        """Box extent along x, y and z."""
        return self.max_point - self.min_point

    @property
    def center(self) -> NDArray[np.float64]:
        return (self.min_point + self.max_point) / 2

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'min': self.min_point.tolist(),
            'max': self.max_point.tolist(),
            'dimensions': self.dimensions.tolist(),
            'center': self.center.tolist(),
        }


@dataclass
class MeshStatistics:
    """Summary of a generated mesh.

    Attributes:
        n_vertices: Number of vertices
        n_faces: Number of triangles
        n_edges: Number of unique edges
        bbox: Axis-aligned bounding box
        surface_area: Total triangle area
        volume: Signed enclosed volume (negative if winding is inverted)
        is_watertight: True if every edge has exactly two faces
        euler_characteristic: V - E + F
    """
    n_vertices: int
    n_faces: int
    n_edges: int
    bbox: BoundingBox
    surface_area: float
    volume: float
    is_watertight: bool = False
    euler_characteristic: int = 0
    face_areas: Optional[NDArray[np.float64]] = field(default=None, repr=False)

    def summary(self) -> str:
        """Generate human-readable summary."""
        dims = self.bbox.dimensions
        lines = [
            "Mesh Statistics",
            "=" * 40,
            f"Vertices:     {self.n_vertices:,}",
            f"Faces:        {self.n_faces:,}",
            f"Edges:        {self.n_edges:,}",
            "",
            f"Extent:       {dims[0]:.3f} x {dims[1]:.3f} x {dims[2]:.3f}",
            f"Surface area: {self.surface_area:.4f}",
            f"Mesh volume:  {self.volume:.4f}",
            f"Watertight:   {'Yes' if self.is_watertight else 'No'}",
            f"Euler char:   {self.euler_characteristic}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'n_vertices': self.n_vertices,
            'n_faces': self.n_faces,
            'n_edges': self.n_edges,
            'bbox': self.bbox.to_dict(),
            'surface_area': self.surface_area,
            'volume': self.volume,
            'is_watertight': self.is_watertight,
            'euler_characteristic': self.euler_characteristic,
        }


def calculate_bounding_box(vertices: NDArray[np.float64]) -> BoundingBox:
    """Axis-aligned bounding box of an (N, 3) vertex array."""
    if len(vertices) == 0:
        return BoundingBox(min_point=np.zeros(3), max_point=np.zeros(3))
    return BoundingBox(
        min_point=np.min(vertices, axis=0),
        max_point=np.max(vertices, axis=0),
    )


def calculate_face_areas(vertices: NDArray[np.float64],
                         faces: NDArray[np.int32]) -> NDArray[np.float64]:
    """Area of each triangle: 0.5 * |(v1 - v0) x (v2 - v0)|."""
    if len(faces) == 0:
        return np.array([], dtype=np.float64)
    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    return 0.5 * np.linalg.norm(np.cross(v1 - v0, v2 - v0), axis=1)


def calculate_volume(vertices: NDArray[np.float64],
                     faces: NDArray[np.int32]) -> float:
    """Signed enclosed volume by the divergence theorem.

    Formula: V = (1/6) * sum(v0 . (v1 x v2))
    """
    if len(faces) == 0:
        return 0.0
    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    return float(np.sum(v0 * np.cross(v1, v2)) / 6.0)


def _edge_face_counts(faces: NDArray[np.int32]) -> NDArray[np.int64]:
    """Number of faces per unique undirected edge."""
    edges = np.vstack([
        np.sort(np.stack([faces[:, i], faces[:, (i + 1) % 3]], axis=1), axis=1)
        for i in range(3)
    ])
    _, counts = np.unique(edges, axis=0, return_counts=True)
    return counts


def count_edges(faces: NDArray[np.int32]) -> int:
    """Number of unique undirected edges."""
    if len(faces) == 0:
        return 0
    return len(_edge_face_counts(faces))


@timed(operation="Mesh statistics")
def calculate_mesh_statistics(mesh: RevolutionMesh) -> MeshStatistics:
    """Calculate statistics of a RevolutionMesh.

    Example:
        >>> stats = calculate_mesh_statistics(result.mesh)
        >>> print(stats.summary())
    """
    vertices, faces = mesh.positions, mesh.indices

    counts = _edge_face_counts(faces) if len(faces) else np.array([], dtype=np.int64)
    n_edges = len(counts)
    face_areas = calculate_face_areas(vertices, faces)
    volume = calculate_volume(vertices, faces)
    is_watertight = bool(len(faces) > 0 and np.all(counts == 2))

    stats = MeshStatistics(
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_triangles,
        n_edges=n_edges,
        bbox=calculate_bounding_box(vertices),
        surface_area=float(np.sum(face_areas)),
        volume=volume,
        is_watertight=is_watertight,
        euler_characteristic=mesh.n_vertices - n_edges + mesh.n_triangles,
        face_areas=face_areas,
    )

    logger.debug(
        "Mesh statistics calculated",
        extra={
            'vertices': stats.n_vertices,
            'faces': stats.n_faces,
            'surface_area': stats.surface_area,
            'volume': stats.volume,
        }
    )
    return stats
