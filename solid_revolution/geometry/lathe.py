"""
Continuous lathe discretization.

The solid between an outer and an inner radius profile is swept around
the x-axis. A vertex at site i and sweep column j sits at

    (x_i, r_i * cos(theta_j), r_i * sin(theta_j)),  theta_j = j * angle / n

The mesh consists of
  - the outer ruled surface, wound so normals point away from the axis
  - the inner ruled surface, wound the opposite way (towards the axis)
  - washer caps at x = a (facing -x) and x = b (facing +x)
  - for sweeps below a full turn, planar side walls at theta = 0 and
    theta = angle, built from the same outer/inner profile rings

Rings with radius <= eps collapse onto a single axis vertex, and an
inner ring whose wall thickness is <= eps reuses the outer ring. Cells
touching such rings degenerate into fans, and the zero-area triangles
they would contain are dropped by MeshBuilder. Bands whose wall
thickness is zero at both ends are not emitted at all.
"""

import logging
import math
from typing import Dict, List

import numpy as np
from numpy.typing import NDArray

from solid_revolution.config import DEFAULT_ANGULAR_SEGMENTS, MAX_ANGLE_DEG, RADIUS_EPSILON
from solid_revolution.geometry.mesh import MeshBuilder, RevolutionMesh

logger = logging.getLogger(__name__)


class _RingFactory:
    """Creates vertex rings for one sweep, sharing axis vertices per site."""

    def __init__(self, builder: MeshBuilder, xs: NDArray[np.float64],
                 thetas: NDArray[np.float64], full_turn: bool, eps: float):
        self.builder = builder
        self.xs = xs
        self.cos = np.cos(thetas)
        self.sin = np.sin(thetas)
        self.full_turn = full_turn
        self.eps = eps
        self._axis_vertices: Dict[int, int] = {}

    @property
    def columns(self) -> int:
        return len(self.cos)

    def axis_vertex(self, i: int) -> int:
        if i not in self._axis_vertices:
            self._axis_vertices[i] = self.builder.add_vertex((self.xs[i], 0.0, 0.0))
        return self._axis_vertices[i]

    def ring(self, i: int, radius: float) -> NDArray[np.int64]:
        """Vertex indices of the ring at site i, one per sweep column."""
        if radius <= self.eps:
            return np.full(self.columns, self.axis_vertex(i), dtype=np.int64)

        n = self.columns - 1 if self.full_turn else self.columns
        points = np.column_stack([
            np.full(n, self.xs[i]),
            radius * self.cos[:n],
            radius * self.sin[:n],
        ])
        indices = self.builder.add_vertices(points)
        if self.full_turn:
            # Closing column shares the first column's vertices
            indices = np.append(indices, indices[0])
        return indices


def _grid_triangles(rings: NDArray[np.int64], outward: bool,
                    rows: NDArray[np.bool_]) -> NDArray[np.int64]:
    """Two triangles per cell of a (sites, columns) ring grid.

    rows selects which of the sites - 1 bands between neighbouring rings
    are emitted.
    """
    va = rings[:-1, :-1][rows].ravel()
    vb = rings[:-1, 1:][rows].ravel()
    vc = rings[1:, :-1][rows].ravel()
    vd = rings[1:, 1:][rows].ravel()
    if outward:
        first = np.column_stack([va, vb, vc])
        second = np.column_stack([vb, vd, vc])
    else:
        first = np.column_stack([va, vc, vb])
        second = np.column_stack([vb, vc, vd])
    return np.vstack([first, second])


def _strip_triangles(outer: NDArray[np.int64], inner: NDArray[np.int64],
                     flip: bool) -> NDArray[np.int64]:
    """Triangulate the strip between two index sequences of equal length.

    flip=False emits (o0, i0, o1), (o1, i0, i1): a cap at x = a faces -x
    and a side wall at theta = angle faces +theta. flip=True reverses the
    winding.
    """
    o0, o1 = outer[:-1], outer[1:]
    i0, i1 = inner[:-1], inner[1:]
    if flip:
        first = np.column_stack([o0, o1, i0])
        second = np.column_stack([o1, i1, i0])
    else:
        first = np.column_stack([o0, i0, o1])
        second = np.column_stack([o1, i0, i1])
    return np.vstack([first, second])


def build_lathe_mesh(
    xs: NDArray[np.float64],
    outer: NDArray[np.float64],
    inner: NDArray[np.float64],
    angle_deg: float,
    angular_segments: int = DEFAULT_ANGULAR_SEGMENTS,
    eps: float = RADIUS_EPSILON,
) -> RevolutionMesh:
    """Sweep an outer/inner radius profile around the x-axis.

    Args:
        xs: Increasing x-sites, at least two
        outer: Outer radius per site (>= inner)
        inner: Inner radius per site (>= 0)
        angle_deg: Sweep angle in degrees, (0, 360]
        angular_segments: Number of angular steps across the sweep
        eps: Radius/thickness treated as zero

    Returns:
        Closed RevolutionMesh (empty for a zero angle or fewer than 2 sites)
    """
    xs = np.asarray(xs, dtype=np.float64)
    outer = np.asarray(outer, dtype=np.float64)
    inner = np.asarray(inner, dtype=np.float64)

    if angle_deg <= 0.0 or len(xs) < 2:
        logger.debug("Lathe skipped: angle=%s, sites=%d", angle_deg, len(xs))
        return RevolutionMesh.empty()

    full_turn = angle_deg >= MAX_ANGLE_DEG
    thetas = np.linspace(0.0, math.radians(min(angle_deg, MAX_ANGLE_DEG)),
                         angular_segments + 1)

    builder = MeshBuilder()
    rings = _RingFactory(builder, xs, thetas, full_turn, eps)

    outer_rings: List[NDArray[np.int64]] = []
    inner_rings: List[NDArray[np.int64]] = []
    for i in range(len(xs)):
        outer_ring = rings.ring(i, outer[i])
        outer_rings.append(outer_ring)
        if outer[i] - inner[i] <= eps:
            inner_rings.append(outer_ring)
        else:
            inner_rings.append(rings.ring(i, inner[i]))

    outer_grid = np.vstack(outer_rings)
    inner_grid = np.vstack(inner_rings)

    # Bands with zero wall thickness at both ends enclose nothing
    thin = (outer - inner) <= eps
    rows = ~(thin[:-1] & thin[1:])
    if not rows.any():
        logger.debug("Lathe skipped: zero wall thickness everywhere")
        return RevolutionMesh.empty()

    builder.add_triangles(_grid_triangles(outer_grid, outward=True, rows=rows))
    builder.add_triangles(_grid_triangles(inner_grid, outward=False, rows=rows))

    # End caps: x = a faces -x, x = b faces +x
    builder.add_triangles(_strip_triangles(outer_grid[0], inner_grid[0], flip=False))
    builder.add_triangles(_strip_triangles(outer_grid[-1], inner_grid[-1], flip=True))

    if not full_turn:
        # Side walls: theta = 0 faces -theta, theta = angle faces +theta
        builder.add_triangles(_strip_triangles(outer_grid[:, 0], inner_grid[:, 0], flip=True))
        builder.add_triangles(_strip_triangles(outer_grid[:, -1], inner_grid[:, -1], flip=False))

    mesh = builder.build()
    logger.debug(
        "Lathe mesh built",
        extra={'sites': len(xs), 'angular_segments': angular_segments,
               'vertices': mesh.n_vertices, 'triangles': mesh.n_triangles},
    )
    return mesh
