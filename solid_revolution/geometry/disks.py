"""
Discrete-disk discretization (Riemann-sum visualization).

[a, b] is split into N equal slabs. Each slab takes the cross-axis rule
at its midpoint and becomes one annular (or full-disk) sector prism of
constant radii, extruded along x by the slab width. Slabs share no
vertices, so the steps between them stay visible.
"""

import logging
from typing import List

import numpy as np
from numpy.typing import NDArray

from solid_revolution.config import DEFAULT_ANGULAR_SEGMENTS, RADIUS_EPSILON
from solid_revolution.geometry.lathe import build_lathe_mesh
from solid_revolution.geometry.mesh import RevolutionMesh
from solid_revolution.geometry.radii import washer_radii

logger = logging.getLogger(__name__)


def build_sector_prism(
    x0: float,
    x1: float,
    outer_radius: float,
    inner_radius: float,
    angle_deg: float,
    angular_segments: int = DEFAULT_ANGULAR_SEGMENTS,
    eps: float = RADIUS_EPSILON,
) -> RevolutionMesh:
    """One closed slab: an annular sector extruded from x0 to x1."""
    if outer_radius - inner_radius <= eps:
        return RevolutionMesh.empty()
    return build_lathe_mesh(
        np.array([x0, x1]),
        np.array([outer_radius, outer_radius]),
        np.array([inner_radius, inner_radius]),
        angle_deg,
        angular_segments=angular_segments,
        eps=eps,
    )


def build_disk_mesh(
    edges: NDArray[np.float64],
    upper_mid: NDArray[np.float64],
    lower_mid: NDArray[np.float64],
    angle_deg: float,
    angular_segments: int = DEFAULT_ANGULAR_SEGMENTS,
    eps: float = RADIUS_EPSILON,
) -> RevolutionMesh:
    """Merge one sector prism per slab.

    Args:
        edges: N + 1 slab edges spanning [a, b]
        upper_mid: Upper envelope at the N slab midpoints
        lower_mid: Lower envelope at the N slab midpoints
        angle_deg: Sweep angle in degrees
        angular_segments: Angular steps per prism
        eps: Thickness treated as zero (such slabs are skipped)

    Returns:
        Merged RevolutionMesh of all non-empty slabs
    """
    edges = np.asarray(edges, dtype=np.float64)
    outer, inner = washer_radii(upper_mid, lower_mid)

    slabs: List[RevolutionMesh] = []
    for k in range(len(edges) - 1):
        slab = build_sector_prism(
            edges[k], edges[k + 1], float(outer[k]), float(inner[k]),
            angle_deg, angular_segments=angular_segments, eps=eps,
        )
        if not slab.is_empty:
            slabs.append(slab)

    mesh = RevolutionMesh.merge(slabs)
    logger.debug(
        "Disk mesh built",
        extra={'slabs': len(edges) - 1, 'non_empty': len(slabs),
               'triangles': mesh.n_triangles},
    )
    return mesh
