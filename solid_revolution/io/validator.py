"""
Mesh validation for generated solids.

Performs integrity checks on a RevolutionMesh:
- Manifold validation (each edge shared by exactly 2 faces)
- Boundary edge detection (open mesh)
- Degenerate triangle detection (zero area)
- Winding consistency (no directed edge used twice) and outward
  orientation (positive enclosed volume)

Open meshes and degenerate faces are warnings; non-manifold edges and
inconsistent or inverted winding are errors.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

import numpy as np
from numpy.typing import NDArray

from solid_revolution.geometry.mesh import RevolutionMesh
from solid_revolution.geometry.mesh_stats import calculate_face_areas, calculate_volume
from solid_revolution.logging_config import timed

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Severity level of validation issues."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """A single validation issue found in the mesh."""
    code: str
    severity: ValidationSeverity
    message: str
    count: int = 1
    details: List[int] = field(default_factory=list)  # face indices

    def __str__(self) -> str:
        if self.count > 1:
            return f"[{self.severity.value.upper()}] {self.code}: {self.message} ({self.count} occurrences)"
        return f"[{self.severity.value.upper()}] {self.code}: {self.message}"


@dataclass
class ValidationReport:
    """Complete validation report for a mesh."""
    is_valid: bool
    is_manifold: bool
    is_closed: bool
    is_consistently_wound: bool
    has_degenerate_faces: bool

    n_vertices: int
    n_faces: int
    n_boundary_edges: int
    n_degenerate_faces: int
    n_non_manifold_edges: int
    signed_volume: float = 0.0

    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "Mesh Validation Report",
            "=" * 40,
            f"Vertices: {self.n_vertices}",
            f"Faces: {self.n_faces}",
            "",
            f"Manifold: {'Yes' if self.is_manifold else 'No'}",
            f"Closed: {'Yes' if self.is_closed else 'No'}",
            f"Consistent winding: {'Yes' if self.is_consistently_wound else 'No'}",
            f"Signed volume: {self.signed_volume:.4f}",
            f"Degenerate faces: {self.n_degenerate_faces}",
            f"Non-manifold edges: {self.n_non_manifold_edges}",
            f"Boundary edges: {self.n_boundary_edges}",
        ]

        if self.issues:
            lines.append("")
            lines.append("Issues:")
            for issue in self.issues:
                lines.append(f"  - {issue}")

        lines.append("")
        lines.append(f"Overall: {'VALID' if self.is_valid else 'INVALID'}")
        return "\n".join(lines)


def _directed_edges(faces: NDArray[np.int32]) -> NDArray[np.int64]:
    """(3F, 2) directed edges in face order."""
    return np.vstack([
        np.stack([faces[:, i], faces[:, (i + 1) % 3]], axis=1) for i in range(3)
    ]).astype(np.int64)


def _edge_counts(faces: NDArray[np.int32]) -> Tuple[NDArray[np.int64], int]:
    """Face count per undirected edge and number of repeated directed edges."""
    directed = _directed_edges(faces)
    _, undirected_counts = np.unique(np.sort(directed, axis=1), axis=0, return_counts=True)
    _, directed_counts = np.unique(directed, axis=0, return_counts=True)
    repeated = int(np.count_nonzero(directed_counts > 1))
    return undirected_counts, repeated


@timed(operation="Mesh validation")
def validate_mesh(mesh: RevolutionMesh,
                  degenerate_area_threshold: float = 1e-12) -> ValidationReport:
    """Validate mesh integrity.

    Args:
        mesh: Mesh to check
        degenerate_area_threshold: Minimum area to consider non-degenerate

    Returns:
        ValidationReport with all findings
    """
    vertices, faces = mesh.positions, mesh.indices
    issues: List[ValidationIssue] = []

    if mesh.is_empty:
        issues.append(ValidationIssue(
            code="EMPTY_MESH",
            severity=ValidationSeverity.WARNING,
            message="Mesh has no triangles",
        ))
        return ValidationReport(
            is_valid=True, is_manifold=True, is_closed=True,
            is_consistently_wound=True, has_degenerate_faces=False,
            n_vertices=mesh.n_vertices, n_faces=0, n_boundary_edges=0,
            n_degenerate_faces=0, n_non_manifold_edges=0, issues=issues,
        )

    edge_counts, repeated_directed = _edge_counts(faces)
    n_boundary = int(np.count_nonzero(edge_counts == 1))
    n_non_manifold = int(np.count_nonzero(edge_counts > 2))

    if n_boundary:
        issues.append(ValidationIssue(
            code="BOUNDARY_EDGES",
            severity=ValidationSeverity.WARNING,
            message=f"Mesh has {n_boundary} boundary edges (not closed)",
            count=n_boundary,
        ))
        logger.warning("Mesh has %d boundary edges", n_boundary)

    if n_non_manifold:
        issues.append(ValidationIssue(
            code="NON_MANIFOLD_EDGES",
            severity=ValidationSeverity.ERROR,
            message=f"Mesh has {n_non_manifold} non-manifold edges (>2 faces)",
            count=n_non_manifold,
        ))
        logger.error("Mesh has %d non-manifold edges", n_non_manifold)

    areas = calculate_face_areas(vertices, faces)
    degenerate_mask = areas < degenerate_area_threshold
    n_degenerate = int(degenerate_mask.sum())
    if n_degenerate:
        issues.append(ValidationIssue(
            code="DEGENERATE_FACES",
            severity=ValidationSeverity.WARNING,
            message=f"Mesh has {n_degenerate} degenerate faces (zero area)",
            count=n_degenerate,
            details=np.where(degenerate_mask)[0][:10].tolist(),
        ))
        logger.warning("Mesh has %d degenerate faces", n_degenerate)

    # Neighbouring faces of a consistently wound mesh traverse a shared
    # edge in opposite directions
    if repeated_directed:
        issues.append(ValidationIssue(
            code="INCONSISTENT_WINDING",
            severity=ValidationSeverity.ERROR,
            message=f"{repeated_directed} directed edges are used by more than one face",
            count=repeated_directed,
        ))
        logger.error("Mesh has %d repeated directed edges", repeated_directed)

    signed_volume = calculate_volume(vertices, faces)
    if n_boundary == 0 and signed_volume < 0:
        issues.append(ValidationIssue(
            code="INVERTED_WINDING",
            severity=ValidationSeverity.ERROR,
            message=f"Enclosed volume is negative ({signed_volume:.6g}), normals point inward",
        ))
        logger.error("Mesh winding is inverted (volume %.6g)", signed_volume)

    is_valid = not any(i.severity == ValidationSeverity.ERROR for i in issues)

    report = ValidationReport(
        is_valid=is_valid,
        is_manifold=n_non_manifold == 0,
        is_closed=n_boundary == 0,
        is_consistently_wound=repeated_directed == 0,
        has_degenerate_faces=n_degenerate > 0,
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_triangles,
        n_boundary_edges=n_boundary,
        n_degenerate_faces=n_degenerate,
        n_non_manifold_edges=n_non_manifold,
        signed_volume=signed_volume,
        issues=issues,
    )

    logger.info("Validation complete: %s", "VALID" if is_valid else "INVALID")
    return report
