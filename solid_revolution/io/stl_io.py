"""
STL export and import of revolution meshes.

Supports:
- Binary STL (default) and ASCII STL output via numpy-stl
- Format detection and loading back into a RevolutionMesh, with vertices
  deduplicated after rounding to 6 decimals
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from stl import Mode, mesh

from solid_revolution.geometry.mesh import RevolutionMesh

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class STLFormat(Enum):
    """STL file format type."""
    BINARY = "binary"
    ASCII = "ascii"
    UNKNOWN = "unknown"


@dataclass
class STLInfo:
    """Metadata about a written or loaded STL file."""
    filepath: str
    format: STLFormat
    file_size_bytes: int
    n_triangles: int
    solid_name: Optional[str] = None

    @property
    def file_size_kb(self) -> float:
        return self.file_size_bytes / 1024


class MeshExportError(Exception):
    """Raised when a mesh cannot be written to or read from STL."""


def to_numpy_stl(rev_mesh: RevolutionMesh, name: str = "") -> mesh.Mesh:
    """Convert a RevolutionMesh into a numpy-stl Mesh (normals computed)."""
    data = np.zeros(rev_mesh.n_triangles, dtype=mesh.Mesh.dtype)
    stl_mesh = mesh.Mesh(data, name=name or "solid_revolution")
    stl_mesh.vectors[:] = rev_mesh.triangles().astype(np.float32)
    stl_mesh.update_normals()
    return stl_mesh


def save_stl(rev_mesh: RevolutionMesh, filepath: PathLike,
             binary: bool = True, name: str = "") -> STLInfo:
    """Write a mesh as STL.

    Args:
        rev_mesh: Mesh to write (must not be empty)
        filepath: Output path
        binary: Binary (True) or ASCII (False) STL
        name: Solid name stored in the header

    Returns:
        STLInfo of the written file

    Raises:
        MeshExportError: if the mesh is empty or the file cannot be written
    """
    if rev_mesh.is_empty:
        raise MeshExportError("Cannot export an empty mesh")

    filepath = str(filepath)
    stl_mesh = to_numpy_stl(rev_mesh, name)
    try:
        stl_mesh.save(filepath, mode=Mode.BINARY if binary else Mode.ASCII)
    except OSError as exc:
        raise MeshExportError(f"Failed to write STL {filepath!r}: {exc}") from exc

    info = STLInfo(
        filepath=filepath,
        format=STLFormat.BINARY if binary else STLFormat.ASCII,
        file_size_bytes=os.path.getsize(filepath),
        n_triangles=rev_mesh.n_triangles,
        solid_name=name or None,
    )
    logger.info("STL written: %s (%s, %d triangles, %.1f KB)",
                filepath, info.format.value, info.n_triangles, info.file_size_kb)
    return info


def detect_stl_format(filepath: PathLike) -> Tuple[STLFormat, Optional[str]]:
    """Detect STL file format (binary vs ASCII).

    ASCII files start with 'solid' and contain 'facet'/'endsolid' in the
    first kilobyte; anything else of at least 84 bytes is treated as binary.

    Returns:
        Tuple of (format, solid_name or None)

    Raises:
        MeshExportError: if the file cannot be read
    """
    try:
        with open(filepath, 'rb') as f:
            head = f.read(1024)
    except OSError as exc:
        raise MeshExportError(f"Cannot read {str(filepath)!r}: {exc}") from exc

    text = head.decode('ascii', errors='ignore')
    lowered = text.lstrip().lower()
    if lowered.startswith('solid') and ('facet' in lowered or 'endsolid' in lowered):
        first_line = text.lstrip().split('\n', 1)[0]
        return STLFormat.ASCII, first_line[5:].strip() or None

    if len(head) < 84:
        return STLFormat.UNKNOWN, None

    header = head[:80].split(b'\x00', 1)[0].decode('ascii', errors='ignore').strip()
    return STLFormat.BINARY, header or None


def load_stl(filepath: PathLike) -> RevolutionMesh:
    """Load an STL file into a RevolutionMesh.

    Raises:
        MeshExportError: if the file is missing, corrupt or has no triangles
    """
    stl_format, _ = detect_stl_format(filepath)
    if stl_format is STLFormat.UNKNOWN:
        raise MeshExportError(f"Not an STL file: {str(filepath)!r}")

    try:
        stl_mesh = mesh.Mesh.from_file(str(filepath))
    except (OSError, ValueError, AssertionError) as exc:
        raise MeshExportError(f"Failed to read STL {str(filepath)!r}: {exc}") from exc

    if len(stl_mesh.vectors) == 0:
        raise MeshExportError(f"STL {str(filepath)!r} has no triangles")

    corners = np.round(stl_mesh.vectors.reshape(-1, 3).astype(np.float64), 6)
    unique, inverse = np.unique(corners, axis=0, return_inverse=True)
    faces = inverse.reshape(-1, 3)

    logger.info("STL loaded: %s (%s, %d vertices, %d triangles)",
                filepath, stl_format.value, len(unique), len(faces))
    return RevolutionMesh(unique, faces)
