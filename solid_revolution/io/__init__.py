"""Mesh export, import and validation."""

from solid_revolution.io.stl_io import MeshExportError, STLFormat, load_stl, save_stl
from solid_revolution.io.validator import ValidationReport, validate_mesh

__all__ = [
    "MeshExportError",
    "STLFormat",
    "load_stl",
    "save_stl",
    "ValidationReport",
    "validate_mesh",
]
