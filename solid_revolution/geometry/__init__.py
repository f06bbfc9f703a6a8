"""Revolution geometry: radius rules, lathe and disk meshing, profiles."""

from solid_revolution.geometry.disks import build_disk_mesh, build_sector_prism
from solid_revolution.geometry.lathe import build_lathe_mesh
from solid_revolution.geometry.mesh import MeshBuilder, RevolutionMesh
from solid_revolution.geometry.mesh_stats import (
    BoundingBox,
    MeshStatistics,
    calculate_mesh_statistics,
)
from solid_revolution.geometry.profiles import ProfilePolyline, build_profiles
from solid_revolution.geometry.radii import crosses_axis, washer_radii

__all__ = [
    "RevolutionMesh",
    "MeshBuilder",
    "build_lathe_mesh",
    "build_disk_mesh",
    "build_sector_prism",
    "ProfilePolyline",
    "build_profiles",
    "crosses_axis",
    "washer_radii",
    "BoundingBox",
    "MeshStatistics",
    "calculate_mesh_statistics",
]
