"""
Revolution pipeline: scene -> compiled groups -> envelopes -> mesh + measurement.

Every call recomputes everything from scratch and returns one immutable
RevolutionResult, so no reader ever sees a half-built mesh. The mesh path
and the quadrature path share only the resolved groups.

Invalid flag: when any active piece yields a non-finite value at a
display sample site inside its domain, the mesh and profiles are
withheld (result.invalid is True, result.mesh is None). The measurement
is still computed, with failed samples counted as zero.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from solid_revolution.bounds import BoundInput, Interval, normalize_angle, normalize_interval
from solid_revolution.config import GROUP_UPPER, STRATEGY_DISKS
from solid_revolution.envelope import CurveGroup, ResolvedGroup, SampledEnvelope, sample_envelope
from solid_revolution.geometry.disks import build_disk_mesh
from solid_revolution.geometry.lathe import build_lathe_mesh
from solid_revolution.geometry.mesh import RevolutionMesh
from solid_revolution.geometry.profiles import ProfilePolyline, build_profiles
from solid_revolution.geometry.radii import washer_radii
from solid_revolution.logging_config import log_timing
from solid_revolution.project_config import ResolutionConfig
from solid_revolution.quadrature import Measurement, compute_measurement
from solid_revolution.scene import SceneSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevolutionRequest:
    """Everything one recomputation needs, resolution included."""
    upper: CurveGroup
    lower: CurveGroup
    a: BoundInput = 0
    b: BoundInput = 1
    angle_deg: Optional[float] = None
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)

    @classmethod
    def from_scene(cls, scene: SceneSpec,
                   resolution: Optional[ResolutionConfig] = None) -> 'RevolutionRequest':
        return cls(
            upper=scene.upper,
            lower=scene.lower,
            a=scene.a,
            b=scene.b,
            angle_deg=scene.angle,
            resolution=resolution or ResolutionConfig(),
        )


@dataclass(frozen=True)
class RevolutionResult:
    """Published output of one request.

    Attributes:
        mesh: Solid mesh, None when the invalid flag is raised
        profiles: 2-D polylines per active piece (empty when invalid)
        measurement: Volume and area (always present)
        invalid: True if a display sample was non-finite
        interval: Normalized [a, b]
        angle_deg: Clamped revolution angle
        strategy: Discretization strategy used
    """
    mesh: Optional[RevolutionMesh]
    profiles: Tuple[ProfilePolyline, ...]
    measurement: Measurement
    invalid: bool
    interval: Interval
    angle_deg: float
    strategy: str

    @property
    def upper_profiles(self) -> Tuple[ProfilePolyline, ...]:
        return tuple(p for p in self.profiles if p.group == GROUP_UPPER)

    @property
    def lower_profiles(self) -> Tuple[ProfilePolyline, ...]:
        return tuple(p for p in self.profiles if p.group != GROUP_UPPER)

    def summary(self) -> str:
        """Human-readable result summary."""
        m = self.measurement
        lines = [
            f"Interval:   [{self.interval.a:.4f}, {self.interval.b:.4f}]",
            f"Angle:      {self.angle_deg:g} deg",
            f"Strategy:   {self.strategy}",
            f"Volume:     {m.volume:.4f}",
            f"Area (2D):  {m.area2D:.4f}",
            f"Formula:    {m.formula_text(self.interval.a, self.interval.b)}",
        ]
        if self.invalid:
            lines.append("Mesh:       withheld (non-finite boundary samples)")
        elif self.mesh is not None:
            lines.append(
                f"Mesh:       {self.mesh.n_vertices:,} vertices, {self.mesh.n_triangles:,} triangles"
            )
        return "\n".join(lines)


def _build_mesh(
    upper: ResolvedGroup,
    lower: ResolvedGroup,
    interval: Interval,
    angle_deg: float,
    resolution: ResolutionConfig,
    upper_env: SampledEnvelope,
    lower_env: SampledEnvelope,
) -> Tuple[Optional[RevolutionMesh], bool]:
    """Mesh for the configured strategy and whether it hit non-finite samples."""
    if resolution.strategy == STRATEGY_DISKS:
        mids = interval.midpoints(resolution.disk_count)
        upper_mid = sample_envelope(upper, mids)
        lower_mid = sample_envelope(lower, mids)
        if upper_mid.has_non_finite or lower_mid.has_non_finite:
            return None, True
        mesh = build_disk_mesh(
            interval.linspace(resolution.disk_count),
            upper_mid.values,
            lower_mid.values,
            angle_deg,
            angular_segments=resolution.angular_segments,
        )
        return mesh, False

    outer, inner = washer_radii(upper_env.values, lower_env.values)
    mesh = build_lathe_mesh(
        upper_env.xs, outer, inner, angle_deg,
        angular_segments=resolution.angular_segments,
    )
    return mesh, False


def build_revolution(request: RevolutionRequest) -> RevolutionResult:
    """Run the full pipeline for one request.

    Never raises on user input: malformed formulas and bad domains
    degrade to NaN/inactive pieces, which surface only via the invalid flag.
    """
    resolution = request.resolution

    with log_timing(logger, "Compiling curve groups"):
        upper = request.upper.resolve()
        lower = request.lower.resolve()

    interval = normalize_interval(request.a, request.b)
    angle_deg = normalize_angle(request.angle_deg)

    with log_timing(logger, "Sampling envelopes", sites=resolution.x_segments + 1):
        xs = interval.linspace(resolution.x_segments)
        upper_env = sample_envelope(upper, xs)
        lower_env = sample_envelope(lower, xs)

    invalid = upper_env.has_non_finite or lower_env.has_non_finite
    mesh: Optional[RevolutionMesh] = None
    profiles: Tuple[ProfilePolyline, ...] = ()

    if not invalid:
        with log_timing(logger, "Building mesh", strategy=resolution.strategy) as info:
            mesh, invalid = _build_mesh(
                upper, lower, interval, angle_deg, resolution, upper_env, lower_env
            )
            info['triangles'] = mesh.n_triangles if mesh is not None else 0

    if invalid:
        mesh = None
        logger.warning(
            "Non-finite boundary samples in [%g, %g], mesh withheld",
            interval.a, interval.b,
            extra={'upper_non_finite': upper_env.non_finite_count,
                   'lower_non_finite': lower_env.non_finite_count},
        )
    else:
        profiles = build_profiles(upper, xs, interval) + build_profiles(lower, xs, interval)

    with log_timing(logger, "Quadrature", intervals=resolution.quadrature_intervals):
        measurement = compute_measurement(
            upper, lower, interval, angle_deg,
            intervals=resolution.quadrature_intervals,
        )

    return RevolutionResult(
        mesh=mesh,
        profiles=profiles,
        measurement=measurement,
        invalid=invalid,
        interval=interval,
        angle_deg=angle_deg,
        strategy=resolution.strategy,
    )


def revolve_scene(scene: SceneSpec,
                  resolution: Optional[ResolutionConfig] = None) -> RevolutionResult:
    """Convenience wrapper: build the revolution described by a scene."""
    return build_revolution(RevolutionRequest.from_scene(scene, resolution))
