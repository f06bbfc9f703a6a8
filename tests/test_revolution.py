"""
Integration tests for solid_revolution.revolution.

Tests:
- Full pipeline for reference scenes
- Invalid flag withholds mesh and profiles, keeps the measurement
- Disk strategy and its midpoint validity check
- Mesh volume converges to the quadrature volume
"""

import math

import numpy as np
import pytest

from solid_revolution.config import GROUP_LOWER, GROUP_UPPER
from solid_revolution.envelope import CurveGroup, CurvePiece
from solid_revolution.geometry.mesh_stats import calculate_mesh_statistics
from solid_revolution.io.validator import validate_mesh
from solid_revolution.project_config import ResolutionConfig
from solid_revolution.revolution import RevolutionRequest, build_revolution, revolve_scene
from solid_revolution.scene import SceneSpec


class TestBuildRevolution:
    """Tests for build_revolution() with the continuous strategy."""

    def test_cone(self, cone_scene, coarse_resolution):
        result = revolve_scene(cone_scene, coarse_resolution)
        assert not result.invalid
        assert result.mesh is not None
        assert not result.mesh.is_empty
        assert result.measurement.volume == pytest.approx(8 * math.pi / 3, rel=1e-4)
        assert result.measurement.area2D == pytest.approx(2.0)
        assert result.strategy == "continuous"

    def test_mesh_is_closed(self, cone_scene, coarse_resolution):
        report = validate_mesh(revolve_scene(cone_scene, coarse_resolution).mesh)
        assert report.is_valid
        assert report.is_closed

    def test_mesh_volume_matches_measurement(self):
        """Enclosed mesh volume approaches the integrated volume."""
        scene = SceneSpec.from_formulas("sqrt(x)+1", "0.5", a=0, b=4, angle=270)
        result = revolve_scene(scene, ResolutionConfig(x_segments=200, angular_segments=128))
        mesh_volume = calculate_mesh_statistics(result.mesh).volume
        assert mesh_volume == pytest.approx(result.measurement.volume, rel=5e-3)

    def test_profiles(self, piecewise_upper, coarse_resolution):
        request = RevolutionRequest(
            upper=piecewise_upper,
            lower=CurveGroup.single(GROUP_LOWER, "0"),
            a=0, b=2,
            resolution=coarse_resolution,
        )
        result = build_revolution(request)
        assert len(result.upper_profiles) == 2
        assert len(result.lower_profiles) == 1
        assert result.measurement.volume == pytest.approx(math.pi * (1 + 4), rel=1e-2)

    def test_swapped_bounds(self, coarse_resolution):
        forward = revolve_scene(SceneSpec.from_formulas("x^2", a=0, b=2), coarse_resolution)
        backward = revolve_scene(SceneSpec.from_formulas("x^2", a=2, b=0), coarse_resolution)
        assert forward.interval == backward.interval
        assert forward.measurement.volume == pytest.approx(backward.measurement.volume)

    def test_angle_is_clamped(self, coarse_resolution):
        result = revolve_scene(SceneSpec.from_formulas("1", angle=400), coarse_resolution)
        assert result.angle_deg == 360.0

    def test_zero_angle_gives_empty_mesh(self, coarse_resolution):
        result = revolve_scene(SceneSpec.from_formulas("1", angle=0), coarse_resolution)
        assert not result.invalid
        assert result.mesh.is_empty
        assert result.measurement.volume == 0.0

    def test_recomputation_is_deterministic(self, cone_scene, coarse_resolution):
        first = revolve_scene(cone_scene, coarse_resolution)
        second = revolve_scene(cone_scene, coarse_resolution)
        assert np.array_equal(first.mesh.positions, second.mesh.positions)
        assert np.array_equal(first.mesh.indices, second.mesh.indices)

    def test_summary(self, cone_scene, coarse_resolution):
        summary = revolve_scene(cone_scene, coarse_resolution).summary()
        assert "Volume:     8.3776" in summary
        assert "triangles" in summary


class TestInvalidFlag:
    """Non-finite display samples withhold the mesh."""

    def test_imaginary_curve(self, coarse_resolution):
        result = revolve_scene(SceneSpec.from_formulas("sqrt(-1-x^2)"), coarse_resolution)
        assert result.invalid
        assert result.mesh is None
        assert result.profiles == ()
        assert result.measurement.volume == 0.0
        assert "withheld" in result.summary()

    def test_malformed_formula(self, coarse_resolution):
        result = revolve_scene(SceneSpec.from_formulas("2+*x"), coarse_resolution)
        assert result.invalid
        assert math.isfinite(result.measurement.volume)

    def test_failure_outside_domain_is_ignored(self, coarse_resolution):
        """sqrt(x) restricted to [0, 1] never sees negative x."""
        upper = CurveGroup(GROUP_UPPER, (CurvePiece("sqrt(x)", "0", "1"),))
        request = RevolutionRequest(
            upper=upper, lower=CurveGroup(GROUP_LOWER, ()),
            a=-1, b=1, resolution=coarse_resolution,
        )
        result = build_revolution(request)
        assert not result.invalid
        assert result.mesh is not None

    def test_warning_logged(self, caplog, coarse_resolution):
        with caplog.at_level("WARNING"):
            revolve_scene(SceneSpec.from_formulas("ln(x-5)"), coarse_resolution)
        assert "mesh withheld" in caplog.text


class TestDiskStrategy:
    """Tests for the discrete-disk strategy."""

    def test_disk_mesh(self, cone_scene, disk_resolution):
        result = revolve_scene(cone_scene, disk_resolution)
        assert result.strategy == "disks"
        assert not result.invalid
        report = validate_mesh(result.mesh)
        assert report.is_closed
        assert report.is_valid

    def test_measurement_independent_of_strategy(self, cone_scene, coarse_resolution, disk_resolution):
        continuous = revolve_scene(cone_scene, coarse_resolution).measurement
        disks = revolve_scene(cone_scene, disk_resolution).measurement
        assert continuous == disks

    def test_non_finite_midpoint(self, disk_resolution, coarse_resolution):
        """A pole at a slab midpoint only invalidates the disk strategy."""
        scene = SceneSpec.from_formulas("1/(x-0.0625)", a=0, b=1)
        assert not revolve_scene(scene, coarse_resolution).invalid
        result = revolve_scene(scene, disk_resolution)
        assert result.invalid
        assert result.mesh is None


class TestOversizedFormula:
    """Formulas past the depth limit behave like any malformed formula."""

    def test_long_sum_raises_invalid_flag(self, coarse_resolution):
        request = RevolutionRequest(
            upper=CurveGroup.single(GROUP_UPPER, "+".join(["x"] * 1500)),
            lower=CurveGroup.single(GROUP_LOWER, "0"),
            a=0, b=1,
            resolution=coarse_resolution,
        )
        result = build_revolution(request)
        assert result.invalid
        assert result.mesh is None
        assert result.measurement.volume == 0.0
