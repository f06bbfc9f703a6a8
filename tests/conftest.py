"""
Pytest configuration and fixtures for the solid_revolution test suite.

Provides:
- Curve group and scene fixtures for the reference solids
- Small resolution configs that keep meshes fast to build
- Ready-made meshes (cylinder, tube, cone)
- Scene directories for batch tests
"""

import json
from pathlib import Path

import numpy as np
import pytest

from solid_revolution.config import GROUP_LOWER, GROUP_UPPER
from solid_revolution.envelope import CurveGroup, CurvePiece
from solid_revolution.geometry.lathe import build_lathe_mesh
from solid_revolution.geometry.mesh import RevolutionMesh
from solid_revolution.project_config import ResolutionConfig
from solid_revolution.scene import SceneSpec


# ============================================================================
# Logging
# ============================================================================

@pytest.fixture(autouse=True)
def _propagating_package_logger():
    """Let caplog see package records even after setup_logging() ran."""
    import logging

    logger = logging.getLogger("solid_revolution")
    saved = (logger.propagate, logger.level, list(logger.handlers))
    logger.propagate = True
    yield
    logger.propagate, level, handlers = saved
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()


# ============================================================================
# Resolution Fixtures
# ============================================================================

@pytest.fixture
def coarse_resolution() -> ResolutionConfig:
    """Continuous strategy at a resolution small enough for unit tests."""
    return ResolutionConfig(x_segments=40, angular_segments=24, disk_count=8)


@pytest.fixture
def disk_resolution() -> ResolutionConfig:
    """Disk strategy with 8 slabs."""
    return ResolutionConfig(strategy="disks", x_segments=40, angular_segments=24, disk_count=8)


# ============================================================================
# Curve Fixtures
# ============================================================================

@pytest.fixture
def cone_groups():
    """f(x) = x, g(x) = 0: a cone with its apex at the origin."""
    return CurveGroup.single(GROUP_UPPER, "x"), CurveGroup.single(GROUP_LOWER, "0")


@pytest.fixture
def piecewise_upper() -> CurveGroup:
    """1 on [0, 1], then 2 on [1, 2] (a stepped shaft)."""
    return CurveGroup(GROUP_UPPER, (
        CurvePiece("1", "0", "1"),
        CurvePiece("2", "1", "2"),
    ))


@pytest.fixture
def cone_scene() -> SceneSpec:
    return SceneSpec.from_formulas("x", "0", a=0, b=2, angle=360, name="cone")


# ============================================================================
# Mesh Fixtures
# ============================================================================

@pytest.fixture
def cylinder_mesh() -> RevolutionMesh:
    """Solid cylinder, radius 2, length 3, 32 angular segments."""
    return build_lathe_mesh(
        np.array([0.0, 3.0]), np.array([2.0, 2.0]), np.array([0.0, 0.0]),
        360.0, angular_segments=32,
    )


@pytest.fixture
def tube_mesh() -> RevolutionMesh:
    """Tube with outer radius 2, inner radius 1, length 3."""
    return build_lathe_mesh(
        np.array([0.0, 1.5, 3.0]), np.array([2.0, 2.0, 2.0]), np.array([1.0, 1.0, 1.0]),
        360.0, angular_segments=32,
    )


@pytest.fixture
def cone_mesh() -> RevolutionMesh:
    """Cone r = x on [0, 2] with 20 x-segments."""
    xs = np.linspace(0.0, 2.0, 21)
    return build_lathe_mesh(xs, xs.copy(), np.zeros_like(xs), 360.0, angular_segments=32)


# ============================================================================
# Scene File Fixtures
# ============================================================================

def _write_json(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def scene_dir(tmp_path: Path) -> Path:
    """Directory with two valid scenes, one invalid scene and one broken file."""
    _write_json(tmp_path / "cone.json", {"f": "x", "g": "0", "a": 0, "b": 2, "angle": 360})
    _write_json(tmp_path / "shaft.json", {
        "upper": [
            {"formula": "1", "domain_start": "0", "domain_end": "1"},
            {"formula": "2", "domain_start": "1", "domain_end": "2"},
        ],
        "lower": [],
        "a": "0", "b": "2", "angle": 180,
    })
    _write_json(tmp_path / "imaginary.json", {"f": "sqrt(-1-x^2)", "a": 0, "b": 1})
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    return tmp_path
