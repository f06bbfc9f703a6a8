"""
solid_revolution: solids of revolution from textual formulas.

Compiles boundary formulas, combines piecewise curves into upper/lower
envelopes, sweeps the region between them around the x-axis into a
triangle mesh and integrates its volume and 2-D area.

The command-line entry point is main.py.
"""

from solid_revolution.envelope import CurveGroup, CurvePiece
from solid_revolution.expression import compile_formula
from solid_revolution.logging_config import (
    LogContext,
    configure_default_logging,
    get_logger,
    log_timing,
    setup_logging,
    timed,
)
from solid_revolution.project_config import ProjectConfig, ResolutionConfig
from solid_revolution.quadrature import Measurement, compute_measurement
from solid_revolution.revolution import (
    RevolutionRequest,
    RevolutionResult,
    build_revolution,
    revolve_scene,
)
from solid_revolution.scene import SceneError, SceneSpec

__version__ = "1.0.0"

__all__ = [
    "CurveGroup",
    "CurvePiece",
    "compile_formula",
    "Measurement",
    "compute_measurement",
    "ProjectConfig",
    "ResolutionConfig",
    "RevolutionRequest",
    "RevolutionResult",
    "build_revolution",
    "revolve_scene",
    "SceneError",
    "SceneSpec",
    "setup_logging",
    "get_logger",
    "configure_default_logging",
    "log_timing",
    "timed",
    "LogContext",
]
