"""
Rotation bounds and revolution angle.

Bounds are formulas evaluated once at x = 0 so that symbolic constants
such as "pi/2" can be used. After evaluation a < b strictly: swapped
input is exchanged and near-equal input is separated by BOUND_TOLERANCE.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from solid_revolution.config import (
    BOUND_TOLERANCE,
    MAX_ANGLE_DEG,
    MIN_ANGLE_DEG,
)
from solid_revolution.expression import evaluate_at

logger = logging.getLogger(__name__)

BoundInput = Union[str, float, int, None]


@dataclass(frozen=True)
class Interval:
    """Normalized rotation interval [a, b] with a < b."""
    a: float
    b: float

    @property
    def length(self) -> float:
        return self.b - self.a

    def linspace(self, segments: int) -> NDArray[np.float64]:
        """segments + 1 equally spaced sites spanning [a, b]."""
        return np.linspace(self.a, self.b, segments + 1)

    def midpoints(self, segments: int) -> NDArray[np.float64]:
        """Midpoints of segments equal sub-intervals of [a, b]."""
        dx = self.length / segments
        return self.a + (np.arange(segments) + 0.5) * dx


def evaluate_bound(value: BoundInput, default: float = 0.0) -> float:
    """Evaluate a bound formula at x = 0; non-finite falls back to default."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        result = float(value)
    else:
        result = evaluate_at(value, 0.0)
    if not math.isfinite(result):
        logger.debug("Bound %r is not finite, using %s", value, default)
        return default
    return result


def normalize_interval(a: BoundInput, b: BoundInput,
                       tolerance: float = BOUND_TOLERANCE) -> Interval:
    """Evaluate and order the rotation bounds.

    Args:
        a: Left bound formula (or number)
        b: Right bound formula (or number)
        tolerance: Minimum separation; closer bounds get b = a + tolerance

    Returns:
        Interval with a < b
    """
    a_val = evaluate_bound(a)
    b_val = evaluate_bound(b)

    if a_val > b_val:
        logger.warning("Swapping bounds a=%s, b=%s", a_val, b_val)
        a_val, b_val = b_val, a_val
    if abs(a_val - b_val) < tolerance:
        logger.warning("Bounds too close, nudging b to a + %s", tolerance)
        b_val = a_val + tolerance

    return Interval(a_val, b_val)


def normalize_angle(angle_deg: Optional[float]) -> float:
    """Clamp a revolution angle in degrees to [0, 360]."""
    if angle_deg is None:
        return MAX_ANGLE_DEG
    angle = float(angle_deg)
    if not math.isfinite(angle):
        logger.warning("Revolution angle %r is not finite, using %s", angle_deg, MAX_ANGLE_DEG)
        return MAX_ANGLE_DEG
    clamped = min(max(angle, MIN_ANGLE_DEG), MAX_ANGLE_DEG)
    if clamped != angle:
        logger.warning("Revolution angle %s clamped to %s", angle, clamped)
    return clamped


def angle_radians(angle_deg: float) -> float:
    """Sweep extent in radians for an angle in degrees."""
    return math.radians(angle_deg)


def is_full_turn(angle_deg: float) -> bool:
    return angle_deg >= MAX_ANGLE_DEG
