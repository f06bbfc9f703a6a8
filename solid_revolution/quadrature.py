"""
Volume and 2-D area by segment-averaged Riemann summation.

The envelopes are sampled at N + 1 equally spaced sites over [a, b]. Each
sub-interval uses the mean of its two endpoint samples, the cross-axis
rule turns those means into washer radii, and

    volume += (R^2 - r^2) * dx
    area2D += |upper_avg - lower_avg| * dx

The volume is finally scaled by pi * angle / 360. Non-finite samples count
as 0 for their endpoint, so a local evaluation failure never turns the
sums into NaN.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from solid_revolution.bounds import Interval
from solid_revolution.config import DEFAULT_QUADRATURE_INTERVALS, MAX_ANGLE_DEG
from solid_revolution.envelope import ResolvedGroup, sample_envelope
from solid_revolution.geometry.radii import washer_radii

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Measurement:
    """Scalar results of one revolution request.

    Attributes:
        volume: Volume of the swept solid (already scaled by the angle)
        area2D: Area between the two boundary curves, independent of angle
        angle_deg: Revolution angle the volume was scaled with
    """
    volume: float
    area2D: float
    angle_deg: float = MAX_ANGLE_DEG

    def formula_text(self, a: float, b: float) -> str:
        """Plain-text washer integral for summaries."""
        scale = "" if self.angle_deg >= MAX_ANGLE_DEG else f"({self.angle_deg:g}/360) * "
        return f"V = {scale}pi * int_{a:.1f}^{b:.1f} [R(x)^2 - r(x)^2] dx"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'volume': self.volume,
            'area2D': self.area2D,
            'angle_deg': self.angle_deg,
        }


def compute_measurement(
    upper: ResolvedGroup,
    lower: ResolvedGroup,
    interval: Interval,
    angle_deg: float,
    intervals: int = DEFAULT_QUADRATURE_INTERVALS,
) -> Measurement:
    """Integrate volume and area between the upper and lower envelopes.

    Args:
        upper: Resolved upper curve group
        lower: Resolved lower curve group
        interval: Normalized rotation interval
        angle_deg: Revolution angle in degrees
        intervals: Number of sub-intervals N

    Returns:
        Measurement with finite volume and area2D
    """
    if intervals < 1:
        raise ValueError(f"intervals must be positive, got {intervals}")

    xs = interval.linspace(intervals)
    dx = interval.length / intervals

    # sample_envelope already substitutes 0 for unusable samples
    upper_values = sample_envelope(upper, xs).values
    lower_values = sample_envelope(lower, xs).values

    upper_avg = 0.5 * (upper_values[:-1] + upper_values[1:])
    lower_avg = 0.5 * (lower_values[:-1] + lower_values[1:])

    outer, inner = washer_radii(upper_avg, lower_avg)
    volume_sum = float(np.sum(outer * outer - inner * inner) * dx)
    area_sum = float(np.sum(np.abs(upper_avg - lower_avg)) * dx)

    volume = abs(math.pi * volume_sum * (angle_deg / MAX_ANGLE_DEG))

    logger.debug(
        "Quadrature done",
        extra={'intervals': intervals, 'volume': volume, 'area2D': area_sum},
    )
    return Measurement(volume=volume, area2D=area_sum, angle_deg=angle_deg)
