"""Model-space extent of a profile drawing."""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from solid_revolution.bounds import Interval
from solid_revolution.geometry.profiles import ProfilePolyline


@dataclass(frozen=True)
class ProfileExtent:
    """Rectangle in the (x, y) meridian plane covering every profile,
    the bound lines and the rotation axis (y = 0)."""
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @classmethod
    def from_profiles(cls, profiles: Sequence[ProfilePolyline],
                      interval: Interval) -> 'ProfileExtent':
        xs = [interval.a, interval.b]
        ys = [0.0]
        for profile in profiles:
            xs.extend(profile.points[:, 0].tolist())
            ys.extend(profile.points[:, 1].tolist())
        y_min, y_max = float(np.min(ys)), float(np.max(ys))
        if y_max - y_min < 1e-9:
            y_min, y_max = y_min - 0.5, y_max + 0.5
        return cls(float(np.min(xs)), float(np.max(xs)), y_min, y_max)
