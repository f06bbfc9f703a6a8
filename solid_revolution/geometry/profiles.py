"""
2-D profile polylines for the meridian (z = 0) view.

One polyline per curve piece that is active inside [a, b]. Each starts
and ends exactly at the piece's domain edges clipped to [a, b], passes
through every display site in between, and gains an explicit (x, 0, 0)
point wherever the curve changes sign between two neighbouring points.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from solid_revolution.bounds import Interval
from solid_revolution.envelope import ResolvedGroup, ResolvedPiece

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfilePolyline:
    """Polyline of one curve piece.

    Attributes:
        group: "upper" or "lower"
        piece_index: Index of the piece in its group
        points: (K, 3) array of (x, value, 0)
    """
    group: str
    piece_index: int
    points: NDArray[np.float64] = field(repr=False)

    def __post_init__(self):
        points = np.array(self.points, dtype=np.float64).reshape(-1, 3)
        points.setflags(write=False)
        object.__setattr__(self, 'points', points)

    @property
    def start(self) -> Tuple[float, float]:
        return float(self.points[0, 0]), float(self.points[0, 1])

    @property
    def end(self) -> Tuple[float, float]:
        return float(self.points[-1, 0]), float(self.points[-1, 1])

    def __len__(self) -> int:
        return len(self.points)


def insert_zero_crossings(xs: NDArray[np.float64],
                          ys: NDArray[np.float64]) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Insert linearly interpolated roots between sign changes."""
    if len(xs) < 2:
        return xs, ys

    out_x: List[float] = [float(xs[0])]
    out_y: List[float] = [float(ys[0])]
    for k in range(len(xs) - 1):
        x0, x1 = float(xs[k]), float(xs[k + 1])
        y0, y1 = float(ys[k]), float(ys[k + 1])
        if y0 * y1 < 0:
            root = x0 - y0 * (x1 - x0) / (y1 - y0)
            out_x.append(root)
            out_y.append(0.0)
        out_x.append(x1)
        out_y.append(y1)
    return np.array(out_x), np.array(out_y)


def piece_profile(piece: ResolvedPiece, group: str,
                  xs: NDArray[np.float64], interval: Interval) -> Optional[ProfilePolyline]:
    """Polyline of one piece, or None if it is inactive inside interval."""
    clipped = piece.clip(interval.a, interval.b)
    if clipped is None:
        return None
    lo, hi = clipped

    inside = xs[(xs > lo) & (xs < hi)]
    if hi > lo:
        px = np.concatenate([[lo], inside, [hi]])
    else:
        px = np.array([lo])

    py = np.asarray(piece.function(px), dtype=np.float64)
    finite = np.isfinite(py)
    px, py = insert_zero_crossings(px[finite], py[finite])
    if len(px) == 0:
        logger.debug("Piece %d of %s group has no finite profile points", piece.index, group)
        return None

    points = np.column_stack([px, py, np.zeros_like(px)])
    return ProfilePolyline(group=group, piece_index=piece.index, points=points)


def build_profiles(group: ResolvedGroup, xs: Sequence[float],
                   interval: Interval) -> Tuple[ProfilePolyline, ...]:
    """Profile polylines for every piece of a group active in interval."""
    xs_arr = np.asarray(xs, dtype=np.float64)
    profiles = []
    for piece in group.active_pieces:
        profile = piece_profile(piece, group.kind, xs_arr, interval)
        if profile is not None:
            profiles.append(profile)
    return tuple(profiles)
