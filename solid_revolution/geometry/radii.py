"""
Cross-axis / washer rule.

Where the upper and lower values have strictly opposite sign the swept
region contains the rotation axis, so the cross-section is a full disk:
    outer = max(|upper|, |lower|), inner = 0
Otherwise (same sign, or either value zero) it is a washer:
    outer = max(|upper|, |lower|), inner = min(|upper|, |lower|)
"""

from typing import Tuple, Union

import numpy as np
from numpy.typing import NDArray

ArrayLike = Union[float, NDArray[np.float64]]


def crosses_axis(upper: ArrayLike, lower: ArrayLike) -> NDArray[np.bool_]:
    """True where upper and lower have strictly opposite sign."""
    return np.sign(upper) * np.sign(lower) < 0


def washer_radii(upper: ArrayLike, lower: ArrayLike) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Outer and inner radius per site.

    Args:
        upper: Upper-group values (raw, signed)
        lower: Lower-group values (raw, signed)

    Returns:
        (outer, inner) arrays with outer >= inner >= 0
    """
    abs_upper = np.abs(np.asarray(upper, dtype=np.float64))
    abs_lower = np.abs(np.asarray(lower, dtype=np.float64))
    outer = np.maximum(abs_upper, abs_lower)
    inner = np.where(crosses_axis(upper, lower), 0.0, np.minimum(abs_upper, abs_lower))
    return outer, inner
