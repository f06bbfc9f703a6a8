"""
Piecewise envelope resolution.

A CurveGroup ("upper" or "lower") is an ordered set of CurvePiece, each a
formula restricted to its own [start, end] domain. At every x-site the
group's combined height is the maximum over the finite values of the
pieces whose domain contains x. Both groups use the maximum so that
overlapping pieces build the shape up rather than cut it away. Sites
covered by no piece, or where every active piece is non-finite, have
height 0.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from solid_revolution.config import GROUP_LOWER, GROUP_UPPER
from solid_revolution.expression import CompiledExpression, compile_formula, evaluate_at

logger = logging.getLogger(__name__)


def _edge_text(value: Any) -> Optional[str]:
    """Domain edge as formula text; None/blank means unbounded."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class CurvePiece:
    """One boundary piece as entered by the user.

    Attributes:
        formula: Formula text in x (empty means the constant 0)
        domain_start: Formula for the left domain edge, None/empty = -inf
        domain_end: Formula for the right domain edge, None/empty = +inf
    """
    formula: str = ""
    domain_start: Optional[str] = None
    domain_end: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'formula': self.formula,
            'domain_start': self.domain_start or "",
            'domain_end': self.domain_end or "",
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CurvePiece':
        """Create a piece from a dict with formula/domain_start/domain_end."""
        return cls(
            formula=str(data.get('formula', '') or ''),
            domain_start=_edge_text(data.get('domain_start')),
            domain_end=_edge_text(data.get('domain_end')),
        )


@dataclass(frozen=True)
class CurveGroup:
    """Ordered set of curve pieces tagged "upper" or "lower"."""
    kind: str
    pieces: Tuple[CurvePiece, ...] = ()

    def __post_init__(self):
        if self.kind not in (GROUP_UPPER, GROUP_LOWER):
            raise ValueError(f"Unknown curve group kind: {self.kind!r}")
        object.__setattr__(self, 'pieces', tuple(self.pieces))

    @classmethod
    def single(cls, kind: str, formula: str) -> 'CurveGroup':
        """Group holding one unbounded piece (the plain f(x)/g(x) case)."""
        return cls(kind, (CurvePiece(formula),))

    def resolve(self) -> 'ResolvedGroup':
        """Compile every piece and evaluate its domain once."""
        return ResolvedGroup(
            kind=self.kind,
            pieces=tuple(resolve_piece(p, i) for i, p in enumerate(self.pieces)),
        )


@dataclass(frozen=True)
class ResolvedPiece:
    """A curve piece with its compiled formula and numeric domain.

    Attributes:
        piece: Source CurvePiece
        index: Position in its group (used for colour assignment downstream)
        function: Compiled formula
        start: Evaluated left edge (may be -inf)
        end: Evaluated right edge (may be +inf)
        active: False if the domain is empty or could not be evaluated
    """
    piece: CurvePiece
    index: int
    function: CompiledExpression
    start: float
    end: float
    active: bool = True

    def contains(self, xs: NDArray[np.float64]) -> NDArray[np.bool_]:
        """Inclusive domain membership mask for an array of x-sites."""
        if not self.active:
            return np.zeros(np.shape(xs), dtype=bool)
        return (xs >= self.start) & (xs <= self.end)

    def clip(self, a: float, b: float) -> Optional[Tuple[float, float]]:
        """Intersection of the piece's domain with [a, b], None if empty."""
        if not self.active:
            return None
        lo = max(self.start, a)
        hi = min(self.end, b)
        if lo > hi:
            return None
        return lo, hi


@dataclass(frozen=True)
class ResolvedGroup:
    """Compiled counterpart of a CurveGroup."""
    kind: str
    pieces: Tuple[ResolvedPiece, ...] = ()

    @property
    def active_pieces(self) -> Tuple[ResolvedPiece, ...]:
        return tuple(p for p in self.pieces if p.active)


def _evaluate_domain_edge(text: Optional[str], default: float) -> float:
    if text is None or not str(text).strip():
        return default
    return evaluate_at(text, 0.0)


def resolve_piece(piece: CurvePiece, index: int = 0) -> ResolvedPiece:
    """Compile a piece and evaluate its domain edges once.

    An edge formula that evaluates to NaN, or a domain with start > end,
    makes the piece inactive everywhere. This is not an error.
    """
    start = _evaluate_domain_edge(piece.domain_start, -math.inf)
    end = _evaluate_domain_edge(piece.domain_end, math.inf)
    active = not (math.isnan(start) or math.isnan(end)) and start <= end

    if not active:
        logger.debug(
            "Curve piece %d inactive: domain [%s, %s] -> [%s, %s]",
            index, piece.domain_start, piece.domain_end, start, end,
        )

    return ResolvedPiece(
        piece=piece,
        index=index,
        function=compile_formula(piece.formula),
        start=start,
        end=end,
        active=active,
    )


@dataclass(frozen=True)
class SampledEnvelope:
    """Combined group height sampled at a fixed set of x-sites.

    Attributes:
        kind: "upper" or "lower"
        xs: Sample sites
        values: Combined (max) height per site; always finite
        non_finite_count: Number of (piece, site) evaluations that were
            non-finite at sites inside the piece's domain
    """
    kind: str
    xs: NDArray[np.float64] = field(repr=False)
    values: NDArray[np.float64] = field(repr=False)
    non_finite_count: int = 0

    @property
    def has_non_finite(self) -> bool:
        return self.non_finite_count > 0

    def __len__(self) -> int:
        return len(self.xs)


def sample_envelope(group: ResolvedGroup, xs: Sequence[float]) -> SampledEnvelope:
    """Evaluate a resolved group's envelope at every x-site.

    Args:
        group: Resolved curve group
        xs: Ordered x-sites

    Returns:
        SampledEnvelope with one finite combined value per site
    """
    xs_arr = np.asarray(xs, dtype=np.float64)
    combined = np.full(xs_arr.shape, -np.inf)
    any_finite = np.zeros(xs_arr.shape, dtype=bool)
    non_finite_count = 0

    for piece in group.active_pieces:
        mask = piece.contains(xs_arr)
        if not mask.any():
            continue
        values = piece.function(xs_arr)
        finite = np.isfinite(values)
        non_finite_count += int(np.count_nonzero(mask & ~finite))

        usable = mask & finite
        combined = np.where(usable, np.maximum(combined, values), combined)
        any_finite |= usable

    combined = np.where(any_finite, combined, 0.0)

    return SampledEnvelope(
        kind=group.kind,
        xs=xs_arr,
        values=combined,
        non_finite_count=non_finite_count,
    )


def groups_from_formulas(upper: Iterable[CurvePiece],
                         lower: Iterable[CurvePiece]) -> Tuple[CurveGroup, CurveGroup]:
    """Build the (upper, lower) group pair from two piece collections."""
    return CurveGroup(GROUP_UPPER, tuple(upper)), CurveGroup(GROUP_LOWER, tuple(lower))
