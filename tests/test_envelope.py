"""
Unit tests for solid_revolution.envelope.

Tests:
- Piece domain evaluation and inactive pieces
- Max-of-finite envelope rule
- Non-finite sample accounting
- Dict round trip of pieces
"""

import math

import numpy as np
import pytest

from solid_revolution.config import GROUP_LOWER, GROUP_UPPER
from solid_revolution.envelope import (
    CurveGroup,
    CurvePiece,
    groups_from_formulas,
    resolve_piece,
    sample_envelope,
)


class TestCurvePiece:
    """Tests for CurvePiece serialization."""

    def test_from_dict_keeps_zero_edge(self):
        """A numeric domain edge of 0 is a bound, not 'unbounded'."""
        piece = CurvePiece.from_dict({'formula': 'x', 'domain_start': 0, 'domain_end': 2})
        assert piece.domain_start == "0"
        assert piece.domain_end == "2"

    def test_blank_edges_are_unbounded(self):
        piece = CurvePiece.from_dict({'formula': 'x', 'domain_start': '', 'domain_end': '  '})
        assert piece.domain_start is None
        assert piece.domain_end is None

    def test_round_trip(self):
        piece = CurvePiece("x^2", "0", "pi")
        assert CurvePiece.from_dict(piece.to_dict()) == piece

    def test_unknown_group_kind(self):
        """Only 'upper' and 'lower' groups exist."""
        with pytest.raises(ValueError):
            CurveGroup("middle", ())


class TestResolvePiece:
    """Tests for domain evaluation of a single piece."""

    def test_unbounded_domain(self):
        resolved = resolve_piece(CurvePiece("x"))
        assert resolved.active
        assert resolved.start == -math.inf
        assert resolved.end == math.inf

    def test_symbolic_domain(self):
        """Domain edges are formulas evaluated once."""
        resolved = resolve_piece(CurvePiece("x", "pi/2", "2pi"))
        assert resolved.start == pytest.approx(math.pi / 2)
        assert resolved.end == pytest.approx(2 * math.pi)

    def test_empty_domain_is_inactive(self):
        """start > end makes the piece inactive, not an error."""
        resolved = resolve_piece(CurvePiece("x", "3", "1"))
        assert not resolved.active
        assert not resolved.contains(np.array([1.0, 2.0, 3.0])).any()
        assert resolved.clip(0.0, 5.0) is None

    def test_nan_edge_is_inactive(self):
        """A domain edge that does not evaluate disables the piece."""
        assert not resolve_piece(CurvePiece("x", "sqrt(-1)", "1")).active
        assert not resolve_piece(CurvePiece("x", "0", "foo")).active

    def test_inclusive_domain(self):
        resolved = resolve_piece(CurvePiece("x", "0", "1"))
        mask = resolved.contains(np.array([-0.1, 0.0, 0.5, 1.0, 1.1]))
        assert mask.tolist() == [False, True, True, True, False]

    def test_clip(self):
        resolved = resolve_piece(CurvePiece("x", "0", "1"))
        assert resolved.clip(0.5, 3.0) == (0.5, 1.0)
        assert resolved.clip(2.0, 3.0) is None


class TestSampleEnvelope:
    """Tests for the combined group height."""

    def test_single_piece(self):
        group = CurveGroup.single(GROUP_UPPER, "x^2").resolve()
        env = sample_envelope(group, [0.0, 1.0, 2.0])
        assert env.values.tolist() == [0.0, 1.0, 4.0]
        assert not env.has_non_finite

    def test_maximum_of_overlapping_pieces(self):
        """Overlapping pieces combine by their maximum."""
        group = CurveGroup(GROUP_UPPER, (
            CurvePiece("1", "0", "2"),
            CurvePiece("x", "1", "3"),
        )).resolve()
        env = sample_envelope(group, [0.0, 1.5, 2.0, 2.5])
        assert env.values.tolist() == [1.0, 1.5, 2.0, 2.5]

    def test_lower_group_also_uses_maximum(self):
        group = CurveGroup(GROUP_LOWER, (
            CurvePiece("1"),
            CurvePiece("2"),
        )).resolve()
        assert sample_envelope(group, [0.0]).values.tolist() == [2.0]

    def test_uncovered_sites_are_zero(self):
        """Sites covered by no piece have height 0."""
        group = CurveGroup(GROUP_UPPER, (CurvePiece("5", "1", "2"),)).resolve()
        env = sample_envelope(group, [0.0, 1.5, 3.0])
        assert env.values.tolist() == [0.0, 5.0, 0.0]

    def test_empty_group_is_zero(self):
        env = sample_envelope(CurveGroup(GROUP_LOWER, ()).resolve(), [0.0, 1.0])
        assert env.values.tolist() == [0.0, 0.0]
        assert not env.has_non_finite

    def test_non_finite_values_are_ignored(self):
        """NaN pieces do not contribute, but are counted."""
        group = CurveGroup(GROUP_UPPER, (
            CurvePiece("sqrt(x)"),
            CurvePiece("1"),
        )).resolve()
        env = sample_envelope(group, [-1.0, 4.0])
        assert env.values.tolist() == [1.0, 2.0]
        assert env.non_finite_count == 1
        assert env.has_non_finite

    def test_non_finite_outside_domain_not_counted(self):
        """Evaluations outside a piece's domain do not count."""
        group = CurveGroup(GROUP_UPPER, (CurvePiece("sqrt(x)", "0", "4"),)).resolve()
        env = sample_envelope(group, [-1.0, 1.0])
        assert env.non_finite_count == 0
        assert env.values.tolist() == [0.0, 1.0]

    def test_all_non_finite_site_is_zero(self):
        group = CurveGroup.single(GROUP_UPPER, "1/x").resolve()
        env = sample_envelope(group, [0.0, 2.0])
        assert env.values.tolist() == [0.0, 0.5]
        assert np.all(np.isfinite(env.values))

    def test_malformed_formula(self):
        group = CurveGroup.single(GROUP_UPPER, "2+").resolve()
        env = sample_envelope(group, [0.0, 1.0])
        assert env.values.tolist() == [0.0, 0.0]
        assert env.non_finite_count == 2

    def test_groups_from_formulas(self):
        upper, lower = groups_from_formulas([CurvePiece("x")], [])
        assert upper.kind == GROUP_UPPER
        assert lower.kind == GROUP_LOWER
        assert lower.pieces == ()
