"""
Unit tests for solid_revolution.geometry.profiles.

Tests:
- Polylines start and end at clipped domain edges
- Zero crossings get an explicit root point
- Inactive and out-of-range pieces produce no polyline
"""

import numpy as np
import pytest

from solid_revolution.bounds import Interval
from solid_revolution.config import GROUP_UPPER
from solid_revolution.envelope import CurveGroup, CurvePiece
from solid_revolution.geometry.profiles import build_profiles, insert_zero_crossings


class TestInsertZeroCrossings:
    """Tests for insert_zero_crossings()."""

    def test_root_inserted(self):
        xs, ys = insert_zero_crossings(np.array([0.0, 2.0]), np.array([-1.0, 1.0]))
        assert xs.tolist() == [0.0, 1.0, 2.0]
        assert ys.tolist() == [-1.0, 0.0, 1.0]

    def test_touching_zero_not_duplicated(self):
        """A sample that is exactly 0 is not a sign change."""
        xs, ys = insert_zero_crossings(np.array([0.0, 1.0, 2.0]), np.array([-1.0, 0.0, 1.0]))
        assert xs.tolist() == [0.0, 1.0, 2.0]

    def test_short_input(self):
        xs, ys = insert_zero_crossings(np.array([1.0]), np.array([3.0]))
        assert xs.tolist() == [1.0]


class TestBuildProfiles:
    """Tests for build_profiles()."""

    def test_piecewise_edges(self, piecewise_upper):
        """Each piece starts and ends exactly at its domain edges."""
        interval = Interval(0.0, 2.0)
        profiles = build_profiles(piecewise_upper.resolve(), interval.linspace(40), interval)
        assert len(profiles) == 2
        assert profiles[0].start == (0.0, 1.0)
        assert profiles[0].end == (1.0, 1.0)
        assert profiles[1].start == (1.0, 2.0)
        assert profiles[1].end == (2.0, 2.0)
        assert [p.piece_index for p in profiles] == [0, 1]
        assert all(p.group == GROUP_UPPER for p in profiles)

    def test_clipped_to_interval(self):
        group = CurveGroup(GROUP_UPPER, (CurvePiece("x+2", "-1", "0.5"),)).resolve()
        interval = Interval(0.0, 2.0)
        (profile,) = build_profiles(group, interval.linspace(8), interval)
        assert profile.start == (0.0, 2.0)
        assert profile.end == pytest.approx((0.5, 2.5))

    def test_zero_crossing_point(self):
        """x - 1 sampled at 0, 2/3, 4/3, 2 gains the root at x = 1."""
        group = CurveGroup.single(GROUP_UPPER, "x-1").resolve()
        interval = Interval(0.0, 2.0)
        (profile,) = build_profiles(group, interval.linspace(3), interval)
        assert len(profile) == 5
        assert profile.points[2, 0] == pytest.approx(1.0)
        assert profile.points[2, 1] == 0.0

    def test_points_in_meridian_plane(self, piecewise_upper):
        interval = Interval(0.0, 2.0)
        for profile in build_profiles(piecewise_upper.resolve(), interval.linspace(10), interval):
            assert np.all(profile.points[:, 2] == 0.0)

    def test_piece_outside_interval(self):
        group = CurveGroup(GROUP_UPPER, (CurvePiece("1", "5", "6"),)).resolve()
        interval = Interval(0.0, 2.0)
        assert build_profiles(group, interval.linspace(10), interval) == ()

    def test_inactive_piece(self):
        group = CurveGroup(GROUP_UPPER, (CurvePiece("1", "2", "1"),)).resolve()
        interval = Interval(0.0, 2.0)
        assert build_profiles(group, interval.linspace(10), interval) == ()

    def test_single_point_domain(self):
        """A domain touching the interval in one point yields one point."""
        group = CurveGroup(GROUP_UPPER, (CurvePiece("3", "2", "4"),)).resolve()
        interval = Interval(0.0, 2.0)
        (profile,) = build_profiles(group, interval.linspace(10), interval)
        assert len(profile) == 1
        assert profile.start == (2.0, 3.0)
