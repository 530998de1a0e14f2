"""
Intervals Set Tests
===================

Sets of intervals of the real line: measures, bounds, point location and
the boolean operations shared with the higher-dimensional regions.

Run: python -m pytest tests/geometry/test_intervals_set.py -v
"""

import math

import pytest

from mathkit.geometry import Interval, IntervalsSet, Location, OrientedPoint, Vector1D
from mathkit.geometry import region_factory as rf
from mathkit.geometry.partitioning import BSPTree, Side
from mathkit.spec.errors import MathIllegalArgumentError


def _bounds(region):
    return [(i.get_inf(), i.get_sup()) for i in region.as_list()]


# =============================================================================
# P1: CRITICAL - Single intervals
# =============================================================================

def test_closed_interval():
    """P1.1: [1, 3] has size 2, barycenter 2 and the expected bounds."""
    region = IntervalsSet(1.0, 3.0)
    assert region.get_size() == pytest.approx(2.0)
    assert region.get_barycenter().x == pytest.approx(2.0)
    assert region.get_inf() == 1.0
    assert region.get_sup() == 3.0
    assert _bounds(region) == [(1.0, 3.0)]


def test_check_point():
    """P1.2: Inside, boundary within tolerance, outside."""
    region = IntervalsSet(1.0, 3.0)
    assert region.check_point(Vector1D(2.0)) is Location.INSIDE
    assert region.check_point(Vector1D(1.0)) is Location.BOUNDARY
    assert region.check_point(Vector1D(3.0 + 1e-12)) is Location.BOUNDARY
    assert region.check_point(Vector1D(0.5)) is Location.OUTSIDE
    assert region.check_point(Vector1D(5.0)) is Location.OUTSIDE


def test_whole_line():
    """P1.3: The default set is the whole line, unbounded with no barycenter."""
    region = IntervalsSet()
    assert region.is_full()
    assert region.get_size() == math.inf
    assert region.get_barycenter().is_nan()
    assert region.get_inf() == -math.inf
    assert region.get_sup() == math.inf


@pytest.mark.parametrize("lower,upper,inf,sup", [
    (-math.inf, 2.0, -math.inf, 2.0),
    (1.0, math.inf, 1.0, math.inf),
])
def test_half_lines(lower, upper, inf, sup):
    """P1.4: One infinite bound gives an infinite size and a NaN barycenter."""
    region = IntervalsSet(lower, upper)
    assert region.get_inf() == inf
    assert region.get_sup() == sup
    assert region.get_size() == math.inf
    assert region.get_barycenter().is_nan()


def test_empty_leaf():
    """P1.5: An empty leaf has size 0 and reversed infinite bounds."""
    region = IntervalsSet(tree=BSPTree.leaf(False))
    assert region.is_empty()
    assert region.get_size() == 0.0
    assert region.get_barycenter().is_nan()
    assert region.get_inf() == math.inf
    assert region.get_sup() == -math.inf
    assert region.as_list() == []


# =============================================================================
# P2: IMPORTANT - Boolean operations
# =============================================================================

def test_union_disjoint():
    """P2.1: Disjoint intervals stay separate."""
    region = rf.union(IntervalsSet(0.0, 1.0), IntervalsSet(2.0, 3.0))
    assert _bounds(region) == [(0.0, 1.0), (2.0, 3.0)]
    assert region.get_size() == pytest.approx(2.0)
    assert region.get_barycenter().x == pytest.approx(1.5)
    assert region.check_point(Vector1D(1.5)) is Location.OUTSIDE


def test_union_overlapping_merges():
    """P2.2: Overlapping intervals come back as one."""
    region = rf.union(IntervalsSet(0.0, 2.0), IntervalsSet(1.0, 3.0))
    assert _bounds(region) == [(0.0, 3.0)]
    assert region.get_size() == pytest.approx(3.0)
    assert region.check_point(Vector1D(2.0)) is Location.INSIDE


def test_intersection():
    region = rf.intersection(IntervalsSet(0.0, 2.0), IntervalsSet(1.0, 3.0))
    assert _bounds(region) == [(1.0, 2.0)]
    assert region.get_size() == pytest.approx(1.0)


def test_intersection_of_disjoint_is_empty():
    region = rf.intersection(IntervalsSet(0.0, 1.0), IntervalsSet(2.0, 3.0))
    assert region.is_empty()
    assert region.get_size() == 0.0
    assert region.as_list() == []


def test_difference_makes_a_gap():
    """P2.3: Removing the middle leaves two pieces."""
    region = rf.difference(IntervalsSet(0.0, 3.0), IntervalsSet(1.0, 2.0))
    assert _bounds(region) == [(0.0, 1.0), (2.0, 3.0)]
    assert region.check_point(Vector1D(1.5)) is Location.OUTSIDE
    assert region.check_point(Vector1D(1.0)) is Location.BOUNDARY


def test_xor():
    region = rf.xor(IntervalsSet(0.0, 2.0), IntervalsSet(1.0, 3.0))
    assert _bounds(region) == [(0.0, 1.0), (2.0, 3.0)]
    assert region.get_size() == pytest.approx(2.0)


def test_complement():
    """P2.4: The complement of [1, 3] is two half-lines."""
    region = rf.get_complement(IntervalsSet(1.0, 3.0))
    assert _bounds(region) == [(-math.inf, 1.0), (3.0, math.inf)]
    assert region.get_size() == math.inf
    assert region.check_point(Vector1D(2.0)) is Location.OUTSIDE
    assert region.check_point(Vector1D(-7.0)) is Location.INSIDE


def test_operands_untouched():
    """P2.5: Boolean operations leave their operands as they were."""
    a = IntervalsSet(0.0, 2.0)
    b = IntervalsSet(1.0, 3.0)
    rf.union(a, b)
    rf.difference(a, b)
    assert _bounds(a) == [(0.0, 2.0)]
    assert _bounds(b) == [(1.0, 3.0)]


def test_contains():
    outer = IntervalsSet(0.0, 3.0)
    inner = IntervalsSet(1.0, 2.0)
    assert outer.contains(inner)
    assert not inner.contains(outer)


# =============================================================================
# P3: Intervals and hyperplanes
# =============================================================================

def test_interval_rejects_reversed_bounds():
    with pytest.raises(MathIllegalArgumentError):
        Interval(3.0, 1.0)


def test_interval_helpers():
    """P3.1: Size, barycenter and point location of a bare interval."""
    interval = Interval(1.0, 3.0)
    assert interval.get_size() == 2.0
    assert interval.get_barycenter() == 2.0
    assert interval.check_point(2.0, 1e-10) is Location.INSIDE
    assert interval.check_point(3.0, 1e-10) is Location.BOUNDARY
    assert interval.check_point(0.0, 1e-10) is Location.OUTSIDE


def test_side_of_oriented_point():
    """P3.2: [1, 3] lies below 5 and straddles 2."""
    region = IntervalsSet(1.0, 3.0)
    assert region.side(OrientedPoint(Vector1D(5.0), True)) is Side.MINUS
    assert region.side(OrientedPoint(Vector1D(5.0), False)) is Side.PLUS
    assert region.side(OrientedPoint(Vector1D(2.0), True)) is Side.BOTH


def test_oriented_point_offsets():
    direct = OrientedPoint(Vector1D(2.0), True)
    assert direct.get_offset(Vector1D(5.0)) == 3.0
    assert direct.get_reverse().get_offset(Vector1D(5.0)) == -3.0
    assert not direct.same_orientation_as(direct.get_reverse())
