"""
Intervals Sets
==============

Finite unions of intervals of the real line, as BSP trees cut by
oriented points.

A single interval [lower, upper] is the tree

        lower (indirect)
        /            \\
    outside       upper (direct)
                  /           \\
              outside        inside

with the half-open cases dropping one cut and the whole line being a
single inside leaf.
"""

import math
from typing import List

from ...partitioning.bsp_tree import BSPTree
from ...partitioning.region import AbstractRegion, Location
from ....spec.constants import DEFAULT_TOLERANCE, SAFE_MIN
from .interval import Interval
from .oriented_point import OrientedPoint
from .vector1d import Vector1D


def _build_tree(lower: float, upper: float, tolerance: float) -> BSPTree:
    if math.isinf(lower) and lower < 0:
        if math.isinf(upper) and upper > 0:
            return BSPTree.leaf(True)
        upper_cut = OrientedPoint(Vector1D(upper), True, tolerance).whole_hyperplane()
        return BSPTree(upper_cut, BSPTree.leaf(False), BSPTree.leaf(True), None)

    lower_cut = OrientedPoint(Vector1D(lower), False, tolerance).whole_hyperplane()
    if math.isinf(upper) and upper > 0:
        return BSPTree(lower_cut, BSPTree.leaf(False), BSPTree.leaf(True), None)

    upper_cut = OrientedPoint(Vector1D(upper), True, tolerance).whole_hyperplane()
    return BSPTree(lower_cut,
                   BSPTree.leaf(False),
                   BSPTree(upper_cut, BSPTree.leaf(False), BSPTree.leaf(True), None),
                   None)


class IntervalsSet(AbstractRegion):
    """
    Set of intervals of the real line.

    IntervalsSet() is the whole line, IntervalsSet(lower, upper) a single
    interval (either bound may be infinite), IntervalsSet(tree=...) wraps
    an existing tree.
    """

    def __init__(self, lower: float = -math.inf, upper: float = math.inf,
                 tolerance: float = DEFAULT_TOLERANCE, tree: BSPTree = None):
        if tree is None:
            tree = _build_tree(lower, upper, tolerance)
        super().__init__(tree, tolerance)

    def compute_geometrical_properties(self) -> None:
        root = self.get_tree(False)
        if root.cut is None:
            self.set_barycenter(Vector1D.NaN)
            self.set_size(math.inf if root.attribute else 0.0)
            return

        size = 0.0
        total = 0.0
        for interval in self.as_list():
            size += interval.get_size()
            total += interval.get_size() * interval.get_barycenter()
        self.set_size(size)
        if math.isinf(size):
            self.set_barycenter(Vector1D.NaN)
        elif size >= SAFE_MIN:
            self.set_barycenter(Vector1D(total / size))
        else:
            self.set_barycenter(root.cut.hyperplane.location)

    def get_inf(self) -> float:
        """Lowest value of the set, -inf if unbounded below, +inf if empty."""
        node = self.get_tree(False)
        inf = math.inf
        while node.cut is not None:
            op = node.cut.hyperplane
            inf = op.location.x
            node = node.minus if op.direct else node.plus
        return -math.inf if node.attribute else inf

    def get_sup(self) -> float:
        """Highest value of the set, +inf if unbounded above, -inf if empty."""
        node = self.get_tree(False)
        sup = -math.inf
        while node.cut is not None:
            op = node.cut.hyperplane
            sup = op.location.x
            node = node.plus if op.direct else node.minus
        return math.inf if node.attribute else sup

    def as_list(self) -> List[Interval]:
        """Disjoint intervals of the set in increasing order, adjacent ones merged."""
        intervals: List[Interval] = []
        self._recurse_list(self.get_tree(False), intervals, -math.inf, math.inf)
        return intervals

    def _recurse_list(self, node: BSPTree, intervals: List[Interval],
                      lower: float, upper: float) -> None:
        if node.cut is None:
            if node.attribute:
                intervals.append(Interval(lower, upper))
            return

        op = node.cut.hyperplane
        location = op.location
        x = location.x

        # explore in increasing order
        low = node.minus if op.direct else node.plus
        high = node.plus if op.direct else node.minus

        self._recurse_list(low, intervals, lower, x)
        if (self.check_point(location, low) is Location.INSIDE
                and self.check_point(location, high) is Location.INSIDE):
            # the last interval continues in the high subtree
            x = intervals.pop().get_inf()
        self._recurse_list(high, intervals, x, upper)
