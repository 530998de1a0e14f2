"""
Oriented Points
===============

The hyperplanes of the real line. A direct oriented point has its PLUS
side towards +infinity.
"""

from ...partitioning.hyperplane import Hyperplane, SplitSubHyperplane, SubHyperplane
from ....spec.constants import DEFAULT_TOLERANCE
from .vector1d import Vector1D


class OrientedPoint(Hyperplane):

    def __init__(self, location: Vector1D, direct: bool,
                 tolerance: float = DEFAULT_TOLERANCE):
        super().__init__(tolerance)
        self.location = location
        self.direct = direct

    def __repr__(self):
        return f"OrientedPoint({self.location.x}, direct={self.direct})"

    def get_offset(self, point: Vector1D) -> float:
        delta = point.x - self.location.x
        return delta if self.direct else -delta

    def project(self, point: Vector1D) -> Vector1D:
        return self.location

    def same_orientation_as(self, other: "OrientedPoint") -> bool:
        return not (self.direct ^ other.direct)

    def whole_hyperplane(self) -> "SubOrientedPoint":
        return SubOrientedPoint(self, None)

    def whole_space(self):
        from .intervals_set import IntervalsSet
        return IntervalsSet(tolerance=self.tolerance)

    def get_reverse(self) -> "OrientedPoint":
        return OrientedPoint(self.location, not self.direct, self.tolerance)


class SubOrientedPoint(SubHyperplane):
    """
    An oriented point seen as a sub-hyperplane: it has no extent, so its
    size is 0, yet it is never empty.
    """

    def build_new(self, hyperplane: OrientedPoint, remaining_region) -> "SubOrientedPoint":
        return SubOrientedPoint(hyperplane, remaining_region)

    def get_size(self) -> float:
        return 0.0

    def is_empty(self) -> bool:
        return False

    def split(self, hyperplane: OrientedPoint) -> SplitSubHyperplane:
        offset = hyperplane.get_offset(self.hyperplane.location)
        if offset < -hyperplane.tolerance:
            return SplitSubHyperplane(None, self)
        if offset > hyperplane.tolerance:
            return SplitSubHyperplane(self, None)
        return SplitSubHyperplane(None, None)

    def reunite(self, other: "SubOrientedPoint") -> "SubOrientedPoint":
        return self.copy_self()
