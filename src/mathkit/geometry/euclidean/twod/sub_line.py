"""
Sub-Lines
=========

A line restricted to a set of intervals of its abscissa: the cut and
boundary pieces of PolygonsSet trees.
"""

from typing import List, Optional

from ...partitioning.bsp_tree import BSPTree
from ...partitioning.hyperplane import SplitSubHyperplane, SubHyperplane
from ...partitioning.region import Location
from ....spec.constants import DEFAULT_TOLERANCE
from ....util import fastmath
from ..oned.intervals_set import IntervalsSet
from ..oned.oriented_point import OrientedPoint
from ..oned.vector1d import Vector1D
from .line import Line
from .segment import Segment
from .vector2d import Vector2D


class SubLine(SubHyperplane):

    @classmethod
    def from_points(cls, start: Vector2D, end: Vector2D,
                    tolerance: float = DEFAULT_TOLERANCE) -> "SubLine":
        """Segment from start to end, on the line oriented from start to end."""
        line = Line.from_points(start, end, tolerance)
        return cls(line, IntervalsSet(line.to_sub_space(start).x,
                                      line.to_sub_space(end).x,
                                      tolerance))

    @classmethod
    def from_segment(cls, segment: Segment) -> "SubLine":
        return cls.from_points(segment.start, segment.end, segment.line.tolerance)

    def build_new(self, hyperplane: Line, remaining_region: IntervalsSet) -> "SubLine":
        return SubLine(hyperplane, remaining_region)

    def get_segments(self) -> List[Segment]:
        """The intervals of the sub-line as segments, in increasing abscissa."""
        line = self.hyperplane
        segments = []
        for interval in self.remaining_region.as_list():
            start = line.to_space(Vector1D(interval.get_inf()))
            end = line.to_space(Vector1D(interval.get_sup()))
            segments.append(Segment(start, end, line))
        return segments

    def intersection(self, other: "SubLine", include_end_points: bool) -> Optional[Vector2D]:
        """
        Crossing point of two sub-lines, None if they are parallel or the
        crossing is outside either of them. Crossings at an end point count
        only when include_end_points.
        """
        line1 = self.hyperplane
        line2 = other.hyperplane
        crossing = line1.intersection(line2)
        if crossing is None:
            return None

        loc1 = self.remaining_region.check_point(line1.to_sub_space(crossing))
        loc2 = other.remaining_region.check_point(line2.to_sub_space(crossing))
        if include_end_points:
            inside = loc1 is not Location.OUTSIDE and loc2 is not Location.OUTSIDE
        else:
            inside = loc1 is Location.INSIDE and loc2 is Location.INSIDE
        return crossing if inside else None

    def split(self, hyperplane: Line) -> SplitSubHyperplane:
        this_line = self.hyperplane
        other_line = hyperplane
        crossing = this_line.intersection(other_line)
        tolerance = this_line.tolerance

        if crossing is None:
            # parallel lines
            offset = other_line.get_line_offset(this_line)
            if offset < -tolerance:
                return SplitSubHyperplane(None, self)
            if offset > tolerance:
                return SplitSubHyperplane(self, None)
            return SplitSubHyperplane(None, None)

        direct = fastmath.sin(this_line.get_angle() - other_line.get_angle()) < 0
        x = this_line.to_sub_space(crossing)
        sub_plus = OrientedPoint(x, not direct, tolerance).whole_hyperplane()
        sub_minus = OrientedPoint(x, direct, tolerance).whole_hyperplane()

        region = self.remaining_region
        split_tree = region.get_tree(False).split(sub_minus)
        if region.is_empty(split_tree.plus):
            plus_tree = BSPTree.leaf(False)
        else:
            plus_tree = BSPTree(sub_plus, BSPTree.leaf(False), split_tree.plus, None)
        if region.is_empty(split_tree.minus):
            minus_tree = BSPTree.leaf(False)
        else:
            minus_tree = BSPTree(sub_minus, BSPTree.leaf(False), split_tree.minus, None)

        return SplitSubHyperplane(
            SubLine(this_line, IntervalsSet(tolerance=tolerance, tree=plus_tree)),
            SubLine(this_line, IntervalsSet(tolerance=tolerance, tree=minus_tree)),
        )

