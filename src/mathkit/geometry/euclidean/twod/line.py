"""
Oriented Lines
==============

A line is stored as its direction angle (with cos and sin) and the
signed distance from the origin:

    points p with  sin * p.x - cos * p.y + origin_offset = 0

The PLUS side is on the right when walking along the direction. Points
of the line map to the 1D sub-space through their abscissa
cos * p.x + sin * p.y.

LineTransform carries a 2D affine map to points, lines and the oriented
points of a line's sub-space, which is how PolygonsSet.apply_transform
moves a whole region.
"""

import math
from typing import Optional

import numpy as np

from ...partitioning.hyperplane import Hyperplane, Transform
from ....spec.constants import DEFAULT_TOLERANCE, LINE_PARALLEL_EPS, NON_INVERTIBLE_EPS
from ....spec.errors import MathIllegalArgumentError
from ....util import fastmath
from ....util.math_arrays import linear_combination
from ....util.math_utils import normalize_angle
from ..oned.intervals_set import IntervalsSet
from ..oned.oriented_point import OrientedPoint
from ..oned.vector1d import Vector1D
from .vector2d import Vector2D


class Line(Hyperplane):
    """
    Oriented line of the plane.

    Build with Line.from_points(p1, p2) (oriented from p1 to p2) or
    Line.from_angle(point, angle).
    """

    def __init__(self, angle: float, cos: float, sin: float, origin_offset: float,
                 tolerance: float = DEFAULT_TOLERANCE):
        super().__init__(tolerance)
        self.angle = angle
        self.cos = cos
        self.sin = sin
        self.origin_offset = origin_offset

    @classmethod
    def from_points(cls, p1: Vector2D, p2: Vector2D,
                    tolerance: float = DEFAULT_TOLERANCE) -> "Line":
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        d = fastmath.hypot(dx, dy)
        if d == 0.0:
            return cls(0.0, 1.0, 0.0, p1.y, tolerance)
        angle = fastmath.PI + fastmath.atan2(-dy, -dx)
        return cls(angle, dx / d, dy / d,
                   linear_combination((p2.x, -p1.x), (p1.y, p2.y)) / d,
                   tolerance)

    @classmethod
    def from_angle(cls, p: Vector2D, alpha: float,
                   tolerance: float = DEFAULT_TOLERANCE) -> "Line":
        angle = normalize_angle(alpha, math.pi)
        cos = fastmath.cos(angle)
        sin = fastmath.sin(angle)
        return cls(angle, cos, sin, linear_combination((cos, -sin), (p.y, p.x)), tolerance)

    def __repr__(self):
        return f"Line(angle={self.angle}, origin_offset={self.origin_offset})"

    def get_reverse(self) -> "Line":
        angle = self.angle + math.pi if self.angle < math.pi else self.angle - math.pi
        return Line(angle, -self.cos, -self.sin, -self.origin_offset, self.tolerance)

    def get_angle(self) -> float:
        """Direction angle in [0, 2 pi)."""
        return normalize_angle(self.angle, math.pi)

    # -------------------------------------------------------------------------
    # embedding
    # -------------------------------------------------------------------------

    def to_sub_space(self, point: Vector2D) -> Vector1D:
        return Vector1D(linear_combination((self.cos, self.sin), (point.x, point.y)))

    def to_space(self, point: Vector1D) -> Vector2D:
        a = point.x
        return Vector2D(linear_combination((a, -self.origin_offset), (self.cos, self.sin)),
                        linear_combination((a, self.origin_offset), (self.sin, self.cos)))

    def project(self, point: Vector2D) -> Vector2D:
        return self.to_space(self.to_sub_space(point))

    def get_point_at(self, abscissa: Vector1D, offset: float) -> Vector2D:
        """Point at the given abscissa and signed offset from the line."""
        x = abscissa.x
        d_offset = offset - self.origin_offset
        return Vector2D(linear_combination((x, d_offset), (self.cos, self.sin)),
                        linear_combination((x, -d_offset), (self.sin, self.cos)))

    # -------------------------------------------------------------------------
    # hyperplane
    # -------------------------------------------------------------------------

    def get_offset(self, point: Vector2D) -> float:
        return linear_combination((self.sin, -self.cos, 1.0),
                                  (point.x, point.y, self.origin_offset))

    def get_line_offset(self, line: "Line") -> float:
        """Offset of a parallel line, positive if it lies on the PLUS side."""
        if linear_combination((self.cos, self.sin), (line.cos, line.sin)) > 0:
            return self.origin_offset - line.origin_offset
        return self.origin_offset + line.origin_offset

    def same_orientation_as(self, other: "Line") -> bool:
        return linear_combination((self.sin, self.cos), (other.sin, other.cos)) >= 0.0

    def whole_hyperplane(self):
        from .sub_line import SubLine
        return SubLine(self, IntervalsSet(tolerance=self.tolerance))

    def whole_space(self):
        from .polygons_set import PolygonsSet
        return PolygonsSet(tolerance=self.tolerance)

    def intersection(self, other: "Line") -> Optional[Vector2D]:
        """Crossing point, None for parallel lines."""
        d = linear_combination((self.sin, -other.sin), (other.cos, self.cos))
        if abs(d) < LINE_PARALLEL_EPS:
            return None
        return Vector2D(
            linear_combination((self.cos, -other.cos), (other.origin_offset, self.origin_offset)) / d,
            linear_combination((self.sin, -other.sin), (other.origin_offset, self.origin_offset)) / d,
        )

    def contains(self, point: Vector2D) -> bool:
        return abs(self.get_offset(point)) < self.tolerance

    def distance(self, point: Vector2D) -> float:
        return abs(self.get_offset(point))

    def is_parallel_to(self, line: "Line") -> bool:
        return abs(linear_combination((self.sin, -self.cos), (line.cos, line.sin))) < LINE_PARALLEL_EPS

    def translate_to_point(self, point: Vector2D) -> "Line":
        """Parallel line with the same orientation through point."""
        return Line(self.angle, self.cos, self.sin,
                    linear_combination((self.cos, -self.sin), (point.y, point.x)),
                    self.tolerance)

    @staticmethod
    def get_transform(cxx: float, cyx: float, cxy: float, cyy: float,
                      cx1: float, cy1: float) -> "LineTransform":
        """
        Transform for the affine map
            x' = cxx x + cxy y + cx1
            y' = cyx x + cyy y + cy1
        """
        return LineTransform(cxx, cyx, cxy, cyy, cx1, cy1)


class LineTransform(Transform):
    """
    Affine map of the plane acting on points, lines and line sub-spaces.

    Raises:
        MathIllegalArgumentError: the linear part is not invertible
    """

    def __init__(self, cxx: float, cyx: float, cxy: float, cyy: float,
                 cx1: float, cy1: float):
        self.cxx = cxx
        self.cxy = cxy
        self.cx1 = cx1
        self.cyx = cyx
        self.cyy = cyy
        self.cy1 = cy1

        self.c1y = linear_combination((cxy, -cyy), (cy1, cx1))
        self.c1x = linear_combination((cxx, -cyx), (cy1, cx1))
        self.c11 = linear_combination((cxx, -cyx), (cyy, cxy))
        if abs(self.c11) < NON_INVERTIBLE_EPS:
            raise MathIllegalArgumentError("non-invertible affine transform collapses some lines into single points")

    @classmethod
    def from_matrix(cls, matrix) -> "LineTransform":
        """From a 2x3 matrix [[cxx, cxy, cx1], [cyx, cyy, cy1]]."""
        m = np.asarray(matrix, dtype=float)
        if m.shape != (2, 3):
            raise MathIllegalArgumentError(f"Expected a 2x3 affine matrix, got shape {m.shape}")
        return cls(m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])

    def apply(self, point: Vector2D) -> Vector2D:
        x, y = point.x, point.y
        return Vector2D(linear_combination((self.cxx, self.cxy, self.cx1), (x, y, 1.0)),
                        linear_combination((self.cyx, self.cyy, self.cy1), (x, y, 1.0)))

    def apply_hyperplane(self, line: Line) -> Line:
        r_offset = linear_combination((self.c1x, self.c1y, self.c11),
                                      (line.cos, line.sin, line.origin_offset))
        r_cos = linear_combination((self.cxx, self.cxy), (line.cos, line.sin))
        r_sin = linear_combination((self.cyx, self.cyy), (line.cos, line.sin))
        inv = 1.0 / math.sqrt(r_sin * r_sin + r_cos * r_cos)
        return Line(fastmath.PI + fastmath.atan2(-r_sin, -r_cos),
                    inv * r_cos, inv * r_sin, inv * r_offset,
                    line.tolerance)

    def apply_sub(self, sub, original: Line, transformed: Line):
        op = sub.hyperplane
        new_location = transformed.to_sub_space(self.apply(original.to_space(op.location)))
        return OrientedPoint(new_location, op.direct, original.tolerance).whole_hyperplane()
