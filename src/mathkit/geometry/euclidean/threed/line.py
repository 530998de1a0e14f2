"""
3D Lines
========

A line of space stored as a unit direction and the point `zero` of the
line closest to the origin. Abscissas along the line are measured from
`zero` in the direction sense:

    point_at(a) = zero + a * direction
"""

from typing import Optional

from ....spec.constants import DEFAULT_TOLERANCE, EPSILON, SAFE_MIN
from ....spec.errors import MathIllegalArgumentError
from ....util import fastmath
from ..oned.vector1d import Vector1D
from .vector3d import Vector3D


class Line:
    """Oriented line through two distinct points, from p1 towards p2."""

    def __init__(self, p1: Vector3D, p2: Vector3D, tolerance: float = DEFAULT_TOLERANCE):
        delta = p2.subtract(p1)
        norm2 = delta.norm_sq()
        if norm2 == 0.0:
            raise MathIllegalArgumentError("cannot build a line through two identical points")
        self.direction = delta.scalar_multiply(1.0 / fastmath.sqrt(norm2))
        self.zero = p1.add(delta, -p1.dot_product(delta) / norm2)
        self.tolerance = tolerance

    def __repr__(self):
        return f"Line(zero={self.zero}, direction={self.direction})"

    def revert(self) -> "Line":
        """Same points, opposite orientation."""
        return Line(self.zero, self.zero.subtract(self.direction), self.tolerance)

    def get_abscissa(self, point: Vector3D) -> float:
        return point.subtract(self.zero).dot_product(self.direction)

    def point_at(self, abscissa: float) -> Vector3D:
        return self.zero.add(self.direction, abscissa)

    def to_sub_space(self, point: Vector3D) -> Vector1D:
        return Vector1D(self.get_abscissa(point))

    def to_space(self, point: Vector1D) -> Vector3D:
        return self.point_at(point.x)

    def is_similar_to(self, line: "Line") -> bool:
        """Same point set, orientation ignored."""
        angle = Vector3D.angle(self.direction, line.direction)
        return (angle < 1.0e-10 or angle > fastmath.PI - 1.0e-10) and self.contains(line.zero)

    def contains(self, point: Vector3D) -> bool:
        return self.distance(point) < self.tolerance

    def distance(self, point: Vector3D) -> float:
        d = point.subtract(self.zero)
        n = d.subtract(self.direction, d.dot_product(self.direction))
        return n.norm()

    def distance_line(self, line: "Line") -> float:
        """Shortest distance between two lines."""
        normal = self.direction.cross_product(line.direction)
        n = normal.norm()
        if n < SAFE_MIN:
            # parallel lines
            return self.distance(line.zero)
        offset = line.zero.subtract(self.zero).dot_product(normal) / n
        return abs(offset)

    def closest_point(self, line: "Line") -> Vector3D:
        """Point of this line closest to the other one (zero if parallel)."""
        cos = self.direction.dot_product(line.direction)
        n = 1 - cos * cos
        if n < EPSILON:
            return self.zero

        delta0 = line.zero.subtract(self.zero)
        a = delta0.dot_product(self.direction)
        b = delta0.dot_product(line.direction)
        return self.zero.add(self.direction, (a - b * cos) / n)

    def intersection(self, line: "Line") -> Optional[Vector3D]:
        """Common point of two lines, None when they do not meet."""
        closest = self.closest_point(line)
        return closest if line.contains(closest) else None
