"""
Oriented Planes
===============

A plane is stored with an orthonormal right-handed frame (u, v, w) where
w is the unit normal, and the signed offset of the origin:

    points p with  p . w + origin_offset = 0

The PLUS side is the one w points to. Points of the plane map to the 2D
sub-space through (p . u, p . v), so a counterclockwise polygon of the
sub-space is seen counterclockwise from the PLUS side.
"""

from typing import Optional

import numpy as np

from ...partitioning.hyperplane import Hyperplane
from ....spec.constants import CRAMER_EPS, DEFAULT_TOLERANCE, PLANE_PARALLEL_EPS, ZERO_NORM_EPS
from ....spec.errors import MathArithmeticError
from ....util import fastmath
from ..twod.vector2d import Vector2D
from .line import Line
from .vector3d import Vector3D


class Plane(Hyperplane):
    """
    Oriented plane of space.

    Build with Plane.from_normal(normal), Plane.from_point_normal(p, normal)
    or Plane.from_points(p1, p2, p3) (normal (p2 - p1) x (p3 - p1)).
    """

    def __init__(self, origin_offset: float, origin: Vector3D, u: Vector3D, v: Vector3D,
                 w: Vector3D, tolerance: float = DEFAULT_TOLERANCE):
        super().__init__(tolerance)
        self.origin_offset = origin_offset
        self.origin = origin
        self.u = u
        self.v = v
        self.w = w

    @staticmethod
    def _unit_normal(normal: Vector3D) -> Vector3D:
        norm = normal.norm()
        if norm < ZERO_NORM_EPS:
            raise MathArithmeticError(f"plane normal has near-zero norm {norm}")
        return normal.scalar_multiply(1.0 / norm)

    @classmethod
    def _from_offset(cls, origin_offset: float, w: Vector3D, tolerance: float) -> "Plane":
        u = w.orthogonal()
        return cls(origin_offset, w.scalar_multiply(-origin_offset), u, w.cross_product(u), w,
                   tolerance)

    @classmethod
    def from_normal(cls, normal: Vector3D, tolerance: float = DEFAULT_TOLERANCE) -> "Plane":
        """Plane through the origin."""
        return cls._from_offset(0.0, cls._unit_normal(normal), tolerance)

    @classmethod
    def from_point_normal(cls, point: Vector3D, normal: Vector3D,
                          tolerance: float = DEFAULT_TOLERANCE) -> "Plane":
        w = cls._unit_normal(normal)
        return cls._from_offset(-point.dot_product(w), w, tolerance)

    @classmethod
    def from_points(cls, p1: Vector3D, p2: Vector3D, p3: Vector3D,
                    tolerance: float = DEFAULT_TOLERANCE) -> "Plane":
        normal = p2.subtract(p1).cross_product(p3.subtract(p1))
        return cls.from_point_normal(p1, normal, tolerance)

    def __repr__(self):
        return f"Plane(normal={self.w}, origin_offset={self.origin_offset})"

    def get_normal(self) -> Vector3D:
        return self.w

    def get_reverse(self) -> "Plane":
        return Plane(-self.origin_offset, self.origin, self.v, self.u, self.w.negate(),
                     self.tolerance)

    # -------------------------------------------------------------------------
    # embedding
    # -------------------------------------------------------------------------

    def to_sub_space(self, point: Vector3D) -> Vector2D:
        return Vector2D(point.dot_product(self.u), point.dot_product(self.v))

    def to_space(self, point: Vector2D) -> Vector3D:
        return Vector3D.linear_combination(point.x, self.u, point.y, self.v,
                                           -self.origin_offset, self.w)

    def get_point_at(self, in_plane: Vector2D, offset: float) -> Vector3D:
        """Point above in_plane at the given signed offset."""
        return Vector3D.linear_combination(in_plane.x, self.u, in_plane.y, self.v,
                                           offset - self.origin_offset, self.w)

    def project(self, point: Vector3D) -> Vector3D:
        return self.to_space(self.to_sub_space(point))

    # -------------------------------------------------------------------------
    # hyperplane
    # -------------------------------------------------------------------------

    def get_offset(self, point: Vector3D) -> float:
        return point.dot_product(self.w) + self.origin_offset

    def get_plane_offset(self, plane: "Plane") -> float:
        """Offset of a parallel plane, positive if it lies on the PLUS side."""
        if self.same_orientation_as(plane):
            return self.origin_offset - plane.origin_offset
        return self.origin_offset + plane.origin_offset

    def same_orientation_as(self, other: "Plane") -> bool:
        return self.w.dot_product(other.w) > 0.0

    def whole_hyperplane(self):
        from ..twod.polygons_set import PolygonsSet
        from .sub_plane import SubPlane
        return SubPlane(self, PolygonsSet(tolerance=self.tolerance))

    def whole_space(self):
        from .polyhedrons_set import PolyhedronsSet
        return PolyhedronsSet(tolerance=self.tolerance)

    def contains(self, point: Vector3D) -> bool:
        return abs(self.get_offset(point)) < self.tolerance

    def is_similar_to(self, plane: "Plane") -> bool:
        """Same point set, orientation ignored."""
        angle = Vector3D.angle(self.w, plane.w)
        return ((angle < 1.0e-10 and abs(self.origin_offset - plane.origin_offset) < self.tolerance)
                or (angle > fastmath.PI - 1.0e-10
                    and abs(self.origin_offset + plane.origin_offset) < self.tolerance))

    # -------------------------------------------------------------------------
    # moves and intersections
    # -------------------------------------------------------------------------

    def rotate(self, center: Vector3D, rotation) -> "Plane":
        """Plane rotated around center, its whole frame rotated with it."""
        point = center.add(rotation.apply_to(self.origin.subtract(center)))
        w = rotation.apply_to(self.w)
        offset = -point.dot_product(w)
        return Plane(offset, w.scalar_multiply(-offset),
                     rotation.apply_to(self.u), rotation.apply_to(self.v), w,
                     self.tolerance)

    def translate(self, translation: Vector3D) -> "Plane":
        offset = -self.origin.add(translation).dot_product(self.w)
        return Plane(offset, self.w.scalar_multiply(-offset), self.u, self.v, self.w,
                     self.tolerance)

    def intersection(self, line: Line) -> Optional[Vector3D]:
        """Crossing point with a line, None when they are parallel."""
        direction = line.direction
        dot = self.w.dot_product(direction)
        if abs(dot) < PLANE_PARALLEL_EPS:
            return None
        point = line.zero
        k = -(self.origin_offset + self.w.dot_product(point)) / dot
        return point.add(direction, k)

    def intersection_plane(self, other: "Plane") -> Optional[Line]:
        """Common line of two planes, None when they are parallel."""
        direction = self.w.cross_product(other.w)
        if direction.norm() < self.tolerance:
            return None
        point = Plane.intersection_of(self, other, Plane.from_normal(direction, self.tolerance))
        return Line(point, point.add(direction), self.tolerance)

    @staticmethod
    def intersection_of(plane1: "Plane", plane2: "Plane",
                        plane3: "Plane") -> Optional[Vector3D]:
        """Single common point of three planes, None when there is none."""
        a = np.array([plane1.w.to_tuple(), plane2.w.to_tuple(), plane3.w.to_tuple()])
        if abs(np.linalg.det(a)) < CRAMER_EPS:
            return None
        d = -np.array([plane1.origin_offset, plane2.origin_offset, plane3.origin_offset])
        return Vector3D.from_tuple(float(c) for c in np.linalg.solve(a, d))
