"""
3D Rotations
============

Rotations stored as a normalized quaternion (q0, q1, q2, q3), q0 being the
scalar part. q and -q describe the same rotation.

CONVENTIONS:
    VECTOR_OPERATOR   the rotation moves vectors, with the angle counted
                      counterclockwise around the axis (right hand rule)
    FRAME_TRANSFORM   the rotation moves the frame, so vectors expressed in
                      it appear to turn the other way

The matrix returned by get_matrix() maps vectors by left multiplication:
apply_to(u) == get_matrix() @ u.
"""

from enum import Enum
from typing import Tuple

import numpy as np

from ....spec.constants import ROTATION_MATRIX_THRESHOLD, ROTATION_SINGULARITY
from ....spec.errors import (
    MathArithmeticError,
    MathIllegalArgumentError,
    NotARotationMatrixError,
)
from ....util import fastmath
from .vector3d import Vector3D


class RotationConvention(Enum):
    VECTOR_OPERATOR = "vector_operator"
    FRAME_TRANSFORM = "frame_transform"


def _mat2quat(ort: np.ndarray) -> Tuple[float, float, float, float]:
    # One of the quaternion elements is at least 0.5 in magnitude; the first
    # one above 0.45 (4 q^2 - 1 > -0.19) is safe to divide by.
    s = ort[0, 0] + ort[1, 1] + ort[2, 2]
    if s > -0.19:
        q0 = 0.5 * fastmath.sqrt(s + 1.0)
        inv = 0.25 / q0
        return (q0,
                inv * (ort[1, 2] - ort[2, 1]),
                inv * (ort[2, 0] - ort[0, 2]),
                inv * (ort[0, 1] - ort[1, 0]))

    s = ort[0, 0] - ort[1, 1] - ort[2, 2]
    if s > -0.19:
        q1 = 0.5 * fastmath.sqrt(s + 1.0)
        inv = 0.25 / q1
        return (inv * (ort[1, 2] - ort[2, 1]),
                q1,
                inv * (ort[0, 1] + ort[1, 0]),
                inv * (ort[0, 2] + ort[2, 0]))

    s = ort[1, 1] - ort[0, 0] - ort[2, 2]
    if s > -0.19:
        q2 = 0.5 * fastmath.sqrt(s + 1.0)
        inv = 0.25 / q2
        return (inv * (ort[2, 0] - ort[0, 2]),
                inv * (ort[0, 1] + ort[1, 0]),
                q2,
                inv * (ort[2, 1] + ort[1, 2]))

    s = ort[2, 2] - ort[0, 0] - ort[1, 1]
    q3 = 0.5 * fastmath.sqrt(s + 1.0)
    inv = 0.25 / q3
    return (inv * (ort[0, 1] - ort[1, 0]),
            inv * (ort[0, 2] + ort[2, 0]),
            inv * (ort[2, 1] + ort[1, 2]),
            q3)


class Rotation:
    """
    Rotation of 3D space.

    Constructors:
        Rotation(q0, q1, q2, q3, needs_normalization=False)
        Rotation.from_axis_angle(axis, angle, convention)
        Rotation.from_vectors(u, v)          shortest rotation taking u to v
        Rotation.from_vector_pairs(u1, u2, v1, v2)
        Rotation.from_matrix(m, threshold)
    """

    def __init__(self, q0: float, q1: float, q2: float, q3: float,
                 needs_normalization: bool = False):
        if needs_normalization:
            norm = fastmath.sqrt(q0 * q0 + q1 * q1 + q2 * q2 + q3 * q3)
            if norm == 0:
                raise MathArithmeticError("cannot normalize a zero quaternion")
            inv = 1.0 / norm
            q0, q1, q2, q3 = inv * q0, inv * q1, inv * q2, inv * q3
        self.q0 = float(q0)
        self.q1 = float(q1)
        self.q2 = float(q2)
        self.q3 = float(q3)

    @classmethod
    def from_axis_angle(cls, axis: Vector3D, angle: float,
                        convention: RotationConvention = RotationConvention.VECTOR_OPERATOR
                        ) -> "Rotation":
        norm = axis.norm()
        if norm == 0:
            raise MathIllegalArgumentError("zero norm for rotation axis")

        if convention is RotationConvention.VECTOR_OPERATOR:
            half_angle = -0.5 * angle
        else:
            half_angle = 0.5 * angle
        coeff = fastmath.sin(half_angle) / norm
        return cls(fastmath.cos(half_angle), coeff * axis.x, coeff * axis.y, coeff * axis.z)

    @classmethod
    def from_vectors(cls, u: Vector3D, v: Vector3D) -> "Rotation":
        """
        Rotation of smallest angle taking the direction of u to that of v.
        For opposite vectors the axis is an arbitrary orthogonal of u.
        """
        norm_product = u.norm() * v.norm()
        if norm_product == 0:
            raise MathArithmeticError("zero norm for rotation defining vector")

        dot = u.dot_product(v)
        if dot < (ROTATION_SINGULARITY - 1.0) * norm_product:
            w = u.orthogonal()
            return cls(0.0, -w.x, -w.y, -w.z)

        q0 = fastmath.sqrt(0.5 * (1.0 + dot / norm_product))
        coeff = 1.0 / (2.0 * q0 * norm_product)
        q = v.cross_product(u)
        return cls(q0, coeff * q.x, coeff * q.y, coeff * q.z)

    @classmethod
    def from_vector_pairs(cls, u1: Vector3D, u2: Vector3D,
                          v1: Vector3D, v2: Vector3D) -> "Rotation":
        """
        Rotation taking u1 to v1 and the (u1, u2) plane to the (v1, v2)
        plane. Only directions matter, and when the angles between the pairs
        differ v2 is replaced by its component orthogonal to v1.

        Raises:
            MathArithmeticError: a vector is zero or a pair is colinear
        """
        u3 = u1.cross_product(u2).normalize()
        u2 = u3.cross_product(u1).normalize()
        u1 = u1.normalize()

        v3 = v1.cross_product(v2).normalize()
        v2 = v3.cross_product(v1).normalize()
        v1 = v1.normalize()

        basis_u = np.column_stack([u1.to_array(), u2.to_array(), u3.to_array()])
        basis_v = np.column_stack([v1.to_array(), v2.to_array(), v3.to_array()])
        return cls(*(float(q) for q in _mat2quat(basis_v @ basis_u.T)))

    @classmethod
    def from_matrix(cls, matrix, threshold: float = ROTATION_MATRIX_THRESHOLD) -> "Rotation":
        """
        Rotation closest to a 3x3 matrix.

        The matrix is replaced by the orthogonal factor of its polar
        decomposition (U @ Vt from the SVD), so slightly perturbed rotation
        matrices are accepted.

        Raises:
            NotARotationMatrixError: wrong shape, non-finite entries, a
                singular value below threshold, or a reflection
        """
        m = np.asarray(matrix, dtype=float)
        if m.shape != (3, 3):
            raise NotARotationMatrixError(f"a {m.shape} matrix cannot be a rotation matrix")
        if not np.all(np.isfinite(m)):
            raise NotARotationMatrixError("rotation matrix has non-finite entries")

        u, singular_values, vt = np.linalg.svd(m)
        if singular_values[-1] < threshold:
            raise NotARotationMatrixError(
                f"unable to orthogonalize matrix, smallest singular value {singular_values[-1]}"
            )
        ort = u @ vt
        det = np.linalg.det(ort)
        if det < 0.0:
            raise NotARotationMatrixError(
                f"the closest orthogonal matrix has a negative determinant {det}"
            )
        return cls(*(float(q) for q in _mat2quat(ort)))

    def __repr__(self):
        return f"Rotation(q0={self.q0}, q1={self.q1}, q2={self.q2}, q3={self.q3})"

    # -------------------------------------------------------------------------
    # axis, angle and matrix
    # -------------------------------------------------------------------------

    def revert(self) -> "Rotation":
        return Rotation(-self.q0, self.q1, self.q2, self.q3)

    def get_axis(self, convention: RotationConvention = RotationConvention.VECTOR_OPERATOR
                 ) -> Vector3D:
        """Unit axis; +i (or -i) for the identity."""
        squared_sine = self.q1 * self.q1 + self.q2 * self.q2 + self.q3 * self.q3
        vector_operator = convention is RotationConvention.VECTOR_OPERATOR
        if squared_sine == 0:
            return Vector3D.PLUS_I if vector_operator else Vector3D.MINUS_I

        sgn = 1.0 if vector_operator else -1.0
        if self.q0 < 0:
            inverse = sgn / fastmath.sqrt(squared_sine)
        else:
            inverse = -sgn / fastmath.sqrt(squared_sine)
        return Vector3D(self.q1 * inverse, self.q2 * inverse, self.q3 * inverse)

    def get_angle(self) -> float:
        """Angle in [0, pi]."""
        if self.q0 < -0.1 or self.q0 > 0.1:
            return 2 * fastmath.asin(fastmath.sqrt(self.q1 * self.q1
                                                   + self.q2 * self.q2
                                                   + self.q3 * self.q3))
        if self.q0 < 0:
            return 2 * fastmath.acos(-self.q0)
        return 2 * fastmath.acos(self.q0)

    def get_matrix(self) -> np.ndarray:
        q0, q1, q2, q3 = self.q0, self.q1, self.q2, self.q3
        q0q0, q0q1, q0q2, q0q3 = q0 * q0, q0 * q1, q0 * q2, q0 * q3
        q1q1, q1q2, q1q3 = q1 * q1, q1 * q2, q1 * q3
        q2q2, q2q3, q3q3 = q2 * q2, q2 * q3, q3 * q3
        return np.array([
            [2.0 * (q0q0 + q1q1) - 1.0, 2.0 * (q1q2 + q0q3), 2.0 * (q1q3 - q0q2)],
            [2.0 * (q1q2 - q0q3), 2.0 * (q0q0 + q2q2) - 1.0, 2.0 * (q2q3 + q0q1)],
            [2.0 * (q1q3 + q0q2), 2.0 * (q2q3 - q0q1), 2.0 * (q0q0 + q3q3) - 1.0],
        ])

    # -------------------------------------------------------------------------
    # application and composition
    # -------------------------------------------------------------------------

    def apply_to(self, u: Vector3D) -> Vector3D:
        x, y, z = u.x, u.y, u.z
        q0, q1, q2, q3 = self.q0, self.q1, self.q2, self.q3
        s = q1 * x + q2 * y + q3 * z
        return Vector3D(2 * (q0 * (x * q0 - (q2 * z - q3 * y)) + s * q1) - x,
                        2 * (q0 * (y * q0 - (q3 * x - q1 * z)) + s * q2) - y,
                        2 * (q0 * (z * q0 - (q1 * y - q2 * x)) + s * q3) - z)

    def apply_inverse_to(self, u: Vector3D) -> Vector3D:
        x, y, z = u.x, u.y, u.z
        m0, q1, q2, q3 = -self.q0, self.q1, self.q2, self.q3
        s = q1 * x + q2 * y + q3 * z
        return Vector3D(2 * (m0 * (x * m0 - (q2 * z - q3 * y)) + s * q1) - x,
                        2 * (m0 * (y * m0 - (q3 * x - q1 * z)) + s * q2) - y,
                        2 * (m0 * (z * m0 - (q1 * y - q2 * x)) + s * q3) - z)

    def _compose_internal(self, r: "Rotation") -> "Rotation":
        return Rotation(r.q0 * self.q0 - (r.q1 * self.q1 + r.q2 * self.q2 + r.q3 * self.q3),
                        r.q1 * self.q0 + r.q0 * self.q1 + (r.q2 * self.q3 - r.q3 * self.q2),
                        r.q2 * self.q0 + r.q0 * self.q2 + (r.q3 * self.q1 - r.q1 * self.q3),
                        r.q3 * self.q0 + r.q0 * self.q3 + (r.q1 * self.q2 - r.q2 * self.q1))

    def _compose_inverse_internal(self, r: "Rotation") -> "Rotation":
        return Rotation(-r.q0 * self.q0 - (r.q1 * self.q1 + r.q2 * self.q2 + r.q3 * self.q3),
                        -r.q1 * self.q0 + r.q0 * self.q1 + (r.q2 * self.q3 - r.q3 * self.q2),
                        -r.q2 * self.q0 + r.q0 * self.q2 + (r.q3 * self.q1 - r.q1 * self.q3),
                        -r.q3 * self.q0 + r.q0 * self.q3 + (r.q1 * self.q2 - r.q2 * self.q1))

    def compose(self, r: "Rotation",
                convention: RotationConvention = RotationConvention.VECTOR_OPERATOR
                ) -> "Rotation":
        """
        With VECTOR_OPERATOR, r is applied first and then self:
        self.compose(r).apply_to(u) == self.apply_to(r.apply_to(u)).
        FRAME_TRANSFORM composes in the opposite order.
        """
        if convention is RotationConvention.VECTOR_OPERATOR:
            return self._compose_internal(r)
        return r._compose_internal(self)

    @staticmethod
    def distance(r1: "Rotation", r2: "Rotation") -> float:
        """Angle of the rotation r1 composed with the inverse of r2."""
        return r1._compose_inverse_internal(r2).get_angle()


Rotation.IDENTITY = Rotation(1.0, 0.0, 0.0, 0.0)
