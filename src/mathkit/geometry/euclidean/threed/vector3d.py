"""
3D Vectors
==========

Points and vectors of Euclidean space, with the spherical coordinates
alpha (azimuth in the xy plane, from +x) and delta (elevation from the
xy plane).

Dot and cross products go through the compensated linear combination,
so nearly orthogonal or nearly parallel vectors keep full accuracy.
"""

from dataclasses import dataclass
from typing import Tuple

from ...vector import Vector
from ....spec.constants import ANGLE_ACOS_THRESHOLD, HASH_NAN_3D
from ....spec.errors import MathArithmeticError
from ....util import fastmath
from ....util.math_arrays import linear_combination
from ....util.math_utils import hash_value, to_int32


@dataclass(frozen=True, eq=False)
class Vector3D(Vector):
    x: float
    y: float
    z: float

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    @classmethod
    def from_spherical(cls, alpha: float, delta: float) -> "Vector3D":
        """Unit vector with azimuth alpha and elevation delta."""
        cos_delta = fastmath.cos(delta)
        return cls(fastmath.cos(alpha) * cos_delta,
                   fastmath.sin(alpha) * cos_delta,
                   fastmath.sin(delta))

    @classmethod
    def linear_combination(cls, *terms) -> "Vector3D":
        """
        a1 u1 + a2 u2 + ... from alternating (a1, u1, a2, u2, ...) arguments,
        each coordinate computed as one compensated sum.
        """
        coefficients = terms[0::2]
        vectors = terms[1::2]
        return cls(linear_combination(coefficients, [u.x for u in vectors]),
                   linear_combination(coefficients, [u.y for u in vectors]),
                   linear_combination(coefficients, [u.z for u in vectors]))

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def get_alpha(self) -> float:
        return fastmath.atan2(self.y, self.x)

    def get_delta(self) -> float:
        return fastmath.asin(self.z / self.norm())

    def cross_product(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(linear_combination((self.y, -self.z), (other.z, other.y)),
                        linear_combination((self.z, -self.x), (other.x, other.z)),
                        linear_combination((self.x, -self.y), (other.y, other.x)))

    def orthogonal(self) -> "Vector3D":
        """
        A unit vector orthogonal to this one.

        The coordinate to drop is chosen among those not larger than 0.6 of
        the norm, which keeps the result well conditioned.
        """
        threshold = 0.6 * self.norm()
        if threshold == 0:
            raise MathArithmeticError("zero norm vector has no orthogonal")

        x, y, z = self.x, self.y, self.z
        if abs(x) <= threshold:
            inverse = 1 / fastmath.sqrt(y * y + z * z)
            return Vector3D(0.0, inverse * z, -inverse * y)
        if abs(y) <= threshold:
            inverse = 1 / fastmath.sqrt(x * x + z * z)
            return Vector3D(-inverse * z, 0.0, inverse * x)
        inverse = 1 / fastmath.sqrt(x * x + y * y)
        return Vector3D(inverse * y, -inverse * x, 0.0)

    def hash_code(self) -> int:
        if self.is_nan():
            return HASH_NAN_3D
        return to_int32(643 * (164 * hash_value(float(self.x))
                               + 3 * hash_value(float(self.y))
                               + hash_value(float(self.z))))

    @staticmethod
    def angle(v1: "Vector3D", v2: "Vector3D") -> float:
        """Angle in [0, pi] between two non-zero vectors."""
        norm_product = v1.norm() * v2.norm()
        if norm_product == 0:
            raise MathArithmeticError("zero norm vector has no angle")

        dot = v1.dot_product(v2)
        threshold = norm_product * ANGLE_ACOS_THRESHOLD
        if dot < -threshold or dot > threshold:
            # nearly aligned: the sine is better conditioned than the cosine
            v3 = v1.cross_product(v2)
            if dot >= 0:
                return fastmath.asin(v3.norm() / norm_product)
            return fastmath.PI - fastmath.asin(v3.norm() / norm_product)
        return fastmath.acos(dot / norm_product)


Vector3D.ZERO = Vector3D(0.0, 0.0, 0.0)
Vector3D.PLUS_I = Vector3D(1.0, 0.0, 0.0)
Vector3D.MINUS_I = Vector3D(-1.0, 0.0, 0.0)
Vector3D.PLUS_J = Vector3D(0.0, 1.0, 0.0)
Vector3D.MINUS_J = Vector3D(0.0, -1.0, 0.0)
Vector3D.PLUS_K = Vector3D(0.0, 0.0, 1.0)
Vector3D.MINUS_K = Vector3D(0.0, 0.0, -1.0)
Vector3D.NaN = Vector3D(float("nan"), float("nan"), float("nan"))
Vector3D.POSITIVE_INFINITY = Vector3D(float("inf"), float("inf"), float("inf"))
Vector3D.NEGATIVE_INFINITY = Vector3D(float("-inf"), float("-inf"), float("-inf"))
