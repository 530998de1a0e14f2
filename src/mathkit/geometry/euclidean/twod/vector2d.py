"""Points and vectors of the plane."""

from dataclasses import dataclass
from typing import Tuple

from ...vector import Vector
from ....spec.constants import ANGLE_ACOS_THRESHOLD, HASH_NAN_2D
from ....spec.errors import MathArithmeticError
from ....util import fastmath
from ....util.math_arrays import linear_combination
from ....util.math_utils import hash_value, to_int32


@dataclass(frozen=True, eq=False)
class Vector2D(Vector):
    x: float
    y: float

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def cross_product(self, p1: "Vector2D", p2: "Vector2D") -> float:
        """
        Orientation of this point with respect to the line p1 -> p2.

        Positive when the point is on the left of the line, negative on the
        right, zero when the three points are aligned.
        """
        x1 = p2.x - p1.x
        y1 = self.y - p1.y
        x2 = self.x - p1.x
        y2 = p2.y - p1.y
        return linear_combination((x1, -x2), (y1, y2))

    def hash_code(self) -> int:
        if self.is_nan():
            return HASH_NAN_2D
        return to_int32(122 * (76 * hash_value(float(self.x)) + hash_value(float(self.y))))

    @staticmethod
    def angle(v1: "Vector2D", v2: "Vector2D") -> float:
        """
        Angle in [0, pi] between two non-zero vectors.

        Nearly aligned vectors go through the sine of the angle, which
        keeps full accuracy where the cosine saturates.
        """
        norm_product = v1.norm() * v2.norm()
        if norm_product == 0:
            raise MathArithmeticError("zero norm vector has no angle")

        dot = v1.dot_product(v2)
        threshold = norm_product * ANGLE_ACOS_THRESHOLD
        if dot < -threshold or dot > threshold:
            n = abs(linear_combination((v1.x, -v1.y), (v2.y, v2.x)))
            if dot >= 0:
                return fastmath.asin(n / norm_product)
            return fastmath.PI - fastmath.asin(n / norm_product)
        return fastmath.acos(dot / norm_product)


Vector2D.ZERO = Vector2D(0.0, 0.0)
Vector2D.NaN = Vector2D(float("nan"), float("nan"))
Vector2D.POSITIVE_INFINITY = Vector2D(float("inf"), float("inf"))
Vector2D.NEGATIVE_INFINITY = Vector2D(float("-inf"), float("-inf"))
