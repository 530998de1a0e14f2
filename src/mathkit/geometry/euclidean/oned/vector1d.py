"""Points and vectors of the real line."""

from dataclasses import dataclass
from typing import Tuple

from ...vector import Vector
from ....spec.constants import HASH_NAN_1D
from ....util.math_utils import to_int32, hash_value


@dataclass(frozen=True, eq=False)
class Vector1D(Vector):
    x: float

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))

    def to_tuple(self) -> Tuple[float]:
        return (self.x,)

    def dot_product(self, other: "Vector1D") -> float:
        return self.x * other.x

    def hash_code(self) -> int:
        if self.is_nan():
            return HASH_NAN_1D
        return to_int32(997 * hash_value(float(self.x)))


Vector1D.ZERO = Vector1D(0.0)
Vector1D.ONE = Vector1D(1.0)
Vector1D.NaN = Vector1D(float("nan"))
Vector1D.POSITIVE_INFINITY = Vector1D(float("inf"))
Vector1D.NEGATIVE_INFINITY = Vector1D(float("-inf"))
