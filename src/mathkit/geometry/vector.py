"""
Euclidean Vectors
=================

Common behaviour of Vector1D, Vector2D and Vector3D. Concrete classes are
frozen dataclasses holding their coordinates; everything here works on
to_tuple().

EQUALITY:
    ==        IEEE comparison of every coordinate: NaN never equal,
              0.0 == -0.0. __hash__ is consistent with it.
    equals()  value equality: every vector with a NaN coordinate equals
              every other one, other coordinates must have identical bit
              patterns (so 0.0 and -0.0 differ). hash_code() is the
              matching 32-bit hash.
"""

import math
from typing import Tuple

import numpy as np

from ..spec.errors import MathArithmeticError
from ..util.math_arrays import linear_combination
from ..util.precision import double_to_raw_bits


class Vector:
    """Immutable vector of a Euclidean space."""

    def to_tuple(self) -> Tuple[float, ...]:
        raise NotImplementedError

    @classmethod
    def from_tuple(cls, coordinates):
        return cls(*coordinates)

    def hash_code(self) -> int:
        raise NotImplementedError

    def to_array(self) -> np.ndarray:
        return np.array(self.to_tuple(), dtype=float)

    def get_dimension(self) -> int:
        return len(self.to_tuple())

    # -------------------------------------------------------------------------
    # arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: "Vector", factor: float = 1.0):
        """self + factor * other."""
        return self.from_tuple(a + factor * b for a, b in zip(self.to_tuple(), other.to_tuple()))

    def subtract(self, other: "Vector", factor: float = 1.0):
        """self - factor * other."""
        return self.from_tuple(a - factor * b for a, b in zip(self.to_tuple(), other.to_tuple()))

    def scalar_multiply(self, a: float):
        return self.from_tuple(a * c for c in self.to_tuple())

    def negate(self):
        return self.from_tuple(-c for c in self.to_tuple())

    def normalize(self):
        n = self.norm()
        if n == 0:
            raise MathArithmeticError("cannot normalize a zero norm vector")
        return self.scalar_multiply(1 / n)

    def dot_product(self, other: "Vector") -> float:
        return linear_combination(self.to_tuple(), other.to_tuple())

    __add__ = add
    __sub__ = subtract
    __neg__ = negate

    def __mul__(self, a: float):
        return self.scalar_multiply(a)

    __rmul__ = __mul__

    # -------------------------------------------------------------------------
    # norms and distances
    # -------------------------------------------------------------------------

    def norm1(self) -> float:
        return sum(abs(c) for c in self.to_tuple())

    def norm_sq(self) -> float:
        return sum(c * c for c in self.to_tuple())

    def norm(self) -> float:
        return math.sqrt(self.norm_sq())

    def norm_inf(self) -> float:
        return max(abs(c) for c in self.to_tuple())

    def distance1(self, other: "Vector") -> float:
        return sum(abs(a - b) for a, b in zip(self.to_tuple(), other.to_tuple()))

    def distance_sq(self, other: "Vector") -> float:
        return sum((a - b) ** 2 for a, b in zip(self.to_tuple(), other.to_tuple()))

    def distance(self, other: "Vector") -> float:
        return math.sqrt(self.distance_sq(other))

    def distance_inf(self, other: "Vector") -> float:
        return max(abs(a - b) for a, b in zip(self.to_tuple(), other.to_tuple()))

    # -------------------------------------------------------------------------
    # predicates and equality
    # -------------------------------------------------------------------------

    def is_nan(self) -> bool:
        return any(math.isnan(c) for c in self.to_tuple())

    def is_infinite(self) -> bool:
        return not self.is_nan() and any(math.isinf(c) for c in self.to_tuple())

    def equals(self, other) -> bool:
        """Value equality, see module docstring."""
        if self is other:
            return True
        if type(other) is not type(self):
            return False
        if other.is_nan():
            return self.is_nan()
        return all(double_to_raw_bits(float(a)) == double_to_raw_bits(float(b))
                   for a, b in zip(self.to_tuple(), other.to_tuple()))

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(a == b for a, b in zip(self.to_tuple(), other.to_tuple()))

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash(self.to_tuple())

    def __iter__(self):
        return iter(self.to_tuple())
