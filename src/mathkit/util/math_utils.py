"""
Miscellaneous scalar helpers: angle normalisation, hashing, sign handling
and argument checks shared by the geometry code.
"""

import math
import struct
from typing import Any

from ..spec.constants import INT_MIN, INT_MAX, LONG_MIN
from ..spec.errors import MathArithmeticError, MathIllegalArgumentError, NotFiniteError

TWO_PI = 2 * math.pi
PI_SQUARED = math.pi * math.pi


def to_int32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    value &= 0xffffffff
    return value - (1 << 32) if value > INT_MAX else value


def hash_value(value) -> int:
    """
    32-bit hash of a double or of a sequence of doubles.

    All NaNs hash alike and +0.0 / -0.0 hash differently, matching the
    usual bit-pattern hash of a double. Sequences combine element hashes
    as h = 31 * h + hash(element), starting from 1.
    """
    if hasattr(value, "__len__"):
        h = 1
        for element in value:
            h = to_int32(31 * h + hash_value(float(element)))
        return h
    if math.isnan(value):
        bits = 0x7ff8000000000000
    else:
        bits = struct.unpack("<Q", struct.pack("<d", value))[0]
    return to_int32(bits ^ (bits >> 32))


def equals(x: float, y: float) -> bool:
    """Exact equality where NaN equals NaN."""
    if math.isnan(x):
        return math.isnan(y)
    return x == y


def normalize_angle(a: float, center: float) -> float:
    """
    Normalize angle a into [center - pi, center + pi).

    normalize_angle(a, pi) lands in [0, 2 pi), normalize_angle(a, 0) in
    [-pi, pi).
    """
    return a - TWO_PI * math.floor((a + math.pi - center) / TWO_PI)


def reduce(a: float, period: float, offset: float) -> float:
    """Reduce a into [offset, offset + |period|), returning a - offset modulo period."""
    p = abs(period)
    return a - p * math.floor((a - offset) / p) - offset


def sign(x: int) -> int:
    """-1, 0 or +1 for an integer."""
    if x == 0:
        return 0
    return 1 if x > 0 else -1


def copy_sign(magnitude: int, sign_value: int, long_range: bool = False) -> int:
    """
    Integer magnitude with the sign of sign_value.

    Raises MathArithmeticError when magnitude is the most negative value of
    its range and sign_value is non-negative (its negation overflows).
    """
    if (magnitude >= 0 and sign_value >= 0) or (magnitude < 0 and sign_value < 0):
        return magnitude
    minimum = LONG_MIN if long_range else INT_MIN
    if sign_value >= 0 and magnitude == minimum:
        raise MathArithmeticError(f"overflow: cannot negate {magnitude}")
    return -magnitude


def check_finite(x) -> None:
    """
    Raise NotFiniteError if x (a scalar or a sequence) holds NaN or an infinity.
    """
    if isinstance(x, (int, float)):
        if not math.isfinite(x):
            raise NotFiniteError(x)
        return
    for i, value in enumerate(x):
        if not math.isfinite(value):
            raise NotFiniteError(value, i)


def check_not_none(obj: Any, message: str = "null is not allowed") -> None:
    if obj is None:
        raise MathIllegalArgumentError(message)
