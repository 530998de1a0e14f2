"""
Floating-Point Comparison and Rounding
======================================

Two notions of "equal enough":

    delta:  |x - y| <= eps
    ULP:    x and y are at most max_ulps representable doubles apart

ULP distances are measured on the ORDERED INTEGER IMAGE of a double: the
raw IEEE-754 bit pattern read as a 64-bit integer, with negative values
mapped to -(bits & MAG_MASK). Both zeros map to 0, so +0.0 and -0.0 are
0 ULPs apart and a comparison across zero counts the ULPs on each side.

NaN is never equal to anything, except in the *_including_nan variants.

Decimal rounding goes through the shortest repr() of the double, so
round(39.245, 2) rounds the decimal 39.245 (not the binary value just
below it) and gives 39.25.
"""

import math
import struct
from decimal import (
    Decimal, Inexact, localcontext,
    ROUND_UP, ROUND_DOWN, ROUND_CEILING, ROUND_FLOOR,
    ROUND_HALF_UP, ROUND_HALF_DOWN, ROUND_HALF_EVEN,
)
from enum import Enum

from ..spec.constants import EPSILON, SAFE_MIN, MAG_MASK
from ..spec.errors import MathArithmeticError


class RoundingMode(Enum):
    """Decimal rounding modes, mapped onto the decimal module's constants."""
    UP = ROUND_UP
    DOWN = ROUND_DOWN
    CEILING = ROUND_CEILING
    FLOOR = ROUND_FLOOR
    HALF_UP = ROUND_HALF_UP
    HALF_DOWN = ROUND_HALF_DOWN
    HALF_EVEN = ROUND_HALF_EVEN
    UNNECESSARY = None


def double_to_raw_bits(x: float) -> int:
    """IEEE-754 bit pattern of x as a signed 64-bit integer."""
    return struct.unpack("<q", struct.pack("<d", x))[0]


def _ordered_bits(x: float) -> int:
    bits = double_to_raw_bits(x)
    if bits < 0:
        return -(bits & MAG_MASK)
    return bits


# =============================================================================
# EQUALITY
# =============================================================================

def equals_ulps(x: float, y: float, max_ulps: int) -> bool:
    """
    True if x and y are at most max_ulps representable doubles apart.

    NaN is never equal to anything (itself included).
    """
    if math.isnan(x) or math.isnan(y):
        return False
    return abs(_ordered_bits(x) - _ordered_bits(y)) <= max_ulps


def equals(x: float, y: float, eps: float = None) -> bool:
    """
    Equality within 1 ULP, or within eps when eps is given.

    equals(x, y)      == equals_ulps(x, y, 1)
    equals(x, y, eps) == equals_ulps(x, y, 1) or |y - x| <= eps
    """
    if eps is None:
        return equals_ulps(x, y, 1)
    return equals_ulps(x, y, 1) or abs(y - x) <= eps


def equals_including_nan_ulps(x: float, y: float, max_ulps: int) -> bool:
    """As equals_ulps, but two NaNs are equal."""
    if math.isnan(x) or math.isnan(y):
        return math.isnan(x) and math.isnan(y)
    return equals_ulps(x, y, max_ulps)


def equals_including_nan(x: float, y: float, eps: float = None) -> bool:
    """As equals, but two NaNs are equal."""
    if eps is None:
        return equals_including_nan_ulps(x, y, 1)
    return equals_including_nan_ulps(x, y, 1) or abs(y - x) <= eps


def equals_with_relative_tolerance(x: float, y: float, eps: float) -> bool:
    """True if |x - y| / max(|x|, |y|) <= eps (or x and y are 1 ULP apart)."""
    if equals_ulps(x, y, 1):
        return True
    abs_max = max(abs(x), abs(y))
    rel_diff = abs((x - y) / abs_max)
    return rel_diff <= eps


# =============================================================================
# COMPARISON
# =============================================================================

def compare_to(x: float, y: float, eps: float) -> int:
    """
    Three-way comparison treating values within eps (or 1 ULP) as equal.

    Returns 0, -1 if x < y, +1 otherwise. NaN in either position compares
    as greater: compare_to(nan, 1, eps) == compare_to(1, nan, eps) == 1.
    """
    if equals(x, y, eps):
        return 0
    if x < y:
        return -1
    return 1


def compare_to_ulps(x: float, y: float, max_ulps: int) -> int:
    """Three-way comparison treating values within max_ulps as equal."""
    if equals_ulps(x, y, max_ulps):
        return 0
    if x < y:
        return -1
    return 1


# =============================================================================
# ROUNDING
# =============================================================================

def round(x: float, scale: int, mode: RoundingMode = RoundingMode.HALF_UP) -> float:
    """
    Round x to scale decimal places.

    Args:
        x: value to round
        scale: number of digits after the decimal point (may be negative)
        mode: rounding mode, HALF_UP by default

    Returns:
        Rounded value. NaN and infinities come back unchanged, and a zero
        result keeps the sign of x: round(-1e-10, 0) is -0.0.

    Raises:
        MathArithmeticError: mode is UNNECESSARY and x has more than
            scale significant decimal places
    """
    if not math.isfinite(x):
        return x

    value = Decimal(repr(x))
    quantum = Decimal(1).scaleb(-scale)

    with localcontext() as ctx:
        # enough digits for every coefficient quantize can produce
        ctx.prec = max(34, value.adjusted() + scale + 2)
        if mode is RoundingMode.UNNECESSARY:
            ctx.traps[Inexact] = True
            try:
                rounded = value.quantize(quantum)
            except Inexact:
                raise MathArithmeticError(
                    f"rounding necessary: {x!r} has more than {scale} decimal places"
                ) from None
        else:
            rounded = value.quantize(quantum, rounding=mode.value)

    result = float(rounded)
    if result == 0.0:
        return 0.0 * x
    return result


def representable_delta(x: float, original_delta: float) -> float:
    """
    Closest delta to original_delta such that x + delta - x is exact.
    """
    return x + original_delta - x


__all__ = [
    "EPSILON", "SAFE_MIN", "RoundingMode", "double_to_raw_bits",
    "equals", "equals_ulps", "equals_including_nan", "equals_including_nan_ulps",
    "equals_with_relative_tolerance", "compare_to", "compare_to_ulps",
    "round", "representable_delta",
]
