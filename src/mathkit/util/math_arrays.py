"""
Array Helpers
=============

Element-by-element arithmetic, distances, order checks and an
error-compensated dot product over 1D float arrays.

All functions accept anything np.asarray understands and return numpy
arrays (or plain floats/bools for reductions). Length mismatches raise
DimensionMismatchError before any arithmetic happens.
"""

import math
from enum import Enum
from typing import Sequence

import numpy as np

from ..spec.errors import (
    DimensionMismatchError,
    MathArithmeticError,
    MathIllegalArgumentError,
    NonMonotonicSequenceError,
    NotFiniteError,
)
from . import precision
from .fastmath import two_product, two_sum


class OrderDirection(Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"


def _as_float_array(values) -> np.ndarray:
    return np.asarray(values, dtype=float)


def check_equal_length(a, b, abort: bool = True) -> bool:
    """
    True if a and b have the same length.

    Raises DimensionMismatchError instead of returning False when abort.
    """
    if len(a) == len(b):
        return True
    if abort:
        raise DimensionMismatchError(len(a), len(b))
    return False


# =============================================================================
# ELEMENT-BY-ELEMENT ARITHMETIC
# =============================================================================

def scale(val: float, arr) -> np.ndarray:
    """New array val * arr."""
    return val * _as_float_array(arr)


def ebe_add(a, b) -> np.ndarray:
    check_equal_length(a, b)
    return _as_float_array(a) + _as_float_array(b)


def ebe_subtract(a, b) -> np.ndarray:
    check_equal_length(a, b)
    return _as_float_array(a) - _as_float_array(b)


def ebe_multiply(a, b) -> np.ndarray:
    check_equal_length(a, b)
    return _as_float_array(a) * _as_float_array(b)


def ebe_divide(a, b) -> np.ndarray:
    """a / b element by element; division by zero gives +-inf or NaN."""
    check_equal_length(a, b)
    with np.errstate(divide="ignore", invalid="ignore"):
        return _as_float_array(a) / _as_float_array(b)


# =============================================================================
# DISTANCES
# =============================================================================

def distance(p1, p2) -> float:
    """Euclidean (L2) distance."""
    check_equal_length(p1, p2)
    return float(np.linalg.norm(_as_float_array(p1) - _as_float_array(p2)))


def distance1(p1, p2) -> float:
    """Manhattan (L1) distance."""
    check_equal_length(p1, p2)
    return float(np.sum(np.abs(_as_float_array(p1) - _as_float_array(p2))))


def distance_inf(p1, p2) -> float:
    """Chebyshev (L-infinity) distance."""
    check_equal_length(p1, p2)
    if len(p1) == 0:
        return 0.0
    return float(np.max(np.abs(_as_float_array(p1) - _as_float_array(p2))))


# =============================================================================
# ORDER AND VALIDITY CHECKS
# =============================================================================

def _first_order_violation(values: np.ndarray, direction: OrderDirection, strict: bool):
    previous = values[:-1]
    current = values[1:]
    if direction is OrderDirection.INCREASING:
        ok = current > previous if strict else current >= previous
    else:
        ok = current < previous if strict else current <= previous
    bad = np.flatnonzero(~ok)
    return None if len(bad) == 0 else int(bad[0]) + 1


def is_monotonic(values, direction: OrderDirection = OrderDirection.INCREASING,
                 strict: bool = True) -> bool:
    return _first_order_violation(_as_float_array(values), direction, strict) is None


def check_order(values, direction: OrderDirection = OrderDirection.INCREASING,
                strict: bool = True, abort: bool = True) -> bool:
    """
    Check that values are sorted in the given direction.

    Returns:
        True if sorted; False if not and abort is False

    Raises:
        NonMonotonicSequenceError: not sorted and abort is True; carries the
            index of the first offending element
    """
    arr = _as_float_array(values)
    index = _first_order_violation(arr, direction, strict)
    if index is None:
        return True
    if abort:
        raise NonMonotonicSequenceError(
            index, float(arr[index - 1]), float(arr[index]),
            direction is OrderDirection.INCREASING, strict,
        )
    return False


def check_positive(values) -> None:
    """Raise MathIllegalArgumentError unless every entry is > 0."""
    arr = _as_float_array(values)
    bad = np.flatnonzero(~(arr > 0))
    if len(bad):
        raise MathIllegalArgumentError(
            f"Expected strictly positive values, got {arr[bad[0]]} at index {bad[0]}"
        )


def check_not_nan(values) -> None:
    arr = _as_float_array(values)
    bad = np.flatnonzero(np.isnan(arr))
    if len(bad):
        raise MathIllegalArgumentError(f"NaN at index {bad[0]}")


def check_finite(values) -> None:
    """Raise NotFiniteError naming the first NaN or infinite entry."""
    arr = _as_float_array(values)
    bad = np.flatnonzero(~np.isfinite(arr))
    if len(bad):
        raise NotFiniteError(float(arr[bad[0]]), int(bad[0]))


# =============================================================================
# COMPARISON
# =============================================================================

def equals(x, y) -> bool:
    """True if both are None, or same length and equal within 1 ULP entrywise."""
    if x is None or y is None:
        return x is None and y is None
    if len(x) != len(y):
        return False
    return all(precision.equals(float(a), float(b)) for a, b in zip(x, y))


def equals_including_nan(x, y) -> bool:
    """As equals, with NaN entries equal to each other."""
    if x is None or y is None:
        return x is None and y is None
    if len(x) != len(y):
        return False
    return all(precision.equals_including_nan(float(a), float(b)) for a, b in zip(x, y))


# =============================================================================
# TRANSFORMATIONS
# =============================================================================

def normalize_array(values, normalized_sum: float) -> np.ndarray:
    """
    Rescale values so that they sum to normalized_sum.

    NaN entries are ignored in the sum and stay NaN in the result.

    Raises:
        MathIllegalArgumentError: normalized_sum is NaN or infinite, or an
            entry is infinite
        MathArithmeticError: the entries sum to zero
    """
    if not math.isfinite(normalized_sum):
        raise MathIllegalArgumentError(f"Cannot normalize to {normalized_sum}")
    arr = _as_float_array(values)
    if np.any(np.isinf(arr)):
        raise MathIllegalArgumentError("Array contains an infinite element")
    mask = ~np.isnan(arr)
    total = float(np.sum(arr[mask]))
    if total == 0:
        raise MathArithmeticError("Array sums to zero")
    out = np.full(arr.shape, np.nan)
    out[mask] = arr[mask] * normalized_sum / total
    return out


def linear_combination(a, b) -> float:
    """
    Sum of a[i] * b[i], computed with error-free products and sums.

    The result is as accurate as if computed in twice the working
    precision, so a[0]*b[0] + a[1]*b[1] with cancellation is still exact
    to the last bit. Falls back to the naive sum when the compensated one
    is NaN (infinite terms).
    """
    check_equal_length(a, b)
    a = [float(v) for v in a]
    b = [float(v) for v in b]
    n = len(a)
    if n == 0:
        return 0.0
    if n == 1:
        return a[0] * b[0]

    s, c = two_product(a[0], b[0])
    for ai, bi in zip(a[1:], b[1:]):
        p, pe = two_product(ai, bi)
        s, se = two_sum(s, p)
        c += pe + se
    result = s + c

    if math.isnan(result):
        result = 0.0
        for ai, bi in zip(a, b):
            result += ai * bi
    return result


def convolve(x, h) -> np.ndarray:
    """Full discrete convolution, length len(x) + len(h) - 1."""
    if len(x) == 0 or len(h) == 0:
        raise MathIllegalArgumentError("Cannot convolve an empty array")
    return np.convolve(_as_float_array(x), _as_float_array(h))


def natural(n: int) -> np.ndarray:
    """[0, 1, ..., n-1] as integers."""
    return np.arange(n, dtype=int)


def sequence(size: int, start: int, stride: int) -> np.ndarray:
    """[start, start + stride, ..., start + (size-1) stride]."""
    return start + stride * np.arange(size, dtype=int)


def concatenate(*arrays: Sequence[float]) -> np.ndarray:
    if not arrays:
        return np.empty(0)
    return np.concatenate([_as_float_array(a) for a in arrays])


def unique(data) -> np.ndarray:
    """Distinct values of data, sorted in DECREASING order."""
    return np.unique(_as_float_array(data))[::-1]
