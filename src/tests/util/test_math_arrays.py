"""
Array Helper Tests
==================

Compensated dot products, order checks, element-by-element arithmetic
and normalisation.

Run: python -m pytest tests/util/test_math_arrays.py -v
"""

import math
from fractions import Fraction

import numpy as np
import pytest

from mathkit.spec.errors import (
    DimensionMismatchError,
    MathArithmeticError,
    MathIllegalArgumentError,
    NonMonotonicSequenceError,
    NotFiniteError,
)
from mathkit.util import math_arrays
from mathkit.util.math_arrays import OrderDirection


# =============================================================================
# P1: CRITICAL - Compensated linear combination
# =============================================================================

def test_linear_combination_cancellation():
    """P1.1: Catastrophic cancellation is still exact."""
    a = [1e16, 1.0, -1e16]
    b = [1.0, 1.0, 1.0]
    assert math_arrays.linear_combination(a, b) == 1.0
    # naive: the 1.0 is lost in 1e16 + 1.0
    assert (1e16 + 1.0) - 1e16 == 0.0


def test_linear_combination_products_with_error():
    """P1.2: Rounding errors of the products are kept."""
    x = 1.0 + 2.0 ** -30
    # x * x - (1 + 2^-29) = 2^-60 exactly, lost by the naive product
    assert math_arrays.linear_combination([x, -1.0], [x, 1.0 + 2.0 ** -29]) == 2.0 ** -60


def test_linear_combination_small_cases():
    """P1.3: Empty, single-term and infinite inputs."""
    assert math_arrays.linear_combination([], []) == 0.0
    assert math_arrays.linear_combination([3.0], [4.0]) == 12.0
    assert math_arrays.linear_combination([math.inf, 1.0], [1.0, 1.0]) == math.inf


def test_linear_combination_random_against_fractions():
    """P1.4: Matches the exactly rounded sum on random data."""
    rng = np.random.default_rng(42)
    for _ in range(50):
        a = rng.normal(size=6) * 10.0 ** rng.integers(-5, 5, size=6)
        b = rng.normal(size=6) * 10.0 ** rng.integers(-5, 5, size=6)
        exact = sum(Fraction(float(x)) * Fraction(float(y)) for x, y in zip(a, b))
        result = math_arrays.linear_combination(a, b)
        assert result == pytest.approx(float(exact), rel=1e-14, abs=1e-300)


def test_linear_combination_length_mismatch():
    with pytest.raises(DimensionMismatchError):
        math_arrays.linear_combination([1.0, 2.0], [1.0])


# =============================================================================
# P2: IMPORTANT - Order and validity checks
# =============================================================================

def test_check_order_reports_first_violation():
    """P2.1: The error names the first out-of-order index."""
    assert math_arrays.check_order([1.0, 2.0, 3.0])
    with pytest.raises(NonMonotonicSequenceError) as info:
        math_arrays.check_order([1.0, 2.0, 2.0, 1.0])
    assert info.value.index == 2
    assert math_arrays.check_order([1.0, 2.0, 2.0], strict=False)
    assert not math_arrays.check_order([3.0, 1.0], abort=False)


def test_is_monotonic_decreasing():
    assert math_arrays.is_monotonic([3.0, 2.0, 1.0], OrderDirection.DECREASING)
    assert not math_arrays.is_monotonic([3.0, 3.0, 1.0], OrderDirection.DECREASING)
    assert math_arrays.is_monotonic([3.0, 3.0, 1.0], OrderDirection.DECREASING, strict=False)
    assert math_arrays.is_monotonic([5.0])


def test_validity_checks():
    """P2.2: Positive, NaN-free and finite checks."""
    math_arrays.check_positive([1.0, 2.0])
    with pytest.raises(MathIllegalArgumentError):
        math_arrays.check_positive([1.0, 0.0])
    with pytest.raises(MathIllegalArgumentError):
        math_arrays.check_not_nan([1.0, math.nan])
    with pytest.raises(NotFiniteError) as info:
        math_arrays.check_finite([1.0, 2.0, -math.inf])
    assert info.value.index == 2


def test_check_equal_length():
    assert math_arrays.check_equal_length([1, 2], [3, 4])
    assert not math_arrays.check_equal_length([1], [3, 4], abort=False)
    with pytest.raises(DimensionMismatchError):
        math_arrays.check_equal_length([1], [3, 4])


def test_array_equality():
    """P2.3: 1-ULP equality, None handling and NaN-aware variant."""
    assert math_arrays.equals(None, None)
    assert not math_arrays.equals(None, [1.0])
    assert math_arrays.equals([1.0, 2.0], [1.0, math.nextafter(2.0, 3.0)])
    assert not math_arrays.equals([1.0, math.nan], [1.0, math.nan])
    assert math_arrays.equals_including_nan([1.0, math.nan], [1.0, math.nan])
    assert not math_arrays.equals([1.0], [1.0, 2.0])


# =============================================================================
# P3: Arithmetic, distances and transformations
# =============================================================================

def test_element_by_element():
    a = [1.0, 2.0, 3.0]
    b = [4.0, 5.0, 0.0]
    np.testing.assert_array_equal(math_arrays.ebe_add(a, b), [5.0, 7.0, 3.0])
    np.testing.assert_array_equal(math_arrays.ebe_subtract(a, b), [-3.0, -3.0, 3.0])
    np.testing.assert_array_equal(math_arrays.ebe_multiply(a, b), [4.0, 10.0, 0.0])
    quotient = math_arrays.ebe_divide(a, b)
    assert quotient[2] == math.inf
    np.testing.assert_array_equal(math_arrays.scale(2.0, a), [2.0, 4.0, 6.0])
    with pytest.raises(DimensionMismatchError):
        math_arrays.ebe_add(a, [1.0])


def test_distances():
    """P3.1: L2, L1 and L-infinity."""
    p1, p2 = [0.0, 0.0], [3.0, -4.0]
    assert math_arrays.distance(p1, p2) == 5.0
    assert math_arrays.distance1(p1, p2) == 7.0
    assert math_arrays.distance_inf(p1, p2) == 4.0
    assert math_arrays.distance_inf([], []) == 0.0


def test_normalize_array():
    """P3.2: Rescale to a target sum, NaNs untouched."""
    out = math_arrays.normalize_array([1.0, math.nan, 3.0], 8.0)
    assert out[0] == 2.0 and out[2] == 6.0
    assert math.isnan(out[1])
    with pytest.raises(MathArithmeticError):
        math_arrays.normalize_array([1.0, -1.0], 1.0)
    with pytest.raises(MathIllegalArgumentError):
        math_arrays.normalize_array([1.0, math.inf], 1.0)
    with pytest.raises(MathIllegalArgumentError):
        math_arrays.normalize_array([1.0], math.nan)


def test_sequences_and_sets():
    """P3.3: natural, sequence, concatenate, unique, convolve."""
    np.testing.assert_array_equal(math_arrays.natural(4), [0, 1, 2, 3])
    np.testing.assert_array_equal(math_arrays.sequence(3, 5, -2), [5, 3, 1])
    np.testing.assert_array_equal(math_arrays.concatenate([1.0], [2.0, 3.0]), [1.0, 2.0, 3.0])
    assert len(math_arrays.concatenate()) == 0
    np.testing.assert_array_equal(math_arrays.unique([2.0, 5.0, 2.0, -1.0]), [5.0, 2.0, -1.0])
    np.testing.assert_array_equal(math_arrays.convolve([1.0, 2.0], [1.0, 1.0]), [1.0, 3.0, 2.0])
    with pytest.raises(MathIllegalArgumentError):
        math_arrays.convolve([], [1.0])
