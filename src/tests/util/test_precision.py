"""
Precision Tests
===============

ULP and delta comparisons, signed zeros, NaN handling and decimal
rounding in every mode.

Run: python -m pytest tests/util/test_precision.py -v
"""

import math

import pytest

from mathkit.spec.constants import MIN_VALUE, MAX_VALUE
from mathkit.spec.errors import MathArithmeticError
from mathkit.util import precision
from mathkit.util.precision import RoundingMode


# =============================================================================
# P1: CRITICAL - ULP equality
# =============================================================================

def test_equals_ulps_symmetric():
    """P1.1: equals_ulps(x, y, n) == equals_ulps(y, x, n)."""
    values = [0.0, -0.0, 1.0, -1.0, 1e-300, -1e-300, MIN_VALUE, 153.0, MAX_VALUE]
    for x in values:
        for y in values:
            for n in (0, 1, 10):
                assert precision.equals_ulps(x, y, n) == precision.equals_ulps(y, x, n)


def test_signed_zeros_are_equal():
    """P1.2: +0.0 and -0.0 are 0 ULPs apart."""
    assert precision.equals_ulps(0.0, -0.0, 0)
    assert precision.equals(0.0, -0.0)


def test_ulps_across_zero():
    """P1.3: The smallest subnormals on both sides of zero are 2 ULPs apart."""
    assert not precision.equals_ulps(-MIN_VALUE, MIN_VALUE, 1)
    assert precision.equals_ulps(-MIN_VALUE, MIN_VALUE, 2)


def test_neighbouring_doubles():
    """P1.4: A double and its successor are 1 ULP apart."""
    x = 153.0
    up = math.nextafter(x, math.inf)
    assert precision.equals_ulps(x, up, 1)
    assert not precision.equals_ulps(x, up, 0)
    assert not precision.equals_ulps(x, math.nextafter(up, math.inf), 1)


def test_nan_never_equal():
    """P1.5: NaN is unequal to everything, itself included, unless NaN-aware."""
    nan = math.nan
    assert not precision.equals(nan, nan)
    assert not precision.equals_ulps(nan, 1.0, 1000)
    assert not precision.equals(nan, nan, 1e10)
    assert precision.equals_including_nan(nan, nan)
    assert precision.equals_including_nan_ulps(nan, nan, 0)
    assert not precision.equals_including_nan(nan, 1.0)


def test_infinities():
    """P1.6: Infinities equal themselves and sit 1 ULP above MAX_VALUE."""
    assert precision.equals(math.inf, math.inf)
    assert not precision.equals(math.inf, -math.inf)
    assert precision.equals_ulps(MAX_VALUE, math.inf, 1)


# =============================================================================
# P2: IMPORTANT - delta equality and comparison
# =============================================================================

def test_equals_with_eps():
    """P2.1: |x - y| <= eps is equal."""
    assert precision.equals(1.0, 1.1, 0.1 + 1e-15)
    assert not precision.equals(1.0, 1.2, 0.1)


def test_relative_tolerance():
    """P2.2: Relative distance against the larger magnitude."""
    assert precision.equals_with_relative_tolerance(1000.0, 1001.0, 1e-3)
    assert not precision.equals_with_relative_tolerance(1000.0, 1002.0, 1e-3)


def test_compare_to():
    """P2.3: Three-way comparison with eps and ULP tolerances."""
    assert precision.compare_to(1.0, 1.05, 0.1) == 0
    assert precision.compare_to(1.0, 2.0, 0.1) == -1
    assert precision.compare_to(2.0, 1.0, 0.1) == 1
    assert precision.compare_to_ulps(1.0, math.nextafter(1.0, 2.0), 1) == 0
    assert precision.compare_to_ulps(1.0, 2.0, 1) == -1


def test_compare_to_nan_is_greater():
    """P2.4: NaN compares as greater in either position."""
    assert precision.compare_to(math.nan, 1.0, 0.1) == 1
    assert precision.compare_to(1.0, math.nan, 0.1) == 1


# =============================================================================
# P3: Decimal rounding
# =============================================================================

def test_round_scenario():
    """P3.1: round(39.245, 2) = 39.25 (the decimal value is rounded, not the binary one)."""
    assert precision.round(39.245, 2) == 39.25
    assert precision.round(39.245, 2, RoundingMode.HALF_DOWN) == 39.24
    assert precision.round(39.245, 2, RoundingMode.HALF_EVEN) == 39.24


@pytest.mark.parametrize("mode,expected", [
    (RoundingMode.UP, (1.24, -1.24)),
    (RoundingMode.DOWN, (1.23, -1.23)),
    (RoundingMode.CEILING, (1.24, -1.23)),
    (RoundingMode.FLOOR, (1.23, -1.24)),
    (RoundingMode.HALF_UP, (1.24, -1.24)),
    (RoundingMode.HALF_DOWN, (1.23, -1.23)),
    (RoundingMode.HALF_EVEN, (1.24, -1.24)),
])
def test_round_modes(mode, expected):
    """P3.2: Each mode on a positive and a negative value."""
    assert precision.round(1.235, 2, mode) == expected[0]
    assert precision.round(-1.235, 2, mode) == expected[1]


@pytest.mark.parametrize("mode", [m for m in RoundingMode if m is not RoundingMode.UNNECESSARY])
def test_round_idempotent(mode):
    """P3.3: Rounding an already rounded value changes nothing."""
    for x in (0.0, 1.5, -2.25, 39.245, 1234.5678, -0.001):
        once = precision.round(x, 2, mode)
        assert precision.round(once, 2, mode) == once


def test_round_unnecessary():
    """P3.4: UNNECESSARY accepts exact values and raises otherwise."""
    assert precision.round(1.25, 2, RoundingMode.UNNECESSARY) == 1.25
    with pytest.raises(MathArithmeticError):
        precision.round(1.235, 2, RoundingMode.UNNECESSARY)


def test_round_special_values():
    """P3.5: NaN and infinities pass through; zero results keep the sign of x."""
    assert math.isnan(precision.round(math.nan, 2))
    assert precision.round(math.inf, 2) == math.inf
    assert precision.round(-math.inf, 2) == -math.inf
    zero = precision.round(-1e-10, 0)
    assert zero == 0.0 and math.copysign(1.0, zero) < 0


def test_round_negative_scale():
    """P3.6: A negative scale rounds to tens, hundreds, ..."""
    assert precision.round(1234.0, -2) == 1200.0
    assert precision.round(1250.0, -2) == 1300.0


def test_representable_delta():
    """P3.7: x + delta - x is exactly representable."""
    delta = precision.representable_delta(1.0, 1e-17)
    assert (1.0 + delta) - 1.0 == delta
