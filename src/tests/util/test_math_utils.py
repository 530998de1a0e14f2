"""
Scalar Helper Tests
===================

Angle normalisation, 32-bit hashing, sign handling and finite checks.

Run: python -m pytest tests/util/test_math_utils.py -v
"""

import math

import pytest

from mathkit.spec.constants import INT_MIN, INT_MAX, LONG_MIN
from mathkit.spec.errors import MathArithmeticError, MathIllegalArgumentError, NotFiniteError
from mathkit.util import math_utils


# =============================================================================
# P1: CRITICAL - Angles
# =============================================================================

@pytest.mark.parametrize("center", [0.0, math.pi, -3.0, 10.0])
def test_normalize_angle_range(center):
    """P1.1: Result lies in [center - pi, center + pi) and differs by a multiple of 2 pi."""
    for a in (-20.0, -math.pi, -1.0, 0.0, 0.5, math.pi, 7.0, 100.0):
        n = math_utils.normalize_angle(a, center)
        assert center - math.pi <= n < center + math.pi + 1e-12
        turns = (a - n) / math_utils.TWO_PI
        assert turns == pytest.approx(round(turns), abs=1e-9)


def test_normalize_angle_known_values():
    """P1.2: 3 pi/2 around 0 is -pi/2; -pi/2 around pi is 3 pi/2."""
    assert math_utils.normalize_angle(1.5 * math.pi, 0.0) == pytest.approx(-0.5 * math.pi)
    assert math_utils.normalize_angle(-0.5 * math.pi, math.pi) == pytest.approx(1.5 * math.pi)


def test_reduce():
    """P1.3: reduce(a, period, offset) lands in [0, |period|)."""
    assert math_utils.reduce(7.0, 5.0, 0.0) == pytest.approx(2.0)
    assert math_utils.reduce(-1.0, -5.0, 0.0) == pytest.approx(4.0)
    assert math_utils.reduce(12.0, 5.0, 1.0) == pytest.approx(1.0)


# =============================================================================
# P2: IMPORTANT - Hashing
# =============================================================================

def test_to_int32_wraps():
    """P2.1: Values outside 32 bits wrap around."""
    assert math_utils.to_int32(INT_MAX + 1) == INT_MIN
    assert math_utils.to_int32(-1) == -1
    assert math_utils.to_int32(2 ** 32 + 5) == 5


def test_hash_value_of_doubles():
    """P2.2: NaNs hash alike, signed zeros do not, results fit 32 bits."""
    assert math_utils.hash_value(math.nan) == math_utils.hash_value(-math.nan)
    assert math_utils.hash_value(0.0) == 0
    assert math_utils.hash_value(0.0) != math_utils.hash_value(-0.0)
    assert math_utils.hash_value(1.0) == 1072693248
    for x in (1.5, -2.25, 1e300, math.inf):
        assert INT_MIN <= math_utils.hash_value(x) <= INT_MAX


def test_hash_value_of_sequences():
    """P2.3: Sequence hashes fold element hashes as 31 h + e from 1."""
    assert math_utils.hash_value([]) == 1
    assert math_utils.hash_value([0.0]) == 31
    assert math_utils.hash_value([1.0, 2.0]) == math_utils.hash_value((1.0, 2.0))
    assert math_utils.hash_value([1.0, 2.0]) != math_utils.hash_value([2.0, 1.0])


def test_equals_nan_aware():
    """P2.4: Exact equality with NaN == NaN."""
    assert math_utils.equals(math.nan, math.nan)
    assert not math_utils.equals(math.nan, 1.0)
    assert math_utils.equals(0.0, -0.0)


# =============================================================================
# P3: Sign handling and checks
# =============================================================================

def test_sign():
    assert math_utils.sign(-7) == -1
    assert math_utils.sign(0) == 0
    assert math_utils.sign(12) == 1


def test_copy_sign_overflow():
    """P3.1: The most negative value cannot be made non-negative."""
    assert math_utils.copy_sign(-5, 1) == 5
    assert math_utils.copy_sign(5, -1) == -5
    assert math_utils.copy_sign(INT_MIN, -1) == INT_MIN
    with pytest.raises(MathArithmeticError):
        math_utils.copy_sign(INT_MIN, 0)
    with pytest.raises(MathArithmeticError):
        math_utils.copy_sign(LONG_MIN, 3, long_range=True)
    assert math_utils.copy_sign(INT_MIN, 1, long_range=True) == -INT_MIN


def test_check_finite():
    """P3.2: Scalars and sequences with NaN or infinities are rejected."""
    math_utils.check_finite(1.0)
    math_utils.check_finite([1.0, 2.0, -3.0])
    with pytest.raises(NotFiniteError):
        math_utils.check_finite(math.inf)
    with pytest.raises(NotFiniteError) as info:
        math_utils.check_finite([1.0, math.nan, 2.0])
    assert info.value.index == 1
    assert isinstance(info.value, ValueError)


def test_check_not_none():
    math_utils.check_not_none(0)
    with pytest.raises(MathIllegalArgumentError, match="null"):
        math_utils.check_not_none(None)
