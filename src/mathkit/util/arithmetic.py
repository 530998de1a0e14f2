"""
Overflow-Checked Integer Arithmetic
===================================

Python integers never overflow, so every entry point here emulates a
fixed-width signed integer: the exact result is computed and then checked
against the "int" (32-bit) or "long" (64-bit) range. Nothing wraps around.

EXACT vs GRACEFUL:
    factorial, binomial_coefficient, *_and_check, gcd, lcm, pow_*
        -> exact integer or MathArithmeticError
    factorial_double, factorial_log, binomial_coefficient_double/_log
        -> float, saturating to +inf instead of raising
"""

import math
from typing import Tuple

from ..spec.constants import (
    INT_MIN, INT_MAX, LONG_MIN, LONG_MAX,
    MAX_EXACT_FACTORIAL, LOG_MAX_VALUE,
)
from ..spec.errors import MathArithmeticError, MathIllegalArgumentError
from . import fastmath

_INT = (INT_MIN, INT_MAX, "int")
_LONG = (LONG_MIN, LONG_MAX, "long")

# 0! .. 20!, all representable as longs
FACTORIALS = tuple(math.factorial(n) for n in range(MAX_EXACT_FACTORIAL + 1))


def _checked(value: int, width: Tuple[int, int, str], pattern: str, a: int, b: int) -> int:
    low, high, name = width
    if value < low or value > high:
        raise MathArithmeticError(f"overflow in {pattern.format(a, b)} ({name} range)")
    return value


# =============================================================================
# ADD / SUB / MUL
# =============================================================================

def add_and_check(a: int, b: int) -> int:
    """Add two ints, raising MathArithmeticError if the sum leaves [-2^31, 2^31-1]."""
    return _checked(a + b, _INT, "addition: {} + {}", a, b)


def add_and_check_long(a: int, b: int) -> int:
    """Add two longs, raising MathArithmeticError if the sum leaves [-2^63, 2^63-1]."""
    return _checked(a + b, _LONG, "addition: {} + {}", a, b)


def sub_and_check(a: int, b: int) -> int:
    return _checked(a - b, _INT, "subtraction: {} - {}", a, b)


def sub_and_check_long(a: int, b: int) -> int:
    return _checked(a - b, _LONG, "subtraction: {} - {}", a, b)


def mul_and_check(a: int, b: int) -> int:
    return _checked(a * b, _INT, "multiplication: {} * {}", a, b)


def mul_and_check_long(a: int, b: int) -> int:
    return _checked(a * b, _LONG, "multiplication: {} * {}", a, b)


# =============================================================================
# GCD / LCM
# =============================================================================

def _gcd(a: int, b: int, width) -> int:
    g = math.gcd(a, b)
    if g > width[1]:
        # only reachable for (MIN, 0), (0, MIN) and (MIN, MIN)
        raise MathArithmeticError(f"overflow: gcd({a}, {b}) is 2^{g.bit_length() - 1}")
    return g


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor of two ints.

    Returns the non-negative gcd, with gcd(0, 0) = 0 and gcd(a, 0) = |a|.
    gcd(INT_MIN, 0) and gcd(INT_MIN, INT_MIN) would be 2^31, which is not
    representable: they raise MathArithmeticError.
    """
    return _gcd(a, b, _INT)


def gcd_long(a: int, b: int) -> int:
    """Greatest common divisor of two longs, see gcd()."""
    return _gcd(a, b, _LONG)


def _lcm(a: int, b: int, width, mul) -> int:
    if a == 0 or b == 0:
        return 0
    # divide first so the intermediate stays as small as the result
    value = abs(mul(a // _gcd(a, b, width), b))
    if value > width[1]:
        raise MathArithmeticError(f"overflow: lcm({a}, {b}) is 2^{value.bit_length() - 1}")
    return value


def lcm(a: int, b: int) -> int:
    """
    Least common multiple of two ints, computed as |a / gcd(a, b) * b|.

    lcm(a, 0) = lcm(0, b) = 0. Raises MathArithmeticError when the result
    exceeds INT_MAX.
    """
    return _lcm(a, b, _INT, mul_and_check)


def lcm_long(a: int, b: int) -> int:
    return _lcm(a, b, _LONG, mul_and_check_long)


# =============================================================================
# POWERS
# =============================================================================

def _pow(base: int, exponent: int, width) -> int:
    if exponent < 0:
        raise MathIllegalArgumentError(f"Expected exponent >= 0, got {exponent}")
    result = base ** exponent
    if result < width[0] or result > width[1]:
        raise MathArithmeticError(f"overflow in exponentiation: {base}^{exponent} ({width[2]} range)")
    return result


def pow_int(base: int, exponent: int) -> int:
    """base**exponent as an int, raising MathArithmeticError on overflow."""
    return _pow(base, exponent, _INT)


def pow_long(base: int, exponent: int) -> int:
    """base**exponent as a long, raising MathArithmeticError on overflow."""
    return _pow(base, exponent, _LONG)


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


# =============================================================================
# FACTORIAL
# =============================================================================

def _check_factorial_argument(n: int):
    if n < 0:
        raise MathIllegalArgumentError(f"Expected n >= 0 for factorial, got {n}")


def factorial(n: int) -> int:
    """
    Exact n! as a long.

    Raises:
        MathIllegalArgumentError: n < 0
        MathArithmeticError: n > 20 (21! does not fit in 64 bits)
    """
    _check_factorial_argument(n)
    if n > MAX_EXACT_FACTORIAL:
        raise MathArithmeticError(f"factorial({n}) too large for long (n <= {MAX_EXACT_FACTORIAL})")
    return FACTORIALS[n]


def factorial_double(n: int) -> float:
    """
    n! as a double, +inf once it leaves the double range (n >= 171).
    """
    _check_factorial_argument(n)
    if n <= MAX_EXACT_FACTORIAL:
        return float(FACTORIALS[n])
    return fastmath.floor(fastmath.exp(factorial_log(n)) + 0.5)


def factorial_log(n: int) -> float:
    """Natural logarithm of n!."""
    _check_factorial_argument(n)
    if n <= MAX_EXACT_FACTORIAL:
        return fastmath.log(float(FACTORIALS[n]))
    return math.fsum(fastmath.log(float(i)) for i in range(2, n + 1))


# =============================================================================
# BINOMIAL COEFFICIENTS
# =============================================================================

def _check_binomial_arguments(n: int, k: int):
    if n < 0:
        raise MathIllegalArgumentError(f"Expected n >= 0 for binomial coefficient, got n={n}")
    if k < 0 or k > n:
        raise MathIllegalArgumentError(
            f"Expected 0 <= k <= n for binomial coefficient, got n={n}, k={k}"
        )


def binomial_coefficient(n: int, k: int) -> int:
    """
    Exact C(n, k) as a long.

    The exact value is computed with unbounded integers; every partial sum
    of the Pascal recursion C(n, k) = C(n-1, k-1) + C(n-1, k) is bounded by
    the final value, so checking the final value is equivalent to checking
    every step of the additive recursion.

    Raises:
        MathIllegalArgumentError: n < 0, k < 0 or k > n
        MathArithmeticError: result > LONG_MAX (never for n <= 66)
    """
    _check_binomial_arguments(n, k)
    value = math.comb(n, k)
    if value > LONG_MAX:
        raise MathArithmeticError(f"overflow: C({n}, {k}) does not fit in a long")
    return value


def binomial_coefficient_log(n: int, k: int) -> float:
    """
    Natural logarithm of C(n, k), never raising for large arguments.
    """
    _check_binomial_arguments(n, k)
    value = math.comb(n, k)
    if value.bit_length() <= 1023:
        return fastmath.log(float(value))
    # beyond the double range, math.log works on the integer directly
    return math.log(value)


def binomial_coefficient_double(n: int, k: int) -> float:
    """
    C(n, k) as a double, +inf once log C(n, k) exceeds log(MAX_VALUE).

    C(1030, 515) is +inf.
    """
    log_value = binomial_coefficient_log(n, k)
    if log_value > LOG_MAX_VALUE:
        return math.inf
    try:
        return float(math.comb(n, k))
    except OverflowError:
        # log rounded just below the limit while the value rounds above it
        return math.inf
