"""
Scalar numerics: checked integer arithmetic, tolerant comparisons,
double-double transcendentals and numpy array helpers.
"""

# === Integer arithmetic ===
from . import arithmetic
from .arithmetic import (
    add_and_check,
    add_and_check_long,
    sub_and_check,
    sub_and_check_long,
    mul_and_check,
    mul_and_check_long,
    gcd,
    gcd_long,
    lcm,
    lcm_long,
    factorial,
    factorial_double,
    factorial_log,
    binomial_coefficient,
    binomial_coefficient_double,
    binomial_coefficient_log,
)

# === Comparison and rounding ===
from . import precision
from .precision import RoundingMode

# === Transcendentals ===
from . import fastmath

# === Helpers ===
from . import math_utils
from . import math_arrays
from .math_arrays import OrderDirection
