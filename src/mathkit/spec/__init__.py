"""
Constants and exception taxonomy shared by every mathkit module.
"""

# === Tolerances, limits, seeds ===
from .constants import *

# === Exceptions ===
from .errors import (
    MathError,
    MathIllegalArgumentError,
    MathArithmeticError,
    MathInternalError,
    NotFiniteError,
    NonMonotonicSequenceError,
    DimensionMismatchError,
    NotARotationMatrixError,
    InconsistencyKind,
    GeometricInconsistencyError,
)
