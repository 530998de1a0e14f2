"""
mathkit
=======

General-purpose numerics:

    mathkit.util       checked integer arithmetic, precision helpers,
                       double-double transcendentals (fastmath), arrays
    mathkit.geometry   vectors, rotations, BSP-tree regions in 1D/2D/3D
    mathkit.spec       constants and exception taxonomy
"""

from . import spec
from . import util
from . import geometry

from .spec.errors import (
    MathError,
    MathIllegalArgumentError,
    MathArithmeticError,
    MathInternalError,
    GeometricInconsistencyError,
)

__version__ = "0.1.0"
