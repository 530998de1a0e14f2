"""
3D Euclidean geometry: vectors, lines, planes, rotations and polyhedra.
"""

# === Primitives ===
from .vector3d import Vector3D
from .line import Line
from .plane import Plane
from .rotation import Rotation, RotationConvention

# === Regions ===
from .sub_plane import SubPlane
from .polyhedrons_set import PolyhedronsSet
