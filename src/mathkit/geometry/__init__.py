"""
Geometry: vectors, rotations and BSP-tree regions.

    partitioning        dimension-independent BSP trees and region algebra
    euclidean.oned      Vector1D, OrientedPoint, IntervalsSet
    euclidean.twod      Vector2D, Line, SubLine, Segment, PolygonsSet
    euclidean.threed    Vector3D, Line, Plane, SubPlane, Rotation, PolyhedronsSet
"""

from . import partitioning
from . import euclidean

# === Regions ===
from .partitioning import Location, Side, region_factory

# === 1D ===
from .euclidean.oned import Vector1D, OrientedPoint, Interval, IntervalsSet

# === 2D ===
from .euclidean.twod import Vector2D, Line, SubLine, Segment, PolygonsSet

# === 3D ===
from .euclidean.threed import (
    Vector3D,
    Plane,
    SubPlane,
    Rotation,
    RotationConvention,
    PolyhedronsSet,
)
