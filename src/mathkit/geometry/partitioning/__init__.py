"""
Dimension-independent BSP machinery: hyperplanes, trees, regions and
their boolean algebra.
"""

# === Hyperplanes ===
from .hyperplane import Side, Hyperplane, SubHyperplane, SplitSubHyperplane, Transform

# === Trees ===
from .bsp_tree import BSPTree, BSPTreeVisitor, LeafMerger, Order, VanishingToLeaf

# === Regions ===
from .region import AbstractRegion, BoundaryAttribute, Location, boundary_to_tree
from . import region_factory
from .region_factory import (
    union,
    intersection,
    xor,
    difference,
    get_complement,
    build_convex,
)
