"""
Hyperplanes and Sub-Hyperplanes
===============================

The dimension-generic pieces every BSP region is made of.

    Hyperplane      oriented codimension-1 flat (point in 1D, line in 2D,
                    plane in 3D); splits space into a PLUS and a MINUS side
    SubHyperplane   hyperplane restricted by a region of its own sub-space
                    (a segment set on a line, a polygon set on a plane)
    Transform       point / hyperplane / sub-hyperplane mapping applied to
                    whole regions

Hyperplanes are immutable: get_reverse() and the transforms always build
new objects, so copy_self() may hand back the instance itself.
"""

from enum import Enum
from typing import Optional


class Side(Enum):
    """Position of a sub-hyperplane with respect to a hyperplane."""
    PLUS = "plus"
    MINUS = "minus"
    BOTH = "both"
    HYPER = "hyper"


class Hyperplane:
    """
    Oriented codimension-1 subset of a space.

    Subclasses implement:
        get_offset(point)        signed distance, positive on the PLUS side
        project(point)           orthogonal projection onto the hyperplane
        same_orientation_as(h)   True if both normals point the same way
        whole_hyperplane()       sub-hyperplane covering the whole hyperplane
        whole_space()            region covering the whole space
        get_reverse()            same set, opposite orientation
    """

    def __init__(self, tolerance: float):
        self.tolerance = tolerance

    def copy_self(self) -> "Hyperplane":
        return self

    def get_offset(self, point) -> float:
        raise NotImplementedError

    def project(self, point):
        raise NotImplementedError

    def same_orientation_as(self, other: "Hyperplane") -> bool:
        raise NotImplementedError

    def whole_hyperplane(self) -> "SubHyperplane":
        raise NotImplementedError

    def whole_space(self):
        raise NotImplementedError

    def get_reverse(self) -> "Hyperplane":
        raise NotImplementedError


class SplitSubHyperplane:
    """
    Result of splitting a sub-hyperplane by a hyperplane.

    Either part may be None when nothing of the sub-hyperplane lies on
    that side.
    """

    def __init__(self, plus: Optional["SubHyperplane"], minus: Optional["SubHyperplane"]):
        self.plus = plus
        self.minus = minus

    def get_side(self) -> Side:
        has_plus = self.plus is not None and not self.plus.is_empty()
        has_minus = self.minus is not None and not self.minus.is_empty()
        if has_plus:
            return Side.BOTH if has_minus else Side.PLUS
        return Side.MINUS if has_minus else Side.HYPER


class SubHyperplane:
    """
    A hyperplane together with the region of its sub-space it covers.

    Attributes:
        hyperplane: the underlying Hyperplane
        remaining_region: region of the hyperplane's sub-space (an
            IntervalsSet for a line, a PolygonsSet for a plane; None for
            0-dimensional sub-hyperplanes)
    """

    def __init__(self, hyperplane: Hyperplane, remaining_region):
        self.hyperplane = hyperplane
        self.remaining_region = remaining_region

    def build_new(self, hyperplane: Hyperplane, remaining_region) -> "SubHyperplane":
        raise NotImplementedError

    def split(self, hyperplane: Hyperplane) -> SplitSubHyperplane:
        raise NotImplementedError

    def copy_self(self) -> "SubHyperplane":
        return self.build_new(self.hyperplane.copy_self(), self.remaining_region)

    def get_size(self) -> float:
        return self.remaining_region.get_size()

    def is_empty(self) -> bool:
        return self.remaining_region.is_empty()

    def side(self, hyperplane: Hyperplane) -> Side:
        return self.split(hyperplane).get_side()

    def reunite(self, other: "SubHyperplane") -> "SubHyperplane":
        """Union with a sub-hyperplane lying on the same hyperplane."""
        from .region_factory import union
        return self.build_new(self.hyperplane,
                              union(self.remaining_region, other.remaining_region))

    def apply_transform(self, transform: "Transform") -> "SubHyperplane":
        """
        Transform the hyperplane and, through it, the remaining region.

        Every cut of the remaining region's tree is mapped with
        transform.apply_sub(cut, original, transformed), so that the
        sub-space coordinates follow the hyperplane.
        """
        original = self.hyperplane
        transformed = transform.apply_hyperplane(original)
        tree = self._transform_tree(self.remaining_region.get_tree(False),
                                    original, transformed, transform)
        return self.build_new(transformed, self.remaining_region.build_new(tree))

    def _transform_tree(self, node, original, transformed, transform):
        from .bsp_tree import BSPTree
        from .region import BoundaryAttribute

        if node.cut is None:
            return BSPTree.leaf(node.attribute)

        attribute = node.attribute
        if attribute is not None:
            plus_outside = None
            if attribute.plus_outside is not None:
                plus_outside = transform.apply_sub(attribute.plus_outside, original, transformed)
            plus_inside = None
            if attribute.plus_inside is not None:
                plus_inside = transform.apply_sub(attribute.plus_inside, original, transformed)
            attribute = BoundaryAttribute(plus_outside, plus_inside)

        return BSPTree(transform.apply_sub(node.cut, original, transformed),
                       self._transform_tree(node.plus, original, transformed, transform),
                       self._transform_tree(node.minus, original, transformed, transform),
                       attribute)


class Transform:
    """
    Mapping of a space onto itself, applied consistently to points,
    hyperplanes and the sub-hyperplanes of their sub-spaces.
    """

    def apply(self, point):
        raise NotImplementedError

    def apply_hyperplane(self, hyperplane: Hyperplane) -> Hyperplane:
        raise NotImplementedError

    def apply_sub(self, sub: SubHyperplane, original: Hyperplane,
                  transformed: Hyperplane) -> SubHyperplane:
        """
        Map a sub-hyperplane of original's sub-space into transformed's.
        """
        raise NotImplementedError
