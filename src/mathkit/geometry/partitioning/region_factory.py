"""
Boolean Operations on Regions
=============================

    union(a, b)         inside a OR inside b
    intersection(a, b)  inside a AND inside b
    xor(a, b)           inside exactly one of a, b
    difference(a, b)    inside a AND NOT inside b
    get_complement(a)   NOT inside a

The four binary operations share BSPTree.merge(); they differ only in
the leaf merger, i.e. the truth table applied when a leaf of one tree
meets a subtree of the other. Operand trees are copied first, so the
operands are left untouched, and boundary attributes of the result are
cleared so they get rebuilt for the new region.
"""

from typing import List, Optional

from ...spec.errors import GeometricInconsistencyError, InconsistencyKind
from .bsp_tree import BSPTree, BSPTreeVisitor, LeafMerger, Order, VanishingToLeaf
from .hyperplane import Hyperplane, Side
from .region import AbstractRegion, BoundaryAttribute


def _complement_tree(node: BSPTree) -> BSPTree:
    if node.cut is None:
        return BSPTree.leaf(not node.attribute)

    attribute = node.attribute
    if attribute is not None:
        plus_outside = None if attribute.plus_inside is None else attribute.plus_inside.copy_self()
        plus_inside = None if attribute.plus_outside is None else attribute.plus_outside.copy_self()
        attribute = BoundaryAttribute(plus_outside, plus_inside)

    return BSPTree(node.cut.copy_self(), _complement_tree(node.plus),
                   _complement_tree(node.minus), attribute)


# =============================================================================
# LEAF MERGERS
# =============================================================================

class UnionMerger(LeafMerger):

    def merge(self, leaf, tree, parent_tree, is_plus_child, leaf_from_instance):
        if leaf.attribute:
            # inside wins over anything
            leaf.insert_in_tree(parent_tree, is_plus_child, VanishingToLeaf(True))
            return leaf
        tree.insert_in_tree(parent_tree, is_plus_child, VanishingToLeaf(False))
        return tree


class IntersectionMerger(LeafMerger):

    def merge(self, leaf, tree, parent_tree, is_plus_child, leaf_from_instance):
        if leaf.attribute:
            tree.insert_in_tree(parent_tree, is_plus_child, VanishingToLeaf(True))
            return tree
        # outside wins over anything
        leaf.insert_in_tree(parent_tree, is_plus_child, VanishingToLeaf(False))
        return leaf


class XorMerger(LeafMerger):

    def merge(self, leaf, tree, parent_tree, is_plus_child, leaf_from_instance):
        result = _complement_tree(tree) if leaf.attribute else tree
        result.insert_in_tree(parent_tree, is_plus_child, VanishingToLeaf(True))
        return result


class DifferenceMerger(LeafMerger):

    def merge(self, leaf, tree, parent_tree, is_plus_child, leaf_from_instance):
        if leaf.attribute:
            result = _complement_tree(tree if leaf_from_instance else leaf)
        else:
            result = leaf if leaf_from_instance else tree
        result.insert_in_tree(parent_tree, is_plus_child, VanishingToLeaf(False))
        return result


class NodesCleaner(BSPTreeVisitor):
    """Drop boundary attributes from internal nodes."""

    def visit_order(self, node: BSPTree) -> Order:
        return Order.PLUS_SUB_MINUS

    def visit_internal_node(self, node: BSPTree) -> None:
        node.attribute = None

    def visit_leaf_node(self, node: BSPTree) -> None:
        pass


# =============================================================================
# OPERATIONS
# =============================================================================

def _combine(region1: AbstractRegion, region2: AbstractRegion,
             leaf_merger: LeafMerger) -> AbstractRegion:
    tree1 = region1.get_tree(False).copy_self()
    tree2 = region2.get_tree(False).copy_self()
    tree = tree1.merge(tree2, leaf_merger)
    tree.visit(NodesCleaner())
    return region1.build_new(tree)


def union(region1: AbstractRegion, region2: AbstractRegion) -> AbstractRegion:
    return _combine(region1, region2, UnionMerger())


def intersection(region1: AbstractRegion, region2: AbstractRegion) -> AbstractRegion:
    return _combine(region1, region2, IntersectionMerger())


def xor(region1: AbstractRegion, region2: AbstractRegion) -> AbstractRegion:
    return _combine(region1, region2, XorMerger())


def difference(region1: AbstractRegion, region2: AbstractRegion) -> AbstractRegion:
    return _combine(region1, region2, DifferenceMerger())


def get_complement(region: AbstractRegion) -> AbstractRegion:
    return region.build_new(_complement_tree(region.get_tree(False)))


def build_convex(hyperplanes: List[Hyperplane]) -> Optional[AbstractRegion]:
    """
    Convex region bounded by hyperplanes (inside on their minus sides).

    A hyperplane that adds nothing to the cell built so far is ignored if
    it duplicates an earlier one. Two opposite hyperplanes closer than the
    tolerance give the empty region.

    Returns:
        the region, or None when no hyperplane is given

    Raises:
        GeometricInconsistencyError: a hyperplane leaves the current cell
            entirely on its plus side (NOT_CONVEX_HYPERPLANES)
    """
    if not hyperplanes:
        return None

    region = hyperplanes[0].whole_space()
    node = region.get_tree(False)
    node.attribute = True
    for hyperplane in hyperplanes:
        if node.insert_cut(hyperplane):
            node.attribute = None
            node.plus.attribute = False
            node = node.minus
            node.attribute = True
            continue

        # either parallel to an earlier hyperplane or entirely outside the cell
        s = hyperplane.whole_hyperplane()
        tree = node
        while tree.parent is not None and s is not None:
            other = tree.parent.cut.hyperplane
            split = s.split(other)
            side = split.get_side()
            if side is Side.HYPER:
                if not hyperplane.same_orientation_as(other):
                    # slab thinner than the tolerance
                    return get_complement(hyperplanes[0].whole_space())
            elif side is Side.PLUS:
                raise GeometricInconsistencyError(InconsistencyKind.NOT_CONVEX_HYPERPLANES)
            else:
                s = split.minus
            tree = tree.parent

    return region
