"""
Regions
=======

A region is a BSP tree whose leaves say inside (True) or outside (False),
plus the tolerance used to decide whether a point lies on a cut.

LAZY PROPERTIES:
    size, barycenter    computed together by compute_geometrical_properties()
                        in the dimension-specific subclass
    boundary_size       sum of the boundary facets' sizes
    boundary attributes get_tree(True) annotates each internal node with
                        the parts of its cut that separate inside from
                        outside (BoundaryAttribute)

Every operation returning a region builds a new one; the instance is
never modified.
"""

from enum import Enum
from typing import Iterable, List, Optional

from ...spec.constants import DEFAULT_TOLERANCE
from ...spec.errors import MathInternalError
from .bsp_tree import BSPTree, BSPTreeVisitor, Order
from .hyperplane import Hyperplane, Side, SubHyperplane, Transform


class Location(Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"
    BOUNDARY = "boundary"


class BoundaryAttribute:
    """
    Boundary parts carried by an internal node's cut.

    Attributes:
        plus_outside: part of the cut with outside cells on its plus side
            and inside cells on its minus side (None if empty)
        plus_inside: part of the cut with inside cells on its plus side and
            outside cells on its minus side (None if empty)
    """

    def __init__(self, plus_outside: Optional[SubHyperplane],
                 plus_inside: Optional[SubHyperplane]):
        self.plus_outside = plus_outside
        self.plus_inside = plus_inside


# =============================================================================
# VISITORS
# =============================================================================

class _Characterization:
    """Split a sub-hyperplane into the parts touching inside and outside cells."""

    def __init__(self, node: BSPTree, sub: SubHyperplane):
        self.outside_touching: Optional[SubHyperplane] = None
        self.inside_touching: Optional[SubHyperplane] = None

        stack = [(node, sub)]
        while stack:
            node, sub = stack.pop()
            if node.cut is None:
                if node.attribute:
                    self.inside_touching = self._add(self.inside_touching, sub)
                else:
                    self.outside_touching = self._add(self.outside_touching, sub)
                continue

            hyperplane = node.cut.hyperplane
            split = sub.split(hyperplane)
            side = split.get_side()
            if side is Side.PLUS:
                stack.append((node.plus, sub))
            elif side is Side.MINUS:
                stack.append((node.minus, sub))
            elif side is Side.BOTH:
                stack.append((node.minus, split.minus))
                stack.append((node.plus, split.plus))
            else:
                # the cut of a node never contains a cut of its ancestors
                raise MathInternalError()

    @staticmethod
    def _add(existing: Optional[SubHyperplane], sub: SubHyperplane) -> SubHyperplane:
        return sub if existing is None else existing.reunite(sub)

    def touch_outside(self) -> bool:
        return self.outside_touching is not None and not self.outside_touching.is_empty()

    def touch_inside(self) -> bool:
        return self.inside_touching is not None and not self.inside_touching.is_empty()


class BoundaryBuilder(BSPTreeVisitor):
    """Attach a BoundaryAttribute to every internal node."""

    def visit_order(self, node: BSPTree) -> Order:
        return Order.PLUS_MINUS_SUB

    def visit_internal_node(self, node: BSPTree) -> None:
        plus_outside = None
        plus_inside = None

        plus_char = _Characterization(node.plus, node.cut.copy_self())
        if plus_char.touch_outside():
            # parts with outside on the plus side, check for inside on the minus side
            minus_char = _Characterization(node.minus, plus_char.outside_touching)
            if minus_char.touch_inside():
                plus_outside = minus_char.inside_touching

        if plus_char.touch_inside():
            minus_char = _Characterization(node.minus, plus_char.inside_touching)
            if minus_char.touch_outside():
                plus_inside = minus_char.outside_touching

        node.attribute = BoundaryAttribute(plus_outside, plus_inside)

    def visit_leaf_node(self, node: BSPTree) -> None:
        pass


class BoundarySizeVisitor(BSPTreeVisitor):

    def __init__(self):
        self.boundary_size = 0.0

    def visit_order(self, node: BSPTree) -> Order:
        return Order.MINUS_SUB_PLUS

    def visit_internal_node(self, node: BSPTree) -> None:
        attribute = node.attribute
        if attribute.plus_outside is not None:
            self.boundary_size += attribute.plus_outside.get_size()
        if attribute.plus_inside is not None:
            self.boundary_size += attribute.plus_inside.get_size()

    def visit_leaf_node(self, node: BSPTree) -> None:
        pass


class _LeafFlagSetter(BSPTreeVisitor):
    """Flag leaves of a tree built from boundary: minus side is inside."""

    def visit_order(self, node: BSPTree) -> Order:
        return Order.PLUS_SUB_MINUS

    def visit_internal_node(self, node: BSPTree) -> None:
        pass

    def visit_leaf_node(self, node: BSPTree) -> None:
        node.attribute = node.parent is None or node is node.parent.minus


# =============================================================================
# ABSTRACT REGION
# =============================================================================

class AbstractRegion:
    """
    Region of a space represented by a BSP tree.

    Subclasses accept `tree` and `tolerance` keyword arguments in their
    constructor (a missing tree means the whole space) and implement
    compute_geometrical_properties().
    """

    def __init__(self, tree: Optional[BSPTree] = None,
                 tolerance: float = DEFAULT_TOLERANCE):
        self.tree = BSPTree.leaf(True) if tree is None else tree
        self.tolerance = tolerance
        self._size: Optional[float] = None
        self._barycenter = None
        self._boundary_size: Optional[float] = None

    @classmethod
    def from_boundary(cls, boundary: Iterable[SubHyperplane],
                      tolerance: float = DEFAULT_TOLERANCE):
        """
        Region whose boundary is the given sub-hyperplanes.

        Sub-hyperplanes are inserted by decreasing size, which tends to
        give shallower trees. The minus side of each cut is the inside.
        An empty boundary gives the whole space.
        """
        return cls(tree=boundary_to_tree(boundary), tolerance=tolerance)

    @classmethod
    def from_hyperplanes(cls, hyperplanes: List[Hyperplane],
                         tolerance: float = DEFAULT_TOLERANCE):
        """
        Convex region: intersection of the minus sides of the hyperplanes.

        Hyperplanes that do not cut the cell built so far are skipped.
        No hyperplane at all gives the empty region.
        """
        if not hyperplanes:
            return cls(tree=BSPTree.leaf(False), tolerance=tolerance)

        tree = hyperplanes[0].whole_space().get_tree(False).copy_self()
        node = tree
        node.attribute = True
        for hyperplane in hyperplanes:
            if node.insert_cut(hyperplane):
                node.attribute = None
                node.plus.attribute = False
                node = node.minus
                node.attribute = True
        return cls(tree=tree, tolerance=tolerance)

    def build_new(self, tree: BSPTree) -> "AbstractRegion":
        return type(self)(tree=tree, tolerance=self.tolerance)

    def copy_self(self) -> "AbstractRegion":
        return self.build_new(self.tree.copy_self())

    # -------------------------------------------------------------------------
    # predicates
    # -------------------------------------------------------------------------

    def is_empty(self, node: Optional[BSPTree] = None) -> bool:
        """True if no leaf under node (default: the root) is inside."""
        stack = [self.tree if node is None else node]
        while stack:
            current = stack.pop()
            if current.cut is None:
                if current.attribute:
                    return False
            else:
                stack.append(current.plus)
                stack.append(current.minus)
        return True

    def is_full(self, node: Optional[BSPTree] = None) -> bool:
        """True if every leaf under node (default: the root) is inside."""
        stack = [self.tree if node is None else node]
        while stack:
            current = stack.pop()
            if current.cut is None:
                if not current.attribute:
                    return False
            else:
                stack.append(current.plus)
                stack.append(current.minus)
        return True

    def contains(self, region: "AbstractRegion") -> bool:
        from .region_factory import difference
        return difference(region, self).is_empty()

    def check_point(self, point, node: Optional[BSPTree] = None) -> Location:
        """
        Locate point with respect to the region.

        A point on a cut is BOUNDARY when the cells on both sides of the cut
        disagree.
        """
        cell = (self.tree if node is None else node).get_cell(point, self.tolerance)
        if cell.cut is None:
            return Location.INSIDE if cell.attribute else Location.OUTSIDE

        minus_code = self.check_point(point, cell.minus)
        plus_code = self.check_point(point, cell.plus)
        return minus_code if minus_code is plus_code else Location.BOUNDARY

    # -------------------------------------------------------------------------
    # tree access and measures
    # -------------------------------------------------------------------------

    def get_tree(self, include_boundary_attributes: bool) -> BSPTree:
        if (include_boundary_attributes and self.tree.cut is not None
                and self.tree.attribute is None):
            self.tree.visit(BoundaryBuilder())
        return self.tree

    def get_boundary_size(self) -> float:
        if self._boundary_size is None:
            visitor = BoundarySizeVisitor()
            self.get_tree(True).visit(visitor)
            self._boundary_size = visitor.boundary_size
        return self._boundary_size

    def get_size(self) -> float:
        if self._barycenter is None:
            self.compute_geometrical_properties()
        return self._size

    def get_barycenter(self):
        if self._barycenter is None:
            self.compute_geometrical_properties()
        return self._barycenter

    def set_size(self, size: float) -> None:
        self._size = size

    def set_barycenter(self, barycenter) -> None:
        self._barycenter = barycenter

    def compute_geometrical_properties(self) -> None:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # relations with hyperplanes
    # -------------------------------------------------------------------------

    def side(self, hyperplane: Hyperplane) -> Side:
        """
        Side of hyperplane where the region lies: PLUS, MINUS, BOTH, or HYPER
        when the region has no inside cell off the hyperplane.
        """
        found = {"plus": False, "minus": False}
        self._recurse_sides(self.tree, hyperplane.whole_hyperplane(), found)
        if found["plus"]:
            return Side.BOTH if found["minus"] else Side.PLUS
        return Side.MINUS if found["minus"] else Side.HYPER

    def _recurse_sides(self, node: BSPTree, sub: SubHyperplane, found: dict) -> None:
        if node.cut is None:
            if node.attribute:
                # inside cell expanding across the hyperplane
                found["plus"] = True
                found["minus"] = True
            return

        hyperplane = node.cut.hyperplane
        split = sub.split(hyperplane)
        side = split.get_side()

        if side is Side.PLUS or side is Side.MINUS:
            near, far = (node.plus, node.minus) if side is Side.PLUS else (node.minus, node.plus)
            if not self.is_empty(far):
                if node.cut.side(sub.hyperplane) is Side.PLUS:
                    found["plus"] = True
                else:
                    found["minus"] = True
            if not (found["plus"] and found["minus"]):
                self._recurse_sides(near, sub, found)

        elif side is Side.BOTH:
            self._recurse_sides(node.plus, split.plus, found)
            if not (found["plus"] and found["minus"]):
                self._recurse_sides(node.minus, split.minus, found)

        else:
            # sub lies on the cut hyperplane
            plus_side = node.plus.cut is not None or bool(node.plus.attribute)
            minus_side = node.minus.cut is not None or bool(node.minus.attribute)
            if not node.cut.hyperplane.same_orientation_as(sub.hyperplane):
                plus_side, minus_side = minus_side, plus_side
            if plus_side:
                found["plus"] = True
            if minus_side:
                found["minus"] = True

    def intersection(self, sub: SubHyperplane) -> Optional[SubHyperplane]:
        """Part of sub inside the region, or None."""
        return self._recurse_intersection(self.tree, sub)

    def _recurse_intersection(self, node: BSPTree,
                              sub: Optional[SubHyperplane]) -> Optional[SubHyperplane]:
        if sub is None:
            return None
        if node.cut is None:
            return sub.copy_self() if node.attribute else None

        hyperplane = node.cut.hyperplane
        split = sub.split(hyperplane)
        side = split.get_side()
        if side is Side.PLUS:
            return self._recurse_intersection(node.plus, sub)
        if side is Side.MINUS:
            return self._recurse_intersection(node.minus, sub)
        if side is Side.BOTH:
            plus = self._recurse_intersection(node.plus, split.plus)
            minus = self._recurse_intersection(node.minus, split.minus)
            if plus is None:
                return minus
            if minus is None:
                return plus
            return plus.reunite(minus)
        return self._recurse_intersection(node.plus,
                                          self._recurse_intersection(node.minus, sub))

    # -------------------------------------------------------------------------
    # transforms
    # -------------------------------------------------------------------------

    def apply_transform(self, transform: Transform) -> "AbstractRegion":
        """New region with every cut and boundary part mapped by transform."""
        return self.build_new(self._transform_tree(self.get_tree(False), transform))

    def _transform_tree(self, node: BSPTree, transform: Transform) -> BSPTree:
        if node.cut is None:
            return BSPTree.leaf(node.attribute)

        attribute = node.attribute
        if attribute is not None:
            plus_outside = None
            if attribute.plus_outside is not None:
                plus_outside = attribute.plus_outside.apply_transform(transform)
            plus_inside = None
            if attribute.plus_inside is not None:
                plus_inside = attribute.plus_inside.apply_transform(transform)
            attribute = BoundaryAttribute(plus_outside, plus_inside)

        return BSPTree(node.cut.apply_transform(transform),
                       self._transform_tree(node.plus, transform),
                       self._transform_tree(node.minus, transform),
                       attribute)


def boundary_to_tree(boundary: Iterable[SubHyperplane]) -> BSPTree:
    """
    BSP tree with the given sub-hyperplanes as cuts, leaves flagged
    inside on the minus side of their parent cut.
    """
    ordered = sorted(boundary, key=lambda sub: sub.get_size(), reverse=True)
    if not ordered:
        return BSPTree.leaf(True)

    tree = BSPTree.leaf()
    stack = [(tree, ordered)]
    while stack:
        node, subs = stack.pop()
        inserted = None
        remaining = iter(subs)
        for candidate in remaining:
            if node.insert_cut(candidate.hyperplane.copy_self()):
                inserted = candidate.hyperplane
                break
        if inserted is None:
            continue

        plus_list = []
        minus_list = []
        for other in remaining:
            split = other.split(inserted)
            side = split.get_side()
            if side is Side.PLUS:
                plus_list.append(other)
            elif side is Side.MINUS:
                minus_list.append(other)
            elif side is Side.BOTH:
                plus_list.append(split.plus)
                minus_list.append(split.minus)
            # sub-hyperplanes lying on the cut add nothing

        if plus_list:
            stack.append((node.plus, plus_list))
        if minus_list:
            stack.append((node.minus, minus_list))

    tree.visit(_LeafFlagSetter())
    return tree
