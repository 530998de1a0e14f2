"""
Binary Space Partitioning Tree
==============================

Each internal node holds a cut: a sub-hyperplane restricted to the convex
cell of the node, splitting it into a PLUS child and a MINUS child. Leaves
hold the inside/outside flag of their cell. Every point of space reaches
exactly one leaf.

    node.cut        SubHyperplane or None for leaves
    node.plus       subtree on the PLUS side of the cut
    node.minus      subtree on the MINUS side of the cut
    node.parent     None at the root
    node.attribute  bool on leaves; None or a BoundaryAttribute on
                    internal nodes

TRAVERSAL:
    visit(), get_cell(), get_close_cuts() use explicit stacks, so their
    cost is bounded by the tree size and not by the interpreter's
    recursion limit. split() and merge() recurse along one path per level.

MERGING (Naylor, Amanatides, Thibault 1990, "Merging BSP Trees Yields
Polyhedral Set Operations"):
    The leaves of one tree are replaced by the other tree split to the
    leaf's cell; the LeafMerger decides what the combined leaf becomes,
    which is where union/intersection/xor/difference differ.
"""

from enum import Enum
from typing import List, Optional

from .hyperplane import Side, SubHyperplane


class Order(Enum):
    """Order in which visit() handles a node's plus subtree, minus subtree and cut."""
    PLUS_MINUS_SUB = ("plus", "minus", "sub")
    PLUS_SUB_MINUS = ("plus", "sub", "minus")
    MINUS_PLUS_SUB = ("minus", "plus", "sub")
    MINUS_SUB_PLUS = ("minus", "sub", "plus")
    SUB_PLUS_MINUS = ("sub", "plus", "minus")
    SUB_MINUS_PLUS = ("sub", "minus", "plus")


class BSPTreeVisitor:
    """Callbacks for BSPTree.visit()."""

    def visit_order(self, node: "BSPTree") -> Order:
        raise NotImplementedError

    def visit_internal_node(self, node: "BSPTree") -> None:
        raise NotImplementedError

    def visit_leaf_node(self, node: "BSPTree") -> None:
        raise NotImplementedError


class LeafMerger:
    """
    Combines a leaf of one tree with the matching part of the other.

    merge() must insert its result under parent_tree (see
    BSPTree.insert_in_tree) and return it. leaf_from_instance tells
    whether the leaf comes from the tree merge() was called on.
    """

    def merge(self, leaf: "BSPTree", tree: "BSPTree", parent_tree: Optional["BSPTree"],
              is_plus_child: bool, leaf_from_instance: bool) -> "BSPTree":
        raise NotImplementedError


class VanishingToLeaf:
    """
    Replaces a node whose cut vanished during insert_in_tree by a leaf.

    The leaf keeps its children's common flag when they agree, otherwise
    it takes the handler's inside flag.
    """

    def __init__(self, inside: bool):
        self.inside = inside

    def fix_node(self, node: "BSPTree") -> "BSPTree":
        plus, minus = node.plus, node.minus
        if plus.cut is None and minus.cut is None and plus.attribute == minus.attribute:
            return BSPTree.leaf(plus.attribute)
        return BSPTree.leaf(self.inside)


def _non_empty(sub: Optional[SubHyperplane]) -> Optional[SubHyperplane]:
    if sub is None or sub.is_empty():
        return None
    return sub


class BSPTree:
    """
    Node of a binary space partitioning tree.

    BSPTree.leaf(attribute) builds a leaf; BSPTree(cut, plus, minus, attribute)
    builds an internal node and re-parents both children.
    """

    def __init__(self, cut: Optional[SubHyperplane] = None,
                 plus: Optional["BSPTree"] = None,
                 minus: Optional["BSPTree"] = None,
                 attribute=None):
        self.cut = cut
        self.plus = plus
        self.minus = minus
        self.parent: Optional[BSPTree] = None
        self.attribute = attribute
        if plus is not None:
            plus.parent = self
        if minus is not None:
            minus.parent = self

    @classmethod
    def leaf(cls, attribute=None) -> "BSPTree":
        return cls(None, None, None, attribute)

    def is_leaf(self) -> bool:
        return self.cut is None

    def __repr__(self):
        if self.cut is None:
            return f"BSPTree.leaf({self.attribute!r})"
        return f"BSPTree(cut={self.cut.hyperplane!r})"

    # -------------------------------------------------------------------------
    # construction
    # -------------------------------------------------------------------------

    def insert_cut(self, hyperplane) -> bool:
        """
        Turn this node into an internal node cut by hyperplane.

        The hyperplane is first chopped to the cell of the node. Existing
        children are dropped. Returns False, leaving a leaf, when nothing
        of the hyperplane lies in the cell.
        """
        if self.cut is not None:
            self.plus.parent = None
            self.minus.parent = None

        chopped = self.fit_to_cell(hyperplane.whole_hyperplane())
        if chopped is None or chopped.is_empty():
            self.cut = None
            self.plus = None
            self.minus = None
            return False

        self.cut = chopped
        self.plus = BSPTree.leaf()
        self.plus.parent = self
        self.minus = BSPTree.leaf()
        self.minus.parent = self
        return True

    def fit_to_cell(self, sub: SubHyperplane) -> Optional[SubHyperplane]:
        """Part of sub lying in the convex cell of this node, or None."""
        s = sub
        tree = self
        while tree.parent is not None and s is not None:
            hyperplane = tree.parent.cut.hyperplane
            if tree is tree.parent.plus:
                s = s.split(hyperplane).plus
            else:
                s = s.split(hyperplane).minus
            tree = tree.parent
        return s

    def copy_self(self) -> "BSPTree":
        """Deep copy of the tree structure; attributes are shared."""
        if self.cut is None:
            return BSPTree.leaf(self.attribute)
        return BSPTree(self.cut.copy_self(), self.plus.copy_self(),
                       self.minus.copy_self(), self.attribute)

    # -------------------------------------------------------------------------
    # traversal
    # -------------------------------------------------------------------------

    def visit(self, visitor: BSPTreeVisitor) -> None:
        stack = [(self, False)]
        while stack:
            node, ready = stack.pop()
            if ready:
                visitor.visit_internal_node(node)
            elif node.cut is None:
                visitor.visit_leaf_node(node)
            else:
                steps = {"plus": (node.plus, False),
                         "minus": (node.minus, False),
                         "sub": (node, True)}
                for step in reversed(visitor.visit_order(node).value):
                    stack.append(steps[step])

    def get_cell(self, point, tolerance: float) -> "BSPTree":
        """
        Leaf cell containing point, or the internal node whose cut passes
        within tolerance of it.
        """
        node = self
        while node.cut is not None:
            offset = node.cut.hyperplane.get_offset(point)
            if abs(offset) < tolerance:
                return node
            node = node.minus if offset <= 0 else node.plus
        return node

    def get_close_cuts(self, point, max_offset: float) -> List["BSPTree"]:
        """Internal nodes whose cut hyperplane is within max_offset of point."""
        close = []
        stack = [self]
        while stack:
            node = stack.pop()
            if node.cut is None:
                continue
            offset = node.cut.hyperplane.get_offset(point)
            if offset < -max_offset:
                stack.append(node.minus)
            elif offset > max_offset:
                stack.append(node.plus)
            else:
                close.append(node)
                stack.append(node.plus)
                stack.append(node.minus)
        return close

    # -------------------------------------------------------------------------
    # restructuring
    # -------------------------------------------------------------------------

    def condense(self) -> None:
        """Collapse a node whose two leaf children carry the same flag."""
        if (self.cut is not None and self.plus.cut is None and self.minus.cut is None
                and self.plus.attribute == self.minus.attribute):
            self.attribute = self.plus.attribute
            self.cut = None
            self.plus = None
            self.minus = None

    def split(self, sub: SubHyperplane) -> "BSPTree":
        """
        New tree cut at its root by sub, with this tree's cells copied on
        both sides. The instance is not modified.
        """
        if self.cut is None:
            return BSPTree(sub, self.copy_self(), BSPTree.leaf(self.attribute), None)

        c_hyperplane = self.cut.hyperplane
        s_hyperplane = sub.hyperplane
        side = sub.side(c_hyperplane)

        if side is Side.PLUS:
            # the cut lies entirely on one side of sub, only plus is split
            split = self.plus.split(sub)
            if self.cut.side(s_hyperplane) is Side.PLUS:
                split.plus = BSPTree(self.cut.copy_self(), split.plus,
                                     self.minus.copy_self(), self.attribute)
                split.plus.condense()
                split.plus.parent = split
            else:
                split.minus = BSPTree(self.cut.copy_self(), split.minus,
                                      self.minus.copy_self(), self.attribute)
                split.minus.condense()
                split.minus.parent = split
            return split

        if side is Side.MINUS:
            split = self.minus.split(sub)
            if self.cut.side(s_hyperplane) is Side.PLUS:
                split.plus = BSPTree(self.cut.copy_self(), self.plus.copy_self(),
                                     split.plus, self.attribute)
                split.plus.condense()
                split.plus.parent = split
            else:
                split.minus = BSPTree(self.cut.copy_self(), self.plus.copy_self(),
                                      split.minus, self.attribute)
                split.minus.condense()
                split.minus.parent = split
            return split

        if side is Side.BOTH:
            cut_parts = self.cut.split(s_hyperplane)
            sub_parts = sub.split(c_hyperplane)
            split = BSPTree(sub, self.plus.split(sub_parts.plus),
                            self.minus.split(sub_parts.minus), None)
            split.plus.cut = cut_parts.plus
            split.minus.cut = cut_parts.minus
            # exchange the cells lying on the wrong side of sub
            swapped = split.plus.minus
            split.plus.minus = split.minus.plus
            split.plus.minus.parent = split.plus
            split.minus.plus = swapped
            split.minus.plus.parent = split.minus
            split.plus.condense()
            split.minus.condense()
            return split

        # sub lies on the cut hyperplane
        if c_hyperplane.same_orientation_as(s_hyperplane):
            return BSPTree(sub, self.plus.copy_self(), self.minus.copy_self(), self.attribute)
        return BSPTree(sub, self.minus.copy_self(), self.plus.copy_self(), self.attribute)

    def merge(self, tree: "BSPTree", leaf_merger: LeafMerger,
              parent_tree: Optional["BSPTree"] = None,
              is_plus_child: bool = False) -> "BSPTree":
        """
        Merge tree into this one, leaf by leaf, through leaf_merger.

        Both trees may be reused in the result: callers that need to keep
        their operands must pass copies.
        """
        if self.cut is None:
            return leaf_merger.merge(self, tree, parent_tree, is_plus_child, True)
        if tree.cut is None:
            return leaf_merger.merge(tree, self, parent_tree, is_plus_child, False)

        merged = tree.split(self.cut)
        if parent_tree is not None:
            merged.parent = parent_tree
            if is_plus_child:
                parent_tree.plus = merged
            else:
                parent_tree.minus = merged

        self.plus.merge(merged.plus, leaf_merger, merged, True)
        self.minus.merge(merged.minus, leaf_merger, merged, False)
        merged.condense()
        if merged.cut is not None:
            merged.cut = merged.fit_to_cell(merged.cut.hyperplane.whole_hyperplane())
        return merged

    def insert_in_tree(self, parent_tree: Optional["BSPTree"], is_plus_child: bool,
                       vanishing_handler: VanishingToLeaf) -> None:
        """
        Attach this tree under parent_tree and chop every cut to the new
        cell. Nodes whose cut vanishes are replaced by
        vanishing_handler.fix_node().
        """
        self.parent = parent_tree
        if parent_tree is not None:
            if is_plus_child:
                parent_tree.plus = self
            else:
                parent_tree.minus = self

        if self.cut is None:
            return

        tree = self
        while tree.parent is not None:
            hyperplane = tree.parent.cut.hyperplane
            if tree is tree.parent.plus:
                self.cut = _non_empty(self.cut.split(hyperplane).plus)
                self.plus._chop_off(hyperplane, vanishing_handler, keep_plus=True)
                self.minus._chop_off(hyperplane, vanishing_handler, keep_plus=True)
            else:
                self.cut = _non_empty(self.cut.split(hyperplane).minus)
                self.plus._chop_off(hyperplane, vanishing_handler, keep_plus=False)
                self.minus._chop_off(hyperplane, vanishing_handler, keep_plus=False)

            if self.cut is None:
                self._replace_with(vanishing_handler.fix_node(self))
                if self.cut is None:
                    break
            tree = tree.parent

        self.condense()

    def _chop_off(self, hyperplane, vanishing_handler: VanishingToLeaf, keep_plus: bool) -> None:
        if self.cut is None:
            return
        parts = self.cut.split(hyperplane)
        self.cut = _non_empty(parts.plus if keep_plus else parts.minus)
        self.plus._chop_off(hyperplane, vanishing_handler, keep_plus)
        self.minus._chop_off(hyperplane, vanishing_handler, keep_plus)
        if self.cut is None:
            self._replace_with(vanishing_handler.fix_node(self))

    def _replace_with(self, fixed: "BSPTree") -> None:
        self.cut = fixed.cut
        self.plus = fixed.plus
        self.minus = fixed.minus
        self.attribute = fixed.attribute
        if self.plus is not None:
            self.plus.parent = self
            self.minus.parent = self

    def prune_around_convex_cell(self, cell_attribute, other_leafs_attributes,
                                 internal_attributes) -> "BSPTree":
        """
        Tree made only of the cuts bounding this node's cell.

        The cell itself becomes a leaf with cell_attribute, every sibling
        along the path to the root a leaf with other_leafs_attributes.
        """
        tree = BSPTree.leaf(cell_attribute)
        current = self
        while current.parent is not None:
            parent_cut = current.parent.cut.copy_self()
            sibling = BSPTree.leaf(other_leafs_attributes)
            if current is current.parent.plus:
                tree = BSPTree(parent_cut, tree, sibling, internal_attributes)
            else:
                tree = BSPTree(parent_cut, sibling, tree, internal_attributes)
            current = current.parent
        return tree
