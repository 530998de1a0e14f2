"""
Sub-Planes
==========

A plane restricted to a polygonal region of its 2D sub-space: the cut and
facet pieces of PolyhedronsSet trees.
"""

from ...partitioning.bsp_tree import BSPTree
from ...partitioning.hyperplane import SplitSubHyperplane, SubHyperplane
from ..oned.vector1d import Vector1D
from ..twod.line import Line as Line2D
from ..twod.polygons_set import PolygonsSet
from .plane import Plane


class SubPlane(SubHyperplane):

    def build_new(self, hyperplane: Plane, remaining_region: PolygonsSet) -> "SubPlane":
        return SubPlane(hyperplane, remaining_region)

    def split(self, hyperplane: Plane) -> SplitSubHyperplane:
        other_plane = hyperplane
        this_plane = self.hyperplane
        inter = other_plane.intersection_plane(this_plane)
        tolerance = this_plane.tolerance

        if inter is None:
            # parallel planes
            offset = other_plane.get_plane_offset(this_plane)
            if offset < -tolerance:
                return SplitSubHyperplane(None, self)
            if offset > tolerance:
                return SplitSubHyperplane(self, None)
            return SplitSubHyperplane(None, None)

        # the trace of the other plane, oriented so its minus side matches
        p = this_plane.to_sub_space(inter.to_space(Vector1D.ZERO))
        q = this_plane.to_sub_space(inter.to_space(Vector1D.ONE))
        cross = inter.direction.cross_product(this_plane.get_normal())
        if cross.dot_product(other_plane.get_normal()) < 0:
            p, q = q, p
        l2d_minus = Line2D.from_points(p, q, tolerance).whole_hyperplane()
        l2d_plus = Line2D.from_points(q, p, tolerance).whole_hyperplane()

        region = self.remaining_region
        split_tree = region.get_tree(False).split(l2d_minus)
        if region.is_empty(split_tree.plus):
            plus_tree = BSPTree.leaf(False)
        else:
            plus_tree = BSPTree(l2d_plus, BSPTree.leaf(False), split_tree.plus, None)
        if region.is_empty(split_tree.minus):
            minus_tree = BSPTree.leaf(False)
        else:
            minus_tree = BSPTree(l2d_minus, BSPTree.leaf(False), split_tree.minus, None)

        return SplitSubHyperplane(
            SubPlane(this_plane, PolygonsSet(tree=plus_tree, tolerance=tolerance)),
            SubPlane(this_plane, PolygonsSet(tree=minus_tree, tolerance=tolerance)),
        )
