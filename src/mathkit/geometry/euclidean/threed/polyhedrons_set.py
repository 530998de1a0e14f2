"""
Polyhedrons Sets
================

Regions of space bounded by planar polygonal facets, possibly unbounded,
with cavities or several disconnected parts.

CONSTRUCTION:
    PolyhedronsSet()                        whole space
    PolyhedronsSet(tree=...)                existing BSP tree
    PolyhedronsSet.from_boundary(subs)      boundary sub-planes
    PolyhedronsSet.box(x0, x1, y0, y1, z0, z1)
    PolyhedronsSet.from_brep(vertices, facets)

B-REP:
    facets are lists of vertex indices, counterclockwise when seen from
    outside. The representation is validated before any tree is built:

        CLOSE_VERTICES               two vertices within the tolerance
        WRONG_NUMBER_OF_POINTS       a facet with fewer than 3 vertices
        FACET_ORIENTATION_MISMATCH   an edge run in the same direction by
                                     two facets
        EDGE_CONNECTED_TO_ONE_FACET  an edge with no facet running it back
        OUT_OF_PLANE                 a vertex off the plane of its facet's
                                     first three vertices

SIZE AND BARYCENTER:
    Sum over facets of the cones joining the origin to each facet: a
    facet of area A, barycenter b and outward normal n contributes
    A (b . n) / 3 to the volume and 3/4 b to the weighted barycenter.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence

from scipy.spatial import cKDTree

from ...partitioning import region_factory
from ...partitioning.bsp_tree import BSPTree, BSPTreeVisitor, Order
from ...partitioning.hyperplane import Transform
from ...partitioning.region import AbstractRegion, Location
from ....spec.constants import DEFAULT_TOLERANCE
from ....spec.errors import GeometricInconsistencyError, InconsistencyKind
from ..twod.line import Line as Line2D
from ..twod.polygons_set import PolygonsSet
from ..twod.vector2d import Vector2D
from .line import Line
from .plane import Plane
from .rotation import Rotation
from .sub_plane import SubPlane
from .vector3d import Vector3D

logger = logging.getLogger(__name__)


# =============================================================================
# B-REP VALIDATION
# =============================================================================

def _check_close_vertices(vertices: List[Vector3D], tolerance: float) -> None:
    if len(vertices) < 2:
        return
    pairs = cKDTree([v.to_tuple() for v in vertices]).query_pairs(r=tolerance)
    if pairs:
        i, j = min(pairs)
        logger.debug("vertices %d and %d are closer than %g", i, j, tolerance)
        raise GeometricInconsistencyError(InconsistencyKind.CLOSE_VERTICES,
                                          vertices[i].to_tuple(), vertices[j].to_tuple())


def _successors(vertices: List[Vector3D],
                facets: List[Sequence[int]]) -> Dict[int, List[int]]:
    """Successor of each vertex along every facet it belongs to."""
    for facet in facets:
        if len(facet) < 3:
            logger.debug("facet %s has only %d vertices", list(facet), len(facet))
            raise GeometricInconsistencyError(InconsistencyKind.WRONG_NUMBER_OF_POINTS)

    successors: Dict[int, List[int]] = {}
    for facet in facets:
        n = len(facet)
        for k, start in enumerate(facet):
            end = facet[(k + 1) % n]
            following = successors.setdefault(start, [])
            if end in following:
                logger.debug("edge %d -> %d is run twice in the same direction", start, end)
                raise GeometricInconsistencyError(InconsistencyKind.FACET_ORIENTATION_MISMATCH,
                                                  vertices[start].to_tuple(),
                                                  vertices[end].to_tuple())
            following.append(end)
    return successors


def _check_edges(vertices: List[Vector3D], successors: Dict[int, List[int]]) -> None:
    # a properly closed surface runs every edge once in each direction
    for start in sorted(successors):
        for end in successors[start]:
            if start not in successors.get(end, []):
                logger.debug("edge %d -> %d belongs to a single facet", start, end)
                raise GeometricInconsistencyError(InconsistencyKind.EDGE_CONNECTED_TO_ONE_FACET,
                                                  vertices[start].to_tuple(),
                                                  vertices[end].to_tuple())


def _brep_boundary(vertices: List[Vector3D], facets: List[Sequence[int]],
                   tolerance: float) -> List[SubPlane]:
    _check_close_vertices(vertices, tolerance)
    _check_edges(vertices, _successors(vertices, facets))

    boundary = []
    for facet in facets:
        plane = Plane.from_points(vertices[facet[0]], vertices[facet[1]], vertices[facet[2]],
                                  tolerance)
        points_2d = []
        for index in facet:
            vertex = vertices[index]
            if not plane.contains(vertex):
                logger.debug("vertex %d is %g away from its facet plane",
                             index, plane.get_offset(vertex))
                raise GeometricInconsistencyError(InconsistencyKind.OUT_OF_PLANE,
                                                  vertex.to_tuple())
            points_2d.append(plane.to_sub_space(vertex))
        boundary.append(SubPlane(plane, PolygonsSet.from_vertices(points_2d, tolerance)))
    return boundary


# =============================================================================
# VISITORS AND TRANSFORMS
# =============================================================================

class _FacetsContributionVisitor(BSPTreeVisitor):
    """Accumulate the cone volumes and weighted barycenters of the facets."""

    def __init__(self):
        self.size = 0.0
        self.barycenter = Vector3D.ZERO

    def visit_order(self, node: BSPTree) -> Order:
        return Order.MINUS_SUB_PLUS

    def visit_internal_node(self, node: BSPTree) -> None:
        attribute = node.attribute
        if attribute.plus_outside is not None:
            self._add_contribution(attribute.plus_outside, False)
        if attribute.plus_inside is not None:
            self._add_contribution(attribute.plus_inside, True)

    def visit_leaf_node(self, node: BSPTree) -> None:
        pass

    def _add_contribution(self, facet: SubPlane, reversed_: bool) -> None:
        polygon = facet.remaining_region
        area = polygon.get_size()
        if area == 0:
            return
        if math.isinf(area):
            self.size = math.inf
            self.barycenter = Vector3D.NaN
            return

        plane = facet.hyperplane
        facet_barycenter = plane.to_space(polygon.get_barycenter())
        scaled = area * facet_barycenter.dot_product(plane.get_normal())
        if reversed_:
            scaled = -scaled
        self.size += scaled
        self.barycenter = self.barycenter.add(facet_barycenter, scaled)


class _FacetCollector(BSPTreeVisitor):

    def __init__(self):
        self.facets = []

    def visit_order(self, node: BSPTree) -> Order:
        return Order.MINUS_SUB_PLUS

    def visit_internal_node(self, node: BSPTree) -> None:
        attribute = node.attribute
        if attribute.plus_outside is not None:
            self.facets.append((attribute.plus_outside, False))
        if attribute.plus_inside is not None:
            self.facets.append((attribute.plus_inside, True))

    def visit_leaf_node(self, node: BSPTree) -> None:
        pass


class _RotationTransform(Transform):

    def __init__(self, center: Vector3D, rotation: Rotation):
        self.center = center
        self.rotation = rotation
        self._cached_original: Optional[Plane] = None
        self._cached_transform: Optional[Transform] = None

    def apply(self, point: Vector3D) -> Vector3D:
        delta = point.subtract(self.center)
        return self.center.add(self.rotation.apply_to(delta))

    def apply_hyperplane(self, plane: Plane) -> Plane:
        return plane.rotate(self.center, self.rotation)

    def apply_sub(self, sub, original: Plane, transformed: Plane):
        if original is not self._cached_original:
            # affine map between the sub-spaces of the two planes
            p00 = original.origin
            p10 = original.to_space(Vector2D(1.0, 0.0))
            p01 = original.to_space(Vector2D(0.0, 1.0))
            t00 = transformed.to_sub_space(self.apply(p00))
            t10 = transformed.to_sub_space(self.apply(p10))
            t01 = transformed.to_sub_space(self.apply(p01))
            self._cached_transform = Line2D.get_transform(t10.x - t00.x, t10.y - t00.y,
                                                          t01.x - t00.x, t01.y - t00.y,
                                                          t00.x, t00.y)
            self._cached_original = original
        return sub.apply_transform(self._cached_transform)


class _TranslationTransform(Transform):

    def __init__(self, translation: Vector3D):
        self.translation = translation
        self._cached_original: Optional[Plane] = None
        self._cached_transform: Optional[Transform] = None

    def apply(self, point: Vector3D) -> Vector3D:
        return point.add(self.translation)

    def apply_hyperplane(self, plane: Plane) -> Plane:
        return plane.translate(self.translation)

    def apply_sub(self, sub, original: Plane, transformed: Plane):
        if original is not self._cached_original:
            shift = transformed.to_sub_space(self.apply(original.origin))
            self._cached_transform = Line2D.get_transform(1.0, 0.0, 0.0, 1.0, shift.x, shift.y)
            self._cached_original = original
        return sub.apply_transform(self._cached_transform)


# =============================================================================
# POLYHEDRONS SET
# =============================================================================

class PolyhedronsSet(AbstractRegion):
    """Region of space, see the module docstring for constructors."""

    def __init__(self, tree: Optional[BSPTree] = None,
                 tolerance: float = DEFAULT_TOLERANCE):
        super().__init__(tree, tolerance)

    @classmethod
    def box(cls, x_min: float, x_max: float, y_min: float, y_max: float,
            z_min: float, z_max: float,
            tolerance: float = DEFAULT_TOLERANCE) -> "PolyhedronsSet":
        """Axis-aligned box; empty when an extent is within the tolerance."""
        if (x_min >= x_max - tolerance or y_min >= y_max - tolerance
                or z_min >= z_max - tolerance):
            return cls(tree=BSPTree.leaf(False), tolerance=tolerance)

        region = region_factory.build_convex([
            Plane.from_point_normal(Vector3D(x_min, 0.0, 0.0), Vector3D.MINUS_I, tolerance),
            Plane.from_point_normal(Vector3D(x_max, 0.0, 0.0), Vector3D.PLUS_I, tolerance),
            Plane.from_point_normal(Vector3D(0.0, y_min, 0.0), Vector3D.MINUS_J, tolerance),
            Plane.from_point_normal(Vector3D(0.0, y_max, 0.0), Vector3D.PLUS_J, tolerance),
            Plane.from_point_normal(Vector3D(0.0, 0.0, z_min), Vector3D.MINUS_K, tolerance),
            Plane.from_point_normal(Vector3D(0.0, 0.0, z_max), Vector3D.PLUS_K, tolerance),
        ])
        return cls(tree=region.get_tree(False), tolerance=tolerance)

    @classmethod
    def from_brep(cls, vertices: List[Vector3D], facets: List[Sequence[int]],
                  tolerance: float = DEFAULT_TOLERANCE) -> "PolyhedronsSet":
        """
        Polyhedron from its boundary representation.

        Raises:
            GeometricInconsistencyError: see the module docstring
        """
        vertices = list(vertices)
        return cls.from_boundary(_brep_boundary(vertices, list(facets), tolerance), tolerance)

    def compute_geometrical_properties(self) -> None:
        tree = self.get_tree(True)
        if tree.cut is None:
            # empty or whole space
            self.set_size(math.inf if tree.attribute else 0.0)
            self.set_barycenter(Vector3D.NaN)
            return

        visitor = _FacetsContributionVisitor()
        tree.visit(visitor)
        if visitor.size < 0 or math.isinf(visitor.size):
            # finite outside surrounded by an infinite inside
            self.set_size(math.inf)
            self.set_barycenter(Vector3D.NaN)
        elif visitor.size == 0:
            self.set_size(0.0)
            self.set_barycenter(Vector3D.NaN)
        else:
            size = visitor.size / 3.0
            self.set_size(size)
            self.set_barycenter(visitor.barycenter.scalar_multiply(1.0 / (4 * size)))

    # -------------------------------------------------------------------------
    # facets and rays
    # -------------------------------------------------------------------------

    def get_facets(self) -> List[List[Optional[Vector3D]]]:
        """
        Boundary loops in space, counterclockwise when seen from outside.

        Unbounded facets give open loops laid out as PolygonsSet.get_vertices
        does: None first, then dummy and real points.
        """
        loops = []
        visitor = _FacetCollector()
        self.get_tree(True).visit(visitor)
        for facet, reversed_ in visitor.facets:
            plane = facet.hyperplane
            for loop_2d in facet.remaining_region.get_vertices():
                loop = [None if p is None else plane.to_space(p) for p in loop_2d]
                if reversed_:
                    if loop[0] is None:
                        loop = [None] + loop[:0:-1]
                    else:
                        loop.reverse()
                loops.append(loop)
        return loops

    def first_intersection(self, point: Vector3D, line: Line) -> Optional[SubPlane]:
        """
        First boundary facet met by the line from point onward, in the line
        direction. A facet containing point itself counts. None when the
        line leaves the region boundary behind.
        """
        return self._recurse_first_intersection(self.get_tree(True), point, line)

    def _recurse_first_intersection(self, node: BSPTree, point: Vector3D,
                                    line: Line) -> Optional[SubPlane]:
        cut = node.cut
        if cut is None:
            return None

        plane = cut.hyperplane
        offset = plane.get_offset(point)
        on_plane = abs(offset) < self.tolerance
        if offset < 0:
            near, far = node.minus, node.plus
        else:
            near, far = node.plus, node.minus

        if on_plane:
            facet = self._boundary_facet(point, node)
            if facet is not None:
                return facet

        crossed = self._recurse_first_intersection(near, point, line)
        if crossed is not None:
            return crossed

        if not on_plane:
            hit = plane.intersection(line)
            if hit is not None and line.get_abscissa(hit) > line.get_abscissa(point):
                facet = self._boundary_facet(hit, node)
                if facet is not None:
                    return facet

        return self._recurse_first_intersection(far, point, line)

    @staticmethod
    def _boundary_facet(point: Vector3D, node: BSPTree) -> Optional[SubPlane]:
        point_2d = node.cut.hyperplane.to_sub_space(point)
        attribute = node.attribute
        for facet in (attribute.plus_outside, attribute.plus_inside):
            if (facet is not None
                    and facet.remaining_region.check_point(point_2d) is Location.INSIDE):
                return facet
        return None

    # -------------------------------------------------------------------------
    # moves
    # -------------------------------------------------------------------------

    def rotate(self, center: Vector3D, rotation: Rotation) -> "PolyhedronsSet":
        return self.apply_transform(_RotationTransform(center, rotation))

    def translate(self, translation: Vector3D) -> "PolyhedronsSet":
        return self.apply_transform(_TranslationTransform(translation))
