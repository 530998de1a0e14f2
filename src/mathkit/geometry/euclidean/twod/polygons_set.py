"""
Polygons Sets
=============

Regions of the plane bounded by line segments, possibly unbounded, with
holes or several disconnected parts.

CONSTRUCTION:
    PolygonsSet()                       whole plane
    PolygonsSet(tree=...)               existing BSP tree
    PolygonsSet.from_boundary(subs)     boundary sub-lines
    PolygonsSet.box(x0, x1, y0, y1)     axis-aligned rectangle
    PolygonsSet.from_vertices(vs)       simple polygon, counterclockwise
                                        for a bounded interior

Vertices that lie within the tolerance of another edge's line are bound
to that line, so that aligned edges share one Line object and the tree
gets one cut for all of them.

VERTICES:
    get_vertices() returns loops of points. Closed loops list their
    vertices, interior on the left. Open loops start with None, then a
    dummy point on the first (infinite) edge, the real vertices, and a
    dummy point on the last edge.
"""

import bisect
import itertools
import logging
import math
from typing import List, Optional

from ...partitioning.bsp_tree import BSPTree, BSPTreeVisitor, Order
from ...partitioning.hyperplane import Side
from ...partitioning.region import AbstractRegion
from ....spec.constants import DEFAULT_TOLERANCE, LOOP_CLOSE_EPS
from ....spec.errors import MathInternalError
from ..oned.vector1d import Vector1D
from .line import Line
from .segment import Segment
from .vector2d import Vector2D

logger = logging.getLogger(__name__)

# Abscissa of the dummy end points of an infinite line (largest float32)
_FAR_ABSCISSA = 3.4028234663852886e38


# =============================================================================
# VERTICES TO TREE
# =============================================================================

class _Vertex:

    def __init__(self, location: Vector2D):
        self.location = location
        self.incoming: Optional[_Edge] = None
        self.outgoing: Optional[_Edge] = None
        self.lines: List[Line] = []

    def bind_with(self, line: Line) -> None:
        self.lines.append(line)

    def shared_line_with(self, vertex: "_Vertex") -> Optional[Line]:
        for line1 in self.lines:
            for line2 in vertex.lines:
                if line1 is line2:
                    return line1
        return None

    def set_incoming(self, edge: "_Edge") -> None:
        self.incoming = edge
        self.bind_with(edge.line)

    def set_outgoing(self, edge: "_Edge") -> None:
        self.outgoing = edge
        self.bind_with(edge.line)


class _Edge:

    def __init__(self, start: _Vertex, end: _Vertex, line: Line):
        self.start = start
        self.end = end
        self.line = line
        self.node: Optional[BSPTree] = None
        start.set_outgoing(self)
        end.set_incoming(self)

    def split(self, split_line: Line) -> _Vertex:
        """Cut the edge where split_line crosses it; returns the new vertex."""
        split_vertex = _Vertex(self.line.intersection(split_line))
        split_vertex.bind_with(split_line)
        start_half = _Edge(self.start, split_vertex, self.line)
        end_half = _Edge(split_vertex, self.end, self.line)
        start_half.node = self.node
        end_half.node = self.node
        return split_vertex


def _side_of(offset: float, thickness: float) -> Side:
    if abs(offset) <= thickness:
        return Side.HYPER
    return Side.MINUS if offset < 0 else Side.PLUS


def _insert_edges(thickness: float, root: BSPTree, edges: List[_Edge]) -> None:
    stack = [(root, edges)]
    while stack:
        node, edges = stack.pop()

        inserted = None
        for edge in edges:
            if edge.node is None and node.insert_cut(edge.line):
                edge.node = node
                inserted = edge
                break

        if inserted is None:
            # no edge left to cut this cell: it is a leaf
            parent = node.parent
            node.attribute = parent is None or node is parent.minus
            continue

        plus_list = []
        minus_list = []
        for edge in edges:
            if edge is inserted:
                continue
            start_side = _side_of(inserted.line.get_offset(edge.start.location), thickness)
            end_side = _side_of(inserted.line.get_offset(edge.end.location), thickness)
            if start_side is Side.PLUS:
                if end_side is Side.MINUS:
                    split_point = edge.split(inserted.line)
                    minus_list.append(split_point.outgoing)
                    plus_list.append(split_point.incoming)
                else:
                    plus_list.append(edge)
            elif start_side is Side.MINUS:
                if end_side is Side.PLUS:
                    split_point = edge.split(inserted.line)
                    minus_list.append(split_point.incoming)
                    plus_list.append(split_point.outgoing)
                else:
                    minus_list.append(edge)
            elif end_side is Side.PLUS:
                plus_list.append(edge)
            elif end_side is Side.MINUS:
                minus_list.append(edge)

        if plus_list:
            stack.append((node.plus, plus_list))
        else:
            node.plus.attribute = False
        if minus_list:
            stack.append((node.minus, minus_list))
        else:
            node.minus.attribute = True


def _vertices_to_tree(thickness: float, vertices: List[Vector2D]) -> BSPTree:
    n = len(vertices)
    if n == 0:
        return BSPTree.leaf(True)

    v_array = [_Vertex(v) for v in vertices]
    edges = []
    for i in range(n):
        start = v_array[i]
        end = v_array[(i + 1) % n]
        line = start.shared_line_with(end)
        if line is None:
            line = Line.from_points(start.location, end.location, thickness)
        edges.append(_Edge(start, end, line))

        # bind the vertices lying on this edge's line
        for vertex in v_array:
            if (vertex is not start and vertex is not end
                    and abs(line.get_offset(vertex.location)) <= thickness):
                vertex.bind_with(line)

    tree = BSPTree.leaf()
    _insert_edges(thickness, tree, edges)
    return tree


# =============================================================================
# TREE TO VERTICES
# =============================================================================

class _SortedSegments:
    """Segments ordered by start point (x, then y); open starts come first."""

    def __init__(self):
        self._entries = []
        self._counter = itertools.count()

    def __bool__(self):
        return bool(self._entries)

    def insert(self, segment: Segment) -> None:
        if segment.start is None:
            x, y = -math.inf, -math.inf
        else:
            x, y = segment.start.x, segment.start.y
        bisect.insort(self._entries, (x, y, next(self._counter), segment))

    def pop_smallest(self) -> Segment:
        return self._entries.pop(0)[3]

    def pop_closest(self, point: Vector2D, window: float):
        """
        Remove and return the segment starting closest to point among those
        whose start is in the window around point; None if there is none.
        """
        low = (point.x - window, point.y - window)
        high = (point.x + window, point.y + window)
        index = bisect.bisect_left(self._entries, low)
        selected = None
        selected_distance = math.inf
        while index < len(self._entries) and self._entries[index][:2] <= high:
            segment = self._entries[index][3]
            distance = point.distance(segment.start)
            if distance < selected_distance:
                selected = index
                selected_distance = distance
            index += 1
        if selected is None or selected_distance > window:
            return None
        return self._entries.pop(selected)[3]


class _SegmentsBuilder(BSPTreeVisitor):
    """Collect boundary segments, oriented with the interior on their left."""

    def __init__(self):
        self.sorted = _SortedSegments()

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

    def _add_contribution(self, sub, reversed_: bool) -> None:
        line = sub.hyperplane
        for interval in sub.remaining_region.as_list():
            start = None if math.isinf(interval.get_inf()) else line.to_space(Vector1D(interval.get_inf()))
            end = None if math.isinf(interval.get_sup()) else line.to_space(Vector1D(interval.get_sup()))
            if reversed_:
                self.sorted.insert(Segment(end, start, line.get_reverse()))
            else:
                self.sorted.insert(Segment(start, end, line))


def _follow_loop(first: Segment, sorted_segments: _SortedSegments) -> Optional[List[Segment]]:
    loop = [first]
    global_start = first.start
    end = first.end
    is_open = first.start is None

    while end is not None and (is_open or global_start.distance(end) > LOOP_CLOSE_EPS):
        selected = sorted_segments.pop_closest(end, LOOP_CLOSE_EPS)
        if selected is None:
            logger.debug("dropping boundary loop with a gap after %s", end)
            return None
        end = selected.end
        loop.append(selected)

    if len(loop) == 2 and not is_open:
        # two segments back and forth: a zero-area sliver
        return None
    if end is None and not is_open:
        raise MathInternalError()
    return loop


def _loop_to_points(loop: List[Segment]) -> List[Optional[Vector2D]]:
    if len(loop) < 2:
        line = loop[0].line
        return [None,
                line.to_space(Vector1D(-_FAR_ABSCISSA)),
                line.to_space(Vector1D(_FAR_ABSCISSA))]

    if loop[0].start is None:
        first, last = loop[0], loop[-1]
        x_first = first.line.to_sub_space(first.end).x
        x_first -= max(1.0, abs(x_first / 2))
        x_last = last.line.to_sub_space(last.start).x
        x_last += max(1.0, abs(x_last / 2))
        points: List[Optional[Vector2D]] = [None, first.line.to_space(Vector1D(x_first))]
        points.extend(segment.end for segment in loop[:-1])
        points.append(last.line.to_space(Vector1D(x_last)))
        return points

    return [segment.start for segment in loop]


# =============================================================================
# POLYGONS SET
# =============================================================================

class PolygonsSet(AbstractRegion):
    """Region of the plane, see the module docstring for constructors."""

    def __init__(self, tree: Optional[BSPTree] = None,
                 tolerance: float = DEFAULT_TOLERANCE):
        super().__init__(tree, tolerance)
        self._vertices: Optional[List[List[Optional[Vector2D]]]] = None

    @classmethod
    def box(cls, x_min: float, x_max: float, y_min: float, y_max: float,
            tolerance: float = DEFAULT_TOLERANCE) -> "PolygonsSet":
        """Rectangle; empty when an extent is within the tolerance."""
        if x_min >= x_max - tolerance or y_min >= y_max - tolerance:
            return cls.from_hyperplanes([], tolerance)
        min_min = Vector2D(x_min, y_min)
        min_max = Vector2D(x_min, y_max)
        max_min = Vector2D(x_max, y_min)
        max_max = Vector2D(x_max, y_max)
        return cls.from_hyperplanes([
            Line.from_points(min_min, max_min, tolerance),
            Line.from_points(max_min, max_max, tolerance),
            Line.from_points(max_max, min_max, tolerance),
            Line.from_points(min_max, min_min, tolerance),
        ], tolerance)

    @classmethod
    def from_vertices(cls, vertices: List[Vector2D],
                      tolerance: float = DEFAULT_TOLERANCE) -> "PolygonsSet":
        """
        Polygon through vertices in order. Counterclockwise order bounds
        the interior, clockwise order its complement. No vertices gives the
        whole plane.
        """
        return cls(tree=_vertices_to_tree(tolerance, list(vertices)), tolerance=tolerance)

    def compute_geometrical_properties(self) -> None:
        loops = self.get_vertices()
        if not loops:
            tree = self.get_tree(False)
            if tree.cut is None and tree.attribute:
                self.set_size(math.inf)
            else:
                self.set_size(0.0)
            self.set_barycenter(Vector2D.NaN)
            return

        if loops[0][0] is None:
            self.set_size(math.inf)
            self.set_barycenter(Vector2D.NaN)
            return

        # shoelace formula over every loop
        total = 0.0
        sum_x = 0.0
        sum_y = 0.0
        for loop in loops:
            x1, y1 = loop[-1].x, loop[-1].y
            for point in loop:
                x0, y0 = x1, y1
                x1, y1 = point.x, point.y
                factor = x0 * y1 - y0 * x1
                total += factor
                sum_x += factor * (x0 + x1)
                sum_y += factor * (y0 + y1)

        if total < 0:
            # clockwise outer loop: the region is the outside of a polygon
            self.set_size(math.inf)
            self.set_barycenter(Vector2D.NaN)
        else:
            self.set_size(total / 2)
            self.set_barycenter(Vector2D(sum_x / (3 * total), sum_y / (3 * total)))

    def get_vertices(self) -> List[List[Optional[Vector2D]]]:
        """Boundary loops, see the module docstring for their layout."""
        if self._vertices is None:
            if self.get_tree(False).cut is None:
                self._vertices = []
            else:
                visitor = _SegmentsBuilder()
                self.get_tree(True).visit(visitor)
                sorted_segments = visitor.sorted
                loops = []
                while sorted_segments:
                    loop = _follow_loop(sorted_segments.pop_smallest(), sorted_segments)
                    if loop is not None:
                        loops.append(loop)
                self._vertices = [_loop_to_points(loop) for loop in loops]
        return [list(loop) for loop in self._vertices]
