"""
Polyhedrons Set Tests
=====================

Regions of space: boxes and boundary representations, volume and
barycenter against scipy's convex hull, boundary validation errors,
facet loops, ray casting and rigid moves.

Run: python -m pytest tests/geometry/test_polyhedrons_set.py -v
"""

import math

import numpy as np
import pytest
from scipy.spatial import ConvexHull

from mathkit.geometry import Location, Plane, PolyhedronsSet, Rotation, Vector3D
from mathkit.geometry.euclidean.threed.line import Line
from mathkit.geometry.partitioning import Side
from mathkit.spec.errors import GeometricInconsistencyError, InconsistencyKind

PYRAMID_PLY = """\
ply
format ascii 1.0
element vertex 5
property double x
property double y
property double z
element face 5
property list uchar int vertex_indices
end_header
0 0 0
2 0 0
2 2 0
0 2 0
1 1 3
4 0 3 2 1
3 0 1 4
3 1 2 4
3 2 3 4
3 3 0 4
"""


def _parse_ply(text):
    """Vertices and facets of a small ASCII PLY mesh."""
    lines = text.splitlines()
    counts = {}
    for line in lines:
        if line.startswith("element"):
            _, name, count = line.split()
            counts[name] = int(count)
    body = lines[lines.index("end_header") + 1:]
    vertices = [Vector3D(*(float(c) for c in row.split()))
                for row in body[:counts["vertex"]]]
    facets = [[int(i) for i in row.split()[1:]]
              for row in body[counts["vertex"]:counts["vertex"] + counts["face"]]]
    return vertices, facets


def _assert_close(u, v, tol=1e-10):
    assert u.distance(v) < tol, f"{u} != {v}"


def _hull_brep(points):
    """Outward-oriented triangles of the convex hull of points."""
    hull = ConvexHull(points)
    facets = []
    for simplex, equation in zip(hull.simplices, hull.equations):
        a, b, c = (points[i] for i in simplex)
        if np.dot(np.cross(b - a, c - a), equation[:3]) < 0:
            simplex = simplex[::-1]
        facets.append([int(i) for i in simplex])
    return hull, facets


def _hull_barycenter(points, hull):
    center = points[hull.vertices].mean(axis=0)
    total = 0.0
    weighted = np.zeros(3)
    for simplex in hull.simplices:
        a, b, c = (points[i] for i in simplex)
        volume = abs(np.linalg.det(np.array([a - center, b - center, c - center]))) / 6.0
        total += volume
        weighted += volume * (a + b + c + center) / 4.0
    return weighted / total


# =============================================================================
# P1: CRITICAL - Volume and barycenter
# =============================================================================

def test_unit_cube(unit_cube):
    """P1.1: Volume 1, surface 6, center (1/2, 1/2, 1/2)."""
    assert unit_cube.get_size() == pytest.approx(1.0)
    assert unit_cube.get_boundary_size() == pytest.approx(6.0)
    _assert_close(unit_cube.get_barycenter(), Vector3D(0.5, 0.5, 0.5))


def test_check_point(unit_cube):
    assert unit_cube.check_point(Vector3D(0.5, 0.5, 0.5)) is Location.INSIDE
    assert unit_cube.check_point(Vector3D(0.5, 0.0, 0.5)) is Location.BOUNDARY
    assert unit_cube.check_point(Vector3D(1.0, 1.0, 1.0)) is Location.BOUNDARY
    assert unit_cube.check_point(Vector3D(1.2, 1.2, 1.2)) is Location.OUTSIDE


def test_brep_cube_matches_box(unit_cube, cube_brep):
    """P1.2: The cube from its facets equals the cube from its planes."""
    cube = PolyhedronsSet.from_brep(*cube_brep)
    assert cube.get_size() == pytest.approx(1.0)
    _assert_close(cube.get_barycenter(), Vector3D(0.5, 0.5, 0.5))
    assert cube.check_point(Vector3D(0.25, 0.75, 0.5)) is Location.INSIDE
    assert cube.check_point(Vector3D(-0.25, 0.75, 0.5)) is Location.OUTSIDE


def test_pyramid_from_ply():
    """P1.3: Square pyramid of base 2 x 2 and height 3 read from a PLY mesh."""
    pyramid = PolyhedronsSet.from_brep(*_parse_ply(PYRAMID_PLY))
    assert pyramid.get_size() == pytest.approx(4.0)
    _assert_close(pyramid.get_barycenter(), Vector3D(1.0, 1.0, 0.75))
    assert pyramid.check_point(Vector3D(1.0, 1.0, 2.9)) is Location.INSIDE
    assert pyramid.check_point(Vector3D(0.1, 0.1, 2.0)) is Location.OUTSIDE


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_convex_hull_oracle(seed):
    """P1.4: Volume and barycenter agree with scipy's convex hull."""
    rng = np.random.default_rng(seed)
    points = rng.normal(size=(20, 3))
    points /= np.linalg.norm(points, axis=1)[:, None]
    points = points * [1.0, 2.0, 0.5] + [3.0, -1.0, 2.0]
    hull, facets = _hull_brep(points)

    polyhedron = PolyhedronsSet.from_brep([Vector3D(*map(float, p)) for p in points], facets)
    assert polyhedron.get_size() == pytest.approx(hull.volume, rel=1e-9)
    assert polyhedron.get_boundary_size() == pytest.approx(hull.area, rel=1e-9)
    expected = _hull_barycenter(points, hull)
    np.testing.assert_allclose(polyhedron.get_barycenter().to_array(), expected, atol=1e-9)


def test_empty_and_whole_space():
    """P1.5: A flat box is empty, the default region is everything."""
    flat = PolyhedronsSet.box(0.0, 1.0, 0.0, 1.0, 0.0, 1e-12)
    assert flat.is_empty()
    assert flat.get_size() == 0.0
    assert flat.get_barycenter().is_nan()
    whole = PolyhedronsSet()
    assert whole.get_size() == math.inf
    assert whole.get_barycenter().is_nan()


# =============================================================================
# P2: IMPORTANT - Boundary representation checks
# =============================================================================

def test_brep_close_vertices(cube_brep):
    vertices, facets = cube_brep
    vertices.append(Vector3D(1.0, 1.0, 1.0 + 1e-12))
    with pytest.raises(GeometricInconsistencyError) as info:
        PolyhedronsSet.from_brep(vertices, facets)
    assert info.value.kind is InconsistencyKind.CLOSE_VERTICES


def test_brep_wrong_number_of_points(cube_brep):
    vertices, facets = cube_brep
    facets.append([0, 1])
    with pytest.raises(GeometricInconsistencyError) as info:
        PolyhedronsSet.from_brep(vertices, facets)
    assert info.value.kind is InconsistencyKind.WRONG_NUMBER_OF_POINTS


def test_brep_orientation_mismatch(cube_brep):
    """P2.1: A flipped facet runs an edge the same way as its neighbour."""
    vertices, facets = cube_brep
    facets[0] = facets[0][::-1]
    with pytest.raises(GeometricInconsistencyError) as info:
        PolyhedronsSet.from_brep(vertices, facets)
    assert info.value.kind is InconsistencyKind.FACET_ORIENTATION_MISMATCH


def test_brep_open_surface(cube_brep):
    """P2.2: Removing the lid leaves edges with a single facet."""
    vertices, facets = cube_brep
    del facets[1]
    with pytest.raises(GeometricInconsistencyError) as info:
        PolyhedronsSet.from_brep(vertices, facets)
    assert info.value.kind is InconsistencyKind.EDGE_CONNECTED_TO_ONE_FACET


def test_brep_out_of_plane(cube_brep):
    vertices, facets = cube_brep
    vertices[6] = Vector3D(1.0, 1.0, 1.1)
    with pytest.raises(GeometricInconsistencyError) as info:
        PolyhedronsSet.from_brep(vertices, facets)
    assert info.value.kind is InconsistencyKind.OUT_OF_PLANE
    assert isinstance(info.value, ValueError)


# =============================================================================
# P3: Facets, rays and moves
# =============================================================================

def test_facets_face_outward(unit_cube):
    """P3.1: Six closed loops, counterclockwise seen from outside."""
    center = np.array([0.5, 0.5, 0.5])
    facets = unit_cube.get_facets()
    assert len(facets) == 6
    for loop in facets:
        assert len(loop) >= 4 and loop[0] is not None
        points = np.array([p.to_array() for p in loop])
        # Newell normal of the loop
        normal = np.cross(points, np.roll(points, -1, axis=0)).sum(axis=0)
        assert np.linalg.norm(normal) == pytest.approx(2.0)
        assert np.dot(normal, points.mean(axis=0) - center) > 0


def test_first_intersection_random_rays(unit_cube):
    """P3.2: From the center, every ray leaves through a facet ahead of it."""
    rng = np.random.default_rng(42)
    origin = Vector3D(0.5, 0.5, 0.5)
    for _ in range(1000):
        direction = Vector3D(*rng.normal(size=3))
        line = Line(origin, origin.add(direction))
        facet = unit_cube.first_intersection(origin, line)
        assert facet is not None
        hit = facet.hyperplane.intersection(line)
        assert direction.dot_product(hit.subtract(origin)) > 0
        assert unit_cube.check_point(hit) is Location.BOUNDARY


def test_first_intersection_from_outside(unit_cube):
    """P3.3: Entering facet ahead, nothing when the ray points away."""
    start = Vector3D(-1.0, 0.5, 0.5)
    facet = unit_cube.first_intersection(start, Line(start, Vector3D(0.0, 0.5, 0.5)))
    assert facet is not None
    assert abs(facet.hyperplane.get_normal().dot_product(Vector3D.PLUS_I)) == pytest.approx(1.0)
    assert facet.hyperplane.contains(Vector3D(0.0, 0.2, 0.7))

    away = Vector3D(2.0, 2.0, 2.0)
    assert unit_cube.first_intersection(away, Line(away, Vector3D(3.0, 3.0, 3.0))) is None


def test_rotate_about_center(unit_cube):
    """P3.4: A rotation about the center keeps volume and barycenter."""
    center = Vector3D(0.5, 0.5, 0.5)
    rotated = unit_cube.rotate(center, Rotation.from_axis_angle(Vector3D(1.0, 1.0, 1.0), 0.7))
    assert rotated.get_size() == pytest.approx(1.0)
    _assert_close(rotated.get_barycenter(), center)
    assert rotated.check_point(center) is Location.INSIDE
    assert rotated.check_point(Vector3D(1.5, 0.5, 0.5)) is Location.OUTSIDE


def test_translate(unit_cube):
    moved = unit_cube.translate(Vector3D(1.0, 2.0, 3.0))
    assert moved.get_size() == pytest.approx(1.0)
    _assert_close(moved.get_barycenter(), Vector3D(1.5, 2.5, 3.5))
    assert moved.check_point(Vector3D(0.5, 0.5, 0.5)) is Location.OUTSIDE
    assert unit_cube.check_point(Vector3D(0.5, 0.5, 0.5)) is Location.INSIDE


def test_side_and_section(unit_cube):
    """P3.5: The cube lies below z = 2 and its mid section is a unit square."""
    above = Plane.from_point_normal(Vector3D(0.0, 0.0, 2.0), Vector3D.PLUS_K)
    assert unit_cube.side(above) is Side.MINUS
    middle = Plane.from_point_normal(Vector3D(0.0, 0.0, 0.5), Vector3D.PLUS_K)
    assert unit_cube.side(middle) is Side.BOTH
    section = unit_cube.intersection(middle.whole_hyperplane())
    assert section is not None
    assert section.get_size() == pytest.approx(1.0)
