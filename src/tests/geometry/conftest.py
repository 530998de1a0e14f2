"""Shared regions for the geometry tests."""

import pytest

from mathkit.geometry import PolyhedronsSet, Vector3D

# Unit cube as a boundary representation, facets counterclockwise from outside
CUBE_VERTICES = [
    Vector3D(0.0, 0.0, 0.0), Vector3D(1.0, 0.0, 0.0),
    Vector3D(1.0, 1.0, 0.0), Vector3D(0.0, 1.0, 0.0),
    Vector3D(0.0, 0.0, 1.0), Vector3D(1.0, 0.0, 1.0),
    Vector3D(1.0, 1.0, 1.0), Vector3D(0.0, 1.0, 1.0),
]
CUBE_FACETS = [
    [0, 3, 2, 1],   # z = 0
    [4, 5, 6, 7],   # z = 1
    [0, 1, 5, 4],   # y = 0
    [3, 7, 6, 2],   # y = 1
    [0, 4, 7, 3],   # x = 0
    [1, 2, 6, 5],   # x = 1
]


@pytest.fixture
def unit_cube():
    return PolyhedronsSet.box(0.0, 1.0, 0.0, 1.0, 0.0, 1.0)


@pytest.fixture
def overlapping_cubes():
    """Two 2 x 2 x 2 cubes sharing the unit cube [1, 2]^3."""
    return (PolyhedronsSet.box(0.0, 2.0, 0.0, 2.0, 0.0, 2.0),
            PolyhedronsSet.box(1.0, 3.0, 1.0, 3.0, 1.0, 3.0))


@pytest.fixture
def cube_brep():
    """Fresh copies of the unit cube vertices and facets, safe to edit."""
    return list(CUBE_VERTICES), [list(facet) for facet in CUBE_FACETS]
