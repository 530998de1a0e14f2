"""
Rotation Tests
==============

Axis/angle conventions, matrix consistency, composition order, the
vector-based constructors and matrix orthogonalization.

Run: python -m pytest tests/geometry/test_rotation.py -v
"""

import math

import numpy as np
import pytest

from mathkit.geometry import Rotation, RotationConvention, Vector3D
from mathkit.spec.errors import (
    MathArithmeticError,
    MathIllegalArgumentError,
    NotARotationMatrixError,
)

VO = RotationConvention.VECTOR_OPERATOR
FT = RotationConvention.FRAME_TRANSFORM


def _random_rotation(rng):
    axis = Vector3D(*rng.normal(size=3))
    return Rotation.from_axis_angle(axis, float(rng.uniform(0.0, math.pi)))


def _assert_close(u, v, tol=1e-12):
    assert u.distance(v) < tol, f"{u} != {v}"


# =============================================================================
# P1: CRITICAL - Conventions
# =============================================================================

def test_quarter_turn_around_k():
    """P1.1: A +pi/2 vector-operator turn around +k takes i to j."""
    r = Rotation.from_axis_angle(Vector3D.PLUS_K, math.pi / 2, VO)
    _assert_close(r.apply_to(Vector3D.PLUS_I), Vector3D.PLUS_J)
    _assert_close(r.apply_to(Vector3D.PLUS_J), Vector3D.MINUS_I)
    _assert_close(r.apply_to(Vector3D.PLUS_K), Vector3D.PLUS_K)


def test_frame_transform_turns_the_other_way():
    """P1.2: FRAME_TRANSFORM with angle a equals VECTOR_OPERATOR with -a."""
    axis = Vector3D(1.0, 2.0, -0.5)
    frame = Rotation.from_axis_angle(axis, 0.7, FT)
    vector = Rotation.from_axis_angle(axis, -0.7, VO)
    u = Vector3D(0.3, -1.1, 2.0)
    _assert_close(frame.apply_to(u), vector.apply_to(u))


def test_axis_and_angle_recovered():
    """P1.3: get_axis / get_angle give back the construction parameters."""
    axis = Vector3D(1.0, -2.0, 2.0)
    r = Rotation.from_axis_angle(axis, 1.2, VO)
    assert r.get_angle() == pytest.approx(1.2, abs=1e-14)
    _assert_close(r.get_axis(VO), axis.normalize())
    _assert_close(r.get_axis(FT), axis.normalize().negate())


def test_identity_axis_and_angle():
    assert Rotation.IDENTITY.get_angle() == 0.0
    assert Rotation.IDENTITY.get_axis(VO) == Vector3D.PLUS_I
    assert Rotation.IDENTITY.get_axis(FT) == Vector3D.MINUS_I


def test_matrix_matches_apply_to():
    """P1.4: apply_to(u) == get_matrix() @ u, and the matrix is orthogonal."""
    rng = np.random.default_rng(42)
    for _ in range(50):
        r = _random_rotation(rng)
        m = r.get_matrix()
        np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-14)
        assert np.linalg.det(m) == pytest.approx(1.0, abs=1e-14)
        u = Vector3D(*rng.normal(size=3))
        np.testing.assert_allclose(m @ u.to_array(), r.apply_to(u).to_array(), atol=1e-14)


def test_numpy_scalars_become_floats():
    """P1.5: Quaternions and rotated vectors hold plain Python floats."""
    q = np.array([0.5, 0.5, 0.5, 0.5])
    r = Rotation(*q)
    assert all(type(c) is float for c in (r.q0, r.q1, r.q2, r.q3))
    u = r.apply_to(Vector3D(*np.array([1.0, 2.0, 3.0])))
    assert all(type(c) is float for c in u.to_tuple())
    _assert_close(u, Vector3D(2.0, 3.0, 1.0))


# =============================================================================
# P2: IMPORTANT - Composition and inversion
# =============================================================================

def test_compose_order():
    """P2.1: VECTOR_OPERATOR applies the argument first, FRAME_TRANSFORM last."""
    rng = np.random.default_rng(7)
    r1 = _random_rotation(rng)
    r2 = _random_rotation(rng)
    u = Vector3D(*rng.normal(size=3))
    _assert_close(r1.compose(r2, VO).apply_to(u), r1.apply_to(r2.apply_to(u)))
    _assert_close(r1.compose(r2, FT).apply_to(u), r2.apply_to(r1.apply_to(u)))


def test_inverse():
    """P2.2: revert() and apply_inverse_to() undo the rotation."""
    rng = np.random.default_rng(11)
    for _ in range(20):
        r = _random_rotation(rng)
        u = Vector3D(*rng.normal(size=3))
        _assert_close(r.apply_inverse_to(r.apply_to(u)), u)
        _assert_close(r.revert().apply_to(r.apply_to(u)), u)
        assert r.compose(r.revert(), VO).get_angle() == pytest.approx(0.0, abs=1e-7)


def test_distance():
    """P2.3: Distance is the angle of the relative rotation."""
    r = Rotation.from_axis_angle(Vector3D(0.0, 1.0, 1.0), 0.4)
    assert Rotation.distance(r, r) == pytest.approx(0.0, abs=1e-7)
    assert Rotation.distance(Rotation.IDENTITY, r) == pytest.approx(0.4, abs=1e-14)
    # q and -q are the same rotation
    minus_q = Rotation(-r.q0, -r.q1, -r.q2, -r.q3)
    assert Rotation.distance(r, minus_q) == pytest.approx(0.0, abs=1e-7)


def test_normalization():
    """P2.4: Unnormalized quaternions are scaled on request."""
    r = Rotation(2.0, 0.0, 0.0, 2.0, needs_normalization=True)
    assert r.q0 == pytest.approx(math.sqrt(0.5))
    assert r.get_angle() == pytest.approx(math.pi / 2)
    with pytest.raises(MathArithmeticError):
        Rotation(0.0, 0.0, 0.0, 0.0, needs_normalization=True)


# =============================================================================
# P3: Vector-defined rotations and matrices
# =============================================================================

def test_from_vectors():
    """P3.1: The smallest rotation taking u to the direction of v."""
    u = Vector3D(1.0, 2.0, 3.0)
    v = Vector3D(-2.0, 0.5, 1.0)
    r = Rotation.from_vectors(u, v)
    _assert_close(r.apply_to(u).normalize(), v.normalize())
    assert r.get_angle() == pytest.approx(Vector3D.angle(u, v), abs=1e-14)


def test_from_vectors_opposite():
    """P3.2: Opposite vectors give a half turn."""
    u = Vector3D(0.0, 0.0, 2.0)
    r = Rotation.from_vectors(u, u.negate())
    _assert_close(r.apply_to(u), u.negate())
    assert r.get_angle() == pytest.approx(math.pi)


def test_from_vectors_zero():
    with pytest.raises(MathArithmeticError):
        Rotation.from_vectors(Vector3D.ZERO, Vector3D.PLUS_I)


def test_from_vector_pairs_recovers_rotation():
    """P3.3: (u1, u2) -> (r u1, r u2) gives back r."""
    rng = np.random.default_rng(3)
    for _ in range(20):
        r = _random_rotation(rng)
        u1 = Vector3D(*rng.normal(size=3))
        u2 = Vector3D(*rng.normal(size=3))
        found = Rotation.from_vector_pairs(u1, u2, r.apply_to(u1), r.apply_to(u2))
        assert Rotation.distance(r, found) < 1e-7


def test_from_vector_pairs_colinear():
    with pytest.raises(MathArithmeticError):
        Rotation.from_vector_pairs(Vector3D.PLUS_I, Vector3D(2.0, 0.0, 0.0),
                                   Vector3D.PLUS_J, Vector3D.PLUS_K)


def test_from_matrix_round_trip():
    """P3.4: get_matrix -> from_matrix is the same rotation."""
    rng = np.random.default_rng(5)
    for _ in range(20):
        r = _random_rotation(rng)
        assert Rotation.distance(r, Rotation.from_matrix(r.get_matrix())) < 1e-7


def test_from_matrix_orthogonalizes():
    """P3.5: A slightly perturbed matrix still maps to the nearby rotation."""
    r = Rotation.from_axis_angle(Vector3D(1.0, 1.0, 0.0), 2.5)
    rng = np.random.default_rng(9)
    noisy = r.get_matrix() + 1e-6 * rng.normal(size=(3, 3))
    assert Rotation.distance(r, Rotation.from_matrix(noisy)) < 1e-5


def test_from_matrix_rejects():
    """P3.6: Reflections, singular matrices, wrong shapes and NaN."""
    with pytest.raises(NotARotationMatrixError):
        Rotation.from_matrix(np.diag([1.0, 1.0, -1.0]))
    with pytest.raises(NotARotationMatrixError):
        Rotation.from_matrix(np.zeros((3, 3)))
    with pytest.raises(NotARotationMatrixError):
        Rotation.from_matrix(np.eye(2))
    with pytest.raises(NotARotationMatrixError):
        Rotation.from_matrix([[math.nan, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])


def test_from_axis_angle_zero_axis():
    with pytest.raises(MathIllegalArgumentError):
        Rotation.from_axis_angle(Vector3D.ZERO, 1.0)
