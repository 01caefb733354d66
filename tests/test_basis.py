"""Basis construction, transform matrices and basis-relative components."""
from __future__ import annotations

import numpy as np
import pytest
import sympy as sp

from physics.basis import CANONICAL, Basis, q_normalize
from utils.errors import DimensionMismatchError, DivisionByZeroError
from utils.vector import Vector

BASES = [
    CANONICAL,
    Basis.from_axis_angle([0, 0, 1], np.pi / 2),
    Basis.from_axis_angle([1, 2, 3], 0.7),
    Basis.from_quaternion([0.9, 0.1, -0.3, 0.2]),
]


def test_default_basis_is_canonical() -> None:
    np.testing.assert_array_equal(Basis().matrix(), np.eye(3))
    np.testing.assert_array_equal(CANONICAL.matrix(CANONICAL), np.eye(3))


def test_components_without_basis_are_canonical() -> None:
    a = Vector(0.3, -1.2, 2.0)
    np.testing.assert_array_equal(a.components(), a.c)
    np.testing.assert_array_equal(a.components(CANONICAL), a.c)


@pytest.mark.parametrize("basis", BASES)
def test_basis_round_trip(basis) -> None:
    np.testing.assert_allclose(Vector(1, 0, 0, basis).components(basis), [1.0, 0.0, 0.0], atol=1e-12)
    local = [0.3, -1.2, 2.0]
    np.testing.assert_allclose(Vector(local, basis).components(basis), local, atol=1e-12)


@pytest.mark.parametrize("basis", BASES)
def test_basis_vectors_are_orthonormal_and_right_handed(basis) -> None:
    e1, e2, e3 = basis.vectors()
    assert e1.is_unitary() and e2.is_unitary() and e3.is_unitary()
    assert e1.is_perpendicular(e2)
    assert e1.cross(e2).dot(e3) == pytest.approx(1.0)
    np.testing.assert_allclose(basis.matrix(basis), np.eye(3), atol=1e-12)


def test_single_component_accessors_in_a_basis() -> None:
    quarter_turn = Basis.from_axis_angle([0, 0, 1], np.pi / 2)
    v = Vector(0, 1, 0)
    assert v.x(quarter_turn) == pytest.approx(1.0)
    assert v.y(quarter_turn) == pytest.approx(0.0, abs=1e-12)
    assert v.z(quarter_turn) == pytest.approx(0.0)
    assert (v.x(), v.y(), v.z()) == (0.0, 1.0, 0.0)


def test_matrix_between_bases_maps_components() -> None:
    a = Basis.from_axis_angle([0, 0, 1], 0.4)
    b = Basis.from_axis_angle([1, 0, 0], -1.1)
    v = Vector([0.5, 0.25, -2.0], a)
    np.testing.assert_allclose(a.matrix(b) @ v.components(a), v.components(b), atol=1e-12)


def test_quaternion_round_trip() -> None:
    q = q_normalize([0.9, 0.1, -0.3, 0.2])
    np.testing.assert_allclose(Basis.from_quaternion(q).to_quaternion(), q, atol=1e-12)
    np.testing.assert_allclose(Basis.from_quaternion([1, 0, 0, 0]).matrix(), np.eye(3))


def test_invalid_basis_matrices() -> None:
    with pytest.raises(ValueError):
        Basis(np.diag([1.0, 2.0, 1.0]))
    with pytest.raises(DimensionMismatchError):
        Basis(np.eye(2))
    with pytest.raises(DimensionMismatchError):
        Basis.from_quaternion([1, 0, 0])
    with pytest.raises(DivisionByZeroError):
        Basis.from_axis_angle([0, 0, 0], 1.0)


def test_symbolic_axis_angle_basis() -> None:
    theta = sp.Symbol("theta")
    basis = Basis.from_axis_angle([0, 0, 1], theta)
    assert basis.is_symbolic
    assert basis.matrix() == sp.ImmutableMatrix([
        [sp.cos(theta), -sp.sin(theta), 0],
        [sp.sin(theta), sp.cos(theta), 0],
        [0, 0, 1],
    ])
