# physics/basis.py
"""
Orthonormal reference bases.

A ``Basis`` stores the 3x3 matrix whose columns are its unit vectors written
in canonical components, so ``v_canonical = M @ v_local``. Matrices may be
numeric or symbolic; a symbolic matrix lets a basis rotate with time, which
is what ``Vector.dt`` needs for frame-dependent derivatives.
"""
import logging

import numpy as np

import config as cfg
from utils.errors import DimensionMismatchError
from utils.layers import layer_for
from utils.vector import Vector

LOGGER = logging.getLogger(__name__)


def q_normalize(q):
    """Normalize quaternion [qw,qx,qy,qz]."""
    q = np.asarray(q, dtype=float)
    if q.shape != (4,):
        raise DimensionMismatchError(f"Quaternion must have 4 entries, got shape {q.shape}")
    n = np.linalg.norm(q)
    if n == 0.0:
        return np.array([1.0, 0.0, 0.0, 0.0], dtype=float)
    return q / n


def q_to_dcm(q):
    """
    Convert quaternion -> direction cosine matrix (DCM).
    D maps local -> canonical: v_canonical = D @ v_local
    """
    qw, qx, qy, qz = q_normalize(q)
    qx2 = qx*qx; qy2 = qy*qy; qz2 = qz*qz
    qwqx = qw*qx; qwqy = qw*qy; qwqz = qw*qz
    qxqy = qx*qy; qxqz = qx*qz; qyqz = qy*qz
    return np.array([
        [qw*qw + qx2 - qy2 - qz2, 2*(qxqy - qwqz),         2*(qxqz + qwqy)],
        [2*(qxqy + qwqz),         qw*qw - qx2 + qy2 - qz2, 2*(qyqz - qwqx)],
        [2*(qxqz - qwqy),         2*(qyqz + qwqx),         qw*qw - qx2 - qy2 + qz2]
    ], dtype=float)


def dcm_to_q(D):
    """Convert a 3x3 DCM to quaternion [qw,qx,qy,qz] (numerically stable branch choice)."""
    D = np.asarray(D, dtype=float)
    tr = D[0, 0] + D[1, 1] + D[2, 2]
    if tr > 0.0:
        s = 0.5 / np.sqrt(tr + 1.0)
        q = [0.25 / s, (D[2, 1] - D[1, 2]) * s, (D[0, 2] - D[2, 0]) * s, (D[1, 0] - D[0, 1]) * s]
    elif D[0, 0] > D[1, 1] and D[0, 0] > D[2, 2]:
        s = 2.0 * np.sqrt(1.0 + D[0, 0] - D[1, 1] - D[2, 2])
        q = [(D[2, 1] - D[1, 2]) / s, 0.25 * s, (D[0, 1] + D[1, 0]) / s, (D[0, 2] + D[2, 0]) / s]
    elif D[1, 1] > D[2, 2]:
        s = 2.0 * np.sqrt(1.0 + D[1, 1] - D[0, 0] - D[2, 2])
        q = [(D[0, 2] - D[2, 0]) / s, (D[0, 1] + D[1, 0]) / s, 0.25 * s, (D[1, 2] + D[2, 1]) / s]
    else:
        s = 2.0 * np.sqrt(1.0 + D[2, 2] - D[0, 0] - D[1, 1])
        q = [(D[1, 0] - D[0, 1]) / s, (D[0, 2] + D[2, 0]) / s, (D[1, 2] + D[2, 1]) / s, 0.25 * s]
    return q_normalize(q)


class Basis:
    """Right-handed orthonormal basis.

    Parameters
    ----------
    m : 3x3 array-like or sympy matrix, optional
        Columns are the basis unit vectors in canonical components.
        Defaults to the identity (the canonical basis).
    """

    __slots__ = ("_m",)

    def __init__(self, m=None) -> None:
        if m is None:
            m = np.eye(3)
        layer = layer_for(m)
        m = layer.simplify(layer.matrix(m))
        if not layer.symbolic:
            err = float(np.abs(m.T @ m - np.eye(3)).max())
            if err > cfg.ORTHONORMAL_TOLERANCE:
                raise ValueError(f"Basis matrix is not orthonormal (max |MᵀM - I| = {err:.3e})")
        self._m = m

    @classmethod
    def from_quaternion(cls, q) -> "Basis":
        """Basis rotated from the canonical one by unit quaternion [qw,qx,qy,qz]."""
        return cls(q_to_dcm(q))

    @classmethod
    def from_axis_angle(cls, axis, angle) -> "Basis":
        """Basis rotated from the canonical one by ``angle`` radians about ``axis``.

        Uses Rodrigues' rotation formula. The axis need not be normalised;
        ``angle`` may be a sympy expression, e.g. ``theta(t)``.
        """
        layer = layer_for(axis, angle)
        k = layer.column(axis)
        k = layer.divide(k, layer.norm(k))
        cos_theta = layer.cos(angle)
        sin_theta = layer.sin(angle)
        k_cross = layer.matrix([
            [0, -k[2], k[1]],
            [k[2], 0, -k[0]],
            [-k[1], k[0], 0],
        ])
        m = layer.eye() * cos_theta + k_cross * sin_theta + layer.outer(k, k) * (1 - cos_theta)
        LOGGER.debug("Basis from axis %s and angle %s", list(k), angle)
        return cls(m)

    @property
    def is_symbolic(self) -> bool:
        return layer_for(self._m).symbolic

    def matrix(self, target=None):
        """Transform matrix of this basis.

        Without ``target`` return the basis vectors as columns of canonical
        components. With ``target`` return the matrix mapping components in
        this basis to components in ``target``.
        """
        if target is None:
            return self._m.copy() if not self.is_symbolic else self._m
        t = target.matrix()
        layer = layer_for(self._m, t)
        return layer.simplify(layer.matmul(layer.matrix(t).T, layer.matrix(self._m)))

    def vectors(self):
        """The three basis unit vectors as ``Vector`` instances."""
        return tuple(Vector(self._m[:, i]) for i in range(3))

    def to_quaternion(self):
        """Quaternion [qw,qx,qy,qz] of a numeric basis."""
        return dcm_to_q(self._m)

    def __repr__(self) -> str:
        return f"Basis({self._m.tolist()})"


CANONICAL = Basis()
