"""
Numeric and symbolic computation layers.

A ``Vector`` keeps its three canonical components either as a float
``numpy.ndarray`` of shape ``(3,)`` or as a ``sympy.ImmutableMatrix`` of
shape ``(3, 1)``. The two layers in this module offer the same operations
over those two representations. Callers pick a layer once per operation with
``layer_for`` and stay generic afterwards.

Predicates answer with a three-valued ``Truth``. Floating point comparisons
only ever produce ``TRUE`` or ``FALSE``; symbolic ones produce ``UNKNOWN``
whenever sympy cannot decide. ``holds`` turns a ``Truth`` into a ``bool``
and counts ``UNKNOWN`` as false.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

import numpy as np
import sympy as sp

import config as cfg
from utils.errors import (
    DimensionMismatchError,
    DivisionByZeroError,
    InvalidArgumentError,
    SingularMatrixError,
    UndefinedSymbolicPreconditionError,
)

LOGGER = logging.getLogger(__name__)


class Truth(Enum):
    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    @classmethod
    def of(cls, value) -> "Truth":
        """Map a fuzzy answer (``True`` / ``False`` / ``None``) onto a Truth."""
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    @classmethod
    def all(cls, truths: Iterable["Truth"]) -> "Truth":
        """Three-valued conjunction."""
        result = cls.TRUE
        for truth in truths:
            if truth is cls.FALSE:
                return cls.FALSE
            if truth is cls.UNKNOWN:
                result = cls.UNKNOWN
        return result


def holds(truth: Truth) -> bool:
    """Collapse a Truth to ``bool``; anything not proven true is false."""
    return truth is Truth.TRUE


def is_symbolic(value) -> bool:
    """True if ``value`` is, or contains, a sympy object."""
    if isinstance(value, (sp.Basic, sp.MatrixBase)):
        return True
    if isinstance(value, np.ndarray):
        return value.dtype == object and any(isinstance(v, sp.Basic) for v in value.flat)
    if isinstance(value, (list, tuple)):
        return any(is_symbolic(v) for v in value)
    return False


def is_matrix(value) -> bool:
    return isinstance(value, sp.MatrixBase) or np.ndim(value) == 2


def _nearest_exact(f):
    """Closest recognisable closed form of a float, else its short rational."""
    value = sp.nsimplify(f)
    if value.has(sp.Float):
        value = sp.nsimplify(f, rational=True)
    return value


def _exact(value):
    """Replace float literals with exact constants such as 1/2 or sqrt(3)/2."""
    if isinstance(value, sp.Basic) and value.has(sp.Float):
        return value.xreplace({f: _nearest_exact(f) for f in value.atoms(sp.Float)})
    return value


class NumericLayer:
    """Float components held in a ``numpy.ndarray`` of shape ``(3,)``."""

    symbolic = False

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def column(self, data) -> np.ndarray:
        try:
            arr = np.array(data, dtype=float)
        except (TypeError, ValueError) as exc:
            raise DimensionMismatchError(f"Components must be 3 real scalars, got {data!r}") from exc
        if arr.size != 3:
            raise DimensionMismatchError(f"Expected 3 components, got {arr.size}")
        return arr.reshape(3)

    def matrix(self, data) -> np.ndarray:
        try:
            m = np.array(data, dtype=float)
        except (TypeError, ValueError) as exc:
            raise DimensionMismatchError(f"Matrix must be 3x3 real, got {data!r}") from exc
        if m.shape != (3, 3):
            raise DimensionMismatchError(f"Expected a 3x3 matrix, got shape {m.shape}")
        return m

    def scalar(self, k) -> float:
        try:
            return float(k)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"Expected a real scalar, got {k!r}") from exc

    def simplify(self, value):
        return value

    def evaluate(self, a) -> np.ndarray:
        return np.array(a, dtype=float)

    def substitute(self, a, mapping):
        return a

    def time_symbol(self, a):
        return None

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------
    def dot(self, a, b) -> float:
        return float(np.dot(a, b))

    def cross(self, a, b) -> np.ndarray:
        return np.cross(a, b)

    def norm(self, a) -> float:
        return float(np.linalg.norm(a))

    def outer(self, a, b) -> np.ndarray:
        return np.outer(a, b)

    def matmul(self, m, a) -> np.ndarray:
        return m @ a

    def divide(self, a, k):
        if k == 0:
            raise DivisionByZeroError("Cannot divide a Vector by zero.")
        return a / k

    def solve(self, m, a) -> np.ndarray:
        try:
            return np.linalg.solve(m, a)
        except np.linalg.LinAlgError as exc:
            raise SingularMatrixError("Cannot divide a Vector by a singular matrix.") from exc

    def eye(self) -> np.ndarray:
        return np.eye(3)

    def cos(self, angle) -> float:
        return float(np.cos(angle))

    def sin(self, angle) -> float:
        return float(np.sin(angle))

    def sign(self, value) -> float:
        return float(np.sign(value))

    def acos(self, ratio) -> float:
        if abs(ratio) > 1.0:
            if abs(ratio) - 1.0 <= cfg.ANGLE_DOMAIN_SLACK:
                ratio = float(np.clip(ratio, -1.0, 1.0))
            else:
                LOGGER.warning("acos argument %r lies outside [-1, 1]; angle is undefined", ratio)
        with np.errstate(invalid="ignore"):
            return float(np.arccos(ratio))

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def zero(self, value) -> Truth:
        return Truth.of(value == 0)

    def equal(self, a, b) -> Truth:
        # tolerance scales with the float spacing of each operand
        tol = cfg.EPS_FACTOR * (np.spacing(np.abs(a)) + np.spacing(np.abs(b)))
        return Truth.of(bool(np.all(np.abs(a - b) < tol)))

    def unitary(self, a) -> Truth:
        return Truth.of(abs(self.dot(a, a) - 1.0) < cfg.EPS_FACTOR * np.spacing(1.0))

    def perpendicular(self, a, b) -> Truth:
        # bound is relative to |a||b|, not eps(a) + eps(b), so it also holds for tiny vectors
        scale = self.norm(a) * self.norm(b)
        return Truth.of(abs(self.dot(a, b)) < cfg.EPS_FACTOR * np.spacing(scale))


class SymbolicLayer:
    """Symbolic components held in a ``sympy.ImmutableMatrix`` of shape ``(3, 1)``."""

    symbolic = True

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def column(self, data) -> sp.ImmutableMatrix:
        if isinstance(data, sp.Basic) and not isinstance(data, sp.MatrixBase):
            raise DimensionMismatchError(f"Expected 3 components, got the scalar {data}")
        try:
            m = sp.ImmutableMatrix(data)
        except (TypeError, ValueError, sp.SympifyError) as exc:
            raise DimensionMismatchError(f"Components must be 3 scalars, got {data!r}") from exc
        if len(m) != 3:
            raise DimensionMismatchError(f"Expected 3 components, got {len(m)}")
        return m.reshape(3, 1).applyfunc(_exact)

    def matrix(self, data) -> sp.ImmutableMatrix:
        try:
            m = sp.ImmutableMatrix(data)
        except (TypeError, ValueError, sp.SympifyError) as exc:
            raise DimensionMismatchError(f"Matrix must be 3x3, got {data!r}") from exc
        if m.shape != (3, 3):
            raise DimensionMismatchError(f"Expected a 3x3 matrix, got shape {m.shape}")
        return m.applyfunc(_exact)

    def scalar(self, k):
        try:
            value = sp.sympify(k)
        except sp.SympifyError as exc:
            raise InvalidArgumentError(f"Expected a scalar, got {k!r}") from exc
        if not isinstance(value, sp.Expr):
            raise InvalidArgumentError(f"Expected a scalar, got {k!r}")
        return _exact(value)

    def simplify(self, value):
        if not cfg.SIMPLIFY_SYMBOLIC:
            return value
        if isinstance(value, sp.MatrixBase):
            return value.applyfunc(sp.simplify)
        return sp.simplify(value)

    def evaluate(self, a) -> np.ndarray:
        try:
            return np.array([float(v) for v in a], dtype=float)
        except TypeError as exc:
            names = sorted(str(s) for s in a.free_symbols)
            raise UndefinedSymbolicPreconditionError(
                f"Cannot evaluate {list(a)} numerically; unresolved symbols: {names}"
            ) from exc

    def substitute(self, a, mapping):
        return a.subs(mapping)

    def time_symbol(self, a):
        """The single free symbol of ``a``, or None when it has none."""
        symbols = a.free_symbols
        if len(symbols) > 1:
            names = sorted(str(s) for s in symbols)
            raise UndefinedSymbolicPreconditionError(
                f"Expected a single time variable, found {names}; pass it explicitly"
            )
        return next(iter(symbols), None)

    def diff(self, a, t):
        return self.simplify(a.diff(t))

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------
    def dot(self, a, b):
        return self.simplify(a.dot(b))

    def cross(self, a, b):
        return a.cross(b)

    def norm(self, a):
        return self.simplify(sp.sqrt(a.dot(a)))

    def outer(self, a, b):
        return a * b.T

    def matmul(self, m, a):
        return m * a

    def divide(self, a, k):
        if holds(self.zero(k)):
            raise DivisionByZeroError(f"Cannot divide a Vector by {k}, which is identically zero.")
        return a / k

    def solve(self, m, a):
        if holds(self.zero(m.det())):
            raise SingularMatrixError("Cannot divide a Vector by a singular matrix.")
        try:
            return self.simplify(m.LUsolve(a))
        except ValueError as exc:
            raise SingularMatrixError("Cannot divide a Vector by a singular matrix.") from exc

    def eye(self):
        return sp.ImmutableMatrix.eye(3)

    def cos(self, angle):
        return sp.cos(angle)

    def sin(self, angle):
        return sp.sin(angle)

    def sign(self, value):
        return sp.sign(value)

    def acos(self, ratio):
        return self.simplify(sp.acos(ratio))

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def zero(self, value) -> Truth:
        return Truth.of(sp.simplify(sp.sympify(value)).is_zero)

    def equal(self, a, b) -> Truth:
        return Truth.all(self.zero(d) for d in (a - b))

    def unitary(self, a) -> Truth:
        return self.zero(a.dot(a) - 1)

    def perpendicular(self, a, b) -> Truth:
        return self.zero(a.dot(b))


NUMERIC = NumericLayer()
SYMBOLIC = SymbolicLayer()


def layer_for(*values):
    """Symbolic layer if any operand is symbolic, numeric layer otherwise."""
    if any(is_symbolic(v) for v in values):
        return SYMBOLIC
    return NUMERIC
