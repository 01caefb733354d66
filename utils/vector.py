"""
Vector arithmetic for numeric and symbolic mechanics.

This module defines an immutable-like ``Vector`` class for three-dimensional
vectors whose components are either plain floats or sympy expressions.
Components are always stored relative to the canonical orthonormal basis;
a basis passed to the constructor or to a query only changes how the
components are read in or out. Every operation returns a new ``Vector``.

Numeric vectors compare with a tolerance scaled to the float spacing of
their components. Symbolic vectors compare by simplification, and any
comparison sympy cannot settle is reported as ``False``.

Examples
--------
>>> import sympy as sp
>>> from utils.vector import Vector
>>> v = Vector(1, 2, 3)
>>> w = Vector(4, -1, 0.5)
>>> v + w
Vector(5.0000, 1.0000, 3.5000)
>>> v.dot(w)
3.5
>>> t = sp.Symbol("t")
>>> r = Vector(sp.cos(t), sp.sin(t), 0)
>>> r.dt()
Vector(-sin(t), cos(t), 0)
>>> r.subs(t, 0)
Vector(1.0000, 0.0000, 0.0000)
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Protocol, runtime_checkable

import numpy as np
import sympy as sp

from utils.errors import DivisionByZeroError, InvalidArgumentError, UndefinedSymbolicPreconditionError
from utils.layers import holds, is_matrix, layer_for

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class BasisLike(Protocol):
    """Anything exposing the transform matrix of an orthonormal basis.

    ``matrix()`` returns the basis vectors as columns of canonical
    components; ``matrix(target)`` maps components in this basis to
    components in ``target``.
    """

    def matrix(self, target=None): ...


def _is_basis(value) -> bool:
    return isinstance(value, BasisLike) and not isinstance(value, (Vector, sp.MatrixBase, np.ndarray))


def _bindings(variables, values) -> dict:
    """Normalise the arguments of ``Vector.subs`` into a substitution dict."""
    if values is None:
        if not isinstance(variables, dict):
            raise InvalidArgumentError("subs() needs values unless variables is a mapping")
        return dict(variables)
    if isinstance(variables, (list, tuple)):
        values = list(values)
        if len(values) != len(variables):
            raise InvalidArgumentError(
                f"subs() got {len(variables)} variables but {len(values)} values"
            )
        return dict(zip(variables, values))
    return {variables: values}


class Vector:
    """A three-dimensional vector with numeric or symbolic components.

    Parameters
    ----------
    *args
        Nothing (null vector), a ``Vector``, a 3-element sequence, or three
        scalars ``x, y, z``; optionally followed by a basis, in which case
        the components are taken relative to that basis.

    Notes
    -----
    * Numeric components are held as a float ``numpy.ndarray``; as soon as
      any input is a sympy object the whole vector is symbolic and held as a
      simplified ``sympy.ImmutableMatrix``.
    * Instances are effectively immutable and unhashable (equality is
      tolerance based).
    """

    __slots__ = ("_c", "_layer")

    # numpy defers to __rmul__ / __rmatmul__ instead of broadcasting over us
    __array_ufunc__ = None
    __hash__ = None

    def __init__(self, *args) -> None:
        basis = None
        if args and _is_basis(args[-1]):
            basis, args = args[-1], args[:-1]

        if len(args) == 0:
            if basis is not None:
                raise InvalidArgumentError("A basis alone does not define a Vector")
            data = np.zeros(3)
        elif len(args) == 1:
            data = args[0]._c if isinstance(args[0], Vector) else args[0]
        elif len(args) == 3:
            if any(isinstance(a, Vector) or _is_basis(a) for a in args):
                raise InvalidArgumentError("Vector(x, y, z) expects three scalars")
            data = list(args)
        else:
            given = len(args) + (basis is not None)
            raise InvalidArgumentError(f"Wrong number of arguments in Vector: {given}")

        if basis is not None:
            m = basis.matrix()
            layer = layer_for(data, m)
            data = layer.matmul(layer.matrix(m), layer.column(data))
        self._assign(data)

    @classmethod
    def _wrap(cls, data) -> "Vector":
        vector = cls.__new__(cls)
        vector._assign(data)
        return vector

    def _assign(self, data) -> None:
        layer = layer_for(data)
        self._layer = layer
        self._c = layer.simplify(layer.column(data))

    def _pair(self, other: "Vector"):
        if not isinstance(other, Vector):
            raise InvalidArgumentError(f"Expected a Vector, got {type(other).__name__}")
        layer = layer_for(self._c, other._c)
        return layer, layer.column(self._c), layer.column(other._c)

    @property
    def c(self):
        """Canonical components: float array of shape (3,) or sympy (3, 1) matrix."""
        if self._layer.symbolic:
            return self._c
        return self._c.copy()

    @property
    def is_symbolic(self) -> bool:
        return self._layer.symbolic

    # ------------------------------------------------------------------
    # Basic arithmetic operations
    # ------------------------------------------------------------------
    def add(self, other: "Vector") -> "Vector":
        """Vector addition (elementwise)."""
        _, a, b = self._pair(other)
        return Vector._wrap(a + b)

    def sub(self, other: "Vector") -> "Vector":
        """Vector subtraction (elementwise)."""
        _, a, b = self._pair(other)
        return Vector._wrap(a - b)

    def scale(self, k, left: bool = False) -> "Vector":
        """Multiply by a scalar or a 3x3 matrix.

        With ``left=False`` the components act as a row, so a matrix ``K``
        gives ``Kᵀ c``; with ``left=True`` the result is ``K c``. Scalars
        commute, so ``left`` only matters for matrices.
        """
        layer = layer_for(self._c, k)
        c = layer.column(self._c)
        if is_matrix(k):
            m = layer.matrix(k)
            return Vector._wrap(layer.matmul(m if left else m.T, c))
        return Vector._wrap(c * layer.scalar(k))

    def divide(self, k, left: bool = False) -> "Vector":
        """Divide by a scalar or an invertible 3x3 matrix.

        Mirrors ``scale``: with ``left=False`` the result is ``c K⁻¹`` read as
        a row, with ``left=True`` it is ``K⁻¹ c``.
        """
        layer = layer_for(self._c, k)
        c = layer.column(self._c)
        if is_matrix(k):
            m = layer.matrix(k)
            return Vector._wrap(layer.solve(m if left else m.T, c))
        return Vector._wrap(layer.divide(c, layer.scalar(k)))

    def __add__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, k):
        """Multiplication by a scalar or matrix from the right."""
        if isinstance(k, Vector):
            return NotImplemented
        return self.scale(k)

    def __rmul__(self, k):
        """Multiplication by a scalar or matrix from the left."""
        if isinstance(k, Vector):
            return NotImplemented
        return self.scale(k, left=True)

    def __matmul__(self, k):
        return self.__mul__(k)

    def __rmatmul__(self, k):
        return self.__rmul__(k)

    def __truediv__(self, k):
        if isinstance(k, Vector):
            return NotImplemented
        return self.divide(k)

    def __neg__(self) -> "Vector":
        """Additive inverse of the vector."""
        return Vector._wrap(-self._c)

    def __pos__(self) -> "Vector":
        return self

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------
    def equals(self, other: "Vector") -> bool:
        """Tolerance-aware equality; undecidable symbolic cases are False."""
        layer, a, b = self._pair(other)
        return holds(layer.equal(a, b))

    def __eq__(self, other: object):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.equals(other)

    def __ne__(self, other: object):
        if not isinstance(other, Vector):
            return NotImplemented
        return not self.equals(other)

    def is_unitary(self) -> bool:
        return holds(self._layer.unitary(self._c))

    def is_perpendicular(self, other: "Vector") -> bool:
        layer, a, b = self._pair(other)
        return holds(layer.perpendicular(a, b))

    def is_parallel(self, other: "Vector") -> bool:
        return self.cross(other) == Vector()

    # ------------------------------------------------------------------
    # Geometric operations
    # ------------------------------------------------------------------
    def dot(self, other: "Vector"):
        """Dot product with another vector."""
        layer, a, b = self._pair(other)
        return layer.dot(a, b)

    def cross(self, other: "Vector") -> "Vector":
        """Cross product with another vector."""
        layer, a, b = self._pair(other)
        return Vector._wrap(layer.cross(a, b))

    def tensor_product(self, other: "Vector"):
        """Outer product ``a ⊗ b`` as a ``physics.tensor.Tensor``."""
        from physics.tensor import Tensor

        layer, a, b = self._pair(other)
        return Tensor(layer.outer(a, b))

    def norm(self):
        """Euclidean norm (magnitude) of the vector."""
        return self._layer.norm(self._c)

    def magnitude(self):
        return self.norm()

    def direction(self) -> "Vector":
        """Unit vector along this one."""
        layer = self._layer
        n = layer.norm(self._c)
        if holds(layer.zero(n)):
            raise DivisionByZeroError("The null vector has no direction.")
        return Vector._wrap(layer.divide(self._c, n))

    def angle(self, other: "Vector", sense: "Vector" = None):
        """Angle in radians between this vector and another.

        If ``sense`` is given the angle is signed: positive when
        ``self × other`` points along ``sense``, negative when against it,
        and zero when ``sense`` is perpendicular to the rotation axis.
        """
        if sense is not None and not isinstance(sense, Vector):
            raise InvalidArgumentError(f"Expected a Vector as sense, got {type(sense).__name__}")
        layer, a, b = self._pair(other)
        if sense is not None:
            layer = layer_for(a, sense._c)
            a, b = layer.column(a), layer.column(b)
        denominator = layer.norm(a) * layer.norm(b)
        if holds(layer.zero(denominator)):
            raise DivisionByZeroError("The angle with a null vector is undefined.")
        value = layer.acos(layer.dot(a, b) / denominator)
        if sense is not None:
            value = value * layer.sign(layer.dot(layer.cross(a, b), layer.column(sense._c)))
        return layer.simplify(value)

    # ------------------------------------------------------------------
    # Basis-relative queries
    # ------------------------------------------------------------------
    def components(self, basis=None):
        """Components in ``basis`` (canonical basis when omitted)."""
        if basis is None:
            return self.c
        from physics.basis import CANONICAL

        m = CANONICAL.matrix(basis)
        layer = layer_for(self._c, m)
        return layer.simplify(layer.matmul(layer.matrix(m), layer.column(self._c)))

    def x(self, basis=None):
        return self.components(basis)[0]

    def y(self, basis=None):
        return self.components(basis)[1]

    def z(self, basis=None):
        return self.components(basis)[2]

    # ------------------------------------------------------------------
    # Symbolic calculus
    # ------------------------------------------------------------------
    def dt(self, basis=None, t=None) -> "Vector":
        """Time derivative as seen from ``basis`` (canonical when omitted).

        The components in ``basis`` are differentiated with respect to
        ``t`` and the result is read back relative to ``basis``. When ``t``
        is omitted the components must depend on a single free symbol.
        """
        comps = self.components(basis)
        layer = layer_for(comps)
        if not layer.symbolic:
            raise UndefinedSymbolicPreconditionError(
                "dt() needs symbolic components; build the Vector from sympy expressions"
            )
        if t is None:
            t = layer.time_symbol(comps)
        derivative = layer.diff(comps, t) if t is not None else sp.zeros(3, 1)
        if basis is None:
            return Vector._wrap(derivative)
        return Vector(derivative, basis)

    def subs(self, variables, values=None) -> "Vector":
        """Substitute values for symbols and return a purely numeric vector.

        ``variables`` may be a mapping (``values`` omitted), a single symbol
        with a single value, or parallel sequences of symbols and values.
        """
        mapping = _bindings(variables, values)
        layer = self._layer
        LOGGER.debug("Substituting %s into %r", mapping, self)
        return Vector._wrap(layer.evaluate(layer.substitute(self._c, mapping)))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def plot(self, origin: "Vector" = None, ax=None, **style):
        """Draw the vector as an arrow starting at ``origin``."""
        from diagnostics.plots import plot_vector

        return plot_vector(self, origin, ax=ax, **style)

    # ------------------------------------------------------------------
    # Conversion helpers
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """Return the canonical components as a float ``numpy.ndarray``."""
        return self._layer.evaluate(self._c)

    @staticmethod
    def from_numpy(arr: np.ndarray) -> "Vector":
        """Construct a ``Vector`` from a 3-element array or sequence."""
        return Vector(np.asarray(arr, dtype=float))

    def to_list(self) -> List:
        """Return the canonical components as a list ``[x, y, z]``."""
        return list(self)

    def __iter__(self) -> Iterator:
        """Yield the canonical components in order x, y, z."""
        if self._layer.symbolic:
            return iter(list(self._c))
        return iter(self._c.tolist())

    def __repr__(self) -> str:
        x, y, z = self
        if self._layer.symbolic:
            return f"Vector({x}, {y}, {z})"
        return f"Vector({x:.4f}, {y:.4f}, {z:.4f})"
