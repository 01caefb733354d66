"""
Error kinds raised by the vector core.

Each error also derives from the builtin exception a caller would already
catch for the same mistake, so ``except ZeroDivisionError`` keeps working
around ``Vector.direction`` and ``except ValueError`` around malformed
component data.
"""


class VectorError(Exception):
    """Base class for every error raised by the vector core."""


class InvalidArgumentError(VectorError, TypeError):
    """Wrong constructor arity or argument kind."""


class DimensionMismatchError(VectorError, ValueError):
    """Component or matrix data not convertible to the required shape."""


class DivisionByZeroError(VectorError, ZeroDivisionError):
    """Division by a zero scalar, or normalisation of the null vector."""


class SingularMatrixError(DivisionByZeroError):
    """Division by a matrix that cannot be inverted."""


class UndefinedSymbolicPreconditionError(VectorError, ValueError):
    """Symbolic operation called on data that does not meet its preconditions."""
