"""pymatrix error kinds.

Every error derives from ``MatrixError`` and from the closest builtin
exception, so callers may catch either.
"""


class MatrixError(Exception):
    """Base class for all pymatrix errors."""


class OutOfRange(MatrixError, IndexError):
    """An index lies outside ``[0, dimension)``."""


class ShapeMismatch(MatrixError, ValueError):
    """A sequence does not have the expected row/column/diagonal length."""


class DimensionMismatch(MatrixError, ValueError):
    """Two matrices have incompatible shapes for an operation."""


class UnsupportedType(MatrixError, TypeError):
    """The element type lacks a capability, or a value cannot be converted."""


class EmptyMatrix(MatrixError, ValueError):
    """A statistic was requested over an empty selection."""


class DivideByZero(MatrixError, ZeroDivisionError):
    """Element-wise division by zero on a non-IEEE element type."""
