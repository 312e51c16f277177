"""Dense two-dimensional matrices with validated, exception-safe operations."""
from __future__ import annotations

import logging
from typing import Any

from ._internal import factories as _factories
from ._internal.runtime import runtime as _runtime
from ._internal.dtypes import ALL_DTYPES, normalize_dtype
from ._internal.errors import (
    DimensionMismatch,
    DivideByZero,
    EmptyMatrix,
    MatrixError,
    OutOfRange,
    ShapeMismatch,
    UnsupportedType,
)
from ._internal.matrix_api import Matrix
from ._internal.warnings import PyMatrixDTypeWarning, PyMatrixWarning

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public dtype tokens (NumPy-like). These are plain strings accepted wherever
# a dtype is.
int8 = "int8"
int16 = "int16"
int32 = "int32"
int64 = "int64"
uint8 = "uint8"
uint16 = "uint16"
uint32 = "uint32"
uint64 = "uint64"
float16 = "float16"
float32 = "float32"
float64 = "float64"
complex64 = "complex64"
complex128 = "complex128"
bool_ = "bool"
str_ = "str"
object_ = "object"

zeros = _factories.zeros
ones = _factories.ones
full = _factories.full
identity = _factories.identity
randint = _factories.randint
is_matrix = _factories.is_matrix
flatten = _factories.flatten


def configure(*, edge_items: Any = None, lossy_cast: Any = None) -> None:
    """Change process-wide options.

    ``edge_items`` is the number of rows/columns printed at each edge of a
    large matrix; ``lossy_cast`` is one of ``"warn"``, ``"ignore"`` or
    ``"error"`` and controls what happens when a conversion drops a
    fractional part. Invalid values raise ``ValueError`` and change nothing.
    """
    _runtime.configure(edge_items=edge_items, lossy_cast=lossy_cast)


def get_options() -> dict[str, Any]:
    return _runtime.options()


__all__ = [
    "Matrix",
    "MatrixError",
    "OutOfRange",
    "ShapeMismatch",
    "DimensionMismatch",
    "UnsupportedType",
    "EmptyMatrix",
    "DivideByZero",
    "PyMatrixWarning",
    "PyMatrixDTypeWarning",
    "ALL_DTYPES",
    "normalize_dtype",
    "configure",
    "get_options",
    "zeros",
    "ones",
    "full",
    "identity",
    "randint",
    "is_matrix",
    "flatten",
    "int8",
    "int16",
    "int32",
    "int64",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "float16",
    "float32",
    "float64",
    "complex64",
    "complex128",
    "bool_",
    "str_",
    "object_",
]
