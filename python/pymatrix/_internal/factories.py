from __future__ import annotations

from typing import Any

import numpy as np

from .coercion import flatten as _flatten
from .coercion import is_rectangular
from .dtypes import convert_value, infer_dtype, require_dtype
from .errors import UnsupportedType
from .matrix_api import Matrix
from .storage import Storage


def _shape(rows: Any, cols: Any) -> tuple[int, int]:
    # Reuse the constructor's dimension checks.
    return Matrix(rows, cols, dtype="bool").shape


def full(rows: Any, cols: Any, value: Any, dtype: Any = None) -> Matrix:
    """rows x cols matrix with every cell set to ``value``.

    The element type is inferred from ``value`` when ``dtype`` is omitted.
    """
    token = require_dtype(dtype) if dtype is not None else infer_dtype([value])
    r, c = _shape(rows, cols)
    return Matrix._from_storage(Storage(r, c, token, fill=convert_value(value, token)))


def zeros(rows: Any, cols: Any, dtype: Any = "int64") -> Matrix:
    token = require_dtype(dtype)
    if token == "str":
        raise UnsupportedType("zeros() has no str counterpart; use full(rows, cols, '')")
    return full(rows, cols, 0, token)


def ones(rows: Any, cols: Any, dtype: Any = "int64") -> Matrix:
    token = require_dtype(dtype)
    if token == "str":
        raise UnsupportedType("ones() has no str counterpart; use full(rows, cols, value)")
    return full(rows, cols, 1, token)


def identity(n: Any, dtype: Any = "int64") -> Matrix:
    """n x n matrix with ones on the diagonal and zeros elsewhere."""
    out = zeros(n, n, dtype)
    out.set_diag([1] * out.n_rows)
    return out


def randint(rows: Any, cols: Any, low: int, high: int, seed: Any = None) -> Matrix:
    """Uniform random integers in ``[low, high]`` (both ends inclusive).

    ``seed`` is passed to :func:`numpy.random.default_rng`, so equal seeds give
    equal matrices.
    """
    r, c = _shape(rows, cols)
    if low > high:
        raise ValueError(f"randint requires low <= high, got low={low}, high={high}")
    rng = np.random.default_rng(seed)
    values = rng.integers(low, high, size=(r, c), endpoint=True, dtype=np.int64)
    return Matrix._from_storage(Storage.from_buffer(values.reshape(-1), r, c, "int64"))


def is_matrix(nested: Any) -> bool:
    """True when ``nested`` is a nested sequence whose rows all have one length."""
    return is_rectangular(nested)


def flatten(nested: Any) -> list[Any]:
    """Row-major concatenation of the rows of ``nested``."""
    return _flatten(nested)
