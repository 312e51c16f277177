"""Bounds, shape and capability checks shared by every matrix operation.

All functions are pure: they take shapes/indices, raise on failure and
return nothing. Callers run them before touching a buffer.
"""
from __future__ import annotations

import numbers
from typing import Any, Sized

import numpy as np

from .dtypes import has_capability
from .errors import DimensionMismatch, OutOfRange, ShapeMismatch, UnsupportedType


def _as_index(n: Any, what: str) -> int:
    if isinstance(n, (bool, np.bool_)) or not isinstance(n, (numbers.Integral, np.integer)):
        raise OutOfRange(f"{what} must be an integer, got {type(n).__name__}")
    return int(n)


def check_valid_row_id(rows: int, i: Any) -> int:
    i = _as_index(i, "row index")
    if not 0 <= i < rows:
        raise OutOfRange(f"row index {i} out of range for {rows} row(s)")
    return i


def check_valid_col_id(cols: int, j: Any) -> int:
    j = _as_index(j, "column index")
    if not 0 <= j < cols:
        raise OutOfRange(f"column index {j} out of range for {cols} column(s)")
    return j


def check_valid_row(cols: int, seq: Sized) -> None:
    if len(seq) != cols:
        raise ShapeMismatch(f"row has {len(seq)} element(s), expected {cols}")


def check_valid_col(rows: int, seq: Sized) -> None:
    if len(seq) != rows:
        raise ShapeMismatch(f"column has {len(seq)} element(s), expected {rows}")


def check_valid_diag(rows: int, cols: int, seq: Sized) -> None:
    expected = min(rows, cols)
    if len(seq) != expected:
        raise ShapeMismatch(f"diagonal has {len(seq)} element(s), expected {expected}")


def check_dim(shape: tuple[int, int], other: tuple[int, int]) -> None:
    if tuple(shape) != tuple(other):
        raise DimensionMismatch(
            f"shape mismatch: ({shape[0]}, {shape[1]}) vs ({other[0]}, {other[1]})"
        )


def check_expected_id(n: Any, lo: int, hi: int | None = None) -> int:
    """``n == lo`` when ``hi`` is None, otherwise ``lo <= n < hi``."""
    n = _as_index(n, "index")
    if hi is None:
        if n != lo:
            raise OutOfRange(f"index {n} is not the expected index {lo}")
    elif not lo <= n < hi:
        raise OutOfRange(f"index {n} out of range [{lo}, {hi})")
    return n


def check_valid_type(dtype: str, capability: str) -> None:
    if not has_capability(dtype, capability):
        raise UnsupportedType(f"element type {dtype} does not support {capability} operations")
