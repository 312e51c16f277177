from __future__ import annotations

from collections.abc import Sequence as _SequenceABC
from typing import Any

import numpy as np

from .errors import ShapeMismatch, UnsupportedType


def is_sequence_like(value: Any) -> bool:
    return isinstance(value, _SequenceABC) and not isinstance(value, (str, bytes, bytearray))


def is_rectangular(candidate: Any) -> bool:
    """True when ``candidate`` is a nested sequence whose rows share one length."""
    if not is_sequence_like(candidate):
        return False
    lengths = set()
    for row in candidate:
        if not is_sequence_like(row):
            return False
        lengths.add(len(row))
    return len(lengths) <= 1


def coerce_sequence_rows(candidate: Any) -> tuple[int, int, list[Any]]:
    """Validate a nested-sequence literal.

    Returns ``(rows, cols, flat)`` with ``flat`` in row-major order. A literal
    with no rows, or whose rows are all empty, describes the 0x0 matrix.
    """
    if not is_sequence_like(candidate):
        raise UnsupportedType(
            "Matrix data must be provided as a nested sequence or a 2D NumPy array."
        )
    rows = list(candidate)
    if not rows:
        return 0, 0, []
    cols: int | None = None
    flat: list[Any] = []
    for index, row in enumerate(rows):
        if not is_sequence_like(row):
            raise UnsupportedType("Each matrix row must be a sequence of entries.")
        if cols is None:
            cols = len(row)
        elif len(row) != cols:
            raise ShapeMismatch(
                f"row {index} has {len(row)} entries, expected {cols} (rows must have equal length)"
            )
        flat.extend(row)
    if not cols:
        return 0, 0, []
    return len(rows), cols, flat


def coerce_ndarray(array: np.ndarray) -> tuple[int, int, np.ndarray]:
    """Shape and a flat row-major copy of a 2D array."""
    if array.ndim != 2:
        raise ShapeMismatch(f"Matrix input must be 2D, got a {array.ndim}D array.")
    r, c = (int(x) for x in array.shape)
    if r == 0 or c == 0:
        return 0, 0, array.reshape(0).copy()
    return r, c, np.array(array, order="C").reshape(-1)


def flatten(nested: Any) -> list[Any]:
    """Row-major flattening of a nested sequence (rows may differ in length)."""
    if not is_sequence_like(nested):
        raise UnsupportedType("flatten expects a nested sequence")
    out: list[Any] = []
    for row in nested:
        if not is_sequence_like(row):
            raise UnsupportedType("flatten expects every row to be a sequence")
        out.extend(row)
    return out
