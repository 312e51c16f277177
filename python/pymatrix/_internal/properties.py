"""Structural predicates over a matrix payload.

Each predicate inspects values only; nothing is cached and nothing is
mutated. Non-square matrices are never diagonal, identity, symmetric or
triangular. The 0x0 matrix is all of them.
"""
from __future__ import annotations

from typing import Any, Callable

import numpy as np

from .dtypes import zero_value
from .storage import Storage


def _zero(storage: Storage) -> Any:
    return 0 if storage.dtype == "object" else zero_value(storage.dtype)


def _square_grid(storage: Storage) -> np.ndarray | None:
    if storage.rows != storage.cols:
        return None
    return storage.grid()


def is_empty(storage: Storage) -> bool:
    return len(storage) == 0


def is_square(storage: Storage) -> bool:
    return storage.rows == storage.cols


def _all_equal(values: np.ndarray, target: Any) -> bool:
    if values.size == 0:
        return True
    return bool(np.all(values == target))


def is_upper_triangular(storage: Storage) -> bool:
    grid = _square_grid(storage)
    if grid is None:
        return False
    below = grid[np.tril_indices(storage.rows, k=-1)]
    return _all_equal(below, _zero(storage))


def is_lower_triangular(storage: Storage) -> bool:
    grid = _square_grid(storage)
    if grid is None:
        return False
    above = grid[np.triu_indices(storage.rows, k=1)]
    return _all_equal(above, _zero(storage))


def is_diagonal(storage: Storage) -> bool:
    return is_upper_triangular(storage) and is_lower_triangular(storage)


def is_identity(storage: Storage) -> bool:
    if not is_diagonal(storage):
        return False
    if storage.dtype == "str":
        return storage.rows == 0
    return _all_equal(np.diagonal(storage.grid()), 1)


def is_symmetric(storage: Storage) -> bool:
    grid = _square_grid(storage)
    if grid is None:
        return False
    if grid.size == 0:
        return True
    return bool(np.all(grid == grid.T))


def as_predicate(value_or_predicate: Any) -> Callable[[Any], bool]:
    if callable(value_or_predicate):
        return value_or_predicate
    return lambda v: v == value_or_predicate


def all_cells(storage: Storage, value_or_predicate: Any) -> bool:
    """True when every cell matches; True for the empty matrix."""
    pred = as_predicate(value_or_predicate)
    return all(bool(pred(storage.get(r, c))) for r in range(storage.rows) for c in range(storage.cols))


def any_cell(storage: Storage, value_or_predicate: Any) -> bool:
    """True when at least one cell matches; False for the empty matrix."""
    pred = as_predicate(value_or_predicate)
    return any(bool(pred(storage.get(r, c))) for r in range(storage.rows) for c in range(storage.cols))
