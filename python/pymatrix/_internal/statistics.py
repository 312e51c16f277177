from __future__ import annotations

import functools
import math
import operator
from typing import Any, Callable

import numpy as np

from .dtypes import OBJECT_STORAGE_DTYPES, new_buffer, result_token, to_python
from .errors import EmptyMatrix, UnsupportedType
from .storage import Storage
from .validation import (
    check_expected_id,
    check_valid_col_id,
    check_valid_row_id,
    check_valid_type,
)

# Capability each reduction needs from the element type.
REQUIREMENTS: dict[str, str] = {
    "sum": "summable",
    "mean": "numeric",
    "variance": "numeric",
    "std": "numeric",
    "min": "ordered",
    "max": "ordered",
    "median": "ordered",
}


def select(
    storage: Storage,
    *,
    row: int | None = None,
    column: int | None = None,
    diagonal: bool = False,
) -> np.ndarray:
    """Return the cells a reduction runs over as a flat array (no copy where possible)."""
    chosen = sum(x is not None for x in (row, column)) + bool(diagonal)
    if chosen > 1:
        raise ValueError("select at most one of row=, column=, diagonal=")
    if row is not None:
        i = check_valid_row_id(storage.rows, row)
        return storage.grid()[i, :]
    if column is not None:
        j = check_valid_col_id(storage.cols, column)
        return storage.grid()[:, j]
    if diagonal:
        return np.diagonal(storage.grid())
    return storage.buffer


def _sum(values: np.ndarray, dtype: str, ddof: int) -> Any:
    if dtype in OBJECT_STORAGE_DTYPES:
        try:
            return functools.reduce(operator.add, values.tolist())
        except TypeError as exc:
            raise UnsupportedType(str(exc)) from exc
    if values.dtype.kind in "iu":
        total = sum(values.tolist())
        info = np.iinfo(np.sum(values[:0]).dtype)
        if total < info.min or total > info.max:
            raise UnsupportedType(f"integer overflow in sum: {total} does not fit in {info.dtype}")
        return total
    return to_python(np.sum(values))


def _mean(values: np.ndarray, dtype: str, ddof: int) -> float:
    return float(np.mean(values, dtype=np.float64))


def _variance(values: np.ndarray, dtype: str, ddof: int) -> float:
    n = values.shape[0]
    if n - ddof <= 0:
        raise EmptyMatrix(f"variance with ddof={ddof} needs more than {ddof} value(s), got {n}")
    return float(np.var(values, ddof=ddof, dtype=np.float64))


def _std(values: np.ndarray, dtype: str, ddof: int) -> float:
    return math.sqrt(_variance(values, dtype, ddof))


def _ordered(fn: Callable[..., Any], np_fn: Callable[..., Any]) -> Callable[..., Any]:
    def reduce(values: np.ndarray, dtype: str, ddof: int) -> Any:
        if dtype in OBJECT_STORAGE_DTYPES:
            try:
                return fn(values.tolist())
            except TypeError as exc:
                raise UnsupportedType(str(exc)) from exc
        return to_python(np_fn(values))

    return reduce


def _lower_median(items: list[Any]) -> Any:
    ordered = sorted(items)
    return ordered[(len(ordered) - 1) // 2]


def _median_numeric(values: np.ndarray) -> Any:
    ordered = np.sort(values)
    return ordered[(ordered.shape[0] - 1) // 2]


REDUCERS: dict[str, Callable[[np.ndarray, str, int], Any]] = {
    "sum": _sum,
    "mean": _mean,
    "variance": _variance,
    "std": _std,
    "min": _ordered(min, np.min),
    "max": _ordered(max, np.max),
    "median": _ordered(_lower_median, _median_numeric),
}


def _result_dtype(name: str, storage: Storage, results: list[Any]) -> str:
    if name in ("mean", "variance", "std"):
        return "float64"
    if storage.dtype in OBJECT_STORAGE_DTYPES:
        if name == "sum" and storage.dtype == "str":
            return "str"
        return storage.dtype
    if name == "sum":
        return result_token(np.asarray(results).dtype)
    return storage.dtype


def reduce(
    storage: Storage,
    name: str,
    *,
    axis: int | None = None,
    row: int | None = None,
    column: int | None = None,
    diagonal: bool = False,
    ddof: int = 0,
) -> Any:
    """Run reduction ``name`` over a selection of ``storage``.

    ``axis=0`` reduces every row (result is a rows x 1 Storage), ``axis=1``
    every column (1 x cols). Without ``axis`` the result is a scalar.
    """
    try:
        reducer = REDUCERS[name]
    except KeyError:
        raise ValueError(f"unknown reduction: {name!r}") from None

    check_valid_type(storage.dtype, REQUIREMENTS[name])
    if axis is not None:
        axis = check_expected_id(axis, 0, 2)
        if row is not None or column is not None or diagonal:
            raise ValueError("axis= cannot be combined with row=, column= or diagonal=")

    if len(storage) == 0:
        raise EmptyMatrix(f"{name} of an empty matrix")

    if axis is None:
        values = select(storage, row=row, column=column, diagonal=diagonal)
        if values.shape[0] == 0:
            raise EmptyMatrix(f"{name} of an empty selection")
        return reducer(values, storage.dtype, ddof)

    grid = storage.grid()
    if axis == 0:
        results = [reducer(grid[i, :], storage.dtype, ddof) for i in range(storage.rows)]
        rows, cols = storage.rows, 1
    else:
        results = [reducer(grid[:, j], storage.dtype, ddof) for j in range(storage.cols)]
        rows, cols = 1, storage.cols
    token = _result_dtype(name, storage, results)
    return Storage.from_buffer(new_buffer(results, token), rows, cols, token)
