from __future__ import annotations

import numbers
from typing import Any, Callable

import numpy as np

from .dtypes import (
    COMPLEX_DTYPES,
    FLOAT_DTYPES,
    OBJECT_STORAGE_DTYPES,
    result_token,
    storage_dtype,
    to_python,
)
from .errors import DimensionMismatch, DivideByZero, UnsupportedType
from .storage import Storage
from .validation import check_dim, check_valid_type

ARITHMETIC_UFUNCS: dict[str, Callable[..., Any]] = {
    "add": np.add,
    "sub": np.subtract,
    "mul": np.multiply,
    "truediv": np.true_divide,
    "floordiv": np.floor_divide,
}

COMPARISON_UFUNCS: dict[str, Callable[..., Any]] = {
    "eq": np.equal,
    "ne": np.not_equal,
    "lt": np.less,
    "le": np.less_equal,
    "gt": np.greater,
    "ge": np.greater_equal,
}

_DIVISIONS = ("truediv", "floordiv")


def _ieee(dtype: str) -> bool:
    return dtype in FLOAT_DTYPES or dtype in COMPLEX_DTYPES


def _scalar_token(value: Any) -> str:
    if isinstance(value, (bool, np.bool_)):
        return "bool"
    if isinstance(value, (float, np.floating)):
        return "float64"
    if isinstance(value, (complex, np.complexfloating)):
        return "complex128"
    if isinstance(value, (numbers.Integral, np.integer)):
        return "int64"
    if isinstance(value, (str, np.str_)):
        return "str"
    return "object"


def _check_arithmetic(op: str, dtype: str) -> None:
    if dtype == "str" and op == "add":
        return
    if dtype == "str":
        raise UnsupportedType(f"element type str supports only + (concatenation), not {op}")
    check_valid_type(dtype, "arithmetic")


def _check_scalar(op: str, dtype: str, value: Any) -> None:
    """The scalar operand must fit the element-type family of the matrix."""
    if dtype == "object":
        return
    if dtype == "str":
        if not isinstance(value, (str, np.str_)):
            raise UnsupportedType(f"cannot combine str elements with {type(value).__name__}")
        return
    if not isinstance(value, numbers.Number):
        raise UnsupportedType(
            f"cannot combine {dtype} elements with {type(value).__name__} value {value!r}"
        )


def _operand(value: Any, dtype: str) -> Any:
    if dtype in OBJECT_STORAGE_DTYPES:
        return np.array(value, dtype=object)
    return to_python(value)


def _combined_token(left: str, right: str, out: np.ndarray) -> str:
    if left == "str" and right == "str":
        return "str"
    if "object" in (left, right) or out.dtype == np.dtype(object):
        return "object"
    return result_token(out.dtype)


def _check_divisor(divisor: Any, divisor_dtype: str, other_dtype: str) -> None:
    if _ieee(divisor_dtype) or _ieee(other_dtype):
        return
    if divisor_dtype in OBJECT_STORAGE_DTYPES:
        # Checked while computing.
        return
    if np.any(np.asarray(divisor) == 0):
        raise DivideByZero("integer division by zero")


def _compute(ufunc: Callable[..., Any], a: Any, b: Any, *, ieee: bool) -> np.ndarray:
    try:
        if ieee:
            with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
                return np.asarray(ufunc(a, b))
        return np.asarray(ufunc(a, b))
    except ZeroDivisionError as exc:
        raise DivideByZero(str(exc) or "division by zero") from exc
    except OverflowError as exc:
        raise UnsupportedType(str(exc)) from exc
    except TypeError as exc:
        raise UnsupportedType(str(exc)) from exc


def _exact(value: Any) -> np.ndarray:
    return np.asarray(value, dtype=object)


def _check_integer_result(out: np.ndarray, exact: Callable[[], Any], what: str) -> None:
    """Integer results must equal the same computation on Python ints."""
    if out.dtype.kind not in "iu" or out.size == 0:
        return
    info = np.iinfo(out.dtype)
    values = _exact(exact()).ravel().tolist()
    if min(values) < info.min or max(values) > info.max:
        raise UnsupportedType(f"integer overflow in {what}: result does not fit in {out.dtype.name}")


def elementwise(op: str, left: Storage, right: Storage) -> Storage:
    """Combine two same-shape matrices position by position."""
    ufunc = ARITHMETIC_UFUNCS[op]
    check_dim(left.shape, right.shape)
    _check_arithmetic(op, left.dtype)
    _check_arithmetic(op, right.dtype)
    if op == "add" and "str" in (left.dtype, right.dtype) and left.dtype != right.dtype:
        if "object" not in (left.dtype, right.dtype):
            raise UnsupportedType(f"cannot add {left.dtype} and {right.dtype} elements")
    if op in _DIVISIONS:
        _check_divisor(right.buffer, right.dtype, left.dtype)
    out = _compute(
        ufunc, left.buffer, right.buffer, ieee=_ieee(left.dtype) or _ieee(right.dtype)
    )
    _check_integer_result(out, lambda: ufunc(_exact(left.buffer), _exact(right.buffer)), op)
    token = _combined_token(left.dtype, right.dtype, out)
    return Storage.from_buffer(out.reshape(-1), left.rows, left.cols, token)


def scalar(op: str, storage: Storage, value: Any, *, reflected: bool = False) -> Storage:
    """Broadcast ``value`` over every cell; ``reflected`` puts the scalar on the left."""
    ufunc = ARITHMETIC_UFUNCS[op]
    _check_arithmetic(op, storage.dtype)
    _check_scalar(op, storage.dtype, value)
    value_token = _scalar_token(value)
    operand = _operand(value, storage.dtype)
    if op in _DIVISIONS:
        if reflected:
            _check_divisor(storage.buffer, storage.dtype, value_token)
        else:
            _check_divisor(operand, value_token, storage.dtype)
    ieee = _ieee(storage.dtype) or _ieee(value_token)
    if reflected:
        out = _compute(ufunc, operand, storage.buffer, ieee=ieee)
        _check_integer_result(out, lambda: ufunc(_exact(operand), _exact(storage.buffer)), op)
    else:
        out = _compute(ufunc, storage.buffer, operand, ieee=ieee)
        _check_integer_result(out, lambda: ufunc(_exact(storage.buffer), _exact(operand)), op)
    if storage.dtype in OBJECT_STORAGE_DTYPES:
        token = storage.dtype
    else:
        token = _combined_token(storage.dtype, value_token, out)
    return Storage.from_buffer(out.reshape(-1), storage.rows, storage.cols, token)


def inplace(op: str, receiver: Storage, other: Any) -> None:
    """Apply ``op`` and store the result back into ``receiver``.

    The element type of the receiver is kept; results that cannot be cast to
    it under ``same_kind`` rules are rejected before anything is written.
    """
    if isinstance(other, Storage):
        result = elementwise(op, receiver, other)
    else:
        result = scalar(op, receiver, other)
    store_back(op, receiver, result)


def store_back(op: str, receiver: Storage, result: Storage) -> None:
    """Install ``result`` into ``receiver`` keeping the receiver's element type."""
    target = storage_dtype(receiver.dtype)
    if receiver.dtype in OBJECT_STORAGE_DTYPES:
        if receiver.dtype == "str" and result.dtype != "str":
            raise UnsupportedType(f"result of {op} cannot be stored as str")
        buffer = result.buffer.astype(object, copy=False)
    else:
        if result.dtype in OBJECT_STORAGE_DTYPES or not np.can_cast(
            result.buffer.dtype, target, casting="same_kind"
        ):
            raise UnsupportedType(
                f"result of {op} has element type {result.dtype}, "
                f"which cannot be stored in a {receiver.dtype} matrix"
            )
        buffer = result.buffer.astype(target, copy=False)
    receiver.replace(buffer, result.rows, result.cols)


def compare(op: str, left: Storage, right: Any) -> Storage:
    """Element-wise comparison; returns a bool matrix."""
    ufunc = COMPARISON_UFUNCS[op]
    ordering = op not in ("eq", "ne")
    if ordering:
        check_valid_type(left.dtype, "ordered")
    if isinstance(right, Storage):
        check_dim(left.shape, right.shape)
        if ordering:
            check_valid_type(right.dtype, "ordered")
        operand: Any = right.buffer
    else:
        operand = _operand(right, left.dtype)
    out = _compute(ufunc, left.buffer, operand, ieee=True)
    return Storage.from_buffer(out.astype(bool).reshape(-1), left.rows, left.cols, "bool")


def equal(left: Storage, right: Storage) -> bool:
    check_dim(left.shape, right.shape)
    if len(left) == 0:
        return True
    out = _compute(np.equal, left.buffer, right.buffer, ieee=True)
    return bool(np.all(out))


def unary(op: str, storage: Storage) -> Storage:
    if op == "pos":
        return storage.copy()
    check_valid_type(storage.dtype, "arithmetic")
    fn = {"neg": np.negative, "abs": np.absolute}[op]
    try:
        out = np.asarray(fn(storage.buffer))
    except TypeError as exc:
        raise UnsupportedType(str(exc)) from exc
    _check_integer_result(out, lambda: fn(_exact(storage.buffer)), op)
    token = storage.dtype if storage.dtype == "object" else result_token(out.dtype)
    return Storage.from_buffer(out.reshape(-1), storage.rows, storage.cols, token)


def matmul(left: Storage, right: Storage) -> Storage:
    """Matrix product; inner dimensions must agree."""
    if left.cols != right.rows:
        raise DimensionMismatch(
            f"matmul dimension mismatch: ({left.rows}, {left.cols}) @ ({right.rows}, {right.cols})"
        )
    check_valid_type(left.dtype, "arithmetic")
    check_valid_type(right.dtype, "arithmetic")
    rows, cols = left.rows, right.cols
    if rows == 0 or cols == 0:
        return Storage(rows, cols, _product_token(left, right))
    try:
        out = np.matmul(left.grid(), right.grid())
    except TypeError as exc:
        raise UnsupportedType(str(exc)) from exc
    _check_integer_result(out, lambda: np.matmul(_exact(left.grid()), _exact(right.grid())), "matmul")
    token = _combined_token(left.dtype, right.dtype, out)
    return Storage.from_buffer(np.ascontiguousarray(out).reshape(-1), rows, cols, token)


def _product_token(left: Storage, right: Storage) -> str:
    if "object" in (left.dtype, right.dtype):
        return "object"
    return result_token(np.result_type(left.buffer.dtype, right.buffer.dtype))


def identity_like(storage: Storage) -> Storage:
    n = storage.rows
    out = Storage(n, n, storage.dtype, fill=0 if storage.dtype == "object" else None)
    for i in range(n):
        out.set(i, i, 1)
    return out


def matrix_power(storage: Storage, k: int) -> Storage:
    if storage.rows != storage.cols:
        raise DimensionMismatch(
            f"matrix_power requires a square matrix, got ({storage.rows}, {storage.cols})"
        )
    if isinstance(k, bool) or not isinstance(k, (numbers.Integral, np.integer)):
        raise TypeError("matrix_power exponent must be an integer")
    k = int(k)
    if k < 0:
        raise ValueError("matrix_power exponent must be non-negative")
    check_valid_type(storage.dtype, "arithmetic")

    result = identity_like(storage)
    base = storage.copy()
    while k:
        if k & 1:
            result = matmul(result, base)
        k >>= 1
        if k:
            base = matmul(base, base)
    return result
