from __future__ import annotations

from typing import Any

import numpy as np

_BINARY = {
    np.add: "__add__",
    np.subtract: "__sub__",
    np.multiply: "__mul__",
    np.true_divide: "__truediv__",
    np.floor_divide: "__floordiv__",
    np.matmul: "__matmul__",
}

_REFLECTED = {
    np.add: "__radd__",
    np.subtract: "__rsub__",
    np.multiply: "__rmul__",
    np.true_divide: "__rtruediv__",
    np.floor_divide: "__rfloordiv__",
    np.matmul: "__rmatmul__",
}


def _array(self: Any, dtype: Any = None, copy: Any = None) -> np.ndarray:
    """NumPy array protocol: always a fresh 2D array, never a view of the buffer."""
    if copy is False:
        raise ValueError("a Matrix cannot be exposed without copying; use copy=None or copy=True")
    out = self._storage.grid().copy()
    if dtype is not None:
        out = out.astype(dtype)
    return out


def _array_ufunc(self: Any, ufunc: Any, method: str, *inputs: Any, **kwargs: Any) -> Any:
    """
    NumPy ufunc protocol implementation for pymatrix matrices.
    Routes np.add(A, B) and friends through the Matrix operators so shape and
    type checks still apply. Anything else is declined.
    """
    if method != "__call__" or kwargs:
        return NotImplemented

    if len(inputs) == 1 and inputs[0] is self:
        if ufunc == np.negative:
            return -self
        if ufunc == np.positive:
            return +self
        if ufunc == np.absolute:
            return abs(self)
        return NotImplemented

    if len(inputs) == 2:
        left, right = inputs
        if left is self and ufunc in _BINARY:
            return getattr(self, _BINARY[ufunc])(right)
        if right is self and ufunc in _REFLECTED:
            return getattr(self, _REFLECTED[ufunc])(left)

    return NotImplemented


def patch_interop(cls: Any) -> None:
    """Patch __array__ and __array_ufunc__ onto the given class."""
    cls.__array__ = _array
    cls.__array_ufunc__ = _array_ufunc
