from __future__ import annotations

from typing import Any

import numpy as np

from .dtypes import new_buffer, storage_dtype, to_python, zero_value


class Storage:
    """Row-major buffer plus shape.

    The buffer is a flat NumPy array; element ``(r, c)`` lives at offset
    ``r * cols + c``. ``len(buffer) == rows * cols`` holds after every public
    call. Bounds are not checked here, callers validate first.
    """

    __slots__ = ("_buffer", "_rows", "_cols", "_dtype")

    def __init__(self, rows: int, cols: int, dtype: str, fill: Any = None) -> None:
        if rows < 0 or cols < 0:
            raise ValueError("Storage shape must be non-negative")
        value = zero_value(dtype) if fill is None else fill
        n = rows * cols
        if storage_dtype(dtype) == np.dtype(object):
            buffer = new_buffer([value] * n, dtype)
        else:
            buffer = np.full(n, value, dtype=storage_dtype(dtype))
        self._buffer = buffer
        self._rows = rows
        self._cols = cols
        self._dtype = dtype

    @classmethod
    def from_buffer(cls, buffer: np.ndarray, rows: int, cols: int, dtype: str) -> "Storage":
        """Adopt ``buffer`` without copying it."""
        self = cls.__new__(cls)
        self._buffer = buffer
        self._rows = 0
        self._cols = 0
        self._dtype = dtype
        self.replace(buffer, rows, cols)
        return self

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def dtype(self) -> str:
        return self._dtype

    @property
    def buffer(self) -> np.ndarray:
        return self._buffer

    def __len__(self) -> int:
        return self._buffer.shape[0]

    def offset(self, row: int, col: int) -> int:
        return row * self._cols + col

    def get(self, row: int, col: int) -> Any:
        return to_python(self._buffer[row * self._cols + col])

    def set(self, row: int, col: int, value: Any) -> None:
        self._buffer[row * self._cols + col] = value

    def grid(self) -> np.ndarray:
        """2D view (rows x cols) sharing memory with the buffer."""
        return self._buffer.reshape(self._rows, self._cols)

    def replace(self, buffer: np.ndarray, rows: int, cols: int, dtype: str | None = None) -> None:
        """Install a new buffer and shape in one step."""
        if buffer.ndim != 1 or buffer.shape[0] != rows * cols:
            raise ValueError(
                f"buffer of length {buffer.size} cannot hold a {rows}x{cols} matrix"
            )
        self._buffer = buffer
        self._rows = rows
        self._cols = cols
        if dtype is not None:
            self._dtype = dtype

    def copy(self) -> "Storage":
        return Storage.from_buffer(self._buffer.copy(), self._rows, self._cols, self._dtype)
