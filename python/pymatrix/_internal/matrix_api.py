from __future__ import annotations

import copy as _copy
import logging
import numbers
from typing import Any, Callable, Iterator

import numpy as np

from . import ops as _ops
from . import properties as _properties
from . import statistics as _statistics
from . import validation as _validation
from .coercion import coerce_ndarray, coerce_sequence_rows, flatten, is_rectangular, is_sequence_like
from .dtypes import (
    OBJECT_STORAGE_DTYPES,
    convert_buffer,
    convert_value,
    infer_dtype,
    new_buffer,
    require_dtype,
    result_token,
    storage_dtype,
)
from .errors import OutOfRange, UnsupportedType
from .formatting import MatrixMixin
from .interop import patch_interop
from .storage import Storage

logger = logging.getLogger(__name__)


def _dimension(value: Any, what: str) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (numbers.Integral, np.integer)):
        raise OutOfRange(f"{what} must be an integer, got {type(value).__name__}")
    value = int(value)
    if value < 0:
        raise OutOfRange(f"{what} must be non-negative, got {value}")
    return value


def _items(seq: Any, what: str) -> list[Any]:
    if isinstance(seq, np.ndarray):
        if seq.ndim != 1:
            raise UnsupportedType(f"{what} must be one-dimensional, got a {seq.ndim}D array")
        return seq.tolist()
    if isinstance(seq, Matrix):
        return seq.flat()
    if not is_sequence_like(seq):
        raise UnsupportedType(f"{what} must be a sequence, got {type(seq).__name__}")
    return list(seq)


def _ids(ids: Any) -> list[Any]:
    if isinstance(ids, (numbers.Integral, np.integer)) and not isinstance(ids, (bool, np.bool_)):
        return [ids]
    return _items(ids, "index selection")


def _empty_buffer(dtype: str) -> np.ndarray:
    return np.empty(0, dtype=storage_dtype(dtype))


class Matrix(MatrixMixin):
    """Dense two-dimensional matrix of one element type.

    Construction forms::

        Matrix()                          # 0x0, float64
        Matrix(rows, cols, fill=None, dtype=None)
        Matrix([[1, 2], [3, 4]], dtype=None)
        Matrix(ndarray, dtype=None)
        Matrix(other, dtype=None)         # copy, or cast when dtype differs

    For data sources the second positional argument is taken as the dtype.
    Every operation validates its arguments before touching the buffer, so a
    call that raises leaves the matrix as it was.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, source: Any = None, cols: Any = None, fill: Any = None, dtype: Any = None):
        if source is None:
            if cols is not None or fill is not None:
                raise TypeError("Matrix() without a row count takes no cols/fill")
            token = require_dtype(dtype) if dtype is not None else "float64"
            self._storage = Storage(0, 0, token)
            return

        if isinstance(source, (numbers.Integral, np.integer)) and not isinstance(
            source, (bool, np.bool_)
        ):
            if cols is None:
                raise TypeError("Matrix(rows, cols) requires both dimensions")
            rows = _dimension(source, "rows")
            n_cols = _dimension(cols, "cols")
            if dtype is not None:
                token = require_dtype(dtype)
            elif fill is not None:
                token = infer_dtype([fill])
            else:
                token = "float64"
            value = None if fill is None else convert_value(fill, token)
            self._storage = Storage(rows, n_cols, token, fill=value)
            return

        if cols is not None:
            if dtype is not None or fill is not None:
                raise TypeError("cols/fill are only valid together with a row count")
            dtype = cols
        elif fill is not None:
            raise TypeError("fill is only valid together with a row count")

        if isinstance(source, Matrix):
            token = source.dtype if dtype is None else require_dtype(dtype)
            buffer = convert_buffer(source._storage.buffer, source.dtype, token)
            self._storage = Storage.from_buffer(buffer, source.n_rows, source.n_cols, token)
            return

        if isinstance(source, np.ndarray):
            rows, n_cols, flat = coerce_ndarray(source)
            src = result_token(flat.dtype)
            token = src if dtype is None else require_dtype(dtype)
            if src in OBJECT_STORAGE_DTYPES:
                buffer = new_buffer((convert_value(v, token) for v in flat.tolist()), token)
            else:
                buffer = convert_buffer(flat, src, token)
            self._storage = Storage.from_buffer(buffer, rows, n_cols, token)
            return

        rows, n_cols, values = coerce_sequence_rows(source)
        token = infer_dtype(values) if dtype is None else require_dtype(dtype)
        buffer = new_buffer((convert_value(v, token) for v in values), token)
        self._storage = Storage.from_buffer(buffer, rows, n_cols, token)

    @classmethod
    def _from_storage(cls, storage: Storage) -> "Matrix":
        obj = cls.__new__(cls)
        obj._storage = storage
        return obj

    # ------------------------------------------------------------------
    # Shape & type

    @property
    def shape(self) -> tuple[int, int]:
        return self._storage.shape

    @property
    def n_rows(self) -> int:
        return self._storage.rows

    @property
    def n_cols(self) -> int:
        return self._storage.cols

    @property
    def size(self) -> int:
        return len(self._storage)

    @property
    def dtype(self) -> str:
        return self._storage.dtype

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    # ------------------------------------------------------------------
    # Validation

    def check_valid_row_id(self, i: Any) -> int:
        return _validation.check_valid_row_id(self.n_rows, i)

    def check_valid_col_id(self, j: Any) -> int:
        return _validation.check_valid_col_id(self.n_cols, j)

    def check_valid_row(self, seq: Any) -> None:
        _validation.check_valid_row(self.n_cols, _items(seq, "row"))

    def check_valid_col(self, seq: Any) -> None:
        _validation.check_valid_col(self.n_rows, _items(seq, "column"))

    def check_valid_diag(self, seq: Any) -> None:
        _validation.check_valid_diag(self.n_rows, self.n_cols, _items(seq, "diagonal"))

    def check_dim(self, other: Any) -> None:
        other_shape = other.shape if isinstance(other, Matrix) else tuple(other)
        _validation.check_dim(self.shape, other_shape)

    def check_expected_id(self, n: Any, lo: int, hi: int | None = None) -> int:
        return _validation.check_expected_id(n, lo, hi)

    def check_valid_type(self, capability: str) -> None:
        _validation.check_valid_type(self.dtype, capability)

    # ------------------------------------------------------------------
    # Accessors

    def cell(self, row: Any, col: Any) -> Any:
        r = self.check_valid_row_id(row)
        c = self.check_valid_col_id(col)
        return self._storage.get(r, c)

    def cells(self, pairs: Any) -> list[Any]:
        """Values at ``pairs`` in input order; all pairs are checked before reading."""
        positions = []
        for pair in _items(pairs, "cell positions"):
            if not is_sequence_like(pair) or len(pair) != 2:
                raise TypeError("cell positions must be (row, col) pairs")
            positions.append((self.check_valid_row_id(pair[0]), self.check_valid_col_id(pair[1])))
        return [self._storage.get(r, c) for r, c in positions]

    def __getitem__(self, key: Any) -> Any:
        if not (isinstance(key, tuple) and len(key) == 2):
            raise TypeError("matrix indices must be provided as [row, col].")
        return self.cell(*key)

    def row(self, i: Any) -> list[Any]:
        i = self.check_valid_row_id(i)
        return self._storage.grid()[i, :].tolist()

    def rows(self, ids: Any) -> "Matrix":
        picked = [self.check_valid_row_id(i) for i in _ids(ids)]
        grid = self._storage.grid()[picked, :]
        return self._wrap_grid(grid, self.dtype)

    def column(self, j: Any) -> list[Any]:
        j = self.check_valid_col_id(j)
        return self._storage.grid()[:, j].tolist()

    def columns(self, ids: Any) -> "Matrix":
        picked = [self.check_valid_col_id(j) for j in _ids(ids)]
        grid = self._storage.grid()[:, picked]
        return self._wrap_grid(grid, self.dtype)

    def diag(self) -> list[Any]:
        return np.diagonal(self._storage.grid()).tolist()

    def to_list(self) -> list[list[Any]]:
        return self._storage.grid().tolist()

    def flat(self) -> list[Any]:
        return self._storage.buffer.tolist()

    def __iter__(self) -> Iterator[list[Any]]:
        return iter(self.to_list())

    # ------------------------------------------------------------------
    # Setters

    def set_cell(self, row: Any, col: Any, value: Any) -> None:
        value = convert_value(value, self.dtype)
        r = self.check_valid_row_id(row)
        c = self.check_valid_col_id(col)
        self._storage.set(r, c, value)

    def __setitem__(self, key: Any, value: Any) -> None:
        if not (isinstance(key, tuple) and len(key) == 2):
            raise TypeError("matrix indices must be provided as [row, col].")
        self.set_cell(key[0], key[1], value)

    def set_row(self, i: Any, seq: Any) -> None:
        values = self._convert_all(_items(seq, "row"))
        i = self.check_valid_row_id(i)
        _validation.check_valid_row(self.n_cols, values)
        self._storage.grid()[i, :] = new_buffer(values, self.dtype)

    def set_column(self, j: Any, seq: Any) -> None:
        values = self._convert_all(_items(seq, "column"))
        j = self.check_valid_col_id(j)
        _validation.check_valid_col(self.n_rows, values)
        self._storage.grid()[:, j] = new_buffer(values, self.dtype)

    def set_diag(self, seq: Any) -> None:
        values = self._convert_all(_items(seq, "diagonal"))
        _validation.check_valid_diag(self.n_rows, self.n_cols, values)
        for k, value in enumerate(values):
            self._storage.set(k, k, value)

    # ------------------------------------------------------------------
    # Manipulators

    def resize(self, new_rows: Any, new_cols: Any, fill: Any = None) -> None:
        """Change the shape in place, keeping the overlapping top-left block."""
        new_rows = _dimension(new_rows, "rows")
        new_cols = _dimension(new_cols, "cols")
        value = None if fill is None else convert_value(fill, self.dtype)
        target = Storage(new_rows, new_cols, self.dtype, fill=value)
        keep_r = min(new_rows, self.n_rows)
        keep_c = min(new_cols, self.n_cols)
        if keep_r and keep_c:
            target.grid()[:keep_r, :keep_c] = self._storage.grid()[:keep_r, :keep_c]
        logger.debug("resize %s -> %s", self.shape, (new_rows, new_cols))
        self._storage.replace(target.buffer, new_rows, new_cols)

    def clear(self) -> None:
        logger.debug("clear %s matrix of shape %s", self.dtype, self.shape)
        self._storage.replace(_empty_buffer(self.dtype), 0, 0)

    def copy(self) -> "Matrix":
        return self._from_storage(self._storage.copy())

    def __copy__(self) -> "Matrix":
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> "Matrix":
        if self.dtype != "object":
            return self.copy()
        values = [_copy.deepcopy(v, memo) for v in self._storage.buffer]
        storage = Storage.from_buffer(new_buffer(values, "object"), self.n_rows, self.n_cols, "object")
        return self._from_storage(storage)

    def fill(self, value: Any) -> None:
        value = convert_value(value, self.dtype)
        target = Storage(self.n_rows, self.n_cols, self.dtype, fill=value)
        self._storage.replace(target.buffer, self.n_rows, self.n_cols)

    def transpose(self) -> "Matrix":
        return self._wrap_grid(self._storage.grid().T, self.dtype)

    def cast(self, dtype: Any) -> "Matrix":
        token = require_dtype(dtype)
        buffer = convert_buffer(self._storage.buffer, self.dtype, token)
        logger.debug("cast %s -> %s (%d cells)", self.dtype, token, self.size)
        return self._from_storage(Storage.from_buffer(buffer, self.n_rows, self.n_cols, token))

    def insert_row(self, pos: Any, seq: Any) -> None:
        """Insert ``seq`` so it becomes row ``pos`` (``0 <= pos <= n_rows``)."""
        values = self._convert_all(_items(seq, "row"))
        pos = _validation.check_expected_id(pos, 0, self.n_rows + 1)
        if self.n_rows == 0:
            cols = len(values)
            grid = new_buffer(values, self.dtype).reshape(1, cols)
        else:
            _validation.check_valid_row(self.n_cols, values)
            cols = self.n_cols
            old = self._storage.grid()
            new_row = new_buffer(values, self.dtype).reshape(1, cols)
            grid = np.concatenate([old[:pos, :], new_row, old[pos:, :]], axis=0)
        logger.debug("insert row at %d into shape %s", pos, self.shape)
        self._install(grid)

    def insert_column(self, pos: Any, seq: Any) -> None:
        """Insert ``seq`` so it becomes column ``pos`` (``0 <= pos <= n_cols``)."""
        values = self._convert_all(_items(seq, "column"))
        pos = _validation.check_expected_id(pos, 0, self.n_cols + 1)
        if self.n_cols == 0:
            rows = len(values)
            grid = new_buffer(values, self.dtype).reshape(rows, 1)
        else:
            _validation.check_valid_col(self.n_rows, values)
            rows = self.n_rows
            old = self._storage.grid()
            new_col = new_buffer(values, self.dtype).reshape(rows, 1)
            grid = np.concatenate([old[:, :pos], new_col, old[:, pos:]], axis=1)
        logger.debug("insert column at %d into shape %s", pos, self.shape)
        self._install(grid)

    def push_row_front(self, seq: Any) -> None:
        self.insert_row(0, seq)

    def push_row_back(self, seq: Any) -> None:
        self.insert_row(self.n_rows, seq)

    def push_col_front(self, seq: Any) -> None:
        self.insert_column(0, seq)

    def push_col_back(self, seq: Any) -> None:
        self.insert_column(self.n_cols, seq)

    def remove_row(self, i: Any) -> None:
        i = self.check_valid_row_id(i)
        logger.debug("remove row %d from shape %s", i, self.shape)
        self._install(np.delete(self._storage.grid(), i, axis=0))

    def remove_column(self, j: Any) -> None:
        j = self.check_valid_col_id(j)
        logger.debug("remove column %d from shape %s", j, self.shape)
        self._install(np.delete(self._storage.grid(), j, axis=1))

    def find_row(self, target: Any) -> int:
        """Index of the first row equal to ``target`` (or accepted by it), else -1."""
        if callable(target):
            matches = lambda values: bool(target(values))  # noqa: E731
        else:
            wanted = _items(target, "row")
            if len(wanted) != self.n_cols:
                return -1
            matches = lambda values: values == wanted  # noqa: E731
        for i in range(self.n_rows):
            if matches(self.row(i)):
                return i
        return -1

    def find_column(self, target: Any) -> int:
        """Index of the first column equal to ``target`` (or accepted by it), else -1."""
        if callable(target):
            matches = lambda values: bool(target(values))  # noqa: E731
        else:
            wanted = _items(target, "column")
            if len(wanted) != self.n_rows:
                return -1
            matches = lambda values: values == wanted  # noqa: E731
        for j in range(self.n_cols):
            if matches(self.column(j)):
                return j
        return -1

    def find(self, value_or_predicate: Any) -> tuple[int, int]:
        pred = _properties.as_predicate(value_or_predicate)
        for r in range(self.n_rows):
            for c in range(self.n_cols):
                if pred(self._storage.get(r, c)):
                    return (r, c)
        return (-1, -1)

    def apply(self, func: Callable[..., Any], with_index: bool = False) -> None:
        """Replace every cell with ``func(value)`` (or ``func(value, row, col)``)."""
        buffer = self._mapped(func, with_index, self.dtype)
        self._storage.replace(buffer, self.n_rows, self.n_cols)

    def map(self, func: Callable[..., Any], with_index: bool = False, dtype: Any = None) -> "Matrix":
        token = self.dtype if dtype is None else require_dtype(dtype)
        buffer = self._mapped(func, with_index, token)
        return self._from_storage(Storage.from_buffer(buffer, self.n_rows, self.n_cols, token))

    # ------------------------------------------------------------------
    # Predicates

    def is_empty(self) -> bool:
        return _properties.is_empty(self._storage)

    def is_square(self) -> bool:
        return _properties.is_square(self._storage)

    def is_diagonal(self) -> bool:
        return _properties.is_diagonal(self._storage)

    def is_identity(self) -> bool:
        return _properties.is_identity(self._storage)

    def is_symmetric(self) -> bool:
        return _properties.is_symmetric(self._storage)

    def is_upper_triangular(self) -> bool:
        return _properties.is_upper_triangular(self._storage)

    def is_lower_triangular(self) -> bool:
        return _properties.is_lower_triangular(self._storage)

    def all(self, value_or_predicate: Any) -> bool:
        return _properties.all_cells(self._storage, value_or_predicate)

    def any(self, value_or_predicate: Any) -> bool:
        return _properties.any_cell(self._storage, value_or_predicate)

    # ------------------------------------------------------------------
    # Statistics
    #
    # Without ``axis`` these return a scalar; ``axis=0`` gives one value per
    # row (rows x 1 matrix), ``axis=1`` one value per column (1 x cols).

    def sum(self, axis: Any = None, *, row: Any = None, column: Any = None, diagonal: bool = False) -> Any:
        return self._reduce("sum", axis, row, column, diagonal)

    def mean(self, axis: Any = None, *, row: Any = None, column: Any = None, diagonal: bool = False) -> Any:
        return self._reduce("mean", axis, row, column, diagonal)

    def min(self, axis: Any = None, *, row: Any = None, column: Any = None, diagonal: bool = False) -> Any:
        return self._reduce("min", axis, row, column, diagonal)

    def max(self, axis: Any = None, *, row: Any = None, column: Any = None, diagonal: bool = False) -> Any:
        return self._reduce("max", axis, row, column, diagonal)

    def median(self, axis: Any = None, *, row: Any = None, column: Any = None, diagonal: bool = False) -> Any:
        return self._reduce("median", axis, row, column, diagonal)

    def variance(
        self,
        axis: Any = None,
        *,
        row: Any = None,
        column: Any = None,
        diagonal: bool = False,
        ddof: int = 0,
    ) -> Any:
        return self._reduce("variance", axis, row, column, diagonal, ddof)

    def std(
        self,
        axis: Any = None,
        *,
        row: Any = None,
        column: Any = None,
        diagonal: bool = False,
        ddof: int = 0,
    ) -> Any:
        return self._reduce("std", axis, row, column, diagonal, ddof)

    # ------------------------------------------------------------------
    # Arithmetic

    def _operand(self, other: Any) -> Any:
        if isinstance(other, Matrix):
            return other._storage
        if isinstance(other, np.ndarray):
            if other.ndim == 0:
                return other.item()
            return Matrix(other)._storage
        if isinstance(other, (numbers.Number, str, np.generic)):
            return other
        return NotImplemented

    def _binary(self, op: str, other: Any, reflected: bool = False) -> Any:
        operand = self._operand(other)
        if operand is NotImplemented:
            return NotImplemented
        if isinstance(operand, Storage):
            if reflected:
                return self._from_storage(_ops.elementwise(op, operand, self._storage))
            return self._from_storage(_ops.elementwise(op, self._storage, operand))
        return self._from_storage(_ops.scalar(op, self._storage, operand, reflected=reflected))

    def _inplace(self, op: str, other: Any) -> Any:
        operand = self._operand(other)
        if operand is NotImplemented:
            return NotImplemented
        _ops.inplace(op, self._storage, operand)
        return self

    def __add__(self, other: Any) -> Any:
        return self._binary("add", other)

    def __radd__(self, other: Any) -> Any:
        return self._binary("add", other, reflected=True)

    def __iadd__(self, other: Any) -> Any:
        return self._inplace("add", other)

    def __sub__(self, other: Any) -> Any:
        return self._binary("sub", other)

    def __rsub__(self, other: Any) -> Any:
        return self._binary("sub", other, reflected=True)

    def __isub__(self, other: Any) -> Any:
        return self._inplace("sub", other)

    def __mul__(self, other: Any) -> Any:
        return self._binary("mul", other)

    def __rmul__(self, other: Any) -> Any:
        return self._binary("mul", other, reflected=True)

    def __imul__(self, other: Any) -> Any:
        return self._inplace("mul", other)

    def __truediv__(self, other: Any) -> Any:
        return self._binary("truediv", other)

    def __rtruediv__(self, other: Any) -> Any:
        return self._binary("truediv", other, reflected=True)

    def __itruediv__(self, other: Any) -> Any:
        return self._inplace("truediv", other)

    def __floordiv__(self, other: Any) -> Any:
        return self._binary("floordiv", other)

    def __rfloordiv__(self, other: Any) -> Any:
        return self._binary("floordiv", other, reflected=True)

    def __ifloordiv__(self, other: Any) -> Any:
        return self._inplace("floordiv", other)

    def __matmul__(self, other: Any) -> Any:
        operand = self._operand(other)
        if not isinstance(operand, Storage):
            return NotImplemented
        return self._from_storage(_ops.matmul(self._storage, operand))

    def __rmatmul__(self, other: Any) -> Any:
        operand = self._operand(other)
        if not isinstance(operand, Storage):
            return NotImplemented
        return self._from_storage(_ops.matmul(operand, self._storage))

    def __imatmul__(self, other: Any) -> Any:
        operand = self._operand(other)
        if not isinstance(operand, Storage):
            return NotImplemented
        _ops.store_back("matmul", self._storage, _ops.matmul(self._storage, operand))
        return self

    def matrix_power(self, k: int) -> "Matrix":
        """``self @ self @ ... @ self`` (k factors); ``k == 0`` gives the identity."""
        return self._from_storage(_ops.matrix_power(self._storage, k))

    def __neg__(self) -> "Matrix":
        return self._from_storage(_ops.unary("neg", self._storage))

    def __pos__(self) -> "Matrix":
        return self._from_storage(_ops.unary("pos", self._storage))

    def __abs__(self) -> "Matrix":
        return self._from_storage(_ops.unary("abs", self._storage))

    # ------------------------------------------------------------------
    # Comparison

    def __eq__(self, other: Any) -> Any:
        operand = self._operand(other)
        if operand is NotImplemented:
            return NotImplemented
        if isinstance(operand, Storage):
            return _ops.equal(self._storage, operand)
        return self._from_storage(_ops.compare("eq", self._storage, operand))

    def __ne__(self, other: Any) -> Any:
        operand = self._operand(other)
        if operand is NotImplemented:
            return NotImplemented
        if isinstance(operand, Storage):
            return not _ops.equal(self._storage, operand)
        return self._from_storage(_ops.compare("ne", self._storage, operand))

    def _ordering(self, op: str, other: Any) -> Any:
        operand = self._operand(other)
        if operand is NotImplemented:
            return NotImplemented
        return self._from_storage(_ops.compare(op, self._storage, operand))

    def __lt__(self, other: Any) -> Any:
        return self._ordering("lt", other)

    def __le__(self, other: Any) -> Any:
        return self._ordering("le", other)

    def __gt__(self, other: Any) -> Any:
        return self._ordering("gt", other)

    def __ge__(self, other: Any) -> Any:
        return self._ordering("ge", other)

    def __bool__(self) -> bool:
        raise TypeError(
            "The truth value of a Matrix is ambiguous. Use m.all(...), m.any(...) or m.is_empty()."
        )

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def is_matrix(nested: Any) -> bool:
        """True when ``nested`` is a rectangular nested sequence."""
        return is_rectangular(nested)

    @staticmethod
    def flatten(nested: Any) -> list[Any]:
        return flatten(nested)

    def _convert_all(self, values: list[Any]) -> list[Any]:
        return [convert_value(v, self.dtype) for v in values]

    def _mapped(self, func: Callable[..., Any], with_index: bool, token: str) -> np.ndarray:
        rows, cols = self.shape
        out = []
        for r in range(rows):
            for c in range(cols):
                value = self._storage.get(r, c)
                result = func(value, r, c) if with_index else func(value)
                out.append(convert_value(result, token))
        return new_buffer(out, token)

    def _install(self, grid: np.ndarray) -> None:
        rows, cols = grid.shape
        if rows == 0 or cols == 0:
            self._storage.replace(_empty_buffer(self.dtype), 0, 0)
            return
        self._storage.replace(np.ascontiguousarray(grid).reshape(-1), rows, cols)

    def _wrap_grid(self, grid: np.ndarray, dtype: str) -> "Matrix":
        rows, cols = grid.shape
        buffer = grid.copy(order="C").reshape(-1)
        return self._from_storage(Storage.from_buffer(buffer, rows, cols, dtype))

    def _reduce(
        self,
        name: str,
        axis: Any,
        row: Any,
        column: Any,
        diagonal: bool,
        ddof: int = 0,
    ) -> Any:
        result = _statistics.reduce(
            self._storage,
            name,
            axis=axis,
            row=row,
            column=column,
            diagonal=diagonal,
            ddof=ddof,
        )
        if isinstance(result, Storage):
            return self._from_storage(result)
        return result


patch_interop(Matrix)
