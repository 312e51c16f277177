from __future__ import annotations

from typing import Any

import numpy as np

from .runtime import runtime


def _edge_indices(length: int) -> tuple[list[int], list[int], bool]:
    edge = runtime.edge_items
    if length <= edge * 2:
        return list(range(length)), [], False
    head = list(range(edge))
    tail = list(range(length - edge, length))
    return head, tail, True


def _format_value(value: Any) -> str:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:g}"
    if isinstance(value, str):
        return repr(value)
    return str(value)


def _format_matrix_row(
    matrix: Any,
    row_index: int,
    col_head: list[int],
    col_tail: list[int],
    truncated: bool,
) -> str:
    entries: list[str] = []
    for col in col_head:
        entries.append(_format_value(matrix.cell(row_index, col)))
    if truncated:
        entries.append("...")
    for col in col_tail:
        entries.append(_format_value(matrix.cell(row_index, col)))
    return ", ".join(entries)


def matrix_str(self: Any) -> str:
    rows, cols = self.shape

    header = f"{self.__class__.__name__}(shape=({rows}, {cols}), dtype={self.dtype})"

    if rows == 0 or cols == 0:
        return header + "\n[]"

    row_head, row_tail, rows_truncated = _edge_indices(rows)
    col_head, col_tail, cols_truncated = _edge_indices(cols)

    lines = [header, "["]
    for row_index in row_head:
        row_repr = _format_matrix_row(self, row_index, col_head, col_tail, cols_truncated)
        lines.append(f" [{row_repr}]")
    if rows_truncated:
        lines.append(" ...")
    for row_index in row_tail:
        row_repr = _format_matrix_row(self, row_index, col_head, col_tail, cols_truncated)
        lines.append(f" [{row_repr}]")
    lines.append("]")
    return "\n".join(lines)


class MatrixMixin:
    def __str__(self) -> str:
        return matrix_str(self)

    def __repr__(self) -> str:
        shape = getattr(self, "shape", None)
        dtype = getattr(self, "dtype", None)
        return f"<{self.__class__.__name__} shape={shape} dtype={dtype}>"
