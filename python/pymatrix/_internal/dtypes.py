from __future__ import annotations

import cmath
import math
import numbers
import warnings
from typing import Any, Iterable

import numpy as np

from .errors import UnsupportedType
from .runtime import runtime
from .warnings import PyMatrixDTypeWarning

INTEGER_DTYPES: frozenset[str] = frozenset(
    {"int8", "int16", "int32", "int64", "uint8", "uint16", "uint32", "uint64"}
)
FLOAT_DTYPES: frozenset[str] = frozenset({"float16", "float32", "float64"})
COMPLEX_DTYPES: frozenset[str] = frozenset({"complex64", "complex128"})
REAL_DTYPES: frozenset[str] = INTEGER_DTYPES | FLOAT_DTYPES
NUMERIC_STORAGE_DTYPES: frozenset[str] = REAL_DTYPES | COMPLEX_DTYPES | {"bool"}
OBJECT_STORAGE_DTYPES: frozenset[str] = frozenset({"str", "object"})
ALL_DTYPES: frozenset[str] = NUMERIC_STORAGE_DTYPES | OBJECT_STORAGE_DTYPES

# Element types supporting each family of operations.
CAPABILITIES: dict[str, frozenset[str]] = {
    "arithmetic": REAL_DTYPES | COMPLEX_DTYPES | {"object"},
    "numeric": REAL_DTYPES,
    "ordered": REAL_DTYPES | {"bool", "str", "object"},
    "summable": REAL_DTYPES | COMPLEX_DTYPES | {"str", "object"},
}

_ALIASES: dict[str, str] = {
    "i8": "int8",
    "i16": "int16",
    "i32": "int32",
    "i64": "int64",
    "int": "int64",
    "u8": "uint8",
    "u16": "uint16",
    "u32": "uint32",
    "u64": "uint64",
    "uint": "uint64",
    "f16": "float16",
    "half": "float16",
    "f32": "float32",
    "single": "float32",
    "f64": "float64",
    "float": "float64",
    "double": "float64",
    "c64": "complex64",
    "c128": "complex128",
    "complex": "complex128",
    "bool_": "bool",
    "string": "str",
    "obj": "object",
}


def normalize_dtype(dtype: Any) -> str | None:
    """Normalize user-provided dtype tokens into internal strings.

    Returns one of ``ALL_DTYPES`` or None.

    Accepted inputs include:
    - Case-insensitive strings: "int16", "INT16", "f32", "double", "str", ...
    - Python builtins: int, float, complex, bool, str, object
    - NumPy dtypes/scalar types: np.int16, np.dtype("int16"), np.float32, ...
    """

    if dtype is None:
        return None

    if dtype is bool:
        return "bool"
    if dtype is int:
        return "int64"
    if dtype is float:
        return "float64"
    if dtype is complex:
        return "complex128"
    if dtype is str:
        return "str"
    if dtype is object:
        return "object"

    if isinstance(dtype, str):
        s = dtype.strip().lower()
        if s in ALL_DTYPES:
            return s
        if s in _ALIASES:
            return _ALIASES[s]
        # Fall through so NumPy codes such as "f4" or "<i8" resolve.

    try:
        np_dtype = np.dtype(dtype)
    except (TypeError, ValueError):
        return None

    kind = np_dtype.kind
    if kind == "b":
        return "bool"
    if kind in ("i", "u", "f", "c"):
        name = np_dtype.name
        if name in ALL_DTYPES:
            return name
        # Platform-specific extended types (longdouble, clongdouble).
        if kind == "f":
            return "float64"
        if kind == "c":
            return "complex128"
        return None
    if kind in ("U", "S"):
        return "str"
    if kind == "O":
        return "object"
    return None


def require_dtype(dtype: Any) -> str:
    token = normalize_dtype(dtype)
    if token is None:
        raise UnsupportedType(f"unsupported element type: {dtype!r}")
    return token


def storage_dtype(token: str) -> np.dtype:
    """NumPy dtype used for the buffer of a matrix with element type ``token``."""
    if token in OBJECT_STORAGE_DTYPES:
        return np.dtype(object)
    return np.dtype(token)


def zero_value(token: str) -> Any:
    if token == "str":
        return ""
    if token == "object":
        return None
    if token == "bool":
        return False
    return storage_dtype(token).type(0).item()


def has_capability(token: str, capability: str) -> bool:
    try:
        allowed = CAPABILITIES[capability]
    except KeyError:
        raise ValueError(f"unknown capability: {capability!r}") from None
    return token in allowed


def to_python(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


def _is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def _is_integral(value: Any) -> bool:
    return isinstance(value, (numbers.Integral, np.integer)) and not _is_bool(value)


def _is_real(value: Any) -> bool:
    if _is_bool(value):
        return False
    return isinstance(value, (numbers.Real, np.integer, np.floating))


def _is_complex(value: Any) -> bool:
    return isinstance(value, (complex, np.complexfloating))


def infer_dtype(values: Iterable[Any]) -> str:
    """Pick the element type for literal data when no dtype was given."""
    items = list(values)
    if not items:
        return "float64"
    if all(_is_bool(v) for v in items):
        return "bool"
    if all(_is_bool(v) or _is_integral(v) for v in items):
        return "int64"
    if all(_is_bool(v) or _is_real(v) for v in items):
        return "float64"
    if all(_is_bool(v) or _is_real(v) or _is_complex(v) for v in items):
        return "complex128"
    if all(isinstance(v, (str, np.str_)) for v in items):
        return "str"
    return "object"


def report_lossy(message: str, *, stacklevel: int = 4) -> None:
    policy = runtime.lossy_cast
    if policy == "error":
        raise UnsupportedType(message)
    if policy == "warn":
        warnings.warn(message, PyMatrixDTypeWarning, stacklevel=stacklevel)


def convert_value(value: Any, token: str) -> Any:
    """Convert a single value to the element type ``token``.

    Raises UnsupportedType when the value has no conversion to that type.
    """

    if token == "object":
        return value

    if token == "str":
        if isinstance(value, (str, np.str_)):
            return str(value)
        raise UnsupportedType(f"cannot store {type(value).__name__} value {value!r} as str")

    value = to_python(value)
    if isinstance(value, str) or not isinstance(value, numbers.Number):
        raise UnsupportedType(f"cannot convert {type(value).__name__} value {value!r} to {token}")

    if token in COMPLEX_DTYPES:
        try:
            z = complex(value)
        except OverflowError:
            raise UnsupportedType(f"value {value!r} does not fit in {token}") from None
        with np.errstate(over="ignore", invalid="ignore"):
            out = storage_dtype(token).type(z).item()
        if cmath.isfinite(z) and not cmath.isfinite(out):
            raise UnsupportedType(f"value {value!r} does not fit in {token}")
        return out

    if isinstance(value, complex):
        raise UnsupportedType(f"cannot convert complex value {value!r} to {token}")

    if token == "bool":
        return bool(value)

    if token in FLOAT_DTYPES:
        try:
            f = float(value)
        except OverflowError:
            raise UnsupportedType(f"value {value!r} does not fit in {token}") from None
        with np.errstate(over="ignore"):
            out = storage_dtype(token).type(f).item()
        if math.isinf(out) and math.isfinite(f):
            raise UnsupportedType(f"value {value!r} does not fit in {token}")
        return out

    # Integer targets.
    if isinstance(value, float) or not isinstance(value, numbers.Integral):
        f = float(value)
        if not math.isfinite(f):
            raise UnsupportedType(f"cannot convert {f!r} to {token}")
        as_int = int(f)
        if as_int != f:
            report_lossy(f"storing {f!r} as {token} drops its fractional part")
    else:
        as_int = int(value)
    info = np.iinfo(token)
    if as_int < info.min or as_int > info.max:
        raise UnsupportedType(f"value {as_int} does not fit in {token}")
    return as_int


def new_buffer(values: Iterable[Any], token: str) -> np.ndarray:
    """Build a flat buffer from already-converted values."""
    items = list(values)
    dtype = storage_dtype(token)
    if dtype == np.dtype(object):
        # Element-wise assignment keeps nested sequences as single cells.
        buf = np.empty(len(items), dtype=object)
        for i, v in enumerate(items):
            buf[i] = v
        return buf
    return np.array(items, dtype=dtype).reshape(len(items))


def convert_buffer(data: np.ndarray, src: str, dst: str) -> np.ndarray:
    """Return a new buffer holding ``data`` (element type ``src``) as ``dst``."""

    if src == dst:
        return data.copy()

    if dst == "object":
        return new_buffer((to_python(v) for v in data), "object")

    if src == "object":
        return new_buffer((convert_value(v, dst) for v in data), dst)

    if src == "str" or dst == "str":
        raise UnsupportedType(f"cannot cast {src} elements to {dst}")

    if src in COMPLEX_DTYPES and dst not in COMPLEX_DTYPES:
        raise UnsupportedType(f"cannot cast {src} elements to {dst}")

    if dst in INTEGER_DTYPES and data.size:
        if src in FLOAT_DTYPES:
            if not np.all(np.isfinite(data)):
                raise UnsupportedType(f"cannot cast non-finite values to {dst}")
            truncated = np.trunc(data)
            lo, hi = int(truncated.min()), int(truncated.max())
            if np.any(truncated != data):
                report_lossy(f"casting {src} to {dst} drops fractional parts")
        else:
            lo, hi = int(data.min()), int(data.max())
        info = np.iinfo(dst)
        if lo < info.min or hi > info.max:
            raise UnsupportedType(f"values in [{lo}, {hi}] do not fit in {dst}")

    if dst in FLOAT_DTYPES or dst in COMPLEX_DTYPES:
        with np.errstate(over="ignore", invalid="ignore"):
            out = data.astype(storage_dtype(dst))
        if data.size and np.any(np.isfinite(data) & ~np.isfinite(out)):
            raise UnsupportedType(f"values exceed the range of {dst}")
        return out

    return data.astype(storage_dtype(dst))


def result_token(np_dtype: np.dtype) -> str:
    token = normalize_dtype(np_dtype)
    if token is None:
        return "object"
    return token
