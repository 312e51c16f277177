import unittest

import numpy as np
import pytest

from pymatrix._internal.dtypes import (
    convert_value,
    has_capability,
    infer_dtype,
    storage_dtype,
    zero_value,
)
from pymatrix._internal.errors import UnsupportedType
from pymatrix._internal.storage import Storage


class TestStorage(unittest.TestCase):
    def test_row_major_offsets(self):
        s = Storage(2, 3, "int64")
        self.assertEqual(len(s), 6)
        self.assertEqual(s.offset(1, 2), 5)
        s.set(1, 0, 7)
        self.assertEqual(s.buffer[3], 7)
        self.assertEqual(s.get(1, 0), 7)

    def test_grid_is_a_view(self):
        s = Storage(2, 2, "float64")
        s.grid()[0, 1] = 3.0
        self.assertEqual(s.get(0, 1), 3.0)

    def test_replace_checks_length_first(self):
        s = Storage(2, 2, "int64", fill=1)
        with self.assertRaises(ValueError):
            s.replace(np.zeros(3, dtype=np.int64), 2, 2)
        self.assertEqual(s.shape, (2, 2))
        self.assertEqual(s.buffer.tolist(), [1, 1, 1, 1])

    def test_copy_owns_its_buffer(self):
        s = Storage(1, 2, "int64")
        dup = s.copy()
        dup.set(0, 0, 5)
        self.assertEqual(s.get(0, 0), 0)

    def test_object_storage(self):
        s = Storage(1, 2, "str")
        self.assertEqual(s.buffer.dtype, object)
        self.assertEqual(s.get(0, 1), "")


def test_storage_dtypes():
    assert storage_dtype("str") == np.dtype(object)
    assert storage_dtype("uint16") == np.dtype("uint16")
    assert zero_value("complex64") == 0j
    assert zero_value("object") is None


def test_capabilities():
    assert has_capability("float32", "numeric")
    assert not has_capability("complex64", "numeric")
    assert has_capability("complex64", "summable")
    assert has_capability("str", "ordered")
    assert not has_capability("bool", "summable")
    with pytest.raises(ValueError):
        has_capability("int8", "shiny")


def test_infer_dtype():
    assert infer_dtype([]) == "float64"
    assert infer_dtype([True, 1]) == "int64"
    assert infer_dtype([np.float32(1.0), 2]) == "float64"
    assert infer_dtype(["a", 1]) == "object"


def test_convert_value():
    assert convert_value(3, "float32") == 3.0
    assert convert_value(1, "bool") is True
    assert convert_value("x", "object") == "x"
    with pytest.raises(UnsupportedType):
        convert_value(2**40, "int32")
    with pytest.raises(UnsupportedType):
        convert_value(None, "int64")
    with pytest.raises(UnsupportedType):
        convert_value(1e300, "float16")
