import unittest

import numpy as np
import pytest

import pymatrix
from pymatrix import Matrix, MatrixError, OutOfRange, ShapeMismatch, UnsupportedType


class TestMatrixConstruction(unittest.TestCase):
    def test_default_is_empty_float(self):
        m = Matrix()
        self.assertEqual(m.shape, (0, 0))
        self.assertEqual(m.dtype, "float64")
        self.assertTrue(m.is_empty())
        self.assertEqual(m.to_list(), [])

    def test_empty_with_dtype(self):
        self.assertEqual(Matrix(dtype=int).dtype, "int64")

    def test_dimensioned_defaults_to_float_zeros(self):
        m = Matrix(2, 3)
        self.assertEqual(m.shape, (2, 3))
        self.assertEqual(m.dtype, "float64")
        self.assertEqual(m.to_list(), [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])

    def test_dimensioned_with_fill_infers_dtype(self):
        m = Matrix(2, 2, 7)
        self.assertEqual(m.dtype, "int64")
        self.assertTrue(m.all(7))

        s = Matrix(1, 2, fill="ab")
        self.assertEqual(s.dtype, "str")
        self.assertEqual(s.row(0), ["ab", "ab"])

    def test_zero_values_per_dtype(self):
        self.assertEqual(Matrix(1, 1, dtype="str").cell(0, 0), "")
        self.assertIsNone(Matrix(1, 1, dtype=object).cell(0, 0))
        self.assertIs(Matrix(1, 1, dtype=bool).cell(0, 0), False)
        self.assertEqual(Matrix(1, 1, dtype="uint8").cell(0, 0), 0)

    def test_literal_infers_dtype(self):
        self.assertEqual(Matrix([[1, 2], [3, 4]]).dtype, "int64")
        self.assertEqual(Matrix([[1, 2.5]]).dtype, "float64")
        self.assertEqual(Matrix([[True, False]]).dtype, "bool")
        self.assertEqual(Matrix([[1, 2j]]).dtype, "complex128")
        self.assertEqual(Matrix([["a", "b"]]).dtype, "str")
        self.assertEqual(Matrix([[1, "a"]]).dtype, "object")

    def test_literal_values_row_major(self):
        m = Matrix([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(m.shape, (2, 3))
        self.assertEqual(m.flat(), [1, 2, 3, 4, 5, 6])

    def test_literal_with_explicit_dtype(self):
        m = Matrix([[1, 2]], dtype="float32")
        self.assertEqual(m.dtype, "float32")
        self.assertEqual(m.row(0), [1.0, 2.0])

    def test_second_positional_is_dtype_for_data(self):
        self.assertEqual(Matrix([[1, 2]], "f64").dtype, "float64")

    def test_empty_literals(self):
        self.assertEqual(Matrix([]).shape, (0, 0))
        self.assertEqual(Matrix([[], []]).shape, (0, 0))

    def test_ragged_literal_rejected(self):
        with self.assertRaises(ShapeMismatch):
            Matrix([[1, 2], [3]])

    def test_non_sequence_rejected(self):
        with self.assertRaises(UnsupportedType):
            Matrix("abc")
        with self.assertRaises(UnsupportedType):
            Matrix([1, 2, 3])

    def test_value_not_fitting_dtype(self):
        with self.assertRaises(UnsupportedType):
            Matrix([[300]], dtype="int8")
        with self.assertRaises(UnsupportedType):
            Matrix([["x"]], dtype=float)

    def test_unknown_dtype(self):
        with self.assertRaises(UnsupportedType):
            Matrix([[1]], dtype="nope")

    def test_dimension_errors(self):
        with self.assertRaises(TypeError):
            Matrix(2)
        with self.assertRaises(OutOfRange):
            Matrix(-1, 2)
        with self.assertRaises(OutOfRange):
            Matrix(2, 2.5)
        with self.assertRaises(MatrixError):
            Matrix(2, -3)

    def test_copy_constructor_is_independent(self):
        src = Matrix([[1, 2], [3, 4]])
        dup = Matrix(src)
        self.assertEqual(dup, src)
        dup[0, 0] = 100
        self.assertEqual(src.cell(0, 0), 1)

    def test_copy_constructor_casts(self):
        src = Matrix([[1, 2]])
        dup = Matrix(src, dtype=float)
        self.assertEqual(dup.dtype, "float64")
        self.assertEqual(src.dtype, "int64")


def test_unhashable_and_no_truth_value():
    m = Matrix([[1]])
    with pytest.raises(TypeError):
        hash(m)
    with pytest.raises(TypeError):
        bool(m)


def test_iterates_rows():
    assert list(Matrix([[1, 2], [3, 4]])) == [[1, 2], [3, 4]]


def test_normalize_dtype_spellings():
    assert pymatrix.normalize_dtype(np.float32) == "float32"
    assert pymatrix.normalize_dtype("f4") == "float32"
    assert pymatrix.normalize_dtype("I32") == "int32"
    assert pymatrix.normalize_dtype(int) == "int64"
    assert pymatrix.normalize_dtype(np.dtype("complex64")) == "complex64"
    assert pymatrix.normalize_dtype("bogus") is None


def test_public_dtype_tokens():
    assert pymatrix.int16 == "int16"
    assert pymatrix.bool_ == "bool"
    assert pymatrix.ALL_DTYPES >= {"int8", "uint64", "float16", "complex128", "str", "object"}


if __name__ == "__main__":
    unittest.main()
