import math
import unittest

import pytest

from pymatrix import EmptyMatrix, Matrix, OutOfRange, UnsupportedType


class TestSum(unittest.TestCase):
    def setUp(self):
        self.m = Matrix([[1, 2, 3], [4, 5, 6]])

    def test_sum_all(self):
        self.assertEqual(self.m.sum(), 21)
        self.assertIsInstance(self.m.sum(), int)

    def test_sum_selections(self):
        self.assertEqual(self.m.sum(row=1), 15)
        self.assertEqual(self.m.sum(column=0), 5)
        self.assertEqual(self.m.sum(diagonal=True), 6)

    def test_sum_per_row_and_per_column(self):
        per_row = self.m.sum(axis=0)
        self.assertEqual(per_row.shape, (2, 1))
        self.assertEqual(per_row.to_list(), [[6], [15]])
        self.assertEqual(self.m.sum(axis=1).to_list(), [[5, 7, 9]])

    def test_bad_axis(self):
        with self.assertRaises(OutOfRange):
            self.m.sum(axis=2)
        with self.assertRaises(OutOfRange):
            self.m.sum(axis=-1)

    def test_bad_selection(self):
        with self.assertRaises(OutOfRange):
            self.m.sum(row=2)
        with self.assertRaises(ValueError):
            self.m.sum(row=0, column=0)
        with self.assertRaises(ValueError):
            self.m.sum(axis=0, row=0)

    def test_sum_str_concatenates(self):
        s = Matrix([["a", "b"], ["c", "d"]])
        self.assertEqual(s.sum(), "abcd")
        self.assertEqual(s.sum(axis=0).to_list(), [["ab"], ["cd"]])

    def test_sum_complex(self):
        self.assertEqual(Matrix([[1j, 2]]).sum(), 2 + 1j)

    def test_sum_integer_overflow(self):
        big = Matrix([[2**62, 2**62], [1, 2]])
        with self.assertRaises(UnsupportedType):
            big.sum()
        with self.assertRaises(UnsupportedType):
            big.sum(axis=0)
        self.assertEqual(big.sum(axis=1).to_list(), [[2**62 + 1, 2**62 + 2]])
        self.assertEqual(Matrix([[2**62, -(2**62)]]).sum(), 0)

    def test_sum_small_integers_widen(self):
        self.assertEqual(Matrix([[100, 100]], dtype="int8").sum(), 200)

    def test_sum_bool_unsupported(self):
        with self.assertRaises(UnsupportedType):
            Matrix([[True]]).sum()


class TestMeanVariance(unittest.TestCase):
    def setUp(self):
        self.m = Matrix([[1, 2, 3], [4, 5, 6]])

    def test_mean(self):
        self.assertEqual(self.m.mean(), 3.5)
        self.assertEqual(self.m.mean(row=0), 2.0)
        self.assertEqual(self.m.mean(axis=0).to_list(), [[2.0], [5.0]])
        self.assertEqual(self.m.mean(axis=0).dtype, "float64")

    def test_population_variance_and_std(self):
        self.assertAlmostEqual(self.m.variance(), 17.5 / 6)
        self.assertAlmostEqual(self.m.std(), math.sqrt(17.5 / 6))

    def test_ddof(self):
        self.assertAlmostEqual(self.m.variance(ddof=1), 3.5)
        self.assertAlmostEqual(self.m.std(row=0, ddof=1), 1.0)
        with self.assertRaises(EmptyMatrix):
            Matrix([[5]]).variance(ddof=1)

    def test_mean_requires_numeric(self):
        with self.assertRaises(UnsupportedType):
            Matrix([["a"]]).mean()
        with self.assertRaises(UnsupportedType):
            Matrix([[1j]]).variance()


class TestOrderStatistics(unittest.TestCase):
    def setUp(self):
        self.m = Matrix([[1, 2, 3], [4, 5, 6]])

    def test_min_max(self):
        self.assertEqual(self.m.min(), 1)
        self.assertEqual(self.m.max(), 6)
        self.assertEqual(self.m.max(column=2), 6)
        self.assertEqual(self.m.min(axis=1).to_list(), [[1, 2, 3]])

    def test_median_lower_middle(self):
        self.assertEqual(self.m.median(), 3)
        self.assertEqual(self.m.median(row=1), 5)
        self.assertEqual(Matrix([[4.0, 1.0, 3.0, 2.0]]).median(), 2.0)

    def test_str_order_statistics(self):
        s = Matrix([["b", "d"], ["a", "c"]])
        self.assertEqual(s.min(), "a")
        self.assertEqual(s.max(), "d")
        self.assertEqual(s.median(), "b")
        self.assertEqual(s.max(axis=0).to_list(), [["d"], ["c"]])

    def test_bool_is_ordered(self):
        self.assertIs(Matrix([[False, True]]).max(), True)


def test_empty_matrix_raises():
    for name in ("sum", "mean", "min", "max", "variance", "std", "median"):
        with pytest.raises(EmptyMatrix):
            getattr(Matrix(), name)()


def test_two_by_two_summary():
    m = Matrix([[1, 2], [3, 4]])
    assert m.mean() == 2.5
    assert m.sum() == 10


def test_diagonal_of_rectangular():
    m = Matrix([[1, 2, 3], [4, 5, 6]])
    assert m.max(diagonal=True) == 5
    assert m.mean(diagonal=True) == 3.0


if __name__ == "__main__":
    unittest.main()
