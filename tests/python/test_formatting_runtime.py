import unittest

import pytest

import pymatrix
from pymatrix import Matrix
from pymatrix._internal.runtime import Runtime


class TestFormatting(unittest.TestCase):
    def test_str_small(self):
        m = Matrix([[1, 2], [3, 4]])
        self.assertEqual(
            str(m),
            "Matrix(shape=(2, 2), dtype=int64)\n[\n [1, 2]\n [3, 4]\n]",
        )

    def test_str_empty(self):
        self.assertEqual(str(Matrix()), "Matrix(shape=(0, 0), dtype=float64)\n[]")

    def test_repr(self):
        self.assertEqual(repr(Matrix(2, 3)), "<Matrix shape=(2, 3) dtype=float64>")

    def test_str_values(self):
        self.assertIn("['a', 'b']", str(Matrix([["a", "b"]])))
        self.assertIn("[1.5, 0]", str(Matrix([[1.5, 0.0]])))
        self.assertIn("[1, 0]", str(Matrix([[True, False]])))

    def test_edge_items_elides(self):
        pymatrix.configure(edge_items=1)
        lines = str(Matrix(5, 5, 0)).splitlines()
        self.assertEqual(
            lines,
            [
                "Matrix(shape=(5, 5), dtype=int64)",
                "[",
                " [0, ..., 0]",
                " ...",
                " [0, ..., 0]",
                "]",
            ],
        )


class TestRuntimeOptions(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(Runtime(environ={}).options(), {"edge_items": 4, "lossy_cast": "warn"})

    def test_environment(self):
        rt = Runtime(environ={"PYMATRIX_EDGE_ITEMS": "2", "PYMATRIX_LOSSY_CAST": "Error"})
        self.assertEqual(rt.edge_items, 2)
        self.assertEqual(rt.lossy_cast, "error")

    def test_invalid_environment(self):
        with self.assertRaises(ValueError):
            Runtime(environ={"PYMATRIX_EDGE_ITEMS": "many"})
        with self.assertRaises(ValueError):
            Runtime(environ={"PYMATRIX_LOSSY_CAST": "loud"})

    def test_configure_and_get_options(self):
        pymatrix.configure(edge_items=2)
        self.assertEqual(pymatrix.get_options()["edge_items"], 2)
        pymatrix.configure(lossy_cast="ignore")
        self.assertEqual(pymatrix.get_options(), {"edge_items": 2, "lossy_cast": "ignore"})

    def test_configure_is_all_or_nothing(self):
        before = pymatrix.get_options()
        with self.assertRaises(ValueError):
            pymatrix.configure(edge_items=2, lossy_cast="bad")
        with self.assertRaises(ValueError):
            pymatrix.configure(edge_items=0)
        self.assertEqual(pymatrix.get_options(), before)


def test_package_logger_has_null_handler():
    import logging

    handlers = logging.getLogger("pymatrix").handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_version():
    assert isinstance(pymatrix.__version__, str)


@pytest.mark.parametrize("bad", ["0", -3, "x"])
def test_edge_items_validation(bad):
    with pytest.raises(ValueError):
        pymatrix.configure(edge_items=bad)


if __name__ == "__main__":
    unittest.main()
