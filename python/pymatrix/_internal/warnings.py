"""pymatrix warning categories.

These exist so users can filter/suppress pymatrix warnings without
catching all UserWarning.

Keep this module lightweight and dependency-free to avoid import cycles.
"""


class PyMatrixWarning(UserWarning):
    """Base warning category for all pymatrix user-facing warnings."""


class PyMatrixDTypeWarning(PyMatrixWarning):
    """Warnings about lossy element-type conversions (casts, assignments)."""
