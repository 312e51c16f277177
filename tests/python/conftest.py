import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[2]
_PYTHON_DIR = _REPO_ROOT / "python"
path_str = str(_PYTHON_DIR)
if path_str not in sys.path:
    sys.path.insert(0, path_str)

import pymatrix  # noqa: E402


@pytest.fixture(autouse=True)
def _default_options():
    """Every test starts and ends with the default runtime options."""
    saved = pymatrix.get_options()
    pymatrix.configure(edge_items=4, lossy_cast="warn")
    yield
    pymatrix.configure(**saved)
