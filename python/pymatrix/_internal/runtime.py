from __future__ import annotations

import logging
import os
from typing import Any, Mapping

logger = logging.getLogger(__name__)

LOSSY_CAST_POLICIES: tuple[str, ...] = ("warn", "ignore", "error")


def _parse_edge_items(value: Any) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"edge_items must be an integer, got {value!r}") from None
    if n < 1:
        raise ValueError(f"edge_items must be >= 1, got {n}")
    return n


def _parse_lossy_cast(value: Any) -> str:
    s = str(value).strip().lower()
    if s not in LOSSY_CAST_POLICIES:
        raise ValueError(
            f"lossy_cast must be one of {', '.join(LOSSY_CAST_POLICIES)}; got {value!r}"
        )
    return s


class Runtime:
    """Process-wide options.

    Defaults come from the environment the first time the package is imported;
    ``configure`` changes them afterwards.
    """

    def __init__(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        edge_items_var: str = "PYMATRIX_EDGE_ITEMS",
        lossy_cast_var: str = "PYMATRIX_LOSSY_CAST",
    ) -> None:
        env = os.environ if environ is None else environ
        self.edge_items: int = _parse_edge_items(env.get(edge_items_var, 4))
        self.lossy_cast: str = _parse_lossy_cast(env.get(lossy_cast_var, "warn"))

    def configure(self, *, edge_items: Any = None, lossy_cast: Any = None) -> None:
        # Parse everything before assigning anything.
        new_edge = self.edge_items if edge_items is None else _parse_edge_items(edge_items)
        new_lossy = self.lossy_cast if lossy_cast is None else _parse_lossy_cast(lossy_cast)
        self.edge_items = new_edge
        self.lossy_cast = new_lossy
        logger.debug("options updated: edge_items=%d lossy_cast=%s", new_edge, new_lossy)

    def options(self) -> dict[str, Any]:
        return {"edge_items": self.edge_items, "lossy_cast": self.lossy_cast}


runtime = Runtime()
