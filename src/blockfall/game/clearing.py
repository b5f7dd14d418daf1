from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .grid import Grid, clear_rows, full_rows, stamp
from .pieces import Piece

logger = logging.getLogger(__name__)


def lock(grid: Grid, piece: Piece) -> Grid:
    return stamp(grid, piece)


def resolve_clears(grid: Grid) -> Tuple[Grid, int]:
    """Remove every full row at once; return the new grid and the row count."""
    rows = full_rows(grid)
    if not rows:
        return grid, 0
    logger.debug("clearing rows %s", rows)
    return clear_rows(grid, rows), len(rows)


def is_over(grid: Grid) -> bool:
    return bool(np.any(grid.cells[0, :] != 0))
