from __future__ import annotations

from .grid import Grid
from .pieces import Piece


def can_place(grid: Grid, piece: Piece, dx: int = 0, dy: int = 0) -> bool:
    """True if ``piece`` shifted by (dx, dy) stays on the board without overlap.

    Cells above the top row (y < 0) only need a legal column.
    """
    for x, y in piece.cells(dx, dy):
        if not 0 <= x < grid.width:
            return False
        if y >= grid.height:
            return False
        if y >= 0 and grid.cells[y, x] != 0:
            return False
    return True
