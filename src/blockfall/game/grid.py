from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Sequence

import numpy as np

if TYPE_CHECKING:
    from .pieces import Piece


@dataclass(frozen=True, eq=False)
class Grid:
    """Fixed-size board of locked cells.

    Cells are 0 (empty) or 1 (occupied), stored row-major in a read-only int8
    array indexed as ``cells[row, col]``. Every operation returns a new Grid;
    an existing Grid is never written to.
    """

    cells: np.ndarray

    def __post_init__(self) -> None:
        cells = np.array(self.cells, dtype=np.int8)
        if cells.ndim != 2:
            raise ValueError(f"grid must be 2-dimensional, got shape {cells.shape}")
        if not np.isin(cells, (0, 1)).all():
            raise ValueError("grid cells must be 0 or 1")
        cells.setflags(write=False)
        object.__setattr__(self, "cells", cells)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise ValueError("grid rows must all have the same width")
        return cls(np.array(rows, dtype=np.int8))

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    def to_array(self) -> np.ndarray:
        return self.cells.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self.cells, other.cells)

    def __hash__(self) -> int:
        return hash((self.cells.shape, self.cells.tobytes()))


def empty(width: int, height: int) -> Grid:
    return Grid(np.zeros((height, width), dtype=np.int8))


def is_occupied(grid: Grid, col: int, row: int) -> bool:
    if not (0 <= col < grid.width and 0 <= row < grid.height):
        raise IndexError(f"cell ({col}, {row}) is outside a {grid.width}x{grid.height} grid")
    return bool(grid.cells[row, col])


def stamp(grid: Grid, piece: "Piece") -> Grid:
    """Return a copy of ``grid`` with the piece's cells set.

    Cells above the top row are dropped.
    """
    cells = grid.to_array()
    for x, y in piece.cells():
        if y >= 0:
            cells[y, x] = 1
    return Grid(cells)


def is_row_full(grid: Grid, row: int) -> bool:
    if not 0 <= row < grid.height:
        raise IndexError(f"row {row} is outside a grid of height {grid.height}")
    return bool(np.all(grid.cells[row, :] != 0))


def full_rows(grid: Grid) -> List[int]:
    return [int(r) for r in np.where(np.all(grid.cells != 0, axis=1))[0]]


def clear_rows(grid: Grid, rows: Iterable[int]) -> Grid:
    """Remove ``rows`` together and pad the top with as many empty rows."""
    doomed = sorted(set(rows))
    if not doomed:
        return grid
    for row in doomed:
        if not 0 <= row < grid.height:
            raise IndexError(f"row {row} is outside a grid of height {grid.height}")
    kept = np.delete(grid.cells, doomed, axis=0)
    padding = np.zeros((len(doomed), grid.width), dtype=np.int8)
    return Grid(np.vstack((padding, kept)))
