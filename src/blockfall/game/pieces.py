from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from blockfall.exceptions import RandomizerExhausted


class ShapeKind(IntEnum):
    O = 0  # Square
    I = 1  # Line
    T = 2
    L = 3
    J = 4
    S = 5
    Z = 6


Shape = Tuple[Tuple[int, ...], ...]


# Fixed orientations; there is no rotation.
SHAPES: Mapping[ShapeKind, Shape] = {
    ShapeKind.O: ((1, 1), (1, 1)),
    ShapeKind.I: ((1, 1, 1, 1),),
    ShapeKind.T: ((0, 1, 0), (1, 1, 1)),
    ShapeKind.L: ((1, 0), (1, 0), (1, 1)),
    ShapeKind.J: ((0, 1), (0, 1), (1, 1)),
    ShapeKind.S: ((0, 1, 1), (1, 1, 0)),
    ShapeKind.Z: ((1, 1, 0), (0, 1, 1)),
}

SHAPE_CATALOG: Tuple[ShapeKind, ...] = tuple(ShapeKind)


def shape_width(kind: ShapeKind) -> int:
    return len(SHAPES[kind][0])


def shape_height(kind: ShapeKind) -> int:
    return len(SHAPES[kind])


@dataclass(frozen=True)
class Piece:
    kind: ShapeKind
    x: int
    y: int = 0

    @property
    def shape(self) -> Shape:
        return SHAPES[self.kind]

    @property
    def width(self) -> int:
        return shape_width(self.kind)

    @property
    def height(self) -> int:
        return shape_height(self.kind)

    def translated(self, dx: int, dy: int) -> "Piece":
        return Piece(self.kind, self.x + dx, self.y + dy)

    def cells(self, dx: int = 0, dy: int = 0) -> List[Tuple[int, int]]:
        """Board (x, y) of every occupied shape cell, offset by (dx, dy)."""
        cells: List[Tuple[int, int]] = []
        for row, line in enumerate(self.shape):
            for col, cell in enumerate(line):
                if cell:
                    cells.append((self.x + col + dx, self.y + row + dy))
        return cells


class Randomizer(Protocol):
    """Source of the two draws the block factory needs.

    Both draws depend only on ``draw``, the number of pieces spawned before,
    so replaying a snapshot replays the same pieces.
    """

    def choose(self, n: int, draw: int) -> int:
        """Index in ``[0, n)``."""

    def column(self, upper: int, draw: int) -> int:
        """Column in ``[0, upper]``."""


class RandomRandomizer:
    """Uniform draws keyed on ``(seed, draw)``; an unseeded one picks its own seed."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed if seed is not None else random.randrange(2**32)

    def _rng(self, draw: int, what: str) -> random.Random:
        return random.Random(f"{self.seed}:{draw}:{what}")

    def choose(self, n: int, draw: int) -> int:
        return self._rng(draw, "shape").randrange(n)

    def column(self, upper: int, draw: int) -> int:
        return self._rng(draw, "column").randint(0, upper)


class ScriptedRandomizer:
    """Replays a fixed list of ``(shape_index, column)`` draws.

    Columns are clamped to the legal spawn range so a script written for one
    shape stays valid if the catalog changes.
    """

    def __init__(self, draws: Iterable[Tuple[int, int]]) -> None:
        self._draws = list(draws)

    def _entry(self, draw: int) -> Tuple[int, int]:
        if not 0 <= draw < len(self._draws):
            raise RandomizerExhausted(f"scripted randomizer has no draw {draw}")
        return self._draws[draw]

    def choose(self, n: int, draw: int) -> int:
        return self._entry(draw)[0] % n

    def column(self, upper: int, draw: int) -> int:
        return max(0, min(self._entry(draw)[1], upper))


def spawn(catalog: Sequence[ShapeKind], grid_width: int, randomizer: Randomizer, draw: int = 0) -> Piece:
    kind = catalog[randomizer.choose(len(catalog), draw)]
    x = randomizer.column(grid_width - shape_width(kind), draw)
    return Piece(kind=kind, x=x, y=0)
