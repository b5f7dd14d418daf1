from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Iterable, Iterator, Optional, Sequence

from blockfall.exceptions import InvalidConfigError

from . import grid as grid_ops
from .clearing import is_over, lock, resolve_clears
from .grid import Grid
from .moves import can_place
from .pieces import (
    SHAPE_CATALOG,
    Piece,
    RandomRandomizer,
    Randomizer,
    Shape,
    ShapeKind,
    shape_height,
    shape_width,
    spawn,
)
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    TICK = 3
    RESTART = 4


MOVE_OFFSETS = {
    Command.MOVE_LEFT: (-1, 0),
    Command.MOVE_RIGHT: (1, 0),
    Command.SOFT_DROP: (0, 1),
}


@dataclass(frozen=True)
class GameConfig:
    width: int = 10
    height: int = 20
    # Gravity period for the front-end clock; the reducer never reads it.
    tick_ms: int = 500
    random_seed: Optional[int] = None
    catalog: Sequence[ShapeKind] = field(default=SHAPE_CATALOG)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidConfigError(f"grid must be at least 1x1, got {self.width}x{self.height}")
        if self.tick_ms <= 0:
            raise InvalidConfigError(f"tick_ms must be positive, got {self.tick_ms}")
        object.__setattr__(self, "catalog", tuple(ShapeKind(k) for k in self.catalog))
        if not self.catalog:
            raise InvalidConfigError("shape catalog is empty")
        for kind in self.catalog:
            if shape_width(kind) > self.width:
                raise InvalidConfigError(f"{kind.name} shape is wider than a {self.width}-column grid")
            if shape_height(kind) > self.height:
                raise InvalidConfigError(f"{kind.name} shape is taller than a {self.height}-row grid")


@dataclass(frozen=True)
class GameState:
    ended: bool
    grid: Grid
    active_piece: Piece
    next_piece: Piece
    score: int = 0
    level: int = 1
    can_restart: bool = False
    high_score: int = 0
    # Pieces spawned so far; the randomizer is keyed on it.
    draws: int = 0

    @property
    def next_shape(self) -> Shape:
        return self.next_piece.shape


class BlockfallGame:
    """Reducer from (state, command) to the next immutable GameState.

    The game object only holds configuration and the randomizer. The
    randomizer is keyed on the snapshot's draw counter, so stepping the same
    snapshot twice gives equal results.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        randomizer: Optional[Randomizer] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        if randomizer is None:
            randomizer = RandomRandomizer(self.config.random_seed)
        self.randomizer = randomizer

    def spawn_piece(self, draw: int) -> Piece:
        return spawn(self.config.catalog, self.config.width, self.randomizer, draw)

    def initial_state(self, high_score: int = 0, draws: int = 0) -> GameState:
        return GameState(
            ended=False,
            grid=grid_ops.empty(self.config.width, self.config.height),
            active_piece=self.spawn_piece(draws),
            next_piece=self.spawn_piece(draws + 1),
            high_score=high_score,
            draws=draws + 2,
        )

    def step(self, state: GameState, command: Command) -> GameState:
        command = Command(command)
        if command in MOVE_OFFSETS:
            dx, dy = MOVE_OFFSETS[command]
            return self._move(state, dx, dy)
        elif command == Command.TICK:
            return self._tick(state)
        elif command == Command.RESTART:
            return self._restart(state)
        raise AssertionError(f"unhandled command {command!r}")

    def run(self, commands: Iterable[Command], state: Optional[GameState] = None) -> Iterator[GameState]:
        """Fold ``commands`` over ``state`` and yield every intermediate snapshot."""
        if state is None:
            state = self.initial_state()
        for command in commands:
            state = self.step(state, command)
            yield state

    def _move(self, state: GameState, dx: int, dy: int) -> GameState:
        if state.ended or not can_place(state.grid, state.active_piece, dx, dy):
            return state
        return replace(state, active_piece=state.active_piece.translated(dx, dy))

    def _tick(self, state: GameState) -> GameState:
        if state.ended:
            return state
        if can_place(state.grid, state.active_piece, 0, 1):
            return replace(state, active_piece=state.active_piece.translated(0, 1))

        locked = lock(state.grid, state.active_piece)
        ended = is_over(locked)
        cleared, lines = resolve_clears(locked)
        score = (
            state.score
            + self.rules.score_for_lines(lines)
            + self.rules.score_for_landing(lines, ended)
        )
        level = state.level + self.rules.levels_for_lines(lines)
        logger.debug(
            "locked %s at (%d, %d): %d rows cleared, score %d",
            state.active_piece.kind.name, state.active_piece.x, state.active_piece.y, lines, score,
        )

        if ended:
            logger.debug("game over with score %d", score)
            return replace(
                state,
                ended=True,
                can_restart=True,
                grid=cleared,
                score=score,
                level=level,
                high_score=max(state.high_score, score),
            )

        return replace(
            state,
            grid=cleared,
            score=score,
            level=level,
            active_piece=state.next_piece,
            next_piece=self.spawn_piece(state.draws),
            draws=state.draws + 1,
        )

    def _restart(self, state: GameState) -> GameState:
        if not (state.can_restart and state.ended):
            return state
        high_score = max(state.high_score, state.score)
        logger.debug("restarting, high score %d", high_score)
        return self.initial_state(high_score=high_score, draws=state.draws)
