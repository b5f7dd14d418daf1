"""Game module for blockfall.

Exports the game-state reducer and the pieces it is built from:
- Grid: immutable occupancy matrix of locked cells
- Piece, ShapeKind: falling pieces drawn from the fixed shape catalog
- RandomRandomizer, ScriptedRandomizer: injectable sources for new pieces
- can_place: move validator shared by movement and gravity
- lock, resolve_clears, is_over: locking, row clearing and game-over checks
- ScoringRules: score and level increments
- BlockfallGame, GameState, Command: the reducer and its inputs/outputs
"""

from .grid import Grid
from .pieces import (
    SHAPE_CATALOG,
    SHAPES,
    Piece,
    RandomRandomizer,
    Randomizer,
    ScriptedRandomizer,
    Shape,
    ShapeKind,
    spawn,
)
from .moves import can_place
from .clearing import is_over, lock, resolve_clears
from .rules import ScoringRules
from .core import BlockfallGame, Command, GameConfig, GameState

__all__ = [
    "Grid",
    "SHAPE_CATALOG",
    "SHAPES",
    "Piece",
    "RandomRandomizer",
    "Randomizer",
    "ScriptedRandomizer",
    "Shape",
    "ShapeKind",
    "spawn",
    "can_place",
    "is_over",
    "lock",
    "resolve_clears",
    "ScoringRules",
    "BlockfallGame",
    "Command",
    "GameConfig",
    "GameState",
]
