from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import BlockfallGame, Command, GameConfig, GameState, RandomRandomizer, ScoringRules, can_place

# Agent actions; every step is followed by one gravity tick.
ACTION_COMMANDS: Tuple[Optional[Command], ...] = (
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.SOFT_DROP,
    None,  # wait for gravity
)

ACTIVE_CELL = 2


def board_with_piece(state: GameState) -> np.ndarray:
    """Locked cells as 1 with the active piece overlaid as 2."""
    board = state.grid.to_array()
    h, w = board.shape
    for x, y in state.active_piece.cells():
        if 0 <= y < h and 0 <= x < w:
            board[y, x] = ACTIVE_CELL
    return board


def compute_action_mask(state: GameState) -> np.ndarray:
    mask = np.ones((len(ACTION_COMMANDS),), dtype=np.bool_)
    if state.ended:
        return mask
    mask[0] = can_place(state.grid, state.active_piece, -1, 0)
    mask[1] = can_place(state.grid, state.active_piece, 1, 0)
    mask[2] = can_place(state.grid, state.active_piece, 0, 1)
    return mask


class BlockfallEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 2}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 rules: Optional[ScoringRules] = None,
                 max_steps: int = 10000,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = BlockfallGame(config, rules)
        self.render_mode = render_mode
        self.max_steps = int(max_steps)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)

        cfg = self.game.config
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=ACTIVE_CELL, shape=(cfg.height, cfg.width), dtype=np.int8),
                "next_piece": spaces.Discrete(7),
                "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
            }
        )
        self.action_space = spaces.Discrete(len(ACTION_COMMANDS))

        self.state: GameState = self.game.initial_state()
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": board_with_piece(self.state).astype(np.int8),
            "next_piece": int(self.state.next_piece.kind),
            "level": np.array([self.state.level], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": compute_action_mask(self.state),
            "score": self.state.score,
            "level": self.state.level,
            "high_score": self.state.high_score,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.state)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Start a new episode.

        A seed reseeds a ``RandomRandomizer`` and rewinds the draw counter; any
        other injected randomizer is kept and replayed from its first draw.
        Without a seed the piece sequence carries on from the last episode.
        """
        super().reset(seed=seed)
        draws = self.state.draws
        if seed is not None:
            if isinstance(self.game.randomizer, RandomRandomizer):
                self.game.randomizer = RandomRandomizer(seed)
            draws = 0
        # High score survives resets the same way it survives a restart.
        high_score = max(self.state.high_score, self.state.score)
        self.state = self.game.initial_state(high_score=high_score, draws=draws)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        if not self.action_space.contains(int(action)):
            raise ValueError(f"action {action!r} is outside {self.action_space}")
        before = self.state.score

        command = ACTION_COMMANDS[int(action)]
        if command is not None:
            self.state = self.game.step(self.state, command)
        self.state = self.game.step(self.state, Command.TICK)
        self._steps += 1

        terminated = self.state.ended
        truncated = not terminated and self._steps >= self.max_steps
        reward = float(self.state.score - before) + self.step_penalty
        if terminated:
            reward += self.terminal_penalty
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            board = board_with_piece(self.state)
            cell = 12
            h, w = board.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            palette = {0: (30, 30, 36), 1: (70, 200, 120), ACTIVE_CELL: (200, 180, 60)}
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = palette[int(board[y, x])]
            return img
        return None

    def close(self) -> None:
        pass
