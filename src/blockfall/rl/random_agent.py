from __future__ import annotations

import logging
from typing import List, Optional

import gymnasium as gym

import blockfall.env  # noqa: F401
from blockfall.env.wrappers import ResampleInvalidActionWrapper
from blockfall.game import GameConfig

logger = logging.getLogger(__name__)


def make_env(config: Optional[GameConfig] = None, max_steps: int = 10000, seed: Optional[int] = None) -> gym.Env:
    kwargs = {"max_steps": max_steps}
    if config is not None:
        kwargs["config"] = config
    env = gym.make("Blockfall-10x20-v0", **kwargs)
    return ResampleInvalidActionWrapper(env, seed=seed)


def run_random(episodes: int = 1, config: Optional[GameConfig] = None, max_steps: int = 10000,
               seed: Optional[int] = None) -> List[int]:
    """Play ``episodes`` games with uniformly random actions; return final scores."""
    env = make_env(config, max_steps=max_steps, seed=seed)
    scores: List[int] = []
    try:
        obs, info = env.reset(seed=seed)
        for episode in range(episodes):
            done = False
            while not done:
                action = env.action_space.sample()
                obs, reward, terminated, truncated, info = env.step(action)
                done = terminated or truncated
            scores.append(int(info["score"]))
            logger.info("episode %d: score %d, level %d", episode, info["score"], info["level"])
            obs, info = env.reset()
    finally:
        env.close()
    return scores


if __name__ == "__main__":  # pragma: no cover
    print(run_random())
