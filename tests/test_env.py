import contextlib
import io
import unittest

import numpy as np
import gymnasium as gym

import blockfall.env  # noqa: F401
from blockfall.env import BlockfallEnv
from blockfall.env.blockfall_env import ACTIVE_CELL
from blockfall.env.wrappers import ResampleInvalidActionWrapper
from blockfall.game import GameConfig, ScriptedRandomizer
from blockfall.rl.cli import main as cli_main
from blockfall.rl.random_agent import run_random


class TestBlockfallEnv(unittest.TestCase):

    def setUp(self):
        self.env = BlockfallEnv()

    def play_out(self, env, seed=0, limit=50_000):
        rng = np.random.default_rng(seed)
        total = 0.0
        for _ in range(limit):
            obs, reward, terminated, truncated, info = env.step(int(rng.integers(4)))
            total += reward
            if terminated or truncated:
                return total, info, terminated
        self.fail("episode did not finish")

    def test_reset_observation(self):
        obs, info = self.env.reset(seed=0)
        self.assertTrue(self.env.observation_space.contains(obs))
        self.assertEqual(obs["grid"].shape, (20, 10))
        self.assertEqual(int(np.sum(obs["grid"] == ACTIVE_CELL)), 4)
        self.assertEqual(info["score"], 0)
        self.assertEqual(info["level"], 1)

    def test_registered_env(self):
        env = gym.make("Blockfall-10x20-v0")
        obs, info = env.reset(seed=1)
        obs, reward, terminated, truncated, info = env.step(3)
        self.assertEqual(reward, 0.0)
        self.assertFalse(terminated)
        env.close()

    def test_each_step_applies_one_tick(self):
        self.env.game.randomizer = ScriptedRandomizer([(0, 0), (0, 0)])
        obs, info = self.env.reset(seed=0)
        self.assertEqual(list(info["action_mask"]), [False, True, True, True])
        obs, reward, terminated, truncated, info = self.env.step(1)
        piece = self.env.state.active_piece
        self.assertEqual((piece.x, piece.y), (1, 1))
        obs, reward, terminated, truncated, info = self.env.step(2)
        self.assertEqual(self.env.state.active_piece.y, 3)

    def test_seeded_reset_keeps_injected_randomizer(self):
        scripted = ScriptedRandomizer([(1, 3), (6, 0)])
        self.env.game.randomizer = scripted
        self.env.reset(seed=9)
        self.assertIs(self.env.game.randomizer, scripted)
        self.assertEqual(self.env.state.active_piece.kind.name, "I")
        self.assertEqual(self.env.state.next_piece.kind.name, "Z")

    def test_seeded_reset_replays_episode(self):
        first, _ = self.env.reset(seed=11)
        self.env.step(3)
        second, _ = self.env.reset(seed=11)
        self.assertTrue(np.array_equal(first["grid"], second["grid"]))
        self.assertEqual(first["next_piece"], second["next_piece"])

    def test_rewards_add_up_to_score(self):
        self.env.reset(seed=3)
        total, info, terminated = self.play_out(self.env)
        self.assertTrue(terminated)
        self.assertEqual(total, float(info["score"]))
        self.assertEqual(info["high_score"], info["score"])

    def test_reset_carries_high_score(self):
        self.env.reset(seed=4)
        _, info, _ = self.play_out(self.env)
        obs, info2 = self.env.reset()
        self.assertEqual(info2["score"], 0)
        self.assertEqual(info2["high_score"], info["score"])

    def test_truncation(self):
        env = BlockfallEnv(max_steps=5)
        env.reset(seed=0)
        for _ in range(4):
            _, _, terminated, truncated, _ = env.step(3)
            self.assertFalse(truncated)
        _, _, terminated, truncated, _ = env.step(3)
        self.assertTrue(truncated)
        self.assertFalse(terminated)

    def test_invalid_action(self):
        self.env.reset(seed=0)
        with self.assertRaises(ValueError):
            self.env.step(7)

    def test_rgb_render(self):
        env = BlockfallEnv(config=GameConfig(width=6, height=8), render_mode="rgb_array")
        env.reset(seed=0)
        img = env.render()
        self.assertEqual(img.shape, (8 * 12, 6 * 12, 3))
        self.assertIsNone(BlockfallEnv().render())


class TestResampleWrapper(unittest.TestCase):

    def test_blocked_move_is_resampled(self):
        env = BlockfallEnv()
        env.game.randomizer = ScriptedRandomizer([(0, 0)] * 3)
        wrapped = ResampleInvalidActionWrapper(env, seed=0)
        wrapped.reset(seed=0)
        self.assertFalse(wrapped.get_action_mask()[0])
        wrapped.step(0)
        piece = env.state.active_piece
        # Either moved right, dropped, or waited; never stuck with no effect at all
        self.assertGreaterEqual(piece.y, 1)
        self.assertIn(piece.x, (0, 1))


class TestRandomAgent(unittest.TestCase):

    def test_run_random(self):
        scores = run_random(episodes=2, config=GameConfig(width=6, height=8), seed=0)
        self.assertEqual(len(scores), 2)
        self.assertTrue(all(score >= 0 for score in scores))

    def test_cli_random_mode(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            cli_main(["--width", "6", "--height", "8", "--seed", "2", "random", "--episodes", "1"])
        self.assertIn("episode 0: score", out.getvalue())

    def test_cli_rejects_bad_config(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli_main(["--width", "2", "random"])


if __name__ == "__main__":
    unittest.main()
