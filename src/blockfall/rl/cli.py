from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from blockfall.exceptions import InvalidConfigError
from blockfall.game import GameConfig


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="blockfall")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="mode", required=True)

    play = sub.add_parser("play", help="Play with the keyboard (A/D/S to move, R to restart)")
    play.add_argument("--tick-ms", type=int, default=500, help="Gravity period in milliseconds")

    rand = sub.add_parser("random", help="Run a headless random agent")
    rand.add_argument("--episodes", type=int, default=10)
    rand.add_argument("--max-steps", type=int, default=10000)
    return p


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        config = GameConfig(
            width=args.width,
            height=args.height,
            tick_ms=getattr(args, "tick_ms", 500),
            random_seed=args.seed,
        )
    except InvalidConfigError as exc:
        parser.error(str(exc))

    if args.mode == "play":
        from blockfall.visualization.human_play import run

        run(config)
    else:
        from blockfall.rl.random_agent import run_random

        scores = run_random(args.episodes, config=config, max_steps=args.max_steps, seed=args.seed)
        for i, score in enumerate(scores):
            print(f"episode {i}: score {score}")
        if scores:
            print(f"best {max(scores)}  mean {sum(scores) / len(scores):.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
