from __future__ import annotations

import logging
from typing import Dict, Optional

import pygame

from blockfall.game import BlockfallGame, Command, GameConfig
from .renderer import Renderer

logger = logging.getLogger(__name__)

KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_a: Command.MOVE_LEFT,
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_d: Command.MOVE_RIGHT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_s: Command.SOFT_DROP,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_r: Command.RESTART,
}

TICK_EVENT = pygame.USEREVENT + 1


def run(config: Optional[GameConfig] = None) -> None:
    pygame.init()
    try:
        game = BlockfallGame(config)
        renderer = Renderer()
        screen = pygame.display.set_mode(renderer.window_size(game.config.width, game.config.height))
        pygame.display.set_caption("blockfall")
        clock = pygame.time.Clock()

        # Gravity clock; its events join the key events in one ordered queue.
        pygame.time.set_timer(TICK_EVENT, game.config.tick_ms)
        state = game.initial_state()
        renderer.draw(screen, state)

        running = True
        while running:
            for event in pygame.event.get():
                command = None
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == TICK_EVENT:
                    command = Command.TICK
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        command = KEY_TO_COMMAND.get(event.key)
                if command is not None:
                    was_ended = state.ended
                    state = game.step(state, command)
                    if state.ended and not was_ended:
                        logger.info("game over: score %d, high score %d", state.score, state.high_score)
                    renderer.draw(screen, state)
            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
