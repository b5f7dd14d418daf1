from __future__ import annotations

from typing import Tuple

import pygame

from blockfall.game import GameState, Shape

BACKGROUND = (10, 10, 14)
EMPTY = (30, 30, 36)
LOCKED = (70, 200, 120)
ACTIVE = (200, 180, 60)
TEXT = (230, 230, 230)
GAME_OVER = (255, 100, 100)


class Renderer:
    """Draws a GameState: board, falling piece, next-piece preview and status."""

    def __init__(self, cell_size: int = 20, margin: int = 20, panel_cells: int = 8) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        board_w = width * self.cell_size
        board_h = height * self.cell_size
        panel_w = self.panel_cells * self.cell_size
        return self.margin * 3 + board_w + panel_w, self.margin * 2 + board_h

    def _cell_rect(self, x0: int, y0: int, col: int, row: int, size: int) -> pygame.Rect:
        return pygame.Rect(x0 + col * size, y0 + row * size, size - 1, size - 1)

    def _draw_board(self, screen: pygame.Surface, state: GameState) -> None:
        cells = state.grid.cells
        h, w = cells.shape
        for y in range(h):
            for x in range(w):
                color = LOCKED if cells[y, x] else EMPTY
                pygame.draw.rect(screen, color, self._cell_rect(self.margin, self.margin, x, y, self.cell_size))
        for x, y in state.active_piece.cells():
            if 0 <= y < h and 0 <= x < w:
                pygame.draw.rect(screen, ACTIVE, self._cell_rect(self.margin, self.margin, x, y, self.cell_size))

    def _draw_preview(self, screen: pygame.Surface, shape: Shape, x0: int, y0: int) -> None:
        # Half-size cells, like a thumbnail
        size = max(4, self.cell_size // 2)
        for row, line in enumerate(shape):
            for col, cell in enumerate(line):
                if cell:
                    pygame.draw.rect(screen, LOCKED, self._cell_rect(x0, y0, col, row, size))

    def draw(self, screen: pygame.Surface, state: GameState) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        screen.fill(BACKGROUND)
        self._draw_board(screen, state)

        x_panel = self.margin * 2 + state.grid.width * self.cell_size
        y = self.margin
        screen.blit(self._font.render("Next", True, TEXT), (x_panel, y))
        self._draw_preview(screen, state.next_shape, x_panel, y + 24)
        y += 24 + 5 * self.cell_size // 2
        for line in (f"Score: {state.score}", f"Level: {state.level}", f"High score: {state.high_score}"):
            screen.blit(self._font.render(line, True, TEXT), (x_panel, y))
            y += 24
        if state.ended:
            over = self._font.render("Game Over - Press R to restart", True, GAME_OVER)
            screen.blit(over, (self.margin, 2))
        pygame.display.flip()
