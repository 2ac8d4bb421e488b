from __future__ import annotations

from typing import Iterable, Mapping, Optional, Tuple

import pygame

from falling_blocks_rl.game import COLS, ROWS, FallingBlockGame, Piece, PieceType
from .palette import DEFAULT_COLORS, RGB

BLOCK_SIZE = 30
PREVIEW_ORIGIN = (200, 50)
GHOST_ALPHA = 77  # ~0.3 of 255


def preview_position(origin: Tuple[int, int], cell: Tuple[int, int], block_size: int = BLOCK_SIZE) -> Tuple[float, float]:
    """Block coordinates of a lookahead cell drawn at a pixel origin."""
    ox, oy = origin
    cx, cy = cell
    return ox / block_size + cx - 2, oy / block_size + cy + 1


def _make_block(color: RGB, size: int) -> pygame.Surface:
    surf = pygame.Surface((size, size), pygame.SRCALPHA)
    surf.fill(color, pygame.Rect(1, 1, size - 2, size - 2))
    pygame.draw.rect(surf, (255, 255, 255), pygame.Rect(1, 1, size - 2, size - 2), 2)
    pygame.draw.rect(surf, (0, 0, 0), pygame.Rect(3, 3, size - 6, size - 6), 1)
    return surf


class Renderer:
    """Draws a game each frame; owns the variant -> block sprite table."""

    def __init__(self, colors: Optional[Mapping[str, RGB]] = None, block_size: int = BLOCK_SIZE) -> None:
        self.block_size = block_size
        self.colors = dict(colors or DEFAULT_COLORS)
        self.sprites = {tag: _make_block(color, block_size) for tag, color in self.colors.items()}
        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    @property
    def size(self) -> Tuple[int, int]:
        return COLS * self.block_size + 8 * self.block_size, ROWS * self.block_size

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None or self._big_font is None:
            self._font = pygame.font.SysFont(None, 28)
            self._big_font = pygame.font.SysFont(None, 44)
        return self._font, self._big_font

    def draw_block(self, screen: pygame.Surface, x: float, y: float, tag: str, alpha: int = 255) -> None:
        pos = (int(x * self.block_size), int(y * self.block_size))
        sprite = self.sprites.get(tag)
        if sprite is None:
            pygame.draw.rect(screen, (128, 128, 128), pygame.Rect(pos, (self.block_size, self.block_size)))
            return
        if alpha < 255:
            sprite = sprite.copy()
            sprite.set_alpha(alpha)
        screen.blit(sprite, pos)

    def _draw_cells(self, screen: pygame.Surface, cells: Iterable[Tuple[int, int]], tag: str, alpha: int = 255) -> None:
        for x, y in cells:
            self.draw_block(screen, x, y, tag, alpha)

    def draw_grid(self, screen: pygame.Surface, game: FallingBlockGame) -> None:
        grid = game.grid_snapshot()
        for y in range(ROWS):
            for x in range(COLS):
                v = int(grid[y, x])
                if v:
                    self.draw_block(screen, x, y, PieceType(v).tag)

    def draw_preview(self, screen: pygame.Surface, piece: Piece, origin: Tuple[int, int] = PREVIEW_ORIGIN) -> None:
        for cell in piece.cells:
            x, y = preview_position(origin, cell, self.block_size)
            self.draw_block(screen, x, y, piece.kind.tag)

    def draw(self, screen: pygame.Surface, game: FallingBlockGame) -> None:
        font, big_font = self._fonts()
        screen.fill((10, 10, 14))
        self.draw_grid(screen, game)
        if not game.game_over:
            tag = game.active_piece.kind.tag
            self._draw_cells(screen, game.ghost_cells(), tag, GHOST_ALPHA)
            self._draw_cells(screen, game.active_piece.cells, tag)
            screen.blit(font.render(f"Score: {game.score}", True, (255, 255, 255)), (10, 10))
            screen.blit(font.render(f"Level: {game.level()}", True, (255, 255, 255)), (10, 34))
            screen.blit(font.render("Next:", True, (255, 255, 255)), (PREVIEW_ORIGIN[0], 10))
            self.draw_preview(screen, game.next_piece)
        else:
            screen.blit(big_font.render("GAME OVER", True, (255, 255, 255)), (30, 280))
        pygame.display.flip()
