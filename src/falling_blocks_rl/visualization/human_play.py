from __future__ import annotations

import argparse
from typing import Callable, Dict, Optional

import pygame

from falling_blocks_rl.game import FallingBlockGame, GameConfig
from .renderer import Renderer


KEY_TO_COMMAND: Dict[int, Callable[[FallingBlockGame], object]] = {
    pygame.K_LEFT: FallingBlockGame.move_piece_left,
    pygame.K_RIGHT: FallingBlockGame.move_piece_right,
    pygame.K_UP: FallingBlockGame.rotate_piece,
    pygame.K_DOWN: FallingBlockGame.hard_drop,
    pygame.K_SPACE: FallingBlockGame.hard_drop,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--fps", type=int, default=60)
    return p


def run(seed: Optional[int] = None, fps: int = 60) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = FallingBlockGame(GameConfig(random_seed=seed))
        renderer = Renderer()
        screen = pygame.display.set_mode(renderer.size)
        pygame.display.set_caption("Falling Blocks - Human Play")

        running = True
        while running:
            dt = clock.tick(fps)
            # One command per key press; key repeat stays disabled
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r:
                        game.reset()
                    elif not game.game_over:
                        command = KEY_TO_COMMAND.get(event.key)
                        if command is not None:
                            command(game)

            game.update(dt)
            renderer.draw(screen, game)
        print(f"Final score: {game.score}  lines: {game.lines_cleared_total}")
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    run(seed=args.seed, fps=args.fps)


if __name__ == "__main__":  # pragma: no cover
    main()
