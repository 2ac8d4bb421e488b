from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

import numpy as np

from .grid import GameGrid, Coordinate
from .pieces import Piece
from .rules import ScoringRules


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


@dataclass
class GameConfig:
    random_seed: Optional[int] = None


@dataclass
class LockResult:
    cells_locked: int
    lines_cleared: int
    game_over: bool


class FallingBlockGame:
    """Falling-block state machine driven by ``update(dt)`` and player commands.

    The game is Running until a freshly promoted piece cannot spawn, after
    which it is GameOver for good: ``update`` and every command become no-ops.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.drop_timer = 0.0
        self.drop_interval = self.rules.drop_interval(0)
        self.game_over = False
        self.last_lock: Optional[LockResult] = None
        # Lookahead is drawn before the active piece
        self.next_piece = Piece.random(self.rng)
        self.active_piece = Piece.random(self.rng)

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.drop_timer = 0.0
        self.drop_interval = self.rules.drop_interval(0)
        self.game_over = False
        self.last_lock = None
        self.next_piece = Piece.random(self.rng)
        self.active_piece = Piece.random(self.rng)

    # Frame driver

    def update(self, dt: float) -> None:
        if self.game_over:
            return
        self.drop_timer += dt
        if self.drop_timer >= self.drop_interval:
            self.drop_timer = 0.0
            self._gravity_step()

    def _gravity_step(self) -> None:
        if self.active_piece.can_move_down(self.grid.grid):
            self.active_piece.move_down()
        else:
            self._lock_piece()

    def _lock_piece(self) -> LockResult:
        cells = self.grid.lock(self.active_piece.cells, int(self.active_piece.kind))
        lines = self._clear_lines()
        self._spawn_piece()
        self.pieces_locked += 1
        self.last_lock = LockResult(cells_locked=cells, lines_cleared=lines, game_over=self.game_over)
        return self.last_lock

    def _clear_lines(self) -> int:
        lines = self.grid.clear_full_lines()
        self.lines_cleared_total += lines
        self.score += self.rules.score_for_lines(lines)
        self.drop_interval = self.rules.drop_interval(self.score)
        return lines

    def _spawn_piece(self) -> None:
        self.active_piece = self.next_piece
        self.next_piece = Piece.random(self.rng)
        if not self.active_piece.can_spawn(self.grid.grid):
            self.game_over = True

    # Player commands

    def move_piece_left(self) -> bool:
        if self.game_over or not self.active_piece.can_move_left(self.grid.grid):
            return False
        self.active_piece.move_left()
        return True

    def move_piece_right(self) -> bool:
        if self.game_over or not self.active_piece.can_move_right(self.grid.grid):
            return False
        self.active_piece.move_right()
        return True

    def rotate_piece(self) -> bool:
        if self.game_over:
            return False
        return self.active_piece.rotate(self.grid.grid)

    def soft_drop(self) -> bool:
        if self.game_over:
            return False
        self.drop_timer = 0.0
        self._gravity_step()
        return True

    def hard_drop(self) -> int:
        """Drop to the resting row, then lock, clear and spawn. Returns rows fallen."""
        if self.game_over:
            return 0
        rows = 0
        while self.active_piece.can_move_down(self.grid.grid):
            self.active_piece.move_down()
            rows += 1
        self._lock_piece()
        return rows

    def apply(self, action: Action) -> bool:
        """Dispatch a discrete action; returns whether the state changed."""
        if action == Action.LEFT:
            return self.move_piece_left()
        if action == Action.RIGHT:
            return self.move_piece_right()
        if action == Action.ROTATE:
            return self.rotate_piece()
        if action == Action.SOFT_DROP:
            return self.soft_drop()
        if action == Action.HARD_DROP:
            if self.game_over:
                return False
            self.hard_drop()
            return True
        return False

    # Read-only queries

    def grid_snapshot(self) -> np.ndarray:
        return self.grid.clone_state()

    def ghost_piece(self) -> Piece:
        """Copy of the active piece translated to where it would land."""
        grid = self.grid.grid
        probe = self.active_piece.copy()
        distance = 0
        while probe.can_move_down(grid):
            probe.move_down()
            distance += 1
        return self.active_piece.translated(0, distance)

    def ghost_cells(self) -> List[Coordinate]:
        return list(self.ghost_piece().cells)

    def level(self) -> int:
        return self.rules.level(self.score)

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if not self.game_over:
            for x, y in self.active_piece.cells:
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.active_piece.kind)
        return state

    def get_game_stats(self) -> dict:
        return {
            "score": self.score,
            "lines_cleared": self.lines_cleared_total,
            "pieces_locked": self.pieces_locked,
            "level": self.level(),
            "drop_interval": self.drop_interval,
            "game_over": self.game_over,
        }
