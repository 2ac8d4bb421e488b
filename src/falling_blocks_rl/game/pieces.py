from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np

from .grid import COLS, ROWS


Cell = Tuple[int, int]  # (col, row)


class PieceType(IntEnum):
    L_LEFT = 1
    L_RIGHT = 2
    LONG = 3
    S1 = 4
    S2 = 5
    SQUARE = 6
    T = 7

    @property
    def tag(self) -> str:
        return self.name.lower()

    @classmethod
    def from_tag(cls, tag: str) -> "PieceType":
        return cls[tag.upper()]


# Absolute (col, row) cells each variant occupies when it enters the board.
SPAWN_TEMPLATES: Dict[PieceType, Tuple[Cell, ...]] = {
    PieceType.LONG: ((3, -1), (4, -1), (5, -1), (6, -1)),
    PieceType.S1: ((4, -1), (5, -1), (5, 0), (6, 0)),
    PieceType.S2: ((4, 0), (5, 0), (5, -1), (6, -1)),
    PieceType.L_LEFT: ((4, -1), (4, 0), (5, 0), (6, 0)),
    PieceType.L_RIGHT: ((4, 0), (5, 0), (6, 0), (6, -1)),
    PieceType.T: ((4, 0), (5, 0), (5, -1), (6, 0)),
    PieceType.SQUARE: ((5, -1), (5, 0), (6, -1), (6, 0)),
}


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def _is_free(grid: np.ndarray, col: int, row: int) -> bool:
    """Bounds plus occupancy test; rows above the board always count as free."""
    if col < 0 or col >= COLS or row >= ROWS:
        return False
    return row < 0 or grid[row, col] == 0


@dataclass
class Piece:
    """Four-cell piece stored as absolute board coordinates.

    Movement is unconditional; callers validate first with the ``can_*``
    checks, which read the grid (a ``(ROWS, COLS)`` array, 0 = empty) and
    never write to it.
    """

    cells: List[Cell]
    kind: PieceType

    def __post_init__(self) -> None:
        if len(self.cells) != 4:
            raise ValueError(f"a piece has exactly 4 cells, got {len(self.cells)}")
        self.cells = [(int(x), int(y)) for x, y in self.cells]
        self.kind = PieceType(self.kind)

    @classmethod
    def spawn(cls, kind: PieceType) -> "Piece":
        return cls(SPAWN_TEMPLATES[PieceType(kind)], kind)

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "Piece":
        rng = rng or random.Random()
        return cls.spawn(rng.choice(list(PieceType)))

    def copy(self) -> "Piece":
        return Piece(list(self.cells), self.kind)

    def translated(self, dx: int, dy: int) -> "Piece":
        return Piece([(x + dx, y + dy) for x, y in self.cells], self.kind)

    # Movement

    def _shift(self, dx: int, dy: int) -> None:
        self.cells = [(x + dx, y + dy) for x, y in self.cells]

    def move_down(self) -> None:
        self._shift(0, 1)

    def move_up(self) -> None:
        self._shift(0, -1)

    def move_left(self) -> None:
        self._shift(-1, 0)

    def move_right(self) -> None:
        self._shift(1, 0)

    # Validity checks

    def can_move_down(self, grid: np.ndarray) -> bool:
        return all(_is_free(grid, x, y + 1) for x, y in self.cells)

    def can_move_left(self, grid: np.ndarray) -> bool:
        return all(_is_free(grid, x - 1, y) for x, y in self.cells)

    def can_move_right(self, grid: np.ndarray) -> bool:
        return all(_is_free(grid, x + 1, y) for x, y in self.cells)

    def can_spawn(self, grid: np.ndarray) -> bool:
        return all(_is_free(grid, x, y) for x, y in self.cells)

    # Rotation

    def rotated_cells(self) -> List[Cell]:
        """Cells after a quarter turn about the (unrounded) centroid."""
        cx = sum(x for x, _ in self.cells) / len(self.cells)
        cy = sum(y for _, y in self.cells) / len(self.cells)
        return [
            (_round_half_up(cx - (y - cy)), _round_half_up(cy + (x - cx)))
            for x, y in self.cells
        ]

    def can_rotate(self, grid: np.ndarray) -> bool:
        return all(_is_free(grid, x, y) for x, y in self.rotated_cells())

    def rotate(self, grid: np.ndarray) -> bool:
        """Rotate in place if every rotated cell is free; no wall kicks."""
        candidate = self.rotated_cells()
        if not all(_is_free(grid, x, y) for x, y in candidate):
            return False
        self.cells = candidate
        return True
