from __future__ import annotations

from typing import Iterable, List, Tuple

import numpy as np


ROWS = 20
COLS = 10

Coordinate = Tuple[int, int]


class GameGrid:
    """Fixed 20x10 board of settled blocks.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are the ``PieceType`` of the piece that settled there.
    Row 0 is the top of the visible board; negative rows are the spawn
    buffer and are never stored.
    """

    def __init__(self, width: int = COLS, height: int = ROWS) -> None:
        if (int(height), int(width)) != (ROWS, COLS):
            raise ValueError(f"grid is fixed at {ROWS}x{COLS}, got {height}x{width}")
        self.width = COLS
        self.height = ROWS
        self.grid = np.zeros((ROWS, COLS), dtype=np.int8)

    @classmethod
    def from_array(cls, array) -> "GameGrid":
        values = np.asarray(array, dtype=np.int8)
        if values.shape != (ROWS, COLS):
            raise ValueError(f"grid is fixed at {ROWS}x{COLS}, got {values.shape}")
        new_grid = cls()
        new_grid.grid = values.copy()
        return new_grid

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_empty(self, x: int, y: int) -> bool:
        if y < 0 and 0 <= x < self.width:
            return True
        if not self.is_inside(x, y):
            raise IndexError(f"cell ({x}, {y}) is outside the board")
        return self.grid[y, x] == 0

    def lock(self, cells: Iterable[Coordinate], value: int) -> int:
        """Write `value` into every visible cell and return how many were written."""
        written = 0
        for x, y in cells:
            if not self.is_inside(x, y):
                continue
            self.grid[y, x] = value
            written += 1
        return written

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.grid != 0, axis=1))[0]]

    def clear_full_lines(self) -> int:
        full = np.all(self.grid != 0, axis=1)
        num = int(full.sum())
        if num == 0:
            return 0
        # Remove full rows and add empty rows at the top
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, self.grid[~full]))
        assert self.grid.shape == (ROWS, COLS)
        return num

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            column = self.grid[:, x]
            seen_block = False
            for cell in column:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
