"""Game module for Falling Blocks RL.

Exports the core game engine and supporting classes:
- GameGrid: Fixed 20x10 board and line clearing
- Piece: Four-cell piece with movement, collision checks and rotation
- PieceType: Enum of the seven piece variants
- ScoringRules: Line score and drop interval configuration
- FallingBlockGame: Gravity/lock/clear/spawn state machine
"""

from .grid import GameGrid, ROWS, COLS
from .pieces import Piece, PieceType, SPAWN_TEMPLATES
from .rules import ScoringRules
from .core import FallingBlockGame, GameConfig, LockResult, Action

__all__ = [
    "GameGrid",
    "ROWS",
    "COLS",
    "Piece",
    "PieceType",
    "SPAWN_TEMPLATES",
    "ScoringRules",
    "FallingBlockGame",
    "GameConfig",
    "LockResult",
    "Action",
]
