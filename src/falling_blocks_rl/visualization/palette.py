from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

from falling_blocks_rl.game import PieceType

RGB = Tuple[int, int, int]

EMPTY_COLOR: RGB = (20, 20, 26)

DEFAULT_COLORS: Dict[str, RGB] = {
    "l_left": (255, 165, 0),   # orange
    "l_right": (0, 0, 255),    # blue
    "long": (0, 255, 255),     # cyan
    "s1": (0, 255, 0),         # green
    "s2": (255, 0, 0),         # red
    "square": (255, 255, 0),   # yellow
    "t": (170, 0, 255),        # purple
}


def color_for_value(v: int, colors: Optional[Mapping[str, RGB]] = None) -> RGB:
    """Colour for a grid value; negative values (falling piece overlay) map like positives."""
    if v == 0:
        return EMPTY_COLOR
    colors = colors or DEFAULT_COLORS
    try:
        return colors[PieceType(abs(v)).tag]
    except (ValueError, KeyError):
        return (128, 128, 128)
