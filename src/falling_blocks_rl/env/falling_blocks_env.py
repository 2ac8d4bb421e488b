from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks_rl.game import Action, COLS, ROWS, FallingBlockGame, GameConfig, PieceType
from falling_blocks_rl.visualization.palette import color_for_value

# Rows above the board that the active-piece observation can report
SPAWN_BUFFER = 4


def _compute_action_mask(game: FallingBlockGame) -> np.ndarray:
    mask = np.zeros((len(Action),), dtype=np.bool_)
    if game.game_over:
        mask[Action.NONE] = True
        return mask
    grid = game.grid.grid
    piece = game.active_piece
    mask[Action.LEFT] = piece.can_move_left(grid)
    mask[Action.RIGHT] = piece.can_move_right(grid)
    mask[Action.ROTATE] = piece.can_rotate(grid)
    mask[Action.SOFT_DROP] = True
    mask[Action.HARD_DROP] = True
    mask[Action.NONE] = True
    return mask


class FallingBlocksEnv(gym.Env):
    """One command per step followed by one gravity tick."""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 line_reward_scale: float = 0.01,
                 invalid_action_penalty: float = 0.0,
                 terminal_penalty: float = 1.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = FallingBlockGame(config)
        self.render_mode = render_mode

        self.line_reward_scale = float(line_reward_scale)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        n_types = len(PieceType) + 1
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=len(PieceType), shape=(ROWS, COLS), dtype=np.int8),
                "active": spaces.Box(low=-SPAWN_BUFFER, high=ROWS - 1, shape=(4, 2), dtype=np.int8),
                "active_type": spaces.Discrete(n_types),
                "next_type": spaces.Discrete(n_types),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        active = np.array(self.game.active_piece.cells, dtype=np.int64)
        active[:, 0] = np.clip(active[:, 0], 0, COLS - 1)
        active[:, 1] = np.clip(active[:, 1], -SPAWN_BUFFER, ROWS - 1)
        obs: Dict[str, Any] = {
            "grid": self.game.grid_snapshot(),
            "active": active.astype(np.int8),
            "active_type": int(self.game.active_piece.kind),
            "next_type": int(self.game.next_piece.kind),
        }
        return obs

    def _get_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_locked": self.game.pieces_locked,
            "holes": self.game.grid.count_holes(),
            "max_height": self.game.grid.get_max_height(),
            "steps": self._steps,
        }
        return info

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action):
        action = Action(int(action))
        score_before = self.game.score

        changed = self.game.apply(action)
        # The gravity tick is skipped when the action already locked a piece
        if action not in (Action.HARD_DROP, Action.SOFT_DROP):
            self.game.update(self.game.drop_interval)

        reward_components: Dict[str, float] = {
            "lines": self.line_reward_scale * float(self.game.score - score_before),
        }
        if not changed and action in (Action.LEFT, Action.RIGHT, Action.ROTATE):
            reward_components["invalid"] = -self.invalid_action_penalty

        terminated = bool(self.game.game_over)
        if terminated:
            reward_components["terminal"] = -self.terminal_penalty
        self._steps += 1
        truncated = not terminated and self._steps >= self.max_episode_steps

        reward = float(sum(reward_components.values()))
        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            if self._last_obs is None:
                state = self.game.get_state()
            else:
                # Draw what the agent last observed, falling piece as negative values
                state = self._last_obs["grid"].copy()
                if not self.game.game_over:
                    for x, y in self._last_obs["active"]:
                        if 0 <= y < ROWS:
                            state[y, x] = -int(self._last_obs["active_type"])
            cell = 12
            img = np.zeros((ROWS * cell, COLS * cell, 3), dtype=np.uint8)
            for y in range(ROWS):
                for x in range(COLS):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(state[y, x]))
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass
