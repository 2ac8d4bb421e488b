from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .falling_blocks_env import _compute_action_mask


class ActionMaskWrapper(gym.Wrapper):
    """Exposes `get_action_mask()` returning a 1D boolean mask over `Action`.

    A masked-out action is one that would leave the game unchanged
    (moving or rotating into a wall or settled blocks).
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.Discrete)

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.env.unwrapped.game)


class ResampleInvalidActionWrapper(gym.Wrapper):
    """If a sampled action is invalid, resample uniformly among valid ones.

    Useful when training without action masking.
    """

    def step(self, action):  # type: ignore[override]
        mask = self.get_action_mask()
        if 0 <= int(action) < mask.shape[0] and not bool(mask[int(action)]):
            valid_idxs = np.flatnonzero(mask)
            if valid_idxs.size > 0:
                action = int(self.np_random.choice(valid_idxs))
        return self.env.step(action)

    # Delegate mask access if the wrapped env provides it
    def get_action_mask(self) -> np.ndarray:  # type: ignore[override]
        if hasattr(self.env, "get_action_mask"):
            return getattr(self.env, "get_action_mask")()
        return _compute_action_mask(self.env.unwrapped.game)
