from __future__ import annotations

import argparse
from typing import Optional

import numpy as np
import gymnasium as gym

import falling_blocks_rl.env  # noqa: F401
from falling_blocks_rl.env.wrappers import ActionMaskWrapper


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    env = ActionMaskWrapper(gym.make("FallingBlocks-10x20-v0"))
    rng = np.random.default_rng(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Only sample actions that change the game
        valid = np.flatnonzero(env.get_action_mask())
        action = int(rng.choice(valid))
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            print(f"episode {episodes}: score {info['score']} lines {info['lines_cleared_total']}")
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f} over {episodes} finished episodes")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    return p


if __name__ == "__main__":  # pragma: no cover
    args = build_parser().parse_args()
    run_random(args.steps, args.seed)
