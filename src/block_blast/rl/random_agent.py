from __future__ import annotations

import argparse
import logging
import random
from typing import Optional

import gymnasium as gym

import block_blast.env  # noqa: F401
from block_blast.game import GameConfig


LOGGER = logging.getLogger(__name__)


def run_random(steps: int = 200, seed: Optional[int] = None, config: Optional[GameConfig] = None) -> float:
    """Play uniformly random valid placements; return the total reward."""
    rng = random.Random(seed)
    env = gym.make("BlockBlast-8x8-v0", config=config)
    obs, info = env.reset(seed=seed)
    if info["game_over"]:
        LOGGER.warning("No piece fits the empty board; nothing to play")
        env.close()
        return 0.0
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        valid = info.get("valid_actions", [])
        if valid:
            action = rng.choice(valid)
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            LOGGER.info("Episode %d finished with score %d (best %d)", episodes, info["score"], info["best_score"])
            obs, info = env.reset()
    env.close()
    LOGGER.info("Random agent total reward over %d steps: %.2f", steps, total_reward)
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Block Blast with a random agent.")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ...).")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")
    run_random(steps=args.steps, seed=args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
