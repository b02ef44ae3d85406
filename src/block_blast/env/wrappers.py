from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .block_blast_env import _compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (slot, x, y) -> Discrete(N).

    Also exposes `get_action_mask()` returning a 1D boolean mask of shape (N,).
    Order: slot, y, x (C-order flattening of the mask).
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        k, size_x, size_y = map(int, env.action_space.nvec)
        assert size_x == size_y, "Expected square grid"
        self.k = k
        self.size = size_x
        self.n = int(k * self.size * self.size)
        self.action_space = spaces.Discrete(self.n)

    def _unflatten(self, idx: int) -> tuple[int, int, int]:
        x = idx % self.size
        idx //= self.size
        y = idx % self.size
        slot = idx // self.size
        return int(slot), int(x), int(y)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        mask3d = _compute_action_mask(self.env.unwrapped.game)
        return mask3d.reshape(-1)
