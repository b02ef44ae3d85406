from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_blast.game import BlockBlastGame, GameConfig, PlacementStatus


def _compute_action_mask(game: BlockBlastGame) -> np.ndarray:
    size = game.grid.size
    k = game.config.slot_count
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for slot, x, y in game.valid_actions():
        mask[slot, y, x] = True
    return mask


class BlockBlastEnv(gym.Env):
    """Gymnasium view of a Block Blast session.

    Actions are (slot, x, y) triples. The reward is the engine's score delta,
    with a fixed penalty for rejected placements.

    A session whose pieces cannot fit an empty board starts already over:
    `reset` then reports ``info["game_over"]`` and every step terminates.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 invalid_action_penalty: float = -1.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = BlockBlastGame(config)
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)

        size = self.game.grid.size
        k = self.game.config.slot_count
        n_pieces = len(self.game.catalog.library)

        # Pieces are library indices, -1 for a used slot
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=n_pieces - 1, shape=(k,), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, size, size))

        self._last_obs: Optional[Dict[str, Any]] = None

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.slot_count
        library = self.game.catalog.library
        pieces = np.full((k,), -1, dtype=np.int8)
        for i, piece in enumerate(self.game.slots[:k]):
            if piece is not None:
                pieces[i] = library.index(piece)
        return {
            "grid": self.game.grid.clone_state(),
            "pieces": pieces,
            "pieces_remaining": self.game.pieces_remaining,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "valid_actions": self.game.valid_actions(),
            "score": self.game.score,
            "best_score": self.game.best_score,
            "combo": self.game.combo,
            "pieces_placed": self.game.total_pieces_placed,
            "filled_ratio": self.game.grid.filled_ratio(),
            "game_over": self.game.game_over,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        slot, x, y = map(int, action)
        result = self.game.attempt_placement(slot, x, y)

        reward = float(result.gained) if result.success else self.invalid_action_penalty
        # no penalty once the session is over
        if result.status == PlacementStatus.GAME_OVER:
            reward = 0.0
        terminated = bool(self.game.game_over)
        if terminated:
            reward += self.terminal_penalty

        obs = self._get_obs()
        info = self._get_info()
        info["status"] = result.status.name
        info["lines_cleared"] = result.lines_cleared
        self._last_obs = obs
        return obs, reward, terminated, False, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs["grid"] if self._last_obs is not None else self.game.grid.grid
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    color = (70, 130, 240) if grid[y, x] else (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        return None

    def close(self) -> None:
        pass
