from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Set, Tuple, Union

import numpy as np

from .pieces import Piece


Coordinate = Tuple[int, int]


class PreconditionViolation(Exception):
    """Raised when a board mutation is requested that was never validated."""


@dataclass(frozen=True)
class FullLines:
    rows: Tuple[int, ...] = field(default_factory=tuple)
    cols: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.rows) + len(self.cols)

    def __bool__(self) -> bool:
        return self.count > 0

    def cells(self, size: int) -> Set[Coordinate]:
        """Union of (x, y) coordinates covered by the full rows and columns."""
        affected: Set[Coordinate] = set()
        for y in self.rows:
            affected.update((x, y) for x in range(size))
        for x in self.cols:
            affected.update((x, y) for y in range(size))
        return affected


class GameGrid:
    """Square N x N occupancy grid with 0 for empty and 1 for filled cells."""

    def __init__(self, size: int = 8) -> None:
        if int(size) < 1:
            raise ValueError(f"Board size must be positive, got {size}")
        self.size = int(size)
        self.grid = np.zeros((self.size, self.size), dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "GameGrid":
        state = np.asarray(rows, dtype=np.int8)
        if state.ndim != 2 or state.shape[0] != state.shape[1]:
            raise ValueError(f"Board must be square, got shape {state.shape}")
        if not np.isin(state, (0, 1)).all():
            raise ValueError("Board cells must be 0 or 1")
        grid = cls(state.shape[0])
        grid.grid = state.copy()
        return grid

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_valid_placement(self, piece: Piece, x: int, y: int) -> bool:
        """Check if every cell of `piece` at origin (x, y) is on the board and empty."""
        for cx, cy in piece.cells_at(x, y):
            if not self.is_inside(cx, cy):
                return False
            if self.grid[cy, cx] != 0:
                return False
        return True

    def place(self, piece: Piece, x: int, y: int) -> int:
        """Fill the cells of `piece` at origin (x, y) and return how many were placed.

        Raises PreconditionViolation, leaving the board untouched, if the
        placement is out of bounds or overlaps a filled cell.
        """
        if not self.is_valid_placement(piece, x, y):
            raise PreconditionViolation(f"Cannot place {piece.cells} at ({x}, {y})")
        for cx, cy in piece.cells_at(x, y):
            self.grid[cy, cx] = 1
        return piece.size

    def valid_placements(self, piece: Piece) -> List[Coordinate]:
        """All valid (x, y) origins for `piece`, row by row."""
        positions: List[Coordinate] = []
        for y in range(self.size):
            for x in range(self.size):
                if self.is_valid_placement(piece, x, y):
                    positions.append((x, y))
        return positions

    def has_any_valid_move(self, piece: Piece) -> bool:
        for y in range(self.size):
            for x in range(self.size):
                if self.is_valid_placement(piece, x, y):
                    return True
        return False

    def find_full_lines(self) -> FullLines:
        return find_full_lines(self.grid)

    def clear_lines(self, lines: FullLines) -> int:
        """Zero every cell in the given rows and columns; return distinct cells cleared."""
        if not lines:
            return 0
        mask = np.zeros_like(self.grid, dtype=np.bool_)
        if lines.rows:
            mask[list(lines.rows), :] = True
        if lines.cols:
            mask[:, list(lines.cols)] = True
        cleared = int(np.count_nonzero(self.grid[mask]))
        self.grid[mask] = 0
        return cleared

    def filled_ratio(self) -> float:
        return float(np.count_nonzero(self.grid)) / float(self.size * self.size)

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.size)
        new_grid.grid = self.grid.copy()
        return new_grid


BoardLike = Union[GameGrid, np.ndarray, Sequence[Sequence[int]]]


def find_full_lines(board: BoardLike) -> FullLines:
    """Return the fully filled rows and columns of `board` in ascending order.

    Pure: the board is never modified.
    """
    state = board.grid if isinstance(board, GameGrid) else np.asarray(board)
    if state.size == 0:
        return FullLines()
    filled = state == 1
    rows = tuple(int(i) for i in np.flatnonzero(filled.all(axis=1)))
    cols = tuple(int(i) for i in np.flatnonzero(filled.all(axis=0)))
    return FullLines(rows=rows, cols=cols)
