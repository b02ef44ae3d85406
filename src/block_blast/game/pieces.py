from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple


Offset = Tuple[int, int]


@dataclass(frozen=True)
class Piece:
    """Rigid polyomino described by (dx, dy) offsets from its top-left origin."""

    cells: Tuple[Offset, ...]

    def __post_init__(self) -> None:
        normalized = tuple(sorted({(int(dx), int(dy)) for dx, dy in self.cells}, key=lambda c: (c[1], c[0])))
        if not normalized:
            raise ValueError("A piece needs at least one cell")
        if any(dx < 0 or dy < 0 for dx, dy in normalized):
            raise ValueError(f"Piece offsets must be non-negative, got {normalized}")
        object.__setattr__(self, "cells", normalized)

    @classmethod
    def from_offsets(cls, offsets: Iterable[Sequence[int]]) -> "Piece":
        return cls(tuple((int(o[0]), int(o[1])) for o in offsets))

    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return max(dx for dx, _ in self.cells) + 1

    @property
    def height(self) -> int:
        return max(dy for _, dy in self.cells) + 1

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.cells]

    def to_rows(self) -> List[List[int]]:
        """Bounding-box bitmap, row-major, for drawing piece previews."""
        rows = [[0] * self.width for _ in range(self.height)]
        for dx, dy in self.cells:
            rows[dy][dx] = 1
        return rows


PIECE_LIBRARY: Tuple[Piece, ...] = tuple(
    Piece.from_offsets(offsets)
    for offsets in (
        [(0, 0)],
        [(0, 0), (1, 0)],
        [(0, 0), (0, 1)],
        [(0, 0), (1, 0), (2, 0)],
        [(0, 0), (0, 1), (0, 2)],
        [(0, 0), (1, 0), (0, 1)],
        [(0, 0), (1, 0), (2, 0), (1, 1)],
        [(0, 0), (1, 0), (0, 1), (1, 1)],
        [(0, 0), (1, 0), (2, 0), (3, 0)],
        [(0, 0), (0, 1), (0, 2), (0, 3)],
        [(0, 0), (1, 0), (2, 0), (0, 1)],
        [(0, 0), (1, 0), (2, 0), (2, 1)],
        [(0, 0), (1, 0), (1, 1), (2, 1)],
        [(1, 0), (0, 1), (1, 1), (2, 1)],
        [(0, 0), (1, 0), (0, 1), (1, 1), (2, 1)],
    )
)


class PieceCatalog:
    """Uniform random draws from a fixed piece library."""

    def __init__(self, library: Sequence[Piece] = PIECE_LIBRARY, rng: Optional[random.Random] = None) -> None:
        if len(library) == 0:
            raise ValueError("Piece library must not be empty")
        self.library: Tuple[Piece, ...] = tuple(library)
        self.rng = rng or random.Random()

    def random_piece(self) -> Piece:
        return self.rng.choice(self.library)

    def deal(self, count: int) -> List[Piece]:
        return [self.random_piece() for _ in range(count)]
