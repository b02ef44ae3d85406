"""Rules engine for Block Blast.

Exports the core game engine and supporting classes:
- Piece, PieceCatalog: Polyomino shapes and random selection
- GameGrid, find_full_lines: Board occupancy, placement and line clearing
- ScoringRules, calculate_clear_gain, get_goal_progress: Score and goal math
- BlockBlastGame: Turn orchestration and session state
- JsonBestScoreStore, MemoryBestScoreStore: Best score persistence
"""

from .pieces import PIECE_LIBRARY, Piece, PieceCatalog
from .grid import FullLines, GameGrid, PreconditionViolation, find_full_lines
from .rules import (
    DEFAULT_GOALS,
    ClearGain,
    GoalProgress,
    ScoringRules,
    calculate_clear_gain,
    get_goal_progress,
)
from .storage import BestScoreStore, JsonBestScoreStore, MemoryBestScoreStore
from .core import BlockBlastGame, GameConfig, PlacementResult, PlacementStatus, TurnState

__all__ = [
    "PIECE_LIBRARY",
    "Piece",
    "PieceCatalog",
    "FullLines",
    "GameGrid",
    "PreconditionViolation",
    "find_full_lines",
    "DEFAULT_GOALS",
    "ClearGain",
    "GoalProgress",
    "ScoringRules",
    "calculate_clear_gain",
    "get_goal_progress",
    "BestScoreStore",
    "JsonBestScoreStore",
    "MemoryBestScoreStore",
    "BlockBlastGame",
    "GameConfig",
    "PlacementResult",
    "PlacementStatus",
    "TurnState",
]
