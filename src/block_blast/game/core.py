from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .grid import FullLines, GameGrid
from .pieces import PIECE_LIBRARY, Piece, PieceCatalog
from .rules import DEFAULT_GOALS, GoalProgress, ScoringRules, get_goal_progress, validate_goals
from .storage import BestScoreStore, MemoryBestScoreStore


logger = logging.getLogger(__name__)

ClearHook = Callable[[FullLines], None]


class TurnState(Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    RESOLVING = "resolving"
    GAME_OVER = "game_over"


class PlacementStatus(IntEnum):
    PLACED = 0
    INVALID_PLACEMENT = 1
    NO_PIECE_IN_SLOT = 2
    STATE_LOCKED = 3
    GAME_OVER = 4


STATUS_TEXT = {
    PlacementStatus.INVALID_PLACEMENT: "Can't place a piece there",
    PlacementStatus.NO_PIECE_IN_SLOT: "That slot is already used",
    PlacementStatus.STATE_LOCKED: "Still resolving the previous move",
    PlacementStatus.GAME_OVER: "Game over. Restart to try again!",
}
SELECT_TEXT = "Click a cell to place the piece"
LINES_CLEARED_TEXT = "{lines} line(s) cleared!"


@dataclass
class GameConfig:
    """Configuration for a block blast session"""
    board_size: int = 8
    slot_count: int = 3
    goals: Tuple[int, ...] = DEFAULT_GOALS
    piece_library: Tuple[Piece, ...] = PIECE_LIBRARY
    random_seed: Optional[int] = None


@dataclass
class PlacementResult:
    status: PlacementStatus
    cells_placed: int = 0
    lines: FullLines = field(default_factory=FullLines)
    cells_cleared: int = 0
    gained: int = 0
    score: int = 0
    combo: int = 0
    game_over: bool = False
    refilled: bool = False
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status == PlacementStatus.PLACED

    @property
    def lines_cleared(self) -> int:
        return self.lines.count


class BlockBlastGame:
    """Turn orchestrator owning one session of board, slots, score and combo.

    Callers submit intents (`select_slot`, `attempt_placement`, `restart`)
    and read snapshots back; nothing outside this class mutates the session.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
        best_score_store: Optional[BestScoreStore] = None,
        clear_hook: Optional[ClearHook] = None,
    ) -> None:
        self.config = config or GameConfig()
        if self.config.slot_count < 1:
            raise ValueError(f"Slot count must be positive, got {self.config.slot_count}")
        self.goals = validate_goals(self.config.goals)
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.catalog = PieceCatalog(self.config.piece_library, self.rng)
        self.grid = GameGrid(self.config.board_size)
        self.store: BestScoreStore = best_score_store or MemoryBestScoreStore()
        self.clear_hook = clear_hook

        self.best_score = self.store.load()
        self.slots: List[Optional[Piece]] = []
        self.score = 0
        self.combo = 0
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.turn_state = TurnState.IDLE
        self.selected_slot: Optional[int] = None
        self.status = ""
        self.restart()

    # ---------- Session lifecycle ----------
    def restart(self) -> None:
        """Start a fresh game; the best score carries over."""
        self.grid.reset()
        self.score = 0
        self.combo = 0
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.selected_slot = None
        self.status = ""
        self.turn_state = TurnState.IDLE
        self.slots = list(self.catalog.deal(self.config.slot_count))
        logger.debug("New game started with slots %s", [p.cells for p in self.slots if p is not None])
        self._check_game_over()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.restart()

    # ---------- Queries ----------
    @property
    def board(self) -> np.ndarray:
        view = self.grid.grid.view()
        view.flags.writeable = False
        return view

    @property
    def game_over(self) -> bool:
        return self.turn_state == TurnState.GAME_OVER

    @property
    def pieces_remaining(self) -> int:
        return sum(1 for piece in self.slots if piece is not None)

    def goal_progress(self) -> GoalProgress:
        return get_goal_progress(self.score, self.goals)

    def can_place_any_piece(self) -> bool:
        return any(self.grid.has_any_valid_move(piece) for piece in self.slots if piece is not None)

    def valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of (slot, x, y) placements currently accepted."""
        if self.game_over:
            return []
        actions: List[Tuple[int, int, int]] = []
        for slot, piece in enumerate(self.slots):
            if piece is None:
                continue
            for x, y in self.grid.valid_placements(piece):
                actions.append((slot, x, y))
        return actions

    def get_state(self) -> Dict[str, Any]:
        goal = self.goal_progress()
        return {
            "grid": self.grid.clone_state(),
            "slots": [piece.cells if piece is not None else None for piece in self.slots],
            "pieces_remaining": self.pieces_remaining,
            "score": self.score,
            "best_score": self.best_score,
            "combo": self.combo,
            "total_lines_cleared": self.total_lines_cleared,
            "total_pieces_placed": self.total_pieces_placed,
            "turn_state": self.turn_state.value,
            "selected_slot": self.selected_slot,
            "game_over": self.game_over,
            "status": self.status,
            "goal": {
                "target": goal.target,
                "previous": goal.previous,
                "progress": goal.progress,
                "text": goal.text,
            },
        }

    # ---------- Intents ----------
    def select_slot(self, slot: Optional[int]) -> Optional[int]:
        """Toggle the selected slot; returns the selection after the call."""
        if self.turn_state in (TurnState.GAME_OVER, TurnState.RESOLVING):
            return self.selected_slot
        if slot is None or slot == self.selected_slot or not self._has_piece(slot):
            self.selected_slot = None
            self.turn_state = TurnState.IDLE
            self.status = ""
        else:
            self.selected_slot = slot
            self.turn_state = TurnState.SELECTING
            self.status = SELECT_TEXT
        return self.selected_slot

    def attempt_placement(self, slot: int, x: int, y: int) -> PlacementResult:
        if self.turn_state == TurnState.GAME_OVER:
            return self._reject(PlacementStatus.GAME_OVER, update_status=False)
        if self.turn_state == TurnState.RESOLVING:
            return self._reject(PlacementStatus.STATE_LOCKED, update_status=False)
        piece = self.slots[slot] if 0 <= slot < len(self.slots) else None
        if piece is None:
            return self._reject(PlacementStatus.NO_PIECE_IN_SLOT, update_status=False)

        if not self.grid.is_valid_placement(piece, x, y):
            self.selected_slot = slot
            self.turn_state = TurnState.SELECTING
            return self._reject(PlacementStatus.INVALID_PLACEMENT)

        self.turn_state = TurnState.RESOLVING
        try:
            return self._resolve(slot, piece, x, y)
        finally:
            if self.turn_state == TurnState.RESOLVING:
                self.turn_state = TurnState.IDLE

    # ---------- Internals ----------
    def _has_piece(self, slot: int) -> bool:
        return 0 <= slot < len(self.slots) and self.slots[slot] is not None

    def _reject(self, status: PlacementStatus, update_status: bool = True) -> PlacementResult:
        message = STATUS_TEXT[status]
        if update_status:
            self.status = message
        logger.debug("Placement rejected: %s", status.name)
        return PlacementResult(
            status=status,
            score=self.score,
            combo=self.combo,
            game_over=self.game_over,
            message=message,
        )

    def _resolve(self, slot: int, piece: Piece, x: int, y: int) -> PlacementResult:
        cells_placed = self.grid.place(piece, x, y)
        gained = self.rules.placement_score(piece)
        self.slots[slot] = None
        self.selected_slot = None
        self.total_pieces_placed += 1
        self.status = ""

        lines = self.grid.find_full_lines()
        cells_cleared = 0
        if lines:
            if self.clear_hook is not None:
                try:
                    self.clear_hook(lines)
                except Exception:
                    logger.exception("Clear hook failed; resolving the placement anyway")
            cells_cleared = self.grid.clear_lines(lines)
            self.total_lines_cleared += lines.count
            self.status = LINES_CLEARED_TEXT.format(lines=lines.count)
            logger.debug("Cleared rows %s and cols %s", lines.rows, lines.cols)

        clear_gain = self.rules.clear_gain(lines.count, self.combo)
        self.combo = clear_gain.next_combo
        gained += clear_gain.gained
        self.score += gained

        refilled = False
        if all(p is None for p in self.slots):
            self.slots = list(self.catalog.deal(self.config.slot_count))
            refilled = True
            logger.debug("Refilled %d slots", len(self.slots))

        if self.score > self.best_score:
            self.best_score = self.score
            self.store.save(self.best_score)

        self._check_game_over()
        return PlacementResult(
            status=PlacementStatus.PLACED,
            cells_placed=cells_placed,
            lines=lines,
            cells_cleared=cells_cleared,
            gained=gained,
            score=self.score,
            combo=self.combo,
            game_over=self.game_over,
            refilled=refilled,
            message=self.status,
        )

    def _check_game_over(self) -> None:
        if self.pieces_remaining == 0 or self.can_place_any_piece():
            return
        self.turn_state = TurnState.GAME_OVER
        self.selected_slot = None
        self.status = STATUS_TEXT[PlacementStatus.GAME_OVER]
        logger.info("Game over with score %d (best %d)", self.score, self.best_score)
