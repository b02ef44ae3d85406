from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple

from .pieces import Piece


DEFAULT_GOALS: Tuple[int, ...] = (100, 250, 500, 900, 1400)

GOAL_CLEARED_TEXT = "Final goal {target} pts cleared! Keep pushing your score"
NEXT_GOAL_TEXT = "Next goal: {target} pts ({remaining} pts to go)"


class ClearGain(NamedTuple):
    next_combo: int
    gained: int


@dataclass(frozen=True)
class GoalProgress:
    target: int
    previous: int
    progress: float
    text: str


@dataclass
class ScoringRules:
    placement_points: int = 1
    line_clear_points: int = 25
    combo_bonus_points: int = 8

    def placement_score(self, piece: Piece) -> int:
        return piece.size * self.placement_points

    def clear_gain(self, lines: int, combo: int) -> ClearGain:
        """Score for clearing `lines` lines with a running `combo` streak.

        A clearing turn advances the streak to `combo + 1` and earns
        `combo_bonus_points * combo` extra per line. A turn without clears
        resets the streak to 1, so the next clearing turn earns one step of
        bonus; only a fresh session (combo 0) clears bonus-free.
        """
        if lines <= 0:
            return ClearGain(next_combo=1, gained=0)
        next_combo = combo + 1
        combo_bonus = (next_combo - 1) * self.combo_bonus_points * lines
        return ClearGain(next_combo=next_combo, gained=lines * self.line_clear_points + combo_bonus)


def calculate_clear_gain(lines: int, combo: int) -> ClearGain:
    return ScoringRules().clear_gain(lines, combo)


def validate_goals(goals: Sequence[int]) -> Tuple[int, ...]:
    ladder = tuple(int(g) for g in goals)
    if not ladder:
        raise ValueError("Goal ladder must contain at least one goal")
    if any(b < a for a, b in zip(ladder, ladder[1:])):
        raise ValueError(f"Goal ladder must be ascending, got {ladder}")
    return ladder


def get_goal_progress(score: int, goals: Sequence[int] = DEFAULT_GOALS) -> GoalProgress:
    """Locate `score` on the goal ladder.

    `target` is the first goal above the score (or the last goal once all are
    reached), `previous` the largest goal below the target, and `progress`
    the clamped fraction of the way from `previous` to `target`.
    """
    ladder = validate_goals(goals)
    target = next((goal for goal in ladder if score < goal), ladder[-1])
    previous = max((goal for goal in ladder if goal < target), default=0)
    denominator = (target - previous) or 1
    progress = max(0.0, min(1.0, (score - previous) / denominator))

    if score >= target:
        text = GOAL_CLEARED_TEXT.format(target=target)
    else:
        text = NEXT_GOAL_TEXT.format(target=target, remaining=max(0, target - score))
    return GoalProgress(target=target, previous=previous, progress=progress, text=text)
