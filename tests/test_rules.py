import pytest

from block_blast.game import DEFAULT_GOALS, Piece, ScoringRules, calculate_clear_gain, get_goal_progress


@pytest.mark.parametrize("combo", [1, 2, 4, 17])
def test_clear_gain_resets_combo_when_no_clear(combo):
    assert calculate_clear_gain(0, combo) == (1, 0)
    assert calculate_clear_gain(-1, combo) == (1, 0)


def test_clear_gain_applies_combo_bonus_for_cleared_lines():
    result = calculate_clear_gain(2, 1)
    # nextCombo=2, base=50, bonus=(2-1)*8*2=16
    assert result.next_combo == 2
    assert result.gained == 66


@pytest.mark.parametrize(
    "lines, combo, expected",
    [
        (1, 1, (2, 33)),
        (1, 0, (1, 25)),
        (3, 4, (5, 75 + 4 * 8 * 3)),
    ],
)
def test_clear_gain_formula(lines, combo, expected):
    assert calculate_clear_gain(lines, combo) == expected


def test_scoring_rules_are_configurable():
    rules = ScoringRules(placement_points=2, line_clear_points=10, combo_bonus_points=1)
    assert rules.placement_score(Piece.from_offsets([(0, 0), (1, 0), (2, 0)])) == 6
    assert rules.clear_gain(2, 3) == (4, 20 + 3 * 2)


def test_goal_progress_returns_next_target_and_remaining_text():
    progress = get_goal_progress(120, [100, 250, 500])
    assert progress.target == 250
    assert progress.previous == 100
    assert progress.progress == pytest.approx(20 / 150)
    assert "130" in progress.text


def test_goal_progress_at_exact_goal_moves_to_next_goal():
    progress = get_goal_progress(100, [100, 250, 500])
    assert progress.target == 250
    assert progress.previous == 100
    assert progress.progress == 0.0


def test_goal_progress_beyond_final_goal_is_clamped():
    progress = get_goal_progress(2000)
    assert progress.target == DEFAULT_GOALS[-1]
    assert progress.previous == DEFAULT_GOALS[-2]
    assert progress.progress == 1.0
    assert "1400" in progress.text
    assert "to go" not in progress.text


def test_goal_progress_negative_score_is_clamped():
    progress = get_goal_progress(-50, [100, 250])
    assert progress.target == 100
    assert progress.previous == 0
    assert progress.progress == 0.0
    assert "150" in progress.text


def test_goal_progress_single_goal_ladder():
    progress = get_goal_progress(100, [100])
    assert progress.target == 100
    assert progress.previous == 0
    assert progress.progress == 1.0


@pytest.mark.parametrize("score", [-10, 0, 99, 100, 101, 899, 900, 1399, 1400, 5000])
def test_goal_progress_always_within_unit_interval(score):
    assert 0.0 <= get_goal_progress(score).progress <= 1.0


@pytest.mark.parametrize("goals", [[], [250, 100]])
def test_goal_progress_rejects_bad_ladders(goals):
    with pytest.raises(ValueError):
        get_goal_progress(0, goals)
