"""Tests for whole-game simulation."""
from tarot_patience.agents import GreedyAgent
from tarot_patience.rules import PERMISSIVE_RULES
from tarot_patience.simulate import BatchSummary, GameSummary, play_game, run_batch


def test_play_game_greedy():
    summary = play_game(GreedyAgent(seed=3), seed=3, max_steps=200, check=True)
    assert summary.seed == 3
    assert summary.steps <= 200
    assert 0 <= summary.placed <= 78
    assert summary.won == (summary.placed == 78)


def test_run_batch_is_reproducible():
    a = run_batch("random", 3, seed=10, max_steps=150)
    b = run_batch("random", 3, seed=10, max_steps=150)
    assert [g.seed for g in a.games] == [10, 11, 12]
    assert a.games == b.games
    assert 0.0 <= a.win_rate <= 1.0


def test_run_batch_permissive_rules():
    summary = run_batch("greedy", 2, seed=0, rules=PERMISSIVE_RULES, max_steps=150, check=True)
    assert len(summary.games) == 2


def test_batch_summary_stats():
    summary = BatchSummary(
        games=[
            GameSummary(seed=0, won=True, moves=100, steps=120, placed=78),
            GameSummary(seed=1, won=False, moves=50, steps=80, placed=20),
        ]
    )
    assert summary.wins == 1
    assert summary.win_rate == 0.5
    assert summary.mean_moves == 75.0
    assert summary.mean_placed == 49.0
    assert BatchSummary().win_rate == 0.0
