"""Tests for observation / action encoding and the PatienceEnv wrapper."""
import random

import numpy as np
import pytest

from tarot_patience.board import NUM_COLUMNS, NUM_FOUNDATIONS, BoardState
from tarot_patience.deck import EXCUSE, Suit, make_suit_card, make_trump_card
from tarot_patience.engine import new_game
from tarot_patience.env import (
    ACTION_DISTRIBUTE,
    ACTION_MERGE,
    AUTO_PLACE_OFFSET,
    FROM_SLOT_OFFSET,
    NUM_ACTIONS,
    OBS_DIM,
    WIN_BONUS,
    PatienceEnv,
    apply_action,
    describe_action,
    encode_observation,
    legal_action_mask,
    run_move_action,
)
from tarot_patience.moves import check_invariants


def test_action_space_layout():
    assert NUM_ACTIONS == 2 + 11 + 11 + 11 * 11
    assert run_move_action(0, 0) == 24
    assert run_move_action(10, 10) == NUM_ACTIONS - 1
    assert describe_action(ACTION_DISTRIBUTE) == "distribute"
    assert describe_action(AUTO_PLACE_OFFSET + 3) == "auto-place col3"
    assert describe_action(FROM_SLOT_OFFSET) == "excuse -> col0"
    assert describe_action(run_move_action(2, 7)) == "col2 -> col7"
    with pytest.raises(ValueError):
        describe_action(NUM_ACTIONS)


def test_observation_layout_size():
    # 18 visible locations per card, 11 face-down counts, stock size, merged flag
    assert OBS_DIM == 78 * 18 + NUM_COLUMNS + 2 == 1417
    assert encode_observation(new_game(seed=0)).shape == (OBS_DIM,)


def test_observation_shape_and_hidden_cards():
    state = new_game(seed=7)
    obs = encode_observation(state)
    assert obs.shape == (OBS_DIM,)
    assert obs.dtype == np.float32
    grid = obs[: 78 * 18]
    # Only the 11 column tops are visible after the deal
    assert grid.sum() == pytest.approx(11.0)
    hidden = obs[78 * 18: 78 * 18 + NUM_COLUMNS]
    assert hidden.sum() * 6 == pytest.approx(36 - 11)
    assert obs[-2] == pytest.approx(1.0)  # full stock
    assert obs[-1] == 0.0


def test_legal_mask_agrees_with_engine():
    for seed in range(5):
        state = new_game(seed=seed)
        mask = legal_action_mask(state)
        assert len(mask) == NUM_ACTIONS
        for action, ok in enumerate(mask):
            if ok:
                assert apply_action(state, action).accepted, describe_action(action)


def test_mask_on_a_crafted_board():
    cols = [()] * NUM_COLUMNS
    cols[0] = (make_trump_card(6, face_up=True),)
    cols[1] = (make_suit_card(Suit.HEARTS, 9, face_up=True),)
    fdns = [()] * NUM_FOUNDATIONS
    fdns[4] = tuple(make_trump_card(v, face_up=True) for v in range(1, 6))
    state = BoardState(columns=tuple(cols), foundations=tuple(fdns), excuse_slot=EXCUSE.turned_up())
    mask = legal_action_mask(state)
    assert mask[AUTO_PLACE_OFFSET + 0]
    assert not mask[AUTO_PLACE_OFFSET + 1]
    assert not mask[ACTION_DISTRIBUTE]
    assert not mask[ACTION_MERGE]
    assert mask[FROM_SLOT_OFFSET + 0] and mask[FROM_SLOT_OFFSET + 1]
    assert not mask[FROM_SLOT_OFFSET + 2]
    assert not mask[run_move_action(0, 1)]


def test_env_random_episode():
    rng = random.Random(42)
    env = PatienceEnv(max_steps=300, rng=random.Random(1))
    step = env.reset()
    assert not step.done
    assert len(step.legal_actions_mask) == NUM_ACTIONS

    total = 0.0
    while not step.done:
        legal = [i for i, ok in enumerate(step.legal_actions_mask) if ok]
        assert legal
        step = env.step(rng.choice(legal))
        total += step.reward
        check_invariants(env.state)

    assert step.done
    assert step.info["steps"] <= 300
    bonus = WIN_BONUS if step.info["won"] else 0.0
    assert total == pytest.approx(step.info["placed"] + bonus)


def test_env_rejects_illegal_actions():
    env = PatienceEnv(rng=random.Random(2))
    with pytest.raises(RuntimeError):
        env.step(0)
    step = env.reset()
    illegal = next(i for i, ok in enumerate(step.legal_actions_mask) if not ok)
    with pytest.raises(ValueError):
        env.step(illegal)
    with pytest.raises(ValueError):
        env.step(NUM_ACTIONS)
