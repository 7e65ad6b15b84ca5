"""Tests for legal move enumeration and the board invariant checker."""
import random
from dataclasses import replace

import pytest

from tarot_patience.board import NUM_COLUMNS, NUM_FOUNDATIONS, BoardState
from tarot_patience.deck import EXCUSE, Suit, make_suit_card, make_trump_card
from tarot_patience.engine import new_game
from tarot_patience.moves import (
    MOVE_DISTRIBUTE,
    MOVE_FOUNDATION,
    MOVE_FROM_SLOT,
    MOVE_MERGE,
    MOVE_RUN,
    MOVE_TO_SLOT,
    Move,
    apply_move,
    check_invariants,
    legal_moves,
    run_starts,
)
from tarot_patience.rules import PERMISSIVE_RULES


def _board(columns=None, foundations=None, **kwargs) -> BoardState:
    cols = [()] * NUM_COLUMNS
    for i, cards in (columns or {}).items():
        cols[i] = tuple(cards)
    fdns = [()] * NUM_FOUNDATIONS
    for i, cards in (foundations or {}).items():
        fdns[i] = tuple(cards)
    return BoardState(columns=tuple(cols), foundations=tuple(fdns), **kwargs)


def test_legal_moves_on_a_small_board():
    state = _board(
        {
            0: [make_trump_card(3), make_suit_card(Suit.SPADES, 9, face_up=True), make_suit_card(Suit.HEARTS, 8, face_up=True)],
            1: [make_suit_card(Suit.DIAMONDS, 10, face_up=True)],
            2: [make_suit_card(Suit.CLUBS, 1, face_up=True)],
            3: [EXCUSE.turned_up()],
        },
        {4: [make_trump_card(v, face_up=True) for v in range(1, 11)], 5: [make_trump_card(v, face_up=True) for v in range(21, 10, -1)]},
        stock=(make_suit_card(Suit.CLUBS, 5),),
    )
    moves = set(legal_moves(state))
    assert Move(MOVE_RUN, source=0, card_index=1, target=1) in moves
    assert Move(MOVE_RUN, source=0, card_index=1, target=3) in moves
    assert Move(MOVE_RUN, source=0, card_index=2, target=3) in moves
    assert Move(MOVE_FOUNDATION, source=2, card_index=0, target=2) in moves
    assert Move(MOVE_TO_SLOT, source=3, card_index=0) in moves
    assert Move(MOVE_MERGE) in moves
    assert Move(MOVE_DISTRIBUTE) in moves
    # Excuse onto non-empty columns only; a Roi-less board never fills an empty column
    assert Move(MOVE_RUN, source=3, card_index=0, target=0) in moves
    assert not any(m.kind == MOVE_RUN and m.target == 4 for m in moves)
    assert not any(m.kind == MOVE_FROM_SLOT for m in moves)


def test_run_starts_deepest_first():
    state = _board(
        {
            0: [make_suit_card(Suit.SPADES, 9, face_up=True), make_suit_card(Suit.HEARTS, 8, face_up=True)],
            1: [EXCUSE.turned_up()],
        }
    )
    assert run_starts(state, 0, 1) == [0, 1]
    assert run_starts(state, 0, 0) == []


def test_from_slot_moves():
    state = _board({0: [make_trump_card(4, face_up=True)]}, excuse_slot=EXCUSE.turned_up())
    moves = legal_moves(state)
    assert [m for m in moves if m.kind == MOVE_FROM_SLOT] == [Move(MOVE_FROM_SLOT, target=0)]
    permissive = [m for m in legal_moves(state, PERMISSIVE_RULES) if m.kind == MOVE_FROM_SLOT]
    assert len(permissive) == NUM_COLUMNS


def test_no_moves_once_won():
    state = replace(new_game(seed=1), game_over=True)
    assert legal_moves(state) == []


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_every_listed_move_is_accepted(seed):
    rng = random.Random(seed)
    state = new_game(seed=seed)
    for _ in range(150):
        moves = legal_moves(state)
        if not moves:
            break
        for move in moves:
            assert apply_move(state, move).accepted, move
        state = apply_move(state, rng.choice(moves)).state
        check_invariants(state)


def test_move_str():
    assert str(Move(MOVE_RUN, source=1, card_index=2, target=3)) == "col1[2:] -> col3"
    assert str(Move(MOVE_FOUNDATION, source=0, card_index=0, target=4)) == "col0 -> fdn4"
    assert str(Move(MOVE_DISTRIBUTE)) == "distribute"


def test_check_invariants_detects_problems():
    state = new_game(seed=6)
    check_invariants(state)

    with pytest.raises(ValueError, match="cards"):
        check_invariants(replace(state, stock=state.stock[1:]))

    dup = replace(state, stock=state.stock[1:] + (state.stock[2],))
    with pytest.raises(ValueError, match="Duplicate"):
        check_invariants(dup)

    col = state.columns[5]
    hidden_top = replace(state, columns=(state.columns[:5] + (col[:-1] + (col[-1].turned_down(),),) + state.columns[6:]))
    with pytest.raises(ValueError, match="face down"):
        check_invariants(hidden_top)

    flipped = replace(state, stock=(state.stock[0].turned_up(),) + state.stock[1:])
    with pytest.raises(ValueError, match="Stock"):
        check_invariants(flipped)
