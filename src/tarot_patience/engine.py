"""
Game operations: one call per player gesture, each returning a new board.

Every operation comes in two forms:
- ``try_<op>(state, ...) -> Transition``: new state plus an ``Outcome`` telling
  what happened (accepted, rejected and why).
- ``<op>(state, ...) -> BoardState``: the same, state only.

Rejected gestures never raise: the returned board is the input with the
selection cleared. Only contract violations (an index outside the board)
raise ``IndexError``.

A won board rejects every operation with ``Outcome.GAME_OVER``; start a new
one with ``new_game``.
"""
from __future__ import annotations

import random
from dataclasses import replace
from enum import Enum
from typing import NamedTuple

from .board import (
    EXCUSE_SELECTION,
    NO_SELECTION,
    NUM_COLUMNS,
    NUM_FOUNDATIONS,
    TRUMP_ASCENDING,
    TRUMP_DESCENDING,
    BoardState,
    ColumnSelection,
    LastMove,
    Pile,
    new_board,
)
from .rules import (
    STRICT_RULES,
    RulesConfig,
    can_merge,
    can_place_on_column,
    can_place_on_foundation,
    eligible_columns,
    find_foundation,
    is_win,
)


class Outcome(Enum):
    ACCEPTED = "accepted"
    SELECTED = "selected"
    DESELECTED = "deselected"
    NO_SELECTION = "no_selection"
    NOT_SELECTABLE = "not_selectable"
    ILLEGAL_TARGET = "illegal_target"
    NO_FOUNDATION = "no_foundation"
    STOCK_EMPTY = "stock_empty"
    CANNOT_MERGE = "cannot_merge"
    GAME_OVER = "game_over"


class Transition(NamedTuple):
    state: BoardState
    outcome: Outcome

    @property
    def accepted(self) -> bool:
        return self.outcome is Outcome.ACCEPTED


# ---- Internal helpers ----


def _check_column(index: int) -> None:
    if not 0 <= index < NUM_COLUMNS:
        raise IndexError(f"Column index {index} out of range")


def _check_foundation(index: int) -> None:
    if not 0 <= index < NUM_FOUNDATIONS:
        raise IndexError(f"Foundation index {index} out of range")


def _with_pile(piles: tuple[Pile, ...], index: int, pile: Pile) -> tuple[Pile, ...]:
    return piles[:index] + (pile,) + piles[index + 1:]


def _reveal(column: Pile) -> Pile:
    """Turn the new top card face up once the card above it has left."""
    if column and not column[-1].face_up:
        return column[:-1] + (column[-1].turned_up(),)
    return column


def _reject(state: BoardState, outcome: Outcome) -> Transition:
    if state.selection.kind == "none":
        return Transition(state, outcome)
    return Transition(replace(state, selection=NO_SELECTION), outcome)


def _selected_run(state: BoardState) -> Pile:
    sel = state.selection
    if sel.kind == "excuse":
        return (state.excuse_slot,) if state.excuse_slot is not None else ()
    if sel.kind == "column":
        return state.columns[sel.column][sel.card_index:]
    return ()


def _lift_selection(state: BoardState) -> BoardState:
    """Remove the selected run from its source pile (revealing what it uncovers)."""
    sel = state.selection
    if sel.kind == "excuse":
        return replace(state, excuse_slot=None)
    col = _reveal(state.columns[sel.column][:sel.card_index])
    return replace(state, columns=_with_pile(state.columns, sel.column, col))


def _settle(state: BoardState, last_move: LastMove) -> Transition:
    """Common bookkeeping for an accepted move: count it, clear selection, check the win."""
    state = replace(
        state,
        selection=NO_SELECTION,
        moves=state.moves + 1,
        last_move=last_move,
    )
    if is_win(state):
        state = replace(state, game_over=True)
    return Transition(state, Outcome.ACCEPTED)


# ---- Game lifecycle ----


def new_game(seed: int | None = None, rng: random.Random | None = None) -> BoardState:
    """Start a fresh game: shuffle a new deck and deal it."""
    return new_board(rng=rng, seed=seed)


def clear_last_move(state: BoardState) -> BoardState:
    """Drop the "last move" highlight annotation."""
    if state.last_move is None:
        return state
    return replace(state, last_move=None)


# ---- Distribution ----


def try_distribute(state: BoardState, rules: RulesConfig = STRICT_RULES) -> Transition:
    """
    Deal one stock card face up onto each eligible column, in column order,
    until the stock or the eligible columns run out. Not counted as a move.
    """
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    if not state.stock:
        return _reject(state, Outcome.STOCK_EMPTY)
    eligible = eligible_columns(state, rules)
    if not eligible:
        return _reject(state, Outcome.ILLEGAL_TARGET)

    stock = list(state.stock)
    columns = list(state.columns)
    for i in eligible[:len(stock)]:
        card = stock.pop()
        columns[i] = columns[i] + (card.turned_up(),)

    new_state = replace(
        state,
        columns=tuple(columns),
        stock=tuple(stock),
        selection=NO_SELECTION,
        last_move=LastMove.distribute(),
    )
    return Transition(new_state, Outcome.ACCEPTED)


# ---- Selection ----


def try_select_column_card(state: BoardState, column: int, card_index: int) -> Transition:
    """
    Lift the run starting at ``card_index`` in ``column``. Selecting the head
    of the current selection again puts it back down.
    """
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    _check_column(column)
    col = state.columns[column]
    sel = state.selection
    if sel.kind == "column" and sel.column == column and sel.card_index == card_index:
        return Transition(replace(state, selection=NO_SELECTION), Outcome.DESELECTED)
    if not 0 <= card_index < len(col) or not col[card_index].face_up:
        return _reject(state, Outcome.NOT_SELECTABLE)
    return Transition(replace(state, selection=ColumnSelection(column, card_index)), Outcome.SELECTED)


def try_select_excuse(state: BoardState) -> Transition:
    """Lift the Excuse from its slot (toggles if it is already lifted)."""
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    if state.selection.kind == "excuse":
        return Transition(replace(state, selection=NO_SELECTION), Outcome.DESELECTED)
    if state.excuse_slot is None:
        return _reject(state, Outcome.NOT_SELECTABLE)
    return Transition(replace(state, selection=EXCUSE_SELECTION), Outcome.SELECTED)


def try_deselect(state: BoardState) -> Transition:
    if state.selection.kind == "none":
        return Transition(state, Outcome.NO_SELECTION)
    return Transition(replace(state, selection=NO_SELECTION), Outcome.DESELECTED)


# ---- Moving the selection ----


def try_move_selection_to_column(
    state: BoardState,
    column: int,
    rules: RulesConfig = STRICT_RULES,
) -> Transition:
    """Lay the selected run on ``column`` if its head fits there."""
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    _check_column(column)
    sel = state.selection
    if sel.kind == "none":
        return Transition(state, Outcome.NO_SELECTION)
    if sel.kind == "column" and sel.column == column:
        return _reject(state, Outcome.ILLEGAL_TARGET)

    run = _selected_run(state)
    if not run or not can_place_on_column(run[0], state.columns[column], rules):
        return _reject(state, Outcome.ILLEGAL_TARGET)

    state = _lift_selection(state)
    dest = state.columns[column] + tuple(c.turned_up() for c in run)
    state = replace(state, columns=_with_pile(state.columns, column, dest))
    return _settle(state, LastMove.column(column))


def try_move_selection_to_foundation(state: BoardState, index: int) -> Transition:
    """Retire the selected card to foundation ``index``. Runs of several cards are refused."""
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    _check_foundation(index)
    if state.selection.kind == "none":
        return Transition(state, Outcome.NO_SELECTION)

    run = _selected_run(state)
    if len(run) != 1 or not can_place_on_foundation(run[0], index, state.foundations, state.trumps_merged):
        return _reject(state, Outcome.ILLEGAL_TARGET)

    state = _lift_selection(state)
    pile = state.foundations[index] + (run[0].turned_up(),)
    state = replace(state, foundations=_with_pile(state.foundations, index, pile))
    return _settle(state, LastMove.foundation(index))


def try_move_selection_to_excuse_slot(state: BoardState) -> Transition:
    """Store the selected Excuse in its (empty) slot."""
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    sel = state.selection
    if sel.kind == "none":
        return Transition(state, Outcome.NO_SELECTION)
    if sel.kind == "excuse":
        return Transition(replace(state, selection=NO_SELECTION), Outcome.DESELECTED)

    run = _selected_run(state)
    if len(run) != 1 or not run[0].is_excuse() or state.excuse_slot is not None:
        return _reject(state, Outcome.ILLEGAL_TARGET)

    state = _lift_selection(state)
    state = replace(state, excuse_slot=run[0].turned_up())
    return _settle(state, LastMove.excuse())


# ---- Trump merge and auto-placement ----


def try_merge_trump_foundations(state: BoardState) -> Transition:
    """
    Fold the descending trump pile onto the ascending one once they meet,
    giving a single 1..21 run on foundation 4. One-shot: the run is sealed.
    """
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    if not can_merge(state.foundations, state.trumps_merged):
        return _reject(state, Outcome.CANNOT_MERGE)

    asc = state.foundations[TRUMP_ASCENDING]
    desc = state.foundations[TRUMP_DESCENDING]
    foundations = _with_pile(state.foundations, TRUMP_ASCENDING, asc + tuple(reversed(desc)))
    foundations = _with_pile(foundations, TRUMP_DESCENDING, ())
    state = replace(state, foundations=foundations, trumps_merged=True)
    return _settle(state, LastMove.foundation(TRUMP_ASCENDING))


def try_auto_place(state: BoardState, column: int) -> Transition:
    """
    Send the top card of ``column`` to wherever it can be retired: the Excuse
    to its empty slot, anything else to the first accepting foundation (0 -> 5).
    """
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    _check_column(column)
    card = state.top(column)
    if card is None or not card.face_up:
        return _reject(state, Outcome.NO_FOUNDATION)

    col = _reveal(state.columns[column][:-1])
    if card.is_excuse():
        if state.excuse_slot is not None:
            return _reject(state, Outcome.NO_FOUNDATION)
        state = replace(
            state,
            columns=_with_pile(state.columns, column, col),
            excuse_slot=card.turned_up(),
        )
        return _settle(state, LastMove.excuse())

    index = find_foundation(card, state.foundations, state.trumps_merged)
    if index is None:
        return _reject(state, Outcome.NO_FOUNDATION)
    state = replace(
        state,
        columns=_with_pile(state.columns, column, col),
        foundations=_with_pile(state.foundations, index, state.foundations[index] + (card,)),
    )
    return _settle(state, LastMove.foundation(index))


def try_click_card(
    state: BoardState,
    column: int,
    card_index: int,
    rules: RulesConfig = STRICT_RULES,
) -> Transition:
    """
    The single "click a card" gesture: with a run lifted from another pile,
    try to lay it on ``column``; otherwise (or if that fails) select the card.
    Clicking an empty column can only drop the held run there.
    """
    if state.game_over:
        return Transition(state, Outcome.GAME_OVER)
    sel = state.selection
    if sel.kind != "none" and not (sel.kind == "column" and sel.column == column):
        moved = try_move_selection_to_column(state, column, rules)
        if moved.accepted or not state.columns[column]:
            return moved
        state = moved.state
    return try_select_column_card(state, column, card_index)


# ---- State-only API ----


def distribute(state: BoardState, rules: RulesConfig = STRICT_RULES) -> BoardState:
    return try_distribute(state, rules).state


def select_column_card(state: BoardState, column: int, card_index: int) -> BoardState:
    return try_select_column_card(state, column, card_index).state


def select_excuse(state: BoardState) -> BoardState:
    return try_select_excuse(state).state


def deselect(state: BoardState) -> BoardState:
    return try_deselect(state).state


def move_selection_to_column(state: BoardState, column: int, rules: RulesConfig = STRICT_RULES) -> BoardState:
    return try_move_selection_to_column(state, column, rules).state


def move_selection_to_foundation(state: BoardState, index: int) -> BoardState:
    return try_move_selection_to_foundation(state, index).state


def move_selection_to_excuse_slot(state: BoardState) -> BoardState:
    return try_move_selection_to_excuse_slot(state).state


def merge_trump_foundations(state: BoardState) -> BoardState:
    return try_merge_trump_foundations(state).state


def auto_place(state: BoardState, column: int) -> BoardState:
    return try_auto_place(state, column).state


def click_card(state: BoardState, column: int, card_index: int, rules: RulesConfig = STRICT_RULES) -> BoardState:
    return try_click_card(state, column, card_index, rules).state


__all__ = [
    "Outcome",
    "Transition",
    "new_game",
    "clear_last_move",
    "is_win",
    "try_distribute",
    "try_select_column_card",
    "try_select_excuse",
    "try_deselect",
    "try_move_selection_to_column",
    "try_move_selection_to_foundation",
    "try_move_selection_to_excuse_slot",
    "try_merge_trump_foundations",
    "try_auto_place",
    "try_click_card",
    "distribute",
    "select_column_card",
    "select_excuse",
    "deselect",
    "move_selection_to_column",
    "move_selection_to_foundation",
    "move_selection_to_excuse_slot",
    "merge_trump_foundations",
    "auto_place",
    "click_card",
]
