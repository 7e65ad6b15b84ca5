"""
Legal move enumeration (hints, agents) and board consistency checks.

A ``Move`` names a whole gesture (lift + drop); ``apply_move`` replays it
through the engine so hints and agents obey exactly the same rules as a
player.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import (
    NUM_COLUMNS,
    NUM_FOUNDATIONS,
    NUM_SUIT_FOUNDATIONS,
    TRUMP_ASCENDING,
    TRUMP_DESCENDING,
    BoardState,
)
from .deck import NUM_CARDS, NUM_TRUMPS, Suit
from .engine import (
    Outcome,
    Transition,
    try_deselect,
    try_distribute,
    try_merge_trump_foundations,
    try_move_selection_to_column,
    try_move_selection_to_excuse_slot,
    try_move_selection_to_foundation,
    try_select_column_card,
    try_select_excuse,
)
from .rules import (
    STRICT_RULES,
    RulesConfig,
    can_merge,
    can_place_on_column,
    can_place_on_foundation,
    eligible_columns,
)

MOVE_RUN = "run"                  # column run -> column
MOVE_FOUNDATION = "foundation"    # column top -> foundation
MOVE_TO_SLOT = "to_slot"          # column top Excuse -> Excuse slot
MOVE_FROM_SLOT = "from_slot"      # Excuse slot -> column
MOVE_DISTRIBUTE = "distribute"
MOVE_MERGE = "merge"


@dataclass(frozen=True)
class Move:
    kind: str
    source: Optional[int] = None      # source column
    card_index: Optional[int] = None  # run start in the source column
    target: Optional[int] = None      # destination column or foundation

    def __str__(self) -> str:
        if self.kind == MOVE_RUN:
            return f"col{self.source}[{self.card_index}:] -> col{self.target}"
        if self.kind == MOVE_FOUNDATION:
            return f"col{self.source} -> fdn{self.target}"
        if self.kind == MOVE_TO_SLOT:
            return f"col{self.source} -> excuse"
        if self.kind == MOVE_FROM_SLOT:
            return f"excuse -> col{self.target}"
        return self.kind


def _face_up_start(column) -> int:
    """Index of the first face-up card (len(column) if none)."""
    for i, card in enumerate(column):
        if card.face_up:
            return i
    return len(column)


def run_starts(state: BoardState, source: int, target: int, rules: RulesConfig = STRICT_RULES) -> list[int]:
    """Every run start in ``source`` whose head may be laid on ``target``, deepest first."""
    if source == target:
        return []
    src = state.columns[source]
    dest = state.columns[target]
    return [k for k in range(_face_up_start(src), len(src)) if can_place_on_column(src[k], dest, rules)]


def legal_moves(state: BoardState, rules: RulesConfig = STRICT_RULES) -> list[Move]:
    """All gestures the engine would accept from ``state``."""
    if state.game_over:
        return []
    moves: list[Move] = []

    for src in range(NUM_COLUMNS):
        for dst in range(NUM_COLUMNS):
            for k in run_starts(state, src, dst, rules):
                moves.append(Move(MOVE_RUN, source=src, card_index=k, target=dst))

    for src, col in enumerate(state.columns):
        if not col:
            continue
        top = col[-1]
        if top.is_excuse():
            if state.excuse_slot is None:
                moves.append(Move(MOVE_TO_SLOT, source=src, card_index=len(col) - 1))
            continue
        for fi in range(NUM_FOUNDATIONS):
            if can_place_on_foundation(top, fi, state.foundations, state.trumps_merged):
                moves.append(Move(MOVE_FOUNDATION, source=src, card_index=len(col) - 1, target=fi))

    if state.excuse_slot is not None:
        for dst, col in enumerate(state.columns):
            if can_place_on_column(state.excuse_slot, col, rules):
                moves.append(Move(MOVE_FROM_SLOT, target=dst))

    if can_merge(state.foundations, state.trumps_merged):
        moves.append(Move(MOVE_MERGE))
    if state.stock and eligible_columns(state, rules):
        moves.append(Move(MOVE_DISTRIBUTE))
    return moves


def apply_move(state: BoardState, move: Move, rules: RulesConfig = STRICT_RULES) -> Transition:
    """Replay ``move`` through the engine, starting from an empty selection."""
    state = try_deselect(state).state
    if move.kind == MOVE_DISTRIBUTE:
        return try_distribute(state, rules)
    if move.kind == MOVE_MERGE:
        return try_merge_trump_foundations(state)
    if move.kind == MOVE_FROM_SLOT:
        lifted = try_select_excuse(state)
        if lifted.outcome is not Outcome.SELECTED:
            return lifted
        return try_move_selection_to_column(lifted.state, move.target, rules)
    lifted = try_select_column_card(state, move.source, move.card_index)
    if lifted.outcome is not Outcome.SELECTED:
        return lifted
    if move.kind == MOVE_RUN:
        return try_move_selection_to_column(lifted.state, move.target, rules)
    if move.kind == MOVE_FOUNDATION:
        return try_move_selection_to_foundation(lifted.state, move.target)
    if move.kind == MOVE_TO_SLOT:
        return try_move_selection_to_excuse_slot(lifted.state)
    raise ValueError(f"Unknown move kind: {move.kind}")


def check_invariants(state: BoardState) -> None:
    """
    Raise ValueError on the first broken board invariant:
    - all 78 cards present exactly once;
    - columns: face-down cards below face-up ones, top card face up;
    - stock entirely face down;
    - suit foundations 1..n of their suit, trump piles 1..n and 21..21-n+1;
    - once merged, foundation 5 is empty and foundation 4 is a 1..n run;
    - only the Excuse, face up, in the Excuse slot.
    """
    ids = [c.id for c in state.all_cards()]
    if len(ids) != NUM_CARDS:
        raise ValueError(f"Board holds {len(ids)} cards, expected {NUM_CARDS}")
    if len(set(ids)) != NUM_CARDS:
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        raise ValueError(f"Duplicate cards on the board: {dupes}")

    for ci, col in enumerate(state.columns):
        if col and not col[-1].face_up:
            raise ValueError(f"Column {ci} top card {col[-1]} is face down")
        start = _face_up_start(col)
        if any(not c.face_up for c in col[start:]):
            raise ValueError(f"Column {ci} has a face-down card above a face-up one")

    if any(c.face_up for c in state.stock):
        raise ValueError("Stock contains a face-up card")

    for fi in range(NUM_SUIT_FOUNDATIONS):
        pile = state.foundations[fi]
        if any(not c.is_suit() or c.suit != Suit(fi) for c in pile):
            raise ValueError(f"Foundation {fi} holds a card of another suit")
        if [c.value for c in pile] != list(range(1, len(pile) + 1)):
            raise ValueError(f"Foundation {fi} is not a run from the As")

    asc = state.foundations[TRUMP_ASCENDING]
    desc = state.foundations[TRUMP_DESCENDING]
    if any(not c.is_trump() for c in asc + desc):
        raise ValueError("Trump foundation holds a non-trump card")
    if [c.value for c in asc] != list(range(1, len(asc) + 1)):
        raise ValueError("Ascending trump foundation is not a run from 1")
    if [c.value for c in desc] != list(range(NUM_TRUMPS, NUM_TRUMPS - len(desc), -1)):
        raise ValueError("Descending trump foundation is not a run from 21")
    if state.trumps_merged and desc:
        raise ValueError("Descending trump foundation not empty after merge")

    slot = state.excuse_slot
    if slot is not None and (not slot.is_excuse() or not slot.face_up):
        raise ValueError(f"Excuse slot holds {slot!r}")
