"""Tarot patience: rule engine for a 78-card Tarot solitaire."""

__version__ = "0.1.0"

from .deck import Card, EXCUSE, Suit, make_deck_78, shuffled_deck
from .board import (
    BoardState,
    ColumnSelection,
    ExcuseSelection,
    LastMove,
    NoSelection,
    deal_board,
    new_board,
)
from .rules import (
    PERMISSIVE_RULES,
    STRICT_RULES,
    RulesConfig,
    can_merge,
    can_place_on_column,
    can_place_on_foundation,
    find_foundation,
    is_win,
)
from .engine import (
    Outcome,
    Transition,
    auto_place,
    clear_last_move,
    click_card,
    deselect,
    distribute,
    merge_trump_foundations,
    move_selection_to_column,
    move_selection_to_excuse_slot,
    move_selection_to_foundation,
    new_game,
    select_column_card,
    select_excuse,
)
from .moves import Move, apply_move, check_invariants, legal_moves
