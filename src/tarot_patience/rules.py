"""
Placement rules: columns, foundations, trump merge, distribution eligibility, win.

All functions here are pure predicates over cards and piles; they never
build a new board.

Columns build down by one: suit cards in alternating colour, trumps on
trumps. The Excuse is a wildcard spacer: anything may go on it.
Foundations 0..3 build up by suit from the As, foundation 4 builds trumps up
from 1 and foundation 5 builds trumps down from 21, until the two trump
piles meet and are merged.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .board import (
    NUM_FOUNDATIONS,
    NUM_SUIT_FOUNDATIONS,
    TRUMP_ASCENDING,
    TRUMP_DESCENDING,
    BoardState,
)
from .deck import NUM_TRUMPS, RANK_ACE, RANK_ROI, Card, Suit


@dataclass(frozen=True)
class RulesConfig:
    """
    Rule variant switches.

    Defaults are the strict variant: only a Roi may start an empty column,
    the Excuse never starts a column, and distribution skips columns already
    capped by a face-up Roi.
    """

    empty_column_kings_only: bool = True
    excuse_on_empty_column: bool = False
    distribution_skips_kings: bool = True


STRICT_RULES = RulesConfig()
PERMISSIVE_RULES = RulesConfig(
    empty_column_kings_only=False,
    excuse_on_empty_column=True,
    distribution_skips_kings=False,
)


def can_place_on_column(card: Card, column: Sequence[Card], rules: RulesConfig = STRICT_RULES) -> bool:
    """
    True if ``card`` (alone or as the head of a run) may be laid on ``column``.
    Only the head is checked; the rest of a run was stacked legally already.
    """
    if not column:
        if card.is_excuse():
            return rules.excuse_on_empty_column
        if rules.empty_column_kings_only:
            return card.is_king()
        return True
    if card.is_excuse():
        return True
    top = column[-1]
    if top.is_excuse():
        return True
    if card.is_trump():
        return top.is_trump() and card.value == top.value - 1
    if top.is_suit():
        return card.is_red() != top.is_red() and card.value == top.value - 1
    return False


def can_place_on_foundation(
    card: Card,
    index: int,
    foundations: Sequence[Sequence[Card]],
    trumps_merged: bool,
) -> bool:
    """True if the single ``card`` may go on foundation ``index``."""
    if not 0 <= index < NUM_FOUNDATIONS:
        raise IndexError(f"Foundation index {index} out of range")
    pile = foundations[index]
    if index < NUM_SUIT_FOUNDATIONS:
        if not card.is_suit() or card.suit != Suit(index):
            return False
        return card.value == RANK_ACE if not pile else card.value == pile[-1].value + 1
    if not card.is_trump() or trumps_merged:
        return False
    if index == TRUMP_ASCENDING:
        return card.value == 1 if not pile else card.value == pile[-1].value + 1
    return card.value == NUM_TRUMPS if not pile else card.value == pile[-1].value - 1


def find_foundation(
    card: Card,
    foundations: Sequence[Sequence[Card]],
    trumps_merged: bool,
) -> int | None:
    """First foundation (scanning 0 -> 5) accepting ``card``, or None."""
    for i in range(NUM_FOUNDATIONS):
        if can_place_on_foundation(card, i, foundations, trumps_merged):
            return i
    return None


def can_merge(foundations: Sequence[Sequence[Card]], trumps_merged: bool) -> bool:
    """The two trump piles can merge once their fronts are adjacent (asc top + 1 == desc top)."""
    if trumps_merged:
        return False
    asc = foundations[TRUMP_ASCENDING]
    desc = foundations[TRUMP_DESCENDING]
    if not asc or not desc:
        return False
    return asc[-1].value + 1 == desc[-1].value


def is_capped(column: Sequence[Card]) -> bool:
    """A column is capped when its top card is a face-up Roi."""
    return bool(column) and column[-1].face_up and column[-1].is_king()


def eligible_columns(state: BoardState, rules: RulesConfig = STRICT_RULES) -> list[int]:
    """Columns receiving a card on distribution, in deal order."""
    if not rules.distribution_skips_kings:
        return list(range(len(state.columns)))
    return [i for i, col in enumerate(state.columns) if not is_capped(col)]


def is_win(state: BoardState) -> bool:
    """
    Won when every suit foundation holds its 14 cards, the trump piles hold
    all 21 trumps between them, and the Excuse rests in its slot.
    """
    suits_done = all(len(state.foundations[i]) == RANK_ROI for i in range(NUM_SUIT_FOUNDATIONS))
    trumps_done = len(state.foundations[TRUMP_ASCENDING]) + len(state.foundations[TRUMP_DESCENDING]) == NUM_TRUMPS
    return suits_done and trumps_done and state.excuse_slot is not None
