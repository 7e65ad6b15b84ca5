"""
Board state for the patience and the initial deal.

The board is an immutable snapshot: every pile is a tuple and every
transition in ``tarot_patience.engine`` builds a new ``BoardState`` with
``dataclasses.replace``.

Layout:
- 11 columns dealt in a triangle 1,2,3,4,5,6,5,4,3,2,1 (36 cards), only the
  last card of each column face up.
- 6 foundations: 0..3 one per suit (ascending from the As), 4 trumps
  ascending from 1, 5 trumps descending from 21.
- one Excuse slot.
- the stock: the remaining 42 cards, face down, top = last element.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Union

from .deck import Card, NUM_CARDS, shuffled_deck

COLUMN_SIZES = (1, 2, 3, 4, 5, 6, 5, 4, 3, 2, 1)
NUM_COLUMNS = len(COLUMN_SIZES)
INITIAL_DEAL_SIZE = sum(COLUMN_SIZES)  # 36
STOCK_SIZE = NUM_CARDS - INITIAL_DEAL_SIZE  # 42

NUM_SUIT_FOUNDATIONS = 4
TRUMP_ASCENDING = 4
TRUMP_DESCENDING = 5
NUM_FOUNDATIONS = 6

Pile = tuple[Card, ...]


# ---- Selection (what the player has lifted) ----


@dataclass(frozen=True)
class NoSelection:
    kind: str = field(default="none", init=False)


@dataclass(frozen=True)
class ColumnSelection:
    """The run from ``card_index`` to the end of ``column`` is lifted."""

    column: int
    card_index: int
    kind: str = field(default="column", init=False)


@dataclass(frozen=True)
class ExcuseSelection:
    """The Excuse resting in its slot is lifted."""

    kind: str = field(default="excuse", init=False)


Selection = Union[NoSelection, ColumnSelection, ExcuseSelection]

NO_SELECTION = NoSelection()
EXCUSE_SELECTION = ExcuseSelection()


# ---- Last accepted move (presentation annotation only) ----


@dataclass(frozen=True)
class LastMove:
    """
    Which pile the last accepted move landed on: "column", "foundation",
    "distribute" or "excuse". Never consulted by the rules; callers clear it
    with ``engine.clear_last_move`` when their highlight expires.
    """

    kind: str
    index: Optional[int] = None

    @staticmethod
    def column(index: int) -> LastMove:
        return LastMove("column", index)

    @staticmethod
    def foundation(index: int) -> LastMove:
        return LastMove("foundation", index)

    @staticmethod
    def distribute() -> LastMove:
        return LastMove("distribute")

    @staticmethod
    def excuse() -> LastMove:
        return LastMove("excuse")


@dataclass(frozen=True)
class BoardState:
    """Complete state of one game. Replaced wholesale by every accepted operation."""

    columns: tuple[Pile, ...]
    foundations: tuple[Pile, ...] = ((),) * NUM_FOUNDATIONS
    excuse_slot: Optional[Card] = None
    stock: Pile = ()
    selection: Selection = NO_SELECTION
    moves: int = 0
    trumps_merged: bool = False
    game_over: bool = False
    last_move: Optional[LastMove] = None

    def __post_init__(self) -> None:
        if len(self.columns) != NUM_COLUMNS:
            raise ValueError(f"Expected {NUM_COLUMNS} columns, got {len(self.columns)}")
        if len(self.foundations) != NUM_FOUNDATIONS:
            raise ValueError(f"Expected {NUM_FOUNDATIONS} foundations, got {len(self.foundations)}")

    # ---- Read helpers ----

    def top(self, column: int) -> Card | None:
        col = self.columns[column]
        return col[-1] if col else None

    def foundation_top(self, index: int) -> Card | None:
        pile = self.foundations[index]
        return pile[-1] if pile else None

    def all_cards(self) -> list[Card]:
        """Every card on the board, in a fixed order (columns, foundations, slot, stock)."""
        cards: list[Card] = []
        for col in self.columns:
            cards.extend(col)
        for pile in self.foundations:
            cards.extend(pile)
        if self.excuse_slot is not None:
            cards.append(self.excuse_slot)
        cards.extend(self.stock)
        return cards

    def placed_count(self) -> int:
        """Cards retired from play: foundations plus the Excuse slot."""
        return sum(len(p) for p in self.foundations) + (1 if self.excuse_slot is not None else 0)

    @property
    def phase(self) -> str:
        """State machine view: "won", "selected" or "idle"."""
        if self.game_over:
            return "won"
        if self.selection.kind != "none":
            return "selected"
        return "idle"


def deal_board(deck: list[Card]) -> BoardState:
    """
    Lay out a shuffled deck left to right: the first 36 cards fill the columns
    (only the last card of each column face up), the other 42 form the stock.
    """
    if len(deck) != NUM_CARDS:
        raise ValueError(f"Expected a {NUM_CARDS}-card deck, got {len(deck)}")
    if len({c.id for c in deck}) != NUM_CARDS:
        raise ValueError("Deck contains duplicate cards")

    columns: list[Pile] = []
    idx = 0
    for size in COLUMN_SIZES:
        dealt = deck[idx:idx + size]
        col = tuple(c.turned_up() if i == size - 1 else c.turned_down() for i, c in enumerate(dealt))
        columns.append(col)
        idx += size

    stock = tuple(c.turned_down() for c in deck[idx:])
    return BoardState(columns=tuple(columns), stock=stock)


def new_board(rng: random.Random | None = None, seed: int | None = None) -> BoardState:
    """Shuffle a fresh deck and deal it."""
    return deal_board(shuffled_deck(rng=rng, seed=seed))
