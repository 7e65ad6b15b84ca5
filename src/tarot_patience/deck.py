"""
Tarot deck for the patience: 78 cards (4 suits × 14, 21 trumps, Excuse).
Suit order matches the suit foundations (index 0..3).
"""
from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional


class Suit(IntEnum):
    """Cœur, Carreau, Trèfle, Pique. Value = suit foundation index."""
    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)


SUIT_LETTERS = "hdcs"
SUIT_SYMBOLS = "♥♦♣♠"

# Rank in a suit: 1=As (lowest), 2..10, 11=Valet, 12=Cavalier, 13=Dame, 14=Roi
RANK_ACE = 1
RANK_ROI = 14
NUM_TRUMPS = 21
NUM_CARDS = 78

KIND_SUIT = "suit"
KIND_TRUMP = "trump"
KIND_EXCUSE = "excuse"


@dataclass(frozen=True)
class Card:
    """
    A single tarot card. Either:
    - suited: suit + value (1=As .. 14=Roi)
    - trump: value 1..21
    - excuse: value 0, no suit

    ``face_up`` is part of the value; use ``turned_up()`` to get the visible copy.
    """

    kind: str  # "suit" | "trump" | "excuse"
    value: int = 0
    suit: Optional[Suit] = None
    face_up: bool = False

    def __post_init__(self) -> None:
        if self.kind == KIND_SUIT:
            if self.suit is None or not RANK_ACE <= self.value <= RANK_ROI:
                raise ValueError(f"Invalid suit card: suit={self.suit} value={self.value}")
        elif self.kind == KIND_TRUMP:
            if self.suit is not None or not 1 <= self.value <= NUM_TRUMPS:
                raise ValueError(f"Invalid trump card: value={self.value}")
        elif self.kind == KIND_EXCUSE:
            if self.suit is not None or self.value != 0:
                raise ValueError("The Excuse has no suit and value 0")
        else:
            raise ValueError(f"Unknown card kind: {self.kind}")

    @property
    def id(self) -> str:
        """Stable identifier, independent of ``face_up`` (e.g. ``h1``, ``t21``, ``ex``)."""
        if self.kind == KIND_EXCUSE:
            return "ex"
        if self.kind == KIND_TRUMP:
            return f"t{self.value}"
        return f"{SUIT_LETTERS[self.suit]}{self.value}"

    def is_excuse(self) -> bool:
        return self.kind == KIND_EXCUSE

    def is_trump(self) -> bool:
        return self.kind == KIND_TRUMP

    def is_suit(self) -> bool:
        return self.kind == KIND_SUIT

    def is_king(self) -> bool:
        """True for a Roi (value 14 of a suit)."""
        return self.kind == KIND_SUIT and self.value == RANK_ROI

    def is_red(self) -> bool:
        return self.kind == KIND_SUIT and self.suit.is_red

    def turned_up(self) -> Card:
        return self if self.face_up else replace(self, face_up=True)

    def turned_down(self) -> Card:
        return replace(self, face_up=False) if self.face_up else self

    def __str__(self) -> str:
        if self.kind == KIND_EXCUSE:
            return "Excuse"
        if self.kind == KIND_TRUMP:
            return f"Atout-{self.value}"
        v = self.value
        rank_str = {14: "R", 13: "D", 12: "C", 11: "V", 1: "A"}.get(v) or str(v)
        return f"{rank_str}{SUIT_SYMBOLS[self.suit]}"

    def __repr__(self) -> str:
        return str(self)


EXCUSE = Card(kind=KIND_EXCUSE)


def make_suit_card(suit: Suit, value: int, face_up: bool = False) -> Card:
    return Card(kind=KIND_SUIT, suit=suit, value=value, face_up=face_up)


def make_trump_card(value: int, face_up: bool = False) -> Card:
    return Card(kind=KIND_TRUMP, value=value, face_up=face_up)


def make_deck_78() -> list[Card]:
    """Build the full 78-card deck, face down, in canonical order."""
    deck: list[Card] = []
    for s in Suit:
        for value in range(RANK_ACE, RANK_ROI + 1):
            deck.append(make_suit_card(s, value))
    for n in range(1, NUM_TRUMPS + 1):
        deck.append(make_trump_card(n))
    deck.append(EXCUSE)
    return deck


def card_index(card: Card) -> int:
    """
    Stable index 0..77 matching make_deck_78():
      - 0..55  : suited cards (suit-major, value 1..14)
      - 56..76 : trumps 1..21
      - 77     : Excuse
    """
    if card.is_suit():
        return int(card.suit) * RANK_ROI + (card.value - 1)
    if card.is_trump():
        return 4 * RANK_ROI + (card.value - 1)
    return NUM_CARDS - 1


def shuffled_deck(rng: random.Random | None = None, seed: int | None = None) -> list[Card]:
    """
    Return a freshly built deck in random order.

    The permutation comes from ``rng.shuffle`` (Fisher–Yates); pass either an
    ``rng`` or a ``seed`` for reproducible deals.
    """
    if rng is None:
        rng = random.Random(seed)
    deck = make_deck_78()
    rng.shuffle(deck)
    return deck
