"""Tests for the 78-card deck and the shuffler."""
import random

import pytest

from tarot_patience.deck import (
    Card,
    EXCUSE,
    NUM_CARDS,
    Suit,
    card_index,
    make_deck_78,
    make_suit_card,
    make_trump_card,
    shuffled_deck,
)


def test_deck_78():
    deck = make_deck_78()
    assert len(deck) == NUM_CARDS
    assert len({c.id for c in deck}) == NUM_CARDS
    assert sum(1 for c in deck if c.is_suit()) == 4 * 14
    assert sum(1 for c in deck if c.is_trump()) == 21
    assert [c for c in deck if c.is_excuse()] == [EXCUSE]
    assert all(not c.face_up for c in deck)


def test_card_ids():
    assert make_suit_card(Suit.HEARTS, 1).id == "h1"
    assert make_suit_card(Suit.SPADES, 14).id == "s14"
    assert make_trump_card(21).id == "t21"
    assert EXCUSE.id == "ex"
    # Turning a card over does not change its identity
    assert make_trump_card(7).turned_up().id == "t7"


def test_card_index_covers_full_deck_without_collision():
    indices = [card_index(c) for c in make_deck_78()]
    assert indices == list(range(NUM_CARDS))


def test_invalid_cards_are_rejected():
    with pytest.raises(ValueError):
        Card(kind="suit", value=15, suit=Suit.CLUBS)
    with pytest.raises(ValueError):
        Card(kind="suit", value=3)
    with pytest.raises(ValueError):
        Card(kind="trump", value=22)
    with pytest.raises(ValueError):
        Card(kind="excuse", value=1)
    with pytest.raises(ValueError):
        Card(kind="joker")


def test_colours():
    assert make_suit_card(Suit.HEARTS, 5).is_red()
    assert make_suit_card(Suit.DIAMONDS, 5).is_red()
    assert not make_suit_card(Suit.CLUBS, 5).is_red()
    assert not make_suit_card(Suit.SPADES, 5).is_red()
    assert not make_trump_card(5).is_red()


def test_turned_up_and_down():
    card = make_suit_card(Suit.CLUBS, 14)
    up = card.turned_up()
    assert up.face_up and not card.face_up
    assert up.turned_up() is up
    assert up.turned_down() == card
    assert up.is_king()


def test_str():
    assert str(make_suit_card(Suit.HEARTS, 14)) == "R♥"
    assert str(make_suit_card(Suit.SPADES, 1)) == "A♠"
    assert str(make_suit_card(Suit.CLUBS, 7)) == "7♣"
    assert str(make_trump_card(21)) == "Atout-21"
    assert str(EXCUSE) == "Excuse"


def test_shuffled_deck_is_a_permutation():
    deck = shuffled_deck(rng=random.Random(3))
    assert sorted(card_index(c) for c in deck) == list(range(NUM_CARDS))


def test_shuffled_deck_is_reproducible():
    a = shuffled_deck(seed=11)
    b = shuffled_deck(rng=random.Random(11))
    c = shuffled_deck(seed=12)
    assert [x.id for x in a] == [x.id for x in b]
    assert [x.id for x in a] != [x.id for x in c]
