from random import Random

import pytest

from engine.cards import CATALOG
from engine.deck import DeckSequencer, build_deck, shuffled_deck


def test_every_shuffle_is_a_permutation():
    rng = Random(0)
    expected = sorted(card.id for card in build_deck())
    orders = set()
    for _ in range(50):
        deck = shuffled_deck(rng)
        assert sorted(card.id for card in deck) == expected
        orders.add(tuple(card.id for card in deck))
    assert len(orders) > 1


def test_advance_reveals_each_card_once_then_stops():
    sequencer = DeckSequencer(rng=Random(3))
    assert sequencer.current_card is None
    assert sequencer.progress_text == "0/54"
    seen = [sequencer.advance() for _ in range(54)]
    assert seen == sequencer.cards
    assert sequencer.called_cards == sequencer.cards
    assert sequencer.is_exhausted
    assert sequencer.advance() is None
    assert sequencer.current_index == 53
    assert sequencer.cards_remaining == 0


def test_history_only_grows_while_the_cursor_moves_back():
    sequencer = DeckSequencer(deck=CATALOG)
    for _ in range(3):
        sequencer.advance()
    assert sequencer.retreat() is CATALOG[1]
    assert sequencer.retreat() is CATALOG[0]
    assert sequencer.retreat() is None
    assert sequencer.advance() is CATALOG[1]
    assert len(sequencer.called_cards) == 3
    assert sequencer.revealed_count == 3


def test_jump_to_requires_a_called_card():
    sequencer = DeckSequencer(deck=CATALOG)
    sequencer.advance()
    sequencer.advance()
    assert sequencer.jump_to(CATALOG[10]) is None
    assert sequencer.current_index == 1
    assert sequencer.jump_to(CATALOG[0]) is CATALOG[0]
    assert sequencer.current_index == 0
    assert sequencer.has_been_called(CATALOG[1])


def test_shuffle_resets_cursor_and_history():
    sequencer = DeckSequencer(rng=Random(1))
    sequencer.advance()
    sequencer.shuffle()
    assert sequencer.current_index == -1
    assert sequencer.called_cards == []
    assert sequencer.progress == 0.0


def test_given_deck_must_be_a_permutation():
    with pytest.raises(ValueError):
        DeckSequencer(deck=CATALOG[:53])


def test_every_card_reaches_the_top_of_the_deck():
    rng = Random(0)
    tops = {shuffled_deck(rng)[0].id for _ in range(2000)}
    assert tops == {card.id for card in CATALOG}


def test_history_stays_a_prefix_under_random_moves():
    rng = Random(12)
    sequencer = DeckSequencer(rng=Random(4))
    for _ in range(500):
        move = rng.choice(["advance", "advance", "advance", "retreat", "jump"])
        if move == "advance":
            sequencer.advance()
        elif move == "retreat":
            sequencer.retreat()
        elif sequencer.called_cards:
            sequencer.jump_to(rng.choice(sequencer.called_cards))
        history = sequencer.called_cards
        assert history == sequencer.cards[:len(history)]
        assert len({card.id for card in history}) == len(history)
        assert sequencer.current_index < len(history) or sequencer.current_index == -1


def test_shuffle_positions_are_uniform():
    rng = Random(2024)
    shuffles = 5400
    expected = shuffles / 54
    # counts[position][card id - 1]
    counts = [[0] * 54 for _ in range(54)]
    for _ in range(shuffles):
        for position, card in enumerate(shuffled_deck(rng)):
            counts[position][card.id - 1] += 1
    for row in counts:
        assert sum(row) == shuffles
        assert all(0.5 * expected < observed < 1.5 * expected for observed in row)
        chi_square = sum((observed - expected) ** 2 / expected for observed in row)
        # 53 degrees of freedom; the 99.9th percentile is about 90.
        assert chi_square < 120
