"""Deck creation and card sequencing for Lotería."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import List, Optional, Sequence

from .cards import CATALOG, CATALOG_SIZE, Card


def build_deck() -> List[Card]:
    """Return the 54-card deck in catalog order."""
    return list(CATALOG)


def shuffled_deck(rng: Optional[Random] = None) -> List[Card]:
    if rng is None:
        rng = Random()
    cards = build_deck()
    rng.shuffle(cards)
    return cards


@dataclass
class DeckSequencer:
    """A shuffled deck, a forward cursor and the history of revealed cards.

    ``current_index`` is -1 until the first card is called. ``called_cards`` only
    ever grows: rewinding the cursor with :meth:`retreat` or :meth:`jump_to`
    leaves it untouched, and a card is appended the first time its index is
    reached.
    """

    rng: Optional[Random] = None
    deck: Optional[Sequence[Card]] = None

    cards: List[Card] = field(init=False)
    current_index: int = field(init=False, default=-1)
    called_cards: List[Card] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = Random()
        if self.deck is not None:
            cards = list(self.deck)
            if sorted(card.id for card in cards) != sorted(card.id for card in CATALOG):
                raise ValueError(f"Deck must contain each of the {CATALOG_SIZE} cards exactly once.")
            self.cards = cards
        else:
            self.cards = shuffled_deck(self.rng)

    def shuffle(self) -> None:
        """New uniform permutation; cursor and history are reset."""
        assert self.rng is not None
        self.cards = shuffled_deck(self.rng)
        self.rewind()

    def rewind(self) -> None:
        """Back to the start of the current order, forgetting the history."""
        self.current_index = -1
        self.called_cards = []

    def advance(self) -> Optional[Card]:
        """Reveal the next card, or return None when the deck is exhausted."""
        if self.current_index >= len(self.cards) - 1:
            return None
        self.current_index += 1
        card = self.cards[self.current_index]
        if self.current_index >= len(self.called_cards):
            self.called_cards.append(card)
        return card

    def retreat(self) -> Optional[Card]:
        if self.current_index <= 0:
            return None
        self.current_index -= 1
        return self.cards[self.current_index]

    def jump_to(self, card: Card) -> Optional[Card]:
        index = next((i for i, called in enumerate(self.called_cards) if called.id == card.id), None)
        if index is None:
            return None
        self.current_index = index
        return self.cards[index]

    # Queries -----------------------------------------------------------

    @property
    def current_card(self) -> Optional[Card]:
        if self.current_index < 0:
            return None
        return self.cards[self.current_index]

    @property
    def revealed_count(self) -> int:
        return len(self.called_cards)

    @property
    def is_exhausted(self) -> bool:
        return self.current_index >= len(self.cards) - 1

    @property
    def cards_remaining(self) -> int:
        return max(0, len(self.cards) - (self.current_index + 1))

    @property
    def progress(self) -> float:
        if not self.cards:
            return 0.0
        return (self.current_index + 1) / len(self.cards)

    @property
    def progress_text(self) -> str:
        return f"{self.current_index + 1}/{len(self.cards)}"

    def can_advance(self) -> bool:
        return self.current_index < len(self.cards) - 1

    def can_retreat(self) -> bool:
        return self.current_index > 0

    def has_been_called(self, card: Card) -> bool:
        return any(called.id == card.id for called in self.called_cards)
