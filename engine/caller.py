"""Caller mode: reveal the deck to a room, no boards involved."""

from __future__ import annotations

import logging
from random import Random
from typing import Optional, Sequence

from . import signals
from .cards import Card
from .clock import Clock
from .deck import DeckSequencer
from .pacing import Speed
from .playback import PlaybackScheduler, PlaybackState

logger = logging.getLogger(__name__)


class Announcer:
    """Receives the name of every newly revealed card. Fire-and-forget."""

    muted: bool = False

    def announce(self, card_name: str) -> None:
        raise NotImplementedError


class NullAnnouncer(Announcer):
    def announce(self, card_name: str) -> None:
        return None


class LoggingAnnouncer(Announcer):
    def announce(self, card_name: str) -> None:
        logger.info("¡%s!", card_name)


class CallerSession:
    """Deck, cadence and announcer for broadcast play."""

    def __init__(
        self,
        clock: Clock,
        *,
        speed: Speed = Speed.NORMAL,
        announcer: Optional[Announcer] = None,
        rng: Optional[Random] = None,
        deck: Optional[Sequence[Card]] = None,
    ) -> None:
        self.clock = clock
        self.speed = speed
        self.announcer = announcer or NullAnnouncer()
        self.sequencer = DeckSequencer(rng=rng, deck=deck)
        self.scheduler = PlaybackScheduler(self.sequencer, clock, speed.interval, on_card=self._on_card)

    # Controls ----------------------------------------------------------

    def play(self) -> bool:
        if self.scheduler.is_playing:
            return False
        if self.sequencer.is_exhausted:
            # Start the same order over from the top.
            self.sequencer.rewind()
            self.scheduler.reset()
        elif self.scheduler.state is PlaybackState.FINISHED:
            # Cursor was moved back after the end: continue from it.
            self.scheduler.reset()
        return self.scheduler.play()

    def pause(self) -> bool:
        return self.scheduler.pause()

    def next(self) -> Optional[Card]:
        return self.scheduler.next()

    def previous(self) -> Optional[Card]:
        return self.sequencer.retreat()

    def jump_to(self, card: Card) -> Optional[Card]:
        return self.sequencer.jump_to(card)

    def reshuffle(self) -> None:
        self.scheduler.reset()
        self.sequencer.shuffle()
        logger.debug("Caller deck reshuffled")
        signals.deck_shuffled.send(self)

    def set_speed(self, speed: Speed) -> None:
        self.speed = speed
        self.scheduler.set_interval(speed.interval)

    # Queries -----------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self.scheduler.state

    @property
    def current_card(self) -> Optional[Card]:
        return self.sequencer.current_card

    @property
    def called_cards(self) -> list[Card]:
        return list(self.sequencer.called_cards)

    # Hooks -------------------------------------------------------------

    def _on_card(self, card: Card, fresh: bool) -> None:
        if fresh and not self.announcer.muted:
            self.announcer.announce(card.name)
