"""Timer-driven autoplay over a :class:`~engine.deck.DeckSequencer`."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Optional

from . import signals
from .cards import Card
from .clock import Clock, TimerHandle
from .deck import DeckSequencer
from .pacing import PROGRESS_TICK, validate_interval

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    IDLE = auto()
    PLAYING = auto()
    PAUSED = auto()
    FINISHED = auto()

    def __str__(self) -> str:
        return self.name.lower()


class PlaybackScheduler:
    """Calls cards on a cadence and keeps a smooth countdown signal.

    At most one card timer and one progress timer exist at any time. Both are
    cancelled before they are replaced, and every callback carries the
    generation it was scheduled under so a late firing from an older
    generation is ignored.
    """

    def __init__(
        self,
        sequencer: DeckSequencer,
        clock: Clock,
        interval: float,
        *,
        on_card: Optional[Callable[[Card, bool], None]] = None,
        on_finished: Optional[Callable[[], None]] = None,
        tick: float = PROGRESS_TICK,
    ) -> None:
        self.sequencer = sequencer
        self.clock = clock
        self.interval = validate_interval(interval)
        self.on_card = on_card
        self.on_finished = on_finished
        self.tick = tick

        self.state = PlaybackState.IDLE
        self.progress = 0.0
        self.paused_remaining = 0.0

        self._card_timer: Optional[TimerHandle] = None
        self._progress_timer: Optional[TimerHandle] = None
        self._generation = 0
        self._cycle_started_at = clock.now()

    # Controls ----------------------------------------------------------

    def play(self) -> bool:
        """Start or resume autoplay. Return False when nothing changed."""
        if self.state is PlaybackState.PLAYING or self.state is PlaybackState.FINISHED:
            return False

        if self.state is PlaybackState.IDLE:
            if self.sequencer.current_index == -1:
                if not self._call_next():
                    return False
            else:
                self.progress = 0.0
                self._cycle_started_at = self.clock.now()
            self._set_state(PlaybackState.PLAYING)
            self._start_timers(self.interval)
            return True

        remaining = self.paused_remaining
        self.paused_remaining = 0.0
        self._set_state(PlaybackState.PLAYING)
        if remaining > 0:
            self._cycle_started_at = self.clock.now() - (self.interval - remaining)
            self._start_timers(remaining)
        else:
            self.progress = 0.0
            self._cycle_started_at = self.clock.now()
            self._start_timers(self.interval)
        return True

    def pause(self) -> bool:
        if self.state is not PlaybackState.PLAYING:
            return False
        self._refresh_progress()
        self.paused_remaining = self.interval * (1.0 - self.progress)
        self._cancel_timers()
        self._set_state(PlaybackState.PAUSED)
        return True

    def next(self) -> Optional[Card]:
        """Call one card right away; restart the cadence when playing."""
        if self.state is PlaybackState.FINISHED:
            return None
        was_playing = self.state is PlaybackState.PLAYING
        self._cancel_timers()
        self.paused_remaining = 0.0
        if not self._call_next():
            return None
        if was_playing and self.state is PlaybackState.PLAYING:
            self._start_timers(self.interval)
        elif self.state is PlaybackState.IDLE:
            self._set_state(PlaybackState.PAUSED)
        return self.sequencer.current_card

    def set_interval(self, interval: float) -> None:
        """Change the cadence; a running countdown starts over at once."""
        self.interval = validate_interval(interval)
        self._cancel_timers()
        self.progress = 0.0
        self.paused_remaining = 0.0
        self._cycle_started_at = self.clock.now()
        if self.state is PlaybackState.PLAYING:
            self._start_timers(self.interval)
        logger.debug("Interval set to %.2fs (state=%s)", self.interval, self.state)

    def reset(self) -> None:
        """Stop everything and return to Idle."""
        self._cancel_timers()
        self.progress = 0.0
        self.paused_remaining = 0.0
        self._set_state(PlaybackState.IDLE)

    def halt(self) -> None:
        """Stop for good without touching the deck."""
        self._cancel_timers()
        self.paused_remaining = 0.0
        self._set_state(PlaybackState.FINISHED)

    # Queries -----------------------------------------------------------

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    def live_progress(self) -> float:
        """Countdown progress computed from the clock instead of the last tick."""
        if self.state is not PlaybackState.PLAYING:
            return self.progress
        return self._elapsed_fraction()

    def remaining_seconds(self) -> float:
        if self.state is PlaybackState.PAUSED and self.paused_remaining > 0:
            return self.paused_remaining
        return self.interval * (1.0 - self.live_progress())

    # Internals ---------------------------------------------------------

    def _call_next(self) -> bool:
        before = self.sequencer.revealed_count
        card = self.sequencer.advance()
        if card is None:
            self._finish()
            return False
        fresh = self.sequencer.revealed_count > before
        self._cycle_started_at = self.clock.now()
        self.progress = 0.0
        self.paused_remaining = 0.0
        if self.on_card is not None:
            self.on_card(card, fresh)
        signals.card_called.send(self, card=card, index=self.sequencer.current_index, fresh=fresh)
        return True

    def _finish(self) -> None:
        self._cancel_timers()
        self.paused_remaining = 0.0
        logger.debug("Deck exhausted after %d cards", self.sequencer.revealed_count)
        self._set_state(PlaybackState.FINISHED)
        if self.on_finished is not None:
            self.on_finished()

    def _set_state(self, state: PlaybackState) -> None:
        if state is self.state:
            return
        logger.debug("Playback %s -> %s", self.state, state)
        self.state = state
        signals.playback_changed.send(self, state=state)

    def _start_timers(self, first_delay: float) -> None:
        self._cancel_timers()
        self._schedule_card(first_delay)
        self._schedule_tick()

    def _cancel_timers(self) -> None:
        self._generation += 1
        if self._card_timer is not None:
            self._card_timer.cancel()
            self._card_timer = None
        if self._progress_timer is not None:
            self._progress_timer.cancel()
            self._progress_timer = None

    def _schedule_card(self, delay: float) -> None:
        if self._card_timer is not None:
            self._card_timer.cancel()
        token = self._generation
        self._card_timer = self.clock.call_later(delay, lambda: self._on_card_due(token))

    def _schedule_tick(self) -> None:
        if self._progress_timer is not None:
            self._progress_timer.cancel()
        token = self._generation
        self._progress_timer = self.clock.call_later(self.tick, lambda: self._on_tick(token))

    def _on_card_due(self, token: int) -> None:
        if token != self._generation or self.state is not PlaybackState.PLAYING:
            return
        self._card_timer = None
        if not self._call_next():
            return
        if token == self._generation and self.state is PlaybackState.PLAYING:
            self._schedule_card(self.interval)

    def _on_tick(self, token: int) -> None:
        if token != self._generation or self.state is not PlaybackState.PLAYING:
            return
        self._progress_timer = None
        self._refresh_progress()
        signals.progress_ticked.send(self, progress=self.progress)
        self._schedule_tick()

    def _elapsed_fraction(self) -> float:
        elapsed = self.clock.now() - self._cycle_started_at
        return min(max(elapsed / self.interval, 0.0), 1.0)

    def _refresh_progress(self) -> None:
        self.progress = self._elapsed_fraction()
