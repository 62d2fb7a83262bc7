"""Simulated opponent: marks its board a humanlike moment after each call."""

from __future__ import annotations

import logging
from random import Random
from typing import Callable, Dict, Optional, Tuple

from .cards import Card
from .clock import Clock, TimerHandle
from .pacing import Difficulty

logger = logging.getLogger(__name__)


class OpponentStrategy:
    """Base class for opponent reaction policies."""

    name: str = "BaseOpponent"

    def on_game_start(self) -> None:
        """Optional hook invoked when a new game is dealt."""
        return None

    def mark_delay(self, card: Card, difficulty: Difficulty) -> Optional[float]:
        """Seconds to wait before marking ``card``, or None to let it pass."""
        raise NotImplementedError


class CpuOpponent(OpponentStrategy):
    """Reacts after a delay drawn uniformly from the difficulty's range."""

    name = "CPU"

    def __init__(self, seed: Optional[int] = None, *, rng: Optional[Random] = None) -> None:
        self._rng = rng or Random(seed)

    def mark_delay(self, card: Card, difficulty: Difficulty) -> Optional[float]:
        low, high = difficulty.cpu_mark_delay
        return self._rng.uniform(low, high)


PendingKey = Tuple[int, int]


class OpponentSimulator:
    """Turns called cards into delayed marks.

    Pending marks are keyed by ``(game, deck index)``. A mark that fires after
    its game was replaced or after the match became inactive does nothing.
    """

    def __init__(
        self,
        clock: Clock,
        strategy: OpponentStrategy,
        difficulty: Difficulty,
        *,
        mark: Callable[[Card], bool],
        is_active: Callable[[], bool],
    ) -> None:
        self.clock = clock
        self.strategy = strategy
        self.difficulty = difficulty
        self._mark = mark
        self._is_active = is_active
        self._game = 0
        self._pending: Dict[PendingKey, TimerHandle] = {}

    def start_game(self) -> None:
        self.cancel_all()
        self._game += 1
        self.strategy.on_game_start()

    def on_card_called(self, card: Card, index: int) -> bool:
        """Schedule a mark for a newly revealed card. Return True if scheduled."""
        if not self._is_active():
            return False
        key = (self._game, index)
        if key in self._pending:
            return False
        delay = self.strategy.mark_delay(card, self.difficulty)
        if delay is None:
            return False
        self._pending[key] = self.clock.call_later(delay, lambda: self._fire(key, card))
        return True

    def cancel_all(self) -> None:
        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _fire(self, key: PendingKey, card: Card) -> None:
        self._pending.pop(key, None)
        if key[0] != self._game or not self._is_active():
            return
        if self._mark(card):
            logger.debug("%s marked %s", self.strategy.name, card.name)
