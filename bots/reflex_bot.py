"""Fixed-latency bot, used to stand in for the human player."""

from __future__ import annotations

from typing import Optional

from engine.cards import Card
from engine.opponent import OpponentStrategy
from engine.pacing import Difficulty


class ReflexBot(OpponentStrategy):
    name = "Reflex"

    def __init__(self, delay: float = 0.0) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative.")
        self.delay = delay

    def mark_delay(self, card: Card, difficulty: Difficulty) -> Optional[float]:
        return min(self.delay, difficulty.interval / 2)
