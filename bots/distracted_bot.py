"""Opponent that sometimes misses a called card."""

from __future__ import annotations

import random
from typing import Optional

from engine.cards import Card
from engine.opponent import OpponentStrategy
from engine.pacing import Difficulty


class DistractedBot(OpponentStrategy):
    name = "Distracted"

    def __init__(self, miss_rate: float = 0.2, seed: Optional[int] = None) -> None:
        if not 0.0 <= miss_rate <= 1.0:
            raise ValueError("miss_rate must be between 0 and 1.")
        self.miss_rate = miss_rate
        self._rng = random.Random(seed)

    def mark_delay(self, card: Card, difficulty: Difficulty) -> Optional[float]:
        if self._rng.random() < self.miss_rate:
            return None
        low, high = difficulty.cpu_mark_delay
        return self._rng.uniform(low, high)
