"""Bot strategies for Lotería."""

from engine.opponent import CpuOpponent

from .distracted_bot import DistractedBot
from .reflex_bot import ReflexBot

__all__ = ["CpuOpponent", "DistractedBot", "ReflexBot"]
