"""Core engine package for Lotería."""

__all__ = [
    "cards",
    "board",
    "deck",
    "clock",
    "pacing",
    "signals",
    "playback",
    "caller",
    "opponent",
    "match",
    "settings_schema",
    "service",
]
