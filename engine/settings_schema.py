"""Validation schema for the settings the engine reads at game start."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, validator

from .board import WinCondition
from .pacing import Difficulty, Speed


class CallerSettings(BaseModel):
    speed: Speed = Field(Speed.NORMAL, description="Cadence of caller mode.")
    voice_enabled: bool = Field(True, description="Announce each newly called card.")
    announce_riddles: bool = Field(False, description="Recite the riddle before the card name.")


class MatchSettings(BaseModel):
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Card cadence and CPU reaction time.")
    win_conditions: list[WinCondition] = Field(
        default_factory=lambda: list(WinCondition),
        description="Patterns that win a game; any one of them is enough.",
    )

    @validator("win_conditions")
    def ensure_conditions(cls, value: list[WinCondition]) -> list[WinCondition]:
        if not value:
            raise ValueError("At least one win condition must be enabled.")
        unique: list[WinCondition] = []
        for condition in value:
            if condition not in unique:
                unique.append(condition)
        return unique


class GameSettings(BaseModel):
    caller: CallerSettings = Field(default_factory=CallerSettings)
    match: MatchSettings = Field(default_factory=MatchSettings)


def load_settings(path: Optional[Path]) -> GameSettings:
    """Read settings from a JSON file; a missing file yields the defaults."""
    if path is None or not path.exists():
        return GameSettings()
    payload = json.loads(path.read_text(encoding="utf-8"))
    return GameSettings(**payload)


def save_settings(settings: GameSettings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.dict(), indent=2, ensure_ascii=False), encoding="utf-8")
