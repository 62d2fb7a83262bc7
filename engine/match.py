"""Versus-CPU orchestration: two boards, one caller, a running tally."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import AbstractSet, Iterable, Optional

from . import signals
from .board import ALL_WIN_CONDITIONS, Board, Cell, WinCondition
from .cards import Card
from .clock import Clock
from .deck import DeckSequencer
from .opponent import CpuOpponent, OpponentSimulator, OpponentStrategy
from .pacing import Difficulty
from .playback import PlaybackScheduler, PlaybackState

logger = logging.getLogger(__name__)


class MatchResult(str, Enum):
    PLAYER_WINS = "player_wins"
    CPU_WINS = "cpu_wins"
    DRAW = "draw"


@dataclass
class ScoreTally:
    """Session results; counters only ever go up."""

    player_wins: int = 0
    cpu_wins: int = 0
    draws: int = 0

    def record(self, result: MatchResult) -> None:
        if result is MatchResult.PLAYER_WINS:
            self.player_wins += 1
        elif result is MatchResult.CPU_WINS:
            self.cpu_wins += 1
        else:
            self.draws += 1

    @property
    def games(self) -> int:
        return self.player_wins + self.cpu_wins + self.draws

    def label(self) -> str:
        return f"{self.player_wins}-{self.draws}-{self.cpu_wins}"


def resolve_outcome(player_won: bool, cpu_won: bool) -> Optional[MatchResult]:
    if player_won and cpu_won:
        return MatchResult.DRAW
    if player_won:
        return MatchResult.PLAYER_WINS
    if cpu_won:
        return MatchResult.CPU_WINS
    return None


class MatchController:
    """Manage versus-CPU games and the tally across rematches."""

    def __init__(
        self,
        clock: Clock,
        *,
        difficulty: Difficulty = Difficulty.MEDIUM,
        win_conditions: Iterable[WinCondition] = ALL_WIN_CONDITIONS,
        opponent: Optional[OpponentStrategy] = None,
        rng: Optional[Random] = None,
    ) -> None:
        self.clock = clock
        self.rng = rng or Random()
        self.difficulty = difficulty
        self.win_conditions: frozenset[WinCondition] = frozenset(win_conditions)
        self.tally = ScoreTally()

        self.sequencer = DeckSequencer(rng=self.rng)
        self.scheduler = PlaybackScheduler(
            self.sequencer,
            clock,
            difficulty.interval,
            on_card=self._on_card_called,
            on_finished=self._on_deck_exhausted,
        )
        self.opponent = opponent or CpuOpponent(rng=self.rng)
        self.simulator = OpponentSimulator(
            clock,
            self.opponent,
            difficulty,
            mark=self._cpu_mark,
            is_active=self.is_active,
        )

        self.player_board: Board
        self.cpu_board: Board
        self.result: Optional[MatchResult] = None
        self.game_over = False
        self.games_started = 0
        self.start_new_game()

    # Lifecycle ---------------------------------------------------------

    def start_new_game(self) -> None:
        """Fresh boards and deck; the tally is kept."""
        self.simulator.start_game()
        self.scheduler.reset()
        self.player_board = Board.random(self.rng)
        self.cpu_board = Board.random(self.rng)
        self.sequencer.shuffle()
        self.result = None
        self.game_over = False
        self.games_started += 1
        logger.debug("Game %d dealt (difficulty=%s)", self.games_started, self.difficulty.value)
        signals.deck_shuffled.send(self)

    def rematch(self) -> None:
        self.start_new_game()

    def configure(
        self,
        *,
        difficulty: Optional[Difficulty] = None,
        win_conditions: Optional[Iterable[WinCondition]] = None,
    ) -> bool:
        """Change settings before the first card of a game (or after it ended)."""
        if not self.game_over and self.sequencer.current_index != -1:
            return False
        if difficulty is not None:
            self.difficulty = difficulty
            self.simulator.difficulty = difficulty
            self.scheduler.set_interval(difficulty.interval)
        if win_conditions is not None:
            self.win_conditions = frozenset(win_conditions)
        return True

    # Playback ----------------------------------------------------------

    def play(self) -> bool:
        if self.game_over:
            return False
        return self.scheduler.play()

    def pause(self) -> bool:
        return self.scheduler.pause()

    def is_active(self) -> bool:
        return not self.game_over

    @property
    def can_start(self) -> bool:
        return not self.scheduler.is_playing and not self.game_over

    # Marking -----------------------------------------------------------

    def mark_cell(self, cell_id: str) -> bool:
        """Player taps a cell. Return True if it became marked."""
        if self.game_over or self.scheduler.state is not PlaybackState.PLAYING:
            return False
        cell = self.player_board.cell(cell_id)
        if cell is None or cell.is_marked:
            return False
        if not self.sequencer.has_been_called(cell.card):
            return False
        self.player_board.mark(cell.card)
        signals.cell_marked.send(self, board=self.player_board, cell=cell, by="player")
        self.check_for_win()
        return True

    def mark_card(self, card: Card) -> bool:
        """Player marks ``card`` wherever it sits on their board."""
        cell = self._cell_for(self.player_board, card)
        if cell is None:
            return False
        return self.mark_cell(cell.id)

    def _cpu_mark(self, card: Card) -> bool:
        if self.game_over:
            return False
        if not self.cpu_board.mark(card):
            return False
        cell = self._cell_for(self.cpu_board, card)
        signals.cell_marked.send(self, board=self.cpu_board, cell=cell, by="cpu")
        self.check_for_win()
        return True

    @staticmethod
    def _cell_for(board: Board, card: Card) -> Optional[Cell]:
        return next((cell for cell in board.cells if cell.card.id == card.id), None)

    # Resolution --------------------------------------------------------

    def check_for_win(self) -> Optional[MatchResult]:
        if self.game_over:
            return self.result
        outcome = resolve_outcome(
            self.player_board.check_win(self.win_conditions),
            self.cpu_board.check_win(self.win_conditions),
        )
        if outcome is not None:
            self._resolve(outcome)
        return self.result

    def _resolve(self, result: MatchResult) -> None:
        if self.game_over:
            return
        self.game_over = True
        self.result = result
        self.tally.record(result)
        self.scheduler.halt()
        self.simulator.cancel_all()
        logger.info("Game %d finished: %s (tally %s)", self.games_started, result.value, self.tally.label())
        signals.match_resolved.send(self, result=result, tally=self.tally)

    # Hooks -------------------------------------------------------------

    def _on_card_called(self, card: Card, fresh: bool) -> None:
        if fresh and not self.game_over:
            self.simulator.on_card_called(card, self.sequencer.current_index)

    def _on_deck_exhausted(self) -> None:
        if self.check_for_win() is None:
            self._resolve(MatchResult.DRAW)

    # Queries -----------------------------------------------------------

    @property
    def current_card(self) -> Optional[Card]:
        return self.sequencer.current_card

    @property
    def called_cards(self) -> list[Card]:
        return list(self.sequencer.called_cards)

    def active_conditions(self) -> AbstractSet[WinCondition]:
        return self.win_conditions
