"""Convenience service layer for UI consumers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .board import BOARD_SIDE, Board, WinCondition
from .caller import CallerSession
from .cards import Card, card_by_id, serialize_card
from .match import MatchController, ScoreTally
from .pacing import Difficulty, Speed


@dataclass
class CellView:
    id: str
    row: int
    col: int
    card: dict
    marked: bool


@dataclass
class BoardView:
    cells: list[CellView]
    marked_count: int
    winning_lines: list[list[int]]


@dataclass
class TallyView:
    player_wins: int
    cpu_wins: int
    draws: int


@dataclass
class CallerView:
    state: str
    speed: str
    current_card: Optional[dict]
    called_cards: list[dict]
    progress: float
    remaining_seconds: float
    deck_progress: str
    cards_remaining: int
    can_next: bool
    can_previous: bool
    accepted: bool = True


@dataclass
class MatchView:
    state: str
    difficulty: str
    win_conditions: list[str]
    current_card: Optional[dict]
    called_cards: list[dict]
    progress: float
    remaining_seconds: float
    deck_progress: str
    player_board: BoardView
    cpu_board: BoardView
    result: Optional[str]
    game_over: bool
    tally: TallyView
    accepted: bool = True


def _card_payload(card: Optional[Card]) -> Optional[dict]:
    return serialize_card(card) if card is not None else None


def board_view(board: Board, conditions: Iterable[WinCondition]) -> BoardView:
    return BoardView(
        cells=[
            CellView(
                id=cell.id,
                row=index // BOARD_SIDE,
                col=index % BOARD_SIDE,
                card=serialize_card(cell.card),
                marked=cell.is_marked,
            )
            for index, cell in enumerate(board.cells)
        ],
        marked_count=board.marked_count,
        winning_lines=[list(line) for line in board.completed_lines(frozenset(conditions))],
    )


def tally_view(tally: ScoreTally) -> TallyView:
    return TallyView(player_wins=tally.player_wins, cpu_wins=tally.cpu_wins, draws=tally.draws)


class CallerService:
    """Facade around CallerSession for UI consumers."""

    def __init__(self, session: CallerSession) -> None:
        self.session = session

    # Actions -----------------------------------------------------------

    def play(self) -> CallerView:
        return self.get_view(accepted=self.session.play())

    def pause(self) -> CallerView:
        return self.get_view(accepted=self.session.pause())

    def next(self) -> CallerView:
        return self.get_view(accepted=self.session.next() is not None)

    def previous(self) -> CallerView:
        return self.get_view(accepted=self.session.previous() is not None)

    def jump_to(self, card_id: int) -> CallerView:
        card = card_by_id(card_id)
        if card is None:
            return self.get_view(accepted=False)
        return self.get_view(accepted=self.session.jump_to(card) is not None)

    def reshuffle(self) -> CallerView:
        self.session.reshuffle()
        return self.get_view()

    def set_speed(self, speed: str) -> CallerView:
        self.session.set_speed(Speed(speed))
        return self.get_view()

    def close(self) -> None:
        """Stop playback and drop pending timers."""
        self.session.scheduler.reset()

    # Views -------------------------------------------------------------

    def get_view(self, accepted: bool = True) -> CallerView:
        session = self.session
        scheduler = session.scheduler
        sequencer = session.sequencer
        return CallerView(
            state=str(scheduler.state),
            speed=session.speed.value,
            current_card=_card_payload(sequencer.current_card),
            called_cards=[serialize_card(card) for card in sequencer.called_cards],
            progress=scheduler.live_progress(),
            remaining_seconds=scheduler.remaining_seconds(),
            deck_progress=sequencer.progress_text,
            cards_remaining=sequencer.cards_remaining,
            can_next=sequencer.can_advance(),
            can_previous=sequencer.can_retreat(),
            accepted=accepted,
        )


class MatchService:
    """Facade around MatchController for UI consumers."""

    def __init__(self, controller: MatchController) -> None:
        self.controller = controller

    # Lifecycle ---------------------------------------------------------

    def start_new_game(self) -> MatchView:
        self.controller.start_new_game()
        return self.get_view()

    def rematch(self) -> MatchView:
        self.controller.rematch()
        return self.get_view()

    def configure(
        self,
        *,
        difficulty: Optional[str] = None,
        win_conditions: Optional[Iterable[str]] = None,
    ) -> MatchView:
        accepted = self.controller.configure(
            difficulty=Difficulty(difficulty) if difficulty is not None else None,
            win_conditions=[WinCondition(name) for name in win_conditions] if win_conditions is not None else None,
        )
        return self.get_view(accepted=accepted)

    # Actions -----------------------------------------------------------

    def play(self) -> MatchView:
        return self.get_view(accepted=self.controller.play())

    def pause(self) -> MatchView:
        return self.get_view(accepted=self.controller.pause())

    def mark(self, cell_id: str) -> MatchView:
        return self.get_view(accepted=self.controller.mark_cell(cell_id))

    def close(self) -> None:
        """Stop playback and drop pending opponent marks."""
        self.controller.simulator.cancel_all()
        self.controller.scheduler.reset()

    # Views -------------------------------------------------------------

    def get_view(self, accepted: bool = True) -> MatchView:
        controller = self.controller
        scheduler = controller.scheduler
        sequencer = controller.sequencer
        conditions = controller.win_conditions
        return MatchView(
            state=str(scheduler.state),
            difficulty=controller.difficulty.value,
            win_conditions=sorted(condition.value for condition in conditions),
            current_card=_card_payload(sequencer.current_card),
            called_cards=[serialize_card(card) for card in sequencer.called_cards],
            progress=scheduler.live_progress(),
            remaining_seconds=scheduler.remaining_seconds(),
            deck_progress=sequencer.progress_text,
            player_board=board_view(controller.player_board, conditions),
            cpu_board=board_view(controller.cpu_board, conditions),
            result=controller.result.value if controller.result is not None else None,
            game_over=controller.game_over,
            tally=tally_view(controller.tally),
            accepted=accepted,
        )
