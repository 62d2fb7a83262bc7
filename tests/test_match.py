from random import Random

import pytest

from bots.distracted_bot import DistractedBot
from engine import signals
from engine.board import Board, WinCondition
from engine.clock import ManualClock
from engine.match import MatchController, MatchResult, ScoreTally, resolve_outcome
from engine.pacing import Difficulty
from engine.playback import PlaybackState


def make_controller(**kwargs):
    clock = ManualClock()
    kwargs.setdefault("rng", Random(3))
    return clock, MatchController(clock, **kwargs)


def uncalled_cell(controller):
    return next(cell for cell in controller.player_board.cells if not controller.sequencer.has_been_called(cell.card))


def called_cell(controller):
    return next(cell for cell in controller.player_board.cells if controller.sequencer.has_been_called(cell.card))


def test_quick_player_wins_a_mirrored_full_board_race():
    clock, controller = make_controller(win_conditions={WinCondition.FULL_BOARD})
    controller.cpu_board = Board.from_cards(controller.player_board.cards())
    results = []

    def on_resolved(sender, result, tally):
        results.append(result)

    with signals.match_resolved.connected_to(on_resolved, sender=controller):
        assert controller.play() is True
        while not controller.game_over:
            for card in controller.called_cards:
                controller.mark_card(card)
            clock.advance(0.1)

    assert controller.result is MatchResult.PLAYER_WINS
    assert results == [MatchResult.PLAYER_WINS]
    assert controller.tally.label() == "1-0-0"
    assert controller.player_board.marked_count == 16
    assert controller.scheduler.state is PlaybackState.FINISHED
    assert controller.simulator.pending_count == 0
    assert clock.pending() == 0


def test_idle_player_loses_to_the_cpu():
    clock, controller = make_controller()
    controller.play()
    clock.run_until_idle()
    assert controller.result is MatchResult.CPU_WINS
    assert controller.tally.cpu_wins == 1
    assert controller.cpu_board.check_win(controller.win_conditions)


def test_deck_running_out_is_a_draw():
    clock, controller = make_controller(opponent=DistractedBot(miss_rate=1.0))
    controller.play()
    clock.run_until_idle()
    assert controller.result is MatchResult.DRAW
    assert len(controller.called_cards) == 54
    assert controller.tally.label() == "0-1-0"


def test_simultaneous_wins_are_a_draw():
    assert resolve_outcome(True, True) is MatchResult.DRAW
    assert resolve_outcome(True, False) is MatchResult.PLAYER_WINS
    assert resolve_outcome(False, True) is MatchResult.CPU_WINS
    assert resolve_outcome(False, False) is None


def test_player_marks_are_guarded():
    clock, controller = make_controller()
    first = controller.player_board.cells[0]
    assert controller.mark_cell(first.id) is False  # not playing yet

    controller.play()
    assert controller.mark_cell("no-such-cell") is False
    assert controller.mark_cell(uncalled_cell(controller).id) is False

    while not any(controller.sequencer.has_been_called(cell.card) for cell in controller.player_board.cells):
        controller.scheduler.next()
    cell = called_cell(controller)
    controller.pause()
    assert controller.mark_cell(cell.id) is False
    controller.play()
    assert controller.mark_cell(cell.id) is True
    assert controller.mark_cell(cell.id) is False


def test_finished_game_is_sealed():
    clock, controller = make_controller()
    controller.play()
    clock.run_until_idle()
    tally = (controller.tally.player_wins, controller.tally.cpu_wins, controller.tally.draws)
    cpu_marks = controller.cpu_board.marked_count

    assert controller.play() is False
    assert controller.mark_cell(controller.player_board.cells[0].id) is False
    clock.advance(60.0)
    assert controller.cpu_board.marked_count == cpu_marks
    assert (controller.tally.player_wins, controller.tally.cpu_wins, controller.tally.draws) == tally


def test_tally_survives_rematches():
    clock, controller = make_controller()
    for _ in range(2):
        controller.play()
        clock.run_until_idle()
        controller.rematch()
    assert controller.tally.games == 2
    assert controller.tally.cpu_wins == 2
    assert controller.result is None
    assert controller.called_cards == []
    assert controller.player_board.marked_count == 0
    assert controller.scheduler.state is PlaybackState.IDLE


def test_rematch_cancels_late_cpu_marks():
    clock, controller = make_controller()
    controller.play()
    controller.rematch()
    clock.advance(3.0)
    assert controller.cpu_board.marked_count == 0
    assert controller.called_cards == []


def test_configure_only_between_games():
    clock, controller = make_controller()
    assert controller.configure(difficulty=Difficulty.HARD) is True
    assert controller.scheduler.interval == 3.0
    assert controller.simulator.difficulty is Difficulty.HARD

    controller.play()
    assert controller.configure(win_conditions=[WinCondition.ROW]) is False
    assert controller.win_conditions == frozenset(WinCondition)

    clock.run_until_idle()
    assert controller.configure(win_conditions=[WinCondition.ROW]) is True
    assert controller.active_conditions() == {WinCondition.ROW}


def test_score_tally_label():
    tally = ScoreTally()
    for result in (MatchResult.PLAYER_WINS, MatchResult.DRAW, MatchResult.DRAW, MatchResult.CPU_WINS):
        tally.record(result)
    assert tally.label() == "1-2-1"
    assert tally.games == 4


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_card_cadence_follows_difficulty(difficulty):
    clock, controller = make_controller(difficulty=difficulty)
    controller.play()
    clock.advance(difficulty.interval)
    assert len(controller.called_cards) == 2
