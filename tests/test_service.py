from random import Random

from engine.caller import CallerSession
from engine.clock import ManualClock
from engine.match import MatchController
from engine.service import CallerService, MatchService


def make_caller_service():
    clock = ManualClock()
    return clock, CallerService(CallerSession(clock, rng=Random(8)))


def make_match_service():
    clock = ManualClock()
    return clock, MatchService(MatchController(clock, rng=Random(8)))


def test_caller_view_tracks_playback():
    clock, service = make_caller_service()
    view = service.get_view()
    assert view.state == "idle"
    assert view.current_card is None
    assert view.deck_progress == "0/54"

    view = service.play()
    assert view.accepted
    assert view.state == "playing"
    assert view.current_card is not None
    assert view.can_next and not view.can_previous

    clock.advance(2.5)
    view = service.get_view()
    assert abs(view.progress - 0.5) < 1e-6
    assert abs(view.remaining_seconds - 2.5) < 1e-6

    assert service.play().accepted is False


def test_caller_actions_report_rejections():
    clock, service = make_caller_service()
    assert service.previous().accepted is False
    assert service.jump_to(999).accepted is False
    view = service.next()
    assert view.accepted and view.state == "paused"
    first = view.current_card
    service.next()
    view = service.previous()
    assert view.accepted and view.current_card == first
    view = service.jump_to(service.session.called_cards[1].id)
    assert view.accepted and view.deck_progress == "2/54"
    assert service.set_speed("fast").speed == "fast"
    assert service.reshuffle().called_cards == []


def test_match_view_shape():
    clock, service = make_match_service()
    view = service.get_view()
    assert view.state == "idle"
    assert len(view.player_board.cells) == 16
    assert {(cell.row, cell.col) for cell in view.player_board.cells} == {(r, c) for r in range(4) for c in range(4)}
    assert view.result is None and not view.game_over
    assert view.tally.player_wins == 0
    assert view.difficulty == "medium"


def test_match_service_actions():
    clock, service = make_match_service()
    assert service.configure(difficulty="hard", win_conditions=["row"]).accepted
    view = service.play()
    assert view.state == "playing"
    assert view.win_conditions == ["row"]
    assert service.mark("missing").accepted is False
    assert service.configure(difficulty="easy").accepted is False

    clock.run_until_idle()
    view = service.get_view()
    assert view.game_over
    assert view.result == "cpu_wins"
    assert view.cpu_board.winning_lines
    assert view.tally.cpu_wins == 1

    view = service.rematch()
    assert not view.game_over
    assert view.tally.cpu_wins == 1
