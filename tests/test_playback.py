from random import Random

import pytest

from engine import signals
from engine.clock import ManualClock
from engine.deck import DeckSequencer
from engine.pacing import InvalidPacing
from engine.playback import PlaybackScheduler, PlaybackState


def make_scheduler(interval=5.0, **kwargs):
    clock = ManualClock()
    sequencer = DeckSequencer(rng=Random(11))
    return clock, sequencer, PlaybackScheduler(sequencer, clock, interval, **kwargs)


def test_play_calls_first_card_at_once_then_on_cadence():
    clock, sequencer, scheduler = make_scheduler()
    assert scheduler.play() is True
    assert scheduler.state is PlaybackState.PLAYING
    assert sequencer.current_index == 0
    clock.advance(4.9)
    assert sequencer.current_index == 0
    clock.advance(0.1)
    assert sequencer.current_index == 1
    clock.advance(5.0)
    assert sequencer.current_index == 2


def test_pause_keeps_the_remaining_time():
    clock, sequencer, scheduler = make_scheduler()
    scheduler.play()
    clock.advance(2.0)
    assert scheduler.pause() is True
    assert scheduler.state is PlaybackState.PAUSED
    assert scheduler.paused_remaining == pytest.approx(3.0)
    assert scheduler.remaining_seconds() == pytest.approx(3.0)

    clock.advance(30.0)
    assert sequencer.current_index == 0
    assert clock.pending() == 0

    assert scheduler.play() is True
    assert scheduler.live_progress() == pytest.approx(0.4)
    clock.advance(2.9)
    assert sequencer.current_index == 0
    clock.advance(0.2)
    assert sequencer.current_index == 1
    clock.advance(4.7)
    assert sequencer.current_index == 1
    clock.advance(0.2)
    assert sequencer.current_index == 2


def test_repeated_next_leaves_a_single_card_timer():
    clock, sequencer, scheduler = make_scheduler()
    scheduler.play()
    clock.advance(1.0)
    scheduler.next()
    scheduler.next()
    assert sequencer.current_index == 2
    # One card timer and one progress timer.
    assert clock.pending() == 2
    clock.advance(5.0)
    assert sequencer.current_index == 3


def test_next_while_playing_restarts_the_countdown():
    clock, sequencer, scheduler = make_scheduler()
    scheduler.play()
    clock.advance(3.0)
    scheduler.next()
    assert scheduler.live_progress() == 0.0
    clock.advance(4.9)
    assert sequencer.current_index == 1
    clock.advance(0.2)
    assert sequencer.current_index == 2


def test_next_from_idle_pauses_without_timers():
    clock, sequencer, scheduler = make_scheduler()
    card = scheduler.next()
    assert card is sequencer.current_card
    assert scheduler.state is PlaybackState.PAUSED
    assert clock.pending() == 0
    scheduler.play()
    clock.advance(5.0)
    assert sequencer.current_index == 1


def test_speed_change_restarts_the_cycle():
    clock, sequencer, scheduler = make_scheduler()
    scheduler.play()
    clock.advance(1.0)
    scheduler.set_interval(3.0)
    clock.advance(2.9)
    assert sequencer.current_index == 0
    clock.advance(0.2)
    assert sequencer.current_index == 1
    with pytest.raises(InvalidPacing):
        scheduler.set_interval(0)


def test_redundant_controls_are_no_ops():
    clock, sequencer, scheduler = make_scheduler()
    assert scheduler.pause() is False
    scheduler.play()
    assert scheduler.play() is False
    assert sequencer.current_index == 0
    scheduler.pause()
    assert scheduler.pause() is False


def test_exhaustion_finishes_once():
    finished = []
    clock, sequencer, scheduler = make_scheduler(on_finished=lambda: finished.append(True))
    for _ in range(54):
        assert scheduler.next() is not None
    assert scheduler.next() is None
    assert scheduler.state is PlaybackState.FINISHED
    assert scheduler.next() is None
    assert scheduler.play() is False
    assert finished == [True]


def test_autoplay_runs_to_the_end_of_the_deck():
    clock, sequencer, scheduler = make_scheduler(interval=3.0)
    scheduler.play()
    clock.run_until_idle()
    assert scheduler.state is PlaybackState.FINISHED
    assert len(sequencer.called_cards) == 54
    assert clock.now() == pytest.approx(54 * 3.0)


def test_progress_ticks_while_playing():
    clock, sequencer, scheduler = make_scheduler()
    ticks = []

    def on_tick(sender, progress):
        ticks.append(progress)

    with signals.progress_ticked.connected_to(on_tick, sender=scheduler):
        scheduler.play()
        clock.advance(2.5)
    assert len(ticks) >= 45
    assert all(later >= earlier for earlier, later in zip(ticks, ticks[1:]))
    assert scheduler.progress == pytest.approx(0.5, abs=0.011)
    assert scheduler.live_progress() == pytest.approx(0.5)


def test_card_called_reports_fresh_reveals():
    clock, sequencer, scheduler = make_scheduler()
    calls = []

    def on_card(sender, card, index, fresh):
        calls.append((index, fresh))

    with signals.card_called.connected_to(on_card, sender=scheduler):
        scheduler.next()
        scheduler.next()
        sequencer.retreat()
        scheduler.next()
        scheduler.next()
    assert calls == [(0, True), (1, True), (1, False), (2, True)]


def test_resume_after_pausing_on_the_boundary_starts_a_fresh_cycle():
    clock, sequencer, scheduler = make_scheduler()
    # Due at the same instant as the first card timer, but queued first.
    clock.call_later(5.0, scheduler.pause)
    scheduler.play()
    clock.advance(5.0)
    assert scheduler.state is PlaybackState.PAUSED
    assert scheduler.paused_remaining == 0.0
    assert sequencer.current_index == 0

    clock.advance(1.0)
    scheduler.play()
    assert scheduler.live_progress() == 0.0
    assert scheduler.remaining_seconds() == pytest.approx(5.0)
    clock.advance(4.9)
    assert sequencer.current_index == 0
    clock.advance(0.2)
    assert sequencer.current_index == 1
