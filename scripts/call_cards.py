#!/usr/bin/env python3
"""Terminal caller: shuffle the deck and call the cards out loud-ish."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from random import Random
from typing import Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from engine import signals
from engine.caller import Announcer, CallerSession
from engine.cards import announcement_text, card_by_name
from engine.clock import AsyncioClock
from engine.pacing import Speed
from engine.playback import PlaybackState
from engine.settings_schema import load_settings

logger = logging.getLogger("loteria.call_cards")


class PrintingAnnouncer(Announcer):
    def __init__(self, with_riddle: bool = False) -> None:
        self.with_riddle = with_riddle
        self.count = 0

    def announce(self, card_name: str) -> None:
        self.count += 1
        card = card_by_name(card_name)
        text = announcement_text(card, with_riddle=self.with_riddle) if card is not None else f"¡{card_name}!"
        print(f"{self.count:>2}. {text}", flush=True)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Call a shuffled Lotería deck in the terminal.")
    parser.add_argument("--speed", choices=[speed.value for speed in Speed], default=None)
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible shuffle.")
    parser.add_argument("--limit", type=int, default=None, help="Stop after this many cards.")
    parser.add_argument("--riddles", action="store_true", help="Recite each card's riddle first.")
    parser.add_argument("--settings", type=Path, default=None, help="JSON settings file.")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args()


async def run_caller(speed: Speed, announcer: PrintingAnnouncer, *, seed: Optional[int], limit: Optional[int]) -> None:
    session = CallerSession(AsyncioClock(), speed=speed, announcer=announcer, rng=Random(seed))
    done = asyncio.Event()

    def _on_state(sender, state):
        if state is PlaybackState.FINISHED:
            done.set()

    def _on_card(sender, card, index, fresh):
        if limit is not None and index + 1 >= limit:
            session.pause()
            done.set()

    with signals.playback_changed.connected_to(_on_state, sender=session.scheduler), \
            signals.card_called.connected_to(_on_card, sender=session.scheduler):
        session.play()
        await done.wait()
    logger.info("Called %d cards", session.sequencer.revealed_count)


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    settings = load_settings(args.settings)
    speed = Speed(args.speed) if args.speed else settings.caller.speed
    announcer = PrintingAnnouncer(with_riddle=args.riddles or settings.caller.announce_riddles)
    announcer.muted = not settings.caller.voice_enabled

    print(f"Calling at {speed.value} speed ({speed.interval:.0f}s per card). Ctrl+C to stop.")
    try:
        asyncio.run(run_caller(speed, announcer, seed=args.seed, limit=args.limit))
    except KeyboardInterrupt:
        print("\nStopped.")


if __name__ == "__main__":
    main()
