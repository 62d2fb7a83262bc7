"""Headless arena: a bot plays the human seat against the CPU."""

from __future__ import annotations

import argparse
import logging
from random import Random
from typing import Callable, Dict, Iterable, Optional

from engine import signals
from engine.board import ALL_WIN_CONDITIONS, WinCondition
from engine.clock import ManualClock
from engine.match import MatchController, MatchResult
from engine.opponent import CpuOpponent, OpponentSimulator, OpponentStrategy
from engine.pacing import Difficulty

from .distracted_bot import DistractedBot
from .reflex_bot import ReflexBot

BOT_REGISTRY: Dict[str, Callable[[], OpponentStrategy]] = {
    "cpu": CpuOpponent,
    "distracted": DistractedBot,
    "reflex": ReflexBot,
}


def play_game(controller: MatchController, player_bot: OpponentStrategy, clock: ManualClock) -> MatchResult:
    """Run the current game of ``controller`` to its result on virtual time."""
    player = OpponentSimulator(
        clock,
        player_bot,
        controller.difficulty,
        mark=controller.mark_card,
        is_active=controller.is_active,
    )
    player.start_game()

    def _on_call(sender, card, index, fresh):
        if fresh:
            player.on_card_called(card, index)

    with signals.card_called.connected_to(_on_call, sender=controller.scheduler):
        controller.play()
        clock.run_until_idle()
    player.cancel_all()

    if controller.result is None:
        raise RuntimeError("Game stopped without a result.")
    return controller.result


def run_match(
    player_bot: OpponentStrategy,
    cpu_bot: OpponentStrategy,
    *,
    n_games: int = 10,
    difficulty: Difficulty = Difficulty.MEDIUM,
    win_conditions: Iterable[WinCondition] = ALL_WIN_CONDITIONS,
    seed: Optional[int] = None,
) -> dict:
    clock = ManualClock()
    controller = MatchController(
        clock,
        difficulty=difficulty,
        win_conditions=win_conditions,
        opponent=cpu_bot,
        rng=Random(seed),
    )
    history = []
    for idx in range(n_games):
        if idx:
            controller.rematch()
        result = play_game(controller, player_bot, clock)
        history.append(
            {
                "result": result.value,
                "cards_called": controller.sequencer.revealed_count,
                "player_marks": controller.player_board.marked_count,
                "cpu_marks": controller.cpu_board.marked_count,
            }
        )
    tally = controller.tally
    return {
        "tally": {"player_wins": tally.player_wins, "cpu_wins": tally.cpu_wins, "draws": tally.draws},
        "history": history,
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run bot games in versus-CPU mode.")
    parser.add_argument("--player", default="reflex", choices=BOT_REGISTRY.keys())
    parser.add_argument("--cpu", default="cpu", choices=BOT_REGISTRY.keys())
    parser.add_argument("--n", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--difficulty", default=Difficulty.MEDIUM.value, choices=[d.value for d in Difficulty])
    parser.add_argument(
        "--win",
        action="append",
        choices=[c.value for c in WinCondition],
        help="Win condition to enable (repeatable). Defaults to all.",
    )
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    conditions = [WinCondition(name) for name in args.win] if args.win else ALL_WIN_CONDITIONS
    results = run_match(
        BOT_REGISTRY[args.player](),
        BOT_REGISTRY[args.cpu](),
        n_games=args.n,
        difficulty=Difficulty(args.difficulty),
        win_conditions=conditions,
        seed=args.seed,
    )

    tally = results["tally"]
    print(f"Results after {args.n} games: {tally['player_wins']}-{tally['draws']}-{tally['cpu_wins']} (W-D-L)")
    avg_cards = sum(entry["cards_called"] for entry in results["history"]) / max(1, len(results["history"]))
    print(f"Average cards called per game: {avg_cards:.1f}")


if __name__ == "__main__":
    main()
