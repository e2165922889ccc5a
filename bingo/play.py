"""
Interactive bingo session.

Each turn the caller types the number that was just drawn. The card is
marked, and unless a line is complete the odds of a line within 1, 2, 3, ...
more draws are printed in the background until Enter is pressed.

Usage
  python -m bingo.play
  python -m bingo.play --card my_card.csv --executor thread --workers 4
"""

from __future__ import annotations

import argparse
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional, Set

from rich.console import Console

from .card import BingoCard, need_sets
from .cli import add_card_arguments, add_engine_arguments, card_from_args, config_from_args
from .engine import EngineConfig
from .logs import configure_logging
from .render import bingo_banner, card_table, format_round, make_console, turn_header
from .schema import MAX_NUMBER
from .stream import CancellationToken, ProbabilityStream, stream_probabilities

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], str]


def parse_number(raw: str) -> int:
    """Parse a drawn number typed by the user."""

    try:
        number = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Enter a number between 1 and {MAX_NUMBER}") from exc
    if not 1 <= number <= MAX_NUMBER:
        raise ValueError(f"Enter a number between 1 and {MAX_NUMBER}")
    return number


@dataclass
class Game:
    card: BingoCard
    chosen: Set[int] = field(default_factory=set)
    unchosen: Set[int] = field(default_factory=lambda: set(range(1, MAX_NUMBER + 1)))

    @property
    def turn(self) -> int:
        return len(self.chosen) + 1

    def draw(self, number: int) -> bool:
        """Record ``number`` as drawn; True once the card shows a complete line."""

        if number in self.chosen:
            raise ValueError(f"{number} has already been drawn")
        self.card = self.card.mark(number)
        self.chosen.add(number)
        self.unchosen.discard(number)
        return self.card.has_line()


def _report(stream: ProbabilityStream, console: Console) -> None:
    with stream:
        try:
            for result in stream:
                # A round finished after Enter was pressed belongs to the previous turn.
                if stream.token.cancelled:
                    break
                console.print(format_round(result))
        except Exception:
            logger.exception("odds evaluation failed")


def evaluate_in_background(
    card: BingoCard,
    unchosen: Set[int],
    console: Console,
    *,
    config: EngineConfig | None = None,
    token: CancellationToken | None = None,
) -> tuple[threading.Thread, CancellationToken]:
    """Start streaming odds for a card snapshot on a daemon thread."""

    token = token or CancellationToken()
    stream = stream_probabilities(need_sets(card), frozenset(unchosen), config, token)
    worker = threading.Thread(target=_report, args=(stream, console), daemon=True)
    worker.start()
    return worker, token


def run(
    game: Game,
    *,
    console: Console,
    config: EngineConfig | None = None,
    read_line: Optional[ReadLine] = None,
    join_timeout: Optional[float] = None,
) -> Game:
    """Turn loop; returns when a line is complete. EOF on input ends it early."""

    read_line = read_line or input

    while True:
        console.print(turn_header(game.turn))
        console.print(f"rest number count is [value]{len(game.unchosen)}[/value]")
        console.print(card_table(game.card))

        try:
            number = parse_number(read_line("Chosen number: "))
            complete = game.draw(number)
        except ValueError as exc:
            console.print(f"[error]{exc}[/error]")
            continue

        if complete:
            console.print(bingo_banner())
            return game
        if not game.card.contains(number):
            console.print(f"{number} is not on your card")

        worker, token = evaluate_in_background(
            game.card, game.unchosen, console, config=config
        )
        console.print("[hint]Press Enter to stop the odds and move to the next turn[/hint]")
        try:
            read_line("")
        finally:
            token.cancel()
        if join_timeout is not None:
            worker.join(join_timeout)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play a bingo card with live line odds.")
    add_card_arguments(parser)
    add_engine_arguments(parser)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    console = make_console()
    game = Game(card_from_args(args))
    try:
        run(game, console=console, config=config_from_args(args))
    except (EOFError, KeyboardInterrupt):
        console.print("\nbye")


if __name__ == "__main__":
    main()
