from __future__ import annotations

import argparse
import re
from typing import List, Sequence

import pandas as pd

from .card import BingoCard, need_sets
from .cli import add_card_arguments, add_engine_arguments, card_from_args, config_from_args
from .engine import EngineConfig
from .logs import configure_logging
from .schema import MAX_NUMBER
from .stream import results_frame, stream_probabilities, take


def parse_drawn(raw: str | None) -> List[int]:
    """Parse ``"5, 17 42"`` into a list of distinct drawn numbers."""

    if not raw:
        return []
    tokens = [tok for tok in re.split(r"[\s,]+", raw.strip()) if tok]
    try:
        numbers = [int(tok) for tok in tokens]
    except ValueError as exc:
        raise ValueError(f"Drawn numbers must be integers: {raw!r}") from exc
    bad = [n for n in numbers if not 1 <= n <= MAX_NUMBER]
    if bad:
        raise ValueError(f"Drawn numbers must be between 1 and {MAX_NUMBER}: {bad}")
    if len(set(numbers)) != len(numbers):
        raise ValueError("Drawn numbers must be unique")
    return numbers


def line_odds(
    card: BingoCard,
    drawn: Sequence[int],
    rounds: int,
    config: EngineConfig | None = None,
) -> pd.DataFrame:
    """Mark ``drawn`` on ``card`` and tabulate the first ``rounds`` rounds of odds."""

    for number in drawn:
        card = card.mark(number)
    if card.has_line():
        raise ValueError(f"Card already shows a line: {', '.join(card.completed_lines())}")

    pool = frozenset(range(1, MAX_NUMBER + 1)).difference(drawn)
    with stream_probabilities(need_sets(card), pool, config) as stream:
        return results_frame(take(stream, rounds))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Print the odds of completing a bingo line within the next N draws."
    )
    add_card_arguments(parser)
    add_engine_arguments(parser)
    parser.add_argument("--drawn", default=None, help="Numbers already drawn, e.g. '5,17,42'")
    parser.add_argument("--rounds", type=int, default=3, help="How many future draws to model")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    table = line_odds(
        card_from_args(args),
        parse_drawn(args.drawn),
        rounds=args.rounds,
        config=config_from_args(args),
    )
    print(table.to_string(index=False))


if __name__ == "__main__":
    main()
