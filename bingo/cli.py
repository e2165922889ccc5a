from __future__ import annotations

import argparse
from pathlib import Path

from .card import BingoCard, load_card
from .engine import EXECUTOR_CHOICES, EngineConfig

# Sample card used when no card is given on the command line.
SAMPLE_CARD_ROWS = (
    (1, 11, 3, 2, 14),
    (30, 19, 22, 29, 17),
    (42, 38, 0, 44, 46),
    (60, 53, 59, 55, 58),
    (74, 68, 61, 67, 73),
)


def add_card_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--card", type=Path, default=None, help="Headerless 5x5 CSV card")
    source.add_argument(
        "--card-string",
        default=None,
        help='25 numbers in row order, e.g. "1 11 3 2 14 / 30 19 22 29 17 / ..."',
    )
    source.add_argument("--seed", type=int, default=None, help="Deal a random card from this seed")


def add_engine_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Candidates per worker task (env BINGO_CHUNK_SIZE, default 3000)",
    )
    parser.add_argument(
        "--workers", type=int, default=None, help="Worker count (env BINGO_MAX_WORKERS)"
    )
    parser.add_argument(
        "--executor",
        choices=EXECUTOR_CHOICES,
        default=None,
        help="Worker pool kind (env BINGO_EXECUTOR, default process)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level for engine diagnostics (DEBUG shows per-round timings)",
    )


def card_from_args(args: argparse.Namespace) -> BingoCard:
    if args.card is not None:
        return load_card(args.card)
    if args.card_string is not None:
        return BingoCard.from_string(args.card_string)
    if args.seed is not None:
        return BingoCard.random(args.seed)
    return BingoCard(SAMPLE_CARD_ROWS)


def config_from_args(args: argparse.Namespace) -> EngineConfig:
    return EngineConfig.from_env(
        chunk_size=args.chunk_size, max_workers=args.workers, executor=args.executor
    )
