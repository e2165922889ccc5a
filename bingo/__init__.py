"""
Bingo line odds.

Stable surface:
- LINE_PATTERNS: the 12 winning lines of a 5x5 card (rows, columns, diagonals).
- BingoCard / load_card: immutable card snapshot plus reveal state.
- need_sets: numbers each line still needs, for one card snapshot.
- perm_count: exact count of ordered draws (falling factorial).
- ProbabilityEngine / EngineConfig / RoundResult: round-by-round odds of a line.
- stream_probabilities / ProbabilityStream / CancellationToken: the engine as a
  lazy, cancellable iterator.
- results_frame: tabulate results as a pandas DataFrame.

The ``play`` and ``odds`` modules are command-line front ends.
"""

from __future__ import annotations

from .card import BingoCard, load_card, need_sets
from .counting import perm_count
from .engine import EngineConfig, ProbabilityEngine, RoundResult
from .patterns import LINE_NAMES, LINE_PATTERNS
from .schema import CardError
from .stream import CancellationToken, ProbabilityStream, results_frame, stream_probabilities

__all__ = [
    "LINE_PATTERNS",
    "LINE_NAMES",
    "BingoCard",
    "CardError",
    "need_sets",
    "load_card",
    "perm_count",
    "EngineConfig",
    "RoundResult",
    "ProbabilityEngine",
    "CancellationToken",
    "ProbabilityStream",
    "stream_probabilities",
    "results_frame",
]
