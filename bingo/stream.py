from __future__ import annotations

import logging
import threading
from typing import Collection, Iterable, Iterator

import pandas as pd

from .engine import EngineConfig, ProbabilityEngine, RoundResult

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["round", "total_outcomes", "bingo_count", "probability"]


class CancellationToken:
    """One-way flag a consumer sets to stop a stream at the next round boundary."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ProbabilityStream(Iterator[RoundResult]):
    """
    Lazy, infinite, one-shot iterator over an engine's rounds.

    The token is only consulted before a round starts: a round that is already
    being computed finishes and is returned, then the next pull stops the
    stream. Once stopped the stream never yields again.
    """

    def __init__(self, engine: ProbabilityEngine, token: CancellationToken | None = None):
        self.engine = engine
        self.token = token or CancellationToken()
        self._finished = False

    def __iter__(self) -> "ProbabilityStream":
        return self

    def __next__(self) -> RoundResult:
        if self._finished:
            raise StopIteration
        if self.token.cancelled:
            logger.debug("stream cancelled before round %d", self.engine.round + 1)
            self.close()
            raise StopIteration
        try:
            return self.engine.advance()
        except BaseException:
            self.close()
            raise

    @property
    def finished(self) -> bool:
        return self._finished

    def cancel(self) -> None:
        self.token.cancel()

    def close(self) -> None:
        self._finished = True
        self.engine.close()

    def __enter__(self) -> "ProbabilityStream":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def stream_probabilities(
    need_sets: Iterable[Collection[int]],
    pool: Iterable[int],
    config: EngineConfig | None = None,
    token: CancellationToken | None = None,
) -> ProbabilityStream:
    """Start a fresh engine over one card snapshot and wrap it in a stream."""

    return ProbabilityStream(ProbabilityEngine(need_sets, pool, config), token)


def results_frame(results: Iterable[RoundResult]) -> pd.DataFrame:
    """Tabulate round results; undefined probabilities become NaN."""

    rows = [
        {
            "round": r.round,
            "total_outcomes": r.total_outcomes,
            "bingo_count": r.bingo_count,
            "probability": r.probability,
        }
        for r in results
    ]
    df = pd.DataFrame(rows, columns=RESULT_COLUMNS)
    # Counts can exceed int64, keep them as Python ints.
    df["total_outcomes"] = df["total_outcomes"].astype(object)
    df["bingo_count"] = df["bingo_count"].astype(object)
    df["probability"] = df["probability"].astype(float)
    return df


def take(stream: Iterable[RoundResult], rounds: int) -> list[RoundResult]:
    """Pull at most ``rounds`` results."""

    out: list[RoundResult] = []
    if rounds <= 0:
        return out
    for result in stream:
        out.append(result)
        if len(out) >= rounds:
            break
    return out


__all__ = [
    "CancellationToken",
    "ProbabilityStream",
    "RESULT_COLUMNS",
    "results_frame",
    "stream_probabilities",
    "take",
]
