"""
Round-by-round odds of completing a bingo line.

Round ``n`` asks: of all ordered ways to draw the next ``n`` numbers from the
unchosen pool, how many complete at least one line? Sequences are enumerated
incrementally. Each pending candidate is the set of numbers drawn along one
ordered path that has not won yet; winning paths are only counted, because a
win stays a win under every extension.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from itertools import repeat
from typing import Collection, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .counting import perm_count

logger = logging.getLogger(__name__)

Candidate = FrozenSet[int]

DEFAULT_CHUNK_SIZE = 3000
DEFAULT_EXECUTOR = "process"
EXECUTOR_CHOICES = ("process", "thread")


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _first_set(*values):
    return next((v for v in values if v is not None), None)


@dataclass(frozen=True)
class EngineConfig:
    """Tuning knobs for the parallel expansion. None of them change the answer."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_workers: Optional[int] = None
    executor: str = DEFAULT_EXECUTOR

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.executor not in EXECUTOR_CHOICES:
            raise ValueError(
                f"Unsupported executor {self.executor!r}; choose from {EXECUTOR_CHOICES}."
            )

    @classmethod
    def from_env(
        cls,
        *,
        chunk_size: int | None = None,
        max_workers: int | None = None,
        executor: str | None = None,
    ) -> "EngineConfig":
        """
        Build a config from ``BINGO_CHUNK_SIZE``, ``BINGO_MAX_WORKERS`` and
        ``BINGO_EXECUTOR``. Explicit arguments win over the environment.
        """

        env_chunk = _env_int("BINGO_CHUNK_SIZE")
        env_workers = _env_int("BINGO_MAX_WORKERS")
        env_executor = os.environ.get("BINGO_EXECUTOR") or None

        return cls(
            chunk_size=_first_set(chunk_size, env_chunk, DEFAULT_CHUNK_SIZE),
            max_workers=_first_set(max_workers, env_workers),
            executor=_first_set(executor, env_executor, DEFAULT_EXECUTOR),
        )


@dataclass(frozen=True)
class RoundResult:
    """Odds of a line within ``round`` more draws.

    ``probability`` is None when there are no outcomes to divide by, i.e. the
    round asks for more draws than the pool holds.
    """

    round: int
    total_outcomes: int
    bingo_count: int
    probability: Optional[float]

    @property
    def percent(self) -> Optional[float]:
        return None if self.probability is None else self.probability * 100.0


@dataclass(frozen=True)
class ChunkResult:
    """Partial outcome of expanding one slice of the pending candidates."""

    wins: int
    survivors: Tuple[Candidate, ...]


def expand_chunk(
    chunk: Sequence[Candidate],
    pool: Sequence[int],
    winning_sets: Sequence[Candidate],
) -> ChunkResult:
    """Extend every candidate in ``chunk`` by one undrawn number.

    ``winning_sets`` holds only the need-sets small enough to complete in the
    current round. Module-level so process pools can pickle it.
    """

    wins = 0
    survivors: List[Candidate] = []
    for candidate in chunk:
        for number in pool:
            if number in candidate:
                continue
            extended = candidate | {number}
            if any(needed <= extended for needed in winning_sets):
                wins += 1
            else:
                survivors.append(extended)
    return ChunkResult(wins=wins, survivors=tuple(survivors))


def merge_chunks(partials: Iterable[ChunkResult]) -> ChunkResult:
    """Sum wins and concatenate survivors."""

    wins = 0
    survivors: List[Candidate] = []
    for partial in partials:
        wins += partial.wins
        survivors.extend(partial.survivors)
    return ChunkResult(wins=wins, survivors=tuple(survivors))


class ProbabilityEngine:
    """Stateful enumerator; each ``advance()`` produces the next round.

    The engine is single-use: it is bound to one snapshot of need-sets and
    unchosen numbers, and rounds only ever move forward. Call ``close()`` (or
    use it as a context manager) to release the worker pool.
    """

    def __init__(
        self,
        need_sets: Iterable[Collection[int]],
        pool: Iterable[int],
        config: EngineConfig | None = None,
    ):
        self.need_sets: Tuple[Candidate, ...] = tuple(frozenset(s) for s in need_sets)
        self.pool: Tuple[int, ...] = tuple(sorted(set(pool)))
        self.config = config or EngineConfig()

        self._round = 0
        self._bingo_count = 0
        self._pending: List[Candidate] = [frozenset()]
        self._depth = 0
        self._min_need = min((len(s) for s in self.need_sets), default=None)
        self._executor: Optional[Executor] = None

    @property
    def round(self) -> int:
        """Index of the last round produced (0 before the first ``advance``)."""
        return self._round

    @property
    def bingo_count(self) -> int:
        return self._bingo_count

    @property
    def depth(self) -> int:
        """Size of the pending candidates; lags ``round`` while rounds are pruned."""
        return self._depth

    @property
    def pending(self) -> Tuple[Candidate, ...]:
        return tuple(self._pending)

    def _pruned(self, round_index: int) -> bool:
        return self._min_need is None or self._min_need > round_index

    def advance(self) -> RoundResult:
        n = self._round + 1
        pool_size = len(self.pool)
        total = perm_count(pool_size, n)

        if total == 0:
            self._round = n
            self._bingo_count = 0
            self._pending = []
            self._depth = n
            logger.debug("round %d: no outcomes left in a pool of %d", n, pool_size)
            return RoundResult(round=n, total_outcomes=0, bingo_count=0, probability=None)

        if self._pruned(n):
            # Nothing can win yet, so the pending expansion is deferred.
            self._round = n
            logger.debug("round %d: pruned (smallest need-set %s)", n, self._min_need)
            return RoundResult(round=n, total_outcomes=total, bingo_count=0, probability=0.0)

        while self._depth < n - 1:
            catch_up = self._expand(self._depth + 1)
            self._pending = list(catch_up.survivors)
            self._depth += 1

        carried = self._bingo_count * (pool_size - (n - 1))
        step = self._expand(n)

        self._bingo_count = carried + step.wins
        self._pending = list(step.survivors)
        self._depth = n
        self._round = n

        return RoundResult(
            round=n,
            total_outcomes=total,
            bingo_count=self._bingo_count,
            probability=self._bingo_count / total,
        )

    def _expand(self, round_index: int) -> ChunkResult:
        started = time.perf_counter()
        winning_sets = tuple(s for s in self.need_sets if len(s) <= round_index)
        size = self.config.chunk_size
        chunks = [self._pending[i : i + size] for i in range(0, len(self._pending), size)]

        if len(chunks) <= 1 or self.config.max_workers == 1:
            merged = merge_chunks(expand_chunk(chunk, self.pool, winning_sets) for chunk in chunks)
        else:
            executor = self._get_executor()
            merged = merge_chunks(
                executor.map(expand_chunk, chunks, repeat(self.pool), repeat(winning_sets))
            )

        logger.debug(
            "round %d: %d pending in %d chunks -> %d wins, %d survivors (%.3fs)",
            round_index,
            len(self._pending),
            len(chunks),
            merged.wins,
            len(merged.survivors),
            time.perf_counter() - started,
        )
        return merged

    def _get_executor(self) -> Executor:
        if self._executor is None:
            executor_class = (
                ProcessPoolExecutor if self.config.executor == "process" else ThreadPoolExecutor
            )
            self._executor = executor_class(max_workers=self.config.max_workers)
        return self._executor

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "ProbabilityEngine":
        return self

    def __exit__(self, *args) -> None:
        self.close()


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_EXECUTOR",
    "EXECUTOR_CHOICES",
    "Candidate",
    "ChunkResult",
    "EngineConfig",
    "ProbabilityEngine",
    "RoundResult",
    "expand_chunk",
    "merge_chunks",
]
