from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Sequence, Tuple

import numpy as np
import pandas as pd

from .patterns import GRID_SIZE, LINE_NAMES, LINE_PATTERNS
from .schema import FREE_CELL, MAX_NUMBER, CardError, validate_card_frame

Grid = Tuple[Tuple[int, ...], ...]
Flags = Tuple[Tuple[bool, ...], ...]

_COLUMN_SPAN = MAX_NUMBER // GRID_SIZE
_CENTER = GRID_SIZE // 2


def _ensure_grid(rows: Sequence[Sequence[int]]) -> Grid:
    grid = tuple(tuple(int(v) for v in row) for row in rows)
    if len(grid) != GRID_SIZE or any(len(row) != GRID_SIZE for row in grid):
        raise CardError(f"Card must be {GRID_SIZE}x{GRID_SIZE}")
    flat = [v for row in grid for v in row]
    if not all(FREE_CELL <= v <= MAX_NUMBER for v in flat):
        raise CardError(f"Card numbers must be between {FREE_CELL} and {MAX_NUMBER}")
    numbers = [v for v in flat if v != FREE_CELL]
    if len(set(numbers)) != len(numbers):
        raise CardError("Card numbers must be unique")
    return grid


def _ensure_flags(rows: Sequence[Sequence[bool]]) -> Flags:
    flags = tuple(tuple(bool(v) for v in row) for row in rows)
    if len(flags) != GRID_SIZE or any(len(row) != GRID_SIZE for row in flags):
        raise CardError(f"Reveal state must be {GRID_SIZE}x{GRID_SIZE}")
    return flags


def _free_cells_revealed(grid: Grid) -> Flags:
    return tuple(tuple(v == FREE_CELL for v in row) for row in grid)


@dataclass(frozen=True)
class BingoCard:
    """Immutable 5x5 card: the printed numbers plus which cells are revealed.

    A ``0`` marks the free space; it starts revealed unless an explicit
    reveal grid says otherwise.
    """

    numbers: Grid
    revealed: Flags

    def __init__(
        self, numbers: Sequence[Sequence[int]], revealed: Sequence[Sequence[bool]] | None = None
    ):
        grid = _ensure_grid(numbers)
        flags = _ensure_flags(revealed) if revealed is not None else _free_cells_revealed(grid)
        object.__setattr__(self, "numbers", grid)
        object.__setattr__(self, "revealed", flags)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[int]]) -> "BingoCard":
        return cls(list(rows))

    @classmethod
    def from_string(cls, raw: str) -> "BingoCard":
        """Parse 25 numbers in row order, e.g. ``"1 11 3 2 14 / 30 19 22 29 17 / ..."``."""

        tokens = [t for t in re.split(r"[\s,/;]+", raw.strip()) if t]
        if len(tokens) != GRID_SIZE * GRID_SIZE:
            raise CardError(f"Expected {GRID_SIZE * GRID_SIZE} numbers, received {len(tokens)}")
        try:
            numbers = [int(tok) for tok in tokens]
        except ValueError as exc:
            raise CardError(f"Card numbers must be integers: {exc}") from exc
        return cls([numbers[i : i + GRID_SIZE] for i in range(0, len(numbers), GRID_SIZE)])

    @classmethod
    def random(cls, seed: int | None = None) -> "BingoCard":
        """Deal a card where row ``i`` holds five numbers from ``15*i+1 .. 15*i+15``."""

        rng = np.random.default_rng(seed)
        rows = []
        for i in range(GRID_SIZE):
            population = np.arange(_COLUMN_SPAN * i + 1, _COLUMN_SPAN * (i + 1) + 1)
            rows.append([int(v) for v in rng.choice(population, size=GRID_SIZE, replace=False)])
        rows[_CENTER][_CENTER] = FREE_CELL
        return cls(rows)

    def mark(self, number: int) -> "BingoCard":
        """Return a copy with every cell holding ``number`` revealed."""

        flags = tuple(
            tuple(flag or value == number for value, flag in zip(values, row_flags))
            for values, row_flags in zip(self.numbers, self.revealed)
        )
        return BingoCard(self.numbers, flags)

    def completed_lines(self) -> Tuple[str, ...]:
        return tuple(
            name
            for name, pattern in zip(LINE_NAMES, LINE_PATTERNS)
            if all(self.revealed[row][col] for row, col in pattern)
        )

    def has_line(self) -> bool:
        return any(
            all(self.revealed[row][col] for row, col in pattern) for pattern in LINE_PATTERNS
        )

    def contains(self, number: int) -> bool:
        return any(number in row for row in self.numbers)


def need_sets(card: BingoCard) -> Tuple[FrozenSet[int], ...]:
    """Numbers still missing from each line pattern, in LINE_PATTERNS order.

    Lines that are already complete yield an empty set; spotting those is left to
    ``BingoCard.has_line``.
    """

    return tuple(
        frozenset(card.numbers[row][col] for row, col in pattern if not card.revealed[row][col])
        for pattern in LINE_PATTERNS
    )


def load_card(path: str | Path) -> BingoCard:
    """Read a headerless 5x5 CSV (row per line, ``0`` for the free space)."""

    df = pd.read_csv(path, header=None, skipinitialspace=True)
    df = validate_card_frame(df)
    return BingoCard(df.to_numpy().tolist())


__all__ = ["BingoCard", "CardError", "need_sets", "load_card"]
