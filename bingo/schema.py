from __future__ import annotations

from typing import Tuple

import pandas as pd

from .patterns import GRID_SIZE

MAX_NUMBER = 75
FREE_CELL = 0
NUMBER_BOUNDS: Tuple[int, int] = (FREE_CELL, MAX_NUMBER)


class CardError(ValueError):
    """Raised when card data does not describe a valid 5x5 bingo card."""


def _validate_numeric_bounds(df: pd.DataFrame, bounds: Tuple[int, int]) -> pd.DataFrame:
    """Coerce every column to int and raise CardError when a value falls outside [lo, hi]."""

    lo, hi = bounds
    coerced = df.copy()
    for column in coerced.columns:
        try:
            series = pd.to_numeric(coerced[column], errors="raise")
        except (TypeError, ValueError) as exc:
            raise CardError(f"Card column {column} must contain numeric values") from exc
        if series.isna().any():
            raise CardError(f"Card column {column} contains empty cells")
        if not (series == series.round()).all():
            raise CardError(f"Card column {column} must contain whole numbers")
        series = series.astype(int)

        if not ((series >= lo) & (series <= hi)).all():
            bad = series[(series < lo) | (series > hi)]
            raise CardError(f"Card column {column} contains out-of-range values: {bad.tolist()}")
        coerced[column] = series
    return coerced


def validate_card_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Validate a headerless 5x5 card grid and return it with integer dtype."""

    if df.shape != (GRID_SIZE, GRID_SIZE):
        raise CardError(f"Card must be {GRID_SIZE}x{GRID_SIZE}, got {df.shape[0]}x{df.shape[1]}")

    coerced = _validate_numeric_bounds(df, NUMBER_BOUNDS)

    values = coerced.to_numpy().ravel()
    numbers = values[values != FREE_CELL]
    if len(set(numbers.tolist())) != len(numbers):
        dupes = sorted({int(v) for v in numbers if (numbers == v).sum() > 1})
        raise CardError(f"Card numbers must be unique, repeated: {dupes}")

    return coerced.reset_index(drop=True)
