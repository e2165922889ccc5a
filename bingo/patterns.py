from __future__ import annotations

from typing import Tuple

Cell = Tuple[int, int]
LinePattern = Tuple[Cell, Cell, Cell, Cell, Cell]

GRID_SIZE = 5

_ROWS = tuple(tuple((row, col) for col in range(GRID_SIZE)) for row in range(GRID_SIZE))
_COLUMNS = tuple(tuple((row, col) for row in range(GRID_SIZE)) for col in range(GRID_SIZE))
_DIAGONALS = (
    tuple((i, i) for i in range(GRID_SIZE)),
    tuple((i, GRID_SIZE - 1 - i) for i in range(GRID_SIZE)),
)

# Rows 0-4, columns 0-4, main diagonal, anti-diagonal.
LINE_PATTERNS: Tuple[LinePattern, ...] = _ROWS + _COLUMNS + _DIAGONALS

LINE_NAMES: Tuple[str, ...] = (
    tuple(f"row {i + 1}" for i in range(GRID_SIZE))
    + tuple(f"col {i + 1}" for i in range(GRID_SIZE))
    + ("diag \\", "diag /")
)

__all__ = ["GRID_SIZE", "LINE_PATTERNS", "LINE_NAMES", "Cell", "LinePattern"]
