from __future__ import annotations


def perm_count(n: int, r: int) -> int:
    """Number of ordered selections of ``r`` items from ``n`` without replacement.

    This is the falling factorial ``n * (n - 1) * ... * (n - r + 1)``. Python
    integers are exact at any size, so every ``n >= 0, r >= 0`` is in range.
    ``perm_count(n, 0)`` is 1 and ``r > n`` gives 0.

    Raises:
        ValueError: if ``n`` or ``r`` is negative.
    """

    if n < 0 or r < 0:
        raise ValueError(f"perm_count needs non-negative arguments, got n={n}, r={r}")
    if r > n:
        return 0

    total = 1
    for factor in range(n, n - r, -1):
        total *= factor
    return total


__all__ = ["perm_count"]
