import pytest

from bingo.counting import perm_count


@pytest.mark.parametrize("n", [0, 1, 5, 18, 75])
def test_zero_draws_has_one_outcome(n):
    assert perm_count(n, 0) == 1


@pytest.mark.parametrize(
    "n,r,expected",
    [
        (18, 2, 306),
        (18, 15, 1_067_062_284_288_000),
        (5, 5, 120),
        (75, 1, 75),
        (3, 5, 0),
        (0, 1, 0),
    ],
)
def test_falling_factorial(n, r, expected):
    assert perm_count(n, r) == expected


def test_exact_beyond_64_bits():
    assert perm_count(75, 20) > 2**64
    assert perm_count(75, 20) == perm_count(75, 19) * 56


@pytest.mark.parametrize("n,r", [(-1, 0), (5, -1)])
def test_negative_arguments_rejected(n, r):
    with pytest.raises(ValueError, match="non-negative"):
        perm_count(n, r)
