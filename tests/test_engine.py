from collections import Counter
from itertools import permutations

import pytest

from bingo.engine import (
    DEFAULT_CHUNK_SIZE,
    ChunkResult,
    EngineConfig,
    ProbabilityEngine,
    expand_chunk,
    merge_chunks,
)

POOL = {1, 2, 3, 4, 5}
LADDER = [{1}, {2, 3}, {1, 4, 5}, {2, 3, 4, 5}]


def _brute_force_wins(need, pool, n):
    """Count ordered n-draws whose numbers cover at least one need-set."""

    sets = [frozenset(s) for s in need]
    return sum(1 for draw in permutations(sorted(pool), n) if any(s <= set(draw) for s in sets))


def test_single_number_lines_round_one():
    engine = ProbabilityEngine([{1}, {2}], POOL)

    result = engine.advance()

    assert result.round == 1
    assert result.total_outcomes == 5
    assert result.probability == pytest.approx(0.4)


def test_ladder_rounds():
    engine = ProbabilityEngine(LADDER, POOL)

    got = [engine.advance() for _ in range(3)]

    assert [(r.round, r.total_outcomes, r.probability) for r in got] == [
        (1, 5, 0.2),
        (2, 20, 0.5),
        (3, 60, 0.8),
    ]
    assert [r.bingo_count for r in got] == [1, 10, 48]


def test_pending_holds_only_losing_candidates_of_round_size():
    engine = ProbabilityEngine(LADDER, POOL)
    engine.advance()
    engine.advance()

    assert engine.depth == 2
    assert len(engine.pending) == 20 - 10
    assert all(len(c) == 2 and 1 not in c and c != {2, 3} for c in engine.pending)


def test_absorbing_wins_are_monotone():
    engine = ProbabilityEngine(LADDER, POOL)
    previous = 0
    for n in range(1, 6):
        result = engine.advance()
        assert result.bingo_count >= previous * (len(POOL) - (n - 1))
        previous = result.bingo_count
    assert result.probability == pytest.approx(1.0)


@pytest.mark.parametrize(
    "need,pool",
    [
        ([{1}, {2, 3}, {4, 5, 6}], range(1, 8)),
        ([{2, 4}, {6, 7}, {1, 3, 5, 7}], range(1, 8)),
        ([{9, 10}], range(1, 8)),
    ],
)
def test_matches_brute_force(need, pool):
    engine = ProbabilityEngine(need, pool)
    for n in range(1, 5):
        result = engine.advance()
        assert result.bingo_count == _brute_force_wins(need, pool, n)


def test_pruned_rounds_report_zero_and_defer_expansion():
    need = [{1, 2, 3}, {4, 5, 6}]
    pool = range(1, 9)
    engine = ProbabilityEngine(need, pool)

    first, second = engine.advance(), engine.advance()
    assert (first.probability, second.probability) == (0.0, 0.0)
    assert (first.total_outcomes, second.total_outcomes) == (8, 56)
    assert engine.depth == 0

    third = engine.advance()
    assert engine.depth == 3
    assert third.bingo_count == 12
    assert third.total_outcomes == 336

    fourth = engine.advance()
    assert fourth.bingo_count == _brute_force_wins(need, pool, 4)


def test_chunking_does_not_change_the_answer():
    coarse = ProbabilityEngine(LADDER, POOL, EngineConfig(chunk_size=3000))
    fine = ProbabilityEngine(
        LADDER, POOL, EngineConfig(chunk_size=1, max_workers=4, executor="thread")
    )
    with coarse, fine:
        for _ in range(3):
            a, b = coarse.advance(), fine.advance()
            assert a == b

        assert Counter(coarse.pending) == Counter(fine.pending)


def test_process_pool_matches_inline():
    inline = ProbabilityEngine(LADDER, POOL, EngineConfig(max_workers=1))
    with ProbabilityEngine(
        LADDER, POOL, EngineConfig(chunk_size=2, max_workers=2, executor="process")
    ) as pooled:
        for _ in range(4):
            assert pooled.advance() == inline.advance()


def test_duplicate_contents_are_kept_per_ordering():
    engine = ProbabilityEngine([{9}], {1, 2, 3})
    engine.advance()
    engine.advance()

    assert Counter(engine.pending) == {
        frozenset({1, 2}): 2,
        frozenset({1, 3}): 2,
        frozenset({2, 3}): 2,
    }


def test_exhausted_pool_reports_undefined_probability():
    engine = ProbabilityEngine([{1}], set())

    result = engine.advance()

    assert result.total_outcomes == 0
    assert result.probability is None
    assert result.percent is None


def test_rounds_past_the_pool_are_undefined():
    engine = ProbabilityEngine([{1}], {1, 2, 3})

    results = [engine.advance() for _ in range(5)]

    assert [r.probability for r in results[:3]] == pytest.approx([1 / 3, 4 / 6, 1.0])
    assert [r.probability for r in results[3:]] == [None, None]
    assert [r.round for r in results] == [1, 2, 3, 4, 5]


def test_empty_need_set_wins_immediately():
    engine = ProbabilityEngine([set(), {1, 2}], POOL)

    assert engine.advance().probability == 1.0


def test_no_need_sets_never_win():
    engine = ProbabilityEngine([], POOL)

    assert [engine.advance().probability for _ in range(3)] == [0.0, 0.0, 0.0]


def test_expand_chunk_and_merge():
    chunk = [frozenset({1}), frozenset({2})]
    part = expand_chunk(chunk, (1, 2, 3), (frozenset({1, 2}),))

    assert part.wins == 2
    assert Counter(part.survivors) == {frozenset({1, 3}): 1, frozenset({2, 3}): 1}

    merged = merge_chunks([part, ChunkResult(wins=1, survivors=(frozenset({3}),))])
    assert merged.wins == 3
    assert len(merged.survivors) == 3


@pytest.mark.parametrize(
    "kwargs,error",
    [
        ({"chunk_size": 0}, "chunk_size"),
        ({"max_workers": 0}, "max_workers"),
        ({"executor": "gpu"}, "Unsupported executor"),
    ],
)
def test_config_validation(kwargs, error):
    with pytest.raises(ValueError, match=error):
        EngineConfig(**kwargs)


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("BINGO_CHUNK_SIZE", "250")
    monkeypatch.setenv("BINGO_MAX_WORKERS", "3")
    monkeypatch.setenv("BINGO_EXECUTOR", "thread")

    config = EngineConfig.from_env()
    assert config == EngineConfig(chunk_size=250, max_workers=3, executor="thread")

    override = EngineConfig.from_env(chunk_size=10, executor="process")
    assert override == EngineConfig(chunk_size=10, max_workers=3, executor="process")


def test_config_from_env_defaults(monkeypatch):
    for name in ("BINGO_CHUNK_SIZE", "BINGO_MAX_WORKERS", "BINGO_EXECUTOR"):
        monkeypatch.delenv(name, raising=False)

    config = EngineConfig.from_env()
    assert config.chunk_size == DEFAULT_CHUNK_SIZE
    assert config.max_workers is None


def test_config_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("BINGO_CHUNK_SIZE", "lots")
    with pytest.raises(ValueError, match="BINGO_CHUNK_SIZE"):
        EngineConfig.from_env()


def test_config_from_env_keeps_explicit_zero(monkeypatch):
    monkeypatch.delenv("BINGO_CHUNK_SIZE", raising=False)
    monkeypatch.delenv("BINGO_MAX_WORKERS", raising=False)

    with pytest.raises(ValueError, match="chunk_size"):
        EngineConfig.from_env(chunk_size=0)
    with pytest.raises(ValueError, match="max_workers"):
        EngineConfig.from_env(max_workers=0)


WIDE_POOL = range(1, 70)
WIDE_NEED = [
    {1}, {40}, {50}, {60},
    {2, 3}, {4, 5}, {5, 6},
    {6, 7, 8}, {8, 9, 10}, {10, 11, 12}, {11, 12, 13}, {13, 14, 15},
]


@pytest.mark.parametrize(
    "config",
    [
        EngineConfig(chunk_size=375, max_workers=4, executor="thread"),
        EngineConfig(chunk_size=3000, max_workers=4, executor="thread"),
        EngineConfig(chunk_size=1, max_workers=4, executor="thread"),
    ],
)
def test_chunk_size_invariance_on_a_wide_pool(config):
    reference = ProbabilityEngine(
        WIDE_NEED, WIDE_POOL, EngineConfig(chunk_size=10**6, max_workers=1)
    )
    with ProbabilityEngine(WIDE_NEED, WIDE_POOL, config) as chunked:
        for _ in range(3):
            assert chunked.advance() == reference.advance()

        assert len(chunked.pending) > config.chunk_size
        assert Counter(chunked.pending) == Counter(reference.pending)
