import random

import pytest

from drill_game import Operator, ProblemGenerator, evaluate
from drill_game.levels import level_rule
from drill_game.randomness import shuffle

ALL_LEVELS = range(1, 21)
CHOICE_LEVELS = range(1, 11)
INPUT_LEVELS = range(11, 21)


@pytest.fixture
def gen():
    return ProblemGenerator(seed=1234)


@pytest.mark.parametrize("level", ALL_LEVELS)
def test_result_matches_evaluation(gen, level):
    for _ in range(200):
        p = gen.generate(level)
        assert p.level == level
        assert 2 <= len(p.terms) <= 3
        assert len(p.operators) == len(p.terms) - 1
        assert p.result == evaluate(p.terms, p.operators)


@pytest.mark.parametrize("level", CHOICE_LEVELS)
def test_choice_levels_have_three_distinct_choices(gen, level):
    for _ in range(200):
        p = gen.generate(level)
        values = [c.value for c in p.choices]
        assert len(values) == 3
        assert values.count(p.result) == 1
        assert len(set(values)) == 3
        assert len({c.id for c in p.choices}) == 3
        assert not p.is_input


@pytest.mark.parametrize("level", INPUT_LEVELS)
def test_input_levels_have_no_choices(gen, level):
    p = gen.generate(level)
    assert p.choices == ()
    assert p.is_input


@pytest.mark.parametrize("level", [1, 2, 3, 4, 5, 6, 9])
def test_wrong_choices_stay_in_answer_range(gen, level):
    lo, hi = level_rule(level).rule.answer_range
    for _ in range(200):
        p = gen.generate(level)
        for c in p.choices:
            if c.value != p.result:
                assert lo <= c.value <= hi


@pytest.mark.parametrize("level", [4, 14])
def test_descending_pair(gen, level):
    for _ in range(300):
        p = gen.generate(level)
        a, b = p.terms
        assert 4 <= a <= 20
        assert 2 <= b < a
        assert p.operators == (Operator.SUBTRACT,)
        assert p.result >= 0


@pytest.mark.parametrize("level", [5, 15])
def test_running_total_never_negative(gen, level):
    for _ in range(500):
        p = gen.generate(level)
        assert p.result >= 0
        assert 5 <= p.terms[0] <= 15
        assert all(1 <= t <= 20 for t in p.terms[1:])
        total = p.terms[0]
        for op, t in zip(p.operators, p.terms[1:]):
            total = total + t if op == Operator.ADD else total - t
            assert total >= 0


@pytest.mark.parametrize(
    "level,first,rest,ops",
    [
        (1, (0, 9), (0, 9), {"+"}),
        (2, (0, 50), (0, 50), {"+"}),
        (3, (0, 99), (0, 99), {"+"}),
        (6, (0, 20), (0, 20), {"+", "-"}),
        (8, (1, 99), (1, 99), {"+", "-"}),
        (9, (0, 9), (0, 9), {"*"}),
        (10, (1, 30), (1, 30), {"+", "-", "*"}),
    ],
)
def test_term_ranges_and_operators(gen, level, first, rest, ops):
    for _ in range(200):
        p = gen.generate(level)
        assert first[0] <= p.terms[0] <= first[1]
        assert all(rest[0] <= t <= rest[1] for t in p.terms[1:])
        assert {op.value for op in p.operators} <= ops


def test_term_count_varies(gen):
    counts = {len(gen.generate(3).terms) for _ in range(100)}
    assert counts == {2, 3}


@pytest.mark.parametrize(
    "level,seconds",
    [(1, 0), (6, 0), (7, 20), (8, 20), (9, 0), (10, 13), (11, 0), (17, 25), (18, 25), (20, 18)],
)
def test_timers(gen, level, seconds):
    p = gen.generate(level)
    assert p.timer_seconds == seconds
    assert p.has_timer is (seconds > 0)


@pytest.mark.parametrize("level", [0, 21, -1])
def test_out_of_range_level(gen, level):
    with pytest.raises(ValueError):
        gen.generate(level)


def test_seeded_generators_are_deterministic():
    a = ProblemGenerator(seed=99)
    b = ProblemGenerator(seed=99)
    for level in ALL_LEVELS:
        assert a.generate(level) == b.generate(level)


def test_injected_rng_is_used():
    a = ProblemGenerator(rng=random.Random(7))
    b = ProblemGenerator(rng=random.Random(7))
    assert a.generate(10) == b.generate(10)


def test_generate_batch_unique(gen):
    problems = gen.generate_batch(3, 20)
    assert len(problems) == 20
    assert len({p.expression for p in problems}) == 20


def test_generate_batch_stops_when_exhausted(gen):
    # level 1 has exactly 100 distinct expressions
    problems = gen.generate_batch(1, 150, max_retries=500)
    assert 0 < len(problems) <= 100
    assert len({p.expression for p in problems}) == len(problems)


def test_generate_batch_edge_cases(gen):
    assert gen.generate_batch(1, 0) == []
    assert len(gen.generate_batch(1, 5, unique=False)) == 5


def test_shuffle_preserves_elements():
    rng = random.Random(3)
    items = [1, 2, 3, 4, 5]
    out = shuffle(items, rng)
    assert sorted(out) == items
    assert items == [1, 2, 3, 4, 5]
    assert shuffle([], rng) == []
    assert shuffle([42], rng) == [42]
