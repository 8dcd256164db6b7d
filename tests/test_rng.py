import math

import pytest

from perishable.rng import Rng


def test_same_seed_same_sequence():
    a, b = Rng(42), Rng(42)
    assert [a.next() for _ in range(100)] == [b.next() for _ in range(100)]


def test_different_seeds_diverge():
    a, b = Rng(1), Rng(2)
    assert [a.next() for _ in range(10)] != [b.next() for _ in range(10)]


def test_uniform_draws_in_unit_interval():
    rng = Rng(123)
    draws = [rng.next() for _ in range(5000)]
    assert all(0.0 <= d < 1.0 for d in draws)
    assert 0.45 < sum(draws) / len(draws) < 0.55


def test_seed_is_reduced_to_32_bits():
    a, b = Rng(-1), Rng(0xFFFFFFFF)
    assert a.next() == b.next()


def test_randint_inclusive_bounds():
    rng = Rng(9)
    values = {rng.randint(3, 6) for _ in range(500)}
    assert values == {3, 4, 5, 6}


def test_randint_single_value():
    assert Rng(5).randint(4, 4) == 4


def test_randint_accepts_bounds_beyond_float_range():
    hi = 2**70
    value = Rng(1).randint(0, hi)
    assert isinstance(value, int)
    assert 0 <= value <= hi
    assert Rng(2).randint(-(10**400), -(10**400)) == -(10**400)


@pytest.mark.parametrize(
    "lo,hi",
    [(5, 4), (0, math.inf), (-math.inf, 0), (math.nan, 1)],
)
def test_randint_rejects_invalid_bounds(lo, hi):
    with pytest.raises(ValueError):
        Rng(1).randint(lo, hi)


def test_normal_with_zero_std_dev_returns_mean():
    rng = Rng(11)
    assert all(rng.normal(2.5, 0.0) == 2.5 for _ in range(100))


def test_normal_moments():
    rng = Rng(2024)
    draws = [rng.normal(10.0, 2.0) for _ in range(20000)]
    mean = sum(draws) / len(draws)
    var = sum((d - mean) ** 2 for d in draws) / len(draws)
    assert mean == pytest.approx(10.0, abs=0.1)
    assert math.sqrt(var) == pytest.approx(2.0, abs=0.1)


def test_normal_consumes_two_uniforms():
    a, b = Rng(77), Rng(77)
    a.normal()
    b.next()
    b.next()
    assert a.next() == b.next()
