import pytest

from cgrad.rng import init_random, init_random_seed, sample_uniform, sample_uniform_int


def _draws():
    return [sample_uniform(-1.0, 1.0) for _ in range(5)] + [
        sample_uniform_int(0, 100) for _ in range(5)
    ]


def test_seed_is_reproducible():
    init_random_seed(42)
    first = _draws()
    init_random_seed(42)
    assert _draws() == first


def test_different_seeds_differ():
    init_random_seed(1)
    first = _draws()
    init_random_seed(2)
    assert _draws() != first


def test_uniform_in_bounds():
    init_random_seed(3)
    values = [sample_uniform(-0.5, 0.5) for _ in range(1000)]
    assert all(-0.5 <= v <= 0.5 for v in values)


def test_uniform_int_in_bounds_and_covers_range():
    init_random_seed(4)
    values = {sample_uniform_int(3, 6) for _ in range(500)}
    assert values == {3, 4, 5, 6}


def test_uniform_int_single_value():
    init_random()
    assert sample_uniform_int(9, 9) == 9


def test_uniform_int_empty_range():
    with pytest.raises(ValueError):
        sample_uniform_int(5, 4)