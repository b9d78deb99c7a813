import pytest

from wilds.core.rng import RNG


def test_rng_determinism_same_seed() -> None:
    rng_a = RNG(12345)
    rng_b = RNG(12345)

    floats_a = [rng_a.random() for _ in range(5)]
    floats_b = [rng_b.random() for _ in range(5)]
    choices_a = [rng_a.choice(["a", "b", "c"]) for _ in range(5)]
    choices_b = [rng_b.choice(["a", "b", "c"]) for _ in range(5)]

    assert floats_a == floats_b
    assert choices_a == choices_b
    assert rng_a.seed == 12345


def test_rng_different_seed() -> None:
    rng_a = RNG(11111)
    rng_b = RNG(22222)

    assert [rng_a.random() for _ in range(5)] != [rng_b.random() for _ in range(5)]


def test_rng_random_in_unit_interval() -> None:
    rng = RNG(7)
    assert all(0.0 <= rng.random() < 1.0 for _ in range(100))


def test_rng_choice_rejects_empty_sequence() -> None:
    with pytest.raises(ValueError):
        RNG(1).choice([])
