def test_import_wilds_package() -> None:
    import importlib

    module = importlib.import_module("wilds")
    assert module is not None


def test_import_rng_no_side_effects() -> None:
    from wilds.core.rng import RNG

    rng = RNG(42)
    value = rng.random()
    assert 0.0 <= value < 1.0
