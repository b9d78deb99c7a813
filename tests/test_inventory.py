from wilds.domain.inventory import add_items, count_item, has_items, missing_items, remove_items


def test_add_items_returns_new_mapping() -> None:
    inventory = {"forest_herb": 1}
    updated = add_items(inventory, "forest_herb", 2)

    assert updated == {"forest_herb": 3}
    assert inventory == {"forest_herb": 1}


def test_add_items_ignores_non_positive_quantities() -> None:
    assert add_items({}, "raw_ore", 0) == {}
    assert add_items({}, "raw_ore", -3) == {}


def test_remove_items_prunes_zero_quantities() -> None:
    assert remove_items({"lake_water": 1, "raw_ore": 2}, "lake_water", 1) == {"raw_ore": 2}


def test_remove_items_never_goes_negative() -> None:
    updated = remove_items({"forest_herb": 2}, "forest_herb", 5)

    assert updated == {}
    assert count_item(updated, "forest_herb") == 0


def test_remove_items_missing_item_is_noop() -> None:
    assert remove_items({"raw_ore": 1}, "forest_herb", 1) == {"raw_ore": 1}


def test_has_items_and_missing_items() -> None:
    inventory = {"forest_herb": 3}
    requirements = (("forest_herb", 3), ("lake_water", 1))

    assert not has_items(inventory, requirements)
    assert missing_items(inventory, requirements) == {"lake_water": 1}
    assert has_items({"forest_herb": 4, "lake_water": 1}, requirements)
