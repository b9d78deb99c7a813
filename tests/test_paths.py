from pathlib import Path

import pytest

from wilds.data import paths


def test_get_definitions_path_base_path(tmp_path: Path) -> None:
    assert paths.get_definitions_path(tmp_path) == tmp_path
    assert paths.get_definitions_path(str(tmp_path)) == tmp_path


def test_get_definitions_path_source_repo_exists() -> None:
    definitions_path = paths.get_definitions_path()
    assert definitions_path.name == "definitions"
    assert (definitions_path / "locations.json").exists()


def test_table_path_only_resolves_known_tables(tmp_path: Path) -> None:
    assert paths.table_path("npcs.json", tmp_path) == tmp_path / "npcs.json"
    with pytest.raises(ValueError):
        paths.table_path("weapons.json", tmp_path)


def test_every_content_table_ships() -> None:
    for table in paths.CONTENT_TABLES:
        assert paths.table_path(table).exists()
