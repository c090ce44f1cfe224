from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from shub.settings import (
    RepositorySettings,
    SettingsError,
    dump_settings,
    load_settings,
)


def test_from_repository_picks_known_keys() -> None:
    settings = RepositorySettings.from_repository(
        {
            "id": 1,
            "name": "shub",
            "allow_rebase_merge": False,
            "allow_squash_merge": True,
            "allow_merge_commit": False,
            "delete_branch_on_merge": True,
            "allow_auto_merge": None,
        }
    )
    assert settings.to_update_payload() == {
        "allow_rebase_merge": False,
        "allow_squash_merge": True,
        "allow_merge_commit": False,
        "delete_branch_on_merge": True,
    }


def test_dump_writes_only_set_fields(tmp_path: Path) -> None:
    path = dump_settings(RepositorySettings(allow_merge_commit=False, has_wiki=True), tmp_path / "s.toml")
    assert tomllib.loads(path.read_text(encoding="utf-8")) == {"allow_merge_commit": False, "has_wiki": True}


def test_load_settings(tmp_path: Path) -> None:
    path = tmp_path / "s.toml"
    path.write_text("allow_squash_merge = true\ndelete_branch_on_merge = false\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings == RepositorySettings(allow_squash_merge=True, delete_branch_on_merge=False)


def test_load_settings_rejects_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "s.toml"
    path.write_text("allow_squash_merge = true\nfavourite_colour = true\n", encoding="utf-8")
    with pytest.raises(SettingsError, match="favourite_colour"):
        load_settings(path)


def test_load_settings_rejects_non_boolean(tmp_path: Path) -> None:
    path = tmp_path / "s.toml"
    path.write_text('allow_squash_merge = "yes"\n', encoding="utf-8")
    with pytest.raises(SettingsError, match="true or false"):
        load_settings(path)


def test_load_settings_rejects_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "s.toml"
    path.write_text("allow_squash_merge = \n", encoding="utf-8")
    with pytest.raises(SettingsError, match="Invalid TOML"):
        load_settings(path)


def test_load_settings_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SettingsError, match="does not exist"):
        load_settings(tmp_path / "nope.toml")


def test_dump_settings_into_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(SettingsError):
        dump_settings(RepositorySettings(has_wiki=True), tmp_path / "missing" / "s.toml")


def test_describe() -> None:
    lines = RepositorySettings(allow_rebase_merge=True, has_wiki=False).describe()
    assert lines == ["Allow rebase merge: yes", "Has wiki: no"]
