from __future__ import annotations

from pathlib import Path

import pytest

from shub.config import ConfigError, load_config


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))


def test_load_config_from_env() -> None:
    cfg = load_config({"SHUB_USERNAME": "kafji", "SHUB_TOKEN": "t0k3n"})
    assert cfg.username == "kafji"
    assert cfg.token == "t0k3n"
    assert cfg.api_url is None
    assert "t0k3n" not in repr(cfg)


def test_load_config_requires_username() -> None:
    with pytest.raises(ConfigError, match="SHUB_USERNAME"):
        load_config({"SHUB_TOKEN": "t0k3n", "SHUB_CONFIG": ""})


def test_load_config_requires_token() -> None:
    with pytest.raises(ConfigError, match="SHUB_TOKEN"):
        load_config({"SHUB_USERNAME": "kafji", "SHUB_CONFIG": ""})


def test_env_overrides_config_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("username: fromfile\ntoken: filetoken\napi_url: https://ghe.example/api/v3\n", encoding="utf-8")
    cfg = load_config({"SHUB_CONFIG": str(path), "SHUB_USERNAME": "fromenv"})
    assert cfg.username == "fromenv"
    assert cfg.token == "filetoken"
    assert cfg.api_url == "https://ghe.example/api/v3"


def test_config_file_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config({"SHUB_CONFIG": str(path)})


def test_explicit_config_file_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config({"SHUB_CONFIG": str(tmp_path / "missing.yaml")})
