"""
config.py

Responsibility: Resolve credentials and API location for the GitHub client.

Sources, lowest to highest precedence:
1) YAML config file (`$SHUB_CONFIG`, else `~/.config/shub/config.yaml` if present)
2) Environment variables (`SHUB_USERNAME`, `SHUB_TOKEN`, `SHUB_API_URL`),
   which the CLI seeds from a local `.env` file beforehand
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    pass


DEFAULT_CONFIG_PATH = Path("~/.config/shub/config.yaml")


@dataclass(frozen=True)
class Config:
    username: str
    token: str = field(repr=False)
    api_url: str | None = None


def _load_config_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must be a mapping/object at the top level.")
    return data


def _config_file_path(env: Mapping[str, str]) -> Path | None:
    explicit = env.get("SHUB_CONFIG")
    if explicit:
        # An explicitly named file must exist.
        return Path(explicit).expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.is_file() else None


def load_config(env: Mapping[str, str] | None = None) -> Config:
    env = os.environ if env is None else env

    path = _config_file_path(env)
    file_data = _load_config_file(path) if path else {}

    def pick(env_key: str, file_key: str) -> str:
        value = env.get(env_key) or file_data.get(file_key) or ""
        return str(value).strip()

    username = pick("SHUB_USERNAME", "username")
    token = pick("SHUB_TOKEN", "token")
    api_url = pick("SHUB_API_URL", "api_url") or None

    if not username:
        raise ConfigError("GitHub username is required (set SHUB_USERNAME)")
    if not token:
        raise ConfigError("GitHub token is required (set SHUB_TOKEN)")

    return Config(username=username, token=token, api_url=api_url)
