"""
settings.py

Responsibility: Repository settings record and its TOML file format.

The TOML file is flat: one boolean per setting, keys named exactly as the
GitHub "update a repository" endpoint names them. Every key is optional; only
keys present in the file are sent when applying.

This module does NOT talk to GitHub; the CLI moves payloads between the
client and this record.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import tomli_w

from shub.display import snake_case_to_statement


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class RepositorySettings:
    allow_rebase_merge: bool | None = None
    allow_squash_merge: bool | None = None
    allow_merge_commit: bool | None = None
    allow_auto_merge: bool | None = None
    allow_update_branch: bool | None = None
    delete_branch_on_merge: bool | None = None
    has_issues: bool | None = None
    has_projects: bool | None = None
    has_wiki: bool | None = None

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_repository(cls, data: dict[str, Any]) -> "RepositorySettings":
        """
        Pick the known settings out of a `GET /repos/{owner}/{repo}` payload.

        Keys the API did not return (e.g. merge options hidden from tokens
        without admin rights) stay unset.
        """
        picked = {k: bool(data[k]) for k in cls.keys() if data.get(k) is not None}
        return cls(**picked)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "RepositorySettings":
        known = set(cls.keys())
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise SettingsError(f"Unknown setting(s): {', '.join(unknown)}")
        for k, v in data.items():
            if not isinstance(v, bool):
                raise SettingsError(f"Setting `{k}` must be true or false, got {v!r}")
        return cls(**data)

    def to_update_payload(self) -> dict[str, bool]:
        return {k: v for k, v in self._items() if v is not None}

    def describe(self) -> list[str]:
        return [
            f"{snake_case_to_statement(k)}: {'yes' if v else 'no'}"
            for k, v in self._items()
            if v is not None
        ]

    def _items(self) -> list[tuple[str, bool | None]]:
        return [(k, getattr(self, k)) for k in self.keys()]


def load_settings(path: str | Path) -> RepositorySettings:
    p = Path(path)
    try:
        with p.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as e:
        raise SettingsError(f"Settings file does not exist: {p}") from e
    except OSError as e:
        raise SettingsError(f"Cannot read settings file {p}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML in {p}: {e}") from e
    return RepositorySettings.from_mapping(data)


def dump_settings(settings: RepositorySettings, path: str | Path) -> Path:
    p = Path(path)
    try:
        with p.open("wb") as fh:
            tomli_w.dump(settings.to_update_payload(), fh)
    except OSError as e:
        raise SettingsError(f"Cannot write settings file {p}: {e}") from e
    return p
