"""
models.py

Responsibility: Small typed values parsed from the command line or from GitHub
API payloads.

- `RepoRef`: `owner/name` repository argument
- `LangFilter`: `--lang` option, with `!` negation
- `RepoSummary`: the subset of a repository payload used for list output
- `CommitSummary`, `CheckRun`: latest commit and its checks, for build status
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


class ModelError(ValueError):
    pass


@dataclass(frozen=True)
class RepoRef:
    """Namespaced repository name, e.g. `kafji/shub`. The owner may be omitted."""

    name: str
    owner: str | None = None

    @classmethod
    def parse(cls, text: str) -> "RepoRef":
        # Only the first separator splits; the rest stays in the name.
        owner, sep, name = text.partition("/")
        if not sep:
            owner, name = "", text
        owner = owner.strip()
        name = name.strip()
        if not name:
            raise ModelError(f"Invalid repository: {text!r} (expected <owner>/<repo>)")
        return cls(name=name, owner=owner or None)

    def resolve(self, default_owner: str) -> tuple[str, str]:
        """Return (owner, name), falling back to `default_owner`."""
        return (self.owner or default_owner, self.name)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}" if self.owner else self.name


@dataclass(frozen=True)
class LangFilter:
    lang: str
    negation: bool = False

    @classmethod
    def parse(cls, text: str) -> "LangFilter":
        if text.startswith("!"):
            return cls(lang=text[1:], negation=True)
        return cls(lang=text, negation=False)

    def matches(self, language: str | None) -> bool:
        same = (language or "").casefold() == self.lang.casefold()
        return not same if self.negation else same


@dataclass(frozen=True)
class RepoSummary:
    name: str
    full_name: str = ""
    owner: str = ""
    description: str = ""
    language: str = ""
    visibility: str = ""
    archived: bool = False
    fork: bool = False
    pushed_at: datetime | None = None
    html_url: str = ""

    @property
    def attrs(self) -> list[str]:
        out: list[str] = []
        if self.archived:
            out.append("archived")
        if self.fork:
            out.append("fork")
        return out

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RepoSummary":
        name = str(data.get("name") or "")
        if not name:
            raise ModelError("Repository payload has no `name`.")

        owner_raw = data.get("owner") or {}
        owner = str(owner_raw.get("login") or "") if isinstance(owner_raw, dict) else ""

        visibility = data.get("visibility")
        if not visibility and "private" in data:
            visibility = "private" if data["private"] else "public"

        return cls(
            name=name,
            full_name=str(data.get("full_name") or ""),
            owner=owner,
            description=str(data.get("description") or ""),
            language=str(data.get("language") or ""),
            visibility=str(visibility or ""),
            archived=bool(data.get("archived")),
            fork=bool(data.get("fork")),
            pushed_at=_parse_timestamp(data.get("pushed_at")),
            html_url=str(data.get("html_url") or ""),
        )


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as e:
        raise ModelError(f"Invalid timestamp: {value!r}") from e


@dataclass(frozen=True)
class CommitSummary:
    sha: str
    message: str
    date: datetime | None = None
    author_name: str = ""
    author_email: str = ""

    @property
    def title(self) -> str:
        return self.message.splitlines()[0] if self.message else ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CommitSummary":
        detail = data.get("commit") or {}
        author = detail.get("author") or {}
        return cls(
            sha=str(data.get("sha") or ""),
            message=str(detail.get("message") or ""),
            date=_parse_timestamp(author.get("date")),
            author_name=str(author.get("name") or ""),
            author_email=str(author.get("email") or ""),
        )


@dataclass(frozen=True)
class CheckRun:
    name: str
    status: str
    conclusion: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def outcome(self) -> str:
        """The conclusion once the run has finished, otherwise its status."""
        return self.conclusion or self.status

    @property
    def timestamp(self) -> datetime | None:
        return self.completed_at or self.started_at

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CheckRun":
        return cls(
            name=str(data.get("name") or ""),
            status=str(data.get("status") or ""),
            conclusion=data.get("conclusion") or None,
            started_at=_parse_timestamp(data.get("started_at")),
            completed_at=_parse_timestamp(data.get("completed_at")),
        )
