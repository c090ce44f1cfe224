"""
display.py

Responsibility: Turn repository summaries into single-line, `|`-separated rows,
and render the build status of a repository.

Rows are meant to be piped into standard text tools (`grep`, `sort`), so each
repository is exactly one line and newlines inside descriptions are flattened.
"""

from __future__ import annotations

from datetime import datetime, timezone

from shub.models import CheckRun, CommitSummary, RepoSummary

VISIBILITY_LEN = 8
NAME_LEN = 15
OWNED_DESC_LEN = 30
STARRED_DESC_LEN = 60
OWNER_NAME_LEN = 15
PUSHED_AT_LEN = 12
LANG_NAME_LEN = 10
ATTRS_LEN = 15


def ellipsize(text: str, width: int) -> str:
    """
    Cut `text` to at most `width` characters, marking the cut with `..`.
    """
    if width < 3:
        raise ValueError("width must be greater than 2")
    if len(text) <= width:
        return text
    head = text.replace("\n", " ")[: width - 2].strip()
    return f"{head}.."


def since(then: datetime, now: datetime | None = None) -> str:
    """Relative time from `now` (default: current UTC time)."""
    now = now or datetime.now(timezone.utc)
    delta = now - then
    days = delta.days
    if days < 1:
        hours = int(delta.total_seconds() // 3600)
        if hours < 1:
            minutes = int(delta.total_seconds() // 60)
            return "just now" if minutes < 1 else f"{minutes} minutes ago"
        return f"{hours} hours ago"
    if days < 7:
        return "this week"
    if days < 30:
        return "this month"
    if days < 365:
        return "this year"
    years = days // 365
    return f"{years} year ago" if years == 1 else f"{years} years ago"


def _col(text: str, width: int, short: bool) -> str:
    text = " ".join(text.splitlines())
    if short:
        text = ellipsize(text, width)
    return text.ljust(width)


def _row(columns: list[tuple[str, int]], short: bool) -> str:
    return " | ".join(_col(text, width, short) for text, width in columns).rstrip()


def _pushed(repo: RepoSummary, now: datetime | None) -> str:
    return since(repo.pushed_at, now) if repo.pushed_at else ""


def format_owned(repo: RepoSummary, *, short: bool = True, now: datetime | None = None) -> str:
    return _row(
        [
            (repo.visibility, VISIBILITY_LEN),
            (repo.name, NAME_LEN),
            (repo.description, OWNED_DESC_LEN),
            (_pushed(repo, now), PUSHED_AT_LEN),
            (repo.language, LANG_NAME_LEN),
            (", ".join(repo.attrs), ATTRS_LEN),
        ],
        short,
    )


def format_starred(repo: RepoSummary, *, short: bool = False, now: datetime | None = None) -> str:
    return _row(
        [
            (repo.name, NAME_LEN),
            (repo.description, STARRED_DESC_LEN),
            (repo.owner, OWNER_NAME_LEN),
            (_pushed(repo, now), PUSHED_AT_LEN),
            (repo.language, LANG_NAME_LEN),
            (", ".join(repo.attrs), ATTRS_LEN),
        ],
        short,
    )


def snake_case_to_statement(text: str) -> str:
    """`hello_world` -> `Hello world`."""
    words = text.replace("_", " ")
    return words[:1].upper() + words[1:]


def format_commit(commit: CommitSummary, *, now: datetime | None = None) -> list[str]:
    """Author and age, short hash, then the first line of the message."""
    who = commit.author_name
    if commit.author_email:
        who = f"{who} <{commit.author_email}>" if who else commit.author_email
    when = since(commit.date, now) if commit.date else ""
    header = " - ".join(part for part in (who, when) if part)
    return [header, commit.sha[:8], commit.title]


def format_check_run(run: CheckRun, *, now: datetime | None = None) -> str:
    line = f"{run.name}: {snake_case_to_statement(run.outcome)}"
    if run.timestamp:
        line = f"{line} - {since(run.timestamp, now)}"
    return line
