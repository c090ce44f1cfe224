"""
cli.py

Responsibility: CLI entrypoint for shub.

Command groups:
- `actions delete-runs`: delete every workflow run of a repository
- `repos list|download-settings|apply-settings|view-settings|copy-settings|build-status`
- `stars`: list starred repositories, optionally filtered by language

This module should orchestrate behavior but keep concerns isolated:
- Credentials: `config.py`
- GitHub API: `github_client.py`
- Settings file format: `settings.py`
- Row formatting: `display.py`
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from shub import __version__
from shub.config import ConfigError, load_config
from shub.display import format_check_run, format_commit, format_owned, format_starred
from shub.github_client import GitHubClient, GitHubError
from shub.models import CheckRun, CommitSummary, LangFilter, ModelError, RepoRef, RepoSummary
from shub.settings import RepositorySettings, SettingsError, dump_settings, load_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CLIError(RuntimeError):
    pass


def _setup_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get("SHUB_LOG", "WARNING").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def _client() -> tuple[GitHubClient, str]:
    cfg = load_config()
    logger.debug("loaded config %r", cfg)
    return GitHubClient(cfg.username, cfg.token, api_base=cfg.api_url), cfg.username


def delete_runs_cmd(args: argparse.Namespace) -> int:
    gh, username = _client()
    owner, repo = args.repository.resolve(username)
    print(f"Deleting workflow runs in {owner}/{repo}.")

    # Collect first: deleting while paging would shift later pages.
    run_ids = list(gh.list_workflow_runs(owner, repo))
    logger.info("found %d workflow runs in %s/%s", len(run_ids), owner, repo)
    for run_id in run_ids:
        gh.delete_workflow_run(owner, repo, run_id)
        logger.debug("deleted workflow run %s", run_id)

    print(f"{len(run_ids)} workflow runs deleted.")
    return 0


def list_repos_cmd(args: argparse.Namespace) -> int:
    gh, _username = _client()
    for data in gh.list_owned_repositories():
        print(format_owned(RepoSummary.from_api(data), short=True))
    return 0


def download_settings_cmd(args: argparse.Namespace) -> int:
    gh, username = _client()
    owner, repo = args.repository.resolve(username)
    print(f"Downloading GitHub repository settings for {owner}/{repo} to {args.file}.")
    settings = RepositorySettings.from_repository(gh.get_repository(owner, repo))
    logger.debug("writing settings %r to %s", settings, args.file)
    dump_settings(settings, args.file)
    return 0


def apply_settings_cmd(args: argparse.Namespace) -> int:
    gh, username = _client()
    settings = load_settings(args.file)
    payload = settings.to_update_payload()
    if not payload:
        raise CLIError(f"No settings found in {args.file}")

    for ref in [args.repository, *args.repositories]:
        owner, repo = ref.resolve(username)
        print(f"Applying GitHub repository settings from {args.file} for {owner}/{repo}.")
        logger.debug("applying settings %r", payload)
        gh.update_repository(owner, repo, payload)
    return 0


def view_settings_cmd(args: argparse.Namespace) -> int:
    gh, username = _client()
    owner, repo = args.repository.resolve(username)
    settings = RepositorySettings.from_repository(gh.get_repository(owner, repo))
    for line in settings.describe():
        print(line)
    return 0


def copy_settings_cmd(args: argparse.Namespace) -> int:
    gh, username = _client()
    src_owner, src_repo = args.source.resolve(username)
    dst_owner, dst_repo = args.target.resolve(username)
    print(f"Copying GitHub repository settings from {src_owner}/{src_repo} to {dst_owner}/{dst_repo}.")
    settings = RepositorySettings.from_repository(gh.get_repository(src_owner, src_repo))
    payload = settings.to_update_payload()
    if not payload:
        raise CLIError(f"No settings found in {src_owner}/{src_repo}")
    gh.update_repository(dst_owner, dst_repo, payload)
    return 0


def build_status_cmd(args: argparse.Namespace) -> int:
    gh, username = _client()
    owner, repo = args.repository.resolve(username)
    data = gh.get_latest_commit(owner, repo)
    if data is None:
        raise CLIError(f"Repository {owner}/{repo} has no commits")

    commit = CommitSummary.from_api(data)
    for line in format_commit(commit):
        print(line)
    print()
    runs = [CheckRun.from_api(r) for r in gh.get_check_runs(owner, repo, commit.sha)]
    if not runs:
        print("No check runs.")
    for run in runs:
        print(format_check_run(run))
    return 0


def stars_cmd(args: argparse.Namespace) -> int:
    gh, _username = _client()
    lang: LangFilter | None = args.lang
    for data in gh.list_starred_repositories():
        repo = RepoSummary.from_api(data)
        if lang is not None and not lang.matches(repo.language):
            continue
        print(format_starred(repo, short=bool(args.short)))
    return 0


def _repository_arg(text: str) -> RepoRef:
    try:
        return RepoRef.parse(text)
    except ModelError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="shub", description="Yet another GitHub CLI.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging (or set SHUB_LOG)")
    sub = p.add_subparsers(dest="command", required=True)

    actions = sub.add_parser("actions", help="GitHub Actions")
    actions_sub = actions.add_subparsers(dest="actions_command", required=True)
    d = actions_sub.add_parser("delete-runs", help="Delete all workflow runs")
    d.add_argument("repository", type=_repository_arg, help="Repository, e.g. kafji/shub")
    d.set_defaults(func=delete_runs_cmd)

    repos = sub.add_parser("repos", help="GitHub repositories")
    repos_sub = repos.add_subparsers(dest="repos_command", required=True)

    ls = repos_sub.add_parser("list", help="Print all owned repositories")
    ls.set_defaults(func=list_repos_cmd)

    dl = repos_sub.add_parser("download-settings", help="Download repository settings into a toml file")
    dl.add_argument("repository", type=_repository_arg, help="Repository, e.g. kafji/shub")
    dl.add_argument("file", help="Path to download settings to")
    dl.set_defaults(func=download_settings_cmd)

    ap = repos_sub.add_parser(
        "apply-settings",
        help="Apply repository settings from a toml file",
        epilog="Example: shub repos apply-settings ./gh-repo-settings.toml kafji/shub",
    )
    ap.add_argument("file", help="Path to the settings toml file")
    ap.add_argument("repository", type=_repository_arg, help="Repository, e.g. kafji/shub")
    ap.add_argument("repositories", type=_repository_arg, nargs="*", metavar="repository", help="More repositories")
    ap.set_defaults(func=apply_settings_cmd)

    vs = repos_sub.add_parser("view-settings", help="Print repository settings")
    vs.add_argument("repository", type=_repository_arg, help="Repository, e.g. kafji/shub")
    vs.set_defaults(func=view_settings_cmd)

    cp = repos_sub.add_parser("copy-settings", help="Copy settings from one repository to another")
    cp.add_argument("source", type=_repository_arg, help="Repository to read settings from")
    cp.add_argument("target", type=_repository_arg, help="Repository to apply settings to")
    cp.set_defaults(func=copy_settings_cmd)

    bs = repos_sub.add_parser("build-status", help="Print the latest commit and its check runs")
    bs.add_argument("repository", type=_repository_arg, help="Repository, e.g. kafji/shub")
    bs.set_defaults(func=build_status_cmd)

    s = sub.add_parser("stars", help="List starred repositories")
    s.add_argument(
        "--lang",
        type=LangFilter.parse,
        default=None,
        help="Filter by language. Prefix with `!` to negate, i.e. `!rust` to filter out Rust",
    )
    s.add_argument("--short", action="store_true", help="Truncate long texts")
    s.set_defaults(func=stars_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    load_dotenv(Path.cwd() / ".env")
    _setup_logging(bool(args.verbose))
    logger.debug("started %r", args)

    try:
        return int(args.func(args))
    except (CLIError, ConfigError, GitHubError, ModelError, SettingsError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"shub: error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
