"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to api.github.com
- Follows `Link: rel="next"` pagination
- Interprets GitHub API responses / error payloads

Everything else (settings files, output formatting, CLI behavior) should use this client.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from typing import Any

import requests

from shub import __version__

logger = logging.getLogger(__name__)


class GitHubError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(GitHubError):
    def __init__(self, message: str, reset_at: int | None = None) -> None:
        super().__init__(message, status_code=403)
        self.reset_at = reset_at


class GitHubClient:
    API_BASE = "https://api.github.com"
    PER_PAGE = 100
    TIMEOUT_SECONDS = 30
    MAX_RETRIES = 3
    RETRY_DELAY_SECONDS = 1

    def __init__(self, username: str, token: str, api_base: str | None = None) -> None:
        if not username.strip():
            raise GitHubError("GitHub username is required.")
        if not token.strip():
            raise GitHubError("GitHub token is required.")
        self._auth = (username, token)
        self._api_base = (api_base or self.API_BASE).rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"shub/{__version__}",
        }

    def _url(self, path_or_url: str) -> str:
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return f"{self._api_base}{path_or_url}"

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> requests.Response:
        """
        Send one request, retrying transport failures with exponential backoff.
        """
        for attempt in range(self.MAX_RETRIES):
            logger.debug("sending request %s %s params=%s", method, url, params)
            try:
                r = requests.request(
                    method,
                    url,
                    headers=self._headers(),
                    auth=self._auth,
                    params=params,
                    json=json_body,
                    timeout=self.TIMEOUT_SECONDS,
                )
            except requests.RequestException as e:
                if attempt < self.MAX_RETRIES - 1:
                    delay = self.RETRY_DELAY_SECONDS * (2**attempt)
                    logger.warning(
                        "Request failed (attempt %d/%d): %s. Retrying in %ss...",
                        attempt + 1,
                        self.MAX_RETRIES,
                        e,
                        delay,
                    )
                    time.sleep(delay)
                    continue
                raise GitHubError(f"GitHub API request failed {method} {url}: {e}") from e
            logger.debug("received response %s %s -> %s", method, url, r.status_code)
            return r
        raise GitHubError(f"GitHub API request failed {method} {url}")

    def _check(self, r: requests.Response, method: str, path: str) -> None:
        if r.status_code < 400:
            return
        try:
            payload = r.json()
        except ValueError:
            payload = {"message": r.text}
        message = payload.get("message", payload) if isinstance(payload, dict) else payload

        if r.status_code in (403, 429) and r.headers.get("X-RateLimit-Remaining") == "0":
            reset_raw = r.headers.get("X-RateLimit-Reset")
            reset_at = int(reset_raw) if reset_raw and reset_raw.isdigit() else None
            raise RateLimitError(f"GitHub API rate limit exceeded {method} {path}: {message}", reset_at=reset_at)
        if r.status_code == 401:
            raise GitHubError("Authentication failed. Check SHUB_USERNAME and SHUB_TOKEN.", status_code=401)
        raise GitHubError(f"GitHub API error {r.status_code} {method} {path}: {message}", status_code=r.status_code)

    def _json(self, r: requests.Response, method: str, path: str) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise GitHubError(
                f"GitHub API returned invalid JSON {r.status_code} {method} {path}", status_code=r.status_code
            ) from e

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        r = self._send(method, self._url(path), params=params, json_body=json_body)
        self._check(r, method, path)
        if r.status_code == 204 or not r.content:
            return None
        return self._json(r, method, path)

    def _paginate(self, path: str, *, params: dict[str, Any] | None = None, items_key: str | None = None) -> Iterator[Any]:
        """
        Yield items from every page of a list endpoint.

        The first request carries `params`; later requests use the `next` URL
        from the Link header as-is, since it already encodes the query.
        """
        url: str | None = self._url(path)
        query: dict[str, Any] | None = {**(params or {}), "per_page": self.PER_PAGE}
        while url:
            r = self._send("GET", url, params=query)
            self._check(r, "GET", path)
            body = self._json(r, "GET", path)
            items = body.get(items_key, []) if items_key else body
            yield from items
            url = r.links.get("next", {}).get("url")
            query = None

    # Actions

    def list_workflow_runs(self, owner: str, repo: str) -> Iterator[int]:
        for run in self._paginate(f"/repos/{owner}/{repo}/actions/runs", items_key="workflow_runs"):
            yield int(run["id"])

    def delete_workflow_run(self, owner: str, repo: str, run_id: int) -> None:
        self._request("DELETE", f"/repos/{owner}/{repo}/actions/runs/{run_id}")

    # Repositories

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        try:
            return self._request("GET", f"/repos/{owner}/{repo}")
        except GitHubError as e:
            if e.status_code == 404:
                raise GitHubError(f"Repository {owner}/{repo} does not exist.", status_code=404) from e
            raise

    def update_repository(self, owner: str, repo: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        return self._request("PATCH", f"/repos/{owner}/{repo}", json_body=fields)

    def get_latest_commit(self, owner: str, repo: str) -> dict[str, Any] | None:
        """Newest commit on the default branch, or None for an empty repository."""
        try:
            commits = self._request("GET", f"/repos/{owner}/{repo}/commits", params={"per_page": 1})
        except GitHubError as e:
            # GitHub answers 409 Conflict for a repository without commits.
            if e.status_code == 409:
                return None
            raise
        return commits[0] if commits else None

    def get_check_runs(self, owner: str, repo: str, ref: str) -> list[dict[str, Any]]:
        body = self._request(
            "GET", f"/repos/{owner}/{repo}/commits/{ref}/check-runs", params={"per_page": self.PER_PAGE}
        )
        return list((body or {}).get("check_runs", []))

    def list_owned_repositories(self) -> Iterator[dict[str, Any]]:
        return self._paginate("/user/repos", params={"type": "owner", "sort": "pushed"})

    # Activity

    def list_starred_repositories(self) -> Iterator[dict[str, Any]]:
        return self._paginate("/user/starred", params={"sort": "updated"})
