from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest
from requests.structures import CaseInsensitiveDict

import shub.github_client


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        *,
        next_url: str | None = None,
        headers: dict[str, str] | None = None,
        raw: str | None = None,
    ) -> None:
        self.status_code = status_code
        self._body = body
        self.headers = CaseInsensitiveDict(headers or {})
        self.links = {"next": {"url": next_url, "rel": "next"}} if next_url else {}
        self.text = raw if raw is not None else ("" if body is None else json.dumps(body))
        self.content = self.text.encode("utf-8")

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


@dataclass
class Call:
    method: str
    url: str
    params: dict[str, Any] | None
    json: Any
    auth: Any
    headers: dict[str, str]


@dataclass
class FakeGitHub:
    """Serves canned responses keyed by (METHOD, url) and records every call."""

    routes: dict[tuple[str, str], list[FakeResponse]] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)

    def add(self, method: str, url: str, *responses: FakeResponse) -> None:
        self.routes.setdefault((method, url), []).extend(responses)

    def __call__(self, method, url, *, headers=None, auth=None, params=None, json=None, timeout=None):
        self.calls.append(Call(method, url, params, json, auth, dict(headers or {})))
        queue = self.routes.get((method, url))
        if not queue:
            return FakeResponse(404, {"message": "Not Found"})
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls_to(self, method: str) -> list[Call]:
        return [c for c in self.calls if c.method == method]


API = "https://api.github.com"


@pytest.fixture
def fake_github(monkeypatch: pytest.MonkeyPatch) -> FakeGitHub:
    fake = FakeGitHub()
    monkeypatch.setattr(shub.github_client.requests, "request", fake)
    return fake


@pytest.fixture
def shub_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SHUB_USERNAME", "kafji")
    monkeypatch.setenv("SHUB_TOKEN", "t0k3n")
    monkeypatch.setenv("SHUB_CONFIG", "")
    monkeypatch.delenv("SHUB_API_URL", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
