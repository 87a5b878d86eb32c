"""Pytest configuration for git-ticket tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install, and isolates every test from the real
home directory, environment and tracker.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Subprocess-based CLI tests need the same import path
py_path = os.environ.get("PYTHONPATH", "")
parts = [p for p in py_path.split(os.pathsep) if p]
if str(SRC) not in parts:
    parts.insert(0, str(SRC))
    os.environ["PYTHONPATH"] = os.pathsep.join(parts)

BASE_URL = "https://acme.atlassian.net"

_ISOLATED_VARS = (
    "JIRA_BASE_URL",
    "GIT_TICKET_TIMEOUT",
    "GIT_TICKET_LOG_LEVEL",
    "GIT_TICKET_JSON_LOGS",
    "GIT_TICKET_RETRY_ATTEMPTS",
    "GIT_TICKET_RETRY_BASE",
    "GIT_TICKET_RETRY_MAX_SLEEP",
    "NO_COLOR",
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in _ISOLATED_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    from gitticket import logging as gt_logging

    monkeypatch.setattr(gt_logging, "_GLOBAL", None)
    return home


@dataclass
class DummyResponse:
    status_code: int
    payload: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        if isinstance(self.payload, str):
            return json.loads(self.payload)
        return self.payload

    @property
    def text(self) -> str:
        if isinstance(self.payload, (dict, list)):
            return json.dumps(self.payload)
        if self.payload is None:
            return ""
        return str(self.payload)


class DummySession:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses: list[DummyResponse | BaseException]):
        self._responses = list(responses)
        self.request_log: list[tuple[str, str, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        timeout: float | None = None,
        **kwargs: Any,
    ) -> DummyResponse:
        self.request_log.append((method, url, {"headers": headers, "timeout": timeout, **kwargs}))
        if not self._responses:
            raise AssertionError("No response queued for request")
        nxt = self._responses.pop(0)
        if isinstance(nxt, BaseException):
            raise nxt
        return nxt


def issue_payload(key: str, summary: str, status: str = "Open") -> dict[str, Any]:
    return {"key": key, "fields": {"summary": summary, "status": {"name": status}}}


@pytest.fixture
def credentials_path(isolated_home: Path) -> Path:
    return isolated_home / ".git-ticket"


@pytest.fixture
def logged_in(credentials_path: Path) -> Path:
    credentials_path.write_text(json.dumps({"t": "dG9rZW4=", "u": "jane"}), encoding="utf-8")
    return credentials_path


@pytest.fixture
def make_client(credentials_path: Path) -> Callable[..., Any]:
    from gitticket.jira_rest import JiraRestClient
    from gitticket.retry import RetryConfig

    def _make(
        responses: list[DummyResponse | BaseException], *, attempts: int = 1
    ) -> tuple[JiraRestClient, DummySession]:
        session = DummySession(responses)
        client = JiraRestClient(
            base_url=BASE_URL,
            credentials_path=credentials_path,
            retry=RetryConfig(attempts=attempts, base_sleep=0.0),
            session=session,  # type: ignore[arg-type]
        )
        return client, session

    return _make
