from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests

from .config import (
    API_PREFIX,
    DEFAULT_TIMEOUT,
    PROGRAM_NAME,
    TicketConfig,
    default_credentials_path,
)
from .credentials import read_credentials
from .errors import FailureKind, RequestCancelled, classify_error, redact
from .logging import get_logger
from .models import FetchResult, RawIssue
from .retry import RetryConfig, run_with_retries

USER_AGENT = "git-ticket-rest/0.1.0"
_BODY_EXCERPT = 200


def _usable_token(token: str | None) -> bool:
    """HTTP header values must be latin-1; anything else was not written by login."""
    if not token:
        return False
    try:
        token.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return True


@dataclass
class JiraRestClient:
    """Read-only Jira REST client that reports failures instead of raising."""

    base_url: str
    credentials_path: Path = field(default_factory=default_credentials_path)
    timeout: float = DEFAULT_TIMEOUT
    retry: RetryConfig | None = None
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Accept", "application/json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    @classmethod
    def from_config(cls, cfg: TicketConfig, *, session: requests.Session | None = None) -> JiraRestClient:
        return cls(
            base_url=cfg.base_url,
            credentials_path=cfg.credentials_path,
            timeout=cfg.timeout,
            retry=RetryConfig(attempts=cfg.retry_attempts, base_sleep=cfg.retry_base_sleep),
            session=session,
        )

    @property
    def api_url(self) -> str:
        return f"{self.base_url}{API_PREFIX}"

    def _fail(self, failure: FailureKind, message: str, **kw: Any) -> FetchResult[RawIssue]:
        get_logger().log_error(message, failure=failure.value, **kw)
        return FetchResult.failed(failure)

    def get_json(
        self, resource: str, *, cancel: threading.Event | None = None
    ) -> tuple[Any, FailureKind | None]:
        """GET ``<api>/<resource>`` with stored credentials and decode the JSON body.

        Returns ``(data, None)`` or ``(None, failure)``; the failure has already
        been logged.
        """
        creds = read_credentials(self.credentials_path)
        if not _usable_token(creds.token):
            get_logger().error(
                f"There was an issue with your authentication, please run {PROGRAM_NAME} login.",
                failure=FailureKind.AUTHENTICATION_MISSING.value,
            )
            return None, FailureKind.AUTHENTICATION_MISSING

        url = f"{self.api_url}{resource}"
        headers = {**self._session.headers, "Authorization": f"Basic {creds.token}"}

        def _run() -> requests.Response:
            return self._session.request("GET", url, headers=headers, timeout=self.timeout)

        try:
            response = run_with_retries(_run, cfg=self.retry, cancel=cancel)
        except (requests.RequestException, RequestCancelled) as exc:
            info = classify_error(exc)
            if info.failure is FailureKind.TIMED_OUT:
                message = f"request timed out after {self.timeout:g}s"
            else:
                message = "request to the tracker failed"
            self._fail(info.failure, message, error=info.message, url=url, category=info.category)
            return None, info.failure

        get_logger().log_request("GET", url, status=response.status_code)
        if not 200 <= response.status_code < 300:
            self._fail(
                FailureKind.NETWORK_UNAVAILABLE,
                f"tracker responded with HTTP {response.status_code}",
                url=url,
                status=response.status_code,
                body=redact((response.text or "")[:_BODY_EXCERPT]),
            )
            return None, FailureKind.NETWORK_UNAVAILABLE

        try:
            data = response.json()
        except (ValueError, RecursionError) as exc:
            info = classify_error(exc)
            self._fail(
                FailureKind.PARSE_ERROR, "tracker response is not valid JSON", error=info.message, url=url
            )
            return None, FailureKind.PARSE_ERROR
        if data is None:
            self._fail(FailureKind.PARSE_ERROR, "tracker response is empty", url=url)
            return None, FailureKind.PARSE_ERROR
        return data, None

    def fetch_issues(
        self, query: str, *, cancel: threading.Event | None = None
    ) -> FetchResult[RawIssue]:
        """Run a search resource path (e.g. ``/search?jql=...``) and parse its issues."""
        data, failure = self.get_json(query, cancel=cancel)
        if failure is not None:
            return FetchResult.failed(failure)
        if not isinstance(data, dict):
            return self._fail(FailureKind.PARSE_ERROR, "unexpected search response shape", query=query)
        entries = data.get("issues")
        if entries is None:
            return FetchResult.success([])
        if not isinstance(entries, list):
            return self._fail(FailureKind.PARSE_ERROR, "search response 'issues' is not a list", query=query)
        try:
            issues = [RawIssue.from_payload(entry) for entry in entries]
        except ValueError as exc:
            return self._fail(FailureKind.PARSE_ERROR, "malformed issue in search response", error=str(exc))
        get_logger().log_operation("issues_fetched", count=len(issues))
        return FetchResult.success(issues)


__all__ = ["JiraRestClient", "USER_AGENT"]
