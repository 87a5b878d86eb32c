"""Use cases exposed to the CLI: log in, list open issues, name a branch."""

from __future__ import annotations

import base64
import threading
from pathlib import Path

from .config import DEFAULT_ISSUE_QUERY
from .credentials import read_credentials, write_credentials
from .errors import CredentialWriteError
from .jira_rest import JiraRestClient
from .logging import get_logger
from .models import FetchResult, NormalizedIssue
from .normalize import normalize

USERNAME_PLACEHOLDER = "undefined"


def build_token(email: str, api_token: str) -> str:
    return base64.b64encode(f"{email}:{api_token}".encode()).decode("ascii")


def derive_username(email: str) -> str:
    return email.split("@", 1)[0]


def login(email: str, api_token: str, *, path: Path | None = None) -> bool:
    """Store credentials for later requests. Returns ``False`` if they could not be saved."""
    try:
        write_credentials(build_token(email, api_token), derive_username(email), path)
    except CredentialWriteError as exc:
        get_logger().log_error("Oops, there was an issue storing your authentication.", error=str(exc))
        return False
    return True


def list_open_issues(
    client: JiraRestClient,
    *,
    query: str = DEFAULT_ISSUE_QUERY,
    cancel: threading.Event | None = None,
) -> FetchResult[NormalizedIssue]:
    fetched = client.fetch_issues(query, cancel=cancel)
    if not fetched.ok:
        return FetchResult.failed(fetched.failure)  # type: ignore[arg-type]
    return FetchResult.success(normalize(fetched.items, client.base_url))


def create_branch_for(issue: NormalizedIssue, *, path: Path | None = None) -> str:
    username = read_credentials(path).username
    if not username:
        # Never logged in: the placeholder prefix stays in the branch name
        get_logger().warning(
            "no username stored; run git-ticket login to get a personal branch prefix",
            key=issue.key,
        )
        username = USERNAME_PLACEHOLDER
    return f"{username}/{issue.branch}"


__all__ = [
    "USERNAME_PLACEHOLDER",
    "build_token",
    "create_branch_for",
    "derive_username",
    "list_open_issues",
    "login",
]
