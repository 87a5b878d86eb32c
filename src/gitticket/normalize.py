"""Turn raw tracker issues into display-ready, branch-ready records.

Everything here is pure: no I/O, no logging, same input same output.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import NormalizedIssue, RawIssue

CLOSED_STATUS = "Closed"
BRANCH_WORDS = 5


def branch_slug(key: str, summary: str, words: int = BRANCH_WORDS) -> str:
    """Key followed by the first ``words`` space-separated summary tokens.

    Tokens keep their original text. Splitting is on single spaces, so runs of
    spaces yield empty tokens (``"a  b"`` -> ``KEY-a--b``).
    """
    return "-".join([key, *summary.split(" ")[:words]])


def display_name(key: str, summary: str) -> str:
    return f"[{key}] - {summary}"


def browse_link(base_url: str, key: str) -> str:
    return f"{base_url}/browse/{key}"


def is_open(issue: RawIssue) -> bool:
    return issue.status != CLOSED_STATUS


def normalize(raw_issues: Iterable[RawIssue], base_url: str) -> list[NormalizedIssue]:
    return [
        NormalizedIssue(
            key=issue.key,
            branch=branch_slug(issue.key, issue.summary),
            display_name=display_name(issue.key, issue.summary),
            link=browse_link(base_url, issue.key),
            status=issue.status,
        )
        for issue in raw_issues
        if is_open(issue)
    ]


__all__ = ["CLOSED_STATUS", "branch_slug", "browse_link", "display_name", "is_open", "normalize"]
