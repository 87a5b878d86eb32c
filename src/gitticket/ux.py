"""Terminal output helpers for the git-ticket CLI - no external dependencies."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from typing import TextIO

from .errors import FailureKind
from .models import NormalizedIssue


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


FAILURE_MESSAGES = {
    FailureKind.AUTHENTICATION_MISSING: "Not logged in. Run `git-ticket login <email> <api_token>` first.",
    FailureKind.NETWORK_UNAVAILABLE: "Could not reach the issue tracker.",
    FailureKind.TIMED_OUT: "The request to the issue tracker timed out.",
    FailureKind.PARSE_ERROR: "The issue tracker sent a response git-ticket could not read.",
    FailureKind.CANCELLED: "Request cancelled.",
}


def _supports_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    return os.environ.get("TERM") != "dumb"


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if the stream is a color-capable terminal."""
    if not _supports_color(stream or sys.stdout):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def print_success(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(colorize("✓", Colors.GREEN, bold=True, stream=stream) + " " + message, file=stream)


def print_error(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stderr
    print(colorize("✗", Colors.RED, bold=True, stream=stream) + " " + message, file=stream)


def print_failure(failure: FailureKind, stream: TextIO | None = None) -> None:
    print_error(FAILURE_MESSAGES[failure], stream=stream)


def format_issue_line(issue: NormalizedIssue, stream: TextIO | None = None) -> str:
    link = colorize(issue.link, Colors.CYAN, stream=stream)
    return f"{link} : {issue.display_name}"


def print_issues(issues: Iterable[NormalizedIssue], stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    for issue in issues:
        print(format_issue_line(issue, stream=stream), file=stream)


def print_checkout(branch_name: str, stream: TextIO | None = None) -> None:
    """Print the checkout command framed by blank lines so it is easy to copy."""
    stream = stream or sys.stdout
    command = colorize(f"git checkout -b {branch_name}", Colors.BOLD, stream=stream)
    print(f"\n\n{command}\n\n", file=stream)


__all__ = [
    "Colors",
    "FAILURE_MESSAGES",
    "colorize",
    "format_issue_line",
    "print_checkout",
    "print_error",
    "print_failure",
    "print_issues",
    "print_success",
]
