"""Interactive issue selection for ``git-ticket branch``."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from .models import NormalizedIssue
from .ux import Colors, colorize

SELECT_MESSAGE = "Select the issue you want to create a branch for"


def find_issue(issues: Sequence[NormalizedIssue], key: str) -> NormalizedIssue | None:
    wanted = key.strip().upper()
    for issue in issues:
        if issue.key.upper() == wanted:
            return issue
    return None


def select_issue(
    issues: Sequence[NormalizedIssue],
    *,
    input_fn: Callable[[str], str] | None = None,
    stream: TextIO | None = None,
    message: str = SELECT_MESSAGE,
) -> NormalizedIssue:
    """Show a numbered list and keep asking until a valid choice is entered.

    ``EOFError`` and ``KeyboardInterrupt`` from ``input_fn`` propagate so the
    caller can abort cleanly.
    """
    if not issues:
        raise ValueError("no issues to select from")
    read = input_fn or input
    stream = stream or sys.stdout
    print(colorize(f"? {message}", Colors.CYAN, bold=True, stream=stream), file=stream)
    width = len(str(len(issues)))
    for index, issue in enumerate(issues, start=1):
        print(f"  {str(index).rjust(width)}) {issue.display_name}", file=stream)
    while True:
        answer = read(f"Choice [1-{len(issues)}]: ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(issues):
            return issues[int(answer) - 1]
        match = find_issue(issues, answer) if answer else None
        if match is not None:
            return match
        print(colorize(f"Invalid choice: {answer!r}", Colors.YELLOW, stream=stream), file=stream)


__all__ = ["SELECT_MESSAGE", "find_issue", "select_issue"]
