"""git-ticket CLI.

Subcommands:
  login   -> store Jira credentials in ~/.git-ticket
  ls      -> list open issues assigned to you
  branch  -> pick an issue and print a ``git checkout -b`` command

Fetch failures are reported and the command still exits 0; only bad settings
(missing or non-https JIRA_BASE_URL) and an unknown ``--key`` exit non-zero.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from gitticket import __version__
from gitticket.config import PROGRAM_NAME, ConfigError, TicketConfig, load_config
from gitticket.jira_rest import JiraRestClient
from gitticket.logging import configure_logging
from gitticket.operations import create_branch_for, list_open_issues, login
from gitticket.prompt import find_issue, select_issue
from gitticket.ux import print_checkout, print_error, print_failure, print_issues, print_success

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_ABORTED = 130

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog=PROGRAM_NAME, description="Branch names from your open Jira issues"
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", help="Settings file (default: ~/.git-ticket.yaml)")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", action="store_true", help="Only log errors")
    verbosity.add_argument("--verbose", action="store_true", help="Log requests and operations")
    p.add_argument("--json-logs", action="store_true", help="Emit log records as JSON lines")
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pl = sub.add_parser(
        "login",
        help="Authorize the script to read all JIRA issues assigned to your account.",
    )
    pl.add_argument("email")
    pl.add_argument("api_token")

    ls = sub.add_parser("ls", help="List all your active JIRA issues")
    ls.add_argument("--json", action="store_true", help="Print issues as a JSON array")

    pb = sub.add_parser("branch", help="Select a JIRA issue to create a branch name from.")
    pb.add_argument("--key", help="Issue key to use instead of prompting (e.g. PROJ-123)")
    return p


def _build_client(cfg: TicketConfig) -> JiraRestClient:
    return JiraRestClient.from_config(cfg)


def _configure_logging(cfg: TicketConfig, args: argparse.Namespace) -> None:
    level = cfg.logging_level
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "ERROR"
    configure_logging(json_logging=args.json_logs or cfg.logging_json_enabled, level=level)


def _cmd_login(cfg: TicketConfig, args: argparse.Namespace) -> int:
    if login(args.email, args.api_token, path=cfg.credentials_path):
        print_success(f"Credentials stored in {cfg.credentials_path}")
    else:
        print_error("Oops, there was an issue storing your authentication.")
    return EXIT_OK


def _cmd_ls(cfg: TicketConfig, args: argparse.Namespace) -> int:
    result = list_open_issues(_build_client(cfg), query=cfg.issue_query)
    if not result.ok:
        print_failure(result.failure)  # type: ignore[arg-type]
        return EXIT_OK
    if args.json:
        sys.stdout.write(json.dumps([i.to_dict() for i in result.items], indent=2) + "\n")
        return EXIT_OK
    print_issues(result.items)
    return EXIT_OK


def _cmd_branch(cfg: TicketConfig, args: argparse.Namespace) -> int:
    result = list_open_issues(_build_client(cfg), query=cfg.issue_query)
    if not result.ok:
        print_failure(result.failure)  # type: ignore[arg-type]
        return EXIT_OK
    if not result.items:
        print_error("No open issues are assigned to you.")
        return EXIT_OK
    if args.key:
        issue = find_issue(result.items, args.key)
        if issue is None:
            print_error(f"No open issue with key {args.key}")
            return EXIT_ERROR
    else:
        try:
            issue = select_issue(result.items)
        except (EOFError, KeyboardInterrupt):
            print_error("Selection aborted.")
            return EXIT_ABORTED
    print_checkout(create_branch_for(issue, path=cfg.credentials_path))
    return EXIT_OK


def _build_handlers(args: argparse.Namespace, cfg: TicketConfig) -> dict[str, Any]:
    return {
        "login": lambda: _cmd_login(cfg, args),
        "ls": lambda: _cmd_ls(cfg, args),
        "branch": lambda: _cmd_branch(cfg, args),
    }


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_ERROR
    _configure_logging(cfg, args)
    handler = _build_handlers(args, cfg).get(args.cmd)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return EXIT_ERROR
    return int(handler())


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
