"""git-ticket - turn your open Jira issues into git branch names.

High-level public API:

from gitticket import JiraRestClient, load_config, list_open_issues, create_branch_for

cfg = load_config()
client = JiraRestClient.from_config(cfg)
result = list_open_issues(client)
if result.ok and result.items:
    print(create_branch_for(result.items[0]))

The ``git-ticket`` console script delegates to this library.
"""

from __future__ import annotations

# Version constant (sync manually with pyproject)
__version__ = "0.1.0"

from .config import ConfigError, TicketConfig, load_config  # noqa: E402
from .credentials import Credentials, read_credentials, write_credentials  # noqa: E402
from .errors import FailureKind  # noqa: E402
from .jira_rest import JiraRestClient  # noqa: E402
from .models import FetchResult, NormalizedIssue, RawIssue  # noqa: E402
from .normalize import normalize  # noqa: E402
from .operations import create_branch_for, list_open_issues, login  # noqa: E402

__all__ = [
    "ConfigError",
    "Credentials",
    "FailureKind",
    "FetchResult",
    "JiraRestClient",
    "NormalizedIssue",
    "RawIssue",
    "TicketConfig",
    "create_branch_for",
    "list_open_issues",
    "load_config",
    "login",
    "normalize",
    "read_credentials",
    "write_credentials",
    "__version__",
]
