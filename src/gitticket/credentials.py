"""Credential store backed by a single JSON file in the user's home directory.

The file holds ``{"t": <token>, "u": <username>}``. Reading is forgiving on
purpose: a missing, unreadable or corrupted file is the same as never having
logged in. Writing reports failure as ``CredentialWriteError``.
"""

from __future__ import annotations

import json
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import default_credentials_path
from .errors import CredentialWriteError
from .logging import get_logger

_FILE_MODE = stat.S_IRUSR | stat.S_IWUSR


@dataclass(frozen=True)
class Credentials:
    token: str | None = None
    username: str | None = None

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_mapping(cls, raw: Any) -> Credentials:
        if not isinstance(raw, dict):
            return cls()
        token = raw.get("t")
        username = raw.get("u")
        return cls(
            token=token if isinstance(token, str) else None,
            username=username if isinstance(username, str) else None,
        )


def write_credentials(token: str, username: str, path: Path | None = None) -> Path:
    """Overwrite the credential file and restrict it to the current user."""
    target = path or default_credentials_path()
    content = json.dumps({"t": token, "u": username})
    try:
        # New files are created private; chmod covers a pre-existing file
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.chmod(target, _FILE_MODE)
    except OSError as exc:
        raise CredentialWriteError(f"could not write credentials to {target}: {exc}") from exc
    get_logger().log_operation("credentials_written", path=str(target))
    return target


def read_credentials(path: Path | None = None) -> Credentials:
    target = path or default_credentials_path()
    try:
        content = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        get_logger().debug(f"credentials unavailable at {target}", error=str(exc))
        return Credentials()
    try:
        raw = json.loads(content)
    except (ValueError, RecursionError) as exc:
        get_logger().debug(f"credentials file {target} is not valid JSON", error=str(exc))
        return Credentials()
    return Credentials.from_mapping(raw)


__all__ = ["Credentials", "read_credentials", "write_credentials"]
