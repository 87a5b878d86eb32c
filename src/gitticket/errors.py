"""Error taxonomy & redaction.

Every failure git-ticket can hit while talking to the tracker collapses into a
``FailureKind``. Exceptions never escape the resource client; they are
classified here, redacted, logged once and turned into a failed result.

Public API:
- FailureKind: named outcomes of a failed fetch
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum

import requests

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(Basic\s+)[A-Za-z0-9+/=]{8,}"),  # Authorization header values
    re.compile(r"ATATT[A-Za-z0-9_\-=]{16,}"),  # Atlassian API tokens
]

_REDACTION_PLACEHOLDER = "<redacted>"


class FailureKind(str, Enum):
    """Why a fetch produced no data."""

    AUTHENTICATION_MISSING = "authentication_missing"
    NETWORK_UNAVAILABLE = "network_unavailable"
    TIMED_OUT = "timed_out"
    PARSE_ERROR = "parse_error"
    CANCELLED = "cancelled"


class CredentialWriteError(OSError):
    """Raised when the credential file cannot be written."""


class RequestCancelled(RuntimeError):
    """Raised when a cancellation token is set before a request completes."""


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False

    @property
    def failure(self) -> FailureKind:
        return _CATEGORY_FAILURES.get(self.category, FailureKind.NETWORK_UNAVAILABLE)


_CATEGORY_FAILURES = {
    "timeout": FailureKind.TIMED_OUT,
    "network": FailureKind.NETWORK_UNAVAILABLE,
    "parse": FailureKind.PARSE_ERROR,
    "cancelled": FailureKind.CANCELLED,
}


def redact(text: str) -> str:
    """Replace credential material in ``text`` with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception raised while fetching.

    - RequestCancelled -> 'cancelled'
    - requests timeouts -> 'timeout' (not retried, reported as timed out)
    - JSON decode errors -> 'parse' (requests' own subclass included)
    - connection failures -> 'network', transient
    - other requests errors -> 'network'
    - value / type / recursion errors -> 'parse' (malformed or too deeply nested data)
    - Fallback -> 'generic', reported as network unavailable
    """
    msg = redact(str(exc)) if exc else ""
    name = exc.__class__.__name__

    if isinstance(exc, RequestCancelled):
        return ErrorInfo("cancelled", msg or "request cancelled", name)
    if isinstance(exc, requests.Timeout):
        return ErrorInfo("timeout", msg or "request timed out", name)
    if isinstance(exc, (json.JSONDecodeError, requests.exceptions.JSONDecodeError)):
        return ErrorInfo("parse", msg, name)
    if isinstance(exc, requests.ConnectionError):
        return ErrorInfo("network", msg, name, transient=True)
    if isinstance(exc, requests.RequestException):
        return ErrorInfo("network", msg, name)
    if isinstance(exc, (ValueError, TypeError, RecursionError)):
        return ErrorInfo("parse", msg, name)
    return ErrorInfo("generic", msg, name)


__all__ = [
    "CredentialWriteError",
    "ErrorInfo",
    "FailureKind",
    "RequestCancelled",
    "classify_error",
    "redact",
]
