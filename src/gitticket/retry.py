"""Centralized retry / backoff helpers for tracker requests.

``run_with_retries`` wraps a thunk that performs one HTTP request and returns a
``requests.Response``. Connection failures and a small set of transient HTTP
statuses (429 and gateway errors) are retried with exponential backoff and
jitter; everything else is returned or raised unchanged. Timeouts are never
retried, so a hung tracker costs exactly one timeout.

Environment overrides:
  GIT_TICKET_RETRY_ATTEMPTS (total attempts, default 2)
  GIT_TICKET_RETRY_BASE (seconds base, default 0.5)
  GIT_TICKET_RETRY_MAX_SLEEP (upper bound for a single sleep)

An optional ``threading.Event`` acts as a cancellation token: it is checked
before every attempt and interrupts backoff sleeps.
"""

from __future__ import annotations

import os
import random
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import requests

from .errors import RequestCancelled, classify_error
from .logging import get_logger

TRANSIENT_STATUS = frozenset({429, 502, 503, 504})

_JITTER = random.SystemRandom()


def _env_attempts() -> int:
    return int(os.environ.get("GIT_TICKET_RETRY_ATTEMPTS", "2"))


def _env_base() -> float:
    return float(os.environ.get("GIT_TICKET_RETRY_BASE", "0.5"))


@dataclass
class RetryConfig:
    attempts: int = field(default_factory=_env_attempts)
    base_sleep: float = field(default_factory=_env_base)


def _extract_explicit_backoff(response: requests.Response | None) -> float | None:
    """Return the ``Retry-After`` delay in seconds when it is a positive number."""
    if response is None:
        return None
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        val = float(value)
    except ValueError:
        # HTTP-date form is not worth parsing for a CLI
        return None
    return val if val > 0 else None


def is_transient(outcome: requests.Response | BaseException) -> bool:
    if isinstance(outcome, BaseException):
        return classify_error(outcome).transient
    return outcome.status_code in TRANSIENT_STATUS


def _compute_sleep(attempt: int, cfg: RetryConfig, response: requests.Response | None) -> float:
    explicit = _extract_explicit_backoff(response)
    backoff = cfg.base_sleep * (2 ** (attempt - 1)) + _JITTER.uniform(0, 0.25 * cfg.base_sleep)
    sleep_for: float = explicit if explicit is not None else backoff
    max_cap_env = os.environ.get("GIT_TICKET_RETRY_MAX_SLEEP")
    if max_cap_env:
        try:
            cap = float(max_cap_env)
        except ValueError:
            return sleep_for
        if cap >= 0:
            sleep_for = min(sleep_for, cap)
    return sleep_for


def _sleep(seconds: float, cancel: threading.Event | None) -> None:
    if cancel is None:
        time.sleep(seconds)
        return
    if cancel.wait(seconds):
        raise RequestCancelled("request cancelled during retry backoff")


def run_with_retries(
    fn: Callable[[], requests.Response],
    *,
    cfg: RetryConfig | None = None,
    cancel: threading.Event | None = None,
) -> requests.Response:
    cfg = cfg or RetryConfig()
    attempts = max(1, cfg.attempts)
    logger = get_logger()
    for attempt in range(1, attempts + 1):
        if cancel is not None and cancel.is_set():
            raise RequestCancelled("request cancelled before it was sent")
        last = attempt >= attempts
        try:
            response = fn()
        except requests.RequestException as exc:
            if last or not is_transient(exc):
                raise
            sleep_for = _compute_sleep(attempt, cfg, None)
            logger.debug(
                f"[retry] connection error, attempt {attempt}/{attempts}, sleeping {sleep_for:.2f}s",
                error=exc.__class__.__name__,
            )
            _sleep(sleep_for, cancel)
            continue
        if last or not is_transient(response):
            return response
        sleep_for = _compute_sleep(attempt, cfg, response)
        logger.debug(
            f"[retry] HTTP {response.status_code}, attempt {attempt}/{attempts}, sleeping {sleep_for:.2f}s",
            status=response.status_code,
        )
        _sleep(sleep_for, cancel)
    raise RuntimeError("retry logic exited unexpectedly")  # pragma: no cover


__all__ = ["RetryConfig", "TRANSIENT_STATUS", "is_transient", "run_with_retries"]
