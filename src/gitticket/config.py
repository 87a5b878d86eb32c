from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml
from dotenv import load_dotenv

PROGRAM_NAME = "git-ticket"
BASE_URL_ENV = "JIRA_BASE_URL"
API_PREFIX = "/rest/api/3"
DEFAULT_TIMEOUT = 10.0
DEFAULT_ISSUE_QUERY = "/search?jql=assignee=currentuser()"
DEFAULT_RETRY_ATTEMPTS = 2
DEFAULT_RETRY_BASE = 0.5

BASE_URL_HELP = (
    "Please export your Jira URI from your .bashrc or .zshrc. \n\n"
    ' eg. export JIRA_BASE_URL="https://<company-name>.atlassian.net"'
)

_TRUE = {"1", "true", "yes", "on"}


class ConfigError(RuntimeError):
    pass


@dataclass
class TicketConfig:
    base_url: str
    credentials_path: Path
    timeout: float
    issue_query: str
    retry_attempts: int
    retry_base_sleep: float
    # Logging configuration
    logging_json_enabled: bool
    logging_level: str
    source_file: Path | None = None

    @property
    def api_url(self) -> str:
        return f"{self.base_url}{API_PREFIX}"


def default_credentials_path() -> Path:
    return Path.home() / f".{PROGRAM_NAME}"


def default_settings_path() -> Path:
    return Path.home() / f".{PROGRAM_NAME}.yaml"


def _resolve_env_var(value: Any, environ: Mapping[str, str]) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith("$"):
        return environ.get(value[1:], value)
    return value


def _load_settings_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid settings file {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return cast(dict[str, Any], raw)


def _as_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def validate_base_url(base_url: str | None) -> str:
    """Return the normalized base URL or raise ``ConfigError`` with usage help."""
    if not base_url or not base_url.startswith("https://"):
        raise ConfigError(BASE_URL_HELP)
    return base_url.rstrip("/")


def load_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    load_env_file: bool = True,
) -> TicketConfig:
    """Assemble settings from the YAML file, a local ``.env`` and the environment.

    Environment variables win over the settings file. The only required value
    is the tracker base URL, which must use https.
    """
    if load_env_file:
        env_file = Path.cwd() / ".env"
        if env_file.exists():
            load_dotenv(env_file)
    env = environ if environ is not None else os.environ

    settings_path = Path(path) if path is not None else default_settings_path()
    if path is not None and not settings_path.exists():
        raise ConfigError(f"Settings file not found: {settings_path}")
    raw = _load_settings_file(settings_path)
    jira = cast(dict[str, Any], raw.get("jira", {}) or {})
    logging_config = cast(dict[str, Any], raw.get("logging", {}) or {})
    retry_config = cast(dict[str, Any], raw.get("retry", {}) or {})

    base_url = env.get(BASE_URL_ENV) or _resolve_env_var(jira.get("base_url"), env)
    timeout = _as_float(
        env.get("GIT_TICKET_TIMEOUT") or jira.get("timeout", DEFAULT_TIMEOUT), "timeout"
    )
    if timeout <= 0:
        raise ConfigError(f"timeout must be positive, got {timeout}")
    retry_base_sleep = _as_float(
        env.get("GIT_TICKET_RETRY_BASE") or retry_config.get("base_sleep", DEFAULT_RETRY_BASE),
        "retry base sleep",
    )
    if retry_base_sleep < 0:
        raise ConfigError(f"retry base sleep must not be negative, got {retry_base_sleep}")
    json_env = env.get("GIT_TICKET_JSON_LOGS")

    return TicketConfig(
        base_url=validate_base_url(base_url if isinstance(base_url, str) else None),
        credentials_path=default_credentials_path(),
        timeout=timeout,
        issue_query=str(jira.get("query", DEFAULT_ISSUE_QUERY)),
        retry_attempts=_as_int(
            env.get("GIT_TICKET_RETRY_ATTEMPTS")
            or retry_config.get("attempts", DEFAULT_RETRY_ATTEMPTS),
            "retry attempts",
        ),
        retry_base_sleep=retry_base_sleep,
        logging_json_enabled=(
            json_env.lower() in _TRUE
            if json_env
            else bool(logging_config.get("json_enabled", False))
        ),
        logging_level=str(env.get("GIT_TICKET_LOG_LEVEL") or logging_config.get("level", "WARNING")),
        source_file=settings_path if settings_path.exists() else None,
    )


__all__ = [
    "API_PREFIX",
    "BASE_URL_ENV",
    "ConfigError",
    "DEFAULT_ISSUE_QUERY",
    "DEFAULT_TIMEOUT",
    "PROGRAM_NAME",
    "TicketConfig",
    "default_credentials_path",
    "default_settings_path",
    "load_config",
    "validate_base_url",
]
