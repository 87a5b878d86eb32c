from __future__ import annotations

import base64
import json

import pytest

from conftest import BASE_URL, DummyResponse, issue_payload
from gitticket.credentials import read_credentials
from gitticket.errors import FailureKind
from gitticket.models import NormalizedIssue
from gitticket.operations import (
    USERNAME_PLACEHOLDER,
    build_token,
    create_branch_for,
    derive_username,
    list_open_issues,
    login,
)


def _issue(branch: str = "AB-1-Fix-the-login-bug-today") -> NormalizedIssue:
    return NormalizedIssue(
        key="AB-1",
        branch=branch,
        display_name="[AB-1] - Fix the login bug today please",
        link=f"{BASE_URL}/browse/AB-1",
        status="Open",
    )


def test_build_token_is_base64_of_email_and_secret():
    token = build_token("jane.doe@example.com", "s3cret")
    assert base64.b64decode(token).decode() == "jane.doe@example.com:s3cret"


@pytest.mark.parametrize(
    ("email", "expected"),
    [
        ("jane.doe@example.com", "jane.doe"),
        ("no-at-sign", "no-at-sign"),
        ("a@b@c", "a"),
    ],
)
def test_derive_username(email, expected):
    assert derive_username(email) == expected


def test_login_stores_token_and_username(credentials_path):
    assert login("jane@example.com", "api-token", path=credentials_path) is True

    creds = read_credentials(credentials_path)
    assert creds.username == "jane"
    assert creds.token == build_token("jane@example.com", "api-token")


def test_login_reports_storage_failure(tmp_path, capsys):
    target = tmp_path / "nope" / ".git-ticket"

    assert login("jane@example.com", "api-token", path=target) is False
    assert "issue storing your authentication" in capsys.readouterr().err


def test_list_open_issues_normalizes_and_filters_closed(make_client, logged_in):
    client, _ = make_client(
        [
            DummyResponse(
                200,
                {
                    "issues": [
                        issue_payload("AB-1", "Fix the login bug today please"),
                        issue_payload("AB-2", "Already done", "Closed"),
                        issue_payload("AB-3", "Review", "In Review"),
                    ]
                },
            )
        ]
    )

    result = list_open_issues(client)

    assert result.ok
    assert [i.key for i in result.items] == ["AB-1", "AB-3"]
    assert result.items[0] == _issue()


def test_closed_scenario_issue_is_excluded(make_client, logged_in):
    client, _ = make_client(
        [DummyResponse(200, {"issues": [issue_payload("AB-1", "Fix the login bug today please", "Closed")]})]
    )

    result = list_open_issues(client)

    assert result.ok
    assert result.items == []


def test_list_open_issues_passes_failure_through(make_client, logged_in):
    client, _ = make_client([DummyResponse(401, {"errorMessages": ["nope"]})])

    result = list_open_issues(client)

    assert not result.ok
    assert result.failure is FailureKind.NETWORK_UNAVAILABLE


def test_list_open_issues_without_login(make_client):
    client, session = make_client([])
    assert list_open_issues(client).failure is FailureKind.AUTHENTICATION_MISSING
    assert session.request_log == []


def test_create_branch_for_prefixes_username(logged_in):
    assert create_branch_for(_issue(), path=logged_in) == "jane/AB-1-Fix-the-login-bug-today"


def test_create_branch_for_without_username_uses_placeholder(credentials_path, capsys):
    credentials_path.write_text(json.dumps({"t": "abc"}), encoding="utf-8")

    branch = create_branch_for(_issue(), path=credentials_path)

    assert branch == f"{USERNAME_PLACEHOLDER}/AB-1-Fix-the-login-bug-today"
    assert branch.startswith("undefined/")
    assert "no username stored" in capsys.readouterr().err


def test_login_then_branch_end_to_end(credentials_path):
    login("sam@example.org", "tok", path=credentials_path)
    assert create_branch_for(_issue("AB-9-x"), path=credentials_path) == "sam/AB-9-x"
