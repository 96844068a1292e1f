"""Tests for exceptions."""

import pytest

from gitlab_mr_mcp.exceptions import (
    ErrorKind,
    GitLabApiError,
    GitLabAuthError,
    GitLabConfigError,
    GitLabNotFoundError,
    GitLabToolError,
    GitLabValidationError,
    error_for_status,
)


def test_error_kind_codes():
    assert ErrorKind.INVALID_PARAMS.code == -32602
    assert ErrorKind.INVALID_REQUEST.code == -32600
    assert ErrorKind.INTERNAL.code == -32603


def test_tool_error_constructors():
    assert GitLabToolError.invalid_params("x").kind is ErrorKind.INVALID_PARAMS
    assert GitLabToolError.invalid_request("x").kind is ErrorKind.INVALID_REQUEST
    assert GitLabToolError.internal("x").kind is ErrorKind.INTERNAL


def test_to_dict_omits_missing_detail():
    e = GitLabToolError.internal("boom")
    assert e.to_dict() == {"error": "internal", "code": -32603, "message": "boom"}


def test_to_dict_keeps_detail():
    e = GitLabToolError.invalid_params("bad", {"field": "x"})
    assert e.to_dict()["detail"] == {"field": "x"}


def test_api_error_carries_status():
    e = GitLabApiError(502, "Bad Gateway")
    assert e.status_code == 502
    assert e.kind is ErrorKind.INTERNAL
    assert e.to_dict()["status_code"] == 502
    assert str(e) == "GitLab request failed"


def test_auth_error():
    e = GitLabAuthError(403)
    assert e.kind is ErrorKind.INVALID_REQUEST
    assert e.message == "GitLab authentication failed"


def test_not_found_error():
    e = GitLabNotFoundError({"message": "404 Not found"})
    assert e.status_code == 404
    assert e.kind is ErrorKind.INVALID_PARAMS
    assert e.message == "GitLab resource not found"


def test_config_error_is_value_error():
    assert issubclass(GitLabConfigError, ValueError)


@pytest.mark.parametrize(
    ("status", "kind", "error_type"),
    [
        (404, ErrorKind.INVALID_PARAMS, GitLabNotFoundError),
        (401, ErrorKind.INVALID_REQUEST, GitLabAuthError),
        (403, ErrorKind.INVALID_REQUEST, GitLabAuthError),
        (400, ErrorKind.INVALID_PARAMS, GitLabValidationError),
        (422, ErrorKind.INVALID_PARAMS, GitLabValidationError),
        (500, ErrorKind.INTERNAL, GitLabApiError),
        (409, ErrorKind.INTERNAL, GitLabApiError),
        (429, ErrorKind.INTERNAL, GitLabApiError),
        (302, ErrorKind.INTERNAL, GitLabApiError),
    ],
)
def test_error_for_status(status, kind, error_type):
    e = error_for_status(status, "detail")
    assert type(e) is error_type
    assert e.kind is kind
    assert e.status_code == status
    assert e.detail == "detail"
