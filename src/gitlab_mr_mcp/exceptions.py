"""GitLab merge request tool exceptions."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Caller-facing error categories, paired with their JSON-RPC codes."""

    INVALID_PARAMS = "invalid-params"
    INVALID_REQUEST = "invalid-request"
    INTERNAL = "internal"

    @property
    def code(self) -> int:
        return _ERROR_CODES[self]


_ERROR_CODES = {
    ErrorKind.INVALID_PARAMS: -32602,
    ErrorKind.INVALID_REQUEST: -32600,
    ErrorKind.INTERNAL: -32603,
}


class GitLabError(Exception):
    """Base exception for GitLab operations."""


class GitLabConfigError(GitLabError, ValueError):
    """Raised when the GitLab URL or token is missing or malformed."""


class GitLabToolError(GitLabError):
    """Structured failure of a tool operation: kind, message and optional detail."""

    def __init__(self, kind: ErrorKind, message: str, detail: Any = None) -> None:
        self.kind = kind
        self.message = message
        self.detail = detail
        super().__init__(message)

    @classmethod
    def invalid_params(cls, message: str, detail: Any = None) -> GitLabToolError:
        return cls(ErrorKind.INVALID_PARAMS, message, detail)

    @classmethod
    def invalid_request(cls, message: str, detail: Any = None) -> GitLabToolError:
        return cls(ErrorKind.INVALID_REQUEST, message, detail)

    @classmethod
    def internal(cls, message: str, detail: Any = None) -> GitLabToolError:
        return cls(ErrorKind.INTERNAL, message, detail)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "error": self.kind.value,
            "code": self.kind.code,
            "message": self.message,
        }
        if self.detail is not None:
            data["detail"] = self.detail
        return data


class GitLabApiError(GitLabToolError):
    """Raised when the GitLab API returns a non-success response."""

    kind_for_status = ErrorKind.INTERNAL
    default_message = "GitLab request failed"

    def __init__(self, status_code: int, detail: Any = None, message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(self.kind_for_status, message or self.default_message, detail)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class GitLabAuthError(GitLabApiError):
    """Raised on 401/403 authentication failures."""

    kind_for_status = ErrorKind.INVALID_REQUEST
    default_message = "GitLab authentication failed"


class GitLabNotFoundError(GitLabApiError):
    """Raised on 404 responses."""

    kind_for_status = ErrorKind.INVALID_PARAMS
    default_message = "GitLab resource not found"

    def __init__(self, detail: Any = None) -> None:
        super().__init__(404, detail)


class GitLabValidationError(GitLabApiError):
    """Raised on 400/422 responses."""

    kind_for_status = ErrorKind.INVALID_PARAMS
    default_message = "GitLab reported a validation error"


def error_for_status(status_code: int, detail: Any = None) -> GitLabApiError:
    """Map a non-success HTTP status onto the matching API error."""
    if status_code == 404:
        return GitLabNotFoundError(detail)
    if status_code in (401, 403):
        return GitLabAuthError(status_code, detail)
    if status_code in (400, 422):
        return GitLabValidationError(status_code, detail)
    return GitLabApiError(status_code, detail)
