"""GitLab API client using httpx."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

import httpx

from .config import GitLabConfig
from .exceptions import GitLabToolError, error_for_status
from .telemetry import get_logger

USER_AGENT = "gitlab-mr-mcp/0.1"

logger = get_logger(__name__)


class GitLabClient:
    """Async HTTP client for the merge request endpoints of the GitLab REST API v4.

    One instance is shared by every tool call for the lifetime of the server.
    It holds no mutable state after construction.
    """

    def __init__(self, config: GitLabConfig | None = None) -> None:
        self.config = config or GitLabConfig.from_env()
        self.config.validate()
        self._client = httpx.AsyncClient(
            base_url=self.config.api_url,
            headers={
                "PRIVATE-TOKEN": self.config.token,
                "User-Agent": USER_AGENT,
            },
            timeout=self.config.timeout,
            verify=self.config.ssl_verify,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        return self.config.api_url

    async def close(self) -> None:
        await self._client.aclose()

    # ── HTTP helpers ──────────────────────────────────────────────

    @staticmethod
    def _encode_project(project: str) -> str:
        """Encode a project ID or ``group/subgroup/project`` path as one path segment."""
        return quote(project, safe="")

    def _mr_path(self, project: str, merge_request_iid: int, suffix: str = "") -> str:
        return f"/projects/{self._encode_project(project)}/merge_requests/{merge_request_iid}{suffix}"

    async def _request(self, method: str, path: str, *, json_data: Any = None) -> Any:
        """Make an API request and return the parsed JSON body."""
        kwargs: dict[str, Any] = {}
        if json_data is not None:
            kwargs["json"] = json_data

        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("gitlab_unreachable", method=method, path=path, error=str(e))
            raise GitLabToolError.internal("Failed to reach GitLab", str(e)) from e

        logger.debug("gitlab_response", method=method, path=path, status_code=resp.status_code)
        return self._handle_response(resp)

    @staticmethod
    def _handle_response(resp: httpx.Response) -> Any:
        text = resp.text

        if resp.is_success:
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise GitLabToolError.internal("GitLab returned invalid JSON", str(e)) from e

        detail: Any
        if not text:
            detail = resp.reason_phrase or "Unknown GitLab error"
        else:
            try:
                detail = json.loads(text)
            except json.JSONDecodeError:
                detail = text

        error = error_for_status(resp.status_code, detail)
        logger.warning(
            "gitlab_request_failed",
            status_code=resp.status_code,
            kind=error.kind.value,
            url=str(resp.request.url),
        )
        raise error

    async def get(self, path: str) -> Any:
        return await self._request("GET", path)

    async def post(self, path: str, json_data: Any = None) -> Any:
        return await self._request("POST", path, json_data=json_data)

    # ── Merge requests ────────────────────────────────────────────

    async def get_merge_request(self, project: str, merge_request_iid: int) -> Any:
        return await self.get(self._mr_path(project, merge_request_iid))

    async def get_merge_request_changes(self, project: str, merge_request_iid: int) -> Any:
        return await self.get(self._mr_path(project, merge_request_iid, "/changes"))

    async def get_merge_request_versions(self, project: str, merge_request_iid: int) -> Any:
        return await self.get(self._mr_path(project, merge_request_iid, "/versions"))

    # ── Discussions & notes ───────────────────────────────────────

    async def create_merge_request_discussion(
        self, project: str, merge_request_iid: int, payload: dict[str, Any]
    ) -> Any:
        return await self.post(self._mr_path(project, merge_request_iid, "/discussions"), payload)

    async def create_merge_request_note(
        self, project: str, merge_request_iid: int, payload: dict[str, Any]
    ) -> Any:
        return await self.post(self._mr_path(project, merge_request_iid, "/notes"), payload)
