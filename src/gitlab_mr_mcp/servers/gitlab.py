"""GitLab MR MCP server: lifespan and tool registrations."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from ..client import GitLabClient
from ..config import GitLabConfig
from ..exceptions import (
    GitLabAuthError,
    GitLabNotFoundError,
    GitLabToolError,
    GitLabValidationError,
)
from ..models.merge_requests import (
    CreateMergeRequestDiscussionRequest,
    CreateMergeRequestNoteRequest,
    MergeRequestLocator,
)
from ..payloads import discussion_payload, note_payload
from ..telemetry import get_logger

logger = get_logger(__name__)

INSTRUCTIONS = (
    "GitLab merge request review tools. Set GITLAB_URL (without /api/v4) and GITLAB_TOKEN"
    " before launch. Workflow: (1) get_merge_request for metadata and"
    " get_merge_request_changes for diff context; (2) get_merge_request_versions and take"
    " the first entry's base/head/start commit SHAs; (3) call"
    " create_merge_request_discussion with a markdown body and a position containing"
    " base_sha, head_sha, start_sha, new_path, old_path and line numbers (new_line for"
    " additions, old_line for deletions). position_type defaults to 'text'."
    " Use create_merge_request_note for top-level comments."
)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    config = GitLabConfig.from_env()
    client = GitLabClient(config)
    logger.info("gitlab_client_ready", api_url=client.base_url)
    try:
        yield {"client": client, "config": config}
    finally:
        await client.close()


mcp = FastMCP(
    name="GitLab MR MCP Server",
    instructions=INSTRUCTIONS,
    lifespan=lifespan,
)


def _get_client(ctx: Context) -> GitLabClient:
    return ctx.request_context.lifespan_context["client"]


def _ok(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _err(error: GitLabToolError) -> str:
    detail = error.to_dict()
    if isinstance(error, GitLabNotFoundError):
        detail["hint"] = "Verify the project path and merge request IID."
    elif isinstance(error, GitLabAuthError):
        detail["hint"] = "Check GITLAB_TOKEN permissions. Token needs 'api' scope."
    elif isinstance(error, GitLabValidationError):
        detail["hint"] = (
            "GitLab rejected the request. For discussions, take the SHAs from"
            " get_merge_request_versions and a line that exists in the diff."
        )
    return json.dumps(detail, indent=2, ensure_ascii=False)


# ════════════════════════════════════════════════════════════════════
# Merge Requests
# ════════════════════════════════════════════════════════════════════


@mcp.tool(
    tags={"gitlab", "merge_requests", "read"},
    annotations={"readOnlyHint": True, "idempotentHint": True, "openWorldHint": True},
)
async def get_merge_request(
    ctx: Context,
    project: Annotated[
        str, Field(description="Project ID or full path (e.g. 'group/project')", min_length=1)
    ],
    merge_request_iid: Annotated[int, Field(description="Merge request IID", ge=0)],
) -> str:
    """Fetch metadata for a GitLab merge request (title, author, state, approvals, etc.)."""
    locator = MergeRequestLocator(project=project, merge_request_iid=merge_request_iid)
    try:
        data = await _get_client(ctx).get_merge_request(
            locator.project, locator.merge_request_iid
        )
    except GitLabToolError as e:
        raise ToolError(_err(e)) from e
    return _ok(data)


@mcp.tool(
    tags={"gitlab", "merge_requests", "read"},
    annotations={"readOnlyHint": True, "idempotentHint": True, "openWorldHint": True},
)
async def get_merge_request_changes(
    ctx: Context,
    project: Annotated[
        str, Field(description="Project ID or full path (e.g. 'group/project')", min_length=1)
    ],
    merge_request_iid: Annotated[int, Field(description="Merge request IID", ge=0)],
) -> str:
    """Fetch the diff changes for a GitLab merge request (file list and hunks)."""
    locator = MergeRequestLocator(project=project, merge_request_iid=merge_request_iid)
    try:
        data = await _get_client(ctx).get_merge_request_changes(
            locator.project, locator.merge_request_iid
        )
    except GitLabToolError as e:
        raise ToolError(_err(e)) from e
    return _ok(data)


@mcp.tool(
    tags={"gitlab", "merge_requests", "read"},
    annotations={"readOnlyHint": True, "idempotentHint": True, "openWorldHint": True},
)
async def get_merge_request_versions(
    ctx: Context,
    project: Annotated[
        str, Field(description="Project ID or full path (e.g. 'group/project')", min_length=1)
    ],
    merge_request_iid: Annotated[int, Field(description="Merge request IID", ge=0)],
) -> str:
    """Fetch merge request versions (base/head/start commit SHAs for discussions)."""
    locator = MergeRequestLocator(project=project, merge_request_iid=merge_request_iid)
    try:
        data = await _get_client(ctx).get_merge_request_versions(
            locator.project, locator.merge_request_iid
        )
    except GitLabToolError as e:
        raise ToolError(_err(e)) from e
    return _ok(data)


# ════════════════════════════════════════════════════════════════════
# Discussions & Notes
# ════════════════════════════════════════════════════════════════════


@mcp.tool(
    tags={"gitlab", "discussions", "write"},
    annotations={"readOnlyHint": False, "openWorldHint": True},
)
async def create_merge_request_discussion(
    ctx: Context,
    project: Annotated[
        str, Field(description="Project ID or full path (e.g. 'group/project')", min_length=1)
    ],
    merge_request_iid: Annotated[int, Field(description="Merge request IID", ge=0)],
    body: Annotated[str, Field(description="Markdown body of the discussion comment")],
    position: Annotated[
        dict[str, Any] | str,
        Field(
            description=(
                "Position for the line comment, as an object or a JSON string: base_sha,"
                " head_sha, start_sha, new_path, old_path, and new_line and/or old_line"
                " (or line_range). position_type defaults to 'text'."
            )
        ),
    ],
    resolve: Annotated[
        bool | None, Field(description="Optionally resolve the discussion immediately")
    ] = None,
) -> str:
    """Create a line-level discussion on a GitLab merge request.

    The position requires base_sha, head_sha and start_sha (from
    get_merge_request_versions), new_path, old_path, and line numbers
    (new_line for additions, old_line for deletions).
    """
    request = CreateMergeRequestDiscussionRequest(
        locator=MergeRequestLocator(project=project, merge_request_iid=merge_request_iid),
        body=body,
        position=position,
        resolve=resolve,
    )
    try:
        payload = discussion_payload(request)
        data = await _get_client(ctx).create_merge_request_discussion(
            request.locator.project, request.locator.merge_request_iid, payload
        )
    except GitLabToolError as e:
        raise ToolError(_err(e)) from e
    return _ok(data)


@mcp.tool(
    tags={"gitlab", "notes", "write"},
    annotations={"readOnlyHint": False, "openWorldHint": True},
)
async def create_merge_request_note(
    ctx: Context,
    project: Annotated[
        str, Field(description="Project ID or full path (e.g. 'group/project')", min_length=1)
    ],
    merge_request_iid: Annotated[int, Field(description="Merge request IID", ge=0)],
    body: Annotated[str, Field(description="Markdown body of the note")],
    confidential: Annotated[
        bool | None,
        Field(description="Create a confidential note (visible only to project members)"),
    ] = None,
) -> str:
    """Create a general note on a GitLab merge request (top-level comment)."""
    request = CreateMergeRequestNoteRequest(
        locator=MergeRequestLocator(project=project, merge_request_iid=merge_request_iid),
        body=body,
        confidential=confidential,
    )
    try:
        data = await _get_client(ctx).create_merge_request_note(
            request.locator.project, request.locator.merge_request_iid, note_payload(request)
        )
    except GitLabToolError as e:
        raise ToolError(_err(e)) from e
    return _ok(data)
