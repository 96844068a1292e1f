"""MCP prompts: review workflow template for GitLab merge requests."""

from __future__ import annotations

import re
from string import Template
from urllib.parse import unquote, urlsplit

from fastmcp.prompts.prompt import Message

from .gitlab import mcp

_REVIEW_MR_TEMPLATE = Template(
    """# Review merge request !$merge_request_iid in $project

1. Call `get_merge_request` with project `$project` and merge_request_iid
   `$merge_request_iid` to read the title, description, author and state.
2. Call `get_merge_request_changes` to read the diff of every changed file.
3. Call `get_merge_request_versions` and take `base_commit_sha`,
   `head_commit_sha` and `start_commit_sha` from the first (latest) version.
4. For each finding tied to a line, call `create_merge_request_discussion`
   with a markdown `body` and a `position` holding `base_sha`, `head_sha`,
   `start_sha`, `new_path`, `old_path`, and `new_line` for added lines or
   `old_line` for removed lines. Use both for unchanged context lines.
5. Finish with one `create_merge_request_note` summarizing the review.

Keep comments specific and actionable. Do not comment on lines outside the diff.
"""
)


# Path part of a web URL such as /group/sub/project/-/merge_requests/42/diffs
_MR_PATH = re.compile(r"^/(?P<project>.+?)/-/merge_requests/(?P<iid>\d+)(?:/.*)?$")


def split_merge_request_url(value: str) -> tuple[str, str] | None:
    """Return ``(project, iid)`` for a merge request web URL, or None for anything else."""
    parts = urlsplit(value.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    match = _MR_PATH.match(parts.path)
    if match is None:
        return None
    return unquote(match["project"]), match["iid"]


@mcp.prompt(tags={"gitlab", "review"})
def review_merge_request(project: str, merge_request_iid: str = "") -> list[Message]:
    """Review a GitLab merge request: read details and diff, then leave line
    discussions and a summary note.

    Accepts a full MR URL (e.g. https://gitlab.com/group/project/-/merge_requests/42)
    as project; merge_request_iid will be extracted automatically.
    """
    from_url = split_merge_request_url(project)
    if from_url is not None:
        project, merge_request_iid = from_url
    text = _REVIEW_MR_TEMPLATE.safe_substitute(
        project=project, merge_request_iid=merge_request_iid
    )
    return [
        Message(role="user", content=text),
        Message(
            role="assistant",
            content=(
                f"I'll review MR !{merge_request_iid} in project {project}. "
                "Let me start by fetching the merge request details and its diff."
            ),
        ),
    ]
