"""Discussion position models and parsing."""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any

from pydantic import Field, Strict, StrictStr, ValidationError

from ..exceptions import GitLabToolError
from .base import GitLabModel

# Only real JSON integers; "12", 12.0 and true are rejected
LineNumber = Annotated[int, Strict(), Field(ge=0)]


class PositionType(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class LineType(str, Enum):
    NEW = "new"
    OLD = "old"


class LineReference(GitLabModel):
    line_code: StrictStr
    line_type: LineType = Field(alias="type")
    old_line: LineNumber | None = None
    new_line: LineNumber | None = None


class LineRange(GitLabModel):
    start: LineReference
    end: LineReference


class DiscussionPosition(GitLabModel):
    """Location of a line-level comment in a merge request diff.

    The three SHAs pin the diff version (see ``get_merge_request_versions``).
    """

    base_sha: StrictStr = ""
    head_sha: StrictStr = ""
    start_sha: StrictStr = ""
    position_type: PositionType = PositionType.TEXT
    new_path: StrictStr = ""
    old_path: StrictStr = ""
    new_line: LineNumber | None = None
    old_line: LineNumber | None = None
    line_range: LineRange | None = None

    def validate_position(self) -> None:
        if not (self.base_sha.strip() and self.head_sha.strip() and self.start_sha.strip()):
            raise GitLabToolError.invalid_params(
                "GitLab discussion position requires base_sha, head_sha, and start_sha"
            )
        if not (self.new_path.strip() and self.old_path.strip()):
            raise GitLabToolError.invalid_params(
                "GitLab discussion position requires both new_path and old_path"
            )
        if self.new_line is None and self.old_line is None and self.line_range is None:
            raise GitLabToolError.invalid_params(
                "GitLab discussion position requires at least one of "
                "new_line, old_line, or line_range"
            )


def parse_discussion_position(raw: Any) -> DiscussionPosition:
    """Build a validated position from an object or a JSON-encoded string."""
    value = raw
    if isinstance(raw, str):
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            raise GitLabToolError.invalid_params(
                "position string is not valid JSON", str(e)
            ) from e

    try:
        position = DiscussionPosition.model_validate(value)
    except ValidationError as e:
        raise GitLabToolError.invalid_params(
            "position must be a GitLab discussion position object", str(e)
        ) from e

    position.validate_position()
    return position
