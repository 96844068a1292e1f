"""Typed merge request tool requests."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .base import GitLabModel


class MergeRequestLocator(GitLabModel):
    """Identifies one merge request: project ID or full path, plus the IID."""

    model_config = {"frozen": True}

    project: str = Field(min_length=1)
    merge_request_iid: int = Field(ge=0)


class CreateMergeRequestDiscussionRequest(GitLabModel):
    locator: MergeRequestLocator
    body: str
    # Raw position as supplied by the caller: an object or a JSON string
    position: Any
    resolve: bool | None = None


class CreateMergeRequestNoteRequest(GitLabModel):
    locator: MergeRequestLocator
    body: str
    confidential: bool | None = None
