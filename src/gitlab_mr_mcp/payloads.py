"""Request bodies for the discussion and note endpoints.

Optional flags are only emitted when the caller supplied them; GitLab treats
an absent key differently from an explicit ``false`` or ``null``.
"""

from __future__ import annotations

from typing import Any

from .models.merge_requests import (
    CreateMergeRequestDiscussionRequest,
    CreateMergeRequestNoteRequest,
)
from .models.positions import parse_discussion_position


def discussion_payload(request: CreateMergeRequestDiscussionRequest) -> dict[str, Any]:
    position = parse_discussion_position(request.position)

    payload: dict[str, Any] = {"body": request.body, "position": position.to_dict()}
    if request.resolve is not None:
        payload["resolve"] = request.resolve
    return payload


def note_payload(request: CreateMergeRequestNoteRequest) -> dict[str, Any]:
    payload: dict[str, Any] = {"body": request.body}
    if request.confidential is not None:
        payload["confidential"] = request.confidential
    return payload
