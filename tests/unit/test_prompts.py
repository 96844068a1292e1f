"""Tests for MCP prompt registration and content."""

from __future__ import annotations

import pytest
from fastmcp import Client

from gitlab_mr_mcp.servers.gitlab import mcp
from gitlab_mr_mcp.servers.prompts import review_merge_request, split_merge_request_url


class TestSplitMergeRequestUrl:
    def test_full_url(self):
        url = "https://gitlab.com/group/sub/project/-/merge_requests/42"
        assert split_merge_request_url(url) == ("group/sub/project", "42")

    def test_tab_suffix_and_query(self):
        url = "https://gitlab.example.com/team/api/-/merge_requests/7/diffs?view=inline"
        assert split_merge_request_url(url) == ("team/api", "7")

    def test_encoded_project(self):
        url = "http://gitlab.local/my%20group/proj/-/merge_requests/3"
        assert split_merge_request_url(url) == ("my group/proj", "3")

    @pytest.mark.parametrize(
        "value",
        [
            "group/project",
            "42",
            "https://gitlab.com/group/project/-/issues/5",
            "ftp://gitlab.com/group/project/-/merge_requests/5",
        ],
    )
    def test_not_a_merge_request_url(self, value):
        assert split_merge_request_url(value) is None


class TestReviewPrompt:
    def test_returns_user_and_assistant_messages(self):
        result = review_merge_request(project="group/proj", merge_request_iid="7")
        assert [m.role for m in result] == ["user", "assistant"]

    def test_args_are_interpolated(self):
        result = review_merge_request(project="group/proj", merge_request_iid="78")
        assert "group/proj" in result[0].content.text
        assert "78" in result[0].content.text
        assert "78" in result[1].content.text

    def test_mentions_every_tool(self):
        text = review_merge_request(project="p", merge_request_iid="1")[0].content.text
        for tool in (
            "get_merge_request",
            "get_merge_request_changes",
            "get_merge_request_versions",
            "create_merge_request_discussion",
            "create_merge_request_note",
        ):
            assert tool in text

    def test_mr_url_is_parsed(self):
        result = review_merge_request(
            project="https://gitlab.example.com/team/api/-/merge_requests/12"
        )
        assert "team/api" in result[0].content.text
        assert "!12" in result[1].content.text

    async def test_rendered_through_server(self, monkeypatch):
        monkeypatch.setenv("GITLAB_URL", "https://gitlab.example.com")
        monkeypatch.setenv("GITLAB_TOKEN", "test-token")
        async with Client(mcp) as client:
            result = await client.get_prompt(
                "review_merge_request", {"project": "group/proj", "merge_request_iid": "42"}
            )
        assert len(result.messages) == 2
        assert "42" in result.messages[0].content.text
