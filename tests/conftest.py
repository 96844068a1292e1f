"""Shared test fixtures for gitlab-mr-mcp."""

from __future__ import annotations

import pytest
import respx

from gitlab_mr_mcp.client import GitLabClient
from gitlab_mr_mcp.config import GitLabConfig

TEST_URL = "https://gitlab.example.com"
TEST_TOKEN = "test-token"
BASE = f"{TEST_URL}/api/v4"


@pytest.fixture
def config() -> GitLabConfig:
    return GitLabConfig(url=TEST_URL, token=TEST_TOKEN)


@pytest.fixture
def client(config: GitLabConfig) -> GitLabClient:
    return GitLabClient(config)


@pytest.fixture
def mock_api() -> respx.MockRouter:
    with respx.mock(base_url=BASE) as router:
        yield router


@pytest.fixture
def position() -> dict:
    return {
        "base_sha": "aaa111",
        "head_sha": "bbb222",
        "start_sha": "ccc333",
        "new_path": "src/app.py",
        "old_path": "src/app.py",
        "new_line": 12,
    }
