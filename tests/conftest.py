"""Shared test fixtures for gl-ci-sync tests."""

import argparse
import logging
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_ci_sync.client import GitLabClient
from gl_ci_sync.config import Settings

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be imported directly from tests
MOCK_API_URL = "https://gitlab.example.com/api/v4"
MOCK_PROJECT_URL = f"{MOCK_API_URL}/projects/123"

BASE_ENV = {
    "GITLAB_TOKEN": "test-token",
    "GITLAB_PROJECT_ID": "123",
    "GITLAB_API_URL": MOCK_API_URL,
}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep real GitLab settings and .env files out of tests."""
    for name in (
        "GITLAB_TOKEN",
        "GITLAB_PROJECT_ID",
        "GITLAB_API_URL",
        "GITLAB_ENVIRONMENT",
        "ENV_FILE_PATH",
        "BATCH_SIZE",
        "DELAY_MS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("gl_ci_sync.cli.load_env_file", lambda path=None: False)
    yield
    logger = logging.getLogger("gl-ci-sync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def mock_client():
    """GitLabClient pointing at mock server."""
    return GitLabClient(MOCK_API_URL, "test-token", "123", dry_run=False)


@pytest.fixture
def dry_run_client():
    """GitLabClient in dry-run mode."""
    return GitLabClient(MOCK_API_URL, "test-token", "123", dry_run=True)


@pytest.fixture
def write_document(tmp_path):
    """Write a variables document and return its path."""

    def _write(content: str) -> Path:
        path = tmp_path / "vars.env.json"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


def make_settings(**kwargs) -> Settings:
    """Helper to create Settings with test defaults."""
    defaults = {
        "api_url": MOCK_API_URL,
        "project_id": "123",
        "token": "test-token",
        "environment": "uat",
    }
    defaults.update(kwargs)
    return Settings(**defaults)


def make_args(**kwargs) -> argparse.Namespace:
    """Helper to create argparse.Namespace with default values."""
    defaults = {
        "dry_run": False,
        "json_output": False,
        "verbose": False,
        "yes": True,
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


def pipelines_page(start: int, count: int) -> list[dict]:
    return [{"id": i, "status": "success"} for i in range(start, start + count)]
