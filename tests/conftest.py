"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from snapvcs.config import Config
from snapvcs.repository import Repository


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create an initialized workspace with no files."""
    workspace_root = tmp_path / "workspace"
    workspace_root.mkdir()
    Repository.init(workspace_root)
    return workspace_root


@pytest.fixture
def repo(workspace: Path) -> Repository:
    """Open the repository in the workspace."""
    return Repository(workspace)


@pytest.fixture
def alice() -> Config:
    return Config(username="alice", email="a@x.com")


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed, timezone-aware commit time."""
    return datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone(timedelta(hours=-7), "MST"))


@pytest.fixture
def sample_files(workspace: Path) -> Path:
    """Populate the workspace with a few text files."""
    (workspace / "a.txt").write_text("hello")
    (workspace / "b.txt").write_text("world\n")
    sub = workspace / "docs"
    sub.mkdir()
    (sub / "notes.md").write_text("# Notes\n")
    return workspace
