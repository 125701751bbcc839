"""Integration tests for snapvcs config and commit commands."""

import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from snapvcs.cli.main import app
from snapvcs.constants import REPO_DIR

runner = CliRunner()

COMMIT_LINE = re.compile(r"Committed to master: ([0-9a-f]{40})")


@pytest.fixture
def repo_root(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["init", "--quiet"])
    assert result.exit_code == 0
    return tmp_path


class TestConfigCommand:
    """Test snapvcs config command."""

    def test_config_writes_json(self, repo_root: Path) -> None:
        result = runner.invoke(app, ["config", "alice", "a@x.com"])

        assert result.exit_code == 0
        assert "Config set successfully: alice a@x.com" in result.stdout
        assert '"username": "alice"' in (repo_root / REPO_DIR / "config.json").read_text()

    def test_config_requires_both_args(self, repo_root: Path) -> None:
        result = runner.invoke(app, ["config", "alice"])
        assert result.exit_code != 0


class TestCommitCommand:
    """Test snapvcs commit command."""

    def test_commit_without_config(self, repo_root: Path) -> None:
        result = runner.invoke(app, ["commit", "-m", "first"])

        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_commit_without_message(self, repo_root: Path) -> None:
        runner.invoke(app, ["config", "alice", "a@x.com"])

        result = runner.invoke(app, ["commit"])

        assert result.exit_code == 1
        assert "Commit message is required" in result.output

    def test_commit_returns_hash(self, repo_root: Path) -> None:
        runner.invoke(app, ["config", "alice", "a@x.com"])

        result = runner.invoke(app, ["commit", "-m", "first"])

        assert result.exit_code == 0
        match = COMMIT_LINE.search(result.stdout)
        assert match is not None
        commit_hash = match.group(1)

        objects = repo_root / REPO_DIR / "objects"
        assert (objects / commit_hash[:2] / commit_hash[2:]).is_file()
        branch = repo_root / REPO_DIR / "refs" / "heads" / "master"
        assert branch.read_text().strip() == commit_hash

    def test_commit_after_staging(self, repo_root: Path) -> None:
        runner.invoke(app, ["config", "alice", "a@x.com"])
        (repo_root / "a.txt").write_text("hello")
        runner.invoke(app, ["add", "a.txt"])

        result = runner.invoke(app, ["commit", "-m", "add a.txt"])

        assert result.exit_code == 0
        assert COMMIT_LINE.search(result.stdout)
