"""Shared fixtures for the commit-ai test suite."""

import io
import shutil
from pathlib import Path

import pytest
from git import Repo
from loguru import logger
from rich.console import Console

from commit_ai.config.settings import Settings
from commit_ai.ui.console import CommitAIConsole


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep config, cache and credential files inside the test's tmp dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "config"))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "cache"))
    monkeypatch.delenv("COMMIT_AI_CREDENTIALS_FILE", raising=False)
    yield
    # CLI tests add sinks bound to streams that are closed afterwards
    logger.remove()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def ui(settings, output):
    """Console writing to an in-memory buffer."""
    return CommitAIConsole(settings, console=Console(file=output, width=120))


@pytest.fixture
def git_repo_path(tmp_path) -> Path:
    """A git repository with one committed file and a bare `origin` remote."""
    path = tmp_path / "work"
    path.mkdir()
    repo = Repo.init(path)
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")
        config.set_value("commit", "gpgsign", "false")

    (path / "README.md").write_text("# Test Project\n")
    repo.git.add("README.md")
    repo.git.commit("-m", "Initial commit")

    remote_path = tmp_path / "origin.git"
    Repo.init(remote_path, bare=True)
    repo.create_remote("origin", str(remote_path))
    repo.git.push("--set-upstream", "origin", repo.active_branch.name)

    return path
