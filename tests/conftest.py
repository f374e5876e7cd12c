"""Shared test fixtures for git-smart."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Shared helpers (plain functions, not fixtures — importable by test files)
# ---------------------------------------------------------------------------


def make_config(**overrides):
    """Create a Configuration with every hook disabled unless overridden.

    Usage::

        c = make_config(pre_push=PrePushConfig(enabled=True, valid_branches=[".*"]))
    """
    from git_smart.config import (
        CommitMessageConfig,
        Configuration,
        PreCommitConfig,
        PrepareCommitMessageConfig,
        PrePushConfig,
    )

    defaults = {
        "commit_message": CommitMessageConfig(),
        "prepare_commit_message": PrepareCommitMessageConfig(),
        "pre_push": PrePushConfig(),
        "pre_commit": PreCommitConfig(),
    }
    defaults.update(overrides)
    return Configuration(**defaults)


def git(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )


def init_repo(path: Path, *, commit: bool = True) -> Path:
    """Create a git repo on ``main``, optionally with one commit."""
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "--initial-branch=main")
    git(path, "config", "user.email", "test@test.com")
    git(path, "config", "user.name", "Test")
    git(path, "config", "commit.gpgsign", "false")
    if commit:
        (path / "README.md").write_text("initial")
        git(path, "add", "README.md")
        git(path, "commit", "-m", "initial commit")
    return path


# ---------------------------------------------------------------------------
# Autouse fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def _clean_git_env():
    """Strip git env vars that leak in when the suite runs from inside a hook.

    Git sets GIT_INDEX_FILE (and potentially GIT_DIR, GIT_WORK_TREE) before
    running hooks. Tests that create temporary git repos would otherwise
    inspect the outer repository instead of their own.
    """
    import os

    for var in ("GIT_INDEX_FILE", "GIT_DIR", "GIT_WORK_TREE"):
        os.environ.pop(var, None)


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Drop the hook name bound by a previous test's run()."""
    import structlog

    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def _git_ceiling(tmp_path, monkeypatch):
    """Stop git from discovering a repository above the test's tmp dir."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))


# ---------------------------------------------------------------------------
# Reusable fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def repo(tmp_path) -> Path:
    """A repository on ``main`` with one commit."""
    return init_repo(tmp_path / "repo")
