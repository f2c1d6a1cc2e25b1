"""
Pytest configuration and shared fixtures.

Provides a scripted FakeExecutor that records every command it is asked to
run, plus repository and configuration fixtures used across the suite.
"""

import subprocess
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from helpers import FakeExecutor, fail, ok

# ==============================================================================
# Executor Fixtures
# ==============================================================================


@pytest.fixture
def executor() -> FakeExecutor:
    """An executor scripted as a clean repository on branch feature/login with one change."""
    return FakeExecutor(
        {
            "git rev-parse --git-dir": ok(".git\n"),
            "git branch --show-current": ok("feature/login\n"),
            "git status --porcelain -z --untracked-files=all": ok(" M app.py\0"),
            "git diff --cached --quiet": fail(exit_code=1),
            "git remote": ok("origin\n"),
        }
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 14, 9, 26)


@pytest.fixture
def config_dict() -> dict[str, Any]:
    """Raw configuration with two protected branches."""
    return {
        "default_commit_prefix": "chore",
        "timestamp_format": "%Y-%m-%d %H:%M",
        "default_remote": "origin",
        "safety_checks": {"max_file_size": 10, "protected_branches": ["main", "master"]},
    }


# ==============================================================================
# Real Repository Fixtures
# ==============================================================================


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for testing."""
    repo = tmp_path / "repo"
    repo.mkdir()

    subprocess.run(["git", "init", "-b", "main"], cwd=repo, capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@example.com"],
        cwd=repo,
        capture_output=True,
        check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test User"],
        cwd=repo,
        capture_output=True,
        check=True,
    )
    return repo


@pytest.fixture
def git_repo_with_commit(git_repo: Path) -> Path:
    """Create a git repo with an initial commit."""
    (git_repo / "README.md").write_text("# Test Repo\n")
    subprocess.run(["git", "add", "README.md"], cwd=git_repo, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"],
        cwd=git_repo,
        capture_output=True,
        check=True,
    )
    return git_repo
