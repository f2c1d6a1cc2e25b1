"""
Tests for branch and repository queries.
"""

import subprocess
from pathlib import Path

import pytest

from gitsync.core.git.branches import (
    current_branch,
    is_repository,
    list_remotes,
    validate_branch_name,
)
from gitsync.core.git.errors import BranchResolutionError, DetachedHeadError
from gitsync.core.git.executor import SubprocessExecutor
from helpers import FakeExecutor, fail, ok


class TestValidateBranchName:
    """Test branch name validation."""

    @pytest.mark.parametrize(
        "name",
        ["main", "feature/login-v2", "release/1.2.0", "fix_123", "user/jdoe/spike"],
    )
    def test_accepts(self, name: str):
        assert validate_branch_name(name)

    @pytest.mark.parametrize(
        "name",
        ["", "-bad", "/leading", "a..b", "a b", "a~b", "a^b", "a:b", "a?b", "a*b", "a[b", "main\n"],
    )
    def test_rejects(self, name: str):
        assert not validate_branch_name(name)


class TestCurrentBranch:
    """Test current branch resolution."""

    def test_returns_branch(self):
        executor = FakeExecutor({"git branch --show-current": ok("feature/login\n")})
        assert current_branch(executor) == "feature/login"

    def test_detached_head_with_commit_id(self):
        executor = FakeExecutor(
            {
                "git branch --show-current": ok(""),
                "git rev-parse --short HEAD": ok("1a2b3c4\n"),
            }
        )

        with pytest.raises(DetachedHeadError) as exc_info:
            current_branch(executor)

        assert exc_info.value.commit_id == "1a2b3c4"

    def test_detached_head_without_commit_id(self):
        """A failing commit lookup still reports detached HEAD."""
        executor = FakeExecutor(
            {
                "git branch --show-current": ok("\n"),
                "git rev-parse --short HEAD": fail("fatal: ambiguous argument 'HEAD'"),
            }
        )

        with pytest.raises(DetachedHeadError) as exc_info:
            current_branch(executor)

        assert exc_info.value.commit_id is None

    def test_lookup_failure(self):
        executor = FakeExecutor({"git branch --show-current": fail("fatal: not a git repository")})

        with pytest.raises(BranchResolutionError) as exc_info:
            current_branch(executor)

        assert "not a git repository" in exc_info.value.stderr

    def test_real_repository(self, git_repo_with_commit: Path):
        assert current_branch(SubprocessExecutor(git_repo_with_commit)) == "main"

    def test_real_detached_head(self, git_repo_with_commit: Path):
        subprocess.run(
            ["git", "checkout", "--detach"],
            cwd=git_repo_with_commit,
            capture_output=True,
            check=True,
        )

        with pytest.raises(DetachedHeadError) as exc_info:
            current_branch(SubprocessExecutor(git_repo_with_commit))

        assert exc_info.value.commit_id


class TestRepositoryQueries:
    """Test repository and remote queries."""

    def test_is_repository(self, git_repo: Path):
        assert is_repository(SubprocessExecutor(git_repo))

    def test_not_a_repository(self):
        assert not is_repository(FakeExecutor({"git rev-parse --git-dir": fail(exit_code=128)}))

    def test_list_remotes(self):
        executor = FakeExecutor({"git remote": ok("origin\nupstream\n")})
        assert list_remotes(executor) == ["origin", "upstream"]

    def test_list_remotes_none(self, git_repo: Path):
        assert list_remotes(SubprocessExecutor(git_repo)) == []

    def test_list_remotes_failure(self):
        assert list_remotes(FakeExecutor({"git remote": fail("boom")})) == []
