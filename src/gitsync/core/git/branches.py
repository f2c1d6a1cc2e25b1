"""
Branch and repository queries.

Read-only queries used by the sync pipeline: repository detection, current
branch resolution (including detached HEAD), remote listing, and branch
name validation for names typed by the user.
"""

from __future__ import annotations

import logging
import re

from gitsync.core.git.errors import BranchResolutionError, DetachedHeadError
from gitsync.core.git.executor import CommandExecutor

logger = logging.getLogger(__name__)

BRANCH_NAME_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9/_.\-]*")

# Sequences git refuses in ref names
FORBIDDEN_BRANCH_SEQUENCES = ("..", " ", "~", "^", ":", "?", "*", "[")


def validate_branch_name(name: str) -> bool:
    """
    Check a user-supplied branch name against git ref naming rules.

    Args:
        name: Candidate branch name

    Returns:
        True if the name is acceptable

    Example:
        >>> validate_branch_name("feature/login-v2")
        True
        >>> validate_branch_name("a..b")
        False
    """
    if not BRANCH_NAME_PATTERN.fullmatch(name):
        return False
    return not any(seq in name for seq in FORBIDDEN_BRANCH_SEQUENCES)


def is_repository(executor: CommandExecutor) -> bool:
    """Check whether the executor's working directory is inside a git repository."""
    return executor.execute(["git", "rev-parse", "--git-dir"]).successful


def current_branch(executor: CommandExecutor) -> str:
    """
    Resolve the name of the checked-out branch.

    Args:
        executor: Executor bound to the repository

    Returns:
        Current branch name

    Raises:
        DetachedHeadError: If HEAD is detached. Carries the short commit id
            when it can be resolved.
        BranchResolutionError: If git cannot report the branch at all
    """
    result = executor.execute(["git", "branch", "--show-current"])
    if not result.successful:
        raise BranchResolutionError(
            "Could not determine current branch", stderr=result.stderr.strip()
        )

    branch = result.stdout.strip()
    if branch:
        return branch

    commit = executor.execute(["git", "rev-parse", "--short", "HEAD"])
    commit_id = commit.stdout.strip() if commit.successful else None
    logger.debug("Detached HEAD at %s", commit_id or "<unknown>")
    raise DetachedHeadError(commit_id or None)


def list_remotes(executor: CommandExecutor) -> list[str]:
    """Return configured remote names, or an empty list if none or on failure."""
    result = executor.execute(["git", "remote"])
    if not result.successful:
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]
