"""
Error taxonomy and failure classification for git-sync.

All string matching against git's human-readable output lives in
classify_failure(). Git's messages are not a stable interface, so every
matching rule belongs in this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of fatal pipeline failures."""

    CONFIG_INVALID = "config_invalid"
    NOT_A_REPOSITORY = "not_a_repository"
    CONFLICTING_MODES = "conflicting_modes"
    INVALID_BRANCH_NAME = "invalid_branch_name"
    UNKNOWN_COMMIT_TYPE = "unknown_commit_type"
    NO_REMOTE = "no_remote"
    DETACHED_HEAD = "detached_head"
    BRANCH_UNRESOLVED = "branch_unresolved"
    HOOK_FAILED = "hook_failed"
    STAGE_FAILED = "stage_failed"
    COMMIT_FAILED = "commit_failed"
    PRE_COMMIT_HOOK_REJECTED = "pre_commit_hook_rejected"
    PULL_FAILED = "pull_failed"
    MERGE_CONFLICT = "merge_conflict"
    PUSH_FAILED = "push_failed"
    NON_FAST_FORWARD = "non_fast_forward"
    NO_UPSTREAM_BRANCH = "no_upstream_branch"

    @property
    def is_precondition(self) -> bool:
        """True for failures detected locally before any mutating step."""
        return self in _PRECONDITION_KINDS


_PRECONDITION_KINDS = frozenset(
    {
        ErrorKind.CONFIG_INVALID,
        ErrorKind.NOT_A_REPOSITORY,
        ErrorKind.CONFLICTING_MODES,
        ErrorKind.INVALID_BRANCH_NAME,
        ErrorKind.UNKNOWN_COMMIT_TYPE,
        ErrorKind.NO_REMOTE,
        ErrorKind.DETACHED_HEAD,
    }
)


class GitOperation(str, Enum):
    """Mutating git operations whose failures get classified."""

    STAGE = "stage"
    COMMIT = "commit"
    PULL = "pull"
    PUSH = "push"


# Output markers, matched case-insensitively
MERGE_CONFLICT_MARKERS = ("merge conflict",)
NO_UPSTREAM_MARKERS = ("has no upstream branch", "no upstream")
NON_FAST_FORWARD_MARKERS = (
    "non-fast-forward",
    "fetch first",
    "[rejected]",
    "failed to push some refs",
)
PRE_COMMIT_HOOK_MARKERS = ("pre-commit", "hook declined", "hook failed")


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def classify_failure(operation: GitOperation, output: str) -> ErrorKind:
    """
    Classify a failed git operation from its output.

    Args:
        operation: The operation that failed
        output: Error stream (and optionally stdout) of the failed command

    Returns:
        The most specific ErrorKind the output supports

    Example:
        >>> classify_failure(GitOperation.PULL, "CONFLICT (content): Merge conflict in a.py")
        <ErrorKind.MERGE_CONFLICT: 'merge_conflict'>
    """
    if operation == GitOperation.PULL:
        if "CONFLICT" in output or _contains_any(output, MERGE_CONFLICT_MARKERS):
            return ErrorKind.MERGE_CONFLICT
        return ErrorKind.PULL_FAILED

    if operation == GitOperation.PUSH:
        if _contains_any(output, NO_UPSTREAM_MARKERS):
            return ErrorKind.NO_UPSTREAM_BRANCH
        if _contains_any(output, NON_FAST_FORWARD_MARKERS):
            return ErrorKind.NON_FAST_FORWARD
        return ErrorKind.PUSH_FAILED

    if operation == GitOperation.COMMIT:
        if _contains_any(output, PRE_COMMIT_HOOK_MARKERS):
            return ErrorKind.PRE_COMMIT_HOOK_REJECTED
        return ErrorKind.COMMIT_FAILED

    return ErrorKind.STAGE_FAILED


@dataclass(frozen=True)
class Guidance:
    """User-facing description and remediation for an ErrorKind."""

    problem: str
    hint: str


GUIDANCE: dict[ErrorKind, Guidance] = {
    ErrorKind.CONFIG_INVALID: Guidance(
        "Configuration is invalid",
        "Fix the listed fields in .git-sync.json or ~/.config/git-sync/config.json",
    ),
    ErrorKind.NOT_A_REPOSITORY: Guidance(
        "Not a git repository",
        "git init  # or cd to your repository root",
    ),
    ErrorKind.CONFLICTING_MODES: Guidance(
        "Cannot use --push-only and --commit-only together",
        "Pick one mode, or neither for a full sync",
    ),
    ErrorKind.INVALID_BRANCH_NAME: Guidance(
        "Invalid branch name",
        "Use letters, digits, '/', '_', '.' and '-' (no '..', spaces or ~^:?*[)",
    ),
    ErrorKind.UNKNOWN_COMMIT_TYPE: Guidance(
        "Unknown commit type",
        "Use one of the configured conventional commit types",
    ),
    ErrorKind.NO_REMOTE: Guidance(
        "No remote repository configured",
        "git remote add origin <url>",
    ),
    ErrorKind.DETACHED_HEAD: Guidance(
        "HEAD is detached, there is no branch to sync",
        "git switch -c <new-branch>  # or git checkout <existing-branch>",
    ),
    ErrorKind.BRANCH_UNRESOLVED: Guidance(
        "Could not determine the current branch",
        "git branch --show-current  # check that git is working",
    ),
    ErrorKind.HOOK_FAILED: Guidance(
        "A hook command failed",
        "Fix the reported problem or remove the hook from configuration",
    ),
    ErrorKind.STAGE_FAILED: Guidance(
        "Failed to stage changes",
        "git status  # check for unreadable files or a locked index",
    ),
    ErrorKind.COMMIT_FAILED: Guidance(
        "Failed to commit changes",
        "git commit  # run manually to see the full error",
    ),
    ErrorKind.PRE_COMMIT_HOOK_REJECTED: Guidance(
        "The git pre-commit hook rejected the commit",
        "Fix the issues reported by the hook, or inspect .git/hooks/pre-commit",
    ),
    ErrorKind.PULL_FAILED: Guidance(
        "Failed to pull changes from remote",
        "git pull  # run manually to see the full error",
    ),
    ErrorKind.MERGE_CONFLICT: Guidance(
        "Pull failed due to merge conflicts",
        "Resolve the conflicts manually, commit, and sync again",
    ),
    ErrorKind.PUSH_FAILED: Guidance(
        "Failed to push changes",
        "git push  # run manually to see the full error",
    ),
    ErrorKind.NON_FAST_FORWARD: Guidance(
        "Remote has changes you do not have locally",
        "git-sync --pull  # pull before pushing",
    ),
    ErrorKind.NO_UPSTREAM_BRANCH: Guidance(
        "Branch has no upstream on the remote",
        "git push -u <remote> <branch>",
    ),
}


class GitSyncError(Exception):
    """
    Base exception for git-sync domain errors.

    Every subclass sets the ErrorKind the pipeline reports it as.
    """

    kind: ErrorKind


class DetachedHeadError(GitSyncError):
    """Raised when HEAD does not point at a branch."""

    kind = ErrorKind.DETACHED_HEAD

    def __init__(self, commit_id: str | None = None):
        where = f" at {commit_id}" if commit_id else ""
        super().__init__(f"HEAD is detached{where}")
        self.commit_id = commit_id


class BranchResolutionError(GitSyncError):
    """Raised when the current branch cannot be queried at all."""

    kind = ErrorKind.BRANCH_UNRESOLVED

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class UnknownCommitTypeError(GitSyncError):
    """Raised when --type is not one of the configured conventional types."""

    kind = ErrorKind.UNKNOWN_COMMIT_TYPE

    def __init__(self, commit_type: str, valid_types: list[str]):
        valid = ", ".join(valid_types) if valid_types else "none configured"
        super().__init__(f"Unknown commit type '{commit_type}' (valid: {valid})")
        self.commit_type = commit_type
        self.valid_types = valid_types


class ConfigValidationError(GitSyncError):
    """Raised when configuration fails type or shape checks."""

    kind = ErrorKind.CONFIG_INVALID

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors
