"""
Git boundary for git-sync.

Everything that touches the git executable goes through a CommandExecutor.
This package holds the executor, read-only branch/repository queries, and
the classification of git failures into actionable error kinds.
"""

from gitsync.core.git.branches import (
    current_branch,
    is_repository,
    list_remotes,
    validate_branch_name,
)
from gitsync.core.git.errors import (
    GUIDANCE,
    BranchResolutionError,
    ConfigValidationError,
    DetachedHeadError,
    ErrorKind,
    GitOperation,
    GitSyncError,
    Guidance,
    UnknownCommitTypeError,
    classify_failure,
)
from gitsync.core.git.executor import (
    CommandExecutor,
    CommandResult,
    SubprocessExecutor,
    format_command,
)

__all__ = [
    "GUIDANCE",
    "BranchResolutionError",
    "CommandExecutor",
    "CommandResult",
    "ConfigValidationError",
    "DetachedHeadError",
    "ErrorKind",
    "GitOperation",
    "GitSyncError",
    "Guidance",
    "SubprocessExecutor",
    "UnknownCommitTypeError",
    "classify_failure",
    "current_branch",
    "format_command",
    "is_repository",
    "list_remotes",
    "validate_branch_name",
]
