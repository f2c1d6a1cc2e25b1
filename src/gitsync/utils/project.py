"""
Repository root discovery utilities for git-sync.

git-sync runs from anywhere inside a working tree; configuration and
changed-file sizes are resolved relative to the repository root.
"""

from pathlib import Path

# Markers that indicate a repository root, in order of priority
PROJECT_ROOT_MARKERS = [
    ".git",  # Git repository (directory, or file for worktrees)
    ".git-sync.json",  # git-sync project configuration
]


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Find the repository root by searching upward for marker files.

    Args:
        start: Directory to start searching from. Defaults to current working directory.

    Returns:
        Path to the repository root, or None if not found.

    Example:
        >>> find_project_root(Path("/project/deep/nested/dir"))
        PosixPath('/project')
    """
    if start is None:
        start = Path.cwd()

    current = start.resolve()
    while True:
        for marker in PROJECT_ROOT_MARKERS:
            if (current / marker).exists():
                return current
        if current == current.parent:
            return None
        current = current.parent
