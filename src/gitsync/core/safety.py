"""
Safety gates evaluated before mutating git commands.

The checks themselves are pure: callers hand in the branch name or the list
of changed files and get a GateDecision back. Turning a decision into a
prompt, and a declined prompt into a cancelled run, is the caller's job.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from gitsync.core.git.executor import CommandExecutor

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class ChangedFile:
    """A changed path in the working tree. size_bytes is None once deleted."""

    path: str
    size_bytes: int | None

    @property
    def size_mb(self) -> float:
        return (self.size_bytes or 0) / BYTES_PER_MB


@dataclass(frozen=True)
class GateDecision:
    """Result of a safety check."""

    passed: bool
    reason: str = ""
    violations: tuple[str, ...] = field(default_factory=tuple)

    @property
    def needs_confirmation(self) -> bool:
        return not self.passed

    @classmethod
    def ok(cls) -> GateDecision:
        return cls(passed=True)

    @classmethod
    def confirm(cls, reason: str, violations: Iterable[str] = ()) -> GateDecision:
        return cls(passed=False, reason=reason, violations=tuple(violations))


def check_protected_branch(branch: str, protected: Iterable[str]) -> GateDecision:
    """
    Check whether work is about to land on a protected branch.

    Args:
        branch: Branch the sync operates on
        protected: Names of protected branches

    Returns:
        GateDecision requiring confirmation if the branch is protected
    """
    if branch in set(protected):
        return GateDecision.confirm(
            f"You are on protected branch '{branch}'",
            violations=[branch],
        )
    return GateDecision.ok()


def check_file_sizes(changed_files: Sequence[ChangedFile], max_mb: float) -> GateDecision:
    """
    Check changed files against the large-file threshold.

    Files that no longer exist (size_bytes is None) are skipped. A threshold
    of 0 disables the check.

    Args:
        changed_files: Changed paths with their on-disk sizes
        max_mb: Maximum size in megabytes

    Returns:
        GateDecision listing every file over the threshold
    """
    if max_mb <= 0:
        return GateDecision.ok()

    limit_bytes = max_mb * BYTES_PER_MB
    violations = [
        f"{f.path} ({f.size_mb:.2f} MB)"
        for f in changed_files
        if f.size_bytes is not None and f.size_bytes > limit_bytes
    ]
    if not violations:
        return GateDecision.ok()

    return GateDecision.confirm(
        f"{len(violations)} file(s) exceed {max_mb:g} MB",
        violations=violations,
    )


def parse_porcelain(output: str) -> list[str]:
    """
    Extract paths from `git status --porcelain -z` output.

    Entries are NUL-terminated and paths are never quoted. A rename or copy
    entry is followed by a second entry holding the original path, which is
    skipped so only the new path is returned.

    Args:
        output: Raw NUL-separated porcelain v1 output

    Returns:
        Changed paths in output order
    """
    paths: list[str] = []
    entries = iter(output.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        status = entry[:2]
        paths.append(entry[3:])
        if "R" in status or "C" in status:
            next(entries, None)
    return paths


def collect_changed_files(executor: CommandExecutor, repo_dir: Path) -> list[ChangedFile]:
    """
    List changed working-tree files with their current sizes.

    Args:
        executor: Executor bound to the repository
        repo_dir: Repository root used to stat paths

    Returns:
        ChangedFile entries; deleted files carry size_bytes=None
    """
    result = executor.execute(["git", "status", "--porcelain", "-z", "--untracked-files=all"])
    if not result.successful:
        logger.warning("Could not list changed files: %s", result.stderr.strip())
        return []

    files: list[ChangedFile] = []
    for rel_path in parse_porcelain(result.stdout):
        full_path = repo_dir / rel_path
        size = full_path.stat().st_size if full_path.is_file() else None
        files.append(ChangedFile(path=rel_path, size_bytes=size))
    return files
