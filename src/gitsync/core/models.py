"""
Data models for the sync pipeline.

SyncOptions is the immutable input of a run, PipelineOutcome its single
terminal result. SyncStats replaces counters that would otherwise live on
the pipeline instance, so nothing carries over between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gitsync.core.git.errors import GUIDANCE, ErrorKind


class OperationMode(str, Enum):
    """Which half of the sync to run."""

    FULL = "full"
    COMMIT_ONLY = "commit_only"
    PUSH_ONLY = "push_only"


class OutcomeStatus(str, Enum):
    """Terminal state of a pipeline run."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


class SyncEvent(str, Enum):
    """Kinds of progress events emitted while the pipeline runs."""

    STEP = "step"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DRY_RUN = "dry_run"
    DETAIL = "detail"


@dataclass(frozen=True)
class SyncOptions:
    """
    Input to a single pipeline run.

    Attributes:
        message: Explicit commit message
        commit_type: Conventional commit type (e.g. "feat")
        branch: Branch to publish to instead of the current branch
        remote: Remote name; falls back to configuration when None
        dry_run: Report mutating commands instead of running them
        pull: Pull from the remote before pushing
        interactive: Show the staged diff and ask before committing
        commit_only: Stop after the commit
        push_only: Skip staging and committing
        show_status: Report `git status --short` after staging
        show_stats: Collect diff statistics for the summary
        verbose: Include raw git output in progress details
    """

    message: str | None = None
    commit_type: str | None = None
    branch: str | None = None
    remote: str | None = None
    dry_run: bool = False
    pull: bool = False
    interactive: bool = False
    commit_only: bool = False
    push_only: bool = False
    show_status: bool = False
    show_stats: bool = False
    verbose: bool = False

    @property
    def has_conflicting_modes(self) -> bool:
        return self.commit_only and self.push_only

    @property
    def mode(self) -> OperationMode:
        """
        Operation mode implied by the flags.

        Raises:
            ValueError: If both commit_only and push_only are set
        """
        if self.has_conflicting_modes:
            raise ValueError("commit_only and push_only are mutually exclusive")
        if self.push_only:
            return OperationMode.PUSH_ONLY
        if self.commit_only:
            return OperationMode.COMMIT_ONLY
        return OperationMode.FULL


@dataclass
class SyncStats:
    """Statistics gathered during a run."""

    duration_seconds: float = 0.0
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0
    committed: bool = False
    pushed: bool = False
    branch: str | None = None
    remote: str | None = None


@dataclass
class PipelineOutcome:
    """
    Terminal result of a pipeline run.

    Attributes:
        status: SUCCESS, FAILURE or CANCELLED
        reason: ErrorKind for failures, None otherwise
        message: Human-readable summary
        hint: Remediation hint for failures
        detail: Raw tool output or itemized errors behind a failure
        stats: Statistics gathered before the run ended
        actions: Commands executed, or planned when dry-running
        warnings: Non-fatal problems reported during the run
    """

    status: OutcomeStatus
    reason: ErrorKind | None = None
    message: str = ""
    hint: str | None = None
    detail: str = ""
    stats: SyncStats = field(default_factory=SyncStats)
    actions: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def cancelled(self) -> bool:
        return self.status == OutcomeStatus.CANCELLED

    @classmethod
    def success(cls, message: str = "") -> PipelineOutcome:
        return cls(status=OutcomeStatus.SUCCESS, message=message)

    @classmethod
    def cancel(cls, message: str = "Sync cancelled") -> PipelineOutcome:
        return cls(status=OutcomeStatus.CANCELLED, message=message)

    @classmethod
    def failure(
        cls,
        reason: ErrorKind,
        message: str | None = None,
        detail: str = "",
    ) -> PipelineOutcome:
        guidance = GUIDANCE[reason]
        return cls(
            status=OutcomeStatus.FAILURE,
            reason=reason,
            message=message or guidance.problem,
            hint=guidance.hint,
            detail=detail,
        )

    @classmethod
    def invalid_config(cls, errors: list[str]) -> PipelineOutcome:
        """Failure for configuration that could not be loaded or validated."""
        return cls.failure(
            ErrorKind.CONFIG_INVALID,
            f"Configuration is invalid ({len(errors)} problem(s))",
            detail="\n".join(errors),
        )
