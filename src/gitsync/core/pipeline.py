"""
The sync pipeline: stage, commit, and publish local changes.

A run walks a fixed sequence of guarded steps:

    validate input -> repository check -> branch + protected-branch gate
    -> pre_stage hooks -> large-file gate -> stage -> (nothing staged? done)
    -> interactive review -> pre_commit hooks -> commit -> post_commit hooks
    -> pull (optional) -> push (with one upstream retry) -> post_push hooks

--push-only skips straight to publishing, --commit-only stops after the
commit. In dry-run mode every mutating command is reported instead of run,
while read-only queries and all branching still happen, so a dry run takes
the same path a real run would.

Every run produces exactly one PipelineOutcome. Failures are classified
where a CommandResult is consumed; nothing raised inside the pipeline
escapes run().

Example:
    >>> pipeline = SyncPipeline(SubprocessExecutor(repo), repo, confirm=typer.confirm)
    >>> outcome = pipeline.run(SyncOptions(message="Update docs"), load_config_dict(repo))
    >>> outcome.status
    <OutcomeStatus.SUCCESS: 'success'>
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from gitsync.core.commit import build_commit_message, message_warnings
from gitsync.core.config.loader import validate_config
from gitsync.core.config.models import SyncConfig
from gitsync.core.git.branches import (
    current_branch,
    is_repository,
    list_remotes,
    validate_branch_name,
)
from gitsync.core.git.errors import (
    ConfigValidationError,
    ErrorKind,
    GitOperation,
    GitSyncError,
    UnknownCommitTypeError,
    classify_failure,
)
from gitsync.core.git.executor import CommandExecutor, CommandResult, format_command
from gitsync.core.hooks import HookRunner, HookStage, HookStageResult
from gitsync.core.models import (
    OperationMode,
    PipelineOutcome,
    SyncEvent,
    SyncOptions,
    SyncStats,
)
from gitsync.core.safety import (
    ChangedFile,
    check_file_sizes,
    check_protected_branch,
    collect_changed_files,
)

logger = logging.getLogger(__name__)


class ConfirmCallback(Protocol):
    """Protocol for yes/no confirmation prompts."""

    def __call__(self, prompt: str, default: bool) -> bool:
        """
        Ask the user to confirm.

        Args:
            prompt: Question to show
            default: Answer used when the user just presses enter

        Returns:
            True to continue, False to cancel the run
        """
        ...


class ProgressCallback(Protocol):
    """Protocol for pipeline progress callbacks."""

    def __call__(self, event: SyncEvent, message: str) -> None:
        """
        Called as the pipeline makes progress.

        Args:
            event: Kind of event (step, success, warning, dry_run, ...)
            message: Human-readable message
        """
        ...


def _default_progress_callback(event: SyncEvent, message: str) -> None:
    """Default no-op progress callback."""
    pass


def _default_confirm(prompt: str, default: bool) -> bool:
    """Non-interactive confirmation: take the default answer."""
    return default


def parse_numstat(output: str) -> tuple[int, int, int]:
    """
    Sum `git diff --numstat` output.

    Binary files ("-\\t-\\tpath") count as changed files with no line delta.

    Returns:
        (files_changed, insertions, deletions)
    """
    files = insertions = deletions = 0
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        files += 1
        if parts[0].isdigit():
            insertions += int(parts[0])
        if parts[1].isdigit():
            deletions += int(parts[1])
    return files, insertions, deletions


@dataclass
class _RunState:
    """Per-run bookkeeping. Created fresh by every call to run()."""

    options: SyncOptions
    stats: SyncStats = field(default_factory=SyncStats)
    actions: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class SyncPipeline:
    """
    Orchestrates a stage/commit/publish cycle against one repository.

    Attributes:
        executor: CommandExecutor bound to the repository root
        repo_dir: Repository root, used to stat changed files
        confirm: Confirmation prompt callback
        progress: Progress callback
        clock: Returns the current time for generated commit messages
    """

    def __init__(
        self,
        executor: CommandExecutor,
        repo_dir: Path | None = None,
        confirm: ConfirmCallback | None = None,
        progress: ProgressCallback | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.executor = executor
        self.repo_dir = (repo_dir or Path.cwd()).resolve()
        self.confirm: ConfirmCallback = confirm or _default_confirm
        self.progress: ProgressCallback = progress or _default_progress_callback
        self.clock = clock or datetime.now
        self.hooks = HookRunner(executor)

    def run(
        self,
        options: SyncOptions,
        config: SyncConfig | Mapping[str, Any],
    ) -> PipelineOutcome:
        """
        Run the pipeline once.

        Args:
            options: What to do on this run
            config: Validated SyncConfig or the raw merged config mapping

        Returns:
            The single PipelineOutcome of this run
        """
        state = _RunState(options=options)
        start_time = time.time()

        try:
            outcome = self._execute(state, config)
        except GitSyncError as e:
            outcome = PipelineOutcome.failure(e.kind, str(e), detail=getattr(e, "stderr", ""))

        state.stats.duration_seconds = time.time() - start_time
        outcome.stats = state.stats
        outcome.actions = state.actions
        outcome.warnings = state.warnings

        logger.info(
            "Sync finished: %s%s",
            outcome.status.value,
            f" ({outcome.reason.value})" if outcome.reason else "",
        )
        return outcome

    # ------------------------------------------------------------------
    # Top-level sequence
    # ------------------------------------------------------------------

    def _execute(
        self,
        state: _RunState,
        raw_config: SyncConfig | Mapping[str, Any],
    ) -> PipelineOutcome:
        options = state.options

        # Input checks run before any command so invalid input has no side effects
        try:
            if isinstance(raw_config, Mapping):
                raw_config = dict(raw_config)
            config = validate_config(raw_config)
        except ConfigValidationError as e:
            return PipelineOutcome.invalid_config(e.errors)

        if options.has_conflicting_modes:
            return PipelineOutcome.failure(ErrorKind.CONFLICTING_MODES)

        if options.branch is not None and not validate_branch_name(options.branch):
            return PipelineOutcome.failure(
                ErrorKind.INVALID_BRANCH_NAME, f"Invalid branch name: '{options.branch}'"
            )

        mode = options.mode
        if mode != OperationMode.PUSH_ONLY and options.commit_type is not None:
            types = config.conventional_commits.active_types
            if options.commit_type not in types:
                raise UnknownCommitTypeError(options.commit_type, sorted(types))

        if not is_repository(self.executor):
            return PipelineOutcome.failure(ErrorKind.NOT_A_REPOSITORY)

        branch = current_branch(self.executor)
        state.stats.branch = branch
        logger.debug("Current branch: %s", branch)

        decision = check_protected_branch(branch, config.safety_checks.protected_branches)
        if decision.needs_confirmation:
            self._warn(state, decision.reason)
            if not self.confirm(f"{decision.reason}. Do you want to continue?", False):
                return PipelineOutcome.cancel("Sync cancelled on protected branch")

        if mode != OperationMode.PUSH_ONLY:
            outcome = self._commit_phase(state, config)
            if outcome is not None:
                return outcome

        if mode == OperationMode.COMMIT_ONLY:
            if options.dry_run:
                return PipelineOutcome.success("Dry run completed successfully")
            return PipelineOutcome.success("Changes committed successfully")

        return self._publish_phase(state, config, branch)

    # ------------------------------------------------------------------
    # Stage and commit
    # ------------------------------------------------------------------

    def _commit_phase(self, state: _RunState, config: SyncConfig) -> PipelineOutcome | None:
        """Stage and commit. Returns an outcome to stop the run, None to go on."""
        options = state.options

        if options.dry_run:
            logger.debug("Dry run: skipping pre_stage hooks")
        else:
            failed = self._run_fail_fast_hooks(state, HookStage.PRE_STAGE, config)
            if failed is not None:
                return failed

        changed_files = collect_changed_files(self.executor, self.repo_dir)
        decision = check_file_sizes(changed_files, config.safety_checks.max_file_size)
        if decision.needs_confirmation:
            self._warn(state, f"Large files detected: {decision.reason}")
            for violation in decision.violations:
                self._emit(SyncEvent.WARNING, f"  {violation}")
            if not self.confirm("Do you want to continue with these large files?", False):
                return PipelineOutcome.cancel("Sync cancelled due to large files")

        self._emit(SyncEvent.STEP, "Staging changes...")
        result = self._run_mutating(state, ["git", "add", "."])
        if not result.successful:
            return PipelineOutcome.failure(
                classify_failure(GitOperation.STAGE, result.output),
                detail=result.stderr.strip(),
            )
        if not options.dry_run:
            self._emit(SyncEvent.SUCCESS, "Changes staged")

        if options.show_status or options.verbose:
            status = self.executor.execute(["git", "status", "--short"])
            if status.stdout.strip():
                event = SyncEvent.INFO if options.show_status else SyncEvent.DETAIL
                self._emit(event, status.stdout.rstrip())

        if options.dry_run:
            has_changes = bool(changed_files)
        else:
            has_changes = not self.executor.execute(["git", "diff", "--cached", "--quiet"]).successful

        if not has_changes:
            self._emit(SyncEvent.INFO, "No changes to commit. Working tree is clean.")
            return PipelineOutcome.success("No changes to commit")

        if options.show_stats:
            self._collect_diff_stats(state, changed_files)

        if options.interactive:
            summary_cmd = (
                ["git", "status", "--short"]
                if options.dry_run
                else ["git", "diff", "--cached", "--stat"]
            )
            summary = self.executor.execute(summary_cmd)
            self._emit(SyncEvent.INFO, summary.stdout.rstrip() or "(no diff summary)")
            if not self.confirm("Commit these changes?", True):
                return PipelineOutcome.cancel("Commit cancelled")

        failed = self._run_fail_fast_hooks(state, HookStage.PRE_COMMIT, config)
        if failed is not None:
            return failed

        message = build_commit_message(
            options.message,
            options.commit_type,
            config.conventional_commits.active_types,
            config.default_commit_prefix,
            config.timestamp_format,
            self.clock(),
        )
        if options.message:
            for warning in message_warnings(options.message):
                self._warn(state, warning)

        self._emit(SyncEvent.STEP, "Committing changes...")
        self._emit(SyncEvent.DETAIL, f"Message: {message}")
        result = self._run_mutating(state, ["git", "commit", "-m", message])
        if not result.successful:
            return PipelineOutcome.failure(
                classify_failure(GitOperation.COMMIT, result.output),
                detail=result.output.strip(),
            )

        if not options.dry_run:
            state.stats.committed = True
            self._emit(SyncEvent.SUCCESS, "Changes committed")

        self._run_warn_only_hooks(state, HookStage.POST_COMMIT, config)
        return None

    def _collect_diff_stats(self, state: _RunState, changed_files: Sequence[ChangedFile]) -> None:
        if state.options.dry_run:
            # Nothing is staged yet: measure the working tree instead
            result = self.executor.execute(["git", "diff", "HEAD", "--numstat"])
        else:
            result = self.executor.execute(["git", "diff", "--cached", "--numstat"])

        files, insertions, deletions = parse_numstat(result.stdout if result.successful else "")
        if state.options.dry_run:
            files = max(files, len(changed_files))
        state.stats.files_changed = files
        state.stats.insertions = insertions
        state.stats.deletions = deletions

    # ------------------------------------------------------------------
    # Pull and push
    # ------------------------------------------------------------------

    def _publish_phase(
        self,
        state: _RunState,
        config: SyncConfig,
        current: str,
    ) -> PipelineOutcome:
        options = state.options
        remote = options.remote or config.default_remote
        # User-supplied names were validated up front; resolver names are trusted
        branch = options.branch or current
        state.stats.remote = remote
        state.stats.branch = branch

        remotes = list_remotes(self.executor)
        if not remotes:
            return PipelineOutcome.failure(ErrorKind.NO_REMOTE)
        if remote not in remotes:
            return PipelineOutcome.failure(
                ErrorKind.NO_REMOTE,
                f"Remote '{remote}' is not configured",
                detail=f"Configured remotes: {', '.join(remotes)}",
            )

        if options.pull:
            self._emit(SyncEvent.STEP, "Pulling changes from remote...")
            self._emit(SyncEvent.DETAIL, f"Branch: {branch}")
            result = self._run_mutating(state, ["git", "pull", remote, branch])
            if not result.successful:
                return PipelineOutcome.failure(
                    classify_failure(GitOperation.PULL, result.output),
                    detail=result.output.strip(),
                )
            if not options.dry_run:
                self._emit(SyncEvent.SUCCESS, "Successfully pulled changes")

        self._emit(SyncEvent.STEP, "Pushing to remote...")
        self._emit(SyncEvent.DETAIL, f"Branch: {branch}")
        result = self._run_mutating(state, ["git", "push", remote, branch])
        if not result.successful:
            kind = classify_failure(GitOperation.PUSH, result.output)
            if kind != ErrorKind.NO_UPSTREAM_BRANCH:
                return PipelineOutcome.failure(kind, detail=result.output.strip())

            self._emit(SyncEvent.INFO, "Setting upstream branch...")
            result = self._run_mutating(state, ["git", "push", "-u", remote, branch])
            if not result.successful:
                kind = classify_failure(GitOperation.PUSH, result.output)
                if kind == ErrorKind.NO_UPSTREAM_BRANCH:
                    kind = ErrorKind.PUSH_FAILED
                return PipelineOutcome.failure(kind, detail=result.output.strip())

        if options.dry_run:
            self._run_warn_only_hooks(state, HookStage.POST_PUSH, config)
            return PipelineOutcome.success("Dry run completed successfully")

        state.stats.pushed = True
        self._emit(SyncEvent.SUCCESS, "Changes pushed successfully")
        self._run_warn_only_hooks(state, HookStage.POST_PUSH, config)
        return PipelineOutcome.success("Done!")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run_mutating(self, state: _RunState, argv: list[str]) -> CommandResult:
        """Run a mutating command, or report it when dry-running."""
        rendered = format_command(argv)
        state.actions.append(rendered)

        if state.options.dry_run:
            self._emit(SyncEvent.DRY_RUN, f"Would execute: {rendered}")
            return CommandResult(exit_code=0, command=rendered)

        result = self.executor.execute(argv)
        if result.stdout.strip():
            self._emit(SyncEvent.DETAIL, result.stdout.rstrip())
        return result

    def _run_fail_fast_hooks(
        self,
        state: _RunState,
        stage: HookStage,
        config: SyncConfig,
    ) -> PipelineOutcome | None:
        stage_result = self._run_hooks(state, stage, config)
        failure = stage_result.first_failure
        if failure is None:
            return None

        output = (failure.stderr or failure.stdout).strip()
        return PipelineOutcome.failure(
            ErrorKind.HOOK_FAILED,
            f"{stage.label} hook failed: {failure.command} (exit code {failure.exit_code})",
            detail=output,
        )

    def _run_warn_only_hooks(self, state: _RunState, stage: HookStage, config: SyncConfig) -> None:
        stage_result = self._run_hooks(state, stage, config)
        for failure in stage_result.failures:
            self._warn(
                state,
                f"{stage.label} hook failed: {failure.command} (exit code {failure.exit_code})",
            )

    def _run_hooks(self, state: _RunState, stage: HookStage, config: SyncConfig) -> HookStageResult:
        commands = config.hooks.for_stage(stage.value)
        if commands:
            self._emit(SyncEvent.STEP, f"Running {stage.label} hooks...")

        stage_result = self.hooks.run_stage(stage, commands, dry_run=state.options.dry_run)
        for result in stage_result.results:
            state.actions.append(result.command)
            if result.skipped:
                self._emit(SyncEvent.DRY_RUN, f"Would run {stage.label} hook: {result.command}")
            elif result.stdout.strip():
                self._emit(SyncEvent.DETAIL, result.stdout.rstrip())
        return stage_result

    def _warn(self, state: _RunState, message: str) -> None:
        state.warnings.append(message)
        self._emit(SyncEvent.WARNING, message)

    def _emit(self, event: SyncEvent, message: str) -> None:
        logger.debug("[%s] %s", event.value, message)
        self.progress(event, message)
