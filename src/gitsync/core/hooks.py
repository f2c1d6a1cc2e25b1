"""
Lifecycle hook runner for the sync pipeline.

Hooks are shell commands from configuration, grouped by lifecycle stage:
- pre_stage: Before changes are staged (fail-fast)
- pre_commit: After staging, before the commit (fail-fast)
- post_commit: After a successful commit (warn-only)
- post_push: After a successful push (warn-only)

Commands in a stage run one at a time, in the configured order, in the
repository root. A fail-fast stage stops at the first failing command; a
warn-only stage runs every command and only records the failures.

Usage:
    from gitsync.core.hooks import HookRunner, HookStage

    runner = HookRunner(executor)
    result = runner.run_stage(HookStage.PRE_COMMIT, ["pytest -q"])
    if not result.success:
        print(f"Hook failed: {result.first_failure.command}")
"""

import logging
import time
from collections.abc import Sequence
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from gitsync.core.git.executor import CommandExecutor

logger = logging.getLogger(__name__)


class HookStage(str, Enum):
    """Lifecycle points at which hook commands run."""

    PRE_STAGE = "pre_stage"
    PRE_COMMIT = "pre_commit"
    POST_COMMIT = "post_commit"
    POST_PUSH = "post_push"

    @property
    def fail_fast(self) -> bool:
        """Whether a failure at this stage aborts the sync."""
        return self in (HookStage.PRE_STAGE, HookStage.PRE_COMMIT)

    @property
    def label(self) -> str:
        return self.value.replace("_", "-")


class HookResult(BaseModel):
    """Result from running a single hook command."""

    command: str = Field(description="Shell command that was run")
    success: bool = Field(description="Whether the command exited with 0")
    exit_code: int = Field(default=0, description="Exit code from the command")
    stdout: str = Field(default="", description="Standard output")
    stderr: str = Field(default="", description="Standard error")
    duration_seconds: float = Field(default=0.0, description="Execution duration")
    timestamp: datetime = Field(default_factory=datetime.now, description="When it ran")
    skipped: bool = Field(default=False, description="True when not run (dry run)")

    @property
    def failed(self) -> bool:
        """Check if the hook command failed."""
        return not self.success


class HookStageResult(BaseModel):
    """Aggregate result for one lifecycle stage."""

    stage: HookStage
    fail_fast: bool = True
    results: list[HookResult] = Field(default_factory=list)

    @property
    def failures(self) -> list[HookResult]:
        return [r for r in self.results if r.failed]

    @property
    def first_failure(self) -> HookResult | None:
        failures = self.failures
        return failures[0] if failures else None

    @property
    def success(self) -> bool:
        """True if no command failed."""
        return not self.failures


class HookRunner:
    """
    Runs the configured commands for a hook stage.

    Attributes:
        executor: CommandExecutor bound to the repository root
    """

    def __init__(self, executor: CommandExecutor):
        self.executor = executor

    def run_stage(
        self,
        stage: HookStage,
        commands: Sequence[str],
        fail_fast: bool | None = None,
        dry_run: bool = False,
    ) -> HookStageResult:
        """
        Run every command configured for a stage.

        Args:
            stage: Lifecycle stage being run
            commands: Shell commands in execution order
            fail_fast: Stop at first failure. Defaults to the stage's policy.
            dry_run: Record the commands as skipped without running them

        Returns:
            HookStageResult with one HookResult per command that was reached
        """
        if fail_fast is None:
            fail_fast = stage.fail_fast

        stage_result = HookStageResult(stage=stage, fail_fast=fail_fast)
        if not commands:
            logger.debug("No %s hooks configured", stage.label)
            return stage_result

        logger.info("Running %d %s hook(s)", len(commands), stage.label)

        for command in commands:
            if dry_run:
                stage_result.results.append(
                    HookResult(command=command, success=True, skipped=True)
                )
                continue

            start_time = time.time()
            outcome = self.executor.execute(command)
            result = HookResult(
                command=command,
                success=outcome.successful,
                exit_code=outcome.exit_code,
                stdout=outcome.stdout,
                stderr=outcome.stderr,
                duration_seconds=time.time() - start_time,
            )
            stage_result.results.append(result)

            if result.success:
                logger.info(
                    "Hook '%s' completed in %.2fs", command, result.duration_seconds
                )
                continue

            logger.error("Hook '%s' failed with exit code %d", command, result.exit_code)
            if fail_fast:
                break

        return stage_result
