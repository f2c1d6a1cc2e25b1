"""
Command execution boundary for git-sync.

The pipeline never spawns processes itself. It talks to a CommandExecutor,
which runs a command in the repository directory and reports the exit code
and both output streams. Failures are communicated through the result, never
by raising, so every caller classifies failures at the point where it
consumes a CommandResult.

Usage:
    from gitsync.core.git.executor import SubprocessExecutor

    executor = SubprocessExecutor(Path.cwd())
    result = executor.execute(["git", "status", "--porcelain"])
    if not result.successful:
        print(result.stderr)
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Conventional shell exit status for "command not found"
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single external command."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def successful(self) -> bool:
        """True when the command exited with status 0."""
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Both streams joined, for classification and display."""
        return "\n".join(part for part in (self.stderr, self.stdout) if part)


@runtime_checkable
class CommandExecutor(Protocol):
    """
    Protocol for command executors.

    A sequence is executed directly as argv. A plain string is handed to
    the shell, which is how hook commands from configuration are run.
    """

    def execute(self, command: Sequence[str] | str) -> CommandResult:
        """
        Run a command and wait for it to finish.

        Args:
            command: argv sequence, or a shell command string

        Returns:
            CommandResult with exit code, stdout and stderr
        """
        ...


def format_command(command: Sequence[str] | str) -> str:
    """Render a command for logs and dry-run reports."""
    if isinstance(command, str):
        return command
    return shlex.join(command)


class SubprocessExecutor:
    """
    CommandExecutor backed by subprocess.run.

    Commands run in ``cwd`` and block until completion. No timeout is
    applied; a command that never terminates blocks the caller.
    """

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = (cwd or Path.cwd()).resolve()

    def execute(self, command: Sequence[str] | str) -> CommandResult:
        rendered = format_command(command)
        logger.debug("Running command: %s", rendered)

        shell = isinstance(command, str)
        try:
            result = subprocess.run(
                command if shell else list(command),
                cwd=self.cwd,
                shell=shell,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            logger.debug("Executable not found for %s: %s", rendered, e)
            return CommandResult(
                exit_code=COMMAND_NOT_FOUND,
                stderr=f"command not found: {e.filename or rendered}",
                command=rendered,
            )

        logger.debug("Command exited with %d: %s", result.returncode, rendered)
        return CommandResult(
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            command=rendered,
        )
