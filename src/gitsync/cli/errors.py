"""
Standardized error handling and exit codes for the git-sync CLI.

This module provides consistent error messaging with actionable guidance
and maps pipeline outcomes to process exit codes.
"""

from enum import IntEnum

from rich.console import Console
from rich.markup import escape

from gitsync.core.git.errors import ErrorKind
from gitsync.core.models import OutcomeStatus, PipelineOutcome

console = Console()

# Failures whose detail is part of the message itself, not raw tool output
ALWAYS_SHOW_DETAIL = frozenset(
    {ErrorKind.CONFIG_INVALID, ErrorKind.HOOK_FAILED, ErrorKind.NO_REMOTE}
)


class ExitCode(IntEnum):
    """Standard exit codes for git-sync."""

    SUCCESS = 0
    """Sync completed, or the user cancelled at a prompt."""

    GENERAL_ERROR = 1
    """A git command or hook failed."""

    USER_ERROR = 2
    """Configuration or input problem (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def exit_code_for(outcome: PipelineOutcome) -> ExitCode:
    """Map a pipeline outcome to the process exit code."""
    if outcome.status != OutcomeStatus.FAILURE:
        return ExitCode.SUCCESS
    if outcome.reason is not None and outcome.reason.is_precondition:
        return ExitCode.USER_ERROR
    return ExitCode.GENERAL_ERROR


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation or tool output
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "No remote repository configured",
        ...     solution="git remote add origin <url>",
        ... )
    """
    console.print(f"[red]Error:[/red] {escape(problem)}")

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {escape(solution)}")


def print_outcome_error(outcome: PipelineOutcome, verbose: bool = False) -> None:
    """
    Print a failed outcome.

    Raw git output is shown only in verbose mode; the categorized hint is
    always shown.
    """
    show_detail = verbose or outcome.reason in ALWAYS_SHOW_DETAIL
    print_error(
        outcome.message,
        reason=outcome.detail if show_detail and outcome.detail else None,
        solution=outcome.hint,
    )
