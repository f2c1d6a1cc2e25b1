"""
git-sync CLI - the sync command.

Binds command-line flags to SyncOptions, runs the SyncPipeline against the
repository the command was started in, and renders progress and the final
outcome with Rich.
"""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitsync.cli.errors import ExitCode, exit_code_for, print_outcome_error
from gitsync.core.config import load_config_dict, load_layered_env
from gitsync.core.git.errors import ConfigValidationError
from gitsync.core.git.executor import SubprocessExecutor
from gitsync.core.models import OutcomeStatus, PipelineOutcome, SyncEvent, SyncOptions
from gitsync.core.pipeline import ProgressCallback, SyncPipeline
from gitsync.utils.project import find_project_root

console = Console()

EVENT_STYLES = {
    SyncEvent.STEP: "[bold]→[/bold] {}",
    SyncEvent.INFO: "[blue]{}[/blue]",
    SyncEvent.SUCCESS: "[green]✓[/green] {}",
    SyncEvent.WARNING: "[yellow]⚠[/yellow]  {}",
    SyncEvent.DRY_RUN: "[cyan]\\[DRY RUN][/cyan] {}",
    SyncEvent.DETAIL: "[dim]{}[/dim]",
}


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for git-sync.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def make_progress(verbose: bool) -> ProgressCallback:
    """Build a progress callback that renders pipeline events to the console."""

    def progress(event: SyncEvent, message: str) -> None:
        if event == SyncEvent.DETAIL and not verbose:
            return
        console.print(EVENT_STYLES[event].format(escape(message)))

    return progress


def confirm(prompt: str, default: bool) -> bool:
    """Ask a yes/no question on the terminal."""
    return typer.confirm(prompt, default=default)


def print_stats(outcome: PipelineOutcome) -> None:
    """Render run statistics as a table."""
    stats = outcome.stats
    table = Table(title="Sync Statistics", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    if stats.branch:
        table.add_row("Branch", stats.branch)
    if stats.remote:
        table.add_row("Remote", stats.remote)
    table.add_row("Files changed", str(stats.files_changed))
    table.add_row("Insertions", f"[green]+{stats.insertions}[/green]")
    table.add_row("Deletions", f"[red]-{stats.deletions}[/red]")
    table.add_row("Committed", "yes" if stats.committed else "no")
    table.add_row("Pushed", "yes" if stats.pushed else "no")
    table.add_row("Duration", f"{stats.duration_seconds:.2f}s")

    console.print()
    console.print(table)


def sync(
    ctx: typer.Context,
    message: str | None = typer.Option(
        None,
        "--message",
        "-m",
        help="Custom commit message",
    ),
    commit_type: str | None = typer.Option(
        None,
        "--type",
        "-t",
        help="Conventional commit type (feat, fix, docs, ...)",
    ),
    branch: str | None = typer.Option(
        None,
        "--branch",
        "-b",
        help="Branch to push to (defaults to the current branch)",
    ),
    remote: str | None = typer.Option(
        None,
        "--remote",
        help="Remote to push to (defaults to configured default_remote)",
    ),
    commit_only: bool = typer.Option(
        False,
        "--commit-only",
        help="Only commit, do not push",
    ),
    push_only: bool = typer.Option(
        False,
        "--push-only",
        help="Only push existing commits",
    ),
    pull: bool = typer.Option(
        False,
        "--pull",
        help="Pull changes from remote before pushing",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be done without executing",
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Review staged changes before committing",
    ),
    show_status: bool = typer.Option(
        False,
        "--status",
        help="Show git status after staging",
    ),
    show_stats: bool = typer.Option(
        False,
        "--stats",
        help="Show sync statistics when done",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show git output and full error details",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    Stage, commit, and push changes with a single command.

    Examples:
        git-sync                          # Stage, commit, push
        git-sync -m "Fix login redirect"  # Custom message
        git-sync --type feat -m "Add SSO" # feat: Add SSO
        git-sync --pull                   # Pull before push
        git-sync --commit-only            # Commit but don't push
        git-sync --push-only              # Push existing commits
        git-sync --dry-run                # Show what would run
    """
    # If a subcommand was invoked, don't run the default action
    if ctx.invoked_subcommand is not None:
        return

    setup_logging(debug)

    repo_dir = find_project_root() or Path.cwd()
    load_layered_env(project_dir=repo_dir)

    options = SyncOptions(
        message=message,
        commit_type=commit_type,
        branch=branch,
        remote=remote,
        dry_run=dry_run,
        pull=pull,
        interactive=interactive,
        commit_only=commit_only,
        push_only=push_only,
        show_status=show_status,
        show_stats=show_stats,
        verbose=verbose,
    )

    pipeline = SyncPipeline(
        SubprocessExecutor(repo_dir),
        repo_dir,
        confirm=confirm,
        progress=make_progress(verbose),
    )

    try:
        outcome = pipeline.run(options, load_config_dict(repo_dir))
    except ConfigValidationError as e:
        outcome = PipelineOutcome.invalid_config(e.errors)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(ExitCode.SIGINT)

    if outcome.status == OutcomeStatus.FAILURE:
        print_outcome_error(outcome, verbose=verbose)
    elif outcome.status == OutcomeStatus.CANCELLED:
        console.print(f"[blue]{escape(outcome.message)}[/blue]")
    else:
        console.print()
        console.print(f"[green]{escape(outcome.message or 'Done!')}[/green]")

    if show_stats and outcome.status != OutcomeStatus.FAILURE:
        print_stats(outcome)

    code = exit_code_for(outcome)
    if code != ExitCode.SUCCESS:
        raise typer.Exit(code)
