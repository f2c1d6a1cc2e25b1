"""
git-sync CLI - Main application entry point.

This module sets up the Typer CLI application. Running `git-sync` with no
subcommand performs a sync; `git-sync install` registers the shortcut
script.
"""

import typer

from gitsync.cli import install, sync

# Create the main Typer app
app = typer.Typer(
    name="git-sync",
    help="Stage, commit, and push changes to git with a single command",
    no_args_is_help=False,
    invoke_without_command=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

app.callback(invoke_without_command=True)(sync.sync)
app.command(name="install")(install.install)


def cli_main() -> None:
    """Entry point for the git-sync console script."""
    app()


__all__ = ["app", "cli_main"]
