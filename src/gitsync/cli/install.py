"""
git-sync CLI - install command.

Adds a `sync` script to the project's JSON manifest so the sync can be run
through the project's own task runner.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from gitsync.cli.errors import ExitCode, print_error
from gitsync.core.install import (
    DEFAULT_MANIFEST,
    InstallStatus,
    ManifestError,
    ShortcutInstaller,
)
from gitsync.utils.project import find_project_root

console = Console()


def install(
    manifest: Path | None = typer.Option(
        None,
        "--manifest",
        help=f"Manifest to edit (default: {DEFAULT_MANIFEST} in the project root)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing sync script without asking",
    ),
) -> None:
    """
    Add a "sync" script to your project manifest.

    Examples:
        git-sync install                       # Edit ./package.json
        git-sync install --manifest app.json   # Edit another manifest
    """
    if manifest is None:
        manifest = (find_project_root() or Path.cwd()) / DEFAULT_MANIFEST

    installer = ShortcutInstaller(manifest)

    try:
        status = installer.status()
        if status == InstallStatus.INSTALLED:
            console.print('[green]✓[/green] The "sync" script is already configured!')
            return

        overwrite = force
        if status == InstallStatus.CONFLICT and not force:
            console.print(
                f'[yellow]A "sync" script already exists in {escape(manifest.name)}:[/yellow]'
            )
            console.print(f"  {escape(installer.existing_command() or '')}")
            overwrite = typer.confirm(
                f'Do you want to overwrite it with "{installer.command}"?', default=False
            )
            if not overwrite:
                console.print(
                    "[blue]Installation cancelled. The existing script was not modified.[/blue]"
                )
                return

        installer.install(overwrite=overwrite)
    except ManifestError as e:
        print_error(str(e), solution="Run from your project root or pass --manifest")
        raise typer.Exit(ExitCode.USER_ERROR)

    console.print()
    console.print(
        f'[green]✓[/green] Successfully added the "sync" script to {escape(manifest.name)}!'
    )
    console.print()
    console.print("You can now use:")
    console.print("  [green]npm run sync[/green]                    # Quick sync")
    console.print('  [green]npm run sync -- -m "message"[/green]    # With custom message')
    console.print("  [green]npm run sync -- --pull[/green]          # Pull before push")
