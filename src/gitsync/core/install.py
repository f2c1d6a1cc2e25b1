"""
Register a `sync` shortcut script in a project manifest.

The manifest is a JSON file with a "scripts" table, package.json being the
usual one. After installation `npm run sync` (or the equivalent for the
manifest's tool) runs git-sync.

The installer never rewrites a different existing `sync` script unless the
caller explicitly allows it.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST = "package.json"
SCRIPT_NAME = "sync"
SCRIPT_COMMAND = "git-sync"


class ManifestError(Exception):
    """Raised when the manifest is missing, unreadable, or unwritable."""


class InstallStatus(str, Enum):
    """State of the sync script before installation."""

    MISSING = "missing"
    INSTALLED = "installed"
    CONFLICT = "conflict"


class InstallResult(BaseModel):
    """Result of a shortcut installation."""

    manifest_path: str = Field(description="Manifest that was inspected")
    status: InstallStatus = Field(description="State found before installing")
    written: bool = Field(default=False, description="Whether the manifest was rewritten")
    previous_command: str | None = Field(
        default=None, description="The sync script that was there before, if any"
    )


class ShortcutInstaller:
    """
    Adds the sync script to a JSON manifest.

    Example:
        >>> installer = ShortcutInstaller(Path("package.json"))
        >>> if installer.status() == InstallStatus.CONFLICT:
        ...     print(installer.existing_command())
        >>> result = installer.install(overwrite=True)
    """

    def __init__(self, manifest_path: Path, command: str = SCRIPT_COMMAND) -> None:
        self.manifest_path = manifest_path
        self.command = command

    def _load(self) -> dict[str, Any]:
        if not self.manifest_path.exists():
            raise ManifestError(f"{self.manifest_path.name} not found in project root")

        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ManifestError(f"Failed to parse {self.manifest_path.name}: {e}") from e
        except OSError as e:
            raise ManifestError(f"Failed to read {self.manifest_path.name}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestError(f"{self.manifest_path.name} does not contain a JSON object")
        return data

    def existing_command(self) -> str | None:
        """Return the current sync script, if any."""
        scripts = self._load().get("scripts")
        if isinstance(scripts, dict):
            value = scripts.get(SCRIPT_NAME)
            return value if isinstance(value, str) else None
        return None

    def status(self) -> InstallStatus:
        """Inspect the manifest without changing it."""
        existing = self.existing_command()
        if existing is None:
            return InstallStatus.MISSING
        if existing == self.command:
            return InstallStatus.INSTALLED
        return InstallStatus.CONFLICT

    def install(self, overwrite: bool = False) -> InstallResult:
        """
        Add the sync script to the manifest.

        Args:
            overwrite: Replace a different existing sync script

        Returns:
            InstallResult describing what was found and whether it was written

        Raises:
            ManifestError: If the manifest cannot be read or written
        """
        data = self._load()
        scripts = data.get("scripts")
        if not isinstance(scripts, dict):
            scripts = {}

        existing = scripts.get(SCRIPT_NAME)
        result = InstallResult(
            manifest_path=str(self.manifest_path),
            status=InstallStatus.MISSING,
            previous_command=existing if isinstance(existing, str) else None,
        )

        if existing == self.command:
            result.status = InstallStatus.INSTALLED
            return result

        if existing is not None:
            result.status = InstallStatus.CONFLICT
            if not overwrite:
                logger.info("Leaving existing sync script untouched: %s", existing)
                return result

        scripts[SCRIPT_NAME] = self.command
        data["scripts"] = scripts

        try:
            self.manifest_path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            raise ManifestError(
                f"Failed to write to {self.manifest_path.name}. Check file permissions."
            ) from e

        result.written = True
        logger.info("Added sync script to %s", self.manifest_path)
        return result
