"""
Tests for the manifest shortcut installer.
"""

import json
from pathlib import Path

import pytest

from gitsync.core.install import (
    SCRIPT_COMMAND,
    InstallStatus,
    ManifestError,
    ShortcutInstaller,
)


@pytest.fixture
def manifest(tmp_path: Path) -> Path:
    path = tmp_path / "package.json"
    path.write_text(json.dumps({"name": "demo", "scripts": {"test": "jest"}}, indent=2))
    return path


class TestShortcutInstaller:
    """Test ShortcutInstaller."""

    def test_installs_into_existing_scripts(self, manifest: Path):
        result = ShortcutInstaller(manifest).install()

        data = json.loads(manifest.read_text())
        assert result.written
        assert result.status == InstallStatus.MISSING
        assert data["scripts"] == {"test": "jest", "sync": SCRIPT_COMMAND}
        assert data["name"] == "demo"

    def test_creates_scripts_section(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text('{"name": "demo"}')

        ShortcutInstaller(path).install()

        assert json.loads(path.read_text())["scripts"] == {"sync": SCRIPT_COMMAND}

    def test_output_is_pretty_printed(self, manifest: Path):
        ShortcutInstaller(manifest).install()

        text = manifest.read_text()
        assert text.endswith("}\n")
        assert '  "scripts": {' in text

    def test_already_installed(self, manifest: Path):
        installer = ShortcutInstaller(manifest)
        installer.install()
        before = manifest.read_text()

        result = installer.install()

        assert installer.status() == InstallStatus.INSTALLED
        assert result.status == InstallStatus.INSTALLED
        assert not result.written
        assert manifest.read_text() == before

    def test_conflict_left_alone_without_overwrite(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text('{"scripts": {"sync": "rsync -a . remote:"}}')
        installer = ShortcutInstaller(path)

        result = installer.install()

        assert installer.status() == InstallStatus.CONFLICT
        assert installer.existing_command() == "rsync -a . remote:"
        assert result.previous_command == "rsync -a . remote:"
        assert not result.written
        assert json.loads(path.read_text())["scripts"]["sync"] == "rsync -a . remote:"

    def test_conflict_overwritten(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text('{"scripts": {"sync": "rsync -a . remote:"}}')

        result = ShortcutInstaller(path).install(overwrite=True)

        assert result.written
        assert json.loads(path.read_text())["scripts"]["sync"] == SCRIPT_COMMAND

    def test_missing_manifest(self, tmp_path: Path):
        with pytest.raises(ManifestError, match="package.json not found"):
            ShortcutInstaller(tmp_path / "package.json").status()

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text("{broken")

        with pytest.raises(ManifestError, match="Failed to parse"):
            ShortcutInstaller(path).install()

    def test_non_object_manifest(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text("[]")

        with pytest.raises(ManifestError, match="JSON object"):
            ShortcutInstaller(path).install()
