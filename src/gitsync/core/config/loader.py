"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars

Loading and validation are separate steps. load_config_dict() returns the
merged raw mapping; validate_config() turns it into a SyncConfig or reports
every invalid field at once. The sync pipeline validates before it runs any
command, so an invalid file never causes a partial sync.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gitsync.core.git.errors import ConfigValidationError

from .models import SyncConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = ".git-sync.json"


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/git-sync/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "git-sync" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Repository root (defaults to current directory)

    Returns:
        Path to .git-sync.json in the repository root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / PROJECT_CONFIG_FILE


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, everything else is replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 20}})
        {'a': 1, 'b': {'x': 10, 'y': 20}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON config file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if the file doesn't exist

    Raises:
        ConfigValidationError: If the file can't be read or parsed, or its
            top level is not an object
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.debug("Failed to parse config at %s: %s", path, e)
        raise ConfigValidationError([f"{path}: {e}"]) from e

    if not isinstance(data, dict):
        logger.debug("Invalid config at %s: top level is not an object", path)
        raise ConfigValidationError([f"{path}: top level must be a JSON object"])
    return data


def _env_flag(value: str) -> bool:
    return value.lower() not in ("false", "0", "no", "")


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        GIT_SYNC_COMMIT_PREFIX - overrides default_commit_prefix
        GIT_SYNC_TIMESTAMP_FORMAT - overrides timestamp_format
        GIT_SYNC_REMOTE - overrides default_remote
        GIT_SYNC_CONVENTIONAL_COMMITS - overrides conventional_commits.enabled

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if prefix := os.environ.get("GIT_SYNC_COMMIT_PREFIX"):
        result["default_commit_prefix"] = prefix

    if timestamp_format := os.environ.get("GIT_SYNC_TIMESTAMP_FORMAT"):
        result["timestamp_format"] = timestamp_format

    if remote := os.environ.get("GIT_SYNC_REMOTE"):
        result["default_remote"] = remote

    if (conventional := os.environ.get("GIT_SYNC_CONVENTIONAL_COMMITS")) is not None:
        section = result.get("conventional_commits")
        section = dict(section) if isinstance(section, dict) else {}
        section["enabled"] = _env_flag(conventional)
        result["conventional_commits"] = section

    return result


def load_config_dict(project_dir: Path | None = None) -> dict[str, Any]:
    """
    Load and merge raw configuration without validating it.

    Configuration precedence (highest to lowest):
        1. Environment variables (GIT_SYNC_*)
        2. Project config (.git-sync.json)
        3. User config (~/.config/git-sync/config.json)

    Missing fields are filled in by the model defaults during validation.

    Args:
        project_dir: Repository root to load .git-sync.json from (defaults to cwd)

    Returns:
        Merged configuration mapping

    Raises:
        ConfigValidationError: If a config file exists but can't be parsed as a JSON object
    """
    merged: dict[str, Any] = {}

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    return apply_env_overrides(merged)


def _format_error(error: Any) -> str:
    location = ".".join(str(part) for part in error["loc"]) or "config"
    return f"{location}: {error['msg']}"


def validate_config(raw: SyncConfig | dict[str, Any]) -> SyncConfig:
    """
    Validate a raw configuration mapping.

    Args:
        raw: Merged configuration mapping, or an already-built SyncConfig

    Returns:
        Validated SyncConfig

    Raises:
        ConfigValidationError: Listing every invalid field
    """
    if isinstance(raw, SyncConfig):
        raw = raw.model_dump()
    if not isinstance(raw, dict):
        raise ConfigValidationError(["config: expected a mapping of settings"])

    try:
        return SyncConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError([_format_error(err) for err in e.errors()]) from e


def load_config(project_dir: Path | None = None) -> SyncConfig:
    """
    Load, merge and validate configuration.

    Raises:
        ConfigValidationError: If the merged config is invalid
    """
    return validate_config(load_config_dict(project_dir))
