"""
Environment loading for GIT_SYNC_* settings.

Overrides can be exported in the shell or kept in .env files. Only
GIT_SYNC_* assignments are taken from the files; the rest of a project's
.env belongs to the project and is left alone.

Precedence (highest first):
    shell environment > project .env.local > project .env > user .env
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)

ENV_PREFIX = "GIT_SYNC_"


def get_user_env_path() -> Path:
    """Path to ~/.config/git-sync/.env (or XDG equivalent)."""
    return get_xdg_config_home() / "git-sync" / ".env"


def read_sync_env(path: Path) -> dict[str, str]:
    """GIT_SYNC_* assignments from one .env file, empty if it doesn't exist."""
    if not path.is_file():
        return {}
    return {
        key: value
        for key, value in dotenv_values(path).items()
        if key.startswith(ENV_PREFIX) and value is not None
    }


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """
    Export GIT_SYNC_* settings from user and project .env files.

    Later files override earlier ones. A variable already set in the shell
    is never replaced.

    Args:
        project_dir: Repository root holding .env and .env.local (defaults to cwd)
        user_env_paths: User-level env files (defaults to the XDG location)
        project_env_paths: Project-level env files (defaults to .env, .env.local)

    Returns:
        The variables that were exported
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if user_env_paths is None:
        user_env_paths = [get_user_env_path()]
    if project_env_paths is None:
        project_env_paths = [project_dir / ".env", project_dir / ".env.local"]

    layered: dict[str, str] = {}
    for path in [*user_env_paths, *project_env_paths]:
        layered.update(read_sync_env(Path(path)))

    exported = {key: value for key, value in layered.items() if key not in os.environ}
    os.environ.update(exported)
    if exported:
        logger.debug("Loaded %s from .env files", ", ".join(sorted(exported)))
    return exported
