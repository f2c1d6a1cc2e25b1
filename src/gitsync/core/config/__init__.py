"""
Configuration models and loading.

This module provides Pydantic models for git-sync configuration
with multi-layer merging: user < project < env vars.
"""

from .env import load_layered_env
from .loader import (
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
    load_config_dict,
    validate_config,
)
from .models import (
    ConventionalCommitsConfig,
    HooksConfig,
    SafetyChecksConfig,
    SyncConfig,
)

__all__ = [
    # Models
    "ConventionalCommitsConfig",
    "HooksConfig",
    "SafetyChecksConfig",
    "SyncConfig",
    # Loader functions
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_config_dict",
    "load_layered_env",
    "validate_config",
]
