"""
git-sync - Stage, commit, and publish in one command.

A CLI tool that drives git through a guarded sync pipeline with safety
checks, lifecycle hooks, and conventional commit messages.
"""

__version__ = "0.4.0-dev"

# Re-export core models for convenience
from gitsync.core.config.models import SyncConfig
from gitsync.core.models import OutcomeStatus, PipelineOutcome, SyncOptions

__all__ = ["OutcomeStatus", "PipelineOutcome", "SyncConfig", "SyncOptions", "__version__"]
