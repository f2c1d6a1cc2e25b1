"""
Configuration data models for git-sync.

These models define the structure of .git-sync.json and
~/.config/git-sync/config.json files, with validation and type safety via
Pydantic. Models are strict: a present field with the wrong type is an
error rather than being coerced, while a missing field takes its default.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator


def _default_commit_types() -> dict[str, str]:
    return {
        "feat": "A new feature",
        "fix": "A bug fix",
        "docs": "Documentation only changes",
        "style": "Changes that do not affect the meaning of the code",
        "refactor": "A code change that neither fixes a bug nor adds a feature",
        "perf": "A code change that improves performance",
        "test": "Adding missing tests or correcting existing tests",
        "build": "Changes that affect the build system or external dependencies",
        "ci": "Changes to CI configuration files and scripts",
        "chore": "Other changes that don't modify src or test files",
        "revert": "Reverts a previous commit",
    }


class ConventionalCommitsConfig(BaseModel):
    """
    Conventional commit types accepted by --type.

    When disabled, no type is accepted.
    """
    enabled: StrictBool = Field(
        default=True,
        description="Allow --type to prefix commit messages"
    )
    types: dict[StrictStr, StrictStr] = Field(
        default_factory=_default_commit_types,
        description="Allowed commit types mapped to their descriptions"
    )

    @property
    def active_types(self) -> dict[str, str]:
        """Types usable right now (empty when disabled)."""
        return dict(self.types) if self.enabled else {}


class SafetyChecksConfig(BaseModel):
    """
    Safety checks before committing and pushing.

    Users are asked for confirmation when a check trips.
    """
    max_file_size: float = Field(
        default=10,
        ge=0,
        description="Warn about changed files larger than this many MB (0 disables)"
    )
    protected_branches: list[StrictStr] = Field(
        default_factory=lambda: ["main", "master", "production"],
        description="Ask for confirmation before syncing on these branches"
    )

    @field_validator("max_file_size", mode="before")
    @classmethod
    def reject_non_numeric(cls, v: Any) -> Any:
        """Refuse booleans and numeric strings instead of coercing them."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("must be a number")
        return v


class HooksConfig(BaseModel):
    """
    Shell commands run at each stage of the sync.

    Each command runs in the repository root.
    """
    pre_stage: list[StrictStr] = Field(
        default_factory=list,
        description="Commands to run before staging changes"
    )
    pre_commit: list[StrictStr] = Field(
        default_factory=list,
        description="Commands to run before committing; a failure stops the commit"
    )
    post_commit: list[StrictStr] = Field(
        default_factory=list,
        description="Commands to run after a successful commit"
    )
    post_push: list[StrictStr] = Field(
        default_factory=list,
        description="Commands to run after a successful push"
    )

    def for_stage(self, stage: str) -> list[str]:
        """Commands configured for a stage key (e.g. 'pre_commit')."""
        commands: list[str] = getattr(self, stage)
        return commands


class SyncConfig(BaseModel):
    """
    Main git-sync configuration model.

    Combines all configuration sections with sensible defaults.
    Loaded from .git-sync.json and merged with user config.

    Example:
        >>> config = SyncConfig(default_remote="upstream")
        >>> config.safety_checks.protected_branches
        ['main', 'master', 'production']
    """
    model_config = ConfigDict(extra="ignore")

    default_commit_prefix: StrictStr = Field(
        default="chore",
        description="Prefix for auto-generated commit messages"
    )
    timestamp_format: StrictStr = Field(
        default="%Y-%m-%d %H:%M",
        description="strftime format for timestamps in generated messages"
    )
    default_remote: StrictStr = Field(
        default="origin",
        min_length=1,
        description="Remote to pull from and push to"
    )
    conventional_commits: ConventionalCommitsConfig = Field(
        default_factory=ConventionalCommitsConfig
    )
    safety_checks: SafetyChecksConfig = Field(default_factory=SafetyChecksConfig)
    hooks: HooksConfig = Field(default_factory=HooksConfig)
