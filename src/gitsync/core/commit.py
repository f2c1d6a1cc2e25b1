"""
Commit message construction.

Rules, highest priority first:
    1. A conventional type must be one of the configured types.
    2. type + message      -> "{type}: {message}"
    3. type only           -> "{type}: {timestamp}"
    4. message only        -> message, unchanged
    5. neither             -> "{prefix}: {timestamp}"

The current time is passed in by the caller so messages are deterministic
under test.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from gitsync.core.git.errors import UnknownCommitTypeError

MIN_MESSAGE_LENGTH = 3
MAX_SUBJECT_LENGTH = 72


def build_commit_message(
    explicit_message: str | None,
    commit_type: str | None,
    configured_types: Mapping[str, str],
    prefix: str,
    timestamp_format: str,
    now: datetime,
) -> str:
    """
    Build the commit message for a sync.

    Args:
        explicit_message: Message from --message, if any. Empty or
            whitespace-only counts as absent.
        commit_type: Conventional commit type from --type, if any
        configured_types: Allowed conventional types mapped to descriptions
        prefix: Prefix for generated messages (e.g. "chore")
        timestamp_format: strftime format for generated messages
        now: Current time

    Returns:
        The commit message

    Raises:
        UnknownCommitTypeError: If commit_type is not a configured type

    Example:
        >>> build_commit_message("fix bug", "feat", {"feat": "A new feature"},
        ...                      "chore", "%Y-%m-%d", datetime(2026, 1, 2))
        'feat: fix bug'
    """
    message = explicit_message if explicit_message and explicit_message.strip() else None

    if commit_type is not None:
        if commit_type not in configured_types:
            raise UnknownCommitTypeError(commit_type, sorted(configured_types))
        if message is not None:
            return f"{commit_type}: {message}"
        return f"{commit_type}: {now.strftime(timestamp_format)}"

    if message is not None:
        return message

    return f"{prefix}: {now.strftime(timestamp_format)}"


def message_warnings(message: str) -> list[str]:
    """
    Advisory checks for a user-written commit message.

    These never block a sync; callers surface them as warnings.

    Args:
        message: Commit message as typed by the user

    Returns:
        List of warning strings, empty if the message looks fine
    """
    if not message.strip():
        return ["Commit message is empty or whitespace only"]

    warnings: list[str] = []
    if len(message.strip()) < MIN_MESSAGE_LENGTH:
        warnings.append(
            f"Commit message is very short (less than {MIN_MESSAGE_LENGTH} characters)"
        )

    subject = message.splitlines()[0]
    if len(subject) > MAX_SUBJECT_LENGTH:
        warnings.append(
            f"First line of commit message is {len(subject)} characters "
            f"(recommended: {MAX_SUBJECT_LENGTH} or fewer)"
        )
    return warnings
