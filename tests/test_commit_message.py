"""
Tests for commit message construction and advisory checks.
"""

from datetime import datetime

import pytest

from gitsync.core.commit import build_commit_message, message_warnings
from gitsync.core.git.errors import UnknownCommitTypeError

TYPES = {"feat": "A new feature", "fix": "A bug fix"}
FMT = "%Y-%m-%d %H:%M"
NOW = datetime(2026, 3, 14, 9, 26)


class TestBuildCommitMessage:
    """Test the message precedence rules."""

    def test_type_without_message_uses_timestamp(self):
        assert build_commit_message(None, "feat", TYPES, "chore", FMT, NOW) == "feat: 2026-03-14 09:26"

    def test_type_with_message(self):
        assert build_commit_message("fix bug", "feat", TYPES, "chore", FMT, NOW) == "feat: fix bug"

    def test_message_alone_is_verbatim(self):
        assert build_commit_message("fix bug", None, TYPES, "chore", FMT, NOW) == "fix bug"

    def test_generated_default(self):
        assert build_commit_message(None, None, TYPES, "chore", FMT, NOW) == "chore: 2026-03-14 09:26"

    def test_empty_message_counts_as_absent(self):
        assert build_commit_message("", None, TYPES, "wip", FMT, NOW) == "wip: 2026-03-14 09:26"

    def test_whitespace_message_counts_as_absent(self):
        assert build_commit_message("   ", None, TYPES, "chore", FMT, NOW) == "chore: 2026-03-14 09:26"
        assert build_commit_message(" \n", "fix", TYPES, "chore", FMT, NOW) == "fix: 2026-03-14 09:26"

    def test_custom_timestamp_format(self):
        assert build_commit_message(None, None, TYPES, "chore", "%d/%m/%Y", NOW) == "chore: 14/03/2026"

    def test_unknown_type(self):
        with pytest.raises(UnknownCommitTypeError) as exc_info:
            build_commit_message("x", "feature", TYPES, "chore", FMT, NOW)

        assert exc_info.value.valid_types == ["feat", "fix"]

    def test_unknown_type_with_no_types_configured(self):
        with pytest.raises(UnknownCommitTypeError):
            build_commit_message(None, "feat", {}, "chore", FMT, NOW)


class TestMessageWarnings:
    """Test advisory message checks."""

    def test_good_message(self):
        assert message_warnings("Fix login redirect loop") == []

    def test_short_message(self):
        warnings = message_warnings("ok")
        assert len(warnings) == 1
        assert "very short" in warnings[0]

    def test_whitespace_only(self):
        assert message_warnings("   ") == ["Commit message is empty or whitespace only"]

    def test_long_subject(self):
        warnings = message_warnings("x" * 80 + "\n\nbody")
        assert len(warnings) == 1
        assert "80 characters" in warnings[0]

    def test_long_body_is_fine(self):
        assert message_warnings("Short subject\n\n" + "y" * 200) == []
