"""
Tests for the subprocess-backed CommandExecutor.
"""

from pathlib import Path

from gitsync.core.git.executor import (
    COMMAND_NOT_FOUND,
    CommandExecutor,
    CommandResult,
    SubprocessExecutor,
    format_command,
)


class TestCommandResult:
    """Test CommandResult helpers."""

    def test_successful(self):
        assert CommandResult(exit_code=0).successful
        assert not CommandResult(exit_code=1).successful

    def test_output_joins_streams(self):
        result = CommandResult(exit_code=1, stdout="out", stderr="err")
        assert result.output == "err\nout"

    def test_output_skips_empty_streams(self):
        assert CommandResult(exit_code=1, stdout="only out").output == "only out"


class TestFormatCommand:
    """Test command rendering."""

    def test_argv_is_shell_quoted(self):
        assert format_command(["git", "commit", "-m", "feat: x"]) == "git commit -m 'feat: x'"

    def test_plain_argv(self):
        assert format_command(["git", "push", "origin", "main"]) == "git push origin main"

    def test_string_passes_through(self):
        assert format_command("make lint && make test") == "make lint && make test"


class TestSubprocessExecutor:
    """Test running real commands."""

    def test_satisfies_protocol(self, tmp_path: Path):
        assert isinstance(SubprocessExecutor(tmp_path), CommandExecutor)

    def test_runs_in_working_directory(self, git_repo: Path):
        """Commands run in the executor's directory."""
        result = SubprocessExecutor(git_repo).execute(["git", "rev-parse", "--git-dir"])

        assert result.successful
        assert result.stdout.strip() == ".git"
        assert result.command == "git rev-parse --git-dir"

    def test_failure_is_reported_not_raised(self, tmp_path: Path):
        """A failing command returns a non-zero result."""
        result = SubprocessExecutor(tmp_path).execute(["git", "rev-parse", "--git-dir"])

        assert not result.successful
        assert "not a git repository" in result.stderr.lower()

    def test_string_runs_through_shell(self, tmp_path: Path):
        """String commands support shell syntax."""
        result = SubprocessExecutor(tmp_path).execute("echo one && echo two >&2 && exit 3")

        assert result.exit_code == 3
        assert result.stdout == "one\n"
        assert result.stderr == "two\n"

    def test_missing_executable(self, tmp_path: Path):
        """A missing program maps to the command-not-found status."""
        result = SubprocessExecutor(tmp_path).execute(["definitely-not-a-real-program-xyz"])

        assert result.exit_code == COMMAND_NOT_FOUND
        assert "definitely-not-a-real-program-xyz" in result.stderr

    def test_undecodable_output_is_replaced(self, tmp_path: Path):
        """Bytes that are not UTF-8 come back as replacement characters."""
        result = SubprocessExecutor(tmp_path).execute("printf '\\377\\376 built'")

        assert result.successful
        assert result.stdout == "\ufffd\ufffd built"
