"""Test helpers: a scripted CommandExecutor and result shorthands."""

from collections.abc import Sequence
from typing import Any

from gitsync.core.git.executor import CommandResult, format_command

MUTATING_PREFIXES = ("git add", "git commit", "git push", "git pull")


class FakeExecutor:
    """
    CommandExecutor that replays scripted results.

    Responses are keyed by the rendered command. A key matches the exact
    command or any command it is a prefix of; the longest key wins. A list
    of results is consumed in order, with the last one repeating.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[str] = []

    def set(self, command: str, *results: CommandResult) -> None:
        self.responses[command] = list(results) if len(results) > 1 else results[0]

    def execute(self, command: Sequence[str] | str) -> CommandResult:
        rendered = format_command(command)
        self.calls.append(rendered)

        matches = [key for key in self.responses if rendered == key or rendered.startswith(key + " ")]
        if not matches:
            return CommandResult(exit_code=0, command=rendered)

        key = max(matches, key=len)
        response = self.responses[key]
        if isinstance(response, list):
            result = response.pop(0) if len(response) > 1 else response[0]
        else:
            result = response
        return CommandResult(result.exit_code, result.stdout, result.stderr, rendered)

    def calls_starting_with(self, prefix: str) -> list[str]:
        return [call for call in self.calls if call.startswith(prefix)]

    @property
    def mutating_calls(self) -> list[str]:
        return [call for call in self.calls if call.startswith(MUTATING_PREFIXES)]


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(exit_code=0, stdout=stdout)


def fail(stderr: str = "", exit_code: int = 1, stdout: str = "") -> CommandResult:
    return CommandResult(exit_code=exit_code, stdout=stdout, stderr=stderr)
