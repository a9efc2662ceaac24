"""Scripted executors and prompters for tests and offline replay."""

from __future__ import annotations

import logging
import re

from src.execution.types import CommandFailedError, ExecutionResult

ScriptedOutcome = ExecutionResult | Exception

_REDIRECTIONS = (
    re.compile(r"\s*>\s*/dev/null\s*2>&1"),
    re.compile(r"\s*2>\s*/dev/null"),
    re.compile(r"\s*>\s*/dev/null"),
)
_WHITESPACE = re.compile(r"\s+")


def normalize_command(command: str) -> str:
    """Strip output redirections and collapse whitespace."""
    for pattern in _REDIRECTIONS:
        command = pattern.sub("", command)
    return _WHITESPACE.sub(" ", command).strip()


class ScriptedExecutor:
    """Executor that replays registered responses and records every call.

    Regex rules are consulted before substring rules; within each group the
    first registered match wins. Unmatched commands get ``default_response``.
    """

    def __init__(self, default_response: ExecutionResult | None = None) -> None:
        self.default_response = default_response or ExecutionResult(stdout="mock response")
        self._substring_rules: list[tuple[str, ScriptedOutcome]] = []
        self._regex_rules: list[tuple[re.Pattern[str], ScriptedOutcome]] = []
        self.calls: list[str] = []
        self.timeouts: list[int | None] = []
        self._logger = logging.getLogger(__name__)

    def set_response(self, substring: str, outcome: ScriptedOutcome) -> None:
        self._substring_rules.append((substring, outcome))

    def set_regex_response(self, pattern: str | re.Pattern[str], outcome: ScriptedOutcome) -> None:
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        self._regex_rules.append((compiled, outcome))

    def clear_calls(self) -> None:
        self.calls.clear()
        self.timeouts.clear()

    def clear_responses(self) -> None:
        self._substring_rules.clear()
        self._regex_rules.clear()

    def calls_matching(self, text: str) -> list[str]:
        return [call for call in self.calls if text in call]

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def execute(
        self, command: str, *, timeout_ms: int | None = None
    ) -> ExecutionResult:
        self.calls.append(command)
        self.timeouts.append(timeout_ms)
        outcome, rule = self._match(normalize_command(command))
        self._logger.debug(
            "scripted command",
            extra={"event": "execution.scripted", "command": command, "rule": rule},
        )
        if isinstance(outcome, CommandFailedError):
            raise outcome if outcome.command else outcome.with_command(command)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def _match(self, normalized: str) -> tuple[ScriptedOutcome, str]:
        for pattern, outcome in self._regex_rules:
            if pattern.search(normalized):
                return outcome, pattern.pattern
        for substring, outcome in self._substring_rules:
            if substring in normalized:
                return outcome, substring
        return self.default_response, "<default>"


class ScriptedPrompter:
    """Prompter that answers from a queue; answers "y" once exhausted."""

    def __init__(self, responses: list[str] | None = None, fallback: str = "y") -> None:
        self._responses = list(responses or [])
        self._fallback = fallback
        self.questions: list[str] = []

    def set_responses(self, responses: list[str]) -> None:
        self._responses = list(responses)

    async def confirm(self, question: str, default: bool = False) -> bool:
        self.questions.append(question)
        answer = self._responses.pop(0) if self._responses else self._fallback
        answer = answer.strip()
        if not answer:
            return default
        return answer.lower().startswith("y")
