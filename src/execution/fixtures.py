"""Load replay fixtures (YAML tables of canned command responses).

Fixture format::

    default:
      stdout: "mock response"
    rules:
      - regex: '^gh pr view \\d+$'
        stdout: "title: TEST-2055: fix form validation"
      - contains: "jira issue view"
        error:
          stderr: "Issue not found"
          exit_code: 1

Each rule has exactly one of ``regex`` / ``contains`` and either response
fields (``stdout``, ``stderr``) or an ``error`` mapping whose keys are the
``CommandFailedError`` fields.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from src.execution.mocks import ScriptedExecutor
from src.execution.types import CommandFailedError, ExecutionResult

_ERROR_FIELDS = {
    "exit_code",
    "stdout",
    "stderr",
    "missing_binary",
    "timed_out",
    "signal",
    "timeout_ms",
    "message",
}


class FixtureError(ValueError):
    """Raised when a replay fixture is malformed."""


def load_replay_fixture(path: Path) -> ScriptedExecutor:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise FixtureError(f"Invalid YAML in replay fixture {path}: {e}") from e
    if not isinstance(data, dict):
        raise FixtureError(f"Replay fixture {path} must be a mapping")
    return build_executor(data)


def build_executor(data: dict) -> ScriptedExecutor:
    default = data.get("default")
    executor = ScriptedExecutor(
        default_response=_parse_result(default) if default else None,
    )
    for index, rule in enumerate(data.get("rules") or []):
        if not isinstance(rule, dict):
            raise FixtureError(f"Rule {index} must be a mapping")
        outcome = _parse_outcome(rule, index)
        if "regex" in rule and "contains" in rule:
            raise FixtureError(f"Rule {index} has both 'regex' and 'contains'")
        if "regex" in rule:
            executor.set_regex_response(str(rule["regex"]), outcome)
        elif "contains" in rule:
            executor.set_response(str(rule["contains"]), outcome)
        else:
            raise FixtureError(f"Rule {index} needs 'regex' or 'contains'")
    return executor


def _parse_outcome(rule: dict, index: int) -> ExecutionResult | CommandFailedError:
    error = rule.get("error")
    if error is None:
        return _parse_result(rule)
    if not isinstance(error, dict):
        raise FixtureError(f"Rule {index}: 'error' must be a mapping")
    unknown = set(error) - _ERROR_FIELDS
    if unknown:
        raise FixtureError(f"Rule {index}: unknown error fields {sorted(unknown)}")
    return CommandFailedError(**error)


def _parse_result(data: dict) -> ExecutionResult:
    return ExecutionResult(
        stdout=str(data.get("stdout", "")),
        stderr=str(data.get("stderr", "")),
    )
