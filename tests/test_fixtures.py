"""Tests for YAML replay fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.execution.fixtures import FixtureError, build_executor, load_replay_fixture
from src.execution.types import CommandFailedError

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestLoadReplayFixture:
    async def test_success_fixture_answers_pr_commands(self):
        executor = load_replay_fixture(FIXTURES_DIR / "pr_393_success.yaml")

        meta = await executor.execute(
            "gh pr view 393 --json title,author,state,additions,deletions,url"
        )
        view = await executor.execute("gh pr view 393")

        assert '"TEST-2055: fix form validation"' in meta.stdout
        assert view.stdout.startswith("title:")

    async def test_unmatched_command_gets_default(self):
        executor = load_replay_fixture(FIXTURES_DIR / "pr_393_success.yaml")
        assert (await executor.execute("gh auth status")).stdout == "mock response"

    async def test_error_rule_raises(self):
        executor = load_replay_fixture(FIXTURES_DIR / "pr_393_ticket_missing.yaml")
        with pytest.raises(CommandFailedError) as exc_info:
            await executor.execute("jira issue view TEST-2055")
        assert exc_info.value.stderr == "Issue not found: TEST-2055"
        assert exc_info.value.exit_code == 1
        assert exc_info.value.command == "jira issue view TEST-2055"

    def test_rule_without_matcher_rejected(self):
        with pytest.raises(FixtureError, match="needs 'regex' or 'contains'"):
            load_replay_fixture(FIXTURES_DIR / "invalid_rule.yaml")

    def test_invalid_yaml_rejected(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("rules: [unclosed\n")
        with pytest.raises(FixtureError, match="Invalid YAML"):
            load_replay_fixture(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(FixtureError, match="must be a mapping"):
            load_replay_fixture(path)

    def test_missing_file_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            load_replay_fixture(tmp_path / "nope.yaml")


class TestBuildExecutor:
    def test_both_matchers_rejected(self):
        with pytest.raises(FixtureError, match="both"):
            build_executor({"rules": [{"regex": "a", "contains": "b", "stdout": "x"}]})

    def test_unknown_error_field_rejected(self):
        with pytest.raises(FixtureError, match="unknown error fields"):
            build_executor({"rules": [{"contains": "a", "error": {"code": "ENOENT"}}]})

    async def test_missing_binary_error(self):
        executor = build_executor(
            {"rules": [{"contains": "jira", "error": {"missing_binary": True}}]}
        )
        with pytest.raises(CommandFailedError) as exc_info:
            await executor.execute("jira me")
        assert exc_info.value.missing_binary is True

    async def test_empty_fixture_uses_builtin_default(self):
        executor = build_executor({})
        assert (await executor.execute("anything")).stdout == "mock response"
