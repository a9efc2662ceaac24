"""Tests for the analyze-pr and comment-pr entry points."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.cli import analyze_pr, comment_pr
from src.cli.common import ToolAvailability, check_required_tools, print_status
from src.execution.types import CommandFailedError, ExecutionResult
from src.workflow.convenience import create_services

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def cli_env(env, monkeypatch):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    for key in ("JIRA_TICKET_PATTERN", "CLAUDE_MODEL", "CLAUDE_CLI_PATH", "TIMEOUT", "MAX_RETRIES"):
        monkeypatch.delenv(key, raising=False)
    return env


# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------


class TestArguments:
    def test_non_numeric_pr_number(self, cli_env, deps, executor, capsys):
        assert analyze_pr.main(["abc"], deps=deps) == 1
        assert "must be numeric" in capsys.readouterr().err
        assert executor.calls == []

    def test_missing_pr_number_is_usage_error(self, cli_env, deps):
        with pytest.raises(SystemExit) as exc_info:
            analyze_pr.main([], deps=deps)
        assert exc_info.value.code == 1

    def test_comment_requires_file(self, cli_env, deps):
        with pytest.raises(SystemExit) as exc_info:
            comment_pr.main(["393"], deps=deps)
        assert exc_info.value.code == 1

    def test_configuration_errors_reported(self, cli_env, deps, executor, monkeypatch, capsys):
        monkeypatch.delenv("GITHUB_REPOSITORY")
        assert analyze_pr.main(["393"], deps=deps) == 1
        err = capsys.readouterr().err
        assert "Configuration errors" in err
        assert "GITHUB_REPOSITORY" in err
        assert executor.calls == []

    def test_unreadable_fixture(self, cli_env, deps, tmp_path, capsys):
        assert analyze_pr.main(["393", "--replay", str(tmp_path / "nope.yaml")], deps=deps) == 1
        assert "Cannot load replay fixture" in capsys.readouterr().err

    def test_malformed_fixture(self, cli_env, deps, capsys):
        fixture = FIXTURES_DIR / "invalid_rule.yaml"
        assert analyze_pr.main(["393", "--replay", str(fixture)], deps=deps) == 1
        assert "Cannot load replay fixture" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# analyze-pr
# ---------------------------------------------------------------------------


class TestAnalyzePr:
    def test_replay_success(self, cli_env, deps, prompter, capsys):
        fixture = FIXTURES_DIR / "pr_393_success.yaml"

        code = analyze_pr.main(["393", "--replay", str(fixture)], deps=deps)

        out = capsys.readouterr().out
        assert code == 0
        assert "Ticket: TEST-2055" in out
        assert "Analysis posted as PR comment!" in out
        assert "https://github.com/acme/webapp/pull/393" in out
        assert prompter.questions == ["Post analysis as PR comment?"]

    def test_replay_ticket_missing(self, cli_env, deps, capsys):
        fixture = FIXTURES_DIR / "pr_393_ticket_missing.yaml"

        code = analyze_pr.main(["393", "--yes", "--replay", str(fixture)], deps=deps)

        err = capsys.readouterr().err
        assert code == 1
        assert "validating ticket" in err
        assert "[jira:ISSUE_NOT_FOUND]" in err

    def test_yes_skips_confirmation(self, cli_env, deps, prompter):
        fixture = FIXTURES_DIR / "pr_393_success.yaml"
        assert analyze_pr.main(["393", "-y", "--replay", str(fixture)], deps=deps) == 0
        assert prompter.questions == []

    def test_declining_still_succeeds(self, cli_env, deps, prompter, capsys):
        prompter.set_responses(["n"])
        fixture = FIXTURES_DIR / "pr_393_success.yaml"
        assert analyze_pr.main(["393", "--replay", str(fixture)], deps=deps) == 0
        assert "Analysis not posted" in capsys.readouterr().out

    def test_missing_gh_aborts_before_workflow(self, cli_env, deps, executor, capsys):
        executor.set_response("gh auth status", CommandFailedError(missing_binary=True))

        assert analyze_pr.main(["393"], deps=deps) == 1
        assert "GitHub CLI (gh) is required" in capsys.readouterr().err
        assert executor.calls_matching("gh pr") == []

    def test_missing_claude_only_warns(self, cli_env, deps, executor, capsys):
        executor.set_response("claude --version", CommandFailedError(missing_binary=True))
        executor.set_response("claude --print", CommandFailedError(missing_binary=True))
        executor.set_regex_response(
            r"^gh pr view 393 --json",
            ExecutionResult(stdout='{"title": "TEST-2055: fix"}'),
        )

        code = analyze_pr.main(["393", "--yes"], deps=deps)

        captured = capsys.readouterr()
        assert code == 1
        assert "Claude CLI not available" in captured.out
        assert "Prompt saved to:" in captured.out
        assert "running analysis" in captured.err

    def test_title_without_ticket(self, cli_env, deps, executor, capsys):
        executor.set_regex_response(
            r"^gh pr view 393 --json",
            ExecutionResult(stdout='{"title": "fix form validation"}'),
        )

        assert analyze_pr.main(["393"], deps=deps) == 1
        assert "No Jira ticket found in PR title" in capsys.readouterr().err
        assert executor.calls_matching("jira issue") == []


# ---------------------------------------------------------------------------
# comment-pr
# ---------------------------------------------------------------------------


class TestCommentPr:
    @pytest.fixture
    def comment(self, tmp_path):
        path = tmp_path / "analysis.md"
        path.write_text("## Analysis\n" + "\n".join(f"line {i}" for i in range(15)))
        return path

    def test_posts_after_preview(self, cli_env, deps, executor, comment, capsys):
        assert comment_pr.main(["393", str(comment)], deps=deps) == 0

        out = capsys.readouterr().out
        assert "File Preview:" in out
        assert "  1: ## Analysis" in out
        assert "... (6 more lines)" in out
        assert "Comment posted successfully!" in out
        assert executor.calls_matching("gh pr comment") == [
            f'gh pr comment 393 --body-file "{comment.resolve()}"'
        ]

    def test_declined_exits_nonzero(self, cli_env, deps, executor, prompter, comment, capsys):
        prompter.set_responses(["n"])
        assert comment_pr.main(["393", str(comment)], deps=deps) == 1
        assert "cancelled by user" in capsys.readouterr().out
        assert executor.calls_matching("gh pr comment") == []

    def test_missing_file(self, cli_env, deps, executor, tmp_path, capsys):
        assert comment_pr.main(["393", str(tmp_path / "missing.md")], deps=deps) == 1
        assert "does not exist" in capsys.readouterr().err
        assert executor.calls_matching("gh pr comment") == []

    def test_pr_not_found(self, cli_env, deps, executor, comment, capsys):
        executor.set_response("gh pr view", CommandFailedError(exit_code=1, stderr="Not Found"))
        assert comment_pr.main(["393", str(comment), "--yes"], deps=deps) == 1
        assert "[github:PR_NOT_FOUND]" in capsys.readouterr().err

    def test_missing_gh(self, cli_env, deps, executor, comment):
        executor.set_response("gh auth status", CommandFailedError(missing_binary=True))
        assert comment_pr.main(["393", str(comment)], deps=deps) == 1
        assert executor.calls == ["gh auth status"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    async def test_probe_failure_counts_as_unavailable(self, app_config, deps, executor):
        executor.set_response("jira me", CommandFailedError(exit_code=1, stderr="authentication failed"))

        tools = await check_required_tools(create_services(app_config, deps))

        assert tools == ToolAvailability(github=True, jira=False, claude=True)
        assert tools.all_required

    async def test_gh_is_the_only_required_tool(self, app_config, deps, executor):
        executor.set_response("gh auth status", CommandFailedError(missing_binary=True))
        tools = await check_required_tools(create_services(app_config, deps))
        assert not tools.all_required

    def test_print_status_plain_when_not_a_tty(self, capsys):
        print_status("red", "hello")
        assert capsys.readouterr().out == "hello\n"
