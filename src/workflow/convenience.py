"""Convenience functions for wiring services and running the workflow."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from src.config.app import AppConfig, load_app_config
from src.execution.registry import Dependencies, get_dependencies
from src.services.base import OperationOptions
from src.services.claude import ClaudeService
from src.services.github import GitHubService
from src.services.jira import JiraService
from src.workflow.runner import AnalysisRunner, RunResult, TransitionCallback, publish_comment


@dataclass(frozen=True)
class Services:
    github: GitHubService
    jira: JiraService
    claude: ClaudeService


def operation_options(config: AppConfig, *, retries: bool = False) -> OperationOptions:
    """Per-call options from config. Retries stay off unless asked for."""
    return OperationOptions(
        timeout_ms=config.tool.timeout_ms,
        max_retries=config.tool.max_retries if retries else 0,
    )


def create_services(
    config: AppConfig,
    deps: Dependencies,
    options: OperationOptions | None = None,
) -> Services:
    """Create the three service clients sharing one dependency handle."""
    options = options or operation_options(config)
    return Services(
        github=GitHubService(deps, options=options),
        jira=JiraService(deps, ticket_pattern=config.jira.pattern, options=options),
        claude=ClaudeService(
            deps,
            cli_path=config.claude.cli_path,
            model=config.claude.model,
            temp_dir=config.tool.temp_dir,
            options=options,
        ),
    )


def create_runner(
    config: AppConfig,
    deps: Dependencies,
    *,
    auto_confirm: bool = False,
    retries: bool = False,
) -> AnalysisRunner:
    options = operation_options(config, retries=retries)
    services = create_services(config, deps, options)
    return AnalysisRunner(
        services.github,
        services.jira,
        services.claude,
        deps.prompter,
        repository=config.github.repository,
        temp_dir=config.tool.temp_dir,
        ticket_example=config.jira.example,
        auto_confirm=auto_confirm,
        options=options,
    )


async def run_analysis(
    pr_number: str,
    *,
    config: AppConfig | None = None,
    deps: Dependencies | None = None,
    auto_confirm: bool = False,
    retries: bool = False,
    on_transition: TransitionCallback | None = None,
) -> RunResult:
    """One-call analysis: build the runner from config and run it."""
    config = config or load_app_config()
    deps = deps or get_dependencies()
    runner = create_runner(config, deps, auto_confirm=auto_confirm, retries=retries)
    return await runner.run(pr_number, on_transition=on_transition)


async def run_publish(
    pr_number: str,
    comment_file: Path | str,
    *,
    config: AppConfig | None = None,
    deps: Dependencies | None = None,
    auto_confirm: bool = False,
    on_preview=None,
    on_transition: TransitionCallback | None = None,
) -> RunResult:
    config = config or load_app_config()
    deps = deps or get_dependencies()
    options = operation_options(config)
    return await publish_comment(
        GitHubService(deps, options=options),
        deps.prompter,
        pr_number,
        comment_file,
        repository=config.github.repository,
        auto_confirm=auto_confirm,
        on_preview=on_preview,
        on_transition=on_transition,
        options=options,
    )
