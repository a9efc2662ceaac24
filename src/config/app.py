"""Application configuration assembled from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from src.config.environment import ToolConfig, ValidationResult, load_tool_config
from src.config.services import (
    ClaudeConfig,
    GitHubConfig,
    JiraConfig,
    load_claude_config,
    load_github_config,
    load_jira_config,
)

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when required settings are missing or malformed.

    Carries every problem found, not just the first.
    """

    def __init__(self, errors: list[str], warnings: list[str] | None = None) -> None:
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__("Configuration errors:\n" + "\n".join(f"  - {e}" for e in self.errors))


@dataclass(frozen=True)
class AppConfig:
    github: GitHubConfig
    jira: JiraConfig
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    tool: ToolConfig = field(default_factory=ToolConfig)
    warnings: tuple[str, ...] = ()


def validate_configuration(env: Mapping[str, str]) -> ValidationResult:
    """Collect every error and warning without raising."""
    _, tool = load_tool_config(env)
    _, github = load_github_config(env)
    _, jira = load_jira_config(env)
    _, claude = load_claude_config(env)
    return github.merge(jira, claude, tool)


def build_app_config(env: Mapping[str, str]) -> AppConfig:
    tool, tool_result = load_tool_config(env)
    github, github_result = load_github_config(env)
    jira, jira_result = load_jira_config(env)
    claude, claude_result = load_claude_config(env)

    result = github_result.merge(jira_result, claude_result, tool_result)
    if not result.is_valid:
        raise ConfigurationError(result.errors, result.warnings)

    for warning in result.warnings:
        logger.warning(warning, extra={"event": "config.warning"})

    return AppConfig(
        github=github,
        jira=jira,
        claude=claude,
        tool=tool,
        warnings=tuple(result.warnings),
    )


_cached: AppConfig | None = None


def load_app_config(env: Mapping[str, str] | None = None, *, force_reload: bool = False) -> AppConfig:
    """Build the configuration once and reuse it for the life of the process."""
    global _cached
    if _cached is None or force_reload:
        _cached = build_app_config(os.environ if env is None else env)
    return _cached


def clear_config_cache() -> None:
    global _cached
    _cached = None
