"""Configuration loading and validation."""

from src.config.app import (
    AppConfig,
    ConfigurationError,
    build_app_config,
    clear_config_cache,
    load_app_config,
    validate_configuration,
)
from src.config.environment import Environment, ToolConfig, ValidationResult, load_tool_config
from src.config.services import (
    ClaudeConfig,
    ConfigurationReport,
    GitHubConfig,
    JiraConfig,
    load_claude_config,
    load_github_config,
    load_jira_config,
    setup_instructions,
    validate_all_configurations,
)

__all__ = [
    "AppConfig",
    "ClaudeConfig",
    "ConfigurationError",
    "ConfigurationReport",
    "Environment",
    "GitHubConfig",
    "JiraConfig",
    "ToolConfig",
    "ValidationResult",
    "build_app_config",
    "clear_config_cache",
    "load_app_config",
    "load_claude_config",
    "load_github_config",
    "load_jira_config",
    "load_tool_config",
    "setup_instructions",
    "validate_all_configurations",
    "validate_configuration",
]
