"""Per-tool configuration: GitHub, Jira and Claude settings."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from src.config.environment import ValidationResult

_REPOSITORY = re.compile(r"^[A-Za-z0-9._-]+/[A-Za-z0-9._-]+$")
_PREFIX = re.compile(r"^[A-Z][A-Z0-9]*$")

DEFAULT_CLAUDE_CLI = "claude"


@dataclass(frozen=True)
class GitHubConfig:
    repository: str
    owner: str
    repo: str

    @property
    def url(self) -> str:
        return f"https://github.com/{self.repository}"

    def pr_url(self, pr_number: str) -> str:
        return f"{self.url}/pull/{pr_number}"


@dataclass(frozen=True)
class JiraConfig:
    prefix: str
    pattern: re.Pattern[str]
    example: str
    server_url: str | None = None
    user_email: str | None = None


@dataclass(frozen=True)
class ClaudeConfig:
    cli_path: str = DEFAULT_CLAUDE_CLI
    model: str | None = None


def load_github_config(env: Mapping[str, str]) -> tuple[GitHubConfig | None, ValidationResult]:
    result = ValidationResult()
    repository = (env.get("GITHUB_REPOSITORY") or "").strip()
    if not repository:
        result.error("GITHUB_REPOSITORY is required (format: owner/repo)")
        return None, result
    if not _REPOSITORY.match(repository):
        result.error(f"GITHUB_REPOSITORY must be in 'owner/repo' format, got {repository!r}")
        return None, result
    owner, repo = repository.split("/", 1)
    return GitHubConfig(repository=repository, owner=owner, repo=repo), result


def load_jira_config(env: Mapping[str, str]) -> tuple[JiraConfig | None, ValidationResult]:
    result = ValidationResult()

    prefix = (env.get("JIRA_TICKET_PREFIX") or "").strip()
    if not prefix:
        result.error("JIRA_TICKET_PREFIX is required (e.g. PROJ, DEV)")
    elif not _PREFIX.match(prefix):
        result.error(
            "JIRA_TICKET_PREFIX must be uppercase alphanumeric and start with a letter, "
            f"got {prefix!r}"
        )

    server_url = (env.get("JIRA_SERVER_URL") or "").strip() or None
    if server_url and not server_url.startswith("https://"):
        result.warn(f"JIRA_SERVER_URL must start with https://, got {server_url!r}; ignoring")
        server_url = None

    user_email = (env.get("JIRA_USER_EMAIL") or "").strip() or None
    if user_email and "@" not in user_email:
        result.warn(f"JIRA_USER_EMAIL must be a valid email address, got {user_email!r}; ignoring")
        user_email = None

    custom = (env.get("JIRA_TICKET_PATTERN") or "").strip()
    pattern = None
    if custom:
        try:
            pattern = re.compile(custom)
        except re.error as e:
            result.warn(f"JIRA_TICKET_PATTERN is not a valid regex ({e}); using the default pattern")

    if not result.is_valid:
        return None, result

    return JiraConfig(
        prefix=prefix,
        pattern=pattern or re.compile(rf"{re.escape(prefix)}-\d+"),
        example=f"{prefix}-1234",
        server_url=server_url,
        user_email=user_email,
    ), result


def load_claude_config(env: Mapping[str, str]) -> tuple[ClaudeConfig, ValidationResult]:
    result = ValidationResult()
    cli_path = (env.get("CLAUDE_CLI_PATH") or "").strip() or DEFAULT_CLAUDE_CLI
    model = (env.get("CLAUDE_MODEL") or "").strip() or None
    if model and any(ch.isspace() for ch in model):
        result.warn(f"CLAUDE_MODEL must not contain whitespace, got {model!r}; using the CLI default")
        model = None
    return ClaudeConfig(cli_path=cli_path, model=model), result


@dataclass(frozen=True)
class ConfigurationReport:
    github: bool
    jira: bool
    claude: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...]

    @property
    def is_valid(self) -> bool:
        return self.github and self.jira and self.claude


def validate_all_configurations(env: Mapping[str, str]) -> ConfigurationReport:
    """Validate every service at once and report per-service validity."""
    _, github = load_github_config(env)
    _, jira = load_jira_config(env)
    _, claude = load_claude_config(env)
    merged = github.merge(jira, claude)
    return ConfigurationReport(
        github=github.is_valid,
        jira=jira.is_valid,
        claude=claude.is_valid,
        errors=tuple(merged.errors),
        warnings=tuple(merged.warnings),
    )


def setup_instructions() -> str:
    return """\
Required environment variables:
  export GITHUB_REPOSITORY=owner/repo            # GitHub repository
  export JIRA_TICKET_PREFIX=PROJ                 # Jira project prefix

Optional:
  export JIRA_TICKET_PATTERN="PROJ-\\d+"          # Override the ticket pattern
  export JIRA_SERVER_URL=https://your-company.atlassian.net
  export JIRA_USER_EMAIL=your.email@company.com
  export CLAUDE_MODEL=model-name                 # Model passed to the Claude CLI
  export CLAUDE_CLI_PATH=claude                  # Claude CLI executable
  export TEMP_DIR=./temp                         # Where analysis files are written
  export MAX_RETRIES=3                           # 1-10
  export TIMEOUT=30000                           # Per command, in milliseconds
  export DEBUG=true                              # Verbose logging

Values can also be placed in a .env file (see .env.example).

Tools:
  gh    https://cli.github.com/  (run: gh auth login)
  jira  https://github.com/ankitpokhrel/jira-cli  (run: jira init)
  claude  npm install -g @anthropic-ai/claude-code
"""
