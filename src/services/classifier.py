"""Reduce raw execution failures to one classified ``ServiceError``.

Each tool has a taxonomy: its kind enum, user-facing messages, and an
ordered table of stderr rules. Classification checks, first match wins:

1. missing binary
2. timeout or kill signal
3. stderr substrings, in table order (case-sensitive)
4. anything else is ``UNKNOWN_ERROR``
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from src.services.errors import (
    ClaudeErrorKind,
    ErrorKind,
    GitHubErrorKind,
    JiraErrorKind,
    ServiceError,
)

KindResolver = Callable[[str], ErrorKind]

_PR_SUBCOMMANDS = ("pr view", "pr diff", "pr comment")


@dataclass(frozen=True)
class StderrRule:
    needles: tuple[str, ...]
    kind: ErrorKind | KindResolver
    require_all: bool = False

    def matches(self, stderr: str) -> bool:
        if self.require_all:
            return all(needle in stderr for needle in self.needles)
        return any(needle in stderr for needle in self.needles)

    def resolve(self, command: str) -> ErrorKind:
        return self.kind(command) if callable(self.kind) else self.kind


@dataclass(frozen=True)
class ServiceTaxonomy:
    name: str
    display_name: str
    kinds: type
    rules: tuple[StderrRule, ...]
    messages: dict[str, str] = field(default_factory=dict)

    def kind(self, name: str) -> ErrorKind:
        return self.kinds[name]

    def message_for(self, kind: ErrorKind) -> str:
        return self.messages.get(kind.name, f"{self.display_name} command failed")


def _github_not_found(command: str) -> GitHubErrorKind:
    if any(sub in command for sub in _PR_SUBCOMMANDS):
        return GitHubErrorKind.PR_NOT_FOUND
    return GitHubErrorKind.REPOSITORY_NOT_FOUND


GITHUB = ServiceTaxonomy(
    name="github",
    display_name="GitHub CLI",
    kinds=GitHubErrorKind,
    rules=(
        StderrRule(("Not Found", "not found", "does not exist", "could not resolve"), _github_not_found),
        StderrRule(("authentication", "unauthorized"), GitHubErrorKind.AUTHENTICATION_ERROR),
        StderrRule(("rate limit",), GitHubErrorKind.RATE_LIMIT_ERROR),
        StderrRule(("permission denied", "forbidden"), GitHubErrorKind.PERMISSION_DENIED),
        StderrRule(("server error", "internal error"), GitHubErrorKind.SERVER_ERROR),
    ),
    messages={
        "CLI_NOT_FOUND": "GitHub CLI (gh) not found. Please install GitHub CLI",
        "PR_NOT_FOUND": "Pull request not found or not accessible",
        "REPOSITORY_NOT_FOUND": "Repository not found or not accessible",
        "AUTHENTICATION_ERROR": "GitHub authentication failed",
        "RATE_LIMIT_ERROR": "GitHub API rate limit exceeded",
        "PERMISSION_DENIED": "GitHub permission denied",
        "SERVER_ERROR": "GitHub server error",
    },
)

JIRA = ServiceTaxonomy(
    name="jira",
    display_name="Jira CLI",
    kinds=JiraErrorKind,
    rules=(
        StderrRule(("Project not found",), JiraErrorKind.PROJECT_NOT_FOUND),
        StderrRule(("Issue not found", "not found", "does not exist"), JiraErrorKind.ISSUE_NOT_FOUND),
        StderrRule(("authentication", "unauthorized"), JiraErrorKind.AUTHENTICATION_ERROR),
        StderrRule(("rate limit",), JiraErrorKind.RATE_LIMIT_ERROR),
        StderrRule(("permission denied", "forbidden"), JiraErrorKind.PERMISSION_DENIED),
        StderrRule(("server error", "internal error"), JiraErrorKind.SERVER_ERROR),
        StderrRule(("invalid issue format",), JiraErrorKind.INVALID_FORMAT),
    ),
    messages={
        "CLI_NOT_FOUND": "Jira CLI not found. Please install jira-cli",
        "PROJECT_NOT_FOUND": "Jira project not found or not accessible",
        "ISSUE_NOT_FOUND": "Jira issue not found or not accessible",
        "AUTHENTICATION_ERROR": "Jira authentication failed",
        "RATE_LIMIT_ERROR": "Jira API rate limit exceeded",
        "PERMISSION_DENIED": "Jira permission denied",
        "SERVER_ERROR": "Jira server error",
        "INVALID_FORMAT": "Invalid Jira issue format",
    },
)

CLAUDE = ServiceTaxonomy(
    name="claude",
    display_name="Claude CLI",
    kinds=ClaudeErrorKind,
    rules=(
        StderrRule(("rate limit",), ClaudeErrorKind.RATE_LIMIT_ERROR),
        StderrRule(("authentication", "unauthorized"), ClaudeErrorKind.AUTHENTICATION_ERROR),
        StderrRule(("model", "not found"), ClaudeErrorKind.MODEL_NOT_FOUND, require_all=True),
        StderrRule(("prompt is too long", "token limit"), ClaudeErrorKind.TOKEN_LIMIT_EXCEEDED),
        StderrRule(("overloaded", "service unavailable"), ClaudeErrorKind.SERVICE_UNAVAILABLE),
        StderrRule(("permission denied", "forbidden"), ClaudeErrorKind.PERMISSION_DENIED),
    ),
    messages={
        "CLI_NOT_FOUND": "Claude CLI not found. Please install @anthropic-ai/claude-code",
        "RATE_LIMIT_ERROR": "Claude API rate limit exceeded",
        "AUTHENTICATION_ERROR": "Claude authentication failed",
        "MODEL_NOT_FOUND": "Specified Claude model not available",
        "TOKEN_LIMIT_EXCEEDED": "Prompt exceeds the Claude token limit",
        "SERVICE_UNAVAILABLE": "Claude service is unavailable",
        "PERMISSION_DENIED": "Claude permission denied",
    },
)

TAXONOMIES: dict[str, ServiceTaxonomy] = {t.name: t for t in (GITHUB, JIRA, CLAUDE)}


def get_taxonomy(service: str) -> ServiceTaxonomy:
    try:
        return TAXONOMIES[service]
    except KeyError:
        raise ValueError(f"Unknown service: {service!r}") from None


def classify_failure(
    service: str,
    failure: BaseException,
    *,
    command: str | None = None,
    timeout_ms: int | None = None,
) -> ServiceError:
    """Classify ``failure`` raised while running a ``service`` command.

    Accepts the executor's ``CommandFailedError`` as well as bare
    ``FileNotFoundError`` / ``TimeoutError``. A ``ServiceError`` is returned
    unchanged.
    """
    if isinstance(failure, ServiceError):
        return failure

    taxonomy = get_taxonomy(service)
    command = command or getattr(failure, "command", "") or ""
    stderr = getattr(failure, "stderr", "") or ""

    if isinstance(failure, FileNotFoundError) or getattr(failure, "missing_binary", False):
        kind = taxonomy.kind("CLI_NOT_FOUND")
        return _build(taxonomy, kind, taxonomy.message_for(kind), command, stderr)

    timed_out = isinstance(failure, TimeoutError) or getattr(failure, "timed_out", False)
    signal = getattr(failure, "signal", None)
    if timed_out or signal is not None:
        window = getattr(failure, "timeout_ms", None) or timeout_ms
        if timed_out:
            message = f"{taxonomy.display_name} command timed out after {window}ms"
        else:
            message = f"{taxonomy.display_name} command killed by signal {signal}"
        details = {"command": command, "timeout_ms": window}
        if signal is not None:
            details["signal"] = signal
        if stderr:
            details["stderr"] = stderr
        return ServiceError(taxonomy.name, taxonomy.kind("NETWORK_ERROR"), message, details)

    for rule in taxonomy.rules:
        if rule.matches(stderr):
            kind = rule.resolve(command)
            return _build(taxonomy, kind, taxonomy.message_for(kind), command, stderr)

    details = {"command": command, "stderr": stderr}
    exit_code = getattr(failure, "exit_code", None)
    if exit_code is not None:
        details["exit_code"] = exit_code
    return ServiceError(
        taxonomy.name,
        taxonomy.kind("UNKNOWN_ERROR"),
        f"{taxonomy.display_name} command failed: {failure}",
        details,
    )


def _build(
    taxonomy: ServiceTaxonomy,
    kind: ErrorKind,
    message: str,
    command: str,
    stderr: str,
) -> ServiceError:
    details = {"command": command}
    if stderr:
        details["stderr"] = stderr
    return ServiceError(taxonomy.name, kind, message, details)
