"""Closed error taxonomies for the external tools."""

from __future__ import annotations

import json
from enum import Enum


class GitHubErrorKind(Enum):
    CLI_NOT_FOUND = "CLI_NOT_FOUND"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    PR_NOT_FOUND = "PR_NOT_FOUND"
    REPOSITORY_NOT_FOUND = "REPOSITORY_NOT_FOUND"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_INPUT = "INVALID_INPUT"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class JiraErrorKind(Enum):
    CLI_NOT_FOUND = "CLI_NOT_FOUND"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    ISSUE_NOT_FOUND = "ISSUE_NOT_FOUND"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_FORMAT = "INVALID_FORMAT"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ClaudeErrorKind(Enum):
    CLI_NOT_FOUND = "CLI_NOT_FOUND"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TOKEN_LIMIT_EXCEEDED = "TOKEN_LIMIT_EXCEEDED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ErrorKind = GitHubErrorKind | JiraErrorKind | ClaudeErrorKind

# Kinds worth retrying when a caller opts into retries.
TRANSIENT_KINDS = frozenset(
    {"NETWORK_ERROR", "RATE_LIMIT_ERROR", "SERVER_ERROR", "SERVICE_UNAVAILABLE"}
)


class ServiceError(Exception):
    """A classified failure from one external tool.

    One class for every service: ``service`` names the tool and ``kind`` is a
    member of that tool's closed enum. Callers branch on ``kind``.
    """

    def __init__(
        self,
        service: str,
        kind: ErrorKind,
        message: str,
        details: dict | None = None,
    ) -> None:
        self.service = service
        self.kind = kind
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def command(self) -> str | None:
        return self.details.get("command")

    @property
    def stderr(self) -> str | None:
        return self.details.get("stderr")

    @property
    def is_fatal(self) -> bool:
        """Missing binaries need operator intervention; retrying cannot help."""
        return self.kind.name == "CLI_NOT_FOUND"

    @property
    def is_transient(self) -> bool:
        return self.kind.name in TRANSIENT_KINDS

    def to_dict(self) -> dict:
        return {
            "service": self.service,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }

    def format(self) -> str:
        details = f" | Details: {json.dumps(self.details, default=str)}" if self.details else ""
        return f"[{self.service}:{self.kind.value}] {self.message}{details}"

    def __repr__(self) -> str:
        return f"ServiceError({self.service!r}, {self.kind}, {self.message!r})"


def format_error(error: BaseException) -> str:
    """One-line rendering for logs and CLI output."""
    if isinstance(error, ServiceError):
        return error.format()
    return f"[{type(error).__name__}] {error}"
