"""Service clients for the external command-line tools."""

from src.services.base import OperationOptions, ServiceClient, gather_fail_fast
from src.services.claude import AnalysisRequest, AnalysisResponse, ClaudeService, VersionInfo
from src.services.classifier import classify_failure
from src.services.errors import (
    ClaudeErrorKind,
    GitHubErrorKind,
    JiraErrorKind,
    ServiceError,
    format_error,
)
from src.services.github import GitHubService, PRData, PRMetadata, validate_pr_number
from src.services.jira import JiraService, default_ticket_pattern, extract_ticket

__all__ = [
    "AnalysisRequest",
    "AnalysisResponse",
    "ClaudeErrorKind",
    "ClaudeService",
    "GitHubErrorKind",
    "GitHubService",
    "JiraErrorKind",
    "JiraService",
    "OperationOptions",
    "PRData",
    "PRMetadata",
    "ServiceClient",
    "ServiceError",
    "VersionInfo",
    "classify_failure",
    "default_ticket_pattern",
    "extract_ticket",
    "format_error",
    "gather_fail_fast",
    "validate_pr_number",
]
