"""GitHub operations, driven through the ``gh`` CLI."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from src.services.base import OperationOptions, ServiceClient, gather_fail_fast
from src.services.errors import GitHubErrorKind, ServiceError

_PR_NUMBER = re.compile(r"[0-9]+")

PR_JSON_FIELDS = "title,author,state,additions,deletions,url"


def validate_pr_number(pr_number: str) -> bool:
    return bool(_PR_NUMBER.fullmatch(pr_number))


@dataclass(frozen=True)
class PRMetadata:
    title: str
    author: str
    state: str
    additions: int
    deletions: int
    url: str

    @classmethod
    def from_json(cls, data: dict) -> PRMetadata:
        author = data.get("author") or {}
        if isinstance(author, dict):
            author = author.get("login", "")
        return cls(
            title=str(data.get("title") or ""),
            author=str(author),
            state=str(data.get("state") or ""),
            additions=int(data.get("additions") or 0),
            deletions=int(data.get("deletions") or 0),
            url=str(data.get("url") or ""),
        )


@dataclass(frozen=True)
class PRData:
    view: str
    diff: str
    metadata: PRMetadata


class GitHubService(ServiceClient):
    service = "github"

    async def check_cli(self, options: OperationOptions | None = None) -> bool:
        """True when ``gh`` is installed. Other failures (e.g. auth) propagate."""
        try:
            await self._run("gh auth status", options)
        except ServiceError as error:
            if error.kind is GitHubErrorKind.CLI_NOT_FOUND:
                return False
            raise
        return True

    async def validate_pr(self, pr_number: str, options: OperationOptions | None = None) -> bool:
        self._require_pr_number(pr_number)
        await self._run(f"gh pr view {pr_number} > /dev/null 2>&1", options)
        return True

    async def gather_pr_data(
        self, pr_number: str, options: OperationOptions | None = None
    ) -> PRData:
        """Fetch view, diff and JSON metadata concurrently.

        The first failing call fails the whole gather and cancels the others.
        """
        self._require_pr_number(pr_number)
        json_command = f"gh pr view {pr_number} --json {PR_JSON_FIELDS}"
        view, diff, meta = await gather_fail_fast(
            self._run(f"gh pr view {pr_number}", options),
            self._run(f"gh pr diff {pr_number}", options),
            self._run(json_command, options),
        )
        try:
            data = json.loads(meta.stdout)
        except json.JSONDecodeError as e:
            raise ServiceError(
                self.service,
                GitHubErrorKind.INVALID_INPUT,
                f"Could not parse PR metadata: {e}",
                {"command": json_command, "stdout": meta.stdout},
            ) from e
        if not isinstance(data, dict):
            raise ServiceError(
                self.service,
                GitHubErrorKind.INVALID_INPUT,
                "PR metadata is not a JSON object",
                {"command": json_command, "stdout": meta.stdout},
            )
        try:
            metadata = PRMetadata.from_json(data)
        except (TypeError, ValueError) as e:
            raise ServiceError(
                self.service,
                GitHubErrorKind.INVALID_INPUT,
                f"PR metadata has an unexpected field value: {e}",
                {"command": json_command, "stdout": meta.stdout},
            ) from e
        return PRData(view=view.stdout, diff=diff.stdout, metadata=metadata)

    async def post_pr_comment(
        self, pr_number: str, comment_file: str, options: OperationOptions | None = None
    ) -> bool:
        self._require_pr_number(pr_number)
        await self._run(f'gh pr comment {pr_number} --body-file "{comment_file}"', options)
        return True

    def _require_pr_number(self, pr_number: str) -> None:
        if not validate_pr_number(pr_number):
            raise ServiceError(
                self.service,
                GitHubErrorKind.INVALID_INPUT,
                f"PR number must be numeric, got {pr_number!r}",
                {"pr_number": pr_number},
            )
