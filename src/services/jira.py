"""Jira operations, driven through the ``jira`` CLI."""

from __future__ import annotations

import re

from src.services.base import OperationOptions, ServiceClient
from src.services.errors import JiraErrorKind, ServiceError

_ISSUE_KEY = re.compile(r"[A-Z][A-Z0-9]*-[0-9]+")


def default_ticket_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(prefix)}-\d+")


def extract_ticket(title: str, pattern: str | re.Pattern[str]) -> str | None:
    """Return the first ticket id in ``title``, or None when there is none.

    Pure and local. Re-extracting from a returned id yields the same id.
    """
    match = re.search(pattern, title)
    return match.group(0) if match else None


class JiraService(ServiceClient):
    service = "jira"

    def __init__(
        self,
        deps,
        *,
        ticket_pattern: str | re.Pattern[str] | None = None,
        options: OperationOptions | None = None,
    ) -> None:
        super().__init__(deps, options=options)
        self.ticket_pattern = ticket_pattern

    async def check_cli(self, options: OperationOptions | None = None) -> bool:
        try:
            await self._run("jira me", options)
        except ServiceError as error:
            if error.kind is JiraErrorKind.CLI_NOT_FOUND:
                return False
            raise
        return True

    def extract_ticket(self, title: str) -> str | None:
        if self.ticket_pattern is None:
            raise ValueError("JiraService has no ticket pattern configured")
        return extract_ticket(title, self.ticket_pattern)

    async def validate_ticket(self, ticket_id: str, options: OperationOptions | None = None) -> bool:
        self._require_key(ticket_id)
        await self._run(f"jira issue view {ticket_id} > /dev/null 2>&1", options)
        return True

    async def gather_ticket_data(self, ticket_id: str, options: OperationOptions | None = None) -> str:
        self._require_key(ticket_id)
        result = await self._run(f"jira issue view {ticket_id}", options)
        return result.stdout

    def _require_key(self, ticket_id: str) -> None:
        if not _ISSUE_KEY.fullmatch(ticket_id):
            raise ServiceError(
                self.service,
                JiraErrorKind.INVALID_FORMAT,
                f"Invalid Jira issue key: {ticket_id!r}",
                {"ticket_id": ticket_id},
            )
