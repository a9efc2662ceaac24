"""Protocol definitions for the execution and interactive-input seams."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from src.execution.types import ExecutionResult


@runtime_checkable
class CommandExecutor(Protocol):
    async def execute(
        self, command: str, *, timeout_ms: int | None = None
    ) -> ExecutionResult: ...


@runtime_checkable
class Prompter(Protocol):
    async def confirm(self, question: str, default: bool = False) -> bool: ...
