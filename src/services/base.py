"""Shared plumbing for the per-tool service clients."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace

from src.execution.registry import Dependencies
from src.execution.types import ExecutionResult
from src.services.classifier import classify_failure
from src.services.errors import ServiceError


@dataclass(frozen=True)
class OperationOptions:
    """Per-call knobs. Retries are opt-in and only cover transient kinds."""

    timeout_ms: int | None = None
    max_retries: int = 0
    retry_delay_ms: int = 1000

    def with_overrides(self, **changes) -> OperationOptions:
        return replace(self, **changes)


class ServiceClient:
    """Runs commands for one tool and classifies every failure.

    Subclasses set ``service`` to the taxonomy name used by the classifier.
    Nothing unclassified escapes ``_run``.
    """

    service: str = ""

    def __init__(self, deps: Dependencies, *, options: OperationOptions | None = None) -> None:
        self._deps = deps
        self.options = options or OperationOptions()
        self._logger = logging.getLogger(f"src.services.{self.service}")

    @property
    def deps(self) -> Dependencies:
        return self._deps

    async def _run(self, command: str, options: OperationOptions | None = None) -> ExecutionResult:
        opts = options or self.options
        attempt = 0
        while True:
            try:
                return await self._run_once(command, opts)
            except ServiceError as error:
                if not error.is_transient or attempt >= opts.max_retries:
                    raise
                delay_ms = opts.retry_delay_ms * (2 ** attempt)
                attempt += 1
                self._logger.warning(
                    "retrying command",
                    extra={
                        "event": f"{self.service}.command.retry",
                        "command": command,
                        "kind": error.kind.value,
                        "attempt": attempt,
                        "max_retries": opts.max_retries,
                        "delay_ms": delay_ms,
                    },
                )
                await asyncio.sleep(delay_ms / 1000)

    async def _run_once(self, command: str, opts: OperationOptions) -> ExecutionResult:
        self._logger.debug(
            "running command",
            extra={"event": f"{self.service}.command.start", "command": command},
        )
        try:
            return await self._deps.executor.execute(command, timeout_ms=opts.timeout_ms)
        except ServiceError:
            raise
        except Exception as failure:
            error = classify_failure(
                self.service, failure, command=command, timeout_ms=opts.timeout_ms
            )
            self._logger.error(
                error.message,
                extra={
                    "event": f"{self.service}.command.error",
                    "command": command,
                    "kind": error.kind.value,
                    "stderr": error.stderr,
                },
            )
            raise error from failure


async def gather_fail_fast(*aws):
    """Await all of ``aws`` concurrently; on the first failure cancel the rest.

    Results come back in argument order. The first failure (in argument
    order among the finished tasks) is re-raised once siblings are reaped.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for task in tasks:
            if task in done and not task.cancelled() and task.exception() is not None:
                raise task.exception()
        return [task.result() for task in tasks]
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
