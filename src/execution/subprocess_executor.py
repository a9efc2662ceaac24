"""Production executor that runs commands in a child shell process."""

from __future__ import annotations

import asyncio
import errno
import logging
import os
import signal

from src.execution.types import CommandFailedError, ExecutionResult

# POSIX shells exit with 127 when the command itself cannot be found.
SHELL_COMMAND_NOT_FOUND = 127

DEFAULT_TIMEOUT_MS = 30_000


class SubprocessExecutor:
    """Runs one command at a time through ``/bin/sh`` and waits for it.

    Commands are single-line strings that may use simple redirection
    (``< file``, ``> /dev/null 2>&1``), so they go through the shell rather
    than ``create_subprocess_exec``.

    Each shell leads its own process group so a timeout kills everything
    it started.
    """

    def __init__(self, default_timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        self._default_timeout_ms = default_timeout_ms
        self._logger = logging.getLogger(__name__)

    async def execute(
        self, command: str, *, timeout_ms: int | None = None
    ) -> ExecutionResult:
        timeout_ms = timeout_ms or self._default_timeout_ms
        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as error:
            raise CommandFailedError(
                command,
                missing_binary=error.errno == errno.ENOENT,
                stderr=str(error),
            ) from error

        try:
            async with asyncio.timeout(timeout_ms / 1000):
                stdout, stderr = await proc.communicate()
        except TimeoutError as error:
            await self._terminate(proc, command)
            raise CommandFailedError(
                command, timed_out=True, timeout_ms=timeout_ms
            ) from error

        out = stdout.decode(errors="replace")
        err = stderr.decode(errors="replace")
        returncode = proc.returncode or 0

        if returncode == 0:
            return ExecutionResult(stdout=out, stderr=err, exit_code=0)

        raise CommandFailedError(
            command,
            exit_code=returncode,
            stdout=out,
            stderr=err,
            missing_binary=returncode == SHELL_COMMAND_NOT_FOUND,
            signal=-returncode if returncode < 0 else None,
        )

    async def _terminate(self, proc: asyncio.subprocess.Process, command: str) -> None:
        # A background child can outlive the shell and still hold the pipes.
        self._logger.warning(
            "killing timed out command",
            extra={"event": "execution.timeout.kill", "command": command, "pid": proc.pid},
        )
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        if proc.returncode is None:
            await proc.wait()
