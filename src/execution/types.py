"""Data types for the command execution seam."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExecutionResult:
    stdout: str
    stderr: str = ""
    exit_code: int = 0


class CommandFailedError(Exception):
    """Raw failure from an executor, before any service classification.

    Carries the signals the classifier needs: whether the binary was
    missing, whether the process timed out or was killed, and whatever
    stdout/stderr was captured.
    """

    def __init__(
        self,
        command: str = "",
        *,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
        missing_binary: bool = False,
        timed_out: bool = False,
        signal: int | None = None,
        timeout_ms: int | None = None,
        message: str | None = None,
    ) -> None:
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.missing_binary = missing_binary
        self.timed_out = timed_out
        self.signal = signal
        self.timeout_ms = timeout_ms
        self._message = message
        super().__init__(message or self._default_message())

    def _default_message(self) -> str:
        if self.missing_binary:
            return f"Command not found: {self.command}"
        if self.timed_out:
            return f"Command timed out after {self.timeout_ms}ms: {self.command}"
        if self.signal is not None:
            return f"Command killed by signal {self.signal}: {self.command}"
        details = self.stderr.strip() or self.stdout.strip() or "No command output"
        return f"Command failed ({self.exit_code}): {self.command}\n{details}"

    @property
    def killed(self) -> bool:
        return self.timed_out or self.signal is not None

    def with_command(self, command: str) -> CommandFailedError:
        """Return a copy bound to ``command`` (used by scripted executors)."""
        return CommandFailedError(
            command,
            exit_code=self.exit_code,
            stdout=self.stdout,
            stderr=self.stderr,
            missing_binary=self.missing_binary,
            timed_out=self.timed_out,
            signal=self.signal,
            timeout_ms=self.timeout_ms,
            message=self._message,
        )
