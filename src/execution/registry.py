"""Dependency handle for the execution and interactive-input seams.

Service clients and runners receive a ``Dependencies`` value explicitly.
Entry points that are not handed one fall back to the process-wide default
binding, which test setup may override with ``set_dependencies`` and must
restore with ``reset_dependencies``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from src.execution.prompter import ConsolePrompter
from src.execution.protocol import CommandExecutor, Prompter
from src.execution.subprocess_executor import SubprocessExecutor


@dataclass(frozen=True)
class Dependencies:
    executor: CommandExecutor
    prompter: Prompter

    def replace(self, **overrides) -> Dependencies:
        unknown = set(overrides) - {"executor", "prompter"}
        if unknown:
            raise KeyError(f"Unknown dependencies: {', '.join(sorted(unknown))}")
        return replace(self, **overrides)


def production_dependencies() -> Dependencies:
    return Dependencies(executor=SubprocessExecutor(), prompter=ConsolePrompter())


_active: Dependencies | None = None


def get_dependencies() -> Dependencies:
    global _active
    if _active is None:
        _active = production_dependencies()
    return _active


def set_dependencies(**overrides) -> Dependencies:
    """Merge ``overrides`` into the active binding. Test setup only."""
    global _active
    _active = get_dependencies().replace(**overrides)
    return _active


def reset_dependencies() -> None:
    """Restore production bindings. Test teardown only."""
    global _active
    _active = production_dependencies()
