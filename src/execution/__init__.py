"""Command execution seam."""

from src.execution.fixtures import FixtureError, load_replay_fixture
from src.execution.mocks import ScriptedExecutor, ScriptedPrompter, normalize_command
from src.execution.prompter import ConsolePrompter
from src.execution.protocol import CommandExecutor, Prompter
from src.execution.registry import (
    Dependencies,
    get_dependencies,
    production_dependencies,
    reset_dependencies,
    set_dependencies,
)
from src.execution.subprocess_executor import SubprocessExecutor
from src.execution.types import CommandFailedError, ExecutionResult

__all__ = [
    "CommandExecutor",
    "CommandFailedError",
    "ConsolePrompter",
    "Dependencies",
    "ExecutionResult",
    "FixtureError",
    "Prompter",
    "ScriptedExecutor",
    "ScriptedPrompter",
    "SubprocessExecutor",
    "get_dependencies",
    "load_replay_fixture",
    "normalize_command",
    "production_dependencies",
    "reset_dependencies",
    "set_dependencies",
]
