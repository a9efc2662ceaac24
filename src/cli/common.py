"""Shared helpers for the ``analyze-pr`` and ``comment-pr`` entry points."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from src.config.app import AppConfig, ConfigurationError, load_app_config
from src.config.environment import parse_bool
from src.config.services import setup_instructions
from src.execution.fixtures import load_replay_fixture
from src.execution.registry import Dependencies, get_dependencies
from src.logging_utils import configure_logging
from src.services.errors import ServiceError
from src.workflow.convenience import Services
from src.workflow.models import StateTransition

logger = logging.getLogger(__name__)

COLORS = {
    "red": "\033[0;31m",
    "green": "\033[0;32m",
    "yellow": "\033[1;33m",
    "blue": "\033[0;34m",
    "cyan": "\033[0;36m",
    "white": "\033[1;37m",
    "reset": "\033[0m",
}


def print_status(color: str, message: str, file=None) -> None:
    file = file or sys.stdout
    if not file.isatty():
        print(message, file=file)
        return
    print(f"{COLORS.get(color, '')}{message}{COLORS['reset']}", file=file)


class CliParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with status 1."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        sys.exit(1)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--yes", "-y", action="store_true", help="Post without asking for confirmation")
    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        metavar="FIXTURE.yaml",
        help="Answer every tool call from a YAML fixture instead of running it",
    )


def setup_environment() -> None:
    """Load ``.env`` and configure logging from DEBUG."""
    load_dotenv()
    configure_logging("DEBUG" if parse_bool(os.environ.get("DEBUG")) else "WARNING")


def load_config_or_report() -> AppConfig | None:
    try:
        return load_app_config()
    except ConfigurationError as e:
        print_status("red", "Configuration errors:", file=sys.stderr)
        for error in e.errors:
            print_status("red", f"  - {error}", file=sys.stderr)
        for warning in e.warnings:
            print_status("yellow", f"  - {warning}", file=sys.stderr)
        print(setup_instructions(), file=sys.stderr)
        return None


def resolve_dependencies(deps: Dependencies | None, replay: Path | None) -> Dependencies:
    """Use ``deps`` (or the default binding), swapping in a replay executor.

    Raises ``OSError`` or ``FixtureError`` when the fixture cannot be loaded.
    """
    deps = deps or get_dependencies()
    if replay is None:
        return deps
    return deps.replace(executor=load_replay_fixture(replay))


@dataclass(frozen=True)
class ToolAvailability:
    github: bool
    jira: bool
    claude: bool

    @property
    def all_required(self) -> bool:
        return self.github


async def check_required_tools(services: Services) -> ToolAvailability:
    """Probe all three CLIs concurrently. Only GitHub is required."""
    github, jira, claude = await asyncio.gather(
        probe(services.github.check_cli()),
        probe(services.jira.check_cli()),
        probe(services.claude.check_cli()),
    )
    return ToolAvailability(github=github, jira=jira, claude=claude)


async def probe(check) -> bool:
    try:
        return await check
    except ServiceError as error:
        logger.warning(
            "tool probe failed",
            extra={"event": "cli.probe.failed", "service": error.service, "kind": error.kind.value},
        )
        return False


def print_transition(transition: StateTransition) -> None:
    label = transition.to_state.value.replace("_", " ")
    color = "red" if transition.to_state.value == "failed" else "yellow"
    print_status(color, f"  -> {label}")
