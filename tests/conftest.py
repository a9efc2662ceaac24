"""Shared test configuration."""

from __future__ import annotations

import pytest

from src.config.app import build_app_config, clear_config_cache
from src.execution.mocks import ScriptedExecutor, ScriptedPrompter
from src.execution.registry import Dependencies, reset_dependencies


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run tests that spawn real processes"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="Need --run-slow to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def _isolate_process_state():
    """Every test starts from production bindings and an empty config cache."""
    reset_dependencies()
    clear_config_cache()
    yield
    reset_dependencies()
    clear_config_cache()


@pytest.fixture
def env(tmp_path) -> dict[str, str]:
    return {
        "GITHUB_REPOSITORY": "acme/webapp",
        "JIRA_TICKET_PREFIX": "TEST",
        "TEMP_DIR": str(tmp_path / "temp"),
    }


@pytest.fixture
def app_config(env):
    return build_app_config(env)


@pytest.fixture
def executor() -> ScriptedExecutor:
    return ScriptedExecutor()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def deps(executor, prompter) -> Dependencies:
    return Dependencies(executor=executor, prompter=prompter)
