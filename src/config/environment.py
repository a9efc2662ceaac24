"""Process-level settings: environment name, debug flag, temp dir, limits."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEFAULT_TEMP_DIR = "./temp"
DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT_MS = 30_000

MAX_RETRIES_RANGE = (1, 10)
TIMEOUT_RANGE_MS = (1_000, 300_000)

_TRUTHY = {"true", "1", "yes"}


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


_ENVIRONMENT_ALIASES = {
    "development": Environment.DEVELOPMENT,
    "dev": Environment.DEVELOPMENT,
    "testing": Environment.TESTING,
    "test": Environment.TESTING,
    "production": Environment.PRODUCTION,
    "prod": Environment.PRODUCTION,
}


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, *others: ValidationResult) -> ValidationResult:
        merged = ValidationResult(list(self.errors), list(self.warnings))
        for other in others:
            merged.errors.extend(other.errors)
            merged.warnings.extend(other.warnings)
        return merged


@dataclass(frozen=True)
class ToolConfig:
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    temp_dir: Path = Path(DEFAULT_TEMP_DIR)
    max_retries: int = DEFAULT_MAX_RETRIES
    timeout_ms: int = DEFAULT_TIMEOUT_MS


def parse_bool(value: str | None) -> bool:
    return bool(value) and value.strip().lower() in _TRUTHY


def parse_environment(value: str | None, result: ValidationResult) -> Environment:
    if value is None or not value.strip():
        return Environment.DEVELOPMENT
    env = _ENVIRONMENT_ALIASES.get(value.strip().lower())
    if env is None:
        result.warn(
            f"APP_ENV must be one of development, testing, production; "
            f"got {value!r}, using development"
        )
        return Environment.DEVELOPMENT
    return env


def parse_bounded_int(
    name: str,
    value: str | None,
    bounds: tuple[int, int],
    default: int,
    result: ValidationResult,
) -> int:
    """Parse an optional integer setting; out-of-range or junk warns and defaults."""
    if value is None or not value.strip():
        return default
    low, high = bounds
    try:
        number = int(value.strip())
    except ValueError:
        result.warn(f"{name} must be an integer, got {value!r}, using {default}")
        return default
    if not low <= number <= high:
        result.warn(f"{name} must be between {low} and {high}, got {number}, using {default}")
        return default
    return number


def load_tool_config(env: Mapping[str, str]) -> tuple[ToolConfig, ValidationResult]:
    """Read the process-level settings. Every key is optional."""
    result = ValidationResult()
    environment = parse_environment(env.get("APP_ENV"), result)
    debug = parse_bool(env.get("DEBUG"))
    temp_dir = (env.get("TEMP_DIR") or "").strip() or DEFAULT_TEMP_DIR
    max_retries = parse_bounded_int(
        "MAX_RETRIES", env.get("MAX_RETRIES"), MAX_RETRIES_RANGE, DEFAULT_MAX_RETRIES, result
    )
    timeout_ms = parse_bounded_int(
        "TIMEOUT", env.get("TIMEOUT"), TIMEOUT_RANGE_MS, DEFAULT_TIMEOUT_MS, result
    )
    config = ToolConfig(
        environment=environment,
        debug=debug,
        temp_dir=Path(temp_dir),
        max_retries=max_retries,
        timeout_ms=timeout_ms,
    )
    return config, result
