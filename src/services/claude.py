"""Claude operations, driven through the ``claude`` CLI in print mode."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from src.execution.artifacts import DEFAULT_TEMP_DIR, create_timestamped_file, remove_quietly
from src.services.base import OperationOptions, ServiceClient
from src.services.errors import ClaudeErrorKind, ServiceError

DEFAULT_CLI_PATH = "claude"
DEFAULT_MODEL_LABEL = "claude-default"

# Used when the CLI has no ``models`` subcommand.
FALLBACK_MODELS = (
    "claude-3-opus-20240229",
    "claude-3-sonnet-20240229",
    "claude-3-haiku-20240307",
)


@dataclass(frozen=True)
class AnalysisRequest:
    prompt: str
    model: str | None = None


@dataclass(frozen=True)
class AnalysisResponse:
    content: str
    model: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class VersionInfo:
    version: str
    cli_path: str
    available_models: tuple[str, ...]


class ClaudeService(ServiceClient):
    service = "claude"

    def __init__(
        self,
        deps,
        *,
        cli_path: str = DEFAULT_CLI_PATH,
        model: str | None = None,
        temp_dir: Path | str = DEFAULT_TEMP_DIR,
        options: OperationOptions | None = None,
    ) -> None:
        super().__init__(deps, options=options)
        self.cli_path = cli_path
        self.model = model
        self.temp_dir = Path(temp_dir)

    async def check_cli(self, options: OperationOptions | None = None) -> bool:
        try:
            await self._run(f"{self.cli_path} --version", options)
        except ServiceError as error:
            if error.kind is ClaudeErrorKind.CLI_NOT_FOUND:
                return False
            raise
        return True

    async def get_version(self, options: OperationOptions | None = None) -> VersionInfo:
        result = await self._run(f"{self.cli_path} --version", options)
        try:
            models = await self._run(f"{self.cli_path} models", options)
            available = tuple(line.strip() for line in models.stdout.splitlines() if line.strip())
        except ServiceError:
            available = FALLBACK_MODELS
        return VersionInfo(
            version=result.stdout.strip(),
            cli_path=self.cli_path,
            available_models=available,
        )

    async def detect_model(self, options: OperationOptions | None = None) -> str:
        """Human-readable label for the analysis attribution line."""
        try:
            info = await self.get_version(options)
        except ServiceError as error:
            if error.kind is ClaudeErrorKind.CLI_NOT_FOUND:
                return "Claude AI (CLI not available)"
            return "Claude AI"
        if self.model:
            return f"Claude CLI {info.version} ({self.model})"
        return f"Claude CLI {info.version}"

    async def analyze(
        self, request: AnalysisRequest, options: OperationOptions | None = None
    ) -> AnalysisResponse:
        """Feed the prompt to ``claude --print`` through a temp file on stdin."""
        if not request.prompt.strip():
            raise ServiceError(
                self.service,
                ClaudeErrorKind.INVALID_INPUT,
                "Analysis prompt is empty",
            )
        model = request.model or self.model
        prompt_file = create_timestamped_file(
            request.prompt, "claude-prompt", "txt", self.temp_dir
        )
        command = f"{self.cli_path} --print"
        if model:
            command += f" --model {model}"
        command += f' < "{prompt_file}"'

        started = datetime.now()
        try:
            result = await self._run(command, options)
        finally:
            remove_quietly(prompt_file)

        return AnalysisResponse(
            content=result.stdout,
            model=model or DEFAULT_MODEL_LABEL,
            timestamp=started,
        )
