"""PR analysis runner: drives the workflow state machine end to end."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

from src.execution.artifacts import DEFAULT_TEMP_DIR, create_timestamped_file
from src.execution.protocol import Prompter
from src.services.base import OperationOptions
from src.services.claude import AnalysisRequest, ClaudeService
from src.services.errors import ServiceError
from src.services.github import GitHubService
from src.services.jira import JiraService
from src.workflow.comment_file import CommentFile, CommentFileError, validate_comment_file
from src.workflow.models import FailureReason, StateTransition, WorkflowContext, WorkflowState
from src.workflow.prompt import build_analysis_prompt
from src.workflow.transitions import validate_transition

logger = logging.getLogger(__name__)

TransitionCallback = Callable[[StateTransition], None]


@dataclass
class RunResult:
    success: bool
    state: WorkflowState
    context: WorkflowContext
    failed_at: WorkflowState | None = None
    failure_reason: FailureReason | None = None
    message: str | None = None
    error: ServiceError | None = None
    transitions: list[StateTransition] = field(default_factory=list)
    analysis: str | None = None
    analysis_file: Path | None = None
    prompt_file: Path | None = None
    published: bool = False
    model: str | None = None
    step_durations: dict[WorkflowState, float] = field(default_factory=dict)
    duration_seconds: float = 0.0


class _Tracker:
    """Validates and records state changes for one run."""

    def __init__(self, context: WorkflowContext, on_transition: TransitionCallback | None):
        self.context = context
        self.state = WorkflowState.IDLE
        self.transitions: list[StateTransition] = []
        self.durations: dict[WorkflowState, float] = {}
        self._on_transition = on_transition
        self._started = time.monotonic()
        self._entered = self._started

    def advance(self, to_state: WorkflowState, reason: str | None = None) -> None:
        validate_transition(self.context.pr_number, self.state, to_state)
        now = time.monotonic()
        if self.state is not WorkflowState.IDLE:
            self.durations[self.state] = now - self._entered
        transition = StateTransition(self.state, to_state, datetime.now(), reason)
        self.transitions.append(transition)
        self.state = to_state
        self._entered = now
        logger.info(
            "workflow transition",
            extra={
                "event": "workflow.transition",
                "pr_number": self.context.pr_number,
                "from_state": transition.from_state.value,
                "to_state": to_state.value,
            },
        )
        if self._on_transition is not None:
            self._on_transition(transition)

    def finish(self, result: RunResult) -> RunResult:
        self.context.finished_at = datetime.now()
        result.state = self.state
        result.transitions = self.transitions
        result.step_durations = self.durations
        result.duration_seconds = time.monotonic() - self._started
        return result

    def fail(
        self,
        result: RunResult,
        reason: FailureReason,
        message: str,
        error: ServiceError | None = None,
    ) -> RunResult:
        result.success = False
        result.failed_at = self.state
        result.failure_reason = reason
        result.message = message
        result.error = error
        logger.error(
            message,
            extra={
                "event": "workflow.failed",
                "pr_number": self.context.pr_number,
                "failed_at": self.state.value,
                "reason": reason.value,
                "kind": error.kind.value if error else None,
            },
        )
        self.advance(WorkflowState.FAILED, reason.value)
        return self.finish(result)


class AnalysisRunner:
    """Runs validate, gather, correlate, analyze and publish for one PR.

    Each step calls one service operation. The first failure moves the run
    to FAILED and is reported verbatim; nothing is retried unless the
    ``options`` passed in ask for it.
    """

    def __init__(
        self,
        github: GitHubService,
        jira: JiraService,
        claude: ClaudeService,
        prompter: Prompter,
        *,
        repository: str,
        temp_dir: Path | str = DEFAULT_TEMP_DIR,
        ticket_example: str | None = None,
        auto_confirm: bool = False,
        options: OperationOptions | None = None,
    ):
        self._github = github
        self._jira = jira
        self._claude = claude
        self._prompter = prompter
        self._repository = repository
        self._temp_dir = Path(temp_dir)
        self._ticket_example = ticket_example
        self._auto_confirm = auto_confirm
        self._options = options

    async def run(
        self,
        pr_number: str,
        on_transition: TransitionCallback | None = None,
    ) -> RunResult:
        context = WorkflowContext(pr_number=pr_number, repository=self._repository)
        tracker = _Tracker(context, on_transition)
        result = RunResult(success=False, state=WorkflowState.IDLE, context=context)
        opts = self._options
        prompt = None

        try:
            tracker.advance(WorkflowState.VALIDATING_REQUEST)
            await self._github.validate_pr(pr_number, opts)

            tracker.advance(WorkflowState.GATHERING_REQUEST_DATA)
            pr_data = await self._github.gather_pr_data(pr_number, opts)

            tracker.advance(WorkflowState.EXTRACTING_TICKET_ID)
            ticket_id = self._jira.extract_ticket(pr_data.metadata.title)
            if ticket_id is None:
                return tracker.fail(
                    result,
                    FailureReason.TICKET_PATTERN_ABSENT,
                    "No Jira ticket found in PR title. "
                    f"Title should contain pattern: {self._ticket_hint()}",
                )
            context.ticket_id = ticket_id

            tracker.advance(WorkflowState.VALIDATING_TICKET)
            await self._jira.validate_ticket(ticket_id, opts)

            tracker.advance(WorkflowState.GATHERING_TICKET_DATA)
            ticket_data = await self._jira.gather_ticket_data(ticket_id, opts)

            tracker.advance(WorkflowState.BUILDING_ANALYSIS_INPUT)
            model_label = await self._claude.detect_model(opts)
            prompt = build_analysis_prompt(pr_number, ticket_id, pr_data, ticket_data, model_label)

            tracker.advance(WorkflowState.RUNNING_ANALYSIS)
            response = await self._claude.analyze(AnalysisRequest(prompt=prompt), opts)
            result.model = response.model
            if not response.content.strip():
                result.prompt_file = self._save_prompt(prompt)
                return tracker.fail(
                    result,
                    FailureReason.EMPTY_ANALYSIS,
                    "Claude returned an empty analysis",
                )
            result.analysis = response.content

            tracker.advance(WorkflowState.PUBLISHING_RESULT)
            result.analysis_file = create_timestamped_file(
                response.content, "analysis", "md", self._temp_dir
            )
            result.published = await _confirm_and_post(
                self._github,
                self._prompter,
                pr_number,
                result.analysis_file,
                question="Post analysis as PR comment?",
                auto_confirm=self._auto_confirm,
                options=opts,
            )
        except ServiceError as error:
            if tracker.state is WorkflowState.RUNNING_ANALYSIS and prompt is not None:
                result.prompt_file = self._save_prompt(prompt)
            return tracker.fail(result, FailureReason.SERVICE_ERROR, error.message, error)

        tracker.advance(WorkflowState.DONE)
        result.success = True
        return tracker.finish(result)

    def _ticket_hint(self) -> str:
        if self._ticket_example:
            return self._ticket_example
        pattern = self._jira.ticket_pattern
        return getattr(pattern, "pattern", str(pattern))

    def _save_prompt(self, prompt: str) -> Path:
        path = create_timestamped_file(prompt, "claude-prompt", "txt", self._temp_dir)
        logger.warning(
            "saved prompt for manual execution",
            extra={"event": "workflow.prompt_saved", "path": str(path)},
        )
        return path


async def publish_comment(
    github: GitHubService,
    prompter: Prompter,
    pr_number: str,
    comment_file: Path | str,
    *,
    repository: str,
    auto_confirm: bool = False,
    on_preview: Callable[[CommentFile], None] | None = None,
    on_transition: TransitionCallback | None = None,
    options: OperationOptions | None = None,
) -> RunResult:
    """Publish-only path: validate the PR and the file, then post it."""
    context = WorkflowContext(pr_number=pr_number, repository=repository)
    tracker = _Tracker(context, on_transition)
    result = RunResult(success=False, state=WorkflowState.IDLE, context=context)

    try:
        tracker.advance(WorkflowState.VALIDATING_REQUEST)
        await github.validate_pr(pr_number, options)
        try:
            checked = validate_comment_file(comment_file)
        except CommentFileError as e:
            return tracker.fail(result, FailureReason.INVALID_COMMENT_FILE, str(e))
        result.analysis_file = checked.path

        tracker.advance(WorkflowState.PUBLISHING_RESULT)
        if on_preview is not None:
            on_preview(checked)
        result.published = await _confirm_and_post(
            github,
            prompter,
            pr_number,
            checked.path,
            question=f"Post this content as a comment to PR #{pr_number}?",
            auto_confirm=auto_confirm,
            options=options,
        )
    except ServiceError as error:
        return tracker.fail(result, FailureReason.SERVICE_ERROR, error.message, error)

    tracker.advance(WorkflowState.DONE)
    result.success = True
    return tracker.finish(result)


async def _confirm_and_post(
    github: GitHubService,
    prompter: Prompter,
    pr_number: str,
    path: Path,
    *,
    question: str,
    auto_confirm: bool,
    options: OperationOptions | None,
) -> bool:
    if not auto_confirm and not await prompter.confirm(question, False):
        logger.info(
            "comment posting declined",
            extra={"event": "workflow.publish.declined", "pr_number": pr_number},
        )
        return False
    await github.post_pr_comment(pr_number, str(path), options)
    return True
