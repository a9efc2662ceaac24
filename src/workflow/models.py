"""Domain models for the PR analysis workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class WorkflowState(Enum):
    IDLE = "idle"
    VALIDATING_REQUEST = "validating_request"
    GATHERING_REQUEST_DATA = "gathering_request_data"
    EXTRACTING_TICKET_ID = "extracting_ticket_id"
    VALIDATING_TICKET = "validating_ticket"
    GATHERING_TICKET_DATA = "gathering_ticket_data"
    BUILDING_ANALYSIS_INPUT = "building_analysis_input"
    RUNNING_ANALYSIS = "running_analysis"
    PUBLISHING_RESULT = "publishing_result"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (WorkflowState.DONE, WorkflowState.FAILED)


class FailureReason(Enum):
    SERVICE_ERROR = "service_error"
    TICKET_PATTERN_ABSENT = "ticket_pattern_absent"
    EMPTY_ANALYSIS = "empty_analysis"
    INVALID_COMMENT_FILE = "invalid_comment_file"


@dataclass
class WorkflowContext:
    """Threaded through a run. Only ``ticket_id`` and ``finished_at`` change."""

    pr_number: str
    repository: str
    started_at: datetime = field(default_factory=datetime.now)
    ticket_id: str | None = None
    finished_at: datetime | None = None


@dataclass
class StateTransition:
    from_state: WorkflowState
    to_state: WorkflowState
    timestamp: datetime
    reason: str | None = None
