"""Workflow state-machine transitions defined as data."""

from .exceptions import InvalidTransitionError
from .models import WorkflowState

# The analysis pipeline, in order.
PIPELINE: tuple[WorkflowState, ...] = (
    WorkflowState.IDLE,
    WorkflowState.VALIDATING_REQUEST,
    WorkflowState.GATHERING_REQUEST_DATA,
    WorkflowState.EXTRACTING_TICKET_ID,
    WorkflowState.VALIDATING_TICKET,
    WorkflowState.GATHERING_TICKET_DATA,
    WorkflowState.BUILDING_ANALYSIS_INPUT,
    WorkflowState.RUNNING_ANALYSIS,
    WorkflowState.PUBLISHING_RESULT,
    WorkflowState.DONE,
)

# Publish-only path used when the analysis already exists as a file.
PUBLISH_ONLY: tuple[WorkflowState, ...] = (
    WorkflowState.IDLE,
    WorkflowState.VALIDATING_REQUEST,
    WorkflowState.PUBLISHING_RESULT,
    WorkflowState.DONE,
)

VALID_TRANSITIONS: frozenset[tuple[WorkflowState, WorkflowState]] = frozenset(
    {pair for path in (PIPELINE, PUBLISH_ONLY) for pair in zip(path, path[1:])}
    | {
        (state, WorkflowState.FAILED)
        for state in WorkflowState
        if not state.is_terminal and state is not WorkflowState.IDLE
    }
)


def validate_transition(
    pr_number: str,
    from_state: WorkflowState,
    to_state: WorkflowState,
) -> None:
    """Raise InvalidTransitionError if the transition is not allowed."""
    if (from_state, to_state) not in VALID_TRANSITIONS:
        raise InvalidTransitionError(pr_number, from_state, to_state)
