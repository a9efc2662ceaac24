from .models import FailureReason, StateTransition, WorkflowContext, WorkflowState
from .exceptions import InvalidTransitionError
from .runner import AnalysisRunner, RunResult, publish_comment

__all__ = [
    "AnalysisRunner",
    "FailureReason",
    "InvalidTransitionError",
    "RunResult",
    "StateTransition",
    "WorkflowContext",
    "WorkflowState",
    "publish_comment",
]
