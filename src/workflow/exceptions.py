"""Workflow exception types."""


class InvalidTransitionError(Exception):
    """Raised when an invalid workflow state transition is attempted."""

    def __init__(self, pr_number: str, from_state, to_state):
        self.pr_number = pr_number
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid transition for PR #{pr_number}: "
            f"{from_state.value} → {to_state.value}"
        )
