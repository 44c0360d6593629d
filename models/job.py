"""
Generation job model - a long-running remote operation.

Lifecycle:
    SUBMITTED -> (PENDING)* -> DONE -> FETCHED
    any step  -> FAILED

Only the job poller mutates a job. Callers read it once it is terminal.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class JobState(str, Enum):
    SUBMITTED = "submitted"
    PENDING = "pending"
    DONE = "done"
    FETCHED = "fetched"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.FETCHED, JobState.FAILED)


# Legal transitions of the job state machine
_TRANSITIONS = {
    JobState.SUBMITTED: {JobState.PENDING, JobState.DONE, JobState.FAILED},
    JobState.PENDING: {JobState.PENDING, JobState.DONE, JobState.FAILED},
    JobState.DONE: {JobState.FETCHED, JobState.FAILED},
    JobState.FETCHED: set(),
    JobState.FAILED: set(),
}


@dataclass
class GenerationJob:
    """A remote job handle plus what polling has learned about it."""

    job_id: str
    handle: Any = None  # Service-specific operation object
    state: JobState = JobState.SUBMITTED
    done: bool = False
    locator: Optional[str] = None  # Where the result can be fetched from
    error: Optional[str] = None
    polls: int = 0
    submitted_at: datetime = field(default_factory=datetime.now)

    def advance(self, state: JobState) -> None:
        """Move to `state`, refusing transitions the lifecycle forbids."""
        if state not in _TRANSITIONS[self.state]:
            raise ValueError(f"Illegal job transition: {self.state.value} -> {state.value}")
        self.state = state

    def fail(self, error: str) -> None:
        self.error = error
        if not self.state.is_terminal:
            self.state = JobState.FAILED

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "state": self.state.value,
            "done": self.done,
            "locator": self.locator,
            "error": self.error,
            "polls": self.polls,
            "submitted_at": self.submitted_at.isoformat(),
        }
