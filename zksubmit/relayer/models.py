"""
Relayer Submission Models
=========================

Attempt records and outcomes of relayer submissions.

Version: 0.1.0
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SubmissionOutcome(str, Enum):
    """Classification of a submission attempt (or of a whole submission)."""

    ACCEPTED = "accepted"
    RATE_LIMITED = "rate_limited"
    NETWORK_FAILURE = "network_failure"
    REJECTED = "rejected"
    # Retry budget used up while the last attempt was still retryable
    EXHAUSTED = "exhausted"

    @property
    def retryable(self) -> bool:
        return self in (SubmissionOutcome.RATE_LIMITED, SubmissionOutcome.NETWORK_FAILURE)


class AttemptRecord(BaseModel):
    """One submission attempt as written to the audit log."""

    model_config = ConfigDict(frozen=True)

    iteration: int = Field(..., ge=1)
    attempt: int = Field(..., ge=1)
    response: str
    status_code: int | None = None

    @property
    def line(self) -> str:
        """Audit log line: ``[<iteration>][<attempt>] <raw response>``."""
        return f"[{self.iteration}][{self.attempt}] {self.response}"


class SubmissionResult(BaseModel):
    """Final result of submitting one payload, retries included."""

    iteration: int
    outcome: SubmissionOutcome
    attempts: list[AttemptRecord] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.outcome == SubmissionOutcome.ACCEPTED

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)
