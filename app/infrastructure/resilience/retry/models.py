"""Retry scheduler models.

The job envelope is the only state the scheduler keeps for a job. It travels
as the body of a queue message, so everything needed to decide the next step
lives in it.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from infrastructure.resilience.retry.exceptions import EnvelopeDecodeError

JobId = Union[int, str]


class CycleOutcome(Enum):
    """Result of one scheduler evaluation.

    Values:
        IDLE: No message arrived during the long poll
        FAILED: A queue or decode failure was reported to the error handler
        EXHAUSTED: The attempt budget is spent, the message is left for redrive
        DEFERRED: The job was not yet due and was sent back to the queue
        COMPLETED: The work function reported completion
        RESCHEDULED: The work function did not complete, next attempt queued
    """

    IDLE = "idle"
    FAILED = "failed"
    EXHAUSTED = "exhausted"
    DEFERRED = "deferred"
    COMPLETED = "completed"
    RESCHEDULED = "rescheduled"


@dataclass(frozen=True)
class JobAttempt:
    """The view of a job handed to the work function."""

    id: JobId
    attempted_count: int


class JobEnvelope(BaseModel):
    """Serialized job state carried in a queue message.

    Fields:
        id: Caller supplied job identity, never interpreted
        attempted_count: Number of due evaluations so far
        submitted_at: When the job was first submitted
        next_attempt_at: Earliest instant the next attempt may run

    Example:
        envelope = JobEnvelope.new("invoice-42", clock.now())
        body = envelope.to_body()
        restored = JobEnvelope.from_body(body)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: JobId
    attempted_count: int = Field(default=0, ge=0)
    submitted_at: datetime
    next_attempt_at: datetime

    @field_validator("submitted_at", "next_attempt_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @classmethod
    def new(cls, job_id: JobId, now: datetime) -> "JobEnvelope":
        """Create the envelope of a freshly submitted job, due immediately."""
        return cls(
            id=job_id,
            attempted_count=0,
            submitted_at=now,
            next_attempt_at=now,
        )

    @classmethod
    def from_body(cls, body: Optional[str]) -> "JobEnvelope":
        """Decode a queue message body.

        Raises:
            EnvelopeDecodeError: If the body is missing or not a valid envelope
        """
        if body is None:
            raise EnvelopeDecodeError(body, ValueError("message has no body"))
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            raise EnvelopeDecodeError(body, e) from e

    def to_body(self) -> str:
        return self.model_dump_json()

    def advance(self, delay: timedelta) -> "JobEnvelope":
        """Return a copy with one more attempt and the schedule pushed by delay."""
        return self.model_copy(
            update={
                "attempted_count": self.attempted_count + 1,
                "next_attempt_at": self.next_attempt_at + delay,
            }
        )

    @property
    def attempt(self) -> JobAttempt:
        return JobAttempt(id=self.id, attempted_count=self.attempted_count)
