"""Delay reconciliation.

Queues deliver late, early (within tolerance) or, for delays above the queue
ceiling, long before the job is due. The reconciler compares an envelope's
schedule with the clock and decides whether the job should run now.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from infrastructure.resilience.retry.backoff import BackoffPolicy
from infrastructure.resilience.retry.exceptions import DelayConfigurationError
from infrastructure.resilience.retry.models import JobEnvelope

DEFAULT_DUE_TOLERANCE = timedelta(seconds=2)


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of reconciling an envelope against the clock.

    Attributes:
        envelope: The envelope to act on (advanced when due)
        due: Whether the job should run now
        wait: Time until the envelope's next attempt, never negative when due
    """

    envelope: JobEnvelope
    due: bool
    wait: timedelta


class DelayReconciler:
    """Decides if a job is due and advances its schedule.

    Args:
        backoff: Policy applied to the new attempt count when a job is due
        due_tolerance: Remaining wait small enough to count as due
    """

    def __init__(
        self,
        backoff: BackoffPolicy,
        due_tolerance: timedelta = DEFAULT_DUE_TOLERANCE,
    ) -> None:
        if due_tolerance < timedelta(0):
            raise DelayConfigurationError("due_tolerance must not be negative")
        self.backoff = backoff
        self.due_tolerance = due_tolerance

    def reconcile(self, envelope: JobEnvelope, now: datetime) -> Reconciliation:
        slack = envelope.next_attempt_at - now
        if slack > self.due_tolerance:
            return Reconciliation(envelope=envelope, due=False, wait=slack)

        advanced = envelope.advance(self.backoff(envelope.attempted_count + 1))
        wait = max(advanced.next_attempt_at - now, timedelta(0))
        return Reconciliation(envelope=advanced, due=True, wait=wait)


def delay_seconds_for(wait: timedelta, max_delay_seconds: int) -> int:
    """Convert a wait into a queue delay: whole seconds, rounded up, clamped.

    A negative wait (clock drift, late delivery) becomes 0. Waits above the
    ceiling are capped; the remainder is served by later deferrals.
    """
    if max_delay_seconds < 0:
        raise DelayConfigurationError("max_delay_seconds must be >= 0")
    seconds = math.ceil(wait.total_seconds())
    return max(0, min(seconds, max_delay_seconds))
