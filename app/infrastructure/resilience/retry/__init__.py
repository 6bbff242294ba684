"""Delayed-retry scheduler on a durable delay queue.

Jobs are re-attempted on a backoff schedule until the caller's work function
reports completion or the attempt budget runs out. The queue (SQS, or an
in-memory stand-in) is both the timer and the persistence layer.

Architecture:
- JobEnvelope: Job state serialized into each queue message
- BackoffPolicy: attempt -> delay before that attempt
- DelayReconciler: Decides whether a delivered job is due
- QueueGateway: Queue interface with in-memory and SQS implementations
- RetryScheduler: Poll loop tying the pieces together

Usage:
    from datetime import timedelta

    from infrastructure.resilience.retry import (
        InMemoryQueueGateway,
        RetryConfig,
        RetryScheduler,
        exponential_backoff,
    )

    def sync_user(attempt):
        return provision(attempt.id)

    scheduler = RetryScheduler(
        gateway=InMemoryQueueGateway(),
        work=sync_user,
        backoff=exponential_backoff(timedelta(seconds=30)),
        config=RetryConfig(max_attempts=5),
    )
    scheduler.start()
    scheduler.job("user-123")
"""

from infrastructure.resilience.retry.backoff import (
    BackoffPolicy,
    constant_backoff,
    exponential_backoff,
    get_backoff_policy,
    linear_backoff,
)
from infrastructure.resilience.retry.clock import Clock, FakeClock, SystemClock
from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.exceptions import (
    DelayConfigurationError,
    EnvelopeDecodeError,
    QueueOperationError,
    RetrySchedulerError,
    WorkFunctionError,
)
from infrastructure.resilience.retry.models import CycleOutcome, JobAttempt, JobEnvelope
from infrastructure.resilience.retry.reconciler import (
    DelayReconciler,
    Reconciliation,
    delay_seconds_for,
)
from infrastructure.resilience.retry.gateway import (
    InMemoryQueueGateway,
    QueueGateway,
    QueueMessage,
)
from infrastructure.resilience.retry.sqs_gateway import SqsQueueGateway
from infrastructure.resilience.retry.scheduler import RetryScheduler
from infrastructure.resilience.retry.factory import (
    create_queue_gateway,
    create_retry_config,
    create_retry_scheduler,
)

__all__ = [
    # Backoff
    "BackoffPolicy",
    "constant_backoff",
    "linear_backoff",
    "exponential_backoff",
    "get_backoff_policy",
    # Clock
    "Clock",
    "SystemClock",
    "FakeClock",
    # Configuration
    "RetryConfig",
    # Errors
    "RetrySchedulerError",
    "QueueOperationError",
    "EnvelopeDecodeError",
    "WorkFunctionError",
    "DelayConfigurationError",
    # Models
    "CycleOutcome",
    "JobAttempt",
    "JobEnvelope",
    # Reconciler
    "DelayReconciler",
    "Reconciliation",
    "delay_seconds_for",
    # Gateways
    "QueueGateway",
    "QueueMessage",
    "InMemoryQueueGateway",
    "SqsQueueGateway",
    # Scheduler
    "RetryScheduler",
    # Factory
    "create_queue_gateway",
    "create_retry_config",
    "create_retry_scheduler",
]
