"""Resilience patterns and implementations.

This module contains the delayed-retry scheduler and its queue gateways.
"""

from infrastructure.resilience.retry import (
    InMemoryQueueGateway,
    JobAttempt,
    JobEnvelope,
    QueueGateway,
    RetryConfig,
    RetryScheduler,
    SqsQueueGateway,
    create_retry_scheduler,
)

__all__ = [
    "JobAttempt",
    "JobEnvelope",
    "RetryConfig",
    "QueueGateway",
    "InMemoryQueueGateway",
    "SqsQueueGateway",
    "RetryScheduler",
    "create_retry_scheduler",
]
