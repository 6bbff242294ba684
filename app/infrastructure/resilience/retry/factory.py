"""Factories wiring the retry scheduler from settings."""

from typing import Optional

import structlog

from infrastructure.resilience.retry.backoff import get_backoff_policy
from infrastructure.resilience.retry.clock import Clock
from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.gateway import InMemoryQueueGateway, QueueGateway
from infrastructure.resilience.retry.scheduler import (
    ErrorHandler,
    RetryScheduler,
    WorkFunction,
)
from infrastructure.resilience.retry.sqs_gateway import SqsQueueGateway
from infrastructure.services.providers import get_aws_clients, get_settings

logger = structlog.get_logger()


def create_retry_config() -> RetryConfig:
    """Build a RetryConfig from settings.retry."""
    retry_settings = get_settings().retry
    return RetryConfig(
        max_attempts=retry_settings.max_attempts,
        wait_time_seconds=retry_settings.wait_time_seconds,
        max_delay_seconds=retry_settings.max_delay_seconds,
        due_tolerance_seconds=retry_settings.due_tolerance_seconds,
    )


def create_queue_gateway(
    config: RetryConfig,
    backend: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> QueueGateway:
    """Factory to create the delay queue gateway for the configured backend.

    Args:
        config: Retry configuration (delay ceiling)
        backend: Optional backend override (memory, sqs).
                If None, uses settings.retry.backend
        clock: Optional clock for the memory backend

    Returns:
        QueueGateway implementation

    Raises:
        ValueError: If the backend is unknown or the SQS queue cannot be resolved

    Examples:
        >>> config = RetryConfig()
        >>> gateway = create_queue_gateway(config)  # Uses settings.retry.backend
        >>> gateway = create_queue_gateway(config, backend="memory")
    """
    retry_settings = get_settings().retry
    backend = backend or retry_settings.backend

    if backend == "memory":
        logger.info("creating_in_memory_queue_gateway")
        return InMemoryQueueGateway(
            clock=clock,
            max_delay_seconds=config.max_delay_seconds,
            visibility_timeout_seconds=retry_settings.visibility_timeout_seconds,
            max_receive_count=retry_settings.max_receive_count,
        )

    elif backend == "sqs":
        sqs_client = get_aws_clients().sqs
        queue_url = retry_settings.queue_url
        if not queue_url:
            result = sqs_client.get_queue_url(retry_settings.queue_name)
            if not result.is_success:
                raise ValueError(
                    f"Unable to resolve SQS queue '{retry_settings.queue_name}': "
                    f"{result.message}"
                )
            queue_url = result.data

        logger.info("creating_sqs_queue_gateway", queue_url=queue_url)
        return SqsQueueGateway(
            sqs_client=sqs_client,
            queue_url=queue_url,
            max_delay_seconds=config.max_delay_seconds,
        )

    else:
        raise ValueError(f"Unknown retry backend: {backend}. Supported: memory, sqs")


def create_retry_scheduler(
    work: WorkFunction,
    error_handler: Optional[ErrorHandler] = None,
    backend: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> RetryScheduler:
    """Build a RetryScheduler from settings.

    Example:
        scheduler = create_retry_scheduler(work=sync_user)
        scheduler.start()
        scheduler.job("user-123")
    """
    retry_settings = get_settings().retry
    config = create_retry_config()
    backoff = get_backoff_policy(
        retry_settings.backoff_strategy, retry_settings.backoff_seed_seconds
    )
    gateway = create_queue_gateway(config, backend=backend, clock=clock)
    return RetryScheduler(
        gateway=gateway,
        work=work,
        backoff=backoff,
        config=config,
        error_handler=error_handler,
        clock=clock,
    )
