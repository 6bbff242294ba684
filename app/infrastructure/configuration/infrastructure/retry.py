"""Retry scheduler infrastructure settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Delayed-retry scheduler configuration.

    Environment Variables:
        RETRY_BACKEND: Queue backend - 'memory' or 'sqs' (default: memory)
        RETRY_QUEUE_URL: SQS queue URL (sqs backend)
        RETRY_QUEUE_NAME: SQS queue name, resolved to a URL when no URL is set
        RETRY_MAX_ATTEMPTS: Attempt budget, 0 = unlimited (default: 5)
        RETRY_BACKOFF_STRATEGY: 'constant', 'linear' or 'exponential'
        RETRY_BACKOFF_SEED_SECONDS: Seed delay for the backoff policy (default: 5s)
        RETRY_WAIT_TIME_SECONDS: Long-poll wait per receive (default: 10s)
        RETRY_MAX_DELAY_SECONDS: Largest delay a single send may carry (default: 900s)
        RETRY_DUE_TOLERANCE_SECONDS: Slack under which a job counts as due (default: 2s)
        RETRY_VISIBILITY_TIMEOUT_SECONDS: In-flight window for the memory backend
        RETRY_MAX_RECEIVE_COUNT: Redrive threshold for the memory backend

    Queue Delay Ceiling:
        SQS caps DelaySeconds at 900. Longer backoff delays are split: the
        send carries at most RETRY_MAX_DELAY_SECONDS and the remainder is
        consumed by further not-yet-due cycles before the job runs again.

    Dead Letters:
        When the last attempt fails, the spent envelope is queued once more
        and never deleted. Configure the SQS queue with a redrive policy
        (maxReceiveCount) so that message lands in the dead-letter queue.

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.retry.backend == "sqs":
            queue_url = settings.retry.queue_url
        ```
    """

    backend: str = Field(
        default="memory",
        alias="RETRY_BACKEND",
        description="Queue backend: 'memory' or 'sqs'",
    )
    queue_url: str = Field(
        default="",
        alias="RETRY_QUEUE_URL",
        description="SQS queue URL used by the sqs backend",
    )
    queue_name: str = Field(
        default="",
        alias="RETRY_QUEUE_NAME",
        description="SQS queue name, looked up when RETRY_QUEUE_URL is empty",
    )
    max_attempts: int = Field(
        default=5,
        alias="RETRY_MAX_ATTEMPTS",
        description="Maximum attempts before a job is left for dead-lettering (0 = unlimited)",
    )
    backoff_strategy: str = Field(
        default="exponential",
        alias="RETRY_BACKOFF_STRATEGY",
        description="Backoff policy: 'constant', 'linear' or 'exponential'",
    )
    backoff_seed_seconds: int = Field(
        default=5,
        alias="RETRY_BACKOFF_SEED_SECONDS",
        description="Seed delay for the backoff policy (seconds)",
    )
    wait_time_seconds: int = Field(
        default=10,
        alias="RETRY_WAIT_TIME_SECONDS",
        description="Long-poll wait for each receive (seconds)",
    )
    max_delay_seconds: int = Field(
        default=900,
        alias="RETRY_MAX_DELAY_SECONDS",
        description="Largest delivery delay accepted by the queue (seconds)",
    )
    due_tolerance_seconds: int = Field(
        default=2,
        alias="RETRY_DUE_TOLERANCE_SECONDS",
        description="Remaining wait treated as due to absorb redelivery jitter (seconds)",
    )
    visibility_timeout_seconds: int = Field(
        default=30,
        alias="RETRY_VISIBILITY_TIMEOUT_SECONDS",
        description="In-flight window for received messages (memory backend)",
    )
    max_receive_count: Optional[int] = Field(
        default=None,
        alias="RETRY_MAX_RECEIVE_COUNT",
        description="Receives before a message is dead-lettered (memory backend)",
    )
