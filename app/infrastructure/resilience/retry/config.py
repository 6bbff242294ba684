"""Retry scheduler configuration.

This module defines the runtime knobs of the retry scheduler.
"""

from dataclasses import dataclass

from infrastructure.resilience.retry.exceptions import DelayConfigurationError

# SQS rejects DelaySeconds above 15 minutes.
SQS_MAX_DELAY_SECONDS = 900

# SQS long polling accepts 0-20 seconds.
SQS_MAX_WAIT_TIME_SECONDS = 20


@dataclass
class RetryConfig:
    """Configuration for retry scheduler behavior.

    Attributes:
        max_attempts: Attempt budget per job, 0 means unlimited
        wait_time_seconds: Long-poll wait for each receive
        max_delay_seconds: Largest delay a single queue send may carry
        due_tolerance_seconds: Remaining wait under which a job counts as due

    Example:
        # Default configuration
        config = RetryConfig()

        # Three attempts, short polls
        config = RetryConfig(max_attempts=3, wait_time_seconds=1)
    """

    max_attempts: int = 5
    wait_time_seconds: int = 10
    max_delay_seconds: int = SQS_MAX_DELAY_SECONDS
    due_tolerance_seconds: int = 2

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0 (0 = unlimited)")
        if self.wait_time_seconds < 0:
            raise ValueError("wait_time_seconds must be >= 0")
        if self.max_delay_seconds < 0:
            raise DelayConfigurationError("max_delay_seconds must be >= 0")
        if self.due_tolerance_seconds < 0:
            raise DelayConfigurationError("due_tolerance_seconds must be >= 0")

    def is_exhausted(self, attempted_count: int) -> bool:
        """Return True when a job with this many attempts may not run again."""
        return self.max_attempts > 0 and attempted_count >= self.max_attempts
