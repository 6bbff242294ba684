"""Unit tests for retry scheduler factories."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from infrastructure.operations import OperationResult
from infrastructure.resilience.retry import (
    FakeClock,
    InMemoryQueueGateway,
    RetryConfig,
    RetryScheduler,
    SqsQueueGateway,
    create_queue_gateway,
    create_retry_config,
    create_retry_scheduler,
)

QUEUE_URL = "https://sqs.ca-central-1.amazonaws.com/123456789012/retry-queue"


@pytest.fixture
def mock_aws_clients(monkeypatch):
    """Patch get_aws_clients in the factory module with a fake SQS client."""
    sqs = MagicMock()
    monkeypatch.setattr(
        "infrastructure.resilience.retry.factory.get_aws_clients",
        lambda: SimpleNamespace(sqs=sqs),
    )
    return sqs


@pytest.mark.unit
class TestCreateRetryConfig:
    def test_values_come_from_settings(self, mock_retry_settings):
        mock_retry_settings(max_attempts=3, wait_time_seconds=1, max_delay_seconds=600)

        config = create_retry_config()

        assert config == RetryConfig(
            max_attempts=3,
            wait_time_seconds=1,
            max_delay_seconds=600,
            due_tolerance_seconds=2,
        )


@pytest.mark.unit
class TestCreateQueueGateway:
    """Tests for create_queue_gateway."""

    def test_memory_gateway_by_default(self, mock_retry_settings):
        mock_retry_settings(visibility_timeout_seconds=45, max_receive_count=3)
        clock = FakeClock()

        gateway = create_queue_gateway(RetryConfig(max_delay_seconds=300), clock=clock)

        assert isinstance(gateway, InMemoryQueueGateway)
        assert gateway.clock is clock
        assert gateway.max_delay_seconds == 300
        assert gateway.visibility_timeout_seconds == 45
        assert gateway.max_receive_count == 3

    def test_sqs_gateway_from_settings(self, mock_retry_settings, mock_aws_clients):
        mock_retry_settings(backend="sqs", queue_url=QUEUE_URL)

        gateway = create_queue_gateway(RetryConfig())

        assert isinstance(gateway, SqsQueueGateway)
        assert gateway.queue_url == QUEUE_URL
        assert gateway.sqs_client is mock_aws_clients
        mock_aws_clients.get_queue_url.assert_not_called()

    def test_sqs_queue_name_is_resolved(self, mock_retry_settings, mock_aws_clients):
        mock_retry_settings(backend="memory", queue_name="retry-queue")
        mock_aws_clients.get_queue_url.return_value = OperationResult.success(
            data=QUEUE_URL
        )

        gateway = create_queue_gateway(RetryConfig(), backend="sqs")

        assert gateway.queue_url == QUEUE_URL
        mock_aws_clients.get_queue_url.assert_called_once_with("retry-queue")

    def test_unresolvable_queue_raises(self, mock_retry_settings, mock_aws_clients):
        mock_retry_settings(backend="sqs", queue_name="missing")
        mock_aws_clients.get_queue_url.return_value = OperationResult.permanent_error(
            message="queue does not exist"
        )

        with pytest.raises(ValueError, match="Unable to resolve SQS queue"):
            create_queue_gateway(RetryConfig())

    def test_unknown_backend_raises(self, mock_retry_settings):
        mock_retry_settings()

        with pytest.raises(ValueError, match="Unknown retry backend"):
            create_queue_gateway(RetryConfig(), backend="redis")


@pytest.mark.unit
class TestCreateRetryScheduler:
    """Tests for create_retry_scheduler."""

    def test_scheduler_is_wired_from_settings(self, mock_retry_settings):
        mock_retry_settings(
            max_attempts=7, backoff_strategy="linear", backoff_seed_seconds=30
        )

        def work(attempt):
            return True

        def handler(error):
            return None

        scheduler = create_retry_scheduler(work, error_handler=handler)

        assert isinstance(scheduler, RetryScheduler)
        assert isinstance(scheduler.gateway, InMemoryQueueGateway)
        assert scheduler.work is work
        assert scheduler.error_handler is handler
        assert scheduler.config.max_attempts == 7
        assert scheduler.backoff(2).total_seconds() == 60

    def test_unknown_backoff_strategy_raises(self, mock_retry_settings):
        mock_retry_settings(backoff_strategy="random")

        with pytest.raises(ValueError, match="Unknown backoff strategy"):
            create_retry_scheduler(lambda attempt: True)
