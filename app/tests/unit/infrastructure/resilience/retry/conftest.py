"""Shared fixtures for retry scheduler tests."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import List, Optional

import pytest

from infrastructure.operations import OperationResult
from infrastructure.resilience.retry import (
    CycleOutcome,
    FakeClock,
    InMemoryQueueGateway,
    JobAttempt,
    RetryConfig,
    RetryScheduler,
    constant_backoff,
)

START = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class RecordingGateway:
    """Wraps a gateway and records every call made through it.

    Individual operations can be forced to fail by setting ``fail_send``,
    ``fail_receive`` or ``fail_delete`` to an OperationResult.
    """

    def __init__(self, inner: InMemoryQueueGateway):
        self.inner = inner
        self.max_delay_seconds = inner.max_delay_seconds
        self.sent_delays: List[int] = []
        self.sent_bodies: List[str] = []
        self.receives = 0
        self.deleted: List[str] = []
        self.fail_send: Optional[OperationResult] = None
        self.fail_receive: Optional[OperationResult] = None
        self.fail_delete: Optional[OperationResult] = None

    @property
    def sends(self) -> int:
        return len(self.sent_delays)

    @property
    def deletes(self) -> int:
        return len(self.deleted)

    def send(self, body: str, delay_seconds: int) -> OperationResult:
        if self.fail_send is not None:
            return self.fail_send
        self.sent_delays.append(delay_seconds)
        self.sent_bodies.append(body)
        return self.inner.send(body, delay_seconds)

    def receive(self, wait_seconds: int) -> OperationResult:
        if self.fail_receive is not None:
            return self.fail_receive
        self.receives += 1
        return self.inner.receive(wait_seconds)

    def delete(self, receipt_handle: str) -> OperationResult:
        if self.fail_delete is not None:
            return self.fail_delete
        self.deleted.append(receipt_handle)
        return self.inner.delete(receipt_handle)


class WorkRecorder:
    """Work function that completes on a given attempt number.

    ``succeed_on`` counts invocations starting at 1; None never completes.
    """

    def __init__(self, clock: FakeClock, succeed_on: Optional[int] = 1):
        self.clock = clock
        self.succeed_on = succeed_on
        self.calls: List[JobAttempt] = []
        self.called_at: List[datetime] = []

    @property
    def invocations(self) -> int:
        return len(self.calls)

    def __call__(self, attempt: JobAttempt) -> bool:
        self.calls.append(attempt)
        self.called_at.append(self.clock.now())
        return self.succeed_on is not None and self.invocations >= self.succeed_on


@pytest.fixture
def fake_clock():
    """FakeClock starting at a fixed instant."""
    return FakeClock(START)


@pytest.fixture
def retry_config_factory():
    """Factory for creating RetryConfig instances."""

    def _factory(
        max_attempts: int = 5,
        wait_time_seconds: int = 0,
        max_delay_seconds: int = 900,
        due_tolerance_seconds: int = 2,
    ) -> RetryConfig:
        return RetryConfig(
            max_attempts=max_attempts,
            wait_time_seconds=wait_time_seconds,
            max_delay_seconds=max_delay_seconds,
            due_tolerance_seconds=due_tolerance_seconds,
        )

    return _factory


@pytest.fixture
def memory_gateway(fake_clock):
    """In-memory queue driven by the fake clock."""
    return InMemoryQueueGateway(clock=fake_clock)


@pytest.fixture
def recording_gateway(memory_gateway):
    """In-memory queue wrapped with call recording."""
    return RecordingGateway(memory_gateway)


@pytest.fixture
def error_sink():
    """Error handler collecting every reported error."""
    errors: List[Exception] = []

    def _handler(error: Exception) -> None:
        errors.append(error)

    _handler.errors = errors  # type: ignore[attr-defined]
    return _handler


@pytest.fixture
def scheduler_factory(fake_clock, recording_gateway, retry_config_factory, error_sink):
    """Factory for RetryScheduler wired to the fake clock and recording gateway."""

    def _factory(
        work=None,
        succeed_on: Optional[int] = 1,
        backoff=None,
        config: Optional[RetryConfig] = None,
        **config_overrides,
    ):
        work = work or WorkRecorder(fake_clock, succeed_on=succeed_on)
        scheduler = RetryScheduler(
            gateway=recording_gateway,
            work=work,
            backoff=backoff or constant_backoff(timedelta(seconds=60)),
            config=config or retry_config_factory(**config_overrides),
            error_handler=error_sink,
            clock=fake_clock,
        )
        return SimpleNamespace(
            scheduler=scheduler,
            work=work,
            gateway=recording_gateway,
            clock=fake_clock,
            errors=error_sink.errors,
        )

    return _factory


@pytest.fixture
def deliver_next():
    """Advance the fake clock to the next queued delivery and poll once."""

    def _deliver(harness) -> CycleOutcome:
        visible_at = harness.gateway.inner.next_visible_at()
        if visible_at is not None and visible_at > harness.clock.now():
            harness.clock.set(visible_at)
        return harness.scheduler.poll_once()

    return _deliver


@pytest.fixture
def mock_retry_settings(monkeypatch):
    """Patch get_settings in the factory module with a fake retry section."""

    def _apply(**overrides):
        values = dict(
            backend="memory",
            queue_url="",
            queue_name="",
            max_attempts=5,
            backoff_strategy="exponential",
            backoff_seed_seconds=5,
            wait_time_seconds=10,
            max_delay_seconds=900,
            due_tolerance_seconds=2,
            visibility_timeout_seconds=30,
            max_receive_count=None,
        )
        values.update(overrides)
        settings = SimpleNamespace(retry=SimpleNamespace(**values))
        monkeypatch.setattr(
            "infrastructure.resilience.retry.factory.get_settings", lambda: settings
        )
        return settings

    return _apply
