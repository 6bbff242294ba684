"""Delay queue gateway.

The scheduler talks to its queue only through the QueueGateway protocol.
Implementations return OperationResult instead of raising so that transport
failures can be routed to the scheduler's error handler.
"""

import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Protocol

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from infrastructure.resilience.retry.clock import Clock, SystemClock
from infrastructure.resilience.retry.config import SQS_MAX_DELAY_SECONDS

logger = get_module_logger()


@dataclass(frozen=True)
class QueueMessage:
    """A message received from the delay queue.

    Attributes:
        body: Raw message body, None when the queue returned none
        receipt_handle: Handle used to delete this delivery
        message_id: Queue assigned message identifier
        receive_count: Number of times the queue has delivered the message
    """

    body: Optional[str]
    receipt_handle: str
    message_id: str
    receive_count: int = 1


class QueueGateway(Protocol):
    """Delay queue interface used by the retry scheduler.

    Methods:
        send: Enqueue a body, invisible for delay_seconds (data: message id)
        receive: Long-poll for at most one message (data: QueueMessage or None)
        delete: Acknowledge a delivery by its receipt handle

    Attributes:
        max_delay_seconds: Largest delay a single send accepts
    """

    max_delay_seconds: int

    def send(self, body: str, delay_seconds: int) -> OperationResult: ...

    def receive(self, wait_seconds: int) -> OperationResult: ...

    def delete(self, receipt_handle: str) -> OperationResult: ...


@dataclass
class _StoredMessage:
    message_id: str
    body: str
    sent_at: datetime
    visible_at: datetime
    receive_count: int = 0
    receipt_handle: Optional[str] = None


class InMemoryQueueGateway:
    """In-memory delay queue with SQS-like delivery semantics.

    Thread-safe queue suitable for development and tests:
    - Per-message delivery delay, rejected outside [0, max_delay_seconds]
    - Visibility timeout after each receive; undeleted messages reappear
    - Optional redrive to a dead-letter list after max_receive_count receives
    - Only the latest receipt handle of a message is valid, as each receive
      replaces the previous one

    Message visibility is judged against the injected clock, so a FakeClock
    makes delays instantaneous. Long polls block in real time until a message
    is visible or wait_seconds elapse.

    Attributes:
        max_delay_seconds: Largest accepted delivery delay
        visibility_timeout_seconds: In-flight window after a receive
        max_receive_count: Receives before a message is dead-lettered
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        max_delay_seconds: int = SQS_MAX_DELAY_SECONDS,
        visibility_timeout_seconds: int = 30,
        max_receive_count: Optional[int] = None,
    ) -> None:
        if max_receive_count is not None and max_receive_count < 1:
            raise ValueError("max_receive_count must be at least 1")
        self.clock = clock or SystemClock()
        self.max_delay_seconds = max_delay_seconds
        self.visibility_timeout_seconds = visibility_timeout_seconds
        self.max_receive_count = max_receive_count

        self._messages: Dict[str, _StoredMessage] = {}
        self._handles: Dict[str, str] = {}
        self._dead_letters: List[QueueMessage] = []
        self._condition = threading.Condition()
        self._next_id = 1

    def send(self, body: str, delay_seconds: int) -> OperationResult:
        if delay_seconds < 0 or delay_seconds > self.max_delay_seconds:
            return OperationResult.permanent_error(
                message=(
                    f"delay_seconds must be between 0 and {self.max_delay_seconds}, "
                    f"got {delay_seconds}"
                ),
                error_code="InvalidParameterValue",
            )

        with self._condition:
            message_id = f"msg-{self._next_id}"
            self._next_id += 1
            now = self.clock.now()
            self._messages[message_id] = _StoredMessage(
                message_id=message_id,
                body=body,
                sent_at=now,
                visible_at=now + timedelta(seconds=delay_seconds),
            )
            self._condition.notify_all()

        logger.debug(
            "queue_message_sent", message_id=message_id, delay_seconds=delay_seconds
        )
        return OperationResult.success(data=message_id, message="message sent")

    def receive(self, wait_seconds: int) -> OperationResult:
        deadline = time.monotonic() + max(wait_seconds, 0)
        with self._condition:
            while True:
                message = self._take_visible_locked()
                if message is not None:
                    return OperationResult.success(
                        data=message, message="message received"
                    )

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return OperationResult.success(data=None, message="no messages")

                # Wake up when the next delayed message becomes visible.
                next_visible = self._next_visible_locked()
                if next_visible is not None:
                    until_visible = (next_visible - self.clock.now()).total_seconds()
                    remaining = min(remaining, max(until_visible, 0.01))
                self._condition.wait(timeout=remaining)

    def delete(self, receipt_handle: str) -> OperationResult:
        with self._condition:
            message_id = self._handles.pop(receipt_handle, None)
            if message_id is None:
                return OperationResult.permanent_error(
                    message="receipt handle is invalid",
                    error_code="ReceiptHandleIsInvalid",
                )
            self._messages.pop(message_id, None)

        logger.debug("queue_message_deleted", message_id=message_id)
        return OperationResult.success(message="message deleted")

    def _take_visible_locked(self) -> Optional[QueueMessage]:
        now = self.clock.now()
        for message_id, stored in list(self._messages.items()):
            if stored.visible_at > now:
                continue

            if (
                self.max_receive_count is not None
                and stored.receive_count >= self.max_receive_count
            ):
                del self._messages[message_id]
                self._forget_handle_locked(stored)
                self._dead_letters.append(self._as_queue_message(stored, ""))
                logger.warning(
                    "queue_message_dead_lettered",
                    message_id=message_id,
                    receive_count=stored.receive_count,
                )
                continue

            stored.receive_count += 1
            stored.visible_at = now + timedelta(
                seconds=self.visibility_timeout_seconds
            )
            self._forget_handle_locked(stored)
            receipt_handle = uuid.uuid4().hex
            stored.receipt_handle = receipt_handle
            self._handles[receipt_handle] = message_id
            return self._as_queue_message(stored, receipt_handle)
        return None

    def _forget_handle_locked(self, stored: _StoredMessage) -> None:
        if stored.receipt_handle is not None:
            self._handles.pop(stored.receipt_handle, None)
            stored.receipt_handle = None

    def _next_visible_locked(self) -> Optional[datetime]:
        if not self._messages:
            return None
        return min(stored.visible_at for stored in self._messages.values())

    @staticmethod
    def _as_queue_message(stored: _StoredMessage, receipt_handle: str) -> QueueMessage:
        return QueueMessage(
            body=stored.body,
            receipt_handle=receipt_handle,
            message_id=stored.message_id,
            receive_count=stored.receive_count,
        )

    def next_visible_at(self) -> Optional[datetime]:
        """Return when the earliest queued message becomes receivable."""
        with self._condition:
            return self._next_visible_locked()

    def get_dead_letters(self) -> List[QueueMessage]:
        """Return messages redriven to the dead-letter list."""
        with self._condition:
            return list(self._dead_letters)

    def get_stats(self) -> Dict[str, Any]:
        """Get queue statistics."""
        with self._condition:
            now = self.clock.now()
            visible = sum(1 for m in self._messages.values() if m.visible_at <= now)
            return {
                "messages": len(self._messages),
                "visible": visible,
                "delayed_or_in_flight": len(self._messages) - visible,
                "dead_letters": len(self._dead_letters),
            }
