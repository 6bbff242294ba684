"""SQS-backed delay queue gateway."""

from typing import Optional

from infrastructure.clients.aws.sqs import SqsClient
from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from infrastructure.resilience.retry.config import SQS_MAX_DELAY_SECONDS
from infrastructure.resilience.retry.exceptions import DelayConfigurationError
from infrastructure.resilience.retry.gateway import QueueMessage

logger = get_module_logger()


class SqsQueueGateway:
    """QueueGateway over a single SQS queue.

    Receives one message per call and requests ApproximateReceiveCount so the
    receive count is visible in logs. Delays are validated against the
    ceiling before SQS is called.

    Args:
        sqs_client: SqsClient used for every call
        queue_url: URL of the delay queue
        max_delay_seconds: Largest delay per send, at most 900 on SQS
    """

    def __init__(
        self,
        sqs_client: SqsClient,
        queue_url: str,
        max_delay_seconds: int = SQS_MAX_DELAY_SECONDS,
    ) -> None:
        if not queue_url:
            raise ValueError("queue_url is required for the SQS gateway")
        if max_delay_seconds < 0 or max_delay_seconds > SQS_MAX_DELAY_SECONDS:
            raise DelayConfigurationError(
                f"max_delay_seconds must be between 0 and {SQS_MAX_DELAY_SECONDS}"
            )
        self.sqs_client = sqs_client
        self.queue_url = queue_url
        self.max_delay_seconds = max_delay_seconds

    def send(self, body: str, delay_seconds: int) -> OperationResult:
        if delay_seconds < 0 or delay_seconds > self.max_delay_seconds:
            return OperationResult.permanent_error(
                message=(
                    f"delay_seconds must be between 0 and {self.max_delay_seconds}, "
                    f"got {delay_seconds}"
                ),
                error_code="InvalidParameterValue",
            )
        result = self.sqs_client.send_message(
            self.queue_url, body, delay_seconds=delay_seconds
        )
        if not result.is_success:
            return result
        return OperationResult.success(
            data=(result.data or {}).get("MessageId"), message="message sent"
        )

    def receive(self, wait_seconds: int) -> OperationResult:
        result = self.sqs_client.receive_message(
            self.queue_url,
            max_number_of_messages=1,
            wait_time_seconds=wait_seconds,
            attribute_names=["ApproximateReceiveCount"],
        )
        if not result.is_success:
            return result

        messages = result.data or []
        if not messages:
            return OperationResult.success(data=None, message="no messages")

        raw = messages[0]
        return OperationResult.success(
            data=QueueMessage(
                body=raw.get("Body"),
                receipt_handle=raw.get("ReceiptHandle", ""),
                message_id=raw.get("MessageId", ""),
                receive_count=_receive_count(raw.get("Attributes")),
            ),
            message="message received",
        )

    def delete(self, receipt_handle: str) -> OperationResult:
        return self.sqs_client.delete_message(self.queue_url, receipt_handle)


def _receive_count(attributes: Optional[dict]) -> int:
    try:
        return int((attributes or {}).get("ApproximateReceiveCount", 1))
    except (TypeError, ValueError):
        logger.warning("sqs_receive_count_unreadable", attributes=attributes)
        return 1
