"""SQS client for AWS operations.

Wraps the SQS calls the retry scheduler needs (queue lookup, send with a
delivery delay, long-poll receive, delete) with OperationResult returns.
"""

from typing import List, Optional

import structlog

from infrastructure.clients.aws.executor import execute_aws_api_call
from infrastructure.clients.aws.session_provider import SessionProvider
from infrastructure.operations.result import OperationResult

logger = structlog.get_logger()


class SqsClient:
    """Client for SQS operations.

    All methods return OperationResult; the raw boto3 response is in
    ``result.data`` on success.

    Args:
        session_provider: SessionProvider instance for credential/config management
        default_role_arn: Optional role to assume for every call
    """

    def __init__(
        self,
        session_provider: SessionProvider,
        default_role_arn: Optional[str] = None,
    ) -> None:
        self._session_provider = session_provider
        self._default_role_arn = default_role_arn
        self.service_name = "sqs"
        self._logger = logger.bind(component="sqs_client")

    def _client_kwargs(self) -> dict:
        return self._session_provider.build_client_kwargs(
            service_name=self.service_name, role_arn=self._default_role_arn
        )

    def get_queue_url(self, queue_name: str) -> OperationResult:
        """Resolve a queue name to its URL.

        Args:
            queue_name: Name of the SQS queue

        Returns:
            OperationResult whose data is the queue URL string
        """
        if not queue_name:
            return OperationResult.permanent_error(
                message="queue_name must not be empty", error_code="INVALID_QUEUE_NAME"
            )
        result = execute_aws_api_call(
            "sqs", "get_queue_url", QueueName=queue_name, **self._client_kwargs()
        )
        if not result.is_success:
            return result
        return OperationResult.success(
            data=result.data["QueueUrl"], message=result.message
        )

    def send_message(
        self,
        queue_url: str,
        message_body: str,
        delay_seconds: int = 0,
    ) -> OperationResult:
        """Send a message with an optional delivery delay.

        Args:
            queue_url: URL of the SQS queue
            message_body: Message body
            delay_seconds: Delivery delay in seconds (SQS allows 0-900)

        Returns:
            OperationResult with the SendMessage response
        """
        self._logger.debug(
            "sending_message",
            queue_url=queue_url,
            delay_seconds=delay_seconds,
        )
        params = {
            "QueueUrl": queue_url,
            "MessageBody": message_body,
            "DelaySeconds": delay_seconds,
        }
        return execute_aws_api_call(
            "sqs", "send_message", **self._client_kwargs(), **params
        )

    def receive_message(
        self,
        queue_url: str,
        max_number_of_messages: int = 1,
        wait_time_seconds: int = 10,
        attribute_names: Optional[List[str]] = None,
    ) -> OperationResult:
        """Long-poll a queue for messages.

        Args:
            queue_url: URL of the SQS queue
            max_number_of_messages: Messages to return at most (1-10)
            wait_time_seconds: Long-poll wait (0-20)
            attribute_names: System attributes to include (e.g. ApproximateReceiveCount)

        Returns:
            OperationResult whose data is the list of received messages (may be empty)
        """
        params = {
            "QueueUrl": queue_url,
            "MaxNumberOfMessages": max_number_of_messages,
            "WaitTimeSeconds": wait_time_seconds,
        }
        if attribute_names:
            params["AttributeNames"] = attribute_names
        result = execute_aws_api_call(
            "sqs", "receive_message", **self._client_kwargs(), **params
        )
        if not result.is_success:
            return result
        return OperationResult.success(
            data=result.data.get("Messages", []), message=result.message
        )

    def delete_message(self, queue_url: str, receipt_handle: str) -> OperationResult:
        """Delete a received message so it is not redelivered.

        Args:
            queue_url: URL of the SQS queue
            receipt_handle: Receipt handle from the receive call

        Returns:
            OperationResult with the DeleteMessage response
        """
        return execute_aws_api_call(
            "sqs",
            "delete_message",
            QueueUrl=queue_url,
            ReceiptHandle=receipt_handle,
            **self._client_kwargs(),
        )
