"""Base AWS call execution for infrastructure clients.

Provides `get_boto3_client` and `execute_aws_api_call` with the
OperationResult pattern. This module does not read settings at import time;
configuration is passed in by the caller (usually via SessionProvider).
"""

import time
from typing import Any, Dict, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
import structlog

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

logger = structlog.get_logger()

THROTTLING_ERRORS = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "RequestThrottled",
    }
)
UNAUTHORIZED_ERRORS = frozenset(
    {
        "AccessDenied",
        "AccessDeniedException",
        "UnauthorizedOperation",
        "InvalidClientTokenId",
        "ExpiredToken",
    }
)
NOT_FOUND_ERRORS = frozenset(
    {
        "AWS.SimpleQueueService.NonExistentQueue",
        "QueueDoesNotExist",
        "ResourceNotFoundException",
    }
)


def get_boto3_client(
    service_name: str,
    session_config: Optional[Dict[str, Any]] = None,
    client_config: Optional[Dict[str, Any]] = None,
    role_arn: Optional[str] = None,
    session_name: str = "RetrySchedulerSession",
) -> BaseClient:
    """Create a boto3 client for the given service.

    Args:
        service_name: AWS service name (e.g., 'sqs')
        session_config: Optional boto3 session kwargs (region, static credentials)
        client_config: Optional client kwargs (e.g., endpoint_url)
        role_arn: Optional role to assume before creating the client
        session_name: Name for the assumed role session

    Returns:
        botocore client instance
    """
    session_config = session_config or {}
    client_config = client_config or {}

    if role_arn:
        sts = boto3.client("sts")
        assumed = sts.assume_role(RoleArn=role_arn, RoleSessionName=session_name)
        creds = assumed["Credentials"]
        region_name = session_config.get("region_name")
        session = boto3.Session(
            aws_access_key_id=creds["AccessKeyId"],
            aws_secret_access_key=creds["SecretAccessKey"],
            aws_session_token=creds["SessionToken"],
            region_name=region_name,
        )
    else:
        session = boto3.Session(**session_config)

    return session.client(service_name, **client_config)


def _calculate_retry_delay(attempt: int, backoff_factor: float = 0.5) -> float:
    return backoff_factor * (2**attempt)


def _map_client_error(e: ClientError, service_name: str, method: str) -> OperationResult:
    error = e.response.get("Error", {})
    error_code = error.get("Code")
    error_message = error.get("Message", str(e))

    if error_code in THROTTLING_ERRORS:
        retry_after = None
        try:
            retry_after = int(e.response.get("RetryAfter", 0)) or None
        except (TypeError, ValueError):
            retry_after = None
        return OperationResult.transient_error(
            message=error_message, error_code=error_code, retry_after=retry_after
        )

    if error_code in UNAUTHORIZED_ERRORS:
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED, message=error_message, error_code=error_code
        )

    if error_code in NOT_FOUND_ERRORS:
        return OperationResult.error(
            OperationStatus.NOT_FOUND, message=error_message, error_code=error_code
        )

    logger.debug(
        "aws_client_error_unclassified",
        service=service_name,
        method=method,
        code=error_code,
    )
    return OperationResult.permanent_error(message=error_message, error_code=error_code)


def execute_aws_api_call(
    service_name: str,
    method: str,
    role_arn: Optional[str] = None,
    session_config: Optional[Dict[str, Any]] = None,
    client_config: Optional[Dict[str, Any]] = None,
    max_retries: int = 3,
    backoff_factor: float = 0.5,
    **kwargs,
) -> OperationResult:
    """Execute an AWS API call with retries and standardized results.

    Throttling and connection failures are retried with exponential backoff
    up to ``max_retries`` times. Every other failure is returned immediately.

    Args:
        service_name: AWS service name (e.g., 'sqs')
        method: Client method to invoke (e.g., 'send_message')
        role_arn: Optional role to assume
        session_config: Optional boto3 session kwargs
        client_config: Optional client kwargs
        max_retries: Retries for transient failures
        backoff_factor: Base of the exponential retry delay (seconds)
        **kwargs: Parameters passed through to the API method

    Returns:
        OperationResult whose data is the raw response on success
    """
    last_result: Optional[OperationResult] = None

    for attempt in range(max_retries + 1):
        try:
            client = get_boto3_client(
                service_name,
                session_config=session_config,
                client_config=client_config,
                role_arn=role_arn,
            )
            response = getattr(client, method)(**kwargs)
            return OperationResult.success(
                data=response, message=f"{service_name}.{method} succeeded"
            )

        except ClientError as e:
            last_result = _map_client_error(e, service_name, method)

        except BotoCoreError as e:
            last_result = OperationResult.transient_error(
                message=f"{type(e).__name__}: {e}", error_code="CONNECTION_ERROR"
            )

        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "aws_api_unexpected_error",
                service=service_name,
                method=method,
                error=str(e),
            )
            return OperationResult.permanent_error(message=str(e))

        if (
            last_result.status == OperationStatus.TRANSIENT_ERROR
            and attempt < max_retries
        ):
            delay = _calculate_retry_delay(attempt, backoff_factor)
            logger.warning(
                "aws_api_retry",
                service=service_name,
                method=method,
                attempt=attempt + 1,
                error=last_result.message,
                delay=delay,
            )
            time.sleep(delay)
            continue

        logger.error(
            "aws_api_error_final",
            service=service_name,
            method=method,
            error=last_result.message,
            error_code=last_result.error_code,
        )
        return last_result

    return last_result or OperationResult.permanent_error(message="unknown_error")
