"""AWS Clients facade.

Builds a shared SessionProvider from AwsSettings and exposes the per-service
clients as attributes.
"""

import structlog

from infrastructure.clients.aws.session_provider import SessionProvider
from infrastructure.clients.aws.sqs import SqsClient
from infrastructure.configuration.integrations.aws import AwsSettings

logger = structlog.get_logger()


class AWSClients:
    """Facade for AWS service clients.

    Args:
        aws_settings: AWS configuration from settings.aws

    Usage:
        aws = AWSClients(aws_settings=settings.aws)
        result = aws.sqs.get_queue_url("retry-queue")
        if result.is_success:
            queue_url = result.data
    """

    def __init__(self, aws_settings: AwsSettings) -> None:
        self._session_provider = SessionProvider(
            region=aws_settings.AWS_REGION,
            service_role_map=aws_settings.SERVICE_ROLE_MAP,
            endpoint_url=getattr(aws_settings, "ENDPOINT_URL", None),
            credentials=getattr(aws_settings, "static_credentials", None),
        )

        self.sqs: SqsClient = SqsClient(
            self._session_provider,
            default_role_arn=self._session_provider.get_role_arn_for_service("sqs"),
        )
        self._logger = logger.bind(component="aws_clients")
