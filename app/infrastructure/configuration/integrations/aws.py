"""AWS integration settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class AwsSettings(IntegrationSettings):
    """AWS configuration settings.

    Environment Variables:
        AWS_REGION: AWS region for services (default: ca-central-1)
        AWS_ENDPOINT_URL: Custom endpoint (LocalStack, ElasticMQ)
        AWS_ACCESS_KEY_ID: Optional static access key
        AWS_SECRET_ACCESS_KEY: Optional static secret key
        AWS_SQS_ROLE_ARN: Optional role to assume for SQS calls

    When no static credentials are configured, boto3's default credential
    chain is used.

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        region = settings.aws.AWS_REGION
        ```
    """

    AWS_REGION: str = Field(default="ca-central-1", alias="AWS_REGION")
    ENDPOINT_URL: Optional[str] = Field(default=None, alias="AWS_ENDPOINT_URL")
    ACCESS_KEY_ID: Optional[str] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    SECRET_ACCESS_KEY: Optional[str] = Field(
        default=None, alias="AWS_SECRET_ACCESS_KEY"
    )
    SQS_ROLE_ARN: str = Field(default="", alias="AWS_SQS_ROLE_ARN")

    @property
    def SERVICE_ROLE_MAP(self) -> dict[str, str]:
        """Mapping of service names to the role ARN assumed for them.

        Returns:
            Dict of service identifier to role ARN, omitting unset roles
        """
        roles = {"sqs": self.SQS_ROLE_ARN}
        return {service: arn for service, arn in roles.items() if arn}

    @property
    def static_credentials(self) -> Optional[dict[str, str]]:
        """Static credential kwargs for boto3.Session, if both halves are set."""
        if self.ACCESS_KEY_ID and self.SECRET_ACCESS_KEY:
            return {
                "aws_access_key_id": self.ACCESS_KEY_ID,
                "aws_secret_access_key": self.SECRET_ACCESS_KEY,
            }
        return None
