"""Session provider for AWS client operations.

Centralizes boto3 session configuration for the AWS service clients: region,
custom endpoint (LocalStack, ElasticMQ), optional static credentials and
per-service role assumption.
"""

from typing import Any, Dict, Optional

import structlog

from infrastructure.clients.aws.executor import get_boto3_client

logger = structlog.get_logger()


class SessionProvider:
    """Centralized provider for AWS session configuration and credential handling.

    Args:
        region: AWS region for all clients (e.g., 'us-east-1')
        service_role_map: Optional mapping of service name to role ARN to assume
        endpoint_url: Custom endpoint URL (for testing/LocalStack)
        credentials: Optional static credential kwargs for boto3.Session
    """

    def __init__(
        self,
        region: Optional[str] = None,
        service_role_map: Optional[dict[str, str]] = None,
        endpoint_url: Optional[str] = None,
        credentials: Optional[dict[str, str]] = None,
    ) -> None:
        self.region = region
        self.service_role_map = service_role_map
        self.endpoint_url = endpoint_url
        self.credentials = credentials

    def get_role_arn_for_service(self, service_name: str) -> Optional[str]:
        """Get the role ARN to assume for the given AWS service.

        Args:
            service_name: AWS service name (e.g., 'sqs')
        Returns:
            Role ARN string or None if no role is configured for the service
        """
        if self.service_role_map and service_name in self.service_role_map:
            return self.service_role_map[service_name]
        return None

    def build_client_kwargs(
        self,
        service_name: Optional[str] = None,
        role_arn: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build session and client configuration kwargs for boto3.

        Resolves the role ARN from the service_role_map when service_name is
        given and role_arn is not.

        Args:
            service_name: AWS service name for role lookup
            role_arn: Optional explicit role ARN

        Returns:
            Dict with session_config, client_config, and role_arn for
            passing to execute_aws_api_call
        """
        if role_arn is None and service_name:
            role_arn = self.get_role_arn_for_service(service_name)

        session_config: Dict[str, Any] = {}
        client_config: Dict[str, Any] = {}

        if self.region:
            session_config["region_name"] = self.region
            client_config["region_name"] = self.region

        if self.credentials:
            session_config.update(self.credentials)

        if self.endpoint_url:
            client_config["endpoint_url"] = self.endpoint_url

        logger.debug(
            "built_client_kwargs",
            service_name=service_name,
            region=self.region,
            endpoint_url=self.endpoint_url,
            role_arn=role_arn,
        )
        return {
            "session_config": session_config or None,
            "client_config": client_config or None,
            "role_arn": role_arn,
        }

    def get_boto3_client(
        self, service_name: str, role_arn: Optional[str] = None
    ) -> Any:
        """Get a fully-configured boto3 client for the given service."""
        kw = self.build_client_kwargs(service_name=service_name, role_arn=role_arn)
        return get_boto3_client(
            service_name,
            session_config=kw["session_config"],
            client_config=kw["client_config"],
            role_arn=kw["role_arn"],
        )
