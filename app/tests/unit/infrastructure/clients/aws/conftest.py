"""Fixtures for AWS client tests.

Provides factory-as-fixture pattern for creating configurable fake boto3 clients
used across AWS client unit tests. boto3 is never called: tests monkeypatch
`infrastructure.clients.aws.executor.get_boto3_client`.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from infrastructure.clients.aws import AWSClients
from infrastructure.clients.aws.session_provider import SessionProvider
from infrastructure.clients.aws.sqs import SqsClient
from infrastructure.configuration.integrations.aws import AwsSettings

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/retry-queue"


class FakeClient:
    """Configurable fake boto3 client for unit tests.

    API methods are looked up in ``api_responses``; values may be static
    responses or callables receiving the call kwargs. Every call is recorded
    in ``calls`` as ``(method, kwargs)``.
    """

    def __init__(self, api_responses: Optional[Dict[str, Any]] = None):
        self._api_responses = api_responses or {}
        self.calls: List[tuple] = []

    def __getattr__(self, name: str):
        """Provide callable for API methods that returns configured responses."""
        if name.startswith("_") or name not in self._api_responses:
            raise AttributeError(name)

        resp = self._api_responses[name]

        def _call(*_args, **kwargs):
            self.calls.append((name, kwargs))
            if callable(resp):
                return resp(**kwargs)
            return resp

        return _call


@pytest.fixture
def make_fake_client():
    """Factory fixture for creating configurable fake boto3 clients.

    Usage:
        def test_something(make_fake_client, patch_boto3_client):
            client = make_fake_client(api_responses={"send_message": {...}})
            patch_boto3_client(client)
    """

    def _factory(api_responses: Optional[Dict[str, Any]] = None) -> FakeClient:
        return FakeClient(api_responses=api_responses)

    return _factory


@pytest.fixture
def patch_boto3_client(monkeypatch):
    """Route executor client creation to a fake client.

    Returns a callable taking the fake client; the kwargs of every
    get_boto3_client call are appended to the returned list.
    """

    def _patch(client: FakeClient) -> List[Dict[str, Any]]:
        client_calls: List[Dict[str, Any]] = []

        def get_boto3_client(
            service_name, session_config=None, client_config=None, role_arn=None
        ):
            client_calls.append(
                {
                    "service_name": service_name,
                    "session_config": session_config,
                    "client_config": client_config,
                    "role_arn": role_arn,
                }
            )
            return client

        monkeypatch.setattr(
            "infrastructure.clients.aws.executor.get_boto3_client", get_boto3_client
        )
        return client_calls

    return _patch


@pytest.fixture
def mock_aws_settings():
    """Fixture providing a mock AwsSettings instance for testing AWSClients.

    Tests can further customize this mock as needed:
        def test_something(mock_aws_settings):
            mock_aws_settings.AWS_REGION = "us-west-2"
    """
    settings = MagicMock(spec=AwsSettings)
    settings.AWS_REGION = "us-east-1"
    settings.SERVICE_ROLE_MAP = {
        "sqs": "arn:aws:iam::123456789012:role/SqsRole",
    }
    settings.ENDPOINT_URL = None
    settings.static_credentials = None
    return settings


@pytest.fixture
def aws_factory(mock_aws_settings):
    """Provide a simple AWSClients instance for unit tests."""
    return AWSClients(aws_settings=mock_aws_settings)


@pytest.fixture
def sqs_client():
    """Fixture for SqsClient with a region-only SessionProvider."""
    session_provider = SessionProvider(region="us-east-1")
    return SqsClient(session_provider=session_provider, default_role_arn=None)
