"""Infrastructure AWS clients public API.

The main facade is AWSClients, which composes per-service clients over a
shared SessionProvider:

    from infrastructure.services import get_aws_clients

    aws = get_aws_clients()
    result = aws.sqs.send_message(queue_url, body, delay_seconds=30)
    if not result.is_success:
        ...
"""

from infrastructure.clients.aws.facade import AWSClients
from infrastructure.clients.aws.session_provider import SessionProvider
from infrastructure.clients.aws.sqs import SqsClient

__all__ = [
    "AWSClients",
    "SessionProvider",
    "SqsClient",
]
