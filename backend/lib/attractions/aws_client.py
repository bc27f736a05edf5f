"""AWS Client Factory

Provides boto3 clients configured for Lambda.

Usage:
    Instead of:
        import boto3
        dynamodb = boto3.client('dynamodb')

    Use:
        from backend.lib.attractions.aws_client import get_client
        dynamodb = get_client('dynamodb')

Clients are cached per (service, region) so warm Lambda invocations reuse
their connections.
"""

from typing import Any, Dict, Optional, Tuple

import boto3
from botocore.config import Config

from backend.lib.attractions.config import get_settings

# Standard retry mode is botocore's transport-level default; nothing is layered on top
BOTO_CONFIG = Config(
    retries={"max_attempts": 3, "mode": "standard"},
    read_timeout=60,
    connect_timeout=10,
)

_clients: Dict[Tuple[str, str], Any] = {}


def get_client(service_name: str, region_name: Optional[str] = None) -> Any:
    """Get an AWS client, creating it on first use.

    Args:
        service_name: AWS service name ('dynamodb', 's3', ...)
        region_name: Region override (defaults to AWS_REGION setting)

    Returns:
        boto3 client
    """
    region = region_name or get_settings().region
    key = (service_name, region)
    if key not in _clients:
        _clients[key] = boto3.client(service_name, region_name=region, config=BOTO_CONFIG)
    return _clients[key]


def clear_clients() -> None:
    """Forget cached clients (used by tests that swap AWS backends)."""
    _clients.clear()
