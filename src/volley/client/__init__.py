"""HTTP transport layer: the client contract, httpx client, and pre-flight checks."""

from volley.client.base import (
    BaseClient,
    BodySchemaError,
    ClientConfigError,
    ClientError,
    TransportError,
)
from volley.client.http import HTTPClient, build_url

__all__ = [
    "BaseClient",
    "BodySchemaError",
    "ClientConfigError",
    "ClientError",
    "HTTPClient",
    "TransportError",
    "build_url",
]
