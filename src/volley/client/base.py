"""BaseClient ABC and the errors the transport layer raises.

The orchestrator only depends on ``BaseClient.send``; the httpx
implementation lives in ``volley.client.http`` and tests substitute
their own subclasses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from volley.models.result import HTTPResponse
from volley.models.testcase import RequestSpec


class ClientError(Exception):
    """Base class for errors raised while sending a request."""


class TransportError(ClientError):
    """The request could not be sent or no response was received.

    Transport errors are retried according to the test's retry policy.
    """


class BodySchemaError(ClientError):
    """The request body does not match its declared ``body_schema``.

    Raised before anything is sent; the test fails without retry.

    Attributes:
        field: The offending field path.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class ClientConfigError(Exception):
    """The client could not be configured (e.g. unreadable TLS material)."""


class BaseClient(ABC):
    """Abstract base class for HTTP clients used by the orchestrator."""

    @abstractmethod
    async def send(self, request: RequestSpec) -> HTTPResponse:
        """Send a fully-resolved request and return the response.

        Raises:
            BodySchemaError: If the body fails pre-flight schema validation.
            TransportError: If the request fails at the transport level.
        """
        ...

    async def aclose(self) -> None:
        """Release any underlying resources. Default is a no-op."""

    async def __aenter__(self) -> BaseClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
