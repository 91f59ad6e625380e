"""httpx-backed HTTP client for executing resolved test requests."""

from __future__ import annotations

import json
import ssl
import time
from typing import Any

import httpx
import structlog

from volley.client.base import BaseClient, ClientConfigError, TransportError
from volley.client.schema import validate_body_schema
from volley.models.result import HTTPResponse
from volley.models.suite import CertificateConfig, SuiteConfig
from volley.models.testcase import RequestSpec
from volley.templating.values import format_value

logger = structlog.get_logger(__name__)

JSON_CONTENT_TYPES = ("application/json", "text/json")


def build_tls_context(certificate: CertificateConfig) -> ssl.SSLContext | bool:
    """Build an SSL context from the suite's certificate settings.

    Returns True (default verification) when no certificate material is
    configured. A client cert is only loaded when both cert and key are set.

    Raises:
        ClientConfigError: If any configured file cannot be loaded.
    """
    if not certificate.cert_file and not certificate.ca_file:
        return True

    try:
        context = ssl.create_default_context(cafile=certificate.ca_file or None)
        if certificate.cert_file and certificate.key_file:
            context.load_cert_chain(certificate.cert_file, certificate.key_file)
    except (OSError, ssl.SSLError) as exc:
        raise ClientConfigError(f"failed to load TLS configuration: {exc}") from exc
    return context


def build_url(base_url: str, path: str) -> str:
    """Join base URL and path with exactly one slash between them."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def build_query_params(query: dict[str, Any]) -> list[tuple[str, str]]:
    """Flatten a query mapping into string pairs; list values repeat the key."""
    params: list[tuple[str, str]] = []
    for key, value in query.items():
        if isinstance(value, list):
            params.extend((key, format_value(item)) for item in value)
        else:
            params.append((key, format_value(value)))
    return params


def is_json_content_type(content_type: str) -> bool:
    return any(marker in content_type for marker in JSON_CONTENT_TYPES)


class HTTPClient(BaseClient):
    """Sends RequestSpecs with httpx and wraps the result in HTTPResponse.

    Args:
        base_url: Prefix for every request path.
        headers: Global headers; per-request headers override them.
        timeout: Per-request timeout in seconds.
        certificate: TLS material (client cert/key, CA bundle).
        transport: Optional httpx transport (e.g. ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        certificate: CertificateConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.headers = dict(headers or {})
        self.timeout = timeout
        verify = build_tls_context(certificate or CertificateConfig())
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=verify,
            transport=transport,
        )

    @classmethod
    def from_suite(
        cls,
        config: SuiteConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> HTTPClient:
        return cls(
            base_url=config.base_url,
            headers=config.headers,
            timeout=config.timeout,
            certificate=config.certificate,
            transport=transport,
        )

    def _merge_headers(self, request_headers: dict[str, str], has_body: bool) -> dict[str, str]:
        merged = dict(self.headers)
        merged.update(request_headers)
        if has_body and not any(key.lower() == "content-type" for key in merged):
            merged["Content-Type"] = "application/json"
        return merged

    async def send(self, request: RequestSpec) -> HTTPResponse:
        """Send a request; see BaseClient.send."""
        if request.body_schema and request.body is not None:
            validate_body_schema(request.body, request.body_schema)

        url = build_url(self.base_url, request.path)
        content: bytes | None = None
        if request.body is not None:
            try:
                content = json.dumps(
                    request.body, ensure_ascii=False, allow_nan=False
                ).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise TransportError(f"failed to serialize request body: {exc}") from exc

        headers = self._merge_headers(request.headers, content is not None)
        method = request.method.upper()
        logger.debug(
            "request_sent",
            method=method,
            url=url,
            body=content.decode("utf-8") if content is not None else None,
        )

        start = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                url,
                params=build_query_params(request.query) or None,
                headers=headers,
                content=content,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"failed to send request: {exc}") from exc
        except (ValueError, TypeError) as exc:
            # UnicodeEncodeError from non-ASCII header values lands here
            raise TransportError(f"failed to build request: {exc}") from exc
        elapsed = time.perf_counter() - start

        body = response.content
        body_json: Any = None
        if body and is_json_content_type(response.headers.get("content-type", "")):
            try:
                body_json = json.loads(body)
            except ValueError:
                body_json = None

        return HTTPResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
            body_json=body_json,
            duration=elapsed,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
