"""Upstream HTTP Service — shared httpx plumbing for the storefront's third-party APIs.

Invariants:
    - One httpx.AsyncClient per call, closed before returning
    - Transport failures (connect, timeout, protocol) become ExternalServiceError (502)
    - Response bodies are decoded leniently: non-JSON text is kept under "message"

Design Decisions:
    - Optional injected transport: tests pass httpx.MockTransport, production uses
      the default network transport
    - Status handling stays with each concrete client; upstreams disagree on what
      a non-2xx means for the storefront
"""

import logging
import uuid
from typing import Any

import httpx

from storefront.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class UpstreamService:
    """Base for clients of one upstream HTTP API."""

    service_name = "upstream"

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {"x-req-id": str(uuid.uuid4()), **kwargs.pop("headers", {})}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport,
            ) as client:
                return await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                f"{self.service_name} request failed: {e}",
                extra={"service": self.service_name},
            )
            raise ExternalServiceError(
                self.service_name, f"{self.service_name} is unreachable",
            ) from e

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


def decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"message": response.text}
