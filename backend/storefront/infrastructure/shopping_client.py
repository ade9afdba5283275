"""Shopping Service Client — checkout sessions, product catalog, purchase details.

Invariants:
    - Every request carries the configured project id
    - Non-2xx upstream answers raise ExternalServiceError with http_status 400 and
      the upstream body as payload, so callers see the shopping service's reason
    - Successful bodies are returned unmodified

Design Decisions:
    - Payment internals live entirely upstream; this client only forwards
"""

from typing import Any

import httpx

from storefront.core.errors import ExternalServiceError
from storefront.infrastructure.http_service import UpstreamService, decode_body


class ShoppingServiceClient(UpstreamService):
    service_name = "shopping-service"

    def __init__(
        self,
        base_url: str,
        project_id: str,
        timeout_seconds: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout_seconds, transport)
        self.project_id = project_id

    async def create_checkout_session(
        self,
        products: list[dict[str, Any]],
        *,
        customer_email: str | None = None,
        success_url: str | None = None,
        cancel_url: str | None = None,
        origin: str | None = None,
    ) -> Any:
        headers = {"x-worker-origin": origin} if origin else {}
        response = await self.request(
            "POST", self.url("/api/payment/create-checkout-session"),
            headers=headers,
            json={
                "projectId": self.project_id,
                "customerEmail": customer_email,
                "products": products,
                "successUrl": success_url,
                "cancelUrl": cancel_url,
            },
        )
        return self._unwrap(response, "Failed to create checkout session")

    async def list_products(self) -> Any:
        response = await self.request(
            "GET", self.url("/api/products"), params={"projectId": self.project_id},
        )
        return self._unwrap(response, "Failed to fetch products")

    async def purchase_detail(self, session_id: str) -> Any:
        response = await self.request(
            "POST", self.url("/api/products/purchase-detail"),
            json={"projectId": self.project_id, "sessionId": session_id},
        )
        return self._unwrap(response, "Failed to fetch purchase detail")

    def _unwrap(self, response: httpx.Response, message: str) -> Any:
        body = decode_body(response)
        if response.is_error:
            raise ExternalServiceError(
                self.service_name, message,
                upstream_status=response.status_code, payload=body, http_status=400,
            )
        return body
