"""Storefront API Client — async httpx client for every gateway endpoint.

Invariants:
    - 403 -> AccessDeniedError, 404 -> ResourceNotFoundError,
      400 with field details -> RecordValidationError, any other non-2xx ->
      ExternalServiceError carrying the status and body
    - Transport failures propagate as httpx.HTTPError (callers classify them as network)
    - Implements TableDataSource, so a TableController can run against a live gateway

Design Decisions:
    - One AsyncClient per StorefrontApiClient (cookie jar keeps the session token)
    - No timeout by default: controllers own no deadlines, a slow gateway keeps
      the busy flag up until it answers
"""

import logging
from typing import Any

import httpx

from storefront.core.errors import (
    AccessDeniedError, ExternalServiceError, RecordValidationError, ResourceNotFoundError,
)
from storefront.core.table_query import TablePage

logger = logging.getLogger(__name__)

SERVICE_NAME = "storefront-api"


def _error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if body.get("message"):
            return str(body["message"])
    return fallback


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    body = _decode(response)
    path = response.request.url.path
    message = _error_message(body, f"Request to {path} failed with {response.status_code}")
    if response.status_code == 403:
        raise AccessDeniedError(message)
    if response.status_code == 404:
        raise ResourceNotFoundError("Resource", path)
    error = body.get("error") if isinstance(body, dict) else None
    if (
        response.status_code == 400
        and isinstance(error, dict)
        and error.get("code") == "RECORD_VALIDATION_ERROR"
    ):
        raise RecordValidationError(
            {d["field"]: d["message"] for d in error.get("details") or []},
        )
    raise ExternalServiceError(
        SERVICE_NAME, message,
        upstream_status=response.status_code, payload=body,
        http_status=response.status_code,
    )


class StorefrontApiClient:
    """Typed access to the storefront gateway."""

    def __init__(
        self,
        base_url: str,
        *,
        session_token: str | None = None,
        cookie_name: str = "session_token",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        cookies = {cookie_name: session_token} if session_token else None
        self._client = httpx.AsyncClient(
            base_url=base_url, transport=transport, timeout=timeout, cookies=cookies,
        )

    async def __aenter__(self) -> "StorefrontApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self._client.request(method, url, **kwargs)
        raise_for_status(response)
        return response

    async def _json(self, method: str, url: str, **kwargs) -> Any:
        return (await self._request(method, url, **kwargs)).json()

    # ─── Admin ───────────────────────────────────────────────────

    async def admin_status(self) -> bool:
        body = await self._json("GET", "/api/admin/status")
        return bool(body.get("isAdmin"))

    async def list_schemas(self) -> list[str]:
        return list(await self._json("GET", "/api/admin/schemas"))

    async def get_schema(self, table_name: str) -> dict:
        return await self._json("GET", f"/api/admin/schemas/{table_name}")

    # ─── Tables (TableDataSource) ────────────────────────────────

    async def list_rows(self, table_name: str, params: dict[str, str]) -> TablePage:
        body = await self._json("GET", f"/api/tables/{table_name}", params=params)
        return TablePage.from_response(body)

    async def create_row(self, table_name: str, record: dict[str, Any]) -> dict[str, Any]:
        return await self._json("POST", f"/api/tables/{table_name}", json=record)

    async def update_row(
        self, table_name: str, row_id: Any, record: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._json("PUT", f"/api/tables/{table_name}/{row_id}", json=record)

    async def delete_row(self, table_name: str, row_id: Any) -> None:
        await self._request("DELETE", f"/api/tables/{table_name}/{row_id}")

    async def export_csv(self, table_name: str, params: dict[str, str]) -> bytes:
        response = await self._request("GET", f"/api/tables/{table_name}/export", params=params)
        return response.content

    # ─── Public storefront ───────────────────────────────────────

    async def submit_form(self, form_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._json("POST", "/api/forms/submit", json={"formId": form_id, **data})

    async def create_checkout_session(
        self,
        products: list[dict[str, Any]],
        success_router: str | None = None,
        cancel_router: str | None = None,
    ) -> dict[str, Any]:
        return await self._json(
            "POST", "/api/create-checkout-session",
            json={
                "products": products,
                "successRouter": success_router,
                "cancelRouter": cancel_router,
            },
        )

    async def list_products(self) -> Any:
        return await self._json("GET", "/api/products")

    async def purchase_detail(self, session_id: str) -> Any:
        return await self._json(
            "GET", "/api/products/purchase-detail", params={"sessionId": session_id},
        )

    async def chat(self, message: str) -> str:
        body = await self._json("POST", "/api/chatbot", json={"message": message})
        return body["response"]

    async def upload_media(self, filename: str, content: bytes, admin: bool = False) -> str:
        path = "/api/upload/file" if admin else "/api/upload/media"
        body = await self._json("POST", path, files={"file": (filename, content)})
        return body["url"]
