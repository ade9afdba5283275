"""Platform API Client — model-runner endpoint used for email delivery and file hosting.

Invariants:
    - Every call is POST {platform_api_url} with {"model": ..., "inputs": {...}}
      and a Bearer API key
    - send_email succeeds only when send_email_status == "success"
    - upload_base64 returns the hosted URL or raises

Design Decisions:
    - The sender local part is suffixed with the platform's mail domain upstream;
      callers pass only the bare sender name
"""

import base64
from typing import Any

import httpx

from storefront.core.errors import ExternalServiceError
from storefront.infrastructure.http_service import UpstreamService, decode_body


SEND_EMAIL_MODEL = "aws/send-email"
UPLOAD_MODEL = "cloudflare/oss/upload"
SENDER_DOMAIN = "heyboss.live"


class PlatformApiClient(UpstreamService):
    service_name = "platform-api"

    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout_seconds: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(api_url, timeout_seconds, transport)
        self.api_key = api_key

    async def run(self, model: str, inputs: dict[str, Any]) -> Any:
        response = await self.request(
            "POST", self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={"model": model, "inputs": inputs},
        )
        body = decode_body(response)
        if response.is_error:
            raise ExternalServiceError(
                self.service_name, f"API request failed: {response.status_code}",
                upstream_status=response.status_code, payload=body,
            )
        return body

    async def send_email(
        self,
        *,
        receivers: str,
        title: str,
        body_html: str,
        project_id: str,
        sender_name: str | None = None,
        reply_to: str | None = None,
    ) -> None:
        inputs: dict[str, Any] = {
            "receivers": receivers,
            "title": title,
            "body_html": body_html,
            "project_id": project_id,
        }
        if sender_name:
            inputs["sender"] = f"{sender_name}@{SENDER_DOMAIN}"
        if reply_to:
            inputs["reply_to"] = reply_to
        result = await self.run(SEND_EMAIL_MODEL, inputs)
        if not isinstance(result, dict) or result.get("send_email_status") != "success":
            error = result.get("error") if isinstance(result, dict) else result
            raise ExternalServiceError(
                self.service_name, str(error or "email was not accepted"), payload=result,
            )

    async def upload_base64(self, data: str) -> str:
        result = await self.run(UPLOAD_MODEL, {"base64_data": data})
        url = result.get("url") if isinstance(result, dict) else None
        if not url:
            raise ExternalServiceError(
                self.service_name, "Upload failed: Incorrect response format", payload=result,
            )
        return url

    async def upload_bytes(self, content: bytes) -> str:
        return await self.upload_base64(base64.b64encode(content).decode("ascii"))
