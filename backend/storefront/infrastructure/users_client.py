"""Users Service Client — resolves a session token to the signed-in user.

Invariants:
    - 401/403/404 from the users service mean "no user" (None), never an error
    - Any other non-2xx is an ExternalServiceError (502)

Design Decisions:
    - Session creation and OAuth/OTP flows stay with the users service; the
      storefront only reads the current user
"""


from storefront.core.errors import ExternalServiceError
from storefront.infrastructure.http_service import UpstreamService, decode_body


_NO_USER_STATUSES = frozenset({401, 403, 404})


class UsersServiceClient(UpstreamService):
    service_name = "users-service"

    async def get_current_user(self, session_token: str) -> dict | None:
        response = await self.request(
            "GET", self.url("/api/users/me"),
            headers={"Authorization": f"Bearer {session_token}"},
        )
        if response.status_code in _NO_USER_STATUSES:
            return None
        body = decode_body(response)
        if response.is_error:
            raise ExternalServiceError(
                self.service_name, "Failed to resolve current user",
                upstream_status=response.status_code, payload=body,
            )
        return body if isinstance(body, dict) else None
