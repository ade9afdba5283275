"""Checkout & Product Routes — thin proxies to the shopping service.

Invariants:
    - Upstream failures answer 400 with the upstream payload in the error envelope
    - The signed-in user's email (when any) is attached to the checkout session
    - successRouter/cancelRouter are forwarded as-is; the shopping service resolves
      them against the x-worker-origin header (this gateway's own origin)
    - purchase-detail without sessionId is a 400
"""

import logging

from fastapi import APIRouter, Depends, Query, Request

from storefront.api.deps import get_current_user, get_shopping_client
from storefront.core.errors import InvalidQueryError
from storefront.infrastructure.shopping_client import ShoppingServiceClient
from storefront.schemas.checkout import CheckoutSessionRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["checkout"])


def _origin(request: Request) -> str:
    return str(request.base_url).rstrip("/")


@router.post("/create-checkout-session")
async def create_checkout_session(
    body: CheckoutSessionRequest,
    request: Request,
    user: dict | None = Depends(get_current_user),
    shopping: ShoppingServiceClient = Depends(get_shopping_client),
):
    """Returns {checkoutUrl, sessionId} straight from the shopping service."""
    return await shopping.create_checkout_session(
        [line.model_dump(by_alias=True) for line in body.products],
        customer_email=user.get("email") if user else None,
        success_url=body.success_router,
        cancel_url=body.cancel_router,
        origin=_origin(request),
    )


@router.get("/products")
async def list_products(shopping: ShoppingServiceClient = Depends(get_shopping_client)):
    return await shopping.list_products()


@router.get("/products/purchase-detail")
async def purchase_detail(
    session_id: str | None = Query(None, alias="sessionId"),
    shopping: ShoppingServiceClient = Depends(get_shopping_client),
):
    if not session_id:
        raise InvalidQueryError("Session ID is required")
    return await shopping.purchase_detail(session_id)
