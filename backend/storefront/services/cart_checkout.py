"""Cart Checkout — turns a Cart into a checkout session via the gateway.

Invariants:
    - An empty cart never reaches the gateway (ValueError)
    - InitiateCheckout is reported before the request; the cart is left intact,
      it is cleared only after the shopper returns from a successful payment
"""

from typing import Any

from storefront.core.analytics import (
    INITIATE_CHECKOUT, PURCHASE, AnalyticsReporter, NullReporter,
)
from storefront.core.cart import Cart
from storefront.services.storefront_client import StorefrontApiClient


async def start_checkout(
    cart: Cart,
    client: StorefrontApiClient,
    *,
    success_router: str = "/checkout/success",
    cancel_router: str = "/",
    reporter: AnalyticsReporter | None = None,
) -> dict[str, Any]:
    """Returns the gateway body: {checkoutUrl, sessionId}."""
    if not cart.items:
        raise ValueError("Cart is empty")
    (reporter or NullReporter()).track(INITIATE_CHECKOUT, {
        "num_items": cart.total_items,
        "value": cart.total_price,
    })
    return await client.create_checkout_session(
        cart.checkout_products(), success_router, cancel_router,
    )


async def complete_checkout(
    cart: Cart,
    client: StorefrontApiClient,
    session_id: str,
    *,
    reporter: AnalyticsReporter | None = None,
) -> Any:
    """After payment: fetch the purchase detail, report Purchase, empty the cart."""
    detail = await client.purchase_detail(session_id)
    (reporter or NullReporter()).track(PURCHASE, {
        "session_id": session_id,
        "num_items": cart.total_items,
        "value": cart.total_price,
    })
    cart.clear()
    return detail
