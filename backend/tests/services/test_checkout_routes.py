"""Checkout & Product Routes — shopping-service proxying.

Invariants:
    - The signed-in shopper's email is attached; anonymous checkouts send none
    - Routers are forwarded as given with the gateway origin in x-worker-origin
    - Upstream failures surface as 400 with the upstream payload
"""

import httpx

from tests.services.conftest import SHOPPER

CART = {
    "products": [{"productId": "p1", "quantity": 2}],
    "successRouter": "/checkout/success",
    "cancelRouter": "/",
}


async def test_checkout_session_for_signed_in_shopper(client, shopping, session):
    session.user = SHOPPER
    res = await client.post("/api/create-checkout-session", json=CART)

    assert res.status_code == 200
    assert res.json() == {"checkoutUrl": "https://pay.example.com/s/cs_1", "sessionId": "cs_1"}
    request = shopping.requests[0]
    assert request.url.path == "/api/payment/create-checkout-session"
    assert request.headers["x-worker-origin"] == "http://test"
    assert request.headers["x-req-id"]
    assert shopping.json_bodies()[0] == {
        "projectId": "storefront-test",
        "customerEmail": "shopper@example.com",
        "products": [{"productId": "p1", "quantity": 2}],
        "successUrl": "/checkout/success",
        "cancelUrl": "/",
    }


async def test_anonymous_checkout_sends_no_email(client, shopping):
    await client.post("/api/create-checkout-session", json=CART)
    assert shopping.json_bodies()[0]["customerEmail"] is None


async def test_upstream_failure_is_400_with_payload(client, shopping):
    shopping.handler = lambda request: httpx.Response(
        404, json={"error": "Product not found", "code": "PRODUCT_NOT_FOUND"},
    )
    res = await client.post("/api/create-checkout-session", json=CART)
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["upstream"] == {"error": "Product not found", "code": "PRODUCT_NOT_FOUND"}
    assert error["upstream_status"] == 404


async def test_unreachable_upstream_is_502(client, shopping):
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    shopping.handler = refuse
    res = await client.get("/api/products")
    assert res.status_code == 502
    assert res.json()["error"]["service"] == "shopping-service"


async def test_empty_cart_is_rejected_before_upstream(client, shopping):
    res = await client.post("/api/create-checkout-session", json={"products": []})
    assert res.status_code == 400
    assert shopping.requests == []


async def test_products_are_listed_for_the_project(client, shopping):
    res = await client.get("/api/products")
    assert res.json()[0]["name"] == "Hoodie"
    assert shopping.requests[0].url.params["projectId"] == "storefront-test"


async def test_purchase_detail_requires_session_id(client, shopping):
    missing = await client.get("/api/products/purchase-detail")
    assert missing.status_code == 400
    assert shopping.requests == []

    res = await client.get("/api/products/purchase-detail", params={"sessionId": "cs_1"})
    assert res.json() == {"sessionId": "cs_1", "status": "paid"}
    assert shopping.json_bodies()[0] == {"projectId": "storefront-test", "sessionId": "cs_1"}
