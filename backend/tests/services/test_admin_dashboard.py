"""Admin Dashboard — controllers driving the real gateway through StorefrontApiClient.

Invariants:
    - Scenario C: deleting a row reloads the page; the id is gone and total drops by 1
    - A non-owner dashboard ends access-denied and loads no schemas
    - Validation failures from the gateway come back as RecordValidationError messages
"""

import pytest
from httpx import ASGITransport

from storefront.core.domain_types import ErrorKind, TableStatus
from storefront.main import app
from storefront.services.admin_dashboard import AdminDashboard
from storefront.services.storefront_client import StorefrontApiClient


@pytest.fixture
async def api(client):
    async with StorefrontApiClient(
        "http://test", transport=ASGITransport(app=app),
    ) as api_client:
        yield api_client


@pytest.fixture
async def dashboard(api, as_owner):
    board = AdminDashboard(api, confirm=lambda message: True)
    assert await board.open()
    return board


async def _seed_products(table, names):
    for i, name in enumerate(names):
        assert await table.create({
            "name": name, "price": str(10 + i), "currency": "usd", "status": "active",
        })


async def test_scenario_c_delete_reloads_without_the_row(dashboard):
    products = dashboard.get_table("products")
    await _seed_products(products, ["Hoodie", "Cap", "Tee"])
    assert products.page.total == 3
    target = products.rows[0]

    assert await products.delete(target)

    assert products.status == TableStatus.LOADED
    assert target["id"] not in [r["id"] for r in products.rows]
    assert products.page.total == 2


async def test_dashboard_loads_every_schema(dashboard):
    assert dashboard.is_admin is True
    assert dashboard.schema_names == ["community_fits", "newsletter_signups", "products"]
    assert dashboard.get_table("products") is dashboard.get_table("products")
    with pytest.raises(KeyError):
        dashboard.get_table("secrets")


async def test_non_owner_is_access_denied(api, session):
    session.user = {"email": "shopper@example.com"}
    board = AdminDashboard(api)
    assert not await board.open()
    assert board.error_kind == ErrorKind.ACCESS_DENIED
    assert board.schemas == {}


async def test_update_through_gateway(dashboard):
    products = dashboard.get_table("products")
    await _seed_products(products, ["Hoodie"])
    row = products.rows[0]
    assert await products.update(row, {"price": "99"})
    assert products.rows[0]["price"] == 99.0


async def test_gateway_validation_error_is_stored(dashboard):
    products = dashboard.get_table("products")
    assert not await products.create({
        "name": "Hoodie", "price": "-5", "currency": "usd", "status": "active",
    })
    assert products.status == TableStatus.ERRORED
    assert products.error == "Invalid fields: price"


async def test_export_through_gateway(api, as_owner):
    saved = {}

    class _Sink:
        def save(self, filename, content):
            saved[filename] = content

    board = AdminDashboard(api, download_sink=_Sink())
    assert await board.open()
    products = board.get_table("products")
    await _seed_products(products, ["Hoodie", "Cap"])
    await products.toggle_sort("name")

    assert await products.export()
    lines = saved["products.csv"].decode().strip().splitlines()
    assert [line.split(",")[1] for line in lines[1:]] == ["Cap", "Hoodie"]
