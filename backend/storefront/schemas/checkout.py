"""Checkout Schemas — checkout-session request forwarded to the shopping service.

Invariants:
    - products is non-empty; each line has a productId and quantity >= 1
    - Upstream responses are passed through untouched (not modeled here)
"""

from pydantic import BaseModel, ConfigDict, Field


class CheckoutProduct(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId", min_length=1)
    quantity: int = Field(ge=1)


class CheckoutSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    products: list[CheckoutProduct] = Field(min_length=1)
    success_router: str | None = Field(None, alias="successRouter")
    cancel_router: str | None = Field(None, alias="cancelRouter")
