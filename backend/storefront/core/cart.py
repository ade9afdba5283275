"""Shopping Cart — ephemeral client-side cart with quantity semantics.

Invariants:
    - Quantities are always >= 1; update to <= 0 removes the row
    - Adding an id already in the cart increments its quantity (one row per id)
    - Only add/update_quantity/remove/clear mutate items
    - total_items counts units (sum of quantities), total_price = sum(price * quantity)

Design Decisions:
    - Reporter injected (NullReporter default): add_item emits AddToCart without
      touching any global analytics SDK
    - No persistence: a cart lives as long as its owner
"""

from dataclasses import dataclass, replace
from typing import Any

from storefront.core.analytics import ADD_TO_CART, AnalyticsReporter, NullReporter


@dataclass(frozen=True)
class CartItem:
    id: str
    name: str
    price: float
    quantity: int = 1
    image: str | None = None
    description: str | None = None


class Cart:
    """Ordered cart rows keyed by product id."""

    def __init__(self, reporter: AnalyticsReporter | None = None):
        self._items: list[CartItem] = []
        self._reporter = reporter or NullReporter()

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    def add_item(
        self,
        id: str,
        name: str,
        price: float,
        image: str | None = None,
        description: str | None = None,
    ) -> None:
        self._reporter.track(ADD_TO_CART, {"product_id": id, "product_name": name})
        for index, item in enumerate(self._items):
            if item.id == id:
                self._items[index] = replace(item, quantity=item.quantity + 1)
                return
        self._items.append(CartItem(
            id=id, name=name, price=price, quantity=1,
            image=image, description=description,
        ))

    def update_quantity(self, id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(id)
            return
        self._items = [
            replace(item, quantity=quantity) if item.id == id else item
            for item in self._items
        ]

    def remove_item(self, id: str) -> None:
        self._items = [item for item in self._items if item.id != id]

    def clear(self) -> None:
        self._items = []

    def is_in_cart(self, id: str) -> bool:
        return any(item.id == id for item in self._items)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total_price(self) -> float:
        return sum(item.price * item.quantity for item in self._items)

    def checkout_products(self) -> list[dict[str, Any]]:
        """Line items in the shape the checkout endpoint expects."""
        return [
            {"productId": item.id, "quantity": item.quantity}
            for item in self._items
        ]
