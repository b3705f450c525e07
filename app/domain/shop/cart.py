"""
Cart rules shared by the storefront and product checkout.
Lines are keyed by (product_id, variant_id or "default").
"""

from typing import Optional

from pydantic import BaseModel

DEFAULT_VARIANT_KEY = "default"


class CartItem(BaseModel):
    product_id: str
    variant_id: Optional[str] = None
    name: Optional[str] = None
    variant_name: Optional[str] = None
    price: float = 0
    image_url: Optional[str] = None
    quantity: int = 1

    @property
    def key(self) -> tuple[str, str]:
        return line_key(self.product_id, self.variant_id)


def line_key(product_id: str, variant_id: Optional[str] = None) -> tuple[str, str]:
    return (product_id, variant_id or DEFAULT_VARIANT_KEY)


class Cart:
    """In-memory cart. Quantities for the same line are merged."""

    def __init__(self, items: Optional[list[CartItem]] = None):
        self._lines: dict[tuple[str, str], CartItem] = {}
        for item in items or []:
            self.add_item(item)

    @property
    def items(self) -> list[CartItem]:
        return list(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def add_item(self, item: CartItem, quantity: Optional[int] = None) -> None:
        quantity = item.quantity if quantity is None else quantity
        if quantity <= 0:
            return

        existing = self._lines.get(item.key)
        if existing:
            existing.quantity += quantity
        else:
            self._lines[item.key] = item.model_copy(update={"quantity": quantity})

    def update_quantity(self, product_id: str, quantity: int, variant_id: Optional[str] = None):
        key = line_key(product_id, variant_id)
        if quantity <= 0:
            self._lines.pop(key, None)
        elif key in self._lines:
            self._lines[key].quantity = quantity

    def remove_item(self, product_id: str, variant_id: Optional[str] = None) -> None:
        self._lines.pop(line_key(product_id, variant_id), None)

    def clear(self) -> None:
        self._lines.clear()

    @property
    def total(self) -> float:
        return sum(item.price * item.quantity for item in self._lines.values())

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._lines.values())

    def to_checkout_items(self) -> list[dict]:
        """Payload for create-product-payment"""
        return [
            {
                "product_id": item.product_id,
                "variant_id": item.variant_id,
                "quantity": item.quantity,
            }
            for item in self._lines.values()
        ]
