"""Client-held shopping cart.

The cart is a tuple of ``CartItem`` values. Every operation is a pure
function returning a new tuple; ``CartStore`` applies them and writes the
whole state to disk after each one. The cart never goes to the server.
"""
import json
import logging
import os
import tempfile
from dataclasses import dataclass, asdict, replace
from decimal import Decimal
from typing import Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartItem:
    product_id: str
    name: str
    price: Decimal
    size: str
    color: str
    quantity: int
    image: str = ""

    @property
    def key(self):
        return (self.product_id, self.size, self.color)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self):
        data = asdict(self)
        data["price"] = str(self.price)
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            product_id=str(data["product_id"]),
            name=data["name"],
            price=Decimal(str(data["price"])),
            size=data["size"],
            color=data["color"],
            quantity=int(data["quantity"]),
            image=data.get("image", ""),
        )


Cart = Tuple[CartItem, ...]


def add_item(items: Cart, item: CartItem) -> Cart:
    """Append ``item`` or merge it into the line with the same key.

    A merge sums the quantities and takes name/price/image from ``item``.
    """
    for i, existing in enumerate(items):
        if existing.key == item.key:
            merged = replace(item, quantity=existing.quantity + item.quantity)
            return items[:i] + (merged,) + items[i + 1:]
    return items + (item,)


def remove_item(items: Cart, product_id: str, size: str, color: str) -> Cart:
    key = (product_id, size, color)
    return tuple(item for item in items if item.key != key)


def update_quantity(items: Cart, product_id: str, size: str, color: str, quantity: int) -> Cart:
    # no clamping here; callers bound the quantity
    key = (product_id, size, color)
    return tuple(replace(item, quantity=quantity) if item.key == key else item for item in items)


def clear_cart(items: Cart = ()) -> Cart:
    return ()


def subtotal(items: Cart) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0"))


class CartStore:
    """A cart persisted as JSON at ``path``, saved after every mutation."""

    def __init__(self, path):
        self.path = os.fspath(path)
        self.items: Cart = self._load()

    def _load(self) -> Cart:
        if not os.path.exists(self.path):
            return ()
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
            return tuple(CartItem.from_dict(row) for row in data.get("items", []))
        except (ValueError, KeyError, TypeError, AttributeError, ArithmeticError):
            logger.warning("Cart file %s is unreadable, starting with an empty cart", self.path)
            return ()

    def save(self):
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=".cart-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump({"items": [item.to_dict() for item in self.items]}, fh,
                          ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def _commit(self, items: Cart) -> Cart:
        self.items = items
        self.save()
        return items

    def add(self, item: CartItem) -> Cart:
        return self._commit(add_item(self.items, item))

    def remove(self, product_id, size, color) -> Cart:
        return self._commit(remove_item(self.items, product_id, size, color))

    def update_quantity(self, product_id, size, color, quantity) -> Cart:
        return self._commit(update_quantity(self.items, product_id, size, color, quantity))

    def clear(self) -> Cart:
        return self._commit(clear_cart(self.items))

    def find(self, product_id, size, color):
        key = (product_id, size, color)
        return next((item for item in self.items if item.key == key), None)

    @property
    def subtotal(self) -> Decimal:
        return subtotal(self.items)
