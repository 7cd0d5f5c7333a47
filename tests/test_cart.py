import json
import logging
from decimal import Decimal

import pytest

from cart import (CartItem, CartStore, add_item, clear_cart, remove_item,
                  subtotal, update_quantity)


def item(product_id="p1", size="M", color="Negro", quantity=1, price="10.00", name="Remera"):
    return CartItem(product_id=product_id, name=name, price=Decimal(price), size=size,
                    color=color, quantity=quantity, image="https://cdn.example.com/a.jpg")


def test_same_key_merges_quantities():
    items = add_item((), item(quantity=2))
    items = add_item(items, item(quantity=3))
    assert len(items) == 1
    assert items[0].quantity == 5


def test_merge_takes_fields_from_new_item_and_keeps_position():
    items = add_item((), item(product_id="a"))
    items = add_item(items, item(product_id="b"))
    items = add_item(items, item(product_id="a", price="12.50", name="Remera v2"))
    assert [i.product_id for i in items] == ["a", "b"]
    assert items[0].price == Decimal("12.50")
    assert items[0].name == "Remera v2"
    assert items[0].quantity == 2


def test_different_size_or_color_are_distinct_lines():
    items = add_item((), item(size="M"))
    items = add_item(items, item(size="L"))
    items = add_item(items, item(size="M", color="Blanco"))
    assert len(items) == 3


def test_remove_missing_item_is_noop():
    items = add_item((), item())
    assert remove_item(items, "p1", "XL", "Negro") == items
    assert remove_item(items, "p1", "M", "Negro") == ()


def test_update_quantity_sets_value_verbatim():
    items = add_item((), item(quantity=2))
    items = update_quantity(items, "p1", "M", "Negro", 7)
    assert items[0].quantity == 7
    # no bounds enforced by the engine
    assert update_quantity(items, "p1", "M", "Negro", 0)[0].quantity == 0


def test_subtotal_follows_mutations():
    items = add_item((), item(product_id="a", quantity=2, price="10.00"))
    items = add_item(items, item(product_id="b", quantity=1, price="5.50"))
    assert subtotal(items) == Decimal("25.50")
    items = update_quantity(items, "b", "M", "Negro", 3)
    assert subtotal(items) == Decimal("36.50")
    items = remove_item(items, "a", "M", "Negro")
    assert subtotal(items) == Decimal("16.50")
    assert subtotal(clear_cart(items)) == Decimal("0")


def test_store_saves_after_every_mutation(tmp_path):
    path = tmp_path / "cart.json"
    store = CartStore(path)
    store.add(item(quantity=2))
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["items"][0]["quantity"] == 2
    assert saved["items"][0]["price"] == "10.00"

    store.update_quantity("p1", "M", "Negro", 4)
    reloaded = CartStore(path)
    assert reloaded.items == store.items
    assert reloaded.subtotal == Decimal("40.00")

    reloaded.clear()
    assert CartStore(path).items == ()


def test_store_starts_empty_without_file(tmp_path):
    store = CartStore(tmp_path / "nested" / "cart.json")
    assert store.items == ()
    assert store.find("p1", "M", "Negro") is None


@pytest.mark.parametrize("content", [
    "{not json",
    "[1, 2]",
    '{"items": [{"product_id": "p1"}]}',
    '{"items": [{"product_id": "p1", "name": "Remera", "price": "abc", "size": "M", '
    '"color": "Negro", "quantity": 1}]}',
])
def test_unreadable_file_loads_empty_cart(tmp_path, caplog, content):
    path = tmp_path / "cart.json"
    path.write_text(content, encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="cart"):
        store = CartStore(path)
    assert store.items == ()
    assert "unreadable" in caplog.text

    store.add(item())
    assert json.loads(path.read_text(encoding="utf-8"))["items"][0]["product_id"] == "p1"
