"""Catalog filtering and facets over serialized products.

Works on the product dicts the API returns, so the server and the
storefront client share the same rules.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

Product = Dict[str, Any]


def product_price(product: Product) -> Decimal:
    return Decimal(str(product["price"]))


def matches(product: Product, category: Optional[str] = None,
            min_price: Optional[Decimal] = None, max_price: Optional[Decimal] = None,
            sizes: Iterable[str] = (), colors: Iterable[str] = (),
            search: Optional[str] = None, featured: Optional[bool] = None) -> bool:
    if category and category != "all" and product["category"] != category:
        return False
    price = product_price(product)
    if min_price is not None and price < min_price:
        return False
    if max_price is not None and price > max_price:
        return False
    sizes, colors = list(sizes), list(colors)
    if sizes and not any(s in product["sizes"] for s in sizes):
        return False
    if colors and not any(c in product["colors"] for c in colors):
        return False
    if search:
        term = search.lower()
        if term not in product["name"].lower() and term not in product["description"].lower():
            return False
    if featured is not None and bool(product.get("featured")) != featured:
        return False
    return True


def filter_products(products: Iterable[Product], **filters) -> List[Product]:
    return [p for p in products if matches(p, **filters)]


def _distinct(values):
    out = []
    for v in values:
        if v not in out:
            out.append(v)
    return out


def facets(products: List[Product]) -> Dict[str, Any]:
    """Distinct categories/sizes/colors in first-seen order and the top price."""
    return {
        "categories": _distinct(p["category"] for p in products),
        "sizes": _distinct(s for p in products for s in p["sizes"]),
        "colors": _distinct(c for p in products for c in p["colors"]),
        "max_price": max((product_price(p) for p in products), default=Decimal("0")),
    }
