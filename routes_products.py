# routes_products.py
from decimal import Decimal, InvalidOperation

from flask import Blueprint, request, jsonify, abort, current_app

import storage
from auth import require_admin
from sanitize import request_payload
from catalog import filter_products
from schemas import ProductIn, validate

bp = Blueprint("products", __name__, url_prefix="/api/products")

# ---------- Public reads ----------

def _decimal_arg(name):
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        abort(400, description=f"{name} must be a number")
    if not value.is_finite():
        abort(400, description=f"{name} must be a number")
    return value


def _bool_arg(name):
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    return raw.lower() in ("1", "true", "yes")


@bp.get("")
def list_products():
    products = [p.to_dict() for p in storage.list_products()]
    if not request.args:
        return jsonify(products)
    return jsonify(filter_products(
        products,
        category=request.args.get("category"),
        min_price=_decimal_arg("min_price"),
        max_price=_decimal_arg("max_price"),
        sizes=request.args.getlist("size"),
        colors=request.args.getlist("color"),
        search=request.args.get("search"),
        featured=_bool_arg("featured"),
    ))


@bp.get("/<product_id>")
def get_product(product_id):
    product = storage.get_product(product_id)
    if product is None:
        abort(404, description="Product not found")
    return jsonify(product.to_dict())

# ---------- Admin writes ----------

@bp.post("")
@require_admin
def create_product(identity):
    data = validate(ProductIn, request_payload())
    product = storage.create_product(data.model_dump())
    current_app.logger.info("%s created product %s", identity.username, product.id)
    return jsonify({"ok": True, "product": product.to_dict()}), 201


@bp.put("/<product_id>")
@require_admin
def update_product(product_id, identity):
    data = validate(ProductIn, request_payload())
    product = storage.update_product(product_id, data.model_dump())
    if product is None:
        abort(404, description="Product not found")
    current_app.logger.info("%s updated product %s", identity.username, product.id)
    return jsonify({"ok": True, "product": product.to_dict()})


@bp.delete("/<product_id>")
@require_admin
def delete_product(product_id, identity):
    if not storage.delete_product(product_id):
        abort(404, description="Product not found")
    current_app.logger.info("%s deleted product %s", identity.username, product_id)
    return jsonify({"ok": True})
