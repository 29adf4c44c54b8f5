# wigshop/product/routes.py
from flask import jsonify

from ..model import catalog_as_api, find_product
from . import bp

@bp.get("")
def list_products():
    return jsonify(catalog_as_api())

@bp.get("/<product_id>")
def get_product(product_id):
    p = find_product(product_id)
    if not p:
        return jsonify(error="Product not found"), 404
    return jsonify(p.as_api())
