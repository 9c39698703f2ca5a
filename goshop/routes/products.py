from flask import Blueprint, request
from goshop.extensions import shop
from goshop.services.errors import ProductNotFound
from goshop.utils import ok
from goshop.version import API_PREFIX

products_bp = Blueprint("products", __name__, url_prefix=f"{API_PREFIX}/products")


@products_bp.route("", methods=["GET"])
def list_products():
    """List the catalog.
    ---
    tags:
      - Catalog
    parameters:
      - name: market
        in: query
        type: string
        required: false
        description: Market slug, matched case-insensitively
    responses:
      200:
        description: Products in the requested market
    """
    market = request.args.get("market")
    products = shop().store.list_products(market)
    return ok([p.to_dict() for p in products])


@products_bp.route("/<product_id>", methods=["GET"])
def get_product(product_id):
    product = shop().store.get_product(product_id)
    if product is None:
        raise ProductNotFound(field="product_id")
    return ok(product.to_dict())
