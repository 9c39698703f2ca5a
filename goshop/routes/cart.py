from flask import Blueprint, after_this_request, request
from goshop.extensions import shop
from goshop.schemas.cart import (
    AddItemRequest,
    CouponRequest,
    GiftWrapRequest,
    SelectAllRequest,
    UpdateItemRequest,
)
from goshop.services.cart_store import CartStore
from goshop.models.coupon import lookup_coupon
from goshop.services.errors import CouponNotFound, NotAuthenticated
from goshop.utils import (
    current_cart_token,
    current_identity,
    current_user_id,
    no_content,
    ok,
    set_cart_cookie,
    validate_schema,
)
from goshop.version import API_PREFIX

cart_bp = Blueprint("cart", __name__, url_prefix=f"{API_PREFIX}/cart")


def active_cart():
    """Resolve the caller's cart, issuing a CART_ID cookie for new guests."""
    resolution = shop().sessions.resolve(current_identity())
    if resolution.issued_token:
        token = resolution.issued_token

        @after_this_request
        def _remember_cart(resp):
            return set_cart_cookie(resp, token)

    return resolution.cart


def cart_payload(cart):
    services = shop()
    return CartStore(cart, services.store).to_dict(services.settings)


@cart_bp.route("", methods=["GET"])
def view_cart():
    """Current cart with priced totals.
    ---
    tags:
      - Cart
    responses:
      200:
        description: Cart id, items with their products, and totals in cents
    """
    return ok(cart_payload(active_cart()))


@cart_bp.route("/count", methods=["GET"])
def cart_count():
    cart = active_cart()
    return ok({"count": CartStore(cart, shop().store).count()})


@cart_bp.route("/items", methods=["POST"])
@validate_schema(AddItemRequest)
def add_item():
    data: AddItemRequest = request.validated_data
    cart = active_cart()
    store = shop().store
    with store.locked(cart):
        cart_store = CartStore(cart, store)
        item = cart_store.add_item(data.product_id, data.quantity)
        return ok({"item": cart_store.item_dict(item)}, message="Item added to cart", status=201)


@cart_bp.route("/items/<item_id>", methods=["PATCH"])
@validate_schema(UpdateItemRequest)
def update_item(item_id):
    data: UpdateItemRequest = request.validated_data
    cart = active_cart()
    store = shop().store
    with store.locked(cart):
        cart_store = CartStore(cart, store)
        item = cart.find_item(item_id)
        removed = False
        if data.quantity is not None:
            item, removed = cart_store.update_item_quantity(item_id, data.quantity)
        if not removed and data.selected is not None:
            if item is None or item.selected != data.selected:
                item = cart_store.toggle_selection(item_id)
        payload = cart_store.item_dict(item)
        payload["removed"] = removed
        return ok({"item": payload})


@cart_bp.route("/items/<item_id>", methods=["DELETE"])
def remove_item(item_id):
    cart = active_cart()
    store = shop().store
    with store.locked(cart):
        CartStore(cart, store).remove_item(item_id)
    return no_content()


@cart_bp.route("/items/<item_id>/toggle", methods=["POST"])
def toggle_item(item_id):
    cart = active_cart()
    store = shop().store
    with store.locked(cart):
        cart_store = CartStore(cart, store)
        item = cart_store.toggle_selection(item_id)
        return ok({"item": cart_store.item_dict(item)})


@cart_bp.route("/select", methods=["POST"])
@validate_schema(SelectAllRequest)
def select_all():
    cart = active_cart()
    store = shop().store
    with store.locked(cart):
        CartStore(cart, store).set_all_selected(request.validated_data.selected)
        return ok(cart_payload(cart))


@cart_bp.route("/coupons", methods=["POST"])
@validate_schema(CouponRequest)
def apply_coupon():
    cart = active_cart()
    store = shop().store
    with store.locked(cart):
        applied = CartStore(cart, store).apply_coupon(request.validated_data.code)
        message = "Coupon applied" if applied else "Coupon invalid or already applied"
        return ok({"applied": applied, "cart": cart_payload(cart)}, message=message)


@cart_bp.route("/coupons/<code>", methods=["DELETE"])
def remove_coupon(code):
    if lookup_coupon(code) is None:
        raise CouponNotFound(field="code")
    cart = active_cart()
    store = shop().store
    with store.locked(cart):
        CartStore(cart, store).remove_coupon(code)
        return ok(cart_payload(cart))


@cart_bp.route("/gift-wrap", methods=["PUT"])
@validate_schema(GiftWrapRequest)
def gift_wrap():
    data: GiftWrapRequest = request.validated_data
    cart = active_cart()
    store = shop().store
    with store.locked(cart):
        CartStore(cart, store).set_gift_wrap(data.enabled, data.message)
        return ok(cart_payload(cart))


@cart_bp.route("/merge", methods=["POST"])
def merge_cart():
    user_id = current_user_id()
    if not user_id:
        raise NotAuthenticated()
    cart = shop().sessions.merge_for(user_id, current_cart_token())
    return ok(cart_payload(cart), message="Cart merged")
