from flask import Blueprint, current_app, request
from flask_limiter.util import get_remote_address
from goshop.extensions import limiter, shop
from goshop.routes.cart import active_cart
from goshop.schemas.checkout import CheckoutRequest, QuoteRequest
from goshop.services.checkout import CheckoutSelections
from goshop.services.errors import OrderNotFound
from goshop.utils import (
    auth_required,
    current_cart_token,
    current_identity,
    current_user_id,
    ok,
    validate_schema,
)
from goshop.version import API_PREFIX

checkout_bp = Blueprint("checkout", __name__, url_prefix=API_PREFIX)


@checkout_bp.route("/checkout/dates", methods=["GET"])
def delivery_dates():
    dates = shop().checkout.available_dates()
    return ok({"dates": [d.isoformat() for d in dates]})


@checkout_bp.route("/checkout/quote", methods=["POST"])
@validate_schema(QuoteRequest)
def checkout_quote():
    """Price the selected cart lines, optionally for a delivery date.
    ---
    tags:
      - Checkout
    responses:
      200:
        description: Totals in cents
      400:
        description: Delivery date outside the booking window
    """
    cart = active_cart()
    totals = shop().checkout.quote(cart, request.validated_data.delivery_date)
    return ok({"totals": totals.to_dict()})


@checkout_bp.route("/checkout", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["CHECKOUT_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many checkout attempts from this IP",
)
@validate_schema(CheckoutRequest)
def place_order():
    """Place an order from the selected cart lines.
    ---
    tags:
      - Checkout
    responses:
      201:
        description: Order placed
      400:
        description: Missing address, date, payment or contact, or nothing selected
    """
    data: CheckoutRequest = request.validated_data
    selections = CheckoutSelections(
        delivery_date=data.delivery_date,
        address_id=data.address_id,
        payment_method_id=data.payment_method_id,
        payment_kind=data.payment_kind,
        email=data.email,
        phone=data.phone,
        address=data.address.model_dump() if data.address else None,
    )
    cart = active_cart()
    order = shop().checkout.place_order(current_identity(), cart, selections)
    return ok(order.to_dict(), message="Order placed successfully", status=201)


@checkout_bp.route("/orders", methods=["GET"])
@auth_required
def order_history():
    orders = shop().accounts.orders_for(request.user)
    return ok({"orders": [o.to_dict() for o in orders]})


@checkout_bp.route("/orders/<order_id>", methods=["GET"])
def order_detail(order_id):
    order = shop().store.get_order(order_id)
    if order is None:
        raise OrderNotFound()
    owner = current_cart_token() if order.guest else current_user_id()
    # other callers get the same 404 as a missing order
    if not owner or owner != order.owner:
        raise OrderNotFound()
    return ok(order.to_dict())


@checkout_bp.route("/orders/<order_id>/cancel", methods=["POST"])
@auth_required
def cancel_order(order_id):
    order = shop().checkout.cancel_order(request.user.id, order_id)
    return ok(order.to_dict(), message="Order cancelled")
