from flask import Blueprint, request
from goshop.extensions import shop
from goshop.schemas.account import (
    AddressRequest,
    AddressUpdateRequest,
    FavoriteRequest,
    PaymentMethodRequest,
)
from goshop.utils import auth_required, no_content, ok, validate_schema
from goshop.version import API_PREFIX

account_bp = Blueprint("account", __name__, url_prefix=f"{API_PREFIX}/account")


@account_bp.before_request
@auth_required
def _require_user():
    """Every account endpoint needs a signed-in user."""
    return None


# ---------------------- addresses ----------------------


@account_bp.route("/addresses", methods=["GET"])
def list_addresses():
    """Saved delivery addresses, default first.
    ---
    tags:
      - Account
    responses:
      200:
        description: Address list
      401:
        description: Not signed in
    """
    user = request.user
    addresses = sorted(user.addresses, key=lambda a: not a.is_default)
    return ok({"addresses": [a.to_dict() for a in addresses]})


@account_bp.route("/addresses", methods=["POST"])
@validate_schema(AddressRequest)
def add_address():
    fields = request.validated_data.model_dump()
    address = shop().accounts.add_address(request.user, **fields)
    return ok({"address": address.to_dict()}, message="Address saved", status=201)


@account_bp.route("/addresses/<address_id>", methods=["PATCH"])
@validate_schema(AddressUpdateRequest)
def update_address(address_id):
    fields = request.validated_data.model_dump()
    address = shop().accounts.update_address(request.user, address_id, **fields)
    return ok({"address": address.to_dict()})


@account_bp.route("/addresses/<address_id>/default", methods=["POST"])
def set_default_address(address_id):
    address = shop().accounts.set_default_address(request.user, address_id)
    return ok({"address": address.to_dict()}, message="Default address updated")


@account_bp.route("/addresses/<address_id>", methods=["DELETE"])
def delete_address(address_id):
    shop().accounts.delete_address(request.user, address_id)
    return no_content()


# ---------------------- payment methods ----------------------


@account_bp.route("/payment-methods", methods=["GET"])
def list_payment_methods():
    methods = request.user.payment_methods
    return ok({"payment_methods": [p.to_dict() for p in methods]})


@account_bp.route("/payment-methods", methods=["POST"])
@validate_schema(PaymentMethodRequest)
def add_payment_method():
    data: PaymentMethodRequest = request.validated_data
    method = shop().accounts.add_payment_method(
        request.user, data.kind, label=data.label, is_default=data.is_default
    )
    return ok({"payment_method": method.to_dict()}, status=201)


@account_bp.route("/payment-methods/<method_id>", methods=["DELETE"])
def delete_payment_method(method_id):
    shop().accounts.delete_payment_method(request.user, method_id)
    return no_content()


# ---------------------- favorites ----------------------


@account_bp.route("/favorites", methods=["GET"])
def list_favorites():
    store = shop().store
    products = [store.get_product(pid) for pid in request.user.favorites]
    return ok({"favorites": [p.to_dict() for p in products if p]})


@account_bp.route("/favorites", methods=["POST"])
@validate_schema(FavoriteRequest)
def add_favorite():
    favorites = shop().accounts.add_favorite(request.user, request.validated_data.product_id)
    return ok({"favorites": list(favorites)}, status=201)


@account_bp.route("/favorites/<product_id>", methods=["DELETE"])
def remove_favorite(product_id):
    shop().accounts.remove_favorite(request.user, product_id)
    return no_content()


# ---------------------- notifications ----------------------


@account_bp.route("/notifications", methods=["GET"])
def list_notifications():
    user = request.user
    return ok({
        "notifications": [n.to_dict() for n in shop().accounts.list_notifications(user)],
        "unread": shop().accounts.unread_count(user),
    })


@account_bp.route("/notifications/read", methods=["POST"])
def mark_notifications_read():
    shop().accounts.mark_all_read(request.user)
    return ok({"unread": 0})
