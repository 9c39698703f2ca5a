from datetime import date, datetime

import pytest

from goshop.models import OrderStatus
from goshop.services.accounts import AccountService
from goshop.services.cart_store import CartStore
from goshop.services.checkout import CheckoutOrchestrator, CheckoutSelections
from goshop.services.errors import (
    AddressNotFound,
    EmptyOrder,
    InvalidDeliveryDate,
    InvalidTransition,
    MissingAddress,
    MissingContact,
    MissingDeliveryDate,
    MissingPayment,
    OrderNotFound,
)
from goshop.services.session import Anonymous, Authenticated, SessionResolver
from goshop.signals import order_placed, order_status_changed
from goshop.store import MemoryStore
from conftest import product_id

MONDAY_MORNING = datetime(2026, 3, 2, 9, 0)
TODAY = MONDAY_MORNING.date()


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def checkout(store):
    return CheckoutOrchestrator(store, clock=lambda: MONDAY_MORNING)


@pytest.fixture()
def accounts(store):
    return AccountService(store)


@pytest.fixture()
def member(accounts):
    user = accounts.signup("kofi", "kofi@example.com", "secret123", name="Kofi")
    accounts.add_address(user, street="12 Ring Rd", city="Accra")
    accounts.add_payment_method(user, "mobile_money", label="MTN")
    return user


@pytest.fixture()
def member_cart(store, member):
    cart = SessionResolver(store).resolve(Authenticated(member.id)).cart
    cs = CartStore(cart, store)
    cs.add_item(product_id(store, "Fresh Bananas"), 2)
    cs.add_item(product_id(store, "Fresh Herbs"), 1)
    return cart


@pytest.fixture()
def guest_cart(store):
    cart = SessionResolver(store).resolve(Anonymous()).cart
    CartStore(cart, store).add_item(product_id(store, "Imported Rice"), 2)
    return cart


def member_selections(member, **overrides):
    values = dict(delivery_date=TODAY, address_id=member.addresses[0].id)
    values.update(overrides)
    return CheckoutSelections(**values)


def guest_selections(**overrides):
    values = dict(delivery_date=date(2026, 3, 4), payment_kind="card", email="guest@example.com")
    values.update(overrides)
    return CheckoutSelections(**values)


def test_available_dates_window(checkout):
    days = checkout.available_dates()
    assert days[0] == TODAY
    assert len(days) == 7


def test_same_day_not_offered_after_cutoff(store):
    late = CheckoutOrchestrator(store, clock=lambda: datetime(2026, 3, 2, 16, 0))
    assert TODAY not in late.available_dates()
    with pytest.raises(InvalidDeliveryDate):
        late._check_date(TODAY)


def test_member_order_snapshot_and_totals(checkout, store, member, member_cart):
    order = checkout.place_order(Authenticated(member.id), member_cart, member_selections(member))

    assert order.id.startswith("M-")
    assert order.status is OrderStatus.PLACED
    assert order.owner == member.id
    assert [(i.name, i.quantity) for i in order.items] == [("Fresh Bananas", 2), ("Fresh Herbs", 1)]
    assert order.delivery_fee_cents == 1500
    assert order.totals["subtotal_cents"] == 3800
    assert order.totals["tax_cents"] == 475
    assert order.totals["total_cents"] == 3800 + 1500 + 475
    assert order.payment["kind"] == "mobile_money"
    assert member_cart.items == []
    assert member.orders == [order.id]
    assert member.notifications[0].kind == "placed"
    assert store.get_order(order.id) is order


def test_partial_selection_keeps_unselected_lines(checkout, store, member, member_cart):
    herbs = member_cart.items[1]
    CartStore(member_cart, store).toggle_selection(herbs.id)

    order = checkout.place_order(Authenticated(member.id), member_cart, member_selections(member))

    assert [i.name for i in order.items] == ["Fresh Bananas"]
    assert [i.id for i in member_cart.items] == [herbs.id]


def test_coupons_apply_to_the_order(checkout, store, member, member_cart):
    CartStore(member_cart, store).add_item(product_id(store, "Imported Rice"), 1)
    CartStore(member_cart, store).apply_coupon("FRESH15")

    order = checkout.place_order(Authenticated(member.id), member_cart, member_selections(member))

    assert order.coupons == ["FRESH15"]
    assert order.totals["discount_cents"] == 1020
    assert member_cart.coupons == []


def test_empty_selection_leaves_cart_unchanged(checkout, store, member, member_cart):
    CartStore(member_cart, store).set_all_selected(False)
    before = [(i.id, i.quantity) for i in member_cart.items]

    with pytest.raises(EmptyOrder):
        checkout.place_order(Authenticated(member.id), member_cart, member_selections(member))

    assert [(i.id, i.quantity) for i in member_cart.items] == before
    assert store.orders == {}
    assert member.orders == []


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"address_id": None}, MissingAddress),
        ({"address_id": "elsewhere"}, AddressNotFound),
        ({"delivery_date": None}, MissingDeliveryDate),
        ({"delivery_date": date(2026, 3, 1)}, InvalidDeliveryDate),
        ({"delivery_date": date(2026, 3, 9)}, InvalidDeliveryDate),
        ({"payment_method_id": "unknown"}, MissingPayment),
    ],
)
def test_member_validation_errors(checkout, member, member_cart, overrides, error):
    with pytest.raises(error):
        checkout.place_order(
            Authenticated(member.id), member_cart, member_selections(member, **overrides)
        )
    assert len(member_cart.items) == 2


def test_member_without_payment_method(checkout, accounts, member, member_cart):
    accounts.delete_payment_method(member, member.payment_methods[0].id)
    with pytest.raises(MissingPayment):
        checkout.validate(Authenticated(member.id), member_selections(member))


def test_default_payment_method_preferred(checkout, accounts, member):
    card = accounts.add_payment_method(member, "card", label="Visa", is_default=True)
    plan = checkout.validate(Authenticated(member.id), member_selections(member))
    assert plan.payment["id"] == card.id


def test_guest_order(checkout, guest_cart):
    order = checkout.place_order(
        Anonymous(guest_cart.session_token), guest_cart, guest_selections(phone="0200000000")
    )
    assert order.id.startswith("G-")
    assert order.guest is True
    assert order.owner == guest_cart.session_token
    assert order.delivery_fee_cents == 500
    assert order.contact == {"email": "guest@example.com", "phone": "0200000000"}
    assert order.payment == {"kind": "card"}


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"payment_kind": None}, MissingPayment),
        ({"payment_kind": "cash"}, MissingPayment),
        ({"email": None}, MissingContact),
        ({"delivery_date": None}, MissingDeliveryDate),
    ],
)
def test_guest_validation_errors(checkout, guest_cart, overrides, error):
    with pytest.raises(error):
        checkout.place_order(Anonymous(guest_cart.session_token), guest_cart, guest_selections(**overrides))
    assert len(guest_cart.items) == 1


def test_quote_with_and_without_date(checkout, member_cart):
    assert checkout.quote(member_cart).delivery_fee_cents == 1000
    assert checkout.quote(member_cart, date(2026, 3, 3)).delivery_fee_cents == 800


def test_order_placed_signal(checkout, member, member_cart):
    seen = []

    def receiver(order, **kwargs):
        seen.append(order.id)

    order_placed.connect(receiver)
    try:
        order = checkout.place_order(Authenticated(member.id), member_cart, member_selections(member))
    finally:
        order_placed.disconnect(receiver)
    assert seen == [order.id]


def test_status_walks_forward_and_notifies(checkout, member, member_cart):
    order = checkout.place_order(Authenticated(member.id), member_cart, member_selections(member))
    changes = []

    def receiver(order, previous=None, **kwargs):
        changes.append((previous, order.status))

    order_status_changed.connect(receiver)
    try:
        for status in ("confirmed", "preparing", "out_for_delivery", "delivered"):
            checkout.advance_status(order.id, status)
    finally:
        order_status_changed.disconnect(receiver)

    assert order.status is OrderStatus.DELIVERED
    assert [h["status"] for h in order.status_history] == [
        "placed", "confirmed", "preparing", "out_for_delivery", "delivered",
    ]
    assert changes[0] == (OrderStatus.PLACED, OrderStatus.CONFIRMED)
    assert member.notifications[0].message == f"Order #{order.id} has been delivered!"
    assert len(member.notifications) == 5

    with pytest.raises(InvalidTransition):
        checkout.advance_status(order.id, "cancelled")


def test_skipping_a_step_is_rejected(checkout, member, member_cart):
    order = checkout.place_order(Authenticated(member.id), member_cart, member_selections(member))
    with pytest.raises(InvalidTransition):
        checkout.advance_status(order.id, "delivered")


def test_cancel_only_by_owner(checkout, accounts, member, member_cart):
    order = checkout.place_order(Authenticated(member.id), member_cart, member_selections(member))
    other = accounts.signup("yaw", "yaw@example.com", "secret123")

    with pytest.raises(OrderNotFound):
        checkout.cancel_order(other.id, order.id)

    cancelled = checkout.cancel_order(member.id, order.id)
    assert cancelled.status is OrderStatus.CANCELLED
    with pytest.raises(InvalidTransition):
        checkout.cancel_order(member.id, order.id)


def test_advance_unknown_order(checkout):
    with pytest.raises(OrderNotFound):
        checkout.advance_status("M-NOPE", "confirmed")
