import pytest

from goshop.models import Cart
from goshop.services.cart_store import CartStore
from goshop.services.errors import InvalidQuantity, ItemNotFound, ProductNotFound
from goshop.services.pricing import PricingSettings
from goshop.signals import cart_changed
from goshop.store import MemoryStore
from conftest import product_id


@pytest.fixture()
def catalog():
    return MemoryStore()


@pytest.fixture()
def cart(catalog):
    return catalog.add_cart(Cart(session_token="tok-1"))


@pytest.fixture()
def cart_store(cart, catalog):
    return CartStore(cart, catalog)


def test_cart_requires_exactly_one_owner():
    with pytest.raises(ValueError):
        Cart()
    with pytest.raises(ValueError):
        Cart(session_token="t", user_id="u")


def test_repeated_add_merges_into_one_line(cart_store, catalog, cart):
    bananas = product_id(catalog, "Fresh Bananas")
    first = cart_store.add_item(bananas, 2)
    second = cart_store.add_item(bananas, 3)
    assert first is second
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5
    assert cart.items[0].selected is True
    assert cart_store.count() == 5


def test_add_unknown_product_leaves_cart_untouched(cart_store, cart):
    stamp = cart.updated_at
    with pytest.raises(ProductNotFound) as exc:
        cart_store.add_item("missing", 1)
    assert exc.value.field == "product_id"
    assert cart.items == []
    assert cart.updated_at == stamp


def test_add_rejects_non_positive_quantity(cart_store, catalog, cart):
    with pytest.raises(InvalidQuantity):
        cart_store.add_item(product_id(catalog, "Fresh Herbs"), 0)
    assert cart.items == []


def test_unknown_product_checked_before_quantity(cart_store):
    with pytest.raises(ProductNotFound):
        cart_store.add_item("missing", 0)


def test_update_quantity_sets_exact_value(cart_store, catalog):
    item = cart_store.add_item(product_id(catalog, "Fresh Herbs"), 1)
    updated, removed = cart_store.update_item_quantity(item.id, 7)
    assert removed is False
    assert updated.quantity == 7


def test_update_to_zero_equals_remove(catalog):
    herbs = product_id(catalog, "Fresh Herbs")
    a = CartStore(catalog.add_cart(Cart(session_token="a")), catalog)
    b = CartStore(catalog.add_cart(Cart(session_token="b")), catalog)
    item_a = a.add_item(herbs, 2)
    item_b = b.add_item(herbs, 2)

    _, removed = a.update_item_quantity(item_a.id, 0)
    b.remove_item(item_b.id)

    assert removed is True
    assert a.cart.items == b.cart.items == []


def test_missing_item_raises(cart_store):
    with pytest.raises(ItemNotFound):
        cart_store.update_item_quantity("nope", 2)
    with pytest.raises(ItemNotFound):
        cart_store.remove_item("nope")
    with pytest.raises(ItemNotFound):
        cart_store.toggle_selection("nope")


def test_selection_changes_totals(cart_store, catalog):
    bananas = cart_store.add_item(product_id(catalog, "Fresh Bananas"), 2)
    cart_store.add_item(product_id(catalog, "Fresh Herbs"), 1)
    settings = PricingSettings()
    assert cart_store.totals(settings).subtotal_cents == 3800

    cart_store.toggle_selection(bananas.id)
    assert cart_store.totals(settings).subtotal_cents == 800
    assert cart_store.totals(settings, selected_only=False).subtotal_cents == 3800

    cart_store.set_all_selected(False)
    assert cart_store.totals(settings).subtotal_cents == 0
    cart_store.set_all_selected(True)
    assert cart_store.totals(settings).subtotal_cents == 3800


def test_apply_coupon_once(cart_store, cart):
    assert cart_store.apply_coupon("fresh15") is True
    assert cart_store.apply_coupon("FRESH15") is False
    assert cart_store.apply_coupon("BOGUS") is False
    assert cart.coupons == ["FRESH15"]

    cart_store.remove_coupon("fresh15")
    cart_store.remove_coupon("fresh15")
    assert cart.coupons == []


def test_coupon_below_minimum_stays_applied(cart_store, catalog, cart):
    cart_store.add_item(product_id(catalog, "Green Apples"), 1)
    cart_store.apply_coupon("FRESH15")
    totals = cart_store.totals(PricingSettings())
    assert totals.discount_cents == 0
    assert cart.coupons == ["FRESH15"]


def test_remove_items_clears_extras_once_empty(cart_store, catalog, cart):
    a = cart_store.add_item(product_id(catalog, "Fresh Bananas"), 1)
    b = cart_store.add_item(product_id(catalog, "Fresh Herbs"), 1)
    cart_store.apply_coupon("MAX500")
    cart_store.set_gift_wrap(True, "Happy birthday")

    cart_store.remove_items([a.id])
    assert cart.coupons == ["MAX500"]
    assert cart.gift_wrap is True

    cart_store.remove_items([b.id])
    assert cart.items == []
    assert cart.coupons == []
    assert cart.gift_wrap is False
    assert cart.gift_message == ""


def test_gift_wrap_message_dropped_when_disabled(cart_store, cart):
    cart_store.set_gift_wrap(True, "hi")
    cart_store.set_gift_wrap(False, "ignored")
    assert cart.gift_message == ""


def test_clear_resets_everything(cart_store, catalog, cart):
    cart_store.add_item(product_id(catalog, "Fresh Bananas"), 1)
    cart_store.apply_coupon("NEWUSER")
    cart_store.set_gift_wrap(True)
    cart_store.clear()
    assert (cart.items, cart.coupons, cart.gift_wrap) == ([], [], False)


def test_mutations_send_cart_changed(cart_store, catalog, cart):
    seen = []

    def receiver(sender, **kwargs):
        seen.append((sender, kwargs["action"]))

    cart_changed.connect(receiver)
    try:
        cart_store.add_item(product_id(catalog, "Fresh Bananas"), 1)
        cart_store.apply_coupon("MAX500")
    finally:
        cart_changed.disconnect(receiver)
    assert seen == [(cart, "add_item"), (cart, "apply_coupon")]


def test_to_dict_embeds_products_and_totals(cart_store, catalog):
    item = cart_store.add_item(product_id(catalog, "Fresh Bananas"), 2)
    data = cart_store.to_dict(PricingSettings())
    assert data["count"] == 2
    assert data["items"][0]["id"] == item.id
    assert data["items"][0]["product"]["name"] == "Fresh Bananas"
    assert data["totals"]["subtotal_cents"] == 3000
