import logging
from typing import List, Tuple

from goshop.models import Cart, CartItem
from goshop.models.coupon import lookup_coupon
from goshop.services.errors import InvalidQuantity, ItemNotFound, ProductNotFound
from goshop.services.pricing import PricedLine, PricingSettings, Totals, quote
from goshop.signals import cart_changed

logger = logging.getLogger(__name__)


class CartStore:
    """Line-item and coupon operations on a single cart.

    ``catalog`` is anything with ``get_product(product_id)``, normally the
    application's ``MemoryStore``.
    """

    def __init__(self, cart: Cart, catalog):
        self.cart = cart
        self.catalog = catalog

    def _changed(self, action, **extra):
        self.cart.touch()
        cart_changed.send(self.cart, action=action, **extra)

    # --- items ---

    def add_item(self, product_id, quantity: int = 1) -> CartItem:
        product = self.catalog.get_product(product_id)
        if product is None:
            raise ProductNotFound(field="product_id")
        if quantity < 1:
            raise InvalidQuantity(field="quantity")
        item = self.cart.find_product_line(product_id)
        if item:
            item.quantity += quantity
        else:
            item = CartItem(product_id=product_id, quantity=quantity)
            self.cart.items.append(item)
        logger.info("cart %s: added %s x%s", self.cart.id, product_id, quantity)
        self._changed("add_item", item_id=item.id)
        return item

    def _get(self, item_id) -> CartItem:
        item = self.cart.find_item(item_id)
        if item is None:
            raise ItemNotFound(field="item_id")
        return item

    def update_item_quantity(self, item_id, quantity: int) -> Tuple[CartItem, bool]:
        """Set an exact quantity; zero or less removes the line.

        Returns the item and whether it was removed.
        """
        item = self._get(item_id)
        if quantity <= 0:
            self.remove_item(item_id)
            return item, True
        item.quantity = quantity
        self._changed("update_item", item_id=item.id)
        return item, False

    def remove_item(self, item_id) -> CartItem:
        item = self._get(item_id)
        self.cart.items = [i for i in self.cart.items if i.id != item_id]
        logger.info("cart %s: removed item %s", self.cart.id, item_id)
        self._changed("remove_item", item_id=item_id)
        return item

    def toggle_selection(self, item_id) -> CartItem:
        item = self._get(item_id)
        item.selected = not item.selected
        self._changed("select", item_id=item_id)
        return item

    def set_all_selected(self, selected: bool) -> None:
        for item in self.cart.items:
            item.selected = bool(selected)
        self._changed("select_all")

    def remove_items(self, item_ids) -> None:
        doomed = set(item_ids)
        self.cart.items = [i for i in self.cart.items if i.id not in doomed]
        if not self.cart.items:
            self.cart.coupons = []
            self.cart.gift_wrap = False
            self.cart.gift_message = ""
        self._changed("remove_items")

    # --- coupons & extras ---

    def apply_coupon(self, code: str) -> bool:
        coupon = lookup_coupon(code)
        if coupon is None or coupon.code in self.cart.coupons:
            return False
        self.cart.coupons.append(coupon.code)
        logger.info("cart %s: applied coupon %s", self.cart.id, coupon.code)
        self._changed("apply_coupon")
        return True

    def remove_coupon(self, code: str) -> None:
        wanted = (code or "").strip().upper()
        if wanted in self.cart.coupons:
            self.cart.coupons.remove(wanted)
            self._changed("remove_coupon")

    def set_gift_wrap(self, enabled: bool, message: str = "") -> None:
        self.cart.gift_wrap = bool(enabled)
        self.cart.gift_message = message if enabled else ""
        self._changed("gift_wrap")

    def clear(self) -> None:
        self.cart.items = []
        self.cart.coupons = []
        self.cart.gift_wrap = False
        self.cart.gift_message = ""
        self._changed("clear")

    # --- queries ---

    def count(self) -> int:
        return sum(i.quantity for i in self.cart.items)

    def coupons(self):
        return [c for c in (lookup_coupon(code) for code in self.cart.coupons) if c]

    def lines(self, items=None) -> List[PricedLine]:
        lines = []
        for item in self.cart.items if items is None else items:
            product = self.catalog.get_product(item.product_id)
            if product is None:
                continue
            lines.append(PricedLine(product.price_cents, item.quantity, item.selected))
        return lines

    def totals(self, settings: PricingSettings, selected_only: bool = True) -> Totals:
        return quote(
            self.lines(),
            self.coupons(),
            self.cart.gift_wrap,
            settings,
            selected_only=selected_only,
        )

    def item_dict(self, item: CartItem):
        data = item.to_dict()
        product = self.catalog.get_product(item.product_id)
        data["product"] = product.to_dict() if product else None
        return data

    def to_dict(self, settings: PricingSettings):
        return {
            "id": self.cart.id,
            "items": [self.item_dict(item) for item in self.cart.items],
            "coupons": list(self.cart.coupons),
            "gift_wrap": self.cart.gift_wrap,
            "gift_message": self.cart.gift_message,
            "count": self.count(),
            "totals": self.totals(settings).to_dict(),
            "updated_at": self.cart.updated_at.isoformat(),
        }
