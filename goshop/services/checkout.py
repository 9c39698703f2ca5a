import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from goshop.models import Order, OrderItem, OrderStatus, Notification, utcnow
from goshop.services.cart_store import CartStore
from goshop.services.errors import (
    AddressNotFound,
    EmptyOrder,
    InvalidDeliveryDate,
    InvalidTransition,
    MissingAddress,
    MissingContact,
    MissingDeliveryDate,
    MissingPayment,
    NotAuthenticated,
    OrderNotFound,
)
from goshop.services.pricing import PricedLine, PricingSettings, Totals, delivery_fee_for_date, quote
from goshop.services.session import Authenticated
from goshop.signals import order_placed, order_status_changed

logger = logging.getLogger(__name__)

# Allowed forward moves; CANCELLED is reachable from anything before DELIVERED.
TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.CONFIRMED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING},
    OrderStatus.PREPARING: {OrderStatus.OUT_FOR_DELIVERY},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

STATUS_MESSAGES = {
    OrderStatus.PLACED: "Order #{id} has been placed",
    OrderStatus.CONFIRMED: "Order #{id} has been confirmed",
    OrderStatus.PREPARING: "Your order is being prepared",
    OrderStatus.OUT_FOR_DELIVERY: "Order #{id} is out for delivery",
    OrderStatus.DELIVERED: "Order #{id} has been delivered!",
    OrderStatus.CANCELLED: "Order #{id} has been cancelled",
}


@dataclass(frozen=True)
class CheckoutPolicy:
    guest_payment_kind: str = "card"
    same_day_cutoff_hour: int = 15
    delivery_window_days: int = 7

    @classmethod
    def from_config(cls, config):
        return cls(
            guest_payment_kind=config["GUEST_PAYMENT_KIND"],
            same_day_cutoff_hour=int(config["SAME_DAY_CUTOFF_HOUR"]),
            delivery_window_days=int(config["DELIVERY_WINDOW_DAYS"]),
        )


@dataclass
class CheckoutSelections:
    delivery_date: Optional[date] = None
    address_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    payment_kind: Optional[str] = None      # guest flow only
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[dict] = None           # free-form guest address


@dataclass
class CheckoutPlan:
    user: object
    delivery_date: date
    delivery_fee_cents: int
    payment: dict
    address: Optional[dict]
    contact: Optional[dict]


class CheckoutOrchestrator:
    def __init__(self, store, settings: PricingSettings = None,
                 policy: CheckoutPolicy = None, clock: Callable[[], datetime] = None):
        self.store = store
        self.settings = settings or PricingSettings()
        self.policy = policy or CheckoutPolicy()
        self.clock = clock or datetime.now

    # --- validation ---

    def available_dates(self):
        now = self.clock()
        today = now.date()
        days = []
        for offset in range(self.policy.delivery_window_days):
            if offset == 0 and now.hour >= self.policy.same_day_cutoff_hour:
                continue
            days.append(today + timedelta(days=offset))
        return days

    def _check_date(self, delivery_date: Optional[date]) -> int:
        if delivery_date is None:
            raise MissingDeliveryDate(field="delivery_date")
        if delivery_date not in self.available_dates():
            raise InvalidDeliveryDate(field="delivery_date")
        return delivery_fee_for_date(delivery_date, self.clock().date(), self.settings)

    def validate(self, identity, selections: CheckoutSelections) -> CheckoutPlan:
        if isinstance(identity, Authenticated):
            user = self.store.get_user(identity.user_id)
            if user is None:
                raise NotAuthenticated()
            if not selections.address_id:
                raise MissingAddress(field="address_id")
            address = user.find_address(selections.address_id)
            if address is None:
                raise AddressNotFound(field="address_id")
            fee = self._check_date(selections.delivery_date)
            if selections.payment_method_id:
                method = user.find_payment_method(selections.payment_method_id)
            else:
                method = next(
                    (p for p in user.payment_methods if p.is_default),
                    user.payment_methods[0] if user.payment_methods else None,
                )
            if method is None:
                raise MissingPayment(field="payment_method_id")
            return CheckoutPlan(
                user=user,
                delivery_date=selections.delivery_date,
                delivery_fee_cents=fee,
                payment=method.to_dict(),
                address=address.to_dict(),
                contact={"email": user.email, "phone": selections.phone or ""},
            )

        fee = self._check_date(selections.delivery_date)
        if selections.payment_kind != self.policy.guest_payment_kind:
            raise MissingPayment(
                f"Guest checkout accepts {self.policy.guest_payment_kind} payments only",
                field="payment_kind",
            )
        if not selections.email:
            raise MissingContact(field="email")
        return CheckoutPlan(
            user=None,
            delivery_date=selections.delivery_date,
            delivery_fee_cents=fee,
            payment={"kind": self.policy.guest_payment_kind},
            address=dict(selections.address) if selections.address else None,
            contact={"email": selections.email, "phone": selections.phone or ""},
        )

    # --- quoting & placement ---

    def quote(self, cart, delivery_date: Optional[date] = None) -> Totals:
        cart_store = CartStore(cart, self.store)
        fee = self._check_date(delivery_date) if delivery_date else None
        return quote(
            cart_store.lines(),
            cart_store.coupons(),
            cart.gift_wrap,
            self.settings,
            delivery_fee=fee,
        )

    def place_order(self, identity, cart, selections: CheckoutSelections) -> Order:
        """Turn the selected cart lines into a PLACED order.

        Everything that can fail runs before the cart is touched, so a failed
        call leaves both the cart and the store as they were.
        """
        with self.store.locked(cart):
            plan = self.validate(identity, selections)
            cart_store = CartStore(cart, self.store)
            taken, snapshot, lines = [], [], []
            for item in cart.items:
                if not item.selected:
                    continue
                product = self.store.get_product(item.product_id)
                if product is None:
                    continue
                taken.append(item.id)
                snapshot.append(
                    OrderItem(
                        product_id=product.id,
                        name=product.name,
                        price_cents=product.price_cents,
                        quantity=item.quantity,
                    )
                )
                lines.append(PricedLine(product.price_cents, item.quantity))
            if not snapshot:
                raise EmptyOrder()

            totals = quote(
                lines,
                cart_store.coupons(),
                cart.gift_wrap,
                self.settings,
                delivery_fee=plan.delivery_fee_cents,
            )
            guest = plan.user is None
            prefix = "G" if guest else "M"
            now = utcnow()
            order = Order(
                id=f"{prefix}-{uuid.uuid4().hex[:12].upper()}",
                owner=cart.session_token if guest else plan.user.id,
                guest=guest,
                items=snapshot,
                totals=totals.to_dict(),
                delivery_date=plan.delivery_date,
                delivery_fee_cents=plan.delivery_fee_cents,
                payment=plan.payment,
                address=plan.address,
                contact=plan.contact,
                coupons=list(cart.coupons),
                status_history=[{"status": OrderStatus.PLACED.value, "at": now.isoformat()}],
                created_at=now,
            )
            self.store.add_order(order)
            if not guest:
                plan.user.orders.insert(0, order.id)
                self._notify(order)
            cart_store.remove_items(taken)

        logger.info(
            "order %s placed: %s lines, total %s",
            order.id, len(snapshot), totals.total_cents,
        )
        order_placed.send(order)
        return order

    # --- lifecycle ---

    def _notify(self, order: Order):
        user = self.store.get_user(order.owner)
        if user is None:
            return
        template = STATUS_MESSAGES[order.status]
        user.notifications.insert(
            0,
            Notification(
                order_id=order.id,
                kind=order.status.value,
                message=template.format(id=order.id),
            ),
        )

    def advance_status(self, order_id: str, status) -> Order:
        order = self.store.get_order(order_id)
        if order is None:
            raise OrderNotFound(field="order_id")
        status = OrderStatus(status)
        previous = order.status
        allowed = set(TRANSITIONS[previous])
        if previous != OrderStatus.DELIVERED and previous != OrderStatus.CANCELLED:
            allowed.add(OrderStatus.CANCELLED)
        if status not in allowed:
            raise InvalidTransition(
                f"Cannot move order from {previous.value} to {status.value}",
                field="status",
            )
        order.status = status
        order.status_history.append({"status": status.value, "at": utcnow().isoformat()})
        if not order.guest:
            self._notify(order)
        logger.info("order %s: %s -> %s", order.id, previous.value, status.value)
        order_status_changed.send(order, previous=previous)
        return order

    def cancel_order(self, user_id: str, order_id: str) -> Order:
        order = self.store.get_order(order_id)
        if order is None or order.owner != user_id:
            raise OrderNotFound(field="order_id")
        return self.advance_status(order_id, OrderStatus.CANCELLED)
