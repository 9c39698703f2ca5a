import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from goshop.models import utcnow


class OrderStatus(str, enum.Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class OrderItem:
    """Snapshot of a cart line; later catalog changes never touch it."""

    product_id: str
    name: str
    price_cents: int
    quantity: int

    @property
    def subtotal_cents(self) -> int:
        return self.price_cents * self.quantity

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price_cents": self.price_cents,
            "quantity": self.quantity,
            "subtotal_cents": self.subtotal_cents,
        }


@dataclass
class Order:
    id: str
    owner: str                     # user id, or the session token for guests
    guest: bool
    items: List[OrderItem]
    totals: dict
    delivery_date: date
    delivery_fee_cents: int
    payment: dict
    address: Optional[dict] = None
    contact: Optional[dict] = None
    coupons: List[str] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PLACED
    status_history: List[dict] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "guest": self.guest,
            "items": [i.to_dict() for i in self.items],
            "totals": dict(self.totals),
            "delivery_date": self.delivery_date.isoformat(),
            "delivery_fee_cents": self.delivery_fee_cents,
            "payment": dict(self.payment),
            "address": dict(self.address) if self.address else None,
            "contact": dict(self.contact) if self.contact else None,
            "coupons": list(self.coupons),
            "status": self.status.value,
            "status_history": list(self.status_history),
            "created_at": self.created_at.isoformat(),
        }
