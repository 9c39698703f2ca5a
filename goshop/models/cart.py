from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from goshop.models import new_id, utcnow


@dataclass
class CartItem:
    product_id: str
    quantity: int = 1
    selected: bool = True          # partial checkout
    id: str = field(default_factory=new_id)
    added_at: datetime = field(default_factory=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "selected": self.selected,
        }


@dataclass
class Cart:
    """A cart is owned by exactly one of a session token or a user id."""

    session_token: Optional[str] = None
    user_id: Optional[str] = None
    items: List[CartItem] = field(default_factory=list)
    coupons: List[str] = field(default_factory=list)
    gift_wrap: bool = False
    gift_message: str = ""
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if (self.session_token is None) == (self.user_id is None):
            raise ValueError("cart needs exactly one owner: session token or user id")

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    def find_item(self, item_id: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.id == item_id), None)

    def find_product_line(self, product_id: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.product_id == product_id), None)

    def touch(self):
        self.updated_at = utcnow()
