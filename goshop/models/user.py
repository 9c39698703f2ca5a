from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from goshop.models import new_id, utcnow


@dataclass
class Address:
    street: str
    city: str = ""
    region: str = ""
    label: str = ""
    phone: str = ""
    is_default: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "label": self.label,
            "street": self.street,
            "city": self.city,
            "region": self.region,
            "phone": self.phone,
            "is_default": self.is_default,
        }


@dataclass
class PaymentMethod:
    kind: str                      # card, mobile_money, cash
    label: str = ""
    is_default: bool = False
    id: str = field(default_factory=new_id)

    def to_dict(self):
        return {
            "id": self.id,
            "kind": self.kind,
            "label": self.label,
            "is_default": self.is_default,
        }


@dataclass
class Notification:
    order_id: str
    kind: str
    message: str
    read: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "kind": self.kind,
            "message": self.message,
            "read": self.read,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class User:
    username: str
    email: str
    password_hash: str
    name: str = ""
    location: str = ""
    addresses: List[Address] = field(default_factory=list)
    payment_methods: List[PaymentMethod] = field(default_factory=list)
    favorites: List[str] = field(default_factory=list)
    orders: List[str] = field(default_factory=list)        # newest first
    notifications: List[Notification] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def default_address(self) -> Optional[Address]:
        return next((a for a in self.addresses if a.is_default), None)

    def find_address(self, address_id: str) -> Optional[Address]:
        return next((a for a in self.addresses if a.id == address_id), None)

    def find_payment_method(self, method_id: str) -> Optional[PaymentMethod]:
        return next((p for p in self.payment_methods if p.id == method_id), None)

    def public_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "location": self.location,
        }

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
