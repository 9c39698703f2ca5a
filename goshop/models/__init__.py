from datetime import datetime, timezone
import uuid


def utcnow():
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


# Re-export common models for convenience
from .product import Product, seed_catalog  # noqa: E402,F401
from .coupon import Coupon, COUPONS  # noqa: E402,F401
from .cart import Cart, CartItem  # noqa: E402,F401
from .order import Order, OrderItem, OrderStatus  # noqa: E402,F401
from .user import User, Address, PaymentMethod, Notification  # noqa: E402,F401
