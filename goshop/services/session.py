import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Union

from goshop.models import Cart, CartItem
from goshop.signals import cart_changed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anonymous:
    token: Optional[str] = None


@dataclass(frozen=True)
class Authenticated:
    user_id: str


Identity = Union[Anonymous, Authenticated]


@dataclass
class Resolution:
    cart: Cart
    # set when a new anonymous token was minted and must be sent back
    issued_token: Optional[str] = None


def new_session_token() -> str:
    return secrets.token_urlsafe(16)


class SessionResolver:
    """Map a caller identity onto exactly one cart in ``store``."""

    def __init__(self, store):
        self.store = store

    def resolve(self, identity: Identity) -> Resolution:
        with self.store.cart_creation_lock:
            if isinstance(identity, Authenticated):
                cart = self.store.find_cart_by_user(identity.user_id)
                if cart is None:
                    cart = self.store.add_cart(Cart(user_id=identity.user_id))
                    logger.info("created cart %s for user %s", cart.id, identity.user_id)
                return Resolution(cart)

            cart = self.store.find_cart_by_token(identity.token)
            if cart is not None:
                return Resolution(cart)
            token = new_session_token()
            cart = self.store.add_cart(Cart(session_token=token))
            logger.info("created anonymous cart %s", cart.id)
            return Resolution(cart, issued_token=token)

    def merge(self, anonymous_cart: Cart, user_cart: Cart) -> Cart:
        """Fold ``anonymous_cart`` into ``user_cart``.

        The source keeps its record and token but ends up with no items, so a
        second merge only touches the target's timestamp.
        """
        if anonymous_cart is user_cart:
            return user_cart
        with self.store.locked(anonymous_cart, user_cart):
            moved = 0
            for item in anonymous_cart.items:
                existing = user_cart.find_product_line(item.product_id)
                if existing:
                    existing.quantity += item.quantity
                else:
                    user_cart.items.append(
                        CartItem(
                            product_id=item.product_id,
                            quantity=item.quantity,
                            selected=item.selected,
                        )
                    )
                moved += 1
            anonymous_cart.items = []
            user_cart.touch()
            if moved:
                anonymous_cart.touch()
                logger.info(
                    "merged %s lines from cart %s into %s",
                    moved, anonymous_cart.id, user_cart.id,
                )
                cart_changed.send(user_cart, action="merge")
        return user_cart

    def merge_for(self, user_id: str, session_token: Optional[str]) -> Cart:
        user_cart = self.resolve(Authenticated(user_id)).cart
        anonymous_cart = self.store.find_cart_by_token(session_token)
        if anonymous_cart is not None:
            self.merge(anonymous_cart, user_cart)
        return user_cart
