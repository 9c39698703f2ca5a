"""Process-lifetime in-memory store.

One ``MemoryStore`` is created per application (or per test) and handed to
every service, so nothing reads shared module state.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional

from goshop.models import Cart, Order, Product, User, seed_catalog


class MemoryStore:
    def __init__(self, products: Optional[Iterable[Product]] = None):
        catalog = list(products) if products is not None else seed_catalog()
        self.products: Dict[str, Product] = {p.id: p for p in catalog}
        self.carts: Dict[str, Cart] = {}
        self.users: Dict[str, User] = {}
        self.orders: Dict[str, Order] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        # held across find-or-create so an owner never ends up with two carts
        self.cart_creation_lock = threading.Lock()

    # --- products ---

    def get_product(self, product_id) -> Optional[Product]:
        return self.products.get(product_id)

    def list_products(self, market: Optional[str] = None) -> List[Product]:
        items = list(self.products.values())
        if market:
            wanted = market.strip().lower()
            items = [p for p in items if (p.market_slug or "").lower() == wanted]
        return items

    # --- carts ---

    def add_cart(self, cart: Cart) -> Cart:
        self.carts[cart.id] = cart
        return cart

    def get_cart(self, cart_id) -> Optional[Cart]:
        return self.carts.get(cart_id)

    def find_cart_by_token(self, token) -> Optional[Cart]:
        if not token:
            return None
        return next(
            (c for c in self.carts.values() if c.session_token == token), None
        )

    def find_cart_by_user(self, user_id) -> Optional[Cart]:
        return next((c for c in self.carts.values() if c.user_id == user_id), None)

    def cart_lock(self, cart_id) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(cart_id)
            if lock is None:
                lock = self._locks[cart_id] = threading.RLock()
            return lock

    @contextmanager
    def locked(self, *carts: Cart):
        """Hold the per-cart locks of ``carts``, acquired in id order."""
        ids = sorted({c.id for c in carts if c is not None})
        locks = [self.cart_lock(cid) for cid in ids]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()

    # --- users ---

    def add_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def get_user(self, user_id) -> Optional[User]:
        return self.users.get(user_id)

    def find_user_by_login(self, login: str) -> Optional[User]:
        login = (login or "").strip()
        email = login.lower()
        return next(
            (u for u in self.users.values() if u.username == login or u.email == email),
            None,
        )

    # --- orders ---

    def add_order(self, order: Order) -> Order:
        self.orders[order.id] = order
        return order

    def get_order(self, order_id) -> Optional[Order]:
        return self.orders.get(order_id)
