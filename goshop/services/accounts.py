import logging
from typing import List

from werkzeug.security import check_password_hash, generate_password_hash

from goshop.models import Address, PaymentMethod, User, utcnow
from goshop.services.errors import (
    AddressNotFound,
    DefaultAddressRequired,
    InvalidCredentials,
    NotAuthenticated,
    PaymentMethodNotFound,
    ProductNotFound,
    UserExists,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Users, their saved addresses, payment methods, favorites and inbox."""

    def __init__(self, store):
        self.store = store

    def get(self, user_id) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotAuthenticated()
        return user

    # --- registration ---

    def signup(self, username, email, password, name="", location="") -> User:
        username = username.strip()
        email = email.strip().lower()
        for existing in self.store.users.values():
            if existing.username == username or existing.email == email:
                raise UserExists(field="username" if existing.username == username else "email")
        user = User(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            name=name.strip(),
            location=location.strip(),
        )
        if user.location:
            user.addresses.append(
                Address(street=user.location, label="Home", is_default=True)
            )
        self.store.add_user(user)
        logger.info("user %s signed up", user.id)
        return user

    def authenticate(self, login, password) -> User:
        user = self.store.find_user_by_login(login)
        if user is None or not check_password_hash(user.password_hash, password):
            raise InvalidCredentials()
        return user

    # --- addresses ---

    def _address(self, user: User, address_id) -> Address:
        address = user.find_address(address_id)
        if address is None:
            raise AddressNotFound(field="address_id")
        return address

    def _make_default(self, user: User, address: Address):
        for a in user.addresses:
            a.is_default = a is address
        user.location = address.street
        user.updated_at = utcnow()

    def add_address(self, user: User, is_default=False, **fields) -> Address:
        address = Address(**fields)
        user.addresses.append(address)
        # first address is always the default
        if is_default or len(user.addresses) == 1:
            self._make_default(user, address)
        return address

    def update_address(self, user: User, address_id, is_default=None, **fields) -> Address:
        address = self._address(user, address_id)
        for key, value in fields.items():
            if value is not None:
                setattr(address, key, value)
        if is_default:
            self._make_default(user, address)
        return address

    def set_default_address(self, user: User, address_id) -> Address:
        address = self._address(user, address_id)
        self._make_default(user, address)
        return address

    def delete_address(self, user: User, address_id) -> None:
        address = self._address(user, address_id)
        if address.is_default and len(user.addresses) > 1:
            raise DefaultAddressRequired(field="address_id")
        user.addresses.remove(address)

    # --- payment methods ---

    def add_payment_method(self, user: User, kind, label="", is_default=False) -> PaymentMethod:
        method = PaymentMethod(kind=kind, label=label)
        user.payment_methods.append(method)
        if is_default or len(user.payment_methods) == 1:
            for p in user.payment_methods:
                p.is_default = p is method
        return method

    def delete_payment_method(self, user: User, method_id) -> None:
        method = user.find_payment_method(method_id)
        if method is None:
            raise PaymentMethodNotFound(field="payment_method_id")
        user.payment_methods.remove(method)
        if method.is_default and user.payment_methods:
            user.payment_methods[0].is_default = True

    # --- favorites ---

    def add_favorite(self, user: User, product_id) -> List[str]:
        if self.store.get_product(product_id) is None:
            raise ProductNotFound(field="product_id")
        if product_id not in user.favorites:
            user.favorites.append(product_id)
        return user.favorites

    def remove_favorite(self, user: User, product_id) -> List[str]:
        if product_id in user.favorites:
            user.favorites.remove(product_id)
        return user.favorites

    # --- orders & notifications ---

    def orders_for(self, user: User):
        return [o for o in (self.store.get_order(oid) for oid in user.orders) if o]

    def list_notifications(self, user: User):
        return list(user.notifications)

    def unread_count(self, user: User) -> int:
        return sum(1 for n in user.notifications if not n.read)

    def mark_all_read(self, user: User) -> None:
        for n in user.notifications:
            n.read = True
