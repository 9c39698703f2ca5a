class ShopError(Exception):
    """Base class for local, non-retryable domain failures."""

    status_code = 400

    def __init__(self, message=None, field=None):
        super().__init__(message or self.__doc__ or self.__class__.__name__)
        self.message = str(self)
        self.field = field


# --- NotFound ---

class NotFound(ShopError):
    status_code = 404


class ProductNotFound(NotFound):
    """Product not found"""


class ItemNotFound(NotFound):
    """Item not found in cart"""


class AddressNotFound(NotFound):
    """Address not found"""


class CouponNotFound(NotFound):
    """Coupon not found"""


class OrderNotFound(NotFound):
    """Order not found"""


class PaymentMethodNotFound(NotFound):
    """Payment method not found"""


# --- Validation ---

class Validation(ShopError):
    status_code = 400


class InvalidQuantity(Validation):
    """Quantity must be at least 1"""


class MissingAddress(Validation):
    """Please select a delivery address"""


class MissingDeliveryDate(Validation):
    """Please select a delivery day"""


class InvalidDeliveryDate(Validation):
    """Delivery day is not available"""


class MissingPayment(Validation):
    """No usable payment method"""


class MissingContact(Validation):
    """Contact email required for guest checkout"""


class EmptyOrder(Validation):
    """No items selected for checkout"""


class InvalidTransition(Validation):
    """Order status change not allowed"""


class DefaultAddressRequired(Validation):
    """Cannot delete the default address. Please set another address as default first."""


# --- Conflict ---

class Conflict(ShopError):
    status_code = 409


class UserExists(Conflict):
    """User exists"""


# --- Unauthorized ---

class Unauthorized(ShopError):
    status_code = 401


class NotAuthenticated(Unauthorized):
    """unauthorized"""


class InvalidCredentials(Unauthorized):
    """Invalid credentials"""
